"""Exception hierarchy for ESNI Keys record encoding and decoding.

Every failure raised by the codec derives from ESNIError. Callers that only
need to reject a malformed record can catch DecodingError; the concrete
subclasses identify which structural rule was broken.

Section context is attached as a record crosses a section boundary (see
ESNIError.wrap), so the class of the original failure is preserved while the
message reads like a chain: "unmarshal key share list: duplicate key share group 29".
"""
from __future__ import annotations

from typing import Optional


class ESNIError(Exception):
    """Base class for all esnikeys errors."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.context: list[str] = []

    def wrap(self, context: str) -> "ESNIError":
        """Prepend a context label (outermost last call wins the front)."""
        self.context.insert(0, context)
        return self

    def __str__(self) -> str:
        return ": ".join(self.context + [self.message])


class EncodingError(ESNIError):
    """Raised when an in-memory record cannot be encoded."""


class DecodingError(ESNIError):
    """Raised when a byte buffer is not a valid ESNI Keys record."""


class StructuralTruncation(DecodingError):
    """The buffer is shorter than a length declared or required by the format."""


# Name used for a remaining-length shortfall while reading record sections.
UnexpectedEndOfData = StructuralTruncation


class TruncatedEntry(StructuralTruncation):
    """A key share entry header or key exchange payload is cut short."""


class TruncatedData(StructuralTruncation):
    """The cipher suite list ends before its declared length."""


class TruncatedAddress(StructuralTruncation):
    """An address set element ends before its family tag requires."""


class ChecksumMismatch(DecodingError):
    """The transmitted checksum does not match the recomputed one."""

    def __init__(self, expected: bytes, received: bytes) -> None:
        super().__init__(
            f"calculated checksum {expected.hex()} did not match received checksum {received.hex()}"
        )
        self.expected = expected
        self.received = received


class InvalidFieldValue(EncodingError, DecodingError):
    """A field holds a value the wire format cannot carry (empty, oversized, malformed)."""


class InvalidListLength(InvalidFieldValue):
    """A list byte-length is not a multiple of its element size."""


class DuplicateKeyType(EncodingError, DecodingError):
    """Two key share entries use the same group identifier."""

    def __init__(self, group: int) -> None:
        super().__init__(f"duplicate key share group {int(group)}")
        self.group = int(group)


class UnsupportedExtensionType(DecodingError):
    """An extension type has no registered decoder."""

    def __init__(self, ext_type: int) -> None:
        super().__init__(f"unsupported extension type: extension_type({int(ext_type)})")
        self.ext_type = int(ext_type)


class UnsupportedAddressFamily(DecodingError):
    """An address set element carries a family tag other than 4 or 6."""

    def __init__(self, tag: int) -> None:
        super().__init__(f"unsupported address type {tag}")
        self.tag = tag


class ExtensionDecodeError(DecodingError):
    """A registered extension failed to parse its payload.

    The underlying failure is available as ``__cause__``.
    """

    def __init__(self, ext_type: int, cause: Optional[BaseException] = None) -> None:
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"unmarshal extension {ext_type:#06x}{detail}")
        self.ext_type = ext_type


class RegistryConflict(ESNIError):
    """An extension type was registered twice. This is a start-up programming error."""

    def __init__(self, ext_type: int) -> None:
        super().__init__(f"extension type {ext_type:#06x} already registered")
        self.ext_type = ext_type
