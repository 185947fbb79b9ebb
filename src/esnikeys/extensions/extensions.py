"""ESNIKeys extension container and extension list codec.

struct {
    ExtensionType extension_type;
    opaque extension_data[...];
} Extension;

Extension payloads are self-describing: there is no per-extension length on
the wire, so each extension reports how many bytes it encodes to via size()
and the list decoder advances by exactly that amount.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import IntEnum
from typing import ClassVar, Sequence

from ..codec.tls import read_uint16, require_length, write_uint16
from ..exceptions import (
    EncodingError,
    ExtensionDecodeError,
    InvalidFieldValue,
    StructuralTruncation,
    UnsupportedExtensionType,
)
from .registry import ExtensionRegistry

logger = logging.getLogger(__name__)

# Bit set on extension types that a client must understand to use the record.
MANDATORY_EXTENSION_MASK = 0x1000


class ExtensionType(IntEnum):
    """Extension types known to this package."""

    ADDRESS_SET = 0x1001


def is_mandatory(ext_type: int) -> bool:
    """Return True when the mandatory-to-understand bit is set on ext_type.

    This is informational; decoding fails on any unregistered type.
    """
    return int(ext_type) & MANDATORY_EXTENSION_MASK == MANDATORY_EXTENSION_MASK


class Extension(ABC):
    """Base class for ESNIKeys extensions.

    Subclasses must be constructible without arguments so the registry can
    create an empty instance and let it parse its own payload.
    """

    ext_type: ClassVar[int]
    # Payload runs to the end of the extension list, so it can only come last.
    reads_to_end: ClassVar[bool] = False

    @abstractmethod
    def size(self) -> int:
        """Number of payload bytes serialize() produces (type tag excluded)."""

    @abstractmethod
    def serialize(self) -> bytes:
        """Encode the payload (type tag excluded)."""

    @abstractmethod
    def parse(self, data: bytes) -> None:
        """Populate this instance from a payload starting at data[0]."""

    def describe(self) -> str:
        return repr(self)


def serialize_extensions(exts: Sequence[Extension]) -> bytes:
    """Encode extensions as concatenated (uint16 type || payload) entries, no prefix."""
    out = b""
    for i, ext in enumerate(exts):
        if ext.reads_to_end and i != len(exts) - 1:
            raise InvalidFieldValue(
                f"extension {ext.ext_type:#06x} reads to the end of the list and must be last"
            )
        payload = ext.serialize()
        if len(payload) != ext.size():
            raise EncodingError(
                f"extension {ext.ext_type:#06x} encoded {len(payload)} bytes, reported {ext.size()}"
            )
        out += write_uint16(ext.ext_type) + payload
    return out


def extensions_size(exts: Sequence[Extension]) -> int:
    return sum(2 + ext.size() for ext in exts)


def deserialize_extensions(data: bytes, registry: ExtensionRegistry) -> list[Extension]:
    """Parse a concatenation of extensions that spans all of data.

    Raises:
        UnsupportedExtensionType: If a type has no entry in registry.
        ExtensionDecodeError: If a registered extension fails to parse its payload,
            whatever exception it raised.
        StructuralTruncation: If an extension type is cut short.
    """
    out: list[Extension] = []
    off = 0
    while off < len(data):
        ext_type, off = read_uint16(data, off)
        entry = registry.lookup(ext_type)
        if entry is None:
            logger.warning("unsupported extension type %#06x at offset %d", ext_type, off - 2)
            raise UnsupportedExtensionType(ext_type)
        ext = entry.factory()
        try:
            ext.parse(data[off:])
        except Exception as e:
            raise ExtensionDecodeError(ext_type, e) from e
        off += ext.size()
        if off > len(data):
            raise StructuralTruncation(
                f"extension {entry.name} reported {ext.size()} bytes beyond the list end"
            )
        out.append(ext)
    return out


def write_extension_list(exts: Sequence[Extension]) -> bytes:
    """Encode extensions with a 2-byte total length prefix (just 00 00 when empty)."""
    total = extensions_size(exts)
    if total > 0xFFFF:
        raise InvalidFieldValue(f"extension list too long: {total} bytes")
    if not exts:
        return write_uint16(0)
    return write_uint16(total) + serialize_extensions(exts)


def read_extension_list(
    buf: bytes, offset: int, registry: ExtensionRegistry
) -> tuple[list[Extension], int]:
    """Decode a length-prefixed extension list; returns (extensions, new_offset)."""
    total, offset = read_uint16(buf, offset)
    if total == 0:
        return [], offset
    require_length(buf, offset, total)
    exts = deserialize_extensions(buf[offset : offset + total], registry)
    return exts, offset + total


def describe_extensions(exts: Sequence[Extension], registry: ExtensionRegistry) -> str:
    parts = [
        f"{{Type:{registry.name_of(ext.ext_type)}, Mandatory:{is_mandatory(ext.ext_type)}, "
        f"Value:{ext.describe()}}}"
        for ext in exts
    ]
    return "[" + ", ".join(parts) + "]"
