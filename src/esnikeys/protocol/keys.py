"""The ESNIKeys record published under _esni TXT records.

struct {
    uint16 version;
    uint8 checksum[4];
    opaque public_name<1..2^8-1>;        /* draft-03 and later */
    KeyShareEntry keys<4..2^16-1>;
    CipherSuite cipher_suites<2..2^16-2>;
    uint16 padded_length;
    uint64 not_before;
    uint64 not_after;
    Extension extensions<0..2^16-1>;
} ESNIKeys;

The checksum is the first four bytes of SHA-256 over the whole structure with
the checksum field zeroed. Decoding verifies it before any section is parsed.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterator, Optional

from ..codec.tls import (
    read_opaque8,
    read_opaque16,
    read_uint16,
    read_uint64,
    write_opaque8,
    write_opaque16,
    write_uint16,
    write_uint64,
)
from ..crypto.checksum import (
    CHECKSUM_LENGTH,
    CHECKSUM_OFFSET,
    ZERO_CHECKSUM,
    compute_checksum,
    splice_checksum,
)
from ..exceptions import (
    ChecksumMismatch,
    ESNIError,
    InvalidFieldValue,
    UnexpectedEndOfData,
)
from ..extensions import (
    Extension,
    ExtensionRegistry,
    default_registry,
    describe_extensions,
    read_extension_list,
    write_extension_list,
)
from .cipher_suites import describe_cipher_suites, read_cipher_suites, write_cipher_suites
from .constants import has_public_name, version_name
from .key_share import KeyShareEntryList

logger = logging.getLogger(__name__)

HEADER_LENGTH = CHECKSUM_OFFSET + CHECKSUM_LENGTH
MAX_PUBLIC_NAME_LENGTH = 0xFF


@contextmanager
def _section(label: str) -> Iterator[None]:
    """Prefix any codec error raised inside the block with label."""
    try:
        yield
    except ESNIError as e:
        e.wrap(label)
        raise


def _to_utc(value: datetime) -> datetime:
    """Aware UTC datetime truncated to whole seconds; naive values are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).replace(microsecond=0)


def _to_unix(value: datetime) -> int:
    return int(_to_utc(value).timestamp())


def _from_unix(value: int) -> datetime:
    try:
        return datetime.fromtimestamp(value, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as e:
        raise InvalidFieldValue(f"timestamp {value} out of range") from e


@dataclass
class ESNIKeys:
    """In-memory ESNIKeys record.

    checksum is derived: serialize() stores the value it computed and
    deserialize() stores the verified value from the wire. Timestamps have
    one-second resolution on the wire; they are normalised to aware UTC
    whole seconds on construction, naive datetimes being taken as UTC.
    """

    version: int
    keys: KeyShareEntryList
    cipher_suites: list[int]
    padded_length: int
    not_before: datetime
    not_after: datetime
    public_name: str = ""
    extensions: list[Extension] = field(default_factory=list)
    checksum: bytes = field(default=ZERO_CHECKSUM, init=False)

    def __post_init__(self) -> None:
        if not isinstance(self.keys, KeyShareEntryList):
            self.keys = KeyShareEntryList(self.keys)
        self.not_before = _to_utc(self.not_before)
        self.not_after = _to_utc(self.not_after)

    # --- encoding ---

    def _serialize_public_name(self) -> bytes:
        if not has_public_name(self.version):
            return b""
        name = self.public_name.encode("utf-8")
        if not name:
            raise InvalidFieldValue("public name is empty")
        if len(name) > MAX_PUBLIC_NAME_LENGTH:
            raise InvalidFieldValue(f"public name is too large: {len(name)} bytes")
        return write_opaque8(name)

    def _serialize_keys(self) -> bytes:
        if not self.keys:
            raise InvalidFieldValue("key share list is empty")
        return write_opaque16(self.keys.serialize())

    def serialize(self) -> bytes:
        """Encode the record and splice in its checksum.

        Raises:
            EncodingError: If any field cannot be represented on the wire.
        """
        with _section("write version"):
            out = write_uint16(self.version)
        out += ZERO_CHECKSUM
        with _section("marshal public name"):
            out += self._serialize_public_name()
        with _section("marshal key share list"):
            out += self._serialize_keys()
        with _section("marshal cipher suite list"):
            out += write_cipher_suites(self.cipher_suites)
        with _section("write padded length"):
            out += write_uint16(self.padded_length)
        with _section("marshal validity period"):
            out += write_uint64(_to_unix(self.not_before))
            out += write_uint64(_to_unix(self.not_after))
        with _section("marshal extensions list"):
            out += write_extension_list(self.extensions)

        self.checksum = compute_checksum(out)
        logger.debug(
            "encoded ESNIKeys version=%#06x length=%d checksum=%s",
            self.version,
            len(out),
            self.checksum.hex(),
        )
        return splice_checksum(out, self.checksum)

    # --- decoding ---

    @classmethod
    def deserialize(
        cls, data: bytes, registry: Optional[ExtensionRegistry] = None
    ) -> "ESNIKeys":
        """Verify the checksum of data and parse it into a record.

        Extensions are resolved through registry (the default registry when
        omitted). Nothing is returned unless every section parses.

        Raises:
            ChecksumMismatch: If the embedded checksum is wrong.
            DecodingError: If any section is truncated or malformed.
        """
        if registry is None:
            registry = default_registry()
        data = bytes(data)
        if len(data) < HEADER_LENGTH:
            raise UnexpectedEndOfData(
                f"record too short: need {HEADER_LENGTH} header bytes, have {len(data)}"
            )

        version, off = read_uint16(data, 0)
        received = data[CHECKSUM_OFFSET:HEADER_LENGTH]
        expected = compute_checksum(data)
        if received != expected:
            logger.warning(
                "ESNIKeys checksum mismatch: calculated %s, received %s",
                expected.hex(),
                received.hex(),
            )
            raise ChecksumMismatch(expected, received)
        off = HEADER_LENGTH

        public_name = ""
        if has_public_name(version):
            with _section("unmarshal public name"):
                raw_name, off = read_opaque8(data, off)
                if not raw_name:
                    raise InvalidFieldValue("public name is empty")
                try:
                    public_name = raw_name.decode("utf-8")
                except UnicodeDecodeError as e:
                    raise InvalidFieldValue("public name is not valid UTF-8") from e

        with _section("unmarshal key share list"):
            raw_keys, off = read_opaque16(data, off)
            if not raw_keys:
                raise InvalidFieldValue("key share list is empty")
            keys = KeyShareEntryList.deserialize(raw_keys)

        with _section("unmarshal cipher suite list"):
            cipher_suites, off = read_cipher_suites(data, off)

        with _section("read padded length"):
            padded_length, off = read_uint16(data, off)

        with _section("unmarshal validity period"):
            not_before, off = read_uint64(data, off)
            not_after, off = read_uint64(data, off)
            valid_from = _from_unix(not_before)
            valid_until = _from_unix(not_after)

        with _section("unmarshal extensions list"):
            extensions, off = read_extension_list(data, off, registry)

        if off != len(data):
            raise InvalidFieldValue(f"{len(data) - off} trailing bytes after extensions list")

        record = cls(
            version=version,
            keys=keys,
            cipher_suites=cipher_suites,
            padded_length=padded_length,
            not_before=valid_from,
            not_after=valid_until,
            public_name=public_name,
            extensions=extensions,
        )
        record.checksum = received
        logger.debug(
            "decoded ESNIKeys version=%#06x keys=%d cipher_suites=%d extensions=%d",
            version,
            len(keys),
            len(cipher_suites),
            len(extensions),
        )
        return record

    # --- diagnostics ---

    def describe(self, registry: Optional[ExtensionRegistry] = None) -> str:
        """Render every field in a stable, log-friendly form."""
        if registry is None:
            registry = default_registry()
        parts = [
            f"Version:{version_name(self.version)}",
            f"Checksum:{self.checksum.hex()}",
        ]
        if has_public_name(self.version):
            parts.append(f"PublicName:{self.public_name}")
        parts += [
            f"Keys:{self.keys.describe()}",
            f"CipherSuites:{describe_cipher_suites(self.cipher_suites)}",
            f"PaddedLength:{self.padded_length}",
            f"NotBefore:{self.not_before.isoformat()}",
            f"NotAfter:{self.not_after.isoformat()}",
            f"Extensions:{describe_extensions(self.extensions, registry)}",
        ]
        return "{" + ", ".join(parts) + "}"

    def __str__(self) -> str:
        return self.describe()


def encode_keys(keys: ESNIKeys) -> bytes:
    """Encode an ESNIKeys record to its wire format."""
    return keys.serialize()


def decode_keys(data: bytes, registry: Optional[ExtensionRegistry] = None) -> ESNIKeys:
    """Decode and checksum-verify an ESNIKeys record."""
    return ESNIKeys.deserialize(data, registry)
