from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import ClassVar

from esnikeys.codec.tls import read_uint16, write_opaque8, write_opaque16, write_uint16, write_uint64
from esnikeys.crypto.checksum import compute_checksum, splice_checksum
from esnikeys.extensions import Extension
from esnikeys.protocol import CipherSuite, ESNIKeys, Group, KeyShareEntry, KeyShareEntryList, Version

NOT_BEFORE = datetime(2019, 9, 1, tzinfo=timezone.utc)
NOT_AFTER = datetime(2019, 9, 2, tzinfo=timezone.utc)
X25519_KEY = bytes(range(32))


def sample_keys(**overrides) -> ESNIKeys:
    fields = dict(
        version=Version.DRAFT_03,
        public_name="cloudflare-esni.com",
        keys=KeyShareEntryList([KeyShareEntry(Group.X25519, X25519_KEY)]),
        cipher_suites=[CipherSuite.TLS_AES_128_GCM_SHA256],
        padded_length=260,
        not_before=NOT_BEFORE,
        not_after=NOT_AFTER,
        extensions=[],
    )
    fields.update(overrides)
    return ESNIKeys(**fields)


def reseal(data: bytes) -> bytes:
    """Give a hand-built or tampered record a valid checksum."""
    return splice_checksum(data, compute_checksum(data))


def raw_record(
    *,
    version: int = Version.DRAFT_03,
    public_name: bytes | None = b"example.com",
    keys: bytes | None = None,
    cipher_suites: bytes = bytes.fromhex("00021301"),
    padded_length: int = 260,
    validity: bytes | None = None,
    extensions: bytes = b"\x00\x00",
) -> bytes:
    """Assemble a record from raw section bytes and seal it."""
    if keys is None:
        keys = write_opaque16(write_uint16(Group.X25519) + write_opaque16(X25519_KEY))
    if validity is None:
        validity = write_uint64(1567296000) + write_uint64(1567382400)
    out = write_uint16(version) + b"\x00" * 4
    if public_name is not None:
        out += write_opaque8(public_name)
    out += keys + cipher_suites + write_uint16(padded_length) + validity + extensions
    return reseal(out)


@dataclass
class CounterExtension(Extension):
    """Fixed-size extension used to exercise list decoding next to AddressSet."""

    ext_type: ClassVar[int] = 0x0002
    value: int = 0

    def size(self) -> int:
        return 2

    def serialize(self) -> bytes:
        return write_uint16(self.value)

    def parse(self, data: bytes) -> None:
        self.value, _ = read_uint16(data, 0)


@dataclass
class UnregisteredExtension(CounterExtension):
    ext_type: ClassVar[int] = 0x0BAD
