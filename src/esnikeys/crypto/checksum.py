"""Self-referential checksum for ESNIKeys records.

The checksum is the first four bytes of SHA-256 over the whole encoded record
with the checksum field (bytes 2..5) set to zero.
"""
from __future__ import annotations

from cryptography.hazmat.primitives import hashes

CHECKSUM_OFFSET = 2
CHECKSUM_LENGTH = 4
ZERO_CHECKSUM = bytes(CHECKSUM_LENGTH)


def sha256(data: bytes) -> bytes:
    h = hashes.Hash(hashes.SHA256())
    h.update(data)
    return h.finalize()


def compute_checksum(record: bytes) -> bytes:
    """Return the checksum of an encoded record.

    The digest is taken over a scratch copy in which the checksum field is
    zeroed, so the caller's buffer is never modified.

    Raises:
        ValueError: If the record is shorter than the checksum field end.
    """
    end = CHECKSUM_OFFSET + CHECKSUM_LENGTH
    if len(record) < end:
        raise ValueError(f"record too short for checksum: {len(record)} < {end}")
    scratch = bytearray(record)
    scratch[CHECKSUM_OFFSET:end] = ZERO_CHECKSUM
    return sha256(bytes(scratch))[:CHECKSUM_LENGTH]


def splice_checksum(record: bytes, checksum: bytes) -> bytes:
    """Return a copy of record with the checksum field replaced."""
    if len(checksum) != CHECKSUM_LENGTH:
        raise ValueError("checksum must be 4 bytes")
    out = bytearray(record)
    out[CHECKSUM_OFFSET : CHECKSUM_OFFSET + CHECKSUM_LENGTH] = checksum
    return bytes(out)
