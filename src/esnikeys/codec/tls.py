"""Big-endian integer and length-prefixed vector helpers for ESNI records.

The ESNIKeys structure is written in TLS presentation language, so every
multi-byte integer is encoded in network byte order and variable-length
fields carry an explicit 1- or 2-byte length prefix.

Conventions
- "write_*" functions return encoded bytes for the given value. They raise
  InvalidFieldValue when the value does not fit its wire width.
- "read_*" functions take a buffer and an offset, and return a tuple of
  (decoded_value, new_offset). They raise StructuralTruncation (or the
  subclass passed as ``error``) when the buffer runs out.
"""

from __future__ import annotations

from typing import Type

from ..exceptions import InvalidFieldValue, StructuralTruncation


def require_length(
    buf: bytes,
    offset: int,
    need: int,
    error: Type[StructuralTruncation] = StructuralTruncation,
) -> None:
    """Ensure that buf holds at least 'need' bytes starting at offset.

    Parameters
    - buf: Bytes-like object to check.
    - offset: Starting index within buf.
    - need: Minimum number of bytes required.
    - error: StructuralTruncation subclass to raise.

    Raises
    - StructuralTruncation: If fewer than need bytes remain.
    """
    have = len(buf) - offset
    if have < need:
        raise error(f"buffer too short at offset {offset}: need {need}, have {max(have, 0)}")


def _write_uint(x: int, width: int) -> bytes:
    if x < 0 or x >= 1 << (8 * width):
        raise InvalidFieldValue(f"value {x} does not fit in uint{8 * width}")
    return x.to_bytes(width, "big")


def write_uint8(x: int) -> bytes:
    """Encode an unsigned 8-bit integer."""
    return _write_uint(x, 1)


def write_uint16(x: int) -> bytes:
    """Encode an unsigned 16-bit integer in big-endian format.

    Parameters
    - x: Integer in range [0, 65535].

    Returns
    - 2-byte big-endian encoding.
    """
    return _write_uint(x, 2)


def write_uint64(x: int) -> bytes:
    """Encode an unsigned 64-bit integer in big-endian format.

    Parameters
    - x: Integer in range [0, 2^64 - 1].

    Returns
    - 8-byte big-endian encoding.
    """
    return _write_uint(x, 8)


def read_uint8(
    buf: bytes, offset: int = 0, error: Type[StructuralTruncation] = StructuralTruncation
) -> tuple[int, int]:
    """Decode an unsigned 8-bit integer from buf starting at offset."""
    require_length(buf, offset, 1, error)
    return buf[offset], offset + 1


def read_uint16(
    buf: bytes, offset: int = 0, error: Type[StructuralTruncation] = StructuralTruncation
) -> tuple[int, int]:
    """Decode an unsigned 16-bit integer from buf starting at offset.

    Returns
    - (value, new_offset) where new_offset = offset + 2.

    Raises
    - StructuralTruncation: If insufficient bytes are available.
    """
    require_length(buf, offset, 2, error)
    return int.from_bytes(buf[offset : offset + 2], "big"), offset + 2


def read_uint64(
    buf: bytes, offset: int = 0, error: Type[StructuralTruncation] = StructuralTruncation
) -> tuple[int, int]:
    """Decode an unsigned 64-bit integer from buf starting at offset.

    Returns
    - (value, new_offset) where new_offset = offset + 8.

    Raises
    - StructuralTruncation: If insufficient bytes are available.
    """
    require_length(buf, offset, 8, error)
    return int.from_bytes(buf[offset : offset + 8], "big"), offset + 8


def read_bytes(
    buf: bytes,
    offset: int,
    length: int,
    error: Type[StructuralTruncation] = StructuralTruncation,
) -> tuple[bytes, int]:
    """Take exactly 'length' raw bytes from buf starting at offset."""
    require_length(buf, offset, length, error)
    return bytes(buf[offset : offset + length]), offset + length


def write_vector(data: bytes, length_bytes: int) -> bytes:
    """Encode an opaque vector with a length prefix.

    Parameters
    - data: The payload to prefix with its length.
    - length_bytes: Number of bytes to encode the length (1 or 2).

    Returns
    - Encoded bytes consisting of length prefix followed by data.

    Raises
    - ValueError: If length_bytes is not 1 or 2.
    - InvalidFieldValue: If data is too long for the chosen length size.
    """
    if length_bytes == 1:
        if len(data) > 0xFF:
            raise InvalidFieldValue("vector too long for 1-byte length")
        return write_uint8(len(data)) + data
    if length_bytes == 2:
        if len(data) > 0xFFFF:
            raise InvalidFieldValue("vector too long for 2-byte length")
        return write_uint16(len(data)) + data
    raise ValueError("length_bytes must be 1 or 2")


def read_vector(buf: bytes, offset: int, length_bytes: int) -> tuple[bytes, int]:
    """Decode an opaque vector with a 1- or 2-byte length prefix.

    Returns
    - (data, new_offset) where data is the extracted payload and new_offset
      points to the first byte following the payload.

    Raises
    - ValueError: If length_bytes is not 1 or 2.
    - StructuralTruncation: If insufficient bytes are available for length or data.
    """
    if length_bytes == 1:
        length, offset = read_uint8(buf, offset)
    elif length_bytes == 2:
        length, offset = read_uint16(buf, offset)
    else:
        raise ValueError("length_bytes must be 1 or 2")
    return read_bytes(buf, offset, length)


def write_opaque8(data: bytes) -> bytes:
    """Encode an opaque vector with an 8-bit length prefix (max 255 bytes)."""
    return write_vector(data, 1)


def write_opaque16(data: bytes) -> bytes:
    """Encode an opaque vector with a 16-bit length prefix (max 65535 bytes)."""
    return write_vector(data, 2)


def read_opaque8(buf: bytes, offset: int = 0) -> tuple[bytes, int]:
    """Decode an opaque vector with an 8-bit length prefix.

    Returns:
        (payload, new_offset) where new_offset points past the decoded vector.
    """
    return read_vector(buf, offset, 1)


def read_opaque16(buf: bytes, offset: int = 0) -> tuple[bytes, int]:
    """Decode an opaque vector with a 16-bit length prefix.

    Returns:
        (payload, new_offset) where new_offset points past the decoded vector.
    """
    return read_vector(buf, offset, 2)
