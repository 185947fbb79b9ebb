"""Cipher suite list: CipherSuite cipher_suites<2..2^16-2>."""
from __future__ import annotations

from typing import Sequence

from ..codec.tls import read_uint16, require_length, write_uint16
from ..exceptions import InvalidFieldValue, InvalidListLength, TruncatedData
from .constants import cipher_suite_name


def write_cipher_suites(suites: Sequence[int]) -> bytes:
    """Encode as uint16(2 * count) followed by each uint16 suite id."""
    if len(suites) * 2 > 0xFFFF:
        raise InvalidFieldValue(f"too many cipher suites: {len(suites)}")
    out = write_uint16(len(suites) * 2)
    for suite in suites:
        out += write_uint16(suite)
    return out


def read_cipher_suites(buf: bytes, offset: int = 0) -> tuple[list[int], int]:
    """Decode a cipher suite list and return (suites, new_offset).

    Raises:
        InvalidListLength: If the byte length is odd.
        TruncatedData: If the buffer ends before the declared length.
    """
    length, offset = read_uint16(buf, offset, TruncatedData)
    if length % 2 != 0:
        raise InvalidListLength(f"invalid cipher suite list size {length}")
    require_length(buf, offset, length, TruncatedData)
    suites: list[int] = []
    for _ in range(length // 2):
        suite, offset = read_uint16(buf, offset, TruncatedData)
        suites.append(suite)
    return suites, offset


def describe_cipher_suites(suites: Sequence[int]) -> str:
    return "[" + " ".join(cipher_suite_name(s) for s in suites) + "]"
