"""Identifier tables for versions, cipher suites and key share groups.

The codec stores these identifiers as plain integers and round-trips values it
does not know; the names below are only used when rendering diagnostics.
"""
from __future__ import annotations

from enum import IntEnum
from typing import Type

UNKNOWN = "UNKNOWN"


class Version(IntEnum):
    """ESNIKeys record versions.

    Draft 02 reused the draft 01 value, so only two versions exist on the wire.
    """

    DRAFT_01 = 0xFF01
    DRAFT_03 = 0xFF02


# First version whose record carries a public_name section.
PUBLIC_NAME_VERSION = Version.DRAFT_03

_VERSION_NAMES = {
    Version.DRAFT_01: "draft-ietf-tls-esni-01",
    Version.DRAFT_03: "draft-ietf-tls-esni-03",
}


class CipherSuite(IntEnum):
    """TLS 1.3 cipher suites (RFC 8446 §B.4)."""

    TLS_AES_128_GCM_SHA256 = 0x1301
    TLS_AES_256_GCM_SHA384 = 0x1302
    TLS_CHACHA20_POLY1305_SHA256 = 0x1303
    TLS_AES_128_CCM_SHA256 = 0x1304
    TLS_AES_128_CCM_8_SHA256 = 0x1305


class Group(IntEnum):
    """Named groups usable for key share entries (RFC 8446 §4.2.7)."""

    SECP256R1 = 0x0017
    SECP384R1 = 0x0018
    SECP521R1 = 0x0019
    X25519 = 0x001D
    X448 = 0x001E
    FFDHE2048 = 0x0100
    FFDHE3072 = 0x0101
    FFDHE4096 = 0x0102
    FFDHE6144 = 0x0103
    FFDHE8192 = 0x0104


def has_public_name(version: int) -> bool:
    """Return True when records of this version carry a public_name."""
    return int(version) >= PUBLIC_NAME_VERSION


def _enum_name(enum_cls: Type[IntEnum], value: int) -> str:
    try:
        return enum_cls(value).name
    except ValueError:
        return UNKNOWN


def version_name(value: int) -> str:
    try:
        return _VERSION_NAMES[Version(value)]
    except ValueError:
        return UNKNOWN


def cipher_suite_name(value: int) -> str:
    return _enum_name(CipherSuite, value)


def group_name(value: int) -> str:
    name = _enum_name(Group, value)
    return name if name == UNKNOWN else name.lower()
