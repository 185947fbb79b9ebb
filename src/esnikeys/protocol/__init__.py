"""ESNIKeys record structures and their sub-list codecs."""
from .cipher_suites import read_cipher_suites, write_cipher_suites
from .constants import (
    CipherSuite,
    Group,
    PUBLIC_NAME_VERSION,
    Version,
    cipher_suite_name,
    group_name,
    has_public_name,
    version_name,
)
from .key_share import KeyShareEntry, KeyShareEntryList
from .keys import ESNIKeys, decode_keys, encode_keys

__all__ = [
    "CipherSuite",
    "ESNIKeys",
    "Group",
    "KeyShareEntry",
    "KeyShareEntryList",
    "PUBLIC_NAME_VERSION",
    "Version",
    "cipher_suite_name",
    "decode_keys",
    "encode_keys",
    "group_name",
    "has_public_name",
    "read_cipher_suites",
    "version_name",
    "write_cipher_suites",
]
