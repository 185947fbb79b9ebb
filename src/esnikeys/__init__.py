"""esnikeys: encode, decode and checksum-verify ESNIKeys DNS records."""
from .exceptions import (
    ChecksumMismatch,
    DecodingError,
    DuplicateKeyType,
    ESNIError,
    EncodingError,
    ExtensionDecodeError,
    InvalidFieldValue,
    InvalidListLength,
    RegistryConflict,
    StructuralTruncation,
    UnexpectedEndOfData,
    UnsupportedAddressFamily,
    UnsupportedExtensionType,
)
from .extensions import AddressSet, Extension, ExtensionRegistry, ExtensionType, default_registry
from .protocol import (
    CipherSuite,
    ESNIKeys,
    Group,
    KeyShareEntry,
    KeyShareEntryList,
    Version,
    decode_keys,
    encode_keys,
)

__version__ = "0.1.0"

__all__ = [
    "AddressSet",
    "ChecksumMismatch",
    "CipherSuite",
    "DecodingError",
    "DuplicateKeyType",
    "ESNIError",
    "ESNIKeys",
    "EncodingError",
    "Extension",
    "ExtensionDecodeError",
    "ExtensionRegistry",
    "ExtensionType",
    "Group",
    "InvalidFieldValue",
    "InvalidListLength",
    "KeyShareEntry",
    "KeyShareEntryList",
    "RegistryConflict",
    "StructuralTruncation",
    "UnexpectedEndOfData",
    "UnsupportedAddressFamily",
    "UnsupportedExtensionType",
    "Version",
    "decode_keys",
    "default_registry",
    "encode_keys",
]
