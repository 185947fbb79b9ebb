"""ESNIKeys extensions and the default extension registry."""
from __future__ import annotations

from .address_set import AddressSet
from .extensions import (
    MANDATORY_EXTENSION_MASK,
    Extension,
    ExtensionType,
    describe_extensions,
    deserialize_extensions,
    is_mandatory,
    read_extension_list,
    serialize_extensions,
    write_extension_list,
)
from .registry import ExtensionRegistry, RegistryEntry

_DEFAULT_REGISTRY = ExtensionRegistry()
_DEFAULT_REGISTRY.register(ExtensionType.ADDRESS_SET, "address_set", AddressSet)


def default_registry() -> ExtensionRegistry:
    """Return the process-wide registry holding the built-in extensions.

    Register additional extension types on it during start-up only.
    """
    return _DEFAULT_REGISTRY


__all__ = [
    "AddressSet",
    "Extension",
    "ExtensionRegistry",
    "ExtensionType",
    "MANDATORY_EXTENSION_MASK",
    "RegistryEntry",
    "default_registry",
    "describe_extensions",
    "deserialize_extensions",
    "is_mandatory",
    "read_extension_list",
    "serialize_extensions",
    "write_extension_list",
]
