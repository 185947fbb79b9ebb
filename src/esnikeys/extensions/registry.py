"""Extension type registry.

A registry maps a 16-bit extension type to its display name and a zero-argument
factory returning an empty extension ready to parse its payload. Registries are
populated once during start-up and only read afterwards, so concurrent decodes
can share one without locking.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Dict, Iterator, Optional

from ..exceptions import RegistryConflict

if TYPE_CHECKING:
    from .extensions import Extension

logger = logging.getLogger(__name__)

UNKNOWN_EXTENSION_NAME = "UNKNOWN"


@dataclass(frozen=True)
class RegistryEntry:
    name: str
    factory: Callable[[], "Extension"]


class ExtensionRegistry:
    """Lookup table from extension type to (name, factory)."""

    def __init__(self) -> None:
        self._entries: Dict[int, RegistryEntry] = {}

    def register(self, ext_type: int, name: str, factory: Callable[[], "Extension"]) -> None:
        """Register a decoder for ext_type.

        Raises:
            RegistryConflict: If ext_type already has a registered decoder.
        """
        ext_type = int(ext_type)
        if ext_type in self._entries:
            raise RegistryConflict(ext_type)
        self._entries[ext_type] = RegistryEntry(name, factory)
        logger.debug("registered extension type %#06x as %s", ext_type, name)

    def lookup(self, ext_type: int) -> Optional[RegistryEntry]:
        return self._entries.get(int(ext_type))

    def name_of(self, ext_type: int) -> str:
        entry = self.lookup(ext_type)
        return entry.name if entry is not None else UNKNOWN_EXTENSION_NAME

    def __contains__(self, ext_type: object) -> bool:
        return isinstance(ext_type, int) and ext_type in self._entries

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self._entries))

    def __len__(self) -> int:
        return len(self._entries)
