"""Key share entries offered by an ESNIKeys record.

struct {
    NamedGroup group;
    opaque key_exchange<1..2^16-1>;
} KeyShareEntry;

A record holds a list of entries whose groups are unique.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Tuple

from ..codec.tls import read_bytes, read_uint16, write_opaque16, write_uint16
from ..exceptions import DuplicateKeyType, TruncatedEntry
from .constants import group_name

KEY_SHARE_HEADER_LENGTH = 4


@dataclass(frozen=True)
class KeyShareEntry:
    """A public key for one named group."""

    group: int
    key_exchange: bytes

    def size(self) -> int:
        return KEY_SHARE_HEADER_LENGTH + len(self.key_exchange)

    def serialize(self) -> bytes:
        """Encode as uint16(group) || opaque16(key_exchange)."""
        return write_uint16(self.group) + write_opaque16(self.key_exchange)

    @classmethod
    def deserialize(cls, data: bytes, offset: int = 0) -> Tuple["KeyShareEntry", int]:
        """Parse one entry at offset and return (entry, new_offset).

        Raises:
            TruncatedEntry: If the header or the key exchange bytes are cut short.
        """
        group, offset = read_uint16(data, offset, TruncatedEntry)
        length, offset = read_uint16(data, offset, TruncatedEntry)
        key_exchange, offset = read_bytes(data, offset, length, TruncatedEntry)
        return cls(group, key_exchange), offset


class KeyShareEntryList(list[KeyShareEntry]):
    """Ordered list of KeyShareEntry values with unique groups."""

    def __init__(self, entries: Iterable[KeyShareEntry] = ()) -> None:
        super().__init__(entries)

    def size(self) -> int:
        return sum(entry.size() for entry in self)

    def contains(self, group: int) -> bool:
        return any(entry.group == group for entry in self)

    def serialize(self) -> bytes:
        """Concatenate every entry's encoding (no list length prefix).

        Raises:
            DuplicateKeyType: If two entries share a group.
        """
        seen: set[int] = set()
        out = b""
        for entry in self:
            if entry.group in seen:
                raise DuplicateKeyType(entry.group)
            seen.add(entry.group)
            out += entry.serialize()
        return out

    @classmethod
    def deserialize(cls, data: bytes) -> "KeyShareEntryList":
        """Parse entries until data is exhausted, preserving wire order.

        Raises:
            TruncatedEntry: If an entry is cut short.
            DuplicateKeyType: If a group appears more than once.
        """
        entries = cls()
        off = 0
        while off < len(data):
            entry, off = KeyShareEntry.deserialize(data, off)
            if entries.contains(entry.group):
                raise DuplicateKeyType(entry.group)
            entries.append(entry)
        return entries

    def describe(self) -> str:
        parts = [
            f"{{Group:{group_name(entry.group)}, Value:{entry.key_exchange.hex()}}}"
            for entry in self
        ]
        return "[" + ", ".join(parts) + "]"
