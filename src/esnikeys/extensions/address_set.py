"""AddressSet extension: IP addresses of servers that hold the record's keys.

struct {
    uint8 address_type;      /* 4 or 6 */
    opaque address[4 | 16];
} Address;

Addresses are concatenated with no length prefix and extend to the end of the
input, so an AddressSet must be the last extension in a record.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from ipaddress import IPv4Address, IPv6Address, ip_address
from typing import ClassVar, Union

from ..codec.tls import read_bytes, read_uint8, write_uint8
from ..exceptions import TruncatedAddress, UnsupportedAddressFamily
from .extensions import Extension, ExtensionType

IPAddress = Union[IPv4Address, IPv6Address]

FAMILY_IPV4 = 4
FAMILY_IPV6 = 6

_ADDRESS_LENGTHS = {
    FAMILY_IPV4: 4,
    FAMILY_IPV6: 16,
}


def _family(address: IPAddress) -> int:
    return FAMILY_IPV4 if address.version == 4 else FAMILY_IPV6


@dataclass
class AddressSet(Extension):
    ext_type: ClassVar[int] = ExtensionType.ADDRESS_SET
    reads_to_end: ClassVar[bool] = True

    addresses: list[IPAddress] = field(default_factory=list)

    @classmethod
    def of(cls, *addresses: str) -> "AddressSet":
        """Build an AddressSet from textual addresses."""
        return cls([ip_address(a) for a in addresses])

    def size(self) -> int:
        return sum(1 + _ADDRESS_LENGTHS[_family(a)] for a in self.addresses)

    def serialize(self) -> bytes:
        out = b""
        for address in self.addresses:
            out += write_uint8(_family(address)) + address.packed
        return out

    def parse(self, data: bytes) -> None:
        addresses: list[IPAddress] = []
        off = 0
        while off < len(data):
            tag, off = read_uint8(data, off)
            if tag == FAMILY_IPV4:
                raw, off = read_bytes(data, off, 4, TruncatedAddress)
                addresses.append(IPv4Address(raw))
            elif tag == FAMILY_IPV6:
                raw, off = read_bytes(data, off, 16, TruncatedAddress)
                addresses.append(IPv6Address(raw))
            else:
                raise UnsupportedAddressFamily(tag)
        self.addresses = addresses

    def describe(self) -> str:
        parts = [f"IPv{a.version}:{a}" for a in self.addresses]
        return "[" + ", ".join(parts) + "]"
