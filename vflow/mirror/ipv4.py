"""Minimal IPv4 header template for spoofed replication."""

from __future__ import annotations

import ipaddress
import struct
from dataclasses import dataclass

IPV4_HLEN = 20


def _ipv4_bytes(addr) -> bytes:
    if isinstance(addr, (bytes, bytearray)):
        parsed = ipaddress.ip_address(bytes(addr))
    else:
        parsed = ipaddress.ip_address(addr)
    if isinstance(parsed, ipaddress.IPv6Address):
        if parsed.ipv4_mapped is None:
            raise ValueError(f"{parsed} is not an IPv4 address")
        parsed = parsed.ipv4_mapped
    return parsed.packed


@dataclass
class IPv4Header:
    """The IPv4 fields that need to be set up."""

    version: int = 4
    ihl: int = 5
    tos: int = 0
    length: int = 0
    ttl: int = 64
    protocol: int = 0

    def marshal(self) -> bytearray:
        """Encode the header; addresses and checksum are left zero."""
        buf = bytearray(IPV4_HLEN)
        buf[0] = ((self.version << 4) | self.ihl) & 0xFF
        buf[1] = self.tos & 0xFF
        struct.pack_into(">H", buf, 2, self.length & 0xFFFF)
        buf[8] = self.ttl & 0xFF
        buf[9] = self.protocol & 0xFF
        return buf

    def set_len(self, buf: bytearray, n: int) -> None:
        """Write the total length for a payload of ``n`` bytes."""
        struct.pack_into(">H", buf, 2, (IPV4_HLEN + n) & 0xFFFF)

    def set_addrs(self, buf: bytearray, src, dst) -> None:
        """Write the source and destination addresses."""
        buf[12:16] = _ipv4_bytes(src)
        buf[16:20] = _ipv4_bytes(dst)


def ipv4_header_template(proto: int) -> IPv4Header:
    """Return a header template carrying the given protocol number."""
    return IPv4Header(version=4, ihl=5, tos=0, ttl=64, protocol=proto & 0xFF)