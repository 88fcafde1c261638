"""Minimal IPv6 header template for spoofed replication."""

from __future__ import annotations

import ipaddress
import struct
from dataclasses import dataclass

IPV6_HLEN = 40


def _ipv6_bytes(addr) -> bytes:
    if isinstance(addr, (bytes, bytearray)):
        parsed = ipaddress.ip_address(bytes(addr))
    else:
        parsed = ipaddress.ip_address(addr)
    if isinstance(parsed, ipaddress.IPv4Address):
        parsed = ipaddress.IPv6Address(f"::ffff:{parsed}")
    return parsed.packed


@dataclass
class IPv6Header:
    """IP version 6 header fields."""

    version: int = 6
    traffic_class: int = 0
    flow_label: int = 0
    payload_length: int = 0
    next_header: int = 0
    hop_limit: int = 64

    def marshal(self) -> bytearray:
        """Encode the header; length and addresses are left zero."""
        buf = bytearray(IPV6_HLEN)
        buf[0] = ((self.version << 4) | (self.traffic_class >> 4)) & 0xFF
        buf[1] = ((self.traffic_class << 4) | ((self.flow_label >> 16) & 0xFF)) & 0xFF
        struct.pack_into(">H", buf, 2, self.flow_label & 0xFFFF)
        buf[6] = self.next_header & 0xFF
        buf[7] = self.hop_limit & 0xFF
        return buf

    def set_len(self, buf: bytearray, n: int) -> None:
        """Write the length field for a payload of ``n`` bytes."""
        struct.pack_into(">H", buf, 4, (IPV6_HLEN + n) & 0xFFFF)

    def set_addrs(self, buf: bytearray, src, dst) -> None:
        """Write the source and destination addresses."""
        buf[8:24] = _ipv6_bytes(src)
        buf[24:40] = _ipv6_bytes(dst)


def ipv6_header_template(proto: int) -> IPv6Header:
    """Return a header template carrying the given next-header number."""
    return IPv6Header(
        version=6, traffic_class=0, flow_label=0,
        next_header=proto & 0xFF, hop_limit=64,
    )