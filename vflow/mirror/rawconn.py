"""Raw IP sockets for replicating packets to a third-party collector."""

from __future__ import annotations

import ipaddress
import socket


def _parse(raddr) -> ipaddress.IPv4Address | ipaddress.IPv6Address:
    if isinstance(raddr, (ipaddress.IPv4Address, ipaddress.IPv6Address)):
        addr = raddr
    elif isinstance(raddr, (bytes, bytearray)):
        addr = ipaddress.ip_address(bytes(raddr))
    else:
        addr = ipaddress.ip_address(raddr)
    if isinstance(addr, ipaddress.IPv6Address) and addr.ipv4_mapped is not None:
        return addr.ipv4_mapped
    return addr


def address_family(raddr) -> int:
    """Return AF_INET or AF_INET6 for the given address.

    IPv4-mapped IPv6 addresses count as IPv4. Raises ValueError for
    anything that is not an IP address.
    """
    if isinstance(_parse(raddr), ipaddress.IPv4Address):
        return socket.AF_INET
    return socket.AF_INET6


class RawConn:
    """A raw socket that sends fully built IP packets to one destination."""

    def __init__(self, raddr) -> None:
        addr = _parse(raddr)
        self.family = address_family(addr)
        self.raddr = str(addr)
        self.sock = socket.socket(self.family, socket.SOCK_RAW, socket.IPPROTO_RAW)

    def send(self, data: bytes) -> None:
        """Put the bytes on the wire."""
        self.sock.sendto(bytes(data), (self.raddr, 0))

    def close(self) -> None:
        """Release the socket."""
        self.sock.close()

    def __enter__(self) -> "RawConn":
        return self

    def __exit__(self, *args) -> None:
        self.close()