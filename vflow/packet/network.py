"""Decoding of IPv4/IPv6 headers and dispatch to the transport layer."""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass
from typing import Union

from vflow.packet.icmp import ICMP, decode_icmp
from vflow.packet.transport import TCPHeader, UDPHeader, decode_tcp, decode_udp

IPV4_HLEN = 20
IPV6_HLEN = 40

IANA_PROTO_ICMP = 1
IANA_PROTO_TCP = 6
IANA_PROTO_UDP = 17
IANA_PROTO_IPV6_ICMP = 58


@dataclass
class IPv4Header:
    """An IPv4 header."""

    version: int = 0
    tos: int = 0
    total_len: int = 0
    id: int = 0
    flags: int = 0
    frag_off: int = 0
    ttl: int = 0
    protocol: int = 0
    checksum: int = 0
    src: str = ""
    dst: str = ""


@dataclass
class IPv6Header:
    """An IPv6 header."""

    version: int = 0
    traffic_class: int = 0
    flow_label: int = 0
    payload_len: int = 0
    next_header: int = 0
    hop_limit: int = 0
    src: str = ""
    dst: str = ""


Transport = Union[ICMP, TCPHeader, UDPHeader]


def _ip_string(raw: bytes) -> str:
    addr = ipaddress.ip_address(bytes(raw))
    if isinstance(addr, ipaddress.IPv6Address) and addr.ipv4_mapped is not None:
        return str(addr.ipv4_mapped)
    return str(addr)


def decode_ipv4_header(data: bytes) -> tuple[IPv4Header, bytes]:
    """Decode an IPv4 header and return it with the bytes that follow it."""
    if len(data) < IPV4_HLEN:
        raise ValueError("short ipv4 header length")
    header = IPv4Header(
        version=(data[0] & 0xF0) >> 4,
        tos=data[1],
        total_len=int.from_bytes(data[2:4], "big"),
        id=int.from_bytes(data[4:6], "big"),
        flags=data[6] & 0x07,
        ttl=data[8],
        protocol=data[9],
        checksum=int.from_bytes(data[10:12], "big"),
        src=_ip_string(data[12:16]),
        dst=_ip_string(data[16:20]),
    )
    return header, bytes(data[IPV4_HLEN:])


def decode_ipv6_header(data: bytes) -> tuple[IPv6Header, bytes]:
    """Decode an IPv6 header and return it with the bytes that follow it."""
    if len(data) < IPV6_HLEN:
        raise ValueError("short ipv6 header length")
    header = IPv6Header(
        version=data[0] >> 4,
        traffic_class=((data[0] & 0x0F) << 4) | (data[1] >> 4),
        flow_label=((data[1] & 0x0F) << 16) | (data[2] << 8) | data[3],
        payload_len=int.from_bytes(data[4:6], "big"),
        next_header=data[6],
        hop_limit=data[7],
        src=_ip_string(data[8:24]),
        dst=_ip_string(data[24:40]),
    )
    return header, bytes(data[IPV6_HLEN:])


def decode_next_layer(l3, data: bytes) -> tuple[Transport, bytes]:
    """Decode the transport header named by ``l3`` from ``data``.

    Returns the header and the bytes that follow it.
    """
    if isinstance(l3, IPv4Header):
        proto = l3.protocol
    elif isinstance(l3, IPv6Header):
        proto = l3.next_header
    else:
        raise ValueError("unknown network layer protocol")

    if proto in (IANA_PROTO_ICMP, IANA_PROTO_IPV6_ICMP):
        return decode_icmp(data), bytes(data[4:])
    if proto == IANA_PROTO_TCP:
        return decode_tcp(data), bytes(data[20:])
    if proto == IANA_PROTO_UDP:
        return decode_udp(data), bytes(data[8:])
    raise ValueError("unknown transport layer")