"""Decoding of TCP and UDP headers."""

from __future__ import annotations

from dataclasses import dataclass

TCP_HLEN = 20
UDP_HLEN = 8


@dataclass
class TCPHeader:
    """The TCP header fields of interest."""

    src_port: int = 0
    dst_port: int = 0
    data_offset: int = 0
    reserved: int = 0
    flags: int = 0


@dataclass
class UDPHeader:
    """UDP source and destination ports."""

    src_port: int = 0
    dst_port: int = 0


def decode_tcp(data: bytes) -> TCPHeader:
    """Decode a TCP header; raises ValueError if fewer than 20 bytes."""
    if len(data) < TCP_HLEN:
        raise ValueError("short TCP header length")
    return TCPHeader(
        src_port=int.from_bytes(data[0:2], "big"),
        dst_port=int.from_bytes(data[2:4], "big"),
        data_offset=data[12] >> 4,
        reserved=0,
        flags=int.from_bytes(data[12:14], "big") & 0x01FF,
    )


def decode_udp(data: bytes) -> UDPHeader:
    """Decode a UDP header; raises ValueError if fewer than 8 bytes."""
    if len(data) < UDP_HLEN:
        raise ValueError("short UDP header length")
    return UDPHeader(
        src_port=int.from_bytes(data[0:2], "big"),
        dst_port=int.from_bytes(data[2:4], "big"),
    )