"""Decoding of ICMP headers."""

from __future__ import annotations

from dataclasses import dataclass

ICMP_MIN_LEN = 5


@dataclass
class ICMP:
    """ICMP type, code and the rest of the header."""

    type: int = 0
    code: int = 0
    rest_header: bytes = b""


def decode_icmp(data: bytes) -> ICMP:
    """Decode an ICMP header; raises ValueError if fewer than 5 bytes."""
    if len(data) < ICMP_MIN_LEN:
        raise ValueError("ICMP header length is too short")
    return ICMP(type=data[0], code=data[1], rest_header=bytes(data[4:]))