"""Decoding of Ethernet (IEEE 802.3) frames with optional 802.1Q tag."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

ETHERNET_HLEN = 14
VLAN_TAG_LEN = 4


class EtherType(IntEnum):
    """Well-known EtherType values."""

    ARP = 0x0806
    IPV4 = 0x0800
    IPV6 = 0x86DD
    LACP = 0x8809
    IEEE8021Q = 0x8100


@dataclass
class Datalink:
    """Layer two information."""

    src_mac: str = ""
    dst_mac: str = ""
    vlan: int = 0
    ether_type: int = 0


def _mac(raw: bytes) -> str:
    return ":".join(f"{octet:02x}" for octet in raw)


def decode_ieee802(data: bytes) -> Datalink:
    """Decode MAC addresses and EtherType from the first 14 bytes.

    MAC addresses are left empty when the frame carries a VLAN tag.
    """
    if len(data) < ETHERNET_HLEN:
        raise ValueError("short ethernet header length")
    link = Datalink(ether_type=int.from_bytes(data[12:14], "big"))
    if link.ether_type != EtherType.IEEE8021Q:
        link.dst_mac = _mac(data[0:6])
        link.src_mac = _mac(data[6:12])
    return link


def decode_ethernet(data: bytes) -> tuple[Datalink, bytes]:
    """Decode an Ethernet header and return it with the remaining payload."""
    data = bytes(data)
    if len(data) < ETHERNET_HLEN:
        raise ValueError("the ethernet header is too small")

    link = decode_ieee802(data)
    if link.ether_type == EtherType.IEEE8021Q:
        if len(data) < ETHERNET_HLEN + VLAN_TAG_LEN:
            raise ValueError("the ethernet header is too small")
        vlan = int.from_bytes(data[14:16], "big")
        data = data[:12] + data[16:18] + data[18:]
        link = decode_ieee802(data)
        link.vlan = vlan

    return link, data[ETHERNET_HLEN:]