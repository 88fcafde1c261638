"""Decoding of sampled packet headers through layers two, three and four."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Optional, Union

from vflow.packet.ethernet import Datalink, EtherType, decode_ethernet
from vflow.packet.network import (
    IPv4Header,
    IPv6Header,
    Transport,
    decode_ipv4_header,
    decode_ipv6_header,
    decode_next_layer,
)


class HeaderProtocol(IntEnum):
    """Format of a sampled header."""

    ETHERNET = 1
    IPV4 = 11
    IPV6 = 12


@dataclass
class Packet:
    """Layer 2, 3 and 4 information of a decoded packet.

    ``data`` holds the bytes not yet consumed by decoding.
    """

    l2: Datalink = field(default_factory=Datalink)
    l3: Optional[Union[IPv4Header, IPv6Header]] = None
    l4: Optional[Transport] = None
    data: bytes = b""

    def decode(self, data: bytes, protocol: int) -> "Packet":
        """Decode ``data`` in the given header protocol and return self.

        Raises ValueError on short or unknown headers; layers decoded
        before the failure stay set on the packet.
        """
        self.data = bytes(data)

        if protocol == HeaderProtocol.ETHERNET:
            self.l2, self.data = decode_ethernet(self.data)
            if self.l2.ether_type == EtherType.IPV4:
                self.l3, self.data = decode_ipv4_header(self.data)
            elif self.l2.ether_type == EtherType.IPV6:
                self.l3, self.data = decode_ipv6_header(self.data)
            else:
                raise ValueError("unknown ether type")
        elif protocol == HeaderProtocol.IPV4:
            self.l3, self.data = decode_ipv4_header(self.data)
        elif protocol == HeaderProtocol.IPV6:
            self.l3, self.data = decode_ipv6_header(self.data)
        else:
            raise ValueError("unknown header protocol")

        self.l4, self.data = decode_next_layer(self.l3, self.data)
        return self