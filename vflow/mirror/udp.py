"""UDP header used when replicating packets."""

from __future__ import annotations

import struct
from dataclasses import dataclass

UDP_HLEN = 8
UDP_PROTO = 17

_UDP = struct.Struct(">HHHH")


@dataclass
class UDPHeader:
    """UDP header fields; ``length`` is the payload length."""

    src_port: int = 0
    dst_port: int = 0
    length: int = 0
    checksum: int = 0

    def marshal(self) -> bytearray:
        """Encode the header with the length field including the header."""
        return bytearray(
            _UDP.pack(
                self.src_port & 0xFFFF,
                self.dst_port & 0xFFFF,
                (UDP_HLEN + self.length) & 0xFFFF,
                self.checksum & 0xFFFF,
            )
        )

    def set_len(self, buf: bytearray, n: int) -> None:
        """Write the length field for a payload of ``n`` bytes."""
        struct.pack_into(">H", buf, 4, (UDP_HLEN + n) & 0xFFFF)