"""Decoding of Netflow version 5 export packets."""

from __future__ import annotations

import ipaddress
import struct
from dataclasses import dataclass, field

from vflow.reader import Reader

HEADER_LENGTH = 24
FLOW_RECORD_LENGTH = 48
MAX_FLOW_COUNT = 30

_HEADER = struct.Struct(">HHIIIIBBH")
_FLOW = struct.Struct(">IIIHHIIIIHHBBBBHHBBH")


class DecodeError(ValueError):
    """Raised when a packet is not valid Netflow v5.

    ``partial`` holds the message decoded so far, when there is one.
    """

    def __init__(self, text: str, partial: "Message | None" = None) -> None:
        super().__init__(text)
        self.partial = partial


@dataclass
class PacketHeader:
    """Netflow v5 packet header (24 bytes)."""

    version: int = 0
    count: int = 0
    sys_uptime_msecs: int = 0
    unix_secs: int = 0
    unix_nsecs: int = 0
    seq_num: int = 0
    eng_type: int = 0
    eng_id: int = 0
    smp_int: int = 0

    @classmethod
    def from_reader(cls, reader: Reader) -> "PacketHeader":
        """Read a header; raises ReaderError if the buffer is too short."""
        return cls(*_HEADER.unpack(reader.read(HEADER_LENGTH)))

    def validate(self) -> None:
        """Raise DecodeError unless version and flow count are acceptable."""
        if self.version != 5:
            raise DecodeError(
                f"invalid netflow version, (expected: 5) (received: {self.version})"
            )
        if not 1 <= self.count <= MAX_FLOW_COUNT:
            raise DecodeError(
                "flow count out of bounds, (expected: [1...30]) "
                f"(received: {self.count})"
            )


@dataclass
class FlowRecord:
    """Netflow v5 flow record (48 bytes)."""

    src_addr: int = 0
    dst_addr: int = 0
    next_hop: int = 0
    input: int = 0
    output: int = 0
    pkt_count: int = 0
    l3_octets: int = 0
    start_time: int = 0
    end_time: int = 0
    src_port: int = 0
    dst_port: int = 0
    padding1: int = 0
    tcp_flags: int = 0
    prot_type: int = 0
    tos: int = 0
    src_as_num: int = 0
    dst_as_num: int = 0
    src_mask: int = 0
    dst_mask: int = 0
    padding2: int = 0

    @classmethod
    def from_reader(cls, reader: Reader) -> "FlowRecord":
        """Read a flow record; raises ReaderError if the buffer is too short."""
        return cls(*_FLOW.unpack(reader.read(FLOW_RECORD_LENGTH)))


@dataclass
class Message:
    """A decoded Netflow v5 packet."""

    agent_id: str = ""
    header: PacketHeader = field(default_factory=PacketHeader)
    flows: list[FlowRecord] = field(default_factory=list)


def _format_addr(raddr) -> str:
    if isinstance(raddr, (bytes, bytearray)):
        addr = ipaddress.ip_address(bytes(raddr))
    else:
        addr = ipaddress.ip_address(raddr)
    if isinstance(addr, ipaddress.IPv6Address) and addr.ipv4_mapped is not None:
        addr = addr.ipv4_mapped
    return str(addr)


class Decoder:
    """Decodes one Netflow v5 payload received from ``raddr``."""

    def __init__(self, raddr, data: bytes) -> None:
        self.raddr = raddr
        self._reader = Reader(data)

    def decode(self) -> Message:
        """Decode the packet.

        Raises ReaderError for a truncated header and DecodeError for an
        invalid header or missing flow bytes; in the latter case the error
        carries the message with its header in ``partial``.
        """
        msg = Message(header=PacketHeader.from_reader(self._reader))
        msg.header.validate()
        msg.agent_id = _format_addr(self.raddr)

        expected = msg.header.count * FLOW_RECORD_LENGTH
        remaining = len(self._reader)
        if expected > remaining:
            raise DecodeError(
                f"Expect {expected} bytes to read, "
                f"{remaining} remaining bytes encountered",
                partial=msg,
            )
        msg.flows = [
            FlowRecord.from_reader(self._reader) for _ in range(msg.header.count)
        ]
        return msg