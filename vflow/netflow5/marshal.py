"""JSON encoding of decoded Netflow v5 messages."""

from __future__ import annotations

import ipaddress
import json
from typing import Any

from vflow.netflow5.decoder import FlowRecord, Message, PacketHeader

_HEADER_KEYS = (
    ("Version", "version"),
    ("Count", "count"),
    ("SysUpTimeMSecs", "sys_uptime_msecs"),
    ("UNIXSecs", "unix_secs"),
    ("UNIXNSecs", "unix_nsecs"),
    ("SeqNum", "seq_num"),
    ("EngType", "eng_type"),
    ("EngID", "eng_id"),
    ("SmpInt", "smp_int"),
)

_FLOW_ADDR_KEYS = (
    ("SrcAddr", "src_addr"),
    ("DstAddr", "dst_addr"),
    ("NextHop", "next_hop"),
)

_FLOW_INT_KEYS = (
    ("Input", "input"),
    ("Output", "output"),
    ("PktCount", "pkt_count"),
    ("L3Octets", "l3_octets"),
    ("StartTime", "start_time"),
    ("EndTime", "end_time"),
    ("SrcPort", "src_port"),
    ("DstPort", "dst_port"),
    ("Padding1", "padding1"),
    ("TCPFlags", "tcp_flags"),
    ("ProtType", "prot_type"),
    ("Tos", "tos"),
    ("SrcAsNum", "src_as_num"),
    ("DstAsNum", "dst_as_num"),
    ("SrcMask", "src_mask"),
    ("DstMask", "dst_mask"),
    ("Padding2", "padding2"),
)


def _header_dict(header: PacketHeader) -> dict[str, Any]:
    return {key: int(getattr(header, attr)) for key, attr in _HEADER_KEYS}


def _flow_dict(flow: FlowRecord) -> dict[str, Any]:
    encoded: dict[str, Any] = {
        key: str(ipaddress.IPv4Address(getattr(flow, attr) & 0xFFFFFFFF))
        for key, attr in _FLOW_ADDR_KEYS
    }
    encoded.update({key: int(getattr(flow, attr)) for key, attr in _FLOW_INT_KEYS})
    return encoded


def to_json(message: Message) -> bytes:
    """Encode a decoded message as compact JSON bytes."""
    document = {
        "AgentID": message.agent_id,
        "Header": _header_dict(message.header),
        "Flows": [_flow_dict(flow) for flow in message.flows],
    }
    return json.dumps(document, separators=(",", ":")).encode()