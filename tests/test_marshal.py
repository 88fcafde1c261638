import ipaddress
import json

from vflow.netflow5.decoder import FlowRecord, Message, PacketHeader
from vflow.netflow5.marshal import to_json


def _ip(text):
    return int(ipaddress.IPv4Address(text))


def _message():
    header = PacketHeader(
        version=5, count=1, sys_uptime_msecs=1000, unix_secs=1500000000,
        unix_nsecs=123, seq_num=42, eng_type=1, eng_id=2, smp_int=100,
    )
    flow = FlowRecord(
        src_addr=_ip("192.0.2.10"), dst_addr=_ip("198.51.100.20"),
        next_hop=_ip("203.0.113.1"), input=3, output=4, pkt_count=10,
        l3_octets=1500, start_time=900, end_time=950, src_port=1234,
        dst_port=80, padding1=0, tcp_flags=27, prot_type=6, tos=0,
        src_as_num=65001, dst_as_num=65002, src_mask=24, dst_mask=16,
        padding2=0,
    )
    return Message(agent_id="192.0.2.1", header=header, flows=[flow])


def test_prefix_is_agent_then_header():
    out = to_json(_message())
    assert out.startswith(b'{"AgentID":"192.0.2.1","Header":{"Version":5,')


def test_header_round_trip():
    msg = _message()
    doc = json.loads(to_json(msg))
    assert doc["Header"]["Count"] == msg.header.count
    assert doc["Header"]["UNIXSecs"] == msg.header.unix_secs
    assert doc["Header"]["SmpInt"] == msg.header.smp_int
    assert list(doc["Header"]) == [
        "Version", "Count", "SysUpTimeMSecs", "UNIXSecs", "UNIXNSecs",
        "SeqNum", "EngType", "EngID", "SmpInt",
    ]


def test_flow_addresses_and_fields():
    doc = json.loads(to_json(_message()))
    flow = doc["Flows"][0]
    assert flow["SrcAddr"] == "192.0.2.10"
    assert flow["DstAddr"] == "198.51.100.20"
    assert flow["NextHop"] == "203.0.113.1"
    assert flow["SrcPort"] == 1234
    assert flow["DstAsNum"] == 65002
    assert list(flow)[:4] == ["SrcAddr", "DstAddr", "NextHop", "Input"]
    assert list(flow)[-1] == "Padding2"


def test_multiple_flows_keep_order():
    msg = _message()
    second = FlowRecord(src_port=5555)
    msg.flows.append(second)
    doc = json.loads(to_json(msg))
    assert [f["SrcPort"] for f in doc["Flows"]] == [1234, 5555]
    assert doc["Flows"][1]["SrcAddr"] == "0.0.0.0"


def test_empty_flows():
    msg = Message(agent_id="192.0.2.1", header=PacketHeader(version=5))
    out = to_json(msg)
    assert out.endswith(b'"Flows":[]}')