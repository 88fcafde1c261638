import struct

import pytest

from vflow.netflow5.decoder import (
    DecodeError,
    Decoder,
    FlowRecord,
    Message,
    PacketHeader,
)
from vflow.reader import Reader, ReaderError

HEADER_FMT = ">HHIIIIBBH"
FLOW_FMT = ">IIIHHIIIIHHBBBBHHBBH"

FLOW_VALUES = (
    0xC0000201, 0xC0000202, 0xC0000203, 7, 9, 100, 6400, 1000, 2000,
    41836, 53, 0, 16, 17, 4, 65001, 65002, 24, 16, 0,
)


def header_bytes(version=5, count=1):
    return struct.pack(HEADER_FMT, version, count, 123456, 1500000000, 42, 77, 1, 2, 3)


def flow_bytes(values=FLOW_VALUES):
    return struct.pack(FLOW_FMT, *values)


def test_header_and_flow_consume_fixed_sizes():
    r = Reader(header_bytes() + flow_bytes())
    PacketHeader.from_reader(r)
    assert r.read_count() == 24
    FlowRecord.from_reader(r)
    assert r.read_count() == 24 + 48


def test_header_from_reader_round_trip():
    r = Reader(header_bytes(count=2))
    h = PacketHeader.from_reader(r)
    assert h == PacketHeader(5, 2, 123456, 1500000000, 42, 77, 1, 2, 3)
    assert r.read_count() == 24


def test_flow_record_from_reader_round_trip():
    r = Reader(flow_bytes())
    fr = FlowRecord.from_reader(r)
    assert fr == FlowRecord(*FLOW_VALUES)
    assert fr.src_port == 41836
    assert fr.dst_port == 53
    assert len(r) == 0


def test_decode_single_flow():
    msg = Decoder("192.0.2.1", header_bytes() + flow_bytes()).decode()
    assert isinstance(msg, Message)
    assert msg.agent_id == "192.0.2.1"
    assert msg.header.version == 5
    assert msg.header.count == 1
    assert msg.flows == [FlowRecord(*FLOW_VALUES)]


def test_decode_many_flows_in_order():
    values = [FLOW_VALUES[:5] + (i,) + FLOW_VALUES[6:] for i in range(30)]
    data = header_bytes(count=30) + b"".join(flow_bytes(v) for v in values)
    msg = Decoder("2001:db8::1", data).decode()
    assert [f.pkt_count for f in msg.flows] == list(range(30))
    assert msg.agent_id == "2001:db8::1"


def test_agent_id_from_mapped_bytes():
    raw = bytes(10) + b"\xff\xff" + bytes([127, 0, 0, 1])
    msg = Decoder(raw, header_bytes() + flow_bytes()).decode()
    assert msg.agent_id == "127.0.0.1"


def test_decode_no_data():
    with pytest.raises(ReaderError):
        Decoder("127.0.0.1", b"").decode()


def test_invalid_version():
    with pytest.raises(DecodeError) as exc:
        Decoder("127.0.0.1", header_bytes(version=9) + flow_bytes()).decode()
    assert str(exc.value) == "invalid netflow version, (expected: 5) (received: 9)"


@pytest.mark.parametrize("count", [0, 31])
def test_count_out_of_bounds(count):
    with pytest.raises(DecodeError, match="flow count out of bounds"):
        PacketHeader(version=5, count=count).validate()


def test_missing_flow_bytes_keeps_partial_message():
    data = header_bytes(count=2) + flow_bytes()
    with pytest.raises(DecodeError) as exc:
        Decoder("127.0.0.1", data).decode()
    assert str(exc.value) == "Expect 96 bytes to read, 48 remaining bytes encountered"
    assert exc.value.partial.header.count == 2
    assert exc.value.partial.flows == []
    assert exc.value.partial.agent_id == "127.0.0.1"