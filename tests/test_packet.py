import pytest

from vflow.packet.network import IPv4Header, IPv6Header
from vflow.packet.packet import HeaderProtocol, Packet
from vflow.packet.transport import TCPHeader, UDPHeader

MACS = bytes([0x02, 0x00, 0x00, 0xAA, 0xBB, 0x01, 0x02, 0x00, 0x00, 0xAA, 0xBB, 0x02])

FRAME = MACS + bytes([
    0x81, 0x0, 0x0, 0x7, 0x8, 0x0, 0x45, 0x0, 0x2, 0x6B, 0x95, 0x54, 0x40,
    0x0, 0x3C, 0x6, 0xAB, 0x3B, 0x6C, 0xA1, 0xF8, 0x5E, 0xC0, 0xE5, 0xD6,
    0x17, 0x1F, 0xF7, 0xC5, 0xE5, 0xF, 0xF5, 0x1C, 0x14, 0x68, 0xA4, 0x11,
    0x89, 0x80, 0x18, 0x1, 0x7, 0x35, 0xDC, 0x0, 0x0, 0x1, 0x1, 0x8, 0xA,
    0x17, 0x32, 0x75, 0x97, 0xF8, 0x73, 0x54, 0x15, 0x17, 0x3, 0x3, 0x0,
    0x1A, 0xAD, 0xF8, 0x9D, 0x51, 0x3E, 0xCC, 0x7E, 0x5B, 0x6F, 0xDD, 0x16,
    0x5A, 0xD3, 0xB4, 0x34, 0x7A, 0x4F, 0x8E, 0xC5, 0xA5, 0x5A, 0x3E, 0x8E,
    0xEA, 0x51, 0xB7, 0x17, 0x3, 0x3, 0x0, 0x1C, 0xAD, 0xF8, 0x9D, 0x51,
    0x3E, 0xCC, 0x7E, 0x5C, 0xE0, 0x79, 0xDB, 0x6F, 0x11, 0xC9, 0x50,
    0x2F, 0x5E, 0x3E, 0x15, 0xCF, 0xF5, 0x62,
])

IPV4_UDP = bytes([
    0x45, 0x0, 0x0, 0x4B, 0x8,
    0xF8, 0x0, 0x0, 0x3E, 0x11,
    0x82, 0x91, 0xC0, 0xE5, 0xD8,
    0x8F, 0xC0, 0xE5, 0x96, 0xBE,
    0x64, 0x9B, 0x0, 0x35, 0x0, 0x3D, 0x0, 0x0,
])


def test_decode_ethernet_ipv4_tcp():
    p = Packet().decode(FRAME, HeaderProtocol.ETHERNET)
    assert p.l2.vlan == 7
    assert p.l2.ether_type == 0x0800
    assert p.l2.src_mac == "02:00:00:aa:bb:02"
    assert isinstance(p.l3, IPv4Header)
    assert p.l3.protocol == 6
    assert p.l3.total_len == 619
    assert p.l3.src == "108.161.248.94"
    assert p.l3.dst == "192.229.214.23"
    assert p.l4 == TCPHeader(src_port=8183, dst_port=50661, data_offset=8, reserved=0, flags=24)
    assert len(p.data) == len(FRAME) - 18 - 20 - 20


def test_decode_ipv4_udp():
    p = Packet().decode(IPV4_UDP, HeaderProtocol.IPV4)
    assert p.l3.src == "192.229.216.143"
    assert p.l4 == UDPHeader(src_port=25755, dst_port=53)
    assert p.data == b""


def test_decode_ipv6_udp():
    addr = bytes.fromhex("20010db8000000000000000000000001")
    data = bytes([0x60, 0, 0, 0, 0, 8, 17, 64]) + addr + addr + bytes([0, 53, 0, 53, 0, 8, 0, 0])
    p = Packet().decode(data, HeaderProtocol.IPV6)
    assert isinstance(p.l3, IPv6Header)
    assert p.l3.src == "2001:db8::1"
    assert p.l4 == UDPHeader(src_port=53, dst_port=53)


def test_unknown_header_protocol():
    with pytest.raises(ValueError, match="unknown header protocol"):
        Packet().decode(IPV4_UDP, 99)


def test_unknown_ether_type():
    frame = MACS + bytes([0x08, 0x06]) + bytes(28)
    p = Packet()
    with pytest.raises(ValueError, match="unknown ether type"):
        p.decode(frame, HeaderProtocol.ETHERNET)
    assert p.l2.ether_type == 0x0806


def test_partial_state_kept_on_error():
    p = Packet()
    with pytest.raises(ValueError, match="short UDP header length"):
        p.decode(IPV4_UDP[:25], HeaderProtocol.IPV4)
    assert p.l3.ttl == 62
    assert p.l4 is None