import pytest

from vflow.packet.icmp import decode_icmp


def test_decode_icmp_fields():
    data = bytes([8, 0, 0xAB, 0xCD, 1, 2, 3])
    icmp = decode_icmp(data)
    assert icmp.type == data[0]
    assert icmp.code == data[1]
    assert icmp.rest_header == data[4:]


def test_decode_icmp_minimum_length():
    data = bytes([3, 1, 0, 0, 9])
    icmp = decode_icmp(data)
    assert (icmp.type, icmp.code) == (3, 1)
    assert icmp.rest_header == data[4:]


@pytest.mark.parametrize("size", [0, 1, 4])
def test_decode_icmp_short(size):
    with pytest.raises(ValueError, match="ICMP header length is too short"):
        decode_icmp(bytes(size))