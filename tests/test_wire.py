from ipaddress import IPv4Address, IPv6Address

import pytest

from mycelium.babel.wire import (
    AddressEncoding,
    ByteReader,
    address_encoding,
    prefix_bytes,
    read_prefix_address,
)


def _v6(*segments):
    return IPv6Address(b"".join(s.to_bytes(2, "big") for s in segments))


def test_reader_reads_big_endian_fields():
    reader = ByteReader(bytes([128, 0, 0, 19, 2, 1]))
    assert reader.read_u16() == 0x8000
    assert reader.read_u8() == 0
    assert reader.read_u8() == 19
    assert reader.read_bytes(2) == bytes([2, 1])
    assert reader.remaining() == 0


def test_reader_skip_consumes():
    reader = ByteReader(b"abcdef")
    reader.skip(4)
    assert reader.remaining() == 2
    assert reader.read_bytes(2) == b"ef"


def test_reader_insufficient_bytes():
    reader = ByteReader(b"\x01")
    with pytest.raises(ValueError):
        reader.read_u16()
    assert reader.remaining() == 1


def test_reader_negative_count():
    with pytest.raises(ValueError):
        ByteReader(b"abc").skip(-1)


def test_prefix_bytes_covers_prefix_exactly():
    assert prefix_bytes(0) == 0
    for bits in range(1, 129):
        size = prefix_bytes(bits)
        assert size * 8 >= bits
        assert (size - 1) * 8 < bits


def test_read_truncated_ipv4_prefix():
    reader = ByteReader(bytes([10, 15, 19]))
    assert read_prefix_address(reader, AddressEncoding.IPV4, 24) == IPv4Address("10.15.19.0")
    assert reader.remaining() == 0


def test_read_truncated_ipv6_prefix():
    reader = ByteReader(bytes([0, 10, 0, 20, 0, 30, 0, 40]))
    assert read_prefix_address(reader, AddressEncoding.IPV6, 64) == _v6(10, 20, 30, 40, 0, 0, 0, 0)
    assert reader.remaining() == 0


def test_read_link_local():
    reader = ByteReader(bytes([0, 10, 0, 20, 0, 30, 0, 40]))
    assert read_prefix_address(reader, AddressEncoding.IPV6_LL, 64) == _v6(
        0xFE80, 0, 0, 0, 10, 20, 30, 40
    )
    assert reader.remaining() == 0


def test_read_wildcard():
    reader = ByteReader(b"")
    assert read_prefix_address(reader, AddressEncoding.WILDCARD, 0) == _v6(0, 0, 0, 0, 0, 0, 0, 0)
    assert read_prefix_address(reader, AddressEncoding.WILDCARD, 8) is None


@pytest.mark.parametrize(
    "encoding,plen",
    [
        (AddressEncoding.IPV4, 33),
        (AddressEncoding.IPV6, 129),
        (AddressEncoding.IPV6_LL, 48),
    ],
)
def test_invalid_prefix_length_consumes_nothing(encoding, plen):
    reader = ByteReader(bytes(20))
    assert read_prefix_address(reader, encoding, plen) is None
    assert reader.remaining() == 20


def test_unknown_encoding_rejected():
    with pytest.raises(ValueError):
        read_prefix_address(ByteReader(bytes(20)), 4, 64)


def test_address_encoding():
    assert address_encoding(IPv4Address("10.101.4.1")) is AddressEncoding.IPV4
    assert address_encoding(_v6(0xFE80, 0, 0, 0, 10, 20, 30, 40)) is AddressEncoding.IPV6
    with pytest.raises(TypeError):
        address_encoding("10.101.4.1")