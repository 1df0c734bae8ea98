from ipaddress import ip_interface

import pytest

from mycelium.babel.seqno_request import ROUTER_ID_BYTE_SIZE, SeqNoRequest
from mycelium.babel.wire import ByteReader


def decode(data):
    reader = ByteReader(bytes(data))
    return SeqNoRequest.from_bytes(reader, len(data)), reader


def test_encoding_ipv6():
    snr = SeqNoRequest(
        seqno=17,
        hop_count=64,
        prefix=ip_interface("200:19:1a:1b:1c::1d/64"),
        router_id=bytes([1] * ROUTER_ID_BYTE_SIZE),
    )
    out = snr.to_bytes()
    assert len(out) == 54
    assert list(out) == [2, 64, 0, 17, 64, 0] + [1] * 40 + [2, 0, 0, 25, 0, 26, 0, 27]
    assert snr.wire_size() == 54


def test_encoding_ipv4():
    snr = SeqNoRequest(
        seqno=170,
        hop_count=111,
        prefix=ip_interface("10.101.4.1/32"),
        router_id=bytes([2] * ROUTER_ID_BYTE_SIZE),
    )
    out = snr.to_bytes()
    assert len(out) == 50
    assert list(out) == [1, 32, 0, 170, 111, 0] + [2] * 40 + [10, 101, 4, 1]


def test_decoding_wildcard():
    snr, reader = decode([0, 0, 0, 0, 1, 0] + [3] * 40)
    assert snr == SeqNoRequest(
        seqno=0,
        hop_count=1,
        prefix=ip_interface("::/0"),
        router_id=bytes([3] * 40),
    )
    assert reader.remaining() == 0


def test_decoding_link_local():
    snr, reader = decode([3, 64, 0, 42, 232, 0] + [4] * 40 + [0, 10, 0, 20, 0, 30, 0, 40])
    assert snr == SeqNoRequest(
        seqno=42,
        hop_count=232,
        prefix=ip_interface("fe80::a:14:1e:28/64"),
        router_id=bytes([4] * 40),
    )
    assert reader.remaining() == 0


def test_decode_ignores_invalid_ae_encoding():
    data = [4, 64, 0, 0, 44, 0] + [5] * 40 + list(range(6, 22))
    snr, reader = decode(data)
    assert snr is None
    assert reader.remaining() == 0


def test_decode_ignores_invalid_hop_count():
    data = [3, 64, 92, 0, 0, 0] + [4] * 40 + [0, 10, 0, 20, 0, 30, 0, 40]
    snr, reader = decode(data)
    assert snr is None
    assert reader.remaining() == 0


def test_decode_rejects_wildcard_with_prefix_length():
    snr, _ = decode([0, 8, 0, 0, 1, 0] + [3] * 40)
    assert snr is None


def test_roundtrip():
    src = SeqNoRequest(64, bytes([6] * 40), ip_interface("21f:4025:abcd:dead::/64"))
    data = src.to_bytes()
    reader = ByteReader(data)
    decoded = SeqNoRequest.from_bytes(reader, len(data))
    assert decoded == src
    assert reader.remaining() == 0


def test_default_hop_count_and_decrement():
    snr = SeqNoRequest(1, bytes(40), ip_interface("400::/64"))
    assert snr.hop_count == 64
    snr.decrement_hop_count()
    assert snr.hop_count == 63


def test_decrement_hop_count_of_one_fails():
    snr = SeqNoRequest(1, bytes(40), ip_interface("400::/64"), hop_count=1)
    with pytest.raises(ValueError):
        snr.decrement_hop_count()


def test_rejects_bad_router_id_length():
    with pytest.raises(ValueError):
        SeqNoRequest(1, bytes(10), ip_interface("400::/64"))


def test_rejects_zero_hop_count():
    with pytest.raises(ValueError):
        SeqNoRequest(1, bytes(40), ip_interface("400::/64"), hop_count=0)