from datetime import timedelta
from ipaddress import IPv6Address, IPv6Interface

import pytest

from mycelium.babel.codec import Codec, TlvType, tlv_type
from mycelium.babel.hello import Hello
from mycelium.babel.ihu import Ihu
from mycelium.babel.route_request import RouteRequest
from mycelium.babel.seqno_request import SeqNoRequest
from mycelium.babel.update import Update

ROUTER_ID = bytes(range(1, 41))
SUBNET = IPv6Interface((IPv6Address("400:1:2:3::"), 64))


def _roundtrip(item):
    sender = Codec()
    receiver = Codec()
    buffer = bytearray(sender.encode(item))
    decoded = receiver.decode(buffer)
    return decoded, buffer


def test_codec_hello():
    hello = Hello.new_unicast(15, 400)
    decoded, rest = _roundtrip(hello)
    assert decoded == hello
    assert rest == bytearray()


def test_codec_ihu():
    ihu = Ihu(27, 400, None)
    decoded, rest = _roundtrip(ihu)
    assert decoded == ihu
    assert rest == bytearray()


def test_codec_update():
    update = Update.new(timedelta(seconds=400), 16, 25, SUBNET, ROUTER_ID)
    decoded, rest = _roundtrip(update)
    assert decoded == update
    assert rest == bytearray()


def test_codec_seqno_request():
    snr = SeqNoRequest(16, ROUTER_ID, SUBNET)
    decoded, rest = _roundtrip(snr)
    assert decoded == snr
    assert rest == bytearray()


def test_codec_route_request():
    rr = RouteRequest(SUBNET)
    decoded, rest = _roundtrip(rr)
    assert decoded == rr
    assert rest == bytearray()


def test_hello_packet_bytes():
    packet = Codec().encode(Hello.new_unicast(15, 400))
    assert packet == bytes([42, 2, 0, 8, 4, 6, 128, 0, 0, 15, 1, 144])


def test_partial_header_and_body():
    packet = Codec().encode(Hello.new_unicast(15, 400))
    codec = Codec()
    buffer = bytearray(packet[:3])
    assert codec.decode(buffer) is None
    assert len(buffer) == 3
    buffer.extend(packet[3:6])
    assert codec.decode(buffer) is None
    buffer.extend(packet[6:])
    assert codec.decode(buffer) == Hello.new_unicast(15, 400)
    assert len(buffer) == 0


def test_wrong_magic_is_dropped_and_consumed():
    codec = Codec()
    good = codec.encode(Hello.new_unicast(3, 100))
    bad = bytes([0, 2]) + good[2:]
    buffer = bytearray(bad + good)
    assert codec.decode(buffer) is None
    assert bytes(buffer) == good
    assert codec.decode(buffer) == Hello.new_unicast(3, 100)


def test_wrong_version_is_dropped():
    codec = Codec()
    good = codec.encode(Hello.new_unicast(3, 100))
    buffer = bytearray(bytes([42, 1]) + good[2:])
    assert codec.decode(buffer) is None
    assert len(buffer) == 0


def test_unknown_tlv_type_is_dropped():
    codec = Codec()
    buffer = bytearray([42, 2, 0, 4, 99, 2, 0, 0])
    assert codec.decode(buffer) is None
    assert len(buffer) == 0


def test_multiple_packets_in_one_buffer():
    codec = Codec()
    items = [Hello.new_unicast(1, 10), Ihu(5, 20, None), RouteRequest(None)]
    buffer = bytearray(b"".join(codec.encode(item) for item in items))
    decoded = [codec.decode(buffer) for _ in items]
    assert decoded == items
    assert len(buffer) == 0


def test_reset_discards_stored_header():
    codec = Codec()
    packet = codec.encode(Hello.new_unicast(7, 70))
    buffer = bytearray(packet[:5])
    assert codec.decode(buffer) is None
    codec.reset()
    fresh = bytearray(packet)
    assert codec.decode(fresh) == Hello.new_unicast(7, 70)


def test_truncated_body_raises():
    buffer = bytearray([42, 2, 0, 1, 4])
    with pytest.raises(ValueError):
        Codec().decode(buffer)


def test_tlv_type():
    assert tlv_type(Hello.new_unicast(1, 1)) is TlvType.HELLO
    assert tlv_type(RouteRequest(None)) is TlvType.ROUTE_REQUEST
    with pytest.raises(TypeError):
        tlv_type("hello")