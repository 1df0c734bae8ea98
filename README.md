# mycelium

Building blocks for an end-to-end encrypted IPv6 overlay network that routes
with a subset of the Babel routing protocol.

## What is in the package

- `mycelium.babel.hello`, `mycelium.babel.ihu`, `mycelium.babel.update`,
  `mycelium.babel.route_request`, `mycelium.babel.seqno_request` – the Babel
  TLVs `Hello`, `Ihu`, `Update`, `RouteRequest` and `SeqNoRequest`. Each has
  `wire_size()`, `to_bytes()` and a `from_bytes(...)` class method that reads
  from a `ByteReader`. Decoding returns `None` for bodies that are to be
  dropped (unknown address encoding, invalid prefix, a hop count of 0) and
  raises `ValueError` when too few bytes are left.
- `mycelium.babel.wire` – `ByteReader`, the `AddressEncoding` enum and helpers
  for prefix addresses (`prefix_bytes`, `read_prefix_address`,
  `address_encoding`).
- `mycelium.babel.codec` – `Codec`, which frames a single TLV per Babel packet.
  `encode(tlv)` returns the packet bytes; `decode(bytearray)` removes one
  packet from the front of the buffer and returns its TLV, or `None` when more
  bytes are needed or the packet was dropped (wrong magic or version, unknown
  TLV type). `TlvType` and `tlv_type()` give the wire type of a TLV.
- `mycelium.interval` – `Interval`, a Babel interval in centiseconds, with
  `from_timedelta()` and `to_timedelta()`.
- `mycelium.endpoint` – `Endpoint` and `Protocol` (`TCP`, `QUIC`).
  `Endpoint.parse()` reads strings such as `tcp://192.0.2.1:9651` or
  `quic://[2001:db8::1]:9651` and raises `MissingProtocolError`,
  `UnknownProtocolError` or `AddressParseError`, all subclasses of
  `EndpointParseError` (itself a `ValueError`).
- `mycelium.filters` – the `RouteUpdateFilter` base class and two filters for
  incoming updates: `MaxSubnetSize` (minimum prefix length) and
  `AllowedSubnet` (announced subnet must lie within a given subnet).
- `mycelium.connection` – the `Connection` base class, `TcpConnection` over an
  asyncio stream pair, `Tracked` which counts bytes read and written into
  shared `ByteCounter`s, and `tcp_link_cost()` / `quic_link_cost()` giving the
  static cost of a link (IPv4 and IPv4-mapped addresses cost more than IPv6).
- `mycelium.crypto` – X25519 `SecretKey` / `PublicKey`, `SharedSecret`, and
  AES-256-GCM encryption of `PacketBuffer`s. Decryption raises
  `DecryptionError` when the data is too short or has been tampered with.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Examples

Framing a TLV:

```python
from mycelium.babel.codec import Codec
from mycelium.babel.hello import Hello

codec = Codec()
hello = Hello.new_unicast(15, 400)
buffer = bytearray(codec.encode(hello))
assert codec.decode(buffer) == hello
assert not buffer
```

Parsing an endpoint:

```python
from mycelium.endpoint import Endpoint, Protocol

endpoint = Endpoint.parse("tcp://192.0.2.1:9651")
assert endpoint.proto is Protocol.TCP
assert endpoint.address == ("192.0.2.1", 9651)
```

Encrypting a packet between two nodes:

```python
from mycelium.crypto import PacketBuffer, PublicKey, SecretKey

alice = SecretKey.generate()
bob = SecretKey.generate()

packet = PacketBuffer()
payload = b"hello overlay"
packet.buffer()[: len(payload)] = payload
packet.set_size(len(payload))

ciphertext = alice.shared_secret(PublicKey.from_secret(bob)).encrypt(packet)
plain = bob.shared_secret(PublicKey.from_secret(alice)).decrypt(ciphertext)
assert plain.data() == payload
```

## What the package does not do

This is a library of parts, not a running node. It has no router, routing or
source tables, peer manager, data plane, TUN device handling or message
stack, and no command to start a node. It does not derive overlay addresses
from public keys, has no filter tying announced subnets to router ids, and
has no QUIC connection type (only the QUIC link cost). Packets carry one TLV
each; a body holding several TLVs is read only up to the first.