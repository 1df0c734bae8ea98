"""The babel Seqno Request TLV."""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass
from ipaddress import IPv4Address, IPv4Interface, IPv6Address, IPv6Interface

from mycelium.babel.wire import (
    AddressEncoding,
    ByteReader,
    address_encoding,
    prefix_bytes,
    read_prefix_address,
)

log = logging.getLogger(__name__)

#: Size of a router id on the wire.
ROUTER_ID_BYTE_SIZE = 40

#: Hop count used in new seqno requests.
DEFAULT_HOP_COUNT = 64

_SEQNO_REQUEST_BASE_WIRE_SIZE = 6 + ROUTER_ID_BYTE_SIZE

_HEADER = struct.Struct(">BBHBB")


def _subnet(
    address: IPv4Address | IPv6Address, prefix_len: int
) -> IPv4Interface | IPv6Interface:
    if isinstance(address, IPv4Address):
        return IPv4Interface((address, prefix_len))
    return IPv6Interface((address, prefix_len))


@dataclass
class SeqNoRequest:
    """Seqno request TLV body for a prefix advertised by a router id."""

    seqno: int
    router_id: bytes
    prefix: IPv4Interface | IPv6Interface
    hop_count: int = DEFAULT_HOP_COUNT

    def __post_init__(self) -> None:
        self.router_id = bytes(self.router_id)
        if len(self.router_id) != ROUTER_ID_BYTE_SIZE:
            raise ValueError(
                f"router id must be {ROUTER_ID_BYTE_SIZE} bytes, "
                f"got {len(self.router_id)}"
            )
        if not 1 <= self.hop_count <= 0xFF:
            raise ValueError(f"hop count must be in 1..255, got {self.hop_count}")

    def decrement_hop_count(self) -> None:
        """Decrease the hop count by one; raises ValueError if it is already 1."""
        if self.hop_count <= 1:
            raise ValueError("Decrementing a hop count of 1 is not allowed")
        self.hop_count -= 1

    def wire_size(self) -> int:
        """Size of the TLV body on the wire, without TLV header."""
        return _SEQNO_REQUEST_BASE_WIRE_SIZE + prefix_bytes(
            self.prefix.network.prefixlen
        )

    @classmethod
    def from_bytes(cls, reader: ByteReader, length: int) -> SeqNoRequest | None:
        """Decode a seqno request body of ``length`` bytes.

        Returns ``None`` for an unknown address encoding (after skipping the
        rest of the body), an invalid prefix or a hop count of 0. Raises
        ValueError if too few bytes are left.
        """
        ae = reader.read_u8()
        plen = reader.read_u8()
        seqno = reader.read_u16()
        hop_count = reader.read_u8()
        reader.read_u8()  # reserved
        router_id = reader.read_bytes(ROUTER_ID_BYTE_SIZE)

        try:
            encoding = AddressEncoding(ae)
        except ValueError:
            log.debug("Invalid AE type in seqno_request packet, drop packet")
            reader.skip(length - _SEQNO_REQUEST_BASE_WIRE_SIZE)
            return None

        address = read_prefix_address(reader, encoding, plen)
        if address is None:
            return None
        try:
            prefix = _subnet(address, plen)
        except ValueError:
            return None

        log.debug("Read seqno_request tlv body")

        if hop_count == 0:
            log.debug("Dropping seqno_request as hop_count field is set to 0")
            return None

        return cls(seqno, router_id, prefix, hop_count)

    def to_bytes(self) -> bytes:
        """Encode this seqno request body."""
        plen = self.prefix.network.prefixlen
        address = self.prefix.ip
        head = _HEADER.pack(
            address_encoding(address), plen, self.seqno, self.hop_count, 0
        )
        return head + self.router_id + address.packed[: prefix_bytes(plen)]