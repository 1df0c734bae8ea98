"""The babel IHU ("I Heard You") TLV."""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass
from ipaddress import IPv4Address, IPv6Address

from mycelium.babel.wire import (
    AddressEncoding,
    ByteReader,
    address_encoding,
    read_prefix_address,
)

log = logging.getLogger(__name__)

_IHU_BASE_WIRE_SIZE = 6

_HEADER = struct.Struct(">BBHH")

# Full address widths in bits for each encoding that carries an address.
_ADDRESS_BITS = {
    AddressEncoding.IPV4: 32,
    AddressEncoding.IPV6: 128,
    AddressEncoding.IPV6_LL: 64,
}


@dataclass(frozen=True)
class Ihu:
    """IHU TLV body: receive cost, interval in centiseconds and optional address."""

    rx_cost: int
    interval: int
    address: IPv4Address | IPv6Address | None = None

    def __post_init__(self) -> None:
        # The receiver derives a hold time from the interval, so 0 is illegal.
        if self.interval == 0:
            raise ValueError("Ihu interval MUST NOT be 0")

    @classmethod
    def _decoded(cls, rx_cost: int, interval: int, address) -> Ihu:
        # Values read from the wire are taken as they are, without validation.
        ihu = object.__new__(cls)
        object.__setattr__(ihu, "rx_cost", rx_cost)
        object.__setattr__(ihu, "interval", interval)
        object.__setattr__(ihu, "address", address)
        return ihu

    def wire_size(self) -> int:
        """Size of the TLV body on the wire, without TLV header."""
        if self.address is None:
            return _IHU_BASE_WIRE_SIZE
        if isinstance(self.address, IPv4Address):
            return _IHU_BASE_WIRE_SIZE + 4
        return _IHU_BASE_WIRE_SIZE + 16

    @classmethod
    def from_bytes(cls, reader: ByteReader, length: int) -> Ihu | None:
        """Decode an IHU body of ``length`` bytes.

        Returns ``None`` for an unknown address encoding, after skipping the
        rest of the body. Raises ValueError if too few bytes are left.
        """
        ae = reader.read_u8()
        reader.read_u8()  # reserved
        rx_cost = reader.read_u16()
        interval = reader.read_u16()

        try:
            encoding = AddressEncoding(ae)
        except ValueError:
            log.debug("Invalid AE type in IHU TLV, drop TLV")
            reader.skip(length - _IHU_BASE_WIRE_SIZE)
            return None

        if encoding is AddressEncoding.WILDCARD:
            address = None
        else:
            address = read_prefix_address(reader, encoding, _ADDRESS_BITS[encoding])

        log.debug("Read ihu tlv body")
        return cls._decoded(rx_cost, interval, address)

    def to_bytes(self) -> bytes:
        """Encode this IHU body."""
        if self.address is None:
            ae = AddressEncoding.WILDCARD
            tail = b""
        else:
            ae = address_encoding(self.address)
            tail = self.address.packed
        return _HEADER.pack(ae, 0, self.rx_cost, self.interval) + tail