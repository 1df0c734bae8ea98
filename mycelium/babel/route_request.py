"""The babel Route Request TLV."""

from __future__ import annotations

import logging
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

_ROUTE_REQUEST_BASE_WIRE_SIZE = 2


def _subnet(
    address: IPv4Address | IPv6Address, prefix_len: int
) -> IPv4Interface | IPv6Interface:
    """Build a subnet keeping the full address; raises ValueError on a bad length."""
    if isinstance(address, IPv4Address):
        return IPv4Interface((address, prefix_len))
    return IPv6Interface((address, prefix_len))


@dataclass(frozen=True)
class RouteRequest:
    """Route request TLV body; a ``None`` prefix requests a full route table dump."""

    prefix: IPv4Interface | IPv6Interface | None = None

    def wire_size(self) -> int:
        """Size of the TLV body on the wire, without TLV header."""
        if self.prefix is None:
            return _ROUTE_REQUEST_BASE_WIRE_SIZE
        return _ROUTE_REQUEST_BASE_WIRE_SIZE + prefix_bytes(
            self.prefix.network.prefixlen
        )

    @classmethod
    def from_bytes(cls, reader: ByteReader, length: int) -> RouteRequest | None:
        """Decode a route request body of ``length`` bytes.

        Returns ``None`` for an unknown address encoding (after skipping the
        rest of the body) or an invalid prefix length. Raises ValueError if
        too few bytes are left.
        """
        ae = reader.read_u8()
        plen = reader.read_u8()

        try:
            encoding = AddressEncoding(ae)
        except ValueError:
            log.debug("Invalid AE type in route_request packet, drop packet")
            reader.skip(length - _ROUTE_REQUEST_BASE_WIRE_SIZE)
            return None

        if encoding is AddressEncoding.WILDCARD:
            prefix = None
        else:
            address = read_prefix_address(reader, encoding, plen)
            if address is None:
                return None
            try:
                prefix = _subnet(address, plen)
            except ValueError:
                prefix = None

        log.debug("Read route_request tlv body")
        return cls(prefix)

    def to_bytes(self) -> bytes:
        """Encode this route request body."""
        if self.prefix is None:
            # Prefix length MUST be 0 for wildcard requests.
            return bytes((AddressEncoding.WILDCARD, 0))
        plen = self.prefix.network.prefixlen
        address = self.prefix.ip
        head = bytes((address_encoding(address), plen))
        return head + address.packed[: prefix_bytes(plen)]