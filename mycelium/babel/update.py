"""The babel Update TLV."""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass
from datetime import timedelta
from ipaddress import IPv4Address, IPv4Interface, IPv6Address, IPv6Interface

from mycelium.babel.seqno_request import ROUTER_ID_BYTE_SIZE
from mycelium.babel.wire import (
    AddressEncoding,
    ByteReader,
    address_encoding,
    prefix_bytes,
    read_prefix_address,
)
from mycelium.interval import Interval

log = logging.getLogger(__name__)

#: Flag bit indicating an Update establishes a new default prefix.
UPDATE_FLAG_PREFIX = 0x80
#: Flag bit indicating an Update establishes a new default router id.
UPDATE_FLAG_ROUTER_ID = 0x40

# Only these flag bits are meaningful; others are ignored on decode.
_FLAG_MASK = 0b1100_0000

# ae, flags, plen, omitted, interval, seqno, metric
_HEADER = struct.Struct(">BBBBHHH")

_UPDATE_BASE_WIRE_SIZE = _HEADER.size + ROUTER_ID_BYTE_SIZE


def _subnet(
    address: IPv4Address | IPv6Address, prefix_len: int
) -> IPv4Interface | IPv6Interface:
    """Build a subnet keeping the full address; raises ValueError on a bad length."""
    if isinstance(address, IPv4Address):
        return IPv4Interface((address, prefix_len))
    return IPv6Interface((address, prefix_len))


@dataclass(frozen=True)
class Update:
    """Update TLV body announcing a subnet reachable through a router id.

    ``interval`` is kept in centiseconds, as on the wire.
    """

    flags: int
    interval: int
    seqno: int
    metric: int
    subnet: IPv4Interface | IPv6Interface
    router_id: bytes

    def __post_init__(self) -> None:
        router_id = bytes(self.router_id)
        if len(router_id) != ROUTER_ID_BYTE_SIZE:
            raise ValueError(
                f"router id must be {ROUTER_ID_BYTE_SIZE} bytes, got {len(router_id)}"
            )
        object.__setattr__(self, "router_id", router_id)

    @classmethod
    def new(
        cls,
        interval: timedelta,
        seqno: int,
        metric: int,
        subnet: IPv4Interface | IPv6Interface,
        router_id: bytes,
    ) -> Update:
        """Create an Update without flags; the interval is truncated to centiseconds."""
        return cls(
            0,
            int(Interval.from_timedelta(interval)),
            seqno,
            metric,
            subnet,
            router_id,
        )

    def interval_duration(self) -> timedelta:
        """Time until a new Update for the subnet is expected at the latest."""
        return Interval(self.interval).to_timedelta()

    def wire_size(self) -> int:
        """Size of the TLV body on the wire, without TLV header."""
        return _UPDATE_BASE_WIRE_SIZE + prefix_bytes(self.subnet.network.prefixlen)

    @classmethod
    def from_bytes(cls, reader: ByteReader, length: int) -> Update | None:
        """Decode an Update body of ``length`` bytes.

        Returns ``None`` for an unknown address encoding (after skipping the
        rest of the body) or an invalid prefix. Raises ValueError if too few
        bytes are left.
        """
        ae, flags, plen, _omitted, interval, seqno, metric = _HEADER.unpack(
            reader.read_bytes(_HEADER.size)
        )
        flags &= _FLAG_MASK

        try:
            encoding = AddressEncoding(ae)
        except ValueError:
            log.debug("Invalid AE type in update packet, drop packet")
            reader.skip(length - _HEADER.size)
            return None

        address = read_prefix_address(reader, encoding, plen)
        if address is None:
            return None
        try:
            subnet = _subnet(address, plen)
        except ValueError:
            return None

        router_id = reader.read_bytes(ROUTER_ID_BYTE_SIZE)

        log.debug("Read update tlv body")
        return cls(flags, interval, seqno, metric, subnet, router_id)

    def to_bytes(self) -> bytes:
        """Encode this Update body."""
        plen = self.subnet.network.prefixlen
        address = self.subnet.ip
        head = _HEADER.pack(
            address_encoding(address),
            self.flags,
            plen,
            0,
            self.interval,
            self.seqno,
            self.metric,
        )
        return head + address.packed[: prefix_bytes(plen)] + self.router_id