"""The babel Hello TLV."""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass

from mycelium.babel.wire import ByteReader

log = logging.getLogger(__name__)

#: Flag bit marking a Hello sent as unicast.
HELLO_FLAG_UNICAST = 0x8000

# Only these flag bits are meaningful; others are ignored on decode.
_FLAG_MASK = 0x8000

_HELLO_WIRE_SIZE = 6

_LAYOUT = struct.Struct(">HHH")


@dataclass(frozen=True)
class Hello:
    """Hello TLV body: flags, sequence number and interval in centiseconds."""

    flags: int
    seqno: int
    interval: int

    @classmethod
    def new_unicast(cls, seqno: int, interval: int) -> Hello:
        """Create a unicast Hello."""
        return cls(HELLO_FLAG_UNICAST, seqno, interval)

    def wire_size(self) -> int:
        """Size of the TLV body on the wire, without TLV header."""
        return _HELLO_WIRE_SIZE

    @classmethod
    def from_bytes(cls, reader: ByteReader) -> Hello:
        """Decode a Hello body; raises ValueError if too few bytes are left."""
        flags = reader.read_u16() & _FLAG_MASK
        seqno = reader.read_u16()
        interval = reader.read_u16()
        log.debug("Read hello tlv body")
        return cls(flags, seqno, interval)

    def to_bytes(self) -> bytes:
        """Encode this Hello body."""
        return _LAYOUT.pack(self.flags, self.seqno, self.interval)