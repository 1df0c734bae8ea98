"""Framing of whole babel packets carrying a single TLV."""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import Union

from mycelium.babel.hello import Hello
from mycelium.babel.ihu import Ihu
from mycelium.babel.route_request import RouteRequest
from mycelium.babel.seqno_request import SeqNoRequest
from mycelium.babel.update import Update
from mycelium.babel.wire import (
    BABEL_MAGIC,
    BABEL_VERSION,
    HEADER_WIRE_SIZE,
    ByteReader,
)

log = logging.getLogger(__name__)

#: Any TLV that can travel in a babel packet body.
Tlv = Union[Hello, Ihu, Update, RouteRequest, SeqNoRequest]

_HEADER = struct.Struct(">BBH")
_TLV_HEADER_SIZE = 2


class TlvType(IntEnum):
    """TLV type identifiers on the wire."""

    HELLO = 4
    IHU = 5
    UPDATE = 8
    ROUTE_REQUEST = 9
    SEQNO_REQUEST = 10


_TYPES = {
    Hello: TlvType.HELLO,
    Ihu: TlvType.IHU,
    Update: TlvType.UPDATE,
    RouteRequest: TlvType.ROUTE_REQUEST,
    SeqNoRequest: TlvType.SEQNO_REQUEST,
}


def tlv_type(item: Tlv) -> TlvType:
    """Return the wire type of a TLV; raises TypeError for anything else."""
    for cls, kind in _TYPES.items():
        if isinstance(item, cls):
            return kind
    raise TypeError(f"not a babel TLV: {item!r}")


@dataclass(frozen=True)
class _Header:
    magic: int
    version: int
    body_length: int


class Codec:
    """Stateful encoder and decoder of babel packets.

    ``decode`` consumes complete packets from the front of a ``bytearray``
    and keeps a partially received header between calls.
    """

    def __init__(self) -> None:
        self._header: _Header | None = None

    def reset(self) -> None:
        """Forget any partially decoded packet."""
        self._header = None

    def decode(self, buffer: bytearray) -> Tlv | None:
        """Decode one packet from ``buffer``, removing the bytes it used.

        Returns ``None`` when more bytes are needed, or when a packet was
        dropped (wrong magic or version, unknown TLV type, invalid TLV
        contents). Raises ValueError for a body too short for its TLV.
        """
        header = self._header
        self._header = None
        if header is None:
            if len(buffer) < HEADER_WIRE_SIZE:
                log.debug("Insufficient bytes to read a babel header")
                return None
            header = _Header(*_HEADER.unpack_from(buffer))
            del buffer[:HEADER_WIRE_SIZE]

        if len(buffer) < header.body_length:
            log.debug("Insufficient bytes to read babel body")
            self._header = header
            return None

        body = bytes(buffer[: header.body_length])
        del buffer[: header.body_length]

        if header.magic != BABEL_MAGIC or header.version != BABEL_VERSION:
            log.debug("Dropping babel packet with wrong magic or version")
            return None

        if len(body) < _TLV_HEADER_SIZE:
            raise ValueError("babel body too short to hold a TLV header")

        kind, length = body[0], body[1]
        reader = ByteReader(body[_TLV_HEADER_SIZE:])
        try:
            kind = TlvType(kind)
        except ValueError:
            log.debug("Dropping unrecognized tlv")
            return None

        if kind is TlvType.HELLO:
            return Hello.from_bytes(reader)
        if kind is TlvType.IHU:
            return Ihu.from_bytes(reader, length)
        if kind is TlvType.UPDATE:
            return Update.from_bytes(reader, length)
        if kind is TlvType.ROUTE_REQUEST:
            return RouteRequest.from_bytes(reader, length)
        return SeqNoRequest.from_bytes(reader, length)

    def encode(self, item: Tlv) -> bytes:
        """Encode ``item`` as a complete babel packet."""
        kind = tlv_type(item)
        size = item.wire_size()
        return (
            _HEADER.pack(BABEL_MAGIC, BABEL_VERSION, size + _TLV_HEADER_SIZE)
            + bytes((kind, size))
            + item.to_bytes()
        )