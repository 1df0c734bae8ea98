"""Shared wire primitives for babel TLVs: byte reading and address encodings."""

from __future__ import annotations

from enum import IntEnum
from ipaddress import IPv4Address, IPv6Address

# Magic byte identifying a babel packet.
BABEL_MAGIC = 42
# Protocol version in use.
BABEL_VERSION = 2
# Size of a babel packet header on the wire.
HEADER_WIRE_SIZE = 4

_LINK_LOCAL_PREFIX = b"\xfe\x80" + bytes(6)


class AddressEncoding(IntEnum):
    """Address encodings (AE) used in babel TLVs."""

    #: Wildcard address, no value bytes.
    WILDCARD = 0
    #: IPv4 address, at most 4 bytes.
    IPV4 = 1
    #: IPv6 address, at most 16 bytes.
    IPV6 = 2
    #: Link-local IPv6 address, 8 bytes with an implied fe80::/64 prefix.
    IPV6_LL = 3


class ByteReader:
    """Sequential big-endian reader over a byte string."""

    def __init__(self, data: bytes | bytearray | memoryview) -> None:
        self._data = bytes(data)
        self._pos = 0

    def _take(self, count: int) -> bytes:
        if count < 0:
            raise ValueError("can not read a negative amount of bytes")
        if count > self.remaining():
            raise ValueError(
                f"insufficient bytes: need {count}, have {self.remaining()}"
            )
        chunk = self._data[self._pos : self._pos + count]
        self._pos += count
        return chunk

    def read_u8(self) -> int:
        """Read one unsigned byte."""
        return self._take(1)[0]

    def read_u16(self) -> int:
        """Read a big-endian unsigned 16 bit integer."""
        return int.from_bytes(self._take(2), "big")

    def read_bytes(self, count: int) -> bytes:
        """Read exactly ``count`` bytes."""
        return self._take(count)

    def skip(self, count: int) -> None:
        """Discard ``count`` bytes."""
        self._take(count)

    def remaining(self) -> int:
        """Return the number of unread bytes."""
        return len(self._data) - self._pos


def prefix_bytes(prefix_len: int) -> int:
    """Return how many bytes are needed to hold a prefix of ``prefix_len`` bits."""
    return (prefix_len + 7) // 8


def read_prefix_address(
    reader: ByteReader, encoding: AddressEncoding, prefix_len: int
) -> IPv4Address | IPv6Address | None:
    """Read a (possibly truncated) prefix address in the given encoding.

    Returns ``None`` without consuming bytes if ``prefix_len`` is not valid for
    the encoding. A wildcard yields the unspecified IPv6 address when the
    prefix length is 0.
    """
    encoding = AddressEncoding(encoding)
    if encoding is AddressEncoding.WILDCARD:
        return IPv6Address(0) if prefix_len == 0 else None
    if encoding is AddressEncoding.IPV6_LL:
        if prefix_len != 64:
            return None
        return IPv6Address(_LINK_LOCAL_PREFIX + reader.read_bytes(8))

    width = 4 if encoding is AddressEncoding.IPV4 else 16
    if prefix_len > width * 8:
        return None
    raw = reader.read_bytes(prefix_bytes(prefix_len)).ljust(width, b"\0")
    return IPv4Address(raw) if width == 4 else IPv6Address(raw)


def address_encoding(address: IPv4Address | IPv6Address) -> AddressEncoding:
    """Return the encoding used when writing ``address``."""
    if isinstance(address, IPv4Address):
        return AddressEncoding.IPV4
    if isinstance(address, IPv6Address):
        return AddressEncoding.IPV6
    raise TypeError(f"not an IP address: {address!r}")