"""Peer connections, their static link costs and byte accounting."""

from __future__ import annotations

import asyncio
import threading
from abc import ABC, abstractmethod
from ipaddress import IPv4Address, IPv6Address, ip_address
from typing import Any

# Added to the measured link cost to account for local packet processing.
PACKET_PROCESSING_COST_IP6_TCP = 10
# Slightly higher than IPv6 so that IPv6 links are preferred.
PACKET_PROCESSING_COST_IP4_TCP = 15
PACKET_PROCESSING_COST_IP6_QUIC = 7
PACKET_PROCESSING_COST_IP4_QUIC = 12


def _host_ip(address: Any) -> IPv4Address | IPv6Address:
    if isinstance(address, tuple):
        address = address[0]
    if isinstance(address, (IPv4Address, IPv6Address)):
        return address
    return ip_address(str(address).split("%", 1)[0])


def _cost(address: Any, ipv4_cost: int, ipv6_cost: int) -> int:
    ip = _host_ip(address)
    if isinstance(ip, IPv4Address) or ip.ipv4_mapped is not None:
        return ipv4_cost
    return ipv6_cost


def tcp_link_cost(address: Any) -> int:
    """Static cost of a TCP link to ``address`` (an IP or a socket address tuple)."""
    return _cost(address, PACKET_PROCESSING_COST_IP4_TCP, PACKET_PROCESSING_COST_IP6_TCP)


def quic_link_cost(address: Any) -> int:
    """Static cost of a QUIC link to ``address`` (an IP or a socket address tuple)."""
    return _cost(
        address, PACKET_PROCESSING_COST_IP4_QUIC, PACKET_PROCESSING_COST_IP6_QUIC
    )


def _format_sockaddr(sockaddr: Any) -> str:
    if not sockaddr:
        raise OSError("socket address is not available")
    host, port = sockaddr[0], sockaddr[1]
    if ":" in str(host):
        return f"[{host}]:{port}"
    return f"{host}:{port}"


class Connection(ABC):
    """A byte stream to a peer."""

    @abstractmethod
    def identifier(self) -> str:
        """Describe the remote end of this connection."""

    @abstractmethod
    def static_link_cost(self) -> int:
        """The static cost of using this connection."""


class TcpConnection(Connection):
    """A TCP connection over an asyncio stream pair."""

    def __init__(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        self._reader = reader
        self._writer = writer

    def identifier(self) -> str:
        local = _format_sockaddr(self._writer.get_extra_info("sockname"))
        peer = _format_sockaddr(self._writer.get_extra_info("peername"))
        return f"TCP {local} <-> {peer}"

    def static_link_cost(self) -> int:
        peer = self._writer.get_extra_info("peername")
        if not peer:
            raise OSError("peer address is not available")
        return tcp_link_cost(peer)

    async def read(self, n: int = -1) -> bytes:
        """Read up to ``n`` bytes; an empty result means end of stream."""
        return await self._reader.read(n)

    def write(self, data: bytes) -> None:
        """Queue ``data`` for sending."""
        self._writer.write(data)

    async def drain(self) -> None:
        """Wait until queued data may be written again."""
        await self._writer.drain()

    async def close(self) -> None:
        """Close the connection."""
        self._writer.close()
        await self._writer.wait_closed()


class ByteCounter:
    """A thread safe byte count that may be shared between connections."""

    def __init__(self, value: int = 0) -> None:
        self._value = value
        self._lock = threading.Lock()

    def add(self, amount: int) -> None:
        """Increase the count by ``amount``."""
        with self._lock:
            self._value += amount

    @property
    def value(self) -> int:
        """The current count."""
        with self._lock:
            return self._value

    def __int__(self) -> int:
        return self.value

    def __repr__(self) -> str:
        return f"ByteCounter({self.value})"


class Tracked(Connection):
    """Wraps a connection and counts the bytes read from and written to it."""

    def __init__(self, read: ByteCounter, write: ByteCounter, con: Any) -> None:
        self.read_counter = read
        self.write_counter = write
        self._con = con

    def identifier(self) -> str:
        return self._con.identifier()

    def static_link_cost(self) -> int:
        return self._con.static_link_cost()

    async def read(self, n: int = -1) -> bytes:
        """Read up to ``n`` bytes from the wrapped connection, counting them."""
        data = await self._con.read(n)
        self.read_counter.add(len(data))
        return data

    def write(self, data: bytes) -> None:
        """Write ``data`` to the wrapped connection, counting it."""
        self._con.write(data)
        self.write_counter.add(len(data))

    async def drain(self) -> None:
        """Drain the wrapped connection."""
        await self._con.drain()

    async def close(self) -> None:
        """Close the wrapped connection."""
        await self._con.close()