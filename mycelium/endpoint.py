"""Peer endpoints: an address and the protocol used to reach it."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from ipaddress import IPv4Address, IPv6Address

_V4_SOCKET = re.compile(r"([0-9.]+):([0-9]+)")
_V6_SOCKET = re.compile(r"\[([^\[\]]+)\]:([0-9]+)")
_SCOPE_ID = re.compile(r"[0-9]+")

_MAX_PORT = 0xFFFF


class EndpointParseError(ValueError):
    """An endpoint string could not be parsed."""


class MissingProtocolError(EndpointParseError):
    """An address was given without leading protocol information."""

    def __init__(self) -> None:
        super().__init__("missing leading protocol identifier")


class UnknownProtocolError(EndpointParseError):
    """The endpoint uses a protocol that is not supported."""

    def __init__(self) -> None:
        super().__init__("protocol for endpoint is not supported")


class AddressParseError(EndpointParseError):
    """The socket address of the endpoint is malformed."""

    def __init__(self) -> None:
        super().__init__("failed to parse address: invalid socket address syntax")


class Protocol(Enum):
    """Protocol used by an endpoint."""

    TCP = "tcp"
    QUIC = "quic"

    def __str__(self) -> str:
        return self.name.capitalize()


def _parse_port(text: str) -> int:
    port = int(text)
    if port > _MAX_PORT:
        raise ValueError(f"port out of range: {port}")
    return port


def _parse_socket_addr(text: str) -> tuple[IPv4Address | IPv6Address, int]:
    match = _V4_SOCKET.fullmatch(text)
    if match:
        return IPv4Address(match.group(1)), _parse_port(match.group(2))
    match = _V6_SOCKET.fullmatch(text)
    if match:
        host = match.group(1)
        if "%" in host:
            _, scope = host.split("%", 1)
            if not _SCOPE_ID.fullmatch(scope):
                raise ValueError(f"invalid scope id: {scope!r}")
        return IPv6Address(host), _parse_port(match.group(2))
    raise ValueError(f"invalid socket address: {text!r}")


@dataclass(frozen=True)
class Endpoint:
    """An IP address and port, plus the protocol to use when talking to it."""

    proto: Protocol
    ip: IPv4Address | IPv6Address
    port: int

    def __post_init__(self) -> None:
        if not 0 <= self.port <= _MAX_PORT:
            raise ValueError(f"port out of range: {self.port}")

    @classmethod
    def parse(cls, text: str) -> Endpoint:
        """Parse ``proto://address:port``; the protocol name is case insensitive."""
        proto_name, sep, socket_text = text.partition("://")
        if not sep:
            raise MissingProtocolError()
        try:
            proto = Protocol(proto_name.lower())
        except ValueError:
            raise UnknownProtocolError() from None
        try:
            ip, port = _parse_socket_addr(socket_text)
        except ValueError as exc:
            raise AddressParseError() from exc
        return cls(proto, ip, port)

    @property
    def address(self) -> tuple[str, int]:
        """The socket address as a ``(host, port)`` pair."""
        return str(self.ip), self.port

    def _socket_text(self) -> str:
        if isinstance(self.ip, IPv6Address):
            return f"[{self.ip}]:{self.port}"
        return f"{self.ip}:{self.port}"

    def __str__(self) -> str:
        return f"{self.proto} {self._socket_text()}"