"""Filters judging route updates received from peers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from ipaddress import (
    IPv4Interface,
    IPv4Network,
    IPv6Interface,
    IPv6Network,
    ip_network,
)

from mycelium.babel.update import Update


def _as_network(
    subnet: IPv4Interface | IPv6Interface | IPv4Network | IPv6Network | str,
) -> IPv4Network | IPv6Network:
    if isinstance(subnet, (IPv4Interface, IPv6Interface)):
        return subnet.network
    return ip_network(subnet, strict=False)


class RouteUpdateFilter(ABC):
    """Judges incoming updates; only allowed updates reach the router."""

    @abstractmethod
    def allow(self, update: Update) -> bool:
        """Return whether ``update`` passes this filter."""


@dataclass(frozen=True)
class MaxSubnetSize(RouteUpdateFilter):
    """Allow only subnets of at most a given size, i.e. a prefix length of at least ``min_prefix_len``."""

    min_prefix_len: int

    def allow(self, update: Update) -> bool:
        return update.subnet.network.prefixlen >= self.min_prefix_len


class AllowedSubnet(RouteUpdateFilter):
    """Allow only updates whose subnet lies within the configured subnet."""

    def __init__(
        self,
        subnet: IPv4Interface | IPv6Interface | IPv4Network | IPv6Network | str,
    ) -> None:
        self.subnet = _as_network(subnet)

    def allow(self, update: Update) -> bool:
        announced = update.subnet.network
        if announced.version != self.subnet.version:
            return False
        return announced.subnet_of(self.subnet)

    def __repr__(self) -> str:
        return f"AllowedSubnet({self.subnet})"