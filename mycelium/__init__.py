"""Babel TLV codec, endpoints, route filters, connections and packet encryption for an IPv6 overlay."""

__version__ = "0.1.0"