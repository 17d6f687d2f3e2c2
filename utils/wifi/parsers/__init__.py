"""Parsers for wireless adapter tool output."""

from __future__ import annotations

from .netsh import parse_netsh_interfaces, parse_netsh_scan

__all__ = ['parse_netsh_interfaces', 'parse_netsh_scan']
