"""
Data models for the PAC runtime.

This module contains host literal classification and the proxy directive
returned by FindProxyForURL.
"""

from .host import HostKind, IPAddress, classify_host, normalize_host, parse_address, format_address
from .proxy_directive import ProxyKind, ProxyChoice, ProxyDirective, DIRECT, parse_proxy_choice

__all__ = [
    'HostKind',
    'IPAddress',
    'classify_host',
    'normalize_host',
    'parse_address',
    'format_address',
    'ProxyKind',
    'ProxyChoice',
    'ProxyDirective',
    'DIRECT',
    'parse_proxy_choice'
]
