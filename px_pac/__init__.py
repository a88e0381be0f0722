"""
px PAC runtime - the PAC function library used to evaluate proxy auto-config scripts.

This package provides the host-side functions a PAC script calls
(shExpMatch, isInNet, dnsResolve, ...), the resolver policy behind them,
and the parser for the proxy directive string FindProxyForURL returns.
"""

__version__ = "1.0.0"
__author__ = "px-pac"
