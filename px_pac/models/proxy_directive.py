"""
Proxy directive model for the value returned by FindProxyForURL.

A directive string looks like "PROXY proxy.corp:8080; SOCKS 10.0.0.1:1080; DIRECT"
and lists upstream choices in failover order.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Tuple

from .host import parse_address
from ..error_handling.errors import ParseError

logger = logging.getLogger(__name__)


class ProxyKind(Enum):
    """Kinds of proxy choice a PAC script may return."""
    DIRECT = "DIRECT"
    PROXY = "PROXY"
    HTTP = "HTTP"
    HTTPS = "HTTPS"
    SOCKS = "SOCKS"
    SOCKS4 = "SOCKS4"
    SOCKS5 = "SOCKS5"


# libcurl proxy scheme prefixes per kind
_CURL_SCHEMES = {
    ProxyKind.PROXY: "",
    ProxyKind.HTTP: "",
    ProxyKind.HTTPS: "https://",
    ProxyKind.SOCKS: "socks5://",
    ProxyKind.SOCKS4: "socks4://",
    ProxyKind.SOCKS5: "socks5://",
}


@dataclass(frozen=True)
class ProxyChoice:
    """
    One entry of a proxy directive.

    Attributes:
        kind: The proxy kind
        host: Proxy host (None for DIRECT)
        port: Proxy port (None for DIRECT)
    """
    kind: ProxyKind
    host: Optional[str] = None
    port: Optional[int] = None

    def __post_init__(self):
        if self.kind == ProxyKind.DIRECT:
            if self.host is not None or self.port is not None:
                raise ValueError("DIRECT takes no host or port")
            return

        if not self.host:
            raise ValueError(f"{self.kind.value} requires a host")
        if self.port is None or not (1 <= self.port <= 65535):
            raise ValueError(f"Invalid port for {self.kind.value}: {self.port}")

    @property
    def is_direct(self) -> bool:
        return self.kind == ProxyKind.DIRECT

    @property
    def address(self) -> str:
        """host:port, bracketing IPv6 hosts."""
        if self.is_direct:
            return ""
        host = f"[{self.host}]" if ':' in self.host else self.host
        return f"{host}:{self.port}"

    def to_curl_proxy(self) -> str:
        """Render as a libcurl proxy string."""
        if self.is_direct:
            return "direct://"
        return _CURL_SCHEMES[self.kind] + self.address

    def __str__(self) -> str:
        if self.is_direct:
            return "DIRECT"
        return f"{self.kind.value} {self.address}"


DIRECT = ProxyChoice(ProxyKind.DIRECT)


def _split_host_port(endpoint: str) -> Tuple[str, int]:
    if endpoint.startswith('['):
        closing = endpoint.find(']')
        if closing == -1 or endpoint[closing + 1:closing + 2] != ':':
            raise ParseError(f"Malformed bracketed proxy address: {endpoint}", endpoint)
        host = endpoint[1:closing]
        port_text = endpoint[closing + 2:]
        address = parse_address(host)
        if address is None or address.version != 6:
            raise ParseError(f"Bracketed proxy host is not IPv6: {host}", endpoint)
    else:
        host, sep, port_text = endpoint.rpartition(':')
        if not sep or not host or ':' in host:
            raise ParseError(f"Proxy address must be host:port: {endpoint}", endpoint)

    if not port_text.isdigit() or not port_text.isascii():
        raise ParseError(f"Proxy port is not a number: {port_text!r}", endpoint)

    port = int(port_text)
    if not (1 <= port <= 65535):
        raise ParseError(f"Proxy port out of range: {port}", endpoint)
    return host, port


def parse_proxy_choice(entry: str) -> ProxyChoice:
    """
    Parse a single directive entry such as "PROXY host:8080" or "DIRECT".

    Raises:
        ParseError: If the entry is not a valid directive
    """
    parts = entry.split()
    if not parts:
        raise ParseError("Empty proxy directive", entry)

    try:
        kind = ProxyKind(parts[0].upper())
    except ValueError:
        raise ParseError(f"Unknown proxy kind: {parts[0]}", entry)

    if kind == ProxyKind.DIRECT:
        if len(parts) != 1:
            raise ParseError(f"DIRECT takes no address: {entry}", entry)
        return DIRECT

    if len(parts) != 2:
        raise ParseError(f"{kind.value} requires exactly one host:port: {entry}", entry)

    host, port = _split_host_port(parts[1])
    return ProxyChoice(kind, host, port)


@dataclass(frozen=True)
class ProxyDirective:
    """
    Ordered, non-empty list of proxy choices in failover order.
    """
    choices: Tuple[ProxyChoice, ...] = (DIRECT,)

    def __post_init__(self):
        if not self.choices:
            raise ValueError("A proxy directive needs at least one choice")

    @classmethod
    def parse(cls, value) -> 'ProxyDirective':
        """
        Parse the string returned by FindProxyForURL.

        Entries are separated by ';'. Parsing stops at the first invalid
        entry; the entries before it are kept. A value with no valid entry
        (empty, non-string or garbage) yields a single DIRECT choice.
        """
        if not isinstance(value, str):
            logger.warning(f"FindProxyForURL returned {type(value).__name__}, using DIRECT")
            return cls()

        choices: List[ProxyChoice] = []
        for entry in value.split(';'):
            entry = entry.strip()
            if not entry:
                continue
            try:
                choices.append(parse_proxy_choice(entry))
            except ParseError as e:
                logger.warning(f"Ignoring proxy directive {entry!r} and anything after it: {e}")
                break

        if not choices:
            if value.strip():
                logger.warning(f"No usable proxy directive in {value!r}, using DIRECT")
            return cls()
        return cls(tuple(choices))

    def to_curl_proxies(self) -> str:
        """Comma-separated libcurl proxy list."""
        return ",".join(choice.to_curl_proxy() for choice in self.choices)

    @property
    def first(self) -> ProxyChoice:
        return self.choices[0]

    def __iter__(self) -> Iterator[ProxyChoice]:
        return iter(self.choices)

    def __len__(self) -> int:
        return len(self.choices)

    def __getitem__(self, index):
        return self.choices[index]

    def __str__(self) -> str:
        return "; ".join(str(choice) for choice in self.choices)
