"""
Host literal classification.

Scripts hand the runtime arbitrary strings: hostnames, dotted IPv4, bare or
bracketed IPv6, or garbage. These helpers classify such literals on demand;
nothing is cached because scripts routinely pass throwaway values.
"""

import ipaddress
from enum import Enum
from typing import Optional, Union

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]

MAX_HOSTNAME_LENGTH = 253
MAX_LABEL_LENGTH = 63

_FORBIDDEN_HOST_CHARACTERS = frozenset('/\\@[]')


class HostKind(Enum):
    """Kinds of host literal."""
    IPV4 = "ipv4"
    IPV6 = "ipv6"
    HOSTNAME = "hostname"
    INVALID = "invalid"


def parse_address(literal: str) -> Optional[IPAddress]:
    """
    Parse an IPv4 or IPv6 literal.

    IPv6 may be wrapped in brackets. Anything else, including hostnames and
    shortened IPv4 forms such as "10.1", yields None.
    """
    text = literal.strip()
    if text.startswith('[') and text.endswith(']'):
        try:
            return ipaddress.IPv6Address(text[1:-1])
        except ValueError:
            return None

    try:
        return ipaddress.ip_address(text)
    except ValueError:
        return None


def _is_valid_hostname(text: str) -> bool:
    name = text[:-1] if text.endswith('.') else text
    if not name or len(name) > MAX_HOSTNAME_LENGTH:
        return False

    for char in name:
        if char.isspace() or not char.isprintable() or char in _FORBIDDEN_HOST_CHARACTERS:
            return False

    return all(0 < len(label) <= MAX_LABEL_LENGTH for label in name.split('.'))


def classify_host(literal: str) -> HostKind:
    """Classify a host literal as IPv4, IPv6, hostname or invalid."""
    text = literal.strip()
    if not text:
        return HostKind.INVALID

    address = parse_address(text)
    if address is not None:
        return HostKind.IPV4 if address.version == 4 else HostKind.IPV6

    if _is_valid_hostname(text):
        return HostKind.HOSTNAME
    return HostKind.INVALID


def normalize_host(literal: str) -> str:
    """
    Return the canonical form of a host literal.

    Addresses are rendered in canonical text (brackets dropped), hostnames
    are lower-cased. Invalid literals are only stripped.
    """
    text = literal.strip()
    address = parse_address(text)
    if address is not None:
        return str(address)
    if _is_valid_hostname(text):
        return text.lower()
    return text


def format_address(address: IPAddress) -> str:
    """Canonical text form of an address, without any IPv6 zone suffix."""
    if address.version == 6:
        return str(ipaddress.IPv6Address(address.packed))
    return str(address)
