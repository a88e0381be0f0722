"""
Network membership tests for isInNet and isInNetEx.

Masks are applied byte by byte to the packed address, so a non-contiguous
legacy mask such as 255.0.255.0 is honoured exactly as written.
"""

import ipaddress
import logging
from typing import Optional, Tuple

from ..error_handling import ErrorManager, ParseError, get_error_manager
from ..models.host import IPAddress, parse_address


def masked_equal(address: bytes, network: bytes, mask: bytes) -> bool:
    """(address & mask) == (network & mask) over equal-length byte strings."""
    if not (len(address) == len(network) == len(mask)):
        return False
    return all((a & m) == (n & m) for a, n, m in zip(address, network, mask))


def prefix_mask(version: int, prefix_length: int) -> bytes:
    """Packed netmask for a prefix length."""
    bits = 32 if version == 4 else 128
    if not (0 <= prefix_length <= bits):
        raise ParseError(f"Prefix length {prefix_length} out of range for IPv{version}")
    value = ((1 << prefix_length) - 1) << (bits - prefix_length)
    return value.to_bytes(bits // 8, 'big')


def parse_dotted_quad(literal: str) -> ipaddress.IPv4Address:
    """
    Parse a dotted-quad IPv4 literal.

    Raises:
        ParseError: If the literal is not a four-part IPv4 address
    """
    try:
        return ipaddress.IPv4Address(literal.strip())
    except ValueError as e:
        raise ParseError(f"Not a dotted-quad IPv4 literal: {literal!r}", literal) from e


def parse_prefix(literal: str) -> Tuple[IPAddress, int]:
    """
    Parse CIDR notation "address/prefixLength" for either family.

    Raises:
        ParseError: If the address or the prefix length is malformed
    """
    address_text, sep, length_text = literal.strip().partition('/')
    if not sep:
        raise ParseError(f"Missing prefix length: {literal!r}", literal)

    address = parse_address(address_text)
    if address is None:
        raise ParseError(f"Not an IP address: {address_text!r}", literal)

    if not length_text.isascii() or not length_text.isdigit():
        raise ParseError(f"Prefix length is not a number: {length_text!r}", literal)

    prefix_length = int(length_text)
    if prefix_length > address.max_prefixlen:
        raise ParseError(f"Prefix length {prefix_length} out of range for IPv{address.version}", literal)
    return address, prefix_length


class NetworkMatcher:
    """
    Implements isInNet and isInNetEx on top of a resolver.

    The resolver must offer resolve_addresses(host) returning a list of
    addresses (empty on failure) and answering IP literals without DNS.
    """

    def __init__(self, resolver, error_manager: Optional[ErrorManager] = None):
        self.logger = logging.getLogger(__name__)
        self.resolver = resolver
        self.error_manager = error_manager or get_error_manager()

    def is_in_net(self, host: str, pattern: str, mask: str) -> bool:
        """
        True if the IPv4 address of host lies in pattern/mask.

        host is resolved like dnsResolve: only its first address counts and
        it must be IPv4.
        """
        try:
            network = parse_dotted_quad(pattern)
            netmask = parse_dotted_quad(mask)
        except ParseError as e:
            self.error_manager.handle_parse_error(f"isInNet: {e}")
            return False

        addresses = self.resolver.resolve_addresses(host)
        if not addresses:
            return False

        address = addresses[0]
        if address.version != 4:
            self.logger.debug(f"isInNet: {host} resolved to non-IPv4 address {address}")
            return False

        return masked_equal(address.packed, network.packed, netmask.packed)

    def is_in_net_ex(self, host: str, prefix: str) -> bool:
        """
        True if any address of host in the prefix's family lies in the prefix.

        host may be an IPv4/IPv6 literal or a name; prefix is CIDR notation.
        """
        try:
            network, prefix_length = parse_prefix(prefix)
            netmask = prefix_mask(network.version, prefix_length)
        except ParseError as e:
            self.error_manager.handle_parse_error(f"isInNetEx: {e}")
            return False

        for address in self.resolver.resolve_addresses(host):
            if address.version == network.version and masked_equal(address.packed, network.packed, netmask):
                return True
        return False
