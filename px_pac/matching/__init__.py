"""
Pure matching predicates used by the PAC function library.
"""

from .wildcard import shell_expression_match
from .domain import dns_domain_is, dns_domain_levels, is_plain_host_name, local_host_or_domain_is
from .network import NetworkMatcher, masked_equal, parse_dotted_quad, parse_prefix, prefix_mask

__all__ = [
    'shell_expression_match',
    'dns_domain_is',
    'dns_domain_levels',
    'is_plain_host_name',
    'local_host_or_domain_is',
    'NetworkMatcher',
    'masked_equal',
    'parse_dotted_quad',
    'parse_prefix',
    'prefix_mask'
]
