"""
Name resolution for the PAC function library.

The backends perform lookups; the Resolver applies the PAC timeout, retry
and formatting policy on top of them.
"""

from .backend import ResolverBackend, SystemResolverBackend, CachingResolverBackend
from .resolver import Resolver

__all__ = [
    'ResolverBackend',
    'SystemResolverBackend',
    'CachingResolverBackend',
    'Resolver'
]
