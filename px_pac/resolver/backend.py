"""
Name resolution and interface enumeration backends.

A backend does the actual lookups; the Resolver adds PAC policy (timeouts,
retries, formatting, sentinels) on top. Backends raise ResolutionFailure on
failure and may block.
"""

import logging
import socket
import threading
import time
from abc import ABC, abstractmethod
from collections import OrderedDict
from contextlib import contextmanager
from typing import Dict, List, Optional, Tuple

import psutil

from ..error_handling.errors import ResolutionFailure
from ..models.host import IPAddress, parse_address

_ADDRESS_FAMILIES = (socket.AF_INET, socket.AF_INET6)


def _parse_socket_address(text: str) -> Optional[IPAddress]:
    # getaddrinfo and psutil report link-local IPv6 with a "%zone" suffix
    return parse_address(text.split('%', 1)[0])


def _unique(addresses: List[IPAddress]) -> List[IPAddress]:
    seen = set()
    result = []
    for address in addresses:
        if address not in seen:
            seen.add(address)
            result.append(address)
    return result


class ResolverBackend(ABC):
    """Capability interface for hostname resolution and local interface discovery."""

    @abstractmethod
    def resolve(self, hostname: str) -> List[IPAddress]:
        """
        Resolve hostname to its addresses in resolver order.

        Raises:
            ResolutionFailure: If the name does not resolve
        """
        pass

    @abstractmethod
    def local_addresses(self) -> List[IPAddress]:
        """
        Addresses configured on this machine's interfaces.

        Raises:
            ResolutionFailure: If the interfaces cannot be enumerated
        """
        pass


class SystemResolverBackend(ResolverBackend):
    """Uses the operating system resolver and psutil interface data."""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def resolve(self, hostname: str) -> List[IPAddress]:
        try:
            infos = socket.getaddrinfo(hostname, None, proto=socket.IPPROTO_TCP)
        except socket.gaierror as e:
            raise ResolutionFailure(f"Could not resolve {hostname}: {e}", hostname) from e
        except (UnicodeError, OSError) as e:
            raise ResolutionFailure(f"Resolver error for {hostname}: {e}", hostname) from e

        addresses = []
        for family, _, _, _, sockaddr in infos:
            if family not in _ADDRESS_FAMILIES:
                continue
            address = _parse_socket_address(sockaddr[0])
            if address is not None:
                addresses.append(address)

        if not addresses:
            raise ResolutionFailure(f"No addresses for {hostname}", hostname)
        return _unique(addresses)

    def local_addresses(self) -> List[IPAddress]:
        try:
            interface_addresses = psutil.net_if_addrs()
            interface_stats = psutil.net_if_stats()
        except (OSError, psutil.Error) as e:
            raise ResolutionFailure(f"Could not enumerate network interfaces: {e}") from e

        addresses = []
        for name, entries in interface_addresses.items():
            stats = interface_stats.get(name)
            if stats is not None and not stats.isup:
                self.logger.debug(f"Skipping interface {name}: down")
                continue
            for entry in entries:
                if entry.family not in _ADDRESS_FAMILIES:
                    continue
                address = _parse_socket_address(entry.address)
                if address is not None:
                    addresses.append(address)

        return _unique(addresses)


class _KeyLock:
    """A per-hostname lock and the number of threads using it."""

    def __init__(self):
        self.lock = threading.Lock()
        self.users = 0


class CachingResolverBackend(ResolverBackend):
    """
    Positive-result TTL cache in front of another backend.

    Each hostname has its own lock, so a slow lookup only delays concurrent
    lookups of the same name. Failures are not cached.
    """

    def __init__(self, backend: ResolverBackend, ttl: float, max_entries: int = 1024):
        self.logger = logging.getLogger(__name__)
        self.backend = backend
        self.ttl = ttl
        self.max_entries = max_entries
        self._entries: "OrderedDict[str, Tuple[float, Tuple[IPAddress, ...]]]" = OrderedDict()
        self._key_locks: Dict[str, _KeyLock] = {}
        self._lock = threading.Lock()

    def resolve(self, hostname: str) -> List[IPAddress]:
        key = hostname.lower()

        cached = self._get_fresh(key)
        if cached is not None:
            return list(cached)

        with self._key_lock(key):
            cached = self._get_fresh(key)
            if cached is not None:
                return list(cached)

            addresses = self.backend.resolve(hostname)
            self._store(key, tuple(addresses))
            return list(addresses)

    def local_addresses(self) -> List[IPAddress]:
        return self.backend.local_addresses()

    def clear(self):
        """Drop every cached entry."""
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    @contextmanager
    def _key_lock(self, key: str):
        """Hold the lock for key; it is discarded once no thread uses it."""
        with self._lock:
            entry = self._key_locks.get(key)
            if entry is None:
                entry = self._key_locks[key] = _KeyLock()
            entry.users += 1

        try:
            with entry.lock:
                yield
        finally:
            with self._lock:
                entry.users -= 1
                if entry.users == 0:
                    del self._key_locks[key]

    def _get_fresh(self, key: str) -> Optional[Tuple[IPAddress, ...]]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires, addresses = entry
            if expires <= time.monotonic():
                del self._entries[key]
                return None
            return addresses

    def _store(self, key: str, addresses: Tuple[IPAddress, ...]):
        with self._lock:
            self._entries[key] = (time.monotonic() + self.ttl, addresses)
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)
