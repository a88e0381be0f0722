"""
PAC resolution policy: dnsResolve, dnsResolveEx, isResolvable(Ex),
myIpAddress(Ex) and sortIpAddressList.

Lookups run on a bounded worker pool and every attempt is bounded by a
timeout, so a stalled name cannot hold up the request that asked for it for
longer than the configured budget. Lookups of the same name share one
in-flight task, so a stalled name occupies a single worker no matter how
often it is asked for. Every public method degrades to its sentinel value
instead of raising.
"""

import logging
import re
import threading
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any, Callable, Dict, List, Optional

from ..config.settings import RuntimeSettings
from ..error_handling import (
    ErrorManager, ParseError, ResolutionFailure, ResolutionTimeout,
    RetryCancelled, RetryManager, RetryPolicy, FixedBackoff, ExponentialBackoff,
    get_error_manager
)
from ..models.host import HostKind, IPAddress, classify_host, format_address, normalize_host, parse_address
from .backend import CachingResolverBackend, ResolverBackend, SystemResolverBackend

_ADDRESS_LIST_SEPARATORS = re.compile(r'[\s;]+')

# in-flight key for interface enumeration; never a valid hostname
_LOCAL_ADDRESSES_KEY = "<local addresses>"


def _is_public_interface_address(address: IPAddress) -> bool:
    return not (address.is_loopback or address.is_link_local or address.is_unspecified)


class Resolver:
    """
    Wraps a ResolverBackend with PAC formatting, timeout and failure policy.
    """

    def __init__(self,
                 backend: Optional[ResolverBackend] = None,
                 timeout: float = 2.0,
                 retry_policy: Optional[RetryPolicy] = None,
                 max_workers: int = 8,
                 fallback_address: str = "127.0.0.1",
                 error_manager: Optional[ErrorManager] = None):
        """
        Initialize the resolver.

        Args:
            backend: Lookup backend (system resolver if None)
            timeout: Seconds allowed per lookup attempt
            retry_policy: Policy shared by all lookups; by default only
                timeouts are retried, once
            max_workers: Size of the lookup worker pool
            fallback_address: What myIpAddress returns when nothing qualifies
            error_manager: Where failures are reported
        """
        self.logger = logging.getLogger(__name__)
        self.backend = backend if backend is not None else SystemResolverBackend()
        self.timeout = timeout
        self.fallback_address = fallback_address
        self.error_manager = error_manager or get_error_manager()
        self.retry_policy = retry_policy or RetryPolicy(
            max_attempts=2,
            base_delay=0.1,
            retry_on_exceptions=[ResolutionTimeout]
        )
        self.retry_manager = RetryManager(self.retry_policy)
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="px-pac-resolver")
        self._inflight: Dict[str, Future] = {}
        self._inflight_lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: RuntimeSettings,
                      backend: Optional[ResolverBackend] = None,
                      error_manager: Optional[ErrorManager] = None) -> 'Resolver':
        """Build a resolver from runtime settings."""
        backend = backend if backend is not None else SystemResolverBackend()
        if settings.dns_cache_ttl > 0:
            backend = CachingResolverBackend(backend, settings.dns_cache_ttl, settings.dns_cache_size)

        if settings.retry_backoff == "exponential":
            backoff = ExponentialBackoff(max_delay=settings.resolve_timeout)
        else:
            backoff = FixedBackoff(settings.retry_delay)

        policy = RetryPolicy(
            max_attempts=settings.resolve_attempts,
            base_delay=settings.retry_delay,
            backoff_strategy=backoff,
            retry_on_exceptions=[ResolutionTimeout]
        )
        return cls(
            backend=backend,
            timeout=settings.resolve_timeout,
            retry_policy=policy,
            max_workers=settings.max_workers,
            fallback_address=settings.fallback_address,
            error_manager=error_manager
        )

    def close(self):
        """Abandon queued lookups and release the worker pool."""
        self.retry_manager.cancel_all()
        self._executor.shutdown(wait=False, cancel_futures=True)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    # Lookup plumbing

    def _shared_future(self, key: str, func: Callable[..., Any], *args) -> Future:
        """
        The pending future for key, submitting func only if none is in flight.

        Concurrent callers and retry attempts for the same key wait on one
        task, so a stalled lookup holds at most one worker.
        """
        with self._inflight_lock:
            future = self._inflight.get(key)
            if future is not None and not future.done():
                return future

            future = self._executor.submit(func, *args)
            self._inflight[key] = future

        def _forget(done: Future):
            with self._inflight_lock:
                if self._inflight.get(key) is done:
                    del self._inflight[key]

        future.add_done_callback(_forget)
        return future

    def _call_bounded(self, key: str, func: Callable[..., Any], *args, description: str) -> Any:
        try:
            future = self._shared_future(key, func, *args)
        except RuntimeError as e:
            raise ResolutionFailure(f"Resolver is closed, cannot {description}") from e

        try:
            return future.result(timeout=self.timeout)
        except FutureTimeoutError:
            # only succeeds while still queued; a running lookup stays shared
            future.cancel()
            raise ResolutionTimeout(f"Timed out after {self.timeout}s trying to {description}")
        except CancelledError:
            raise ResolutionTimeout(f"Lookup was abandoned while trying to {description}")
        except ResolutionFailure:
            raise
        except Exception as e:
            raise ResolutionFailure(f"Backend failed to {description}: {e}") from e

    def _lookup(self, host: str) -> List[IPAddress]:
        address = parse_address(host)
        if address is not None:
            return [address]

        if classify_host(host) != HostKind.HOSTNAME:
            raise ParseError(f"Malformed hostname: {host!r}", host)

        name = normalize_host(host)
        return self.retry_manager.retry(
            lambda: list(self._call_bounded(name, self.backend.resolve, name, description=f"resolve {name}")),
            operation_name=f"resolve {name}"
        )

    def resolve_addresses(self, host: str) -> List[IPAddress]:
        """
        Addresses for host, or an empty list when it cannot be resolved.

        IP literals are returned as-is without a DNS query.
        """
        try:
            return self._lookup(host)
        except ParseError as e:
            self.error_manager.handle_parse_error(str(e))
        except ResolutionTimeout as e:
            self.error_manager.handle_resolution_error(f"Lookup of {host} timed out", details=str(e))
        except (ResolutionFailure, RetryCancelled) as e:
            self.error_manager.handle_resolution_error(f"Could not resolve {host}", details=str(e))
        return []

    def local_addresses(self) -> List[IPAddress]:
        """Non-loopback, non-link-local interface addresses, or an empty list."""
        try:
            addresses = self.retry_manager.retry(
                lambda: self._call_bounded(_LOCAL_ADDRESSES_KEY, self.backend.local_addresses,
                                           description="enumerate interfaces"),
                operation_name="enumerate interfaces"
            )
        except (ResolutionFailure, RetryCancelled) as e:
            self.error_manager.handle_resolution_error("Could not enumerate local addresses", details=str(e))
            return []
        return [address for address in addresses if _is_public_interface_address(address)]

    # PAC functions

    def dns_resolve(self, host: str) -> Optional[str]:
        """First address of host as dotted quad, None if it is not IPv4 or unresolvable."""
        addresses = self.resolve_addresses(host)
        if not addresses or addresses[0].version != 4:
            return None
        return str(addresses[0])

    def dns_resolve_ex(self, host: str) -> str:
        """All addresses of host, space separated; empty string on failure."""
        return " ".join(format_address(address) for address in self.resolve_addresses(host))

    def is_resolvable(self, host: str) -> bool:
        return bool(self.resolve_addresses(host))

    def is_resolvable_ex(self, host: str) -> bool:
        return bool(self.resolve_addresses(host))

    def my_ip_address(self) -> str:
        """First usable local IPv4 address, or the fallback address."""
        for address in self.local_addresses():
            if address.version == 4:
                return str(address)

        self.error_manager.handle_resolution_error(
            "No non-loopback IPv4 address found",
            details=f"using {self.fallback_address}"
        )
        return self.fallback_address

    def my_ip_address_ex(self) -> str:
        """All usable local addresses (IPv4 and IPv6), space separated."""
        return " ".join(format_address(address) for address in self.local_addresses())

    def sort_ip_address_list(self, address_list: str) -> str:
        """
        Sort a space or semicolon separated address list.

        IPv4 addresses come before IPv6, each family in numeric order.
        Entries that are not IP literals are dropped.
        """
        addresses = []
        for entry in _ADDRESS_LIST_SEPARATORS.split(address_list):
            if not entry:
                continue
            address = parse_address(entry)
            if address is None:
                self.logger.debug(f"sortIpAddressList: dropping malformed entry {entry!r}")
                continue
            addresses.append(address)

        addresses.sort(key=lambda address: (address.version, address.packed))
        return " ".join(format_address(address) for address in addresses)
