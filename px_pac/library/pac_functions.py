"""
PacFunctionLibrary - the facade a PAC script host binds.

Each function coerces its arguments, delegates to the matchers or the
resolver, and turns any failure into the function's documented sentinel so a
script always runs to completion.
"""

import functools
import logging
from typing import Any, Optional

from ..config.settings import RuntimeSettings
from ..error_handling import (
    CoercionError, CoercionWarning, ErrorCategory, ErrorManager, ErrorSeverity, get_error_manager
)
from ..matching import (
    NetworkMatcher,
    dns_domain_is,
    dns_domain_levels,
    is_plain_host_name,
    local_host_or_domain_is,
    shell_expression_match
)
from ..resolver import Resolver, ResolverBackend
from .coercion import coerce_string
from .interface import PacFunctionInterface

CLIENT_VERSION = "1.0"

script_logger = logging.getLogger("px_pac.script")


def pac_function(sentinel):
    """
    Wrap a library method so it behaves like a script-callable function.

    Missing arguments are filled with None (scripts pass undefined) and
    surplus arguments are dropped. A rejected argument or any unexpected
    failure returns sentinel, or sentinel(self) when it is callable.
    """
    def decorator(method):
        arity = method.__code__.co_argcount - 1

        def fallback(library):
            return sentinel(library) if callable(sentinel) else sentinel

        @functools.wraps(method)
        def wrapper(self, *args):
            args = (args + (None,) * arity)[:arity]
            try:
                return method(self, *args)
            except CoercionError:
                return fallback(self)
            except Exception as e:
                self.error_manager.handle_error(
                    category=ErrorCategory.SCRIPT,
                    severity=ErrorSeverity.HIGH,
                    message=f"{method.__name__} failed unexpectedly",
                    details=str(e),
                    exception=e
                )
                return fallback(self)

        return wrapper
    return decorator


class PacFunctionLibrary(PacFunctionInterface):
    """
    The PAC function surface backed by the matchers and a Resolver.

    Holds no per-call state, so one instance may serve concurrent
    evaluations.
    """

    def __init__(self, resolver: Optional[Resolver] = None,
                 error_manager: Optional[ErrorManager] = None):
        self.logger = logging.getLogger(__name__)
        self.error_manager = error_manager or get_error_manager()
        self.resolver = resolver if resolver is not None else Resolver(error_manager=self.error_manager)
        self.network_matcher = NetworkMatcher(self.resolver, self.error_manager)

    @classmethod
    def from_settings(cls, settings: Optional[RuntimeSettings] = None,
                      backend: Optional[ResolverBackend] = None,
                      error_manager: Optional[ErrorManager] = None) -> 'PacFunctionLibrary':
        """Build a library whose resolver follows the given settings."""
        settings = settings or RuntimeSettings()
        error_manager = error_manager or get_error_manager()
        resolver = Resolver.from_settings(settings, backend=backend, error_manager=error_manager)
        return cls(resolver=resolver, error_manager=error_manager)

    def close(self):
        self.resolver.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def _coerce(self, function: str, argument: str, value: Any) -> str:
        if isinstance(value, str):
            return value

        try:
            text = coerce_string(value)
        except CoercionError as e:
            self.error_manager.handle_coercion_warning(f"{function}: rejected {argument}", details=str(e),
                                                       exception=e)
            raise

        message = f"{function}: coerced {type(value).__name__} {argument} to string"
        self.error_manager.handle_coercion_warning(message, details=repr(text),
                                                   exception=CoercionWarning(message))
        return text

    # Domain predicates

    @pac_function(False)
    def dns_domain_is(self, host, domain):
        return dns_domain_is(self._coerce('dnsDomainIs', 'host', host),
                             self._coerce('dnsDomainIs', 'domain', domain))

    @pac_function(0)
    def dns_domain_levels(self, host):
        return dns_domain_levels(self._coerce('dnsDomainLevels', 'host', host))

    @pac_function(False)
    def is_plain_host_name(self, host):
        return is_plain_host_name(self._coerce('isPlainHostName', 'host', host))

    @pac_function(False)
    def local_host_or_domain_is(self, host, hostdom):
        return local_host_or_domain_is(self._coerce('localHostOrDomainIs', 'host', host),
                                       self._coerce('localHostOrDomainIs', 'hostdom', hostdom))

    @pac_function(False)
    def sh_exp_match(self, subject, pattern):
        return shell_expression_match(self._coerce('shExpMatch', 'str', subject),
                                      self._coerce('shExpMatch', 'shexp', pattern))

    # Network membership

    @pac_function(False)
    def is_in_net(self, host, pattern, mask):
        return self.network_matcher.is_in_net(self._coerce('isInNet', 'host', host),
                                              self._coerce('isInNet', 'pattern', pattern),
                                              self._coerce('isInNet', 'mask', mask))

    @pac_function(False)
    def is_in_net_ex(self, host, prefix):
        return self.network_matcher.is_in_net_ex(self._coerce('isInNetEx', 'host', host),
                                                 self._coerce('isInNetEx', 'prefix', prefix))

    # Resolution

    @pac_function(None)
    def dns_resolve(self, host):
        return self.resolver.dns_resolve(self._coerce('dnsResolve', 'host', host))

    @pac_function("")
    def dns_resolve_ex(self, host):
        return self.resolver.dns_resolve_ex(self._coerce('dnsResolveEx', 'host', host))

    @pac_function(False)
    def is_resolvable(self, host):
        return self.resolver.is_resolvable(self._coerce('isResolvable', 'host', host))

    @pac_function(False)
    def is_resolvable_ex(self, host):
        return self.resolver.is_resolvable_ex(self._coerce('isResolvableEx', 'host', host))

    @pac_function(lambda library: library.resolver.fallback_address)
    def my_ip_address(self):
        return self.resolver.my_ip_address()

    @pac_function("")
    def my_ip_address_ex(self):
        return self.resolver.my_ip_address_ex()

    @pac_function("")
    def sort_ip_address_list(self, address_list):
        return self.resolver.sort_ip_address_list(self._coerce('sortIpAddressList', 'addressList', address_list))

    # Miscellaneous

    def get_client_version(self, *args) -> str:
        return CLIENT_VERSION

    def log(self, message=None, *args) -> None:
        """Write a script message to the operator log; never raises."""
        try:
            text = message if isinstance(message, str) else str(message)
        except Exception:
            text = f"<unprintable {type(message).__name__}>"
        script_logger.info(text)
