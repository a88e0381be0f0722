"""
Evaluation of FindProxyForURL through an external script host.

The script host (a JavaScript sandbox, or PythonScriptHost for embedding and
tests) owns script execution. The evaluator installs the PAC function
bindings into it, invokes the entry point per request and parses the result.
"""

import logging
from abc import ABC, abstractmethod
from types import SimpleNamespace
from typing import Any, Callable, Dict, Optional
from urllib.parse import urlparse

from .error_handling import ErrorManager, get_error_manager
from .library import PacFunctionInterface, PacFunctionLibrary
from .models.proxy_directive import ProxyDirective

FIND_PROXY_FOR_URL = "FindProxyForURL"
FIND_PROXY_FOR_URL_EX = "FindProxyForURLEx"


class ScriptHost(ABC):
    """Boundary to whatever executes PAC script text."""

    @abstractmethod
    def install(self, bindings: Dict[str, Callable[..., Any]]):
        """Make the PAC functions callable from the script under their PAC names."""
        pass

    @abstractmethod
    def has_function(self, name: str) -> bool:
        """Whether the loaded script defines a function with this name."""
        pass

    @abstractmethod
    def call(self, name: str, url: str, host: str) -> Any:
        """Invoke a script entry point."""
        pass


class PythonScriptHost(ScriptHost):
    """
    Script host whose entry points are Python callables.

    Each entry point is called as func(pac, url, host), where pac is a
    namespace holding the installed PAC functions.
    """

    def __init__(self, find_proxy_for_url: Optional[Callable[..., Any]] = None,
                 find_proxy_for_url_ex: Optional[Callable[..., Any]] = None):
        self._functions: Dict[str, Callable[..., Any]] = {}
        if find_proxy_for_url is not None:
            self._functions[FIND_PROXY_FOR_URL] = find_proxy_for_url
        if find_proxy_for_url_ex is not None:
            self._functions[FIND_PROXY_FOR_URL_EX] = find_proxy_for_url_ex
        self.pac = SimpleNamespace()

    def install(self, bindings: Dict[str, Callable[..., Any]]):
        self.pac = SimpleNamespace(**bindings)

    def has_function(self, name: str) -> bool:
        return name in self._functions

    def call(self, name: str, url: str, host: str) -> Any:
        return self._functions[name](self.pac, url, host)


def host_from_url(url: str) -> str:
    """Host part of a request URL, or of a CONNECT-style "host:port" target."""
    try:
        hostname = urlparse(url).hostname
    except ValueError:
        hostname = None
    if hostname:
        return hostname
    return url.split(':')[0]


class PacEvaluator:
    """
    Runs FindProxyForURL (or FindProxyForURLEx when the script defines it)
    and returns the parsed proxy directive.

    A failing script never breaks connectivity: errors yield DIRECT.
    """

    def __init__(self, script_host: ScriptHost,
                 library: Optional[PacFunctionInterface] = None,
                 error_manager: Optional[ErrorManager] = None):
        self.logger = logging.getLogger(__name__)
        self.script_host = script_host
        self.error_manager = error_manager or get_error_manager()
        self.library = library if library is not None else PacFunctionLibrary(error_manager=self.error_manager)

        self.script_host.install(self.library.bindings())
        if self.script_host.has_function(FIND_PROXY_FOR_URL_EX):
            self.entry_point = FIND_PROXY_FOR_URL_EX
        else:
            self.entry_point = FIND_PROXY_FOR_URL
        self.logger.debug(f"Using PAC entry point {self.entry_point}")

    def find_proxy(self, url: str, host: Optional[str] = None) -> ProxyDirective:
        """
        Proxy choices for a request.

        Args:
            url: Request URL
            host: Request host (derived from url if omitted)

        Returns:
            ProxyDirective in failover order
        """
        if host is None:
            host = host_from_url(url)

        try:
            result = self.script_host.call(self.entry_point, url, host)
        except Exception as e:
            self.error_manager.handle_script_error(
                f"{self.entry_point} failed for {url}",
                details="assuming DIRECT",
                exception=e
            )
            return ProxyDirective()

        directive = ProxyDirective.parse(result)
        self.logger.debug(f"{self.entry_point}({url}, {host}) -> {directive}")
        return directive
