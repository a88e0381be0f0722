"""
The function surface a PAC script expects from its host.

A script host installs these under their PAC names; PAC_FUNCTION_NAMES maps
each PAC name to the method implementing it.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional

PAC_FUNCTION_NAMES = {
    # classic Netscape functions
    'dnsDomainIs': 'dns_domain_is',
    'dnsDomainLevels': 'dns_domain_levels',
    'dnsResolve': 'dns_resolve',
    'isPlainHostName': 'is_plain_host_name',
    'isResolvable': 'is_resolvable',
    'isInNet': 'is_in_net',
    'localHostOrDomainIs': 'local_host_or_domain_is',
    'myIpAddress': 'my_ip_address',
    'shExpMatch': 'sh_exp_match',
    'log': 'log',
    # IPv6 extensions
    'isResolvableEx': 'is_resolvable_ex',
    'isInNetEx': 'is_in_net_ex',
    'dnsResolveEx': 'dns_resolve_ex',
    'myIpAddressEx': 'my_ip_address_ex',
    'myIPAddressEx': 'my_ip_address_ex',
    'sortIpAddressList': 'sort_ip_address_list',
    'getClientVersion': 'get_client_version',
}


class PacFunctionInterface(ABC):
    """Capability interface injected into a script host."""

    @abstractmethod
    def dns_domain_is(self, host: Any, domain: Any) -> bool:
        pass

    @abstractmethod
    def dns_domain_levels(self, host: Any) -> int:
        pass

    @abstractmethod
    def dns_resolve(self, host: Any) -> Optional[str]:
        pass

    @abstractmethod
    def is_plain_host_name(self, host: Any) -> bool:
        pass

    @abstractmethod
    def is_resolvable(self, host: Any) -> bool:
        pass

    @abstractmethod
    def is_in_net(self, host: Any, pattern: Any, mask: Any) -> bool:
        pass

    @abstractmethod
    def local_host_or_domain_is(self, host: Any, hostdom: Any) -> bool:
        pass

    @abstractmethod
    def my_ip_address(self) -> str:
        pass

    @abstractmethod
    def sh_exp_match(self, subject: Any, pattern: Any) -> bool:
        pass

    @abstractmethod
    def log(self, message: Any) -> None:
        pass

    @abstractmethod
    def is_resolvable_ex(self, host: Any) -> bool:
        pass

    @abstractmethod
    def is_in_net_ex(self, host: Any, prefix: Any) -> bool:
        pass

    @abstractmethod
    def dns_resolve_ex(self, host: Any) -> str:
        pass

    @abstractmethod
    def my_ip_address_ex(self) -> str:
        pass

    @abstractmethod
    def sort_ip_address_list(self, address_list: Any) -> str:
        pass

    @abstractmethod
    def get_client_version(self) -> str:
        pass

    def bindings(self) -> Dict[str, Callable[..., Any]]:
        """PAC name -> bound callable, for installation into a script host."""
        return {name: getattr(self, method) for name, method in PAC_FUNCTION_NAMES.items()}
