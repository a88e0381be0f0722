"""
Domain predicates: dnsDomainIs, isPlainHostName, localHostOrDomainIs, dnsDomainLevels.

All of these are plain string operations and never resolve anything.
"""


def dns_domain_is(host: str, domain: str) -> bool:
    """
    True if host ends with domain.

    This is a raw, case-sensitive suffix comparison, not a label-aware one:
    dns_domain_is("notexample.com", "example.com") is True. Browsers have
    always behaved this way and existing scripts rely on it.
    """
    return len(host) >= len(domain) and host.endswith(domain)


def is_plain_host_name(host: str) -> bool:
    """True if host contains no dot."""
    return '.' not in host


def local_host_or_domain_is(host: str, hostdom: str) -> bool:
    """
    True if host equals hostdom, or host is an unqualified name equal to
    the first label of hostdom.
    """
    if host == hostdom:
        return True
    if not host or not is_plain_host_name(host):
        return False
    return hostdom.split('.', 1)[0] == host and '.' in hostdom


def dns_domain_levels(host: str) -> int:
    """Number of dots in host."""
    return host.count('.')
