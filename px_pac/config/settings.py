"""
Runtime settings for the PAC function library.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional
import ipaddress
import json


@dataclass
class RuntimeSettings:
    """
    Tunables for resolution policy and logging.

    Attributes:
        resolve_timeout: Seconds a single lookup attempt may take
        resolve_attempts: Attempts per lookup (timeouts are retried, NXDOMAIN is not)
        retry_delay: Base delay between attempts in seconds
        retry_backoff: "fixed" or "exponential"
        max_workers: Size of the lookup worker pool
        dns_cache_ttl: Seconds a positive lookup is cached (0 disables the cache)
        dns_cache_size: Maximum number of cached hostnames
        fallback_address: Address myIpAddress returns when no interface qualifies
        log_level: Root log level name
        log_file: Optional log file path
    """
    resolve_timeout: float = 2.0
    resolve_attempts: int = 2
    retry_delay: float = 0.1
    retry_backoff: str = "fixed"
    max_workers: int = 8
    dns_cache_ttl: float = 0.0
    dns_cache_size: int = 1024
    fallback_address: str = "127.0.0.1"
    log_level: str = "INFO"
    log_file: Optional[str] = None

    def __post_init__(self):
        """Validate settings after initialization."""
        self._validate()

    def _validate(self):
        if not (0 < self.resolve_timeout <= 60):
            raise ValueError("Resolve timeout must be between 0 and 60 seconds")

        if not (1 <= self.resolve_attempts <= 10):
            raise ValueError("Resolve attempts must be between 1 and 10")

        if not (0 <= self.retry_delay <= 10):
            raise ValueError("Retry delay must be between 0 and 10 seconds")

        if self.retry_backoff not in {"fixed", "exponential"}:
            raise ValueError(f"Invalid retry backoff: {self.retry_backoff}")

        if not (1 <= self.max_workers <= 256):
            raise ValueError("Max workers must be between 1 and 256")

        if self.dns_cache_ttl < 0:
            raise ValueError("DNS cache TTL cannot be negative")

        if self.dns_cache_size < 1:
            raise ValueError("DNS cache size must be at least 1")

        try:
            ipaddress.IPv4Address(self.fallback_address)
        except ValueError:
            raise ValueError(f"Fallback address must be an IPv4 address: {self.fallback_address}")

        if self.log_level.upper() not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {self.log_level}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to dictionary for serialization."""
        return {
            'resolve_timeout': self.resolve_timeout,
            'resolve_attempts': self.resolve_attempts,
            'retry_delay': self.retry_delay,
            'retry_backoff': self.retry_backoff,
            'max_workers': self.max_workers,
            'dns_cache_ttl': self.dns_cache_ttl,
            'dns_cache_size': self.dns_cache_size,
            'fallback_address': self.fallback_address,
            'log_level': self.log_level,
            'log_file': self.log_file
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RuntimeSettings':
        """Create settings from dictionary, ignoring unknown keys."""
        known_keys = {
            'resolve_timeout', 'resolve_attempts', 'retry_delay', 'retry_backoff',
            'max_workers', 'dns_cache_ttl', 'dns_cache_size', 'fallback_address',
            'log_level', 'log_file'
        }
        filtered_data = {k: v for k, v in data.items() if k in known_keys}
        return cls(**filtered_data)

    def to_json(self) -> str:
        """Convert settings to JSON string."""
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_json(cls, json_str: str) -> 'RuntimeSettings':
        """Create settings from JSON string."""
        return cls.from_dict(json.loads(json_str))
