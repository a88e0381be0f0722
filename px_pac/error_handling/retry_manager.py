"""
Retry policies with configurable backoff.

The resolver runs each lookup through a RetryPolicy so that dnsResolve,
isResolvable and the Ex variants share one timeout/retry behaviour.
"""

import logging
import random
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional


class BackoffStrategy(ABC):
    """Base class for backoff strategies."""

    @abstractmethod
    def get_delay(self, attempt: int, base_delay: float = 1.0) -> float:
        """Get delay for the given attempt number."""
        pass


class ExponentialBackoff(BackoffStrategy):
    """Exponential backoff strategy with optional jitter."""

    def __init__(self, multiplier: float = 2.0, max_delay: float = 5.0,
                 jitter: bool = True, jitter_factor: float = 0.1):
        """
        Initialize exponential backoff.

        Args:
            multiplier: Multiplier for each retry attempt
            max_delay: Maximum delay between attempts
            jitter: Whether to add random jitter
            jitter_factor: Factor for jitter calculation (0.0 to 1.0)
        """
        self.multiplier = multiplier
        self.max_delay = max_delay
        self.jitter = jitter
        self.jitter_factor = jitter_factor

    def get_delay(self, attempt: int, base_delay: float = 1.0) -> float:
        """Get exponential delay with optional jitter."""
        delay = base_delay * (self.multiplier ** (attempt - 1))
        delay = min(delay, self.max_delay)

        if self.jitter:
            jitter_amount = delay * self.jitter_factor
            delay += random.uniform(-jitter_amount, jitter_amount)

        return max(0.0, delay)


class FixedBackoff(BackoffStrategy):
    """Fixed delay backoff strategy."""

    def __init__(self, delay: float = 0.1):
        self.delay = delay

    def get_delay(self, attempt: int, base_delay: float = 1.0) -> float:
        """Get fixed delay."""
        return self.delay


@dataclass
class RetryPolicy:
    """Configuration for retry behavior."""
    max_attempts: int = 2
    base_delay: float = 0.1
    backoff_strategy: BackoffStrategy = None
    retry_on_exceptions: Optional[List[type]] = None
    stop_on_exceptions: Optional[List[type]] = None

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.backoff_strategy is None:
            self.backoff_strategy = FixedBackoff(self.base_delay)
        if self.retry_on_exceptions is None:
            self.retry_on_exceptions = [Exception]
        if self.stop_on_exceptions is None:
            self.stop_on_exceptions = []


class RetryCancelled(RuntimeError):
    """Raised when a retry loop is cancelled while waiting."""


class RetryManager:
    """
    Executes callables under a retry policy.

    The manager keeps only counters; no state carried between calls affects
    the outcome of a later call.
    """

    def __init__(self, default_policy: Optional[RetryPolicy] = None):
        """
        Initialize retry manager.

        Args:
            default_policy: Default retry policy to use
        """
        self.logger = logging.getLogger(__name__)
        self.default_policy = default_policy or RetryPolicy()
        self._cancelled = threading.Event()
        self._lock = threading.Lock()
        self._stats = {
            'operations': 0,
            'attempts': 0,
            'succeeded': 0,
            'exhausted': 0,
        }

    def retry(self,
              func: Callable[[], Any],
              policy: Optional[RetryPolicy] = None,
              operation_name: Optional[str] = None) -> Any:
        """
        Execute function with retry logic.

        Args:
            func: Function to execute
            policy: Retry policy (uses default if None)
            operation_name: Name for logging

        Returns:
            Result of successful function execution

        Raises:
            Exception: Last exception if all retries exhausted, or the first
                exception that is not retryable
        """
        policy = policy or self.default_policy
        operation_name = operation_name or getattr(func, '__name__', 'operation')

        with self._lock:
            self._stats['operations'] += 1

        last_exception = None
        for attempt in range(1, policy.max_attempts + 1):
            if self._cancelled.is_set():
                raise RetryCancelled(f"Retry operation {operation_name} was cancelled")

            with self._lock:
                self._stats['attempts'] += 1

            try:
                self.logger.debug(f"Attempting {operation_name} (attempt {attempt}/{policy.max_attempts})")
                result = func()
            except Exception as e:
                last_exception = e

                if any(isinstance(e, exc_type) for exc_type in policy.stop_on_exceptions):
                    raise
                if not any(isinstance(e, exc_type) for exc_type in policy.retry_on_exceptions):
                    raise

                if attempt < policy.max_attempts:
                    delay = policy.backoff_strategy.get_delay(attempt, policy.base_delay)
                    self.logger.debug(f"Retry {operation_name} attempt {attempt} failed: {e}. "
                                      f"Retrying in {delay:.2f}s")
                    if self._cancelled.wait(delay):
                        raise RetryCancelled(f"Retry operation {operation_name} was cancelled")
                continue

            with self._lock:
                self._stats['succeeded'] += 1
            if attempt > 1:
                self.logger.debug(f"Retry {operation_name} succeeded on attempt {attempt}")
            return result

        with self._lock:
            self._stats['exhausted'] += 1
        self.logger.debug(f"Retry {operation_name} exhausted all {policy.max_attempts} attempts")
        raise last_exception

    def cancel_all(self):
        """Cancel every running and future retry loop of this manager."""
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def get_retry_stats(self) -> Dict[str, int]:
        """Get retry counters."""
        with self._lock:
            return self._stats.copy()
