"""
Central error reporting for the PAC runtime.

PAC functions never raise into a script, so failures are recorded here
instead: the ErrorManager logs them with a severity-mapped level, keeps a
bounded history, suppresses duplicates and notifies registered callbacks.
"""

import logging
import threading
import uuid
from collections import OrderedDict
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum, IntEnum
from typing import Any, Callable, Dict, List, Optional


class ErrorSeverity(IntEnum):
    """Error severity levels."""
    LOW = 1
    MEDIUM = 2
    HIGH = 3
    CRITICAL = 4


class ErrorCategory(Enum):
    """Error categories for classification."""
    PARSE = "parse"
    RESOLUTION = "resolution"
    COERCION = "coercion"
    SCRIPT = "script"
    CONFIGURATION = "configuration"


@dataclass
class ErrorInfo:
    """Information about an error occurrence."""
    error_id: str
    category: ErrorCategory
    severity: ErrorSeverity
    message: str
    details: Optional[str] = None
    timestamp: datetime = None
    context: Optional[Dict[str, Any]] = None
    exception: Optional[BaseException] = None

    def __post_init__(self):
        if self.timestamp is None:
            self.timestamp = datetime.now()
        if self.context is None:
            self.context = {}


class ErrorManager:
    """
    Records and logs errors raised behind the PAC function boundary.

    Reporting an error never alters the value a PAC function returns; the
    manager is purely an operator-facing side channel.
    """

    def __init__(self, suppression_window: Optional[timedelta] = None):
        """
        Initialize the error manager.

        Args:
            suppression_window: Identical errors reported again within this
                window are counted but not logged or stored a second time.
        """
        self.logger = logging.getLogger(__name__)
        self._history: List[ErrorInfo] = []
        self._callbacks: List[Callable[[ErrorInfo], None]] = []
        self._suppressed: "OrderedDict[str, datetime]" = OrderedDict()
        self._lock = threading.RLock()

        self.max_history_size = 1000
        self.max_suppressed_keys = 1000
        self.suppression_window = suppression_window if suppression_window is not None else timedelta(seconds=30)

        self._stats = {
            'total_errors': 0,
            'suppressed_errors': 0,
            'errors_by_category': {},
            'errors_by_severity': {},
        }

    def add_error_callback(self, callback: Callable[[ErrorInfo], None]):
        """Add callback to be notified of errors."""
        with self._lock:
            self._callbacks.append(callback)

    def remove_error_callback(self, callback: Callable[[ErrorInfo], None]):
        """Remove error callback."""
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

    def handle_error(self,
                     category: ErrorCategory,
                     severity: ErrorSeverity,
                     message: str,
                     details: Optional[str] = None,
                     context: Optional[Dict[str, Any]] = None,
                     exception: Optional[BaseException] = None) -> ErrorInfo:
        """
        Record an error occurrence.

        Args:
            category: Error category
            severity: Error severity
            message: Error message
            details: Additional error details
            context: Error context information
            exception: Associated exception if any

        Returns:
            The recorded ErrorInfo
        """
        error = ErrorInfo(
            error_id=str(uuid.uuid4()),
            category=category,
            severity=severity,
            message=message,
            details=details,
            context=context or {},
            exception=exception
        )

        with self._lock:
            self._update_stats(error)

            if self._should_suppress_error(error):
                self._stats['suppressed_errors'] += 1
                return error

            self._history.append(error)
            if len(self._history) > self.max_history_size:
                self._history = self._history[-self.max_history_size:]

            callbacks = list(self._callbacks)

        self._log_error(error)
        self._notify_callbacks(error, callbacks)
        return error

    def handle_parse_error(self, message: str, details: Optional[str] = None,
                           exception: Optional[BaseException] = None) -> ErrorInfo:
        """Record a malformed literal."""
        return self.handle_error(ErrorCategory.PARSE, ErrorSeverity.MEDIUM, message,
                                 details=details, exception=exception)

    def handle_resolution_error(self, message: str, details: Optional[str] = None,
                                exception: Optional[BaseException] = None) -> ErrorInfo:
        """Record a failed or timed out lookup."""
        return self.handle_error(ErrorCategory.RESOLUTION, ErrorSeverity.LOW, message,
                                 details=details, exception=exception)

    def handle_coercion_warning(self, message: str, details: Optional[str] = None,
                                exception: Optional[BaseException] = None) -> ErrorInfo:
        """Record a coerced or rejected script argument."""
        return self.handle_error(ErrorCategory.COERCION, ErrorSeverity.LOW, message,
                                 details=details, exception=exception)

    def handle_script_error(self, message: str, details: Optional[str] = None,
                            exception: Optional[BaseException] = None) -> ErrorInfo:
        """Record a failure raised by the script host."""
        return self.handle_error(ErrorCategory.SCRIPT, ErrorSeverity.HIGH, message,
                                 details=details, exception=exception)

    def get_error_history(self,
                          category: Optional[ErrorCategory] = None,
                          severity: Optional[ErrorSeverity] = None,
                          since: Optional[datetime] = None) -> List[ErrorInfo]:
        """Get error history with optional filtering."""
        with self._lock:
            errors = self._history.copy()

        if category:
            errors = [e for e in errors if e.category == category]
        if severity:
            errors = [e for e in errors if e.severity == severity]
        if since:
            errors = [e for e in errors if e.timestamp >= since]
        return errors

    def get_stats(self) -> Dict[str, Any]:
        """Get error statistics."""
        with self._lock:
            stats = self._stats.copy()
            stats['errors_by_category'] = dict(self._stats['errors_by_category'])
            stats['errors_by_severity'] = dict(self._stats['errors_by_severity'])
            return stats

    def clear_history(self):
        """Clear error history and suppression state."""
        with self._lock:
            self._history.clear()
            self._suppressed.clear()

    def _should_suppress_error(self, error: ErrorInfo) -> bool:
        """Check if an identical error was seen inside the suppression window."""
        key = f"{error.category.value}:{error.message}"
        now = datetime.now()

        last = self._suppressed.get(key)
        if last is not None and now - last < self.suppression_window:
            return True

        self._suppressed[key] = now
        self._suppressed.move_to_end(key)

        # oldest first: drop expired keys, and the oldest ones beyond the cap
        while self._suppressed:
            oldest_key, seen = next(iter(self._suppressed.items()))
            if now - seen < self.suppression_window and len(self._suppressed) <= self.max_suppressed_keys:
                break
            del self._suppressed[oldest_key]
        return False

    def _log_error(self, error: ErrorInfo):
        """Log error with the level matching its severity."""
        log_message = f"[{error.category.value.upper()}] {error.message}"
        if error.details:
            log_message += f" - {error.details}"

        if error.severity == ErrorSeverity.CRITICAL:
            self.logger.critical(log_message, exc_info=error.exception)
        elif error.severity == ErrorSeverity.HIGH:
            self.logger.error(log_message, exc_info=error.exception)
        elif error.severity == ErrorSeverity.MEDIUM:
            self.logger.warning(log_message)
        else:
            self.logger.info(log_message)

    def _update_stats(self, error: ErrorInfo):
        self._stats['total_errors'] += 1

        by_category = self._stats['errors_by_category']
        by_category[error.category.value] = by_category.get(error.category.value, 0) + 1

        by_severity = self._stats['errors_by_severity']
        by_severity[error.severity.value] = by_severity.get(error.severity.value, 0) + 1

    def _notify_callbacks(self, error: ErrorInfo, callbacks: List[Callable[[ErrorInfo], None]]):
        for callback in callbacks:
            try:
                callback(error)
            except Exception as e:
                self.logger.error(f"Error in error callback: {e}")


# Global error manager instance
_global_error_manager: Optional[ErrorManager] = None
_global_lock = threading.Lock()


def get_error_manager() -> ErrorManager:
    """Get the global error manager instance."""
    global _global_error_manager
    if _global_error_manager is None:
        with _global_lock:
            if _global_error_manager is None:
                _global_error_manager = ErrorManager()
    return _global_error_manager
