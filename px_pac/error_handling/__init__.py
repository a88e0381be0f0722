"""
Error types, error reporting and retry policies for the PAC runtime.

PAC functions degrade to sentinel values instead of raising; the pieces in
this package record what went wrong and bound how hard a lookup is retried.
"""

from .errors import (
    PacRuntimeError,
    ParseError,
    CoercionError,
    ResolutionFailure,
    ResolutionTimeout,
    CoercionWarning
)
from .error_manager import ErrorManager, ErrorSeverity, ErrorCategory, ErrorInfo, get_error_manager
from .retry_manager import (
    RetryManager,
    RetryPolicy,
    RetryCancelled,
    BackoffStrategy,
    ExponentialBackoff,
    FixedBackoff
)

__all__ = [
    'PacRuntimeError',
    'ParseError',
    'CoercionError',
    'ResolutionFailure',
    'ResolutionTimeout',
    'CoercionWarning',
    'ErrorManager',
    'ErrorSeverity',
    'ErrorCategory',
    'ErrorInfo',
    'get_error_manager',
    'RetryManager',
    'RetryPolicy',
    'RetryCancelled',
    'BackoffStrategy',
    'ExponentialBackoff',
    'FixedBackoff'
]
