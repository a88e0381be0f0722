"""
The PAC function library exposed to script hosts.
"""

from .coercion import coerce_string
from .interface import PAC_FUNCTION_NAMES, PacFunctionInterface
from .pac_functions import CLIENT_VERSION, PacFunctionLibrary

__all__ = [
    'coerce_string',
    'PAC_FUNCTION_NAMES',
    'PacFunctionInterface',
    'CLIENT_VERSION',
    'PacFunctionLibrary'
]
