"""
Exception types used inside the PAC runtime.

None of these ever reach a PAC script: every public PAC function catches them
and degrades to its documented sentinel value.
"""

from typing import Optional


class PacRuntimeError(Exception):
    """Base class for PAC runtime errors."""


class ParseError(PacRuntimeError, ValueError):
    """A network, CIDR, address or proxy literal could not be parsed."""

    def __init__(self, message: str, literal: Optional[str] = None):
        super().__init__(message)
        self.literal = literal


class CoercionError(ParseError):
    """A script argument was rejected by the coercion policy."""


class ResolutionFailure(PacRuntimeError):
    """Name resolution or local address discovery failed."""

    def __init__(self, message: str, host: Optional[str] = None):
        super().__init__(message)
        self.host = host


class ResolutionTimeout(ResolutionFailure):
    """A single resolution attempt exceeded its time bound."""


class CoercionWarning(Warning):
    """A loosely typed script argument was coerced to a string."""
