"""
Configuration management for the PAC runtime.

This module provides loading, saving and validation of the resolver
and logging settings.
"""

from .config_manager import ConfigManager
from .settings import RuntimeSettings

__all__ = ['ConfigManager', 'RuntimeSettings']
