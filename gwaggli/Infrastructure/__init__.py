"""
Infrastructure layer for Gwaggli.

This package contains cross-cutting concerns used across the application:
logging, configuration and the local cache environment.
"""

# Import modules for easier access
from .Logging import LoggingModule, LoggingConfig, LogLevel

__all__ = [
    'LoggingModule',
    'LoggingConfig',
    'LogLevel'
]
