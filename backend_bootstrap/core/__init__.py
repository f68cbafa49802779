"""
Core Module
============

Shared core abstractions used across the bootstrap process.
"""

from backend_bootstrap.core.exceptions import (
    ApplicationException,
    ConfigurationException,
    BackendConnectionException,
    DatabaseConnectionException,
    CacheConnectionException,
    BrokerConnectionException,
    ReleaseException,
)

__all__ = [
    "ApplicationException",
    "ConfigurationException",
    "BackendConnectionException",
    "DatabaseConnectionException",
    "CacheConnectionException",
    "BrokerConnectionException",
    "ReleaseException",
]
