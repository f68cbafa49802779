"""
Core Exceptions
================

Custom exceptions for the bootstrap process.

Library errors are translated into these types at the connector boundary so
the entry point has a single family of failures to report on.
"""

from typing import Optional


class ApplicationException(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ConfigurationException(ApplicationException):
    """Exception for a missing, unreadable or malformed configuration."""


class BackendConnectionException(ApplicationException):
    """Base exception for failures opening or probing a backend."""

    def __init__(
        self,
        service_name: str,
        message: str,
        details: Optional[dict] = None
    ):
        self.service_name = service_name
        super().__init__(f"{service_name}: {message}", details)


class DatabaseConnectionException(BackendConnectionException):
    """Exception for relational database connection failures."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__("Database", message, details)


class CacheConnectionException(BackendConnectionException):
    """Exception for Redis connection failures."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__("Redis", message, details)


class BrokerConnectionException(BackendConnectionException):
    """Exception for message broker connection failures."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__("RabbitMQ", message, details)


class ReleaseException(ApplicationException):
    """Exception raised when closing a backend handle fails."""

    def __init__(
        self,
        service_name: str,
        message: str,
        details: Optional[dict] = None
    ):
        self.service_name = service_name
        super().__init__(f"failed to close {service_name}: {message}", details)
