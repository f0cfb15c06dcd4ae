"""
Exception hierarchy for brickreader.

Failures reported by the remote metadata service are raised as
``databricks.sdk.errors`` exceptions (NotFound, PermissionDenied, ...). The
classes below cover everything that goes wrong on the client side.
"""

from typing import List, Optional


class BrickReaderError(Exception):
    """Base class for all brickreader errors."""


class ConfigurationError(BrickReaderError, ValueError):
    """Required configuration is missing or invalid."""


class UnknownSecurableTypeError(BrickReaderError, ValueError):
    """Raised when a wire token does not name a known securable type."""

    def __init__(self, token: str):
        self.token = token
        super().__init__(f"Unknown securable type token: '{token}'")


class AuthenticationFailedError(BrickReaderError):
    """Raised when the configured principal cannot be authenticated."""

    def __init__(self, principal: str, reason: str = ""):
        self.principal = principal
        message = f"Authentication failed for principal '{principal}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class AccessDeniedError(BrickReaderError, PermissionError):
    """Raised when a principal lacks the privileges an operation needs."""

    def __init__(self, principal: str, full_name: str, operation: str):
        self.principal = principal
        self.full_name = full_name
        self.operation = operation
        super().__init__(f"Principal '{principal}' is not allowed to {operation} '{full_name}'")


class TableLocationNotFoundError(BrickReaderError):
    """Raised when a table has no storage location registered."""

    def __init__(self, full_name: str):
        self.full_name = full_name
        super().__init__(f"Table Location Not Found: '{full_name}' has no storage location")


class DeltaLogNotFoundError(BrickReaderError):
    """Raised when a location holds no Delta transaction log."""

    def __init__(self, location: str):
        self.location = location
        super().__init__(f"No Delta transaction log found at '{location}'")


class UnsupportedTableFeatureError(BrickReaderError):
    """Raised when a Delta table uses reader features that plain Parquet reads would get wrong."""

    def __init__(self, location: str, features: List[str]):
        self.location = location
        self.features = features
        super().__init__(f"Delta table at '{location}' uses unsupported reader features: {', '.join(features)}")


class UnsupportedStorageError(BrickReaderError):
    """Raised for storage locations whose scheme cannot be opened."""

    def __init__(self, location: str, scheme: Optional[str] = None):
        self.location = location
        self.scheme = scheme
        super().__init__(f"Unsupported storage scheme '{scheme or ''}' in location '{location}'")


class SchemaMismatchError(BrickReaderError):
    """Raised when a data file's schema does not match the table being assembled."""

    def __init__(self, file: str, expected: List[str], actual: List[str]):
        self.file = file
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Schema of '{file}' does not match: expected columns {expected}, got {actual}"
        )


class WriteNotSupportedError(BrickReaderError, NotImplementedError):
    """Writing tables is not supported yet."""

    def __init__(self, full_name: str):
        self.full_name = full_name
        super().__init__(f"Writing to '{full_name}' is not supported")
