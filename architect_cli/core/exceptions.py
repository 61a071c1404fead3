"""
Custom Exceptions.

Every failure the CLI reports to the user is an ArchitectError carrying a
single human-readable message. Subclasses let callers tell the kinds apart
(e.g. "server not running" vs. any other failure) without parsing strings.
"""


class ArchitectError(Exception):
    """Base exception for all CLI errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class ConnectionFailedError(ArchitectError):
    """Raised when the server cannot be reached (refused or reset)."""


class ServerError(ArchitectError):
    """Raised when the server answers with an HTTP error status."""

    def __init__(self, message: str, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(message)


class RequestFailedError(ArchitectError):
    """Raised on any other transport failure, timeouts included."""


class InvalidResponseError(ArchitectError):
    """Raised when a response body is not JSON or does not match its schema."""


class NotFoundError(ArchitectError):
    """Raised when a named item is missing from a fetched collection."""


class OperationFailedError(ArchitectError):
    """Raised when the server reports that a requested operation did not succeed."""


class ConfigError(ArchitectError):
    """Raised when the CLI configuration cannot be loaded or is invalid."""
