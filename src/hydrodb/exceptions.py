"""
Exceptions for hydrodb operations.
"""

from typing import Optional


class HydroDBError(Exception):
    """Base exception for hydrodb errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class InvalidArgumentError(HydroDBError, ValueError):
    """Malformed or unsupported query arguments."""

    pass


class NotFoundError(HydroDBError):
    """Archive file missing or a query matched no rows."""

    pass


class RemoteUnavailableError(HydroDBError):
    """A remote feed could not be reached or returned a non-success status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class AuthFailureError(HydroDBError):
    """Credentials or token rejected by the web service."""

    def __str__(self) -> str:
        return (
            f"{self.message} Ensure you are not holding all 5 tokens, "
            "wait a few minutes and try again."
        )
