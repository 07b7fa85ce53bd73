"""
Exception classes for Fincheck.

This module defines the exception hierarchy used by the Fincheck API
bootstrap. All custom exceptions inherit from FincheckError so callers
can catch any Fincheck-specific failure with a single except clause.
"""

from typing import Any


class FincheckError(Exception):
    """
    Base exception for all Fincheck errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize the exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} (details: {self.details})"
        return self.message

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


class ConfigurationError(FincheckError):
    """
    Raised when Fincheck configuration is missing or invalid.

    Examples:
        - Descriptor model built without a title or version
        - Invalid YAML syntax in a configuration file
        - Environment variable with an unparseable value
        - Route prefix changed after it was applied
    """

    pass


class StartupError(FincheckError):
    """
    Raised when the application runtime cannot be constructed.

    Examples:
        - Module imports a module that was never defined
        - Cyclic module import graph
        - Module initialization hook failed
    """

    pass


class ListenError(FincheckError):
    """
    Raised when the network listener cannot be bound.

    Examples:
        - Port already in use
        - Host address not available on this machine
        - Insufficient permissions for a privileged port
    """

    pass
