"""
Exception classes for Forman Schema conversion and validation.

This module defines specific exception types for the error conditions that can
occur while converting field trees to JSON Schema and while resolving remote
resources during validation.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorLevel(Enum):
    """Error message detail level for end users vs developers."""

    USER = "user"  # Message only
    DEVELOPER = "developer"  # Message plus domain and structural path


@dataclass
class ErrorContext:
    """
    Context information for error messages.

    Captures where in the field tree an error occurred: the active domain and
    the structural path of ancestor field names.

    Params:
        domain: Name of the domain being processed
        path: Ancestor field names leading to the failing field
        field_type: Declared type of the failing field, if known
    """

    domain: str | None = None
    path: list[str] = field(default_factory=list)
    field_type: str | None = None

    def format_location(self, error_level: ErrorLevel) -> str:
        """
        Format location information based on error level.

        Params:
            error_level: Whether to show USER or DEVELOPER level details

        Returns:
            Formatted location string with appropriate detail level
        """
        if error_level == ErrorLevel.USER:
            return ""

        lines = []
        if self.domain:
            lines.append(f"  in domain '{self.domain}'")
        if self.path:
            lines.append(f"  at {'.'.join(self.path)}")
        if self.field_type:
            lines.append(f"  type: {self.field_type}")
        return "\n".join(lines)


class FormanSchemaError(Exception):
    """Base exception for all Forman Schema errors."""

    pass


class SchemaConversionError(FormanSchemaError):
    """Raised when a field cannot be converted to or from JSON Schema."""

    def __init__(
        self,
        message: str,
        field: dict[str, Any] | None = None,
        context: ErrorContext | None = None,
    ):
        """
        Initialize the exception.

        Params:
            message: Description of the failure
            field: The field (or JSON Schema fragment) that caused the error
            context: Optional location of the failing field
        """
        self.message = message
        self.field = field
        self.context = context
        super().__init__(message)

    def format(self, error_level: ErrorLevel = ErrorLevel.USER) -> str:
        """
        Render the error with location details for the requested audience.

        Params:
            error_level: Detail level of the rendered message

        Returns:
            The message, followed by location lines when available
        """
        if self.context is None:
            return self.message
        location = self.context.format_location(error_level)
        return f"{self.message}\n{location}" if location else self.message


class DomainRootError(FormanSchemaError):
    """Raised when a domain root is registered more than once in one traversal."""

    def __init__(self, domain: str):
        """
        Initialize the exception.

        Params:
            domain: Name of the domain registered twice
        """
        self.domain = domain
        super().__init__(f"Domain root '{domain}' is already registered.")


class RemoteResolutionError(FormanSchemaError):
    """Raised when a remote resource cannot be resolved."""

    pass
