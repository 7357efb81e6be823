"""
Exception classes for Forman Schema processing.
"""

from forman_schema.exceptions.core import (
    DomainRootError,
    ErrorContext,
    ErrorLevel,
    FormanSchemaError,
    RemoteResolutionError,
    SchemaConversionError,
)

__all__ = [
    "DomainRootError",
    "ErrorContext",
    "ErrorLevel",
    "FormanSchemaError",
    "RemoteResolutionError",
    "SchemaConversionError",
]
