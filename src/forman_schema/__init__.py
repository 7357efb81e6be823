"""
Forman Schema - a bidirectional Forman Schema / JSON Schema transpiler

Converts declarative Forman form-field descriptions to JSON Schema (draft-07
compatible, with `x-` vendor extensions) and back, and validates submitted
values against the same field descriptions, including cross-domain nested
fields and remotely resolved options.
"""

from importlib.metadata import version

from forman_schema.conversion import (
    ConversionContext,
    to_forman_schema,
    to_json_schema,
    to_json_schema_internal,
)
from forman_schema.core.normalizer import normalize_forman_field_type
from forman_schema.exceptions import FormanSchemaError, SchemaConversionError
from forman_schema.validation import (
    ValidationIssue,
    ValidationOptions,
    ValidationResult,
    build_restore_structure,
    validate_forman,
    validate_forman_with_domains,
)

__version__ = version("forman-schema")

__all__ = [
    "__version__",
    "ConversionContext",
    "FormanSchemaError",
    "SchemaConversionError",
    "ValidationIssue",
    "ValidationOptions",
    "ValidationResult",
    "build_restore_structure",
    "normalize_forman_field_type",
    "to_forman_schema",
    "to_json_schema",
    "to_json_schema_internal",
    "validate_forman",
    "validate_forman_with_domains",
]
