"""
Core Forman Schema components.

This package provides the type tables, shared helpers and the field
normalizer used by both conversion directions and the validator.
"""

from forman_schema.core.normalizer import (
    LiteralOptions,
    NestedSource,
    RemoteOptions,
    extract_nested,
    extract_options,
    normalize_forman_field_type,
    validate_forman_field,
)
from forman_schema.core.types import (
    DEFAULT_DOMAIN,
    FormanField,
    FormanValue,
    JSONSchema,
    RemoteResolver,
)
from forman_schema.core.utils import (
    append_query_string,
    contains_iml_expression,
    is_primitive_iml_expression,
    no_empty,
)

__all__ = [
    "DEFAULT_DOMAIN",
    "FormanField",
    "FormanValue",
    "JSONSchema",
    "RemoteResolver",
    "LiteralOptions",
    "NestedSource",
    "RemoteOptions",
    "extract_nested",
    "extract_options",
    "normalize_forman_field_type",
    "validate_forman_field",
    "append_query_string",
    "contains_iml_expression",
    "is_primitive_iml_expression",
    "no_empty",
]
