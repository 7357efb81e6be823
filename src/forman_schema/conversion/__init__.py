"""
Conversion between Forman Schema and JSON Schema.
"""

from forman_schema.conversion.forman import (
    ConversionContext,
    to_json_schema,
    to_json_schema_internal,
)
from forman_schema.conversion.json import to_forman_schema

__all__ = [
    "ConversionContext",
    "to_json_schema",
    "to_json_schema_internal",
    "to_forman_schema",
]
