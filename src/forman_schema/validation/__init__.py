"""
Runtime validation of values against Forman field trees.
"""

from forman_schema.validation.results import (
    ValidationIssue,
    ValidationOptions,
    ValidationResult,
)
from forman_schema.validation.states import FieldState, build_restore_structure
from forman_schema.validation.validator import (
    ValidationContext,
    ValidationRoot,
    validate_forman,
    validate_forman_value,
    validate_forman_with_domains,
)

__all__ = [
    "FieldState",
    "ValidationContext",
    "ValidationIssue",
    "ValidationOptions",
    "ValidationResult",
    "ValidationRoot",
    "build_restore_structure",
    "validate_forman",
    "validate_forman_value",
    "validate_forman_with_domains",
]
