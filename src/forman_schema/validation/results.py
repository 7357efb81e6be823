"""
Validation options and result models.
"""

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, Field

from forman_schema.core.types import RemoteResolver


class ValidationIssue(BaseModel):
    """A single data error, located by domain and dotted path."""

    domain: str
    path: str = Field(description="Dotted path relative to the domain root")
    message: str


class ValidationResult(BaseModel):
    """Outcome of validating one or more domains."""

    valid: bool
    errors: list[ValidationIssue] = Field(default_factory=list)
    states: dict[str, Any] | None = Field(
        default=None,
        description="UI restore tree per domain, only when requested and valid",
    )

    @classmethod
    def from_errors(cls, errors: list[ValidationIssue]) -> "ValidationResult":
        return cls(valid=not errors, errors=list(errors))


@dataclass
class ValidationOptions:
    """Configuration for a validation run."""

    strict: bool = False  # Reject keys not declared in the schema
    states: bool = False  # Collect UI restore snapshots
    resolve_remote: RemoteResolver | None = None

    @classmethod
    def from_dict(cls, config: dict | None = None) -> "ValidationOptions":
        """Factory method to create options from a plain options bag."""
        if config is None:
            config = {}
        config = dict(config)
        if "resolveRemote" in config:
            config["resolve_remote"] = config.pop("resolveRemote")
        return cls(**config)
