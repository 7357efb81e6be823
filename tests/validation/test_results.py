"""
Tests for validation options and result models.
"""

from unittest.mock import AsyncMock

import pytest
from pydantic import ValidationError

from forman_schema import ValidationIssue, ValidationOptions, ValidationResult


class TestValidationOptions:
    """Test building options from plain option bags."""

    def test_defaults(self):
        options = ValidationOptions.from_dict(None)
        assert options.strict is False
        assert options.states is False
        assert options.resolve_remote is None

    def test_camel_case_resolver(self):
        """Test `resolveRemote` is accepted as an alias."""
        resolver = AsyncMock()
        options = ValidationOptions.from_dict({"resolveRemote": resolver, "strict": True})
        assert options.resolve_remote is resolver
        assert options.strict is True

    def test_snake_case_resolver(self):
        resolver = AsyncMock()
        assert ValidationOptions.from_dict({"resolve_remote": resolver}).resolve_remote is resolver

    def test_unknown_option(self):
        with pytest.raises(TypeError):
            ValidationOptions.from_dict({"verbose": True})

    def test_input_is_not_mutated(self):
        config = {"resolveRemote": AsyncMock()}
        ValidationOptions.from_dict(config)
        assert "resolveRemote" in config


class TestValidationResult:
    """Test result models."""

    def test_from_errors(self):
        assert ValidationResult.from_errors([]).valid
        issue = ValidationIssue(domain="default", path="a", message="Field is mandatory.")
        result = ValidationResult.from_errors([issue])
        assert not result.valid
        assert result.errors == [issue]

    def test_dump_without_states(self):
        result = ValidationResult(
            valid=False, errors=[ValidationIssue(domain="default", path="a.0", message="Field is mandatory.")]
        )
        assert result.model_dump(exclude_none=True) == {
            "valid": False,
            "errors": [{"domain": "default", "path": "a.0", "message": "Field is mandatory."}],
        }

    def test_issue_requires_fields(self):
        with pytest.raises(ValidationError):
            ValidationIssue(domain="default", message="missing path")
