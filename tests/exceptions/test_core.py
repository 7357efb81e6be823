"""
Tests for error context and formatting system.

This module tests ErrorContext, ErrorLevel enum, and how conversion errors
format messages based on error level (user vs developer).
"""

import pytest

from forman_schema import to_json_schema
from forman_schema.exceptions.core import (
    DomainRootError,
    ErrorContext,
    ErrorLevel,
    FormanSchemaError,
    RemoteResolutionError,
    SchemaConversionError,
)


class TestErrorLevel:
    """Tests for ErrorLevel enum."""

    def test_user_level_exists(self):
        """Test USER level is available."""
        assert ErrorLevel.USER is not None

    def test_developer_level_exists(self):
        """Test DEVELOPER level is available."""
        assert ErrorLevel.DEVELOPER is not None


class TestErrorContext:
    """Tests for ErrorContext dataclass."""

    def test_create_minimal_context(self):
        """Test creating ErrorContext with defaults."""
        ctx = ErrorContext()
        assert ctx.domain is None
        assert ctx.path == []
        assert ctx.field_type is None

    def test_user_level_hides_location(self):
        ctx = ErrorContext(domain="default", path=["a", "b"], field_type="text")
        assert ctx.format_location(ErrorLevel.USER) == ""

    def test_developer_level_shows_location(self):
        """Test DEVELOPER level lists domain, path and type."""
        ctx = ErrorContext(domain="config", path=["settings", "mode"], field_type="hologram")
        assert ctx.format_location(ErrorLevel.DEVELOPER) == (
            "  in domain 'config'\n  at settings.mode\n  type: hologram"
        )

    def test_developer_level_skips_missing_parts(self):
        ctx = ErrorContext(domain="default")
        assert ctx.format_location(ErrorLevel.DEVELOPER) == "  in domain 'default'"


class TestSchemaConversionError:
    """Tests for SchemaConversionError formatting."""

    def test_format_without_context(self):
        error = SchemaConversionError("Field type is required")
        assert error.format() == "Field type is required"
        assert error.format(ErrorLevel.DEVELOPER) == "Field type is required"

    def test_format_with_context(self):
        error = SchemaConversionError(
            "Unknown field type: hologram",
            {"type": "hologram"},
            ErrorContext(domain="default", path=["wrapper", "x"]),
        )
        assert error.format(ErrorLevel.USER) == "Unknown field type: hologram"
        assert error.format(ErrorLevel.DEVELOPER) == (
            "Unknown field type: hologram\n  in domain 'default'\n  at wrapper.x"
        )

    def test_conversion_attaches_location(self):
        """Test errors raised deep in a conversion carry the failing path."""
        field = {
            "type": "collection",
            "spec": [{"name": "settings", "type": "collection", "spec": [{"name": "x", "type": "hologram"}]}],
        }
        with pytest.raises(SchemaConversionError) as exc:
            to_json_schema(field)

        assert exc.value.message == "Unknown field type: hologram"
        assert exc.value.field == {"name": "x", "type": "hologram"}
        assert exc.value.context.path == ["settings", "x"]
        assert exc.value.context.domain == "default"
        assert exc.value.context.field_type == "hologram"


class TestExceptionHierarchy:
    """Tests that every error derives from the package base error."""

    @pytest.mark.parametrize(
        "error",
        [
            SchemaConversionError("message"),
            DomainRootError("config"),
            RemoteResolutionError("message"),
        ],
    )
    def test_base_class(self, error):
        assert isinstance(error, FormanSchemaError)

    def test_domain_root_message(self):
        error = DomainRootError("config")
        assert error.domain == "config"
        assert str(error) == "Domain root 'config' is already registered."
