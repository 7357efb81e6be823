"""
Type and option normalization for Forman fields.

Canonicalizes prefixed reference types (`account:google`) into a base type
plus a synthesized remote store, and unwraps the several shapes `options`
and `nested` may take into a small tagged union so that the converters and
the validator don't have to sniff them at every use site.

Option sources:
    - LiteralOptions: a list of options and/or option groups
    - RemoteOptions: a path resolved by the host at runtime

Nested sources:
    - NestedSource: a store (field list or remote path) with an optional
      target domain
"""

from typing import Any

from attrs import frozen

from forman_schema.core.type_tables import API_ENDPOINTS, CONVERTIBLE_TYPES
from forman_schema.core.types import FormanField, FormanSpecEntry
from forman_schema.exceptions import SchemaConversionError


@frozen
class LiteralOptions:
    items: list[Any]


@frozen
class RemoteOptions:
    path: str


OptionSource = LiteralOptions | RemoteOptions


@frozen
class NestedSource:
    """Fields to splice next to a field once a value is chosen."""

    store: list[FormanSpecEntry] | str
    domain: str | None = None

    @property
    def is_remote(self) -> bool:
        return isinstance(self.store, str)

    @property
    def entries(self) -> list[FormanSpecEntry]:
        """Store as a list, wrapping a bare remote path."""
        return [self.store] if isinstance(self.store, str) else list(self.store)

    @property
    def contains_references(self) -> bool:
        return isinstance(self.store, list) and any(
            isinstance(item, str) for item in self.store
        )


def base_type(field_type: str) -> str:
    """Strip the `:kind` suffix from a prefixed type."""
    return field_type.split(":", 1)[0]


def validate_forman_field(field: FormanField) -> None:
    """
    Check that a field declares a known (possibly prefixed) type.

    Params:
        field: Field to check

    Raises:
        SchemaConversionError: When the type is missing or unknown
    """
    field_type = field.get("type")
    if not field_type:
        raise SchemaConversionError("Field type is required", field)

    if base_type(field_type) not in CONVERTIBLE_TYPES:
        raise SchemaConversionError(f"Unknown field type: {field_type}", field)


def normalize_forman_field_type(field: FormanField) -> FormanField:
    """
    Rewrite a prefixed reference type into its base type and remote store.

    `account:google` becomes type `account` with `options.store` set to
    `api://connections/google`. When no kind is given the `/{{kind}}`
    placeholder is dropped. An explicit `options.store` is kept as is.
    Fields with non-prefixed types are returned unchanged (same object).

    Params:
        field: Field to normalize; never mutated

    Returns:
        The normalized field
    """
    field_type = field.get("type")
    if not isinstance(field_type, str) or ":" not in field_type:
        return field

    base, _, kind = field_type.partition(":")
    endpoint = API_ENDPOINTS.get(base)
    if endpoint is None:
        return field

    normalized = {**field, "type": base}
    options = field.get("options")
    if isinstance(options, dict) and options.get("store"):
        return normalized

    if kind:
        store = endpoint.replace("{{kind}}", kind)
    else:
        store = endpoint.replace("/{{kind}}", "")
    normalized["options"] = (
        {**options, "store": store} if isinstance(options, dict) else {"store": store}
    )
    return normalized


def unwrap_options(options: Any) -> OptionSource | None:
    """Classify an options store value (list, remote path or missing)."""
    if isinstance(options, str):
        return RemoteOptions(options)
    if isinstance(options, list):
        return LiteralOptions(options)
    return None


def extract_options(field: FormanField) -> OptionSource | None:
    """
    Extract the option source of a field, unwrapping `{store, ...}` once.

    Params:
        field: Select-family, path or filter-operand field

    Returns:
        The option source, or None when the field declares none
    """
    options = field.get("options")
    if isinstance(options, dict):
        options = options.get("store")
    return unwrap_options(options)


def unwrap_nested(nested: Any) -> NestedSource | None:
    """Classify a nested value given as a list, a remote path or `{store, domain}`."""
    if isinstance(nested, dict):
        store = nested.get("store")
        if store is None:
            return None
        return NestedSource(store, nested.get("domain") or None)
    if isinstance(nested, (list, str)):
        return NestedSource(nested)
    return None


def extract_nested(field: FormanField, field_first: bool = False) -> NestedSource | None:
    """
    Extract the field-wide nested source.

    Extended options (`{store, nested}`) carry the nested spec next to the
    store; otherwise it sits on the field itself.

    Params:
        field: Field to inspect
        field_first: Prefer `field.nested` over `options.nested` when both exist

    Returns:
        The nested source, or None
    """
    options = field.get("options")
    options_nested = options.get("nested") if isinstance(options, dict) else None

    if field_first:
        return unwrap_nested(field.get("nested")) or unwrap_nested(options_nested)
    if isinstance(options, dict):
        return unwrap_nested(options_nested)
    return unwrap_nested(field.get("nested"))


def option_nested(option: dict[str, Any]) -> NestedSource | None:
    """Extract the nested source attached to a single select option."""
    return unwrap_nested(option.get("nested"))
