"""
Shared helpers for Forman Schema processing.
"""

import re
from typing import Any
from urllib.parse import quote

from forman_schema.core.type_tables import FORMAN_VISUAL_TYPES, REFERENCE_TYPES

_IML_EXPRESSION = re.compile(r"\{\{.+?\}\}")
_PRIMITIVE_IML_EXPRESSION = re.compile(r"\{\{(?:(?!\{\{|\}\}).)+\}\}")
_URI_SAFE = "!*'()"


def no_empty(text: str | None) -> str | None:
    """Return the trimmed text, or None when it is empty or missing."""
    if not isinstance(text, str):
        return None
    return text.strip() or None


def is_object(value: Any) -> bool:
    """Check whether a value is a mapping (not a list, not None)."""
    return isinstance(value, dict)


def is_option_group(item: Any) -> bool:
    """Check whether a select option item is a group of options."""
    return isinstance(item, dict) and isinstance(item.get("options"), list)


def is_visual_type(field_type: str | None) -> bool:
    return field_type in FORMAN_VISUAL_TYPES


def is_reference_type(field_type: str | None) -> bool:
    return field_type in REFERENCE_TYPES


def contains_iml_expression(value: Any) -> bool:
    """
    Check whether a value contains a `{{...}}` expression anywhere.

    Params:
        value: Value to inspect; only strings can contain expressions

    Returns:
        True if at least one expression is present
    """
    return isinstance(value, str) and _IML_EXPRESSION.search(value) is not None


def is_primitive_iml_expression(value: Any) -> bool:
    """
    Check whether a value is exactly one `{{...}}` expression.

    The expression has to span the whole string and must not contain nested
    braces, e.g. `{{1.id}}` matches while `a{{x}}` and `{{a}}{{b}}` don't.

    Params:
        value: Value to inspect

    Returns:
        True if the whole value is a single expression
    """
    return (
        isinstance(value, str)
        and _PRIMITIVE_IML_EXPRESSION.fullmatch(value) is not None
    )


def append_query_string(path: str, domain: str, tail: list[str] | tuple[str, ...]) -> str:
    """
    Append tail parameters to a remote path as a query string.

    Internal `api://` paths are resolved by the host with full context and are
    returned unchanged.

    Params:
        path: Remote resource path
        domain: Active domain (currently not part of the query string)
        tail: Ancestor field names, each becoming `name={{name}}`

    Returns:
        The path with the query string appended
    """
    if path.startswith("api://"):
        return path

    query_string = "&".join(f"{quote(part, safe=_URI_SAFE)}={{{{{part}}}}}" for part in tail)
    if not query_string:
        return path

    separator = "&" if "?" in path else "?"
    return f"{path}{separator}{query_string}"


def flatten_options(options: list[Any] | None) -> list[dict[str, Any]]:
    """
    Unwrap (possibly partially) grouped select options into a flat list.

    Grouped options get their label prefixed with the group label, e.g.
    `Fruit: Apple`.

    Params:
        options: Options and option groups as declared on the field

    Returns:
        Flat list of options
    """
    flat = []
    for item in options or []:
        if is_option_group(item):
            for option in item["options"]:
                flat.append(
                    {
                        **option,
                        "label": f"{item.get('label')}: {option.get('label') or option.get('value')}",
                    }
                )
        else:
            flat.append(item)
    return flat


def drop_none(data: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of a mapping without keys whose value is None."""
    return {key: value for key, value in data.items() if value is not None}
