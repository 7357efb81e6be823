"""
JSON Schema synthesis for `filter` fields.

A filter value is a boolean-logic matrix of condition entries `{a, o, b?}`:
`a`/`b` are operands, `o` is the operator. With `logic` set to `and`/`or` the
value is a flat list of entries, otherwise it is a list of AND-groups
(disjunctive normal form).
"""

from typing import Any

from forman_schema.core.normalizer import LiteralOptions, RemoteOptions, unwrap_options
from forman_schema.core.type_tables import (
    IML_BINARY_FILTER_OPERATORS,
    IML_FILTER_ENTRY_TYPES,
    IML_UNARY_FILTER_OPERATORS,
)
from forman_schema.core.types import FormanField, JSONSchema
from forman_schema.core.utils import append_query_string, flatten_options

FLAT_FILTER_LOGIC = ("and", "or")


def filter_operators(field: FormanField) -> list[Any] | None:
    """Return the custom operator list of a filter, if any."""
    options = field.get("options")
    if isinstance(options, dict) and isinstance(options.get("operators"), list):
        return options["operators"]
    return None


def _choices(options: list[Any]) -> list[JSONSchema]:
    return [
        {
            "title": option.get("label") or option.get("value"),
            "const": option.get("value"),
        }
        for option in flatten_options(options)
    ]


def operand_schema(field: FormanField, domain: str, tail: tuple[str, ...]) -> JSONSchema:
    """
    Build the schema of a filter operand.

    Params:
        field: The filter field
        domain: Active domain
        tail: Ancestor field names for the remote query string

    Returns:
        Schema offering static choices, a remote listing or any primitive
    """
    options = field.get("options")
    source = unwrap_options(options.get("store") if isinstance(options, dict) else options)

    if isinstance(source, RemoteOptions):
        return {"type": "string", "x-fetch": append_query_string(source.path, domain, tail)}
    if isinstance(source, LiteralOptions):
        return {"type": "string", "oneOf": _choices(source.items)}
    return {"type": list(IML_FILTER_ENTRY_TYPES)}


def filter_entry_schema(field: FormanField, domain: str, tail: tuple[str, ...]) -> JSONSchema:
    """
    Build the schema of a single filter condition entry.

    The binary shape `{a, b, o}` is always offered. The unary shape `{a, o}`
    with `exist`/`notexist` is offered only with the default operator
    vocabulary.
    """
    operand = operand_schema(field, domain, tail)
    operators = filter_operators(field)

    if operators is not None:
        operator = {"type": "string", "oneOf": _choices(operators)}
    else:
        operator = {"enum": list(IML_BINARY_FILTER_OPERATORS)}

    definitions = [
        {
            "type": "object",
            "properties": {"a": operand, "b": dict(operand), "o": operator},
            "required": ["a", "b", "o"],
        }
    ]
    if operators is None:
        definitions.append(
            {
                "type": "object",
                "properties": {
                    "a": dict(operand),
                    "o": {"enum": list(IML_UNARY_FILTER_OPERATORS)},
                },
                "required": ["a", "o"],
            }
        )
    return {"oneOf": definitions}


def filter_items_schema(field: FormanField, domain: str, tail: tuple[str, ...]) -> JSONSchema:
    """Wrap the entry schema according to the filter logic."""
    entry = filter_entry_schema(field, domain, tail)
    if field.get("logic") in FLAT_FILTER_LOGIC:
        return entry
    return {"type": "array", "items": entry}
