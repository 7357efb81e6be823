"""
JSON Schema to Forman Schema conversion.

Pure structural mapping used for previews. Vendor markers written by the
forward direction (`x-composite`, `x-filter`, `x-path`, `x-search`) are read
back; remote listings, nested directives and domain routing are not
reconstructed.
"""

from typing import Any

from forman_schema.composites import get_composite
from forman_schema.core.types import FormanField, JSONSchema
from forman_schema.core.utils import drop_none, no_empty

JSON_PRIMITIVE_TYPE_MAP: dict[str, str] = {
    "string": "text",
    "number": "number",
    "integer": "number",
    "boolean": "boolean",
}


def _properties_to_spec(schema: JSONSchema) -> list[FormanField]:
    required = schema.get("required") or []
    spec = []
    for name, prop in (schema.get("properties") or {}).items():
        if not prop:
            continue
        sub_field = to_forman_schema(prop)
        sub_field["name"] = name
        sub_field["required"] = name in required
        spec.append(sub_field)
    return spec


def _base_field(field_type: str, schema: JSONSchema, **extra: Any) -> FormanField:
    return drop_none(
        {
            "type": field_type,
            "label": no_empty(schema.get("title")),
            "help": no_empty(schema.get("description")),
            **extra,
        }
    )


def _handle_search_directive(field: FormanField, directive: dict[str, Any]) -> FormanField:
    input_schema = directive.get("inputSchema") or {}
    ref = input_schema.get("$ref")
    field["rpc"] = drop_none(
        {
            "url": directive.get("url"),
            "label": directive.get("label"),
            "parameters": ref
            if isinstance(ref, str)
            else to_forman_schema(input_schema).get("spec"),
        }
    )
    return field


def to_forman_schema(schema: JSONSchema) -> FormanField:
    """
    Convert a JSON Schema fragment to its Forman Schema equivalent.

    Params:
        schema: JSON Schema fragment, typically produced by `to_json_schema`

    Returns:
        The equivalent Forman field
    """
    composite = get_composite(schema.get("x-composite"))
    if composite is not None:
        return composite.collapse(schema)

    schema_type = schema.get("type")

    if schema_type == "object":
        if not schema.get("properties"):
            # No declared properties, shape is decided at runtime
            return _base_field("dynamicCollection", schema)
        return _base_field("collection", schema, spec=_properties_to_spec(schema))

    if schema_type == "array":
        if "x-filter" in schema:
            logic = schema["x-filter"]
            return _base_field("filter", schema, logic=None if logic == "default" else logic)

        items = schema.get("items") if isinstance(schema.get("items"), dict) else None
        spec = None
        if items is not None:
            if items.get("type") == "object" and items.get("properties"):
                spec = _properties_to_spec(items)
            else:
                spec = to_forman_schema(items)

        field = _base_field("array", schema, spec=spec)
        validate = drop_none(
            {"minItems": schema.get("minItems"), "maxItems": schema.get("maxItems")}
        )
        if validate:
            field["validate"] = validate
        return field

    if schema_type == "string":
        path_info = schema.get("x-path")
        if path_info:
            return _base_field(
                path_info.get("type"),
                schema,
                options=drop_none(
                    {
                        "store": schema.get("x-fetch"),
                        "showRoot": path_info.get("showRoot"),
                        "singleLevel": path_info.get("singleLevel"),
                    }
                ),
            )
        if schema.get("enum"):
            return _base_field(
                "select", schema, options=[{"value": value} for value in schema["enum"]]
            )
        if schema.get("oneOf"):
            return _base_field(
                "select",
                schema,
                options=[
                    {"value": option.get("const")} for option in schema["oneOf"] if option
                ],
            )

        field = _base_field("text", schema, default=schema.get("default"))
        validate = drop_none({"pattern": schema.get("pattern"), "enum": schema.get("enum")})
        if validate:
            field["validate"] = validate
        if "x-search" in schema:
            field = _handle_search_directive(field, schema["x-search"])
        return field

    field = _base_field(
        JSON_PRIMITIVE_TYPE_MAP.get(schema_type, "any")
        if isinstance(schema_type, str)
        else "any",
        schema,
        default=schema.get("default"),
    )
    validate = drop_none({"min": schema.get("minimum"), "max": schema.get("maximum")})
    if validate:
        field["validate"] = validate
    if "x-search" in schema:
        field = _handle_search_directive(field, schema["x-search"])
    return field
