"""
Forman Schema to JSON Schema conversion.

Recursive descent over the field tree producing one JSON Schema fragment per
field. Each level receives a ConversionContext carrying the active domain,
the tail of ancestor select names (for remote query strings), the structural
path and the domain root registry shared across the traversal. Select
options with nested fields splice `if/then` branches onto the parent
collection through the context's `add_conditional_fields` callback.
"""

import logging

from attrs import Factory, evolve, frozen

from forman_schema.composites import Composite, get_composite
from forman_schema.conversion.filter import filter_items_schema
from forman_schema.core.normalizer import (
    LiteralOptions,
    NestedSource,
    RemoteOptions,
    extract_nested,
    extract_options,
    normalize_forman_field_type,
    option_nested,
    validate_forman_field,
)
from forman_schema.core.type_tables import FORMAN_TYPE_MAP, PATH_TYPES, SELECT_TYPES
from forman_schema.core.types import (
    DEFAULT_DOMAIN,
    ConditionalFieldsAdder,
    FormanField,
    FormanSpecEntry,
    FormanValue,
    JSONSchema,
)
from forman_schema.core.utils import (
    append_query_string,
    drop_none,
    flatten_options,
    is_visual_type,
    no_empty,
)
from forman_schema.exceptions import ErrorContext, SchemaConversionError
from forman_schema.structure.registry import DomainRootRegistry

logger = logging.getLogger(__name__)


def _reject_conditional_fields(
    name: str, value: FormanValue, nested: JSONSchema | str
) -> None:
    raise SchemaConversionError("Cannot serialize nested fields without parent field.")


@frozen
class ConversionContext:
    """Per-level conversion state; children get evolved copies.

    `roots` and `defs` are shared by reference across one top-level call.
    `expanding` holds the composites currently being expanded, so a
    composite met again inside its own expansion only emits a `$ref`.
    """

    domain: str = DEFAULT_DOMAIN
    tail: tuple[str, ...] = ()
    path: tuple[str, ...] = ()
    roots: DomainRootRegistry = Factory(DomainRootRegistry)
    defs: dict[str, JSONSchema] = Factory(dict)
    expanding: frozenset[str] = frozenset()
    add_conditional_fields: ConditionalFieldsAdder = _reject_conditional_fields

    def error_context(self, field_type: str | None = None) -> ErrorContext:
        return ErrorContext(domain=self.domain, path=list(self.path), field_type=field_type)


def to_json_schema(field: FormanField) -> JSONSchema:
    """
    Convert a root Forman field to JSON Schema.

    Shared composite fragments are attached under `$defs` when any composite
    was used.

    Params:
        field: Root field, typically a collection

    Returns:
        The JSON Schema document

    Raises:
        SchemaConversionError: When a field type is missing or unknown
    """
    context = ConversionContext()
    result = to_json_schema_internal(field, context)

    if context.defs:
        result["$defs"] = context.defs

    for domain in context.roots.unresolved_domains():
        logger.debug(
            "Domain '%s' has no root, %d routed field(s) dropped",
            domain,
            len(context.roots.pending(domain)),
        )

    return result


def to_json_schema_internal(
    field: FormanField, context: ConversionContext | None = None
) -> JSONSchema:
    """
    Convert a Forman field to its JSON Schema equivalent.

    Params:
        field: The field to convert; never mutated
        context: Conversion context, a fresh default one when omitted

    Returns:
        The JSON Schema fragment

    Raises:
        SchemaConversionError: When a field type is missing or unknown
    """
    if context is None:
        context = ConversionContext()

    try:
        validate_forman_field(field)
    except SchemaConversionError as e:
        e.context = context.error_context(field.get("type"))
        raise

    composite = get_composite(field["type"])
    if composite is not None:
        return _handle_composite(composite, field, context)

    field = normalize_forman_field_type(field)
    field_type = field["type"]

    result = drop_none(
        {
            "type": FORMAN_TYPE_MAP[field_type],
            "title": no_empty(field.get("label")),
            "description": no_empty(field.get("help")),
        }
    )

    if field_type in ("collection", "dynamicCollection"):
        return _handle_collection(field, result, context)
    if field_type == "array":
        return _handle_array(field, result, context)
    if field_type in SELECT_TYPES or field_type in PATH_TYPES:
        return _handle_select_or_path(field, result, context)
    if field_type == "filter":
        return _handle_filter(field, result, context)
    return _handle_primitive(field, result, context)


def _handle_composite(
    composite: Composite, field: FormanField, context: ConversionContext
) -> JSONSchema:
    if composite.name not in context.expanding:
        # Conditional branches of the expansion land on the real parent
        expanded = to_json_schema_internal(
            composite.expand(field),
            evolve(context, expanding=context.expanding | {composite.name}),
        )
        if composite.name not in context.defs:
            logger.debug("Defining shared fragment for composite '%s'", composite.name)
            context.defs[composite.name] = {
                **composite.extract_inner(expanded),
                "x-composite": composite.name,
            }

    result = composite.wrap_ref(composite.ref, field)
    result["x-composite"] = composite.name
    return result


def _handle_collection(
    field: FormanField, result: JSONSchema, context: ConversionContext
) -> JSONSchema:
    domain_root = field.get("x-domain-root")
    spec = field.get("spec")

    if field["type"] == "dynamicCollection" and spec is None and not domain_root:
        return result

    properties: dict[str, JSONSchema] = {}
    required: list[str] = []
    result["properties"] = properties
    result["required"] = required

    def add_conditional_fields(name: str, value: FormanValue, nested: JSONSchema | str) -> None:
        result.setdefault("allOf", []).append(
            {
                "if": {"properties": {name: {"const": value}}},
                "then": {"$ref": nested} if isinstance(nested, str) else nested,
            }
        )

    def add_field(sub_field: FormanSpecEntry, tail: tuple[str, ...] | None = None) -> None:
        tail = context.tail if tail is None else tuple(tail)

        if isinstance(sub_field, str):
            result.setdefault("allOf", []).append(
                {"$ref": append_query_string(sub_field, context.domain, tail)}
            )
            return

        if is_visual_type(sub_field.get("type")):
            return

        name = sub_field.get("name")
        if not name:
            return

        # Duplicate names are allowed in Forman (bound to the same value); first wins
        if name in properties:
            return

        if sub_field.get("required"):
            required.append(name)

        properties[name] = to_json_schema_internal(
            sub_field,
            evolve(
                context,
                domain=domain_root or context.domain,
                tail=tail,
                path=(*context.path, name),
                add_conditional_fields=add_conditional_fields,
            ),
        )

    if domain_root:

        def add_fields(fields: list[FormanSpecEntry], tail: tuple[str, ...] | None = None) -> None:
            for sub_field in fields:
                add_field(sub_field, tail)

        context.roots.register(domain_root, add_fields, field)

    if isinstance(spec, list):
        for sub_field in spec:
            add_field(sub_field)

    return result


def _handle_array(
    field: FormanField, result: JSONSchema, context: ConversionContext
) -> JSONSchema:
    spec = field.get("spec")
    if spec is not None:
        item = {"type": "collection", "spec": spec} if isinstance(spec, list) else spec
        result["items"] = to_json_schema_internal(
            item, evolve(context, path=(*context.path, f"{field.get('name') or ''}[]"))
        )

    validate = field.get("validate") or {}
    for key in ("minItems", "maxItems"):
        if validate.get(key) is not None:
            result[key] = validate[key]

    return result


def _handle_filter(
    field: FormanField, result: JSONSchema, context: ConversionContext
) -> JSONSchema:
    logic = field.get("logic")
    result["items"] = filter_items_schema(field, context.domain, context.tail)
    # Kept for lossless reverse conversion
    result["x-filter"] = logic if logic is not None else "default"
    return result


def _nested_tail(field: FormanField, context: ConversionContext) -> tuple[str, ...]:
    name = field.get("name")
    return (*context.tail, name) if name else context.tail


def _nested_schema(
    store: list[FormanSpecEntry] | str,
    domain: str,
    field: FormanField,
    context: ConversionContext,
) -> JSONSchema | str:
    """
    Convert nested content next to a field.

    A remote path becomes a tail-qualified reference string, a list mixing
    references and fields becomes an `allOf` of both, and a plain field list
    becomes an implicit collection.
    """
    tail = _nested_tail(field, context)

    if isinstance(store, str):
        return append_query_string(store, domain, tail)

    nested_context = evolve(context, domain=domain, tail=tail)
    if any(isinstance(item, str) for item in store):
        return {
            "type": "object",
            "allOf": [
                {"$ref": append_query_string(item, domain, tail)}
                if isinstance(item, str)
                else to_json_schema_internal(
                    {"type": "collection", "spec": [item]}, nested_context
                )
                for item in store
            ],
        }

    return to_json_schema_internal({"type": "collection", "spec": store}, nested_context)


def _handle_nested_with_domain(
    field: FormanField,
    nested: NestedSource | None,
    result: JSONSchema,
    context: ConversionContext,
) -> JSONSchema:
    """Route nested fields to another domain, or embed them as `x-nested`."""
    if nested is None:
        return result

    if nested.domain and nested.domain != context.domain:
        context.roots.route(nested.domain, nested.entries, _nested_tail(field, context))
        return result

    schema = _nested_schema(nested.store, nested.domain or context.domain, field, context)
    result["x-nested"] = {"$ref": schema} if isinstance(schema, str) else schema
    return result


def _process_rpc_directive(
    field: FormanField, result: JSONSchema, context: ConversionContext
) -> JSONSchema:
    rpc = field.get("rpc")
    if not rpc:
        return result

    parameters = rpc.get("parameters")
    result["x-search"] = drop_none(
        {
            "url": append_query_string(rpc["url"], context.domain, context.tail),
            "label": rpc.get("label"),
            # The panel RPC runs outside the form, so no tail on the parameters ref
            "inputSchema": {"$ref": parameters}
            if isinstance(parameters, str)
            else to_json_schema_internal({"type": "collection", "spec": parameters}, context),
        }
    )
    return result


def _handle_select_or_path(
    field: FormanField, result: JSONSchema, context: ConversionContext
) -> JSONSchema:
    name = field.get("name")
    options = field.get("options")

    if field["type"] in PATH_TYPES:
        path_options = options if isinstance(options, dict) else {}
        show_root = path_options.get("showRoot")
        single_level = path_options.get("singleLevel")
        result["x-path"] = drop_none(
            {
                "type": field["type"],
                "showRoot": True if show_root is None else show_root,
                "singleLevel": False if single_level is None else single_level,
                "ownName": name,
            }
        )

    source = extract_options(field)
    nested = extract_nested(field)

    if isinstance(source, RemoteOptions):
        result["x-fetch"] = append_query_string(source.path, context.domain, context.tail)
    else:
        flat = flatten_options(source.items if isinstance(source, LiteralOptions) else None)

        if any(option.get("label") or option.get("nested") for option in flat):
            one_of = []
            for option in flat:
                local = option_nested(option)
                local_store = local.store if local is not None else (nested.store if nested else None)
                local_domain = (
                    (local.domain if local is not None else None)
                    or (nested.domain if nested else None)
                    or context.domain
                )

                if local_store is not None:
                    context.add_conditional_fields(
                        name,
                        option.get("value"),
                        _nested_schema(local_store, local_domain, field, context),
                    )

                one_of.append(
                    drop_none({"title": no_empty(option.get("label")), "const": option.get("value")})
                )
            result["oneOf"] = one_of
        else:
            result["enum"] = [option.get("value") for option in flat]

    result = _handle_nested_with_domain(field, nested, result, context)
    return _process_rpc_directive(field, result, context)


def _handle_primitive(
    field: FormanField, result: JSONSchema, context: ConversionContext
) -> JSONSchema:
    default = field.get("default")
    if default not in ("", None):
        result["default"] = default

    validate = field.get("validate") or {}
    pattern = validate.get("pattern")
    if pattern:
        result["pattern"] = pattern.get("regexp") if isinstance(pattern, dict) else pattern
    if validate.get("min") is not None:
        result["minimum"] = validate["min"]
    if validate.get("max") is not None:
        result["maximum"] = validate["max"]
    if validate.get("enum"):
        result["enum"] = validate["enum"]

    result = _process_rpc_directive(field, result, context)
    return _handle_nested_with_domain(field, extract_nested(field), result, context)
