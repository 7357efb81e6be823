"""
Async validation of values against Forman field trees.

Walks the same grammar as the forward converter, but value-directed. Each
level receives a ValidationContext carrying the active domain, the tail of
ancestor `(name, value)` pairs (fed to the remote resolver), the structural
path used for error locations and a continuation validating fields spliced
next to a select. Every validated domain has a ValidationRoot so that nested
fields naming another domain are validated against that domain's values.

Data problems are reported as ValidationIssue entries and never raised.
"""

import logging
import re
from collections import deque
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from attrs import evolve, frozen

from forman_schema.composites import get_composite
from forman_schema.conversion.filter import FLAT_FILTER_LOGIC, filter_operators
from forman_schema.core.normalizer import (
    NestedSource,
    extract_nested,
    normalize_forman_field_type,
    unwrap_nested,
)
from forman_schema.core.type_tables import (
    FORMAN_VALUE_TYPE_MAP,
    IML_FILTER_OPERATORS,
    PATH_TYPES,
    SELECT_TYPES,
)
from forman_schema.core.types import FormanField, FormanSpecEntry, RemoteResolver
from forman_schema.core.utils import (
    contains_iml_expression,
    drop_none,
    flatten_options,
    is_primitive_iml_expression,
    is_reference_type,
    is_visual_type,
)
from forman_schema.exceptions import FormanSchemaError, RemoteResolutionError
from forman_schema.validation.results import (
    ValidationIssue,
    ValidationOptions,
    ValidationResult,
)
from forman_schema.validation.states import FieldState, build_restore_structure

logger = logging.getLogger(__name__)

NestedFieldsValidator = Callable[[list[FormanField], "ValidationContext"], Awaitable[None]]


async def _reject_nested_fields(fields: list[FormanField], context: "ValidationContext") -> None:
    raise FormanSchemaError("Cannot validate nested fields without parent field.")


@dataclass
class ValidationRoot:
    """Per-domain state shared by every field validated in that domain."""

    validate_fields: Callable[[list[FormanField], "ValidationContext"], Awaitable[ValidationResult]]
    seen_fields: set[str] = field(default_factory=set)
    field_states: list[FieldState] = field(default_factory=list)


@frozen
class ValidationContext:
    """Per-level validation state; children get evolved copies."""

    domain: str
    roots: dict[str, ValidationRoot]
    resolver: RemoteResolver | None = None
    tail: tuple[tuple[str, Any], ...] = ()
    path: tuple[str | int, ...] = ()
    strict: bool = False
    validate_nested_fields: NestedFieldsValidator = _reject_nested_fields

    @property
    def location(self) -> str:
        return ".".join(str(segment) for segment in self.path)

    def issue(self, message: str) -> ValidationIssue:
        return ValidationIssue(domain=self.domain, path=self.location, message=message)

    def failed(self, message: str, errors: list[ValidationIssue] | None = None) -> ValidationResult:
        return ValidationResult(valid=False, errors=[*(errors or []), self.issue(message)])

    def record_state(self, state: dict[str, Any]) -> None:
        """Store a UI restore snapshot for the current field on the domain root."""
        root = self.roots.get(self.domain)
        if root is not None:
            root.field_states.append(FieldState(self.path, drop_none(state)))

    async def resolve_remote(self, path: str, local_data: dict[str, Any] | None = None) -> Any:
        """
        Resolve a remote resource through the injected resolver.

        The resolver receives the tail folded into a mapping, overlaid with
        the local data.

        Params:
            path: Remote resource path
            local_data: Extra data taking precedence over the tail

        Returns:
            Whatever the resolver returns

        Raises:
            RemoteResolutionError: When no resolver was provided
        """
        if self.resolver is None:
            raise RemoteResolutionError(
                "Remote resource not supported when resolver is not provided."
            )
        data = {name: value for name, value in self.tail}
        if local_data:
            data.update(local_data)
        return await self.resolver(path, data)


def _remote_failure(context: ValidationContext, path: str, error: Exception) -> ValidationIssue:
    logger.warning("Failed to resolve remote resource %s: %s", path, error)
    return context.issue(f"Failed to resolve remote resource {path}: {error}")


def value_type_name(value: Any) -> str:
    """Name the runtime category of a value: string, number, boolean, array or object."""
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _format_enum_member(member: Any) -> str:
    # Messages spell values the way Forman documents write them
    if isinstance(member, bool):
        return "true" if member else "false"
    if member is None:
        return "null"
    return str(member)


def _same_value(left: Any, right: Any) -> bool:
    # bool is an int subclass; True must not match 1
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    return left == right


async def validate_forman_with_domains(
    domains: dict[str, dict[str, Any]],
    options: ValidationOptions | dict | None = None,
) -> ValidationResult:
    """
    Validate several domains, each a value tree with its own field list.

    All domain roots are known up front, so nested fields routed from one
    domain to another are validated against the target domain's values.

    Params:
        domains: Mapping of domain name to `{"values": ..., "schema": [...]}`
        options: ValidationOptions or a plain options bag

    Returns:
        The validation result; `states` is set only when requested and valid
    """
    if not isinstance(options, ValidationOptions):
        options = ValidationOptions.from_dict(options)

    def root_validator(domain: str):
        async def validate_fields(
            fields: list[FormanField], context: ValidationContext
        ) -> ValidationResult:
            return await validate_forman_value(
                (domains[domain] or {}).get("values"),
                {"name": domain, "type": "collection", "spec": fields},
                evolve(context, path=(), domain=domain),
            )

        return validate_fields

    roots = {domain: ValidationRoot(root_validator(domain)) for domain in domains}

    errors: list[ValidationIssue] = []
    for domain, entry in domains.items():
        if not entry:
            continue
        context = ValidationContext(
            domain=domain,
            roots=roots,
            resolver=options.resolve_remote,
            strict=options.strict is True,
        )
        result = await validate_forman_value(
            entry.get("values"),
            {"name": domain, "type": "collection", "spec": entry.get("schema") or []},
            context,
        )
        errors.extend(result.errors)

    states = None
    if not errors and options.states:
        states = build_restore_structure(
            [
                {"domain": domain, "path": item.path, "state": item.state}
                for domain, root in roots.items()
                for item in root.field_states
            ]
        )

    return ValidationResult(valid=not errors, errors=errors, states=states)


async def validate_forman(
    values: dict[str, Any],
    schema: list[FormanSpecEntry],
    options: ValidationOptions | dict | None = None,
) -> ValidationResult:
    """Validate values of the single `default` domain against a field list."""
    return await validate_forman_with_domains(
        {"default": {"values": values, "schema": schema}}, options
    )


async def validate_forman_value(
    value: Any, field: FormanField, context: ValidationContext
) -> ValidationResult:
    """
    Validate a value against a single field.

    Params:
        value: The value to validate
        field: The field describing it
        context: Validation context of this level

    Returns:
        The validation result of the field and everything below it
    """
    if is_visual_type(field.get("type")):
        return ValidationResult(valid=True)

    composite = get_composite(field.get("type"))
    if composite is not None:
        field = composite.expand(field)

    field = normalize_forman_field_type(field)
    field_type = field.get("type")

    if field.get("required") and (value is None or value == ""):
        return context.failed("Field is mandatory.")

    if value is None:
        return ValidationResult(valid=True)

    expected = FORMAN_VALUE_TYPE_MAP.get(field_type)
    actual = value_type_name(value)
    if expected and expected != actual and not is_primitive_iml_expression(value):
        return context.failed(f"Expected type '{expected}', got type '{actual}'.")

    # The real value is only known after the expression is evaluated
    if contains_iml_expression(value):
        if field.get("mappable") is False:
            return context.failed("Value contains prohibited IML expression.")
        return ValidationResult(valid=True)

    if field_type == "collection":
        return await _handle_collection(value, field, context)
    if field_type == "array":
        return await _handle_array(value, field, context)
    if field_type in SELECT_TYPES:
        return await _handle_select(value, field, context)
    if field_type in PATH_TYPES:
        return await _handle_path(value, field, context)
    if field_type == "filter":
        return await _handle_filter(value, field, context)
    return await _handle_primitive(value, field, context)


async def _handle_collection(
    value: dict[str, Any], field: FormanField, context: ValidationContext
) -> ValidationResult:
    errors: list[ValidationIssue] = []
    path = context.path
    root = context.roots.get(context.domain)
    # Fields routed from other domains land on the root; share its seen set
    seen = root.seen_fields if not path and root is not None else set()

    async def validate_fields(fields: list[FormanField], field_context: ValidationContext) -> None:
        for sub_field in fields:
            if sub_field is None:
                continue
            if not isinstance(sub_field, dict):
                errors.append(field_context.issue(f"Invalid field definition: {sub_field!r}."))
                continue
            if is_visual_type(sub_field.get("type")):
                continue
            name = sub_field.get("name")
            if not name:
                errors.append(field_context.issue("Object contains field with unknown name."))
                continue
            if field_context.strict:
                seen.add(name)
            result = await validate_forman_value(
                value.get(name),
                sub_field,
                evolve(field_context, path=(*path, name), validate_nested_fields=validate_fields),
            )
            errors.extend(result.errors)

    spec = field.get("spec")
    queue: deque[FormanSpecEntry] = deque(spec if isinstance(spec, list) else [])
    while queue:
        sub_field = queue.popleft()
        if not sub_field:
            continue

        if isinstance(sub_field, str):
            try:
                resolved = await context.resolve_remote(sub_field)
            except Exception as e:
                return ValidationResult(
                    valid=False, errors=[*errors, _remote_failure(context, sub_field, e)]
                )
            if isinstance(resolved, list):
                queue.extendleft(reversed(resolved))
                continue
            sub_field = resolved

        await validate_fields([sub_field], context)

    if context.strict:
        for key in value:
            if key not in seen:
                # Avoid reporting the key again when another domain routes fields here
                seen.add(key)
                errors.append(context.issue(f"Unknown field '{key}'."))

    return ValidationResult.from_errors(errors)


async def _handle_array(
    value: list[Any], field: FormanField, context: ValidationContext
) -> ValidationResult:
    errors: list[ValidationIssue] = []
    spec = field.get("spec")

    if spec is not None:
        for index, item in enumerate(value):
            item_field = (
                {"name": str(index), "type": "collection", "spec": spec}
                if isinstance(spec, list)
                else {**spec, "name": str(index)}
            )
            result = await validate_forman_value(
                item, item_field, evolve(context, path=(*context.path, index))
            )
            errors.extend(result.errors)

    validate = field.get("validate") or {}
    if validate.get("minItems") is not None and len(value) < validate["minItems"]:
        errors.append(context.issue(f"Array has less than {validate['minItems']} items."))
    if validate.get("maxItems") is not None and len(value) > validate["maxItems"]:
        errors.append(context.issue(f"Array has more than {validate['maxItems']} items."))

    return ValidationResult.from_errors(errors)


def _filter_entry(field: FormanField) -> FormanField:
    operators = filter_operators(field)
    if operators is None:
        spec = [
            {"name": "a", "type": "any", "required": True},
            {"name": "b", "type": "any"},
            {"name": "o", "type": "text", "validate": {"enum": IML_FILTER_OPERATORS}},
        ]
    else:
        # Custom operators are always binary
        spec = [
            {"name": "a", "type": "any", "required": True},
            {"name": "b", "type": "any", "required": True},
            {
                "name": "o",
                "type": "text",
                "required": True,
                "validate": {
                    "enum": [option.get("value") for option in flatten_options(operators)]
                },
            },
        ]
    return {"type": "collection", "spec": spec}


async def _handle_filter(
    value: list[Any], field: FormanField, context: ValidationContext
) -> ValidationResult:
    # A filter is an array of entries, or an array of arrays of entries
    entry = _filter_entry(field)
    if field.get("logic") in FLAT_FILTER_LOGIC:
        inline = {"name": field.get("name"), "type": "array", "spec": entry}
    else:
        inline = {
            "name": field.get("name"),
            "type": "array",
            "spec": {"type": "array", "spec": entry},
        }
    return await _handle_array(value, inline, context)


def _find_option(options: list[Any], value: Any, grouped: bool) -> dict[str, Any] | None:
    if grouped:
        candidates = [
            option for group in options if isinstance(group, dict) for option in group.get("options") or []
        ]
    else:
        candidates = options
    for option in candidates:
        if isinstance(option, dict) and _same_value(option.get("value"), value):
            return option
    return None


async def _handle_select(
    value: Any, field: FormanField, context: ValidationContext
) -> ValidationResult:
    errors: list[ValidationIssue] = []

    options = field.get("options")
    store = options.get("store") if isinstance(options, dict) else options
    nested = extract_nested(field, field_first=True)

    if isinstance(store, str):
        try:
            store = await context.resolve_remote(store)
        except Exception as e:
            return ValidationResult(valid=False, errors=[*errors, _remote_failure(context, store, e)])
    if not isinstance(store, list):
        store = []

    grouped = bool(field.get("grouped"))

    if field.get("multiple"):
        if not isinstance(value, list):
            return context.failed("Value is not an array.", errors)

        for single_value in value:
            if _find_option(store, single_value, grouped) is None:
                errors.append(context.issue(f"Value '{single_value}' not found in options."))

        validate = field.get("validate") or {}
        if validate.get("minItems") is not None and len(value) < validate["minItems"]:
            errors.append(context.issue(f"Selected less than {validate['minItems']} items."))
        if validate.get("maxItems") is not None and len(value) > validate["maxItems"]:
            errors.append(context.issue(f"Selected more than {validate['maxItems']} items."))
    else:
        item = _find_option(store, value, grouped)
        if item is None:
            return context.failed(f"Value '{value}' not found in options.", errors)

        if item.get("label"):
            context.record_state(
                {
                    "mode": None if is_reference_type(field.get("type")) else "chose",
                    "label": item["label"],
                }
            )

        item_nested = unwrap_nested(item.get("nested"))
        if item_nested is not None:
            nested = item_nested

    if nested is not None:
        result = await _handle_nested_fields(nested, value, field, context)
        errors.extend(result.errors)

    return ValidationResult.from_errors(errors)


async def _handle_path(
    value: Any, field: FormanField, context: ValidationContext
) -> ValidationResult:
    if not isinstance(value, str):
        return context.failed(
            f"Expected type 'string' for path, got type '{value_type_name(value)}'."
        )

    options = field.get("options")
    show_root, ids, single_level = True, False, False
    if isinstance(options, dict):
        if options.get("showRoot") is not None:
            show_root = options["showRoot"]
        if options.get("ids") is not None:
            ids = options["ids"]
        if options.get("singleLevel") is not None:
            single_level = options["singleLevel"]
        store = options.get("store")
    else:
        store = options

    if single_level and (
        (not show_root and "/" in value) or (show_root and value.rfind("/") > 0)
    ):
        return context.failed("Single level path cannot contain slashes.")

    nested = extract_nested(field, field_first=True)

    # Walk level by level; that is the only way to collect the labels
    levels = value.split("/")
    if levels[0] != "":
        levels.insert(0, "")

    if show_root and value == "/" and field.get("type") == "folder":
        return ValidationResult(valid=True)

    if len(levels) < 2:
        return context.failed(f'Invalid path "{value}" encountered.')

    selected_path: list[dict[str, Any]] = []
    for level_index in range(len(levels) - 1):
        is_last_level = level_index == len(levels) - 2
        level_value = levels[level_index + 1]
        selected_path_value = "/".join(str(option.get("value")) for option in selected_path)

        if not level_value:
            return context.failed(f'Invalid selected value of "{value}" encountered.')

        if isinstance(store, str):
            prefix = "/" if show_root and not selected_path_value.startswith("/") else ""
            try:
                level_options = await context.resolve_remote(
                    store, {field.get("name"): prefix + selected_path_value}
                )
            except Exception as e:
                return ValidationResult(valid=False, errors=[_remote_failure(context, store, e)])
        else:
            level_options = store

        selectable = []
        for candidate in level_options if isinstance(level_options, list) else []:
            if not isinstance(candidate, dict):
                continue
            is_file = bool(candidate.get("file"))
            if is_last_level and (
                (field.get("type") == "file" and not is_file)
                or (field.get("type") == "folder" and is_file)
            ):
                continue
            # Only folders can be descended into
            if not is_last_level and is_file:
                continue
            selectable.append(candidate)

        selected = next(
            (candidate for candidate in selectable if candidate.get("value") == level_value),
            None,
        )
        if selected is None:
            return context.failed(f"Path '{level_value}' not found in options.")
        selected_path.append(selected)

    if ids:
        context.record_state(
            {
                "mode": "chose",
                "path": [option.get("label") or option.get("value") for option in selected_path],
            }
        )

    errors: list[ValidationIssue] = []
    if nested is not None:
        result = await _handle_nested_fields(nested, value, field, context)
        errors.extend(result.errors)

    return ValidationResult.from_errors(errors)


async def _handle_nested_fields(
    nested: NestedSource, value: Any, field: FormanField, context: ValidationContext
) -> ValidationResult:
    """
    Validate fields nested next to a field once its value is known.

    Remote references in the store are resolved first. Fields targeting
    another domain are validated against that domain's values; the rest go
    through the enclosing collection's continuation.
    """
    errors: list[ValidationIssue] = []

    name = field.get("name")
    if name:
        context = evolve(context, tail=(*context.tail, (name, value)))

    store = nested.entries
    if any(isinstance(item, str) for item in store):
        resolved_store: list[FormanField] = []
        for item in store:
            if not isinstance(item, str):
                resolved_store.append(item)
                continue
            try:
                resolved = await context.resolve_remote(item)
            except Exception as e:
                return ValidationResult(valid=False, errors=[*errors, _remote_failure(context, item, e)])
            if isinstance(resolved, list):
                resolved_store.extend(resolved)
            elif resolved:
                resolved_store.append(resolved)
        store = resolved_store

    if nested.domain and nested.domain != context.domain:
        root = context.roots.get(nested.domain)
        if root is None:
            errors.append(
                context.issue(
                    f"Unable to process nested fields: Domain '{nested.domain}' not found."
                )
            )
        else:
            result = await root.validate_fields(store, context)
            errors.extend(result.errors)
    else:
        await context.validate_nested_fields(store, context)

    return ValidationResult.from_errors(errors)


async def _handle_primitive(
    value: Any, field: FormanField, context: ValidationContext
) -> ValidationResult:
    errors: list[ValidationIssue] = []
    validate = field.get("validate") or {}

    if isinstance(value, str):
        pattern = validate.get("pattern")
        if pattern:
            regexp = pattern.get("regexp") if isinstance(pattern, dict) else pattern
            try:
                matched = re.search(regexp, value)
            except (re.error, TypeError) as e:
                logger.warning("Invalid pattern %r: %s", regexp, e)
                errors.append(context.issue(f"Invalid pattern: {regexp}"))
            else:
                if not matched:
                    errors.append(context.issue(f"Value doesn't match the pattern: {regexp}"))
        if validate.get("min") is not None and len(value) < validate["min"]:
            errors.append(context.issue(f"Value must be at least {validate['min']} characters long."))
        if validate.get("max") is not None and len(value) > validate["max"]:
            errors.append(
                context.issue(f"Value exceeded maximum length of {validate['max']} characters.")
            )
        enum = validate.get("enum")
        if enum and value not in enum:
            errors.append(
                context.issue(
                    "Value must be one of the following: " + ", ".join(map(_format_enum_member, enum))
                )
            )
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        if validate.get("min") is not None and value < validate["min"]:
            errors.append(context.issue(f"Value is too small. Minimum value is {validate['min']}."))
        if validate.get("max") is not None and value > validate["max"]:
            errors.append(context.issue(f"Value is too big. Maximum value is {validate['max']}."))

    nested = unwrap_nested(field.get("nested"))
    if nested is not None:
        result = await _handle_nested_fields(nested, value, field, context)
        errors.extend(result.errors)

    return ValidationResult.from_errors(errors)
