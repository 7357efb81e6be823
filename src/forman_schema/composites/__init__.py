"""
Composite field types.

A composite is a higher-level field type that macro-expands into a primitive
structure before conversion or validation. Each composite provides four
operations:

    expand(field) -> field             pure rewrite into primitive types
    extract_inner(schema) -> schema    fragment shared under `$defs`
    wrap_ref(ref, field) -> schema     per-usage schema pointing at `$defs`
    collapse(schema) -> field          reverse conversion of a tagged fragment
"""

from collections.abc import Callable

from attrs import frozen

from forman_schema.composites import udtspec, udttype
from forman_schema.core.types import FormanField, JSONSchema


@frozen
class Composite:
    name: str
    expand: Callable[[FormanField], FormanField]
    extract_inner: Callable[[JSONSchema], JSONSchema]
    wrap_ref: Callable[[str, FormanField], JSONSchema]
    collapse: Callable[[JSONSchema], FormanField]

    @property
    def ref(self) -> str:
        return f"#/$defs/{self.name}"


COMPOSITES: dict[str, Composite] = {
    "udttype": Composite(
        "udttype",
        udttype.expand,
        udttype.extract_inner,
        udttype.wrap_ref,
        udttype.collapse,
    ),
    "udtspec": Composite(
        "udtspec",
        udtspec.expand,
        udtspec.extract_inner,
        udtspec.wrap_ref,
        udtspec.collapse,
    ),
}


def get_composite(field_type: str | None) -> Composite | None:
    return COMPOSITES.get(field_type) if field_type else None


__all__ = ["COMPOSITES", "Composite", "get_composite"]
