"""
Core type definitions for Forman Schema processing.

This module contains the type aliases shared by the converters and the
validator. Fields, values and schemas are plain nested data exactly as parsed
from JSON, so the aliases describe shapes rather than classes.
"""

from collections.abc import Awaitable, Callable
from typing import Any

FormanValue = str | int | float | bool | list | dict | None

FormanField = dict[str, Any]

FormanSpecEntry = FormanField | str

JSONSchema = dict[str, Any]

# (name, value, nested) -> None; splices an if/then branch onto the parent
ConditionalFieldsAdder = Callable[[str, FormanValue, "JSONSchema | str"], None]

# (fields, tail) -> None; receives fields routed to a domain root
DomainFieldsAdder = Callable[[list[FormanSpecEntry], tuple[str, ...] | None], None]

# (path, data) -> resolved data; injected by the caller of the validator
RemoteResolver = Callable[[str, dict[str, Any]], Awaitable[Any]]

DEFAULT_DOMAIN = "default"
