"""
UI restore tree construction.

While validating, select and path fields record snapshots of what the user
picked (labels, resolved path labels) so a UI can restore them without
repeating remote resolution. Snapshots are recorded flat, with a structural
path, and folded here into a tree per domain:

    - a field name nests the next field under `nested`
    - an array index marks the holder with `mode: "chose"` and descends into
      `items[index]`; an index directly after another index goes under `value`
"""

from dataclasses import dataclass, field
from typing import Any

from forman_schema.core.utils import drop_none


@dataclass
class FieldState:
    """Snapshot recorded for the field at `path` within a domain."""

    path: tuple[str | int, ...]
    state: dict[str, Any] = field(default_factory=dict)


def build_restore_structure(entries: list[dict[str, Any]]) -> dict[str, Any]:
    """
    Fold field snapshots into the restore tree.

    Params:
        entries: Items of the form `{domain, path, state}`

    Returns:
        Mapping of domain name to its restore tree; repeated paths are merged
    """
    result: dict[str, Any] = {}

    for entry in entries:
        container = result.setdefault(entry["domain"], {})
        node = container
        path = list(entry["path"])

        for index, segment in enumerate(path):
            following = path[index + 1] if index + 1 < len(path) else None

            if isinstance(segment, int):
                node["mode"] = "chose"
                items = node.setdefault("items", [])
                while len(items) <= segment:
                    items.append({})
                container = items[segment]
                if isinstance(following, int):
                    node = container.setdefault("value", {})
                elif following is None:
                    node = container
            else:
                node = container.setdefault(segment, {})
                if isinstance(following, str):
                    container = node.setdefault("nested", {})

        node.update(drop_none(entry["state"]))

    return result
