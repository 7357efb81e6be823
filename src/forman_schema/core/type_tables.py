"""
Static type tables for Forman Schema field types.

Lookup tables mapping Forman field types to JSON Schema types (conversion)
and to runtime value categories (validation), plus the endpoint templates
for reference types and the filter operator vocabulary.
"""

FORMAN_TYPE_MAP: dict[str, str | None] = {
    "account": "number",
    "hook": "number",
    "keychain": "number",
    "datastore": "number",
    "aiagent": "string",
    "udt": "number",
    "device": "number",
    "scenario": "number",
    "array": "array",
    "collection": "object",
    "dynamicCollection": "object",
    "text": "string",
    "editor": "string",
    "number": "number",
    "boolean": "boolean",
    "checkbox": "boolean",
    "date": "string",
    "json": "string",
    "buffer": "string",
    "cert": "string",
    "color": "string",
    "email": "string",
    "filename": "string",
    "file": "string",
    "filter": "array",
    "folder": "string",
    "hidden": None,
    "integer": "number",
    "uinteger": "number",
    "password": "string",
    "path": "string",
    "pkey": "string",
    "port": "number",
    "select": "string",
    "time": "string",
    "timestamp": "string",
    "timezone": "string",
    "url": "string",
    "uuid": "string",
    "any": None,
}

FORMAN_VALUE_TYPE_MAP: dict[str, str | None] = {
    "account": "number",
    "hook": "number",
    "device": "number",
    "keychain": "number",
    "datastore": "number",
    "aiagent": "string",
    "udt": "number",
    "scenario": "number",
    "array": "array",
    "collection": "object",
    "dynamicCollection": "object",
    "text": "string",
    "editor": "string",
    "number": "number",
    "boolean": "boolean",
    "checkbox": "boolean",
    "date": "string",
    "json": "string",
    "buffer": "string",
    "cert": "string",
    "color": "string",
    "email": "string",
    "filename": "string",
    "file": "string",
    "filter": "array",
    "folder": "string",
    "hidden": None,
    "integer": "number",
    "uinteger": "number",
    "password": "string",
    "path": "string",
    "pkey": "string",
    "port": "number",
    "select": None,
    "time": "string",
    "timestamp": "string",
    "timezone": "string",
    "upload": "array",
    "url": "string",
    "uuid": "string",
    "any": None,
}

FORMAN_VISUAL_TYPES = ("banner", "markdown", "html", "separator")

COMPOSITE_TYPES = ("udttype", "udtspec")

# Insertion order matters: prefixed types are matched in this order
API_ENDPOINTS: dict[str, str] = {
    "account": "api://connections/{{kind}}",
    "aiagent": "api://ai-agents/v1/agents",
    "datastore": "api://data-stores",
    "hook": "api://hooks/{{kind}}",
    "device": "api://devices/{{kind}}",
    "keychain": "api://keys/{{kind}}",
    "udt": "api://data-structures",
    "scenario": "api://scenarios",
}

REFERENCE_TYPES = tuple(API_ENDPOINTS)

SELECT_TYPES = (
    "select",
    "account",
    "hook",
    "device",
    "keychain",
    "datastore",
    "aiagent",
    "udt",
    "scenario",
)

PATH_TYPES = ("file", "folder")

# Validator-only types (`upload`) are not convertible
CONVERTIBLE_TYPES = frozenset([*FORMAN_TYPE_MAP, *COMPOSITE_TYPES])

IML_UNARY_FILTER_OPERATORS = ["exist", "notexist"]

IML_BINARY_FILTER_OPERATORS = [
    "text:equal",
    "text:equal:ci",
    "text:notequal",
    "text:notequal:ci",
    "text:contain",
    "text:contain:ci",
    "text:notcontain",
    "text:notcontain:ci",
    "text:startwith",
    "text:startwith:ci",
    "text:notstartwith",
    "text:notstartwith:ci",
    "text:endwith",
    "text:endwith:ci",
    "text:notendwith",
    "text:notendwith:ci",
    "text:pattern",
    "text:pattern:ci",
    "text:notpattern",
    "text:notpattern:ci",
    "number:equal",
    "number:notequal",
    "number:greater",
    "number:less",
    "number:greaterorequal",
    "number:lessorequal",
    "date:equal",
    "date:notequal",
    "date:greater",
    "date:less",
    "date:greaterorequal",
    "date:lessorequal",
    "time:equal",
    "time:notequal",
    "time:greater",
    "time:less",
    "time:greaterorequal",
    "time:lessorequal",
    "semver:equal",
    "semver:notequal",
    "semver:greater",
    "semver:less",
    "semver:greaterorequal",
    "semver:lessorequal",
    "array:contain",
    "array:contain:ci",
    "array:notcontain",
    "array:notcontain:ci",
    "array:equal",
    "array:notequal",
    "array:greater",
    "array:less",
    "array:greaterorequal",
    "array:lessorequal",
    "boolean:equal",
    "boolean:notequal",
]

IML_FILTER_OPERATORS = [*IML_UNARY_FILTER_OPERATORS, *IML_BINARY_FILTER_OPERATORS]

IML_FILTER_ENTRY_TYPES = ["null", "boolean", "number", "string"]
