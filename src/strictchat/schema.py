from __future__ import annotations

"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Strict JSON schema compilation for structured outputs.

Strict mode on the upstream API accepts a schema only when every object, at
every depth, is closed (`additionalProperties: false`) and lists all of its
properties in `required`. `compile_schema` rewrites a shape's base schema to
meet that, walking properties, array items, shared definitions and every
combinator branch.
"""

import copy
import re
from typing import Any

from .shapes import as_shape
from .types import JSONSchema

_COMBINATOR_KEYS = ("allOf", "anyOf", "oneOf")
_DEFINITION_KEYS = ("$defs", "definitions")
_NAME_UNSAFE = re.compile(r"[^a-zA-Z0-9_-]+")
SCHEMA_NAME_SUFFIX = "_response"


def _is_object_node(node: dict[str, Any]) -> bool:
    node_type = node.get("type")
    if isinstance(node_type, list):
        return "object" in node_type
    return node_type == "object"


def strictify(node: Any, *, empty_required: bool = True) -> None:
    """Rewrite `node` in place so every object below it is closed and fully required."""
    if not isinstance(node, dict):
        # Boolean schemas (`true` / `false`) carry nothing to rewrite.
        return

    if _is_object_node(node):
        properties = node.get("properties")
        if not isinstance(properties, dict):
            properties = {}
            node["properties"] = properties
        node["additionalProperties"] = False
        if properties or empty_required:
            node["required"] = list(properties.keys())
        else:
            node.pop("required", None)

    properties = node.get("properties")
    if isinstance(properties, dict):
        for prop_schema in properties.values():
            strictify(prop_schema, empty_required=empty_required)

    items = node.get("items")
    if isinstance(items, list):
        for item_schema in items:
            strictify(item_schema, empty_required=empty_required)
    else:
        strictify(items, empty_required=empty_required)

    prefix_items = node.get("prefixItems")
    if isinstance(prefix_items, list):
        for item_schema in prefix_items:
            strictify(item_schema, empty_required=empty_required)

    for key in _COMBINATOR_KEYS:
        branches = node.get(key)
        if isinstance(branches, list):
            for branch in branches:
                strictify(branch, empty_required=empty_required)

    strictify(node.get("not"), empty_required=empty_required)

    for key in _DEFINITION_KEYS:
        definitions = node.get(key)
        if isinstance(definitions, dict):
            for definition in definitions.values():
                strictify(definition, empty_required=empty_required)


def compile_schema(target: Any, *, empty_required: bool = True) -> JSONSchema:
    """
    Build the strict schema document for `target`.

    `target` is a `Shape` or anything pydantic can adapt. The shape's own
    base schema is deep-copied first and never mutated.
    """
    shape = as_shape(target)
    schema = copy.deepcopy(shape.json_schema())
    strictify(schema, empty_required=empty_required)
    return schema


def schema_name_for(target: Any) -> str:
    """
    Stable schema name from the shape's type identifier.

    Runs of characters outside `[a-zA-Z0-9_-]` collapse to one underscore;
    the result is lowercased and suffixed with `_response`.
    """
    shape = as_shape(target)
    sanitized = _NAME_UNSAFE.sub("_", shape.type_name)
    return f"{sanitized.lower()}{SCHEMA_NAME_SUFFIX}"
