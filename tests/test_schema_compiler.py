from __future__ import annotations

import re
from typing import Any, Iterator, Literal

from pydantic import BaseModel, Field

from strictchat.schema import compile_schema, schema_name_for, strictify
from strictchat.shapes import (
    ArrayShape,
    BooleanShape,
    EnumShape,
    NumberShape,
    ObjectShape,
    OptionalShape,
    Shape,
    StringShape,
    UnionShape,
)


class Tag(BaseModel):
    label: str
    weight: float | None = None


class Section(BaseModel):
    heading: str
    tags: list[Tag] = Field(default_factory=list)
    note: Tag | None = None


class Document(BaseModel):
    title: str
    sections: list[Section]
    kind: Literal["draft", "final"] = "draft"


def _object_nodes(node: Any) -> Iterator[dict[str, Any]]:
    """Yield every object-typed schema node reachable from `node`."""
    if isinstance(node, dict):
        node_type = node.get("type")
        if node_type == "object" or (isinstance(node_type, list) and "object" in node_type):
            yield node
        for value in node.values():
            yield from _object_nodes(value)
    elif isinstance(node, list):
        for value in node:
            yield from _object_nodes(value)


def _assert_strict(schema: dict[str, Any]) -> int:
    count = 0
    for node in _object_nodes(schema):
        count += 1
        assert node["additionalProperties"] is False
        assert node["required"] == list(node["properties"].keys())
    return count


def _nested_shape(depth: int) -> ObjectShape:
    shape = ObjectShape(
        "Leaf",
        fields={"value": StringShape(), "score": OptionalShape(NumberShape())},
    )
    for level in range(depth):
        shape = ObjectShape(
            f"Level{level}",
            fields={
                "child": shape,
                "children": ArrayShape(shape),
                "maybe": OptionalShape(shape),
                "either": UnionShape((shape, StringShape())),
                "flag": OptionalShape(BooleanShape()),
            },
        )
    return shape


def test_every_nesting_level_is_closed_and_fully_required():
    for depth in range(1, 5):
        schema = compile_schema(_nested_shape(depth))
        # Root plus leaf must always be present.
        assert _assert_strict(schema) >= depth + 1


def test_optional_fields_are_forced_into_required():
    shape = ObjectShape(
        "Review",
        fields={
            "explanation": StringShape(),
            "tags": OptionalShape(ArrayShape(StringShape())),
        },
    )
    assert shape.json_schema()["required"] == ["explanation"]

    schema = compile_schema(shape)

    assert schema["required"] == ["explanation", "tags"]
    assert schema["additionalProperties"] is False
    assert schema["properties"]["tags"] == {
        "anyOf": [{"type": "array", "items": {"type": "string"}}, {"type": "null"}]
    }


def test_pydantic_model_definitions_are_strict():
    schema = compile_schema(Document)

    assert schema["required"] == ["title", "sections", "kind"]
    assert schema["$defs"]["Section"]["required"] == ["heading", "tags", "note"]
    assert schema["$defs"]["Tag"]["required"] == ["label", "weight"]
    assert _assert_strict(schema) == 3


def test_pydantic_list_target_strictifies_items():
    schema = compile_schema(list[Tag])

    assert schema["type"] == "array"
    assert schema["$defs"]["Tag"]["additionalProperties"] is False
    assert schema["$defs"]["Tag"]["required"] == ["label", "weight"]


def test_strictify_walks_every_combinator_and_item_form():
    def obj(**props: Any) -> dict[str, Any]:
        return {"type": "object", "properties": props, "required": []}

    schema: dict[str, Any] = {
        "type": "object",
        "properties": {
            "tuple": {"type": "array", "items": [obj(a={"type": "string"}), obj()]},
            "prefix": {"type": "array", "prefixItems": [obj(b={"type": "number"})]},
            "all": {"allOf": [obj(c={"type": "string"})]},
            "one": {"oneOf": [obj(d={"type": "string"}), {"type": "null"}]},
            "neg": {"not": obj(e={"type": "string"})},
            "nullable": {"type": ["object", "null"], "properties": {"f": {"type": "string"}}},
        },
        "definitions": {"Shared": obj(g={"type": "boolean"})},
    }

    strictify(schema)

    props = schema["properties"]
    assert props["tuple"]["items"][0]["required"] == ["a"]
    assert props["tuple"]["items"][1]["required"] == []
    assert props["prefix"]["prefixItems"][0]["required"] == ["b"]
    assert props["all"]["allOf"][0]["required"] == ["c"]
    assert props["one"]["oneOf"][0]["required"] == ["d"]
    assert props["one"]["oneOf"][1] == {"type": "null"}
    assert props["neg"]["not"]["required"] == ["e"]
    assert props["nullable"]["required"] == ["f"]
    assert schema["definitions"]["Shared"]["required"] == ["g"]
    assert _assert_strict(schema) == 9


def test_object_without_properties_gets_empty_properties_and_required():
    schema: dict[str, Any] = {"type": "object"}

    strictify(schema)

    assert schema == {"type": "object", "properties": {}, "additionalProperties": False, "required": []}


def test_empty_required_can_be_omitted():
    schema = compile_schema(ObjectShape("Empty"), empty_required=False)

    assert "required" not in schema
    assert schema["properties"] == {}
    assert schema["additionalProperties"] is False


def test_empty_required_flag_does_not_affect_populated_objects():
    shape = ObjectShape("One", fields={"x": StringShape()})

    schema = compile_schema(shape, empty_required=False)

    assert schema["required"] == ["x"]


def test_compile_does_not_mutate_base_schema():
    class FixedShape(Shape):
        def __init__(self) -> None:
            self.schema = {"type": "object", "properties": {"x": {"type": "string"}}}

        def json_schema(self):
            return self.schema

        def validate(self, value, path="$"):
            return value

    shape = FixedShape()
    compiled = compile_schema(shape)

    assert compiled["additionalProperties"] is False
    assert shape.schema == {"type": "object", "properties": {"x": {"type": "string"}}}


def test_enum_and_descriptions_are_preserved():
    shape = ObjectShape(
        "Verdict",
        fields={"label": EnumShape(("yes", "no"), description="Final call")},
        description="A verdict",
    )

    schema = compile_schema(shape)

    assert schema["description"] == "A verdict"
    assert schema["properties"]["label"] == {
        "type": "string",
        "enum": ["yes", "no"],
        "description": "Final call",
    }


def test_schema_name_is_sanitized_and_suffixed():
    assert schema_name_for(ObjectShape("My Review")) == "my_review_response"
    assert schema_name_for(ObjectShape("a::b<c>")) == "a_b_c__response"
    assert schema_name_for(ObjectShape("keep-this_1")) == "keep-this_1_response"


def test_schema_name_for_pydantic_model_uses_type_path():
    expected = Tag.__module__.replace(".", "_").lower() + "_tag_response"

    assert schema_name_for(Tag) == expected
    assert schema_name_for(Tag) == schema_name_for(Tag)


def test_schema_name_for_generic_target_uses_restricted_charset():
    name = schema_name_for(list[Tag])

    assert re.fullmatch(r"[a-z0-9_-]+_response", name)
    assert name.startswith("list_")
