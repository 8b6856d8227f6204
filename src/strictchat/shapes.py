from __future__ import annotations

"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Target shape descriptions.

A shape knows two things about the value a caller wants back:
  - its base JSON schema (before strict-mode rewriting, see `schema.py`)
  - how to validate a native JSON value into the final Python value

Shapes come either from the declarative nodes below or from any pydantic
model / annotated type through `ModelShape`.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from pydantic import TypeAdapter, ValidationError

from .types import JSONSchema


class ShapeValidationError(ValueError):
    """A native JSON value does not fit a shape."""

    def __init__(self, message: str, path: str = "$") -> None:
        super().__init__(f"{path}: {message}")
        self.path = path
        self.reason = message


def _type_label(value: Any) -> str:
    if value is None:
        return "null"
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


class Shape(ABC):
    __slots__ = ()

    @property
    def type_name(self) -> str:
        """Identifier used to derive the schema name."""
        return type(self).__name__

    @abstractmethod
    def json_schema(self) -> JSONSchema:
        ...

    @abstractmethod
    def validate(self, value: Any, path: str = "$") -> Any:
        ...


def _with_description(schema: JSONSchema, description: str | None) -> JSONSchema:
    if description:
        schema["description"] = description
    return schema


@dataclass(frozen=True, slots=True)
class StringShape(Shape):
    description: str | None = None

    def json_schema(self) -> JSONSchema:
        return _with_description({"type": "string"}, self.description)

    def validate(self, value: Any, path: str = "$") -> str:
        if not isinstance(value, str):
            raise ShapeValidationError(f"expected string, got {_type_label(value)}", path)
        return value


@dataclass(frozen=True, slots=True)
class NumberShape(Shape):
    description: str | None = None

    def json_schema(self) -> JSONSchema:
        return _with_description({"type": "number"}, self.description)

    def validate(self, value: Any, path: str = "$") -> int | float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ShapeValidationError(f"expected number, got {_type_label(value)}", path)
        return value


@dataclass(frozen=True, slots=True)
class IntegerShape(Shape):
    description: str | None = None

    def json_schema(self) -> JSONSchema:
        return _with_description({"type": "integer"}, self.description)

    def validate(self, value: Any, path: str = "$") -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ShapeValidationError(f"expected integer, got {_type_label(value)}", path)
        return value


@dataclass(frozen=True, slots=True)
class BooleanShape(Shape):
    description: str | None = None

    def json_schema(self) -> JSONSchema:
        return _with_description({"type": "boolean"}, self.description)

    def validate(self, value: Any, path: str = "$") -> bool:
        if not isinstance(value, bool):
            raise ShapeValidationError(f"expected boolean, got {_type_label(value)}", path)
        return value


@dataclass(frozen=True, slots=True)
class EnumShape(Shape):
    values: tuple[str, ...]
    description: str | None = None

    def __post_init__(self) -> None:
        if not self.values:
            raise ValueError("EnumShape requires at least one value")
        object.__setattr__(self, "values", tuple(self.values))

    def json_schema(self) -> JSONSchema:
        return _with_description(
            {"type": "string", "enum": list(self.values)}, self.description
        )

    def validate(self, value: Any, path: str = "$") -> str:
        if not isinstance(value, str) or value not in self.values:
            raise ShapeValidationError(
                f"expected one of {list(self.values)}, got {value!r}", path
            )
        return value


@dataclass(frozen=True, slots=True)
class ArrayShape(Shape):
    item: Shape
    description: str | None = None

    @property
    def type_name(self) -> str:
        return f"array_of_{self.item.type_name}"

    def json_schema(self) -> JSONSchema:
        return _with_description(
            {"type": "array", "items": self.item.json_schema()}, self.description
        )

    def validate(self, value: Any, path: str = "$") -> list[Any]:
        if not isinstance(value, list):
            raise ShapeValidationError(f"expected array, got {_type_label(value)}", path)
        return [self.item.validate(v, f"{path}[{i}]") for i, v in enumerate(value)]


@dataclass(frozen=True, slots=True)
class OptionalShape(Shape):
    """Value of `inner` or null. Optional fields may also be left out."""

    inner: Shape
    description: str | None = None

    @property
    def type_name(self) -> str:
        return f"optional_{self.inner.type_name}"

    def json_schema(self) -> JSONSchema:
        return _with_description(
            {"anyOf": [self.inner.json_schema(), {"type": "null"}]}, self.description
        )

    def validate(self, value: Any, path: str = "$") -> Any:
        if value is None:
            return None
        return self.inner.validate(value, path)


@dataclass(frozen=True, slots=True)
class UnionShape(Shape):
    """First variant that accepts the value wins; variants are tried in order."""

    variants: tuple[Shape, ...]
    description: str | None = None

    def __post_init__(self) -> None:
        if not self.variants:
            raise ValueError("UnionShape requires at least one variant")
        object.__setattr__(self, "variants", tuple(self.variants))

    def json_schema(self) -> JSONSchema:
        return _with_description(
            {"anyOf": [v.json_schema() for v in self.variants]}, self.description
        )

    def validate(self, value: Any, path: str = "$") -> Any:
        reasons: list[str] = []
        for variant in self.variants:
            try:
                return variant.validate(value, path)
            except ShapeValidationError as e:
                reasons.append(e.reason)
        raise ShapeValidationError(
            f"no union variant matched ({'; '.join(reasons)})", path
        )


@dataclass(frozen=True, slots=True)
class ObjectShape(Shape):
    """
    Named record with a fixed set of fields.

    The base schema marks only non-optional fields as required; strict
    compilation later forces every field into `required`. Decoding is closed:
    unknown keys are rejected, missing optional fields decode to `None`.
    """

    name: str
    fields: Mapping[str, Shape] = field(default_factory=dict)
    description: str | None = None

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValueError("ObjectShape name must be non-empty")
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    @property
    def type_name(self) -> str:
        return self.name

    def json_schema(self) -> JSONSchema:
        return _with_description(
            {
                "type": "object",
                "title": self.name,
                "properties": {k: s.json_schema() for k, s in self.fields.items()},
                "required": [
                    k for k, s in self.fields.items() if not isinstance(s, OptionalShape)
                ],
            },
            self.description,
        )

    def validate(self, value: Any, path: str = "$") -> dict[str, Any]:
        if not isinstance(value, dict):
            raise ShapeValidationError(f"expected object, got {_type_label(value)}", path)

        unknown = sorted(set(value) - set(self.fields))
        if unknown:
            raise ShapeValidationError(f"unexpected properties {unknown}", path)

        out: dict[str, Any] = {}
        for key, shape in self.fields.items():
            child_path = f"{path}.{key}"
            if key not in value:
                if isinstance(shape, OptionalShape):
                    out[key] = None
                    continue
                raise ShapeValidationError("missing required property", child_path)
            out[key] = shape.validate(value[key], child_path)
        return out


@dataclass(frozen=True, slots=True)
class ModelShape(Shape):
    """
    Shape reflected from a pydantic model or any type pydantic can adapt
    (for example `list[Review]`). Decoded values are real instances.
    Unknown keys follow the model's own `extra` setting (pydantic ignores
    them by default; `extra="forbid"` rejects them).
    """

    target: Any
    _adapter: TypeAdapter = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_adapter", TypeAdapter(self.target))

    @property
    def type_name(self) -> str:
        target = self.target
        if isinstance(target, type):
            return f"{target.__module__}.{target.__qualname__}"
        return repr(target)

    def json_schema(self) -> JSONSchema:
        return self._adapter.json_schema()

    def validate(self, value: Any, path: str = "$") -> Any:
        try:
            return self._adapter.validate_python(value)
        except ValidationError as e:
            raise ShapeValidationError(str(e), path) from e


def as_shape(target: Any) -> Shape:
    """Accept a declarative shape as-is, reflect anything else through pydantic."""
    if isinstance(target, Shape):
        return target
    return ModelShape(target)
