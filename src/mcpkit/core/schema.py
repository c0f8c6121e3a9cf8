"""Schema synthesis: derive a JSON Schema from a handler's parameter type.

A parameter type is a *record*: a pydantic model or a dataclass.  Its fields
are first described as a :class:`ParameterShape` (ordered field names, type
tags and descriptions), which is then rendered as an inlined JSON Schema
object.  Any non-record type renders as an empty object schema.

Field descriptions come from ``pydantic.Field(description=...)`` or from
``dataclasses.field(metadata={"description": ...})``.  Every field is listed
as required, regardless of defaults or ``Optional`` annotations.

Usage::

    class AddParams(BaseModel):
        a: float = Field(description="The first number to add.")
        b: float = Field(description="The second number to add.")

    synthesize(AddParams)
    # {"type": "object",
    #  "properties": {"a": {"type": "number", "description": ...}, ...},
    #  "required": ["a", "b"]}
"""

from __future__ import annotations

import dataclasses
import datetime
import enum
import types
import typing
import uuid
from collections.abc import Mapping, Sequence, Set
from dataclasses import dataclass
from typing import Annotated, Any, Literal, Union, get_args, get_origin

from pydantic import BaseModel

from mcpkit.core.errors import SchemaGenerationError

_PRIMITIVE_TAGS: dict[type, str] = {
    bool: "boolean",
    int: "integer",
    float: "number",
    str: "string",
}

_STRING_FORMATS: dict[type, str] = {
    datetime.datetime: "date-time",
    datetime.date: "date",
    datetime.time: "time",
    uuid.UUID: "uuid",
}

_ARRAY_ORIGINS = (list, tuple, set, frozenset, Sequence, Set)
_OBJECT_ORIGINS = (dict, Mapping)


@dataclass(frozen=True)
class FieldShape:
    """One field of a parameter type, in declaration order."""

    name: str
    type_tag: str | None = None
    description: str | None = None
    format: str | None = None
    nested: ParameterShape | None = None
    items: FieldShape | None = None
    enum: tuple[Any, ...] | None = None
    variants: tuple[FieldShape, ...] = ()


@dataclass(frozen=True)
class ParameterShape:
    """Structural description of a handler's parameter type."""

    type: Any
    fields: tuple[FieldShape, ...] = ()
    is_record: bool = True

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]


def is_record_type(tp: Any) -> bool:
    """Return True if *tp* is a pydantic model class or a dataclass type."""
    if not isinstance(tp, type):
        return False
    return issubclass(tp, BaseModel) or dataclasses.is_dataclass(tp)


def describe(parameter_type: Any) -> ParameterShape:
    """Build the :class:`ParameterShape` for *parameter_type*.

    Raises:
        SchemaGenerationError: If a field type cannot be described, or the
            type graph refers back to itself (schemas are fully inlined).
    """
    if not is_record_type(parameter_type):
        return ParameterShape(type=parameter_type, is_record=False)
    try:
        return _describe_record(parameter_type, ())
    except SchemaGenerationError:
        raise
    except Exception as exc:
        raise SchemaGenerationError(_type_name(parameter_type), str(exc)) from exc


def schema_for_shape(shape: ParameterShape) -> dict[str, Any]:
    """Render a :class:`ParameterShape` as a JSON Schema object document."""
    if not shape.is_record:
        return {"type": "object", "properties": {}}
    return _object_schema(shape)


def synthesize(parameter_type: Any) -> dict[str, Any]:
    """Derive the JSON Schema ``inputSchema`` for *parameter_type*."""
    return schema_for_shape(describe(parameter_type))


# ---------------------------------------------------------------------------
# Introspection
# ---------------------------------------------------------------------------


def _describe_record(tp: type, seen: tuple[type, ...]) -> ParameterShape:
    if tp in seen:
        raise SchemaGenerationError(_type_name(seen[0]), f"recursive reference to {_type_name(tp)}")
    seen = (*seen, tp)

    fields: list[FieldShape] = []
    for name, annotation, description in _record_fields(tp):
        fields.append(_field_shape(name, annotation, description, seen))
    return ParameterShape(type=tp, fields=tuple(fields))


def _record_fields(tp: type) -> list[tuple[str, Any, str | None]]:
    """Return ``(wire name, annotation, description)`` for each field of *tp*."""
    if issubclass(tp, BaseModel):
        return [
            (info.alias or name, info.annotation, info.description)
            for name, info in tp.model_fields.items()
        ]

    hints = typing.get_type_hints(tp, include_extras=True)
    result: list[tuple[str, Any, str | None]] = []
    for f in dataclasses.fields(tp):
        if not f.init:
            continue
        description = f.metadata.get("description") if f.metadata else None
        result.append((f.name, hints.get(f.name, Any), description))
    return result


def _field_shape(
    name: str,
    annotation: Any,
    description: str | None,
    seen: tuple[type, ...],
) -> FieldShape:
    origin = get_origin(annotation)

    if origin is Annotated:
        return _field_shape(name, get_args(annotation)[0], description, seen)

    if annotation is Any or annotation is object:
        return FieldShape(name=name, description=description)

    if origin is Union or origin is types.UnionType:
        members = [a for a in get_args(annotation) if a is not type(None)]
        if len(members) == 1:
            return _field_shape(name, members[0], description, seen)
        variants = tuple(_field_shape("", m, None, seen) for m in members)
        return FieldShape(name=name, description=description, variants=variants)

    if origin is Literal:
        values = get_args(annotation)
        return FieldShape(
            name=name, type_tag=_enum_tag(values), description=description, enum=values
        )

    if isinstance(annotation, type) and issubclass(annotation, enum.Enum):
        values = tuple(member.value for member in annotation)
        return FieldShape(
            name=name, type_tag=_enum_tag(values), description=description, enum=values
        )

    if annotation in _PRIMITIVE_TAGS:
        return FieldShape(name=name, type_tag=_PRIMITIVE_TAGS[annotation], description=description)

    if annotation in _STRING_FORMATS:
        return FieldShape(
            name=name,
            type_tag="string",
            description=description,
            format=_STRING_FORMATS[annotation],
        )

    if is_record_type(annotation):
        nested = _describe_record(annotation, seen)
        return FieldShape(name=name, type_tag="object", description=description, nested=nested)

    container = origin or annotation
    if container in _ARRAY_ORIGINS:
        args = [a for a in get_args(annotation) if a is not Ellipsis]
        items = _field_shape("", args[0], None, seen) if len(args) == 1 else None
        return FieldShape(name=name, type_tag="array", description=description, items=items)

    if container in _OBJECT_ORIGINS:
        return FieldShape(name=name, type_tag="object", description=description)

    raise SchemaGenerationError(
        _type_name(seen[0]), f"unsupported type {annotation!r} for field '{name}'"
    )


def _enum_tag(values: tuple[Any, ...]) -> str | None:
    kinds = {type(v) for v in values}
    if kinds == {str}:
        return "string"
    if kinds == {bool}:
        return "boolean"
    if kinds == {int}:
        return "integer"
    if kinds and kinds <= {int, float}:
        return "number"
    return None


def _type_name(tp: Any) -> str:
    return getattr(tp, "__qualname__", None) or repr(tp)


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def _object_schema(shape: ParameterShape) -> dict[str, Any]:
    schema: dict[str, Any] = {
        "type": "object",
        "properties": {f.name: _property_schema(f) for f in shape.fields},
    }
    if shape.fields:
        schema["required"] = shape.field_names
    return schema


def _property_schema(f: FieldShape) -> dict[str, Any]:
    schema: dict[str, Any]
    if f.variants:
        schema = {"anyOf": [_property_schema(v) for v in f.variants]}
    elif f.nested is not None:
        schema = _object_schema(f.nested)
    else:
        schema = {}
        if f.type_tag is not None:
            schema["type"] = f.type_tag
        if f.format is not None:
            schema["format"] = f.format
        if f.items is not None:
            schema["items"] = _property_schema(f.items)
        if f.enum is not None:
            schema["enum"] = list(f.enum)
    if f.description:
        schema["description"] = f.description
    return schema
