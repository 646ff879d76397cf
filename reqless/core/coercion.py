"""
Coercion primitives shared by every decoder.

The server's scripting runtime has a single table type, so its JSON encoder
cannot tell an empty list from an empty map: an empty list may arrive as
``[]`` or as ``{}``. coerce_array() accepts both and rejects any object
that actually has properties.

RequiredFields checks a JSON object against a fixed, ordered set of
property names. Each property is in one of three states — absent, present
but null, or present with a value — and absent and null produce different
errors, so the two are never collapsed.

The typed readers (read_str, read_int, read_bool) pull a single scalar out
of an object that has already passed RequiredFields.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable, Collection, Mapping
from enum import Enum
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from reqless.domain.errors import (
    InvalidValueError,
    MalformedRootError,
    MissingPropertyError,
    NonEmptyObjectError,
    NullPropertyError,
    UnexpectedShapeError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)


class FieldState(str, Enum):
    """Presence of a single property in a JSON object."""

    ABSENT = "absent"
    NULL = "null"
    PRESENT = "present"


def json_type(value: Any) -> str:
    """Name of the JSON type of an already-parsed value."""
    match value:
        case None:
            return "null"
        case bool():
            return "boolean"
        case int():
            return "integer"
        case float():
            return "number"
        case str():
            return "string"
        case list() | tuple():
            return "array"
        case dict():
            return "object"
        case _:
            return type(value).__name__


def expect_object(raw: Any) -> dict[str, Any]:
    """Return ``raw`` if it is a JSON object, else raise MalformedRootError."""
    if not isinstance(raw, dict):
        raise MalformedRootError()
    return raw


def field_state(obj: Mapping[str, Any], name: str) -> FieldState:
    if name not in obj:
        return FieldState.ABSENT
    if obj[name] is None:
        return FieldState.NULL
    return FieldState.PRESENT


def expect_property(obj: Mapping[str, Any], name: str) -> Any:
    """
    Return ``obj[name]``, raising MissingPropertyError in the envelope style
    ("Expected '<name>' property in JSON object, ...") when it is absent.
    """
    if name not in obj:
        raise MissingPropertyError(
            name, f"Expected '{name}' property in JSON object, but none was found."
        )
    return obj[name]


def coerce_array(
    raw: Any,
    name: str,
    item: Callable[[Any], T] | None = None,
) -> list[T]:
    """
    Coerce a list-valued property to a Python list.

    Parameters
    ----------
    raw  : the parsed JSON value of the property
    name : property name, used in error messages
    item : optional per-element decoder, applied in order

    Raises
    ------
    NullPropertyError    if ``raw`` is null
    NonEmptyObjectError  if ``raw`` is an object with any properties
    UnexpectedShapeError if ``raw`` is neither an array nor an object
    """
    match raw:
        case None:
            raise NullPropertyError(name)
        case dict() if not raw:
            return []
        case dict():
            raise NonEmptyObjectError(name, len(raw))
        case list():
            if item is None:
                return list(raw)
            return [item(element) for element in raw]
        case _:
            raise UnexpectedShapeError(name, "array or empty object", json_type(raw))


def string_items(name: str) -> Callable[[Any], str]:
    """Element decoder for arrays of strings, e.g. jids or tags."""

    def _item(value: Any) -> str:
        if value is None:
            raise NullPropertyError(name, f"Value cannot include null. (Parameter '{name}')")
        if not isinstance(value, str):
            raise UnexpectedShapeError(name, "an array of strings", json_type(value))
        return value

    return _item


def integer_items(name: str) -> Callable[[Any], int]:
    """Element decoder for arrays of integers, e.g. a stats histogram."""

    def _item(value: Any) -> int:
        if value is None:
            raise NullPropertyError(name, f"Value cannot include null. (Parameter '{name}')")
        if isinstance(value, bool) or not isinstance(value, int):
            raise UnexpectedShapeError(name, "an array of integers", json_type(value))
        return value

    return _item


def read_str(obj: Mapping[str, Any], name: str) -> str:
    value = obj[name]
    if not isinstance(value, str):
        raise UnexpectedShapeError(name, "string", json_type(value))
    return value


def read_int(obj: Mapping[str, Any], name: str) -> int:
    value = obj[name]
    # bool is a subclass of int; JSON true is not a number.
    if isinstance(value, bool) or not isinstance(value, int):
        raise UnexpectedShapeError(name, "integer", json_type(value))
    return value


def read_bool(obj: Mapping[str, Any], name: str) -> bool:
    value = obj[name]
    if not isinstance(value, bool):
        raise UnexpectedShapeError(name, "boolean", json_type(value))
    return value


def read_optional_str(obj: Mapping[str, Any], name: str) -> str | None:
    """A string property where null and blank both mean "no value"."""
    value = obj[name]
    if value is None:
        return None
    if not isinstance(value, str):
        raise UnexpectedShapeError(name, "string", json_type(value))
    return value if value.strip() else None


def build(model: type[M], **fields: Any) -> M:
    """Construct a domain model, reporting rejected values as a DecodeError."""
    try:
        return model(**fields)
    except ValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first["loc"]) or model.__name__
        raise InvalidValueError(
            f"Invalid {model.__name__} value for '{location}': {first['msg']}",
            location,
        ) from exc


@dataclasses.dataclass(frozen=True)
class RequiredFields:
    """
    An ordered set of property names that must all be present.

    Parameters
    ----------
    record   : name of the record being decoded, for log messages
    names    : required property names, checked in this order
    nullable : names for which JSON null is a legal value
    """

    record: str
    names: tuple[str, ...]
    nullable: frozenset[str] = frozenset()

    def read(self, raw: Any) -> dict[str, Any]:
        """
        Check ``raw`` against the declared properties and return it.

        The first offending property in declared order is reported, so error
        messages do not depend on the key order of the input.
        """
        obj = expect_object(raw)
        for name in self.names:
            state = field_state(obj, name)
            if state is FieldState.ABSENT:
                raise MissingPropertyError(name)
            if state is FieldState.NULL and name not in self.nullable:
                raise NullPropertyError(name)
        if logger.isEnabledFor(logging.DEBUG):
            for unknown in self.unknown(obj):
                logger.debug("Ignoring unknown %s property %r", self.record, unknown)
        return obj

    def unknown(self, obj: Collection[str]) -> list[str]:
        """Property names in ``obj`` that are not declared."""
        return [name for name in obj if name not in self.names]
