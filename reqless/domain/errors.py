"""
Exception hierarchy for reqless.

ReqlessError
├── DecodeError            — a value from the server could not be decoded
│   ├── MalformedRootError     — top-level value is not the expected container
│   ├── MalformedJsonError     — bytes are not valid JSON
│   ├── MissingPropertyError   — a declared property is absent
│   ├── NullPropertyError      — a non-nullable property is present but null
│   ├── UnexpectedShapeError   — a property has the wrong JSON type
│   │   └── NonEmptyObjectError    — list property was a non-empty object
│   ├── NestedDecodeError      — an element of a composite property failed
│   └── InvalidValueError      — a decoded value violates a model invariant
├── ServerResponseError    — the server returned null where a value is required
└── CommandError           — the executor could not run a command

Every DecodeError is fatal to the decode call that raised it. Callers should
treat it like any other malformed server response.
"""

from __future__ import annotations


class ReqlessError(Exception):
    """Base class for all reqless exceptions."""


class DecodeError(ReqlessError, ValueError):
    """
    Base class for decode failures.

    Attributes
    ----------
    name : str | None
        The offending property, when one can be named.
    """

    def __init__(self, message: str, name: str | None = None) -> None:
        self.name = name
        super().__init__(message)


class MalformedRootError(DecodeError):
    """Raised when the value being decoded is not a JSON object."""

    def __init__(
        self, message: str = "Expected reader to begin with start of object."
    ) -> None:
        super().__init__(message)


class MalformedJsonError(DecodeError):
    """Raised when raw bytes cannot be parsed as JSON."""


class MissingPropertyError(DecodeError):
    """Raised when a required property is absent from a JSON object."""

    def __init__(self, name: str, message: str | None = None) -> None:
        super().__init__(message or f"Required property '{name}' not found.", name)


class NullPropertyError(DecodeError):
    """Raised when a non-nullable property is present but null."""

    def __init__(self, name: str, message: str | None = None) -> None:
        super().__init__(
            message or f"Value cannot be null. (Parameter '{name}')", name
        )


class UnexpectedShapeError(DecodeError):
    """Raised when a property holds a JSON value of the wrong type."""

    def __init__(self, name: str, expected: str, actual: str) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Expected '{name}' to be {expected} but encountered {actual}.", name
        )


class NonEmptyObjectError(UnexpectedShapeError):
    """
    Raised when a list-valued property holds an object with properties.

    The server cannot tell an empty list from an empty map, so ``{}`` is
    accepted wherever a list is expected. Anything larger is an error.
    """

    def __init__(self, name: str, property_count: int) -> None:
        self.property_count = property_count
        super().__init__(
            name,
            "array or empty object",
            f"object with {property_count} properties",
        )


class NestedDecodeError(DecodeError):
    """
    Raised when a composite property cannot be decoded into its target type.

    The underlying failure, if any, is chained as ``__cause__``.
    """

    def __init__(self, name: str, type_name: str) -> None:
        self.type_name = type_name
        super().__init__(
            f"Failed to deserialize '{name}' property into a {type_name}.", name
        )


class InvalidValueError(DecodeError):
    """Raised when decoded values are rejected by a domain model."""


class ServerResponseError(ReqlessError):
    """Raised when the server returns null where a value is required."""

    def __init__(self, message: str = "Server returned unexpected null result.") -> None:
        super().__init__(message)


class CommandError(ReqlessError):
    """Raised when the command executor cannot run a command."""

    def __init__(self, command: str, message: str) -> None:
        self.command = command
        super().__init__(f"{command}: {message}")
