"""
Job history events — decode and encode.

Events arrive as flat JSON objects with no envelope; the kind of event is
given only by the root-level ``what`` property:

    {"what": "put", "when": 1700000000, "queue": "emails"}
    {"what": "failed", "when": 1700000005, "group": "timeout", "worker": "w1"}

Only the root ``what`` counts. A nested object that happens to contain its
own ``what`` key never changes the variant. Any ``what`` that is not a
known kind decodes to LogEvent, which keeps every other root property
verbatim so that it can be written back out unchanged.
"""

from __future__ import annotations

from typing import Any

from reqless.core.coercion import (
    RequiredFields,
    build,
    expect_object,
    expect_property,
    json_type,
    read_int,
    read_str,
)
from reqless.domain.errors import NullPropertyError, UnexpectedShapeError
from reqless.domain.models import (
    AnyJobEvent,
    DoneEvent,
    FailedEvent,
    FailedRetriesEvent,
    LogEvent,
    PoppedEvent,
    PutEvent,
    ThrottledEvent,
    TimedOutEvent,
)

_PUT = RequiredFields("put event", ("what", "when", "queue"))
_POPPED = RequiredFields("popped event", ("what", "when", "worker"))
_DONE = RequiredFields("done event", ("what", "when"))
_FAILED = RequiredFields("failed event", ("what", "when", "group", "worker"))
_FAILED_RETRIES = RequiredFields("failed-retries event", ("what", "when", "group"))
_THROTTLED = RequiredFields("throttled event", ("what", "when", "queue"))
_TIMED_OUT = RequiredFields("timed-out event", ("what", "when"))


def read_what(obj: dict[str, Any]) -> str:
    """
    The discriminator of an event object, read from its root only.

    ``obj`` is an already-parsed object, so a document with the root ``what``
    key repeated arrives here holding only the last value (pydantic_core
    keeps the last of duplicate keys). The server never repeats keys.
    """
    what = expect_property(obj, "what")
    if what is None:
        raise NullPropertyError(
            "what", "Expected a string value for the 'what' property, got null."
        )
    if not isinstance(what, str):
        raise UnexpectedShapeError("what", "string", json_type(what))
    return what


def event_from_wire(raw: Any) -> AnyJobEvent:
    """
    Decode one history element.

    Raises
    ------
    MalformedRootError    if ``raw`` is not an object
    MissingPropertyError  if ``what`` or a variant's field is absent
    NullPropertyError     if ``what`` or a variant's field is null
    """
    obj = expect_object(raw)
    match read_what(obj):
        case "put":
            _PUT.read(obj)
            return build(PutEvent, when=read_int(obj, "when"), queue_name=read_str(obj, "queue"))
        case "popped":
            _POPPED.read(obj)
            return build(
                PoppedEvent, when=read_int(obj, "when"), worker_name=read_str(obj, "worker")
            )
        case "done":
            _DONE.read(obj)
            return build(DoneEvent, when=read_int(obj, "when"))
        case "failed":
            _FAILED.read(obj)
            return build(
                FailedEvent,
                when=read_int(obj, "when"),
                group=read_str(obj, "group"),
                worker_name=read_str(obj, "worker"),
            )
        case "failed-retries":
            _FAILED_RETRIES.read(obj)
            return build(
                FailedRetriesEvent, when=read_int(obj, "when"), group=read_str(obj, "group")
            )
        case "throttled":
            _THROTTLED.read(obj)
            return build(
                ThrottledEvent, when=read_int(obj, "when"), queue_name=read_str(obj, "queue")
            )
        case "timed-out":
            _TIMED_OUT.read(obj)
            return build(TimedOutEvent, when=read_int(obj, "when"))
        case what:
            return _log_event_from_wire(what, obj)


def _log_event_from_wire(what: str, obj: dict[str, Any]) -> LogEvent:
    when = expect_property(obj, "when")
    if when is None:
        raise NullPropertyError("when")
    # LogEvent stores the extras as JSON text, so nothing in obj is shared.
    data = {key: value for key, value in obj.items() if key not in ("what", "when")}
    return build(LogEvent, what=what, when=read_int(obj, "when"), data=data)


def event_to_wire(event: AnyJobEvent) -> dict[str, Any]:
    """Encode an event: ``what``, ``when``, then the variant's own fields."""
    wire: dict[str, Any] = {"what": event.what, "when": event.when}
    match event:
        case PutEvent() | ThrottledEvent():
            wire["queue"] = event.queue_name
        case PoppedEvent():
            wire["worker"] = event.worker_name
        case FailedEvent():
            wire["group"] = event.group
            wire["worker"] = event.worker_name
        case FailedRetriesEvent():
            wire["group"] = event.group
        case LogEvent():
            wire.update(event.data)
        case DoneEvent() | TimedOutEvent():
            pass
    return wire
