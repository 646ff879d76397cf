"""
Domain models for reqless — backed by Pydantic v2.

These are the values handed back to callers once a server response has
been decoded. Pydantic handles:
  - field validation and the invariants the server guarantees
  - immutability (every model is frozen, and hashable)
  - structural equality, which the round-trip tests rely on

The wire format is NOT pydantic's: field names, null conventions and the
empty-object-as-empty-list quirk are handled by the decoders in
``reqless.core``. Python attribute names here are the client's names;
wire names live with the decoders.

List-valued fields are tuples so that records stay immutable and
order-preserving.

Optional values that the server encodes as a sentinel (``expires`` as 0,
``queue``/``worker`` as "") must be None rather than the sentinel itself,
otherwise a decoded copy would not compare equal to the original.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_core import from_json, to_json

KNOWN_EVENT_TYPES: frozenset[str] = frozenset(
    {"done", "failed", "failed-retries", "popped", "put", "throttled", "timed-out"}
)


def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be empty or whitespace")
    return value


def _none_or_not_blank(value: str | None) -> str | None:
    if value is not None:
        _not_blank(value)
    return value


def _no_blank_items(values: tuple[str, ...]) -> tuple[str, ...]:
    if any(not value.strip() for value in values):
        raise ValueError("must not contain empty or whitespace strings")
    return values


# ---------------------------------------------------------------------------
# Job history events
# ---------------------------------------------------------------------------


class JobEvent(BaseModel):
    """
    One entry of a job's history.

    what — discriminator, kept verbatim
    when — epoch timestamp of the event
    """

    model_config = ConfigDict(frozen=True)

    what: str
    when: int = Field(ge=0)


class PutEvent(JobEvent):
    """The job was put into a queue."""

    what: Literal["put"] = "put"
    queue_name: str


class PoppedEvent(JobEvent):
    """A worker popped the job."""

    what: Literal["popped"] = "popped"
    worker_name: str


class DoneEvent(JobEvent):
    what: Literal["done"] = "done"


class FailedEvent(JobEvent):
    """A worker failed the job into a failure group."""

    what: Literal["failed"] = "failed"
    group: str
    worker_name: str


class FailedRetriesEvent(JobEvent):
    """The job exhausted its retries."""

    what: Literal["failed-retries"] = "failed-retries"
    group: str


class ThrottledEvent(JobEvent):
    """The job was held back by a throttle on a queue."""

    what: Literal["throttled"] = "throttled"
    queue_name: str


class TimedOutEvent(JobEvent):
    what: Literal["timed-out"] = "timed-out"


class LogEvent(JobEvent):
    """
    Catch-all for any event whose ``what`` is not one of the known kinds.

    extras — every other root-level property as (name, JSON text) pairs, in
             the order it was received

    Values are held as JSON text, so a LogEvent never shares objects with
    the document it was decoded from. Construct with ``data={...}`` and read
    the values back through ``data``, which builds a new dict on every
    access.
    """

    extras: tuple[tuple[str, str], ...] = ()

    @model_validator(mode="before")
    @classmethod
    def _capture_data(cls, values: Any) -> Any:
        if not isinstance(values, dict) or "data" not in values:
            return values
        values = dict(values)
        data = values.pop("data")
        if not isinstance(data, Mapping):
            raise ValueError("data must be a mapping of property names to values")
        values["extras"] = tuple(
            (key, to_json(value).decode("utf-8")) for key, value in data.items()
        )
        return values

    @property
    def data(self) -> dict[str, Any]:
        return {key: from_json(raw) for key, raw in self.extras}

    @field_validator("what")
    @classmethod
    def _check_what(cls, v: str) -> str:
        _not_blank(v)
        if v in KNOWN_EVENT_TYPES:
            raise ValueError(f"{v!r} is a known event type and cannot be a log event")
        return v

    @field_validator("extras")
    @classmethod
    def _check_extras(
        cls, v: tuple[tuple[str, str], ...]
    ) -> tuple[tuple[str, str], ...]:
        keys = [key for key, _ in v]
        reserved = {"what", "when"} & set(keys)
        if reserved:
            raise ValueError(f"data cannot contain {sorted(reserved)}")
        if len(set(keys)) != len(keys):
            raise ValueError("data cannot contain duplicate property names")
        for _, raw in v:
            from_json(raw)
        return v


AnyJobEvent = Union[
    PutEvent,
    PoppedEvent,
    DoneEvent,
    FailedEvent,
    FailedRetriesEvent,
    ThrottledEvent,
    TimedOutEvent,
    LogEvent,
]


# ---------------------------------------------------------------------------
# Jobs
# ---------------------------------------------------------------------------


class JobFailure(BaseModel):
    """Details of the most recent failure of a job."""

    model_config = ConfigDict(frozen=True)

    group: str
    message: str
    when: int = Field(gt=0)
    worker_name: str

    @field_validator("group", "message", "worker_name")
    @classmethod
    def _check_not_blank(cls, v: str) -> str:
        return _not_blank(v)


class Job(BaseModel):
    """
    A job as reported by the server.

    jid              — unique job identifier
    class_name       — name of the class that processes the job
    data             — opaque payload, left to job classes to interpret
    queue_name       — None once the job is no longer in a queue
    worker_name      — None unless a worker currently holds the job
    expires          — epoch millis of lock expiry, None when not locked
    spawned_from_jid — jid of the recurring job that spawned this one
    failure          — None unless the job is in a failed state
    """

    model_config = ConfigDict(frozen=True)

    jid: str
    class_name: str
    data: str
    queue_name: str | None
    worker_name: str | None
    state: str
    priority: int = Field(ge=0)
    remaining: int
    retries: int = Field(ge=0)
    expires: int | None = Field(default=None, gt=0)
    tracked: bool = False
    spawned_from_jid: str | None = None
    dependencies: tuple[str, ...] = ()
    dependents: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    throttles: tuple[str, ...] = ()
    history: tuple[AnyJobEvent, ...] = ()
    failure: JobFailure | None = None

    @field_validator("jid", "class_name", "data", "state")
    @classmethod
    def _check_not_blank(cls, v: str) -> str:
        return _not_blank(v)

    @field_validator("queue_name", "worker_name", "spawned_from_jid")
    @classmethod
    def _check_none_or_not_blank(cls, v: str | None) -> str | None:
        return _none_or_not_blank(v)

    @field_validator("dependencies", "dependents", "tags", "throttles")
    @classmethod
    def _check_items(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return _no_blank_items(v)

    @model_validator(mode="after")
    def _check_remaining(self) -> "Job":
        if self.remaining < -1:
            raise ValueError(
                "remaining must be a whole number greater than or equal to -1"
            )
        if self.remaining > self.retries:
            raise ValueError(
                f"remaining must be less than or equal to retries ({self.retries})"
            )
        return self


class RecurringJob(BaseModel):
    """
    A recurring job template; the server spawns a Job from it every
    ``interval_seconds``.
    """

    model_config = ConfigDict(frozen=True)

    jid: str
    class_name: str
    data: str
    queue_name: str | None
    state: str
    priority: int = Field(ge=0)
    retries: int = Field(ge=0)
    count: int = Field(ge=0)
    interval_seconds: int = Field(gt=0)
    maximum_backlog: int = Field(ge=0)
    tags: tuple[str, ...] = ()
    throttles: tuple[str, ...] = ()

    @field_validator("jid", "class_name", "data", "state")
    @classmethod
    def _check_not_blank(cls, v: str) -> str:
        return _not_blank(v)

    @field_validator("queue_name")
    @classmethod
    def _check_queue_name(cls, v: str | None) -> str | None:
        return _none_or_not_blank(v)

    @field_validator("tags", "throttles")
    @classmethod
    def _check_items(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return _no_blank_items(v)


# ---------------------------------------------------------------------------
# Envelopes
# ---------------------------------------------------------------------------


class JidsResult(BaseModel):
    """
    A page of job ids plus the total number of matching jobs.

    ``total`` counts every match, not just this page, so it is not tied to
    ``len(jids)``.
    """

    model_config = ConfigDict(frozen=True)

    jids: tuple[str, ...] = ()
    total: int = 0


class TrackedJobsResult(BaseModel):
    """Tracked jobs that still exist, plus jids of tracked jobs that expired."""

    model_config = ConfigDict(frozen=True)

    jobs: tuple[Job, ...] = ()
    expired_jids: tuple[str, ...] = ()


class WorkerJobs(BaseModel):
    """Jobs held by a worker, split into running and stalled jids."""

    model_config = ConfigDict(frozen=True)

    jids: tuple[str, ...] = ()
    stalled_jids: tuple[str, ...] = ()


# ---------------------------------------------------------------------------
# Queues, workers and throttles
# ---------------------------------------------------------------------------


class QueueCounts(BaseModel):
    """Number of jobs in each state of one queue."""

    model_config = ConfigDict(frozen=True)

    queue_name: str
    paused: bool
    depends: int
    recurring: int
    running: int
    scheduled: int
    stalled: int
    throttled: int
    waiting: int

    @field_validator("queue_name")
    @classmethod
    def _check_queue_name(cls, v: str) -> str:
        return _not_blank(v)


class QueueStateStats(BaseModel):
    """
    Timing statistics for one phase (waiting or running) of a queue's jobs.

    histogram — job counts per time bucket, as the server reports them
    """

    model_config = ConfigDict(frozen=True)

    count: int
    mean: int
    standard_deviation: int
    histogram: tuple[int, ...] = ()


class QueueStats(BaseModel):
    """Daily statistics for a queue."""

    model_config = ConfigDict(frozen=True)

    failed: int
    failures: int
    retries: int
    run: QueueStateStats
    wait: QueueStateStats


class WorkerCounts(BaseModel):
    """Number of running and stalled jobs held by one worker."""

    model_config = ConfigDict(frozen=True)

    worker_name: str
    jobs: int
    stalled: int

    @field_validator("worker_name")
    @classmethod
    def _check_worker_name(cls, v: str) -> str:
        return _not_blank(v)


class Throttle(BaseModel):
    """
    A named concurrency limit.

    maximum — concurrent jobs allowed, 0 for no limit
    ttl     — seconds until the throttle expires; negative when it never does
    """

    model_config = ConfigDict(frozen=True)

    id: str
    maximum: int
    ttl: int

    @field_validator("id")
    @classmethod
    def _check_id(cls, v: str) -> str:
        return _not_blank(v)


class QueuePriorityPattern(BaseModel):
    """Queue name patterns a worker drains in order, optionally fairly."""

    model_config = ConfigDict(frozen=True)

    pattern: tuple[str, ...]
    fairly: bool = False

    @field_validator("pattern")
    @classmethod
    def _check_pattern(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return _no_blank_items(v)
