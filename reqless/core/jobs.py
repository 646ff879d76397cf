"""
Job records — decode and encode.

Wire format of a job (keys in the order the encoder writes them):

{
  "data": "{\\"to\\": \\"user@example.com\\"}",
  "dependencies": [],              <-- [] or {} both mean "no dependencies"
  "dependents": {},
  "expires": 1700000060000,        <-- 0 or negative when not locked
  "failure": {},                   <-- {} or null when not failed
  "history": [{"what": "put", "when": 1700000000000, "queue": "emails"}],
  "jid": "4f6e...",
  "klass": "SendEmail",
  "priority": 0,
  "queue": "emails",               <-- "" once the job has left every queue
  "remaining": 5,
  "retries": 5,
  "spawned_from_jid": false,       <-- false or null when not spawned
  "state": "waiting",
  "tags": [],
  "throttles": ["ql:q:emails"],
  "tracked": false,
  "worker": ""                     <-- "" or null when no worker holds it
}

Every key above is required. A key that is missing and a key that is null
are reported differently; only failure, spawned_from_jid and worker may be
null. Unknown keys are ignored.
"""

from __future__ import annotations

from typing import Any

from reqless.core.coercion import (
    RequiredFields,
    build,
    coerce_array,
    json_type,
    read_bool,
    read_int,
    read_optional_str,
    read_str,
    string_items,
)
from reqless.core.events import event_from_wire, event_to_wire
from reqless.domain.errors import UnexpectedShapeError
from reqless.domain.models import Job, JobFailure, RecurringJob

JOB_FIELDS = RequiredFields(
    "job",
    (
        "data",
        "dependencies",
        "dependents",
        "expires",
        "failure",
        "history",
        "jid",
        "klass",
        "priority",
        "queue",
        "remaining",
        "retries",
        "spawned_from_jid",
        "state",
        "tags",
        "throttles",
        "tracked",
        "worker",
    ),
    nullable=frozenset({"failure", "spawned_from_jid", "worker"}),
)

FAILURE_FIELDS = RequiredFields("failure", ("group", "message", "when", "worker"))

RECURRING_JOB_FIELDS = RequiredFields(
    "recurring job",
    (
        "backlog",
        "count",
        "data",
        "interval",
        "jid",
        "klass",
        "priority",
        "queue",
        "retries",
        "state",
        "tags",
        "throttles",
    ),
)


# ------------------------------------------------------------------ #
# Decoding                                                             #
# ------------------------------------------------------------------ #


def failure_from_wire(raw: Any) -> JobFailure | None:
    """Decode a failure. ``{}`` and null both mean the job has not failed."""
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise UnexpectedShapeError("failure", "object", json_type(raw))
    if not raw:
        return None
    obj = FAILURE_FIELDS.read(raw)
    return build(
        JobFailure,
        group=read_str(obj, "group"),
        message=read_str(obj, "message"),
        when=read_int(obj, "when"),
        worker_name=read_str(obj, "worker"),
    )


def _spawned_from_jid(obj: dict[str, Any]) -> str | None:
    value = obj["spawned_from_jid"]
    if value is None or value is False:
        return None
    if not isinstance(value, str):
        raise UnexpectedShapeError("spawned_from_jid", "string or false", json_type(value))
    return value


def _expires(obj: dict[str, Any]) -> int | None:
    expires = read_int(obj, "expires")
    return expires if expires > 0 else None


def _strings(obj: dict[str, Any], name: str) -> tuple[str, ...]:
    return tuple(coerce_array(obj[name], name, string_items(name)))


def _queue_name(obj: dict[str, Any]) -> str | None:
    # never null on the wire, only blank
    queue = read_str(obj, "queue")
    return queue if queue.strip() else None


def job_from_wire(raw: Any) -> Job:
    """
    Decode a job object.

    Raises
    ------
    MalformedRootError    if ``raw`` is not an object
    MissingPropertyError  for the first absent property, in declared order
    NullPropertyError     for the first non-nullable property that is null
    NonEmptyObjectError   if a list property is an object with properties
    UnexpectedShapeError  if a property has the wrong JSON type
    InvalidValueError     if the values break a Job invariant
    """
    obj = JOB_FIELDS.read(raw)
    return build(
        Job,
        jid=read_str(obj, "jid"),
        class_name=read_str(obj, "klass"),
        data=read_str(obj, "data"),
        queue_name=_queue_name(obj),
        worker_name=read_optional_str(obj, "worker"),
        state=read_str(obj, "state"),
        priority=read_int(obj, "priority"),
        remaining=read_int(obj, "remaining"),
        retries=read_int(obj, "retries"),
        expires=_expires(obj),
        tracked=read_bool(obj, "tracked"),
        spawned_from_jid=_spawned_from_jid(obj),
        dependencies=_strings(obj, "dependencies"),
        dependents=_strings(obj, "dependents"),
        tags=_strings(obj, "tags"),
        throttles=_strings(obj, "throttles"),
        history=tuple(coerce_array(obj["history"], "history", event_from_wire)),
        failure=failure_from_wire(obj["failure"]),
    )


def recurring_job_from_wire(raw: Any) -> RecurringJob:
    """Decode a recurring job object. Same rules as job_from_wire()."""
    obj = RECURRING_JOB_FIELDS.read(raw)
    return build(
        RecurringJob,
        jid=read_str(obj, "jid"),
        class_name=read_str(obj, "klass"),
        data=read_str(obj, "data"),
        queue_name=_queue_name(obj),
        state=read_str(obj, "state"),
        priority=read_int(obj, "priority"),
        retries=read_int(obj, "retries"),
        count=read_int(obj, "count"),
        interval_seconds=read_int(obj, "interval"),
        maximum_backlog=read_int(obj, "backlog"),
        tags=_strings(obj, "tags"),
        throttles=_strings(obj, "throttles"),
    )


def jobs_from_wire(raw: Any, name: str = "jobs") -> list[Job]:
    """Decode a bare list of jobs, where ``{}`` means no jobs."""
    return coerce_array(raw, name, job_from_wire)


# ------------------------------------------------------------------ #
# Encoding                                                             #
# ------------------------------------------------------------------ #


def failure_to_wire(failure: JobFailure | None) -> dict[str, Any]:
    if failure is None:
        return {}
    return {
        "group": failure.group,
        "message": failure.message,
        "when": failure.when,
        "worker": failure.worker_name,
    }


def job_to_wire(job: Job) -> dict[str, Any]:
    """Encode a job with keys in declared order, the way the server writes them."""
    return {
        "data": job.data,
        "dependencies": list(job.dependencies),
        "dependents": list(job.dependents),
        "expires": job.expires or 0,
        "failure": failure_to_wire(job.failure),
        "history": [event_to_wire(event) for event in job.history],
        "jid": job.jid,
        "klass": job.class_name,
        "priority": job.priority,
        "queue": job.queue_name or "",
        "remaining": job.remaining,
        "retries": job.retries,
        "spawned_from_jid": job.spawned_from_jid,
        "state": job.state,
        "tags": list(job.tags),
        "throttles": list(job.throttles),
        "tracked": job.tracked,
        "worker": job.worker_name or "",
    }


def recurring_job_to_wire(job: RecurringJob) -> dict[str, Any]:
    return {
        "backlog": job.maximum_backlog,
        "count": job.count,
        "data": job.data,
        "interval": job.interval_seconds,
        "jid": job.jid,
        "klass": job.class_name,
        "priority": job.priority,
        "queue": job.queue_name or "",
        "retries": job.retries,
        "state": job.state,
        "tags": list(job.tags),
        "throttles": list(job.throttles),
    }
