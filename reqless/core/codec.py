"""
Codec — decode server JSON into domain models and encode them back to bytes.

The server answers most commands with a JSON document. pydantic_core parses
and writes the JSON text; the ``*_from_wire`` / ``*_to_wire`` functions in
jobs.py, events.py and envelopes.py map between the parsed values and the
domain models.

Encoded output keeps the server's key order, so decode(encode(x)) == x for
every model, and the bytes are stable enough to compare in tests.
"""
from __future__ import annotations

from typing import Any

from pydantic_core import from_json, to_json

from reqless.core.envelopes import (
    jids_result_from_wire,
    jids_result_to_wire,
    tracked_jobs_from_wire,
    tracked_jobs_to_wire,
    worker_jobs_from_wire,
    worker_jobs_to_wire,
)
from reqless.core.events import event_from_wire, event_to_wire
from reqless.core.jobs import (
    job_from_wire,
    job_to_wire,
    jobs_from_wire,
    recurring_job_from_wire,
    recurring_job_to_wire,
)
from reqless.domain.errors import MalformedJsonError
from reqless.domain.models import (
    AnyJobEvent,
    JidsResult,
    Job,
    RecurringJob,
    TrackedJobsResult,
    WorkerJobs,
)


def loads(data: bytes | str) -> Any:
    """
    Parse JSON text. Raises MalformedJsonError if it is not valid JSON.

    When an object repeats a key, the last value wins.
    """
    try:
        return from_json(data)
    except ValueError as exc:
        raise MalformedJsonError(f"Invalid JSON from server: {exc}") from exc


def dumps(value: Any) -> bytes:
    """Serialize wire values to compact UTF-8 JSON bytes, keeping key order."""
    return to_json(value)


def decode_job(data: bytes | str) -> Job:
    return job_from_wire(loads(data))


def encode_job(job: Job) -> bytes:
    return dumps(job_to_wire(job))


def decode_jobs(data: bytes | str) -> list[Job]:
    """Decode a JSON list of jobs. ``{}`` decodes to an empty list."""
    return jobs_from_wire(loads(data))


def encode_jobs(jobs: list[Job]) -> bytes:
    return dumps([job_to_wire(job) for job in jobs])


def decode_event(data: bytes | str) -> AnyJobEvent:
    return event_from_wire(loads(data))


def encode_event(event: AnyJobEvent) -> bytes:
    return dumps(event_to_wire(event))


def decode_recurring_job(data: bytes | str) -> RecurringJob:
    return recurring_job_from_wire(loads(data))


def encode_recurring_job(job: RecurringJob) -> bytes:
    return dumps(recurring_job_to_wire(job))


def decode_jids_result(data: bytes | str) -> JidsResult:
    return jids_result_from_wire(loads(data))


def encode_jids_result(result: JidsResult) -> bytes:
    return dumps(jids_result_to_wire(result))


def decode_tracked_jobs(data: bytes | str) -> TrackedJobsResult:
    return tracked_jobs_from_wire(loads(data))


def encode_tracked_jobs(result: TrackedJobsResult) -> bytes:
    return dumps(tracked_jobs_to_wire(result))


def decode_worker_jobs(data: bytes | str) -> WorkerJobs:
    return worker_jobs_from_wire(loads(data))


def encode_worker_jobs(result: WorkerJobs) -> bytes:
    return dumps(worker_jobs_to_wire(result))
