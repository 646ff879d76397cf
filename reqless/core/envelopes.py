"""
Envelopes — composite results that bundle a list with some metadata.

    jobs.tagged / jobs.failedByGroup  → {"jobs": ["jid-1", "jid-2"], "total": 40}
    jobs.tracked                      → {"jobs": [{...job...}], "expired": ["jid-3"]}
    worker.jobs                       → {"jobs": ["jid-1"], "stalled": ["jid-2"]}

``jobs`` in the first envelope holds jids, not job objects; the name is
historical. Each list may be ``[]`` or ``{}`` on the wire. Properties
other than the declared ones are ignored, and key order does not matter.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

from reqless.core.coercion import (
    build,
    coerce_array,
    expect_object,
    expect_property,
    json_type,
    string_items,
)
from reqless.core.jobs import job_from_wire, job_to_wire
from reqless.domain.errors import DecodeError, NestedDecodeError, UnexpectedShapeError
from reqless.domain.models import Job, JidsResult, TrackedJobsResult, WorkerJobs

T = TypeVar("T")


def _list_property(
    obj: dict[str, Any],
    name: str,
    type_name: str,
    item: Callable[[Any], T],
) -> list[T]:
    """
    Read a required list property of an envelope.

    A non-empty object is reported as-is; every other failure, including
    null, is reported as "Failed to deserialize '<name>' property into a
    <type_name>." with the underlying error chained.
    """
    value = expect_property(obj, name)
    if not isinstance(value, (list, dict)):
        raise NestedDecodeError(name, type_name)
    elements = coerce_array(value, name)
    try:
        return [item(element) for element in elements]
    except DecodeError as exc:
        raise NestedDecodeError(name, type_name) from exc


def jids_result_from_wire(raw: Any) -> JidsResult:
    """
    Decode ``{"jobs": [...], "total": n}``.

    ``total`` is the number of matches overall and is not compared with the
    number of jids returned.
    """
    obj = expect_object(raw)
    jids = _list_property(obj, "jobs", "string[]", string_items("jobs"))
    total = expect_property(obj, "total")
    if isinstance(total, bool) or not isinstance(total, int):
        raise UnexpectedShapeError("total", "integer", json_type(total))
    return build(JidsResult, jids=tuple(jids), total=total)


def tracked_jobs_from_wire(raw: Any) -> TrackedJobsResult:
    """Decode ``{"jobs": [...jobs...], "expired": [...jids...]}``."""
    obj = expect_object(raw)
    jobs: list[Job] = _list_property(obj, "jobs", "Job[]", job_from_wire)
    expired = _list_property(obj, "expired", "string[]", string_items("expired"))
    return build(TrackedJobsResult, jobs=tuple(jobs), expired_jids=tuple(expired))


def worker_jobs_from_wire(raw: Any) -> WorkerJobs:
    """Decode ``{"jobs": [...jids...], "stalled": [...jids...]}``."""
    obj = expect_object(raw)
    jids = _list_property(obj, "jobs", "string[]", string_items("jobs"))
    stalled = _list_property(obj, "stalled", "string[]", string_items("stalled"))
    return build(WorkerJobs, jids=tuple(jids), stalled_jids=tuple(stalled))


def jids_result_to_wire(result: JidsResult) -> dict[str, Any]:
    return {"total": result.total, "jobs": list(result.jids)}


def tracked_jobs_to_wire(result: TrackedJobsResult) -> dict[str, Any]:
    return {
        "jobs": [job_to_wire(job) for job in result.jobs],
        "expired": list(result.expired_jids),
    }


def worker_jobs_to_wire(result: WorkerJobs) -> dict[str, Any]:
    return {"jobs": list(result.jids), "stalled": list(result.stalled_jids)}
