"""
Responses — turn raw executor results into domain models.

An executor returns whatever the server produced: JSON text (str or
bytes), an integer, or None. The helpers here apply the response
conventions of the reqless commands on top of the codec:

  job.get / recurringJob.get     None → None (no such job), else one record
  job.getMulti / queue.pop       a list of jobs, where "{}" means no jobs
  jobs.completed, queue.jobsByState
                                 a list of jids
  jobs.tagged, jobs.failedByGroup, jobs.tracked, worker.jobs
                                 an envelope
  queue.counts, queue.stats, throttle.get
                                 one record
  queues.counts, workers.counts  a list of records, where "{}" means none
  queuePriorityPatterns.getAll   a list of JSON texts, one pattern each

Commands that must always answer raise ServerResponseError on None.
"""
from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

from reqless.core import codec
from reqless.core.coercion import coerce_array, string_items
from reqless.core.envelopes import (
    jids_result_from_wire,
    tracked_jobs_from_wire,
    worker_jobs_from_wire,
)
from reqless.core.jobs import job_from_wire, jobs_from_wire, recurring_job_from_wire
from reqless.core.queues import (
    queue_counts_from_wire,
    queue_counts_list_from_wire,
    queue_priority_pattern_from_wire,
    queue_stats_from_wire,
    throttle_from_wire,
    worker_counts_list_from_wire,
)
from reqless.domain.errors import DecodeError, ServerResponseError
from reqless.domain.models import (
    JidsResult,
    Job,
    QueueCounts,
    QueuePriorityPattern,
    QueueStats,
    RecurringJob,
    Throttle,
    TrackedJobsResult,
    WorkerCounts,
    WorkerJobs,
)
from reqless.ports.executor import CommandArg, CommandExecutorPort, RawResult

T = TypeVar("T")


def require_response(raw: RawResult) -> RawResult:
    """Return ``raw`` unchanged, raising ServerResponseError if it is None."""
    if raw is None:
        raise ServerResponseError()
    return raw


def _parse(raw: RawResult) -> Any:
    raw = require_response(raw)
    if isinstance(raw, int):
        raise DecodeError(f"Expected a JSON document from the server, got integer {raw}.")
    return codec.loads(raw)


def job_or_none(raw: RawResult) -> Job | None:
    if raw is None:
        return None
    return job_from_wire(_parse(raw))


def recurring_job_or_none(raw: RawResult) -> RecurringJob | None:
    if raw is None:
        return None
    return recurring_job_from_wire(_parse(raw))


def jobs_list(raw: RawResult) -> list[Job]:
    """A list of jobs. The server sends ``{}`` when there are none."""
    return jobs_from_wire(_parse(raw))


def jids_list(raw: RawResult) -> list[str]:
    """A list of jids. Blank jids are rejected."""
    jids = coerce_array(_parse(raw), "jids", string_items("jids"))
    for jid in jids:
        if not jid.strip():
            raise DecodeError(
                "Value cannot include empty string or strings composed entirely"
                " of whitespace. (Subject 'jids')",
                "jids",
            )
    return jids


def jids_result(raw: RawResult) -> JidsResult:
    return jids_result_from_wire(_parse(raw))


def tracked_jobs(raw: RawResult) -> TrackedJobsResult:
    return tracked_jobs_from_wire(_parse(raw))


def worker_jobs(raw: RawResult) -> WorkerJobs:
    return worker_jobs_from_wire(_parse(raw))


def queue_counts(raw: RawResult) -> QueueCounts:
    return queue_counts_from_wire(_parse(raw))


def queue_counts_list(raw: RawResult) -> list[QueueCounts]:
    """Counts for every queue. The server sends ``{}`` when there are none."""
    return queue_counts_list_from_wire(_parse(raw))


def worker_counts_list(raw: RawResult) -> list[WorkerCounts]:
    """Counts for every worker. The server sends ``{}`` when there are none."""
    return worker_counts_list_from_wire(_parse(raw))


def queue_stats(raw: RawResult) -> QueueStats:
    return queue_stats_from_wire(_parse(raw))


def throttle(raw: RawResult) -> Throttle:
    return throttle_from_wire(_parse(raw))


def queue_priority_patterns(raw: RawResult) -> list[QueuePriorityPattern]:
    """
    Every stored priority pattern.

    The server answers with a list of strings, each one a pattern that was
    stored as JSON text, so each element is parsed on its own.
    """
    serialized = coerce_array(_parse(raw), "patterns", string_items("patterns"))
    return [queue_priority_pattern_from_wire(codec.loads(text)) for text in serialized]


async def execute_and_decode(
    executor: CommandExecutorPort,
    decoder: Callable[[RawResult], T],
    command: str,
    *args: CommandArg,
) -> T:
    """
    Run one command and decode its result.

    Decoding happens only after the executor returns; if the awaiting task
    is cancelled first, nothing is decoded.
    """
    raw = await executor.execute(command, *args)
    return decoder(raw)
