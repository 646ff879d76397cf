"""
Queue, worker and throttle records — decode and encode.

    queue.counts / queues.counts     {"depends": 0, "name": "emails", "paused": false,
                                      "recurring": 1, "running": 2, "scheduled": 0,
                                      "stalled": 0, "throttled": 0, "waiting": 5}
    queue.stats                      {"failed": 1, "failures": 3, "retries": 0,
                                      "run": {...}, "wait": {...}}
    workers.counts                   [{"jobs": 2, "name": "worker-1", "stalled": 0}]
    throttle.get, queue.throttle.get {"id": "ql:q:emails", "maximum": 10, "ttl": -1}
    queuePriorityPatterns.getAll     ["{\\"fairly\\": false, \\"pattern\\": [\\"a*\\"]}"]

The same required-property rules as jobs apply: every declared key must be
present and non-null, and unknown keys are ignored. List-valued results may
be ``[]`` or ``{}``.
"""

from __future__ import annotations

from typing import Any

from reqless.core.coercion import (
    RequiredFields,
    build,
    coerce_array,
    integer_items,
    read_bool,
    read_int,
    read_str,
    string_items,
)
from reqless.domain.models import (
    QueueCounts,
    QueuePriorityPattern,
    QueueStateStats,
    QueueStats,
    Throttle,
    WorkerCounts,
)

QUEUE_COUNTS_FIELDS = RequiredFields(
    "queue counts",
    (
        "depends",
        "name",
        "paused",
        "recurring",
        "running",
        "scheduled",
        "stalled",
        "throttled",
        "waiting",
    ),
)
QUEUE_STATE_STATS_FIELDS = RequiredFields(
    "queue state stats", ("count", "histogram", "mean", "std")
)
QUEUE_STATS_FIELDS = RequiredFields(
    "queue stats", ("failed", "failures", "retries", "run", "wait")
)
WORKER_COUNTS_FIELDS = RequiredFields("worker counts", ("jobs", "name", "stalled"))
THROTTLE_FIELDS = RequiredFields("throttle", ("id", "maximum", "ttl"))
PRIORITY_PATTERN_FIELDS = RequiredFields("queue priority pattern", ("pattern",))


# ------------------------------------------------------------------ #
# Decoding                                                             #
# ------------------------------------------------------------------ #


def queue_counts_from_wire(raw: Any) -> QueueCounts:
    obj = QUEUE_COUNTS_FIELDS.read(raw)
    return build(
        QueueCounts,
        queue_name=read_str(obj, "name"),
        paused=read_bool(obj, "paused"),
        depends=read_int(obj, "depends"),
        recurring=read_int(obj, "recurring"),
        running=read_int(obj, "running"),
        scheduled=read_int(obj, "scheduled"),
        stalled=read_int(obj, "stalled"),
        throttled=read_int(obj, "throttled"),
        waiting=read_int(obj, "waiting"),
    )


def queue_state_stats_from_wire(raw: Any) -> QueueStateStats:
    obj = QUEUE_STATE_STATS_FIELDS.read(raw)
    return build(
        QueueStateStats,
        count=read_int(obj, "count"),
        mean=read_int(obj, "mean"),
        standard_deviation=read_int(obj, "std"),
        histogram=tuple(
            coerce_array(obj["histogram"], "histogram", integer_items("histogram"))
        ),
    )


def queue_stats_from_wire(raw: Any) -> QueueStats:
    """Decode queue statistics. Errors in ``run``/``wait`` propagate as-is."""
    obj = QUEUE_STATS_FIELDS.read(raw)
    return build(
        QueueStats,
        failed=read_int(obj, "failed"),
        failures=read_int(obj, "failures"),
        retries=read_int(obj, "retries"),
        run=queue_state_stats_from_wire(obj["run"]),
        wait=queue_state_stats_from_wire(obj["wait"]),
    )


def worker_counts_from_wire(raw: Any) -> WorkerCounts:
    obj = WORKER_COUNTS_FIELDS.read(raw)
    return build(
        WorkerCounts,
        worker_name=read_str(obj, "name"),
        jobs=read_int(obj, "jobs"),
        stalled=read_int(obj, "stalled"),
    )


def throttle_from_wire(raw: Any) -> Throttle:
    obj = THROTTLE_FIELDS.read(raw)
    return build(
        Throttle,
        id=read_str(obj, "id"),
        maximum=read_int(obj, "maximum"),
        ttl=read_int(obj, "ttl"),
    )


def queue_priority_pattern_from_wire(raw: Any) -> QueuePriorityPattern:
    """Decode a priority pattern. ``fairly`` may be omitted and defaults to false."""
    obj = PRIORITY_PATTERN_FIELDS.read(raw)
    return build(
        QueuePriorityPattern,
        pattern=tuple(coerce_array(obj["pattern"], "pattern", string_items("pattern"))),
        fairly=read_bool(obj, "fairly") if "fairly" in obj else False,
    )


def queue_counts_list_from_wire(raw: Any) -> list[QueueCounts]:
    return coerce_array(raw, "counts", queue_counts_from_wire)


def worker_counts_list_from_wire(raw: Any) -> list[WorkerCounts]:
    return coerce_array(raw, "counts", worker_counts_from_wire)


# ------------------------------------------------------------------ #
# Encoding                                                             #
# ------------------------------------------------------------------ #


def queue_counts_to_wire(counts: QueueCounts) -> dict[str, Any]:
    return {
        "depends": counts.depends,
        "name": counts.queue_name,
        "paused": counts.paused,
        "recurring": counts.recurring,
        "running": counts.running,
        "scheduled": counts.scheduled,
        "stalled": counts.stalled,
        "throttled": counts.throttled,
        "waiting": counts.waiting,
    }


def queue_state_stats_to_wire(stats: QueueStateStats) -> dict[str, Any]:
    return {
        "count": stats.count,
        "histogram": list(stats.histogram),
        "mean": stats.mean,
        "std": stats.standard_deviation,
    }


def queue_stats_to_wire(stats: QueueStats) -> dict[str, Any]:
    return {
        "failed": stats.failed,
        "failures": stats.failures,
        "retries": stats.retries,
        "run": queue_state_stats_to_wire(stats.run),
        "wait": queue_state_stats_to_wire(stats.wait),
    }


def worker_counts_to_wire(counts: WorkerCounts) -> dict[str, Any]:
    return {"jobs": counts.jobs, "name": counts.worker_name, "stalled": counts.stalled}


def throttle_to_wire(throttle: Throttle) -> dict[str, Any]:
    return {"id": throttle.id, "maximum": throttle.maximum, "ttl": throttle.ttl}


def queue_priority_pattern_to_wire(pattern: QueuePriorityPattern) -> dict[str, Any]:
    return {"fairly": pattern.fairly, "pattern": list(pattern.pattern)}
