"""
reqless — client-side codec for the reqless Redis job queue.

The reqless server keeps all queueing logic in a server-side script. A client
sends ``execute(command, *args)`` and receives a raw scalar, usually a JSON
document. This package turns those documents into strict, immutable domain
models and back.

Two wire quirks are handled everywhere:
  - the server cannot tell an empty list from an empty map, so every list
    may arrive as ``[]`` or as ``{}``
  - job history events are flat objects whose kind is given by a root-level
    ``what`` property; unknown kinds become LogEvent

Quick start
-----------
    import asyncio
    from reqless import InMemoryExecutor, responses

    async def main():
        executor = InMemoryExecutor({"jobs.tagged": '{"jobs": {}, "total": 0}'})
        result = await responses.execute_and_decode(
            executor, responses.jids_result, "jobs.tagged", 0, "urgent", 0, 25
        )
        print(result.jids, result.total)

    asyncio.run(main())

Architecture
------------
Follows the Ports & Adapters pattern:
  domain/   — pure value types (Job, JobEvent variants, envelopes) and errors
  ports/    — Protocol interfaces (CommandExecutorPort)
  core/     — coercion primitives, decoders/encoders, codec, responses
  adapters/ — concrete executors
"""
from __future__ import annotations

from reqless.adapters.executor.memory import InMemoryExecutor
from reqless.core import codec, responses
from reqless.domain.errors import (
    CommandError,
    DecodeError,
    InvalidValueError,
    MalformedJsonError,
    MalformedRootError,
    MissingPropertyError,
    NestedDecodeError,
    NonEmptyObjectError,
    NullPropertyError,
    ReqlessError,
    ServerResponseError,
    UnexpectedShapeError,
)
from reqless.domain.models import (
    AnyJobEvent,
    DoneEvent,
    FailedEvent,
    FailedRetriesEvent,
    JidsResult,
    Job,
    JobEvent,
    JobFailure,
    LogEvent,
    PoppedEvent,
    PutEvent,
    QueueCounts,
    QueuePriorityPattern,
    QueueStateStats,
    QueueStats,
    RecurringJob,
    Throttle,
    ThrottledEvent,
    TimedOutEvent,
    TrackedJobsResult,
    WorkerCounts,
    WorkerJobs,
)
from reqless.ports.executor import CommandExecutorPort

__all__ = [
    # Domain models
    "Job",
    "JobFailure",
    "RecurringJob",
    "JidsResult",
    "TrackedJobsResult",
    "WorkerJobs",
    "QueueCounts",
    "QueueStats",
    "QueueStateStats",
    "WorkerCounts",
    "Throttle",
    "QueuePriorityPattern",
    # Job events
    "AnyJobEvent",
    "JobEvent",
    "PutEvent",
    "PoppedEvent",
    "DoneEvent",
    "FailedEvent",
    "FailedRetriesEvent",
    "ThrottledEvent",
    "TimedOutEvent",
    "LogEvent",
    # Errors
    "ReqlessError",
    "DecodeError",
    "MalformedRootError",
    "MalformedJsonError",
    "MissingPropertyError",
    "NullPropertyError",
    "UnexpectedShapeError",
    "NonEmptyObjectError",
    "NestedDecodeError",
    "InvalidValueError",
    "ServerResponseError",
    "CommandError",
    # Port (for typing custom executors)
    "CommandExecutorPort",
    # Codec and response helpers
    "codec",
    "responses",
    # Built-in executor adapters
    "InMemoryExecutor",
]
