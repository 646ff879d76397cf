import pytest
from pydantic import ValidationError

from reqless.domain.models import (
    KNOWN_EVENT_TYPES,
    DoneEvent,
    FailedEvent,
    JidsResult,
    Job,
    JobFailure,
    LogEvent,
    PutEvent,
    QueueCounts,
    QueuePriorityPattern,
    QueueStateStats,
    QueueStats,
    RecurringJob,
    Throttle,
    TrackedJobsResult,
    WorkerCounts,
    WorkerJobs,
)


def _job(**overrides) -> Job:
    fields = dict(
        jid="jid-1",
        class_name="SendEmail",
        data="{}",
        queue_name="emails",
        worker_name=None,
        state="waiting",
        priority=0,
        remaining=5,
        retries=5,
    )
    fields.update(overrides)
    return Job(**fields)


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


def test_event_discriminator_defaults():
    assert PutEvent(when=1, queue_name="q").what == "put"
    assert DoneEvent(when=1).what == "done"
    assert FailedEvent(when=1, group="g", worker_name="w").what == "failed"


def test_event_rejects_negative_when():
    with pytest.raises(ValidationError):
        DoneEvent(when=-1)


def test_event_is_frozen():
    event = DoneEvent(when=1)
    with pytest.raises(ValidationError):
        event.when = 2


@pytest.mark.parametrize("what", sorted(KNOWN_EVENT_TYPES))
def test_log_event_rejects_known_types(what):
    with pytest.raises(ValidationError):
        LogEvent(what=what, when=1)


@pytest.mark.parametrize("key", ["what", "when"])
def test_log_event_rejects_reserved_data_keys(key):
    with pytest.raises(ValidationError):
        LogEvent(what="custom", when=1, data={key: 1})


def test_log_event_keeps_data_order():
    event = LogEvent(what="custom", when=1, data={"b": 1, "a": 2})
    assert list(event.data) == ["b", "a"]


def test_events_compare_structurally():
    assert PutEvent(when=1, queue_name="q") == PutEvent(when=1, queue_name="q")
    assert PutEvent(when=1, queue_name="q") != PutEvent(when=1, queue_name="r")


# ---------------------------------------------------------------------------
# Job
# ---------------------------------------------------------------------------


def test_job_defaults():
    job = _job()
    assert job.expires is None
    assert job.tracked is False
    assert job.spawned_from_jid is None
    assert job.dependencies == ()
    assert job.history == ()
    assert job.failure is None


def test_job_is_frozen():
    job = _job()
    with pytest.raises(ValidationError):
        job.jid = "other"


@pytest.mark.parametrize("name", ["jid", "class_name", "state"])
def test_job_rejects_blank_strings(name):
    with pytest.raises(ValidationError):
        _job(**{name: "  "})


def test_job_remaining_bounds():
    assert _job(remaining=-1).remaining == -1
    with pytest.raises(ValidationError):
        _job(remaining=-2)
    with pytest.raises(ValidationError):
        _job(remaining=6, retries=5)


def test_job_with_failure_and_history():
    failure = JobFailure(group="g", message="m", when=1, worker_name="w")
    job = _job(
        state="failed",
        failure=failure,
        history=(PutEvent(when=1, queue_name="emails"), LogEvent(what="x", when=2)),
    )
    assert job.failure == failure
    assert isinstance(job.history[1], LogEvent)


def test_job_lists_are_tuples():
    job = _job(tags=["a", "b"])
    assert job.tags == ("a", "b")


# ---------------------------------------------------------------------------
# RecurringJob
# ---------------------------------------------------------------------------


def _recurring(**overrides) -> RecurringJob:
    fields = dict(
        jid="recur-1",
        class_name="Cleanup",
        data="{}",
        queue_name="maintenance",
        state="recur",
        priority=0,
        retries=3,
        count=0,
        interval_seconds=60,
        maximum_backlog=0,
    )
    fields.update(overrides)
    return RecurringJob(**fields)


def test_recurring_job_valid():
    assert _recurring().interval_seconds == 60


@pytest.mark.parametrize(
    ("name", "value"),
    [("interval_seconds", 0), ("count", -1), ("maximum_backlog", -1), ("jid", "")],
)
def test_recurring_job_rejects_invalid_values(name, value):
    with pytest.raises(ValidationError):
        _recurring(**{name: value})


# ---------------------------------------------------------------------------
# Envelopes
# ---------------------------------------------------------------------------


def test_envelope_defaults_are_empty():
    assert JidsResult() == JidsResult(jids=(), total=0)
    assert TrackedJobsResult().jobs == ()
    assert WorkerJobs().stalled_jids == ()


def test_jids_result_total_is_independent_of_page():
    result = JidsResult(jids=("a",), total=100)
    assert result.total == 100


# ---------------------------------------------------------------------------
# Values that could not survive a decode of their own encoding
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("expires", [0, -1])
def test_job_rejects_non_positive_expires(expires):
    with pytest.raises(ValidationError):
        _job(expires=expires)


@pytest.mark.parametrize("name", ["queue_name", "worker_name", "spawned_from_jid"])
@pytest.mark.parametrize("value", ["", "   "])
def test_job_rejects_blank_optional_strings(name, value):
    with pytest.raises(ValidationError):
        _job(**{name: value})


def test_job_accepts_none_for_optional_strings():
    job = _job(queue_name=None, worker_name=None, spawned_from_jid=None)
    assert job.queue_name is None
    assert job.spawned_from_jid is None


@pytest.mark.parametrize(
    ("name", "value"),
    [("priority", -1), ("retries", -1), ("data", ""), ("data", " ")],
)
def test_job_rejects_invalid_scalars(name, value):
    with pytest.raises(ValidationError):
        _job(**{name: value, "remaining": -1})


@pytest.mark.parametrize("name", ["dependencies", "dependents", "tags", "throttles"])
def test_job_rejects_blank_list_items(name):
    with pytest.raises(ValidationError):
        _job(**{name: ("ok", " ")})


@pytest.mark.parametrize(
    ("name", "value"),
    [("group", ""), ("message", " "), ("worker_name", ""), ("when", 0), ("when", -1)],
)
def test_job_failure_rejects_invalid_values(name, value):
    fields = dict(group="g", message="m", when=1, worker_name="w")
    fields[name] = value
    with pytest.raises(ValidationError):
        JobFailure(**fields)


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("priority", -1),
        ("retries", -1),
        ("data", ""),
        ("queue_name", " "),
        ("tags", ("",)),
        ("throttles", ("t", " ")),
    ],
)
def test_recurring_job_rejects_base_job_violations(name, value):
    with pytest.raises(ValidationError):
        _recurring(**{name: value})


# ---------------------------------------------------------------------------
# LogEvent immutability
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("what", ["", "   "])
def test_log_event_rejects_blank_what(what):
    with pytest.raises(ValidationError):
        LogEvent(what=what, when=1)


def test_log_event_does_not_share_constructor_data():
    data = {"meta": {"a": 1}, "items": [1, 2]}
    event = LogEvent(what="note", when=1, data=data)
    data["meta"]["a"] = 2
    data["items"].append(3)
    data["added"] = True
    assert event.data == {"meta": {"a": 1}, "items": [1, 2]}


def test_log_event_data_is_a_fresh_copy():
    event = LogEvent(what="note", when=1, data={"meta": {"a": 1}})
    event.data["meta"]["a"] = 2
    event.data["b"] = 2
    assert event.data == {"meta": {"a": 1}}


def test_log_event_extras_hold_json_text():
    event = LogEvent(what="note", when=1, data={"text": "hi", "n": [1]})
    assert event.extras == (("text", '"hi"'), ("n", "[1]"))


def test_log_event_rejects_non_mapping_data():
    with pytest.raises(ValidationError):
        LogEvent(what="note", when=1, data=[("a", 1)])


def test_log_event_rejects_invalid_json_extras():
    with pytest.raises(ValidationError):
        LogEvent(what="note", when=1, extras=(("a", "{not json"),))


def test_log_event_and_job_are_hashable():
    event = LogEvent(what="note", when=1, data={"meta": {"a": [1, 2]}})
    job = _job(history=(PutEvent(when=1, queue_name="emails"), event))
    assert hash(event) == hash(LogEvent(what="note", when=1, data={"meta": {"a": [1, 2]}}))
    assert job in {job}


# ---------------------------------------------------------------------------
# Queues, workers and throttles
# ---------------------------------------------------------------------------


def test_queue_counts_rejects_blank_name():
    with pytest.raises(ValidationError):
        QueueCounts(
            queue_name=" ",
            paused=False,
            depends=0,
            recurring=0,
            running=0,
            scheduled=0,
            stalled=0,
            throttled=0,
            waiting=0,
        )


def test_worker_counts_rejects_blank_name():
    with pytest.raises(ValidationError):
        WorkerCounts(worker_name="", jobs=0, stalled=0)


def test_throttle_rejects_blank_id():
    with pytest.raises(ValidationError):
        Throttle(id="  ", maximum=1, ttl=-1)


def test_queue_priority_pattern_defaults_and_validation():
    assert QueuePriorityPattern(pattern=("a*",)).fairly is False
    with pytest.raises(ValidationError):
        QueuePriorityPattern(pattern=("a*", " "))


def test_queue_stats_nests_state_stats():
    run = QueueStateStats(count=1, mean=2, standard_deviation=0, histogram=[1, 0])
    stats = QueueStats(failed=0, failures=0, retries=0, run=run, wait=run)
    assert stats.run.histogram == (1, 0)
