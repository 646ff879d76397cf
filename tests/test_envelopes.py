import pytest

from reqless.core.envelopes import (
    jids_result_from_wire,
    jids_result_to_wire,
    tracked_jobs_from_wire,
    tracked_jobs_to_wire,
    worker_jobs_from_wire,
    worker_jobs_to_wire,
)
from reqless.core.jobs import job_from_wire
from reqless.domain.errors import (
    MalformedRootError,
    MissingPropertyError,
    NestedDecodeError,
    NonEmptyObjectError,
    UnexpectedShapeError,
)
from reqless.domain.models import JidsResult, TrackedJobsResult, WorkerJobs

# ---------------------------------------------------------------------------
# JidsResult
# ---------------------------------------------------------------------------


def test_jids_result_rejects_non_object():
    with pytest.raises(MalformedRootError) as exc_info:
        jids_result_from_wire([])
    assert str(exc_info.value) == "Expected reader to begin with start of object."


def test_jids_result_decodes():
    result = jids_result_from_wire({"jobs": ["b", "a"], "total": 40})
    assert result == JidsResult(jids=("b", "a"), total=40)


def test_jids_result_total_independent_of_page():
    result = jids_result_from_wire({"jobs": ["a"], "total": 0})
    assert result.total == 0
    assert len(result.jids) == 1


def test_jids_result_empty_object_jobs():
    assert jids_result_from_wire({"jobs": {}, "total": 0}).jids == ()


def test_jids_result_non_empty_object_jobs():
    with pytest.raises(NonEmptyObjectError) as exc_info:
        jids_result_from_wire({"jobs": {"key": "boom"}, "total": 4})
    assert str(exc_info.value) == (
        "Expected 'jobs' to be array or empty object but encountered object "
        "with 1 properties."
    )


def test_jids_result_null_jobs():
    with pytest.raises(NestedDecodeError) as exc_info:
        jids_result_from_wire({"jobs": None, "total": 4})
    assert exc_info.value.name == "jobs"
    assert exc_info.value.type_name == "string[]"
    assert str(exc_info.value) == "Failed to deserialize 'jobs' property into a string[]."


def test_jids_result_non_string_jid():
    with pytest.raises(NestedDecodeError, match="string\\[\\]") as exc_info:
        jids_result_from_wire({"jobs": ["a", 1], "total": 2})
    assert isinstance(exc_info.value.__cause__, UnexpectedShapeError)


def test_jids_result_missing_jobs():
    with pytest.raises(MissingPropertyError) as exc_info:
        jids_result_from_wire({"total": 0})
    assert str(exc_info.value) == (
        "Expected 'jobs' property in JSON object, but none was found."
    )


def test_jids_result_missing_total():
    with pytest.raises(MissingPropertyError) as exc_info:
        jids_result_from_wire({"jobs": []})
    assert str(exc_info.value) == (
        "Expected 'total' property in JSON object, but none was found."
    )


def test_jids_result_total_must_be_integer():
    with pytest.raises(UnexpectedShapeError, match="'total'"):
        jids_result_from_wire({"jobs": [], "total": "4"})


def test_jids_result_ignores_other_properties():
    result = jids_result_from_wire({"page": 2, "jobs": ["a"], "total": 1})
    assert result == JidsResult(jids=("a",), total=1)


def test_jids_result_round_trip():
    result = JidsResult(jids=("jid1", "jid2"), total=4)
    wire = jids_result_to_wire(result)
    assert list(wire) == ["total", "jobs"]
    assert jids_result_from_wire(wire) == result


# ---------------------------------------------------------------------------
# TrackedJobsResult
# ---------------------------------------------------------------------------


def test_tracked_jobs_rejects_non_object():
    with pytest.raises(MalformedRootError):
        tracked_jobs_from_wire("[]")


def test_tracked_jobs_empty_object_jobs():
    result = tracked_jobs_from_wire({"expired": [], "jobs": {}})
    assert result.jobs == ()
    assert result.expired_jids == ()


def test_tracked_jobs_empty_object_expired():
    result = tracked_jobs_from_wire({"expired": {}, "jobs": []})
    assert result.expired_jids == ()


def test_tracked_jobs_missing_jobs():
    with pytest.raises(MissingPropertyError) as exc_info:
        tracked_jobs_from_wire({"expired": []})
    assert str(exc_info.value) == (
        "Expected 'jobs' property in JSON object, but none was found."
    )


def test_tracked_jobs_missing_expired():
    with pytest.raises(MissingPropertyError) as exc_info:
        tracked_jobs_from_wire({"jobs": []})
    assert str(exc_info.value) == (
        "Expected 'expired' property in JSON object, but none was found."
    )


def test_tracked_jobs_null_jobs():
    with pytest.raises(NestedDecodeError) as exc_info:
        tracked_jobs_from_wire({"expired": [], "jobs": None})
    assert str(exc_info.value) == "Failed to deserialize 'jobs' property into a Job[]."


def test_tracked_jobs_null_expired():
    with pytest.raises(NestedDecodeError) as exc_info:
        tracked_jobs_from_wire({"expired": None, "jobs": []})
    assert str(exc_info.value) == (
        "Failed to deserialize 'expired' property into a string[]."
    )


def test_tracked_jobs_invalid_job_is_wrapped(job_wire):
    bad = job_wire()
    del bad["klass"]
    with pytest.raises(NestedDecodeError, match="Job\\[\\]") as exc_info:
        tracked_jobs_from_wire({"jobs": [job_wire(), bad], "expired": []})
    cause = exc_info.value.__cause__
    assert isinstance(cause, MissingPropertyError)
    assert cause.name == "klass"


def test_tracked_jobs_job_with_non_empty_object_list_is_wrapped(job_wire):
    with pytest.raises(NestedDecodeError) as exc_info:
        tracked_jobs_from_wire({"jobs": [job_wire(tags={"x": 1})], "expired": []})
    assert isinstance(exc_info.value.__cause__, NonEmptyObjectError)


def test_tracked_jobs_non_empty_object_jobs():
    with pytest.raises(NonEmptyObjectError, match="'jobs'"):
        tracked_jobs_from_wire({"jobs": {"a": 1}, "expired": []})


def test_tracked_jobs_decodes(job_wire):
    result = tracked_jobs_from_wire(
        {"expired": ["gone-1", "gone-2"], "jobs": [job_wire(tracked=True)]}
    )
    assert result.expired_jids == ("gone-1", "gone-2")
    assert result.jobs == (job_from_wire(job_wire(tracked=True)),)


def test_tracked_jobs_round_trip(job_wire):
    result = TrackedJobsResult(
        jobs=(job_from_wire(job_wire(jid="a")), job_from_wire(job_wire(jid="b"))),
        expired_jids=("j1", "j2"),
    )
    assert tracked_jobs_from_wire(tracked_jobs_to_wire(result)) == result


# ---------------------------------------------------------------------------
# WorkerJobs
# ---------------------------------------------------------------------------


def test_worker_jobs_decodes():
    result = worker_jobs_from_wire({"jobs": ["a"], "stalled": {}})
    assert result == WorkerJobs(jids=("a",), stalled_jids=())


def test_worker_jobs_missing_stalled():
    with pytest.raises(MissingPropertyError, match="'stalled'"):
        worker_jobs_from_wire({"jobs": []})


def test_worker_jobs_null_stalled():
    with pytest.raises(NestedDecodeError, match="'stalled' property into a string\\[\\]"):
        worker_jobs_from_wire({"jobs": [], "stalled": None})


def test_worker_jobs_round_trip():
    result = WorkerJobs(jids=("a", "b"), stalled_jids=("c",))
    assert worker_jobs_from_wire(worker_jobs_to_wire(result)) == result
