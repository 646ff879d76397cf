from collections.abc import Callable
from typing import Any

import pytest

WireFactory = Callable[..., dict[str, Any]]


def _job_wire(**overrides: Any) -> dict[str, Any]:
    wire: dict[str, Any] = {
        "data": '{"to": "user@example.com"}',
        "dependencies": ["jid-0"],
        "dependents": [],
        "expires": 1700000060000,
        "failure": {},
        "history": [
            {"what": "put", "when": 1700000000000, "queue": "emails"},
            {"what": "popped", "when": 1700000001000, "worker": "worker-1"},
        ],
        "jid": "jid-1",
        "klass": "SendEmail",
        "priority": 0,
        "queue": "emails",
        "remaining": 5,
        "retries": 5,
        "spawned_from_jid": False,
        "state": "running",
        "tags": ["urgent"],
        "throttles": ["ql:q:emails"],
        "tracked": False,
        "worker": "worker-1",
    }
    wire.update(overrides)
    return wire


def _recurring_job_wire(**overrides: Any) -> dict[str, Any]:
    wire: dict[str, Any] = {
        "backlog": 2,
        "count": 7,
        "data": "{}",
        "interval": 60,
        "jid": "recur-1",
        "klass": "Cleanup",
        "priority": 1,
        "queue": "maintenance",
        "retries": 3,
        "state": "recur",
        "tags": {},
        "throttles": ["ql:q:maintenance"],
    }
    wire.update(overrides)
    return wire


@pytest.fixture
def job_wire() -> WireFactory:
    """Factory for a complete, valid job object as the server sends it."""
    return _job_wire


@pytest.fixture
def recurring_job_wire() -> WireFactory:
    """Factory for a complete, valid recurring job object."""
    return _recurring_job_wire
