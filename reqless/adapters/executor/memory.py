"""
InMemoryExecutor — canned command responses for testing and development.

Responses are registered per command name. A response may be a raw value
(returned on every call) or a callable that receives the command arguments
and returns a raw value. Every call is recorded so tests can assert on the
arguments that were sent.

Zero external dependencies. Safe for multiple concurrent coroutines in a
single event loop.
"""
from __future__ import annotations

import asyncio
import dataclasses
import logging
from collections.abc import Callable
from typing import Union

from reqless.domain.errors import CommandError
from reqless.ports.executor import CommandArg, RawResult

logger = logging.getLogger(__name__)

Response = Union[RawResult, Callable[..., RawResult]]


@dataclasses.dataclass
class InMemoryExecutor:
    """
    In-process command executor backed by a dict of responses.

    Parameters
    ----------
    responses : command name → raw value, or callable(*args) → raw value
    """

    responses: dict[str, Response] = dataclasses.field(default_factory=dict)

    def __post_init__(self) -> None:
        self.calls: list[tuple[str, tuple[CommandArg, ...]]] = []
        self._lock: asyncio.Lock = asyncio.Lock()

    def respond(self, command: str, response: Response) -> None:
        """Register (or replace) the response for ``command``."""
        self.responses[command] = response

    async def execute(self, command: str, *args: CommandArg) -> RawResult:
        """Return the registered response. Raises CommandError for unknown commands."""
        async with self._lock:
            logger.debug("Executing %s with %d argument(s)", command, len(args))
            self.calls.append((command, args))
            try:
                response = self.responses[command]
            except KeyError:
                raise CommandError(command, "no response registered") from None
            if callable(response):
                return response(*args)
            return response
