"""
CommandExecutorPort — the single port in reqless.

Any object satisfying this structural Protocol can run reqless commands.
No base class or registration is required.

Execute contract
----------------
execute(command, *args)
  - command is the reqless command name, e.g. "job.get" or "jobs.tagged"
  - args are positional command arguments (the caller builds and validates
    them; the executor sends them as-is)
  - returns the raw scalar the server produced:
      str | bytes → usually a JSON document, decoded with reqless.core.codec
      int         → counts and timestamps
      None        → "nothing", e.g. a job that does not exist

The executor does not interpret results. reqless.core.responses turns a raw
result into domain models.
"""

from __future__ import annotations

from typing import Protocol, Union, runtime_checkable

CommandArg = Union[str, bytes, int, float]
RawResult = Union[str, bytes, int, None]


@runtime_checkable
class CommandExecutorPort(Protocol):
    """
    Minimal interface required by reqless.

    Implementing adapters (built-in):
      - InMemoryExecutor — canned responses, for tests and examples
    """

    async def execute(self, command: str, *args: CommandArg) -> RawResult:
        """
        Run ``command`` with ``args`` and return the raw result.

        Raises
        ------
        CommandError  if the command cannot be run
        """
        ...
