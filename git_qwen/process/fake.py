"""In-memory runner for tests.

Nothing is spawned: every call is recorded and answered from a table of
argv prefixes. Tests should use FakeCommandRunner; the CLI uses
SubprocessRunner.
"""

from dataclasses import dataclass
from typing import Callable, Sequence, Union

from git_qwen.process.base import CommandRunner, CommandResult

# A response is a fixed result, a bare exit status, or a callable that gets
# (argv, stdin_text) and returns either of those.
Response = Union[CommandResult, int, Callable[[list[str], Union[str, None]], Union[CommandResult, int]]]


@dataclass(frozen=True)
class RecordedCall:
    argv: tuple[str, ...]
    input: str | None = None
    interactive: bool = False


class FakeCommandRunner(CommandRunner):
    """Scripted CommandRunner. Unscripted commands succeed with no output."""

    def __init__(self, responses: dict[tuple[str, ...], Response] | None = None,
                 missing: Sequence[str] = ()):
        self.responses: dict[tuple[str, ...], Response] = dict(responses or {})
        self.missing = set(missing)
        self.calls: list[RecordedCall] = []

    def on(self, *prefix: str, result: Response) -> "FakeCommandRunner":
        self.responses[tuple(prefix)] = result
        return self

    def capture(self, argv: Sequence[str], input: str | None = None) -> CommandResult:
        argv = list(argv)
        self.calls.append(RecordedCall(tuple(argv), input, interactive=False))
        return self._coerce(self._respond(argv, input))

    def interactive(self, argv: Sequence[str]) -> int:
        argv = list(argv)
        self.calls.append(RecordedCall(tuple(argv), None, interactive=True))
        return self._coerce(self._respond(argv, None)).returncode

    def calls_to(self, *prefix: str) -> list[RecordedCall]:
        """Recorded calls whose argv starts with prefix."""
        return [c for c in self.calls if c.argv[:len(prefix)] == prefix]

    def _respond(self, argv: list[str], input: str | None):
        if argv and argv[0] in self.missing:
            raise FileNotFoundError(2, "No such file or directory", argv[0])

        matches = [p for p in self.responses if tuple(argv[:len(p)]) == p]
        if not matches:
            return CommandResult(returncode=0)
        response = self.responses[max(matches, key=len)]
        if callable(response):
            response = response(argv, input)
        return response

    @staticmethod
    def _coerce(response) -> CommandResult:
        if isinstance(response, int):
            return CommandResult(returncode=response)
        return response
