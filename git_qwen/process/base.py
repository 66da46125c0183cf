"""Process Runner Base Classes"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Sequence


@dataclass
class CommandResult:
    """Outcome of a child process whose streams were captured."""
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner(ABC):
    """Spawns child processes, one at a time.

    Both methods raise FileNotFoundError (or another OSError) when the
    executable cannot be started, and Interrupted when a termination signal
    arrived while the child was running.
    """

    @abstractmethod
    def capture(self, argv: Sequence[str], input: str | None = None) -> CommandResult:
        """Run argv with stdout/stderr captured and `input` on stdin."""
        pass

    @abstractmethod
    def interactive(self, argv: Sequence[str]) -> int:
        """Run argv attached to the invoking terminal; return its exit status."""
        pass
