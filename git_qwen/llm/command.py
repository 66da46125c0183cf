"""External CLI Message Generator (qwen by default)"""

import os
from typing import Sequence

from git_qwen.errors import GeneratorFailed, GeneratorUnavailable
from git_qwen.llm.base import MessageGenerator
from git_qwen.process import CommandRunner


class CommandGenerator(MessageGenerator):
    """Pipes the prompt into a generator CLI and reads the message from stdout.

    The command must run non-interactively (qwen needs `-y`). Nothing is
    retried: each call costs money and is nondeterministic.
    """

    def __init__(self, argv: Sequence[str], runner: CommandRunner):
        if not argv:
            raise GeneratorUnavailable("No generator command configured")
        self.argv = list(argv)
        self._runner = runner

    @property
    def name(self) -> str:
        return os.path.basename(self.argv[0])

    def generate(self, prompt: str) -> str:
        try:
            result = self._runner.capture(self.argv, input=prompt)
        except FileNotFoundError:
            raise GeneratorUnavailable(
                f"'{self.argv[0]}' was not found",
                hint=f"Make sure '{self.argv[0]}' is installed and available in PATH.",
            )
        except PermissionError:
            raise GeneratorUnavailable(f"'{self.argv[0]}' is not executable")
        except OSError as e:
            raise GeneratorUnavailable(f"Could not run '{self.argv[0]}': {e}")

        if not result.ok:
            raise GeneratorFailed(
                f"{self.name} exited with status {result.returncode}",
                details=result.stderr.strip(),
            )
        if not result.stdout.strip():
            raise GeneratorFailed(
                f"{self.name} returned an empty message",
                details=result.stderr.strip(),
            )
        return result.stdout
