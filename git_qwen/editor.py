"""Editor Launcher

Resolves the user's editor the way git users expect and runs it on the
message file, attached to the terminal.
"""

import shlex
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from git_qwen.errors import EditorAborted, EditorUnavailable
from git_qwen.process import CommandRunner

# First non-empty one wins
EDITOR_ENV_VARS = ('GIT_EDITOR', 'VISUAL', 'EDITOR')

# git's no-op editor: keep the file as it is
NOOP_EDITOR = ':'


@dataclass(frozen=True)
class EditorCommand:
    """Executable plus fixed arguments; the file path is appended at launch."""
    argv: tuple[str, ...]
    source: str

    @property
    def is_noop(self) -> bool:
        return self.argv == (NOOP_EDITOR,)


def default_editor(platform: str = sys.platform) -> str:
    return 'notepad' if platform == 'win32' else 'vi'


def resolve_editor(env: Mapping[str, str], platform: str = sys.platform) -> EditorCommand:
    """Pick the editor from an environment snapshot.

    Precedence: $GIT_EDITOR, $VISUAL, $EDITOR, then the platform default.
    Values may carry arguments (`code --wait`).
    """
    for name in EDITOR_ENV_VARS:
        value = env.get(name, '').strip()
        if value:
            return EditorCommand(argv=_split(value, name, platform), source=f"${name}")
    return EditorCommand(argv=(default_editor(platform),), source="default")


def _split(value: str, source: str, platform: str) -> tuple[str, ...]:
    try:
        parts = shlex.split(value, posix=platform != 'win32')
    except ValueError as e:
        raise EditorUnavailable(f"Cannot parse ${source}={value!r}: {e}")
    if not parts:
        raise EditorUnavailable(f"${source} is empty")
    return tuple(parts)


class EditorLauncher:
    """Runs the resolved editor on a file and waits for it to exit."""

    def __init__(self, command: EditorCommand, runner: CommandRunner):
        self.command = command
        self._runner = runner

    def edit(self, path: Path) -> None:
        if self.command.is_noop:
            return

        argv = [*self.command.argv, str(path)]
        try:
            returncode = self._runner.interactive(argv)
        except FileNotFoundError:
            raise EditorUnavailable(
                f"Editor '{self.command.argv[0]}' not found (from {self.command.source})",
                hint="Set GIT_EDITOR, VISUAL or EDITOR to an installed editor.",
            )
        except PermissionError:
            raise EditorUnavailable(f"Editor '{self.command.argv[0]}' is not executable")
        except OSError as e:
            raise EditorUnavailable(f"Could not start editor '{self.command.argv[0]}': {e}")

        if returncode != 0:
            raise EditorAborted(
                f"Editor exited with status {returncode}; aborting commit",
            )
