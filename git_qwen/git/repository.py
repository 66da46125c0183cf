"""Git Repository - staged-change queries and the final commit."""

from pathlib import Path
from typing import Sequence

from git_qwen.errors import CommitFailed, NoStagedChanges, UnderlyingToolUnavailable
from git_qwen.process import CommandRunner, CommandResult

# Plain unified diff regardless of the user's color/difftool settings
DIFF_OPTIONS = ('--no-color', '--no-ext-diff')


class GitRepository:
    """Runs git in the current working directory through a CommandRunner."""

    def __init__(self, runner: CommandRunner, git: str = 'git'):
        self._runner = runner
        self._git = git

    def _run_git(self, *args: str) -> CommandResult:
        """Run a git command with captured output."""
        try:
            return self._runner.capture([self._git, *args])
        except FileNotFoundError:
            raise UnderlyingToolUnavailable(
                "git is not installed or not in PATH",
                hint="Install git or make sure it is on your PATH.",
            )
        except OSError as e:
            raise UnderlyingToolUnavailable(f"Could not run git: {e}")

    def _read_git(self, *args: str) -> str:
        """Run a git command and return stdout, failing on non-zero exit."""
        result = self._run_git(*args)
        if not result.ok:
            raise UnderlyingToolUnavailable(
                f"git {' '.join(args)} failed (exit {result.returncode})",
                hint=result.stderr.strip() or None,
            )
        return result.stdout

    def _has_diff(self, *args: str) -> bool:
        """`git diff --quiet` exits 1 when there are differences."""
        result = self._run_git('diff', '--quiet', *args)
        if result.returncode == 0:
            return False
        if result.returncode == 1:
            return True
        command = ' '.join(['git', 'diff', '--quiet', *args])
        raise UnderlyingToolUnavailable(
            f"{command} failed (exit {result.returncode})",
            hint=result.stderr.strip() or None,
        )

    def ensure_staged_changes(self, include_all: bool = False) -> None:
        """Fail fast, before any generation, when there is nothing to commit."""
        if self._has_diff('--cached'):
            return
        if include_all:
            if self._has_diff():
                return
            raise NoStagedChanges(
                "No changes to commit (no modified tracked files).",
            )
        raise NoStagedChanges(
            "No changes staged for commit.",
            hint="Use 'git add' to stage changes, or '-a' to commit all modified tracked files.",
        )

    def get_diff(self, include_all: bool = False) -> str:
        """Full staged diff; with include_all, unstaged tracked changes follow."""
        diff = self._read_git('diff', '--cached', *DIFF_OPTIONS)
        if include_all:
            diff += self._read_git('diff', *DIFF_OPTIONS)
        return diff

    def current_branch(self) -> str:
        result = self._run_git('branch', '--show-current')
        branch = result.stdout.strip() if result.ok else ''
        return branch or 'detached HEAD'

    def short_status(self) -> list[str]:
        result = self._run_git('status', '--porcelain')
        if not result.ok:
            return []
        return [line for line in result.stdout.splitlines() if line.strip()]

    def signoff_line(self) -> str | None:
        """Signed-off-by trailer for the configured identity, if complete."""
        name = self._run_git('config', 'user.name')
        email = self._run_git('config', 'user.email')
        if not (name.ok and email.ok):
            return None
        return f"Signed-off-by: {name.stdout.strip()} <{email.stdout.strip()}>"

    def commit(self, args: Sequence[str]) -> int:
        """`git commit` with the caller's arguments, attached to the terminal."""
        try:
            returncode = self._runner.interactive([self._git, 'commit', *args])
        except FileNotFoundError:
            raise UnderlyingToolUnavailable("git is not installed or not in PATH")
        except OSError as e:
            raise UnderlyingToolUnavailable(f"Could not run git: {e}")
        if returncode != 0:
            raise CommitFailed(returncode)
        return returncode

    def commit_with_file(self, message_path: Path, args: Sequence[str]) -> int:
        """Commit using the message stored in message_path, plus the caller's flags."""
        return self.commit(['-F', str(message_path), *args])
