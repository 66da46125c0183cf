"""Pipeline Errors

Every failure that ends an invocation before (or instead of) a successful
commit. Each carries the exit code the process terminates with.
"""


class PipelineError(Exception):
    """Base class for terminal pipeline failures."""
    exit_code = 1
    stage = "git-qwen"

    def __init__(self, message: str, hint: str | None = None):
        super().__init__(message)
        self.hint = hint


class NoStagedChanges(PipelineError):
    """Nothing is staged, so there is nothing to describe."""
    exit_code = 3
    stage = "staged changes"


class UnderlyingToolUnavailable(PipelineError):
    """git could not be run, or failed a query."""
    exit_code = 4
    stage = "git"


class GeneratorUnavailable(PipelineError):
    """The message generator executable was not found."""
    exit_code = 5
    stage = "generator"


class GeneratorFailed(PipelineError):
    """The generator exited non-zero or produced nothing usable."""
    exit_code = 6
    stage = "generator"

    def __init__(self, message: str, details: str = "", hint: str | None = None):
        super().__init__(message, hint)
        self.details = details


class EditorUnavailable(PipelineError):
    exit_code = 7
    stage = "editor"


class EditorAborted(PipelineError):
    exit_code = 8
    stage = "editor"


class EmptyMessage(PipelineError):
    exit_code = 9
    stage = "editor"


class TempFileIOFailure(PipelineError):
    exit_code = 10
    stage = "message file"


class CommitFailed(PipelineError):
    """git commit ran and returned non-zero. Its own output explains why."""
    stage = "commit"

    def __init__(self, returncode: int):
        super().__init__(f"git commit exited with status {returncode}")
        self.exit_code = returncode


class Interrupted(PipelineError):
    """A termination signal arrived while a child process was running."""
    stage = "interrupted"

    def __init__(self, signum: int):
        super().__init__(f"received signal {signum}, stopping")
        self.signum = signum
        self.exit_code = 128 + signum


__all__ = [
    "PipelineError",
    "NoStagedChanges",
    "UnderlyingToolUnavailable",
    "GeneratorUnavailable",
    "GeneratorFailed",
    "EditorUnavailable",
    "EditorAborted",
    "EmptyMessage",
    "TempFileIOFailure",
    "CommitFailed",
    "Interrupted",
]
