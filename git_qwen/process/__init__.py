"""Child Process Package"""

from git_qwen.process.base import CommandRunner, CommandResult
from git_qwen.process.real import SubprocessRunner
from git_qwen.process.fake import FakeCommandRunner, RecordedCall

__all__ = [
    "CommandRunner",
    "CommandResult",
    "SubprocessRunner",
    "FakeCommandRunner",
    "RecordedCall",
]
