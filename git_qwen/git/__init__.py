"""Git Operations Package"""

from git_qwen.git.repository import GitRepository, DIFF_OPTIONS

__all__ = [
    "GitRepository",
    "DIFF_OPTIONS",
]
