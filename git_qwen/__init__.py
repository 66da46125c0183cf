"""
git-qwen

Drop-in `git commit` wrapper that starts the commit message from an
AI-generated draft of the staged changes.
"""

__version__ = "1.0.0"

# Default message generator and its non-interactive (auto-confirm) flag
DEFAULT_GENERATOR = "qwen"
DEFAULT_GENERATOR_ARGS = ["-y"]
