"""Prompt Construction Package"""

from git_qwen.prompts.builder import PromptBuilder, PromptConfig, DEFAULT_INSTRUCTIONS

__all__ = [
    "PromptBuilder",
    "PromptConfig",
    "DEFAULT_INSTRUCTIONS",
]
