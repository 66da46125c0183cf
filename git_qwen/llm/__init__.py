"""Message Generator Package"""

from typing import Mapping

from git_qwen.config import Config, resolve_generator_command
from git_qwen.errors import GeneratorUnavailable
from git_qwen.llm.base import MessageGenerator
from git_qwen.llm.command import CommandGenerator
from git_qwen.process import CommandRunner


def get_generator(config: Config, env: Mapping[str, str], runner: CommandRunner) -> MessageGenerator:
    """Generator for this run: $GIT_QWEN_GENERATOR, else the configured command."""
    try:
        argv = resolve_generator_command(config, env)
    except ValueError as e:
        raise GeneratorUnavailable(f"Cannot parse generator command: {e}")
    return CommandGenerator(argv, runner)


__all__ = [
    "MessageGenerator",
    "CommandGenerator",
    "get_generator",
]
