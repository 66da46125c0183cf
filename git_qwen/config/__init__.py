"""Configuration Management Package

Looks for config in multiple places (in order):

1. .gitqwenrc in current directory (project-specific)
2. .gitqwenrc in home directory (global default)
3. Built-in defaults

Config format (JSON):
{
    "generator": "qwen",
    "generator_args": ["-y"],
    "max_subject_length": 50
}
"""

import json
import shlex
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from git_qwen import DEFAULT_GENERATOR, DEFAULT_GENERATOR_ARGS

# Overrides the generator executable (may include arguments)
GENERATOR_ENV_VAR = "GIT_QWEN_GENERATOR"


def _is_count(value) -> bool:
    # bool is an int subclass
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass
class Config:
    """User configuration with sensible defaults."""
    generator: str = DEFAULT_GENERATOR
    generator_args: list[str] = field(default_factory=lambda: list(DEFAULT_GENERATOR_ARGS))
    prompt: Optional[str] = None  # Replaces the built-in instructions
    max_subject_length: int = 50
    body_width: int = 72
    include_template: bool = True  # Comment block below the draft

    def validate(self) -> list[str]:
        """Validate config values and return list of warnings.

        Invalid values are replaced with defaults after warning.
        """
        warnings = []
        defaults = Config()

        if not isinstance(self.generator, str) or not self.generator.strip():
            warnings.append(f"Invalid generator '{self.generator}', using '{defaults.generator}'")
            self.generator = defaults.generator

        if not isinstance(self.generator_args, list) or not all(isinstance(a, str) for a in self.generator_args):
            warnings.append(f"Invalid generator_args '{self.generator_args}', using {defaults.generator_args}")
            self.generator_args = defaults.generator_args

        if self.prompt is not None and not isinstance(self.prompt, str):
            warnings.append("Invalid prompt, using the built-in prompt")
            self.prompt = None

        if not _is_count(self.max_subject_length) or self.max_subject_length <= 0:
            warnings.append(f"Invalid max_subject_length '{self.max_subject_length}', using {defaults.max_subject_length}")
            self.max_subject_length = defaults.max_subject_length

        if not _is_count(self.body_width) or self.body_width <= 0:
            warnings.append(f"Invalid body_width '{self.body_width}', using {defaults.body_width}")
            self.body_width = defaults.body_width

        if not isinstance(self.include_template, bool):
            warnings.append(f"Invalid include_template '{self.include_template}', using {str(defaults.include_template).lower()}")
            self.include_template = defaults.include_template

        return warnings

    @classmethod
    def from_dict(cls, data: dict) -> 'Config':
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        config = cls(**filtered)
        for warning in config.validate():
            print(f"Config warning: {warning}", file=sys.stderr)
        return config


class ConfigManager:
    """Manages loading configuration."""

    CONFIG_FILENAME = ".gitqwenrc"

    def __init__(self):
        self._config: Optional[Config] = None

    def load(self) -> Config:
        if self._config is not None:
            return self._config

        local_path = Path.cwd() / self.CONFIG_FILENAME
        if local_path.exists():
            self._config = self._load_from_file(local_path)
            return self._config

        home_path = Path.home() / self.CONFIG_FILENAME
        if home_path.exists():
            self._config = self._load_from_file(home_path)
            return self._config

        self._config = Config()
        return self._config

    def _load_from_file(self, path: Path) -> Config:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            print(f"Warning: Could not load {path}: {e}", file=sys.stderr)
            return Config()
        if not isinstance(data, dict):
            print(f"Warning: Could not load {path}: expected a JSON object", file=sys.stderr)
            return Config()
        return Config.from_dict(data)


def resolve_generator_command(config: Config, env: Mapping[str, str]) -> list[str]:
    """Generator argv: $GIT_QWEN_GENERATOR if set, else the configured command.

    Args:
        config: Loaded configuration
        env: Environment snapshot (os.environ in production)
    """
    override = env.get(GENERATOR_ENV_VAR, '').strip()
    if override:
        return shlex.split(override, posix=sys.platform != 'win32')
    return [config.generator, *config.generator_args]


_manager = ConfigManager()


def load_config() -> Config:
    return _manager.load()


__all__ = [
    "Config",
    "ConfigManager",
    "GENERATOR_ENV_VAR",
    "load_config",
    "resolve_generator_command",
]
