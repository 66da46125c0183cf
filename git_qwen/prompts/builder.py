"""Prompt Builder - Instructions plus the raw diff, as generator input."""

from dataclasses import dataclass

DEFAULT_INSTRUCTIONS = """\
Generate a git commit message for the following changes. Follow these rules strictly:
1. First line is the subject: max {max_subject_length} characters, imperative mood, no period at end
2. Second line must be blank
3. Body paragraphs start on line 3: wrap all lines at {body_width} characters
4. The body should explain WHAT changed and WHY (not how)

Output only the commit message, nothing else:

"""


@dataclass
class PromptConfig:
    """Shape of the message the generator is asked for."""
    max_subject_length: int = 50
    body_width: int = 72
    instructions: str | None = None  # Verbatim replacement for the defaults


class PromptBuilder:
    """Prepends generation instructions to the staged diff.

    The diff itself is passed through untouched.
    """

    def build(self, diff: str, config: PromptConfig | None = None) -> str:
        config = config or PromptConfig()
        return self._build_instructions(config) + diff

    def _build_instructions(self, config: PromptConfig) -> str:
        if config.instructions is not None:
            instructions = config.instructions
            if instructions and not instructions.endswith('\n'):
                instructions += '\n\n'
            return instructions
        return DEFAULT_INSTRUCTIONS.format(
            max_subject_length=config.max_subject_length,
            body_width=config.body_width,
        )
