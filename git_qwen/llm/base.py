"""Message Generator Base Class"""

from abc import ABC, abstractmethod


class MessageGenerator(ABC):
    """Turns a prompt (instructions + diff) into a draft commit message."""

    @abstractmethod
    def generate(self, prompt: str) -> str:
        """Return the raw draft text.

        Raises:
            GeneratorUnavailable: the generator cannot be started
            GeneratorFailed: it ran but produced no usable message
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        pass
