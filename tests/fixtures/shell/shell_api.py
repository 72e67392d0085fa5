"""Command shell contracts, loaded separately by each side of a boundary."""

from abc import ABC
from abc import abstractmethod


class CommandSession(ABC):
    """One interactive command session."""

    @property
    @abstractmethod
    def owner(self) -> str: ...

    @abstractmethod
    def execute(self, command: str) -> object: ...

    @abstractmethod
    def close(self) -> None: ...


class CommandProcessor(ABC):
    """Factory of command sessions."""

    @abstractmethod
    def create_session(self, owner: str) -> CommandSession: ...
