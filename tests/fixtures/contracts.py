"""Local contracts used by projection tests."""

from abc import ABC
from abc import abstractmethod
from typing import Protocol
from typing import runtime_checkable


@runtime_checkable
class Person(Protocol):
    """Bean-style person contract with one default method."""

    def get_name(self) -> str: ...

    def set_name(self, name: str) -> None: ...

    def is_active(self) -> bool: ...

    def greeting(self) -> str:
        return "Hello, " + self.get_name()


class Labeled(ABC):
    """Contract without any default body."""

    @abstractmethod
    def label(self) -> str:
        """Return a display label."""


class Account(ABC):
    """Contract mixing abstract members, properties and default bodies."""

    @property
    @abstractmethod
    def balance(self) -> int: ...

    @abstractmethod
    def deposit(self, amount: int) -> None: ...

    @property
    def title(self) -> str:
        return "Account"

    def describe(self) -> str:
        return f"balance={self.balance}"

    @classmethod
    def currency(cls) -> str:
        return "EUR"


class Tiered(Account):
    """Inherits ``currency`` from ``Account``."""


class Regional(Account):
    """Overrides ``currency``."""

    @classmethod
    def currency(cls) -> str:
        return "USD"


class Employee:
    """Implements the person accessors itself."""

    def __init__(self, name: str) -> None:
        self._name = name

    def get_name(self) -> str:
        return self._name

    def set_name(self, name: str) -> None:
        self._name = name

    def is_active(self) -> bool:
        return False


class Wallet:
    """Backs the account contract with a plain attribute."""

    def __init__(self) -> None:
        self.balance = 0

    def deposit(self, amount: int) -> None:
        self.balance += amount
