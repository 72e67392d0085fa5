"""Classes exercised by name-addressed reflection tests."""

import functools
from dataclasses import dataclass
from typing import ClassVar
from typing import Final


class Base:
    """Declares the integer overload of ``m``."""

    def m(self, x: int) -> str:
        return "base-int"

    def _scale(self, x: int) -> str:
        return "base-scale-int"


class Derived(Base):
    """Declares the float overload of ``m``."""

    def m(self, x: float) -> str:
        return "derived-float"

    def _scale(self, x: float) -> str:
        return "derived-scale-float"


class Formatter:
    """Overloads ``render`` through ``singledispatchmethod``."""

    @functools.singledispatchmethod
    def render(self, value: object) -> str:
        return "object"

    @render.register
    def _render_text(self, value: str) -> str:
        return "str"

    @render.register
    def _render_number(self, value: int) -> str:
        return "int"


class Owner:
    """Referenced as a declared field type."""

    title: str

    def __init__(self, title: str) -> None:
        self.title = title


class Counter:
    """Carries static, final, instance and private fields."""

    instances: ClassVar[int] = 0
    LIMIT: Final = 10
    count: int
    label: str | None
    owner: Owner
    _hidden: str

    def __init__(self, count: int = 0, label: str | None = None) -> None:
        self.count = count
        self.label = label
        self.owner = None  # type: ignore[assignment]
        self._hidden = "hidden"
        self.__token = "token"

    @property
    def doubled(self) -> int:
        return self.count * 2

    def increment(self, step: int) -> int:
        self.count += step
        return self.count

    def _reset(self) -> None:
        self.count = 0

    def __peek(self) -> str:
        return self.__token


class Shape:
    """Declares ``name`` and ``sides``."""

    name: str
    sides: int

    def __init__(self) -> None:
        self.name = "shape"
        self.sides = 0


class Square(Shape):
    """Redeclares ``name``."""

    name: str

    def __init__(self) -> None:
        super().__init__()
        self.name = "square"
        self.sides = 4


@dataclass(frozen=True)
class Point:
    """Frozen value whose fields refuse plain writes."""

    x: int
    y: int


class Greeting:
    """Constructed from a single string."""

    text: str

    def __init__(self, text: str) -> None:
        self.text = text


class Empty:
    """Declares no constructor."""


class MathBox:
    """Static, class and instance routines."""

    @staticmethod
    def add(a: int, b: int) -> int:
        return a + b

    @classmethod
    def kind(cls) -> str:
        return cls.__name__

    def half(self, value: float) -> float:
        return value / 2

    def total(self, *values: int) -> int:
        return sum(values)

    def explode(self) -> None:
        raise ValueError("boom")


class Recorder:
    """Collects items through a method returning nothing."""

    def __init__(self) -> None:
        self.items = []

    def record(self, item: str) -> None:
        self.items.append(item)

    def describe(self, item: str) -> str:
        return f"item={item}"


class Outer:
    """Holds a nested class."""

    class Inner:
        """Nested class loaded by qualified name."""

        level: ClassVar[int] = 2


class Settings:
    """Class-body defaults that instances overwrite."""

    debug = False
    retries = 3

    def __init__(self) -> None:
        self.debug = True


class Handler:
    """Declares annotated ``process`` and ``origin``."""

    def process(self, item: str) -> str:
        return "base"

    @classmethod
    def origin(cls, tag: str) -> str:
        return "base-origin"


class LoudHandler(Handler):
    """Overrides ``process`` and ``origin`` without annotations."""

    def process(self, item):
        return "override"

    @classmethod
    def origin(cls, tag):
        return f"{cls.__name__}-origin"
