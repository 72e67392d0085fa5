"""Tests for argument typing and overload resolution tiers."""

import numbers

import pytest

from reflectbridge import NULL
from reflectbridge import NoMatchingMethodError
from reflectbridge.members import MethodMember
from reflectbridge.members import declared_methods
from reflectbridge.members import normalize_annotation
from reflectbridge.signatures import argument_types
from reflectbridge.signatures import boxed
from reflectbridge.signatures import is_exact
from reflectbridge.signatures import is_similar
from reflectbridge.signatures import resolve_constructor
from reflectbridge.signatures import resolve_method
from tests.fixtures.reflect_targets import Base
from tests.fixtures.reflect_targets import Derived
from tests.fixtures.reflect_targets import Greeting
from tests.fixtures.reflect_targets import MathBox


def _method(owner: type, name: str) -> MethodMember:
    """Return the first declared method of ``owner`` named ``name``.

    :param owner: Declaring class.
    :param name: Method name.
    :returns: Method descriptor.
    """
    for member in declared_methods(owner):
        if member.name == name:
            return member
    raise AssertionError(f"{owner.__qualname__} declares no {name}")


def test_argument_types_mark_none_as_null() -> None:
    """Verify ``None`` arguments derive the null marker type."""
    derived: tuple[type, ...] = argument_types((1, "a", None))
    assert derived == (int, str, NULL)


def test_boxed_maps_builtin_numbers_only() -> None:
    """Verify only builtin numeric types have a numeric-tower form."""
    assert boxed(int) is numbers.Integral
    assert boxed(float) is numbers.Real
    assert boxed(complex) is numbers.Complex
    assert boxed(str) is str


def test_normalize_annotation_handles_unions_and_generics() -> None:
    """Verify annotations reduce to the runtime classes they admit."""
    assert normalize_annotation(int | None) == (int, type(None))
    assert normalize_annotation(list[int]) == (list,)
    assert normalize_annotation("Forward") == (object,)


def test_exact_and_similar_matching() -> None:
    """Verify exact matching is identity and similar matching is assignability."""
    half: MethodMember = _method(MathBox, "half")
    assert is_exact(half, (float,)) is True
    assert is_exact(half, (int,)) is False
    assert is_similar(half, (int,)) is True
    assert is_similar(half, (str,)) is False
    assert is_similar(half, (NULL,)) is True
    assert is_similar(half, ()) is False


def test_resolve_method_prefers_exact_ancestor() -> None:
    """Verify the exact tier is searched across the whole chain first."""
    selected: MethodMember = resolve_method(Derived, "m", (int,))
    assert selected.owner is Base

    similar: MethodMember = resolve_method(Derived, "m", (bool,))
    assert similar.owner is Derived


def test_resolve_method_reports_arity_mismatch() -> None:
    """Verify extra arguments make every candidate fail."""
    with pytest.raises(NoMatchingMethodError):
        resolve_method(Derived, "m", (int, int))


def test_resolve_constructor_uses_init_signature() -> None:
    """Verify constructor resolution reads the effective ``__init__``."""
    selected: MethodMember = resolve_constructor(Greeting, (str,))
    assert selected.name == "__init__"
    assert selected.owner is Greeting
