"""Overload and signature resolution for name-addressed calls.

A call is resolved against every method of the requested name visible from
the receiver type. Candidates are tried in four tiers, and the first tier
that produces a match wins:

1. a public method whose parameter types are exactly the argument types,
2. a non-public method with an exact match,
3. a public method whose parameters accept the arguments ("similar"),
4. a non-public method with a similar match.

Within a tier the receiver type is searched first, then its ancestors in
MRO order. "Similar" treats the builtin numeric types as interchangeable
with their ``numbers`` ABCs, and lets ``None`` arguments match anything.
"""

import numbers
from collections.abc import Callable

from loguru import logger

from reflectbridge.errors import NoMatchingConstructorError
from reflectbridge.errors import NoMatchingMethodError
from reflectbridge.members import MethodMember
from reflectbridge.members import constructor_members
from reflectbridge.members import declared_methods
from reflectbridge.members import mro_chain


class NULL:
    """Marker type derived for ``None`` arguments.

    It never matches exactly, and it is compatible with every parameter in
    the similar tier.
    """


_BOXED_TYPES: dict[type, type] = {
    int: numbers.Integral,
    float: numbers.Real,
    complex: numbers.Complex,
}


def argument_types(args: tuple[object, ...]) -> tuple[type, ...]:
    """Derive the argument-type vector for a call site.

    :param args: Call-site arguments.
    :returns: Runtime type per argument, ``NULL`` for ``None``.
    """
    derived: list[type] = []
    for value in args:
        if value is None:
            derived.append(NULL)
        else:
            derived.append(type(value))
    return tuple(derived)


def boxed(type_object: type) -> type:
    """Return the numeric-tower form of a builtin numeric type.

    :param type_object: Any class.
    :returns: ``numbers.Integral``/``Real``/``Complex`` for ``int``/``float``/``complex``,
        otherwise ``type_object`` itself.
    """
    return _BOXED_TYPES.get(type_object, type_object)


def _assignable(declared: type, actual: type) -> bool:
    """Report whether ``actual`` is accepted by ``declared`` after boxing."""
    if declared is object:
        return True
    try:
        return issubclass(boxed(actual), boxed(declared))
    except TypeError:
        # non-runtime-checkable protocols and other exotic classes
        return False


def is_exact(member: MethodMember, types: tuple[type, ...]) -> bool:
    """Check whether the declared parameter types are exactly ``types``.

    :param member: Candidate method.
    :param types: Derived argument types.
    :returns: ``True`` on an exact match.
    """
    if member.accepts_count(len(types)) is False:
        return False
    for index, actual in enumerate(types):
        admitted: tuple[type, ...] = member.parameter_at(index)
        if actual not in admitted:
            return False
    return True


def is_similar(member: MethodMember, types: tuple[type, ...]) -> bool:
    """Check whether every argument is acceptable to its declared parameter.

    :param member: Candidate method.
    :param types: Derived argument types.
    :returns: ``True`` on a similar match.
    """
    if member.accepts_count(len(types)) is False:
        return False
    for index, actual in enumerate(types):
        if actual is NULL:
            continue
        admitted: tuple[type, ...] = member.parameter_at(index)
        accepted: bool = any(_assignable(declared, actual) for declared in admitted)
        if accepted is False:
            return False
    return True


def _find_in_tier(
    candidates: list[list[MethodMember]],
    name: str,
    types: tuple[type, ...],
    public: bool,
    matcher: Callable[[MethodMember, tuple[type, ...]], bool],
) -> MethodMember | None:
    """Return the first candidate of one tier, searching nearest class first."""
    for members in candidates:
        for member in members:
            if member.is_public is not public:
                continue
            if member.matches(name) is False:
                continue
            if matcher(member, types) is True:
                return member
    return None


def resolve_method(owner_type: type, name: str, types: tuple[type, ...]) -> MethodMember:
    """Resolve the method a name-addressed call dispatches to.

    :param owner_type: Receiver type.
    :param name: Method name, plain or mangled.
    :param types: Derived argument types.
    :returns: Selected method descriptor.
    :raises NoMatchingMethodError: If no tier produces a match.
    """
    candidates: list[list[MethodMember]] = [declared_methods(cls) for cls in mro_chain(owner_type)]
    tiers: tuple[tuple[str, bool, Callable[[MethodMember, tuple[type, ...]], bool]], ...] = (
        ("public exact", True, is_exact),
        ("non-public exact", False, is_exact),
        ("public similar", True, is_similar),
        ("non-public similar", False, is_similar),
    )
    for label, public, matcher in tiers:
        found: MethodMember | None = _find_in_tier(candidates, name, types, public, matcher)
        if found is not None:
            logger.debug("Resolved {}.{} to {} ({})", owner_type.__qualname__, name, found, label)
            return found
    raise NoMatchingMethodError(name, types, owner_type)


def resolve_constructor(owner_type: type, types: tuple[type, ...]) -> MethodMember:
    """Resolve the constructor signature for a construction call.

    :param owner_type: Type to construct.
    :param types: Derived argument types.
    :returns: Selected constructor descriptor.
    :raises NoMatchingConstructorError: If no constructor accepts the arguments.
    """
    candidates: list[MethodMember] = constructor_members(owner_type)
    for candidate in candidates:
        if is_exact(candidate, types) is True:
            return candidate
    for candidate in candidates:
        if is_similar(candidate, types) is True:
            logger.debug("Constructor of {} matched by similar signature {}", owner_type.__qualname__, candidate)
            return candidate
    raise NoMatchingConstructorError(types, owner_type)
