"""Bridging of values whose classes come from another loading boundary.

Two boundaries may each hold their own copy of a class. Instances from the
other side are never instances of the local copy, so a local contract is
implemented by relaying every call, by name and by parameter type names, to
the foreign value.
"""

from loguru import logger

from reflectbridge.builder import ContractMember
from reflectbridge.builder import instantiate
from reflectbridge.errors import InvocationError
from reflectbridge.errors import NoMatchingMethodError
from reflectbridge.errors import ReflectionError
from reflectbridge.members import UNDECLARED
from reflectbridge.members import MethodMember
from reflectbridge.members import declared_class
from reflectbridge.members import declared_methods
from reflectbridge.members import is_contract
from reflectbridge.members import mro_chain
from reflectbridge.members import type_hints

_ANY_NAMES: frozenset[str] = frozenset({"builtins.object"})


def _type_names(admitted: tuple[type, ...]) -> frozenset[str]:
    """Return the ``module.qualname`` of every admitted class."""
    return frozenset(f"{item.__module__}.{item.__qualname__}" for item in admitted)


def _same_parameters(local: MethodMember, foreign: MethodMember) -> bool:
    """Report whether two routines take the same parameter types, compared by name."""
    if len(local.parameter_types) != len(foreign.parameter_types):
        return False
    if (local.variadic_types is None) is not (foreign.variadic_types is None):
        return False
    for local_types, foreign_types in zip(local.parameter_types, foreign.parameter_types):
        local_names: frozenset[str] = _type_names(local_types)
        foreign_names: frozenset[str] = _type_names(foreign_types)
        if local_names == _ANY_NAMES or foreign_names == _ANY_NAMES:
            continue
        if local_names != foreign_names:
            return False
    return True


def find_foreign_routine(foreign_type: type, member: ContractMember) -> MethodMember:
    """Locate the public routine of ``foreign_type`` matching a contract member.

    :param foreign_type: Class of the foreign value.
    :param member: Contract member being called.
    :returns: Matching foreign routine.
    :raises NoMatchingMethodError: If no public routine has that name and parameter types.
    """
    local: MethodMember | None = member.signature
    if local is not None:
        for cls in mro_chain(foreign_type):
            for candidate in declared_methods(cls):
                if candidate.is_public is False or candidate.matches(member.attr_name) is False:
                    continue
                if _same_parameters(local, candidate) is True:
                    return candidate
    wanted: tuple[type, ...] = ()
    if local is not None:
        wanted = tuple(admitted[0] for admitted in local.parameter_types)
    raise NoMatchingMethodError(member.attr_name, wanted, foreign_type)


def _foreign_property_annotation(foreign_type: type, attr_name: str) -> object:
    """Return the getter return annotation of a foreign property, if declared."""
    for cls in mro_chain(foreign_type):
        raw: object = cls.__dict__.get(attr_name)
        if isinstance(raw, property) is True and raw.fget is not None:
            return type_hints(raw.fget).get("return", UNDECLARED)
    return UNDECLARED


class BridgeHandler:
    """Relay contract calls to a value from another loading boundary."""

    target: object

    def __init__(self, target: object) -> None:
        """Initialize a bridge handler.

        :param target: Foreign value.
        """
        self.target = target

    def _rebridge(self, local_annotation: object, foreign_annotation: object, result: object) -> object:
        if result is None:
            return result
        local_class: type | None = declared_class(local_annotation)
        if local_class is None or is_contract(local_class) is False:
            return result
        if declared_class(foreign_annotation) is local_class:
            return result
        try:
            return build_bridge(local_class, result)
        except Exception as exc:
            logger.debug("Returning unbridged {} result: {}", type(result).__qualname__, exc)
            return result

    def invoke(self, proxy: object, member: ContractMember, args: tuple[object, ...]) -> object:
        """Relay one contract call to the foreign value.

        :param proxy: Bridge instance.
        :param member: Called contract member.
        :param args: Positional call arguments.
        :returns: Call result, bridged when the contract declares a contract return type.
        :raises NoMatchingMethodError: If the foreign class lacks the routine.
        :raises InvocationError: If the foreign routine raised.
        """
        foreign_type: type = type(self.target)
        routine: MethodMember = find_foreign_routine(foreign_type, member)
        try:
            result: object = routine.bind(foreign_type, self.target)(*args)
        except ReflectionError:
            raise
        except Exception as exc:
            raise InvocationError(
                f"Foreign {foreign_type.__qualname__}.{routine.name} raised {type(exc).__name__}: {exc}"
            ) from exc
        return self._rebridge(member.return_annotation, routine.return_annotation, result)

    def read(self, proxy: object, member: ContractMember) -> object:
        """Relay one contract property read.

        :param proxy: Bridge instance.
        :param member: Contract property.
        :returns: Foreign attribute value, bridged like call results.
        :raises InvocationError: If the foreign read failed.
        """
        try:
            value: object = getattr(self.target, member.attr_name)
        except Exception as exc:
            raise InvocationError(f"Reading foreign attribute {member.attr_name!r} failed") from exc
        foreign_annotation: object = _foreign_property_annotation(type(self.target), member.attr_name)
        return self._rebridge(member.return_annotation, foreign_annotation, value)

    def write(self, proxy: object, member: ContractMember, value: object) -> None:
        """Relay one contract property write.

        :param proxy: Bridge instance.
        :param member: Contract property.
        :param value: New value.
        :raises InvocationError: If the foreign write failed.
        """
        try:
            setattr(self.target, member.attr_name, value)
        except Exception as exc:
            raise InvocationError(f"Writing foreign attribute {member.attr_name!r} failed") from exc


def build_bridge(contract: type, foreign: object) -> object:
    """Expose a foreign value as an implementation of a local contract.

    A value whose class already is ``contract`` is returned unchanged.

    :param contract: Local contract class.
    :param foreign: Value created behind another loading boundary.
    :returns: ``foreign`` itself, or a bridge instance implementing ``contract``.
    :raises TypeError: If ``contract`` is not a contract class or ``foreign`` is ``None``.
    """
    if type(foreign) is contract:
        return foreign
    if foreign is None:
        raise TypeError("Cannot bridge None")
    if is_contract(contract) is False:
        raise TypeError(f"{contract!r} is not a Protocol or abstract contract class")
    logger.debug("Bridging {} to {}", type(foreign).__qualname__, contract.__qualname__)
    return instantiate((contract,), BridgeHandler(foreign))
