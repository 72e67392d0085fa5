"""Contract class synthesis routines."""

import abc
import inspect
import threading
import types
import typing
import weakref
from typing import Any

from loguru import logger

from reflectbridge.members import MethodMember
from reflectbridge.members import describe_routine
from reflectbridge.members import is_method_like
from reflectbridge.members import mro_chain
from reflectbridge.members import type_hints
from reflectbridge.members import UNDECLARED

HANDLER_ATTR: str = "_reflectbridge_handler"
_FRAMEWORK_BASES: frozenset[type] = frozenset({object, typing.Protocol, typing.Generic, abc.ABC})
_CLASS_CACHE: "weakref.WeakValueDictionary[tuple[type, ...], type]" = weakref.WeakValueDictionary()
_CLASS_CACHE_LOCK: threading.RLock = threading.RLock()
_NEVER_RELAYED: frozenset[str] = frozenset(
    {
        "__init__",
        "__new__",
        "__init_subclass__",
        "__class_getitem__",
        "__subclasshook__",
        "__getattribute__",
        "__setattr__",
        "__delattr__",
    }
)


class ContractMember:
    """One contract member a synthesized class relays to its handler."""

    attr_name: str
    declaring: type
    raw: object
    is_property: bool
    signature: MethodMember | None
    return_annotation: object
    _call_signature: inspect.Signature | None
    _has_receiver: bool

    def __init__(self, attr_name: str, declaring: type, raw: object) -> None:
        """Initialize a contract member.

        :param attr_name: Storage name in the declaring contract.
        :param declaring: Contract class that declares the member.
        :param raw: Value stored in the contract namespace.
        """
        self.attr_name = attr_name
        self.declaring = declaring
        self.raw = raw
        self.is_property = isinstance(raw, property)
        self.signature = None
        self.return_annotation = UNDECLARED
        self._call_signature = None
        self._has_receiver = isinstance(raw, staticmethod) is False

        if self.is_property is True:
            getter: object = raw.fget  # type: ignore[attr-defined]
            if getter is not None:
                self.return_annotation = type_hints(getter).get("return", UNDECLARED)
            return

        self.signature = describe_routine(declaring, attr_name, raw)
        if self.signature is not None:
            self.return_annotation = self.signature.return_annotation
        function: object = self.function
        try:
            self._call_signature = inspect.signature(function)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            self._call_signature = None

    @property
    def function(self) -> object:
        """Return the plain function behind the member, when there is one.

        :returns: Underlying function, getter for properties, or the raw value.
        """
        if self.is_property is True:
            return self.raw.fget  # type: ignore[attr-defined]
        if isinstance(self.raw, (staticmethod, classmethod)) is True:
            return self.raw.__func__
        return self.raw

    @property
    def returns_nothing(self) -> bool:
        """Report whether the contract declares no return value.

        :returns: ``True`` when annotated ``-> None``.
        """
        return self.return_annotation is None or self.return_annotation is type(None)

    def positional_arguments(self, args: tuple[object, ...], kwargs: dict[str, object]) -> tuple[object, ...]:
        """Fold keyword arguments and contract defaults into positional arguments.

        Keyword-only parameters are not part of the relayed call.

        :param args: Positional arguments as passed to the relay.
        :param kwargs: Keyword arguments as passed to the relay.
        :returns: Positional arguments for the backing call.
        :raises TypeError: If the arguments do not fit the contract signature.
        """
        if self._call_signature is None:
            if len(kwargs) > 0:
                raise TypeError(f"{self.attr_name}() cannot accept keyword arguments")
            return args
        bound: inspect.BoundArguments
        if self._has_receiver is True:
            bound = self._call_signature.bind(None, *args, **kwargs)
        else:
            bound = self._call_signature.bind(*args, **kwargs)
        bound.apply_defaults()
        positional: tuple[object, ...] = bound.args
        if self._has_receiver is True:
            return positional[1:]
        return positional

    def __repr__(self) -> str:
        return f"<contract member {self.declaring.__qualname__}.{self.attr_name}>"


def _is_intercepted(attr_name: str, raw: object) -> bool:
    """Report whether a contract namespace entry is relayed by synthesized classes."""
    if attr_name in _NEVER_RELAYED:
        return False
    is_abstract: bool = getattr(raw, "__isabstractmethod__", False) is True
    is_dunder: bool = attr_name.startswith("__") is True and attr_name.endswith("__") is True
    if isinstance(raw, property) is False and is_method_like(raw) is False:
        return False
    return is_abstract is True or is_dunder is False


def contract_members(contracts: tuple[type, ...]) -> dict[str, ContractMember]:
    """Collect the members a class implementing ``contracts`` must relay.

    The nearest declaration of a name wins; earlier contracts win over later ones.

    :param contracts: Contract classes.
    :returns: Mapping of storage name to contract member.
    """
    found: dict[str, ContractMember] = {}
    for contract in contracts:
        for cls in mro_chain(contract):
            if cls in _FRAMEWORK_BASES:
                continue
            for attr_name, raw in cls.__dict__.items():
                if attr_name in found or _is_intercepted(attr_name, raw) is False:
                    continue
                found[attr_name] = ContractMember(attr_name, cls, raw)
    return found


def handler_of(proxy: object) -> Any:
    """Return the handler bound to a synthesized instance.

    :param proxy: Instance of a synthesized contract class.
    :returns: Bound handler.
    :raises TypeError: If ``proxy`` was never bound to a handler.
    """
    try:
        return object.__getattribute__(proxy, HANDLER_ATTR)
    except AttributeError as exc:
        raise TypeError(f"{type(proxy).__name__} instance is not bound to a handler") from exc


def _method_relay(member: ContractMember) -> types.FunctionType:
    """Build the function relaying calls of ``member`` to the bound handler."""
    def relay(self: object, *args: object, **kwargs: object) -> object:
        positional: tuple[object, ...] = member.positional_arguments(args, kwargs)
        return handler_of(self).invoke(self, member, positional)

    relay.__name__ = member.attr_name
    relay.__qualname__ = f"{member.declaring.__qualname__}.{member.attr_name}"
    relay.__doc__ = getattr(member.function, "__doc__", None)
    return relay


def _property_relay(member: ContractMember) -> property:
    """Build the property relaying reads and writes of ``member`` to the bound handler."""
    def read(self: object) -> object:
        return handler_of(self).read(self, member)

    def write(self: object, value: object) -> None:
        handler_of(self).write(self, member, value)

    return property(read, write, doc=getattr(member.raw, "__doc__", None))


def _refuse_init(self: object, *args: object, **kwargs: object) -> None:
    """Prevent direct construction of synthesized contract classes.

    :raises TypeError: Always.
    """
    raise TypeError(f"{type(self).__name__} instances are created by projection or bridging only")


def _proxy_repr(self: object) -> str:
    return f"<{type(self).__name__} over {handler_of(self).target!r}>"


def build_contract_class(contracts: tuple[type, ...]) -> type:
    """Build the class implementing every contract in ``contracts``.

    Classes are reused process-wide for as long as one of them is alive, so
    contracts loaded behind a discarded boundary can be collected.

    :param contracts: Contract classes, in priority order.
    :returns: Synthesized subclass of every contract.
    :raises TypeError: If a contract is not a class, or the contracts cannot be combined.
    """
    for contract in contracts:
        if isinstance(contract, type) is False:
            raise TypeError(f"Contract must be a class, not {contract!r}")
    with _CLASS_CACHE_LOCK:
        cached: type | None = _CLASS_CACHE.get(contracts)
        if cached is not None:
            return cached
        created: type = _synthesize(contracts)
        _CLASS_CACHE[contracts] = created
        return created


def _synthesize(contracts: tuple[type, ...]) -> type:
    """Create a new class relaying every member of ``contracts``."""
    members: dict[str, ContractMember] = contract_members(contracts)

    def exec_body(namespace: dict[str, object]) -> None:
        for attr_name, member in members.items():
            if member.is_property is True:
                namespace[attr_name] = _property_relay(member)
            else:
                namespace[attr_name] = _method_relay(member)
        namespace["__init__"] = _refuse_init
        namespace.setdefault("__repr__", _proxy_repr)
        namespace["__module__"] = __name__
        namespace["__doc__"] = "Contract implementation for " + ", ".join(item.__qualname__ for item in contracts)

    class_name: str = "".join(item.__name__ for item in contracts) + "Projection"
    created: type = types.new_class(class_name, contracts, exec_body=exec_body)
    logger.debug("Synthesized {} relaying {} members", class_name, len(members))
    return created


def instantiate(contracts: tuple[type, ...], handler: object) -> object:
    """Create an instance of the synthesized class bound to ``handler``.

    :param contracts: Contract classes.
    :param handler: Object serving ``invoke``, ``read`` and ``write`` relays.
    :returns: Bound instance.
    """
    contract_class: type = build_contract_class(contracts)
    instance: object = object.__new__(contract_class)
    object.__setattr__(instance, HANDLER_ATTR, handler)
    return instance
