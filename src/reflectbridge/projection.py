"""Contract projections over wrapped values.

A projection is an instance of a synthesized subclass of one or more
contract classes. Every contract call is answered, in order, by:

1. the backing value's own method of the same name, resolved by name and
   argument types;
2. for mapping values, the ``get_x``/``is_x``/``set_x`` key convention;
3. the contract's own default body, bound to the projection;
4. re-raising the backing resolution failure.
"""

import inspect
import types
import weakref
from collections.abc import Callable
from collections.abc import Mapping
from collections.abc import MutableMapping
from typing import TYPE_CHECKING
from typing import Literal

from loguru import logger

from reflectbridge.builder import ContractMember
from reflectbridge.builder import instantiate
from reflectbridge.errors import InvocationError
from reflectbridge.errors import ReflectionError
from reflectbridge.members import is_contract

if TYPE_CHECKING:
    from reflectbridge.reflect import Reflect

DefaultStrategy = Literal["direct", "scoped", "narrowed"]
_STRATEGIES: "weakref.WeakKeyDictionary[type, dict[tuple[str, type], DefaultStrategy]]" = weakref.WeakKeyDictionary()


def _ellipsis_stub(self: object) -> None: ...


def _pass_stub(self: object) -> None:
    pass


def _documented_stub(self: object) -> None:
    """Stub."""


def _documented_ellipsis_stub(self: object) -> None:
    """Stub."""
    ...


_STUB_CODES: frozenset[bytes] = frozenset(
    stub.__code__.co_code for stub in (_ellipsis_stub, _pass_stub, _documented_stub, _documented_ellipsis_stub)
)


def is_stub(function: object) -> bool:
    """Report whether a function body does nothing but return ``None``.

    :param function: Function to inspect.
    :returns: ``True`` for ``...``, ``pass`` and docstring-only bodies.
    """
    code: object = getattr(function, "__code__", None)
    if isinstance(code, types.CodeType) is False:
        return False
    if code.co_code not in _STUB_CODES:
        return False
    # same bytecode also returns other constants, e.g. ``return 1``
    docstring: object = getattr(function, "__doc__", None)
    return all(constant is None or constant == docstring for constant in code.co_consts)


def has_default_body(member: ContractMember) -> bool:
    """Report whether a contract member carries a usable implementation.

    :param member: Contract member.
    :returns: ``True`` for non-abstract members whose body is not a stub.
    """
    if getattr(member.raw, "__isabstractmethod__", False) is True:
        return False
    function: object = member.function
    if function is None:
        return False
    if inspect.isfunction(function) is True:
        return is_stub(function) is False
    return hasattr(function, "__get__") is True


def property_name(suffix: str) -> str:
    """Turn an accessor suffix into its property key.

    ``Name`` and ``_name`` both become ``name``.

    :param suffix: Accessor name without its ``get``/``is``/``set`` prefix.
    :returns: Property key.
    """
    if suffix.startswith("_") is True:
        suffix = suffix[1:]
    if len(suffix) == 0:
        return ""
    return suffix[0].lower() + suffix[1:]


def bean_access(mapping: Mapping[object, object], name: str, args: tuple[object, ...]) -> tuple[bool, object]:
    """Serve an accessor call from a mapping.

    :param mapping: Backing mapping.
    :param name: Called accessor name.
    :param args: Call arguments.
    :returns: Tuple of ``(handled, result)``.
    """
    if len(args) == 0 and name.startswith("get") is True:
        return True, mapping.get(property_name(name[3:]))
    if len(args) == 0 and name.startswith("is") is True:
        return True, mapping.get(property_name(name[2:]))
    if len(args) == 1 and name.startswith("set") is True and isinstance(mapping, MutableMapping) is True:
        mapping[property_name(name[3:])] = args[0]
        return True, None
    return False, None


def default_body_strategy(proxy_type: type, attr_name: str, declaring: type) -> DefaultStrategy:
    """Pick how a contract default body is bound to instances of ``proxy_type``.

    Plain functions are bound directly. Other descriptors are looked up
    through ``super()``, scoped to the projection class when the declaring
    contract is the first provider after it, and narrowed to the declaring
    contract otherwise. Choices are remembered for as long as ``proxy_type``
    is alive.

    :param proxy_type: Synthesized contract class.
    :param attr_name: Member storage name.
    :param declaring: Contract that declares the default body.
    :returns: Binding strategy.
    :raises InvocationError: If ``declaring`` is not an ancestor of ``proxy_type``.
    """
    known: dict[tuple[str, type], DefaultStrategy] = _STRATEGIES.setdefault(proxy_type, {})
    strategy: DefaultStrategy | None = known.get((attr_name, declaring))
    if strategy is None:
        strategy = _probe_strategy(proxy_type, attr_name, declaring)
        known[(attr_name, declaring)] = strategy
    return strategy


def _probe_strategy(proxy_type: type, attr_name: str, declaring: type) -> DefaultStrategy:
    """Compute the binding strategy remembered by ``default_body_strategy``."""
    if inspect.isfunction(declaring.__dict__.get(attr_name)) is True:
        return "direct"
    chain: tuple[type, ...] = proxy_type.__mro__
    if declaring not in chain[1:]:
        raise InvocationError(f"{declaring.__qualname__} is not a contract of {proxy_type.__qualname__}")
    for cls in chain[1:]:
        if attr_name in cls.__dict__:
            if cls is declaring:
                return "scoped"
            break
    return "narrowed"


def invoke_default(proxy: object, member: ContractMember, args: tuple[object, ...]) -> object:
    """Invoke a contract default body bound to the live projection.

    :param proxy: Projection instance.
    :param member: Contract member with a default body.
    :param args: Positional call arguments.
    :returns: Whatever the default body returns.
    :raises InvocationError: If the body cannot be bound to ``proxy``.
    """
    proxy_type: type = type(proxy)
    strategy: DefaultStrategy = default_body_strategy(proxy_type, member.attr_name, member.declaring)
    bound: Callable[..., object]
    if strategy == "direct":
        bound = types.MethodType(member.declaring.__dict__[member.attr_name], proxy)
    else:
        start: type = proxy_type
        if strategy == "narrowed":
            chain: tuple[type, ...] = proxy_type.__mro__
            start = chain[chain.index(member.declaring) - 1]
        try:
            bound = getattr(super(start, proxy), member.attr_name)
        except (AttributeError, TypeError) as exc:
            raise InvocationError(
                f"Could not bind default body of {member.declaring.__qualname__}.{member.attr_name}"
            ) from exc
    logger.debug("Invoking default body of {} ({})", member, strategy)
    return bound(*args)


class ProjectionHandler:
    """Answer relayed contract calls from a wrapped value."""

    _reflect: "Reflect"
    _bean_fallback: bool

    def __init__(self, reflect: "Reflect", bean_fallback: bool) -> None:
        """Initialize a projection handler.

        :param reflect: Wrapped backing value.
        :param bean_fallback: Whether mapping values serve accessor calls.
        """
        self._reflect = reflect
        self._bean_fallback = bean_fallback

    @property
    def target(self) -> object:
        """Return the backing value.

        :returns: Unwrapped backing value.
        """
        return self._reflect.get()

    def _mapping(self) -> Mapping[object, object] | None:
        if self._bean_fallback is False:
            return None
        backing: object = self.target
        if isinstance(backing, Mapping) is False:
            return None
        return backing  # type: ignore[return-value]

    def invoke(self, proxy: object, member: ContractMember, args: tuple[object, ...]) -> object:
        """Answer one relayed method call.

        :param proxy: Projection instance.
        :param member: Called contract member.
        :param args: Positional call arguments.
        :returns: Call result, ``None`` for members annotated ``-> None``.
        :raises ReflectionError: If no step can answer the call.
        """
        try:
            result: object = self._reflect.call_method(member.attr_name, *args).get()
        except ReflectionError:
            mapping: Mapping[object, object] | None = self._mapping()
            if mapping is not None:
                handled, value = bean_access(mapping, member.attr_name, args)
                if handled is True:
                    return value
            if has_default_body(member) is True:
                return invoke_default(proxy, member, args)
            raise
        if member.returns_nothing is True:
            return None
        return result

    def read(self, proxy: object, member: ContractMember) -> object:
        """Answer one contract property read.

        :param proxy: Projection instance.
        :param member: Contract property.
        :returns: Property value.
        :raises ReflectionError: If no step can answer the read.
        """
        try:
            return self._reflect.get_field(member.attr_name).get()
        except ReflectionError:
            mapping: Mapping[object, object] | None = self._mapping()
            if mapping is not None:
                return mapping.get(member.attr_name)
            getter: object = member.function
            if getter is not None and has_default_body(member) is True:
                return getter(proxy)  # type: ignore[operator]
            raise

    def write(self, proxy: object, member: ContractMember, value: object) -> None:
        """Answer one contract property write.

        :param proxy: Projection instance.
        :param member: Contract property.
        :param value: New value.
        :raises ReflectionError: If no step can answer the write.
        """
        try:
            self._reflect.set_field(member.attr_name, value)
        except ReflectionError:
            mapping: Mapping[object, object] | None = self._mapping()
            if isinstance(mapping, MutableMapping) is True:
                mapping[member.attr_name] = value
                return
            setter: object = getattr(member.raw, "fset", None)
            if setter is not None and is_stub(setter) is False:
                setter(proxy, value)  # type: ignore[operator]
                return
            raise


def project(reflect: "Reflect", contract: type, *extra_contracts: type, bean_fallback: bool = True) -> object:
    """Build a contract projection backed by a wrapped value.

    :param reflect: Wrapped backing value.
    :param contract: Contract class the projection implements.
    :param extra_contracts: Further contracts the projection implements.
    :param bean_fallback: Whether mapping values serve ``get_x``/``set_x`` calls.
    :returns: Projection instance.
    :raises TypeError: If a requested type is not a contract class.
    """
    contracts: tuple[type, ...] = (contract, *extra_contracts)
    for candidate in contracts:
        if is_contract(candidate) is False:
            raise TypeError(f"{candidate!r} is not a Protocol or abstract contract class")
    return instantiate(contracts, ProjectionHandler(reflect, bean_fallback))
