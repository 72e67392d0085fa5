"""Fluent, name-addressed access to fields, methods and constructors."""

import importlib
import types
from collections.abc import Callable

from loguru import logger

from reflectbridge.errors import InvocationError
from reflectbridge.errors import TypeLoadingError
from reflectbridge.members import NO_INSTANCE
from reflectbridge.members import FieldMember
from reflectbridge.members import MethodMember
from reflectbridge.members import fields_by_class
from reflectbridge.members import find_field
from reflectbridge.projection import project
from reflectbridge.signatures import argument_types
from reflectbridge.signatures import resolve_constructor
from reflectbridge.signatures import resolve_method


class Reflect:
    """An immutable ``(type, value)`` pair navigated by member name.

    A type-only value wraps a class as both its type and its value and
    reaches class-level members; any other value reaches instance members.
    Every navigation step returns a new ``Reflect``.
    """

    __slots__ = ("_type", "_object")

    _type: type
    _object: object

    def __init__(self, type_object: type, value: object) -> None:
        """Initialize a wrapped value.

        :param type_object: Declared type used for member resolution.
        :param value: Underlying value, or ``None`` when absent.
        :raises TypeError: If ``type_object`` is not a class.
        """
        if isinstance(type_object, type) is False:
            raise TypeError("Reflect type must be a class")
        object.__setattr__(self, "_type", type_object)
        object.__setattr__(self, "_object", value)

    def __setattr__(self, attr_name: str, value: object) -> None:
        raise AttributeError("Reflect values are immutable")

    @property
    def wrapped_type(self) -> type:
        """Return the declared type used for member resolution.

        :returns: Wrapped type.
        """
        return self._type

    @property
    def is_type_only(self) -> bool:
        """Report whether this value wraps a class rather than an instance.

        :returns: ``True`` for values created by ``on_class``.
        """
        return self._object is self._type

    def _receiver(self) -> object:
        if self.is_type_only is True or self._object is None:
            return NO_INSTANCE
        return self._object

    def get(self, name: str | None = None) -> object:
        """Return the underlying value, or the raw value of one field.

        :param name: Optional field name.
        :returns: Wrapped value when ``name`` is omitted, else the field value.
        """
        if name is None:
            return self._object
        return self.get_field(name).get()

    def _holder(self, field: FieldMember) -> object:
        if field.is_static is True:
            return field.owner
        receiver: object = self._receiver()
        if receiver is NO_INSTANCE:
            raise InvocationError(
                f"Field {field.owner.__qualname__}.{field.name} needs an instance; receiver wraps a type only"
            )
        return receiver

    def _read(self, field: FieldMember) -> object:
        holder: object = self._holder(field)
        try:
            return getattr(holder, field.attr_name)
        except Exception as exc:
            raise InvocationError(f"Reading field {field.owner.__qualname__}.{field.name} failed") from exc

    def _write(self, field: FieldMember, value: object) -> None:
        holder: object = self._holder(field)
        if field.is_final is True:
            # bypassing the class-level __setattr__ clears frozen/final guards
            bypass: Callable[[object, str, object], None] = object.__setattr__
            if isinstance(holder, type) is True:
                bypass = type.__setattr__
            try:
                bypass(holder, field.attr_name, value)
                return
            except (AttributeError, TypeError) as exc:
                logger.debug("Could not clear final flag of {}: {}", field, exc)
        try:
            setattr(holder, field.attr_name, value)
        except Exception as exc:
            raise InvocationError(f"Writing field {field.owner.__qualname__}.{field.name} failed") from exc

    def _wrap_field(self, field: FieldMember, value: object) -> "Reflect":
        if value is None and field.declared_type is not None:
            return Reflect(field.declared_type, None)
        return wrap_object(value)

    def get_field(self, name: str) -> "Reflect":
        """Read one field and wrap its value.

        Class-level fields are read from their declaring class; instance
        fields require an instance receiver.

        :param name: Field name, plain or mangled.
        :returns: Wrapped field value.
        :raises MemberNotFoundError: If no class in the chain declares the field.
        :raises InvocationError: If the read itself fails.
        """
        field: FieldMember = find_field(self._type, name, self._receiver())
        return self._wrap_field(field, self._read(field))

    def set_field(self, name: str, value: object) -> "Reflect":
        """Write one field, including final and frozen ones where possible.

        :param name: Field name, plain or mangled.
        :param value: New value; ``Reflect`` values are unwrapped first.
        :returns: This same wrapped value.
        :raises MemberNotFoundError: If no class in the chain declares the field.
        :raises InvocationError: If the write itself fails.
        """
        field: FieldMember = find_field(self._type, name, self._receiver())
        self._write(field, unwrap(value))
        return self

    def all_fields(self) -> dict[str, "Reflect"]:
        """Read every field visible from this value.

        A type-only value reports class-level fields; an instance reports
        instance fields. The most-derived declaration of a name wins.

        :returns: Ordered mapping of field name to wrapped value.
        """
        type_only: bool = self.is_type_only
        result: dict[str, Reflect] = {}
        for _, fields in fields_by_class(self._type, self._receiver()):
            for field in fields:
                if field.is_static is not type_only:
                    continue
                if field.name in result:
                    continue
                result[field.name] = self._wrap_field(field, self._read(field))
        return result

    def call_method(self, name: str, *args: object) -> "Reflect":
        """Call a method by name with overload resolution.

        :param name: Method name, plain or mangled.
        :param args: Positional call-site arguments.
        :returns: Wrapped result, or this value for methods annotated ``-> None``.
        :raises NoMatchingMethodError: If no overload accepts the arguments.
        :raises InvocationError: If the method raised.
        """
        member: MethodMember = resolve_method(self._type, name, argument_types(args))
        bound: Callable[..., object] = member.bind(self._type, self._receiver())
        try:
            result: object = bound(*args)
        except Exception as exc:
            raise InvocationError(
                f"Method {member.owner.__qualname__}.{member.name} raised {type(exc).__name__}: {exc}"
            ) from exc
        if member.returns_nothing is True:
            return self
        return wrap_object(result)

    def construct(self, *args: object) -> "Reflect":
        """Construct a new instance of the wrapped type.

        :param args: Positional constructor arguments.
        :returns: Wrapped new instance.
        :raises NoMatchingConstructorError: If no constructor accepts the arguments.
        :raises InvocationError: If the constructor raised.
        """
        resolve_constructor(self._type, argument_types(args))
        try:
            instance: object = self._type(*args)
        except Exception as exc:
            raise InvocationError(
                f"Constructor of {self._type.__qualname__} raised {type(exc).__name__}: {exc}"
            ) from exc
        return Reflect(self._type, instance)

    def as_contract(self, contract: type, *extra_contracts: type, bean_fallback: bool = True) -> object:
        """Expose this value as an implementation of ``contract``.

        :param contract: Contract class the result implements.
        :param extra_contracts: Further contracts the result implements.
        :param bean_fallback: Whether mapping values serve ``get_x``/``set_x`` calls.
        :returns: Contract projection backed by this value.
        """
        return project(self, contract, *extra_contracts, bean_fallback=bean_fallback)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Reflect) is False:
            return False
        return bool(self._object == other._object)

    def __hash__(self) -> int:
        return hash(self._object)

    def __str__(self) -> str:
        return str(self._object)

    def __repr__(self) -> str:
        return f"Reflect({self._type.__qualname__}, {self._object!r})"


def unwrap(value: object) -> object:
    """Return the underlying value of a ``Reflect``, or ``value`` itself.

    :param value: Any value.
    :returns: Unwrapped value.
    """
    if isinstance(value, Reflect) is True:
        return value.get()
    return value


def wrap_object(value: object) -> Reflect:
    """Wrap an instance for instance-level member access.

    :param value: Any value, including ``None``.
    :returns: ``Reflect(type(value), value)``, or ``Reflect(object, None)``.
    """
    if value is None:
        return Reflect(object, None)
    return Reflect(type(value), value)


def wrap_type(type_object: type) -> Reflect:
    """Wrap a class for class-level member access and construction.

    :param type_object: Class to wrap.
    :returns: Type-only wrapped value.
    :raises TypeError: If ``type_object`` is not a class.
    """
    return Reflect(type_object, type_object)


def _parse_target(target: str) -> list[tuple[str, str]]:
    """Split a type name into candidate ``(module, qualname)`` pairs.

    ``module.path:Qualname`` yields one pair; a dotted name yields one pair
    per split point, longest module path first.

    :param target: Type name.
    :returns: Candidate pairs.
    :raises TypeLoadingError: If the name is malformed.
    """
    if ":" in target:
        parts: list[str] = target.split(":")
        if len(parts) != 2:
            raise TypeLoadingError(target, "expected module.path:Qualname")
        module_name: str = parts[0].strip()
        qualname: str = parts[1].strip()
        if len(module_name) == 0 or len(qualname) == 0:
            raise TypeLoadingError(target, "module path and qualname cannot be empty")
        return [(module_name, qualname)]

    pieces: list[str] = [piece.strip() for piece in target.split(".")]
    if len(pieces) < 2 or any(len(piece) == 0 for piece in pieces):
        raise TypeLoadingError(target, "expected a fully qualified name")
    return [(".".join(pieces[:cut]), ".".join(pieces[cut:])) for cut in range(len(pieces) - 1, 0, -1)]


def _import_with(loader: object, module_name: str) -> types.ModuleType:
    """Import ``module_name`` through a loader object or callable."""
    import_module: object = getattr(loader, "import_module", None)
    if callable(import_module) is True:
        return import_module(module_name)  # type: ignore[operator,no-any-return]
    if callable(loader) is True:
        return loader(module_name)  # type: ignore[operator,no-any-return]
    raise TypeError("loader must provide import_module(name) or be callable")


def load_type(target: str, loader: object = None) -> type:
    """Resolve a class by name, optionally through a loading context.

    :param target: ``module.path:Qualname`` or ``module.path.Qualname``.
    :param loader: Object providing ``import_module(name)``; ``importlib`` by default.
    :returns: Resolved class.
    :raises TypeLoadingError: If the class cannot be resolved.
    """
    if loader is None:
        loader = importlib
    for module_name, qualname in _parse_target(target):
        try:
            module: types.ModuleType = _import_with(loader, module_name)
        except ModuleNotFoundError:
            continue
        except Exception as exc:
            raise TypeLoadingError(target, f"importing {module_name} failed") from exc

        current: object = module
        try:
            for piece in qualname.split("."):
                current = getattr(current, piece)
        except AttributeError as exc:
            raise TypeLoadingError(target, f"{module_name} has no attribute path {qualname}") from exc
        if isinstance(current, type) is False:
            raise TypeLoadingError(target, "name does not denote a class")
        logger.debug("Loaded type {} from module {}", qualname, module_name)
        return current
    raise TypeLoadingError(target, "no module along the name could be imported")
