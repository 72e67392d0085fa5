"""Member lookup over a type and its ancestor chain."""

import abc
import functools
import inspect
import types
import typing
from collections.abc import Callable
from typing import Any
from typing import ClassVar
from typing import Final
from typing import Literal

from reflectbridge.errors import InvocationError
from reflectbridge.errors import MemberNotFoundError

Binding = Literal["instance", "class", "static"]
UNDECLARED: object = inspect.Parameter.empty
NO_INSTANCE: object = object()
_NONE_TYPE: type = type(None)
_ANY_TYPES: tuple[type, ...] = (object,)
_CONSTRUCTOR_NAMES: frozenset[str] = frozenset({"__init__", "__new__"})
_POSITIONAL_KINDS: tuple[Any, ...] = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)
_SLOT_DESCRIPTOR_TYPES: tuple[type, ...] = (types.MemberDescriptorType, types.GetSetDescriptorType)
_HINT_ERRORS: tuple[type[BaseException], ...] = (NameError, TypeError, AttributeError, SyntaxError, ValueError)


def mro_chain(owner_type: type) -> tuple[type, ...]:
    """Return ``owner_type`` followed by its ancestors, nearest first.

    :param owner_type: Type to walk.
    :returns: Method resolution order of ``owner_type``.
    """
    return inspect.getmro(owner_type)


def _is_dunder(name: str) -> bool:
    """Report whether ``name`` is a ``__dunder__`` protocol name."""
    return len(name) > 4 and name.startswith("__") is True and name.endswith("__") is True


def is_public(name: str) -> bool:
    """Report whether ``name`` denotes a public member.

    Dunder names are part of the public protocol surface. Any other name with
    a leading underscore is non-public.

    :param name: Member name.
    :returns: ``True`` for public members.
    """
    if _is_dunder(name) is True:
        return True
    return name.startswith("_") is False


def mangle(owner: type, name: str) -> str:
    """Return the storage name of ``name`` when declared inside ``owner``.

    :param owner: Declaring class.
    :param name: Member name as written in the class body.
    :returns: Mangled attribute name for class-private members, else ``name``.
    """
    is_private: bool = name.startswith("__") is True and name.endswith("__") is False
    if is_private is False:
        return name
    stripped: str = owner.__name__.lstrip("_")
    if len(stripped) == 0:
        return name
    return f"_{stripped}{name}"


def unmangle(owner: type, attr_name: str) -> str:
    """Return the class-body spelling of a possibly mangled attribute name.

    :param owner: Declaring class.
    :param attr_name: Attribute name as stored in the class or instance namespace.
    :returns: ``__name`` for mangled class-private members, else ``attr_name``.
    """
    stripped: str = owner.__name__.lstrip("_")
    if len(stripped) == 0:
        return attr_name
    prefix: str = f"_{stripped}__"
    is_mangled: bool = attr_name.startswith(prefix) is True and len(attr_name) > len(prefix)
    if is_mangled is False or attr_name.endswith("__") is True:
        return attr_name
    return attr_name[len(prefix) - 2 :]


def _flatten_annotations(items: tuple[object, ...]) -> tuple[type, ...]:
    """Normalize every annotation in ``items`` into one tuple of classes."""
    flattened: list[type] = []
    for item in items:
        for normalized in normalize_annotation(item):
            if normalized not in flattened:
                flattened.append(normalized)
    if len(flattened) == 0:
        return _ANY_TYPES
    return tuple(flattened)


def normalize_annotation(annotation: object) -> tuple[type, ...]:
    """Reduce a type annotation to the runtime classes it admits.

    Unions contribute every member; parametrized generics contribute their
    origin; anything that cannot be resolved to a class admits ``object``.

    :param annotation: Resolved or raw annotation.
    :returns: Non-empty tuple of runtime classes.
    """
    if annotation is UNDECLARED or annotation is Any or annotation is object:
        return _ANY_TYPES
    if annotation is None or annotation is _NONE_TYPE:
        return (_NONE_TYPE,)
    if isinstance(annotation, (str, typing.ForwardRef)) is True:
        return _ANY_TYPES
    if annotation is ClassVar or annotation is Final:
        return _ANY_TYPES
    if isinstance(annotation, typing.TypeVar) is True:
        bound: object = annotation.__bound__
        if bound is not None:
            return normalize_annotation(bound)
        constraints: tuple[object, ...] = annotation.__constraints__
        if len(constraints) > 0:
            return _flatten_annotations(constraints)
        return _ANY_TYPES
    supertype: object = getattr(annotation, "__supertype__", None)
    if supertype is not None:
        return normalize_annotation(supertype)

    origin: object = typing.get_origin(annotation)
    arguments: tuple[object, ...] = typing.get_args(annotation)
    if origin is typing.Union or origin is types.UnionType:
        return _flatten_annotations(arguments)
    if origin is typing.Annotated or origin is ClassVar or origin is Final:
        if len(arguments) == 0:
            return _ANY_TYPES
        return normalize_annotation(arguments[0])
    if origin is Literal:
        return _flatten_annotations(tuple(type(item) for item in arguments))
    if isinstance(origin, type) is True:
        return (origin,)
    if isinstance(annotation, type) is True:
        return (annotation,)
    return _ANY_TYPES


def declared_class(annotation: object) -> type | None:
    """Return the single class an annotation declares, if there is one.

    :param annotation: Resolved or raw annotation.
    :returns: The declared class, or ``None`` for unions and untyped members.
    """
    admitted: tuple[type, ...] = normalize_annotation(annotation)
    if len(admitted) != 1 or admitted[0] is object:
        return None
    return admitted[0]


def type_hints(function: object) -> dict[str, object]:
    """Resolve the type hints of a routine, falling back to raw annotations.

    :param function: Routine to inspect.
    :returns: Mapping of parameter name (and ``"return"``) to annotation.
    """
    try:
        return dict(typing.get_type_hints(function))
    except _HINT_ERRORS:
        raw: object = getattr(function, "__annotations__", None)
        if isinstance(raw, dict) is True:
            return dict(raw)
        return {}


def _class_annotations(owner: type) -> dict[str, object]:
    """Return the annotations declared directly on ``owner``, resolved where possible."""
    try:
        return dict(inspect.get_annotations(owner, eval_str=True))
    except _HINT_ERRORS:
        return dict(inspect.get_annotations(owner))


def _annotation_qualifiers(annotation: object) -> tuple[bool, bool, object]:
    """Split ``ClassVar``/``Final`` qualifiers off an annotation.

    :param annotation: Class-body annotation.
    :returns: Tuple of ``(is_class_var, is_final, inner_annotation)``.
    """
    if isinstance(annotation, str) is True:
        head: str = annotation.split("[", 1)[0].strip()
        return head.endswith("ClassVar"), head.endswith("Final"), UNDECLARED
    if annotation is ClassVar:
        return True, False, UNDECLARED
    if annotation is Final:
        return False, True, UNDECLARED

    origin: object = typing.get_origin(annotation)
    arguments: tuple[object, ...] = typing.get_args(annotation)
    inner: object = UNDECLARED
    if len(arguments) > 0:
        inner = arguments[0]
    if origin is ClassVar:
        _, nested_final, nested_inner = _annotation_qualifiers(inner)
        return True, nested_final, nested_inner
    if origin is Final:
        nested_class_var, _, nested_inner = _annotation_qualifiers(inner)
        return nested_class_var, True, nested_inner
    return False, False, annotation


def _is_frozen_dataclass(owner: type) -> bool:
    """Report whether ``owner`` is a frozen dataclass."""
    params: object = getattr(owner, "__dataclass_params__", None)
    return getattr(params, "frozen", False) is True


def is_method_like(value: object) -> bool:
    """Report whether a class-namespace value is an invocable routine.

    Properties, cached properties and nested classes are not routines.

    :param value: Value stored in a class namespace.
    :returns: ``True`` for functions, method descriptors and static or class methods.
    """
    if isinstance(value, (property, functools.cached_property)) is True:
        return False
    if isinstance(value, type) is True:
        return False
    if isinstance(value, (staticmethod, classmethod)) is True:
        return True
    return inspect.isroutine(value)


def _slot_names(owner: type) -> list[str]:
    """List the ``__slots__`` entries of ``owner`` that hold values."""
    slots: object = owner.__dict__.get("__slots__", ())
    if isinstance(slots, str) is True:
        return [slots]
    return [name for name in slots if name not in ("__dict__", "__weakref__")]


class FieldMember:
    """Descriptor of one field declared on a class."""

    name: str
    attr_name: str
    owner: type
    is_static: bool
    is_final: bool
    declared_type: type | None

    def __init__(
        self,
        name: str,
        attr_name: str,
        owner: type,
        is_static: bool,
        is_final: bool,
        declared_type: type | None,
    ) -> None:
        """Initialize a field descriptor.

        :param name: Field name as written in the class body.
        :param attr_name: Name the value is stored under.
        :param owner: Declaring class.
        :param is_static: ``True`` for class-level fields.
        :param is_final: ``True`` when a plain write is expected to be refused.
        :param declared_type: Declared class of the field, when known.
        """
        self.name = name
        self.attr_name = attr_name
        self.owner = owner
        self.is_static = is_static
        self.is_final = is_final
        self.declared_type = declared_type

    @property
    def is_public(self) -> bool:
        """Report whether the field is public.

        :returns: ``True`` for public fields.
        """
        return is_public(self.name)

    def matches(self, requested: str) -> bool:
        """Check the field against a requested name, mangled or not.

        :param requested: Requested field name.
        :returns: ``True`` on match.
        """
        return requested == self.name or requested == self.attr_name

    def __repr__(self) -> str:
        scope: str = "static" if self.is_static is True else "instance"
        return f"<field {self.owner.__qualname__}.{self.name} ({scope})>"


def declared_fields(owner: type) -> list[FieldMember]:
    """List the fields declared directly on ``owner``, in declaration order.

    Annotations come first, then ``__slots__`` entries, then the remaining
    class-body data. Methods and nested classes are not fields.

    :param owner: Class to inspect.
    :returns: Declared field descriptors.
    """
    namespace: types.MappingProxyType[str, object] = owner.__dict__
    frozen: bool = _is_frozen_dataclass(owner)
    is_dataclass: bool = "__dataclass_fields__" in namespace
    fields: list[FieldMember] = []
    seen: set[str] = set()

    for attr_name, annotation in _class_annotations(owner).items():
        if _is_dunder(attr_name) is True:
            continue
        is_class_var, is_final, inner = _annotation_qualifiers(annotation)
        is_static: bool = is_class_var
        # a Final name assigned in a plain class body is a class variable
        if is_final is True and attr_name in namespace and is_dataclass is False:
            is_static = True
        if isinstance(namespace.get(attr_name), _SLOT_DESCRIPTOR_TYPES) is True:
            is_static = False
        final_flag: bool = is_final or (frozen is True and is_static is False)
        fields.append(
            FieldMember(
                unmangle(owner, attr_name),
                attr_name,
                owner,
                is_static,
                final_flag,
                declared_class(inner),
            )
        )
        seen.add(attr_name)

    for slot_name in _slot_names(owner):
        attr_name = mangle(owner, slot_name)
        if attr_name in seen:
            continue
        fields.append(FieldMember(unmangle(owner, attr_name), attr_name, owner, False, frozen, None))
        seen.add(attr_name)

    for attr_name, value in namespace.items():
        if attr_name in seen or _is_dunder(attr_name) is True:
            continue
        if is_method_like(value) is True or isinstance(value, _SLOT_DESCRIPTOR_TYPES) is True:
            continue
        if isinstance(value, property) is True:
            getter_type: type | None = None
            if value.fget is not None:
                getter_type = declared_class(type_hints(value.fget).get("return", UNDECLARED))
            fields.append(
                FieldMember(unmangle(owner, attr_name), attr_name, owner, False, value.fset is None, getter_type)
            )
        elif isinstance(value, functools.cached_property) is True:
            fields.append(FieldMember(unmangle(owner, attr_name), attr_name, owner, False, False, None))
        else:
            fields.append(FieldMember(unmangle(owner, attr_name), attr_name, owner, True, False, None))
        seen.add(attr_name)
    return fields


def _private_owner(chain: tuple[type, ...], attr_name: str) -> type | None:
    """Return the class whose name mangling produced ``attr_name``, if any."""
    for candidate in chain:
        if unmangle(candidate, attr_name) != attr_name:
            return candidate
    return None


def fields_by_class(owner_type: type, instance: object = NO_INSTANCE) -> list[tuple[type, list[FieldMember]]]:
    """Collect declared fields for every class in the chain, nearest first.

    Entries of the instance ``__dict__`` that no class declares are reported
    as instance fields of the most-derived class. Entries that shadow
    class-body data turn that declaration into an instance field, since
    attribute reads on the instance see the instance value.

    :param owner_type: Type to walk.
    :param instance: Receiver instance, or ``NO_INSTANCE`` for type-only access.
    :returns: List of ``(class, fields)`` pairs.
    """
    chain: tuple[type, ...] = mro_chain(owner_type)
    collected: list[tuple[type, list[FieldMember]]] = [(cls, declared_fields(cls)) for cls in chain]
    if instance is NO_INSTANCE:
        return collected

    instance_namespace: object = getattr(instance, "__dict__", None)
    if isinstance(instance_namespace, dict) is False:
        return collected

    declared_names: set[str] = set()
    for index, (cls, fields) in enumerate(collected):
        shadowed: list[FieldMember] = []
        for field in fields:
            declared_names.add(field.attr_name)
            if field.is_static is True and field.attr_name in instance_namespace:
                field = FieldMember(
                    field.name, field.attr_name, field.owner, False, field.is_final, field.declared_type
                )
            shadowed.append(field)
        collected[index] = (cls, shadowed)

    dynamic: list[FieldMember] = []
    for attr_name in instance_namespace:
        if isinstance(attr_name, str) is False or attr_name in declared_names or _is_dunder(attr_name) is True:
            continue
        owner: type | None = _private_owner(chain, attr_name)
        if owner is None:
            owner = owner_type
        dynamic.append(FieldMember(unmangle(owner, attr_name), attr_name, owner, False, False, None))

    first_class, first_fields = collected[0]
    collected[0] = (first_class, first_fields + dynamic)
    return collected


def find_field(owner_type: type, name: str, instance: object = NO_INSTANCE) -> FieldMember:
    """Find one field by name, regardless of static or instance scope.

    Public fields are searched across the whole chain first; declared
    non-public fields are searched afterwards, nearest class first.

    :param owner_type: Type to search.
    :param name: Field name, plain or mangled.
    :param instance: Receiver instance, or ``NO_INSTANCE`` for type-only access.
    :returns: Matching field descriptor.
    :raises MemberNotFoundError: If no class in the chain declares the field.
    """
    collected: list[tuple[type, list[FieldMember]]] = fields_by_class(owner_type, instance)
    for _, fields in collected:
        for field in fields:
            if field.is_public is True and field.name == name:
                return field
    for _, fields in collected:
        for field in fields:
            if field.is_public is False and field.matches(name) is True:
                return field
    raise MemberNotFoundError(name, owner_type)


class MethodMember:
    """Descriptor of one invocable method or constructor signature."""

    name: str
    attr_name: str
    owner: type
    binding: Binding
    target: object
    parameter_types: tuple[tuple[type, ...], ...]
    required_count: int
    variadic_types: tuple[type, ...] | None
    return_annotation: object

    def __init__(
        self,
        name: str,
        attr_name: str,
        owner: type,
        binding: Binding,
        target: object,
        parameter_types: tuple[tuple[type, ...], ...],
        required_count: int,
        variadic_types: tuple[type, ...] | None,
        return_annotation: object,
    ) -> None:
        """Initialize a method descriptor.

        :param name: Method name as written in the class body.
        :param attr_name: Name the routine is stored under.
        :param owner: Declaring class.
        :param binding: How the routine binds to its receiver.
        :param target: Descriptor or function that is bound on invocation.
        :param parameter_types: Admitted classes per positional parameter.
        :param required_count: Number of positional parameters without default.
        :param variadic_types: Admitted classes for ``*args``, if accepted.
        :param return_annotation: Resolved return annotation.
        """
        self.name = name
        self.attr_name = attr_name
        self.owner = owner
        self.binding = binding
        self.target = target
        self.parameter_types = parameter_types
        self.required_count = required_count
        self.variadic_types = variadic_types
        self.return_annotation = return_annotation

    @property
    def is_public(self) -> bool:
        """Report whether the method is public.

        :returns: ``True`` for public methods.
        """
        return is_public(self.name)

    @property
    def returns_nothing(self) -> bool:
        """Report whether the method is declared to return no value.

        :returns: ``True`` when annotated ``-> None``.
        """
        return self.return_annotation is None or self.return_annotation is _NONE_TYPE

    def matches(self, requested: str) -> bool:
        """Check the method against a requested name, mangled or not.

        :param requested: Requested method name.
        :returns: ``True`` on match.
        """
        return requested == self.name or requested == self.attr_name

    def accepts_count(self, count: int) -> bool:
        """Check whether ``count`` positional arguments fit the signature.

        :param count: Number of call-site arguments.
        :returns: ``True`` when the arity fits.
        """
        if count < self.required_count:
            return False
        if count <= len(self.parameter_types):
            return True
        return self.variadic_types is not None

    def parameter_at(self, index: int) -> tuple[type, ...]:
        """Return the admitted classes for one positional argument index.

        :param index: Zero-based argument index.
        :returns: Admitted classes.
        """
        if index < len(self.parameter_types):
            return self.parameter_types[index]
        if self.variadic_types is None:
            return _ANY_TYPES
        return self.variadic_types

    def bind(self, owner_type: type, instance: object) -> Callable[..., object]:
        """Bind the routine to a receiver.

        :param owner_type: Receiver type.
        :param instance: Receiver instance, or ``NO_INSTANCE`` for type-only access.
        :returns: Callable taking the positional call-site arguments.
        :raises InvocationError: If an instance method is bound without an instance.
        """
        if self.binding == "static":
            if isinstance(self.target, staticmethod) is True:
                return self.target.__func__
            return self.target  # type: ignore[return-value]
        if self.binding == "class":
            if self.is_overridden_in(owner_type) is True:
                return getattr(owner_type, self.attr_name)  # type: ignore[no-any-return]
            return self.target.__get__(None, owner_type)  # type: ignore[attr-defined]
        if instance is NO_INSTANCE or instance is None:
            raise InvocationError(
                f"Method {self.owner.__qualname__}.{self.name} needs an instance; receiver wraps a type only"
            )
        if self.is_overridden_in(type(instance)) is True:
            return getattr(instance, self.attr_name)  # type: ignore[no-any-return]
        return self.target.__get__(instance, type(instance))  # type: ignore[attr-defined]

    def is_overridden_in(self, receiver_type: type) -> bool:
        """Report whether a subclass redefines this routine with the same shape.

        An override keeps the binding kind, the positional parameter count and
        the presence of ``*args``, and declares each parameter with the same
        classes or leaves it unannotated. A redefinition with other parameter
        classes is a separate overload, and so are dispatch registrations.

        :param receiver_type: Runtime type of the receiver.
        :returns: ``True`` when the nearest declaration overrides this one.
        """
        for cls in mro_chain(receiver_type):
            if self.attr_name not in cls.__dict__:
                continue
            if cls is self.owner:
                return False
            raw: object = cls.__dict__[self.attr_name]
            if isinstance(raw, functools.singledispatchmethod) is True or is_method_like(raw) is False:
                return False
            nearest: MethodMember | None = describe_routine(cls, self.attr_name, raw)
            if nearest is None or nearest.binding != self.binding:
                return False
            same_count: bool = len(nearest.parameter_types) == len(self.parameter_types)
            same_variadic: bool = (nearest.variadic_types is None) == (self.variadic_types is None)
            if same_count is False or same_variadic is False:
                return False
            return all(
                admitted == _ANY_TYPES or admitted == declared
                for admitted, declared in zip(nearest.parameter_types, self.parameter_types)
            )
        return False

    def __repr__(self) -> str:
        rendered: list[str] = ["|".join(item.__name__ for item in admitted) for admitted in self.parameter_types]
        if self.variadic_types is not None:
            rendered.append("*" + "|".join(item.__name__ for item in self.variadic_types))
        return f"<method {self.owner.__qualname__}.{self.name}({', '.join(rendered)})>"


def _binding_of(raw: object) -> tuple[Binding, object]:
    """Classify how a class-body routine binds, and return its inspectable function.

    :param raw: Value stored in the class namespace.
    :returns: Tuple of ``(binding, function_to_inspect)``.
    """
    if isinstance(raw, staticmethod) is True:
        return "static", raw.__func__
    if isinstance(raw, classmethod) is True:
        return "class", raw.__func__
    if isinstance(raw, types.ClassMethodDescriptorType) is True:
        return "class", raw
    if isinstance(raw, types.BuiltinFunctionType) is True:
        return "static", raw
    return "instance", raw


def _describe_routine(
    owner: type,
    attr_name: str,
    target: object,
    binding: Binding,
    function: object,
    dispatch_type: type | None = None,
) -> MethodMember | None:
    """Build a method descriptor from one routine's signature.

    :param owner: Declaring class.
    :param attr_name: Storage name in the class namespace.
    :param target: Value bound on invocation.
    :param binding: Binding kind.
    :param function: Function whose signature and hints are inspected.
    :param dispatch_type: Registered dispatch class for the first argument, if any.
    :returns: Method descriptor, or ``None`` when the routine needs keyword-only arguments.
    """
    name: str = unmangle(owner, attr_name)
    try:
        signature: inspect.Signature = inspect.signature(function)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return MethodMember(name, attr_name, owner, binding, target, (), 0, _ANY_TYPES, UNDECLARED)

    hints: dict[str, object] = type_hints(function)
    parameters: list[inspect.Parameter] = list(signature.parameters.values())
    skip_receiver: bool = binding != "static"
    if skip_receiver is True and len(parameters) > 0 and parameters[0].kind in _POSITIONAL_KINDS:
        parameters = parameters[1:]

    parameter_types: list[tuple[type, ...]] = []
    required_count: int = 0
    variadic_types: tuple[type, ...] | None = None
    for parameter in parameters:
        annotation: object = hints.get(parameter.name, parameter.annotation)
        if parameter.kind in _POSITIONAL_KINDS:
            parameter_types.append(normalize_annotation(annotation))
            if parameter.default is inspect.Parameter.empty:
                required_count += 1
        elif parameter.kind == inspect.Parameter.VAR_POSITIONAL:
            variadic_types = normalize_annotation(annotation)
        elif parameter.kind == inspect.Parameter.KEYWORD_ONLY and parameter.default is inspect.Parameter.empty:
            return None

    if dispatch_type is not None and dispatch_type is not object and len(parameter_types) > 0:
        parameter_types[0] = (dispatch_type,)

    return_annotation: object = hints.get("return", signature.return_annotation)
    return MethodMember(
        name,
        attr_name,
        owner,
        binding,
        target,
        tuple(parameter_types),
        required_count,
        variadic_types,
        return_annotation,
    )


def _dispatch_members(owner: type, attr_name: str, raw: functools.singledispatchmethod) -> list[MethodMember]:
    """Expand a ``singledispatchmethod`` into one descriptor per registration.

    The fallback implementation registered for ``object`` comes last.

    :param owner: Declaring class.
    :param attr_name: Storage name.
    :param raw: Dispatch method.
    :returns: Descriptors, or an empty list when a registration is not a plain function.
    """
    registry: typing.Mapping[type, object] = raw.dispatcher.registry
    ordered: list[tuple[type, object]] = [(key, value) for key, value in registry.items() if key is not object]
    fallback: object = registry.get(object)
    if fallback is not None:
        ordered.append((object, fallback))

    members: list[MethodMember] = []
    for dispatch_type, implementation in ordered:
        if inspect.isfunction(implementation) is False:
            return []
        member: MethodMember | None = _describe_routine(
            owner, attr_name, implementation, "instance", implementation, dispatch_type
        )
        if member is not None:
            members.append(member)
    return members


def _routine_members(owner: type, attr_name: str, raw: object) -> list[MethodMember]:
    """Describe one class-namespace routine, expanding dispatch registrations."""
    if isinstance(raw, functools.singledispatchmethod) is True:
        expanded: list[MethodMember] = _dispatch_members(owner, attr_name, raw)
        if len(expanded) > 0:
            return expanded
    binding, function = _binding_of(raw)
    member: MethodMember | None = _describe_routine(owner, attr_name, raw, binding, function)
    if member is None:
        return []
    return [member]


def declared_methods(owner: type) -> list[MethodMember]:
    """List the methods declared directly on ``owner``, in declaration order.

    :param owner: Class to inspect.
    :returns: Method descriptors; constructors are excluded.
    """
    members: list[MethodMember] = []
    for attr_name, raw in list(owner.__dict__.items()):
        if attr_name in _CONSTRUCTOR_NAMES:
            continue
        if is_method_like(raw) is False:
            continue
        members.extend(_routine_members(owner, attr_name, raw))
    return members


def _first_declared(owner_type: type, attr_name: str) -> tuple[type, object] | None:
    """Return the nearest class declaring ``attr_name`` below ``object``, with its raw value."""
    for cls in mro_chain(owner_type):
        if cls is object:
            return None
        raw: object = cls.__dict__.get(attr_name)
        if raw is not None:
            return cls, raw
    return None


def constructor_members(owner_type: type) -> list[MethodMember]:
    """List the constructor signatures of ``owner_type``.

    The effective ``__init__`` wins over ``__new__``; a class defining
    neither takes no arguments.

    :param owner_type: Class to construct.
    :returns: Constructor descriptors in declaration order.
    """
    for attr_name in ("__init__", "__new__"):
        found: tuple[type, object] | None = _first_declared(owner_type, attr_name)
        if found is None:
            continue
        declaring, raw = found
        if isinstance(raw, functools.singledispatchmethod) is True:
            expanded: list[MethodMember] = _dispatch_members(declaring, attr_name, raw)
            if len(expanded) > 0:
                return expanded
        function: object = raw
        if isinstance(raw, staticmethod) is True:
            function = raw.__func__
        member: MethodMember | None = _describe_routine(declaring, attr_name, raw, "instance", function)
        if member is None:
            return []
        return [member]
    return [MethodMember("__init__", "__init__", owner_type, "instance", object.__init__, (), 0, None, None)]


def is_contract(candidate: object) -> bool:
    """Report whether ``candidate`` is a contract type.

    Protocol classes and classes built on ``abc.ABCMeta`` are contracts.

    :param candidate: Candidate type.
    :returns: ``True`` for contract types.
    """
    if isinstance(candidate, type) is False:
        return False
    if getattr(candidate, "_is_protocol", False) is True:
        return True
    return isinstance(candidate, abc.ABCMeta)


def describe_routine(owner: type, attr_name: str, raw: object) -> MethodMember | None:
    """Describe one class-body routine as a method descriptor.

    :param owner: Declaring class.
    :param attr_name: Storage name in the class namespace.
    :param raw: Value stored in the class namespace.
    :returns: Method descriptor, or ``None`` when the routine needs keyword-only arguments.
    """
    binding, function = _binding_of(raw)
    return _describe_routine(owner, attr_name, raw, binding, function)
