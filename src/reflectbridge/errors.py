"""Custom error types for reflectbridge."""


def _type_label(type_object: object) -> str:
    """Build a readable dotted label for a type or marker.

    :param type_object: Type object.
    :returns: ``module.qualname`` for classes, ``repr`` otherwise.
    """
    if isinstance(type_object, type) is False:
        return repr(type_object)
    module_name: str = type_object.__module__
    qualname: str = type_object.__qualname__
    if module_name == "builtins":
        return qualname
    return f"{module_name}.{qualname}"


class ReflectionError(Exception):
    """Base class for all reflection failures.

    Every failure raised while reading, writing, calling, constructing,
    projecting or bridging is an instance of this type. When another
    exception caused the failure it is chained as ``__cause__``.
    """


class MemberNotFoundError(ReflectionError):
    """Raised when no field of the requested name exists in the type chain."""

    member_name: str
    owner_type: type

    def __init__(self, member_name: str, owner_type: type) -> None:
        """Initialize a missing-member error.

        :param member_name: Requested field name.
        :param owner_type: Type whose chain was searched.
        """
        self.member_name = member_name
        self.owner_type = owner_type
        super().__init__(f"No field {member_name!r} on type {_type_label(owner_type)} or its ancestors")


class NoMatchingMethodError(ReflectionError):
    """Raised when no method survives any of the resolution tiers."""

    member_name: str
    argument_types: tuple[type, ...]
    owner_type: type

    def __init__(self, member_name: str, argument_types: tuple[type, ...], owner_type: type) -> None:
        """Initialize a method resolution error.

        :param member_name: Requested method name.
        :param argument_types: Argument types derived from the call site.
        :param owner_type: Receiver type.
        """
        self.member_name = member_name
        self.argument_types = argument_types
        self.owner_type = owner_type
        rendered: str = ", ".join(_type_label(item) for item in argument_types)
        super().__init__(
            f"No method {member_name!r} with params [{rendered}] "
            + f"could be found on type {_type_label(owner_type)}"
        )


class NoMatchingConstructorError(ReflectionError):
    """Raised when no constructor accepts the derived argument types."""

    argument_types: tuple[type, ...]
    owner_type: type

    def __init__(self, argument_types: tuple[type, ...], owner_type: type) -> None:
        """Initialize a constructor resolution error.

        :param argument_types: Argument types derived from the call site.
        :param owner_type: Type being constructed.
        """
        self.argument_types = argument_types
        self.owner_type = owner_type
        rendered: str = ", ".join(_type_label(item) for item in argument_types)
        super().__init__(f"No constructor of {_type_label(owner_type)} accepts params [{rendered}]")


class InvocationError(ReflectionError):
    """Raised when a resolved member raised while being used."""


class TypeLoadingError(ReflectionError):
    """Raised when a type cannot be resolved by name."""

    type_name: str

    def __init__(self, type_name: str, reason: str = "") -> None:
        """Initialize a type loading error.

        :param type_name: Requested type name.
        :param reason: Optional extra detail.
        """
        self.type_name = type_name
        message: str = f"Could not load type {type_name!r}"
        if len(reason) > 0:
            message = f"{message}: {reason}"
        super().__init__(message)
