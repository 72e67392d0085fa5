"""User-facing API entrypoints for reflectbridge."""

from reflectbridge.bridge import build_bridge
from reflectbridge.reflect import Reflect
from reflectbridge.reflect import load_type
from reflectbridge.reflect import wrap_object
from reflectbridge.reflect import wrap_type


def on(value: object) -> Reflect:
    """Wrap a value for name-addressed access to its instance members.

    :param value: Any value, including ``None``.
    :returns: Wrapped value.
    """
    return wrap_object(value)


def on_class(type_or_name: type | str, loader: object = None) -> Reflect:
    """Wrap a class for access to its class-level members and constructors.

    :param type_or_name: Class object, or a ``module.path:Qualname`` / dotted class name.
    :param loader: Loading context for names: ``importlib`` by default, or a ``ModuleBoundary``.
    :returns: Type-only wrapped value.
    :raises TypeLoadingError: If a class name cannot be resolved.
    """
    if isinstance(type_or_name, str) is True:
        return wrap_type(load_type(type_or_name, loader))  # type: ignore[arg-type]
    return wrap_type(type_or_name)  # type: ignore[arg-type]


def bridge(contract: type, foreign: object) -> object:
    """Expose a value from another loading boundary as a local contract.

    :param contract: Local contract class.
    :param foreign: Value whose class was loaded behind another boundary.
    :returns: ``foreign`` when its class is ``contract``, else a relaying bridge.
    """
    return build_bridge(contract, foreign)
