"""Public package API for reflectbridge."""

from loguru import logger

from reflectbridge.api import bridge
from reflectbridge.api import on
from reflectbridge.api import on_class
from reflectbridge.boundary import ModuleBoundary
from reflectbridge.errors import InvocationError
from reflectbridge.errors import MemberNotFoundError
from reflectbridge.errors import NoMatchingConstructorError
from reflectbridge.errors import NoMatchingMethodError
from reflectbridge.errors import ReflectionError
from reflectbridge.errors import TypeLoadingError
from reflectbridge.reflect import Reflect
from reflectbridge.signatures import NULL

logger.disable("reflectbridge")

__all__: list[str] = [
    "bridge",
    "on",
    "on_class",
    "ModuleBoundary",
    "NULL",
    "Reflect",
    "InvocationError",
    "MemberNotFoundError",
    "NoMatchingConstructorError",
    "NoMatchingMethodError",
    "ReflectionError",
    "TypeLoadingError",
]
