"""Package resolved through relative imports inside a boundary."""

from .registry import COMMANDS
