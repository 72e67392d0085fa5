"""Tests for bridging values across loading boundaries."""

import sys
import types
from abc import ABC
from abc import abstractmethod
from pathlib import Path

import pytest

from reflectbridge import InvocationError
from reflectbridge import ModuleBoundary
from reflectbridge import NoMatchingMethodError
from reflectbridge import bridge

SHELL_DIR: Path = Path(__file__).parent / "fixtures" / "shell"


class Pingable(ABC):
    """Local contract the shell runtime does not implement."""

    @abstractmethod
    def ping(self) -> str: ...


class NumericProcessor(ABC):
    """Local contract whose parameter type differs from the runtime's."""

    @abstractmethod
    def create_session(self, owner: int) -> object: ...


class SealedSession(ABC):
    """Local contract that refuses to be implemented."""

    def __init_subclass__(cls, **kwargs: object) -> None:
        raise RuntimeError(f"{cls.__name__} cannot extend SealedSession")

    @abstractmethod
    def execute(self, command: str) -> object: ...


class SealedProcessor(ABC):
    """Local contract whose sessions cannot be bridged."""

    @abstractmethod
    def create_session(self, owner: str) -> SealedSession: ...


class LooseSession:
    """Session without annotations, defined on the local side."""

    def execute(self, command):
        return command.upper()

    def close(self):
        return None


def _two_sides() -> tuple[ModuleBoundary, types.ModuleType, object]:
    """Load the shell runtime on one side and its contracts on the other.

    :returns: Tuple of ``(foreign_boundary, local_api_module, foreign_processor)``.
    """
    foreign_side: ModuleBoundary = ModuleBoundary([SHELL_DIR])
    local_side: ModuleBoundary = ModuleBoundary([SHELL_DIR])
    processor_class: type = foreign_side.load_type("shell_runtime:ConsoleProcessor")
    local_api: types.ModuleType = local_side.import_module("shell_api")
    return foreign_side, local_api, processor_class()


def test_same_class_is_returned_unchanged() -> None:
    """Verify values already of the contract class are not wrapped."""
    foreign_side, _, foreign_processor = _two_sides()
    processor_class: type = foreign_side.load_type("shell_runtime:ConsoleProcessor")
    assert bridge(processor_class, foreign_processor) is foreign_processor


def test_foreign_processor_is_usable_through_local_contract() -> None:
    """Verify calls relay to the foreign value and results are bridged recursively."""
    _, local_api, foreign_processor = _two_sides()
    assert isinstance(foreign_processor, local_api.CommandProcessor) is False

    processor: object = bridge(local_api.CommandProcessor, foreign_processor)
    assert isinstance(processor, local_api.CommandProcessor) is True

    session: object = processor.create_session("ada")  # type: ignore[attr-defined]
    assert isinstance(session, local_api.CommandSession) is True
    assert session.owner == "ada"  # type: ignore[attr-defined]
    assert session.execute("ls") == "ada$ ls"  # type: ignore[attr-defined]
    assert session.close() is None  # type: ignore[attr-defined]

    foreign_session: object = foreign_processor.sessions[0]  # type: ignore[attr-defined]
    assert foreign_session.closed is True  # type: ignore[attr-defined]
    assert foreign_session.history == ["ls"]  # type: ignore[attr-defined]


def test_failed_recursive_bridge_returns_raw_result() -> None:
    """Verify a contract-typed result that cannot be bridged is returned as is."""
    _, _, foreign_processor = _two_sides()
    processor: SealedProcessor = bridge(SealedProcessor, foreign_processor)  # type: ignore[assignment]
    session: object = processor.create_session("ada")

    assert session is foreign_processor.sessions[0]  # type: ignore[attr-defined]
    assert type(session).__name__ == "ConsoleSession"
    assert isinstance(session, SealedSession) is False
    assert session.execute("ls") == "ada$ ls"  # type: ignore[attr-defined]


def test_foreign_failures_are_wrapped() -> None:
    """Verify exceptions raised by foreign routines are chained."""
    _, local_api, foreign_processor = _two_sides()
    processor: object = bridge(local_api.CommandProcessor, foreign_processor)
    session: object = processor.create_session("ada")  # type: ignore[attr-defined]
    with pytest.raises(InvocationError) as captured:
        session.execute("fail")  # type: ignore[attr-defined]
    assert isinstance(captured.value.__cause__, RuntimeError) is True


def test_missing_foreign_routine_is_reported() -> None:
    """Verify absent names and mismatched parameter types fail resolution."""
    _, _, foreign_processor = _two_sides()
    pingable: Pingable = bridge(Pingable, foreign_processor)  # type: ignore[assignment]
    with pytest.raises(NoMatchingMethodError) as captured:
        pingable.ping()
    assert "ping" in str(captured.value)

    numeric: NumericProcessor = bridge(NumericProcessor, foreign_processor)  # type: ignore[assignment]
    with pytest.raises(NoMatchingMethodError):
        numeric.create_session(1)


def test_unannotated_parameters_match_any_type() -> None:
    """Verify untyped foreign routines accept any contract parameter types."""
    _, local_api, _ = _two_sides()
    session: object = bridge(local_api.CommandSession, LooseSession())
    assert session.execute("ls") == "LS"  # type: ignore[attr-defined]
    with pytest.raises(InvocationError):
        session.owner  # type: ignore[attr-defined]


def test_bridge_rejects_none_and_non_contracts() -> None:
    """Verify bridging needs a value and a contract class."""
    with pytest.raises(TypeError):
        bridge(Pingable, None)
    with pytest.raises(TypeError):
        bridge(LooseSession, object())


def test_boundary_modules_stay_out_of_sys_modules() -> None:
    """Verify bridging never registers boundary modules globally."""
    _two_sides()
    runtime_loaded: bool = "shell_runtime" in sys.modules
    api_loaded: bool = "shell_api" in sys.modules
    assert runtime_loaded is False
    assert api_loaded is False
