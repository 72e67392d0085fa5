"""Tests for library log output."""

from collections.abc import Iterator

import pytest
from loguru import logger

from reflectbridge import on
from tests.fixtures.reflect_targets import Derived


@pytest.fixture()
def captured_messages() -> Iterator[list[str]]:
    """Collect reflectbridge debug records while a test runs.

    :yields: List receiving formatted messages.
    """
    messages: list[str] = []
    handler_id: int = logger.add(messages.append, level="DEBUG", format="{message}")
    logger.enable("reflectbridge")
    try:
        yield messages
    finally:
        logger.disable("reflectbridge")
        logger.remove(handler_id)


def test_library_is_silent_by_default() -> None:
    """Verify records are dropped until the application enables the library."""
    messages: list[str] = []
    handler_id: int = logger.add(messages.append, level="DEBUG", format="{message}")
    try:
        on(Derived()).call_method("m", 3)
    finally:
        logger.remove(handler_id)
    assert messages == []


def test_resolution_is_logged_when_enabled(captured_messages: list[str]) -> None:
    """Verify the selected tier is reported at debug level."""
    on(Derived()).call_method("m", 3)
    resolved: list[str] = [message for message in captured_messages if "Resolved" in message]
    assert len(resolved) == 1
    assert "public exact" in resolved[0]
