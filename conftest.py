"""Global test configuration and shared fixtures."""

from __future__ import annotations

import typing as t

import pytest

from umbra.defaults import MockDefaultValueProvider

pytest_plugins = ("umbra.pytest_plugin",)


@pytest.fixture(autouse=True)
def restore_mock_factories() -> t.Generator[None, None, None]:
    """Undo recursive-mock factory registrations made during a test."""
    saved = dict(MockDefaultValueProvider._factories)  # noqa: SLF001
    yield
    MockDefaultValueProvider._factories.clear()  # noqa: SLF001
    MockDefaultValueProvider._factories.update(saved)  # noqa: SLF001
