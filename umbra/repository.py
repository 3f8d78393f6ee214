"""Groups of mocks created with shared settings and verified together."""

from __future__ import annotations

import logging
import typing as t

from .defaults import DefaultValue
from .handler import MockBehavior
from .mock import Mocked, handler_of

logger = logging.getLogger(__name__)

M = t.TypeVar("M", bound=Mocked)


class MockRepository:
    """Create and track mocks so they can be verified or reset in one call."""

    def __init__(
        self,
        behavior: MockBehavior = MockBehavior.LOOSE,
        default_value: DefaultValue = DefaultValue.EMPTY,
    ) -> None:
        self.behavior = MockBehavior(behavior)
        self.default_value = DefaultValue(default_value)
        self._mocks: list[object] = []

    @property
    def mocks(self) -> list[object]:
        """Return the registered mocks in registration order."""
        return list(self._mocks)

    def create(
        self,
        mock_type: type[M],
        behavior: MockBehavior | None = None,
        default_value: DefaultValue | None = None,
    ) -> M:
        """Instantiate *mock_type* with the repository defaults and register it."""
        mock = mock_type(
            behavior if behavior is not None else self.behavior,
            default_value if default_value is not None else self.default_value,
        )
        self.register(mock)
        return mock

    def register(self, mock: object) -> None:
        """Track *mock*; registering the same mock twice has no effect."""
        handler_of(mock)
        if any(existing is mock for existing in self._mocks):
            return
        self._mocks.append(mock)
        logger.debug("Registered %s with repository", type(mock).__name__)

    def verify(self) -> None:
        """Run ``verify_verifiable`` on every mock."""
        for mock in self._mocks:
            handler_of(mock).verify_verifiable()

    def verify_all(self) -> None:
        """Run ``verify_all`` on every mock."""
        for mock in self._mocks:
            handler_of(mock).verify_all()

    def verify_no_other_calls(self) -> None:
        """Run ``verify_no_other_calls`` on every mock."""
        for mock in self._mocks:
            handler_of(mock).verify_no_other_calls()

    def reset(self) -> None:
        """Reset every mock."""
        for mock in self._mocks:
            handler_of(mock).reset()

    def reset_calls(self) -> None:
        """Reset recorded calls on every mock."""
        for mock in self._mocks:
            handler_of(mock).reset_calls()


__all__ = ["MockRepository"]
