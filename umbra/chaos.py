"""Seeded fault and latency injection for mocks.

A :class:`ChaosPolicy` describes how often calls should fail and how long they
should stall. :class:`ChaosEngine` applies one policy to every call on a mock
using its own :class:`random.Random`, so a seeded policy replays the same
accept/reject sequence on every run.

Statistics and RNG state are not locked: one mock, one thread.
"""

from __future__ import annotations

import dataclasses as dc
import logging
import random
import time
import typing as t

from ._validators import (
    validate_exceptions,
    validate_failure_rate,
    validate_non_negative_timeout,
)

logger = logging.getLogger(__name__)


@dc.dataclass(slots=True)
class ChaosPolicy:
    """How a mock should misbehave.

    Attributes
    ----------
    failure_rate:
        Probability in ``[0, 1]`` that a call triggers chaos.
    possible_exceptions:
        Exceptions to choose from when chaos triggers. When empty, triggers
        are counted but nothing is raised.
    timeout_ms:
        Delay applied to every call before the failure roll.
    seed:
        Seed for the policy's random generator. ``None`` seeds from the OS.
    """

    failure_rate: float = 0.0
    possible_exceptions: list[BaseException | type[BaseException]] = dc.field(
        default_factory=list
    )
    timeout_ms: int = 0
    seed: int | None = None

    def validate(self) -> None:
        """Raise ``ValueError``/``TypeError`` for unusable settings."""
        validate_failure_rate(self.failure_rate)
        validate_non_negative_timeout(self.timeout_ms)
        validate_exceptions(self.possible_exceptions)


@dc.dataclass(slots=True)
class ChaosStatistics:
    """Counters describing what chaos did so far."""

    total_invocations: int = 0
    chaos_triggered_count: int = 0
    timeout_triggered_count: int = 0

    @property
    def actual_failure_rate(self) -> float:
        """Return the share of calls that triggered chaos, 0.0 before any call."""
        if self.total_invocations == 0:
            return 0.0
        return self.chaos_triggered_count / self.total_invocations

    def reset(self) -> None:
        """Zero every counter."""
        self.total_invocations = 0
        self.chaos_triggered_count = 0
        self.timeout_triggered_count = 0


class ChaosEngine:
    """Apply a :class:`ChaosPolicy` to successive calls."""

    def __init__(
        self,
        policy: ChaosPolicy,
        statistics: ChaosStatistics | None = None,
        *,
        sleep: t.Callable[[float], None] = time.sleep,
    ) -> None:
        policy.validate()
        self.policy = policy
        self.statistics = statistics if statistics is not None else ChaosStatistics()
        self._rng = random.Random(policy.seed)  # noqa: S311 - not for cryptography
        self._sleep = sleep

    def roll(self) -> BaseException | type[BaseException] | None:
        """Advance the generator for one call.

        Returns the exception to raise, or ``None`` when the call proceeds.
        """
        stats = self.statistics
        stats.total_invocations += 1

        if self.policy.timeout_ms > 0:
            stats.timeout_triggered_count += 1
            logger.debug("Chaos delaying call by %d ms", self.policy.timeout_ms)
            self._sleep(self.policy.timeout_ms / 1000)

        if self._rng.random() >= self.policy.failure_rate:
            return None
        stats.chaos_triggered_count += 1
        exceptions = self.policy.possible_exceptions
        if not exceptions:
            logger.debug("Chaos triggered with no exceptions configured")
            return None
        chosen = exceptions[self._rng.randrange(len(exceptions))]
        logger.debug("Chaos triggered; raising %r", chosen)
        return chosen

    def apply(self) -> None:
        """Run :meth:`roll` and raise the chosen exception, if any."""
        exc = self.roll()
        if exc is not None:
            raise exc


__all__ = ["ChaosEngine", "ChaosPolicy", "ChaosStatistics"]
