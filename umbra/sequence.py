"""Cross-mock call ordering."""

from __future__ import annotations

import logging
import threading

from .errors import SequenceViolationError

logger = logging.getLogger(__name__)


class MockSequence:
    """Shared token imposing one total order on the setups bound to it.

    Setups bind in the order they must run: the first bound gets step 0, the
    next step 1, and so on, whichever mock they belong to. Both counters are
    guarded by a lock so binding and recording may race across threads.
    """

    def __init__(self) -> None:
        self._next_step_to_assign = 0
        self._next_step_expected = 0
        self._lock = threading.Lock()

    @property
    def current_step(self) -> int:
        """Return the step the next bound call must carry."""
        with self._lock:
            return self._next_step_expected

    @property
    def registered_steps(self) -> int:
        """Return how many setups have been bound so far."""
        with self._lock:
            return self._next_step_to_assign

    def register_step(self) -> int:
        """Reserve and return the next step number."""
        with self._lock:
            step = self._next_step_to_assign
            self._next_step_to_assign += 1
            return step

    def record(self, step: int, signature: str) -> None:
        """Accept a call at *step* or raise :class:`SequenceViolationError`."""
        with self._lock:
            expected = self._next_step_expected
            if step != expected:
                raise SequenceViolationError(signature, expected, step)
            self._next_step_expected += 1
        logger.debug("Sequence advanced past step %d (%s)", step, signature)

    def reset(self) -> None:
        """Expect step 0 again without forgetting bound setups."""
        with self._lock:
            self._next_step_expected = 0


__all__ = ["MockSequence"]
