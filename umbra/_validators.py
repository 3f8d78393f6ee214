"""Shared validation helpers."""

from __future__ import annotations

import math
import typing as t


def _require_real(value: float, name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int | float):
        msg = f"{name} must be a real number"
        raise TypeError(msg)


def validate_failure_rate(rate: float) -> None:
    """Ensure *rate* is a probability in ``[0, 1]``."""
    _require_real(rate, "failure_rate")
    if not (math.isfinite(rate) and 0.0 <= rate <= 1.0):
        msg = "failure_rate must be between 0.0 and 1.0"
        raise ValueError(msg)


def validate_non_negative_timeout(timeout_ms: int) -> None:
    """Ensure *timeout_ms* is a usable delay in milliseconds."""
    _require_real(timeout_ms, "timeout_ms")
    if not (timeout_ms >= 0 and math.isfinite(timeout_ms)):
        msg = "timeout_ms must be >= 0 and finite"
        raise ValueError(msg)


def validate_call_count(count: int, name: str = "count") -> None:
    """Ensure *count* is a non-negative integer call count."""
    if isinstance(count, bool) or not isinstance(count, int):
        msg = f"{name} must be an integer"
        raise TypeError(msg)
    if count < 0:
        msg = f"{name} must be >= 0"
        raise ValueError(msg)


def validate_exceptions(exceptions: t.Iterable[object]) -> None:
    """Ensure every entry of *exceptions* can be raised."""
    for entry in exceptions:
        raisable = isinstance(entry, BaseException) or (
            isinstance(entry, type) and issubclass(entry, BaseException)
        )
        if not raisable:
            msg = f"possible_exceptions entries must be exceptions, got {entry!r}"
            raise TypeError(msg)
