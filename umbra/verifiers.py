"""Post-hoc verification of the calls recorded by a mock."""

from __future__ import annotations

import typing as t
from textwrap import indent

from ._validators import validate_call_count
from .errors import VerificationError
from .matchers import describe_args

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from .journal import Invocation, InvocationLog
    from .setups import Setup, SetupRegistry


class Times:
    """Closed interval ``[minimum, maximum]`` of acceptable call counts.

    ``maximum`` is ``None`` when the interval is unbounded.
    """

    __slots__ = ("description", "maximum", "minimum")

    def __init__(self, minimum: int, maximum: int | None, description: str) -> None:
        validate_call_count(minimum, "minimum")
        if maximum is not None:
            validate_call_count(maximum, "maximum")
            if maximum < minimum:
                msg = f"maximum ({maximum}) must be >= minimum ({minimum})"
                raise ValueError(msg)
        self.minimum = minimum
        self.maximum = maximum
        self.description = description

    @classmethod
    def never(cls) -> Times:
        """Expect no calls."""
        return cls(0, 0, "exactly 0")

    @classmethod
    def once(cls) -> Times:
        """Expect exactly one call."""
        return cls(1, 1, "exactly 1")

    @classmethod
    def exactly(cls, count: int) -> Times:
        """Expect exactly ``count`` calls."""
        return cls(count, count, f"exactly {count}")

    @classmethod
    def at_least(cls, count: int) -> Times:
        """Expect ``count`` calls or more."""
        return cls(count, None, f"at least {count}")

    @classmethod
    def at_least_once(cls) -> Times:
        """Expect one call or more."""
        return cls.at_least(1)

    @classmethod
    def at_most(cls, count: int) -> Times:
        """Expect no more than ``count`` calls."""
        return cls(0, count, f"at most {count}")

    @classmethod
    def at_most_once(cls) -> Times:
        """Expect zero or one call."""
        return cls.at_most(1)

    @classmethod
    def between(cls, low: int, high: int) -> Times:
        """Expect between ``low`` and ``high`` calls, both inclusive."""
        return cls(low, high, f"between {low} and {high}")

    def validate(self, count: int) -> bool:
        """Return ``True`` when ``count`` lies within the interval."""
        if count < self.minimum:
            return False
        return self.maximum is None or count <= self.maximum

    def __eq__(self, other: object) -> bool:
        """Compare intervals, ignoring descriptions."""
        if not isinstance(other, Times):
            return NotImplemented
        return (self.minimum, self.maximum) == (other.minimum, other.maximum)

    def __hash__(self) -> int:
        """Hash the interval bounds."""
        return hash((self.minimum, self.maximum))

    def __repr__(self) -> str:
        """Return a debug representation."""
        return f"Times({self.description})"


def _format_call(signature: str, args: t.Sequence[object]) -> str:
    return f"{signature}({describe_args(args)})"


def _describe_invocations(invocations: t.Sequence[Invocation]) -> str:
    if not invocations:
        return "(none)"
    return "\n".join(str(inv) for inv in invocations)


def _format_sections(title: str, sections: list[tuple[str, str]]) -> str:
    parts = [title]
    for label, body in sections:
        if not body:
            continue
        parts.append("")
        parts.append(f"{label}:")
        parts.append(indent(body, "  "))
    return "\n".join(parts)


class CallCountVerifier:
    """Check how often a call shape appears in an :class:`InvocationLog`."""

    def __init__(self, log: InvocationLog) -> None:
        self._log = log

    def verify(
        self,
        signature: str,
        expected_args: t.Sequence[object],
        times: Times,
        ignored: t.Container[int] = frozenset(),
    ) -> int:
        """Raise unless the number of matching calls satisfies *times*.

        Returns the count and marks the matching calls verified.
        """
        matching = self._log.matching(signature, expected_args, ignored)
        actual = len(matching)
        if not times.validate(actual):
            msg = _format_sections(
                f"Verification failed: Expected {times.description} call(s) to "
                f"'{signature}', but was called {actual} time(s).",
                [
                    ("Expected", _format_call(signature, expected_args)),
                    ("Observed calls", f"{actual} (expected {times.description})"),
                    ("Recorded invocations", _describe_invocations(list(self._log))),
                ],
            )
            raise VerificationError(msg, expected=times.description, actual=actual)
        self._log.mark_verified(signature, expected_args, ignored)
        return actual


class SetupUsageVerifier:
    """Check that setups were exercised."""

    def __init__(self, setups: SetupRegistry) -> None:
        self._setups = setups

    def verify(self, *, verifiable_only: bool) -> None:
        """Raise if a (verifiable) setup was never called."""
        missing = self._setups.uncalled(verifiable_only=verifiable_only)
        if not missing:
            return
        first = missing[0]
        headline = (
            f"Verification failed: Expected setup for '{first.signature}' "
            "to be called, but it was not."
            if verifiable_only
            else "Verification failed: Expected all setups to be called, "
            f"but '{first.signature}' was not."
        )
        msg = _format_sections(
            headline,
            [("Uncalled setups", _describe_setups(missing))],
        )
        raise VerificationError(msg, expected="at least 1", actual=0)


def _describe_setups(setups: t.Sequence[Setup]) -> str:
    return "\n".join(setup.describe() for setup in setups)


class NoOtherCallsVerifier:
    """Check that every recorded call was accounted for by a verification."""

    def __init__(self, log: InvocationLog) -> None:
        self._log = log

    def verify(self) -> None:
        """Raise if any recorded call was never verified."""
        unverified = self._log.unverified()
        if not unverified:
            return
        msg = _format_sections(
            "Verification failed: Expected no other calls, but found "
            f"{len(unverified)} unverified call(s). "
            f"First unverified call: '{unverified[0].signature}'.",
            [("Unverified calls", _describe_invocations(unverified))],
        )
        raise VerificationError(msg, expected="exactly 0", actual=len(unverified))


__all__ = [
    "CallCountVerifier",
    "NoOtherCallsVerifier",
    "SetupUsageVerifier",
    "Times",
]
