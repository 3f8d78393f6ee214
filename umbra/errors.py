"""Exception hierarchy raised by the mocking engine."""

from __future__ import annotations

import typing as t


class UmbraError(Exception):
    """Base class for all errors raised by umbra itself."""


class MockError(UmbraError):
    """A mock refused a call or a verification did not hold."""


class UnmatchedCallError(MockError):
    """A strict mock received a call that no setup matches."""

    def __init__(self, signature: str, args: t.Sequence[object] = ()) -> None:
        self.signature = signature
        self.args_observed = tuple(args)
        rendered = ", ".join(repr(arg) for arg in self.args_observed)
        super().__init__(
            f"[Strict Mode] Call to '{signature}({rendered})' was not setup."
        )


class SequenceViolationError(MockError):
    """A call bound to a :class:`~umbra.sequence.MockSequence` ran out of order."""

    def __init__(self, signature: str, expected_step: int, actual_step: int) -> None:
        self.signature = signature
        self.expected_step = expected_step
        self.actual_step = actual_step
        super().__init__(
            f"Method '{signature}' invoked out of sequence. "
            f"Expected step {expected_step}, but method is at step {actual_step}."
        )


class VerificationError(MockError):
    """Observed calls did not satisfy a verification request."""

    def __init__(
        self,
        message: str,
        *,
        expected: str | None = None,
        actual: int | None = None,
    ) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(message)


class NotAMockError(UmbraError, TypeError):
    """An operation that needs a mock received some other object."""

    DEFAULT_MESSAGE: t.ClassVar[str] = "Object is not an umbra mock"

    def __init__(self, obj: object | None = None) -> None:
        self.obj = obj
        if obj is None:
            super().__init__(self.DEFAULT_MESSAGE)
        else:
            super().__init__(f"{self.DEFAULT_MESSAGE}: {type(obj).__name__}")


__all__ = [
    "MockError",
    "NotAMockError",
    "SequenceViolationError",
    "UmbraError",
    "UnmatchedCallError",
    "VerificationError",
]
