"""Append-only journal of the calls observed by one mock."""

from __future__ import annotations

import dataclasses as dc
import typing as t

from .matchers import args_match, describe_args

_REPR_FIELD_LIMIT: t.Final[int] = 256


def _shorten(text: str, limit: int = _REPR_FIELD_LIMIT) -> str:
    if len(text) <= limit:
        return text
    return f"{text[: limit - 1]}…"


@dc.dataclass(frozen=True, slots=True)
class Invocation:
    """One observed call: the member signature and its positional arguments."""

    signature: str
    args: tuple[t.Any, ...] = ()

    def matches(
        self,
        signature: str,
        expected_args: t.Sequence[object],
        ignored: t.Container[int] = frozenset(),
    ) -> bool:
        """Return ``True`` if this call satisfies *signature* and *expected_args*."""
        return self.signature == signature and args_match(
            expected_args, self.args, ignored
        )

    def __str__(self) -> str:
        """Render the call like source code."""
        return _shorten(f"{self.signature}({describe_args(self.args)})")


class InvocationLog:
    """Ordered record of invocations plus which of them have been verified."""

    def __init__(self) -> None:
        self._entries: list[Invocation] = []
        self._verified: set[int] = set()

    def append(self, signature: str, args: t.Iterable[object] = ()) -> Invocation:
        """Record a call and return its :class:`Invocation`."""
        invocation = Invocation(signature, tuple(args))
        self._entries.append(invocation)
        return invocation

    def matching(
        self,
        signature: str,
        expected_args: t.Sequence[object],
        ignored: t.Container[int] = frozenset(),
    ) -> list[Invocation]:
        """Return the entries satisfying *signature* and *expected_args*."""
        return [
            inv
            for inv in self._entries
            if inv.matches(signature, expected_args, ignored)
        ]

    def mark_verified(
        self,
        signature: str,
        expected_args: t.Sequence[object],
        ignored: t.Container[int] = frozenset(),
    ) -> None:
        """Flag every entry matching the request as verified."""
        for index, inv in enumerate(self._entries):
            if inv.matches(signature, expected_args, ignored):
                self._verified.add(index)

    def unverified(self) -> list[Invocation]:
        """Return entries no verification has accounted for."""
        return [
            inv
            for index, inv in enumerate(self._entries)
            if index not in self._verified
        ]

    def clear(self) -> None:
        """Forget every recorded call."""
        self._entries.clear()
        self._verified.clear()

    def __iter__(self) -> t.Iterator[Invocation]:
        """Iterate over entries in call order."""
        return iter(list(self._entries))

    def __len__(self) -> int:
        """Return the number of recorded calls."""
        return len(self._entries)

    def __getitem__(self, index: int) -> Invocation:
        """Return the entry at *index*."""
        return self._entries[index]


__all__ = ["Invocation", "InvocationLog"]
