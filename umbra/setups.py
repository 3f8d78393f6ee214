"""Configured behaviours ("setups") and the registry that matches calls to them."""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as t

from .matchers import args_match, describe_args

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from .sequence import MockSequence

logger = logging.getLogger(__name__)

ExceptionLike: t.TypeAlias = BaseException | type[BaseException]

# Returned by MockHandler.invoke when a partial mock should run the real member.
CALL_BASE: t.Final[object] = object()


@dc.dataclass(frozen=True, slots=True)
class Static:
    """Always produce ``value``."""

    value: t.Any = None

    def produce(self, args: t.Sequence[t.Any]) -> t.Any:
        """Return the stored value."""
        return self.value


@dc.dataclass(frozen=True, slots=True)
class Factory:
    """Compute a value from the observed arguments."""

    func: t.Callable[..., t.Any]

    def produce(self, args: t.Sequence[t.Any]) -> t.Any:
        """Call ``func`` with the observed arguments."""
        return self.func(*args)


@dc.dataclass(frozen=True, slots=True)
class SequenceThrow:
    """Marks a slot of a :class:`Sequential` result that raises instead."""

    exception: ExceptionLike


@dc.dataclass(slots=True)
class Sequential:
    """Hand out ``values`` one per call, repeating the last one forever."""

    values: list[t.Any] = dc.field(default_factory=list)
    cursor: int = 0

    def produce(self, args: t.Sequence[t.Any]) -> t.Any:
        """Return the current slot and advance, clamped at the last slot."""
        if not self.values:
            return None
        value = self.values[self.cursor]
        if self.cursor < len(self.values) - 1:
            self.cursor += 1
        if isinstance(value, SequenceThrow):
            raise value.exception
        return value


ResultStrategy: t.TypeAlias = Static | Factory | Sequential
RefOutValue: t.TypeAlias = Static | Factory


@dc.dataclass(slots=True, eq=False)
class Setup:
    """One configured behaviour for a signature.

    Every configuration method overwrites its own slot and returns the setup
    so calls can be chained.
    """

    signature: str
    expected_args: tuple[t.Any, ...] = ()
    strategy: ResultStrategy = dc.field(default_factory=Static)
    action: t.Callable[..., t.Any] | None = None
    exception: ExceptionLike | None = None
    event: str | None = None
    event_args: tuple[t.Any, ...] = ()
    sequence: MockSequence | None = None
    sequence_step: int = -1
    out_values: dict[int, RefOutValue] = dc.field(default_factory=dict)
    ref_values: dict[int, RefOutValue] = dc.field(default_factory=dict)
    ref_out_callback: t.Callable[[list[t.Any]], t.Any] | None = None
    ref_out_indices: set[int] = dc.field(default_factory=set)
    is_verifiable: bool = False
    call_count: int = 0

    # ------------------------------------------------------------------
    # Result strategy
    # ------------------------------------------------------------------
    def returns(self, value: t.Any) -> Setup:
        """Return ``value`` on every matching call."""
        self.strategy = Static(value)
        return self

    def returns_using(self, func: t.Callable[..., t.Any]) -> Setup:
        """Return ``func(*args)`` on every matching call."""
        self.strategy = Factory(func)
        return self

    def returns_in_order(self, *values: t.Any) -> Setup:
        """Return ``values`` one per call, then keep returning the last."""
        self.strategy = Sequential(list(values))
        return self

    def throws(self, exception: ExceptionLike) -> Setup:
        """Raise ``exception`` on every matching call, whatever the strategy."""
        self.exception = exception
        return self

    # ------------------------------------------------------------------
    # Side effects
    # ------------------------------------------------------------------
    def callback(self, func: t.Callable[..., t.Any]) -> Setup:
        """Run ``func(*args)`` on every matching call, before the result."""
        self.action = func
        return self

    def raises(self, event: str, *args: t.Any) -> Setup:
        """Raise ``event`` with ``args`` on every matching call."""
        self.event = event
        self.event_args = args
        return self

    def in_sequence(self, sequence: MockSequence) -> Setup:
        """Bind this setup to the next step of ``sequence``."""
        self.sequence = sequence
        self.sequence_step = sequence.register_step()
        return self

    def verifiable(self) -> Setup:
        """Require at least one call when the mock's ``verify()`` runs."""
        self.is_verifiable = True
        return self

    # ------------------------------------------------------------------
    # Ref/out parameters
    # ------------------------------------------------------------------
    def out_value(self, index: int, value: t.Any) -> Setup:
        """Write ``value`` to output parameter ``index``."""
        return self._set_ref_out(self.out_values, index, Static(value))

    def out_value_func(self, index: int, func: t.Callable[..., t.Any]) -> Setup:
        """Write ``func(*args)`` to output parameter ``index``."""
        return self._set_ref_out(self.out_values, index, Factory(func))

    def ref_value(self, index: int, value: t.Any) -> Setup:
        """Write ``value`` back to by-reference parameter ``index``."""
        return self._set_ref_out(self.ref_values, index, Static(value))

    def ref_value_func(self, index: int, func: t.Callable[..., t.Any]) -> Setup:
        """Write ``func(*args)`` back to by-reference parameter ``index``."""
        return self._set_ref_out(self.ref_values, index, Factory(func))

    def callback_ref_out(
        self, func: t.Callable[[list[t.Any]], t.Any], *indices: int
    ) -> Setup:
        """Let ``func`` fill by-reference parameters itself.

        ``func`` receives the argument list, may assign into it, and its
        return value becomes the call's result. ``indices`` name the
        by-reference parameters; they are ignored when matching.
        """
        self.ref_out_callback = func
        self.ref_out_indices.update(indices)
        return self

    def _set_ref_out(
        self, slots: dict[int, RefOutValue], index: int, value: RefOutValue
    ) -> Setup:
        if index < 0 or index >= len(self.expected_args):
            msg = (
                f"parameter index {index} out of range for "
                f"{self.signature!r} with {len(self.expected_args)} argument(s)"
            )
            raise IndexError(msg)
        slots[index] = value
        self.ref_out_indices.add(index)
        return self

    @property
    def has_ref_out(self) -> bool:
        """Return ``True`` when the caller must resolve ref/out writes."""
        return bool(
            self.out_values or self.ref_values or self.ref_out_callback is not None
        )

    # ------------------------------------------------------------------
    # Matching and resolution
    # ------------------------------------------------------------------
    def matches(self, signature: str, args: t.Sequence[t.Any]) -> bool:
        """Return ``True`` if a call to *signature* with *args* selects this setup."""
        return signature == self.signature and args_match(
            self.expected_args, args, self.ref_out_indices
        )

    def result_for(self, args: t.Sequence[t.Any]) -> t.Any:
        """Compute the value a matching call returns.

        The exception override wins over every strategy.
        """
        if self.exception is not None:
            raise self.exception
        return self.strategy.produce(args)

    def ref_out_values(self, args: t.Sequence[t.Any]) -> dict[int, t.Any]:
        """Return the values to write to each ref/out parameter."""
        values: dict[int, t.Any] = {}
        for slots in (self.ref_values, self.out_values):
            for index, slot in slots.items():
                values[index] = slot.produce(args)
        return values

    def resolve_by_ref(self, args: list[t.Any]) -> t.Any:
        """Write ref/out values into *args* in place and return the result.

        A by-reference callback, when configured, takes over both jobs.
        """
        if self.ref_out_callback is not None:
            return self.ref_out_callback(args)
        for index, value in self.ref_out_values(args).items():
            args[index] = value
        return self.result_for(args)

    def describe(self) -> str:
        """Render the setup like a call."""
        return f"{self.signature}({describe_args(self.expected_args)})"


class SequenceSetup:
    """Builder behind ``setup_sequence``: each call appends one result slot."""

    def __init__(self, setup: Setup) -> None:
        self.setup = setup
        self._sequential = Sequential()
        setup.strategy = self._sequential

    def returns(self, value: t.Any) -> SequenceSetup:
        """Append ``value`` as the next result."""
        self._sequential.values.append(value)
        return self

    def throws(self, exception: ExceptionLike) -> SequenceSetup:
        """Append a slot that raises ``exception``."""
        self._sequential.values.append(SequenceThrow(exception))
        return self


class SetupRegistry:
    """Ordered setups for one mock.

    When several setups match a call, the most recently added one wins, so a
    later setup overrides an earlier one.
    """

    def __init__(self) -> None:
        self._setups: list[Setup] = []

    def add(self, signature: str, expected_args: t.Iterable[t.Any] = ()) -> Setup:
        """Register and return a new setup returning ``None``."""
        setup = Setup(signature, tuple(expected_args))
        self._setups.append(setup)
        logger.debug("Registered setup %s", setup.describe())
        return setup

    def find_match(self, signature: str, args: t.Sequence[t.Any]) -> Setup | None:
        """Return the last registered setup matching the call, if any."""
        for setup in reversed(self._setups):
            if setup.matches(signature, args):
                return setup
        return None

    def uncalled(self, *, verifiable_only: bool = False) -> list[Setup]:
        """Return setups never matched, optionally only verifiable ones."""
        return [
            setup
            for setup in self._setups
            if setup.call_count == 0 and (setup.is_verifiable or not verifiable_only)
        ]

    def reset_counts(self) -> None:
        """Zero every setup's call counter."""
        for setup in self._setups:
            setup.call_count = 0

    def clear(self) -> None:
        """Drop every setup."""
        self._setups.clear()

    def __iter__(self) -> t.Iterator[Setup]:
        """Iterate in registration order."""
        return iter(list(self._setups))

    def __len__(self) -> int:
        """Return the number of setups."""
        return len(self._setups)


__all__ = [
    "CALL_BASE",
    "Factory",
    "RefOutValue",
    "ResultStrategy",
    "SequenceSetup",
    "SequenceThrow",
    "Sequential",
    "Setup",
    "SetupRegistry",
    "Static",
]
