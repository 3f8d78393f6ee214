"""The per-mock engine: setups, call resolution, bookkeeping and verification."""

from __future__ import annotations

import enum
import logging
import typing as t

from .chaos import ChaosEngine, ChaosPolicy, ChaosStatistics
from .defaults import DefaultValue, DefaultValueProvider, provider_for
from .errors import UnmatchedCallError
from .journal import InvocationLog
from .matchers import Any as AnyValue
from .setups import CALL_BASE, SequenceSetup, Setup, SetupRegistry
from .substrate import (
    ADD_PREFIX,
    GETTER_PREFIX,
    REMOVE_PREFIX,
    SETTER_PREFIX,
    EventHandler,
    EventRegistry,
    PropertyStore,
    adder,
    getter,
    remover,
    setter,
)
from .verifiers import (
    CallCountVerifier,
    NoOtherCallsVerifier,
    SetupUsageVerifier,
    Times,
)

logger = logging.getLogger(__name__)


class MockBehavior(enum.StrEnum):
    """What a mock does with calls no setup matches."""

    LOOSE = "LOOSE"
    STRICT = "STRICT"


class MockHandler:
    """Engine behind one mock instance.

    The substitute object forwards every member access to :meth:`invoke`
    using a signature string: the method name, ``get_X``/``set_X`` for
    properties and ``add_X``/``remove_X`` for events.
    """

    def __init__(
        self,
        behavior: MockBehavior = MockBehavior.LOOSE,
        default_value: DefaultValue = DefaultValue.EMPTY,
        *,
        call_base: bool = False,
    ) -> None:
        """Create a handler with no setups.

        Parameters
        ----------
        behavior:
            ``STRICT`` raises :class:`~umbra.errors.UnmatchedCallError` for
            calls no setup matches; ``LOOSE`` (the default) returns a default
            value instead.
        default_value:
            Strategy used by loose mocks to pick that default value.
        call_base:
            Return :data:`~umbra.setups.CALL_BASE` for unmatched calls whose
            member has a real implementation, so a partial mock can run it.
        """
        self.behavior = MockBehavior(behavior)
        self.call_base = call_base
        self.setups = SetupRegistry()
        self.invocations = InvocationLog()
        self.properties = PropertyStore()
        self.events = EventRegistry()
        self._returns_defaults: dict[t.Any, t.Any] = {}
        self._chaos: ChaosEngine | None = None
        self._chaos_stats: ChaosStatistics | None = None
        self._default_value = DefaultValue(default_value)
        self.default_value_provider: DefaultValueProvider = provider_for(
            self._default_value
        )

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------
    @property
    def default_value(self) -> DefaultValue:
        """Return the default-value strategy."""
        return self._default_value

    @default_value.setter
    def default_value(self, strategy: DefaultValue) -> None:
        self._default_value = DefaultValue(strategy)
        self.default_value_provider = provider_for(self._default_value)

    def setup(self, signature: str, *expected_args: t.Any) -> Setup:
        """Register a setup for calls to *signature* matching *expected_args*."""
        return self.setups.add(signature, expected_args)

    def setup_sequence(self, signature: str, *expected_args: t.Any) -> SequenceSetup:
        """Register a setup whose results are appended one call at a time."""
        return SequenceSetup(self.setups.add(signature, expected_args))

    def setup_property(self, name: str, initial: t.Any = None) -> None:
        """Track property *name* in backing storage, starting at *initial*."""
        self.properties.setup(name, initial)

    def setup_all_properties(self, names: t.Iterable[str]) -> None:
        """Track every property in *names* not already tracked."""
        for name in names:
            if not self.properties.has(name):
                self.properties.setup(name, None)

    def set_returns_default(self, return_type: t.Any, value: t.Any) -> None:
        """Return *value* for unmatched calls declared to return *return_type*."""
        self._returns_defaults[return_type] = value

    def chaos(
        self, policy: ChaosPolicy | t.Callable[[ChaosPolicy], None]
    ) -> ChaosPolicy:
        """Inject faults into every subsequent call.

        *policy* is either a :class:`ChaosPolicy` or a callable that
        configures a fresh one. Statistics carry over between policies.
        """
        if not isinstance(policy, ChaosPolicy):
            configure = policy
            policy = ChaosPolicy()
            configure(policy)
        self._chaos = ChaosEngine(policy, self.chaos_statistics)
        logger.debug("Chaos policy configured: %r", policy)
        return policy

    @property
    def chaos_statistics(self) -> ChaosStatistics:
        """Return the running chaos statistics."""
        if self._chaos_stats is None:
            self._chaos_stats = ChaosStatistics()
        return self._chaos_stats

    # ------------------------------------------------------------------
    # Call resolution
    # ------------------------------------------------------------------
    def invoke(
        self,
        signature: str,
        args: t.Sequence[t.Any] = (),
        return_type: t.Any = None,
        can_call_base: bool = False,
    ) -> t.Any:
        """Resolve one call and return its result.

        When the matched setup configures ref/out parameters, the setup
        itself is returned and the caller applies
        :meth:`~umbra.setups.Setup.resolve_by_ref`. Unmatched calls return
        :data:`~umbra.setups.CALL_BASE` when :attr:`call_base` is set and the
        caller passes *can_call_base*.
        """
        args = tuple(args)
        self.invocations.append(signature, args)

        if self._chaos is not None:
            self._chaos.apply()

        setup = self.setups.find_match(signature, args)
        if setup is None:
            return self._handle_unmatched(
                signature, args, return_type, can_call_base=can_call_base
            )

        if setup.sequence is not None:
            setup.sequence.record(setup.sequence_step, signature)

        setup.call_count += 1
        if setup.action is not None:
            setup.action(*args)

        if setup.event is not None:
            self.events.raise_event(setup.event, *setup.event_args)

        if setup.exception is not None:
            raise setup.exception

        if setup.has_ref_out:
            return setup

        return setup.result_for(args)

    def _handle_unmatched(
        self,
        signature: str,
        args: tuple[t.Any, ...],
        return_type: t.Any,
        *,
        can_call_base: bool,
    ) -> t.Any:
        handled, value = self._apply_substrate(signature, args)
        if handled:
            return value
        if self.call_base and can_call_base:
            logger.debug("No setup for %s; calling base implementation", signature)
            return CALL_BASE
        if self.behavior is MockBehavior.STRICT:
            raise UnmatchedCallError(signature, args)
        logger.debug("No setup for %s; returning default", signature)
        if return_type in self._returns_defaults:
            return self._returns_defaults[return_type]
        return self.default_value_provider.get_default_value(return_type)

    def _apply_substrate(
        self, signature: str, args: tuple[t.Any, ...]
    ) -> tuple[bool, t.Any]:
        """Serve tracked properties and event subscriptions."""
        if signature.startswith(GETTER_PREFIX) and not args:
            name = signature.removeprefix(GETTER_PREFIX)
            if self.properties.has(name):
                return True, self.properties.get(name)
        elif signature.startswith(SETTER_PREFIX) and len(args) == 1:
            name = signature.removeprefix(SETTER_PREFIX)
            if self.properties.has(name):
                self.properties.set(name, args[0])
                return True, None
        elif signature.startswith(ADD_PREFIX) and _is_handler(args):
            self.events.add(signature.removeprefix(ADD_PREFIX), args[0])
            return True, None
        elif signature.startswith(REMOVE_PREFIX) and _is_handler(args):
            self.events.remove(signature.removeprefix(REMOVE_PREFIX), args[0])
            return True, None
        return False, None

    # ------------------------------------------------------------------
    # Property and event access
    # ------------------------------------------------------------------
    def get_property(self, name: str, return_type: t.Any = None) -> t.Any:
        """Read property *name* through :meth:`invoke`."""
        return self.invoke(getter(name), (), return_type)

    def set_property(self, name: str, value: t.Any) -> None:
        """Write property *name* through :meth:`invoke`."""
        self.invoke(setter(name), (value,))

    def add_event_handler(self, name: str, handler: EventHandler) -> None:
        """Subscribe *handler* to event *name* through :meth:`invoke`."""
        self.invoke(adder(name), (handler,))

    def remove_event_handler(self, name: str, handler: EventHandler) -> None:
        """Unsubscribe *handler* from event *name* through :meth:`invoke`."""
        self.invoke(remover(name), (handler,))

    def raise_event(self, name: str, *args: t.Any) -> None:
        """Call the subscribers of *name* with *args*."""
        self.events.raise_event(name, *args)

    # ------------------------------------------------------------------
    # Verification
    # ------------------------------------------------------------------
    def verify(
        self,
        signature: str,
        *expected_args: t.Any,
        times: Times | None = None,
        ref_out_indices: t.Iterable[int] = (),
    ) -> None:
        """Raise unless calls matching the arguments happened *times* times.

        *times* defaults to at least once. Positions in *ref_out_indices*
        are not compared.
        """
        CallCountVerifier(self.invocations).verify(
            signature,
            expected_args,
            times if times is not None else Times.at_least_once(),
            frozenset(ref_out_indices),
        )

    def verify_get(self, name: str, times: Times | None = None) -> None:
        """Verify reads of property *name*."""
        self.verify(getter(name), times=times)

    def verify_set(self, name: str, value: t.Any, times: Times | None = None) -> None:
        """Verify writes of *value* (a literal or matcher) to property *name*."""
        self.verify(setter(name), value, times=times)

    def verify_add(self, name: str, times: Times | None = None) -> None:
        """Verify subscriptions to event *name*, whatever the handler."""
        self._verify_any_handler(adder(name), times)

    def verify_remove(self, name: str, times: Times | None = None) -> None:
        """Verify unsubscriptions from event *name*, whatever the handler."""
        self._verify_any_handler(remover(name), times)

    def _verify_any_handler(self, signature: str, times: Times | None) -> None:
        self.verify(signature, AnyValue(), times=times)

    def verify_verifiable(self) -> None:
        """Raise if a setup marked :meth:`~umbra.setups.Setup.verifiable` never ran."""
        SetupUsageVerifier(self.setups).verify(verifiable_only=True)

    def verify_all(self) -> None:
        """Raise if any setup never ran."""
        SetupUsageVerifier(self.setups).verify(verifiable_only=False)

    def verify_no_other_calls(self) -> None:
        """Raise if a recorded call was not matched by an earlier :meth:`verify`."""
        NoOtherCallsVerifier(self.invocations).verify()

    # ------------------------------------------------------------------
    # Reset
    # ------------------------------------------------------------------
    def reset(self) -> None:
        """Forget setups, calls, tracked properties and subscriptions."""
        self.setups.clear()
        self.invocations.clear()
        self.properties.clear()
        self.events.clear()

    def reset_calls(self) -> None:
        """Forget recorded calls and setup call counts, keeping setups."""
        self.invocations.clear()
        self.setups.reset_counts()


def _is_handler(args: tuple[t.Any, ...]) -> bool:
    return len(args) == 1 and callable(args[0])


__all__ = ["MockBehavior", "MockHandler"]
