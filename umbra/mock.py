"""Base class for substitutes and helpers that operate on any mock."""

from __future__ import annotations

import typing as t

from .defaults import DefaultValue, MockDefaultValueProvider
from .errors import NotAMockError
from .handler import MockBehavior, MockHandler
from .setups import CALL_BASE, Setup

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from .chaos import ChaosPolicy
    from .setups import SequenceSetup
    from .verifiers import Times

_HANDLER_ATTR: t.Final[str] = "_umbra_handler"


class Mocked:
    """Base for substitutes whose members forward to a :class:`MockHandler`.

    A substitute implements each member of the interface it stands in for by
    calling one of the ``_invoke``/``_get``/``_set``/``_add``/``_remove``
    helpers with the member's signature::

        class FakeInventory(Mocked, mocks=Inventory):
            def reserve(self, sku: str, qty: int) -> bool:
                return self._invoke("reserve", sku, qty, return_type=bool)

            @property
            def region(self) -> str:
                return self._get("region", str)

    Declaring ``mocks=`` registers the substitute as the recursive mock for
    that type under :attr:`DefaultValue.MOCK`.

    A partial mock also inherits a concrete class and passes the inherited
    member as ``base``. With ``call_base=True``, calls no setup matches run
    that member::

        class PartialPricing(Mocked, Pricing):
            def quote(self, sku: str) -> float:
                return self._invoke("quote", sku, base=super().quote)
    """

    def __init_subclass__(cls, *, mocks: type | None = None, **kwargs: t.Any) -> None:
        super().__init_subclass__(**kwargs)
        if mocks is not None:
            MockDefaultValueProvider.register_factory(mocks, cls)

    def __init__(
        self,
        behavior: MockBehavior = MockBehavior.LOOSE,
        default_value: DefaultValue = DefaultValue.EMPTY,
        *,
        call_base: bool = False,
        handler: MockHandler | None = None,
    ) -> None:
        if handler is None:
            handler = MockHandler(behavior, default_value, call_base=call_base)
        setattr(self, _HANDLER_ATTR, handler)

    @property
    def mock_handler(self) -> MockHandler:
        """Return the engine behind this substitute."""
        return getattr(self, _HANDLER_ATTR)

    def _invoke(
        self,
        signature: str,
        *args: t.Any,
        return_type: t.Any = None,
        base: t.Callable[..., t.Any] | None = None,
    ) -> t.Any:
        """Invoke *signature*, running *base* when a partial mock has no setup."""
        result = self.mock_handler.invoke(
            signature, args, return_type, can_call_base=base is not None
        )
        if base is not None and result is CALL_BASE:
            return base(*args)
        return result

    def _invoke_by_ref(
        self, signature: str, args: list[t.Any], return_type: t.Any = None
    ) -> t.Any:
        """Invoke and, for ref/out setups, write their values back into *args*."""
        result = self.mock_handler.invoke(signature, args, return_type)
        if isinstance(result, Setup):
            return result.resolve_by_ref(args)
        return result

    def _get(self, name: str, return_type: t.Any = None) -> t.Any:
        return self.mock_handler.get_property(name, return_type)

    def _set(self, name: str, value: t.Any) -> None:
        self.mock_handler.set_property(name, value)

    def _add(self, event: str, handler: t.Callable[..., t.Any]) -> None:
        self.mock_handler.add_event_handler(event, handler)

    def _remove(self, event: str, handler: t.Callable[..., t.Any]) -> None:
        self.mock_handler.remove_event_handler(event, handler)


def is_mock(obj: object) -> bool:
    """Return ``True`` when *obj* is backed by a :class:`MockHandler`."""
    return isinstance(getattr(obj, _HANDLER_ATTR, None), MockHandler)


def handler_of(obj: object) -> MockHandler:
    """Return the handler behind *obj* or raise :class:`NotAMockError`."""
    if isinstance(obj, MockHandler):
        return obj
    handler = getattr(obj, _HANDLER_ATTR, None)
    if not isinstance(handler, MockHandler):
        raise NotAMockError(obj)
    return handler


def setup(mock: object, signature: str, *expected_args: t.Any) -> Setup:
    """Shortcut for ``handler_of(mock).setup(...)``."""
    return handler_of(mock).setup(signature, *expected_args)


def setup_sequence(
    mock: object, signature: str, *expected_args: t.Any
) -> SequenceSetup:
    """Shortcut for ``handler_of(mock).setup_sequence(...)``."""
    return handler_of(mock).setup_sequence(signature, *expected_args)


def verify(
    mock: object, signature: str, *expected_args: t.Any, times: Times | None = None
) -> None:
    """Shortcut for ``handler_of(mock).verify(...)``."""
    handler_of(mock).verify(signature, *expected_args, times=times)


def raise_event(mock: object, event: str, *args: t.Any) -> None:
    """Shortcut for ``handler_of(mock).raise_event(...)``."""
    handler_of(mock).raise_event(event, *args)


def chaos(
    mock: object, policy: ChaosPolicy | t.Callable[[ChaosPolicy], None]
) -> ChaosPolicy:
    """Shortcut for ``handler_of(mock).chaos(...)``."""
    return handler_of(mock).chaos(policy)


__all__ = [
    "Mocked",
    "chaos",
    "handler_of",
    "is_mock",
    "raise_event",
    "setup",
    "setup_sequence",
    "verify",
]
