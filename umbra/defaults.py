"""Values returned by loose mocks for calls nothing was set up for."""

from __future__ import annotations

import collections.abc as cabc
import enum
import logging
import typing as t

logger = logging.getLogger(__name__)

_SCALAR_DEFAULTS: t.Final[dict[type, t.Any]] = {
    bool: False,
    int: 0,
    float: 0.0,
    complex: 0j,
    str: "",
    bytes: b"",
}

_COLLECTION_FACTORIES: t.Final[dict[type, t.Callable[[], t.Any]]] = {
    tuple: tuple,
    frozenset: frozenset,
    list: list,
    dict: dict,
    set: set,
    cabc.MutableMapping: dict,
    cabc.Mapping: dict,
    cabc.MutableSet: set,
    cabc.Set: frozenset,
    cabc.MutableSequence: list,
    cabc.Sequence: tuple,
    cabc.Collection: list,
    cabc.Iterable: list,
}


class DefaultValue(enum.StrEnum):
    """Strategy used by loose mocks for unmatched calls."""

    EMPTY = "EMPTY"
    MOCK = "MOCK"


def _origin(return_type: t.Any) -> t.Any:
    """Strip generic parameters: ``list[int]`` becomes ``list``."""
    origin = t.get_origin(return_type)
    return origin if origin is not None else return_type


class DefaultValueProvider(t.Protocol):
    """Produce a default for a declared return type."""

    def get_default_value(self, return_type: t.Any) -> t.Any:
        """Return the default for *return_type*."""
        ...


class EmptyDefaultValueProvider:
    """Zero values for scalars, empty containers for collections, ``None`` otherwise."""

    def get_default_value(self, return_type: t.Any) -> t.Any:
        """Return the empty value for *return_type*."""
        if return_type is None or return_type is type(None):
            return None
        base = _origin(return_type)
        if base in _SCALAR_DEFAULTS:
            return _SCALAR_DEFAULTS[base]
        factory = _collection_factory(base)
        if factory is not None:
            return factory()
        return None


def _collection_factory(base: t.Any) -> t.Callable[[], t.Any] | None:
    if not isinstance(base, type):
        return None
    return _COLLECTION_FACTORIES.get(base)


class MockDefaultValueProvider:
    """Like :class:`EmptyDefaultValueProvider`, but answers other classes with mocks.

    Mock factories are registered per type, usually by
    :class:`~umbra.mock.Mocked` subclasses declaring ``mocks=SomeType``.
    Each provider caches the mock it built per type, so repeated reads of the
    same member return the same nested mock.
    """

    _factories: t.ClassVar[dict[type, t.Callable[[], t.Any]]] = {}

    def __init__(self) -> None:
        self._empty = EmptyDefaultValueProvider()
        self._cache: dict[type, t.Any] = {}

    @classmethod
    def register_factory(cls, typ: type, factory: t.Callable[[], t.Any]) -> None:
        """Use *factory* to build recursive mocks of *typ*."""
        cls._factories[typ] = factory

    @classmethod
    def unregister_factory(cls, typ: type) -> None:
        """Forget the factory for *typ*, if any."""
        cls._factories.pop(typ, None)

    def get_default_value(self, return_type: t.Any) -> t.Any:
        """Return a cached or freshly built mock for *return_type*."""
        base = _origin(return_type)
        if (
            return_type is None
            or return_type is type(None)
            or base in _SCALAR_DEFAULTS
            or _collection_factory(base) is not None
        ):
            return self._empty.get_default_value(return_type)
        if base in self._cache:
            return self._cache[base]
        factory = self._factories.get(base)
        if factory is None:
            logger.warning("No mock factory registered for %r; returning None", base)
            return None
        mock = factory()
        self._cache[base] = mock
        return mock


def provider_for(strategy: DefaultValue) -> DefaultValueProvider:
    """Return a fresh provider implementing *strategy*."""
    if strategy is DefaultValue.MOCK:
        return MockDefaultValueProvider()
    return EmptyDefaultValueProvider()


__all__ = [
    "DefaultValue",
    "DefaultValueProvider",
    "EmptyDefaultValueProvider",
    "MockDefaultValueProvider",
    "provider_for",
]
