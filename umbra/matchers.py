"""Argument matchers used by setups and verification.

An expected argument is either a plain value, compared with ``==`` (a list or
tuple element by element against a value of the same type), or an
:class:`ArgumentMatcher`, which checks the observed value's type and then
applies its predicate.
"""

from __future__ import annotations

import enum
import numbers
import re
import typing as t

_SEQUENCE_TYPES: t.Final[tuple[type, ...]] = (list, tuple)


class Range(enum.Enum):
    """Whether :meth:`It.is_in_range` includes its bounds."""

    INCLUSIVE = "inclusive"
    EXCLUSIVE = "exclusive"


class ArgumentMatcher:
    """Accept one observed argument when it has the right type and passes ``predicate``.

    The type check runs first and is skipped for ``None``. Whether ``None``
    matches is up to the predicate.
    """

    def __init__(
        self,
        predicate: t.Callable[[t.Any], bool],
        description: str,
        expected_type: type = object,
    ) -> None:
        self.predicate = predicate
        self.description = description
        self.expected_type = expected_type

    def matches(self, value: object) -> bool:
        """Return ``True`` when *value* satisfies this matcher."""
        if value is not None and not isinstance(value, self.expected_type):
            return False
        return bool(self.predicate(value))

    def __call__(self, value: object) -> bool:
        """Alias of :meth:`matches` so matchers work as plain predicates."""
        return self.matches(value)

    def __repr__(self) -> str:
        """Return the human readable description."""
        return self.description


class Any(ArgumentMatcher):
    """Match any value of ``typ``, including ``None``."""

    def __init__(self, typ: type = object) -> None:
        super().__init__(lambda _value: True, f"Any({_type_name(typ)})", typ)


class NotNull(ArgumentMatcher):
    """Match any value of ``typ`` except ``None``."""

    def __init__(self, typ: type = object) -> None:
        super().__init__(
            lambda value: value is not None, f"NotNull({_type_name(typ)})", typ
        )


class Predicate(ArgumentMatcher):
    """Use a custom ``func`` to decide a match."""

    def __init__(
        self,
        func: t.Callable[[t.Any], bool],
        typ: type = object,
        description: str | None = None,
    ) -> None:
        super().__init__(
            func,
            description or f"Predicate({getattr(func, '__name__', func)!s})",
            typ,
        )


class IsIn(ArgumentMatcher):
    """Match values equal to one of ``values``."""

    def __init__(self, values: t.Iterable[object], typ: type = object) -> None:
        self.values = tuple(values)
        super().__init__(
            lambda value: any(literal_matches(v, value) for v in self.values),
            f"IsIn({list(self.values)!r})",
            typ,
        )


class IsNotIn(ArgumentMatcher):
    """Match values equal to none of ``values``."""

    def __init__(self, values: t.Iterable[object], typ: type = object) -> None:
        self.values = tuple(values)
        super().__init__(
            lambda value: not any(literal_matches(v, value) for v in self.values),
            f"IsNotIn({list(self.values)!r})",
            typ,
        )


class Regex(ArgumentMatcher):
    """Match strings for which ``pattern`` finds a match."""

    def __init__(self, pattern: str, flags: int = 0) -> None:
        self._pattern = re.compile(pattern, flags)
        super().__init__(
            lambda value: value is not None and bool(self._pattern.search(value)),
            f"Regex({pattern!r})",
            str,
        )

    @property
    def pattern(self) -> str:
        """Return the source pattern."""
        return self._pattern.pattern


class InRange(ArgumentMatcher):
    """Match values between ``low`` and ``high``.

    ``typ`` defaults to the type of ``low``, widened to any real number for
    numeric bounds. Values that cannot be compared with the bounds never
    match.
    """

    def __init__(
        self,
        low: t.Any,
        high: t.Any,
        kind: Range = Range.INCLUSIVE,
        typ: type | None = None,
    ) -> None:
        self.low = low
        self.high = high
        self.kind = kind
        super().__init__(
            self._in_range,
            f"InRange({low!r}, {high!r}, {kind.value})",
            typ if typ is not None else _bound_type(low),
        )

    def _in_range(self, value: t.Any) -> bool:
        if value is None:
            return False
        try:
            if self.kind is Range.INCLUSIVE:
                return bool(self.low <= value <= self.high)
            return bool(self.low < value < self.high)
        except TypeError:
            return False


class Contains(ArgumentMatcher):
    """Match containers that hold ``item``; anything else never matches."""

    def __init__(self, item: object) -> None:
        self.item = item
        super().__init__(self._contains, f"Contains({item!r})")

    def _contains(self, value: t.Any) -> bool:
        if value is None:
            return False
        try:
            return self.item in value
        except TypeError:
            return False


class StartsWith(ArgumentMatcher):
    """Match strings beginning with ``prefix``."""

    def __init__(self, prefix: str) -> None:
        super().__init__(
            lambda value: value is not None and value.startswith(prefix),
            f"StartsWith({prefix!r})",
            str,
        )


class It:
    """Factory namespace mirroring the usual mocking vocabulary."""

    @staticmethod
    def is_any(typ: type = object) -> ArgumentMatcher:
        """Match anything of ``typ``, ``None`` included."""
        return Any(typ)

    @staticmethod
    def is_(
        predicate: t.Callable[[t.Any], bool], typ: type = object
    ) -> ArgumentMatcher:
        """Match values of ``typ`` accepted by ``predicate``."""
        return Predicate(predicate, typ)

    @staticmethod
    def is_in(*values: object) -> ArgumentMatcher:
        """Match one of ``values``."""
        return IsIn(values)

    @staticmethod
    def is_not_in(*values: object) -> ArgumentMatcher:
        """Match anything but ``values``."""
        return IsNotIn(values)

    @staticmethod
    def is_not_null(typ: type = object) -> ArgumentMatcher:
        """Match any non-``None`` value of ``typ``."""
        return NotNull(typ)

    @staticmethod
    def is_regex(pattern: str, flags: int = 0) -> ArgumentMatcher:
        """Match strings containing ``pattern``."""
        return Regex(pattern, flags)

    @staticmethod
    def is_in_range(
        low: t.Any,
        high: t.Any,
        kind: Range = Range.INCLUSIVE,
        typ: type | None = None,
    ) -> ArgumentMatcher:
        """Match values of ``typ`` between ``low`` and ``high``."""
        return InRange(low, high, kind, typ)


class Match:
    """Build reusable custom matchers."""

    @staticmethod
    def create(
        predicate: t.Callable[[t.Any], bool],
        description: str | None = None,
        typ: type = object,
    ) -> ArgumentMatcher:
        """Wrap ``predicate`` as a named matcher."""
        return Predicate(predicate, typ, description)


def _type_name(typ: type) -> str:
    return getattr(typ, "__name__", repr(typ))


def _bound_type(bound: object) -> type:
    if isinstance(bound, numbers.Real) and not isinstance(bound, bool):
        return numbers.Real
    return type(bound)


def literal_matches(expected: object, actual: object) -> bool:
    """Return ``True`` when *actual* satisfies the expected slot *expected*.

    Matchers nested inside list or tuple literals are honoured. A list never
    matches a tuple, as with ``==``.
    """
    if isinstance(expected, ArgumentMatcher):
        return expected.matches(actual)
    if isinstance(expected, _SEQUENCE_TYPES) and isinstance(actual, _SEQUENCE_TYPES):
        if type(expected) is not type(actual):
            return False
        if len(expected) != len(actual):
            return False
        return all(
            literal_matches(exp, act) for exp, act in zip(expected, actual, strict=True)
        )
    if expected is None:
        return actual is None
    return bool(expected == actual)


def args_match(
    expected: t.Sequence[object],
    observed: t.Sequence[object],
    ignored: t.Container[int] = frozenset(),
) -> bool:
    """Apply :func:`literal_matches` slot by slot, skipping ``ignored`` indices.

    Argument counts must be equal.
    """
    if len(expected) != len(observed):
        return False
    for index, (exp, act) in enumerate(zip(expected, observed, strict=True)):
        if index in ignored:
            continue
        if not literal_matches(exp, act):
            return False
    return True


def describe_args(args: t.Sequence[object]) -> str:
    """Render *args* for error messages, matchers by description."""
    return ", ".join(repr(arg) for arg in args)


__all__ = [
    "Any",
    "ArgumentMatcher",
    "Contains",
    "InRange",
    "IsIn",
    "IsNotIn",
    "It",
    "Match",
    "NotNull",
    "Predicate",
    "Range",
    "Regex",
    "StartsWith",
    "args_match",
    "describe_args",
    "literal_matches",
]
