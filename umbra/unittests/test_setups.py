"""Unit tests for setups and the setup registry."""

from __future__ import annotations

import pytest

from umbra.matchers import It
from umbra.setups import (
    SequenceSetup,
    SequenceThrow,
    Sequential,
    Setup,
    SetupRegistry,
)


def test_new_setup_returns_none() -> None:
    """A setup without configuration produces ``None``."""
    assert Setup("f").result_for(()) is None


def test_configuration_methods_chain_and_overwrite() -> None:
    """Each call returns the setup and replaces the previous strategy."""
    setup = Setup("f", (1,))

    assert setup.returns("a").returns("b") is setup
    assert setup.result_for((1,)) == "b"


def test_returns_using_receives_arguments() -> None:
    """Factories compute results from the observed arguments."""
    setup = Setup("add", (It.is_any(int), It.is_any(int))).returns_using(
        lambda a, b: a + b
    )
    assert setup.result_for((2, 3)) == 5


def test_returns_in_order_repeats_last_value() -> None:
    """Sequential results clamp at the final slot."""
    setup = Setup("next").returns_in_order(1, 2, 3)
    assert [setup.result_for(()) for _ in range(5)] == [1, 2, 3, 3, 3]


def test_empty_sequential_produces_none() -> None:
    """A sequence with no slots yields ``None``."""
    assert Sequential().produce(()) is None


def test_throw_slot_raises_then_advances() -> None:
    """A raising slot still moves the cursor forward."""
    seq = Sequential([1, SequenceThrow(KeyError("k")), 3])

    assert seq.produce(()) == 1
    with pytest.raises(KeyError):
        seq.produce(())
    assert seq.produce(()) == 3


def test_exception_override_beats_strategy() -> None:
    """``throws`` wins over any configured result."""
    setup = Setup("f").returns(1).throws(ValueError("nope"))
    with pytest.raises(ValueError, match="nope"):
        setup.result_for(())


def test_sequence_setup_appends_slots() -> None:
    """The sequence builder appends one slot per call."""
    setup = Setup("f")
    SequenceSetup(setup).returns(1).throws(OSError).returns(2)

    assert setup.result_for(()) == 1
    with pytest.raises(OSError):
        setup.result_for(())
    assert setup.result_for(()) == 2
    assert setup.result_for(()) == 2


def test_out_value_requires_valid_index() -> None:
    """Ref/out indices must address an expected argument."""
    setup = Setup("parse", ("42", 0))
    with pytest.raises(IndexError):
        setup.out_value(2, 1)
    with pytest.raises(IndexError):
        setup.ref_value(-1, 1)


def test_ref_out_positions_are_ignored_when_matching() -> None:
    """Whatever the caller passes in an output slot still matches."""
    setup = Setup("parse", ("42", 0)).out_value(1, 42)

    assert setup.matches("parse", ("42", -7))
    assert not setup.matches("parse", ("43", 0))
    assert setup.has_ref_out


def test_resolve_by_ref_writes_values_then_returns_result() -> None:
    """Static and computed values are written back into the argument list."""
    setup = (
        Setup("parse", ("42", 0, 0))
        .out_value(1, 42)
        .ref_value_func(2, lambda text, _out, ref: ref + len(text))
        .returns(True)
    )
    args = ["42", None, 10]

    assert setup.resolve_by_ref(args) is True
    assert args == ["42", 42, 12]


def test_callback_ref_out_takes_over_resolution() -> None:
    """The by-reference callback fills arguments and supplies the result."""

    def fill(args: list[object]) -> str:
        args[1] = "filled"
        return "done"

    setup = Setup("load", ("key", None)).callback_ref_out(fill, 1)
    args = ["key", "ignored"]

    assert setup.matches("load", tuple(args))
    assert setup.resolve_by_ref(args) == "done"
    assert args == ["key", "filled"]


def test_describe_renders_expected_arguments() -> None:
    """Setups describe themselves like calls."""
    assert Setup("get", ("a", It.is_any(int))).describe() == "get('a', Any(int))"


def test_registry_prefers_last_registered_match() -> None:
    """A later overlapping setup overrides an earlier one."""
    registry = SetupRegistry()
    registry.add("get", (It.is_any(str),)).returns("generic")
    registry.add("get", ("special",)).returns("specific")

    match = registry.find_match("get", ("special",))
    assert match is not None
    assert match.result_for(("special",)) == "specific"
    other = registry.find_match("get", ("other",))
    assert other is not None
    assert other.result_for(("other",)) == "generic"
    assert registry.find_match("put", ("special",)) is None


def test_registry_uncalled_and_reset_counts() -> None:
    """Call counters feed usage verification and can be zeroed."""
    registry = SetupRegistry()
    called = registry.add("a")
    registry.add("b").verifiable()
    registry.add("c")
    called.call_count = 2

    assert [s.signature for s in registry.uncalled()] == ["b", "c"]
    assert [s.signature for s in registry.uncalled(verifiable_only=True)] == ["b"]

    registry.reset_counts()
    assert len(registry.uncalled()) == 3
    registry.clear()
    assert len(registry) == 0
