"""Unit tests for cross-mock call ordering."""

from __future__ import annotations

import threading

import pytest

from umbra.errors import SequenceViolationError
from umbra.handler import MockHandler
from umbra.sequence import MockSequence


def _ordered_handlers() -> tuple[MockHandler, MockHandler, MockSequence]:
    seq = MockSequence()
    first = MockHandler()
    second = MockHandler()
    first.setup("open").in_sequence(seq)
    second.setup("write", "data").in_sequence(seq)
    first.setup("close").in_sequence(seq)
    return first, second, seq


def test_steps_are_assigned_in_binding_order() -> None:
    """Binding order defines steps 0, 1, 2 across mocks."""
    first, second, seq = _ordered_handlers()

    steps = [s.sequence_step for s in (*first.setups, *second.setups)]

    assert sorted(steps) == [0, 1, 2]
    assert seq.registered_steps == 3


def test_calls_in_order_succeed() -> None:
    """Calls made in binding order advance the sequence."""
    first, second, seq = _ordered_handlers()

    first.invoke("open")
    second.invoke("write", ("data",))
    first.invoke("close")

    assert seq.current_step == 3


def test_out_of_order_call_names_expected_step() -> None:
    """The violation reports the step the sequence was waiting for."""
    first, second, _seq = _ordered_handlers()

    with pytest.raises(SequenceViolationError) as excinfo:
        second.invoke("write", ("data",))

    assert excinfo.value.expected_step == 0
    assert excinfo.value.actual_step == 1
    assert str(excinfo.value) == (
        "Method 'write' invoked out of sequence. "
        "Expected step 0, but method is at step 1."
    )


def test_unsequenced_calls_are_unaffected() -> None:
    """Setups not bound to the sequence run freely."""
    first, _second, seq = _ordered_handlers()
    first.setup("flush").returns(True)

    assert first.invoke("flush") is True
    assert seq.current_step == 0


def test_reset_restarts_expectations() -> None:
    """After reset the first step is expected again."""
    first, _second, seq = _ordered_handlers()
    first.invoke("open")

    seq.reset()

    assert seq.current_step == 0
    first.invoke("open")
    assert seq.current_step == 1


def test_concurrent_registration_hands_out_unique_steps() -> None:
    """Step numbers stay unique when bound from several threads."""
    seq = MockSequence()
    steps: list[int] = []
    lock = threading.Lock()

    def register() -> None:
        for _ in range(100):
            step = seq.register_step()
            with lock:
                steps.append(step)

    threads = [threading.Thread(target=register) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sorted(steps) == list(range(800))
