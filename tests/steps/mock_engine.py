"""pytest-bdd steps for stubbing, calling and verifying a single mock."""

from __future__ import annotations

import dataclasses as dc
import typing as t

import pytest
from pytest_bdd import given, parsers, then, when

from umbra.errors import UnmatchedCallError, VerificationError
from umbra.handler import MockBehavior, MockHandler
from umbra.matchers import It
from umbra.verifiers import Times


@dc.dataclass(slots=True)
class MockContext:
    """One mock plus what the scenario observed while calling it."""

    handler: MockHandler
    results: list[t.Any] = dc.field(default_factory=list)
    errors: list[BaseException] = dc.field(default_factory=list)

    def call(self, signature: str, *args: t.Any, return_type: t.Any = None) -> None:
        """Invoke *signature* and record either the result or the error."""
        try:
            self.results.append(self.handler.invoke(signature, args, return_type))
        except Exception as exc:  # noqa: BLE001 - scenarios assert on the error
            self.errors.append(exc)


@given("a loose mock", target_fixture="ctx")
def loose_mock() -> MockContext:
    """Create a mock that answers unknown calls with defaults."""
    return MockContext(MockHandler(MockBehavior.LOOSE))


@given("a strict mock", target_fixture="ctx")
def strict_mock() -> MockContext:
    """Create a mock that rejects unknown calls."""
    return MockContext(MockHandler(MockBehavior.STRICT))


@given(
    parsers.cfparse('"{sig}" returns {first:d}, {second:d} and {third:d} in order')
)
def stub_in_order(
    ctx: MockContext, sig: str, first: int, second: int, third: int
) -> None:
    """Hand out three results one per call."""
    ctx.handler.setup(sig).returns_in_order(first, second, third)


@given(parsers.re(r'"(?P<sig>[^"]+)" returns "(?P<value>[^"]+)"$'))
def stub_returns(ctx: MockContext, sig: str, value: str) -> None:
    """Return *value* for argument-less calls to *sig*."""
    ctx.handler.setup(sig).returns(value)


@given(parsers.re(r'"(?P<sig>[^"]+)" returns "(?P<value>[^"]+)" for any string$'))
def stub_returns_for_any(ctx: MockContext, sig: str, value: str) -> None:
    """Return *value* whatever string argument is passed."""
    ctx.handler.setup(sig, It.is_any(str)).returns(value)


@given(
    parsers.re(r'"(?P<sig>[^"]+)" returns "(?P<value>[^"]+)" for "(?P<arg>[^"]+)"$')
)
def stub_returns_for_literal(ctx: MockContext, sig: str, value: str, arg: str) -> None:
    """Return *value* when *sig* is called with exactly *arg*."""
    ctx.handler.setup(sig, arg).returns(value)


@given(
    parsers.re(r'property "(?P<name>[^"]+)" is tracked starting at "(?P<value>[^"]+)"$')
)
def track_property(ctx: MockContext, name: str, value: str) -> None:
    """Keep *name* in backing storage."""
    ctx.handler.setup_property(name, value)


@when(parsers.cfparse('"{sig}" is called {count:d} times'))
def call_repeatedly(ctx: MockContext, sig: str, count: int) -> None:
    """Call *sig* without arguments *count* times."""
    for _ in range(count):
        ctx.call(sig)


@when(parsers.re(r'"(?P<sig>[^"]+)" is called with "(?P<arg>[^"]+)"$'))
def call_with_argument(ctx: MockContext, sig: str, arg: str) -> None:
    """Call *sig* with one string argument."""
    ctx.call(sig, arg)


@when(parsers.cfparse('"{sig}" is called expecting an int'))
def call_expecting_int(ctx: MockContext, sig: str) -> None:
    """Call *sig* declaring an ``int`` return type."""
    ctx.call(sig, return_type=int)


@when(
    parsers.re(
        r'property "(?P<name>[^"]+)" receives '
        r'"(?P<first>[^"]+)", "(?P<second>[^"]+)" and "(?P<third>[^"]+)"$'
    )
)
def set_property_three_times(
    ctx: MockContext, name: str, first: str, second: str, third: str
) -> None:
    """Write three values to *name* in order."""
    for value in (first, second, third):
        ctx.handler.set_property(name, value)


@when(parsers.re(r'property "(?P<name>[^"]+)" is set to "(?P<value>[^"]+)"$'))
def set_property(ctx: MockContext, name: str, value: str) -> None:
    """Write *value* to *name*."""
    ctx.handler.set_property(name, value)


@then(
    parsers.cfparse("the results are {first:d}, {second:d}, {third:d} and {fourth:d}")
)
def check_results(
    ctx: MockContext, first: int, second: int, third: int, fourth: int
) -> None:
    """Compare every result so far."""
    assert ctx.results == [first, second, third, fourth]


@then(parsers.re(r'the result is "(?P<value>[^"]+)"$'))
def check_text_result(ctx: MockContext, value: str) -> None:
    """The last call returned *value*."""
    assert not ctx.errors
    assert ctx.results[-1] == value


@then(parsers.cfparse("the result is {value:d}"))
def check_int_result(ctx: MockContext, value: int) -> None:
    """The last call returned the integer *value*."""
    assert not ctx.errors
    assert ctx.results[-1] == value


@then(parsers.cfparse('an unmatched call error mentioning "{text}" is raised'))
def check_unmatched(ctx: MockContext, text: str) -> None:
    """The call was rejected by a strict mock."""
    assert len(ctx.errors) == 1
    error = ctx.errors[0]
    assert isinstance(error, UnmatchedCallError)
    assert text in str(error)


@then(
    parsers.re(
        r'property "(?P<name>[^"]+)" was set to "(?P<value>[^"]+)" '
        r"exactly (?P<count>\d+) times$"
    )
)
def check_setter_count(ctx: MockContext, name: str, value: str, count: str) -> None:
    """Verification of the setter passes."""
    ctx.handler.verify_set(name, value, Times.exactly(int(count)))


@then(
    parsers.re(
        r'verifying property "(?P<name>[^"]+)" was set to "(?P<value>[^"]+)" '
        r"exactly (?P<count>\d+) times? fails$"
    )
)
def check_setter_count_fails(
    ctx: MockContext, name: str, value: str, count: str
) -> None:
    """Verification of the setter raises."""
    with pytest.raises(VerificationError):
        ctx.handler.verify_set(name, value, Times.exactly(int(count)))


@then(parsers.re(r'property "(?P<name>[^"]+)" reads "(?P<value>[^"]+)"$'))
def check_property_value(ctx: MockContext, name: str, value: str) -> None:
    """Reading the property returns *value*."""
    assert ctx.handler.get_property(name) == value

