"""Pytest plugin providing the ``umbra_repository`` fixture."""

from __future__ import annotations

import logging
import typing as t

import pytest

from .repository import MockRepository

logger = logging.getLogger(__name__)


def pytest_addoption(parser: pytest.Parser) -> None:
    """Register command-line and ini options for the plugin."""
    group = parser.getgroup("umbra")
    group.addoption(
        "--umbra-verify-on-teardown",
        action="store_true",
        dest="umbra_verify_on_teardown",
        default=None,
        help=(
            "Verify every mock created through the umbra_repository fixture "
            "during teardown. Overrides the pytest.ini setting."
        ),
    )
    group.addoption(
        "--no-umbra-verify-on-teardown",
        action="store_false",
        dest="umbra_verify_on_teardown",
        default=None,
        help=(
            "Skip automatic verification of umbra_repository mocks. "
            "Overrides the pytest.ini setting."
        ),
    )
    parser.addini(
        "umbra_verify_on_teardown",
        "Verify verifiable setups of umbra_repository mocks during teardown.",
        type="bool",
        default=True,
    )


def pytest_configure(config: pytest.Config) -> None:
    """Register plugin-specific markers."""
    config.addinivalue_line(
        "markers",
        (
            "umbra(verify_on_teardown: bool = True): override automatic "
            "verification of the umbra_repository fixture for a single test."
        ),
    )


class _UmbraItem(t.Protocol):
    """pytest item carrying umbra verification state."""

    _umbra_verify_error: Exception | None


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(
    item: pytest.Item, call: pytest.CallInfo[t.Any]
) -> t.Generator[None, None, None]:
    """Attach each phase report to its item so teardown can inspect outcomes."""
    del call
    outcome = yield
    rep = outcome.get_result()
    setattr(item, f"rep_{rep.when}", rep)
    if rep.when == "teardown":
        _report_deferred_verify_failure(item, rep)


_SETTING: t.Final[str] = "verify_on_teardown"
_Lookup: t.TypeAlias = t.Callable[[pytest.FixtureRequest], bool | None]


def _from_marker(request: pytest.FixtureRequest) -> bool | None:
    marker = request.node.get_closest_marker("umbra")
    if marker is None or _SETTING not in marker.kwargs:
        return None
    return bool(marker.kwargs[_SETTING])


def _from_param(request: pytest.FixtureRequest) -> bool | None:
    """Read a bool or a ``{"verify_on_teardown": ...}`` dict from indirect params."""
    param = getattr(request, "param", None)
    if param is None or isinstance(param, bool):
        return param
    if not isinstance(param, dict):
        msg = (
            "umbra_repository fixture param must be a bool or a dict with a "
            f"{_SETTING!r} key, got {type(param).__name__}"
        )
        raise TypeError(msg)
    if _SETTING not in param:
        msg = (
            f"umbra_repository fixture param dict needs a {_SETTING!r} key, "
            f"got keys: {sorted(param)}"
        )
        raise TypeError(msg)
    return bool(param[_SETTING])


def _from_cli(request: pytest.FixtureRequest) -> bool | None:
    value = request.config.getoption("umbra_verify_on_teardown")
    return None if value is None else bool(value)


# Earlier lookups win.
_LOOKUPS: t.Final[tuple[_Lookup, ...]] = (_from_marker, _from_param, _from_cli)


def _verify_on_teardown_enabled(request: pytest.FixtureRequest) -> bool:
    """Return whether the fixture verifies its mocks during teardown."""
    for lookup in _LOOKUPS:
        value = lookup(request)
        if value is not None:
            logger.debug("%s resolved %s=%s", lookup.__name__, _SETTING, value)
            return value
    return bool(request.config.getini("umbra_verify_on_teardown"))


def _report_deferred_verify_failure(
    item: pytest.Item, report: pytest.TestReport
) -> None:
    """Show a verification error swallowed because the test already failed."""
    err: Exception | None = getattr(item, "_umbra_verify_error", None)
    if err is None:
        return
    delattr(item, "_umbra_verify_error")
    report.sections.append(("umbra verification", f"{type(err).__name__}: {err}"))


def _call_stage_failed(item: pytest.Item) -> bool:
    """Return ``True`` when the test body has already failed."""
    rep_call = getattr(item, "rep_call", None)
    return bool(rep_call and rep_call.failed)


@pytest.fixture
def umbra_repository(
    request: pytest.FixtureRequest,
) -> t.Generator[MockRepository, None, None]:
    """Provide a :class:`MockRepository` verified when the test ends."""
    repository = MockRepository()
    verify = _verify_on_teardown_enabled(request)
    yield repository
    if not verify:
        return
    try:
        repository.verify()
    except Exception as err:
        logger.exception("Error during umbra_repository verification")
        if _call_stage_failed(request.node):
            typed_item = t.cast("_UmbraItem", request.node)
            typed_item._umbra_verify_error = err
            return
        pytest.fail(f"{type(err).__name__}: {err}")
