"""Behavioural tests for chaos injection using pytest-bdd."""

from __future__ import annotations

from pathlib import Path

from pytest_bdd import scenario

from tests.steps import *  # noqa: F403

FEATURES_DIR = Path(__file__).resolve().parent.parent / "features"


@scenario(
    str(FEATURES_DIR / "chaos.feature"),
    "certain failure raises a configured exception",
)
def test_certain_failure_raises() -> None:
    """A failure rate of one raises on every call."""


@scenario(
    str(FEATURES_DIR / "chaos.feature"),
    "certain failure without exceptions never raises",
)
def test_certain_failure_without_exceptions() -> None:
    """Triggers are only counted when no exceptions are configured."""


@scenario(
    str(FEATURES_DIR / "chaos.feature"),
    "seeded chaos replays the same outcomes",
)
def test_seeded_chaos_is_deterministic() -> None:
    """Equal seeds give equal outcomes."""
