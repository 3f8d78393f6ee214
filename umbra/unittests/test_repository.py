"""Unit tests for :class:`umbra.repository.MockRepository`."""

from __future__ import annotations

import pytest

from umbra.defaults import DefaultValue
from umbra.errors import NotAMockError, UnmatchedCallError, VerificationError
from umbra.handler import MockBehavior
from umbra.mock import handler_of
from umbra.repository import MockRepository
from umbra.unittests._doubles import FakeCatalogue, FakeInventory


def test_create_applies_repository_defaults() -> None:
    """Mocks inherit behaviour and default strategy unless overridden."""
    repo = MockRepository(MockBehavior.STRICT, DefaultValue.MOCK)

    strict = repo.create(FakeCatalogue)
    loose = repo.create(FakeInventory, behavior=MockBehavior.LOOSE)

    assert handler_of(strict).behavior is MockBehavior.STRICT
    assert handler_of(strict).default_value is DefaultValue.MOCK
    assert handler_of(loose).behavior is MockBehavior.LOOSE
    assert repo.mocks == [strict, loose]
    with pytest.raises(UnmatchedCallError):
        strict.lookup("sku")


def test_register_is_idempotent_and_checks_type() -> None:
    """Registering twice keeps one entry; non-mocks are rejected."""
    repo = MockRepository()
    fake = FakeInventory()

    repo.register(fake)
    repo.register(fake)

    assert repo.mocks == [fake]
    with pytest.raises(NotAMockError):
        repo.register(object())


def test_verify_checks_every_mock() -> None:
    """Verification fails if any registered mock has an uncalled verifiable setup."""
    repo = MockRepository()
    catalogue = repo.create(FakeCatalogue)
    inventory = repo.create(FakeInventory)
    handler_of(catalogue).setup("lookup", "a").returns("A").verifiable()
    handler_of(inventory).setup("count", "a").returns(1).verifiable()

    catalogue.lookup("a")
    with pytest.raises(VerificationError, match="'count'"):
        repo.verify()

    inventory.count("a")
    repo.verify()
    repo.verify_all()


def test_verify_no_other_calls_and_reset_calls() -> None:
    """Repository-wide helpers fan out to each handler."""
    repo = MockRepository()
    inventory = repo.create(FakeInventory)
    inventory.count("a")

    with pytest.raises(VerificationError):
        repo.verify_no_other_calls()

    repo.reset_calls()
    repo.verify_no_other_calls()


def test_reset_drops_setups() -> None:
    """Reset forgets setups on every mock."""
    repo = MockRepository()
    inventory = repo.create(FakeInventory)
    handler_of(inventory).setup("count", "a").returns(5)

    repo.reset()

    assert inventory.count("a") == 0
