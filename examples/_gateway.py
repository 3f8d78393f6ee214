"""A small payment interface and its substitute, shared by the examples."""

from __future__ import annotations

import typing as t

from umbra import Mocked


class PaymentGateway:
    """Interface the code under test depends on."""

    def charge(self, account: str, cents: int) -> str:
        """Charge *account* and return a receipt id."""
        raise NotImplementedError

    def balance(self, account: str) -> int:
        """Return the balance of *account* in cents."""
        raise NotImplementedError

    @property
    def currency(self) -> str:
        """Return the gateway currency."""
        raise NotImplementedError

    @currency.setter
    def currency(self, value: str) -> None:
        raise NotImplementedError


class FakePaymentGateway(Mocked, PaymentGateway, mocks=PaymentGateway):
    """Substitute for :class:`PaymentGateway`."""

    def charge(self, account: str, cents: int) -> str:
        return self._invoke("charge", account, cents, return_type=str)

    def balance(self, account: str) -> int:
        return self._invoke("balance", account, return_type=int)

    @property
    def currency(self) -> str:
        return self._get("currency", str)

    @currency.setter
    def currency(self, value: str) -> None:
        self._set("currency", value)

    def on_settled(self, handler: t.Callable[[str], None]) -> None:
        self._add("settled", handler)


def checkout(gateway: PaymentGateway, account: str, cents: int) -> str | None:
    """Charge *account* when its balance covers *cents*."""
    if gateway.balance(account) < cents:
        return None
    return gateway.charge(account, cents)
