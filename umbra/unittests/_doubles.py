"""Hand-written substitutes shaped like generated code, shared by the unit tests."""

from __future__ import annotations

import typing as t

from umbra.mock import Mocked


class Inventory:
    """Interface reached through :class:`Catalogue` for recursive mocking."""

    def count(self, sku: str) -> int:
        """Return the stock level of *sku*."""
        raise NotImplementedError


class Catalogue:
    """Interface under test in most unit tests."""

    def lookup(self, sku: str) -> str:
        """Return the title of *sku*."""
        raise NotImplementedError

    def price(self, sku: str, quantity: int) -> float:
        """Return the price of *quantity* units."""
        raise NotImplementedError

    def tags(self) -> list[str]:
        """Return the catalogue tags."""
        raise NotImplementedError

    def try_parse(self, text: str, result: int) -> tuple[bool, int]:
        """Parse *text*; *result* is an output parameter."""
        raise NotImplementedError

    @property
    def inventory(self) -> Inventory:
        """Return the backing inventory."""
        raise NotImplementedError

    @property
    def region(self) -> str:
        """Return the pricing region."""
        raise NotImplementedError

    @region.setter
    def region(self, value: str) -> None:
        raise NotImplementedError


class FakeInventory(Mocked, Inventory, mocks=Inventory):
    """Substitute for :class:`Inventory`."""

    def count(self, sku: str) -> int:
        return self._invoke("count", sku, return_type=int)


class FakeCatalogue(Mocked, Catalogue, mocks=Catalogue):
    """Substitute for :class:`Catalogue`."""

    def lookup(self, sku: str) -> str:
        return self._invoke("lookup", sku, return_type=str)

    def price(self, sku: str, quantity: int) -> float:
        return self._invoke("price", sku, quantity, return_type=float)

    def tags(self) -> list[str]:
        return self._invoke("tags", return_type=list[str])

    def try_parse(self, text: str, result: int) -> tuple[bool, int]:
        args: list[t.Any] = [text, result]
        ok = self._invoke_by_ref("try_parse", args, return_type=bool)
        return ok, args[1]

    @property
    def inventory(self) -> Inventory:
        return self._get("inventory", Inventory)

    @property
    def region(self) -> str:
        return self._get("region", str)

    @region.setter
    def region(self, value: str) -> None:
        self._set("region", value)

    def on_changed(self, handler: t.Callable[..., t.Any]) -> None:
        self._add("changed", handler)

    def off_changed(self, handler: t.Callable[..., t.Any]) -> None:
        self._remove("changed", handler)


class PriceList:
    """Concrete class partially mocked by :class:`PartialPriceList`."""

    def quote(self, sku: str) -> float:
        """Return the list price of *sku*."""
        return 9.5

    def discount(self, sku: str) -> float:
        """Return the discount for *sku*."""
        return 0.0


class PartialPriceList(Mocked, PriceList):
    """Partial mock that can fall back to the real :meth:`PriceList.quote`."""

    def quote(self, sku: str) -> float:
        return self._invoke("quote", sku, return_type=float, base=super().quote)

    def discount(self, sku: str) -> float:
        return self._invoke("discount", sku, return_type=float)
