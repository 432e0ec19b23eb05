"""In-memory venue for tests and dry runs.

Keeps a list of sales and an owned inventory, and records every call so tests
can assert on what reached the "network".
"""

from __future__ import annotations

import itertools
from typing import Any, Dict, List, Optional, Sequence

from .base import Venue
from ..core.errors import RemoteCallError
from ..core.types import Item, ItemId, Listing, PurchaseResult, WithdrawalOffer, same_id


class MockVenue(Venue):
    def __init__(
        self,
        name: str = "mock",
        inventory: Optional[List[Item]] = None,
        sales: Optional[List[Listing]] = None,
        appid: int = 730,
        contextid: int = 2,
    ):
        super().__init__(name)
        self.inventory: List[Item] = list(inventory or [])
        self.sales: List[Listing] = list(sales or [])
        self.appid = appid
        self.contextid = contextid
        self.calls: List[tuple] = []
        # name -> exception raised on the next call of that method
        self.failures: Dict[str, Exception] = {}
        self._next_id = itertools.count(1000)

    def fail(self, method: str, error: Optional[Exception] = None) -> None:
        self.failures[method] = error or RemoteCallError(f"{method} failed")

    def _enter(self, method: str, *args: Any) -> None:
        self.calls.append((method,) + args)
        err = self.failures.pop(method, None)
        if err is not None:
            raise err

    def count(self, method: str) -> int:
        return sum(1 for c in self.calls if c[0] == method)

    def get_inventory(self) -> List[Item]:
        self._enter("get_inventory")
        return [Item.from_raw(i) for i in self.inventory]

    def search(self, query: Dict[str, Any]) -> List[Listing]:
        self._enter("search", dict(query))
        needle = str(query.get("search_item", "")).strip('"').lower()
        cap = query.get("max")
        out = []
        for sale in self.sales:
            if needle and needle not in (sale.name or "").lower():
                continue
            if cap is not None and sale.amount > cap:
                continue
            out.append(sale)
        return out

    def buy_items(
        self, sale_ids: Sequence[ItemId], total: float
    ) -> List[PurchaseResult]:
        self._enter("buy_items", list(sale_ids), total)
        bought = [s for s in self.sales if any(same_id(s.id, i) for i in sale_ids)]
        if len(bought) != len(sale_ids):
            raise RemoteCallError("sale no longer available")
        if sum(s.amount for s in bought) > total:
            raise RemoteCallError("total does not cover the listed price")
        results = []
        for sale in bought:
            self.sales.remove(sale)
            new_id = next(self._next_id)
            self.inventory.append(Item(new_id, sale.name, self.appid, self.contextid))
            results.append(PurchaseResult(sale.id, new_id, sale.name, bot_id=1))
        return results

    def withdraw_inventory_items(
        self, item_ids: Sequence[ItemId]
    ) -> List[WithdrawalOffer]:
        self._enter("withdraw_inventory_items", list(item_ids))
        moved = [i for i in self.inventory if any(same_id(i.id, x) for x in item_ids)]
        for item in moved:
            self.inventory.remove(item)
        return [
            WithdrawalOffer(
                items=[m.to_dict() for m in moved],
                bot_id=1,
                tradeoffer_id=next(self._next_id),
            )
        ]
