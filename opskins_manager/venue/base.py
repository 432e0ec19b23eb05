"""Venue abstraction."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Sequence

from ..core.types import Item, ItemId, Listing, PurchaseResult, WithdrawalOffer


class Venue(ABC):
    name: str

    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    def get_inventory(self) -> List[Item]: ...

    @abstractmethod
    def search(self, query: Dict[str, Any]) -> List[Listing]: ...

    @abstractmethod
    def buy_items(
        self, sale_ids: Sequence[ItemId], total: float
    ) -> List[PurchaseResult]: ...

    @abstractmethod
    def withdraw_inventory_items(
        self, item_ids: Sequence[ItemId]
    ) -> List[WithdrawalOffer]: ...
