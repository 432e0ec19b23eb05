"""Core type definitions for the inventory manager.

Records are kept deliberately small: the platform returns far richer objects,
but the cache only needs enough to look an item up and hand it back.
"""

from __future__ import annotations

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Mapping, Optional, Union

from .utils import to_number

ItemId = Union[str, int]


def same_id(a: Any, b: Any) -> bool:
    """Compare ids by string form so 5 and "5" are the same item."""
    if a is None or b is None:
        return False
    return str(a) == str(b)


@dataclass
class Item:
    id: ItemId
    name: str
    appid: Optional[int] = None
    contextid: Optional[int] = None

    @classmethod
    def from_raw(cls, raw: Union["Item", Mapping[str, Any]]) -> "Item":
        """Normalize anything carrying the four canonical fields."""
        if isinstance(raw, Item):
            return cls(raw.id, raw.name, raw.appid, raw.contextid)
        return cls(
            id=raw.get("id"),
            name=raw.get("name"),
            appid=raw.get("appid"),
            contextid=raw.get("contextid"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Listing:
    id: ItemId
    name: str
    amount: float
    appid: Optional[int] = None
    contextid: Optional[int] = None

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> "Listing":
        return cls(
            id=raw.get("id"),
            name=raw.get("name"),
            amount=to_number(raw.get("amount", 0)),
            appid=raw.get("appid"),
            contextid=raw.get("contextid"),
        )


@dataclass
class PurchaseResult:
    sale_id: ItemId
    new_itemid: ItemId
    name: str
    bot_id: Optional[int] = None

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> "PurchaseResult":
        return cls(
            sale_id=raw.get("saleid"),
            new_itemid=raw.get("new_itemid"),
            name=raw.get("name"),
            bot_id=raw.get("bot_id"),
        )


@dataclass
class WithdrawalOffer:
    items: List[Any] = field(default_factory=list)
    bot_id: Optional[int] = None
    tradeoffer_id: Optional[ItemId] = None
    tradeoffer_error: Optional[str] = None

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> "WithdrawalOffer":
        return cls(
            items=list(raw.get("items") or []),
            bot_id=raw.get("bot_id"),
            tradeoffer_id=raw.get("tradeoffer_id"),
            tradeoffer_error=raw.get("tradeoffer_error"),
        )
