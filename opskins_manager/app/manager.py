"""Inventory manager: local mirror plus buy/withdraw against a venue.

The manager owns one InventoryCache. On construction it is filled either from
the file left by a previous run or, when there is none, from a single remote
inventory fetch. After that the file is trusted and only ``buy``/``withdraw``
change it; there is no background re-sync.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from pathlib import Path
from typing import Any, Callable, List, Optional, Union

from ..core.config import Settings, default_data_dir
from ..core.errors import (
    ConfigurationError,
    ItemNotFoundError,
    OpskinsError,
    PersistenceError,
    RemoteCallError,
)
from ..core.types import Item, WithdrawalOffer
from ..core.utils import app_string, is_number, mask_key
from ..io import metrics
from ..io.persistence import FileStorage, cache_key
from ..state.store import InventoryCache, ItemRef, ref_id
from ..venue.base import Venue
from ..venue.opskins import OpskinsVenue


class CacheState(str, Enum):
    UNINITIALIZED = "UNINITIALIZED"
    LOADING = "LOADING"
    READY = "READY"


class OpskinsManager:
    def __init__(
        self,
        api_key: Optional[str] = None,
        account_name: Optional[str] = None,
        app_id: int = 730,
        context_id: int = 2,
        venue: Optional[Venue] = None,
        data_dir: Union[str, Path, None] = None,
        timeout: Optional[float] = None,
    ):
        """Create a manager and load its inventory.

        - ``account_name`` only labels the logger; the masked api key is used
          when it is missing.
        - ``venue`` defaults to the live OPSkins adapter; pass a ``MockVenue``
          for offline use.
        """
        if not api_key:
            raise ConfigurationError("api_key is required")

        self.log = logging.getLogger(
            "opskins_manager." + (account_name or mask_key(api_key))
        )
        self.account_name = account_name
        self.api_key = api_key
        self.app_id = app_id
        self.context_id = context_id

        self._data_dir = Path(data_dir) if data_dir is not None else default_data_dir()
        if venue is None:
            venue = (
                OpskinsVenue(api_key, timeout=timeout)
                if timeout is not None
                else OpskinsVenue(api_key)
            )
        self._venue = venue
        self._storage = FileStorage(self._data_dir / "inventory")
        self._cache_key = cache_key(api_key, app_id, context_id)
        self._lock: Optional[asyncio.Lock] = None
        self._lock_loop: Optional[asyncio.AbstractEventLoop] = None

        self.state = CacheState.UNINITIALIZED
        self.inventory = InventoryCache(self._storage, self._cache_key)
        self.set_inventory()

    @classmethod
    def from_settings(
        cls, settings: Settings, venue: Optional[Venue] = None
    ) -> "OpskinsManager":
        if venue is None and settings.api_key:
            venue = OpskinsVenue(
                settings.api_key, base_url=settings.base_url, timeout=settings.timeout
            )
        return cls(
            api_key=settings.api_key,
            account_name=settings.account_name,
            app_id=settings.app_id,
            context_id=settings.context_id,
            venue=venue,
            data_dir=settings.resolved_data_dir(),
        )

    @property
    def venue(self) -> Venue:
        return self._venue

    @property
    def cache_path(self) -> Path:
        return self._storage.path_for(self._cache_key)

    def set_inventory(self) -> None:
        """Fill the cache from disk, or from one remote fetch if no file exists."""
        self.log.debug("setting up inventory")
        self.state = CacheState.LOADING
        self.inventory = InventoryCache(self._storage, self._cache_key)

        records = self._storage.read(self._cache_key)
        if records is not None:
            self.inventory.load(records)
        else:
            try:
                for item in self._venue.get_inventory():
                    self.inventory.add_item(item)
            except OpskinsError as e:
                self.log.error("can't set inventory items: %s", e)

        self.state = CacheState.READY
        self.log.debug("set up inventory (%d items)", len(self.inventory))

    def _serialized(self) -> asyncio.Lock:
        """Lock for the running loop; asyncio locks cannot be shared across loops."""
        loop = asyncio.get_running_loop()
        if self._lock is None or self._lock_loop is not loop:
            self._lock = asyncio.Lock()
            self._lock_loop = loop
        return self._lock

    async def _call(self, fn: Callable[..., Any], *args: Any) -> Any:
        return await asyncio.to_thread(fn, *args)

    async def get_inventory(self) -> List[Item]:
        """Fetch the remote inventory. The cache is not touched."""
        return await self._call(self._venue.get_inventory)

    async def buy(self, name: str, max_price: Optional[float] = None) -> Item:
        """Return an owned item called ``name``, buying one if none is cached.

        ``max_price`` bounds the search; non-numeric values are ignored.
        """
        async with self._serialized():
            cached = self.inventory.find_by_name(name)
            if cached is not None:
                return cached

            query = {
                "search_item": f'"{name}"',
                "app": app_string(self.app_id, self.context_id),
            }
            if is_number(max_price):
                query["max"] = max_price

            sales = await self._call(self._venue.search, query)
            listing = next((s for s in sales if s.name == name), None)
            if listing is None:
                raise ItemNotFoundError(name)

            results = await self._call(
                self._venue.buy_items, [listing.id], listing.amount
            )
            if not results:
                raise RemoteCallError(f"purchase of sale {listing.id} returned no items")

            bought = results[0]
            item = Item(
                id=bought.new_itemid,
                name=bought.name,
                appid=self.app_id,
                contextid=self.context_id,
            )
            metrics.inc_purchases()
            try:
                self.inventory.add_item(item)
            except PersistenceError:
                self.log.error("bought item %s but could not cache it", item.id)
                raise
            self.log.debug("bought %s as item %s", name, item.id)
            return item

    def _resolve(self, ref: ItemRef) -> Item:
        item_id = ref_id(ref)
        if not item_id:
            raise ValueError("item reference carries no id")
        index = self.inventory.find_index_by_id(ref)
        if index != -1:
            return self.inventory.items()[index]
        if isinstance(ref, (str, int)):
            return Item(item_id, None, self.app_id, self.context_id)
        item = Item.from_raw(ref)
        if item.appid is None:
            item.appid = self.app_id
        if item.contextid is None:
            item.contextid = self.context_id
        return item

    def _compensate(self, item: Item, error: Exception) -> None:
        self.log.warning("withdraw of %s failed (%s); restoring it", item.id, error)
        try:
            self.inventory.add_item(item)
        except PersistenceError as e:
            self.log.error("could not restore item %s: %s", item.id, e)

    async def withdraw(self, item: ItemRef) -> WithdrawalOffer:
        """Send an owned item to Steam.

        The item leaves the cache before the remote call and is put back if the
        call fails, so a crash in between loses it from the cache.
        """
        async with self._serialized():
            record = self._resolve(item)
            self.inventory.remove_item(record)
            try:
                offers = await self._call(
                    self._venue.withdraw_inventory_items, [record.id]
                )
                if not offers:
                    raise RemoteCallError(f"withdraw of {record.id} returned no offers")
            except Exception as e:
                self._compensate(record, e)
                metrics.inc_withdrawals("failed")
                raise
            metrics.inc_withdrawals("ok")
            offer = offers[0]
            if offer.tradeoffer_error:
                self.log.warning(
                    "trade offer %s for %s reported: %s",
                    offer.tradeoffer_id,
                    record.id,
                    offer.tradeoffer_error,
                )
            return offer
