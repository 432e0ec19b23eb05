"""OPSkins Web API adapter.

Thin ``requests`` wrapper over the four endpoints the manager needs. The API
authenticates with HTTP basic auth (API key as user, empty password) and wraps
every answer in ``{"status": 1, "response": {...}}``; anything else is raised
as ``RemoteCallError``.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence

import requests

from .base import Venue
from ..core.config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT
from ..core.errors import RemoteCallError
from ..core.types import Item, ItemId, Listing, PurchaseResult, WithdrawalOffer

log = logging.getLogger(__name__)

STATUS_OK = 1


def _join_ids(ids: Sequence[ItemId]) -> str:
    return ",".join(str(i) for i in ids)


class OpskinsVenue(Venue):
    def __init__(
        self,
        api_key: str,
        name: str = "opskins",
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        super().__init__(name)
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session
        self._last_api_call = datetime.now()

    def _rate_limit(self, threshold_ms: int = 100) -> None:
        """OPSkins throttles keys that send bursts; keep calls threshold_ms apart."""
        now = datetime.now()
        delta = now - self._last_api_call
        if delta < timedelta(milliseconds=threshold_ms):
            remaining = (timedelta(milliseconds=threshold_ms) - delta).total_seconds()
            if remaining > 0:
                time.sleep(min(remaining, 0.25))
        self._last_api_call = datetime.now()

    def _headers(self) -> Dict[str, str]:
        return {"Accept": "application/json"}

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        self._rate_limit()
        url = f"{self.base_url}/{path.lstrip('/')}"
        send = self._session.request if self._session is not None else requests.request
        log.debug("%s %s", method, path)
        try:
            resp = send(
                method,
                url,
                params=params,
                data=data,
                headers=self._headers(),
                auth=(self.api_key, ""),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise RemoteCallError(f"{method} {path} failed: {e}") from e

        try:
            body = resp.json()
        except ValueError:
            body = None

        if not (200 <= resp.status_code < 300):
            message = (body or {}).get("message") if isinstance(body, dict) else None
            raise RemoteCallError(
                f"{method} {path} returned {resp.status_code}: {message or resp.text}",
                status_code=resp.status_code,
                payload=body,
            )
        if not isinstance(body, dict):
            raise RemoteCallError(
                f"{method} {path} returned a non-JSON body",
                status_code=resp.status_code,
            )
        if body.get("status") != STATUS_OK:
            raise RemoteCallError(
                body.get("message") or f"{method} {path} status {body.get('status')}",
                status_code=resp.status_code,
                payload=body,
            )
        return body.get("response") or {}

    def get_inventory(self) -> List[Item]:
        response = self._request("GET", "IInventory/GetInventory/v2/")
        return [Item.from_raw(x) for x in response.get("items", [])]

    def search(self, query: Dict[str, Any]) -> List[Listing]:
        response = self._request("GET", "ISales/Search/v1/", params=query)
        try:
            return [Listing.from_raw(x) for x in response.get("sales", [])]
        except (AttributeError, TypeError, ValueError) as e:
            raise RemoteCallError(
                f"malformed sale in search results: {e}", payload=response
            ) from e

    def buy_items(
        self, sale_ids: Sequence[ItemId], total: float
    ) -> List[PurchaseResult]:
        response = self._request(
            "POST",
            "ISales/BuyItems/v1/",
            data={"saleids": _join_ids(sale_ids), "total": total},
        )
        return [PurchaseResult.from_raw(x) for x in response.get("items", [])]

    def withdraw_inventory_items(
        self, item_ids: Sequence[ItemId]
    ) -> List[WithdrawalOffer]:
        response = self._request(
            "POST", "IInventory/Withdraw/v1/", data={"item_id": _join_ids(item_ids)}
        )
        return [WithdrawalOffer.from_raw(x) for x in response.get("offers", [])]
