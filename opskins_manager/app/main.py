"""App bootstrap for live or dry-run modes."""

from __future__ import annotations

from pathlib import Path
from typing import Union

from ..core.config import Settings
from ..core.types import Item, Listing
from ..venue.mock import MockVenue
from .manager import OpskinsManager


def build_mock_venue(app_id: int = 730, context_id: int = 2) -> MockVenue:
    venue = MockVenue(appid=app_id, contextid=context_id)
    venue.inventory.append(Item(1, "AK-47 | Redline (Field-Tested)", app_id, context_id))
    venue.sales.extend(
        [
            Listing(501, "AWP | Asiimov (Field-Tested)", 4350, app_id, context_id),
            Listing(502, "M4A4 | Howl (Minimal Wear)", 250000, app_id, context_id),
        ]
    )
    return venue


def build_manager(settings: Settings, dry_run: bool = False) -> OpskinsManager:
    if dry_run:
        venue = build_mock_venue(settings.app_id, settings.context_id)
        return OpskinsManager.from_settings(settings, venue=venue)
    return OpskinsManager.from_settings(settings)


def build_mock_manager(
    data_dir: Union[str, Path], api_key: str = "dry-run"
) -> OpskinsManager:
    settings = Settings(api_key=api_key, data_dir=Path(data_dir))
    return build_manager(settings, dry_run=True)
