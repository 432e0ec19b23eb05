"""Runtime configuration.

Values come from explicit arguments first, then the environment (a ``.env``
file is honoured through python-dotenv), then defaults.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv  # type: ignore
from platformdirs import user_data_dir

APP_NAME = "opskins-manager"
APP_AUTHOR = "darkwar123"

DEFAULT_BASE_URL = "https://api.opskins.com"
DEFAULT_APP_ID = 730
DEFAULT_CONTEXT_ID = 2
DEFAULT_TIMEOUT = 10.0


def default_data_dir() -> Path:
    return Path(user_data_dir(APP_NAME, APP_AUTHOR))


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return float(raw)


@dataclass
class Settings:
    api_key: Optional[str] = None
    account_name: Optional[str] = None
    app_id: int = DEFAULT_APP_ID
    context_id: int = DEFAULT_CONTEXT_ID
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    data_dir: Optional[Path] = None

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        data_dir = os.getenv("OPSKINS_DATA_DIR")
        return cls(
            api_key=os.getenv("OPSKINS_API_KEY") or None,
            account_name=os.getenv("OPSKINS_ACCOUNT_NAME") or None,
            app_id=_int_env("OPSKINS_APP_ID", DEFAULT_APP_ID),
            context_id=_int_env("OPSKINS_CONTEXT_ID", DEFAULT_CONTEXT_ID),
            base_url=os.getenv("OPSKINS_BASE_URL") or DEFAULT_BASE_URL,
            timeout=_float_env("OPSKINS_TIMEOUT", DEFAULT_TIMEOUT),
            data_dir=Path(data_dir) if data_dir else None,
        )

    def resolved_data_dir(self) -> Path:
        return self.data_dir if self.data_dir is not None else default_data_dir()
