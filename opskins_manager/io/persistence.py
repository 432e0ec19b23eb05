"""JSON file storage for the inventory mirror.

One file per cache key inside a single directory. Writes go to a temporary
file next to the target and are swapped in with ``os.replace`` so a failed
write never leaves a half-written file behind.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import asdict, is_dataclass
from pathlib import Path
from typing import Any, Iterable, List, Optional

from ..core.errors import PersistenceError
from . import metrics

log = logging.getLogger(__name__)


def cache_key(api_key: str, appid: int, contextid: int) -> str:
    return f"inventory_{api_key}_{appid}_{contextid}.json"


def _plain(obj: Any) -> Any:
    if is_dataclass(obj) and not isinstance(obj, type):
        return asdict(obj)
    return obj


class FileStorage:
    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        return self.directory / key

    def read(self, key: str) -> Optional[List[Any]]:
        """Return the stored list, or None when there is nothing usable."""
        p = self.path_for(key)
        if not p.exists():
            return None
        try:
            with p.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            log.warning("ignoring unreadable cache file %s: %s", p, e)
            return None
        if not isinstance(data, list):
            log.warning("ignoring cache file %s: expected a JSON array", p)
            return None
        if not all(isinstance(r, dict) for r in data):
            log.warning("ignoring cache file %s: expected an array of objects", p)
            return None
        return data

    def save(self, key: str, records: Iterable[Any]) -> None:
        p = self.path_for(key)
        try:
            payload = json.dumps([_plain(r) for r in records], indent=2)
        except (TypeError, ValueError) as e:
            raise PersistenceError(f"cannot serialize records: {e}", str(p)) from e

        tmp_path: Optional[str] = None
        try:
            p.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                prefix=p.name + ".", suffix=".tmp", dir=str(p.parent)
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, p)
            tmp_path = None
        except OSError as e:
            raise PersistenceError(f"cannot write {p}: {e}", str(p)) from e
        finally:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)
        metrics.inc_cache_writes()
