"""In-memory inventory mirror, written through to a FileStorage."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Union

from ..core.types import Item, same_id
from ..io.persistence import FileStorage

log = logging.getLogger(__name__)

ItemRef = Union[Item, Mapping[str, Any], str, int]


def ref_id(ref: ItemRef) -> Any:
    """Pull the id out of an Item, a mapping carrying one, or a bare id."""
    if isinstance(ref, Item):
        return ref.id
    if isinstance(ref, Mapping):
        return ref.get("id")
    return ref


class InventoryCache:
    """Ordered list of owned items.

    Every successful ``add_item``/``remove_item`` rewrites the whole file, so
    the file always reflects the last completed mutation. If the write fails
    the in-memory change is undone before the error propagates.
    """

    def __init__(
        self, storage: FileStorage, key: str, items: Optional[Iterable[Any]] = None
    ):
        self._storage = storage
        self.key = key
        self._items: List[Item] = []
        if items is not None:
            self.load(items)

    def load(self, records: Iterable[Any]) -> None:
        """Adopt persisted records as-is; nothing is written."""
        self._items = [Item.from_raw(r) for r in records]

    def find_by_name(self, name: str) -> Optional[Item]:
        for item in self._items:
            if item.name == name:
                return item
        return None

    def find_index_by_id(self, ref: ItemRef) -> int:
        item_id = ref_id(ref)
        for i, item in enumerate(self._items):
            if same_id(item.id, item_id):
                return i
        return -1

    def add_item(self, record: Union[Item, Mapping[str, Any]]) -> bool:
        item = Item.from_raw(record)
        if not item.id or self.find_index_by_id(item) != -1:
            return False
        self._items.append(item)
        try:
            self.persist()
        except Exception:
            self._items.pop()
            raise
        log.debug("cached item %s (%s)", item.id, item.name)
        return True

    def remove_item(self, ref: ItemRef) -> bool:
        index = self.find_index_by_id(ref)
        if index == -1:
            return False
        item = self._items.pop(index)
        try:
            self.persist()
        except Exception:
            self._items.insert(index, item)
            raise
        log.debug("dropped item %s (%s)", item.id, item.name)
        return True

    def persist(self) -> None:
        self._storage.save(self.key, self.to_records())

    def items(self) -> List[Item]:
        return list(self._items)

    def to_records(self) -> List[Dict[str, Any]]:
        return [item.to_dict() for item in self._items]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Item]:
        return iter(list(self._items))

    def __contains__(self, ref: object) -> bool:
        return self.find_index_by_id(ref) != -1  # type: ignore[arg-type]
