"""In-memory category store adapter.

Implements CategoryStorePort with a plain dict guarded by a single
lock. Every operation, including id allocation, is one critical
section, so concurrent connection workers never observe a partial
update or receive the same id.

Ids come from a monotonic counter that starts after the highest seeded
id. An id is never handed out twice, even after deletions.
"""

import dataclasses
import logging
import threading
from collections.abc import Iterable

from catserver.core.models import Category
from catserver.core.ports import CategoryStorePort

logger = logging.getLogger(__name__)

DEFAULT_SEED = ("Beverages", "Condiments", "Confections")


class InMemoryCategoryStore(CategoryStorePort):
    """Thread-safe in-memory category collection."""

    def __init__(self, seed: Iterable[str] = DEFAULT_SEED):
        """Initialize the store.

        Args:
            seed: Names of the initial categories, assigned ids 1, 2, 3, ...
        """
        self._lock = threading.Lock()
        self._categories: dict[int, Category] = {}
        self._last_id = 0
        for name in seed:
            self._insert(name)
        logger.debug(f"Category store seeded with {len(self._categories)} records")

    def _insert(self, name: str) -> Category:
        self._last_id += 1
        category = Category(cid=self._last_id, name=name)
        self._categories[category.cid] = category
        return category

    def get(self, cid: int) -> Category | None:
        with self._lock:
            category = self._categories.get(cid)
            return dataclasses.replace(category) if category else None

    def list_all(self) -> list[Category]:
        with self._lock:
            return [dataclasses.replace(c) for c in self._categories.values()]

    def create(self, name: str) -> Category:
        with self._lock:
            return dataclasses.replace(self._insert(name))

    def rename(self, cid: int, name: str) -> bool:
        with self._lock:
            category = self._categories.get(cid)
            if category is None:
                return False
            category.name = name
            return True

    def delete(self, cid: int) -> bool:
        with self._lock:
            return self._categories.pop(cid, None) is not None

    def count(self) -> int:
        with self._lock:
            return len(self._categories)
