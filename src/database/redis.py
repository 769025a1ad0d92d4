"""
Lightweight in-memory storage for local development and tests.

Implements the same key/value interface as `src.database.local_storage`
and `src.database.redis_real` so that the `FormStore` can run without
touching disk or a Redis instance.
"""

from __future__ import annotations

from typing import Dict, Optional


class InMemoryStorage:
    def __init__(self) -> None:
        # Simple in-memory store: key -> serialized value
        self._items: Dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    # --- Misc -----------------------------------------------------------------

    def ping(self) -> bool:
        """Always reachable."""
        return True
