"""
Redis-backed storage used when REDIS_URL is set. Implements the same
interface as src.database.redis (in-memory stub) and
src.database.local_storage (file-backed).
"""

from __future__ import annotations

from typing import Optional

import redis


class RedisStorage:
    """
    Redis-backed key/value storage for the applicant record.
    """

    def __init__(self, url: str, key_prefix: str = "quote_wizard:", ttl: Optional[int] = None) -> None:
        self._client = redis.from_url(url, decode_responses=True)
        self._prefix = key_prefix
        self._ttl = ttl

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    def get_item(self, key: str) -> Optional[str]:
        return self._client.get(self._key(key))

    def set_item(self, key: str, value: str) -> None:
        if self._ttl:
            self._client.setex(self._key(key), self._ttl, value)
        else:
            self._client.set(self._key(key), value)

    def remove_item(self, key: str) -> None:
        self._client.delete(self._key(key))

    def ping(self) -> bool:
        try:
            return self._client.ping()
        except redis.RedisError:
            return False
