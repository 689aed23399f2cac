"""
In-process TTL cache with single-flight computation.

`get_or_compute` returns a live entry when there is one, joins an in-flight
computation for the same key when one is running, and otherwise starts the
computation itself. Failed or cancelled computations are never stored.
Expired entries are evicted lazily on lookup.
"""

from __future__ import annotations

import asyncio
import hashlib
import json
import logging
import time
from typing import Any, Awaitable, Callable, Dict, Generic, TypeVar

from cachetools import TTLCache

from shipfit_app.config.limits import CACHE_MAX_ENTRIES, CACHE_TTL_S
from shipfit_app.models import Character, Fitting, SlotCategory

_LOG = logging.getLogger(__name__)

V = TypeVar("V")


def fitting_fingerprint(fitting: Fitting) -> str:
    """sha256 over the ship type and every module, drone and cargo entry."""
    payload: Dict[str, Any] = {"ship": fitting.ship_type_id}
    for slot in SlotCategory:
        payload[slot.value] = [
            [e.type_id, e.quantity, e.charge_type_id, e.online] for e in fitting.modules_in(slot)
        ]
    payload["cargo"] = [[c.type_id, c.quantity] for c in fitting.cargo]
    raw = json.dumps(payload, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()


def fitting_cache_key(fitting: Fitting, character: Character | None = None) -> str:
    character_id = character.id if character is not None else None
    return f"{fitting.id}:{character_id}:{fitting_fingerprint(fitting)}"


class ResultCache(Generic[V]):
    def __init__(
        self,
        ttl_s: float = CACHE_TTL_S,
        clock: Callable[[], float] = time.monotonic,
        max_entries: int = CACHE_MAX_ENTRIES,
    ) -> None:
        self._entries: TTLCache = TTLCache(maxsize=max_entries, ttl=ttl_s, timer=clock)
        self._inflight: Dict[str, asyncio.Task] = {}

    def get(self, key: str) -> V | None:
        self._entries.expire()
        return self._entries.get(key)

    def invalidate(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        self._entries.expire()
        return len(self._entries)

    async def get_or_compute(self, key: str, factory: Callable[[], Awaitable[V]]) -> V:
        cached = self.get(key)
        if cached is not None:
            _LOG.debug("Cache hit for %s", key)
            return cached

        pending = self._inflight.get(key)
        if pending is not None:
            # Shield so a waiter's own cancellation does not abort the shared computation
            _LOG.debug("Joining in-flight computation for %s", key)
            return await asyncio.shield(pending)

        _LOG.debug("Cache miss for %s", key)
        task = asyncio.ensure_future(factory())
        self._inflight[key] = task
        try:
            value = await task
        finally:
            if self._inflight.get(key) is task:
                del self._inflight[key]
        self._entries[key] = value
        return value
