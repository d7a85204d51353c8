from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Dict, Generic, Hashable, Optional, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class InFlight(Generic[K, V]):
    """Memoising async cache with one outstanding load per key.

    The first caller for a key starts the loader as its own task; that caller
    and everyone arriving while it is pending await the same task and see its
    value or its exception. Cancelling any caller, the first one included,
    leaves the load running for the others. Only successful values are
    stored. A failed load leaves no marker behind, so the next caller starts
    a fresh load.
    """

    def __init__(self) -> None:
        self._values: Dict[K, V] = {}
        self._pending: Dict[K, asyncio.Task] = {}

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def peek(self, key: K) -> Optional[V]:
        return self._values.get(key)

    def is_pending(self, key: K) -> bool:
        return key in self._pending

    async def get(self, key: K, loader: Callable[[], Awaitable[V]]) -> V:
        if key in self._values:
            return self._values[key]
        task = self._pending.get(key)
        if task is None:
            task = asyncio.ensure_future(self._load(key, loader))
            self._pending[key] = task
            task.add_done_callback(lambda done, key=key: self._settle(key, done))
        return await asyncio.shield(task)

    async def _load(self, key: K, loader: Callable[[], Awaitable[V]]) -> V:
        value = await loader()
        self._values[key] = value
        return value

    def _settle(self, key: K, task: asyncio.Task) -> None:
        if self._pending.get(key) is task:
            del self._pending[key]
        if not task.cancelled():
            # mark retrieved so a failure nobody awaited is not reported by the loop
            task.exception()
