from __future__ import annotations

import asyncio
from enum import Enum

from src.templates.store import TemplateStore


class LifecycleState(str, Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"


class StoreLifecycle:
    """
    Uninitialized -> Ready gate in front of a template store.
    Concurrent first callers share a single initialize() call.
    """

    def __init__(self, store: TemplateStore):
        self._store = store
        self._lock = asyncio.Lock()
        self.state = LifecycleState.UNINITIALIZED

    @property
    def is_ready(self) -> bool:
        return self.state is LifecycleState.READY

    async def ensure_ready(self) -> None:
        if self.is_ready:
            return
        async with self._lock:
            if self.is_ready:
                return
            # a failed initialize leaves the state untouched so the next call retries
            await self._store.initialize()
            self.state = LifecycleState.READY
