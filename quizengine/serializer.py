from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class WriteSerializer:
    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self.completed = 0

    @property
    def pending(self) -> bool:
        return self._lock.locked()

    async def run(self, critical_section: Callable[[], Awaitable[T]]) -> T:
        async with self._lock:
            try:
                return await critical_section()
            except Exception:
                logger.error("Serialized write failed", exc_info=True)
                raise
            finally:
                self.completed += 1
