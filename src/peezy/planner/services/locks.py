"""用户级锁注册表

同一用户的生成与级联串行执行（级联第 3 步先读后写，并发会丢失更新）；
不同用户互不阻塞。无人持有或等待的锁会被回收。
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager


class UserLockRegistry:
    """按 user_id 分配 asyncio.Lock"""

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._holders: dict[str, int] = {}
        self._guard = asyncio.Lock()

    @asynccontextmanager
    async def hold(self, user_id: str) -> AsyncIterator[None]:
        """持有用户锁直到退出上下文"""
        lock = await self._acquire_ref(user_id)
        try:
            async with lock:
                yield
        finally:
            await self._release_ref(user_id)

    async def _acquire_ref(self, user_id: str) -> asyncio.Lock:
        async with self._guard:
            lock = self._locks.get(user_id)
            if lock is None:
                lock = asyncio.Lock()
                self._locks[user_id] = lock
            self._holders[user_id] = self._holders.get(user_id, 0) + 1
            return lock

    async def _release_ref(self, user_id: str) -> None:
        async with self._guard:
            remaining = self._holders.get(user_id, 0) - 1
            if remaining > 0:
                self._holders[user_id] = remaining
                return
            self._holders.pop(user_id, None)
            self._locks.pop(user_id, None)

    def __len__(self) -> int:
        return len(self._locks)
