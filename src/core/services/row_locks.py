"""
Keyed asyncio locks serializing writers per stock row / assignment.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import AsyncExitStack, asynccontextmanager


def material_key(material_id: str) -> str:
    return f"material:{material_id}"


def assignment_key(assignment_id: int) -> str:
    return f"assignment:{assignment_id}"


def assignment_slot_key(project_id: str, material_id: str, purpose: str) -> str:
    return f"slot:{project_id}:{material_id}:{purpose}"


class RowLockRegistry:
    """
    One asyncio.Lock per key, created on first use and dropped once no
    holder or waiter is left on it.

    Callers needing several locks pass all keys to ``hold`` in a fixed
    order (slot, then assignment, then material) so two writers never wait on
    each other crosswise.
    """

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        # Holders plus waiters per key.
        self._users: dict[str, int] = {}

    def get(self, key: str) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock

    def locked(self, key: str) -> bool:
        lock = self._locks.get(key)
        return lock is not None and lock.locked()

    @asynccontextmanager
    async def _acquire(self, key: str) -> AsyncIterator[None]:
        lock = self.get(key)
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                self._locks.pop(key, None)

    @asynccontextmanager
    async def hold(self, *keys: str) -> AsyncIterator[None]:
        """Acquire the locks for ``keys`` in the given order."""
        async with AsyncExitStack() as stack:
            for key in keys:
                await stack.enter_async_context(self._acquire(key))
            yield

    def __len__(self) -> int:
        return len(self._locks)
