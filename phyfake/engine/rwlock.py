"""
Reader/writer lock for asyncio.

Any number of readers may hold the lock together; a writer excludes
readers and other writers. Waiting writers block newly arriving readers
so a steady stream of reads cannot starve a write.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator


class ReadWriteLock:
    """
    Shared/exclusive lock guarding the engine state.

    Usage:
        async with lock.reader():
            ...  # shared access
        async with lock.writer():
            ...  # exclusive access
    """

    def __init__(self):
        self._cond = asyncio.Condition()
        self._readers = 0
        self._writer = False
        self._waiting_writers = 0

    @property
    def readers(self) -> int:
        """Number of current shared holders"""
        return self._readers

    @property
    def writing(self) -> bool:
        """True while an exclusive holder is active"""
        return self._writer

    async def acquire_read(self) -> None:
        async with self._cond:
            await self._cond.wait_for(lambda: not self._writer and self._waiting_writers == 0)
            self._readers += 1

    async def release_read(self) -> None:
        async with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    async def acquire_write(self) -> None:
        async with self._cond:
            self._waiting_writers += 1
            try:
                await self._cond.wait_for(lambda: not self._writer and self._readers == 0)
            except BaseException:
                # readers queued behind this writer must be woken up again
                self._waiting_writers -= 1
                self._cond.notify_all()
                raise
            self._waiting_writers -= 1
            self._writer = True

    async def release_write(self) -> None:
        async with self._cond:
            self._writer = False
            self._cond.notify_all()

    @asynccontextmanager
    async def reader(self) -> AsyncIterator[None]:
        await self.acquire_read()
        try:
            yield
        finally:
            # shielded so a cancelled holder still gives the lock back
            await asyncio.shield(self.release_read())

    @asynccontextmanager
    async def writer(self) -> AsyncIterator[None]:
        await self.acquire_write()
        try:
            yield
        finally:
            await asyncio.shield(self.release_write())
