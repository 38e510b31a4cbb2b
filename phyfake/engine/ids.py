"""
Identifier allocator for sub-resources created at runtime (ports).
"""

import itertools


class IdAllocator:
    """
    Issues monotonically increasing integer ids, starting at `start`.

    Only called from the event loop while the engine's exclusive lock is
    held, so no further synchronization is needed.
    """

    def __init__(self, start: int = 1):
        self._counter = itertools.count(start)

    def next_id(self) -> int:
        return next(self._counter)
