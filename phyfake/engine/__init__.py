"""
In-memory state engine: record store, lock discipline and background actions.
"""

from .engine import Engine
from .ids import IdAllocator
from .rwlock import ReadWriteLock
from .scheduler import ActionScheduler

__all__ = ['Engine', 'IdAllocator', 'ReadWriteLock', 'ActionScheduler']
