"""
phyfake - simulated physical server provisioning API

Keeps an in-memory model of servers, ports and provisioning state and
answers the resource-management operations of the real API, including
asynchronous state transitions, for use in tests.

Architecture:
- Engine: record store guarded by a reader/writer lock
- ActionScheduler: tracked background actions
- ServerService: Facade exposing one coroutine per API operation
- web_app: FastAPI routes over the service
"""

from .engine import Engine, ActionScheduler
from .errors import EngineError, ErrorType, NotFoundError, ConflictError, InvalidRequestError
from .seed import Dataset, default_dataset, load_dataset
from .services import ServerService

__all__ = [
    # Engine
    "Engine",
    "ActionScheduler",
    # Errors
    "EngineError",
    "ErrorType",
    "NotFoundError",
    "ConflictError",
    "InvalidRequestError",
    # Seed data
    "Dataset",
    "default_dataset",
    "load_dataset",
    # Services
    "ServerService",
]
