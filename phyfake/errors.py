"""
Error taxonomy of the simulated API.

Callers get a typed error telling apart "does not exist", "busy" and
"bad input", so the web layer can map each to a status code without
inspecting the message.
"""

from enum import Enum
from typing import Optional, Union


class ErrorType(str, Enum):
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INVALID_REQUEST = "invalid_request"


class EngineError(Exception):
    """
    Base class for all errors returned by the server service.

    Attributes:
        resource: Kind of resource involved (e.g. 'server', 'port')
        resource_id: Identifier of that resource
        detail: Optional human readable explanation
    """

    error_type: ErrorType

    def __init__(self, resource: str, resource_id: Union[str, int], detail: Optional[str] = None):
        self.resource = resource
        self.resource_id = str(resource_id)
        self.detail = detail
        super().__init__(self._format())

    def _format(self) -> str:
        message = f"{self.error_type.value}: {self.resource}[{self.resource_id}]"
        if self.detail:
            message = f"{message} {self.detail}"
        return message

    def to_dict(self) -> dict:
        return {
            "error_code": self.error_type.value,
            "resource": self.resource,
            "resource_id": self.resource_id,
            "detail": self.detail,
        }


class NotFoundError(EngineError):
    """Raised when a referenced resource does not exist."""
    error_type = ErrorType.NOT_FOUND


class ConflictError(EngineError):
    """Raised when an action is requested on a resource busy with another action."""
    error_type = ErrorType.CONFLICT


class InvalidRequestError(EngineError):
    """Raised when caller-supplied data fails validation."""
    error_type = ErrorType.INVALID_REQUEST
