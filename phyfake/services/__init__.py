"""
Service layer - the operations of the simulated API.
"""

from .server_service import ServerService

__all__ = ['ServerService']
