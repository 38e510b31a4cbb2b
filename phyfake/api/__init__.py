"""
Wire-level request and error schemas.
"""

from .schemas import (
    AssignNetworkParameter,
    ConfigureBondingParameter,
    EnableServerPortParameter,
    ErrorResponse,
    OsInstallParameter,
    PowerControlParameter,
    UpdateServerPortParameter,
)

__all__ = [
    'AssignNetworkParameter',
    'ConfigureBondingParameter',
    'EnableServerPortParameter',
    'ErrorResponse',
    'OsInstallParameter',
    'PowerControlParameter',
    'UpdateServerPortParameter',
]
