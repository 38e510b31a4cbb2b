"""
Request payloads of the HTTP API.

Enumerated fields are plain strings here: the server service validates
them and answers unknown values with an invalid-request error.
"""

from typing import List, Optional
from pydantic import BaseModel


class OsInstallParameter(BaseModel):
    """OS installation request (only os_image_id is used by the simulation)"""
    os_image_id: str
    password: Optional[str] = None
    manual_partition: Optional[bool] = None


class ConfigureBondingParameter(BaseModel):
    bonding_type: str
    port_nicknames: Optional[List[str]] = None


class UpdateServerPortParameter(BaseModel):
    nickname: str


class AssignNetworkParameter(BaseModel):
    """Network connection change for one port"""
    internet_type: Optional[str] = None
    dedicated_subnet_id: Optional[str] = None
    mode: Optional[str] = None
    private_network_ids: Optional[List[str]] = None


class EnableServerPortParameter(BaseModel):
    enable: bool


class PowerControlParameter(BaseModel):
    operation: str  # on, off, reset or soft


class ErrorResponse(BaseModel):
    error_code: str
    resource: str
    resource_id: str
    detail: Optional[str] = None
