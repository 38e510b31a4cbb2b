"""
Server data models.

A ServerRecord is what the engine stores: the public Server document plus
the data served from sub-resources (OS images, live power status, RAID
status). Every model exposes an explicit clone() so that values leaving the
engine never alias the stored instances.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import List, Optional

from .network import ServiceInfo
from .port import InterfacePort, PortChannel
from .types import PowerState, ServerLockStatus


@dataclass
class Zone:
    zone_id: int
    name: str
    region: str

    def clone(self) -> 'Zone':
        return replace(self)


@dataclass
class ServerSpec:
    """Hardware summary of a server"""
    cpu_model_name: str
    cpu_socket_count: int
    cpu_core_count: int
    memory_size_mib: int
    port_channel_1gbe_count: int = 0
    port_channel_10gbe_count: int = 0
    storage_summary: str = ""

    def clone(self) -> 'ServerSpec':
        return replace(self)


@dataclass
class PowerStatus:
    status: PowerState

    def clone(self) -> 'PowerStatus':
        return replace(self)


@dataclass
class CachedPowerStatus:
    """Last known power state and when it was recorded"""
    status: PowerState
    stored: datetime

    def clone(self) -> 'CachedPowerStatus':
        return replace(self)


@dataclass
class Server:
    """
    Public server document.

    Attributes:
        server_id: Immutable identifier
        service: Contract information
        zone: Location of the server
        spec: Hardware summary
        port_channels: Port channels of the server
        ports: Interface ports, replaced wholesale by bonding configuration
        lock_status: In-progress provisioning action, None when idle
        cached_power_status: Last recorded power state
    """
    server_id: str
    service: ServiceInfo
    zone: Zone
    spec: ServerSpec
    port_channels: List[PortChannel] = field(default_factory=list)
    ports: List[InterfacePort] = field(default_factory=list)
    lock_status: Optional[ServerLockStatus] = None
    cached_power_status: Optional[CachedPowerStatus] = None

    def clone(self) -> 'Server':
        cached = self.cached_power_status.clone() if self.cached_power_status else None
        return replace(
            self,
            service=self.service.clone(),
            zone=self.zone.clone(),
            spec=self.spec.clone(),
            port_channels=[pc.clone() for pc in self.port_channels],
            ports=[p.clone() for p in self.ports],
            cached_power_status=cached
        )

    def get_port_by_id(self, port_id: int) -> Optional[InterfacePort]:
        for port in self.ports:
            if port.port_id == port_id:
                return port
        return None

    def get_port_channel_by_id(self, port_channel_id: int) -> Optional[PortChannel]:
        for port_channel in self.port_channels:
            if port_channel.port_channel_id == port_channel_id:
                return port_channel
        return None


@dataclass
class OSImage:
    os_image_id: str
    name: str
    manual_partition: bool = False
    require_password: bool = True

    def clone(self) -> 'OSImage':
        return replace(self)


@dataclass
class LogicalVolume:
    volume_id: str
    raid_level: str
    status: str
    physical_device_ids: List[str] = field(default_factory=list)

    def clone(self) -> 'LogicalVolume':
        return replace(self, physical_device_ids=list(self.physical_device_ids))


@dataclass
class RaidStatus:
    monitored_at: datetime
    overall_status: str
    logical_volumes: List[LogicalVolume] = field(default_factory=list)

    def clone(self) -> 'RaidStatus':
        return replace(self, logical_volumes=[v.clone() for v in self.logical_volumes])


@dataclass
class ServerRecord:
    """
    Engine-side record of one server.

    Owned by the engine; only mutated while holding the exclusive lock.
    installed_os_image_id records the image of the last finished install
    step and is not part of the public server document.
    """
    server: Server
    power_status: PowerStatus
    raid_status: RaidStatus
    os_images: List[OSImage] = field(default_factory=list)
    installed_os_image_id: Optional[str] = None

    @property
    def id(self) -> str:
        return self.server.server_id

    def get_os_image_by_id(self, os_image_id: str) -> Optional[OSImage]:
        for image in self.os_images:
            if image.os_image_id == os_image_id:
                return image
        return None


@dataclass
class PaginateMeta:
    count: int


@dataclass
class ServerList:
    meta: PaginateMeta
    servers: List[Server]
