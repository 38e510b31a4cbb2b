"""
Data models of the simulated provisioning API.
Plain dataclasses with explicit clone() methods.
"""

from .types import (
    BondingType,
    InternetType,
    LinkSpeedType,
    PortMode,
    PowerOperation,
    PowerState,
    ServerLockStatus,
)
from .network import (
    AttachedDedicatedSubnet,
    AttachedPrivateNetwork,
    DedicatedSubnet,
    Internet,
    Ipv4Subnet,
    PrivateNetwork,
    ServiceInfo,
)
from .port import InterfacePort, PortChannel, TrafficGraph, TrafficGraphData
from .server import (
    CachedPowerStatus,
    LogicalVolume,
    OSImage,
    PaginateMeta,
    PowerStatus,
    RaidStatus,
    Server,
    ServerList,
    ServerRecord,
    ServerSpec,
    Zone,
)

__all__ = [
    # Enumerations
    'BondingType',
    'InternetType',
    'LinkSpeedType',
    'PortMode',
    'PowerOperation',
    'PowerState',
    'ServerLockStatus',
    # Networks
    'AttachedDedicatedSubnet',
    'AttachedPrivateNetwork',
    'DedicatedSubnet',
    'Internet',
    'Ipv4Subnet',
    'PrivateNetwork',
    'ServiceInfo',
    # Ports
    'InterfacePort',
    'PortChannel',
    'TrafficGraph',
    'TrafficGraphData',
    # Servers
    'CachedPowerStatus',
    'LogicalVolume',
    'OSImage',
    'PaginateMeta',
    'PowerStatus',
    'RaidStatus',
    'Server',
    'ServerList',
    'ServerRecord',
    'ServerSpec',
    'Zone',
]
