"""
Port data models - interface ports, port channels and traffic graphs.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import List, Optional

from .network import AttachedPrivateNetwork, Internet
from .types import BondingType, LinkSpeedType, PortMode


@dataclass
class InterfacePort:
    """
    Physical network port of a server.

    Attributes:
        port_id: Allocator-issued identifier, unique within the server
        port_channel_id: Owning port channel
        nickname: Display name
        enabled: Whether the link is up
        internet: Internet attachment (None when not connected)
        private_networks: Attached private networks
        mode: access or trunk, None when no network is assigned
        global_bandwidth_mbps: Internet bandwidth cap
        local_bandwidth_mbps: Private network bandwidth cap
    """
    port_id: int
    port_channel_id: int
    nickname: str
    enabled: bool = True
    internet: Optional[Internet] = None
    private_networks: List[AttachedPrivateNetwork] = field(default_factory=list)
    mode: Optional[PortMode] = None
    global_bandwidth_mbps: Optional[int] = None
    local_bandwidth_mbps: Optional[int] = None

    def clone(self) -> 'InterfacePort':
        return replace(
            self,
            internet=self.internet.clone() if self.internet else None,
            private_networks=[pn.clone() for pn in self.private_networks]
        )

    def reset_network(self) -> None:
        """Drop every network assignment field"""
        self.internet = None
        self.mode = None
        self.private_networks = []
        self.global_bandwidth_mbps = None
        self.local_bandwidth_mbps = None


@dataclass
class PortChannel:
    """
    Logical bundle of ports.

    The ports list holds port ids and is replaced wholesale whenever
    bonding is reconfigured.
    """
    port_channel_id: int
    link_speed_type: LinkSpeedType
    bonding_type: BondingType
    locked: bool = False
    ports: List[int] = field(default_factory=list)

    def clone(self) -> 'PortChannel':
        return replace(self, ports=list(self.ports))


@dataclass
class TrafficGraphData:
    timestamp: datetime
    value: float


@dataclass
class TrafficGraph:
    receive: List[TrafficGraphData]
    transmit: List[TrafficGraphData]
