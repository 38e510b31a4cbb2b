"""
Network data models - dedicated subnets, private networks and the
attachments a port carries once a network is assigned to it.
"""

from dataclasses import dataclass, field, replace
from typing import List, Optional

from .types import InternetType


@dataclass
class ServiceInfo:
    """
    Contract information shared by servers, subnets and private networks.

    Attributes:
        service_id: Contract identifier
        nickname: Display name chosen by the customer
        description: Optional free-form description
        tags: Free-form tags
    """
    service_id: str
    nickname: str
    description: Optional[str] = None
    tags: List[str] = field(default_factory=list)

    def clone(self) -> 'ServiceInfo':
        return replace(self, tags=list(self.tags))


@dataclass
class Ipv4Subnet:
    network_address: str
    prefix_length: int
    gateway_address: Optional[str] = None

    def clone(self) -> 'Ipv4Subnet':
        return replace(self)


@dataclass
class DedicatedSubnet:
    """Customer-exclusive global subnet (read-only catalog entry)"""
    dedicated_subnet_id: str
    service: ServiceInfo
    ipv4: Ipv4Subnet

    def clone(self) -> 'DedicatedSubnet':
        return replace(self, service=self.service.clone(), ipv4=self.ipv4.clone())


@dataclass
class PrivateNetwork:
    """Isolated internal network (read-only catalog entry)"""
    private_network_id: str
    service: ServiceInfo
    vlan_id: int

    def clone(self) -> 'PrivateNetwork':
        return replace(self, service=self.service.clone())


@dataclass
class AttachedDedicatedSubnet:
    dedicated_subnet_id: str
    nickname: str

    def clone(self) -> 'AttachedDedicatedSubnet':
        return replace(self)


@dataclass
class Internet:
    """
    Internet attachment of a port.

    dedicated_subnet is only set when subnet_type is dedicated_subnet.
    """
    subnet_type: InternetType
    network_address: str
    prefix_length: int
    dedicated_subnet: Optional[AttachedDedicatedSubnet] = None

    def clone(self) -> 'Internet':
        subnet = self.dedicated_subnet.clone() if self.dedicated_subnet else None
        return replace(self, dedicated_subnet=subnet)


@dataclass
class AttachedPrivateNetwork:
    private_network_id: str
    nickname: str

    def clone(self) -> 'AttachedPrivateNetwork':
        return replace(self)
