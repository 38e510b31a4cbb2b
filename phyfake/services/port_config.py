"""
Port configuration logic - bonding and network assignment rules.

These functions mutate the records they are given and must be called
while the caller holds the engine's exclusive lock.
"""

import logging
from enum import Enum
from typing import Callable, List, Optional, Sequence, Type, TypeVar

from ..errors import InvalidRequestError
from ..models import (
    AttachedDedicatedSubnet,
    AttachedPrivateNetwork,
    BondingType,
    InterfacePort,
    Internet,
    InternetType,
    PortChannel,
    PortMode,
)

logger = logging.getLogger(__name__)

E = TypeVar('E', bound=Enum)

# Shared global subnet handed out for common_subnet attachments
COMMON_SUBNET_ADDRESS = "203.0.113.0"
COMMON_SUBNET_PREFIX_LENGTH = 24

COMMON_SUBNET_BANDWIDTH_MBPS = 100
DEDICATED_SUBNET_BANDWIDTH_MBPS = 500
# Fixed regardless of the number of attached networks
PRIVATE_NETWORK_BANDWIDTH_MBPS = 1000


def coerce_enum(enum_cls: Type[E], value, resource: str, resource_id) -> Optional[E]:
    """
    Convert a raw value into a member of enum_cls.

    Args:
        enum_cls: Target enumeration
        value: Raw value (member, string or None)
        resource: Resource kind reported on failure
        resource_id: Resource identifier reported on failure

    Returns:
        The enum member, or None when value is None

    Raises:
        InvalidRequestError: If value is not a member of enum_cls
    """
    if value is None:
        return None
    try:
        return enum_cls(value)
    except ValueError:
        raise InvalidRequestError(
            resource, resource_id, f"invalid {enum_cls.__name__}: {value}"
        ) from None


# ============================================================================
# Bonding
# ============================================================================

def parse_bonding_type(value) -> Optional[BondingType]:
    """Return the matching BondingType, or None for unknown values"""
    for bonding in BondingType:
        if bonding == value:
            return bonding
    return None


def build_bonding_ports(port_channel: PortChannel,
                        bonding_type,
                        port_nicknames: Optional[Sequence[str]],
                        next_id: Callable[[], int]) -> List[InterfacePort]:
    """
    Create the ports a port channel gets for a bonding type.

    lacp/static bonding yields one port, single bonding yields two
    independent ports. Unknown bonding types yield no port at all.
    Nicknames are validated before any id is allocated; an empty-string
    nickname for lacp/static falls back to the link speed label.

    Args:
        port_channel: Channel the ports belong to
        bonding_type: Requested bonding type (member or raw value)
        port_nicknames: Optional nicknames, one per created port
        next_id: Identifier allocator

    Returns:
        Newly created ports, enabled and tagged with the channel id

    Raises:
        InvalidRequestError: If the number of nicknames does not match
    """
    label = port_channel.link_speed_type.value
    # An empty list means "no nicknames supplied"
    if not port_nicknames:
        port_nicknames = None

    bonding = parse_bonding_type(bonding_type)
    if bonding is None:
        logger.warning(
            f"Unknown bonding type '{bonding_type}' for port-channel "
            f"{port_channel.port_channel_id}, no port created"
        )
        return []

    expected = 2 if bonding is BondingType.SINGLE else 1
    if port_nicknames is not None and len(port_nicknames) != expected:
        raise InvalidRequestError(
            "port-channel", port_channel.port_channel_id,
            f"invalid port_nicknames: {bonding.value} bonding requires {expected}, got {len(port_nicknames)}"
        )

    if bonding is BondingType.SINGLE:
        names = list(port_nicknames) if port_nicknames else [f"{label} 1", f"{label} 2"]
    else:
        names = [port_nicknames[0] if port_nicknames and port_nicknames[0] else label]

    return [
        InterfacePort(
            port_id=next_id(),
            port_channel_id=port_channel.port_channel_id,
            nickname=name,
            enabled=True
        )
        for name in names
    ]


# ============================================================================
# Network assignment
# ============================================================================

def assign_network(port: InterfacePort,
                   engine,
                   internet_type=None,
                   dedicated_subnet_id: Optional[str] = None,
                   mode=None,
                   private_network_ids: Optional[Sequence[str]] = None) -> InterfacePort:
    """
    Replace the network assignment of a port.

    Enumeration values are checked first. The port is then reset and only
    what the request specifies is applied again. A bad subnet or network
    id is detected after the reset, so on failure the port keeps its reset
    state for everything not applied yet.

    Args:
        port: Stored port instance
        engine: Engine providing the dedicated subnet and private network catalogs
        internet_type: common_subnet, dedicated_subnet or None
        dedicated_subnet_id: Required for dedicated_subnet
        mode: access, trunk or None
        private_network_ids: Private networks to attach

    Returns:
        The mutated port

    Raises:
        InvalidRequestError: On unknown enum values or catalog ids
    """
    internet_kind = coerce_enum(InternetType, internet_type, "port", port.port_id)
    port_mode = coerce_enum(PortMode, mode, "port", port.port_id)

    port.reset_network()

    if internet_kind is InternetType.COMMON_SUBNET:
        port.internet = Internet(
            subnet_type=InternetType.COMMON_SUBNET,
            network_address=COMMON_SUBNET_ADDRESS,
            prefix_length=COMMON_SUBNET_PREFIX_LENGTH
        )
        port.global_bandwidth_mbps = COMMON_SUBNET_BANDWIDTH_MBPS
    elif internet_kind is InternetType.DEDICATED_SUBNET:
        subnet = engine.get_dedicated_subnet_by_id(dedicated_subnet_id) if dedicated_subnet_id else None
        if subnet is None:
            raise InvalidRequestError(
                "port", port.port_id, f"invalid dedicated subnet id: {dedicated_subnet_id}"
            )
        port.internet = Internet(
            subnet_type=InternetType.DEDICATED_SUBNET,
            network_address=subnet.ipv4.network_address,
            prefix_length=subnet.ipv4.prefix_length,
            dedicated_subnet=AttachedDedicatedSubnet(
                dedicated_subnet_id=subnet.dedicated_subnet_id,
                nickname=subnet.service.nickname
            )
        )
        port.global_bandwidth_mbps = DEDICATED_SUBNET_BANDWIDTH_MBPS

    port.mode = port_mode

    if private_network_ids is not None:
        attachments = []
        for network_id in private_network_ids:
            network = engine.get_private_network_by_id(network_id)
            if network is None:
                raise InvalidRequestError(
                    "port", port.port_id, f"invalid private network id: {network_id}"
                )
            attachments.append(AttachedPrivateNetwork(
                private_network_id=network.private_network_id,
                nickname=network.service.nickname
            ))
        port.private_networks = attachments
        port.local_bandwidth_mbps = PRIVATE_NETWORK_BANDWIDTH_MBPS

    return port
