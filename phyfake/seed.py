"""
Seed data for the engine.

The default dataset describes a small tenant: three servers, a dedicated
subnet and a few private networks. A JSON file with the same structure can
replace it (see AppConfig.SEED_FILE); it is validated with pydantic into
the same dataclasses.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Union

from pydantic import TypeAdapter

from .models import (
    BondingType,
    CachedPowerStatus,
    DedicatedSubnet,
    InterfacePort,
    Ipv4Subnet,
    LinkSpeedType,
    LogicalVolume,
    OSImage,
    PortChannel,
    PowerState,
    PowerStatus,
    PrivateNetwork,
    RaidStatus,
    Server,
    ServerRecord,
    ServerSpec,
    ServiceInfo,
    Zone,
)

logger = logging.getLogger(__name__)


@dataclass
class Dataset:
    servers: List[ServerRecord] = field(default_factory=list)
    dedicated_subnets: List[DedicatedSubnet] = field(default_factory=list)
    private_networks: List[PrivateNetwork] = field(default_factory=list)


_dataset_adapter = TypeAdapter(Dataset)

SEED_TIMESTAMP = datetime(2021, 4, 1, 9, 0, 0, tzinfo=timezone.utc)

DEFAULT_OS_IMAGES = [
    # (os_image_id, name, manual_partition)
    ("centos7_64", "CentOS 7.9 (64bit)", True),
    ("rockylinux8_64", "Rocky Linux 8.4 (64bit)", True),
    ("ubuntu2004_64", "Ubuntu 20.04 LTS (64bit)", True),
    ("windows2019_std", "Windows Server 2019 Standard", False),
]


def load_dataset(path: Union[str, Path]) -> Dataset:
    """
    Load a dataset from a JSON file.

    Args:
        path: Path to the JSON seed file

    Returns:
        Parsed dataset

    Raises:
        pydantic.ValidationError: If the file does not match the models
    """
    raw = Path(path).read_bytes()
    dataset = _dataset_adapter.validate_json(raw)
    logger.info(f"Loaded seed dataset from {path}: {len(dataset.servers)} server(s)")
    return dataset


def _os_images() -> List[OSImage]:
    return [
        OSImage(os_image_id=os_image_id, name=name, manual_partition=manual_partition)
        for os_image_id, name, manual_partition in DEFAULT_OS_IMAGES
    ]


def _server(index: int, first_port_id: int, power: PowerState, bonding: BondingType,
            link_speed: LinkSpeedType) -> ServerRecord:
    server_id = f"1000000000{index:02d}"
    port_channel_id = 1000 + index

    if bonding is BondingType.SINGLE:
        names = [f"{link_speed.value} 1", f"{link_speed.value} 2"]
    else:
        names = [link_speed.value]
    ports = [
        InterfacePort(port_id=first_port_id + i, port_channel_id=port_channel_id, nickname=name)
        for i, name in enumerate(names)
    ]

    server = Server(
        server_id=server_id,
        service=ServiceInfo(
            service_id=f"1000000001{index:02d}",
            nickname=f"server{index:02d}",
            description=f"simulated server {index:02d}",
            tags=["phyfake"]
        ),
        zone=Zone(zone_id=302, name="Ishikari", region="is1"),
        spec=ServerSpec(
            cpu_model_name="Intel Xeon E-2236",
            cpu_socket_count=1,
            cpu_core_count=6,
            memory_size_mib=32768,
            port_channel_1gbe_count=1 if link_speed is LinkSpeedType.GBE_1 else 0,
            port_channel_10gbe_count=1 if link_speed is LinkSpeedType.GBE_10 else 0,
            storage_summary="480GB SSD x2 (RAID1)"
        ),
        port_channels=[PortChannel(
            port_channel_id=port_channel_id,
            link_speed_type=link_speed,
            bonding_type=bonding,
            ports=[p.port_id for p in ports]
        )],
        ports=ports,
        cached_power_status=CachedPowerStatus(status=power, stored=SEED_TIMESTAMP)
    )

    return ServerRecord(
        server=server,
        power_status=PowerStatus(status=power),
        raid_status=RaidStatus(
            monitored_at=SEED_TIMESTAMP,
            overall_status="ok",
            logical_volumes=[LogicalVolume(
                volume_id="0",
                raid_level="1",
                status="ok",
                physical_device_ids=["0", "1"]
            )]
        ),
        os_images=_os_images()
    )


def default_dataset() -> Dataset:
    """Build a fresh copy of the built-in dataset"""
    return Dataset(
        servers=[
            _server(1, 1, PowerState.ON, BondingType.LACP, LinkSpeedType.GBE_1),
            _server(2, 11, PowerState.OFF, BondingType.SINGLE, LinkSpeedType.GBE_1),
            _server(3, 21, PowerState.ON, BondingType.STATIC, LinkSpeedType.GBE_10),
        ],
        dedicated_subnets=[
            DedicatedSubnet(
                dedicated_subnet_id="100000000201",
                service=ServiceInfo(service_id="100000000301", nickname="dedicated-subnet01"),
                ipv4=Ipv4Subnet(
                    network_address="198.51.100.0",
                    prefix_length=28,
                    gateway_address="198.51.100.1"
                )
            ),
        ],
        private_networks=[
            PrivateNetwork(
                private_network_id=f"10000000040{i}",
                service=ServiceInfo(service_id=f"10000000050{i}", nickname=f"private-network0{i}"),
                vlan_id=100 + i
            )
            for i in (1, 2, 3)
        ]
    )
