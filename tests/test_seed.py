import json
import logging

import pytest
from pydantic import ValidationError

from phyfake.engine import Engine
from phyfake.models import BondingType, LinkSpeedType, PowerState
from phyfake.seed import default_dataset, load_dataset


def test_default_dataset_is_fresh_each_time():
    first = default_dataset()
    second = default_dataset()

    first.servers[0].server.ports.clear()
    assert len(second.servers[0].server.ports) == 1


def test_default_dataset_ports_match_channels():
    for record in default_dataset().servers:
        channel = record.server.port_channels[0]
        assert channel.ports == [p.port_id for p in record.server.ports]
        assert all(p.port_channel_id == channel.port_channel_id for p in record.server.ports)


def test_engine_allocates_after_seeded_ports():
    engine = Engine.from_dataset(default_dataset())
    assert engine.next_id() == 22


def test_load_dataset(tmp_path):
    seed = {
        "servers": [{
            "server": {
                "server_id": "200000000001",
                "service": {"service_id": "200000000101", "nickname": "custom"},
                "zone": {"zone_id": 302, "name": "Ishikari", "region": "is1"},
                "spec": {
                    "cpu_model_name": "AMD EPYC 7713P",
                    "cpu_socket_count": 1,
                    "cpu_core_count": 64,
                    "memory_size_mib": 262144,
                    "port_channel_10gbe_count": 1,
                },
                "port_channels": [{
                    "port_channel_id": 2001,
                    "link_speed_type": "10gbe",
                    "bonding_type": "lacp",
                    "ports": [7],
                }],
                "ports": [{"port_id": 7, "port_channel_id": 2001, "nickname": "10gbe"}],
                "cached_power_status": {"status": "off", "stored": "2021-04-01T00:00:00Z"},
            },
            "power_status": {"status": "off"},
            "raid_status": {"monitored_at": "2021-04-01T00:00:00Z", "overall_status": "ok"},
            "os_images": [{"os_image_id": "ubuntu2004_64", "name": "Ubuntu 20.04 LTS (64bit)"}],
        }],
        "private_networks": [{
            "private_network_id": "200000000401",
            "service": {"service_id": "200000000501", "nickname": "pn"},
            "vlan_id": 10,
        }],
    }
    path = tmp_path / "seed.json"
    path.write_text(json.dumps(seed))

    dataset = load_dataset(path)

    record = dataset.servers[0]
    assert record.id == "200000000001"
    assert record.power_status.status is PowerState.OFF
    assert record.server.port_channels[0].link_speed_type is LinkSpeedType.GBE_10
    assert record.server.port_channels[0].bonding_type is BondingType.LACP
    assert record.server.get_port_by_id(7).enabled is True
    assert dataset.dedicated_subnets == []

    engine = Engine.from_dataset(dataset)
    assert engine.next_id() == 8
    assert engine.get_private_network_by_id("200000000401").vlan_id == 10


def test_load_dataset_rejects_bad_enum(tmp_path):
    path = tmp_path / "seed.json"
    path.write_text(json.dumps({"servers": [{
        "server": {"server_id": "x"},
        "power_status": {"status": "sleeping"},
    }]}))

    with pytest.raises(ValidationError):
        load_dataset(path)


def test_engine_logs_lookup_misses(caplog):
    engine = Engine.from_dataset(default_dataset())

    with caplog.at_level(logging.DEBUG, logger="phyfake.engine.engine"):
        assert engine.get_server_by_id("nope") is None
        assert engine.get_dedicated_subnet_by_id("999") is None
        assert engine.get_private_network_by_id("998") is None

    assert "Server nope not found" in caplog.text
    assert "Dedicated subnet 999 not found" in caplog.text
    assert "Private network 998 not found" in caplog.text
