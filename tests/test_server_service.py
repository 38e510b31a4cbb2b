"""
Tests for ServerService operations.

Covers lookups and clone isolation, the OS install and power control
state machines, port configuration through the service and the lock
discipline seen by concurrent readers.
"""

import asyncio
from datetime import datetime, timezone

import pytest

from phyfake.errors import ConflictError, ErrorType, InvalidRequestError, NotFoundError
from phyfake.models import BondingType, PowerState, ServerLockStatus
from phyfake.services import ServerService

from conftest import (
    DEDICATED_SUBNET_ID,
    PORT_CHANNEL_ID,
    PORT_ID,
    PRIVATE_NETWORK_IDS,
    SERVER_ID,
    SINGLE_SERVER_ID,
)


# ============================================================================
# Servers
# ============================================================================

@pytest.mark.asyncio
async def test_list_servers(service):
    result = await service.list_servers()

    assert result.meta.count == 3
    assert [s.server_id for s in result.servers] == ["100000000001", "100000000002", "100000000003"]


@pytest.mark.asyncio
async def test_read_server_is_in_list_and_isolated(service):
    listed = await service.list_servers()
    server = await service.read_server(SERVER_ID)

    assert server == next(s for s in listed.servers if s.server_id == SERVER_ID)

    server.service.nickname = "changed"
    server.ports[0].nickname = "changed"
    server.ports.clear()
    server.port_channels[0].ports.append(999)

    again = await service.read_server(SERVER_ID)
    assert again.service.nickname == "server01"
    assert again.ports[0].nickname == "1gbe"
    assert again.port_channels[0].ports == [PORT_ID]


@pytest.mark.asyncio
async def test_read_unknown_server(service):
    with pytest.raises(NotFoundError) as exc_info:
        await service.read_server("nope")

    assert exc_info.value.error_type is ErrorType.NOT_FOUND
    assert exc_info.value.resource == "server"
    assert exc_info.value.resource_id == "nope"
    assert str(exc_info.value) == "not_found: server[nope]"


@pytest.mark.asyncio
async def test_list_os_images(service):
    images = await service.list_os_images(SERVER_ID)

    assert "ubuntu2004_64" in [image.os_image_id for image in images]
    images.clear()
    assert len(await service.list_os_images(SERVER_ID)) == 4


# ============================================================================
# OS install
# ============================================================================

@pytest.mark.asyncio
async def test_os_install_locks_then_releases(service, engine):
    await service.os_install(SERVER_ID, "ubuntu2004_64")

    server = await service.read_server(SERVER_ID)
    assert server.lock_status is ServerLockStatus.OS_INSTALL

    await engine.scheduler.join()

    server = await service.read_server(SERVER_ID)
    assert server.lock_status is None
    assert engine.get_server_by_id(SERVER_ID).installed_os_image_id == "ubuntu2004_64"


@pytest.mark.asyncio
async def test_os_install_unknown_image(service, engine):
    with pytest.raises(NotFoundError) as exc_info:
        await service.os_install(SERVER_ID, "plan9")

    assert exc_info.value.resource == "os-image"
    assert (await service.read_server(SERVER_ID)).lock_status is None
    assert engine.scheduler.pending == 0


@pytest.mark.asyncio
async def test_os_install_unknown_server(service):
    with pytest.raises(NotFoundError):
        await service.os_install("nope", "ubuntu2004_64")


@pytest.mark.asyncio
async def test_actions_on_locked_server_conflict(service, engine):
    await service.os_install(SERVER_ID, "ubuntu2004_64")
    pending = engine.scheduler.pending
    before = await service.read_server(SERVER_ID)
    power_before = await service.read_power_status(SERVER_ID)

    with pytest.raises(ConflictError):
        await service.os_install(SERVER_ID, "centos7_64")
    with pytest.raises(ConflictError):
        await service.power_control(SERVER_ID, "off")

    assert engine.scheduler.pending == pending
    assert await service.read_server(SERVER_ID) == before
    assert await service.read_power_status(SERVER_ID) == power_before

    await engine.scheduler.join()
    await service.power_control(SERVER_ID, "off")
    await engine.scheduler.join()
    assert (await service.read_power_status(SERVER_ID)).status is PowerState.OFF


# ============================================================================
# Power
# ============================================================================

@pytest.mark.asyncio
@pytest.mark.parametrize("operation", ["on", "reset"])
async def test_power_on_operations(service, engine, operation):
    before = (await service.read_server(SINGLE_SERVER_ID)).cached_power_status
    assert before.status is PowerState.OFF

    await service.power_control(SINGLE_SERVER_ID, operation)
    await engine.scheduler.join()

    status = await service.read_power_status(SINGLE_SERVER_ID)
    cached = (await service.read_server(SINGLE_SERVER_ID)).cached_power_status
    assert status.status is PowerState.ON
    assert cached.status is PowerState.ON
    assert cached.stored > before.stored


@pytest.mark.asyncio
@pytest.mark.parametrize("operation", ["soft", "off"])
async def test_power_off_operations(service, engine, operation):
    started = datetime.now(timezone.utc)

    await service.power_control(SERVER_ID, operation)
    await engine.scheduler.join()

    cached = (await service.read_server(SERVER_ID)).cached_power_status
    assert (await service.read_power_status(SERVER_ID)).status is PowerState.OFF
    assert cached.status is PowerState.OFF
    assert cached.stored >= started


@pytest.mark.asyncio
@pytest.mark.parametrize("operation", ["hibernate", None])
async def test_unknown_power_operation(service, engine, operation):
    with pytest.raises(InvalidRequestError):
        await service.power_control(SERVER_ID, operation)

    assert engine.scheduler.pending == 0
    assert (await service.read_power_status(SERVER_ID)).status is PowerState.ON


@pytest.mark.asyncio
async def test_read_raid_status(service):
    raid = await service.read_raid_status(SERVER_ID, refresh=True)

    assert raid.overall_status == "ok"
    raid.logical_volumes.clear()
    assert len((await service.read_raid_status(SERVER_ID)).logical_volumes) == 1


# ============================================================================
# Port channels & ports
# ============================================================================

@pytest.mark.asyncio
async def test_read_port_channel(service):
    channel = await service.read_port_channel(SERVER_ID, PORT_CHANNEL_ID)
    assert channel.ports == [PORT_ID]

    with pytest.raises(NotFoundError) as exc_info:
        await service.read_port_channel(SERVER_ID, 9999)
    assert exc_info.value.resource == "port-channel"


@pytest.mark.asyncio
async def test_configure_bonding_replaces_ports(service):
    channel = await service.configure_bonding(SERVER_ID, PORT_CHANNEL_ID, "single", ["eth0", "eth1"])

    assert channel.bonding_type is BondingType.SINGLE
    assert len(channel.ports) == 2
    # new ids come after every seeded port id
    assert min(channel.ports) > 21

    server = await service.read_server(SERVER_ID)
    assert [p.nickname for p in server.ports] == ["eth0", "eth1"]
    assert [p.port_id for p in server.ports] == channel.ports

    with pytest.raises(NotFoundError):
        await service.read_port(SERVER_ID, PORT_ID)


@pytest.mark.asyncio
@pytest.mark.parametrize("nicknames", [None, [], ["uplink"]])
async def test_configure_lacp(service, nicknames):
    channel = await service.configure_bonding(SINGLE_SERVER_ID, 1002, "lacp", nicknames)

    assert channel.bonding_type is BondingType.LACP
    assert len(channel.ports) == 1


@pytest.mark.asyncio
async def test_configure_bonding_rejects_bad_nickname_count(service):
    with pytest.raises(InvalidRequestError):
        await service.configure_bonding(SERVER_ID, PORT_CHANNEL_ID, "lacp", ["a", "b"])
    with pytest.raises(InvalidRequestError):
        await service.configure_bonding(SERVER_ID, PORT_CHANNEL_ID, "single", ["a"])

    server = await service.read_server(SERVER_ID)
    assert [p.port_id for p in server.ports] == [PORT_ID]


@pytest.mark.asyncio
async def test_configure_unknown_bonding_type_empties_ports(service):
    channel = await service.configure_bonding(SERVER_ID, PORT_CHANNEL_ID, "mlag")

    assert channel.ports == []
    assert channel.bonding_type is BondingType.LACP
    assert (await service.read_server(SERVER_ID)).ports == []


@pytest.mark.asyncio
async def test_configure_bonding_unknown_channel(service):
    with pytest.raises(NotFoundError):
        await service.configure_bonding(SERVER_ID, 1002, "lacp")


@pytest.mark.asyncio
async def test_update_port(service):
    port = await service.update_port(SERVER_ID, PORT_ID, "uplink")

    assert port.nickname == "uplink"
    assert (await service.read_port(SERVER_ID, PORT_ID)).nickname == "uplink"
    assert (await service.read_server(SERVER_ID)).ports[0].nickname == "uplink"


@pytest.mark.asyncio
async def test_set_port_enabled(service):
    port = await service.set_port_enabled(SERVER_ID, PORT_ID, False)
    assert port.enabled is False
    assert (await service.read_port(SERVER_ID, PORT_ID)).enabled is False

    port = await service.set_port_enabled(SERVER_ID, PORT_ID, True)
    assert port.enabled is True


@pytest.mark.asyncio
async def test_read_unknown_port(service):
    with pytest.raises(NotFoundError) as exc_info:
        await service.read_port(SERVER_ID, 11)

    assert exc_info.value.resource == "port"
    assert exc_info.value.detail == f"server[{SERVER_ID}]"


@pytest.mark.asyncio
async def test_assign_network(service):
    port = await service.assign_network(
        SERVER_ID, PORT_ID,
        internet_type="dedicated_subnet",
        dedicated_subnet_id=DEDICATED_SUBNET_ID,
        mode="trunk",
        private_network_ids=PRIVATE_NETWORK_IDS
    )

    assert port.global_bandwidth_mbps == 500
    assert port.local_bandwidth_mbps == 1000
    assert len(port.private_networks) == 3

    port.private_networks.clear()
    stored = await service.read_port(SERVER_ID, PORT_ID)
    assert len(stored.private_networks) == 3


@pytest.mark.asyncio
async def test_assign_network_bad_subnet_keeps_reset_state(service):
    await service.assign_network(SERVER_ID, PORT_ID, internet_type="common_subnet",
                                 private_network_ids=PRIVATE_NETWORK_IDS[:1])

    with pytest.raises(InvalidRequestError) as exc_info:
        await service.assign_network(SERVER_ID, PORT_ID, internet_type="dedicated_subnet",
                                     dedicated_subnet_id="999")

    assert "999" in exc_info.value.detail
    port = await service.read_port(SERVER_ID, PORT_ID)
    assert port.internet is None
    assert port.private_networks == []
    assert port.global_bandwidth_mbps is None


@pytest.mark.asyncio
async def test_read_port_traffic(service):
    graph = await service.read_port_traffic(SERVER_ID, PORT_ID)

    assert [d.value for d in graph.receive] == [1, 2]
    assert [d.value for d in graph.transmit] == [1, 2]
    assert graph.receive[0].timestamp > graph.receive[1].timestamp

    with pytest.raises(NotFoundError):
        await service.read_port_traffic("nope", PORT_ID)


# ============================================================================
# Lock discipline
# ============================================================================

@pytest.mark.asyncio
async def test_readers_wait_for_exclusive_mutation(engine):
    service = ServerService(engine)
    record = engine.get_server_by_id(SERVER_ID)
    seen = []

    async def slow_mutation():
        async with engine.lock():
            port = record.server.ports[0]
            port.nickname = "half"
            await asyncio.sleep(0.05)
            port.enabled = False
            port.nickname = "done"

    async def reader():
        port = await service.read_port(SERVER_ID, PORT_ID)
        seen.append((port.nickname, port.enabled))

    writer = asyncio.create_task(slow_mutation())
    await asyncio.sleep(0)
    await asyncio.gather(*(reader() for _ in range(5)))
    await writer

    assert seen == [("done", False)] * 5


@pytest.mark.asyncio
async def test_background_power_change_waits_for_readers(engine):
    service = ServerService(engine)

    # accepted, the background action has not run yet
    await service.power_control(SERVER_ID, "off")
    assert engine.scheduler.pending == 1

    async with engine.rlock():
        await asyncio.sleep(0.01)
        assert engine.scheduler.pending == 1
        record = engine.get_server_by_id(SERVER_ID)
        assert record.power_status.status is PowerState.ON
        assert record.server.cached_power_status.status is PowerState.ON

    await engine.scheduler.join()
    assert (await service.read_power_status(SERVER_ID)).status is PowerState.OFF
