"""
Server Service - operations of the simulated provisioning API.

Every operation holds the engine lock for its whole lookup, validation and
mutation, and returns clones so callers never alias engine state.
Long-running actions (OS install, power control) are accepted
synchronously and settled by background actions which take the exclusive
lock themselves.
"""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence

from ..engine import Engine
from ..errors import ConflictError, InvalidRequestError, NotFoundError
from ..models import (
    CachedPowerStatus,
    InterfacePort,
    OSImage,
    PaginateMeta,
    PortChannel,
    PowerOperation,
    PowerState,
    PowerStatus,
    RaidStatus,
    Server,
    ServerList,
    ServerLockStatus,
    ServerRecord,
    TrafficGraph,
    TrafficGraphData,
)
from . import port_config

logger = logging.getLogger(__name__)

# Power operation -> state the server settles to
POWER_TRANSITIONS = {
    PowerOperation.ON: PowerState.ON,
    PowerOperation.RESET: PowerState.ON,
    PowerOperation.SOFT: PowerState.OFF,
    PowerOperation.OFF: PowerState.OFF,
}


class ServerService:
    """
    Facade exposing one coroutine per API operation.

    Design Pattern: Facade Pattern
    Hides the engine's lock discipline, lookups and background actions
    behind plain request/response calls.
    """

    def __init__(self, engine: Engine):
        self._engine = engine

    @property
    def engine(self) -> Engine:
        return self._engine

    # ========================================================================
    # Helpers (caller holds the lock)
    # ========================================================================

    def _get_server(self, server_id: str) -> ServerRecord:
        record = self._engine.get_server_by_id(server_id)
        if record is None:
            raise NotFoundError("server", server_id)
        return record

    def _get_port(self, record: ServerRecord, port_id: int) -> InterfacePort:
        port = record.server.get_port_by_id(port_id)
        if port is None:
            raise NotFoundError("port", port_id, f"server[{record.id}]")
        return port

    def _get_port_channel(self, record: ServerRecord, port_channel_id: int) -> PortChannel:
        port_channel = record.server.get_port_channel_by_id(port_channel_id)
        if port_channel is None:
            raise NotFoundError("port-channel", port_channel_id, f"server[{record.id}]")
        return port_channel

    def _ensure_unlocked(self, record: ServerRecord) -> None:
        if record.server.lock_status is not None:
            logger.warning(
                f"Server {record.id} is busy ({record.server.lock_status.value}), rejecting action"
            )
            raise ConflictError("server", record.id, f"lock_status={record.server.lock_status.value}")

    async def _simulate_delay(self) -> None:
        if self._engine.action_delay > 0:
            await asyncio.sleep(self._engine.action_delay)

    # ========================================================================
    # Servers
    # ========================================================================

    async def list_servers(self, params: Optional[dict] = None) -> ServerList:
        """
        List all servers.

        Args:
            params: Pagination/filter parameters (accepted, not applied)

        Returns:
            ServerList with every server and the total count
        """
        async with self._engine.rlock():
            servers = [record.server.clone() for record in self._engine.servers]
        return ServerList(meta=PaginateMeta(count=len(servers)), servers=servers)

    async def read_server(self, server_id: str) -> Server:
        async with self._engine.rlock():
            return self._get_server(server_id).server.clone()

    async def list_os_images(self, server_id: str) -> List[OSImage]:
        async with self._engine.rlock():
            return [image.clone() for image in self._get_server(server_id).os_images]

    async def os_install(self, server_id: str, os_image_id: str) -> None:
        """
        Start an OS installation.

        The server is marked as installing before this returns; a
        background action later clears the mark.

        Raises:
            NotFoundError: Unknown server or OS image
            ConflictError: Server already busy
        """
        async with self._engine.lock():
            record = self._get_server(server_id)
            self._ensure_unlocked(record)
            if record.get_os_image_by_id(os_image_id) is None:
                raise NotFoundError("os-image", os_image_id, f"server[{server_id}]")
            record.server.lock_status = ServerLockStatus.OS_INSTALL

        logger.info(f"OS install accepted: server={server_id} image={os_image_id}")
        self._engine.scheduler.start(
            lambda: self._install_os(server_id, os_image_id),
            name=f"os-install-{server_id}"
        )

    async def _install_os(self, server_id: str, os_image_id: str) -> None:
        await self._simulate_delay()
        async with self._engine.lock():
            record = self._engine.get_server_by_id(server_id)
            record.installed_os_image_id = os_image_id
        logger.info(f"OS image {os_image_id} written to server {server_id}")
        self._engine.scheduler.start(
            lambda: self._finish_os_install(server_id),
            name=f"os-install-finish-{server_id}"
        )

    async def _finish_os_install(self, server_id: str) -> None:
        await self._simulate_delay()
        async with self._engine.lock():
            record = self._engine.get_server_by_id(server_id)
            record.server.lock_status = None
        logger.info(f"OS install finished: server={server_id}")

    # ========================================================================
    # Port channels
    # ========================================================================

    async def read_port_channel(self, server_id: str, port_channel_id: int) -> PortChannel:
        async with self._engine.rlock():
            record = self._get_server(server_id)
            return self._get_port_channel(record, port_channel_id).clone()

    async def configure_bonding(self,
                                server_id: str,
                                port_channel_id: int,
                                bonding_type,
                                port_nicknames: Optional[Sequence[str]] = None) -> PortChannel:
        """
        Reconfigure the bonding of a port channel.

        Replaces the server's whole port list and the channel's port ids.
        Runs synchronously under the exclusive lock, so the channel's
        locked flag is never set.

        Raises:
            NotFoundError: Unknown server or port channel
            InvalidRequestError: Nickname count does not match the bonding type
        """
        async with self._engine.lock():
            record = self._get_server(server_id)
            port_channel = self._get_port_channel(record, port_channel_id)

            ports = port_config.build_bonding_ports(
                port_channel, bonding_type, port_nicknames, self._engine.next_id
            )
            record.server.ports = ports
            port_channel.ports = [port.port_id for port in ports]
            bonding = port_config.parse_bonding_type(bonding_type)
            if bonding is not None:
                port_channel.bonding_type = bonding

            logger.info(
                f"Bonding configured: server={server_id} port-channel={port_channel_id} "
                f"type={bonding_type} ports={port_channel.ports}"
            )
            return port_channel.clone()

    # ========================================================================
    # Ports
    # ========================================================================

    async def read_port(self, server_id: str, port_id: int) -> InterfacePort:
        async with self._engine.rlock():
            record = self._get_server(server_id)
            return self._get_port(record, port_id).clone()

    async def update_port(self, server_id: str, port_id: int, nickname: str) -> InterfacePort:
        async with self._engine.lock():
            record = self._get_server(server_id)
            port = self._get_port(record, port_id)
            port.nickname = nickname
            logger.info(f"Port renamed: server={server_id} port={port_id} nickname={nickname!r}")
            return port.clone()

    async def assign_network(self,
                             server_id: str,
                             port_id: int,
                             internet_type=None,
                             dedicated_subnet_id: Optional[str] = None,
                             mode=None,
                             private_network_ids: Optional[Sequence[str]] = None) -> InterfacePort:
        """
        Change the network connections of a port.

        Several ports of a server may be connected to the internet at the
        same time; the real API forbids this but the simulation allows it.

        Raises:
            NotFoundError: Unknown server or port
            InvalidRequestError: Unknown enum value, subnet or private network
        """
        async with self._engine.lock():
            record = self._get_server(server_id)
            port = self._get_port(record, port_id)
            port_config.assign_network(
                port,
                self._engine,
                internet_type=internet_type,
                dedicated_subnet_id=dedicated_subnet_id,
                mode=mode,
                private_network_ids=private_network_ids
            )
            logger.info(
                f"Network assigned: server={server_id} port={port_id} "
                f"internet={internet_type} mode={mode} private_networks={private_network_ids}"
            )
            return port.clone()

    async def set_port_enabled(self, server_id: str, port_id: int, enable: bool) -> InterfacePort:
        async with self._engine.lock():
            record = self._get_server(server_id)
            port = self._get_port(record, port_id)
            port.enabled = enable
            logger.info(f"Port {'enabled' if enable else 'disabled'}: server={server_id} port={port_id}")
            return port.clone()

    async def read_port_traffic(self, server_id: str, port_id: int,
                                params: Optional[dict] = None) -> TrafficGraph:
        """
        Traffic graph of a port.

        Returns a fixed two-point series; range parameters are ignored.
        """
        async with self._engine.rlock():
            record = self._get_server(server_id)
            self._get_port(record, port_id)

        now = datetime.now(timezone.utc)
        before = now - timedelta(minutes=1)
        return TrafficGraph(
            receive=[TrafficGraphData(timestamp=now, value=1), TrafficGraphData(timestamp=before, value=2)],
            transmit=[TrafficGraphData(timestamp=now, value=1), TrafficGraphData(timestamp=before, value=2)],
        )

    # ========================================================================
    # Power & RAID
    # ========================================================================

    async def power_control(self, server_id: str, operation) -> None:
        """
        Start a power operation.

        on/reset settle to powered on, soft/off to powered off. The new
        state is applied by a background action.

        Raises:
            NotFoundError: Unknown server
            ConflictError: Server busy with another action
            InvalidRequestError: Unknown operation
        """
        async with self._engine.lock():
            record = self._get_server(server_id)
            self._ensure_unlocked(record)
            power_operation = port_config.coerce_enum(PowerOperation, operation, "server", server_id)
            if power_operation is None:
                raise InvalidRequestError("server", server_id, "operation is required")

        target = POWER_TRANSITIONS[power_operation]
        logger.info(f"Power control accepted: server={server_id} operation={power_operation.value}")
        self._engine.scheduler.start(
            lambda: self._settle_power(server_id, target),
            name=f"power-{power_operation.value}-{server_id}"
        )

    async def _settle_power(self, server_id: str, state: PowerState) -> None:
        await self._simulate_delay()
        async with self._engine.lock():
            record = self._engine.get_server_by_id(server_id)
            record.power_status = PowerStatus(status=state)
            record.server.cached_power_status = CachedPowerStatus(
                status=state,
                stored=datetime.now(timezone.utc)
            )
        logger.info(f"Power settled: server={server_id} status={state.value}")

    async def read_power_status(self, server_id: str) -> PowerStatus:
        async with self._engine.rlock():
            return self._get_server(server_id).power_status.clone()

    async def read_raid_status(self, server_id: str, refresh: bool = False) -> RaidStatus:
        """RAID status snapshot; refresh is accepted and ignored."""
        async with self._engine.rlock():
            return self._get_server(server_id).raid_status.clone()
