"""
Record store of the simulated API.

The Engine owns every server record and the read-only network catalogs.
It is constructed explicitly and handed to the service that uses it, so
each test can work on an isolated instance.
"""

import logging
from typing import AsyncContextManager, Iterable, List, Optional

from ..models import DedicatedSubnet, PrivateNetwork, ServerRecord
from .ids import IdAllocator
from .rwlock import ReadWriteLock
from .scheduler import ActionScheduler

logger = logging.getLogger(__name__)


class Engine:
    """
    In-memory state container.

    Lookups return the stored instances; callers must hold rlock() or
    lock() while using them and clone anything they hand out.
    """

    def __init__(self,
                 servers: Optional[Iterable[ServerRecord]] = None,
                 dedicated_subnets: Optional[Iterable[DedicatedSubnet]] = None,
                 private_networks: Optional[Iterable[PrivateNetwork]] = None,
                 scheduler: Optional[ActionScheduler] = None,
                 action_delay: float = 0.0):
        """
        Initialize the engine.

        Args:
            servers: Seed server records, kept in the given order
            dedicated_subnets: Dedicated subnet catalog
            private_networks: Private network catalog
            scheduler: Background action scheduler (a new one if omitted)
            action_delay: Seconds each simulated background step waits
        """
        self.servers: List[ServerRecord] = list(servers or [])
        self.dedicated_subnets: List[DedicatedSubnet] = list(dedicated_subnets or [])
        self.private_networks: List[PrivateNetwork] = list(private_networks or [])
        self.scheduler = scheduler or ActionScheduler()
        self.action_delay = action_delay

        self._lock = ReadWriteLock()
        self._ids = IdAllocator(start=self._max_port_id() + 1)

        logger.info(
            f"Engine initialized: {len(self.servers)} server(s), "
            f"{len(self.dedicated_subnets)} dedicated subnet(s), "
            f"{len(self.private_networks)} private network(s)"
        )

    @classmethod
    def from_dataset(cls, dataset, **kwargs) -> 'Engine':
        """Build an engine from a seed Dataset"""
        return cls(
            servers=dataset.servers,
            dedicated_subnets=dataset.dedicated_subnets,
            private_networks=dataset.private_networks,
            **kwargs
        )

    def _max_port_id(self) -> int:
        port_ids = [p.port_id for s in self.servers for p in s.server.ports]
        return max(port_ids, default=0)

    # ------------------------------------------------------------------
    # Locking
    # ------------------------------------------------------------------

    def rlock(self) -> AsyncContextManager[None]:
        """Shared access for read-only operations"""
        return self._lock.reader()

    def lock(self) -> AsyncContextManager[None]:
        """Exclusive access for mutating operations and background actions"""
        return self._lock.writer()

    def next_id(self) -> int:
        return self._ids.next_id()

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_server_by_id(self, server_id: str) -> Optional[ServerRecord]:
        for record in self.servers:
            if record.id == server_id:
                return record
        logger.debug(f"Server {server_id} not found")
        return None

    def get_dedicated_subnet_by_id(self, dedicated_subnet_id: str) -> Optional[DedicatedSubnet]:
        for subnet in self.dedicated_subnets:
            if subnet.dedicated_subnet_id == dedicated_subnet_id:
                return subnet
        logger.debug(f"Dedicated subnet {dedicated_subnet_id} not found")
        return None

    def get_private_network_by_id(self, private_network_id: str) -> Optional[PrivateNetwork]:
        for network in self.private_networks:
            if network.private_network_id == private_network_id:
                return network
        logger.debug(f"Private network {private_network_id} not found")
        return None
