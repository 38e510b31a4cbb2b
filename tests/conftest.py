"""
pytest configuration and fixtures.
"""

import pytest

from phyfake.engine import Engine
from phyfake.seed import default_dataset
from phyfake.services import ServerService

SERVER_ID = "100000000001"          # lacp, one port (1), powered on
SINGLE_SERVER_ID = "100000000002"   # single bonding, ports 11 and 12, powered off
PORT_ID = 1
PORT_CHANNEL_ID = 1001
DEDICATED_SUBNET_ID = "100000000201"
PRIVATE_NETWORK_IDS = ["100000000401", "100000000402", "100000000403"]


@pytest.fixture
def engine() -> Engine:
    """Fresh engine seeded with the default dataset."""
    return Engine.from_dataset(default_dataset())


@pytest.fixture
def service(engine: Engine) -> ServerService:
    return ServerService(engine)
