"""
Enumerations shared by the data models and the server service.
"""

from enum import Enum


class ServerLockStatus(str, Enum):
    """In-progress exclusive provisioning action on a server"""
    OS_INSTALL = "os_install"


class PowerState(str, Enum):
    ON = "on"
    OFF = "off"


class PowerOperation(str, Enum):
    """Power control operations accepted by the power_control endpoint"""
    ON = "on"
    SOFT = "soft"
    RESET = "reset"
    OFF = "off"


class BondingType(str, Enum):
    """Port channel aggregation mode"""
    LACP = "lacp"
    STATIC = "static"
    SINGLE = "single"


class LinkSpeedType(str, Enum):
    GBE_1 = "1gbe"
    GBE_10 = "10gbe"


class InternetType(str, Enum):
    """Internet attachment requested by assign_network"""
    COMMON_SUBNET = "common_subnet"
    DEDICATED_SUBNET = "dedicated_subnet"


class PortMode(str, Enum):
    ACCESS = "access"
    TRUNK = "trunk"
