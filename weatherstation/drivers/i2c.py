from __future__ import annotations

import logging

from smbus2 import SMBus

logger = logging.getLogger(__name__)


class DeviceError(OSError):
    """Device answered on the bus but is not usable."""


def bus_path(bus: int) -> str:
    return f"/dev/i2c-{bus}"


def open_bus(bus: int) -> SMBus:
    path = bus_path(bus)
    logger.debug("Opening I2C bus %s", path)
    return SMBus(path)
