from __future__ import annotations

import logging
import time

logger = logging.getLogger(__name__)

POWER_ON = 0x01
RESET = 0x07
CONTINUOUS_HIGH_RES_MODE = 0x10

# counts per lux at default measurement time
LUX_DIVISOR = 1.2


class BH1750:
    """Ambient light sensor, continuous high resolution mode (1 lx / 120 ms)."""

    def __init__(self, bus, address: int = 0x23) -> None:
        self._bus = bus
        self.address = address

    def start(self) -> None:
        self._bus.write_byte(self.address, POWER_ON)
        self._bus.write_byte(self.address, RESET)
        self._bus.write_byte(self.address, CONTINUOUS_HIGH_RES_MODE)
        # first conversion
        time.sleep(0.18)
        logger.info("BH1750 started at 0x%02x", self.address)

    def read_lux(self) -> float:
        hi, lo = self._bus.read_i2c_block_data(self.address, CONTINUOUS_HIGH_RES_MODE, 2)
        raw = (hi << 8) | lo
        return raw / LUX_DIVISOR
