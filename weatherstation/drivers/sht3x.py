from __future__ import annotations

import logging
import time

logger = logging.getLogger(__name__)

# Returned in place of a measurement whose checksum does not match
NOT_AVAILABLE = -999.0

SOFT_RESET = (0x30, 0xA2)
MEASURE_HIGH_REPEATABILITY = (0x2C, 0x06)  # clock stretching enabled


def crc8(data: bytes | list[int]) -> int:
    """Sensirion CRC-8: polynomial 0x31, init 0xFF."""
    crc = 0xFF
    for b in data:
        crc ^= b
        for _ in range(8):
            if crc & 0x80:
                crc = ((crc << 1) ^ 0x31) & 0xFF
            else:
                crc = (crc << 1) & 0xFF
    return crc


class SHT3x:
    def __init__(self, bus, address: int = 0x44) -> None:
        self._bus = bus
        self.address = address

    def start(self) -> None:
        cmd, arg = SOFT_RESET
        self._bus.write_i2c_block_data(self.address, cmd, [arg])
        time.sleep(0.002)
        logger.info("SHT3x reset at 0x%02x", self.address)

    def read(self) -> tuple[float, float]:
        """
        Single shot measurement.
        Returns (temperature C, relative humidity %); a value whose CRC
        fails is replaced by NOT_AVAILABLE.
        """
        cmd, arg = MEASURE_HIGH_REPEATABILITY
        self._bus.write_i2c_block_data(self.address, cmd, [arg])
        time.sleep(0.02)
        data = self._bus.read_i2c_block_data(self.address, 0x00, 6)

        temperature = NOT_AVAILABLE
        humidity = NOT_AVAILABLE

        if crc8(data[0:2]) == data[2]:
            raw = (data[0] << 8) | data[1]
            temperature = -45.0 + 175.0 * raw / 65535.0
        else:
            logger.warning("SHT3x temperature CRC mismatch: %s", data[0:3])

        if crc8(data[3:5]) == data[5]:
            raw = (data[3] << 8) | data[4]
            humidity = 100.0 * raw / 65535.0
        else:
            logger.warning("SHT3x humidity CRC mismatch: %s", data[3:6])

        return temperature, humidity
