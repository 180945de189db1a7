from __future__ import annotations

import logging
import time

from .i2c import DeviceError

logger = logging.getLogger(__name__)

# Registers
STATUS = 0x00
MEAS_MODE = 0x01
ALG_RESULT_DATA = 0x02
HW_ID = 0x20
ERROR_ID = 0xE0
APP_START = 0xF4

HW_ID_CODE = 0x81

# STATUS bits
STATUS_ERROR = 0x01
STATUS_DATA_READY = 0x08
STATUS_APP_VALID = 0x10
STATUS_FW_MODE = 0x80

DRIVE_MODE_1SEC = 0x10


class CCS811:
    """eCO2 / TVOC gas sensor."""

    def __init__(self, bus, address: int = 0x5A) -> None:
        self._bus = bus
        self.address = address

    def _status(self) -> int:
        return self._bus.read_byte_data(self.address, STATUS)

    def start(self) -> None:
        hw_id = self._bus.read_byte_data(self.address, HW_ID)
        if hw_id != HW_ID_CODE:
            raise DeviceError(f"Unexpected CCS811 HW_ID 0x{hw_id:02x}")

        if not self._status() & STATUS_APP_VALID:
            raise DeviceError("CCS811 has no valid application firmware")

        self._bus.write_byte(self.address, APP_START)
        time.sleep(0.1)

        if not self._status() & STATUS_FW_MODE:
            raise DeviceError("CCS811 did not enter application mode")

        self._bus.write_byte_data(self.address, MEAS_MODE, DRIVE_MODE_1SEC)
        logger.info("CCS811 started at 0x%02x (drive mode 1)", self.address)

    def read(self) -> tuple[int, int, bool]:
        """Return (eco2 ppm, tvoc ppb, ready). Values are 0 when not ready."""
        status = self._status()
        if status & STATUS_ERROR:
            err = self._bus.read_byte_data(self.address, ERROR_ID)
            raise DeviceError(f"CCS811 error_id=0x{err:02x}")

        if not status & STATUS_DATA_READY:
            return 0, 0, False

        d = self._bus.read_i2c_block_data(self.address, ALG_RESULT_DATA, 4)
        eco2 = (d[0] << 8) | d[1]
        tvoc = (d[2] << 8) | d[3]
        return eco2, tvoc, True
