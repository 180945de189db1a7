from __future__ import annotations

import logging

from .base import FIELD_ILLUMINANCE, FieldValue, I2CSensor, SensorError, SensorReading
from ..drivers.bh1750 import BH1750

logger = logging.getLogger(__name__)


class IlluminanceSensor(I2CSensor):
    @property
    def sensor_id(self) -> str:
        return "illuminance"

    def _open_device(self, smbus) -> BH1750:
        device = BH1750(smbus, self.address)
        device.start()
        return device

    def read(self) -> SensorReading:
        device = self._require_device()
        try:
            lux = device.read_lux()
        except OSError as e:
            raise SensorError(f"BH1750 read failed on {self.location}: {e}") from e

        logger.debug("BH1750 lux=%.2f", lux)
        return SensorReading(
            sensor_id=self.sensor_id,
            values=(FieldValue(FIELD_ILLUMINANCE, lux, f"{lux:.4f}"),),
        )
