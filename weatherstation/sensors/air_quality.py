from __future__ import annotations

import logging

from .base import FIELD_ECO2, FIELD_TVOC, FieldValue, I2CSensor, SensorError, SensorReading
from ..drivers.ccs811 import CCS811

logger = logging.getLogger(__name__)


class AirQualitySensor(I2CSensor):
    @property
    def sensor_id(self) -> str:
        return "air_quality"

    def _open_device(self, smbus) -> CCS811:
        device = CCS811(smbus, self.address)
        device.start()
        return device

    def read(self) -> SensorReading | None:
        device = self._require_device()
        try:
            eco2, tvoc, ready = device.read()
        except OSError as e:
            raise SensorError(f"CCS811 read failed on {self.location}: {e}") from e

        if not ready:
            return None

        return SensorReading(
            sensor_id=self.sensor_id,
            values=(
                FieldValue(FIELD_ECO2, eco2, str(int(eco2))),
                FieldValue(FIELD_TVOC, tvoc, str(int(tvoc))),
            ),
        )
