from __future__ import annotations

import logging

from .base import FIELD_HUMIDITY, FIELD_TEMPERATURE, FieldValue, I2CSensor, SensorError, SensorReading
from ..drivers.sht3x import NOT_AVAILABLE, SHT3x

logger = logging.getLogger(__name__)


class TemperatureHumiditySensor(I2CSensor):
    @property
    def sensor_id(self) -> str:
        return "temperature_humidity"

    def _open_device(self, smbus) -> SHT3x:
        device = SHT3x(smbus, self.address)
        device.start()
        return device

    def read(self) -> SensorReading:
        device = self._require_device()
        try:
            temperature, humidity = device.read()
        except OSError as e:
            raise SensorError(f"SHT3x read failed on {self.location}: {e}") from e

        # Both values or neither
        if temperature == NOT_AVAILABLE or humidity == NOT_AVAILABLE:
            raise SensorError(
                f"SHT3x value not available (temperature={temperature}, humidity={humidity})"
            )

        return SensorReading(
            sensor_id=self.sensor_id,
            values=(
                FieldValue(FIELD_TEMPERATURE, temperature, f"{temperature:.1f}"),
                FieldValue(FIELD_HUMIDITY, humidity, f"{humidity:.1f}"),
            ),
        )
