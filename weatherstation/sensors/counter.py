from __future__ import annotations

from .base import FIELD_COUNTER, FieldValue, Sensor, SensorReading


class CounterSensor(Sensor):
    """Stand-in for a station without sensors: a value that grows by ``step`` each read."""

    def __init__(self, start: int = 500, step: int = 100) -> None:
        self._value = start
        self._step = step

    @property
    def sensor_id(self) -> str:
        return "counter"

    def initialize(self) -> None:
        pass

    def read(self) -> SensorReading:
        self._value += self._step
        return SensorReading(
            sensor_id=self.sensor_id,
            values=(FieldValue(FIELD_COUNTER, self._value, str(self._value)),),
        )
