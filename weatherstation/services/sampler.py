from __future__ import annotations

import logging
import time
from typing import Callable, Sequence

from ..core.config import Settings
from ..sensors.base import Sensor, SensorError
from .publisher import TelemetryPublisher

logger = logging.getLogger(__name__)


class SamplerService:
    """
    Poll every detected sensor in order, publish each value, sleep, repeat.

    Sensors that fail to initialize in ``detect()`` are dropped for the
    lifetime of the service.
    """

    def __init__(
        self,
        sensors: Sequence[Sensor],
        publisher: TelemetryPublisher,
        settings: Settings,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._sensors = list(sensors)
        self._publisher = publisher
        self._settings = settings
        self._sleep = sleep

        self.detected: list[Sensor] = []

    def detect(self) -> list[Sensor]:
        self.detected = []
        for sensor in self._sensors:
            try:
                sensor.initialize()
            except SensorError as e:
                logger.warning("Sensor %s disabled: %s", sensor.sensor_id, e)
                continue
            logger.info("Sensor %s detected", sensor.sensor_id)
            self.detected.append(sensor)

        if not self.detected:
            logger.warning("No sensors detected, nothing will be published")
        return self.detected

    def _publish_reading(self, sensor: Sensor) -> None:
        logger.debug("Reading sensor %s", sensor.sensor_id)
        try:
            reading = sensor.read()
        except SensorError as e:
            logger.warning("Sensor read FAILED: %s", e)
            return

        if reading is None:
            logger.info("Sensor %s not ready, skipping", sensor.sensor_id)
            return

        logger.info(
            "Sensor read OK: %s %s",
            sensor.sensor_id,
            " ".join(f"field{v.field}={v.payload}" for v in reading.values),
        )

        for i, value in enumerate(reading.values):
            if i > 0 and self._settings.field_pause > 0:
                self._sleep(self._settings.field_pause)

            rc = self._publisher.publish(value.field, value.payload)
            if rc == 0:
                logger.info("Sent field%d=%s", value.field, value.payload)
            else:
                logger.error("mqtt_send error=%d (field%d=%s dropped)", rc, value.field, value.payload)

    def run_once(self) -> None:
        for sensor in self.detected:
            try:
                self._publish_reading(sensor)
            except Exception as e:
                logger.exception("Sampler error on %s: %s", sensor.sensor_id, e)

    def run_forever(self) -> None:
        logger.info(
            "Sampler loop started (sampling_interval=%ss field_pause=%ss sensors=%s)",
            self._settings.sampling_interval,
            self._settings.field_pause,
            [s.sensor_id for s in self.detected],
        )
        while True:
            self.run_once()
            self._sleep(self._settings.sampling_interval)
