from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable

from ..drivers.i2c import bus_path, open_bus

logger = logging.getLogger(__name__)

# ThingSpeak channel fields
FIELD_ILLUMINANCE = 1
FIELD_TEMPERATURE = 2
FIELD_HUMIDITY = 3
FIELD_ECO2 = 4
FIELD_TVOC = 5
FIELD_COUNTER = 3


class SensorError(Exception):
    """Sensor could not be initialized or read."""


@dataclass(frozen=True)
class FieldValue:
    field: int
    value: float | int
    payload: str  # what goes on the wire


@dataclass(frozen=True)
class SensorReading:
    sensor_id: str
    values: tuple[FieldValue, ...]


class Sensor(ABC):
    """Domain-facing sensor abstraction."""

    @property
    @abstractmethod
    def sensor_id(self) -> str:
        ...

    @abstractmethod
    def initialize(self) -> None:
        """Open and probe the device. Raise SensorError on failure."""
        ...

    @abstractmethod
    def read(self) -> SensorReading | None:
        """
        Return a reading, or None when the device has nothing new yet.
        Raise SensorError on failure.
        """
        ...

    def close(self) -> None:
        pass


class I2CSensor(Sensor):
    """Sensor attached at ``address`` on ``/dev/i2c-{bus}``."""

    def __init__(self, bus: int, address: int, bus_factory: Callable = open_bus) -> None:
        self.bus = bus
        self.address = address
        self._bus_factory = bus_factory
        self._smbus = None
        self._device = None

    @property
    def location(self) -> str:
        return f"{bus_path(self.bus)}@0x{self.address:02x}"

    @abstractmethod
    def _open_device(self, smbus):
        """Create and start the driver on an open bus; return it."""
        ...

    def initialize(self) -> None:
        try:
            self._smbus = self._bus_factory(self.bus)
            self._device = self._open_device(self._smbus)
        except OSError as e:
            self.close()
            raise SensorError(f"{self.sensor_id} not found on {self.location}: {e}") from e

    def _require_device(self):
        if self._device is None:
            raise SensorError(f"{self.sensor_id} is not initialized")
        return self._device

    def close(self) -> None:
        self._device = None
        if self._smbus is not None:
            try:
                self._smbus.close()
            except OSError as e:
                logger.warning("Closing %s failed: %s", self.location, e)
            self._smbus = None
