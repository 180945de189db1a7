from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "/etc/weatherstation.toml"


class ConfigError(Exception):
    """Configuration could not be loaded or holds invalid values."""


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="WEATHERSTATION_", extra="ignore", frozen=True)

    # Broker
    host: str = "mqtt.thingspeak.com"
    port: int = 1883
    username: str = ""
    password: str = ""
    identity: str = ""
    keepalive: int = 60

    # ThingSpeak channel
    channel: str = ""
    writeapikey: str = ""

    # I2C: bus number -> /dev/i2c-{bus}
    light_bus: int = 1
    light_addr: int = 0x23        # BH1750, ADDR pin low
    climate_bus: int = 1
    climate_addr: int = 0x44      # SHT3x, ADDR pin low
    air_bus: int = 1
    air_addr: int = 0x5A          # CCS811, ADDR pin low

    # Sampling
    sampling_interval: int = Field(default=30, ge=1)
    field_pause: float = Field(default=2.0, ge=0)  # between values of one sensor

    # Minimal build: publish a counter instead of sensor data
    counter_mode: bool = False
    counter_start: int = 500
    counter_step: int = 100

    # Logging
    log_level: str = "INFO"
    log_file: str = ""

    @field_validator("channel", "writeapikey", "identity", mode="before")
    @classmethod
    def _stringify(cls, v):
        # channel = 123 in the file is an integer
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("light_addr", "climate_addr", "air_addr", mode="before")
    @classmethod
    def _parse_address(cls, v):
        if isinstance(v, str):
            return int(v, 0)
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def _check_log_level(cls, v):
        level = str(v).upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown log level {v!r}")
        return level


def _read_file(path: Path) -> dict:
    with path.open("rb") as f:
        return tomllib.load(f)


def load_settings(path: str | Path = DEFAULT_CONFIG_PATH, strict: bool = False) -> Settings:
    """
    Build Settings from a TOML key/value file.

    Every recognised key missing from the file is reported and keeps its
    default. An unreadable or malformed file is reported and, unless
    ``strict`` is set, loading carries on with defaults only.
    """
    path = Path(path)
    data: dict = {}
    loaded = False

    try:
        data = _read_file(path)
        loaded = True
    except OSError as e:
        logger.warning("%s: %s", path, e.strerror or e)
        if strict:
            raise ConfigError(f"Unable to read {path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        # message carries "(at line N, column M)"
        logger.warning("%s: %s", path, e)
        if strict:
            raise ConfigError(f"Malformed configuration {path}: {e}") from e

    known = {k: v for k, v in data.items() if k in Settings.model_fields}
    for key in data.keys() - known.keys():
        logger.warning("Unknown %s setting in configuration file, ignored.", key)

    if loaded:
        # keys supplied through WEATHERSTATION_<KEY> are not missing
        env = {k.upper() for k in os.environ}
        for key in Settings.model_fields:
            if key not in known and f"WEATHERSTATION_{key.upper()}" not in env:
                logger.warning("No %s setting in configuration file.", key)

    try:
        return Settings(**known)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e
