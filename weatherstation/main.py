#!/usr/bin/env python3
"""
Weather station daemon.

Polls the I2C sensors (BH1750 light, SHT3x temperature/humidity, CCS811
eCO2/TVOC) and publishes every value to a ThingSpeak-style MQTT broker,
one topic per channel field.

Usage:
    weatherstation                                  # /etc/weatherstation.toml
    weatherstation --config ./weatherstation.toml
    weatherstation --counter                        # no sensors, counter on field 3
"""

from __future__ import annotations

import argparse
import logging
import sys

from .core.config import DEFAULT_CONFIG_PATH, ConfigError, Settings, load_settings
from .core.log import add_file_logging, configure_logging
from .sensors.air_quality import AirQualitySensor
from .sensors.base import Sensor
from .sensors.climate import TemperatureHumiditySensor
from .sensors.counter import CounterSensor
from .sensors.light import IlluminanceSensor
from .services.publisher import PublisherError, TelemetryPublisher
from .services.sampler import SamplerService

logger = logging.getLogger("weatherstation")


def build_sensors(settings: Settings) -> list[Sensor]:
    if settings.counter_mode:
        return [CounterSensor(start=settings.counter_start, step=settings.counter_step)]

    # publish order
    return [
        IlluminanceSensor(settings.light_bus, settings.light_addr),
        TemperatureHumiditySensor(settings.climate_bus, settings.climate_addr),
        AirQualitySensor(settings.air_bus, settings.air_addr),
    ]


def main(argv: list[str] | None = None) -> None:
    p = argparse.ArgumentParser(description="Sensor to MQTT telemetry daemon")
    p.add_argument("--config", "-c", default=DEFAULT_CONFIG_PATH,
                   help=f"Configuration file (default: {DEFAULT_CONFIG_PATH})")
    p.add_argument("--strict-config", action="store_true",
                   help="Exit if the configuration file cannot be read or parsed")
    p.add_argument("--counter", action="store_true",
                   help="Publish a counter on field 3 instead of sensor data")
    p.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    args = p.parse_args(argv)

    configure_logging("DEBUG" if args.verbose else "INFO")

    try:
        settings = load_settings(args.config, strict=args.strict_config)
    except ConfigError as e:
        logger.error("%s", e)
        sys.exit(1)

    if args.counter:
        settings = settings.model_copy(update={"counter_mode": True})
    if not args.verbose:
        logging.getLogger().setLevel(settings.log_level)
    if settings.log_file:
        add_file_logging(settings.log_file)

    logger.info("%s@%s:%d", settings.username, settings.host, settings.port)
    logger.info("Identity %s", settings.identity)
    logger.info("Channel %s", settings.channel)
    logger.debug("Write API Key %s", settings.writeapikey)

    publisher = TelemetryPublisher(settings)
    try:
        publisher.connect()
    except PublisherError as e:
        logger.error("%s", e)
        sys.exit(1)

    sampler = SamplerService(build_sensors(settings), publisher, settings)
    sampler.detect()

    try:
        sampler.run_forever()
    except KeyboardInterrupt:
        logger.info("Shutting down")
    finally:
        for sensor in sampler.detected:
            sensor.close()
        publisher.close()


if __name__ == "__main__":
    main()
