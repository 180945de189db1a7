import logging
from logging.handlers import RotatingFileHandler

import pytest

from weatherstation import main as main_module
from weatherstation.core.config import Settings
from weatherstation.core.log import configure_logging
from weatherstation.sensors.air_quality import AirQualitySensor
from weatherstation.sensors.climate import TemperatureHumiditySensor
from weatherstation.sensors.counter import CounterSensor
from weatherstation.sensors.light import IlluminanceSensor
from weatherstation.services.publisher import PublisherError


def test_build_sensors_in_publish_order():
    settings = Settings(light_bus=1, light_addr=0x5C, climate_bus=3, climate_addr=0x45, air_addr=0x5B)

    sensors = main_module.build_sensors(settings)

    assert [type(s) for s in sensors] == [IlluminanceSensor, TemperatureHumiditySensor, AirQualitySensor]
    assert sensors[0].location == "/dev/i2c-1@0x5c"
    assert sensors[1].location == "/dev/i2c-3@0x45"
    assert sensors[2].address == 0x5B


def test_build_sensors_counter_mode():
    sensors = main_module.build_sensors(Settings(counter_mode=True, counter_start=0, counter_step=1))

    assert len(sensors) == 1
    assert isinstance(sensors[0], CounterSensor)


def test_broker_connect_failure_exits_with_status_1(tmp_path, monkeypatch):
    config = tmp_path / "weatherstation.toml"
    config.write_text('host = "broker.invalid"\n')

    def fail(self):
        raise PublisherError("Unable to connect")

    monkeypatch.setattr(main_module.TelemetryPublisher, "connect", fail)

    with pytest.raises(SystemExit) as exc:
        main_module.main(["--config", str(config)])

    assert exc.value.code == 1


def test_strict_config_exits_on_missing_file(tmp_path):
    with pytest.raises(SystemExit) as exc:
        main_module.main(["--config", str(tmp_path / "missing.toml"), "--strict-config"])

    assert exc.value.code == 1


@pytest.fixture
def root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for h in root.handlers:
        if h not in handlers:
            h.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def no_broker(monkeypatch):
    monkeypatch.setattr(main_module.TelemetryPublisher, "connect", lambda self: None)
    monkeypatch.setattr(main_module.TelemetryPublisher, "close", lambda self: None)


def test_log_level_and_file_are_applied(tmp_path, monkeypatch, root_logger, no_broker):
    log_path = tmp_path / "station.log"
    config = tmp_path / "weatherstation.toml"
    config.write_text(f'counter_mode = true\nlog_level = "warning"\nlog_file = "{log_path.as_posix()}"\n')

    def stop(self):
        raise KeyboardInterrupt

    monkeypatch.setattr(main_module.SamplerService, "run_forever", stop)

    main_module.main(["--config", str(config)])

    assert root_logger.level == logging.WARNING
    assert any(
        isinstance(h, RotatingFileHandler) and h.baseFilename == str(log_path)
        for h in root_logger.handlers
    )


def test_bad_log_level_exits_with_status_1(tmp_path, root_logger, no_broker):
    config = tmp_path / "weatherstation.toml"
    config.write_text('log_level = "LOUD"\n')

    with pytest.raises(SystemExit) as exc:
        main_module.main(["--config", str(config)])

    assert exc.value.code == 1


def test_configure_logging_adds_console_handler_once(root_logger):
    root_logger.handlers[:] = []

    configure_logging()
    configure_logging("DEBUG")

    assert len(root_logger.handlers) == 1
    assert root_logger.level == logging.DEBUG
