import logging
from logging.handlers import RotatingFileHandler

_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logger = logging.getLogger()
    logger.setLevel(level.upper())

    # Console, once
    if not logger.handlers:
        ch = logging.StreamHandler()
        ch.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(ch)

    # Broker library: warnings and errors only
    logging.getLogger("paho").setLevel(logging.WARNING)


def add_file_logging(path: str) -> None:
    # Rotating file (avoid filling SD card)
    fh = RotatingFileHandler(path, maxBytes=2_000_000, backupCount=5)
    fh.setFormatter(logging.Formatter(_FORMAT))
    logging.getLogger().addHandler(fh)
