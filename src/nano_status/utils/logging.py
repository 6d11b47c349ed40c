import logging

LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"
LOG_DATEFMT = "%H:%M:%S"

package_logger = logging.getLogger("nano_status")

# Every poll cycle makes several HTTP requests through requests/urllib3
NOISY_LOGGERS = ("urllib3",)


def setup_logging(log_level: str, logger: logging.Logger | None = None) -> None:
    """Configure dashboard logging.

    HTTP connection logs from urllib3 are only shown at DEBUG.

    Args:
        log_level: Level name, e.g. "info" or "WARNING"
        logger: Extra logger to set to the same level

    Raises:
        ValueError: If log_level is not a known level name
    """
    numeric_level = getattr(logging, log_level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {log_level}")

    logging.basicConfig(level=numeric_level, format=LOG_FORMAT, datefmt=LOG_DATEFMT)

    package_logger.setLevel(numeric_level)
    if logger is not None:
        logger.setLevel(numeric_level)

    http_level = logging.DEBUG if numeric_level <= logging.DEBUG else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(http_level)

    package_logger.debug(f"Logging initialized at level {log_level.upper()}")


def make_logger(name: str) -> logging.Logger:
    """Create a logger under the nano_status hierarchy."""
    return logging.getLogger(name)
