import logging

from rotator_app.config import settings


def configure_logging(level: str = None) -> logging.Logger:
    """Attach a stream handler to the package logger (once)."""
    logger = logging.getLogger("rotator_app")
    logger.setLevel(getattr(logging, (level or settings.log_level).upper(), logging.INFO))
    if not logger.handlers:
        formatter = logging.Formatter(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )
        handler = logging.StreamHandler()
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger
