# catalog/core/logging_config.py
import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str = "INFO") -> None:
    """
    Configure root logging once for the whole process.

    Uvicorn keeps its own handlers; everything under `catalog.*`
    goes through the root handler installed here.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
    )
    logging.getLogger("catalog").setLevel(level.upper())
