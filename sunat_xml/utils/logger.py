# sunat_xml/utils/logger.py
from __future__ import annotations
import logging
from logging import Logger

DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def get_logger(name: str = "sunat_xml", level: str = "INFO") -> Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(logging.Formatter(DEFAULT_FORMAT))
        logger.addHandler(stream_handler)
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    return logger


# default module logger
logger = get_logger("sunat_xml")
