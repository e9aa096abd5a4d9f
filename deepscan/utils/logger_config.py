"""
deepscan.utils.logger_config – console logging setup.

Modules log through ``logging.getLogger(__name__)``; the application calls
``setup_logger("deepscan", settings.log_level)`` once at start-up so every
``deepscan.*`` logger shares one handler.
"""
from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logger(name: str = "deepscan", level: int | str = logging.INFO) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if not logger.handlers:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(console_handler)

    return logger
