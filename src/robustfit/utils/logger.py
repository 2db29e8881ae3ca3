"""Logging utilities."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Optional

_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
_DATEFMT = '%Y-%m-%d %H:%M:%S'


def setup_logger(name: str = 'robustfit', log_level: Optional[int] = None,
                 log_file: Optional[str] = None) -> logging.Logger:
    """
    Attach a console handler (and optional file handler) to the package logger.

    log_level defaults to ROBUSTFIT_LOG_LEVEL from the environment, else INFO.
    Calling it again replaces the handlers it added before.
    """
    if log_level is None:
        log_level = logging.getLevelName(os.environ.get('ROBUSTFIT_LOG_LEVEL', 'INFO').upper())
        if not isinstance(log_level, int):
            log_level = logging.INFO

    logger = logging.getLogger(name)
    logger.setLevel(log_level)

    for handler in list(logger.handlers):
        if getattr(handler, '_robustfit', False):
            logger.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(_FORMAT, datefmt=_DATEFMT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler._robustfit = True
    logger.addHandler(console_handler)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        file_handler._robustfit = True
        logger.addHandler(file_handler)

    return logger
