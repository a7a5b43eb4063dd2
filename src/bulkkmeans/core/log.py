from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .io import ensure_dir

ROOT_LOGGER = "bulkkmeans"
FORMAT = "%(asctime)s | %(levelname)s | %(message)s"


def get_logger(level: str = "INFO", log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure the package logger with a console handler and an optional file handler.
    Library modules log through child loggers and work fine when this is never called.
    """
    log = logging.getLogger(ROOT_LOGGER)
    lvl = getattr(logging, level.upper(), logging.INFO)
    log.setLevel(lvl)
    # Avoid adding multiple handlers on repeated runs
    if not log.handlers:
        fmt = logging.Formatter(FORMAT)
        ch = logging.StreamHandler()
        ch.setLevel(lvl)
        ch.setFormatter(fmt)
        log.addHandler(ch)
        if log_file:
            ensure_dir(Path(log_file).parent)
            fh = logging.FileHandler(log_file)
            fh.setLevel(lvl)
            fh.setFormatter(fmt)
            log.addHandler(fh)
    return log
