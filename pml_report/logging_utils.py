"""
Project-wide logging setup.

Usage in the pipeline script:

    from pml_report.logging_utils import get_logger
    logger = get_logger(__name__, log_file="reports/run.log")
    logger.info("Loaded %d rows", n)

Library modules just use logging.getLogger(__name__) and inherit whatever
the script configured.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATEFMT = "%H:%M:%S"


def get_logger(
    name: str,
    level: int = logging.INFO,
    log_file: Path | str | None = None,
) -> logging.Logger:
    """
    Return a named logger with a consistent format.

    A stdout handler is attached on the first call only, so calling this
    repeatedly with the same name never duplicates log lines. When log_file
    is given, a file handler for that path is added unless one already exists.
    When called from a script (a logger outside the pml_report package), the
    pml_report package logger gets the same handlers so messages from the
    library modules show up on stdout and in the run log too.
    """
    formatter = logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT)
    loggers = [logging.getLogger(name)]
    if name.split(".")[0] != "pml_report":
        loggers.append(logging.getLogger("pml_report"))

    for logger in loggers:
        if not any(type(h) is logging.StreamHandler for h in logger.handlers):
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(formatter)
            logger.addHandler(handler)
            logger.setLevel(level)

        if log_file is not None:
            log_path = Path(log_file).resolve()
            already = any(
                isinstance(h, logging.FileHandler) and Path(h.baseFilename) == log_path
                for h in logger.handlers
            )
            if not already:
                log_path.parent.mkdir(parents=True, exist_ok=True)
                file_handler = logging.FileHandler(log_path, encoding="utf-8")
                file_handler.setFormatter(formatter)
                logger.addHandler(file_handler)

    return loggers[0]
