"""Logging setup for scripts and notebooks using AlphaDigest.

Library modules only create module-level loggers; call
``configure_logging`` once from the application entry point.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

LOG_FORMAT = "[%(asctime)s][%(name)s][%(levelname)s] %(message)s"
LOG_DATE_FORMAT = "%m-%d-%Y %H:%M:%S"


def configure_logging(logfile_path: Optional[str] = None, level: int = logging.INFO):
    """Send log records to stdout and, optionally, to a file.

    Raises
    ------
    FileNotFoundError
        If the directory of ``logfile_path`` does not exist
    """
    handlers = []
    log_formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(log_formatter)
    handlers.append(stream_handler)

    if logfile_path:
        logfile_path = Path(logfile_path)
        if not logfile_path.parent.exists():
            raise FileNotFoundError(f"{logfile_path.parent} doesn't exist")
        file_handler = logging.FileHandler(logfile_path, mode="a")
        file_handler.setFormatter(log_formatter)
        handlers.append(file_handler)

    logging.basicConfig(level=level, handlers=handlers, force=True)
