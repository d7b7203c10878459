"""
Logging setup built on loguru.

Modules log through `from loguru import logger`; this module only decides
where records go. Console output goes to stderr so the printed report on
stdout stays clean.
"""

import os
import sys
from typing import Optional

from loguru import logger

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}"


def setup_logging(level: str = "INFO",
                  log_dir: Optional[str] = None,
                  rotation: str = "1 day",
                  retention: str = "30 days") -> None:
    """
    Configure the global logger. Safe to call more than once.

    Args:
        level: Minimum level for every sink
        log_dir: If set, also write dated log files here
        rotation: When to start a new log file
        retention: How long to keep old log files
    """
    logger.remove()
    logger.add(sys.stderr, level=level, format=LOG_FORMAT)

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        logger.add(
            sink=os.path.join(log_dir, "{time:YYYY-MM-DD}.log"),
            rotation=rotation,
            retention=retention,
            level=level,
            format=LOG_FORMAT,
            backtrace=True,
            diagnose=False,
        )
