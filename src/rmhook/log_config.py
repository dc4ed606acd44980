"""
Logging setup for programs embedding the resource monitor hook.

The hook itself only logs through module level loggers; the embedding
runtime decides where the records go. configure_logging gives the same
layout as the rest of the tooling when nothing else is configured.
"""

import logging
import sys
from typing import Optional, TextIO

LOG_FORMAT = "%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: int = logging.INFO, stream: Optional[TextIO] = None) -> None:
    """
    Configure the root logger for the ``rmhook`` namespace.

    Args:
        level: Log level (default INFO)
        stream: Output stream (default stderr)
    """
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        stream=stream or sys.stderr,
    )
    logging.getLogger("rmhook").setLevel(level)
