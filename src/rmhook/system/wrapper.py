"""
Generated wrapper scripts for batch tasks.

A wrapper is a short shell script holding a fully composed command line. The
script is declared as an input of the task, so the runtime stages it to the
execution host and removes it afterwards like any other temporary file.
"""

import logging
import os
import stat
import tempfile
from typing import List, Optional

logger = logging.getLogger(__name__)

WRAPPER_MODE = stat.S_IRWXU | stat.S_IRGRP | stat.S_IXGRP | stat.S_IROTH | stat.S_IXOTH


class BatchWrapper:
    """
    Collects commands and writes them into an executable ``/bin/sh`` script.

    The script is named ``{prefix}_XXXXXX`` with a unique random suffix and
    stops at the first failing command.
    """

    def __init__(self, prefix: str = "./wrapper"):
        self.prefix = prefix
        self.commands: List[str] = []

    def cmd(self, command: str) -> None:
        """Append a command to the script body."""
        self.commands.append(command)

    def render(self) -> str:
        lines = ["#!/bin/sh", "set -e"]
        lines.extend(self.commands)
        return "\n".join(lines) + "\n"

    def write(self) -> Optional[str]:
        """
        Materialise the script next to the prefix.

        Returns:
            The script's file name, keeping the directory part of the
            prefix as given (e.g. ``./resource_monitor_k2j3x9``), or None
            if the file could not be written.
        """
        directory, base = os.path.split(self.prefix)
        directory = directory or "."

        try:
            fd, path = tempfile.mkstemp(prefix=f"{base}_", dir=directory)
        except OSError as e:
            logger.error(f"Could not create wrapper script in {directory}: {e}")
            return None

        name = os.path.join(directory, os.path.basename(path))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(self.render())
            os.chmod(path, WRAPPER_MODE)
        except OSError as e:
            logger.error(f"Could not write wrapper script {name}: {e}")
            try:
                os.unlink(path)
            except OSError:
                logger.debug(f"Could not remove partial wrapper {name}")
            return None

        logger.debug(f"Wrapper script written to {name}")
        return name
