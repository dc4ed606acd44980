"""
Relocation of monitor logs into the log directory.

On queues that do not keep output directories the monitor writes its logs
under the basename of the node's log prefix, in the workflow's working
directory. Once the node succeeded they are moved to where the user asked
for them.
"""

import logging
import os
from typing import List, Tuple

from ..config.prefixes import OUTPUT_DIRECTORIES_FEATURE, log_prefix_for_node
from ..models.config import MonitorConfig
from ..models.runtime import BatchQueue, DagNode
from ..validation import ErrorSeverity, RelocationFailure, handle_file_error

logger = logging.getLogger(__name__)


def log_extensions(config: MonitorConfig) -> List[str]:
    """Extensions of the logs the monitor produces under ``config``."""
    extensions = ["summary"]
    if config.enable_time_series:
        extensions.append("series")
    if config.enable_list_files:
        extensions.append("files")
    return extensions


def move_output_if_needed(config: MonitorConfig, node: DagNode,
                          queue: BatchQueue) -> List[Tuple[str, str]]:
    """
    Move a node's monitor logs from the basename prefix into the log directory.

    Nothing is moved when the queue keeps output directories, or when the
    log prefix has no directory part to move into.

    Returns:
        The (old, new) path pairs that were renamed

    Raises:
        RelocationFailure: If a log that should exist cannot be renamed
    """
    if queue.supports_feature(OUTPUT_DIRECTORIES_FEATURE):
        return []

    log_prefix = log_prefix_for_node(config, node.node_id)
    output_prefix = os.path.basename(log_prefix)

    # log_dir "." yields "./name", which is already in place.
    if os.path.normpath(log_prefix) == output_prefix:
        return []

    moved = []
    for extension in log_extensions(config):
        old_path = f"{output_prefix}.{extension}"
        new_path = f"{log_prefix}.{extension}"
        try:
            os.rename(old_path, new_path)
        except OSError as e:
            handle_file_error(
                error=e,
                context=f"moving Resource Monitor output {old_path}:{new_path}",
                severity=ErrorSeverity.ERROR,
                reraise=False,
                logger=logger,
            )
            raise RelocationFailure(
                f"Error moving Resource Monitor output {old_path}:{new_path}. {e.strerror}",
                old_path=old_path,
                new_path=new_path,
                node_id=node.node_id,
            ) from e
        logger.debug(f"Moved {old_path} to {new_path}")
        moved.append((old_path, new_path))

    return moved
