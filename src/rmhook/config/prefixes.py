"""
Per-node log prefixes.

Both functions are pure: the same configuration, node id and queue always
give the same prefix.
"""

import os

from ..models.config import MonitorConfig
from ..models.runtime import BatchQueue
from ..validation import LOG_FORMAT_MARKER

OUTPUT_DIRECTORIES_FEATURE = "output_directories"
REMOTE_RENAME_FEATURE = "remote_rename"


def log_prefix_for_node(config: MonitorConfig, node_id: int) -> str:
    """Return the configured log prefix with '%%' replaced by the node id."""
    return config.log_prefix.replace(LOG_FORMAT_MARKER, str(node_id))


def output_prefix_for_node(config: MonitorConfig, node_id: int, queue: BatchQueue) -> str:
    """
    Return the prefix the monitor writes its logs under on the execution host.

    Queues that keep output directories get the full log prefix; all others
    only keep the final path component.
    """
    prefix = log_prefix_for_node(config, node_id)
    if queue.supports_feature(OUTPUT_DIRECTORIES_FEATURE):
        return prefix
    return os.path.basename(prefix)
