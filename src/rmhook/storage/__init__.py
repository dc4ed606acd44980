"""
Access to the logs retained by the resource monitor.

Time series logs and category measurements are exposed as Polars DataFrames.
"""

from .series import load_series, measurements_frame, save_measurements

__all__ = [
    "load_series",
    "measurements_frame",
    "save_measurements",
]
