"""
Readers and writers for retained monitor logs using Polars.

The ``.series`` log is a whitespace separated table with one row per sample;
its column names are given by the last comment line starting with
``# wall_clock``. Measurements folded into a category can be turned into a
DataFrame and stored as Parquet for later analysis.
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Literal, Optional, Union

import polars as pl

from ..models.summary import FIELD_UNITS, ResourceSummary

logger = logging.getLogger(__name__)

TIME_COLUMN = "wall_clock"


def _series_columns(line: str) -> Optional[List[str]]:
    tokens = line.lstrip("#").split()
    if tokens and tokens[0] == TIME_COLUMN:
        return tokens
    return None


def load_series(path: Union[str, Path]) -> pl.DataFrame:
    """
    Load a ``.series`` time-series log.

    Args:
        path: Location of the log

    Returns:
        DataFrame with an integer ``wall_clock`` column (microseconds since
        the epoch) and one float column per sampled resource

    Raises:
        FileNotFoundError: If the log does not exist
        ValueError: If the header is missing or a row has the wrong width
    """
    series_path = Path(path)
    columns: Optional[List[str]] = None
    rows: List[List[str]] = []

    with open(series_path, "r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            if line.startswith("#"):
                columns = _series_columns(line) or columns
                continue
            if columns is None:
                raise ValueError(f"{series_path}:{lineno}: sample before column header")
            values = line.split()
            if len(values) != len(columns):
                raise ValueError(
                    f"{series_path}:{lineno}: expected {len(columns)} values, got {len(values)}"
                )
            rows.append(values)

    if columns is None:
        raise ValueError(f"{series_path}: no '# {TIME_COLUMN} ...' column header")

    data: Dict[str, list] = {}
    schema: Dict[str, pl.DataType] = {}
    for index, name in enumerate(columns):
        if name == TIME_COLUMN:
            data[name] = [int(row[index]) for row in rows]
            schema[name] = pl.Int64
        else:
            data[name] = [float(row[index]) for row in rows]
            schema[name] = pl.Float64

    frame = pl.DataFrame(data, schema=schema)
    logger.debug(f"Loaded {len(frame)} samples from {series_path}")
    return frame


def measurements_frame(summaries: Iterable[ResourceSummary],
                       category: Optional[str] = None) -> pl.DataFrame:
    """
    Build a DataFrame with one row per measurement.

    Every resource field is a Float64 column (null when not measured). The
    ``category`` column comes from the argument, falling back to the
    category recorded in each summary.
    """
    schema: Dict[str, pl.DataType] = {"category": pl.Utf8}
    schema.update({name: pl.Float64 for name in FIELD_UNITS})

    rows = []
    for summary in summaries:
        row = {"category": category or summary.category}
        row.update({name: getattr(summary, name) for name in FIELD_UNITS})
        rows.append(row)

    return pl.DataFrame(rows, schema=schema)


def save_measurements(
    frame: pl.DataFrame,
    path: Union[str, Path],
    compression: Literal["snappy", "gzip", "brotli", "lz4", "zstd"] = "snappy",
) -> None:
    """Write a measurements DataFrame to Parquet, creating parent directories."""
    output = Path(path)
    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        frame.write_parquet(output, compression=compression)
    except OSError as e:
        logger.error(f"Failed to save measurements to {output}: {e}")
        raise
    logger.debug(f"Saved {len(frame)} measurements to {output}")
