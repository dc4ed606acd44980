"""
Resource summary data model.

This module contains the parsed form of the summary log written by the
resource monitor sidecar, together with the reader for that log. Two layouts
are understood: the JSON document written by current monitors, where each
measurement is a ``[value, "unit"]`` pair, and the older line format with one
``key: value unit`` entry per line.
"""

import dataclasses
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

logger = logging.getLogger(__name__)

# Canonical unit for every numeric field of a summary.
FIELD_UNITS: Dict[str, str] = {
    "cores": "cores",
    "memory": "MB",
    "virtual_memory": "MB",
    "swap_memory": "MB",
    "disk": "MB",
    "wall_time": "s",
    "cpu_time": "s",
    "bytes_read": "MB",
    "bytes_written": "MB",
    "bytes_received": "MB",
    "bytes_sent": "MB",
    "bandwidth": "Mbps",
    "total_files": "files",
    "total_processes": "procs",
    "max_concurrent_processes": "procs",
}

TEXT_FIELDS = ("command", "category", "exit_type")

# Multipliers into the canonical units above.
_UNIT_SCALE: Dict[str, float] = {
    "s": 1.0,
    "ms": 1e-3,
    "us": 1e-6,
    "B": 1.0 / (1024 * 1024),
    "KB": 1.0 / 1024,
    "kB": 1.0 / 1024,
    "MB": 1.0,
    "GB": 1024.0,
    "TB": 1024.0 * 1024.0,
}


def _normalise(name: str, value: Any, unit: Optional[str]) -> float:
    number = float(value)
    canonical = FIELD_UNITS.get(name)
    if unit and unit != canonical and unit in _UNIT_SCALE and canonical in _UNIT_SCALE:
        number = number * _UNIT_SCALE[unit] / _UNIT_SCALE[canonical]
    return number


@dataclass
class ResourceSummary:
    """
    Resources measured (or requested) for a single run of a node.

    Numeric fields are None when the monitor did not report them. The
    ``limits_exceeded`` sub-record names the resources that triggered an
    overflow, with the limit that was in force.
    """

    cores: Optional[float] = None
    memory: Optional[float] = None
    virtual_memory: Optional[float] = None
    swap_memory: Optional[float] = None
    disk: Optional[float] = None
    wall_time: Optional[float] = None
    cpu_time: Optional[float] = None
    bytes_read: Optional[float] = None
    bytes_written: Optional[float] = None
    bytes_received: Optional[float] = None
    bytes_sent: Optional[float] = None
    bandwidth: Optional[float] = None
    total_files: Optional[float] = None
    total_processes: Optional[float] = None
    max_concurrent_processes: Optional[float] = None

    command: Optional[str] = None
    category: Optional[str] = None
    exit_type: Optional[str] = None
    exit_status: Optional[int] = None

    limits_exceeded: Optional["ResourceSummary"] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ResourceSummary":
        """Build a summary from a decoded JSON summary document."""
        summary = cls()
        for key, raw in data.items():
            if key == "limits_exceeded":
                if isinstance(raw, dict) and raw:
                    summary.limits_exceeded = cls.from_dict(raw)
            elif key in FIELD_UNITS:
                if isinstance(raw, list) and raw:
                    unit = raw[1] if len(raw) > 1 else None
                    setattr(summary, key, _normalise(key, raw[0], unit))
                elif raw is not None:
                    setattr(summary, key, _normalise(key, raw, None))
            elif key in TEXT_FIELDS:
                setattr(summary, key, str(raw))
            elif key == "exit_status":
                summary.exit_status = int(raw)
            else:
                summary.extra[key] = raw
        return summary

    @classmethod
    def from_text(cls, text: str) -> "ResourceSummary":
        """Build a summary from the line oriented ``key: value unit`` format."""
        summary = cls()
        for line in text.splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            key, sep, rest = line.partition(":")
            if not sep:
                raise ValueError(f"malformed summary line: {line!r}")
            key = key.strip()
            rest = rest.strip()

            if key == "limits_exceeded":
                summary.limits_exceeded = _parse_limits(rest)
            elif key in FIELD_UNITS:
                parts = rest.split()
                if not parts:
                    continue
                unit = parts[1] if len(parts) > 1 else None
                setattr(summary, key, _normalise(key, parts[0], unit))
            elif key in TEXT_FIELDS:
                setattr(summary, key, rest)
            elif key == "exit_status":
                summary.exit_status = int(rest)
            else:
                summary.extra[key] = rest
        return summary

    def measured_fields(self) -> Dict[str, float]:
        """Return the numeric fields that carry a value."""
        return {
            name: getattr(self, name)
            for name in FIELD_UNITS
            if getattr(self, name) is not None
        }

    def merge(self, other: Optional["ResourceSummary"]) -> "ResourceSummary":
        """Return a copy where unset fields are filled from ``other``."""
        merged = dataclasses.replace(self, extra=dict(self.extra))
        if other is None:
            return merged
        for name in FIELD_UNITS:
            if getattr(merged, name) is None:
                setattr(merged, name, getattr(other, name))
        return merged

    def to_string(self, pprint: bool = False) -> str:
        """
        Render the summary for humans.

        With ``pprint`` every field is printed on its own aligned line,
        otherwise a compact JSON document in the monitor's own layout.
        """
        if pprint:
            entries = [(name, f"{_format_number(value)} {FIELD_UNITS[name]}")
                       for name, value in self.measured_fields().items()]
            for name in TEXT_FIELDS:
                if getattr(self, name) is not None:
                    entries.insert(0, (name, getattr(self, name)))
            if self.exit_status is not None:
                entries.append(("exit_status", str(self.exit_status)))
            if self.limits_exceeded is not None:
                exceeded = ", ".join(
                    f"{name}: {_format_number(value)} {FIELD_UNITS[name]}"
                    for name, value in self.limits_exceeded.measured_fields().items()
                )
                entries.append(("limits_exceeded", exceeded))
            width = max((len(name) for name, _ in entries), default=0) + 1
            return "\n".join(f"{name + ':':<{width}} {value}" for name, value in entries)

        return json.dumps(self.to_dict(), sort_keys=True)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the summary to the monitor's JSON layout."""
        data: Dict[str, Any] = {
            name: [value, FIELD_UNITS[name]]
            for name, value in self.measured_fields().items()
        }
        for name in TEXT_FIELDS:
            if getattr(self, name) is not None:
                data[name] = getattr(self, name)
        if self.exit_status is not None:
            data["exit_status"] = self.exit_status
        if self.limits_exceeded is not None:
            data["limits_exceeded"] = self.limits_exceeded.to_dict()
        return data


def _parse_limits(text: str) -> Optional[ResourceSummary]:
    limits = ResourceSummary()
    for item in text.split(","):
        item = item.strip()
        if not item:
            continue
        name, _, rest = item.partition(":")
        name = name.strip()
        if name not in FIELD_UNITS:
            limits.extra[name] = rest.strip()
            continue
        parts = rest.split()
        if parts:
            unit = parts[1] if len(parts) > 1 else None
            setattr(limits, name, _normalise(name, parts[0], unit))
        else:
            # Only the resource name was reported.
            limits.extra[name] = None
    if not limits.measured_fields() and not limits.extra:
        return None
    return limits


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.3f}"


def parse_summary_file(path: Union[str, Path]) -> Optional[ResourceSummary]:
    """
    Parse a summary log written by the resource monitor.

    Args:
        path: Location of the ``.summary`` file

    Returns:
        The parsed summary, or None when the file is missing or malformed
    """
    summary_path = Path(path)
    try:
        text = summary_path.read_text(encoding="utf-8")
    except OSError as e:
        logger.debug(f"Could not read summary {summary_path}: {e}")
        return None
    except UnicodeDecodeError as e:
        logger.debug(f"Summary {summary_path} is not valid UTF-8: {e}")
        return None

    stripped = text.strip()
    if not stripped:
        logger.debug(f"Summary {summary_path} is empty")
        return None

    try:
        if stripped.startswith("{"):
            data = json.loads(stripped)
            if not isinstance(data, dict):
                raise ValueError("summary document is not an object")
            return ResourceSummary.from_dict(data)
        return ResourceSummary.from_text(stripped)
    except (ValueError, TypeError, IndexError) as e:
        logger.debug(f"Malformed summary {summary_path}: {e}")
        return None
