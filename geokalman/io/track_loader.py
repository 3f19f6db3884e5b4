"""
Track Loader

Loads recorded position readings from YAML for offline replay.

File layout:
    track:
      name: Piazza Castello walk
      readings:
        - latitude: 45.0703
          longitude: 7.6869
          altitude: 240.0
          timestamp: 0.0
          horizontal_accuracy: 5.0
          vertical_accuracy: 5.0

Timestamps are POSIX seconds (or any monotonic seconds scale); YAML
datetimes are accepted and converted.
"""

import os
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List

import yaml

from ..exceptions import InvalidMeasurement
from ..tracking.location import Location

REQUIRED_FIELDS = ("latitude", "longitude", "altitude", "timestamp")


@dataclass
class Track:
    """
    Recorded sequence of readings.

    Attributes:
        name: Track name
        readings: Readings in file order
    """

    name: str
    readings: List[Location] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.readings)

    @property
    def duration_s(self) -> float:
        if len(self.readings) < 2:
            return 0.0
        return self.readings[-1].timestamp - self.readings[0].timestamp


def _parse_reading(idx: int, entry: Dict[str, Any]) -> Location:
    if not isinstance(entry, dict):
        raise InvalidMeasurement(f"reading {idx}: expected a mapping, got {type(entry).__name__}")

    missing = [key for key in REQUIRED_FIELDS if key not in entry]
    if missing:
        raise InvalidMeasurement(f"reading {idx}: missing fields {missing}")

    timestamp = entry["timestamp"]
    kwargs = dict(
        latitude=entry["latitude"],
        longitude=entry["longitude"],
        altitude=entry["altitude"],
        horizontal_accuracy=entry.get("horizontal_accuracy", 0.0),
        vertical_accuracy=entry.get("vertical_accuracy", 0.0),
    )
    try:
        if isinstance(timestamp, datetime):
            return Location.from_datetime(timestamp=timestamp, **kwargs)
        return Location(timestamp=timestamp, **kwargs)
    except InvalidMeasurement as e:
        raise InvalidMeasurement(f"reading {idx}: {e}") from e


def load_track(filepath: str) -> Track:
    """
    Load a recorded track from YAML.

    Args:
        filepath: Path to YAML track file

    Returns:
        Track with readings in file order

    Raises:
        FileNotFoundError: If file doesn't exist
        InvalidMeasurement: If a reading is malformed
    """
    if not os.path.exists(filepath):
        raise FileNotFoundError(f"Track file not found: {filepath}")

    with open(filepath, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise InvalidMeasurement(f"{filepath}: top level must be a mapping")

    track = data.get("track") or {}
    if not isinstance(track, dict):
        raise InvalidMeasurement(f"{filepath}: 'track' section must be a mapping")

    name = str(track.get("name", os.path.splitext(os.path.basename(filepath))[0]))
    entries = track.get("readings") or []
    if not isinstance(entries, list):
        raise InvalidMeasurement(f"{filepath}: 'readings' must be a list")

    readings = [_parse_reading(idx, entry) for idx, entry in enumerate(entries)]
    return Track(name=name, readings=readings)
