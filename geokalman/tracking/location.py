"""
Geodetic Location Reading

Container for a single position reading as delivered by a location source
and as emitted by the filter after correction.

Fields:
    - latitude, longitude: degrees
    - altitude: meters
    - timestamp: POSIX seconds
    - horizontal_accuracy, vertical_accuracy: meters, passed through untouched
"""

import math
from dataclasses import dataclass
from datetime import datetime, timezone

from ..exceptions import InvalidMeasurement


def equal_within(value: float, target: float, accuracy: float) -> bool:
    """True if |value - target| <= accuracy."""
    return abs(value - target) <= accuracy


@dataclass(frozen=True)
class Location:
    """
    Geodetic position reading.

    Attributes:
        latitude: Latitude (degrees)
        longitude: Longitude (degrees)
        altitude: Altitude (meters)
        timestamp: Time of the reading (POSIX seconds)
        horizontal_accuracy: Horizontal accuracy radius (meters)
        vertical_accuracy: Vertical accuracy (meters)
    """

    latitude: float
    longitude: float
    altitude: float
    timestamp: float
    horizontal_accuracy: float = 0.0
    vertical_accuracy: float = 0.0

    def __post_init__(self) -> None:
        for name in ("latitude", "longitude", "altitude", "timestamp"):
            value = getattr(self, name)
            try:
                number = float(value)
            except (TypeError, ValueError) as e:
                raise InvalidMeasurement(f"{name} must be a number, got {value!r}") from e
            if not math.isfinite(number):
                raise InvalidMeasurement(f"{name} must be finite, got {value!r}")
            object.__setattr__(self, name, number)

        # accuracies may be infinite (unknown)
        for name in ("horizontal_accuracy", "vertical_accuracy"):
            value = getattr(self, name)
            try:
                object.__setattr__(self, name, float(value))
            except (TypeError, ValueError) as e:
                raise InvalidMeasurement(f"{name} must be a number, got {value!r}") from e

    @classmethod
    def from_datetime(
        cls,
        latitude: float,
        longitude: float,
        altitude: float,
        timestamp: datetime,
        horizontal_accuracy: float = 0.0,
        vertical_accuracy: float = 0.0,
    ) -> "Location":
        """Build a reading from a datetime; naive datetimes are taken as UTC."""
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        return cls(
            latitude=latitude,
            longitude=longitude,
            altitude=altitude,
            timestamp=timestamp.timestamp(),
            horizontal_accuracy=horizontal_accuracy,
            vertical_accuracy=vertical_accuracy,
        )

    @property
    def datetime(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp, tz=timezone.utc)

    def is_close_to(
        self,
        other: "Location",
        position_tolerance: float = 1e-4,
        altitude_tolerance: float = 0.1,
    ) -> bool:
        """Compare positions (not timestamps) within degree / meter tolerances."""
        return (
            equal_within(self.latitude, other.latitude, position_tolerance)
            and equal_within(self.longitude, other.longitude, position_tolerance)
            and equal_within(self.altitude, other.altitude, altitude_tolerance)
        )
