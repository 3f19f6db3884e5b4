"""
Location Smoother

Per-object owner of a GeoKalmanFilter, fed by a location source.

Lifecycle:
    (no filter) --first reading--> FILTERING --request_reset()--> RESET_PENDING
    RESET_PENDING --next reading--> FILTERING

The first reading, and the first reading after a reset request, seed the
filter and are returned unfiltered.

Example:
    >>> smoother = LocationSmoother(sensor_noise=35.0)
    >>> for reading in readings:
    ...     corrected = smoother.handle(reading)
"""

import logging
from typing import Iterable, List, Optional

from .kalman import FilterConfig, GeoKalmanFilter
from .location import Location

logger = logging.getLogger(__name__)


class LocationSmoother:
    """
    Feeds raw readings for a single tracked object through a Kalman filter.

    Not thread-safe; confine each instance to one owning context.
    """

    def __init__(
        self,
        config: Optional[FilterConfig] = None,
        sensor_noise: Optional[float] = None,
    ) -> None:
        """
        Args:
            config: Filter tuning (defaults to FilterConfig())
            sensor_noise: Overrides config.sensor_noise when given
        """
        self.config = (config or FilterConfig()).validate()
        if sensor_noise is not None:
            self.config = FilterConfig(
                sensor_noise=sensor_noise,
                acceleration_noise_sigma=self.config.acceleration_noise_sigma,
                min_time_interval_s=self.config.min_time_interval_s,
            ).validate()

        self.kalman_filter: Optional[GeoKalmanFilter] = None
        self._reset_requested = False

    @property
    def is_tracking(self) -> bool:
        return self.kalman_filter is not None

    def request_reset(self) -> None:
        """Restart the filter from the next reading."""
        self._reset_requested = True

    def set_sensor_noise_covariance(self, value: float) -> None:
        """Retune the live filter, or the filter created by the next reading."""
        self.config = FilterConfig(
            sensor_noise=value,
            acceleration_noise_sigma=self.config.acceleration_noise_sigma,
            min_time_interval_s=self.config.min_time_interval_s,
        ).validate()
        if self.kalman_filter is not None:
            self.kalman_filter.set_sensor_noise_covariance(value)

    def handle(self, location: Location) -> Location:
        """
        Process one raw reading.

        Returns:
            Corrected position, or the reading itself when it seeds the filter
        """
        if self.kalman_filter is None:
            logger.info("Tracking started at t=%.3f", location.timestamp)
            self.kalman_filter = GeoKalmanFilter.from_config(location, self.config)
            return location

        if self._reset_requested:
            self.kalman_filter.reset(location)
            self._reset_requested = False
            return location

        return self.kalman_filter.process(location)

    def handle_batch(self, locations: Iterable[Location]) -> List[Location]:
        """Process readings in order and collect the corrected positions."""
        return [self.handle(location) for location in locations]
