"""
Tracking Module

Geodetic position smoothing for a single tracked object.

Components:
    - GeoKalmanFilter: 6-state Constant Velocity Kalman Filter
    - KalmanState: State vector and covariance container
    - FilterConfig: Noise tuning
    - Location: Raw or corrected geodetic reading
    - LocationSmoother: Filter owner fed by a location source

Example:
    >>> from geokalman.tracking import GeoKalmanFilter, Location
    >>> kf = GeoKalmanFilter(Location(45.0703, 7.6869, 240.0, timestamp=0.0))
    >>> corrected = kf.process(Location(45.0705, 7.6867, 241.0, timestamp=1.0))
"""

from .handler import LocationSmoother
from .kalman import FilterConfig, GeoKalmanFilter, KalmanState
from .location import Location, equal_within

__all__ = [
    "GeoKalmanFilter",
    "KalmanState",
    "FilterConfig",
    "Location",
    "LocationSmoother",
    "equal_within",
]
