"""
geokalman Source Package

Geodetic position smoothing with a linear Kalman filter:
- Immutable fixed-size matrix kernel
- 6-state Constant Velocity filter (lat, lon, alt + velocities)
- YAML configuration and recorded-track replay
"""

from geokalman.exceptions import (
    DimensionMismatch,
    GeoKalmanError,
    InvalidConfiguration,
    InvalidMeasurement,
    SingularMatrix,
)
from geokalman.linalg import Matrix
from geokalman.tracking import (
    FilterConfig,
    GeoKalmanFilter,
    KalmanState,
    Location,
    LocationSmoother,
)

__version__ = "1.0.0"
__author__ = "geokalman Contributors"

__all__ = [
    # Errors
    "GeoKalmanError",
    "DimensionMismatch",
    "SingularMatrix",
    "InvalidConfiguration",
    "InvalidMeasurement",
    # Kernel
    "Matrix",
    # Tracking
    "GeoKalmanFilter",
    "KalmanState",
    "FilterConfig",
    "Location",
    "LocationSmoother",
]
