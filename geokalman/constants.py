"""
Filter Constants for Geodetic Kalman Tracking

Dimensions and default noise parameters shared by the matrix kernel
and the filter engine.

State Vector Layout:
    [lat, lat_velocity, lon, lon_velocity, alt, alt_velocity]^T
    - lat, lon: degrees; velocities in degrees/s
    - alt: meters; velocity in m/s

References:
    - Bar-Shalom, Y. "Estimation with Applications to Tracking and Navigation", 2001
    - Welch, G., Bishop, G. "An Introduction to the Kalman Filter", UNC TR 95-041
"""

from typing import Final

import numpy as np

# =============================================================================
# DIMENSIONS
# =============================================================================

STATE_DIMENSION: Final[int] = 6
"""Length of the state vector (position + velocity per axis)"""

VECTOR_COLUMNS: Final[int] = 1
"""Column count of state and measurement vectors"""

AXIS_COUNT: Final[int] = 3
"""Tracked axes: latitude, longitude, altitude"""

AXIS_BLOCK: Final[int] = 2
"""Size of the per-axis [position, velocity] block"""

# =============================================================================
# STATE INDICES
# =============================================================================

LATITUDE_INDEX: Final[int] = 0
LATITUDE_VELOCITY_INDEX: Final[int] = 1
LONGITUDE_INDEX: Final[int] = 2
LONGITUDE_VELOCITY_INDEX: Final[int] = 3
ALTITUDE_INDEX: Final[int] = 4
ALTITUDE_VELOCITY_INDEX: Final[int] = 5

POSITION_INDICES: Final[tuple] = (LATITUDE_INDEX, LONGITUDE_INDEX, ALTITUDE_INDEX)
VELOCITY_INDICES: Final[tuple] = (
    LATITUDE_VELOCITY_INDEX,
    LONGITUDE_VELOCITY_INDEX,
    ALTITUDE_VELOCITY_INDEX,
)

# =============================================================================
# NOISE DEFAULTS (GPS tuning)
# =============================================================================

DEFAULT_ACCELERATION_NOISE_SIGMA: Final[float] = 0.0625
"""Acceleration noise magnitude used to build the process noise matrix Q"""

DEFAULT_SENSOR_NOISE: Final[float] = 29.0
"""Diagonal value of the sensor noise matrix R"""

# =============================================================================
# NUMERICAL LIMITS
# =============================================================================

MIN_TIME_INTERVAL_S: Final[float] = 1e-4
"""Readings closer than this [s] to the previous one are not filtered"""

SINGULARITY_TOLERANCE: Final[float] = float(np.finfo(np.float64).eps)
"""Reciprocal condition number below which a matrix is treated as singular"""
