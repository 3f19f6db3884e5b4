"""
Linear Kalman Filter for Geodetic Position Smoothing

Implements a Constant Velocity (CV) motion model over latitude, longitude
and altitude. Each reading runs one predict/update cycle and yields a
corrected position.

State Vector: [lat, vlat, lon, vlon, alt, valt]^T
    - lat, lon: Position in degrees
    - vlat, vlon: Angular velocity (degrees/s)
    - alt, valt: Altitude (meters) and vertical velocity (m/s)

Measurement model:
    z = [lat, vlat, lon, vlon, alt, valt] with velocities taken as the
    finite difference (previous - current) / dt, so H = I.

Reference:
    - Bar-Shalom, Y. "Estimation with Applications to Tracking and Navigation", 2001
    - Welch, G., Bishop, G. "An Introduction to the Kalman Filter", UNC TR 95-041
"""

import logging
import math
from dataclasses import dataclass
from typing import Tuple

from ..constants import (
    ALTITUDE_INDEX,
    AXIS_COUNT,
    DEFAULT_ACCELERATION_NOISE_SIGMA,
    DEFAULT_SENSOR_NOISE,
    LATITUDE_INDEX,
    LONGITUDE_INDEX,
    MIN_TIME_INTERVAL_S,
    POSITION_INDICES,
    STATE_DIMENSION,
    VELOCITY_INDICES,
)
from ..exceptions import InvalidConfiguration, SingularMatrix
from ..linalg import Matrix, identity, inverse
from .location import Location

logger = logging.getLogger(__name__)


def _check_positive(name: str, value: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise InvalidConfiguration(f"{name} must be a number, got {value!r}") from e
    if not math.isfinite(number) or number <= 0.0:
        raise InvalidConfiguration(f"{name} must be positive and finite, got {value!r}")
    return number


def _check_non_negative(name: str, value: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise InvalidConfiguration(f"{name} must be a number, got {value!r}") from e
    if not math.isfinite(number) or number < 0.0:
        raise InvalidConfiguration(f"{name} must be non-negative and finite, got {value!r}")
    return number


@dataclass
class FilterConfig:
    """
    Noise tuning for GeoKalmanFilter.

    Attributes:
        sensor_noise: Diagonal of the sensor noise matrix R
                      Higher = smoother output, slower response
        acceleration_noise_sigma: Acceleration noise magnitude for Q
        min_time_interval_s: Readings closer than this to the previous
                             one are not filtered
    """

    sensor_noise: float = DEFAULT_SENSOR_NOISE
    acceleration_noise_sigma: float = DEFAULT_ACCELERATION_NOISE_SIGMA
    min_time_interval_s: float = MIN_TIME_INTERVAL_S

    def validate(self) -> "FilterConfig":
        """
        Check every field.

        Returns:
            self, for chaining

        Raises:
            InvalidConfiguration: On a non-positive or non-finite value
        """
        _check_positive("sensor_noise", self.sensor_noise)
        _check_non_negative("acceleration_noise_sigma", self.acceleration_noise_sigma)
        _check_non_negative("min_time_interval_s", self.min_time_interval_s)
        return self


@dataclass(frozen=True)
class KalmanState:
    """
    State container for Kalman Filter.

    Attributes:
        x: State vector [lat, vlat, lon, vlon, alt, valt] (6x1)
        P: State covariance matrix (6x6)
    """

    x: Matrix  # State vector
    P: Matrix  # Covariance matrix


class GeoKalmanFilter:
    """
    Kalman Filter smoothing a stream of geodetic readings.

    One instance tracks one object and must be driven by a single caller;
    it holds no locks.

    Example:
        >>> kf = GeoKalmanFilter(Location(45.0703, 7.6869, 240.0, timestamp=0.0))
        >>> corrected = kf.process(Location(45.0705, 7.6867, 241.0, timestamp=1.0))
        >>> kf.set_sensor_noise_covariance(50.0)
    """

    def __init__(
        self,
        initial_location: Location,
        sensor_noise: float = DEFAULT_SENSOR_NOISE,
        acceleration_noise_sigma: float = DEFAULT_ACCELERATION_NOISE_SIGMA,
        min_time_interval: float = MIN_TIME_INTERVAL_S,
    ) -> None:
        """
        Initialize Kalman Filter.

        Args:
            initial_location: First reading; seeds the state with zero velocity
            sensor_noise: Sensor noise covariance (diagonal of R)
            acceleration_noise_sigma: Acceleration noise magnitude (sigma in Q)
            min_time_interval: Minimum elapsed time [s] for a reading to be filtered
        """
        self._sensor_noise = _check_positive("sensor_noise", sensor_noise)
        self._acceleration_noise_sigma = _check_non_negative(
            "acceleration_noise_sigma", acceleration_noise_sigma
        )
        self.min_time_interval = _check_non_negative("min_time_interval", min_time_interval)

        self.initialize(initial_location)

    @classmethod
    def from_config(cls, initial_location: Location, config: FilterConfig) -> "GeoKalmanFilter":
        config.validate()
        return cls(
            initial_location,
            sensor_noise=config.sensor_noise,
            acceleration_noise_sigma=config.acceleration_noise_sigma,
            min_time_interval=config.min_time_interval_s,
        )

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def initialize(self, location: Location) -> None:
        """
        Seed the filter from a reading.

        Position components come from the reading, velocities are zero,
        covariance is the identity and no time has elapsed (F = I, Q = 0).
        """
        self._previous_location = location
        self._last_output = location

        x = Matrix.column(
            [location.latitude, 0.0, location.longitude, 0.0, location.altitude, 0.0]
        )
        P = identity(STATE_DIMENSION)
        self._state = KalmanState(x=x, P=P)

        self.F = self._get_transition_matrix(0.0)
        self.Q = self._get_process_noise(0.0)

        logger.debug(
            "Filter initialized at (%.6f, %.6f, %.1f) t=%.3f",
            location.latitude,
            location.longitude,
            location.altitude,
            location.timestamp,
        )

    def reset(self, location: Location) -> None:
        """Discard accumulated state and restart tracking from a reading."""
        logger.info("Filter reset at t=%.3f", location.timestamp)
        self.initialize(location)

    def set_sensor_noise_covariance(self, value: float) -> None:
        """
        Set the sensor noise covariance used from the next cycle on.

        Higher values give smoother but less responsive output.

        Raises:
            InvalidConfiguration: If value is non-positive or non-finite
        """
        self._sensor_noise = _check_positive("sensor_noise", value)
        logger.info("Sensor noise covariance set to %g", self._sensor_noise)

    # -------------------------------------------------------------------------
    # Model matrices
    # -------------------------------------------------------------------------

    def _get_transition_matrix(self, dt: float) -> Matrix:
        """
        Get state transition matrix F for time step dt.

        Block diagonal, one CV block per axis:
        | 1  dt |
        | 0  1  |
        """
        block = [[1.0, dt], [0.0, 1.0]]
        return Matrix.block_diagonal([block] * AXIS_COUNT)

    def _get_process_noise(self, dt: float) -> Matrix:
        """
        Get process noise covariance Q for time step dt.

        Discrete white noise acceleration block per axis, scaled by sigma:
        | dt^4/4  dt^3/2 |
        | dt^3/2  dt^2   |
        """
        sigma = self._acceleration_noise_sigma
        dt2 = dt * dt
        dt3 = dt2 * dt
        dt4 = dt3 * dt

        block = [
            [sigma * dt4 / 4.0, sigma * dt3 / 2.0],
            [sigma * dt3 / 2.0, sigma * dt2],
        ]
        return Matrix.block_diagonal([block] * AXIS_COUNT)

    def _get_sensor_noise(self) -> Matrix:
        """Sensor noise covariance R = r * I."""
        return Matrix.diagonal([self._sensor_noise] * STATE_DIMENSION)

    def _measurement_vector(self, location: Location, dt: float) -> Matrix:
        """
        Build z from a reading.

        Velocities are (previous - current) / dt on each axis.
        """
        previous = self._previous_location
        return Matrix.column(
            [
                location.latitude,
                (previous.latitude - location.latitude) / dt,
                location.longitude,
                (previous.longitude - location.longitude) / dt,
                location.altitude,
                (previous.altitude - location.altitude) / dt,
            ]
        )

    # -------------------------------------------------------------------------
    # Filter equations
    # -------------------------------------------------------------------------

    def predict(self, state: KalmanState, dt: float) -> KalmanState:
        """
        Predict state to next time step.

        Prediction equations:
            x_pred = F * x
            P_pred = F * P * F^T + Q

        Args:
            state: Current state
            dt: Time step (seconds)

        Returns:
            Predicted state
        """
        F = self._get_transition_matrix(dt)
        Q = self._get_process_noise(dt)

        # State prediction
        x_pred = F @ state.x

        # Covariance prediction
        P_pred = F @ state.P @ F.T + Q

        return KalmanState(x=x_pred, P=P_pred)

    def update(self, state: KalmanState, measurement: Matrix) -> KalmanState:
        """
        Update state with measurement.

        Update equations (H = I):
            S = P + R              (innovation covariance)
            K = P * S^-1           (Kalman gain)
            x_new = x + K * (z - x)
            P_new = (I - K) * P

        Args:
            state: Predicted state
            measurement: Measurement vector z (6x1)

        Returns:
            Updated state

        Raises:
            SingularMatrix: If S cannot be inverted
        """
        R = self._get_sensor_noise()

        # Innovation covariance
        S = state.P + R

        # Kalman gain
        S_inv = inverse(S)
        K = state.P @ S_inv

        # State update
        innovation = measurement - state.x
        x_new = state.x + K @ innovation

        # Covariance update
        P_new = (identity(STATE_DIMENSION) - K) @ state.P

        return KalmanState(x=x_new, P=P_new)

    def process(self, location: Location) -> Location:
        """
        Run one predict/update cycle for a new reading.

        Readings less than min_time_interval after the previous accepted
        one (including out-of-order readings) leave the filter untouched
        and return the last corrected position.

        Args:
            location: New raw reading

        Returns:
            Corrected position stamped with the reading's time

        Raises:
            SingularMatrix: If the innovation covariance is not invertible;
                            the filter state is left unchanged
        """
        dt = location.timestamp - self._previous_location.timestamp
        if dt <= self.min_time_interval:
            logger.debug("Holding last output: dt=%.6f s below %.6f s", dt, self.min_time_interval)
            return self._last_output

        z = self._measurement_vector(location, dt)

        try:
            predicted = self.predict(self._state, dt)
            updated = self.update(predicted, z)
        except SingularMatrix:
            logger.warning(
                "Rejected reading at t=%.3f: singular innovation covariance", location.timestamp
            )
            raise

        output = Location(
            latitude=updated.x[LATITUDE_INDEX, 0],
            longitude=updated.x[LONGITUDE_INDEX, 0],
            altitude=updated.x[ALTITUDE_INDEX, 0],
            timestamp=location.timestamp,
            horizontal_accuracy=location.horizontal_accuracy,
            vertical_accuracy=location.vertical_accuracy,
        )

        self._state = updated
        self.F = self._get_transition_matrix(dt)
        self.Q = self._get_process_noise(dt)
        self._previous_location = location
        self._last_output = output

        logger.debug(
            "dt=%.3f s raw=(%.6f, %.6f, %.1f) filtered=(%.6f, %.6f, %.1f)",
            dt,
            location.latitude,
            location.longitude,
            location.altitude,
            output.latitude,
            output.longitude,
            output.altitude,
        )
        return output

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def state(self) -> KalmanState:
        return self._state

    @property
    def R(self) -> Matrix:
        return self._get_sensor_noise()

    @property
    def sensor_noise(self) -> float:
        return self._sensor_noise

    @property
    def acceleration_noise_sigma(self) -> float:
        return self._acceleration_noise_sigma

    @property
    def last_location(self) -> Location:
        """Last accepted raw reading."""
        return self._previous_location

    @property
    def last_output(self) -> Location:
        return self._last_output

    def get_position(self) -> Tuple[float, float, float]:
        """Extract (lat, lon, alt) from state."""
        x = self._state.x
        return tuple(x[i, 0] for i in POSITION_INDICES)

    def get_velocity(self) -> Tuple[float, float, float]:
        """Extract (vlat, vlon, valt) from state."""
        x = self._state.x
        return tuple(x[i, 0] for i in VELOCITY_INDICES)

    def __repr__(self) -> str:
        lat, lon, alt = self.get_position()
        return (
            f"GeoKalmanFilter(position=({lat:.6f}, {lon:.6f}, {alt:.1f}), "
            f"sensor_noise={self._sensor_noise})"
        )
