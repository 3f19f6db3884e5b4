"""
Error Types

All failures raised by the package derive from GeoKalmanError so callers
can catch the whole family at once.

    DimensionMismatch     - matrix shapes incompatible (programming fault)
    SingularMatrix        - innovation covariance not invertible (recoverable)
    InvalidConfiguration  - noise parameter non-positive or non-finite
    InvalidMeasurement    - reading with a non-finite coordinate or timestamp
"""

from typing import Optional, Tuple


class GeoKalmanError(Exception):
    """Base class for geokalman errors."""


class DimensionMismatch(GeoKalmanError, ValueError):
    """Raised when a matrix operation receives incompatible shapes."""

    def __init__(
        self,
        operation: str,
        left: Tuple[int, ...],
        right: Optional[Tuple[int, ...]] = None,
    ) -> None:
        self.operation = operation
        self.left = left
        self.right = right
        if right is None:
            message = f"{operation}: unsupported shape {left}"
        else:
            message = f"{operation}: incompatible shapes {left} and {right}"
        super().__init__(message)


class SingularMatrix(GeoKalmanError, ArithmeticError):
    """Raised when a matrix cannot be inverted."""


class InvalidConfiguration(GeoKalmanError, ValueError):
    """Raised for non-positive or non-finite noise parameters."""


class InvalidMeasurement(GeoKalmanError, ValueError):
    """Raised for readings that carry non-finite values."""
