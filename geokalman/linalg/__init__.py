"""
Linear-Algebra Kernel

Immutable fixed-size matrices for the filter engine.

Components:
    - Matrix: Read-only float64 matrix with +, -, @ operators
    - add, subtract, multiply, transpose, identity, inverse: Kernel operations

Example:
    >>> from geokalman.linalg import Matrix, inverse
    >>> inverse(Matrix.identity(6)) == Matrix.identity(6)
    True
"""

from .matrix import Matrix, add, identity, inverse, multiply, subtract, transpose

__all__ = ["Matrix", "add", "subtract", "multiply", "transpose", "identity", "inverse"]
