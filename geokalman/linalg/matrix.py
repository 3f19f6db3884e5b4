"""
Fixed-Size Matrix Kernel

Small immutable matrix type used by the filter engine. Every operation
returns a new Matrix; operands are stored as read-only float64 arrays so
no step of the predict/update cycle can modify another step's inputs.

Failure modes:
    - DimensionMismatch: shapes incompatible for the requested operation
    - SingularMatrix: inverse requested for a (numerically) singular matrix

Example:
    >>> A = Matrix.identity(6)
    >>> B = A @ Matrix.column([1, 2, 3, 4, 5, 6])
    >>> B.shape
    (6, 1)
"""

from typing import Iterable, Sequence, Tuple, Union

import numpy as np

from ..constants import SINGULARITY_TOLERANCE
from ..exceptions import DimensionMismatch, SingularMatrix

ArrayLike = Union["Matrix", np.ndarray, Sequence[Sequence[float]]]


class Matrix:
    """
    Immutable 2-D float64 matrix.

    Attributes:
        rows: Number of rows
        columns: Number of columns
        values: Read-only numpy view of the entries
    """

    __slots__ = ("_values",)

    def __init__(self, values: ArrayLike) -> None:
        if isinstance(values, Matrix):
            array = values._values
        else:
            array = np.array(values, dtype=np.float64)
        if array.ndim != 2:
            raise DimensionMismatch("Matrix", tuple(array.shape))
        array = np.array(array, dtype=np.float64, copy=True)
        array.flags.writeable = False
        self._values = array

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------

    @classmethod
    def zeros(cls, rows: int, columns: int) -> "Matrix":
        return cls(np.zeros((rows, columns)))

    @classmethod
    def identity(cls, dimension: int) -> "Matrix":
        return cls(np.eye(dimension))

    @classmethod
    def column(cls, values: Iterable[float]) -> "Matrix":
        """Build an n x 1 column vector."""
        return cls(np.asarray(list(values), dtype=np.float64).reshape(-1, 1))

    @classmethod
    def diagonal(cls, values: Iterable[float]) -> "Matrix":
        return cls(np.diag(list(values)))

    @classmethod
    def block_diagonal(cls, blocks: Sequence[ArrayLike]) -> "Matrix":
        """
        Place square blocks along the diagonal.

        Args:
            blocks: Square blocks, top-left to bottom-right

        Returns:
            Matrix whose size is the sum of the block sizes
        """
        arrays = [Matrix(b).values for b in blocks]
        for a in arrays:
            if a.shape[0] != a.shape[1]:
                raise DimensionMismatch("block_diagonal", tuple(a.shape))
        size = sum(a.shape[0] for a in arrays)
        out = np.zeros((size, size))
        offset = 0
        for a in arrays:
            n = a.shape[0]
            out[offset : offset + n, offset : offset + n] = a
            offset += n
        return cls(out)

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def values(self) -> np.ndarray:
        return self._values

    @property
    def rows(self) -> int:
        return self._values.shape[0]

    @property
    def columns(self) -> int:
        return self._values.shape[1]

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.rows, self.columns)

    @property
    def T(self) -> "Matrix":
        return transpose(self)

    def __getitem__(self, index):
        """Scalar for m[i, j]; a Matrix for slices (1-D results become one row)."""
        result = self._values[index]
        if np.ndim(result) == 0:
            return float(result)
        return Matrix(np.atleast_2d(result))

    # -------------------------------------------------------------------------
    # Operators
    # -------------------------------------------------------------------------

    def __add__(self, other: "Matrix") -> "Matrix":
        return add(self, other)

    def __sub__(self, other: "Matrix") -> "Matrix":
        return subtract(self, other)

    def __matmul__(self, other: "Matrix") -> "Matrix":
        return multiply(self, other)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.shape == other.shape and bool(np.array_equal(self._values, other._values))

    __hash__ = None

    def __repr__(self) -> str:
        return f"Matrix({self._values.tolist()!r})"

    # -------------------------------------------------------------------------
    # Checks
    # -------------------------------------------------------------------------

    def allclose(self, other: "Matrix", atol: float = 1e-9) -> bool:
        """Elementwise comparison within an absolute tolerance."""
        if self.shape != other.shape:
            return False
        return bool(np.allclose(self._values, other._values, rtol=0.0, atol=atol))

    def is_symmetric(self, atol: float = 1e-9) -> bool:
        if self.rows != self.columns:
            return False
        return bool(np.allclose(self._values, self._values.T, rtol=0.0, atol=atol))


def _as_matrix(value: ArrayLike) -> Matrix:
    return value if isinstance(value, Matrix) else Matrix(value)


def add(a: ArrayLike, b: ArrayLike) -> Matrix:
    """Elementwise sum A + B."""
    a, b = _as_matrix(a), _as_matrix(b)
    if a.shape != b.shape:
        raise DimensionMismatch("add", a.shape, b.shape)
    return Matrix(a.values + b.values)


def subtract(a: ArrayLike, b: ArrayLike) -> Matrix:
    """Elementwise difference A - B."""
    a, b = _as_matrix(a), _as_matrix(b)
    if a.shape != b.shape:
        raise DimensionMismatch("subtract", a.shape, b.shape)
    return Matrix(a.values - b.values)


def multiply(a: ArrayLike, b: ArrayLike) -> Matrix:
    """Matrix product A * B; requires A.columns == B.rows."""
    a, b = _as_matrix(a), _as_matrix(b)
    if a.columns != b.rows:
        raise DimensionMismatch("multiply", a.shape, b.shape)
    return Matrix(a.values @ b.values)


def transpose(a: ArrayLike) -> Matrix:
    a = _as_matrix(a)
    return Matrix(a.values.T)


def identity(dimension: int) -> Matrix:
    return Matrix.identity(dimension)


def inverse(a: ArrayLike) -> Matrix:
    """
    Matrix inverse.

    A matrix is treated as singular when its reciprocal condition number
    falls below SINGULARITY_TOLERANCE, which covers exact zeros of the
    determinant as well as near-singular inputs whose inverse would be
    dominated by rounding error.

    Raises:
        DimensionMismatch: If A is not square
        SingularMatrix: If A is not invertible
    """
    a = _as_matrix(a)
    if a.rows != a.columns:
        raise DimensionMismatch("inverse", a.shape)

    values = a.values
    if not np.all(np.isfinite(values)):
        raise SingularMatrix("inverse: matrix contains non-finite entries")

    # cond of an all-zero matrix is 0/0
    with np.errstate(divide="ignore", invalid="ignore"):
        cond = np.linalg.cond(values)
    if not np.isfinite(cond) or 1.0 / cond < SINGULARITY_TOLERANCE:
        raise SingularMatrix(f"inverse: matrix is singular (condition number {cond:.3e})")

    try:
        inv = np.linalg.inv(values)
    except np.linalg.LinAlgError as e:
        raise SingularMatrix(f"inverse: {e}") from e
    return Matrix(inv)
