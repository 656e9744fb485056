r"""
Operators consumed by the Krylov eigensolvers.

The solvers never look at how a matrix is stored. They only need an object
exposing

    rows() -> int
    cols() -> int
    apply(x) -> y                       y = A x

and, for the shift-invert mode,

    set_shift(sigma)
    apply_shift_inverse(x) -> y         y = (A - \sigma I)^{-1} x

This module defines those two capabilities as structural protocols and provides
the usual implementations: dense and sparse products, a matrix-free wrapper around
a callable, and dense/sparse shift-solve operators that factorize
$A - \sigma I$ once per shift.
"""

from typing import Callable, Optional, Protocol, Union, runtime_checkable

import numpy as np
import scipy.linalg as scipy_linalg
import scipy.sparse as sp
import scipy.sparse.linalg as sp_linalg
from numpy.typing import NDArray

# ----------------------------------------------------------------------------------------
#! Capabilities
# ----------------------------------------------------------------------------------------

@runtime_checkable
class MatOp(Protocol):
    """Matrix-vector product capability."""

    def rows(self) -> int: ...
    def cols(self) -> int: ...
    def apply(self, x: NDArray) -> NDArray: ...

@runtime_checkable
class MatOpWithShiftSolve(Protocol):
    """Shift-and-solve capability used by the shift-invert mode."""

    def rows(self) -> int: ...
    def cols(self) -> int: ...
    def set_shift(self, sigma: float) -> None: ...
    def apply_shift_inverse(self, x: NDArray) -> NDArray: ...

# ----------------------------------------------------------------------------------------

def _check_square(shape, who: str) -> int:
    if len(shape) != 2 or shape[0] != shape[1]:
        raise ValueError(f"{who}: matrix must be square, got shape {tuple(shape)}")
    return int(shape[0])

def _as_vector(y, n: int) -> NDArray:
    y = np.asarray(y, dtype=np.float64).reshape(-1)
    if y.shape[0] != n:
        raise ValueError(f"operator returned a vector of length {y.shape[0]}, expected {n}")
    return y

# ----------------------------------------------------------------------------------------
#! Matrix-vector products
# ----------------------------------------------------------------------------------------

class DenseSymMatProd:
    """
    Product with a dense symmetric matrix. Only the full matrix is used,
    the caller is responsible for its symmetry.
    """

    def __init__(self, mat: NDArray):
        mat         = np.asarray(mat, dtype=np.float64)
        self._n     = _check_square(mat.shape, type(self).__name__)
        self._mat   = mat

    def rows(self) -> int: return self._n
    def cols(self) -> int: return self._n

    def apply(self, x: NDArray) -> NDArray:
        return self._mat @ x

class SparseSymMatProd:
    """
    Product with a ``scipy.sparse`` symmetric matrix (stored as CSR).
    """

    def __init__(self, mat):
        if not sp.issparse(mat):
            raise ValueError(f"{type(self).__name__}: expected a scipy.sparse matrix, got {type(mat).__name__}")
        self._n     = _check_square(mat.shape, type(self).__name__)
        self._mat   = sp.csr_matrix(mat, dtype=np.float64)

    def rows(self) -> int: return self._n
    def cols(self) -> int: return self._n

    def apply(self, x: NDArray) -> NDArray:
        return self._mat @ x

class MatvecOperator:
    """
    Matrix-free operator built from a callable ``matvec(x) -> A x``.

    Example:
        >>> def laplace(x):
        ...     y       = 2.0 * x
        ...     y[1:]  -= x[:-1]
        ...     y[:-1] -= x[1:]
        ...     return y
        >>> op = MatvecOperator(laplace, n=500)
    """

    def __init__(self, matvec: Callable[[NDArray], NDArray], n: int):
        if not callable(matvec):
            raise ValueError("matvec must be callable")
        if n is None or int(n) <= 0:
            raise ValueError(f"n (dimension) must be a positive integer, got {n}")
        self._matvec    = matvec
        self._n         = int(n)

    def rows(self) -> int: return self._n
    def cols(self) -> int: return self._n

    def apply(self, x: NDArray) -> NDArray:
        return _as_vector(self._matvec(x), self._n)

# ----------------------------------------------------------------------------------------
#! Shift-and-solve
# ----------------------------------------------------------------------------------------

class DenseGenRealShiftSolve:
    r"""
    Shift-and-solve for a dense real matrix.

    ``set_shift(sigma)`` computes the pivoted LU factorization of $A - \sigma I$,
    ``apply_shift_inverse(x)`` solves against the stored factors.
    """

    def __init__(self, mat: NDArray):
        mat             = np.asarray(mat, dtype=np.float64)
        self._n         = _check_square(mat.shape, type(self).__name__)
        self._mat       = mat
        self._lu        = None
        self._sigma     = None

    def rows(self) -> int: return self._n
    def cols(self) -> int: return self._n

    @property
    def sigma(self) -> Optional[float]:
        return self._sigma

    def apply(self, x: NDArray) -> NDArray:
        return self._mat @ x

    def set_shift(self, sigma: float) -> None:
        shifted         = self._mat - float(sigma) * np.eye(self._n)
        self._lu        = scipy_linalg.lu_factor(shifted, check_finite=False)
        self._sigma     = float(sigma)

    def apply_shift_inverse(self, x: NDArray) -> NDArray:
        if self._lu is None:
            raise RuntimeError(f"{type(self).__name__}: set_shift() must be called before apply_shift_inverse()")
        return scipy_linalg.lu_solve(self._lu, x, check_finite=False)

class SparseSymShiftSolve:
    r"""
    Shift-and-solve for a ``scipy.sparse`` matrix using a sparse LU (SuperLU)
    of $A - \sigma I$.
    """

    def __init__(self, mat):
        if not sp.issparse(mat):
            raise ValueError(f"{type(self).__name__}: expected a scipy.sparse matrix, got {type(mat).__name__}")
        self._n         = _check_square(mat.shape, type(self).__name__)
        self._mat       = sp.csc_matrix(mat, dtype=np.float64)
        self._lu        = None
        self._sigma     = None

    def rows(self) -> int: return self._n
    def cols(self) -> int: return self._n

    @property
    def sigma(self) -> Optional[float]:
        return self._sigma

    def apply(self, x: NDArray) -> NDArray:
        return self._mat @ x

    def set_shift(self, sigma: float) -> None:
        shifted         = (self._mat - float(sigma) * sp.identity(self._n, format='csc')).tocsc()
        self._lu        = sp_linalg.splu(shifted)
        self._sigma     = float(sigma)

    def apply_shift_inverse(self, x: NDArray) -> NDArray:
        if self._lu is None:
            raise RuntimeError(f"{type(self).__name__}: set_shift() must be called before apply_shift_inverse()")
        return self._lu.solve(np.asarray(x, dtype=np.float64))

# ----------------------------------------------------------------------------------------
#! Adapter
# ----------------------------------------------------------------------------------------

def as_operator(A: Union[NDArray, 'sp.spmatrix', sp_linalg.LinearOperator, MatOp]) -> MatOp:
    """
    Wrap ``A`` into an object with the product capability.

    Accepts a dense array, a scipy.sparse matrix, a scipy LinearOperator or an
    object that already satisfies :class:`MatOp` (returned unchanged).
    """
    if isinstance(A, MatOp):
        return A
    if sp.issparse(A):
        return SparseSymMatProd(A)
    if isinstance(A, sp_linalg.LinearOperator):
        n = _check_square(A.shape, "LinearOperator")
        return MatvecOperator(A.matvec, n)
    if isinstance(A, (np.ndarray, list, tuple)):
        return DenseSymMatProd(np.asarray(A))
    raise ValueError(f"Cannot build an operator from an object of type {type(A).__name__}")

# ----------------------------------------------------------------------------------------
#! EOF
# ----------------------------------------------------------------------------------------
