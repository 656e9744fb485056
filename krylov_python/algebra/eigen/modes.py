r"""
Operator-application modes.

The Arnoldi engine never calls the operator directly. It goes through a mode
object with two operations:

    apply_operator(x)           the vector the Krylov recurrence is built from
    finalize_eigenvalues(vals)  maps converged Ritz values back to eigenvalues of A

``MatrixProductMode`` builds the Krylov space of $A$ itself.
``ShiftInvertMode`` builds it for $(A - \sigma I)^{-1}$: eigenvalues of $A$ close to
$\sigma$ become the largest-magnitude Ritz values $\theta = 1/(\lambda - \sigma)$,
and are mapped back with $\lambda = 1/\theta + \sigma$.
"""

import numpy as np
from numpy.typing import NDArray

from .operators import MatOp, MatOpWithShiftSolve

# ----------------------------------------------------------------------------------------

class OperatorMode:
    """
    Interface of the operator-application strategies.
    """

    def __init__(self, op):
        self._op        = op
        self._n_ops     = 0

    @property
    def op(self):
        return self._op

    @property
    def num_operations(self) -> int:
        """Number of operator applications performed so far."""
        return self._n_ops

    def dim(self) -> int:
        return int(self._op.rows())

    def apply_operator(self, x: NDArray) -> NDArray:
        raise NotImplementedError("This method should be implemented by subclasses.")

    def finalize_eigenvalues(self, values: NDArray) -> NDArray:
        return values

# ----------------------------------------------------------------------------------------

class MatrixProductMode(OperatorMode):
    """
    Regular mode, ``y = A x``.
    """

    def __init__(self, op: MatOp):
        if not isinstance(op, MatOp):
            raise TypeError(f"{type(op).__name__} does not provide rows(), cols() and apply(x)")
        super().__init__(op)

    def apply_operator(self, x: NDArray) -> NDArray:
        self._n_ops += 1
        return np.asarray(self._op.apply(x), dtype=np.float64)

# ----------------------------------------------------------------------------------------

class ShiftInvertMode(OperatorMode):
    r"""
    Shift-invert mode, ``y = (A - sigma I)^{-1} x``.

    The shift is pushed to the operator when the mode is created, so the
    factorization of $A - \sigma I$ happens once, before any iteration.
    """

    def __init__(self, op: MatOpWithShiftSolve, sigma: float):
        if not isinstance(op, MatOpWithShiftSolve):
            raise TypeError(f"{type(op).__name__} does not provide set_shift(sigma) and apply_shift_inverse(x)")
        super().__init__(op)
        self._sigma = float(sigma)
        self._op.set_shift(self._sigma)

    @property
    def sigma(self) -> float:
        return self._sigma

    def apply_operator(self, x: NDArray) -> NDArray:
        self._n_ops += 1
        return np.asarray(self._op.apply_shift_inverse(x), dtype=np.float64)

    def finalize_eigenvalues(self, values: NDArray) -> NDArray:
        return 1.0 / np.asarray(values, dtype=np.float64) + self._sigma

# ----------------------------------------------------------------------------------------
#! EOF
# ----------------------------------------------------------------------------------------
