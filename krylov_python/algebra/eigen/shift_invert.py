r"""
Shift-Invert Lanczos Solver

Eigenvalues of $A$ closest to a shift $\sigma$ are the largest-magnitude
eigenvalues of

    $$
    (A - \sigma I)^{-1}, \qquad \theta = \frac{1}{\lambda - \sigma} .
    $$

The restarted Lanczos iteration runs on the inverted operator, where the
wanted part of the spectrum is well separated, and the converged Ritz values are
mapped back with $\lambda = 1/\theta + \sigma$ before the final ordering.

Example:
    >>> A       = np.diag(np.linspace(1.0, 100.0, 100))
    >>> op      = DenseGenRealShiftSolve(A)
    >>> solver  = SymEigsShiftSolver(op, nev=3, ncv=10, sigma=0.0, seed=0)
    >>> solver.init()
    >>> _       = solver.compute()
    >>> evals   = solver.eigenvalues()      # three eigenvalues of A closest to 0
"""

from typing import Union

from .selection import SelectionRule
from .operators import MatOpWithShiftSolve
from .modes import ShiftInvertMode
from .lanczos import SymEigsSolver, _check_dimensions

# ----------------------------------------------------------------------------------------

class SymEigsShiftSolver(SymEigsSolver):
    """
    Restarted Lanczos in shift-invert mode.

    Parameters:
    -----------
        op:
            Operator with ``rows()``, ``cols()``, ``set_shift(sigma)`` and
            ``apply_shift_inverse(x)``. ``set_shift`` is called once, here.
        nev, ncv:
            As in :class:`SymEigsSolver`.
        sigma:
            The shift.
        rule:
            Selection rule applied to the transformed values; the default
            LARGEST_MAGN selects the eigenvalues of A nearest to sigma.
        **kwargs:
            Forwarded to :class:`SymEigsSolver` (rng, seed, logger, ...).
    """

    def __init__(self,
                op      : MatOpWithShiftSolve,
                nev     : int,
                ncv     : int,
                sigma   : float,
                rule    : Union[SelectionRule, str] = SelectionRule.LARGEST_MAGN,
                **kwargs):
        if 'mode' in kwargs:
            raise TypeError(f"{type(self).__name__} builds its own operator mode, 'mode' is not accepted")
        # validate before the shifted matrix is factorized
        _check_dimensions(op, nev, ncv)
        super().__init__(op, nev, ncv, rule, mode=ShiftInvertMode(op, sigma), **kwargs)

    @property
    def sigma(self) -> float:
        return self._mode.sigma

# ----------------------------------------------------------------------------------------
#! EOF
# ----------------------------------------------------------------------------------------
