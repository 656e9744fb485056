"""
Exact Diagonalization (Full Eigenvalue Decomposition)

Dense reference solver: all eigenpairs of a symmetric matrix from LAPACK
(``numpy.linalg.eigh``). Used by the factory for small problems and as the
ground truth in the tests of the iterative solvers.

Mathematical Background:
    For symmetric A: A = Q Λ Q^T with orthonormal Q.

References:
    - Golub & Van Loan, "Matrix Computations" (4th ed.), Chapter 8
"""

from typing import Optional, Literal
from numpy.typing import NDArray
import numpy as np
import scipy.sparse as sp

from .result import EigenResult, EigenSolver

# ----------------------------------------------------------------------------------------
#! Exact Eigensolver
# ----------------------------------------------------------------------------------------

class ExactEigensolver(EigenSolver):
    """
    Full eigenvalue decomposition of a symmetric matrix.

    Args:
        sort: How to sort eigenvalues ('ascending', 'descending', None)

    Example:
        >>> A = np.array([[4., -1.], [-1., 3.]])
        >>> result = ExactEigensolver(sort='ascending').solve(A)
        >>> print(f"All eigenvalues: {result.eigenvalues}")
    """

    def __init__(self, sort: Optional[Literal['ascending', 'descending']] = 'ascending'):
        if sort not in ('ascending', 'descending', None):
            raise ValueError(f"sort must be 'ascending', 'descending' or None, got {sort!r}")
        self.sort = sort

    def solve(self, A: NDArray) -> EigenResult:
        """
        Solve for all eigenvalues and eigenvectors.

        Args:
            A: Matrix to diagonalize (dense or scipy.sparse, densified)

        Returns:
            EigenResult with all eigenvalues and eigenvectors
        """
        A = A.toarray() if sp.issparse(A) else np.asarray(A, dtype=np.float64)
        if A.ndim != 2 or A.shape[0] != A.shape[1]:
            raise ValueError(f"A must be square, got shape {A.shape}")

        eigenvalues, eigenvectors = np.linalg.eigh(A)   # ascending

        if self.sort == 'descending':
            eigenvalues     = eigenvalues[::-1]
            eigenvectors    = eigenvectors[:, ::-1]

        residual_norms = np.linalg.norm(A @ eigenvectors - eigenvectors * eigenvalues, axis=0)

        # Full ED always converges
        return EigenResult(
            eigenvalues     = eigenvalues,
            eigenvectors    = eigenvectors,
            iterations      = 1,  # Direct method
            converged       = True,
            residual_norms  = residual_norms
        )

# ----------------------------------------------------------------------------------------
#! Convenience Function
# ----------------------------------------------------------------------------------------

def full_diagonalization(A: NDArray, sort: Optional[Literal['ascending', 'descending']] = 'ascending') -> EigenResult:
    """
    Convenience function for full eigenvalue decomposition.

    Example:
        >>> A = np.random.randn(50, 50)
        >>> A = 0.5 * (A + A.T)  # Make symmetric
        >>> result = full_diagonalization(A)
        >>> print(f"Lowest eigenvalue: {result.eigenvalues[0]}")
    """
    return ExactEigensolver(sort=sort).solve(A)

# ----------------------------------------------------------------------------------------
#! EOF
# ----------------------------------------------------------------------------------------
