"""
Eigenvalue Solver Result Types

Result container shared by the Lanczos, shift-invert, exact and scipy solvers,
and the base class those solvers derive from.
"""

import numpy as np
import scipy.sparse as sp
from typing import Optional, NamedTuple
from numpy.typing import NDArray

class EigenSolver:
    """
    Base class of the symmetric eigensolvers: ``solve`` returns an ``EigenResult``.
    """

    @staticmethod
    def _is_symmetric(A, rtol=1e-12) -> bool:
        r"""
        $\max|A - A^T| \le rtol \cdot \max|A|$, for dense arrays and scipy.sparse
        matrices.
        """
        if sp.issparse(A):
            A       = sp.csr_matrix(A)
            diff    = abs(A - A.T).max()
            scale   = abs(A).max() if A.nnz else 0.0
        else:
            A       = np.asarray(A, dtype=np.float64)
            if A.size == 0:
                return True
            diff    = np.max(np.abs(A - A.T))
            scale   = np.max(np.abs(A))
        return bool(diff <= rtol * scale)

    def solve(self, *args, **kwargs) -> 'EigenResult':
        raise NotImplementedError("This method should be implemented by subclasses.")

# ---------------------------------------------------------------------------------

class EigenResult(NamedTuple):
    r"""
    Outcome of one eigensolver run.

    Attributes:
        eigenvalues:
            Converged eigenvalues, descending magnitude (the exact solver keeps
            the order it was asked for)
        eigenvectors:
            Eigenvectors as columns, n x len(eigenvalues)
        subspacevectors:
            Final Krylov basis V, n x ncv (Lanczos solvers only)
        iterations:
            Restart iterations entered by ``compute`` (1 for the exact solver,
            None when scipy does not report it)
        converged:
            True when every requested eigenpair converged
        residual_norms:
            $|s_{ncv}| \|f\|$ estimates for the Lanczos solvers,
            $\|A v - \lambda v\|$ for the exact solver
        num_operations:
            Operator applications (products or shift-solves), when counted
    """
    eigenvalues     : NDArray
    eigenvectors    : NDArray
    subspacevectors : Optional[NDArray] = None
    iterations      : Optional[int]     = None
    converged       : bool              = True
    residual_norms  : Optional[NDArray] = None
    num_operations  : Optional[int]     = None

    @property
    def num_converged(self) -> int:
        return len(self.eigenvalues)

    def __repr__(self):
        iter_str    = f"{self.iterations}" if self.iterations is not None else "N/A"
        max_res     = (f"{np.max(self.residual_norms):.2e}"
                        if self.residual_norms is not None and len(self.residual_norms) else "N/A")
        return (f"EigenResult(num_converged={self.num_converged}, converged={self.converged}, "
                f"iterations={iter_str}, max_residual={max_res})")

# ------------------------------------------------------------------------------------------------
#! EOF
# ------------------------------------------------------------------------------------------------
