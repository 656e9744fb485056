"""
Unified Eigenvalue Solver Interface

Provides a factory function to choose the appropriate eigenvalue solver based on
problem characteristics (matrix size, availability of an explicit matrix, a
target shift).

Every method returns an ``EigenResult`` with the selected eigenvalues ordered by
descending magnitude, so results of different methods can be compared directly.
"""

import numpy as np
import scipy.sparse as sp
from numpy.typing import NDArray
from typing import Optional, Callable, Literal, Union

from .result            import EigenResult, EigenSolver
from .selection         import SelectionRule
from .operators         import (MatvecOperator, DenseGenRealShiftSolve, SparseSymShiftSolve,
                                as_operator)
from .exact             import ExactEigensolver
from .lanczos           import SymEigsSolver, EigshSolver
from .shift_invert      import SymEigsShiftSolver
from ..utils            import DEFAULT_MAX_ITER, DEFAULT_TOL
from ...common.flog     import Logger, get_global_logger

# ----------------------------------------------------------------------------------------

# below this size the dense decomposition is cheaper than any iteration
EXACT_MAX_DIM   = 200
METHODS         = ('irlm', 'shift-invert', 'scipy-eigsh', 'exact', 'auto')

def default_ncv(n: int, k: int) -> int:
    """ncv = min(n - 1, max(2k + 1, 20))."""
    return min(n - 1, max(2 * k + 1, 20))

# ----------------------------------------------------------------------------------------
#! Unified Eigenvalue Solver Factory Function
# ----------------------------------------------------------------------------------------

def choose_eigensolver(
        method          : Literal['irlm', 'shift-invert', 'scipy-eigsh', 'exact', 'auto'] = 'auto',
        A               : Optional[NDArray]                             = None,
        matvec          : Optional[Callable[[NDArray], NDArray]]        = None,
        n               : Optional[int]                                 = None,
        k               : int                                           = 6,
        which           : Union[SelectionRule, str]                     = 'LM',
        ncv             : Optional[int]                                 = None,
        sigma           : Optional[float]                               = None,
        tol             : float                                         = DEFAULT_TOL,
        max_iter        : int                                           = DEFAULT_MAX_ITER,
        v0              : Optional[NDArray]                             = None,
        seed            : Optional[int]                                 = None,
        logger          : Optional[Logger]                              = None) -> EigenResult:
    r"""
    Unified interface for the symmetric eigenvalue solvers.

    Parameters:
    -----------
        method: Which solver to use
            - 'irlm'            : Implicitly restarted Lanczos (SymEigsSolver)
            - 'shift-invert'    : Restarted Lanczos on (A - sigma I)^{-1}, eigenvalues nearest sigma
            - 'scipy-eigsh'     : scipy.sparse.linalg.eigsh (ARPACK) reference
            - 'exact'           : Full diagonalization, then selection by ``which``
            - 'auto'            : 'exact' for n <= 200, 'shift-invert' when sigma is given,
                                  'irlm' otherwise
        A :
            Matrix: ndarray, scipy.sparse matrix, LinearOperator or operator object
        matvec :
            Matrix-vector product function (alternative to A)
        n :
            Dimension (required with matvec)
        k :
            Number of eigenvalues
        which :
            Selection rule, 'LM', 'LA', 'SM', 'SA', 'BE' or a descriptive name
        ncv :
            Krylov dimension (default: min(n - 1, max(2k + 1, 20)))
        sigma :
            Shift for 'shift-invert'
        tol, max_iter :
            Convergence tolerance and maximum number of restarts
        v0 :
            Starting vector
        seed :
            Seed of the starting vector when v0 is not given
        logger :
            Logger (default: the global logger)

    Returns:
        EigenResult with eigenvalues and eigenvectors

    Examples:
        >>> A = np.random.randn(500, 500)
        >>> A = 0.5 * (A + A.T)
        >>> result = choose_eigensolver('irlm', A, k=5, which='SA', seed=1)
        >>> result = choose_eigensolver('shift-invert', A, k=5, sigma=0.0)
        >>> result = choose_eigensolver('auto', A, k=5)
    """

    logger  = logger if logger is not None else get_global_logger()
    rule    = SelectionRule.from_string(which)

    if method not in METHODS:
        raise ValueError(f"Unknown method: {method}. Choose from: {', '.join(repr(m) for m in METHODS)}")

    if A is None and matvec is None:
        raise ValueError("Must provide either matrix A or matvec function")

    # ----------------------------------------------
    #! handle matrix-vector product or explicit matrix A
    # ----------------------------------------------

    if A is not None:
        if isinstance(A, (list, tuple)):
            A = np.asarray(A, dtype=np.float64)
        op = as_operator(A)
        if _is_explicit(A) and not EigenSolver._is_symmetric(A):
            raise ValueError("A must be symmetric for the Lanczos eigensolvers")
    else:
        if n is None:
            raise ValueError("Must provide dimension n when using matvec without A")
        op = MatvecOperator(matvec, n)
    n = op.rows()

    if method == 'auto':
        method = decide_method(n, has_matrix=_is_explicit(A), sigma=sigma)
        logger.debug(f"choose_eigensolver: auto selected '{method}' for n={n}, k={k}", lvl=1)

    if not 0 < k < n:
        raise ValueError(f"k must satisfy 1 <= k <= n - 1, got k={k}, n={n}")
    ncv = default_ncv(n, k) if ncv is None else ncv

    # ----------------------------------------------

    if method == 'exact':
        if not _is_explicit(A):
            raise ValueError("Exact diagonalization requires an explicit matrix A")
        full = ExactEigensolver(sort='descending').solve(A)
        return _select(full, k, rule)

    # ----------------------------------------------
    elif method == 'irlm':
        solver = SymEigsSolver(op, k, ncv, rule, seed=seed, logger=logger)
        return solver.solve(v0=v0, max_iter=max_iter, tol=tol)

    # ----------------------------------------------
    elif method == 'shift-invert':
        if sigma is None:
            raise ValueError("Shift-invert requires sigma")
        if sp.issparse(A):
            shift_op = SparseSymShiftSolve(A)
        elif isinstance(A, np.ndarray):
            shift_op = DenseGenRealShiftSolve(A)
        else:
            raise ValueError("Shift-invert requires an explicit dense or sparse matrix A")
        solver = SymEigsShiftSolver(shift_op, k, ncv, sigma, rule, seed=seed, logger=logger)
        return solver.solve(v0=v0, max_iter=max_iter, tol=tol)

    # ----------------------------------------------
    else:  # 'scipy-eigsh'
        solver = EigshSolver(k=k, which=rule, ncv=ncv, sigma=sigma, tol=tol, maxiter=max_iter, seed=seed)
        return solver.solve(A if A is not None else op, v0=v0)

# --------------------------------------------------

def decide_method(n         : int,
                has_matrix  : bool              = True,
                sigma       : Optional[float]   = None) -> str:
    """
    Decide which eigenvalue method to use based on problem characteristics.

    Example:
        >>> decide_method(n=10000, sigma=None)
        'irlm'
    """
    if has_matrix and n <= EXACT_MAX_DIM:
        return 'exact'
    if sigma is not None and has_matrix:
        return 'shift-invert'
    return 'irlm'

# --------------------------------------------------

def _is_explicit(A) -> bool:
    return isinstance(A, np.ndarray) or sp.issparse(A)

def _select(full: EigenResult, k: int, rule: SelectionRule) -> EigenResult:
    """
    Pick k eigenpairs of a full decomposition with the selection rule and order
    them by descending magnitude.
    """
    evals = full.eigenvalues
    if rule is SelectionRule.BOTH_ENDS:
        desc    = SelectionRule.LARGEST_ALGE.argsort(evals)
        n_top   = (k + 1) // 2
        idx     = np.concatenate([desc[:n_top], desc[len(desc) - (k - n_top):]])
    else:
        idx     = rule.argsort(evals)[:k]

    idx     = idx[SelectionRule.LARGEST_MAGN.argsort(evals[idx])]
    return EigenResult(
        eigenvalues     = evals[idx],
        eigenvectors    = full.eigenvectors[:, idx],
        iterations      = full.iterations,
        converged       = True,
        residual_norms  = full.residual_norms[idx],
    )

# ----------------------------------------------------------------------------------------
#! EOF
# ----------------------------------------------------------------------------------------
