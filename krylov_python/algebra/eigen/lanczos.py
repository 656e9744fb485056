r"""
Implicitly Restarted Lanczos Eigenvalue Solver

Computes a few eigenpairs of a large symmetric operator with the implicitly
restarted Lanczos method (the symmetric ARPACK family).

The solver keeps an ncv-step Arnoldi factorization

    $$
    A V = V H + f e_{ncv}^T ,
    $$

whose projected matrix $H$ is (numerically) tridiagonal. Each iteration:
    1. Diagonalizes $H$ (Ritz values $\theta$ and Ritz vectors $s$).
    2. Orders the Ritz values with the selection rule; the first nev are wanted.
    3. Tests convergence with the residual estimate $|s_{ncv}| \cdot \|f\|$.
    4. Otherwise applies the ncv - nev unwanted Ritz values as exact shifts
       through implicit QR steps, which compresses the factorization to nev
       steps whose starting vector is filtered towards the wanted eigenvectors,
       and extends it back to ncv steps.

Key Features:
    - Any operator exposing rows(), cols(), apply(x): dense, sparse or matrix-free
    - Runtime selection rule: LM, LA, SM, SA, BE
    - Operator modes (plain product or shift-invert) injected into the engine
    - Fixed memory: V (n x ncv), H (ncv x ncv), f (n)
    - Reproducible runs through an injected numpy Generator

Example:
    >>> A       = np.diag(np.arange(1.0, 101.0))
    >>> solver  = SymEigsSolver(DenseSymMatProd(A), nev=3, ncv=10, seed=0)
    >>> solver.init()
    >>> n_iter  = solver.compute(max_iter=1000, tol=1e-10)
    >>> evals   = solver.eigenvalues()      # ~ [100, 99, 98]

References:
    [1] R. B. Lehoucq, D. C. Sorensen, C. Yang, ARPACK Users' Guide (1998).
    [2] D. Calvetti, L. Reichel, D. C. Sorensen, An implicitly restarted Lanczos
        method for large symmetric eigenvalue problems, ETNA 2 (1994).
"""

from enum import Enum
from typing import Optional, Union
import numpy as np
import scipy.sparse as sp
import scipy.sparse.linalg as sp_linalg
from numpy.typing import NDArray

from .result import EigenResult, EigenSolver
from .selection import SelectionRule
from .operators import MatOp, as_operator
from .modes import OperatorMode, MatrixProductMode
from .arnoldi import ArnoldiFactorization
from ..utils import DEFAULT_MAX_ITER, DEFAULT_TOL, PY_INFO_VERBOSE, get_rng, precision_constant
from ...common.flog import Logger, get_global_logger

# ----------------------------------------------------------------------------------------

class CompInfo(Enum):
    """Outcome of the last computation."""
    NOT_COMPUTED    = 'not_computed'
    SUCCESSFUL      = 'successful'
    NOT_CONVERGING  = 'not_converging'

# ----------------------------------------------------------------------------------------

def _check_dimensions(op, nev: int, ncv: int) -> int:
    """
    Validate the operator shape and the subspace sizes, return ``n``.
    """
    n_rows, n_cols = int(op.rows()), int(op.cols())
    if n_rows != n_cols:
        raise ValueError(f"Operator must be square, got {n_rows} x {n_cols}")
    n = n_rows
    if int(nev) != nev or int(ncv) != ncv:
        raise ValueError(f"nev and ncv must be integers, got nev={nev}, ncv={ncv}")
    if not 0 < nev < n:
        raise ValueError(f"nev must satisfy 1 <= nev <= n - 1, got nev={nev}, n={n}")
    if not nev < ncv < n:
        raise ValueError(f"ncv must satisfy nev < ncv < n, got nev={nev}, ncv={ncv}, n={n}")
    return n

# ----------------------------------------------------------------------------------------
#! SymEigsSolver
# ----------------------------------------------------------------------------------------

class SymEigsSolver(EigenSolver):
    r"""
    Implicitly restarted Lanczos solver for a symmetric operator.

    Parameters:
    -----------
        op:
            Operator with ``rows()``, ``cols()`` and ``apply(x)``
            (see ``operators.py``).
        nev:
            Number of wanted eigenvalues, ``1 <= nev <= n - 1``.
        ncv:
            Krylov subspace dimension, ``nev < ncv < n``. A common choice is
            ``max(2 * nev + 1, 20)``; larger values converge in fewer restarts.
        rule:
            Selection rule, a ``SelectionRule`` or its name ('LM', 'largest', ...).
        mode:
            Operator mode injected into the engine (default: ``MatrixProductMode(op)``).
        reorthogonalize:
            DGKS second Gram-Schmidt pass in the factorization (default: True).
        rng / seed:
            Generator (or seed) for the starting vector and breakdown reseeding.
        logger:
            Logger instance (default: the global logger).
        verbose:
            Log a summary after each ``compute`` (default: ``PY_BACKEND_INFO`` set).
    """

    def __init__(self,
                op              : MatOp,
                nev             : int,
                ncv             : int,
                rule            : Union[SelectionRule, str]         = SelectionRule.LARGEST_MAGN,
                *,
                mode            : Optional[OperatorMode]            = None,
                reorthogonalize : bool                              = True,
                rng             : Optional[np.random.Generator]     = None,
                seed            : Optional[int]                     = None,
                logger          : Optional[Logger]                  = None,
                verbose         : bool                              = PY_INFO_VERBOSE):

        self._n             = _check_dimensions(op, nev, ncv)
        self._op            = op
        self._nev           = int(nev)
        self._ncv           = int(ncv)
        self._rule          = SelectionRule.from_string(rule)
        self._mode          = mode if mode is not None else MatrixProductMode(op)
        self._rng           = get_rng(rng if rng is not None else seed)
        self._log           = logger if logger is not None else get_global_logger()
        self._verbose       = verbose
        self._prec          = precision_constant()

        self._fac           = ArnoldiFactorization(self._mode, self._ncv,
                                    reorthogonalize = reorthogonalize,
                                    rng             = self._rng,
                                    logger          = self._log)

        self._ritz_val      = np.zeros(self._ncv)
        self._ritz_vec      = np.zeros((self._ncv, self._nev))
        self._ritz_conv     = np.zeros(self._nev, dtype=bool)
        self._ritz_resid    = np.full(self._nev, np.inf)

        self._initialized   = False
        self._finalized     = False
        self._niter         = 0
        self._info          = CompInfo.NOT_COMPUTED

    # ------------------------------------------------------------------------------------
    #! Accessors
    # ------------------------------------------------------------------------------------

    @property
    def n(self) -> int:
        return self._n

    @property
    def nev(self) -> int:
        return self._nev

    @property
    def ncv(self) -> int:
        return self._ncv

    @property
    def rule(self) -> SelectionRule:
        return self._rule

    @property
    def mode(self) -> OperatorMode:
        return self._mode

    @property
    def info(self) -> CompInfo:
        return self._info

    @property
    def num_iterations(self) -> int:
        return self._niter

    @property
    def num_operations(self) -> int:
        """Operator applications, counted by the mode."""
        return self._mode.num_operations

    @property
    def num_converged(self) -> int:
        return int(np.count_nonzero(self._ritz_conv))

    @property
    def ritz_values(self) -> NDArray:
        """
        All ncv Ritz values. After ``sort_ritzpair`` the first nev entries are
        eigenvalue estimates of A (mapped back by the mode) while the remaining
        ncv - nev are still Ritz values of the transformed operator. Use
        ``wanted_ritz_values`` and ``unwanted_ritz_values`` to read them apart.
        """
        return self._ritz_val.copy()

    @property
    def wanted_ritz_values(self) -> NDArray:
        """First nev Ritz values, in the scale of A once ``sort_ritzpair`` has run."""
        return self._ritz_val[:self._nev].copy()

    @property
    def unwanted_ritz_values(self) -> NDArray:
        """Last ncv - nev Ritz values (the restart shifts), never mapped back."""
        return self._ritz_val[self._nev:].copy()

    @property
    def ritz_converged(self) -> NDArray:
        return self._ritz_conv.copy()

    @property
    def residual_estimates(self) -> NDArray:
        """Residual estimates of the first nev Ritz pairs from the last convergence test."""
        return self._ritz_resid.copy()

    @property
    def factorization(self) -> ArnoldiFactorization:
        return self._fac

    @property
    def basis(self) -> NDArray:
        """Krylov basis V (read-only view)."""
        return self._fac.basis

    @property
    def projected(self) -> NDArray:
        return self._fac.projected

    @property
    def residual(self) -> NDArray:
        return self._fac.residual

    # ------------------------------------------------------------------------------------
    #! Initialization
    # ------------------------------------------------------------------------------------

    def init(self, v0: Optional[NDArray] = None):
        """
        Reset the solver and seed the factorization with ``v0``. Without a seed
        a vector drawn uniformly from [-1, 1) is used.
        """
        if v0 is None:
            v0 = self._rng.uniform(-1.0, 1.0, self._n)
        self._fac.init(v0)

        self._ritz_val.fill(0.0)
        self._ritz_vec.fill(0.0)
        self._ritz_conv.fill(False)
        self._ritz_resid.fill(np.inf)
        self._finalized     = False
        self._niter         = 0
        self._info          = CompInfo.NOT_COMPUTED
        self._initialized   = True

    # ------------------------------------------------------------------------------------
    #! Ritz pairs
    # ------------------------------------------------------------------------------------

    def retrieve_ritzpair(self):
        r"""
        Diagonalize H and order its eigenpairs with the selection rule.

        For BOTH_ENDS the descending order is rearranged so that the first nev
        entries alternate between the largest ($\lceil nev/2 \rceil$ of them) and
        the smallest values.
        """
        evals, evecs    = np.linalg.eigh(self._fac.H)
        order           = self._rule.argsort(evals)

        if self._rule is SelectionRule.BOTH_ENDS:
            offset = (self._nev + 1) // 2
            for i in range(self._nev - offset):
                j, l            = offset + i, self._ncv - 1 - i
                order[[j, l]]   = order[[l, j]]

        self._ritz_val[:]   = evals[order]
        self._ritz_vec[:]   = evecs[:, order[:self._nev]]
        self._finalized     = False

    def sort_ritzpair(self):
        """
        Map the first nev Ritz values to eigenvalues of A (once per retrieval) and
        order the pairs by descending magnitude. Calling it again changes nothing.
        """
        nev = self._nev
        if not self._finalized:
            self._ritz_val[:nev]    = self._mode.finalize_eigenvalues(self._ritz_val[:nev])
            self._finalized         = True

        order                   = SelectionRule.LARGEST_MAGN.argsort(self._ritz_val[:nev])
        self._ritz_val[:nev]    = self._ritz_val[:nev][order]
        self._ritz_vec[:]       = self._ritz_vec[:, order]
        self._ritz_conv[:]      = self._ritz_conv[order]
        self._ritz_resid[:]     = self._ritz_resid[order]

    # ------------------------------------------------------------------------------------
    #! Convergence and restart
    # ------------------------------------------------------------------------------------

    def converged(self, tol: float) -> bool:
        r"""
        Flag Ritz pair i as converged when
        $|s_{ncv,i}| \|f\| < tol \cdot \max(prec, |\theta_i|)$.
        """
        theta               = self._ritz_val[:self._nev]
        bound               = tol * np.maximum(self._prec, np.abs(theta))
        resid               = np.abs(self._ritz_vec[-1, :]) * self._fac.residual_norm
        self._ritz_resid[:] = resid
        self._ritz_conv[:]  = resid < bound
        return bool(np.all(self._ritz_conv))

    def restart(self, k: int):
        r"""
        Apply the Ritz values ``k .. ncv-1`` as implicit shifts, compress the
        factorization to k steps and extend it back to ncv steps.

        Each shift $\mu$ performs $H - \mu I = QR$, $V \leftarrow VQ$,
        $H \leftarrow Q^T H Q$, $e_m \leftarrow Q^T e_m$. The k-step residual is
        $f_k = f\, e_m[k-1] + v_{k} H[k, k-1]$.

        After a breakdown H is block diagonal: the shifts act on each block
        separately and the leading k columns would stay in the invariant block.
        The factorization is then restarted explicitly from the sum of the
        first k wanted Ritz vectors instead.
        """
        if k >= self._ncv:
            return

        if self._fac.reducible:
            self._explicit_restart(k)
            return

        V, H    = self._fac.V, self._fac.H
        ncv     = self._ncv
        eye     = np.eye(ncv)
        em      = np.zeros(ncv)
        em[-1]  = 1.0

        for i in range(k, ncv):
            Q, _    = np.linalg.qr(H - self._ritz_val[i] * eye)
            V[:]    = V @ Q
            H[:]    = Q.T @ H @ Q
            em      = Q.T @ em

        fk = self._fac.f * em[k - 1] + V[:, k] * H[k, k - 1]
        self._fac.factorize_from(k, ncv, fk)
        self.retrieve_ritzpair()

    def _explicit_restart(self, k: int):
        r"""
        Rebuild the factorization from $V \sum_{i<k} s_i$, s_i the wanted Ritz vectors.
        """
        v0 = self._fac.V @ self._ritz_vec[:, :min(k, self._nev)].sum(axis=1)
        self._log.debug(f"explicit restart from {min(k, self._nev)} Ritz vectors "
                        f"after {self._fac.num_breakdowns} breakdown(s)", lvl=2)
        self._fac.init(v0, keep_counters=True)
        self._fac.factorize_from(1, self._ncv, self._fac.f)
        self.retrieve_ritzpair()

    # ------------------------------------------------------------------------------------
    #! Main loop
    # ------------------------------------------------------------------------------------

    def compute(self, max_iter: Optional[int] = None, tol: Optional[float] = None) -> int:
        """
        Run the restarted iteration.

        Parameters:
        -----------
            max_iter:
                Maximum number of restart iterations (default: ``PY_EIGS_MAXITER``).
            tol:
                Relative convergence tolerance (default: ``PY_EIGS_TOL``).

        Returns:
            Number of iterations entered: ``i + 1`` when the convergence test
            passes at iteration ``i``. An exhausted loop returns ``max_iter``
            itself, not the ``max_iter + 1`` of a counter read after the loop,
            and ``max_iter = 0`` returns 0.
        """
        max_iter    = DEFAULT_MAX_ITER if max_iter is None else int(max_iter)
        tol         = DEFAULT_TOL if tol is None else float(tol)
        if max_iter < 0:
            raise ValueError(f"max_iter must be non-negative, got {max_iter}")
        if not tol >= 0.0:
            raise ValueError(f"tol must be non-negative, got {tol}")

        if not self._initialized:
            self.init()
        # a further compute() starts from a fresh random seed
        self._initialized = False

        self._fac.factorize_from(1, self._ncv, self._fac.f)
        self.retrieve_ritzpair()
        self._ritz_conv.fill(False)

        niter       = 0
        all_conv    = False
        for i in range(max_iter):
            niter = i + 1
            if self.converged(tol):
                all_conv = True
                break
            self._log.debug(f"restart {niter}: {self.num_converged}/{self._nev} converged, "
                            f"||f|| = {self._fac.residual_norm:.3e}", lvl=2)
            self.restart(self._nev)

        if not all_conv and max_iter > 0:
            # flags must describe the Ritz pairs of the last restart
            all_conv = self.converged(tol)

        self.sort_ritzpair()
        self._niter = niter
        self._info  = CompInfo.SUCCESSFUL if all_conv else CompInfo.NOT_CONVERGING

        if self._info is CompInfo.NOT_CONVERGING:
            self._log.warning(f"{type(self).__name__}: {self.num_converged}/{self._nev} eigenvalues "
                            f"converged after {niter} iterations", lvl=1)
        if self._verbose:
            self._log.info(f"{type(self).__name__}: n={self._n}, nev={self._nev}, ncv={self._ncv}, "
                        f"rule={self._rule.name}, iterations={niter}, "
                        f"operations={self.num_operations}, converged={self.num_converged}", lvl=1)
        return niter

    # ------------------------------------------------------------------------------------
    #! Results
    # ------------------------------------------------------------------------------------

    def eigenvalues(self) -> NDArray:
        """Converged eigenvalues in descending magnitude."""
        return self._ritz_val[:self._nev][self._ritz_conv].copy()

    def eigenvectors(self) -> NDArray:
        """Converged eigenvectors as columns, ``n x num_converged``."""
        return self._fac.V @ self._ritz_vec[:, self._ritz_conv]

    def solve(self,
            v0          : Optional[NDArray] = None,
            max_iter    : Optional[int]     = None,
            tol         : Optional[float]   = None) -> EigenResult:
        """
        ``init(v0)`` followed by ``compute(max_iter, tol)``, packed in an EigenResult.
        """
        self.init(v0)
        niter = self.compute(max_iter=max_iter, tol=tol)
        return EigenResult(
            eigenvalues     = self.eigenvalues(),
            eigenvectors    = self.eigenvectors(),
            subspacevectors = self._fac.V.copy(),
            iterations      = niter,
            converged       = self._info is CompInfo.SUCCESSFUL,
            residual_norms  = self._ritz_resid[self._ritz_conv].copy(),
            num_operations  = self.num_operations,
        )

# ----------------------------------------------------------------------------------------
#! SciPy reference
# ----------------------------------------------------------------------------------------

class EigshSolver(EigenSolver):
    """
    Thin wrapper around ``scipy.sparse.linalg.eigsh`` (ARPACK), used as a
    reference for the native solver. It does NOT expose the Krylov basis.

    Parameters:
    -----------
        k:
            Number of eigenvalues.
        which:
            'LM', 'LA', 'SM', 'SA' or 'BE' (or any name accepted by SelectionRule).
        ncv, sigma, tol, maxiter:
            Passed to eigsh; tol = 0 means machine precision.
        seed:
            Seed of the starting vector when ``v0`` is not given.
    """

    def __init__(self,
                k       : int                           = 6,
                which   : Union[SelectionRule, str]     = 'LM',
                ncv     : Optional[int]                 = None,
                sigma   : Optional[float]               = None,
                tol     : float                         = 0.0,
                maxiter : Optional[int]                 = None,
                seed    : Optional[int]                 = None):
        self.k          = k
        self.rule       = SelectionRule.from_string(which)
        self.ncv        = ncv
        self.sigma      = sigma
        self.tol        = tol
        self.maxiter    = maxiter
        self.seed       = seed

    def solve(self, A, v0: Optional[NDArray] = None) -> EigenResult:
        """
        Solve for ``A`` (ndarray, scipy.sparse matrix, LinearOperator or any
        object with the product capability).
        """
        if isinstance(A, (np.ndarray, sp_linalg.LinearOperator)) or sp.issparse(A):
            A_op    = A
        else:
            op      = as_operator(A)
            A_op    = sp_linalg.LinearOperator((op.rows(), op.cols()), matvec=op.apply, dtype=np.float64)
        n = A_op.shape[0]

        if v0 is None:
            v0 = get_rng(self.seed).uniform(-1.0, 1.0, n)

        evals, evecs = sp_linalg.eigsh(A_op,
                            k       = self.k,
                            which   = self.rule.value,
                            ncv     = self.ncv,
                            sigma   = self.sigma,
                            tol     = self.tol,
                            maxiter = self.maxiter,
                            v0      = v0)

        order = SelectionRule.LARGEST_MAGN.argsort(evals)
        return EigenResult(
            eigenvalues     = evals[order],
            eigenvectors    = evecs[:, order],
            subspacevectors = None,
            iterations      = None,
            converged       = True,
            residual_norms  = None,
        )

# ----------------------------------------------------------------------------------------
#! EOF
# ----------------------------------------------------------------------------------------
