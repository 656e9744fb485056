r"""
Arnoldi Factorization

Builds and extends the Arnoldi factorization used by the restarted Lanczos
eigensolvers,

    $$
    A V_m = V_m H_m + f_m e_m^T ,
    $$

where the columns of $V_m$ (n x m) are an orthonormal basis of the Krylov
subspace $K_m(A, v_1) = span\{v_1, A v_1, A^2 v_1, ...\}$, $H_m$ (m x m) is the
projection $V_m^T A V_m$ (tridiagonal for symmetric $A$) and the residual $f_m$ is
orthogonal to every column of $V_m$. Its norm is the next sub-diagonal entry.

Key Features:
    - Fixed storage: V, H and f are allocated once and updated in place
    - Classical Gram-Schmidt with a DGKS second pass when cancellation is detected
    - Invariant-subspace breakdown detected and handled by reseeding the basis with
      a random vector orthogonal to the current columns
    - The operator is reached only through an operator mode (plain product or
      shift-invert), see ``modes.py``

References:
    [1] D. C. Sorensen, Implicit application of polynomial filters in a k-step
        Arnoldi method, SIAM J. Matrix Anal. Appl. 13 (1992).
    [2] J. W. Daniel, W. B. Gragg, L. Kaufman, G. W. Stewart, Reorthogonalization
        and stable algorithms for updating the Gram-Schmidt QR factorization (1976).
"""

from typing import Optional
import numpy as np
from numpy.typing import NDArray

from .modes import OperatorMode
from ..utils import get_rng, precision_constant
from ...common.flog import Logger, get_global_logger

# ----------------------------------------------------------------------------------------

# a second Gram-Schmidt pass is made when ||f|| < ETA ||w||
REORTH_ETA              = 1.0 / np.sqrt(2.0)
RESEED_ATTEMPTS         = 5

# ----------------------------------------------------------------------------------------
#! ArnoldiFactorization
# ----------------------------------------------------------------------------------------

class ArnoldiFactorization:
    r"""
    Stateful m-step Arnoldi factorization $A V = V H + f e_m^T$.

    Attributes:
        V (ndarray, n x ncv):
            Krylov basis, columns populated in order.
        H (ndarray, ncv x ncv):
            Projected matrix.
        f (ndarray, n):
            Residual vector.

    Parameters:
    -----------
        mode:
            Operator mode providing ``apply_operator(x)``.
        ncv:
            Dimension of the Krylov subspace.
        reorthogonalize:
            Perform the DGKS second Gram-Schmidt pass (default: True).
        rng:
            Generator used for reseeding after a breakdown.
        logger:
            Logger receiving breakdown warnings.
    """

    def __init__(self,
                mode            : OperatorMode,
                ncv             : int,
                *,
                reorthogonalize : bool                              = True,
                rng             : Optional[np.random.Generator]     = None,
                logger          : Optional[Logger]                  = None):
        self.mode               = mode
        self.n                  = mode.dim()
        self.ncv                = int(ncv)
        self.reorthogonalize    = reorthogonalize
        self._rng               = get_rng(rng)
        self._log               = logger if logger is not None else get_global_logger()
        self._prec              = precision_constant()

        self.V                  = np.zeros((self.n, self.ncv))
        self.H                  = np.zeros((self.ncv, self.ncv))
        self.f                  = np.zeros(self.n)

        self._w_norm            = 0.0   # ||A v|| of the last step, scale for the breakdown test
        self._reducible         = False
        self.num_breakdowns     = 0
        self.num_reorth         = 0

    # ------------------------------------------------------------------------------------

    def reset(self):
        self.V.fill(0.0)
        self.H.fill(0.0)
        self.f.fill(0.0)
        self._w_norm            = 0.0
        self._reducible         = False
        self.num_breakdowns     = 0
        self.num_reorth         = 0

    @property
    def basis(self) -> NDArray:
        """Read-only view of V."""
        view = self.V.view()
        view.flags.writeable = False
        return view

    @property
    def projected(self) -> NDArray:
        """Read-only view of H."""
        view = self.H.view()
        view.flags.writeable = False
        return view

    @property
    def residual(self) -> NDArray:
        """Read-only view of f."""
        view = self.f.view()
        view.flags.writeable = False
        return view

    @property
    def residual_norm(self) -> float:
        return float(np.linalg.norm(self.f))

    @property
    def reducible(self) -> bool:
        """
        True when a reseed left a zero sub-diagonal in H since the last ``init``,
        i.e. H is block diagonal and its leading block is an invariant subspace.
        """
        return self._reducible

    # ------------------------------------------------------------------------------------
    #! One-step start
    # ------------------------------------------------------------------------------------

    def init(self, v0: NDArray, *, keep_counters: bool = False):
        """
        Start the factorization from the seed ``v0``: normalize it, apply the
        operator once and store the first column of V, the entry H[0, 0] and the
        first residual. With ``keep_counters`` the breakdown and
        reorthogonalization counts of the previous run are carried over.
        """
        v0 = np.asarray(v0, dtype=np.float64).reshape(-1)
        if v0.shape[0] != self.n:
            raise ValueError(f"Initial vector has length {v0.shape[0]}, expected {self.n}")

        v0_norm = np.linalg.norm(v0)
        if not np.isfinite(v0_norm) or v0_norm == 0.0:
            raise ValueError("Initial vector must be finite and nonzero")

        counts          = (self.num_breakdowns, self.num_reorth)
        self.reset()
        if keep_counters:
            self.num_breakdowns, self.num_reorth = counts

        v               = v0 / v0_norm
        w               = self.mode.apply_operator(v)
        self._w_norm    = float(np.linalg.norm(w))

        alpha           = float(v @ w)
        f               = w - alpha * v
        if self.reorthogonalize and np.linalg.norm(f) < REORTH_ETA * self._w_norm:
            corr        = float(v @ f)
            f          -= corr * v
            alpha      += corr
            self.num_reorth += 1

        self.H[0, 0]    = alpha
        self.f[:]       = f
        self.V[:, 0]    = v

    # ------------------------------------------------------------------------------------
    #! Extension
    # ------------------------------------------------------------------------------------

    def factorize_from(self, from_k: int, to_m: int, fk: NDArray):
        """
        Extend a k-step factorization to an m-step one.

        Columns ``0 .. from_k-1`` of V and the leading block of H must be populated.
        ``fk`` is the residual of the k-step factorization. Columns
        ``from_k .. to_m-1`` are (re)computed and ``f`` is left as the residual of
        the m-step factorization.
        """
        if to_m <= from_k:
            return

        f = np.array(fk, dtype=np.float64, copy=True)
        for i in range(from_k, to_m):
            beta = float(np.linalg.norm(f))
            if beta <= self._prec * self._w_norm:
                v       = self._reseed(i, beta)
                beta    = 0.0
            else:
                v       = f / beta

            self.V[:, i]        = v
            self.H[i, :i]       = 0.0
            self.H[i, i - 1]    = beta

            w                   = self.mode.apply_operator(v)
            self._w_norm        = float(np.linalg.norm(w))

            # classical Gram-Schmidt against the populated columns
            Vi                  = self.V[:, :i + 1]
            h                   = Vi.T @ w
            f                   = w - Vi @ h

            if self.reorthogonalize and np.linalg.norm(f) < REORTH_ETA * self._w_norm:
                corr            = Vi.T @ f
                f              -= Vi @ corr
                h              += corr
                self.num_reorth += 1

            self.H[:i + 1, i]   = h

        self.f[:] = f

    # ------------------------------------------------------------------------------------

    def _reseed(self, i: int, beta: float) -> NDArray:
        """
        Invariant subspace found: the first ``i`` columns of V span an invariant
        subspace of the operator. Continue with a random unit vector orthogonal to
        them; the corresponding sub-diagonal entry of H is zero.
        """
        self.num_breakdowns += 1
        self._reducible      = True
        self._log.warning(f"Arnoldi breakdown at step {i} (||f|| = {beta:.3e}), "
                        f"reseeding with a random orthogonal vector", lvl=1)

        Vi = self.V[:, :i]
        for _ in range(RESEED_ATTEMPTS):
            r       = self._rng.uniform(-1.0, 1.0, self.n)
            r_norm0 = np.linalg.norm(r)
            # two passes, the second removes what cancellation left behind
            r      -= Vi @ (Vi.T @ r)
            r      -= Vi @ (Vi.T @ r)
            r_norm  = np.linalg.norm(r)
            if r_norm > self._prec * r_norm0:
                return r / r_norm
        raise RuntimeError(f"Could not generate a vector orthogonal to the first {i} Krylov vectors")

# ----------------------------------------------------------------------------------------
#! EOF
# ----------------------------------------------------------------------------------------
