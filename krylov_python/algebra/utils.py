# file        :   krylov_python/algebra/utils.py

'''
Environment configuration and numerical helpers for the eigensolvers.

Settings are read once, at import time, from environment variables and written
back so that child processes see the same values.

Provides:
- PY_GLOBAL_SEED        : default seed for generators created without one.
- DEFAULT_MAX_ITER      : default restart budget (``PY_EIGS_MAXITER``).
- DEFAULT_TOL           : default convergence tolerance (``PY_EIGS_TOL``).
- get_rng               : seedable ``numpy.random.Generator`` factory.
- precision_constant    : ``eps^(2/3)``, the floor used in convergence bounds.
'''

import os
from typing import Optional, Union

import numpy as np

# ---------------------------------------------------------------------
#! Enviroment variable names
# ---------------------------------------------------------------------

PY_GLOBAL_SEED_STR      : str               = "PY_GLOBAL_SEED"
PY_EIGS_MAXITER_STR     : str               = "PY_EIGS_MAXITER"
PY_EIGS_TOL_STR         : str               = "PY_EIGS_TOL"
PY_INFO_VERBOSE_STR     : str               = "PY_BACKEND_INFO"

DEFAULT_NP_FLOAT_TYPE   : type              = np.float64

# ---------------------------------------------------------------------
#! SET VARIABLES
# ---------------------------------------------------------------------

_seed_env                                   = os.environ.get(PY_GLOBAL_SEED_STR, "").strip()
PY_GLOBAL_SEED          : Optional[int]     = int(_seed_env) if _seed_env else None

DEFAULT_MAX_ITER        : int               = int(os.environ.get(PY_EIGS_MAXITER_STR, "1000"))
os.environ[PY_EIGS_MAXITER_STR]             = str(DEFAULT_MAX_ITER)

DEFAULT_TOL             : float             = float(os.environ.get(PY_EIGS_TOL_STR, "1e-10"))
os.environ[PY_EIGS_TOL_STR]                 = repr(DEFAULT_TOL)

PY_INFO_VERBOSE         : bool              = os.environ.get(PY_INFO_VERBOSE_STR, "0") != "0"

# ---------------------------------------------------------------------
#! Functions
# ---------------------------------------------------------------------

def get_rng(seed: Optional[Union[int, np.random.Generator]] = None) -> np.random.Generator:
    """
    Return a NumPy random generator.

    Parameters
    ----------
    seed : int or numpy.random.Generator, optional
        An existing generator is returned unchanged. An integer seeds a new one.
        ``None`` falls back to ``PY_GLOBAL_SEED`` (fresh entropy when unset).

    Returns
    -------
    numpy.random.Generator
    """
    if isinstance(seed, np.random.Generator):
        return seed
    if seed is None:
        seed = PY_GLOBAL_SEED
    return np.random.default_rng(seed)

# ---------------------------------------------------------------------

def precision_constant(dtype=DEFAULT_NP_FLOAT_TYPE) -> float:
    r"""
    Precision floor used when testing Ritz pairs for convergence,
    $\epsilon^{2/3}$ with $\epsilon$ the machine epsilon of ``dtype``
    (about 3.7e-11 for float64).
    """
    return float(np.finfo(dtype).eps) ** (2.0 / 3.0)

# ---------------------------------------------------------------------
#! EOF
# ---------------------------------------------------------------------
