# krylov_python/__init__.py

"""
Krylov Python - implicitly restarted Lanczos eigensolvers for large symmetric operators.

This package computes a few eigenvalues and eigenvectors of a symmetric linear
operator that is only available through matrix-vector products. The operator can
be a dense matrix, a sparse matrix, a SciPy LinearOperator or any object exposing
``rows()``, ``cols()`` and ``apply(x)``. A shift-invert variant targets eigenvalues
close to a given shift.

Modules:
--------
- algebra   : Eigensolvers (Arnoldi factorization, implicit restarts, shift-invert)
              and their configuration
- common    : Logging utilities

Examples:
---------
>>> import numpy as np
>>> from krylov_python.algebra.eigen import SymEigsSolver, DenseSymMatProd
>>> A       = np.diag(np.arange(1.0, 101.0))
>>> solver  = SymEigsSolver(DenseSymMatProd(A), nev=3, ncv=10, seed=0)
>>> solver.init()
>>> n_iter  = solver.compute()
>>> evals   = solver.eigenvalues()      # ~ [100, 99, 98]

Version : 0.1.0
License : MIT
"""

import importlib

# Package metadata
__version__         = "0.1.0"
__license__         = "MIT"

MODULE_DESCRIPTION  = "Implicitly restarted Lanczos eigensolvers for large symmetric operators."

# List of available modules (not imported by default)
__all__             = ["algebra", "common"]

def get_module_description(module_name):
    """
    Get the description of a specific module in the krylov_python package.

    Parameters
    ----------
    module_name : str
        The name of the module.

    Returns
    -------
    str
        The description of the module.
    """
    descriptions = {
        "algebra"   : "Implicitly restarted Lanczos/Arnoldi eigensolvers, operators and configuration.",
        "common"    : "Logging utilities shared by the solvers.",
    }
    return descriptions.get(module_name, "Module not found.")

def list_available_modules():
    """
    List all available modules in the krylov_python package.
    """
    return __all__

# Lazy import subpackages on attribute access (PEP 562)
def __getattr__(name):
    if name in __all__:
        return importlib.import_module(f".{name}", __name__)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")

def __dir__():
    return sorted(list(globals().keys()) + __all__)

# ---------------------------------------------------------------------
#! EOF
# ---------------------------------------------------------------------
