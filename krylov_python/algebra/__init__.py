"""
Linear algebra for large symmetric eigenvalue problems.

Provides the implicitly restarted Lanczos/Arnoldi eigensolvers (``eigen``)
together with the environment configuration and numerical helpers they share
(``utils``).

This module uses lazy imports to minimize startup overhead: submodules are only
loaded when accessed.

# -----------------------------------------------------------------------------------------------
Description     : Algebra module with lazy imports
# -----------------------------------------------------------------------------------------------
"""

from typing import TYPE_CHECKING
import importlib

# -----------------------------------------------------------------------------------------------
# Lazy Import Configuration
# -----------------------------------------------------------------------------------------------

_LAZY_IMPORTS = {
    # Eigensolver front-end
    'choose_eigensolver'    : ('.eigen.factory', 'choose_eigensolver'),
    'SymEigsSolver'         : ('.eigen.lanczos', 'SymEigsSolver'),
    'SymEigsShiftSolver'    : ('.eigen.shift_invert', 'SymEigsShiftSolver'),
    # Logging
    'get_logger'            : ('..common.flog', 'get_global_logger'),
    # Utils module exports
    'get_rng'               : ('.utils', 'get_rng'),
    'precision_constant'    : ('.utils', 'precision_constant'),
    'DEFAULT_MAX_ITER'      : ('.utils', 'DEFAULT_MAX_ITER'),
    'DEFAULT_TOL'           : ('.utils', 'DEFAULT_TOL'),
    # Submodules (lazy)
    'eigen'                 : ('.eigen', None),
    'utils'                 : ('.utils', None),
}

_LAZY_CACHE = {}

if TYPE_CHECKING:
    from . import eigen, utils
    from .eigen.factory import choose_eigensolver
    from .eigen.lanczos import SymEigsSolver
    from .eigen.shift_invert import SymEigsShiftSolver
    from .utils import get_rng, precision_constant, DEFAULT_MAX_ITER, DEFAULT_TOL
    from ..common.flog import get_global_logger as get_logger

# -----------------------------------------------------------------------------------------------
# Lazy Import Implementation
# -----------------------------------------------------------------------------------------------

def __getattr__(name: str):
    """
    Lazily import a module or attribute based on the _LAZY_IMPORTS table.
    """
    if name in _LAZY_CACHE:
        return _LAZY_CACHE[name]

    if name not in _LAZY_IMPORTS:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    module_path, attr_name  = _LAZY_IMPORTS[name]
    module                  = importlib.import_module(module_path, package=__name__)
    result                  = module if attr_name is None else getattr(module, attr_name)
    _LAZY_CACHE[name]       = result
    return result

def __dir__():
    return sorted(list(globals().keys()) + list(_LAZY_IMPORTS.keys()))

__all__ = list(_LAZY_IMPORTS.keys())

# -----------------------------------------------------------------------------------------------
#! EOF
# -----------------------------------------------------------------------------------------------
