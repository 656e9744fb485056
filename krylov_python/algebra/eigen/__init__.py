"""
Eigenvalue Solvers Module

Implicitly restarted Lanczos solvers for a few eigenpairs of large symmetric
operators, plus the operators they consume and dense/ARPACK references.

Available Solvers:
    - SymEigsSolver: Implicitly restarted Lanczos (regular mode)
    - SymEigsShiftSolver: Implicitly restarted Lanczos in shift-invert mode
    - ExactEigensolver: Full eigenvalue decomposition for small systems
    - EigshSolver: scipy.sparse.linalg.eigsh wrapper

Building Blocks:
    - ArnoldiFactorization: The Krylov factorization engine
    - SelectionRule: Which part of the spectrum is wanted
    - Operators: DenseSymMatProd, SparseSymMatProd, MatvecOperator,
      DenseGenRealShiftSolve, SparseSymShiftSolve
    - Modes: MatrixProductMode, ShiftInvertMode

Factory Function:
    - choose_eigensolver: Unified interface for all methods
    - decide_method: Automatically choose method based on problem characteristics

Standard Result:
    - EigenResult: Standardized return type (eigenvalues, eigenvectors, iterations, converged)

This module uses lazy imports to minimize startup overhead.
"""

from typing import TYPE_CHECKING
import importlib

# -----------------------------------------------------------------------------------------------
# Lazy Import Configuration
# -----------------------------------------------------------------------------------------------

_LAZY_IMPORTS = {
    # Restarted Lanczos
    'SymEigsSolver'                 : ('.lanczos', 'SymEigsSolver'),
    'SymEigsShiftSolver'            : ('.shift_invert', 'SymEigsShiftSolver'),
    'CompInfo'                      : ('.lanczos', 'CompInfo'),
    'EigshSolver'                   : ('.lanczos', 'EigshSolver'),
    'ArnoldiFactorization'          : ('.arnoldi', 'ArnoldiFactorization'),
    # Selection
    'SelectionRule'                 : ('.selection', 'SelectionRule'),
    # Operators
    'MatOp'                         : ('.operators', 'MatOp'),
    'MatOpWithShiftSolve'           : ('.operators', 'MatOpWithShiftSolve'),
    'DenseSymMatProd'               : ('.operators', 'DenseSymMatProd'),
    'SparseSymMatProd'              : ('.operators', 'SparseSymMatProd'),
    'MatvecOperator'                : ('.operators', 'MatvecOperator'),
    'DenseGenRealShiftSolve'        : ('.operators', 'DenseGenRealShiftSolve'),
    'SparseSymShiftSolve'           : ('.operators', 'SparseSymShiftSolve'),
    'as_operator'                   : ('.operators', 'as_operator'),
    # Modes
    'OperatorMode'                  : ('.modes', 'OperatorMode'),
    'MatrixProductMode'             : ('.modes', 'MatrixProductMode'),
    'ShiftInvertMode'               : ('.modes', 'ShiftInvertMode'),
    # Exact diagonalization
    'ExactEigensolver'              : ('.exact', 'ExactEigensolver'),
    'full_diagonalization'          : ('.exact', 'full_diagonalization'),
    # Factory interface
    'choose_eigensolver'            : ('.factory', 'choose_eigensolver'),
    'decide_method'                 : ('.factory', 'decide_method'),
    # Result type
    'EigenResult'                   : ('.result', 'EigenResult'),
    'EigenSolver'                   : ('.result', 'EigenSolver'),
}

_LAZY_CACHE = {}

# For type checking only
if TYPE_CHECKING:
    from .lanczos       import SymEigsSolver, CompInfo, EigshSolver
    from .shift_invert  import SymEigsShiftSolver
    from .arnoldi       import ArnoldiFactorization
    from .selection     import SelectionRule
    from .operators     import (MatOp, MatOpWithShiftSolve, DenseSymMatProd, SparseSymMatProd,
                                MatvecOperator, DenseGenRealShiftSolve, SparseSymShiftSolve, as_operator)
    from .modes         import OperatorMode, MatrixProductMode, ShiftInvertMode
    from .exact         import ExactEigensolver, full_diagonalization
    from .factory       import choose_eigensolver, decide_method
    from .result        import EigenResult, EigenSolver

# -----------------------------------------------------------------------------------------------

def __getattr__(name: str):
    """
    Module-level __getattr__ for lazy imports.
    """
    if name in _LAZY_CACHE:
        return _LAZY_CACHE[name]

    if name not in _LAZY_IMPORTS:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    module_path, attr_name = _LAZY_IMPORTS[name]
    module = importlib.import_module(module_path, package=__name__)

    if attr_name is None:
        result = module
    else:
        result = getattr(module, attr_name)

    _LAZY_CACHE[name] = result
    return result

__all__ = list(_LAZY_IMPORTS)

# ------------------------------------------------------------------------------------------------
#! EOF
# ------------------------------------------------------------------------------------------------
