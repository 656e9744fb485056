'''
General tests for import behavior of the krylov_python package.

Ensures that submodules are lazily imported and key exports are available.

Tests:
- Lazy loading of subpackages
- Key class/function exports
- Package metadata presence
'''

import sys
import types

import pytest

# -------------------------------------------------------------------

def test_root_imports_lazy():
    import krylov_python as kp
    # Accessing attribute should trigger lazy import
    algebra = kp.algebra
    assert isinstance(algebra, types.ModuleType)
    assert algebra.__name__ == "krylov_python.algebra"

def test_lazy_submodule_not_loaded_by_root():
    for name in [m for m in sys.modules if m.startswith('krylov_python')]:
        del sys.modules[name]

    import krylov_python
    assert isinstance(krylov_python, types.ModuleType)
    assert 'krylov_python.algebra.eigen.lanczos' not in sys.modules

    from krylov_python.algebra import eigen
    _ = eigen.SymEigsSolver
    assert 'krylov_python.algebra.eigen.lanczos' in sys.modules

def test_unknown_attribute_raises():
    import krylov_python as kp
    from krylov_python.algebra import eigen
    with pytest.raises(AttributeError):
        _ = kp.not_a_module
    with pytest.raises(AttributeError):
        _ = eigen.NotASolver

# -------------------------------------------------------------------

def test_eigen_exports():
    from krylov_python.algebra.eigen import (SymEigsSolver, SymEigsShiftSolver, SelectionRule,
                                            DenseSymMatProd, DenseGenRealShiftSolve,
                                            choose_eigensolver, EigenResult, CompInfo)
    assert issubclass(SymEigsShiftSolver, SymEigsSolver)
    assert SelectionRule.from_string('LM') is SelectionRule.LARGEST_MAGN
    assert callable(choose_eigensolver)
    assert 'eigenvalues' in EigenResult._fields
    assert CompInfo.NOT_COMPUTED is not CompInfo.SUCCESSFUL

def test_algebra_shortcuts():
    import krylov_python.algebra as algebra
    from krylov_python.algebra.eigen.lanczos import SymEigsSolver
    assert algebra.SymEigsSolver is SymEigsSolver
    assert algebra.DEFAULT_MAX_ITER > 0
    assert 0.0 < algebra.precision_constant() < 1e-8

def test_common_logger():
    from krylov_python.common import get_global_logger, Logger
    log = get_global_logger()
    assert isinstance(log, Logger)
    assert get_global_logger() is log

def test_logger_levels_and_indent(capsys):
    import logging
    from krylov_python.common.flog import Logger, StripAnsiFormatter
    log = Logger(name="krylov_python.test_levels", lvl='info')
    log.debug("hidden restart")
    log.warning("breakdown", lvl=1)
    log.info("skipped", verbose=False)

    out = capsys.readouterr().out
    assert "hidden restart" not in out
    assert "skipped" not in out
    assert "[WARNING]" in out and "\t->breakdown" in out

    record = logging.LogRecord("x", logging.INFO, __file__, 0, Logger.colorize("text", "red"), None, None)
    assert StripAnsiFormatter('%(message)s').format(record) == "text"

# -------------------------------------------------------------------

def test_package_metadata():
    import krylov_python as kp
    assert hasattr(kp, "__version__")
    assert kp.list_available_modules() == ["algebra", "common"]
    assert kp.get_module_description("nonexistent") == "Module not found."

# -------------------------------------------------------------------
#! End of file
# -------------------------------------------------------------------
