"""
Tests for the unified eigensolver interface.

All methods are compared against each other on the same problem.
"""

import numpy as np
import pytest
import scipy.sparse as sp

from krylov_python.algebra.eigen import EigenResult, EigenSolver, ExactEigensolver, full_diagonalization
from krylov_python.algebra.eigen.factory import choose_eigensolver, decide_method, default_ncv

# ----------------------------------

def create_symmetric_matrix(n, condition_number=10.0, seed=42):
    """Create symmetric matrix with controlled spectrum."""
    np.random.seed(seed)
    eigenvalues     = np.linspace(1.0, condition_number, n)
    Q, _            = np.linalg.qr(np.random.randn(n, n))
    A               = Q @ np.diag(eigenvalues) @ Q.T
    A               = 0.5 * (A + A.T)  # Ensure exact symmetry
    return A

# ----------------------------------

class TestMethodsAgree:

    @pytest.mark.parametrize("which", ['LA', 'SA', 'LM', 'BE'])
    def test_irlm_matches_exact(self, which):
        n, k    = 150, 4
        A       = create_symmetric_matrix(n, condition_number=30.0)
        exact   = choose_eigensolver('exact', A, k=k, which=which)
        irlm    = choose_eigensolver('irlm', A, k=k, which=which, seed=0)

        assert irlm.converged
        np.testing.assert_allclose(irlm.eigenvalues, exact.eigenvalues, rtol=1e-8)

    def test_irlm_matches_eigsh(self):
        n, k    = 300, 5
        A       = create_symmetric_matrix(n, condition_number=50.0, seed=1)
        ref     = choose_eigensolver('scipy-eigsh', A, k=k, which='LA', seed=0)
        irlm    = choose_eigensolver('irlm', A, k=k, which='LA', seed=0)

        np.testing.assert_allclose(irlm.eigenvalues, ref.eigenvalues, rtol=1e-8)
        # eigenvectors agree up to sign
        overlaps = np.abs(np.sum(irlm.eigenvectors * ref.eigenvectors, axis=0))
        np.testing.assert_allclose(overlaps, 1.0, atol=1e-6)

    def test_shift_invert_dense_and_sparse(self):
        diag    = np.arange(1.0, 301.0)
        dense   = choose_eigensolver('shift-invert', np.diag(diag), k=3, sigma=100.3, seed=0)
        sparse  = choose_eigensolver('shift-invert', sp.diags(diag, format='csc'), k=3, sigma=100.3, seed=0)

        expected = [101.0, 100.0, 99.0]
        np.testing.assert_allclose(dense.eigenvalues, expected, rtol=1e-8)
        np.testing.assert_allclose(sparse.eigenvalues, expected, rtol=1e-8)

    def test_matvec_input(self):
        n       = 250
        diag    = np.linspace(-3.0, 7.0, n)
        result  = choose_eigensolver('irlm', matvec=lambda x: diag * x, n=n, k=2, which='SA', seed=3)
        np.testing.assert_allclose(np.sort(result.eigenvalues), diag[:2], rtol=1e-8)

# ----------------------------------

class TestAuto:

    def test_decide_method(self):
        assert decide_method(100) == 'exact'
        assert decide_method(100, has_matrix=False) == 'irlm'
        assert decide_method(1000) == 'irlm'
        assert decide_method(1000, sigma=0.0) == 'shift-invert'
        assert decide_method(1000, has_matrix=False, sigma=0.0) == 'irlm'

    def test_auto_small_is_exact(self):
        A       = create_symmetric_matrix(50)
        result  = choose_eigensolver('auto', A, k=3, which='LA')
        assert isinstance(result, EigenResult)
        assert result.iterations == 1
        np.testing.assert_allclose(result.eigenvalues, np.linalg.eigvalsh(A)[::-1][:3])

    def test_default_ncv(self):
        assert default_ncv(1000, 3) == 20
        assert default_ncv(1000, 15) == 31
        assert default_ncv(12, 3) == 11

# ----------------------------------

class TestValidation:

    def test_unknown_method(self):
        with pytest.raises(ValueError):
            choose_eigensolver('lobpcg', np.eye(10), k=2)

    def test_missing_inputs(self):
        with pytest.raises(ValueError):
            choose_eigensolver('irlm', k=2)
        with pytest.raises(ValueError):
            choose_eigensolver('irlm', matvec=lambda x: x, k=2)

    def test_exact_needs_matrix(self):
        with pytest.raises(ValueError):
            choose_eigensolver('exact', matvec=lambda x: x, n=10, k=2)

    def test_shift_invert_needs_sigma(self):
        with pytest.raises(ValueError):
            choose_eigensolver('shift-invert', np.eye(30), k=2)

    def test_non_symmetric_matrix(self):
        A = np.triu(np.ones((30, 30)))
        with pytest.raises(ValueError):
            choose_eigensolver('irlm', A, k=2)
        with pytest.raises(ValueError):
            choose_eigensolver('irlm', sp.csr_matrix(A), k=2)

    def test_symmetry_check_is_relative(self):
        A = create_symmetric_matrix(20) * 1e8
        A[0, 1] += 1e-6
        assert EigenSolver._is_symmetric(A)
        assert EigenSolver._is_symmetric(sp.csr_matrix(A))
        A[0, 1] += 1.0
        assert not EigenSolver._is_symmetric(A)
        assert not EigenSolver._is_symmetric(sp.csr_matrix(A))

    def test_k_out_of_range(self):
        with pytest.raises(ValueError):
            choose_eigensolver('irlm', np.eye(10), k=10)

# ----------------------------------

class TestExact:

    def test_sorting(self):
        A       = np.diag([3.0, 1.0, 2.0])
        asc     = ExactEigensolver(sort='ascending').solve(A)
        desc    = full_diagonalization(A, sort='descending')
        np.testing.assert_allclose(asc.eigenvalues, [1.0, 2.0, 3.0])
        np.testing.assert_allclose(desc.eigenvalues, [3.0, 2.0, 1.0])
        assert np.all(asc.residual_norms < 1e-12)

    def test_non_square_raises(self):
        with pytest.raises(ValueError):
            ExactEigensolver().solve(np.ones((2, 3)))

    def test_invalid_sort(self):
        with pytest.raises(ValueError):
            ExactEigensolver(sort='random')

# ----------------------------------
#! EOF
# ----------------------------------
