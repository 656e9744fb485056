"""
Tests for the operator capabilities and the operator-application modes.
"""

import numpy as np
import pytest
import scipy.sparse as sp
from scipy.sparse.linalg import aslinearoperator

from krylov_python.algebra.eigen.operators import (MatOp, MatOpWithShiftSolve, DenseSymMatProd,
                                                SparseSymMatProd, MatvecOperator,
                                                DenseGenRealShiftSolve, SparseSymShiftSolve,
                                                as_operator)
from krylov_python.algebra.eigen.modes import OperatorMode, MatrixProductMode, ShiftInvertMode

# ----------------------------------

def create_symmetric_matrix(n, seed=42):
    np.random.seed(seed)
    B = np.random.randn(n, n)
    return 0.5 * (B + B.T)

# ----------------------------------

class TestProducts:

    def test_dense_product(self):
        A   = create_symmetric_matrix(12)
        x   = np.arange(12.0)
        op  = DenseSymMatProd(A)
        assert op.rows() == op.cols() == 12
        np.testing.assert_allclose(op.apply(x), A @ x)

    def test_sparse_product(self):
        A   = sp.random(30, 30, density=0.2, random_state=1)
        A   = A + A.T
        x   = np.ones(30)
        op  = SparseSymMatProd(A)
        np.testing.assert_allclose(op.apply(x), A @ x)

    def test_matvec_operator(self):
        op = MatvecOperator(lambda x: 3.0 * x, 5)
        np.testing.assert_allclose(op.apply(np.ones(5)), 3.0 * np.ones(5))
        assert isinstance(op, MatOp)

    @pytest.mark.parametrize("cls", [DenseSymMatProd, DenseGenRealShiftSolve])
    def test_dense_non_square_raises(self, cls):
        with pytest.raises(ValueError):
            cls(np.ones((3, 4)))

    @pytest.mark.parametrize("cls", [SparseSymMatProd, SparseSymShiftSolve])
    def test_sparse_rejects_bad_input(self, cls):
        with pytest.raises(ValueError):
            cls(np.eye(4))
        with pytest.raises(ValueError):
            cls(sp.csr_matrix(np.ones((3, 4))))

    def test_matvec_validation(self):
        with pytest.raises(ValueError):
            MatvecOperator(lambda x: x, 0)
        with pytest.raises(ValueError):
            MatvecOperator("not callable", 4)
        op = MatvecOperator(lambda x: x[:-1], 4)
        with pytest.raises(ValueError):
            op.apply(np.ones(4))

# ----------------------------------

class TestShiftSolve:

    @pytest.mark.parametrize("sparse", [False, True])
    def test_solve_against_shifted_matrix(self, sparse):
        A       = create_symmetric_matrix(20, seed=3)
        sigma   = 0.37
        op      = SparseSymShiftSolve(sp.csr_matrix(A)) if sparse else DenseGenRealShiftSolve(A)
        x       = np.linspace(-1.0, 1.0, 20)

        op.set_shift(sigma)
        y       = op.apply_shift_inverse(x)
        np.testing.assert_allclose((A - sigma * np.eye(20)) @ y, x, atol=1e-10)
        assert op.sigma == sigma
        assert isinstance(op, MatOpWithShiftSolve)

    @pytest.mark.parametrize("sparse", [False, True])
    def test_solve_before_shift_raises(self, sparse):
        A   = np.eye(6)
        op  = SparseSymShiftSolve(sp.csr_matrix(A)) if sparse else DenseGenRealShiftSolve(A)
        with pytest.raises(RuntimeError):
            op.apply_shift_inverse(np.ones(6))

    def test_new_shift_refactorizes(self):
        A   = np.diag([1.0, 2.0, 3.0])
        op  = DenseGenRealShiftSolve(A)
        op.set_shift(0.0)
        np.testing.assert_allclose(op.apply_shift_inverse(np.ones(3)), [1.0, 0.5, 1.0 / 3.0])
        op.set_shift(4.0)
        np.testing.assert_allclose(op.apply_shift_inverse(np.ones(3)), [-1.0 / 3.0, -0.5, -1.0])

    def test_product_only_operator_lacks_shift_capability(self):
        assert not isinstance(DenseSymMatProd(np.eye(3)), MatOpWithShiftSolve)

# ----------------------------------

class TestAsOperator:

    def test_dispatch(self):
        A = np.eye(4)
        assert isinstance(as_operator(A), DenseSymMatProd)
        assert isinstance(as_operator(sp.eye(4)), SparseSymMatProd)
        assert isinstance(as_operator(aslinearoperator(A)), MatvecOperator)
        assert isinstance(as_operator([[1.0, 0.0], [0.0, 1.0]]), DenseSymMatProd)

        op = DenseSymMatProd(A)
        assert as_operator(op) is op

    def test_unsupported_raises(self):
        with pytest.raises(ValueError):
            as_operator("matrix")

# ----------------------------------

class TestModes:

    def test_matrix_product_mode(self):
        A       = create_symmetric_matrix(8)
        mode    = MatrixProductMode(DenseSymMatProd(A))
        x       = np.ones(8)
        np.testing.assert_allclose(mode.apply_operator(x), A @ x)
        np.testing.assert_array_equal(mode.finalize_eigenvalues(np.array([1.0, 2.0])), [1.0, 2.0])
        assert mode.num_operations == 1
        assert mode.dim() == 8

    def test_shift_invert_mode(self):
        A       = np.diag([1.0, 2.0, 4.0])
        mode    = ShiftInvertMode(DenseGenRealShiftSolve(A), sigma=0.5)
        np.testing.assert_allclose(mode.apply_operator(np.ones(3)), [2.0, 2.0 / 3.0, 2.0 / 7.0])
        # theta = 1 / (lambda - sigma)  ->  lambda
        theta   = 1.0 / (np.array([1.0, 2.0, 4.0]) - 0.5)
        np.testing.assert_allclose(mode.finalize_eigenvalues(theta), [1.0, 2.0, 4.0])
        assert mode.sigma == 0.5

    def test_mode_type_checks(self):
        with pytest.raises(TypeError):
            MatrixProductMode(object())
        with pytest.raises(TypeError):
            ShiftInvertMode(DenseSymMatProd(np.eye(3)), sigma=0.0)

    def test_base_mode_is_abstract(self):
        with pytest.raises(NotImplementedError):
            OperatorMode(DenseSymMatProd(np.eye(3))).apply_operator(np.ones(3))

# ----------------------------------
#! EOF
# ----------------------------------
