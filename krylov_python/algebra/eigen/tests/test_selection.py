"""
Tests for the eigenvalue selection rules.
"""

import numpy as np
import pytest

from krylov_python.algebra.eigen.selection import SelectionRule

# ----------------------------------

VALUES = np.array([3.0, -7.0, 0.5, -0.1, 7.0, 2.0])

class TestOrdering:

    def test_largest_magnitude(self):
        order = SelectionRule.LARGEST_MAGN.argsort(VALUES)
        # equal magnitudes keep their input order
        np.testing.assert_array_equal(VALUES[order], [-7.0, 7.0, 3.0, 2.0, 0.5, -0.1])

    def test_largest_algebraic(self):
        order = SelectionRule.LARGEST_ALGE.argsort(VALUES)
        np.testing.assert_array_equal(VALUES[order], [7.0, 3.0, 2.0, 0.5, -0.1, -7.0])

    def test_smallest_magnitude(self):
        order = SelectionRule.SMALLEST_MAGN.argsort(VALUES)
        np.testing.assert_array_equal(VALUES[order], [-0.1, 0.5, 2.0, 3.0, -7.0, 7.0])

    def test_smallest_algebraic(self):
        order = SelectionRule.SMALLEST_ALGE.argsort(VALUES)
        np.testing.assert_array_equal(VALUES[order], [-7.0, -0.1, 0.5, 2.0, 3.0, 7.0])

    def test_both_ends_sorts_descending(self):
        order = SelectionRule.BOTH_ENDS.argsort(VALUES)
        np.testing.assert_array_equal(order, SelectionRule.LARGEST_ALGE.argsort(VALUES))

    def test_ties_are_stable(self):
        values = np.array([1.0, -1.0, 1.0, -1.0])
        np.testing.assert_array_equal(SelectionRule.LARGEST_MAGN.argsort(values), [0, 1, 2, 3])

# ----------------------------------

class TestParsing:

    @pytest.mark.parametrize("name, rule", [
        ('LM', SelectionRule.LARGEST_MAGN),
        ('la', SelectionRule.LARGEST_ALGE),
        ('SM', SelectionRule.SMALLEST_MAGN),
        ('SA', SelectionRule.SMALLEST_ALGE),
        ('BE', SelectionRule.BOTH_ENDS),
        ('largest', SelectionRule.LARGEST_ALGE),
        ('smallest', SelectionRule.SMALLEST_ALGE),
        ('both', SelectionRule.BOTH_ENDS),
        (' Largest_Magn ', SelectionRule.LARGEST_MAGN),
    ])
    def test_from_string(self, name, rule):
        assert SelectionRule.from_string(name) is rule

    def test_rule_passes_through(self):
        assert SelectionRule.from_string(SelectionRule.BOTH_ENDS) is SelectionRule.BOTH_ENDS

    @pytest.mark.parametrize("bad", ['middle', '', 'LR', 3])
    def test_unknown_raises(self, bad):
        with pytest.raises(ValueError):
            SelectionRule.from_string(bad)

# ----------------------------------
#! EOF
# ----------------------------------
