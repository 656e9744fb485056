"""
Eigenvalue selection rules.

A selection rule decides which end(s) of the spectrum the restarted Lanczos
iteration keeps. The rule is a runtime value: the solver core only asks it for a
sorting permutation of the current Ritz values, so a single implementation of the
algorithm serves every rule.

    LARGEST_MAGN    descending |x|
    LARGEST_ALGE    descending x
    SMALLEST_MAGN   ascending  |x|
    SMALLEST_ALGE   ascending  x
    BOTH_ENDS       descending x, the solver then moves the smallest values to the front half
"""

from enum import Enum
from typing import Union

import numpy as np
from numpy.typing import NDArray

# ----------------------------------------------------------------------------------------

class SelectionRule(Enum):
    LARGEST_MAGN    = 'LM'
    LARGEST_ALGE    = 'LA'
    SMALLEST_MAGN   = 'SM'
    SMALLEST_ALGE   = 'SA'
    BOTH_ENDS       = 'BE'

    # ------------------------------------------------------------------------------------

    def sort_key(self, values: NDArray) -> NDArray:
        """
        Keys whose ascending order is the order prescribed by the rule.
        """
        values = np.asarray(values, dtype=float)
        if self is SelectionRule.LARGEST_MAGN:
            return -np.abs(values)
        if self is SelectionRule.SMALLEST_MAGN:
            return np.abs(values)
        if self is SelectionRule.SMALLEST_ALGE:
            return values
        # LARGEST_ALGE and BOTH_ENDS
        return -values

    def argsort(self, values: NDArray) -> NDArray:
        """
        Stable permutation ordering ``values`` by the rule; ties keep their input order.
        """
        return np.argsort(self.sort_key(values), kind='stable')

    # ------------------------------------------------------------------------------------

    @classmethod
    def from_string(cls, name: Union[str, 'SelectionRule']) -> 'SelectionRule':
        """
        Parse a rule from a SciPy-style code ('LM', 'LA', 'SM', 'SA', 'BE')
        or a descriptive name ('largest_magn', 'largest', 'smallest', 'both', ...).
        """
        if isinstance(name, SelectionRule):
            return name
        if not isinstance(name, str):
            raise ValueError(f"Selection rule must be a string or SelectionRule, got {type(name).__name__}")

        key = name.strip()
        if key.upper() in _CODES:
            return _CODES[key.upper()]
        try:
            return _ALIASES[key.lower()]
        except KeyError:
            raise ValueError(f"Unknown selection rule {name!r}. "
                            f"Use one of {sorted(_CODES)} or {sorted(_ALIASES)}") from None

# ----------------------------------------------------------------------------------------

_CODES = {rule.value: rule for rule in SelectionRule}

_ALIASES = {
    'largest_magn'      : SelectionRule.LARGEST_MAGN,
    'largest_magnitude' : SelectionRule.LARGEST_MAGN,
    'largest_alge'      : SelectionRule.LARGEST_ALGE,
    'largest'           : SelectionRule.LARGEST_ALGE,
    'smallest_magn'     : SelectionRule.SMALLEST_MAGN,
    'smallest_magnitude': SelectionRule.SMALLEST_MAGN,
    'smallest_alge'     : SelectionRule.SMALLEST_ALGE,
    'smallest'          : SelectionRule.SMALLEST_ALGE,
    'both_ends'         : SelectionRule.BOTH_ENDS,
    'both'              : SelectionRule.BOTH_ENDS,
}

# ----------------------------------------------------------------------------------------
#! EOF
# ----------------------------------------------------------------------------------------
