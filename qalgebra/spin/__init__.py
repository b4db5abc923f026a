"""Spin operators: identifiers, exchange rule and dense matrices."""

from .ids import SpinID
from .matrices import spin_matrix, spin_operator_matrix
from .operators import spin_operator, spin_permute

__all__ = [
    "SpinID",
    "spin_operator",
    "spin_permute",
    "spin_matrix",
    "spin_operator_matrix",
]
