"""Fermionic ladder operators: identifiers, anticommutation rule and Jordan-Wigner matrices."""

from .mappings import (
    fermion_operator_matrix,
    ladder_matrix,
)
from .operators import (
    FermionID,
    FermionOpSymbol,
    fermion_operator,
    fermion_permute,
    normal_order,
    normal_order_table,
)

__all__ = [
    "FermionOpSymbol",
    "FermionID",
    "fermion_operator",
    "fermion_permute",
    "normal_order_table",
    "normal_order",
    "ladder_matrix",
    "fermion_operator_matrix",
]
