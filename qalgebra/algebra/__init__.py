"""Algebra over a field: identifiers, elements, index spaces and canonical ordering."""

from .elements import Element, Elements, dot, tensor
from .ids import ID, SimpleID
from .idspace import (
    GradedTables,
    IdSpace,
    combinations,
    duplicate_combinations,
    duplicate_permutations,
    permutations,
)
from .kinds import Kind, promote
from .permute import ExchangeRule, permute, permute_into, sequence, sequence_table

__all__ = [
    "SimpleID",
    "ID",
    "Kind",
    "promote",
    "Element",
    "Elements",
    "tensor",
    "dot",
    "GradedTables",
    "IdSpace",
    "combinations",
    "duplicate_combinations",
    "permutations",
    "duplicate_permutations",
    "ExchangeRule",
    "sequence",
    "sequence_table",
    "permute",
    "permute_into",
]
