"""Fermionic operator primitives for second-quantized fermionic operators."""

from __future__ import annotations

import numbers
from dataclasses import dataclass
from typing import Iterable, Tuple, Union

from ..algebra.elements import Element, Elements
from ..algebra.ids import ID, SimpleID
from ..algebra.kinds import Kind
from ..algebra.permute import permute
from ..exceptions import InvariantError, ValidationError

_VALID_OP_TYPES = ("+", "-")

FermionOpSymbol = Tuple[int, str]
"""
A single ladder operator symbol: (mode_index, op_type).

- mode_index: int - 0-based index of the spin-orbital (mode).
- op_type: str - "+" for creation a^\\dagger, "-" for annihilation a.
"""


@dataclass(frozen=True, order=True)
class FermionID(SimpleID):
    """
    Identifier of a single ladder operator.

    Attributes
    ----------
    mode:
        0-based index of the spin-orbital (mode).
    op:
        "+" for creation a^\\dagger, "-" for annihilation a.
    """

    mode: int
    op: str

    def __post_init__(self) -> None:
        """Validate FermionID invariants."""
        if not isinstance(self.mode, numbers.Integral) or isinstance(self.mode, bool):
            raise ValidationError(
                f"All mode indices must be integers, got invalid mode: {self.mode!r}"
            )
        if self.mode < 0:
            raise ValidationError(
                f"All mode indices must be >= 0, got invalid mode: {self.mode}"
            )
        if self.op not in _VALID_OP_TYPES:
            raise ValidationError(
                f"All operator types must be '+' (creation) or '-' (annihilation), "
                f"got invalid type: {self.op!r}"
            )

    def is_creation(self) -> bool:
        """Return True for a^\\dagger."""
        return self.op == "+"

    def adjoint(self) -> "FermionID":
        return self.replace(op="-" if self.op == "+" else "+")


def fermion_operator(
    value, operators: Iterable[Union[FermionID, FermionOpSymbol]] = ()
) -> Element:
    """
    Build a fermion-kind element

        value * a_{p1}^{σ1} a_{p2}^{σ2} ... a_{pk}^{σk}.

    Parameters
    ----------
    value:
        Coefficient multiplying the ladder operator string.
    operators:
        FermionIDs or (mode_index, op_type) pairs, in product order. An empty
        sequence gives a scalar (vacuum) term.

    Returns
    -------
    Element
        Element of kind ``Kind.FERMION``.
    """
    sids = [op if isinstance(op, FermionID) else FermionID(*op) for op in operators]
    return Element(value, ID(*sids), Kind.FERMION)


def fermion_permute(id1: FermionID, id2: FermionID, table) -> Tuple[Element, ...]:
    """
    Exchange rule of fermionic ladder operators.

    Uses the canonical anticommutation relations

        A B = -B A + {A, B},   {a_i, a_j^\\dagger} = δ_ij,

    with all other anticommutators vanishing.

    Parameters
    ----------
    id1, id2:
        Adjacent, unequal ladder operators.
    table:
        Ordering table (unused; fermionic exchanges never synthesize operators).

    Returns
    -------
    tuple of Element
        The anticommutator term (if nonzero) followed by the swapped product.

    Raises
    ------
    InvariantError:
        If the two ids are equal.
    """
    del table
    if id1 == id2:
        raise InvariantError(f"Equal fermion ids {id1!r} cannot be exchanged")
    swapped = fermion_operator(-1, (id2, id1))
    if id1.mode == id2.mode:
        return (fermion_operator(1), swapped)
    return (swapped,)


def normal_order_table(n_modes: int) -> dict:
    """
    Ordering table placing creators left of annihilators.

    Within each group, higher modes come first in canonical (descending) order.
    """
    if n_modes < 0:
        raise ValueError(f"n_modes must be >= 0, got {n_modes}")
    table = {}
    for mode in range(n_modes):
        table[FermionID(mode, "-")] = mode
        table[FermionID(mode, "+")] = n_modes + mode
    return table


def _has_repeated_operator(m: Element) -> bool:
    return any(a == b for a, b in zip(m.id, m.id[1:]))


def normal_order(x: Union[Element, Elements], n_modes: int) -> Elements:
    """
    Normal-order a fermionic element or sum of elements.

    Terms containing the same ladder operator twice vanish by the Pauli
    principle and are removed.

    Parameters
    ----------
    x:
        Element or Elements built from FermionIDs with modes < n_modes.
    n_modes:
        Number of modes.

    Returns
    -------
    Elements
        Normal-ordered sum.
    """
    ordered = permute(x, normal_order_table(n_modes), fermion_permute)
    return Elements(
        (m for m in ordered.values() if not _has_repeated_operator(m)),
        kind=Kind.FERMION,
    )


__all__ = [
    "FermionOpSymbol",
    "FermionID",
    "fermion_operator",
    "fermion_permute",
    "normal_order_table",
    "normal_order",
]
