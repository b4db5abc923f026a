"""Spin operators and their exchange rule."""

from __future__ import annotations

from typing import Mapping, Tuple

from ..algebra.elements import Element
from ..algebra.ids import ID
from ..algebra.kinds import Kind
from ..exceptions import DomainError, InvariantError, NotFoundError
from .ids import SpinID

# Commutators [S^a, S^b] = coeff * S^c of the same site and orbital, as (coeff, c)
_SPIN_COMMUTATORS = {
    ("x", "y"): (1j, "z"),
    ("x", "z"): (-1j, "y"),
    ("x", "+"): (-1, "z"),
    ("x", "-"): (1, "z"),
    ("y", "x"): (-1j, "z"),
    ("y", "z"): (1j, "x"),
    ("y", "+"): (-1j, "z"),
    ("y", "-"): (-1j, "z"),
    ("z", "x"): (1j, "y"),
    ("z", "y"): (-1j, "x"),
    ("z", "+"): (1, "+"),
    ("z", "-"): (-1, "-"),
    ("+", "x"): (1, "z"),
    ("+", "y"): (1j, "z"),
    ("+", "z"): (-1, "+"),
    ("+", "-"): (2, "z"),
    ("-", "x"): (-1, "z"),
    ("-", "y"): (1j, "z"),
    ("-", "z"): (1, "-"),
    ("-", "+"): (-2, "z"),
}


def spin_operator(value, *sids: SpinID) -> Element:
    """
    Build a spin-kind element ``value * S_1 S_2 ... S_k``.

    Args:
        value: Coefficient.
        *sids: Spin ids, in product order.

    Returns:
        Element of kind ``Kind.SPIN``.
    """
    return Element(value, ID(*sids), Kind.SPIN)


def _retag(sid: SpinID, tag: str, table: Mapping) -> SpinID:
    new = sid.replace(tag=tag)
    if new not in table:
        raise NotFoundError(
            f"Incomplete ordering table: {new!r} is required by a spin commutator"
        )
    return new


def spin_permute(id1: SpinID, id2: SpinID, table: Mapping) -> Tuple[Element, ...]:
    """
    Exchange rule of spin operators.

    Operators on different sites or orbitals commute. On the same site and
    orbital, ``S^a S^b = S^b S^a + [S^a, S^b]`` with the SU(2) commutators,
    expressed in the x/y/z/+/- components.

    Args:
        id1: Left generator.
        id2: Right generator.
        table: Ordering table, which must contain every generator the
            commutator produces.

    Returns:
        The swapped product, preceded by the commutator term if nonzero.

    Raises:
        InvariantError: If the two ids are equal.
        DomainError: If the two ids share site and orbital but not spin.
        NotFoundError: If a generator produced by the commutator is not in table.
    """
    if id1 == id2:
        raise InvariantError(f"Equal spin ids {id1!r} cannot be exchanged")

    swapped = spin_operator(1, id2, id1)
    if (id1.site, id1.orbital) != (id2.site, id2.orbital):
        return (swapped,)

    if id1.spin != id2.spin:
        raise DomainError(
            f"Spin ids on the same site and orbital must share the spin, got {id1.spin} and {id2.spin}"
        )

    coeff, tag = _SPIN_COMMUTATORS[(id1.tag, id2.tag)]
    return (spin_operator(coeff, _retag(id1, tag, table)), swapped)


__all__ = ["spin_operator", "spin_permute"]
