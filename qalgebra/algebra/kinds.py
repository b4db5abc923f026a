"""Operator kinds and the promotion rule between them."""

from __future__ import annotations

from enum import Enum

from ..exceptions import DomainError


class Kind(str, Enum):
    """
    Discriminant of the operator family an element belongs to.

    ``ELEMENT`` is the generic kind. It is what bare scalars carry and it
    promotes to any other kind.
    """

    ELEMENT = "element"
    SPIN = "spin"
    FERMION = "fermion"


def promote(kind_a: Kind, kind_b: Kind) -> Kind:
    """
    Return the kind of the result of combining elements of two kinds.

    Args:
        kind_a: Kind of the left operand.
        kind_b: Kind of the right operand.

    Returns:
        ``kind_a`` if both kinds agree or ``kind_b`` is generic, ``kind_b`` if
        ``kind_a`` is generic.

    Raises:
        DomainError: If the kinds are distinct non-generic families.
    """
    if kind_a == kind_b or kind_b == Kind.ELEMENT:
        return kind_a
    if kind_a == Kind.ELEMENT:
        return kind_b
    raise DomainError(
        f"Cannot combine elements of kind '{kind_a.value}' and '{kind_b.value}'"
    )


__all__ = ["Kind", "promote"]
