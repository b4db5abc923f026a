"""Canonical ordering of products of generators.

A product is canonical when the positions of its generators, looked up in an
ordering table, are non-increasing from left to right. :func:`permute`
rewrites an element (or a sum of elements) into canonical form by repeatedly
exchanging the first out-of-order adjacent pair with the help of an
exchange rule supplied by the operator family.

Termination and confluence are contracts of the exchange rule. Each rewrite
must strictly decrease some well-founded measure (for genuine commutation
relations, the inversion count together with the rank does), and the final
result must not depend on which pair is exchanged first. The rewriting loop
performs no independent check: an ill-formed rule loops forever.
"""

from __future__ import annotations

from typing import Callable, Hashable, Iterable, Mapping, Optional, Sequence, Tuple, Union

from ..config import is_debug_enabled
from ..exceptions import InvariantError, NotFoundError, ValidationError
from ..logging import get_logger
from .elements import Element, Elements
from .ids import SimpleID

logger = get_logger(__name__)

ExchangeRule = Callable[[SimpleID, SimpleID, Mapping], Iterable[Optional[Element]]]
"""
Exchange rule of an operator family: ``rule(id1, id2, table)``.

Called for two adjacent, unequal generators ``id1 id2`` that are out of
canonical order. Returns elements whose sum equals the product ``id1 id2``,
typically the swapped product plus lower-rank corrections. None entries stand
for vanishing terms and are dropped. The table is passed so the rule can
check the positions of any generator it synthesizes.
"""


def sequence_table(sids: Sequence[Hashable]) -> dict:
    """
    Build an ordering table mapping each generator to its position.

    Raises:
        ValidationError: If a generator occurs more than once.
    """
    table = {}
    for position, sid in enumerate(sids):
        if sid in table:
            raise ValidationError(f"Duplicate generator {sid!r} in ordering table")
        table[sid] = position
    return table


def sequence(m: Element, table: Mapping) -> Tuple:
    """
    Return the table positions of the generators of an element.

    Raises:
        NotFoundError: If a generator is missing from the table.
    """
    positions = []
    for sid in m.id:
        try:
            positions.append(table[sid])
        except KeyError:
            raise NotFoundError(
                f"Generator {sid!r} is not in the ordering table"
            ) from None
    return tuple(positions)


def _commute_position(positions: Tuple) -> Optional[int]:
    for i in range(len(positions) - 1):
        if positions[i] < positions[i + 1]:
            return i
    return None


def _permute_element(result: Elements, m: Element, table: Mapping, rule: ExchangeRule) -> None:
    debug = is_debug_enabled()
    stack = [m]
    rewrites = 0
    while stack:
        current = stack.pop()
        pos = _commute_position(sequence(current, table))
        if pos is None:
            result.add(current)
            continue

        id1, id2 = current.id[pos], current.id[pos + 1]
        if id1 == id2:
            raise InvariantError(
                f"Equal adjacent generators {id1!r} cannot be exchanged"
            )
        left = Element(current.value, current.id[:pos], current.kind)
        right = Element(1, current.id[pos + 2:], current.kind)
        for middle in rule(id1, id2, table):
            if middle is None:
                continue
            if not isinstance(middle, Element):
                raise TypeError(
                    f"Exchange rules must return Elements or None, got {type(middle).__name__}"
                )
            stack.append(left * middle * right)
        rewrites += 1
        if debug:
            logger.debug("Exchanged %r and %r at position %d in %r", id1, id2, pos, current.id)

    logger.debug("Canonicalized %r with %d rewrites", m.id, rewrites)


def permute_into(
    result: Elements,
    x: Union[Element, Elements],
    table: Mapping,
    rule: ExchangeRule,
) -> Elements:
    """
    Canonicalize an element or a sum of elements and add it to ``result``.

    Args:
        result: Accumulator the canonical terms are merged into.
        x: Element or Elements to canonicalize.
        table: Map from generator to its position in the canonical order.
        rule: Exchange rule of the operator family.

    Returns:
        ``result``.

    Raises:
        NotFoundError: If a generator is missing from the table.
        InvariantError: If two equal adjacent generators are out of order.
    """
    if isinstance(x, Elements):
        for m in list(x.values()):
            _permute_element(result, m, table, rule)
    elif isinstance(x, Element):
        _permute_element(result, x, table, rule)
    else:
        raise TypeError(f"Cannot permute {type(x).__name__}")
    return result


def permute(x: Union[Element, Elements], table: Mapping, rule: ExchangeRule) -> Elements:
    """
    Rewrite an element or a sum of elements into canonical (descending) order.

    The rewriting keeps an explicit work stack. Starting from the input term,
    it pops a term, finds the first adjacent pair ``(i, i+1)`` whose positions
    satisfy ``pos[i] < pos[i+1]`` and replaces the pair with the output of
    ``rule``, keeping the coefficient on the left part. Canonical terms are
    merged into the result.

    Example:
        >>> table = sequence_table([x, y, z])
        >>> permute(Element(1, ID(x, y)), table, commutator_rule)
        Elements with 2 entries: ...
    """
    if not isinstance(x, (Element, Elements)):
        raise TypeError(f"Cannot permute {type(x).__name__}")
    return permute_into(Elements(kind=x.kind), x, table, rule)


__all__ = ["ExchangeRule", "sequence_table", "sequence", "permute", "permute_into"]
