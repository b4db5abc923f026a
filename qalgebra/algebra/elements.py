"""Elements of an algebra over a field and sparse linear combinations of them."""

from __future__ import annotations

import cmath
import numbers
import operator
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from functools import reduce
from typing import Any, Iterable, Iterator, Optional, Tuple, Union

from ..config import get_tolerances, is_debug_enabled
from ..exceptions import DomainError, InvariantError
from .ids import ID, SimpleID
from .kinds import Kind, promote


def _is_scalar(obj: Any) -> bool:
    return isinstance(obj, numbers.Number)


def _values_close(a: Any, b: Any, atol: Optional[float], rtol: Optional[float]) -> bool:
    default_atol, default_rtol = get_tolerances()
    atol = default_atol if atol is None else atol
    rtol = default_rtol if rtol is None else rtol
    return cmath.isclose(complex(a), complex(b), rel_tol=rtol, abs_tol=atol)


def _check_power(n: Any) -> None:
    if not isinstance(n, numbers.Integral) or isinstance(n, bool):
        raise DomainError(f"Exponent must be an integer, got {type(n).__name__}")
    if n <= 0:
        raise DomainError(f"Non-positive exponents are not allowed, got {n}")


@dataclass(frozen=True)
class Element:
    """
    A single term of an algebra over a field: ``value * id``.

    The ``kind`` discriminant names the operator family the element belongs
    to. Elements of rank 0 are scalars embedded in the algebra and adopt the
    kind of whatever they are combined with.

    Exact equality compares ``value``, ``id`` and ``kind``. Use
    :meth:`isclose` for comparisons within a tolerance.

    Args:
        value: Coefficient, an element of the field.
        id: Composite identifier of the basis product. A single SimpleID or a
            sequence of them is converted to an ID.
        kind: Operator family of the element.

    Example:
        >>> m = Element(2.0, ID(a, b))
        >>> (m * m).id == ID(a, b, a, b)
        True
    """

    value: Any
    id: ID = field(default_factory=ID)
    kind: Kind = Kind.ELEMENT

    def __post_init__(self) -> None:
        if isinstance(self.id, SimpleID):
            object.__setattr__(self, "id", ID(self.id))
        elif not isinstance(self.id, ID):
            object.__setattr__(self, "id", ID(*self.id))
        object.__setattr__(self, "kind", Kind(self.kind))

    @property
    def rank(self) -> int:
        """Rank of the id of this element."""
        return self.id.rank

    def is_scalar(self) -> bool:
        """Return True if this element has a rank-0 id."""
        return self.id.rank == 0

    def replace(self, **changes: Any) -> "Element":
        """Return a copy with some of the fields replaced."""
        return replace(self, **changes)

    def isclose(
        self,
        other: "Element",
        atol: Optional[float] = None,
        rtol: Optional[float] = None,
    ) -> bool:
        """
        Compare values within a tolerance and ids exactly.

        Tolerances default to :func:`qalgebra.config.get_tolerances`.
        """
        if not isinstance(other, Element):
            return False
        return self.id == other.id and _values_close(self.value, other.value, atol, rtol)

    def split(self) -> Tuple[Any, ...]:
        """
        Split into the coefficient followed by one rank-1 element per generator.

        Each rank-1 element carries a unit coefficient, so that multiplying
        the coefficient with all of them in order recovers the element.
        """
        factors = tuple(Element(1, ID(sid), self.kind) for sid in self.id)
        return (self.value,) + factors

    def substitute(self, mapping: Mapping) -> Union["Element", "Elements"]:
        """
        Replace rank-1 factors with elements or sums of elements.

        Args:
            mapping: Map from SimpleID to the Element or Elements replacing
                every occurrence of that generator.

        Returns:
            The product with substitutions applied, in the original order.
        """
        if self.rank == 0:
            return self
        value, *factors = self.split()
        result: Any = value
        for factor in factors:
            result = result * mapping.get(factor.id[0], factor)
        return result

    def adjoint(self) -> "Element":
        """
        Hermitian adjoint: conjugated value and reversed, adjointed generators.

        Raises:
            NotImplementedError: If the identifier family defines no adjoint.
        """
        sids = tuple(sid.adjoint() for sid in reversed(self.id.contents))
        return Element(self.value.conjugate(), ID(*sids), self.kind)

    def tensor(self, other: "Element") -> "Element":
        """Tensor product of two elements: values multiply, ids concatenate."""
        return _multiply(self, other)

    def dot(self, other: "Element") -> Optional["Element"]:
        """
        Dot pairing of two basis elements.

        Returns the scalar element ``v1 * v2`` when both ids are equal and None
        (the zero of the algebra) otherwise.
        """
        if self.id != other.id:
            return None
        return Element(self.value * other.value, ID(), promote(self.kind, other.kind))

    # ---- arithmetic ----

    def __pos__(self) -> "Element":
        return self

    def __neg__(self) -> "Element":
        return replace(self, value=-self.value)

    def __add__(self, other: Any) -> Union["Element", "Elements"]:
        if other is None:
            return self
        if _is_scalar(other):
            if self.rank == 0:
                return replace(self, value=self.value + other)
            return Elements([self]).add(other)
        if isinstance(other, Element):
            if self.rank == 0 and other.rank == 0:
                return Element(self.value + other.value, ID(), promote(self.kind, other.kind))
            return Elements([self]).add(other)
        return NotImplemented

    def __radd__(self, other: Any) -> Union["Element", "Elements"]:
        if other is None:
            return self
        if _is_scalar(other):
            if self.rank == 0:
                return replace(self, value=other + self.value)
            return Elements([Element(other, ID(), self.kind), self])
        return NotImplemented

    def __sub__(self, other: Any) -> Union["Element", "Elements"]:
        if other is None:
            return self
        if _is_scalar(other):
            if self.rank == 0:
                return replace(self, value=self.value - other)
            return Elements([self]).subtract(other)
        if isinstance(other, Element):
            if self.rank == 0 and other.rank == 0:
                return Element(self.value - other.value, ID(), promote(self.kind, other.kind))
            return Elements([self]).subtract(other)
        return NotImplemented

    def __rsub__(self, other: Any) -> Union["Element", "Elements"]:
        if other is None:
            return -self
        if _is_scalar(other):
            if self.rank == 0:
                return replace(self, value=other - self.value)
            return Elements([Element(other, ID(), self.kind)]).subtract(self)
        return NotImplemented

    def __mul__(self, other: Any) -> Optional["Element"]:
        if other is None:
            return None
        if _is_scalar(other):
            return replace(self, value=self.value * other)
        if isinstance(other, Element):
            return _multiply(self, other)
        return NotImplemented

    def __rmul__(self, other: Any) -> Optional["Element"]:
        if other is None:
            return None
        if _is_scalar(other):
            return replace(self, value=other * self.value)
        return NotImplemented

    def __truediv__(self, factor: Any) -> "Element":
        if isinstance(factor, Element):
            if factor.rank != 0:
                raise DomainError("Division is only defined by scalars")
            factor = factor.value
        if not _is_scalar(factor):
            return NotImplemented
        return self * (1 / factor)

    def __pow__(self, n: int) -> "Element":
        _check_power(n)
        return reduce(operator.mul, [self] * n)


def _result_kind(m1: Element, m2: Element) -> Kind:
    if m1.rank == 0 and m2.rank > 0:
        return m2.kind
    if m2.rank == 0 and m1.rank > 0:
        return m1.kind
    return promote(m1.kind, m2.kind)


def _multiply(m1: Element, m2: Element) -> Element:
    """Product of two elements without any reordering of generators."""
    kind = _result_kind(m1, m2)
    return Element(m1.value * m2.value, m1.id.concat(m2.id), kind)


class Elements(Mapping):
    """
    Sparse linear combination of elements, keyed by their ids.

    Elements with identical ids are merged on insertion and entries whose
    value sums to exactly zero are removed, so an empty ``Elements`` is the
    zero of the algebra and compares equal to ``None`` and ``0``.

    The product of two ``Elements`` is the distributive, non-commutative
    product of the algebra. Generators are never reordered here; canonical
    ordering is the job of :func:`qalgebra.algebra.permute.permute`.

    Args:
        terms: Initial elements, scalars or Elements, added one at a time.
        kind: Operator family of the container. Promoted as elements are
            added; defaults to the generic kind.

    Example:
        >>> ms = Elements([Element(1.0, ID(a)), Element(2.0, ID(a))])
        >>> ms[ID(a)].value
        3.0
    """

    def __init__(self, terms: Iterable[Any] = (), kind: Kind = Kind.ELEMENT) -> None:
        self._terms: dict[ID, Element] = {}
        self._kind = Kind(kind)
        for term in terms:
            self.add(term)

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[ID, Element]]) -> "Elements":
        """
        Build from ``(id, element)`` pairs.

        Raises:
            InvariantError: If a key differs from the id of its element.
        """
        result = cls()
        for key, m in pairs:
            if key != m.id:
                raise InvariantError(
                    f"Key {key!r} does not match the id {m.id!r} of its element"
                )
            result.add(m)
        return result

    @property
    def kind(self) -> Kind:
        """Operator family of the elements in this container."""
        return self._kind

    # ---- mapping protocol ----

    def __getitem__(self, key: ID) -> Element:
        return self._terms[key]

    def __iter__(self) -> Iterator[ID]:
        return iter(self._terms)

    def __len__(self) -> int:
        return len(self._terms)

    def copy(self) -> "Elements":
        """Return a shallow copy. Elements are immutable so nothing is shared mutably."""
        result = Elements(kind=self._kind)
        result._terms = dict(self._terms)
        return result

    def is_zero(self) -> bool:
        """Return True if there are no nonzero terms."""
        return len(self._terms) == 0

    def check_invariants(self) -> None:
        """
        Verify key/value consistency and the absence of zero entries.

        Raises:
            InvariantError: If an invariant is violated.
        """
        for key, m in self._terms.items():
            if key != m.id:
                raise InvariantError(
                    f"Key {key!r} does not match the id {m.id!r} of its element"
                )
            if abs(m.value) == 0:
                raise InvariantError(f"Zero-valued entry stored for {key!r}")

    # ---- in-place operations ----

    def _merge(self, m: Element, negate: bool = False) -> None:
        if m.rank == 0 and self._kind != Kind.ELEMENT:
            kind = self._kind
        else:
            kind = promote(self._kind, m.kind)
        value = -m.value if negate else m.value
        old = self._terms.get(m.id)
        new_value = value if old is None else old.value + value

        if kind != self._kind:
            self._terms = {k: replace(v, kind=kind) for k, v in self._terms.items()}
            self._kind = kind

        if abs(new_value) == 0:
            self._terms.pop(m.id, None)
        else:
            self._terms[m.id] = Element(new_value, m.id, kind)

    def _fold(self, other: Any, negate: bool) -> "Elements":
        if other is None:
            return self
        if isinstance(other, Elements):
            # Fold into a copy so a rejected term leaves self untouched
            staged = self.copy()
            for m in list(other.values()):
                staged._merge(m, negate)
            self._terms, self._kind = staged._terms, staged._kind
        elif isinstance(other, Element):
            self._merge(other, negate)
        elif _is_scalar(other):
            self._merge(Element(other, ID(), self._kind), negate)
        else:
            raise TypeError(
                f"Cannot add {type(other).__name__} to Elements"
            )
        if is_debug_enabled():
            self.check_invariants()
        return self

    def add(self, other: Any) -> "Elements":
        """
        Add an element, a scalar, or another Elements in place.

        Terms with an existing id are merged; terms whose value becomes zero
        are removed. Adding None is a no-op.

        Returns:
            self, to allow chaining.
        """
        return self._fold(other, negate=False)

    def subtract(self, other: Any) -> "Elements":
        """Subtract an element, a scalar, or another Elements in place."""
        return self._fold(other, negate=True)

    def scale(self, factor: Any) -> "Elements":
        """
        Multiply every term by a scalar in place.

        Args:
            factor: A field scalar or a rank-0 Element.

        Raises:
            DomainError: If factor is a non-scalar Element.
        """
        if isinstance(factor, Element):
            if factor.rank != 0:
                raise DomainError("Only scalar factors are allowed in scale")
            factor = factor.value
        if not _is_scalar(factor):
            raise TypeError(f"Cannot scale Elements by {type(factor).__name__}")
        scaled = {}
        for key, m in self._terms.items():
            value = m.value * factor
            if abs(value) != 0:
                scaled[key] = replace(m, value=value)
        self._terms = scaled
        return self

    def divide(self, factor: Any) -> "Elements":
        """Divide every term by a scalar (or rank-0 Element) in place."""
        if isinstance(factor, Element):
            if factor.rank != 0:
                raise DomainError("Division is only defined by scalars")
            factor = factor.value
        return self.scale(1 / factor)

    # ---- derived operations ----

    def adjoint(self) -> "Elements":
        """Hermitian adjoint of every term."""
        return Elements((m.adjoint() for m in self._terms.values()), kind=self._kind)

    def substitute(self, mapping: Mapping) -> "Elements":
        """Replace rank-1 factors of every term. See :meth:`Element.substitute`."""
        result = Elements(kind=self._kind)
        for m in self._terms.values():
            result.add(m.substitute(mapping))
        return result

    def isclose(
        self,
        other: Any,
        atol: Optional[float] = None,
        rtol: Optional[float] = None,
    ) -> bool:
        """
        Compare term by term within a tolerance.

        Ids present on only one side are compared against zero.
        """
        other = _as_elements(other)
        if other is None:
            return False
        for key in set(self._terms) | set(other._terms):
            a = self._terms[key].value if key in self._terms else 0
            b = other._terms[key].value if key in other._terms else 0
            if not _values_close(a, b, atol, rtol):
                return False
        return True

    # ---- operators ----

    def __eq__(self, other: object) -> bool:
        if other is None:
            return self.is_zero()
        if _is_scalar(other):
            if other == 0:
                return self.is_zero()
            scalar = self._terms.get(ID())
            return len(self._terms) == 1 and scalar is not None and scalar.value == other
        if isinstance(other, Element):
            return self._terms == Elements([other])._terms
        if isinstance(other, Elements):
            return self._terms == other._terms
        return NotImplemented

    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = None  # type: ignore[assignment]

    def __pos__(self) -> "Elements":
        return self.copy()

    def __neg__(self) -> "Elements":
        return self.copy().scale(-1)

    def __add__(self, other: Any) -> "Elements":
        if not _is_operand(other):
            return NotImplemented
        return self.copy().add(other)

    def __radd__(self, other: Any) -> "Elements":
        if not _is_operand(other):
            return NotImplemented
        return self.copy().add(other)

    def __iadd__(self, other: Any) -> "Elements":
        if not _is_operand(other):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: Any) -> "Elements":
        if not _is_operand(other):
            return NotImplemented
        return self.copy().subtract(other)

    def __rsub__(self, other: Any) -> "Elements":
        if not _is_operand(other):
            return NotImplemented
        return (-self).add(other)

    def __isub__(self, other: Any) -> "Elements":
        if not _is_operand(other):
            return NotImplemented
        return self.subtract(other)

    def __mul__(self, other: Any) -> Optional["Elements"]:
        if other is None:
            return None
        if _is_scalar(other) or (isinstance(other, Element) and other.rank == 0):
            return self.copy().scale(other)
        if isinstance(other, (Element, Elements)):
            return _distribute(operator.mul, self, other)
        return NotImplemented

    def __rmul__(self, other: Any) -> Optional["Elements"]:
        if other is None:
            return None
        if _is_scalar(other) or (isinstance(other, Element) and other.rank == 0):
            return self.copy().scale(other)
        if isinstance(other, Element):
            return _distribute(operator.mul, other, self)
        return NotImplemented

    def __imul__(self, other: Any) -> "Elements":
        if _is_scalar(other) or (isinstance(other, Element) and other.rank == 0):
            return self.scale(other)
        if isinstance(other, (Element, Elements)):
            product = _distribute(operator.mul, self, other)
            self._terms, self._kind = product._terms, product._kind
            return self
        return NotImplemented

    def __truediv__(self, factor: Any) -> "Elements":
        return self.copy().divide(factor)

    def __itruediv__(self, factor: Any) -> "Elements":
        return self.divide(factor)

    def __pow__(self, n: int) -> "Elements":
        _check_power(n)
        return reduce(operator.mul, [self] * n)

    def __repr__(self) -> str:
        lines = [f"Elements with {len(self._terms)} entries:"]
        lines.extend(f"  {m!r}" for m in self._terms.values())
        return "\n".join(lines)


def _is_operand(obj: Any) -> bool:
    return obj is None or _is_scalar(obj) or isinstance(obj, (Element, Elements))


def _as_elements(obj: Any) -> Optional[Elements]:
    if obj is None:
        return Elements()
    if isinstance(obj, Elements):
        return obj
    if isinstance(obj, Element) or _is_scalar(obj):
        return Elements([obj])
    return None


def _terms_of(obj: Union[Element, Elements]) -> Iterable[Element]:
    if isinstance(obj, Element):
        return (obj,)
    return list(obj.values())


def _distribute(op, a: Union[Element, Elements], b: Union[Element, Elements]) -> Elements:
    """Apply an element-level bilinear operation over all pairs of terms."""
    result = Elements()
    for m1 in _terms_of(a):
        for m2 in _terms_of(b):
            result.add(op(m1, m2))
    return result


def tensor(
    a: Union[Element, Elements], b: Union[Element, Elements]
) -> Union[Element, Elements]:
    """
    Tensor product, distributed over sums.

    Two single elements give an Element; any Elements operand gives Elements.
    """
    if isinstance(a, Element) and isinstance(b, Element):
        return a.tensor(b)
    return _distribute(Element.tensor, a, b)


def dot(
    a: Union[Element, Elements], b: Union[Element, Elements]
) -> Union[Element, Elements, None]:
    """
    Dot pairing, distributed over sums.

    Two single elements give an Element or None; any Elements operand gives
    Elements (possibly empty).
    """
    if isinstance(a, Element) and isinstance(b, Element):
        return a.dot(b)
    return _distribute(Element.dot, a, b)


__all__ = ["Element", "Elements", "tensor", "dot"]
