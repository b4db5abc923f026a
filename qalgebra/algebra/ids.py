"""Identifier system of an algebra over a field.

A :class:`SimpleID` is the smallest unit of identity (one generator). An
:class:`ID` is an ordered product of simple ids and serves as the key of a
basis element of the algebra.
"""

from __future__ import annotations

import dataclasses
from typing import Any, Callable, Iterator, Tuple, Union

from ..exceptions import ValidationError


class SimpleID:
    """
    Base class of the atomic identifiers of an algebra.

    Concrete identifier families subclass this as frozen, ordered dataclasses.
    Equality, hashing and ordering are then field-wise lexicographic over the
    declared field order. Field validation belongs in ``__post_init__`` and
    must raise :class:`~qalgebra.exceptions.ValidationError`.

    Example:
        >>> @dataclass(frozen=True, order=True)
        ... class Mode(SimpleID):
        ...     index: int
        >>> Mode(0) < Mode(1)
        True
    """

    __slots__ = ()

    @classmethod
    def fieldnames(cls) -> Tuple[str, ...]:
        """Return the names of the fields of this identifier family."""
        return tuple(f.name for f in dataclasses.fields(cls))

    def replace(self, **changes: Any) -> "SimpleID":
        """
        Return a copy with some of the fields replaced.

        Raises:
            ValidationError: If a keyword is not a field of this family.
        """
        unknown = [name for name in changes if name not in self.fieldnames()]
        if unknown:
            raise ValidationError(
                f"{type(self).__name__} has no fields {unknown}. "
                f"Fields are {self.fieldnames()}"
            )
        return dataclasses.replace(self, **changes)

    def adjoint(self) -> "SimpleID":
        """Return the adjoint identifier. Defined by each identifier family."""
        raise NotImplementedError(
            f"adjoint is not defined for {type(self).__name__}"
        )


FieldSelector = Union[str, Callable[[SimpleID], Any]]


class ID:
    """
    Composite identifier: an immutable ordered product of simple ids.

    Ids of lower rank are always less than ids of higher rank. Ids of the same
    rank compare like tuples of their contents. The rank-0 id ``ID()`` is the
    id of scalars.

    Args:
        *sids: The simple ids, in product order.

    Raises:
        TypeError: If any argument is not a SimpleID.

    Example:
        >>> cid = ID(a, b)
        >>> cid.rank
        2
        >>> cid + c == ID(a, b, c)
        True
    """

    __slots__ = ("_contents",)

    def __init__(self, *sids: SimpleID) -> None:
        invalid = [sid for sid in sids if not isinstance(sid, SimpleID)]
        if invalid:
            raise TypeError(
                f"ID contents must be SimpleID instances, got {invalid}"
            )
        object.__setattr__(self, "_contents", tuple(sids))

    @classmethod
    def from_fields(cls, sid_type: type, *field_tuples: Tuple[Any, ...]) -> "ID":
        """
        Build an id from per-field tuples.

        The i-th simple id is ``sid_type(field_tuples[0][i], field_tuples[1][i], ...)``.

        Raises:
            ValidationError: If the field tuples differ in length.
        """
        lengths = {len(values) for values in field_tuples}
        if len(lengths) > 1:
            raise ValidationError(
                f"All field tuples must have the same length, got lengths {sorted(lengths)}"
            )
        return cls(*(sid_type(*args) for args in zip(*field_tuples)))

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("ID is immutable")

    @property
    def contents(self) -> Tuple[SimpleID, ...]:
        """The simple ids of this composite id."""
        return self._contents

    @property
    def rank(self) -> int:
        """Number of simple ids in the product."""
        return len(self._contents)

    def concat(self, other: Union["ID", SimpleID]) -> "ID":
        """Return the product id ``self ⧺ other``. Associative, not commutative."""
        if isinstance(other, ID):
            return ID(*self._contents, *other._contents)
        if isinstance(other, SimpleID):
            return ID(*self._contents, other)
        raise TypeError(f"Cannot concatenate ID with {type(other).__name__}")

    def __add__(self, other: Union["ID", SimpleID]) -> "ID":
        if not isinstance(other, (ID, SimpleID)):
            return NotImplemented
        return self.concat(other)

    def __radd__(self, other: SimpleID) -> "ID":
        if not isinstance(other, SimpleID):
            return NotImplemented
        return ID(other, *self._contents)

    def project(self, field: FieldSelector) -> Tuple[Any, ...]:
        """
        Return one attribute of every simple id, in product order.

        Args:
            field: A field name, or a callable applied to each simple id.

        Raises:
            ValidationError: If a field name is missing from some simple id.
        """
        if callable(field):
            return tuple(field(sid) for sid in self._contents)
        for sid in self._contents:
            if field not in sid.fieldnames():
                raise ValidationError(
                    f"{type(sid).__name__} has no field '{field}'"
                )
        return tuple(getattr(sid, field) for sid in self._contents)

    def replace(self, **changes: Any) -> "ID":
        """Return a new id with the given fields replaced in every simple id."""
        return ID(*(sid.replace(**changes) for sid in self._contents))

    def __len__(self) -> int:
        return len(self._contents)

    def __iter__(self) -> Iterator[SimpleID]:
        return iter(self._contents)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return ID(*self._contents[index])
        return self._contents[index]

    def __hash__(self) -> int:
        return hash(self._contents)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ID):
            return NotImplemented
        return self._contents == other._contents

    def __ne__(self, other: object) -> bool:
        if not isinstance(other, ID):
            return NotImplemented
        return self._contents != other._contents

    def __lt__(self, other: "ID") -> bool:
        if not isinstance(other, ID):
            return NotImplemented
        if self.rank != other.rank:
            return self.rank < other.rank
        return self._contents < other._contents

    def __le__(self, other: "ID") -> bool:
        if not isinstance(other, ID):
            return NotImplemented
        if self.rank != other.rank:
            return self.rank < other.rank
        return self._contents <= other._contents

    def __gt__(self, other: "ID") -> bool:
        if not isinstance(other, ID):
            return NotImplemented
        return other < self

    def __ge__(self, other: "ID") -> bool:
        if not isinstance(other, ID):
            return NotImplemented
        return other <= self

    def __repr__(self) -> str:
        return f"ID({', '.join(repr(sid) for sid in self._contents)})"


__all__ = ["SimpleID", "ID", "FieldSelector"]
