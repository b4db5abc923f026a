"""Graded index spaces: enumerable universes of composite ids.

An :class:`IdSpace` is generated by a finite, ordered set of simple ids. For
every rank it holds a table of index tuples, each selecting ``rank`` positions
in the base set according to a combinatorics rule. The tables are kept in
strictly ascending order so that any id can be located by binary search.
"""

from __future__ import annotations

import itertools
from typing import Callable, Iterator, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from ..exceptions import InvariantError, NotFoundError, ValidationError
from ..logging import get_logger
from .ids import ID, SimpleID
from .permute import sequence_table

logger = get_logger(__name__)

CombinatoricsRule = Callable[[int, int], Sequence[Tuple[int, ...]]]
"""Rule ``(base_count, rank) -> index tuples``, in ascending lexicographic order."""

# Largest mixed-radix key that still fits comfortably into int64
_MAX_KEY = 2**62


def combinations(base_count: int, rank: int) -> List[Tuple[int, ...]]:
    """Strictly increasing index tuples (no repetition, order irrelevant)."""
    return list(itertools.combinations(range(base_count), rank))


def duplicate_combinations(base_count: int, rank: int) -> List[Tuple[int, ...]]:
    """Non-decreasing index tuples (combinations with repetition)."""
    return list(itertools.combinations_with_replacement(range(base_count), rank))


def permutations(base_count: int, rank: int) -> List[Tuple[int, ...]]:
    """Index tuples with distinct entries in every order."""
    return list(itertools.permutations(range(base_count), rank))


def duplicate_permutations(base_count: int, rank: int) -> List[Tuple[int, ...]]:
    """All index tuples (Cartesian power of the base)."""
    return list(itertools.product(range(base_count), repeat=rank))


class GradedTables:
    """
    Rank-graded tables of index tuples with O(log n) lookup.

    Each index tuple is encoded as a mixed-radix integer in base
    ``base_count``. For tuples of equal length this encoding preserves
    lexicographic order, so ``np.searchsorted`` on the keys performs the
    binary search.

    Args:
        base_count: Size of the base set the indices select from.
        tables: Map from rank to its index tuples, in ascending order. The
            iteration order of the map fixes the order of the ranks in the
            flat index.

    Raises:
        ValidationError: If a tuple has the wrong length or an index out of range.
        InvariantError: If the tuples of a rank are not strictly ascending.
        ValueError: If the keys of some rank would overflow int64.
    """

    def __init__(self, base_count: int, tables: Mapping[int, Sequence[Tuple[int, ...]]]) -> None:
        if base_count < 0:
            raise ValueError(f"base_count must be >= 0, got {base_count}")
        self.base_count = base_count
        self._ranks: Tuple[int, ...] = tuple(tables)
        self._tables: dict[int, np.ndarray] = {}
        self._keys: dict[int, np.ndarray] = {}

        for rank, tuples in tables.items():
            if max(base_count, 1) ** rank > _MAX_KEY:
                raise ValueError(
                    f"Index tuples of rank {rank} over {base_count} base ids are too large to encode"
                )
            bad = [t for t in tuples if len(t) != rank]
            if bad:
                raise ValidationError(f"Index tuples of rank {rank} have wrong lengths: {bad[:3]}")
            table = np.array(list(tuples), dtype=np.int64).reshape(len(tuples), rank)
            if table.size and (table.min() < 0 or table.max() >= base_count):
                raise ValidationError(
                    f"Indices of rank {rank} must lie in [0, {base_count}), "
                    f"got range [{table.min()}, {table.max()}]"
                )
            keys = self._encode(table)
            if np.any(np.diff(keys) <= 0):
                raise InvariantError(f"Index tuples of rank {rank} are not strictly ascending")
            self._tables[rank] = table
            self._keys[rank] = keys

        counts = np.array([len(self._keys[rank]) for rank in self._ranks], dtype=np.int64)
        self._ends = np.cumsum(counts)
        self._offsets = {
            rank: int(end - count) for rank, end, count in zip(self._ranks, self._ends, counts)
        }

    @classmethod
    def build(cls, rule: CombinatoricsRule, base_count: int, ranks: Sequence[int]) -> "GradedTables":
        """Generate the tables of the given ranks with a combinatorics rule."""
        return cls(base_count, {rank: rule(base_count, rank) for rank in ranks})

    def _encode(self, table: np.ndarray) -> np.ndarray:
        rank = table.shape[1]
        weights = np.array(
            [self.base_count ** (rank - 1 - k) for k in range(rank)], dtype=np.int64
        )
        return table @ weights if rank > 0 else np.zeros(table.shape[0], dtype=np.int64)

    @property
    def ranks(self) -> Tuple[int, ...]:
        """Ranks covered, in flat-index order."""
        return self._ranks

    def __len__(self) -> int:
        return int(self._ends[-1]) if len(self._ends) else 0

    def count(self, rank: int) -> int:
        """Number of index tuples of a rank (0 if the rank is not graded)."""
        keys = self._keys.get(rank)
        return 0 if keys is None else len(keys)

    def offset(self, rank: int) -> int:
        """Flat index of the first tuple of a rank."""
        return self._offsets[rank]

    def locate(self, index: int) -> Tuple[int, Tuple[int, ...]]:
        """
        Map a flat index to ``(rank, index_tuple)``.

        Raises:
            IndexError: If the index is out of range.
        """
        total = len(self)
        if index < 0:
            index += total
        if not 0 <= index < total:
            raise IndexError(f"Index out of range for {total} entries")
        bucket = int(np.searchsorted(self._ends, index, side="right"))
        rank = self._ranks[bucket]
        local = index - self._offsets[rank]
        return rank, tuple(int(k) for k in self._tables[rank][local])

    def search(self, rank: int, indices: Tuple[int, ...]) -> Optional[int]:
        """Return the position of an index tuple within its rank, or None."""
        keys = self._keys.get(rank)
        if keys is None or len(indices) != rank:
            return None
        key = int(self._encode(np.array([indices], dtype=np.int64).reshape(1, rank))[0])
        pos = int(np.searchsorted(keys, key, side="left"))
        if pos < len(keys) and keys[pos] == key:
            return pos
        return None


class IdSpace:
    """
    Graded space of composite ids generated by a base set of simple ids.

    Flat indices are 0-based and run over the ranks in the order they were
    given, each rank in ascending index-tuple order.

    Args:
        sids: Base simple ids, in order. Must be unique.
        tables: Graded tables over ``len(sids)`` base ids.

    Example:
        >>> space = IdSpace.build([a, b, c], duplicate_combinations, ranks=(2,))
        >>> space[0]
        ID(a, a)
        >>> space.index(ID(b, c))
        4
    """

    def __init__(self, sids: Sequence[SimpleID], tables: GradedTables) -> None:
        self._sids = tuple(sids)
        if tables.base_count != len(self._sids):
            raise ValidationError(
                f"Tables are built over {tables.base_count} base ids, got {len(self._sids)}"
            )
        self._positions = sequence_table(self._sids)
        self._tables = tables

    @classmethod
    def build(
        cls,
        sids: Sequence[SimpleID],
        rule: CombinatoricsRule,
        ranks: Sequence[int],
    ) -> "IdSpace":
        """Build an id space from base ids, a combinatorics rule and the ranks to grade."""
        sids = tuple(sids)
        tables = GradedTables.build(rule, len(sids), ranks)
        logger.debug(
            "Built id space over %d base ids with %d entries in ranks %s",
            len(sids),
            len(tables),
            tuple(ranks),
        )
        return cls(sids, tables)

    @property
    def sids(self) -> Tuple[SimpleID, ...]:
        return self._sids

    @property
    def tables(self) -> GradedTables:
        return self._tables

    def __len__(self) -> int:
        return len(self._tables)

    def get(self, index: int) -> ID:
        """Return the composite id at a flat index."""
        _, indices = self._tables.locate(index)
        return ID(*(self._sids[k] for k in indices))

    def __getitem__(self, index: int) -> ID:
        return self.get(index)

    def index(self, cid: ID) -> int:
        """
        Return the flat index of a composite id.

        Raises:
            NotFoundError: If the id is not part of this space.
        """
        try:
            indices = tuple(self._positions[sid] for sid in cid)
        except KeyError:
            raise NotFoundError(f"{cid!r} contains ids outside of the base set") from None
        local = self._tables.search(cid.rank, indices)
        if local is None:
            raise NotFoundError(f"{cid!r} is not in this id space")
        return self._tables.offset(cid.rank) + local

    def __contains__(self, cid: object) -> bool:
        if not isinstance(cid, ID):
            return False
        try:
            self.index(cid)
        except NotFoundError:
            return False
        return True

    def __iter__(self) -> Iterator[ID]:
        for i in range(len(self)):
            yield self.get(i)

    def table(self) -> dict:
        """Ordering table ``{sid: position}`` of the base ids."""
        return dict(self._positions)


__all__ = [
    "CombinatoricsRule",
    "combinations",
    "duplicate_combinations",
    "permutations",
    "duplicate_permutations",
    "GradedTables",
    "IdSpace",
]
