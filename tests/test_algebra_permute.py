"""Tests for canonical ordering with exchange rules."""

import itertools
import logging
from collections.abc import Mapping
from io import StringIO

import pytest

from qalgebra import (
    ID,
    Element,
    Elements,
    InvariantError,
    NotFoundError,
    ValidationError,
    configure_logging,
    debug_context,
    permute,
    permute_into,
    sequence,
    sequence_table,
)


class TestSequence:
    """Tests for ordering tables."""

    def test_sequence_table(self, xyz):
        """Positions follow the given order."""
        x, y, z = xyz
        assert sequence_table([z, x, y]) == {z: 0, x: 1, y: 2}

    def test_sequence_table_duplicates(self, xyz):
        """Duplicate generators are rejected."""
        x, y, _ = xyz
        with pytest.raises(ValidationError, match="Duplicate"):
            sequence_table([x, y, x])

    def test_sequence(self, xyz, letter_table):
        """sequence maps each generator to its position."""
        x, y, z = xyz
        assert sequence(Element(1, ID(z, x, y)), letter_table) == (2, 0, 1)
        assert sequence(Element(1), letter_table) == ()

    def test_sequence_missing(self, xyz, letter, letter_table):
        """Generators missing from the table raise NotFoundError."""
        with pytest.raises(NotFoundError, match="not in the ordering table"):
            sequence(Element(1, ID(xyz[0], letter("w"))), letter_table)


class TestPermute:
    """Tests for permute and permute_into."""

    def test_single_exchange(self, xyz, letter_table, commutator_rule):
        """x y = y x + [x, y]."""
        x, y, _ = xyz
        result = permute(Element(1, ID(x, y)), letter_table, commutator_rule)
        assert result == Elements([Element(1, ID(y, x)), Element(1.0)])

    def test_coefficient_is_carried(self, xyz, letter_table, commutator_rule):
        """The coefficient multiplies every produced term."""
        x, y, _ = xyz
        result = permute(Element(3j, ID(x, y)), letter_table, commutator_rule)
        assert result == Elements([Element(3j, ID(y, x)), Element(3j)])

    def test_chain(self, xyz, letter_table, commutator_rule):
        """x y z = z y x + 3 x + 2 y + z."""
        x, y, z = xyz
        result = permute(Element(1, ID(x, y, z)), letter_table, commutator_rule)
        expected = Elements(
            [
                Element(1, ID(z, y, x)),
                Element(3.0, ID(x)),
                Element(2.0, ID(y)),
                Element(1.0, ID(z)),
            ]
        )
        assert result == expected

    def test_canonical_is_fixed_point(self, xyz, letter_table, commutator_rule):
        """Already canonical terms are returned unchanged."""
        x, y, z = xyz
        for m in [Element(2, ID(z, y, x)), Element(5), Element(1, ID(y, y, x))]:
            assert permute(m, letter_table, commutator_rule) == m

    def test_idempotent(self, xyz, letter_table, commutator_rule):
        """Canonicalizing twice gives the same result."""
        for word in itertools.product(xyz, repeat=3):
            once = permute(Element(1, ID(*word)), letter_table, commutator_rule)
            twice = permute(once, letter_table, commutator_rule)
            assert twice == once

    def test_output_is_canonical(self, xyz, letter_table, commutator_rule):
        """Every produced id is in non-increasing table order."""
        for word in itertools.product(xyz, repeat=4):
            result = permute(Element(1, ID(*word)), letter_table, commutator_rule)
            for m in result.values():
                positions = sequence(m, letter_table)
                assert list(positions) == sorted(positions, reverse=True)

    def test_elements_input(self, xyz, letter_table, commutator_rule):
        """Sums are canonicalized term by term and merged."""
        x, y, _ = xyz
        x_y = Elements([Element(1, ID(x, y)), Element(-1, ID(y, x))])
        assert permute(x_y, letter_table, commutator_rule) == 1.0

    def test_permute_into_accumulates(self, xyz, letter_table, commutator_rule):
        """permute_into merges into an existing result."""
        x, y, _ = xyz
        result = Elements([Element(-1.0)])
        returned = permute_into(result, Element(1, ID(x, y)), letter_table, commutator_rule)
        assert returned is result
        assert result == Element(1, ID(y, x))

    def test_missing_generator(self, xyz, letter, letter_table, commutator_rule):
        """A generator outside the table raises NotFoundError."""
        x, _, _ = xyz
        with pytest.raises(NotFoundError):
            permute(Element(1, ID(x, letter("w"))), letter_table, commutator_rule)

    def test_not_found_is_lookup_error(self, xyz, letter, letter_table, commutator_rule):
        """NotFoundError can be caught as LookupError."""
        with pytest.raises(LookupError):
            permute(Element(1, ID(letter("w"))), letter_table, commutator_rule)

    def test_invalid_input(self, letter_table, commutator_rule):
        """Only Element and Elements can be permuted."""
        with pytest.raises(TypeError):
            permute(3, letter_table, commutator_rule)

    def test_none_terms_are_dropped(self, xyz, letter_table):
        """Rules may return None for vanishing terms."""
        x, y, _ = xyz

        def annihilate(id1, id2, table):
            return (None,)

        assert permute(Element(1, ID(x, y)), letter_table, annihilate).is_zero()

    def test_rule_must_return_elements(self, xyz, letter_table):
        """Non-Element rule outputs raise TypeError."""
        x, y, _ = xyz

        def broken(id1, id2, table):
            return (1.0,)

        with pytest.raises(TypeError, match="Exchange rules"):
            permute(Element(1, ID(x, y)), letter_table, broken)

    def test_equal_adjacent_generators(self, xyz, commutator_rule):
        """Equal generators found out of order raise InvariantError."""
        x, _, _ = xyz

        class IncreasingTable(Mapping):
            """Table returning a larger position on every lookup."""

            def __init__(self):
                self.calls = 0

            def __getitem__(self, key):
                self.calls += 1
                return self.calls

            def __iter__(self):
                return iter(())

            def __len__(self):
                return 0

        with pytest.raises(InvariantError, match="Equal adjacent"):
            permute(Element(1, ID(x, x)), IncreasingTable(), commutator_rule)

    def test_debug_logging(self, xyz, letter_table, commutator_rule):
        """Debug mode logs every exchange."""
        x, y, _ = xyz
        stream = StringIO()
        configure_logging(level=logging.DEBUG, stream=stream)
        try:
            with debug_context(True):
                permute(Element(1, ID(x, y)), letter_table, commutator_rule)
        finally:
            configure_logging(level=logging.WARNING)
        output = stream.getvalue()
        assert "Exchanged" in output
        assert "Canonicalized" in output
