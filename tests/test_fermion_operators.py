"""Tests for fermionic operator primitives."""

from __future__ import annotations

import pytest
import torch

from qalgebra import (
    ID,
    Elements,
    InvariantError,
    Kind,
    ValidationError,
)
from qalgebra.fermion import (
    FermionID,
    fermion_operator,
    fermion_operator_matrix,
    fermion_permute,
    ladder_matrix,
    normal_order,
    normal_order_table,
)


def _anticommutator(a: torch.Tensor, b: torch.Tensor) -> torch.Tensor:
    return a @ b + b @ a


class TestFermionID:
    """Tests for FermionID class."""

    def test_fermion_id_construction(self):
        """Test constructing valid FermionID objects."""
        sid = FermionID(1, "+")
        assert sid.mode == 1
        assert sid.op == "+"
        assert sid.is_creation()
        assert not FermionID(1, "-").is_creation()

    def test_fermion_id_invalid_mode(self):
        """Test that invalid mode indices raise ValueError."""
        with pytest.raises(ValueError, match="mode indices must be >= 0"):
            FermionID(-1, "+")

        with pytest.raises(ValidationError, match="mode indices must be >= 0"):
            fermion_operator(1.0, [(0, "+"), (-2, "-")])

    @pytest.mark.parametrize("mode", ["a", 1.0, None, True])
    def test_fermion_id_non_integer_mode(self, mode):
        """Test that non-integer mode indices raise ValidationError."""
        with pytest.raises(ValidationError, match="mode indices must be integers"):
            FermionID(mode, "+")

    def test_fermion_id_invalid_op_type(self):
        """Test that invalid operator types raise ValueError."""
        with pytest.raises(ValueError, match="operator types must be"):
            FermionID(0, "x")

        with pytest.raises(ValueError, match="operator types must be"):
            fermion_operator(1.0, [(0, "+"), (1, "dagger")])

    def test_fermion_id_adjoint(self):
        """Test that the adjoint swaps creation and annihilation."""
        assert FermionID(2, "+").adjoint() == FermionID(2, "-")
        assert FermionID(2, "-").adjoint() == FermionID(2, "+")


class TestFermionOperator:
    """Tests for fermion_operator."""

    def test_fermion_operator_construction(self):
        """Test building elements from (mode, op) pairs."""
        m = fermion_operator(1.0, [(0, "+"), (1, "-")])
        assert m.kind == Kind.FERMION
        assert m.value == 1.0
        assert m.id == ID(FermionID(0, "+"), FermionID(1, "-"))

    def test_fermion_operator_accepts_ids(self):
        """Test that FermionIDs and tuples can be mixed."""
        m = fermion_operator(2, [FermionID(0, "+"), (1, "-")])
        assert m == fermion_operator(2, [(0, "+"), (1, "-")])

    def test_fermion_operator_vacuum(self):
        """Test vacuum term (no operators)."""
        vac = fermion_operator(2.0)
        assert vac.is_scalar()
        assert vac.value == 2.0
        assert vac.kind == Kind.FERMION

    def test_fermion_operator_adjoint(self):
        """Test (c a_0^dagger a_1)^dagger = c* a_1^dagger a_0."""
        m = fermion_operator(2j, [(0, "+"), (1, "-")])
        assert m.adjoint() == fermion_operator(-2j, [(1, "+"), (0, "-")])

    def test_fermion_sum(self):
        """Test that sums of fermion elements keep the fermion kind."""
        x = fermion_operator(1, [(0, "+")]) + fermion_operator(1, [(0, "-")])
        assert isinstance(x, Elements)
        assert x.kind == Kind.FERMION
        x.add(1)
        assert x[ID()].kind == Kind.FERMION


class TestFermionPermute:
    """Tests for the anticommutation exchange rule."""

    def test_different_modes(self):
        """Test that different modes anticommute."""
        a, b = FermionID(0, "-"), FermionID(1, "+")
        assert fermion_permute(a, b, {}) == (fermion_operator(-1, (b, a)),)

    def test_same_mode(self):
        """Test a_0 a_0^dagger = 1 - a_0^dagger a_0."""
        a, b = FermionID(0, "-"), FermionID(0, "+")
        assert fermion_permute(a, b, {}) == (
            fermion_operator(1),
            fermion_operator(-1, (b, a)),
        )

    def test_equal_ids(self):
        """Test that equal ids cannot be exchanged."""
        with pytest.raises(InvariantError):
            fermion_permute(FermionID(0, "+"), FermionID(0, "+"), {})


class TestNormalOrder:
    """Tests for normal ordering."""

    def test_normal_order_table(self):
        """Test that creators sit above annihilators."""
        table = normal_order_table(2)
        assert table[FermionID(1, "-")] == 1
        assert table[FermionID(0, "+")] == 2
        assert len(table) == 4
        with pytest.raises(ValueError):
            normal_order_table(-1)

    def test_normal_order_same_mode(self):
        """Test a_0 a_0^dagger = 1 - a_0^dagger a_0."""
        result = normal_order(fermion_operator(1, [(0, "-"), (0, "+")]), 1)
        expected = Elements(
            [fermion_operator(1), fermion_operator(-1, [(0, "+"), (0, "-")])]
        )
        assert result == expected
        assert result.kind == Kind.FERMION

    def test_normal_order_creators_sign(self):
        """Test a_0^dagger a_1^dagger = -a_1^dagger a_0^dagger."""
        result = normal_order(fermion_operator(1, [(0, "+"), (1, "+")]), 2)
        assert result == fermion_operator(-1, [(1, "+"), (0, "+")])

    def test_normal_order_pauli_exclusion(self):
        """Test that repeated ladder operators vanish."""
        assert normal_order(fermion_operator(1, [(0, "+"), (0, "+")]), 1).is_zero()
        assert normal_order(fermion_operator(1, [(0, "+"), (1, "+"), (0, "+")]), 2).is_zero()

    def test_normal_order_number_operator_squared(self):
        """Test n_0^2 = n_0."""
        n0 = fermion_operator(1, [(0, "+"), (0, "-")])
        result = normal_order(n0 * n0, 1)
        assert result == n0

    def test_normal_order_matrix_fuzz(self, rng):
        """Test that normal ordering preserves Jordan-Wigner matrices."""
        n_modes = 3
        sids = list(normal_order_table(n_modes))
        for _ in range(30):
            length = int(rng.integers(1, 6))
            word = [sids[k] for k in rng.integers(0, len(sids), size=length)]
            m = fermion_operator(complex(rng.normal(), rng.normal()), word)
            result = normal_order(m, n_modes)
            assert torch.allclose(
                fermion_operator_matrix(m, n_modes),
                fermion_operator_matrix(result, n_modes),
                atol=1e-10,
            )

    def test_normal_order_idempotent(self):
        """Test that normal-ordered sums are fixed points."""
        x = fermion_operator(1, [(0, "-"), (1, "+"), (0, "+")])
        once = normal_order(x, 2)
        assert normal_order(once, 2) == once


class TestJordanWigner:
    """Tests for the Jordan-Wigner matrices."""

    def test_canonical_anticommutation(self):
        """Test {a_i, a_j^dagger} = delta_ij and {a_i, a_j} = 0."""
        n_modes = 3
        eye = torch.eye(2**n_modes, dtype=torch.complex128)
        zero = torch.zeros_like(eye)
        for i in range(n_modes):
            for j in range(n_modes):
                ai = ladder_matrix(FermionID(i, "-"), n_modes)
                aj = ladder_matrix(FermionID(j, "-"), n_modes)
                aj_dag = ladder_matrix(FermionID(j, "+"), n_modes)
                expected = eye if i == j else zero
                assert torch.allclose(_anticommutator(ai, aj_dag), expected)
                assert torch.allclose(_anticommutator(ai, aj), zero)

    def test_creation_is_adjoint(self):
        """Test that a^dagger is the conjugate transpose of a."""
        a = ladder_matrix(FermionID(1, "-"), 2)
        a_dag = ladder_matrix(FermionID(1, "+"), 2)
        assert torch.allclose(a_dag, a.conj().T)

    def test_number_operator(self):
        """Test that n_0 counts the occupation of the leftmost factor."""
        n0 = fermion_operator_matrix(fermion_operator(1, [(0, "+"), (0, "-")]), 2)
        expected = torch.diag(torch.tensor([0, 0, 1, 1], dtype=torch.complex128))
        assert torch.allclose(n0, expected)

    def test_mode_out_of_range(self):
        """Test that modes beyond n_modes raise ValueError."""
        with pytest.raises(ValueError, match="out of range"):
            ladder_matrix(FermionID(2, "+"), 2)

    def test_size_limit(self):
        """Test that large systems are rejected."""
        with pytest.raises(ValueError, match="small systems"):
            fermion_operator_matrix(fermion_operator(1, [(0, "+")]), 11)

    def test_dtype(self):
        """Test that dtype is honored."""
        matrix = fermion_operator_matrix(fermion_operator(1), 1, dtype=torch.complex64)
        assert matrix.dtype == torch.complex64
