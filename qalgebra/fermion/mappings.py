"""Jordan-Wigner matrix representation of fermionic operators."""

from __future__ import annotations

from typing import Union

import torch

from ..algebra.elements import Element, Elements
from .operators import FermionID

# Safety limit on the number of modes for dense representations
_MAX_MODES = 10


def _local_matrices() -> dict[str, torch.Tensor]:
    # Occupation basis (|0>, |1>)
    return {
        "I": torch.eye(2, dtype=torch.complex128),
        "Z": torch.tensor([[1.0, 0.0], [0.0, -1.0]], dtype=torch.complex128),
        "-": torch.tensor([[0.0, 1.0], [0.0, 0.0]], dtype=torch.complex128),
        "+": torch.tensor([[0.0, 0.0], [1.0, 0.0]], dtype=torch.complex128),
    }


def ladder_matrix(sid: FermionID, n_modes: int) -> torch.Tensor:
    """
    Jordan-Wigner matrix of a single ladder operator.

        a_j = Z_0 ⊗ ... ⊗ Z_{j-1} ⊗ a ⊗ I_{j+1} ⊗ ... ⊗ I_{n-1}

    Mode 0 is the leftmost Kronecker factor.

    Parameters
    ----------
    sid:
        Ladder operator.
    n_modes:
        Total number of modes.

    Returns
    -------
    torch.Tensor
        A (2**n_modes, 2**n_modes) complex128 tensor.
    """
    if sid.mode >= n_modes:
        raise ValueError(f"Mode {sid.mode} is out of range for {n_modes} modes")
    local = _local_matrices()
    result = torch.ones((1, 1), dtype=torch.complex128)
    for mode in range(n_modes):
        if mode < sid.mode:
            factor = local["Z"]
        elif mode == sid.mode:
            factor = local[sid.op]
        else:
            factor = local["I"]
        result = torch.kron(result, factor)
    return result


def fermion_operator_matrix(
    x: Union[Element, Elements],
    n_modes: int,
    dtype: torch.dtype | None = None,
    device: torch.device | None = None,
) -> torch.Tensor:
    """
    Dense Jordan-Wigner matrix of a fermionic element or sum of elements.

    WARNING: only intended for small systems (n_modes <= 10) and testing.

    Parameters
    ----------
    x:
        Element or Elements built from FermionIDs.
    n_modes:
        Number of modes.
    dtype:
        Complex dtype. Defaults to torch.complex128.
    device:
        PyTorch device. Defaults to torch.device("cpu").

    Returns
    -------
    torch.Tensor
        A (2**n_modes, 2**n_modes) complex tensor.

    Raises
    ------
    ValueError:
        If n_modes exceeds the safety limit or a mode is out of range.
    """
    if dtype is None:
        dtype = torch.complex128
    if device is None:
        device = torch.device("cpu")

    if n_modes > _MAX_MODES:
        raise ValueError(
            f"fermion_operator_matrix() is only intended for small systems (n_modes <= {_MAX_MODES}). "
            f"Got n_modes = {n_modes}."
        )

    dim = 2**n_modes
    terms = [x] if isinstance(x, Element) else list(x.values())
    matrix = torch.zeros((dim, dim), dtype=torch.complex128)
    for m in terms:
        term_matrix = torch.eye(dim, dtype=torch.complex128)
        for sid in m.id:
            term_matrix = term_matrix @ ladder_matrix(sid, n_modes)
        matrix = matrix + complex(m.value) * term_matrix
    return matrix.to(dtype=dtype, device=device)


__all__ = ["ladder_matrix", "fermion_operator_matrix"]
