"""Dense matrix representations of spin operators."""

from __future__ import annotations

import math
from typing import Mapping, Optional, Tuple, Union

import torch

from ..algebra.elements import Element, Elements
from ..exceptions import DomainError
from .ids import SpinID

# Safety limit on the dimension of dense representations
_MAX_DIM = 4096

SiteKey = Tuple[int, int]


def spin_matrix(
    sid: SpinID,
    dtype: torch.dtype | None = None,
    device: torch.device | None = None,
) -> torch.Tensor:
    """
    Matrix of a single spin operator.

    The basis is ordered by ascending magnetic quantum number
    ``m = -S, -S+1, ..., S``.

    Args:
        sid: Spin id.
        dtype: Complex dtype for the matrix. Defaults to torch.complex128.
        device: PyTorch device. Defaults to torch.device("cpu").

    Returns:
        A (2S+1, 2S+1) complex tensor.
    """
    if dtype is None:
        dtype = torch.complex128
    if device is None:
        device = torch.device("cpu")

    s = sid.spin
    m = torch.arange(sid.n_states, dtype=torch.float64) - s
    ladder = torch.sqrt(s * (s + 1) - m[:-1] * (m[:-1] + 1))
    plus = torch.diag(ladder, diagonal=-1).to(torch.complex128)
    minus = plus.T.contiguous()

    if sid.tag == "x":
        result = (plus + minus) / 2
    elif sid.tag == "y":
        result = (plus - minus) / 2j
    elif sid.tag == "z":
        result = torch.diag(m).to(torch.complex128)
    elif sid.tag == "+":
        result = plus
    else:
        result = minus
    return result.contiguous().to(dtype=dtype, device=device)


def _collect_sites(terms) -> dict:
    sites: dict = {}
    for m in terms:
        for sid in m.id:
            key = (sid.site, sid.orbital)
            if sites.setdefault(key, sid.spin) != sid.spin:
                raise DomainError(
                    f"Inconsistent spins {sites[key]} and {sid.spin} on site/orbital {key}"
                )
    return dict(sorted(sites.items()))


def spin_operator_matrix(
    x: Union[Element, Elements],
    sites: Optional[Mapping[SiteKey, float]] = None,
    dtype: torch.dtype | None = None,
    device: torch.device | None = None,
) -> torch.Tensor:
    """
    Dense matrix of a spin element or a sum of spin elements.

    The full space is the Kronecker product of the local spaces of the given
    ``(site, orbital)`` keys, in the iteration order of ``sites``.

    WARNING: only intended for small systems and testing purposes.

    Args:
        x: Element or Elements built from SpinIDs.
        sites: Map from ``(site, orbital)`` to its spin. Defaults to the
            keys occurring in ``x``, sorted.
        dtype: Complex dtype. Defaults to torch.complex128.
        device: PyTorch device. Defaults to torch.device("cpu").

    Returns:
        A square complex tensor.

    Raises:
        ValueError: If the dimension exceeds the safety limit or a generator
            acts on a site/orbital missing from ``sites``.
        DomainError: If a generator disagrees with the spin ``sites`` assigns
            to its site/orbital.
    """
    if dtype is None:
        dtype = torch.complex128
    if device is None:
        device = torch.device("cpu")

    terms = [x] if isinstance(x, Element) else list(x.values())
    if sites is None:
        sites = _collect_sites(terms)

    keys = list(sites)
    dims = [int(2 * sites[key]) + 1 for key in keys]
    dim = math.prod(dims)
    if dim > _MAX_DIM:
        raise ValueError(
            f"spin_operator_matrix() is only intended for small systems (dim <= {_MAX_DIM}). Got dim = {dim}."
        )

    def embed(sid: SpinID) -> torch.Tensor:
        key = (sid.site, sid.orbital)
        if key not in sites:
            raise ValueError(f"Spin id {sid!r} acts on {key}, which is not in sites")
        if sites[key] != sid.spin:
            raise DomainError(
                f"Spin id {sid!r} has spin {sid.spin}, but sites assigns {sites[key]} to {key}"
            )
        result = torch.ones((1, 1), dtype=torch.complex128)
        for other, local_dim in zip(keys, dims):
            if other == key:
                factor = spin_matrix(sid)
            else:
                factor = torch.eye(local_dim, dtype=torch.complex128)
            result = torch.kron(result, factor)
        return result

    matrix = torch.zeros((dim, dim), dtype=torch.complex128)
    for m in terms:
        term_matrix = torch.eye(dim, dtype=torch.complex128)
        for sid in m.id:
            term_matrix = term_matrix @ embed(sid)
        matrix = matrix + complex(m.value) * term_matrix
    return matrix.to(dtype=dtype, device=device)


__all__ = ["spin_matrix", "spin_operator_matrix"]
