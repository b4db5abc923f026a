"""Spin generator identifiers."""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass

from ..algebra.ids import SimpleID
from ..exceptions import ValidationError

# Valid spin component tags
_VALID_SPIN_TAGS = ("x", "y", "z", "+", "-")

_ADJOINT_TAGS = {"x": "x", "y": "y", "z": "z", "+": "-", "-": "+"}


@dataclass(frozen=True, order=True)
class SpinID(SimpleID):
    """
    Identifier of a single spin operator S^tag acting on one orbital of one site.

    Args:
        site: Site index.
        orbital: Orbital index on the site.
        spin: Total spin S, a positive multiple of 1/2.
        tag: Component, one of "x", "y", "z", "+", "-".

    Raises:
        ValidationError: If site or orbital is not an integer, or tag or spin
            is not supported.

    Example:
        >>> SpinID(site=0, tag="+").adjoint()
        SpinID(site=0, orbital=0, spin=0.5, tag='-')
    """

    site: int = 0
    orbital: int = 0
    spin: float = 0.5
    tag: str = "z"

    def __post_init__(self) -> None:
        """Validate SpinID invariants."""
        for name in ("site", "orbital"):
            index = getattr(self, name)
            if not isinstance(index, numbers.Integral) or isinstance(index, bool):
                raise ValidationError(f"{name} must be an integer, got {index!r}")

        if self.tag not in _VALID_SPIN_TAGS:
            raise ValidationError(
                f"Invalid spin tag '{self.tag}'. Must be one of {_VALID_SPIN_TAGS}"
            )

        spin = self.spin
        if not isinstance(spin, numbers.Real) or isinstance(spin, bool) or not math.isfinite(spin):
            raise ValidationError(
                f"spin must be a positive multiple of 1/2, got {spin!r}"
            )
        object.__setattr__(self, "spin", float(spin))

        twice = 2 * self.spin
        if twice <= 0 or twice != int(twice):
            raise ValidationError(
                f"spin must be a positive multiple of 1/2, got {self.spin}"
            )

    @property
    def n_states(self) -> int:
        """Dimension 2S+1 of the local spin space."""
        return int(2 * self.spin) + 1

    def adjoint(self) -> "SpinID":
        return self.replace(tag=_ADJOINT_TAGS[self.tag])
