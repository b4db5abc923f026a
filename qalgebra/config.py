"""Runtime configuration for qalgebra: comparison tolerances and debug mode."""

from __future__ import annotations

import math
import os
from contextlib import contextmanager
from typing import Iterator, Optional, Tuple

_ATOL_ENV_VAR = "QALGEBRA_ATOL"
_RTOL_ENV_VAR = "QALGEBRA_RTOL"
_DEBUG_ENV_VAR = "QALGEBRA_DEBUG"

DEFAULT_ATOL = 5e-14
DEFAULT_RTOL = math.sqrt(DEFAULT_ATOL)

_atol: float = float(os.getenv(_ATOL_ENV_VAR, str(DEFAULT_ATOL)))
_rtol: float = float(os.getenv(_RTOL_ENV_VAR, str(DEFAULT_RTOL)))
_debug_enabled: bool = os.getenv(_DEBUG_ENV_VAR, "0").lower() in (
    "1",
    "true",
    "yes",
    "on",
)


def get_tolerances() -> Tuple[float, float]:
    """
    Return the default ``(atol, rtol)`` used by approximate comparisons.

    Returns
    -------
    tuple of float
        Absolute and relative tolerance.
    """
    return _atol, _rtol


def set_tolerances(atol: Optional[float] = None, rtol: Optional[float] = None) -> None:
    """
    Globally set the default tolerances for approximate comparisons.

    Parameters
    ----------
    atol:
        New absolute tolerance. Unchanged if None.
    rtol:
        New relative tolerance. Unchanged if None.

    Raises
    ------
    ValueError
        If a tolerance is negative.
    """
    global _atol, _rtol
    if atol is not None:
        if atol < 0:
            raise ValueError(f"atol must be >= 0, got {atol}")
        _atol = float(atol)
    if rtol is not None:
        if rtol < 0:
            raise ValueError(f"rtol must be >= 0, got {rtol}")
        _rtol = float(rtol)


@contextmanager
def tolerance_context(
    atol: Optional[float] = None, rtol: Optional[float] = None
) -> Iterator[None]:
    """
    Context manager to temporarily override the default tolerances.

    Example
    -------
    >>> with tolerance_context(atol=1e-8):
    ...     pass
    """
    global _atol, _rtol
    prev = (_atol, _rtol)
    set_tolerances(atol, rtol)
    try:
        yield
    finally:
        _atol, _rtol = prev


def is_debug_enabled() -> bool:
    """
    Return whether qalgebra debug mode is currently enabled.

    In debug mode containers re-check their invariants after every mutation
    and the canonicalizer logs each rewrite. Debug mode can be toggled via
    set_debug_enabled(...) or the QALGEBRA_DEBUG environment variable.
    """
    return _debug_enabled


def set_debug_enabled(enabled: bool) -> None:
    """Globally enable or disable qalgebra debug mode."""
    global _debug_enabled
    _debug_enabled = bool(enabled)


@contextmanager
def debug_context(enabled: bool = True) -> Iterator[None]:
    """
    Context manager to temporarily enable or disable debug mode.

    Example
    -------
    >>> with debug_context(True):
    ...     pass
    """
    global _debug_enabled
    prev = _debug_enabled
    _debug_enabled = bool(enabled)
    try:
        yield
    finally:
        _debug_enabled = prev


__all__ = [
    "DEFAULT_ATOL",
    "DEFAULT_RTOL",
    "get_tolerances",
    "set_tolerances",
    "tolerance_context",
    "is_debug_enabled",
    "set_debug_enabled",
    "debug_context",
]
