"""Pytest configuration and shared fixtures for qalgebra tests.

This module provides:
- Deterministic RNG fixtures for numpy and torch
- A generic letter identifier family with a constant commutator rule
- Restoration of the global debug and tolerance settings after each test
"""

import os
from dataclasses import dataclass

import numpy as np
import pytest
import torch

from qalgebra import Element, ID, SimpleID, config


@dataclass(frozen=True, order=True)
class Letter(SimpleID):
    """Generic generator named by a single string."""

    name: str


# Scalar commutators [a, b] of letters a < b
LETTER_COMMUTATORS = {
    ("x", "y"): 1.0,
    ("x", "z"): 2.0,
    ("y", "z"): 3.0,
}


def letter_rule(id1, id2, table):
    """Exchange rule ``a b = b a + [a, b]`` with scalar commutators."""
    del table
    swapped = Element(1, ID(id2, id1))
    key = (id1.name, id2.name)
    if key in LETTER_COMMUTATORS:
        return (swapped, Element(LETTER_COMMUTATORS[key]))
    return (swapped, Element(-LETTER_COMMUTATORS[key[::-1]]))


@pytest.fixture(scope="function")
def rng() -> np.random.Generator:
    """Provide a deterministic numpy RNG for tests.

    Uses seed from TEST_RNG_SEED environment variable (default: 0).

    Returns:
        A seeded numpy.random.Generator instance.
    """
    seed = int(os.environ.get("TEST_RNG_SEED", "0"))
    return np.random.default_rng(seed)


@pytest.fixture(scope="function")
def torch_rng() -> torch.Generator:
    """Provide a deterministic CPU torch RNG for tests."""
    seed = int(os.environ.get("TEST_RNG_SEED", "0"))
    generator = torch.Generator(device="cpu")
    generator.manual_seed(seed)
    return generator


@pytest.fixture(scope="function", autouse=True)
def set_random_seeds(rng: np.random.Generator, torch_rng: torch.Generator) -> None:
    """Auto-use fixture to set global random seeds for reproducibility."""
    np.random.seed(int(os.environ.get("TEST_RNG_SEED", "0")))
    torch.manual_seed(int(os.environ.get("TEST_RNG_SEED", "0")))


@pytest.fixture(scope="function", autouse=True)
def restore_config():
    """Auto-use fixture restoring the global tolerances and debug flag."""
    tolerances = config.get_tolerances()
    debug = config.is_debug_enabled()
    yield
    config.set_tolerances(*tolerances)
    config.set_debug_enabled(debug)


@pytest.fixture
def letter():
    """The Letter identifier class."""
    return Letter


@pytest.fixture
def xyz():
    """Three letters ordered x < y < z."""
    return Letter("x"), Letter("y"), Letter("z")


@pytest.fixture
def letter_table(xyz):
    """Ordering table with positions x: 0, y: 1, z: 2."""
    return {sid: position for position, sid in enumerate(xyz)}


@pytest.fixture
def commutator_rule():
    """Exchange rule of the letters."""
    return letter_rule
