"""Pytest configuration and shared fixtures for econoptim tests.

This module provides:
- Deterministic RNG fixtures for numpy and torch
- Small objective functions shared across the optimizer tests
"""

import os

import numpy as np
import pytest
import torch


def _seed() -> int:
    return int(os.environ.get("TEST_RNG_SEED", "0"))


@pytest.fixture(scope="function")
def rng() -> np.random.Generator:
    """Provide a deterministic numpy RNG for tests.

    Uses seed from TEST_RNG_SEED environment variable (default: 0).
    """
    return np.random.default_rng(_seed())


@pytest.fixture(scope="function", autouse=True)
def set_random_seeds() -> None:
    """Set global numpy and torch seeds before every test."""
    np.random.seed(_seed())
    torch.manual_seed(_seed())


@pytest.fixture
def poisson_data() -> tuple[np.ndarray, np.ndarray]:
    """Five-observation count dataset with an intercept column."""
    X = np.array(
        [
            [1.0, 0.0],
            [1.0, 0.5],
            [1.0, 1.0],
            [1.0, 1.5],
            [1.0, 2.0],
        ]
    )
    y = np.array([1.0, 1.0, 3.0, 4.0, 7.0])
    return X, y
