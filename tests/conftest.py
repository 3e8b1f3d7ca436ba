"""
Common pytest fixtures for the filter tests.
"""

import numpy as np
import pytest
import quaternion


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(0)


@pytest.fixture
def random_quaternions(rng):
    """Eight random unit quaternions as a quaternion array."""
    q = rng.normal(size=(8, 4))
    q /= np.linalg.norm(q, axis=-1, keepdims=True)
    return quaternion.as_quat_array(q)
