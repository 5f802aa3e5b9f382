import numpy as np
import pytest
from core.cache_matrix import CachedMatrix
from utils.linops import invert


class CountingInverter:
    """Inversion stub that records how often it was called."""
    def __init__(self, fn=invert):
        self.fn = fn
        self.calls = 0
        self.kwargs = []

    def __call__(self, matrix, **kwargs):
        self.calls += 1
        self.kwargs.append(kwargs)
        return self.fn(matrix, **kwargs)


@pytest.fixture
def counting_inverter():
    return CountingInverter()

@pytest.fixture
def diag_holder():
    return CachedMatrix(np.array([[2.0, 0.0], [0.0, 2.0]]))

@pytest.fixture
def singular_holder():
    return CachedMatrix(np.array([[1.0, 2.0], [2.0, 4.0]]))

@pytest.fixture
def dummy_logger(caplog):
    caplog.set_level("DEBUG")
    return caplog
