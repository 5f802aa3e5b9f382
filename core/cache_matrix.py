# core/cache_matrix.py
"""
A matrix paired with a lazily computed cache of its inverse.

The holder never computes anything itself: ``core.cache_solve.cache_solve``
fills the cache, and ``set_matrix`` empties it.
"""
from __future__ import annotations
import threading
from typing import Optional

import numpy as np

from utils.logging_config import get_logger

logger = get_logger(__name__)


def _read_only(arr: np.ndarray) -> np.ndarray:
    view = arr.view()
    view.flags.writeable = False
    return view


class CachedMatrix:
    """
    Owns a matrix and an optional cached inverse.

    Whenever the inverse is present it belongs to the current matrix; every
    ``set_matrix`` call drops it, even if the new matrix equals the old one.
    """
    __slots__ = ("_matrix", "_inverse", "lock")

    def __init__(self, matrix) -> None:
        self.lock = threading.RLock()
        self._matrix: np.ndarray = np.array(matrix)
        self._inverse: Optional[np.ndarray] = None

    def set_matrix(self, matrix) -> None:
        with self.lock:
            self._matrix = np.array(matrix)
            self._inverse = None
            logger.debug("Matrix replaced (shape %s); cached inverse cleared.", self._matrix.shape)

    def get_matrix(self) -> np.ndarray:
        return _read_only(self._matrix)

    def set_inverse(self, inverse) -> None:
        # Not checked against the matrix; callers are trusted.
        with self.lock:
            self._inverse = _read_only(np.asarray(inverse))

    def get_inverse(self) -> Optional[np.ndarray]:
        return self._inverse

    # ------------------------------------------------------------------
    # Read-only conveniences
    # ------------------------------------------------------------------
    @property
    def matrix(self) -> np.ndarray:
        return self.get_matrix()

    @property
    def inverse(self) -> Optional[np.ndarray]:
        return self._inverse

    @property
    def has_inverse(self) -> bool:
        return self._inverse is not None

    def __repr__(self):
        state = "cached" if self.has_inverse else "empty"
        return f"<CachedMatrix shape={self._matrix.shape}, inverse={state}>"
