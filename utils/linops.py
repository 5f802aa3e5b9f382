# utils/linops.py
from __future__ import annotations
import numpy as np
import scipy.linalg as la

from core.exceptions import InversionError
from utils.logging_config import get_logger

logger = get_logger(__name__)

INVERSION_METHODS = ("lu", "cholesky", "direct")


def _as_square(A, check_finite: bool = True) -> np.ndarray:
    A = np.asarray(A)
    if A.ndim != 2 or A.shape[0] != A.shape[1]:
        raise InversionError(f"Matrix must be square (n x n), got shape {A.shape}")
    if check_finite and not np.all(np.isfinite(A)):
        raise InversionError("Matrix contains non-finite values")
    return A


class LinearOperator:
    """
    Wraps a dense LU or Cholesky factorisation and exposes a .solve(b) method.
    """
    __slots__ = ("_solve", "shape")

    def __init__(self, A: "np.ndarray", assume_posdef=False, check_finite=True):
        A = _as_square(A, check_finite)
        self.shape = A.shape
        try:
            if assume_posdef:
                c, lower = la.cho_factor(A, lower=True, check_finite=False)   # dense Cholesky
                self._solve = lambda b: la.cho_solve((c, lower), b, check_finite=False)
            else:
                lu, piv = la.lu_factor(A, check_finite=False)                 # dense LU
                # lu_factor only warns on an exact zero pivot
                if np.any(np.diag(lu) == 0):
                    raise InversionError("Matrix is singular (non-invertible)")
                self._solve = lambda b: la.lu_solve((lu, piv), b, check_finite=False)
        except np.linalg.LinAlgError as exc:
            if isinstance(exc, InversionError):
                raise
            raise InversionError(f"Factorisation failed: {exc}") from exc

    def __call__(self, rhs):
        return self.solve(rhs)

    def solve(self, rhs: "np.ndarray") -> "np.ndarray":
        rhs = np.asarray(rhs)
        if rhs.ndim not in (1, 2) or rhs.shape[0] != self.shape[0]:
            raise InversionError(
                f"Right-hand side of shape {rhs.shape} is incompatible with a {self.shape} matrix")
        return self._solve(rhs)


def invert(A, method: str = "lu", check_finite: bool = True) -> np.ndarray:
    """
    Invert a square matrix.

    Args:
        A: Square matrix (anything ``np.asarray`` accepts).
        method: 'lu' (default), 'cholesky' for symmetric positive definite
            matrices, or 'direct' for ``numpy.linalg.inv``.
        check_finite: Reject matrices containing inf or NaN.

    Returns:
        The inverse of A.

    Raises:
        InversionError: if A is not square, is singular, or the method is unknown.
    """
    if method not in INVERSION_METHODS:
        raise InversionError(f"Unknown method: {method}")
    try:
        A = _as_square(A, check_finite)
        if method == "direct":
            try:
                return np.linalg.inv(A)
            except np.linalg.LinAlgError as exc:
                raise InversionError(f"Matrix is singular (non-invertible): {exc}") from exc
        solver = LinearOperator(A, assume_posdef=(method == "cholesky"), check_finite=False)
        return solver.solve(np.identity(A.shape[0], dtype=np.result_type(A.dtype, float)))
    except InversionError as exc:
        logger.error("Inversion (%s) failed: %s", method, exc)
        raise
