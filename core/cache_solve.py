# core/cache_solve.py
from __future__ import annotations
from typing import Callable, Optional

import numpy as np

from core.cache_matrix import CachedMatrix
from core.exceptions import InversionError
from utils.linops import invert
from utils.logging_config import get_logger

logger = get_logger(__name__)

CACHE_HIT_MESSAGE = "getting cached data"


def cache_solve(holder: CachedMatrix,
                rhs: "Optional[np.ndarray]" = None,
                *,
                inverter: Optional[Callable[..., np.ndarray]] = None,
                on_hit: Optional[Callable[[str], None]] = None,
                **options) -> np.ndarray:
    """
    Return the inverse of the holder's matrix, computing it at most once per
    matrix value.

    Args:
        holder: The CachedMatrix to serve.
        rhs: Optional right-hand side B. When given, the solution X of
            A·X = B is returned instead of the inverse. The cache still
            stores the inverse of A.
        inverter: Inversion primitive ``inverter(matrix, **options)``;
            defaults to ``utils.linops.invert``.
        on_hit: Callback receiving the diagnostic message on a cache hit.
            Without one the hit is logged at INFO level.
        **options: Forwarded unchanged to the inversion primitive.

    Raises:
        Whatever the inversion primitive raises (InversionError for the
        default one). Nothing is cached in that case.
    """
    if inverter is None:
        inverter = invert

    with holder.lock:
        data = holder.get_matrix()
        if rhs is not None:
            # Reject a bad right-hand side before anything is cached.
            rhs = _check_rhs(rhs, data.shape)
        inverse = holder.get_inverse()
        if inverse is not None:
            if on_hit is not None:
                on_hit(CACHE_HIT_MESSAGE)
            else:
                logger.info(CACHE_HIT_MESSAGE)
        else:
            logger.debug("Cache empty; inverting %s matrix.", data.shape)
            holder.set_inverse(inverter(data, **options))
            inverse = holder.get_inverse()

    if rhs is None:
        return inverse
    return inverse @ rhs


def _check_rhs(rhs, shape) -> np.ndarray:
    rhs = np.asarray(rhs)
    if len(shape) != 2 or rhs.ndim not in (1, 2) or rhs.shape[0] != shape[0]:
        raise InversionError(
            f"Right-hand side of shape {rhs.shape} is incompatible with a {shape} matrix")
    return rhs
