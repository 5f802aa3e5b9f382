# core/exceptions.py
import numpy as np


class CacheMatrixError(Exception):
    """Base exception for cachematrix errors."""
    pass

class InversionError(CacheMatrixError, np.linalg.LinAlgError):
    """Raised when a matrix cannot be inverted or a system cannot be solved."""
    pass

class ConfigError(CacheMatrixError):
    """Raised when a solver configuration is invalid or cannot be read."""
    pass
