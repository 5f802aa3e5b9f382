# utils/logging_config.py
import logging
from typing import Optional, Union

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def _coerce_level(level: Union[int, str]) -> int:
    if isinstance(level, str):
        value = logging.getLevelName(level.upper())
        if not isinstance(value, int):
            raise ValueError(f"Unknown logging level '{level}'")
        return value
    return level

def setup_logging(level: Union[int, str] = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Set up root logging with a console handler and optionally a file handler.

    Args:
        level: Logging level, either numeric (logging.DEBUG) or a name ("DEBUG").
        log_file: Optional path to a file for logging output.

    Returns:
        The configured root logger.
    """
    logger = logging.getLogger()
    logger.setLevel(_coerce_level(level))

    # Replace handlers so repeated calls do not duplicate output
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    ch = logging.StreamHandler()
    ch.setFormatter(formatter)
    logger.addHandler(ch)

    if log_file:
        fh = logging.FileHandler(log_file)
        fh.setFormatter(formatter)
        logger.addHandler(fh)
    return logger

def get_logger(name: str, level: Optional[Union[int, str]] = None) -> logging.Logger:
    """
    Retrieve a module logger. The level is left to propagate from the root
    logger unless one is given explicitly.
    """
    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(_coerce_level(level))
    return logger
