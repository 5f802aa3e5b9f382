# inout/config_parser.py
import functools
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import numpy as np
import yaml
from cerberus import Validator

from core.exceptions import ConfigError
from utils.linops import INVERSION_METHODS, invert
from utils.logging_config import get_logger, setup_logging

logger = get_logger(__name__)

# Define a schema for the solver configuration.
CONFIG_SCHEMA: Dict[str, Any] = {
    'solver': {
        'type': 'dict',
        'required': False,
        'schema': {
            'method': {
                'type': 'string',
                'required': False,
                'allowed': list(INVERSION_METHODS),
            },
            'check_finite': {
                'type': 'boolean',
                'required': False,
            },
        },
    },
    'logging': {
        'type': 'dict',
        'required': False,
        'schema': {
            'level': {
                'type': 'string',
                'required': False,
                'allowed': ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                'coerce': lambda v: v.upper() if isinstance(v, str) else v,
            },
            'file': {
                'type': 'string',
                'required': False,
                'nullable': True,
            },
        },
    },
}


@dataclass(frozen=True)
class SolverConfig:
    method: str = "lu"
    check_finite: bool = True
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "SolverConfig":
        """Validate a raw configuration mapping and build a SolverConfig."""
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration must be a mapping, got {type(data).__name__}")
        v = Validator(CONFIG_SCHEMA)
        if not v.validate(data):
            logger.error("Solver configuration validation failed: %s", v.errors)
            raise ConfigError(f"Invalid solver configuration: {v.errors}")
        doc = v.document
        solver = doc.get('solver') or {}
        logging_cfg = doc.get('logging') or {}
        return cls(
            method=solver.get('method', cls.method),
            check_finite=solver.get('check_finite', cls.check_finite),
            log_level=logging_cfg.get('level', cls.log_level),
            log_file=logging_cfg.get('file', cls.log_file),
        )


def load_solver_config(path: str) -> SolverConfig:
    """
    Load and validate a YAML solver configuration file.

    Raises:
        ConfigError: if the file cannot be read, is not valid YAML, or fails
            schema validation.
    """
    try:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read configuration '{path}': {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Malformed YAML in '{path}': {e}") from e
    config = SolverConfig.from_dict(data)
    logger.debug("Loaded solver configuration from %s: %s", path, config)
    return config


def make_inverter(config: SolverConfig) -> Callable[..., np.ndarray]:
    """Return an inversion primitive bound to the configured method."""
    return functools.partial(invert, method=config.method, check_finite=config.check_finite)


def configure_logging(config: SolverConfig) -> logging.Logger:
    """Apply the logging section of a SolverConfig to the root logger."""
    return setup_logging(level=config.log_level, log_file=config.log_file)
