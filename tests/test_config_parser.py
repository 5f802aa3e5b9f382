import logging
import numpy as np
import pytest
from core.cache_matrix import CachedMatrix
from core.cache_solve import cache_solve
from core.exceptions import ConfigError
from inout.config_parser import (SolverConfig, load_solver_config, make_inverter,
                                 configure_logging)

@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "solver.yaml"
    path.write_text(
        "solver:\n"
        "  method: cholesky\n"
        "  check_finite: false\n"
        "logging:\n"
        "  level: debug\n"
    )
    return path

def test_defaults():
    config = SolverConfig.from_dict(None)
    assert config == SolverConfig()
    assert config.method == "lu"
    assert config.check_finite is True
    assert config.log_level == "INFO"
    assert config.log_file is None

def test_load_yaml(config_file):
    config = load_solver_config(str(config_file))
    assert config.method == "cholesky"
    assert config.check_finite is False
    assert config.log_level == "DEBUG"

def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_solver_config(str(path)) == SolverConfig()

@pytest.mark.parametrize("data", [
    {"solver": {"method": "gauss"}},
    {"solver": {"check_finite": "yes"}},
    {"logging": {"level": "LOUD"}},
    {"unknown": 1},
])
def test_invalid_config(data):
    with pytest.raises(ConfigError, match="Invalid solver configuration"):
        SolverConfig.from_dict(data)

def test_non_mapping_config():
    with pytest.raises(ConfigError, match="mapping"):
        SolverConfig.from_dict(["lu"])

@pytest.mark.parametrize("data", [[], 0, "", False])
def test_falsy_non_mapping_config_rejected(data):
    with pytest.raises(ConfigError, match="mapping"):
        SolverConfig.from_dict(data)

def test_yaml_scalar_document_rejected(tmp_path):
    path = tmp_path / "scalar.yaml"
    path.write_text("false\n")
    with pytest.raises(ConfigError, match="mapping"):
        load_solver_config(str(path))

def test_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="Cannot read"):
        load_solver_config(str(tmp_path / "nope.yaml"))

def test_malformed_yaml(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("solver: [unclosed\n")
    with pytest.raises(ConfigError, match="Malformed YAML"):
        load_solver_config(str(path))

def test_make_inverter_drives_cache_solve(config_file):
    inverter = make_inverter(load_solver_config(str(config_file)))
    A = np.array([[4.0, 1.0], [1.0, 3.0]])
    inv = cache_solve(CachedMatrix(A), inverter=inverter)
    np.testing.assert_allclose(A @ inv, np.eye(2), atol=1e-12)
    assert inverter.keywords == {"method": "cholesky", "check_finite": False}

def test_configure_logging(tmp_path):
    log_file = tmp_path / "solver.log"
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        logger = configure_logging(SolverConfig(log_level="WARNING", log_file=str(log_file)))
        assert logger is root
        assert logger.level == logging.WARNING
        logging.getLogger("core.cache_solve").warning("written to file")
        for h in logger.handlers:
            h.flush()
        assert "written to file" in log_file.read_text()
    finally:
        for h in root.handlers:
            h.close()
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
