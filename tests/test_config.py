"""
Tests for YAML configuration and PipelineConfig.
"""
import pytest

from outbreak_signal.common.errors import ConfigurationError
from outbreak_signal.common.paths import find_project_root
from outbreak_signal.config import (
    PipelineConfig,
    configure_logging,
    get_data_path,
    get_project_root,
    load_config,
)


def test_default_config_loads():
    config = load_config()
    assert PipelineConfig.from_mapping(config["signal"]) == PipelineConfig(3, 1, 2.0)
    assert PipelineConfig.from_mapping(config["signal_daily"]) == PipelineConfig(7, 7, 2.0)
    assert config["baseline"]["method"] in ("moving_average", "holt_winters")


def test_load_config_from_path(tmp_path):
    path = tmp_path / "custom.yaml"
    path.write_text("signal:\n  window: 4\n  lag: 2\n")
    config = load_config(str(path))
    assert PipelineConfig.from_mapping(config["signal"]) == PipelineConfig(4, 2, 2.0)


def test_load_config_empty_file(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_config(str(path)) == {}


def test_load_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "nope.yaml"))


class TestPipelineConfig:

    def test_z_defaults_to_two(self):
        assert PipelineConfig.from_mapping({"window": 3, "lag": 1}).z == 2.0

    def test_unknown_option_is_rejected(self):
        with pytest.raises(ConfigurationError) as excinfo:
            PipelineConfig.from_mapping({"window": 3, "lag": 1, "threshold": 5})
        assert excinfo.value.parameter == "signal"
        assert excinfo.value.value == ["threshold"]

    @pytest.mark.parametrize("missing", ["window", "lag"])
    def test_required_options(self, missing):
        mapping = {"window": 3, "lag": 1}
        del mapping[missing]
        with pytest.raises(ConfigurationError) as excinfo:
            PipelineConfig.from_mapping(mapping)
        assert excinfo.value.parameter == missing

    def test_missing_section(self):
        with pytest.raises(ConfigurationError):
            PipelineConfig.from_mapping(None)

    @pytest.mark.parametrize("window,lag,z,parameter", [
        (0, 1, 2.0, "window"),
        (3.0, 1, 2.0, "window"),
        (True, 1, 2.0, "window"),
        (3, -1, 2.0, "lag"),
        (3, 1, -0.5, "z"),
        (3, 1, float("inf"), "z"),
    ])
    def test_validate(self, window, lag, z, parameter):
        with pytest.raises(ConfigurationError) as excinfo:
            PipelineConfig(window, lag, z).validate()
        assert excinfo.value.parameter == parameter
        assert parameter in str(excinfo.value)

    def test_validate_normalises_z(self):
        cfg = PipelineConfig(window=3, lag=1, z=3).validate()
        assert isinstance(cfg.z, float)
        assert cfg.to_dict() == {"window": 3, "lag": 1, "z": 3.0}

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            PipelineConfig(0, 1).validate()


def test_configure_logging_rejects_unknown_level():
    with pytest.raises(ConfigurationError):
        configure_logging({"logging": {"level": "LOUD"}})


def test_configure_logging_accepts_level():
    configure_logging({"logging": {"level": "debug"}})
    configure_logging(None)


def test_paths(tmp_path):
    root = get_project_root()
    assert (root / "config" / "config_default.yaml").is_file()
    assert get_data_path("data/raw/x.csv") == root / "data" / "raw" / "x.csv"
    assert get_data_path(str(tmp_path)) == tmp_path
    # no project markers above tmp_path
    assert find_project_root(tmp_path) == tmp_path.resolve()
