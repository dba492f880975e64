"""Tests for configuration loading and environment overrides."""

from pathlib import Path

import pytest
import yaml

from officepilot.config import ConfigManager


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "OFFICEPILOT_SERVER_PORT",
        "OFFICEPILOT_SERVER_HOST",
        "OFFICEPILOT_DATA_DIR",
        "OFFICEPILOT_CATALOG_FILE",
        "OFFICEPILOT_LOG_LEVEL",
        "OFFICEPILOT_EXECUTION_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults_when_file_missing(tmp_path: Path) -> None:
    config = ConfigManager(tmp_path / "config.yaml").load()

    assert config.server.port == 8400
    assert config.paths.catalog_file is None
    assert config.paths.logs_dir == config.paths.data_dir / "logs"
    assert config.advanced.execution_timeout == 3600


def test_values_loaded_from_yaml(tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    with open(config_path, "w", encoding="utf-8") as f:
        yaml.dump(
            {
                "paths": {"data_dir": str(tmp_path / "data"), "catalog_file": str(tmp_path / "catalog.json")},
                "deployment": {"company_name": "Contoso"},
                "advanced": {"execution_timeout": 600},
            },
            f,
        )

    config = ConfigManager(config_path).load()

    assert config.paths.logs_dir == tmp_path / "data" / "logs"
    assert config.paths.catalog_file == tmp_path / "catalog.json"
    assert config.deployment.company_name == "Contoso"
    assert config.advanced.execution_timeout == 600


def test_environment_overrides(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OFFICEPILOT_SERVER_PORT", "9000")
    monkeypatch.setenv("OFFICEPILOT_DATA_DIR", str(tmp_path / "state"))
    monkeypatch.setenv("OFFICEPILOT_CATALOG_FILE", str(tmp_path / "custom.json"))
    monkeypatch.setenv("OFFICEPILOT_LOG_LEVEL", "debug")
    monkeypatch.setenv("OFFICEPILOT_EXECUTION_TIMEOUT", "120")

    config = ConfigManager(tmp_path / "config.yaml").load()

    assert config.server.port == 9000
    assert config.paths.logs_dir == tmp_path / "state" / "logs"
    assert config.paths.catalog_file == tmp_path / "custom.json"
    assert config.advanced.log_level == "DEBUG"
    assert config.advanced.execution_timeout == 120


def test_unknown_log_level_ignored(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OFFICEPILOT_LOG_LEVEL", "verbose")
    assert ConfigManager(tmp_path / "config.yaml").load().advanced.log_level == "INFO"


def test_config_path_from_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "custom.yaml"
    monkeypatch.setenv("OFFICEPILOT_CONFIG_PATH", str(config_path))
    assert ConfigManager().config_path == config_path


def test_save_round_trip(tmp_path: Path) -> None:
    manager = ConfigManager(tmp_path / "nested" / "config.yaml")
    config = manager.load()
    config.server.port = 8500
    config.deployment.user_name = "IT"

    manager.save(config)
    reloaded = manager.reload()

    assert reloaded.server.port == 8500
    assert reloaded.deployment.user_name == "IT"
