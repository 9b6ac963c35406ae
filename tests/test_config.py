"""Tests for gateway settings and YAML config loading."""

from pathlib import Path

import pytest

from oas_gateway.config import DEFAULT_ENV_VAR, load_gateway_config, resolve_settings
from oas_gateway.gateway import OasSpecifications


def test_resolve_settings_defaults() -> None:
    settings = resolve_settings(None)
    assert settings["specifications_dir"] == "specifications"
    assert settings["environment_variable"] == DEFAULT_ENV_VAR
    assert settings["environment"] is None
    assert settings["options"] == {}


def test_resolve_settings_drops_unknown_and_none() -> None:
    settings = resolve_settings({"environment": None, "bogus": 1, "options": {"timeout": 3}})
    assert "bogus" not in settings
    assert settings["environment"] is None
    assert settings["options"] == {"timeout": 3}


def test_resolve_settings_rejects_non_mapping_options() -> None:
    with pytest.raises(ValueError, match="options must be a mapping"):
        resolve_settings({"options": ["x"]})


def test_load_gateway_config_resolves_relative_dir(tmp_path: Path) -> None:
    config = tmp_path / "gateway.yaml"
    config.write_text(
        "specifications_dir: specs\nenvironment_variable: NODE_ENV\nenvironment: staging\n"
        "options:\n  timeout: 10\n  headers:\n    X-Gateway: oas\n"
    )
    settings = load_gateway_config(config, base_dir=tmp_path)
    assert settings["specifications_dir"] == (tmp_path / "specs").resolve()
    assert settings["environment_variable"] == "NODE_ENV"
    assert settings["environment"] == "staging"
    assert settings["options"]["headers"] == {"X-Gateway": "oas"}


def test_load_gateway_config_rejects_non_mapping(tmp_path: Path) -> None:
    config = tmp_path / "gateway.yaml"
    config.write_text("- not\n- a mapping\n")
    with pytest.raises(ValueError, match="must be a mapping"):
        load_gateway_config(config)


def test_from_config_builds_gateway(specs_dir: Path, tmp_path: Path) -> None:
    config = tmp_path / "gateway.yaml"
    config.write_text("specifications_dir: specifications\nenvironment: production\n")
    gateway = OasSpecifications.from_config(config, base_dir=tmp_path)
    assert gateway.base_url("alpha") == "https://a.prod"
    assert gateway.options == {}
