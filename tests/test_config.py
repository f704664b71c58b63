"""Tests for the persisted user configuration."""

import json

import pytest

from ecs_pilot.core.config import (
    CONFIG_ENV_VAR,
    Settings,
    config_problems,
    get_config_path,
    load_settings,
    reset_settings,
    save_settings,
    update_setting,
    validate_region,
)
from ecs_pilot.core.errors import ErrorCode, ValidationFailure


@pytest.fixture
def config_path(tmp_path):
    return tmp_path / "ecs-pilot.json"


def test_missing_file_gives_defaults(config_path):
    settings = load_settings(config_path)

    assert settings == Settings()
    assert settings.exec_command == "/bin/sh"


def test_load_reads_known_keys_only(config_path):
    config_path.write_text(json.dumps({"region": "eu-west-1", "default_cluster": "production", "verbose": True}))

    settings = load_settings(config_path)

    assert settings.region == "eu-west-1"
    assert settings.default_cluster == "production"
    assert settings.verbose is False


def test_invalid_json_falls_back_to_defaults(config_path):
    config_path.write_text("{not json")

    assert load_settings(config_path) == Settings()


def test_non_object_falls_back_to_defaults(config_path):
    config_path.write_text("[1, 2, 3]")

    assert load_settings(config_path) == Settings()


def test_overrides_win_over_file(config_path):
    config_path.write_text(json.dumps({"profile": "dev", "region": "eu-west-1"}))

    settings = load_settings(config_path, profile="prod", region=None, verbose=True)

    assert settings.profile == "prod"
    assert settings.region == "eu-west-1"
    assert settings.verbose is True


def test_invalid_region_override_is_rejected(config_path):
    with pytest.raises(ValidationFailure) as exc_info:
        load_settings(config_path, region="moon-base-1a")

    assert exc_info.value.code is ErrorCode.AWS_REGION_INVALID


def test_validate_region_accepts_gov_regions():
    assert validate_region("us-gov-west-1") == "us-gov-west-1"


def test_save_writes_persisted_keys(config_path):
    save_settings(Settings(profile="dev", verbose=True), config_path)

    assert json.loads(config_path.read_text()) == {
        "profile": "dev",
        "region": None,
        "default_cluster": None,
        "exec_command": "/bin/sh",
    }


def test_update_setting_persists(config_path):
    update_setting("default_cluster", "production", config_path)

    assert load_settings(config_path).default_cluster == "production"


def test_update_setting_with_empty_value_resets_key(config_path):
    update_setting("exec_command", "/bin/bash", config_path)

    updated = update_setting("exec_command", "", config_path)

    assert updated.exec_command == "/bin/sh"


def test_update_setting_rejects_unknown_key(config_path):
    with pytest.raises(ValidationFailure):
        update_setting("colour", "blue", config_path)


def test_update_setting_validates_region(config_path):
    with pytest.raises(ValidationFailure):
        update_setting("region", "nowhere", config_path)
    assert not config_path.exists()


def test_reset_settings(config_path):
    update_setting("profile", "dev", config_path)

    assert reset_settings(config_path) == Settings()
    assert load_settings(config_path).profile is None


def test_config_path_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "custom.json"))

    assert get_config_path() == tmp_path / "custom.json"


def test_bad_stored_region_is_dropped(config_path):
    config_path.write_text(json.dumps({"region": "mars", "profile": "dev"}))

    settings = load_settings(config_path)

    assert settings.region is None
    assert settings.profile == "dev"


def test_bad_stored_region_can_be_repaired(config_path):
    config_path.write_text(json.dumps({"region": "mars"}))

    updated = update_setting("region", "eu-west-1", config_path)

    assert updated.region == "eu-west-1"
    assert json.loads(config_path.read_text())["region"] == "eu-west-1"


def test_reset_ignores_broken_file(config_path):
    config_path.write_text(json.dumps({"region": "mars"}))

    assert reset_settings(config_path) == Settings()
    assert json.loads(config_path.read_text())["region"] is None


def test_stored_values_of_the_wrong_type_fall_back(config_path):
    config_path.write_text(json.dumps({"exec_command": None, "region": 42, "default_cluster": ["a"]}))

    settings = load_settings(config_path)

    assert settings.exec_command == "/bin/sh"
    assert settings.region is None
    assert settings.default_cluster is None
    assert len(config_problems(config_path)) == 3


def test_config_problems_empty_for_valid_file(config_path):
    config_path.write_text(json.dumps({"region": "eu-west-1", "profile": None}))

    assert config_problems(config_path) == []
