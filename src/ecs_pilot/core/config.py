"""User configuration persisted as JSON in the home directory."""

from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import asdict, dataclass, replace
from pathlib import Path
from typing import Any

from .errors import ErrorCode, ValidationFailure

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "ECS_PILOT_CONFIG"
DEFAULT_CONFIG_PATH = Path.home() / ".ecs-pilot.json"
DEFAULT_REGION = "us-east-1"

KNOWN_REGIONS = (
    "us-east-1",
    "us-east-2",
    "us-west-1",
    "us-west-2",
    "eu-west-1",
    "eu-west-2",
    "eu-west-3",
    "eu-central-1",
    "eu-north-1",
    "ap-southeast-1",
    "ap-southeast-2",
    "ap-northeast-1",
    "ap-northeast-2",
    "ap-south-1",
    "ca-central-1",
    "sa-east-1",
)

_REGION_PATTERN = re.compile(r"^[a-z]{2}(-gov|-iso[a-z]*)?-[a-z]+-\d+$")

# Keys that may be changed with `ecs-pilot config set`
PERSISTED_KEYS = ("profile", "region", "default_cluster", "exec_command")


@dataclass(frozen=True)
class Settings:
    profile: str | None = None
    region: str | None = None
    default_cluster: str | None = None
    exec_command: str = "/bin/sh"
    verbose: bool = False
    quiet: bool = False

    def persisted(self) -> dict[str, Any]:
        return {key: value for key, value in asdict(self).items() if key in PERSISTED_KEYS}


def get_config_path(path: Path | str | None = None) -> Path:
    if path:
        return Path(path)
    env_path = os.environ.get(CONFIG_ENV_VAR)
    return Path(env_path) if env_path else DEFAULT_CONFIG_PATH


def validate_region(region: str) -> str:
    if not isinstance(region, str) or not _REGION_PATTERN.match(region):
        raise ValidationFailure(f"'{region}' is not a valid AWS region", ErrorCode.AWS_REGION_INVALID, value=region)
    return region


def _check_entries(data: dict[str, Any]) -> tuple[dict[str, Any], list[str]]:
    """Split stored values into usable ones and problems; unknown keys are ignored."""
    values: dict[str, Any] = {}
    problems = []
    for key in PERSISTED_KEYS:
        if key not in data:
            continue
        value = data[key]
        if value is None and key != "exec_command":
            values[key] = None
        elif not isinstance(value, str) or not value:
            problems.append(f"'{key}' must be a non-empty string, got {value!r}")
        elif key == "region" and not _REGION_PATTERN.match(value):
            problems.append(f"'{value}' is not a valid AWS region")
        else:
            values[key] = value
    return values, problems


def _load_config_file(path: Path) -> tuple[dict[str, Any], list[str]]:
    if not path.exists():
        return {}, []

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        return {}, [f"could not be read: {e}"]

    if not isinstance(data, dict):
        return {}, ["does not contain an object"]

    return _check_entries(data)


def _read_config_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        logger.debug("Configuration file %s not found, using defaults", path)

    values, problems = _load_config_file(path)
    for problem in problems:
        logger.warning("Configuration file %s: %s, using the default instead", path, problem)
    return values


def config_problems(path: Path | str | None = None) -> list[str]:
    """Problems found in the stored configuration; each one falls back to its default when loading."""
    return _load_config_file(get_config_path(path))[1]


def load_settings(path: Path | str | None = None, **overrides: Any) -> Settings:
    """Load settings from disk and apply non-None overrides (CLI flags win).

    Bad stored values are dropped with a warning; a bad region override raises ValidationFailure.
    """
    settings = Settings(**_read_config_file(get_config_path(path)))

    if overrides.get("region") is not None:
        validate_region(overrides["region"])
    return replace(settings, **{key: value for key, value in overrides.items() if value is not None})


def save_settings(settings: Settings, path: Path | str | None = None) -> Path:
    config_path = get_config_path(path)
    config_path.write_text(json.dumps(settings.persisted(), indent=2) + "\n", encoding="utf-8")
    logger.debug("Configuration saved to %s", config_path)
    return config_path


def update_setting(key: str, value: str | None, path: Path | str | None = None) -> Settings:
    """Persist a single key; an empty value clears it back to its default."""
    if key not in PERSISTED_KEYS:
        raise ValidationFailure(f"Unknown setting '{key}'. Choose one of: {', '.join(PERSISTED_KEYS)}", value=key)

    current = load_settings(path)
    if not value:
        default = Settings()
        updated = replace(current, **{key: getattr(default, key)})
    else:
        if key == "region":
            validate_region(value)
        updated = replace(current, **{key: value})

    save_settings(updated, path)
    return updated


def reset_settings(path: Path | str | None = None) -> Settings:
    settings = Settings()
    save_settings(settings, path)
    return settings
