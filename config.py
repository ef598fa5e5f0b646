"""Runtime settings for the converter.

Precedence (highest first): explicit overrides (CLI flags / query params),
YAML config file, environment variables, built-in defaults.

Environment variables:
    GNMI_NT_BASE_URI      : subject IRI template, must contain {name}
    GNMI_NT_ALL_COUNTERS  : 0/1, emit every counter instead of inOctets/inBroadcastPkts
    GNMI_NT_LOG_DIR       : directory for the JSONL event log (unset = no event log)
    GNMI_NT_CONFIG        : default YAML config path for the CLI

YAML example:
    base_uri: "http://example.net/interfaces/{name}"
    all_counters: false
    log_dir: ./logs
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, ValidationError, field_validator

from errors import ConfigError
from ntriples import BASE_URI_FORMAT, check_base_uri

ENV_KEYS = {
    "base_uri": "GNMI_NT_BASE_URI",
    "all_counters": "GNMI_NT_ALL_COUNTERS",
    "log_dir": "GNMI_NT_LOG_DIR",
}


class Settings(BaseModel):
    base_uri: str = BASE_URI_FORMAT
    all_counters: bool = False
    log_dir: Optional[str] = None

    @field_validator("base_uri")
    @classmethod
    def _has_name_slot(cls, v: str) -> str:
        return check_base_uri(v)


def _from_env() -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for key, env in ENV_KEYS.items():
        val = os.getenv(env)
        if val not in (None, ""):
            out[key] = val
    return out


def load_yaml(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"cannot read config {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config {path} must be a mapping, got {type(data).__name__}")
    unknown = sorted(set(data) - set(Settings.model_fields))
    if unknown:
        raise ConfigError(f"unknown config keys in {path}: {', '.join(unknown)}")
    return data


def load_settings(config_path: Optional[str] = None, **overrides: Any) -> Settings:
    merged: Dict[str, Any] = _from_env()
    if config_path:
        merged.update(load_yaml(Path(config_path).expanduser()))
    merged.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return Settings(**merged)
    except ValidationError as e:
        raise ConfigError(str(e)) from e
