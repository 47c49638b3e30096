"""Configuration loader for the JumpServer provider."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .errors import ConfigurationError

DEFAULT_TIMEOUT = 30

ENV_MAP = {
    "base_url": "JUMP_SERVER_BASE_URL",
    "username": "JUMP_SERVER_USERNAME",
    "password": "JUMP_SERVER_PASSWORD",
    "token": "JUMP_SERVER_TOKEN",
    "timeout": "JUMP_SERVER_TIMEOUT",
}

REQUIRED_KEYS = ("base_url", "username", "password")

_MISSING_HELP = {
    "base_url": "JumpServer API base URL",
    "username": "JumpServer API username",
    "password": "JumpServer API password",
}


@dataclass(frozen=True)
class ProviderConfig:
    base_url: str
    username: str
    password: str
    token: Optional[str] = None
    timeout: int = DEFAULT_TIMEOUT

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProviderConfig":
        return cls(
            base_url=str(data["base_url"]).rstrip("/"),
            username=str(data["username"]),
            password=str(data["password"]),
            token=data.get("token") or None,
            timeout=int(data.get("timeout") or DEFAULT_TIMEOUT),
        )

    def __repr__(self) -> str:
        return (
            f"ProviderConfig(base_url={self.base_url!r}, username={self.username!r}, "
            f"password='***', token={'configured' if self.token else 'missing'}, "
            f"timeout={self.timeout})"
        )


def load_yaml(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


def merge_env_fallbacks(config_data: Dict[str, Any]) -> Dict[str, Any]:
    """Fill keys that are missing or empty from their environment variables.

    Explicit configuration always wins; the environment is only a fallback.
    """
    merged = dict(config_data)
    for key, env_name in ENV_MAP.items():
        if merged.get(key) not in (None, ""):
            continue
        value = os.environ.get(env_name)
        if value:
            merged[key] = value
    return merged


def validate_config(data: Dict[str, Any]) -> None:
    missing = [key for key in REQUIRED_KEYS if not data.get(key)]
    if missing:
        details = "; ".join(
            f"missing or empty value for the {_MISSING_HELP[key]}. "
            f"Set {key} in the configuration or use the {ENV_MAP[key]} environment variable"
            for key in missing
        )
        raise ConfigurationError(f"Cannot create the JumpServer API client: {details}")

    timeout = data.get("timeout")
    if timeout not in (None, ""):
        try:
            if int(timeout) <= 0:
                raise ValueError
        except (TypeError, ValueError):
            raise ConfigurationError(f"timeout must be a positive integer, got {timeout!r}") from None


def load_config(
    config_path: Optional[str | Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> ProviderConfig:
    """Build a ProviderConfig from an optional YAML file, explicit overrides and env fallbacks."""
    data: Dict[str, Any] = {}
    if config_path is not None:
        path = Path(config_path)
        if not path.exists():
            raise ConfigurationError(f"Config file not found: {path}")
        data = load_yaml(path)

    for key, value in (overrides or {}).items():
        if value is not None:
            data[key] = value

    data = merge_env_fallbacks(data)
    validate_config(data)
    return ProviderConfig.from_dict(data)
