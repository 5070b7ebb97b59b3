"""Application configuration handling."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

ENV_PREFIX = "DSC_"
DEFAULT_CONFIG_PATH = Path("~/.config/dataset-cache/config.yaml")

_YAML_KEY_MAP: Mapping[tuple[str, ...], str] = {
    ("cache", "default_ttl_seconds"): "default_ttl_seconds",
    ("cache", "sweep_interval_seconds"): "sweep_interval_seconds",
    ("cache", "identity_field"): "identity_field",
    ("cache", "identity_fallback_field"): "identity_fallback_field",
    ("query", "default_page_size"): "default_page_size",
    ("query", "max_page_size"): "max_page_size",
    ("summary", "preview_size"): "preview_size",
    ("summary", "preview_text_limit"): "preview_text_limit",
    ("logging", "level"): "log_level",
    ("logging", "json"): "log_json",
}


class Settings(BaseModel):
    """Runtime configuration loaded from YAML file and environment variables."""

    default_ttl_seconds: float = Field(default=30 * 60, gt=0)
    sweep_interval_seconds: float = Field(default=5 * 60, ge=0)
    default_page_size: int = Field(default=50, ge=1)
    max_page_size: int = Field(default=100, ge=1)
    identity_field: str = "id"
    identity_fallback_field: str = "messageId"
    preview_size: int = Field(default=5, ge=1)
    preview_text_limit: int = Field(default=100, ge=4)
    log_level: str = "INFO"
    log_json: bool = True

    model_config = {
        "validate_assignment": True,
        "extra": "ignore",
    }

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_level(cls, value: Any) -> str:
        if isinstance(value, str):
            return value.strip().upper()
        raise TypeError("log_level must be a string")

    @model_validator(mode="after")
    def _check_page_sizes(self) -> "Settings":
        if self.max_page_size < self.default_page_size:
            raise ValueError("max_page_size must be >= default_page_size")
        return self

    @property
    def default_ttl_ms(self) -> int:
        return int(self.default_ttl_seconds * 1000)

    @classmethod
    def from_yaml(cls, path: Path | None = None) -> "Settings":
        """Load YAML config and overlay env vars; fall back to defaults."""
        config_path = cls._resolve_config_path(path)
        data: dict[str, Any] = {}
        if config_path and config_path.exists():
            with config_path.open("r", encoding="utf-8") as fh:
                raw = yaml.safe_load(fh) or {}
            data.update(_flatten_yaml(raw))
        data.update(_load_env_overrides())
        return cls(**data)

    @staticmethod
    def _resolve_config_path(path: Path | None) -> Path | None:
        if path is not None:
            return path.expanduser()
        env_path = os.environ.get(f"{ENV_PREFIX}CONFIG")
        if env_path:
            return Path(env_path).expanduser()
        resolved_default = DEFAULT_CONFIG_PATH.expanduser()
        return resolved_default if resolved_default.exists() else None


def _flatten_yaml(raw: Mapping[str, Any], prefix: tuple[str, ...] = ()) -> dict[str, Any]:
    """Flatten nested YAML configuration to Settings field names."""
    flat: dict[str, Any] = {}
    for key, value in raw.items():
        next_prefix = prefix + (key,)
        if isinstance(value, Mapping):
            flat.update(_flatten_yaml(value, prefix=next_prefix))
        else:
            mapped_key = _YAML_KEY_MAP.get(next_prefix)
            if mapped_key:
                flat[mapped_key] = value
            elif key in Settings.model_fields:
                flat[key] = value
    return flat


def _load_env_overrides() -> dict[str, Any]:
    """Map environment variables with DSC_ prefix into Settings fields."""
    overrides: dict[str, Any] = {}
    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        field_name = key[len(ENV_PREFIX) :].lower()
        if field_name in Settings.model_fields:
            overrides[field_name] = value
    return overrides


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached settings accessor for dependency injection."""
    return Settings.from_yaml()


__all__ = ["Settings", "get_settings"]
