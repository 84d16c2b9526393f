"""Configuration management with Pydantic Settings + optional YAML."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import yaml
from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class IngestConfig(BaseModel):
    bind: str = "127.0.0.1"
    port: int = 8421
    path: str = "/events"
    secret: str = ""


class Settings(BaseSettings):
    """Connector settings, loaded once at startup and never mutated.

    The four connector fields also accept the ``SEQ_APP_SETTING_*`` names
    Seq uses when it hosts the process as an app instance.
    """

    model_config = SettingsConfigDict(
        env_prefix="SEQTEAMS_",
        env_nested_delimiter="__",
        case_sensitive=False,
        frozen=True,
    )

    base_url: str = Field(
        default="",
        validation_alias=AliasChoices(
            "base_url", "seqteams_base_url", "seq_app_setting_baseurl"
        ),
    )
    webhook_url: str = Field(
        validation_alias=AliasChoices(
            "webhook_url", "seqteams_webhook_url", "seq_app_setting_teamsbaseurl"
        ),
    )
    trace_message: bool = Field(
        default=False,
        validation_alias=AliasChoices(
            "trace_message", "seqteams_trace_message", "seq_app_setting_tracemessage"
        ),
    )
    color: str = Field(
        default="",
        validation_alias=AliasChoices(
            "color", "seqteams_color", "seq_app_setting_color"
        ),
    )
    ingest: IngestConfig = Field(default_factory=IngestConfig)
    log_level: str = "INFO"
    log_format: str = "console"  # console | json | clef

    @field_validator("webhook_url")
    @classmethod
    def _check_webhook_url(cls, value: str) -> str:
        parsed = urlparse(value)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("webhook_url must be an absolute http(s) URL")
        return value

    @field_validator("log_format")
    @classmethod
    def _check_log_format(cls, value: str) -> str:
        value = value.lower()
        if value not in ("console", "json", "clef"):
            raise ValueError("log_format must be one of: console, json, clef")
        return value


def default_config_path() -> Path:
    """Per-user config file: $SEQTEAMS_CONFIG_DIR, else %APPDATA% or XDG."""
    override = os.environ.get("SEQTEAMS_CONFIG_DIR")
    if override:
        return Path(override) / "config.yaml"
    if sys.platform == "win32":
        root = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
    else:
        root = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return root / "seqteams" / "config.yaml"


def load_settings(
    config_path: str | Path | None = None, **overrides: Any
) -> Settings:
    """Load settings from env vars, optionally overlaying a YAML config.

    Keyword overrides (e.g. from CLI flags) win over the YAML file; values
    from either are init arguments and so take precedence over env vars.
    """
    yaml_data: dict[str, Any] = {}

    # Determine config file path
    if config_path is None:
        config_path = os.environ.get("SEQTEAMS_CONFIG")
    if config_path is None:
        default = default_config_path()
        if default.exists():
            config_path = default

    # Load YAML if found
    if config_path is not None:
        path = Path(config_path)
        if path.exists():
            with open(path) as f:
                yaml_data = yaml.safe_load(f) or {}

    yaml_data.update({k: v for k, v in overrides.items() if v is not None})

    # Init kwargs outrank env vars in pydantic-settings
    return Settings(**yaml_data)
