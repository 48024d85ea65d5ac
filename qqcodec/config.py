"""Configuration management with Pydantic Settings + optional YAML."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_config_dir() -> Path:
    """Directory holding the default ``config.yaml``."""
    env = os.environ.get("QQCODEC_CONFIG_DIR")
    if env:
        return Path(env)
    if sys.platform == "win32":
        return Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming")) / "qqcodec"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "qqcodec"
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")) / "qqcodec"


class BotConfig(BaseModel):
    app_id: str = ""
    secret: str = ""
    sandbox: bool = False
    api_base: str = "https://api.sgroup.qq.com"
    sandbox_api_base: str = "https://sandbox.api.sgroup.qq.com"
    token_url: str = "https://bots.qq.com/app/getAppAccessToken"
    timeout: float = 30.0

    @property
    def base_url(self) -> str:
        return self.sandbox_api_base if self.sandbox else self.api_base


class EncoderConfig(BaseModel):
    keyboard_row_width: int = Field(default=4, ge=1)
    msg_seq_min: int = Field(default=1, ge=1)
    msg_seq_max: int = 1_000_000

    @model_validator(mode="after")
    def _check_seq_range(self) -> "EncoderConfig":
        if self.msg_seq_max < self.msg_seq_min:
            raise ValueError("msg_seq_max must be >= msg_seq_min")
        return self


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="QQCODEC_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    bot: BotConfig = Field(default_factory=BotConfig)
    encoder: EncoderConfig = Field(default_factory=EncoderConfig)
    log_level: str = "INFO"
    log_json: bool = False


def load_settings(config_path: str | Path | None = None) -> Settings:
    """Load settings from env vars, optionally overlaying a YAML config."""
    yaml_data: dict[str, Any] = {}

    if config_path is None:
        config_path = os.environ.get("QQCODEC_CONFIG")
    if config_path is None:
        default = get_config_dir() / "config.yaml"
        if default.exists():
            config_path = default

    if config_path is not None:
        path = Path(config_path)
        if path.exists():
            with open(path) as f:
                yaml_data = yaml.safe_load(f) or {}

    # YAML values are init kwargs, so they win over env vars
    return Settings(**yaml_data)
