"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = "config.yaml"


class Settings(BaseModel):
    app_name:      str = "lessonpub"
    db_url:        str = "sqlite:///lessonpub.db"
    content_dir:   str = Field(default="_posts",   description="Directory holding the markdown posts")
    output_dir:    str = Field(default="dist",     description="Directory for exported MD + JSON files")
    parser_config: str = Field(default="gfm-like", description="MarkdownIt parser preset name")
    log_level:     str = Field(default="WARNING", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
                               description="Standard logging level name")


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then LESSONPUB_<FIELD> env vars, then non-None CLI overrides.

    log_level is upper-cased before validation, so `--log-level debug` is accepted.
    """
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e

    for name in Settings.model_fields:
        if val := os.getenv(f"LESSONPUB_{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    if isinstance(data.get("log_level"), str):
        data["log_level"] = data["log_level"].upper()
    return Settings(**data)
