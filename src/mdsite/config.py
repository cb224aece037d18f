"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = "config.yaml"


class Settings(BaseModel):
    app_name:        str  = "mdsite"
    output_dir:      str  = Field(default="dist",      description="Directory the rendered site is written to")
    site_file:       str  = Field(default="site.txt",  description="Site variable file, relative to the site directory")
    post_extensions: str  = Field(default=".txt,.md",  description="Comma-separated post source extensions")
    placeholder:     str  = Field(default="UNDEFINED", description="Text rendered for unknown variables")
    copy_assets:     bool = Field(default=True,        description="Copy <template_dir>/assets to the output")
    log_level:       str  = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR)$", description="Logging level")

    @property
    def extensions(self) -> tuple[str, ...]:
        """post_extensions as a tuple of '.ext' strings."""
        exts = (e.strip() for e in self.post_extensions.split(","))
        return tuple(e if e.startswith(".") else f".{e}" for e in exts if e)


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then MDSITE_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e

    for name in Settings.model_fields:
        if val := os.getenv(f"MDSITE_{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
