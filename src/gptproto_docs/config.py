"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Environment variables  (GPTPROTO_DOCS__INDEX__TTL_SECONDS=600)
  2. gptproto-docs.yaml     (searched in cwd, then platform config dir)
  3. Hardcoded defaults

The config file is optional; all fields have sensible defaults. The remote
index URL additionally honours the standalone GPTPROTO_DOCS_INDEX_URL variable.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

import platformdirs
from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

DEFAULT_INDEX_URL = (
    "https://raw.githubusercontent.com/chencanbin/gptproto_doc/main/docs-index.json"
)
INDEX_URL_ENV_VAR = "GPTPROTO_DOCS_INDEX_URL"

_DEFAULT_CACHE_DIR = platformdirs.user_cache_dir("gptproto-docs")
_DEFAULT_CACHE_PATH = str(Path(_DEFAULT_CACHE_DIR) / "docs-index.json")
_BUNDLED_INDEX_PATH = str(Path(__file__).parent / "data" / "docs-index.json")


def _find_config_file() -> str | None:
    """Return the path of the first gptproto-docs.yaml found, or None."""
    candidates = [
        Path("gptproto-docs.yaml"),
        Path(platformdirs.user_config_dir("gptproto-docs")) / "gptproto-docs.yaml",
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


def _default_index_url() -> str:
    return os.environ.get(INDEX_URL_ENV_VAR) or DEFAULT_INDEX_URL


class ServerSettings(BaseModel):
    transport: Literal["stdio", "http"] = "stdio"
    host: str = "127.0.0.1"
    port: int = 8080


class IndexSettings(BaseModel):
    url: str = Field(default_factory=_default_index_url)
    timeout_seconds: float = 10.0
    ttl_seconds: float = 60 * 60
    cache_path: str = _DEFAULT_CACHE_PATH
    bundled_path: str = _BUNDLED_INDEX_PATH
    warm_on_startup: bool = True


class SearchWeights(BaseModel):
    """Points added per query term for each field it is found in."""

    model: int = 10
    vendor: int = 8
    title: int = 5
    capability: int = 4
    description: int = 2
    anywhere: int = 1


class SearchSettings(BaseModel):
    default_limit: int = 20
    max_limit: int = 100
    weights: SearchWeights = SearchWeights()


class LoggingSettings(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: GPTPROTO_DOCS__SERVER__PORT=9090
        env_prefix="GPTPROTO_DOCS__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
    )

    server: ServerSettings = ServerSettings()
    index: IndexSettings = Field(default_factory=IndexSettings)
    search: SearchSettings = SearchSettings()
    logging: LoggingSettings = LoggingSettings()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
        **kwargs: Any,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,  # Constructor args (highest priority)
            env_settings,  # Environment variables
            YamlConfigSettingsSource(settings_cls),  # YAML file
            # dotenv and file secrets intentionally excluded
        )
