import logging
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

import yaml
from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Load environment variables from a local .env file if present.
load_dotenv()


class Settings(BaseSettings):
    """Scan configuration loaded from FILELIST_* environment variables."""

    # Output
    SEPARATOR: str = "\t"
    TIMESTAMPS_UTC: bool = False  # Render timestamps in UTC instead of host local time

    # Hashing reads files in chunks of this many bytes
    HASH_CHUNK_SIZE: int = Field(1 << 20, gt=0)

    # Extensions (lowercase, with dot) whose PE header fields are read
    EXECUTABLE_EXTENSIONS: List[str] = [".exe", ".dll"]

    # Scan behaviour
    WORKERS: int = Field(1, ge=1)
    SHOW_PROGRESS: bool = False
    LOG_LEVEL: str = "WARNING"

    @field_validator("LOG_LEVEL")
    @classmethod
    def _known_level(cls, v: str) -> str:
        if not isinstance(logging.getLevelName(v.upper()), int):
            raise ValueError(f"unknown log level {v!r}")
        return v.upper()

    model_config = SettingsConfigDict(
        env_prefix="FILELIST_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


def load_yaml(p):
    return yaml.safe_load(Path(p).read_text(encoding="utf-8")) or {}


def load_settings(config_path: Optional[str] = None) -> Settings:
    """Build Settings from the environment, overlaid with a YAML file when given.

    Keys in the YAML file use the same names as the fields (case-insensitive).
    """
    if not config_path:
        return Settings()
    data = load_yaml(config_path)
    if not isinstance(data, dict):
        raise ValueError(f"{config_path}: expected a mapping of settings, got {type(data).__name__}")
    overrides = {str(k).upper(): v for k, v in data.items()}
    unknown = set(overrides) - set(Settings.model_fields)
    if unknown:
        raise ValueError(f"Unknown settings in {config_path}: {', '.join(sorted(unknown))}")
    return Settings(**overrides)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance so configuration is read once."""
    return Settings()
