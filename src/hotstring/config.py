"""Application configuration models and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field

DEFAULT_END_CHARS = " \t\n.,!?-()[]{}:;'\"/\\"
LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "WARNING", "ERROR")


class AppPaths(BaseModel):
    """Resolved directories for hotstring runtime assets."""

    base_dir: Path = Field(
        default_factory=lambda: Path(os.getenv("HOTSTRING_HOME", Path.home() / ".hotstring"))
    )

    @property
    def config_dir(self) -> Path:
        return self.base_dir / "config"

    @property
    def logs_dir(self) -> Path:
        return self.base_dir / "logs"

    @property
    def data_dir(self) -> Path:
        return self.base_dir / "data"

    def ensure(self) -> None:
        for path in (self.base_dir, self.config_dir, self.logs_dir, self.data_dir):
            path.mkdir(parents=True, exist_ok=True)


class EngineSettings(BaseModel):
    max_buffer: int = Field(default=60, ge=1, le=1000)
    end_chars: str = DEFAULT_END_CHARS
    reset_on_pointer: bool = True
    scripts: list[Path] = Field(default_factory=list)
    defaults: list[dict[str, str]] = Field(default_factory=list)


class HotstringSettings(BaseModel):
    app_name: str = "hotstring"
    log_level: Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    paths: AppPaths = Field(default_factory=AppPaths)
    engine: EngineSettings = Field(default_factory=EngineSettings)


def _maybe_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _maybe_bool(value: str | None) -> bool | None:
    if value is None:
        return None
    lowered = value.lower()
    if lowered in {"1", "true", "yes", "on"}:
        return True
    if lowered in {"0", "false", "no", "off"}:
        return False
    return None


def load_settings(env_path: Path | None = None) -> HotstringSettings:
    """Load user settings from environment variables and defaults."""

    env_file = env_path or Path(".env")
    if env_file.exists():
        load_dotenv(env_file)

    overrides: dict[str, Any] = {}

    if (max_buffer := _maybe_int(os.getenv("HOTSTRING_MAX_BUFFER"))) is not None:
        overrides.setdefault("engine", {})["max_buffer"] = max_buffer

    if end_chars := os.getenv("HOTSTRING_END_CHARS"):
        overrides.setdefault("engine", {})["end_chars"] = end_chars

    if (on_pointer := _maybe_bool(os.getenv("HOTSTRING_RESET_ON_POINTER"))) is not None:
        overrides.setdefault("engine", {})["reset_on_pointer"] = on_pointer

    if scripts := os.getenv("HOTSTRING_SCRIPTS"):
        overrides.setdefault("engine", {})["scripts"] = [
            Path(item) for item in scripts.split(os.pathsep) if item
        ]

    if (level := (os.getenv("HOTSTRING_LOG_LEVEL") or "").upper()) in LOG_LEVELS:
        overrides["log_level"] = level

    settings = HotstringSettings(**overrides)
    settings.paths.ensure()
    return settings
