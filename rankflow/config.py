"""
Configuration loading.

Settings come from a YAML file (see ``config.yaml`` at the repository
root) with a handful of environment overrides so deployments can keep
secrets such as the Redis URL in a ``.env`` file.  Every section is
optional; a missing file yields the defaults below.

Example::

    retry:
      max_retries: 5
      delay_seconds: 5
    schedule:
      timezone: Asia/Seoul
      daily_hour: 19
      daily_minute: 0
    browser:
      headless: true
    store:
      backend: redis
      url: redis://localhost:6379/0
    sources:
      naver: https://www.signal.bz/
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv

from .errors import ConfigError
from .models import DEFAULT_SOURCES, Source

STORE_BACKENDS = ("redis", "memory")


@dataclass
class RetrySettings:
    max_retries: int = 5
    delay_seconds: float = 5.0


@dataclass
class ScheduleSettings:
    timezone: str = "Asia/Seoul"
    daily_hour: int = 19
    daily_minute: int = 0
    hourly_minute: int = 0
    debate_minute: int = 30


@dataclass
class BrowserSettings:
    headless: bool = True
    page_load_timeout: float = 30.0
    wait_timeout: float = 10.0


@dataclass
class StoreSettings:
    backend: str = "redis"
    url: str = "redis://localhost:6379/0"
    key_prefix: str = "ranking"


@dataclass
class LoggingSettings:
    level: str = "INFO"
    file: Optional[str] = None


@dataclass
class Settings:
    """Top level settings object handed to the CLI and scheduler."""

    retry: RetrySettings = field(default_factory=RetrySettings)
    schedule: ScheduleSettings = field(default_factory=ScheduleSettings)
    browser: BrowserSettings = field(default_factory=BrowserSettings)
    store: StoreSettings = field(default_factory=StoreSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)
    sources: List[Source] = field(default_factory=lambda: list(DEFAULT_SOURCES))


def _section(raw: Dict[str, Any], name: str, cls):
    values = raw.get(name) or {}
    if not isinstance(values, dict):
        raise ConfigError(f"Section '{name}' must be a mapping")
    known = set(cls.__dataclass_fields__)
    unknown = set(values) - known
    if unknown:
        raise ConfigError(f"Unknown keys in '{name}': {', '.join(sorted(unknown))}")
    try:
        return cls(**values)
    except TypeError as exc:
        raise ConfigError(f"Invalid '{name}' section: {exc}") from exc


def _sources(overrides: Any) -> List[Source]:
    if not overrides:
        return list(DEFAULT_SOURCES)
    if not isinstance(overrides, dict):
        raise ConfigError("Section 'sources' must map source names to URLs")
    by_name = {src.name: src for src in DEFAULT_SOURCES}
    unknown = set(overrides) - set(by_name)
    if unknown:
        raise ConfigError(f"Unknown sources: {', '.join(sorted(unknown))}")
    return [replace(src, url=overrides.get(src.name, src.url)) for src in DEFAULT_SOURCES]


def _env_flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def settings_from_dict(raw: Optional[Dict[str, Any]]) -> Settings:
    """Build `Settings` from an already parsed YAML mapping."""
    raw = raw or {}
    if not isinstance(raw, dict):
        raise ConfigError("Configuration root must be a mapping")
    settings = Settings(
        retry=_section(raw, "retry", RetrySettings),
        schedule=_section(raw, "schedule", ScheduleSettings),
        browser=_section(raw, "browser", BrowserSettings),
        store=_section(raw, "store", StoreSettings),
        logging=_section(raw, "logging", LoggingSettings),
        sources=_sources(raw.get("sources")),
    )
    if settings.store.backend not in STORE_BACKENDS:
        raise ConfigError(f"Unsupported store backend: {settings.store.backend}")
    if settings.retry.max_retries < 1:
        raise ConfigError("retry.max_retries must be at least 1")
    return settings


def apply_env_overrides(settings: Settings) -> Settings:
    """Apply ``RANKFLOW_*`` environment variables on top of file settings."""
    redis_url = os.getenv("RANKFLOW_REDIS_URL")
    if redis_url:
        settings.store.url = redis_url
    headless = os.getenv("RANKFLOW_HEADLESS")
    if headless:
        settings.browser.headless = _env_flag(headless)
    return settings


def load_settings(config_path: Optional[str] = None) -> Settings:
    """Read ``.env`` plus the YAML file at `config_path` into `Settings`."""
    load_dotenv()
    raw: Dict[str, Any] = {}
    if config_path:
        path = Path(config_path)
        if path.exists():
            try:
                with open(path, "r", encoding="utf-8") as f:
                    raw = yaml.safe_load(f) or {}
            except yaml.YAMLError as exc:
                raise ConfigError(f"Failed to parse {path}: {exc}") from exc
    return apply_env_overrides(settings_from_dict(raw))
