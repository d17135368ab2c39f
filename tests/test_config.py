"""Tests for YAML/env configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from rankflow.config import Settings, load_settings, settings_from_dict
from rankflow.errors import ConfigError
from rankflow.models import DEFAULT_SOURCES


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("RANKFLOW_REDIS_URL", raising=False)
    monkeypatch.delenv("RANKFLOW_HEADLESS", raising=False)
    monkeypatch.setattr("rankflow.config.load_dotenv", lambda: False)


def test_missing_file_yields_defaults(tmp_path: Path) -> None:
    settings = load_settings(str(tmp_path / "absent.yaml"))
    assert settings == Settings()
    assert settings.retry.max_retries == 5
    assert settings.retry.delay_seconds == 5.0
    assert settings.schedule.daily_hour == 19
    assert settings.sources == DEFAULT_SOURCES


def test_yaml_values_override_defaults(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text(
        "retry:\n"
        "  max_retries: 3\n"
        "schedule:\n"
        "  daily_hour: 18\n"
        "store:\n"
        "  backend: memory\n"
        "sources:\n"
        "  zum: https://zum.com/\n",
        encoding="utf-8",
    )
    settings = load_settings(str(path))

    assert settings.retry.max_retries == 3
    assert settings.schedule.daily_hour == 18
    assert settings.store.backend == "memory"
    urls = {src.name: src.url for src in settings.sources}
    assert urls["zum"] == "https://zum.com/"
    assert urls["naver"] == "https://www.signal.bz/"


def test_env_overrides(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RANKFLOW_REDIS_URL", "redis://cache:6379/2")
    monkeypatch.setenv("RANKFLOW_HEADLESS", "false")

    settings = load_settings(str(tmp_path / "absent.yaml"))

    assert settings.store.url == "redis://cache:6379/2"
    assert settings.browser.headless is False


@pytest.mark.parametrize(
    "raw",
    [
        {"store": {"backend": "mongo"}},
        {"retry": {"max_retries": 0}},
        {"retry": {"attempts": 3}},
        {"sources": {"daum": "https://daum.net"}},
        {"schedule": ["not", "a", "mapping"]},
    ],
)
def test_invalid_settings_raise_config_error(raw) -> None:
    with pytest.raises(ConfigError):
        settings_from_dict(raw)


def test_malformed_yaml_raises_config_error(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("retry: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_settings(str(path))
