"""Shared pytest fixtures for app.cardbot tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from app.cardbot.config.settings import DEFAULT_CARD_PATH, Settings
from app.cardbot.messaging.cards import CardTemplate, load_card_template

_ENV_KEYS = (
    "MICROSOFT_APP_ID",
    "MicrosoftAppId",
    "MICROSOFT_APP_PASSWORD",
    "MicrosoftAppPassword",
    "MICROSOFT_APP_TENANT_ID",
    "MicrosoftAppTenantId",
    "ALLOW_ANONYMOUS",
    "PORT",
    "LOG_LEVEL",
    "CARD_TEMPLATE_PATH",
)


@pytest.fixture(autouse=True)
def _isolate_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    dotenv = tmp_path / ".env"
    monkeypatch.setenv("DOTENV_PATH", str(dotenv))
    return dotenv


@pytest.fixture()
def dotenv(_isolate_env: Path) -> Path:
    return _isolate_env


@pytest.fixture()
def card() -> CardTemplate:
    return load_card_template(DEFAULT_CARD_PATH)


@pytest.fixture()
def settings(monkeypatch: pytest.MonkeyPatch) -> Settings:
    monkeypatch.setenv("MICROSOFT_APP_ID", "test-app-id")
    monkeypatch.setenv("MICROSOFT_APP_PASSWORD", "test-pw")
    return Settings()
