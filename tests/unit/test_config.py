"""Tests de la configuration pydantic-settings."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from workshop.config import Settings


def test_defaults(monkeypatch):
    for name in ("DATABASE_URL", "DEFAULT_BUDGET_VALIDITY_DAYS", "LOG_LEVEL"):
        monkeypatch.delenv(f"WORKSHOP_{name}", raising=False)
    settings = Settings(_env_file=None)
    assert settings.database_url == "sqlite:///data/workshop.db"
    assert settings.default_budget_validity_days == 7
    assert settings.log_file == Path("logs/workshop.log")


def test_env_prefix(monkeypatch):
    monkeypatch.setenv("WORKSHOP_DATABASE_URL", "sqlite:///tmp/test.db")
    monkeypatch.setenv("WORKSHOP_DEFAULT_BUDGET_VALIDITY_DAYS", "15")
    monkeypatch.setenv("WORKSHOP_LOG_LEVEL", "debug")
    settings = Settings(_env_file=None)
    assert settings.database_url == "sqlite:///tmp/test.db"
    assert settings.default_budget_validity_days == 15
    assert settings.log_level == "DEBUG"


def test_negative_validity_rejected(monkeypatch):
    monkeypatch.setenv("WORKSHOP_DEFAULT_BUDGET_VALIDITY_DAYS", "-1")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_log_file_expands_home(monkeypatch):
    monkeypatch.setenv("WORKSHOP_LOG_FILE", "~/workshop.log")
    assert Settings(_env_file=None).log_file == Path.home() / "workshop.log"
