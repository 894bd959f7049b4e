"""
Tests for environment-driven settings (jot.config).
"""

from pathlib import Path

from jot.config import Settings


def test_defaults_live_under_home(monkeypatch):
    for name in ("JOT_HOME", "JOT_DB_PATH", "JOT_STATE_PATH", "JOT_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings.from_env()

    assert settings.home_dir == Path.home() / ".jot"
    assert settings.db_path == settings.home_dir / "jot.db"
    assert settings.state_path == settings.home_dir / "view_state.json"
    assert settings.log_level == "WARNING"


def test_home_override_moves_all_files(monkeypatch, tmp_path):
    monkeypatch.setenv("JOT_HOME", str(tmp_path))
    monkeypatch.delenv("JOT_DB_PATH", raising=False)
    monkeypatch.delenv("JOT_STATE_PATH", raising=False)

    settings = Settings.from_env()

    assert settings.db_path == tmp_path / "jot.db"
    assert settings.state_path == tmp_path / "view_state.json"


def test_individual_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("JOT_DB_PATH", str(tmp_path / "other.db"))
    monkeypatch.setenv("JOT_STATE_PATH", str(tmp_path / "view.json"))
    monkeypatch.setenv("JOT_LOG_LEVEL", " debug ")

    settings = Settings.from_env()

    assert settings.db_path == tmp_path / "other.db"
    assert settings.state_path == tmp_path / "view.json"
    assert settings.log_level == "DEBUG"


def test_blank_values_use_defaults(monkeypatch):
    monkeypatch.setenv("JOT_LOG_LEVEL", "   ")
    monkeypatch.setenv("JOT_DB_PATH", "")

    settings = Settings.from_env()

    assert settings.log_level == "WARNING"
    assert settings.db_path.name == "jot.db"
