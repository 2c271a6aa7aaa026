"""Tests for settings loading."""

import pytest
from pydantic import ValidationError

from code_diff.config import Settings


def test_defaults(monkeypatch):
    for var in ("STUB_OPCODE", "UNKNOWN_SYMBOL_LABEL", "PAUSE_DURING_UPDATE", "SHOW_STATUS"):
        monkeypatch.delenv(var, raising=False)
    settings = Settings(_env_file=None)
    assert settings.stub_opcode == 0x4E800020
    assert settings.unknown_symbol_label == " --- "
    assert settings.pause_during_update is True
    assert settings.show_status is False


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("STUB_OPCODE", "0x60000000")
    monkeypatch.setenv("SHOW_STATUS", "true")
    monkeypatch.setenv("max_display_rows", "10")
    settings = Settings(_env_file=None)
    assert settings.stub_opcode == 0x60000000
    assert settings.show_status is True
    assert settings.max_display_rows == 10


def test_env_file(tmp_path, monkeypatch):
    monkeypatch.delenv("UNKNOWN_SYMBOL_LABEL", raising=False)
    env_file = tmp_path / ".env"
    env_file.write_text("UNKNOWN_SYMBOL_LABEL=???\n", encoding="utf-8")
    settings = Settings(_env_file=env_file)
    assert settings.unknown_symbol_label == "???"


def test_empty_unknown_label_rejected(monkeypatch):
    monkeypatch.setenv("UNKNOWN_SYMBOL_LABEL", "")
    with pytest.raises(ValidationError, match="non-empty"):
        Settings(_env_file=None)
