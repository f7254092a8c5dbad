"""
Tests for runtime settings read from the environment
"""

import pytest

from nifty.config import GenerationSettings
from nifty.errors import ConfigError
from nifty.handlers.cli import main

from conftest import base_document, write_config


class TestEnvironmentSettings:
    """Tests for NIFTY_* variables."""

    def test_values_read_when_built(self, source, monkeypatch):
        monkeypatch.setenv("NIFTY_WORKERS", "3")
        monkeypatch.setenv("NIFTY_ENCODER_TIMEOUT", "12.5")
        monkeypatch.setenv("NIFTY_IMAGE_FORMAT", "JPEG")
        settings = GenerationSettings(source=source)
        assert settings.workers == 3
        assert settings.encoder_timeout == 12.5
        assert settings.image_format == "jpeg"
        assert settings.image_extension == "jpg"

    def test_blank_value_uses_default(self, source, monkeypatch):
        monkeypatch.setenv("NIFTY_ENCODER_WORKERS", "  ")
        assert GenerationSettings(source=source).encoder_workers == 2

    def test_explicit_value_wins(self, source, monkeypatch):
        monkeypatch.setenv("NIFTY_WORKERS", "four")
        assert GenerationSettings(source=source, workers=6).workers == 6

    @pytest.mark.parametrize("name, value", [
        ("NIFTY_WORKERS", "four"),
        ("NIFTY_ENCODER_RETRIES", "1.5"),
        ("NIFTY_ENCODER_TIMEOUT", "5m"),
        ("NIFTY_ENCODER_TIMEOUT", "nan"),
        ("NIFTY_UNIQUE_ATTEMPTS", "lots"),
    ])
    def test_malformed_value(self, source, monkeypatch, name, value):
        monkeypatch.setenv(name, value)
        with pytest.raises(ConfigError) as exc:
            GenerationSettings(source=source)
        assert exc.value.field == name
        assert repr(value) in str(exc.value)

    def test_out_of_range_value(self, source, monkeypatch):
        monkeypatch.setenv("NIFTY_WORKERS", "0")
        with pytest.raises(ConfigError) as exc:
            GenerationSettings(source=source)
        assert exc.value.field == "workers"

    def test_cli_reports_malformed_value(self, source, monkeypatch, caplog):
        write_config(source, base_document(supply=1))
        monkeypatch.setenv("NIFTY_ENCODER_TIMEOUT", "5m")
        assert main(["generate", str(source), "-q"]) == 1
        assert "NIFTY_ENCODER_TIMEOUT" in caplog.text
        assert not (source / "output").exists()

    def test_cli_flag_overrides_environment(self, source, monkeypatch):
        write_config(source, base_document(supply=2))
        monkeypatch.setenv("NIFTY_WORKERS", "four")
        assert main(["generate", str(source), "--workers", "1", "-q"]) == 0
