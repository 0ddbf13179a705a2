"""Tests for settings loading and logging setup."""

from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path

import pytest

from weighttrack.agent.response import create_response, error_response
from weighttrack.config import Settings, get_settings, reload_settings
from weighttrack.errors import ConfigurationError
from weighttrack.logging_config import JsonLogFormatter, configure_logging


class TestSettings:
    """Tests for Settings.load and Settings.save."""

    def test_defaults_when_missing(self, tmp_path) -> None:
        settings = Settings.load(tmp_path / "nope.yaml")
        assert settings.logging.level == "WARNING"
        assert settings.logging.format == "plain"
        assert settings.defaults.history_days == 30
        assert settings.defaults.output_format == "table"
        assert settings.database.path.name == "weighttrack.db"

    def test_load_values(self, tmp_path) -> None:
        config = tmp_path / "config.yaml"
        config.write_text(
            "database:\n"
            f"  path: {tmp_path / 'w.db'}\n"
            "logging:\n"
            "  level: debug\n"
            "  format: json\n"
            "defaults:\n"
            "  history_days: 90\n"
            "  output_format: json\n"
        )
        settings = Settings.load(config)

        assert settings.database.path == tmp_path / "w.db"
        assert settings.logging.level == "DEBUG"
        assert settings.logging.format == "json"
        assert settings.defaults.history_days == 90
        assert settings.defaults.output_format == "json"

    def test_empty_file(self, tmp_path) -> None:
        config = tmp_path / "config.yaml"
        config.write_text("")
        assert Settings.load(config).defaults.history_days == 30

    def test_partial_sections(self, tmp_path) -> None:
        config = tmp_path / "config.yaml"
        config.write_text("logging:\ndefaults:\n  history_days: 7\n")
        settings = Settings.load(config)
        assert settings.logging.level == "WARNING"
        assert settings.defaults.history_days == 7

    @pytest.mark.parametrize(
        "content",
        [
            "logging: [unclosed\n",
            "- just\n- a list\n",
            "logging:\n  format: xml\n",
            "defaults:\n  output_format: csv\n",
            "defaults:\n  history_days: lots\n",
        ],
    )
    def test_invalid(self, tmp_path, content) -> None:
        config = tmp_path / "config.yaml"
        config.write_text(content)
        with pytest.raises(ConfigurationError):
            Settings.load(config)

    def test_save_round_trip(self, tmp_path) -> None:
        settings = Settings()
        settings.defaults.history_days = 14
        settings.logging.format = "json"
        path = tmp_path / "nested" / "config.yaml"

        settings.save(path)
        loaded = Settings.load(path)

        assert loaded.defaults.history_days == 14
        assert loaded.logging.format == "json"
        assert loaded.database.path == settings.database.path

    def test_env_override(self, tmp_path, monkeypatch) -> None:
        config = tmp_path / "env.yaml"
        config.write_text("defaults:\n  history_days: 5\n")
        monkeypatch.setenv("WEIGHTTRACK_CONFIG", str(config))

        reload_settings()
        assert get_settings().defaults.history_days == 5


class TestLogging:
    """Tests for configure_logging."""

    def _installed(self) -> list[logging.Handler]:
        return [h for h in logging.getLogger().handlers if getattr(h, "_wt_handler", False)]

    def test_single_handler(self) -> None:
        configure_logging("INFO")
        configure_logging("DEBUG")
        assert len(self._installed()) == 1
        assert logging.getLogger().level == logging.DEBUG

    def test_json_formatter_selected(self) -> None:
        configure_logging("INFO", fmt="json")
        (handler,) = self._installed()
        assert isinstance(handler.formatter, JsonLogFormatter)

    def test_verbose_package_logger(self) -> None:
        configure_logging("WARNING", verbose=True)
        assert logging.getLogger("weighttrack").level == logging.DEBUG
        configure_logging("WARNING")
        assert logging.getLogger("weighttrack").level == logging.NOTSET

    def test_verbose_env(self, monkeypatch) -> None:
        monkeypatch.setenv("VERBOSE", "yes")
        configure_logging("WARNING")
        assert logging.getLogger("weighttrack").level == logging.DEBUG
        monkeypatch.delenv("VERBOSE")
        configure_logging("WARNING")

    def test_json_record(self) -> None:
        record = logging.LogRecord(
            "weighttrack.db", logging.INFO, __file__, 1, "Logged %.2f kg", (80.0,), None
        )
        payload = json.loads(JsonLogFormatter().format(record))
        assert payload["level"] == "INFO"
        assert payload["name"] == "weighttrack.db"
        assert payload["message"] == "Logged 80.00 kg"


class TestAgentResponse:
    """Tests for the JSON response envelope."""

    def test_success_envelope(self) -> None:
        response = create_response("predict", data={"when": date(2025, 4, 1)})
        payload = json.loads(response.to_json())
        assert payload["success"] is True
        assert payload["data"]["when"] == "2025-04-01"
        assert "timestamp" in payload

    def test_emit_prints_one_envelope(self, capsys) -> None:
        create_response("weight add", data={"id": 1}).emit()
        payload = json.loads(capsys.readouterr().out)
        assert payload["command"] == "weight add"
        assert payload["data"] == {"id": 1}

    def test_error_envelope(self) -> None:
        response = error_response("goal delete", "Goal 3 not found")
        assert response.success is False
        assert response.errors == ["Goal 3 not found"]
        assert response.human_summary == "Error: Goal 3 not found"


def test_default_db_path_under_home() -> None:
    assert Settings().database.path.parent == Path.home() / ".weighttrack"
