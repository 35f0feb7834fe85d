"""Tests for engine settings and parsing configuration."""

import json

import pytest

from callwatch.config import EngineSettings, ParsingConfig, compile_pattern, get_settings
from callwatch.exceptions import ExtractionException
from callwatch.model import ControlState


class TestEngineSettings:
    def test_environment_override(self, monkeypatch) -> None:
        monkeypatch.setenv("CALLWATCH_STATE_TIMEOUT_MS", "4500")
        monkeypatch.setenv("CALLWATCH_CONFIRM_BUTTON_TEXTS", '["OK"]')

        settings = EngineSettings(_env_file=None)

        assert settings.state_timeout_ms == 4500
        assert settings.confirm_button_texts == ["OK"]

    def test_singleton(self) -> None:
        assert get_settings() is get_settings()

    def test_confirmation_has_longer_timeout(self, settings: EngineSettings) -> None:
        assert settings.timeout_ms(ControlState.AWAITING_CONFIRMATION) == 7000
        assert settings.timeout_ms(ControlState.TARGETING_ITEM) == 3000

    def test_every_state_has_tick_delay(self, settings: EngineSettings) -> None:
        for state in ControlState:
            assert settings.tick_delay_ms(state) > 0

    def test_error_states_share_delay(self, settings: EngineSettings) -> None:
        assert settings.tick_delay_ms(ControlState.ERROR_TIMEOUT) == settings.error_delay_ms
        assert settings.tick_delay_ms(ControlState.ERROR_UNKNOWN) == settings.error_delay_ms


class TestParsingConfig:
    """Tests for ParsingConfig.load."""

    def test_no_path_gives_defaults(self) -> None:
        assert ParsingConfig.load(None) == ParsingConfig()

    def test_partial_file_keeps_other_defaults(self, tmp_path) -> None:
        path = tmp_path / "parsing_config.json"
        path.write_text(
            json.dumps(
                {
                    "version": "2.0.0",
                    "validation": {"price_min": 5000},
                    "parsing": {"selection": "highest_confidence"},
                }
            ),
            encoding="utf-8",
        )

        config = ParsingConfig.load(path)

        assert config.version == "2.0.0"
        assert config.validation.price_min == 5000
        assert config.validation.price_max == 300000
        assert config.parsing.selection == "highest_confidence"

    def test_missing_file_gives_defaults(self, tmp_path) -> None:
        assert ParsingConfig.load(tmp_path / "absent.json") == ParsingConfig()

    def test_malformed_file_gives_defaults(self, tmp_path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        assert ParsingConfig.load(path) == ParsingConfig()

    def test_invalid_values_give_defaults(self, tmp_path) -> None:
        path = tmp_path / "invalid.json"
        path.write_text(json.dumps({"parsing": {"selection": "random"}}), encoding="utf-8")

        assert ParsingConfig.load(path).parsing.selection == "first"

    def test_numeric_only(self) -> None:
        config = ParsingConfig()

        assert config.is_numeric_only("45,000")
        assert config.is_numeric_only("14:30")
        assert not config.is_numeric_only("요금 45,000원")

    def test_invalid_pattern_raises(self) -> None:
        with pytest.raises(ExtractionException):
            compile_pattern("([unclosed")
