"""Unit tests for configuration management."""

import pytest
from pathlib import Path

from candle_engine.config import ConfigLoader, EngineSettings, get_default_settings
from candle_engine.config.loader import CONFIG_ENV_VAR, load_settings
from candle_engine.config.validation import ConfigValidator
from candle_engine.errors import ConfigurationError


class TestDefaultConfig:
    """Test suite for default configuration."""

    def test_default_config_creation(self) -> None:
        """Test that default configuration can be created."""
        settings = get_default_settings()
        assert isinstance(settings, EngineSettings)
        assert settings.parser.thousands_separator == "."
        assert settings.parser.decimal_separator == ","
        assert settings.indicators.sma_period == 20
        assert settings.indicators.rsi_period == 14
        assert settings.market_data.trading_timeframe == "1day"

    def test_defaults_are_immutable(self) -> None:
        """Test that settings dataclasses are frozen."""
        settings = get_default_settings()
        with pytest.raises(AttributeError):
            settings.server.port = 1


class TestConfigLoader:
    """Test suite for configuration loader."""

    def test_config_loader_creation(self) -> None:
        """Test that ConfigLoader can be created."""
        loader = ConfigLoader.create()
        assert isinstance(loader.config_path, Path)

    def test_env_var_selects_file(self, tmp_path, monkeypatch) -> None:
        """Test that the environment variable names the settings file."""
        path = tmp_path / "env.yaml"
        path.write_text("indicators:\n  sma_period: 9\n")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))

        loader = ConfigLoader.create()
        assert loader.config_path == path
        assert loader.load_settings().indicators.sma_period == 9

    def test_missing_file_uses_defaults(self, tmp_path) -> None:
        """Test that an absent settings file falls back to defaults."""
        loader = ConfigLoader.create(tmp_path / "absent.yaml")
        assert loader.load_settings() == get_default_settings()

    def test_merge_config_defaults_only(self, tmp_path) -> None:
        """Test config merging with defaults only."""
        loader = ConfigLoader.create(tmp_path / "absent.yaml")
        config = loader.merge_config()

        assert config["server"]["port"] == 50051
        assert config["indicators"]["ema_period"] == 20

    def test_file_overrides_defaults(self, tmp_path) -> None:
        """Test that file values override defaults key by key."""
        path = tmp_path / "engine.yaml"
        path.write_text(
            "parser:\n"
            "  delimiter: ','\n"
            "market_data:\n"
            "  default_timeframe: 5m\n"
        )
        settings = ConfigLoader.create(path).load_settings()

        assert settings.parser.delimiter == ","
        assert settings.parser.decimal_separator == ","
        assert settings.market_data.default_timeframe == "5m"
        assert settings.market_data.trading_timeframe == "1day"

    def test_overrides_beat_file(self, tmp_path) -> None:
        """Test 3-tier precedence: overrides > file > defaults."""
        path = tmp_path / "engine.yaml"
        path.write_text("indicators:\n  rsi_period: 21\n  ema_period: 50\n")

        settings = load_settings(path, overrides={"indicators": {"rsi_period": 7}})

        assert settings.indicators.rsi_period == 7
        assert settings.indicators.ema_period == 50
        assert settings.indicators.sma_period == 20

    def test_empty_file(self, tmp_path) -> None:
        path = tmp_path / "engine.yaml"
        path.write_text("")
        assert ConfigLoader.create(path).load_settings() == get_default_settings()

    def test_invalid_yaml(self, tmp_path) -> None:
        """Test that unparsable YAML is a configuration error."""
        path = tmp_path / "engine.yaml"
        path.write_text("server: [unclosed\n")
        with pytest.raises(ConfigurationError):
            ConfigLoader.create(path).load_settings()

    def test_non_mapping_file(self, tmp_path) -> None:
        path = tmp_path / "engine.yaml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(ConfigurationError):
            ConfigLoader.create(path).load_file_config()

    def test_invalid_values_rejected(self, tmp_path) -> None:
        """Test that validation errors surface as ConfigurationError."""
        path = tmp_path / "engine.yaml"
        path.write_text("indicators:\n  sma_period: 0\nserver:\n  port: 70000\n")

        with pytest.raises(ConfigurationError) as exc_info:
            ConfigLoader.create(path).load_settings()

        message = str(exc_info.value)
        assert "indicators.sma_period" in message
        assert "server.port" in message
        assert len(exc_info.value.context["errors"]) == 2

    def test_unknown_key_rejected(self, tmp_path) -> None:
        path = tmp_path / "engine.yaml"
        path.write_text("parser:\n  quote_char: '\"'\n")
        with pytest.raises(ConfigurationError) as exc_info:
            ConfigLoader.create(path).load_settings()
        assert "quote_char" in str(exc_info.value)

    def test_non_mapping_section_rejected(self, tmp_path) -> None:
        path = tmp_path / "engine.yaml"
        path.write_text("logging: verbose\n")
        with pytest.raises(ConfigurationError):
            ConfigLoader.create(path).load_settings()


class TestConfigValidator:
    """Test suite for configuration validation."""

    def test_valid_defaults(self, tmp_path) -> None:
        """Test that the defaults pass validation."""
        config = ConfigLoader.create(tmp_path / "absent.yaml").merge_config()
        assert ConfigValidator.validate_config(config) == []

    def test_invalid_port(self) -> None:
        errors = ConfigValidator.validate_server_params({"port": 0})
        assert len(errors) == 1
        assert errors[0].field == "server.port"

    def test_separators_must_differ(self) -> None:
        """Test that identical separators are rejected."""
        errors = ConfigValidator.validate_parser_params({
            "thousands_separator": ",",
            "decimal_separator": ",",
        })
        assert [e.field for e in errors] == ["parser.decimal_separator"]

    def test_separator_must_be_single_character(self) -> None:
        errors = ConfigValidator.validate_parser_params({"delimiter": ";;"})
        assert errors[0].field == "parser.delimiter"

    def test_boolean_period_rejected(self) -> None:
        errors = ConfigValidator.validate_indicator_params({"rsi_period": True})
        assert errors[0].field == "indicators.rsi_period"

    def test_unknown_timeframe(self) -> None:
        errors = ConfigValidator.validate_market_data_params({"trading_timeframe": "2h"})
        assert len(errors) == 1
        assert errors[0].value == "2h"

    def test_unknown_log_level(self) -> None:
        errors = ConfigValidator.validate_logging_params({"level": "LOUD", "format_json": "yes"})
        assert {e.field for e in errors} == {"logging.level", "logging.format_json"}
