"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any

from ..data.models import TimeFrame

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_server_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate server parameters."""
        errors = []

        if "host" in params:
            value = params["host"]
            if not isinstance(value, str) or not value.strip():
                errors.append(ValidationError(
                    field="server.host",
                    message="Must be a non-empty string",
                    value=value
                ))

        if "port" in params:
            value = params["port"]
            if not _is_positive_int(value) or value > 65535:
                errors.append(ValidationError(
                    field="server.port",
                    message="Must be an integer between 1 and 65535",
                    value=value
                ))

        for name in ("max_connections", "thread_pool_size"):
            if name in params and not _is_positive_int(params[name]):
                errors.append(ValidationError(
                    field=f"server.{name}",
                    message="Must be a positive integer",
                    value=params[name]
                ))

        return errors

    @staticmethod
    def validate_parser_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate source format parameters."""
        errors = []

        for name in ("thousands_separator", "decimal_separator", "delimiter"):
            if name in params:
                value = params[name]
                if not isinstance(value, str) or len(value) != 1:
                    errors.append(ValidationError(
                        field=f"parser.{name}",
                        message="Must be a single character",
                        value=value
                    ))

        thousands = params.get("thousands_separator")
        decimal = params.get("decimal_separator")
        if thousands is not None and thousands == decimal:
            errors.append(ValidationError(
                field="parser.decimal_separator",
                message="Must differ from the thousands separator",
                value=decimal
            ))

        if "encoding" in params:
            value = params["encoding"]
            if not isinstance(value, str) or not value:
                errors.append(ValidationError(
                    field="parser.encoding",
                    message="Must be a non-empty string",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_indicator_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate default indicator periods."""
        errors = []

        for name in ("sma_period", "ema_period", "rsi_period"):
            if name in params and not _is_positive_int(params[name]):
                errors.append(ValidationError(
                    field=f"indicators.{name}",
                    message="Must be a positive integer",
                    value=params[name]
                ))

        return errors

    @staticmethod
    def validate_market_data_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate timeframe parameters."""
        errors = []
        known = {tf.value for tf in TimeFrame}

        for name in ("default_timeframe", "trading_timeframe"):
            if name in params:
                value = params[name]
                if not isinstance(value, str) or value.lower() not in known:
                    errors.append(ValidationError(
                        field=f"market_data.{name}",
                        message=f"Must be one of {sorted(known)}",
                        value=value
                    ))

        return errors

    @staticmethod
    def validate_logging_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate logging parameters."""
        errors = []

        if "level" in params:
            value = params["level"]
            if not isinstance(value, str) or value.upper() not in _LOG_LEVELS:
                errors.append(ValidationError(
                    field="logging.level",
                    message=f"Must be one of {sorted(_LOG_LEVELS)}",
                    value=value
                ))

        if "format_json" in params and not isinstance(params["format_json"], bool):
            errors.append(ValidationError(
                field="logging.format_json",
                message="Must be a boolean",
                value=params["format_json"]
            ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        if isinstance(config.get("server"), dict):
            errors.extend(ConfigValidator.validate_server_params(config["server"]))

        if isinstance(config.get("parser"), dict):
            errors.extend(ConfigValidator.validate_parser_params(config["parser"]))

        if isinstance(config.get("indicators"), dict):
            errors.extend(ConfigValidator.validate_indicator_params(config["indicators"]))

        if isinstance(config.get("market_data"), dict):
            errors.extend(ConfigValidator.validate_market_data_params(config["market_data"]))

        if isinstance(config.get("logging"), dict):
            errors.extend(ConfigValidator.validate_logging_params(config["logging"]))

        return errors
