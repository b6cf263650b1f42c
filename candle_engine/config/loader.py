"""Configuration loader layering a YAML settings file over the defaults."""

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional

import structlog
import yaml

from ..errors import ConfigurationError
from .defaults import (
    EngineSettings,
    IndicatorParams,
    LoggingParams,
    MarketDataParams,
    ParserParams,
    ServerParams,
    get_default_settings,
)
from .validation import ConfigValidator

logger = structlog.get_logger(__name__)

CONFIG_ENV_VAR = "CANDLE_ENGINE_CONFIG"

_SECTIONS = {
    "server": ServerParams,
    "parser": ParserParams,
    "indicators": IndicatorParams,
    "market_data": MarketDataParams,
    "logging": LoggingParams,
}


@dataclass(frozen=True)
class ConfigLoader:
    """Loads engine settings with file-over-defaults precedence."""

    config_path: Path
    defaults: EngineSettings

    @classmethod
    def create(cls, config_path: Optional[Path] = None) -> "ConfigLoader":
        """Create a ConfigLoader instance."""
        if config_path is None:
            env_path = os.environ.get(CONFIG_ENV_VAR)
            if env_path:
                config_path = Path(env_path)
            else:
                config_path = Path(__file__).parent.parent.parent / "config" / "engine.yaml"

        return cls(
            config_path=Path(config_path),
            defaults=get_default_settings(),
        )

    def load_file_config(self) -> dict[str, Any]:
        """Load raw overrides from the settings file, or nothing if it is absent."""
        if not self.config_path.exists():
            logger.warning(
                "Settings file not found, using default settings",
                path=str(self.config_path)
            )
            return {}

        try:
            with open(self.config_path, encoding="utf-8") as f:
                file_config = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(
                f"Failed to read settings file {self.config_path}: {e}",
                parameter="config_path",
                value=str(self.config_path)
            ) from e

        if file_config is None:
            return {}
        if not isinstance(file_config, dict):
            raise ConfigurationError(
                f"Settings file {self.config_path} must contain a mapping",
                parameter="config_path",
                value=str(self.config_path)
            )
        return file_config

    def merge_config(self, overrides: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """
        Merge configuration with 3-tier precedence.

        Priority order:
        1. Explicit overrides (highest priority)
        2. Settings file
        3. Global defaults (lowest priority)
        """
        config = self._dataclass_to_dict(self.defaults)
        config = self._deep_merge(config, self.load_file_config())

        if overrides:
            config = self._deep_merge(config, overrides)

        return config

    def load_settings(self, overrides: Optional[dict[str, Any]] = None) -> EngineSettings:
        """Build validated EngineSettings from defaults, file and overrides."""
        config = self.merge_config(overrides)

        errors = ConfigValidator.validate_config(config)
        if errors:
            error_msgs = [f"{err.field}: {err.message} (got: {err.value!r})" for err in errors]
            raise ConfigurationError(
                "Invalid engine settings: " + "; ".join(error_msgs),
                context={"errors": error_msgs}
            )

        sections = {}
        for name, params_cls in _SECTIONS.items():
            section = config.get(name, {})
            if not isinstance(section, dict):
                raise ConfigurationError(
                    f"Settings section '{name}' must be a mapping",
                    parameter=name,
                    value=section
                )
            known = {f.name for f in fields(params_cls)}
            unknown = sorted(set(section) - known)
            if unknown:
                raise ConfigurationError(
                    f"Unknown settings in section '{name}': {', '.join(unknown)}",
                    parameter=name,
                    value=unknown
                )
            sections[name] = params_cls(**section)

        return EngineSettings(**sections)

    def _dataclass_to_dict(self, obj: Any) -> dict[str, Any]:
        """Convert nested dataclasses to dictionary."""
        if hasattr(obj, '__dataclass_fields__'):
            result = {}
            for field_name in obj.__dataclass_fields__:
                value = getattr(obj, field_name)
                if hasattr(value, '__dataclass_fields__'):
                    result[field_name] = self._dataclass_to_dict(value)
                else:
                    result[field_name] = value
            return result
        return obj  # type: ignore[no-any-return]

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result


def load_settings(config_path: Optional[Path] = None,
                  overrides: Optional[dict[str, Any]] = None) -> EngineSettings:
    """Convenience wrapper: create a loader and build settings in one call."""
    return ConfigLoader.create(config_path).load_settings(overrides)
