"""
Engine settings: defaults, YAML loading and validation.
"""
from .defaults import EngineSettings, get_default_settings
from .loader import ConfigLoader

__all__ = ["ConfigLoader", "EngineSettings", "get_default_settings"]
