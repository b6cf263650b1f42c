"""
System failure error classifications.

These exceptions represent invalid static setup or broken internal
invariants. They fail the single requested operation, not the process.
"""

from typing import Any, Optional

from .base import EngineError


class SystemFailureError(EngineError):
    """Base class for failures that need a code or configuration fix."""


class ConfigurationError(SystemFailureError):
    """Invalid static setup, such as a non-positive indicator period."""

    def __init__(self, message: str, parameter: Optional[str] = None,
                 value: Any = None, **kwargs):
        super().__init__(message, **kwargs)
        self.parameter = parameter
        self.value = value


class MarketDataIntegrityError(SystemFailureError):
    """Stored market data violates an invariant the engine relies on."""

    def __init__(self, message: str, symbol: Optional[str] = None,
                 timeframe: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.symbol = symbol
        self.timeframe = timeframe
