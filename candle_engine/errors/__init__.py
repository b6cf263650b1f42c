"""
Error classification system for the candle engine.

This module provides the structured exception hierarchy for failures
encountered while ingesting, storing and analysing market data.
"""

from .base import EngineError
from .data_quality import (
    DataFormatError,
    DataLookupError,
    DataQualityError,
    SourceReadError,
)
from .status import ErrorCode, ServiceError, error_to_status
from .system_failures import (
    ConfigurationError,
    MarketDataIntegrityError,
    SystemFailureError,
)

__all__ = [
    "EngineError",
    # Data Quality Errors
    "DataQualityError",
    "SourceReadError",
    "DataFormatError",
    "DataLookupError",
    # System Failures
    "SystemFailureError",
    "ConfigurationError",
    "MarketDataIntegrityError",
    # Service boundary
    "ErrorCode",
    "ServiceError",
    "error_to_status",
]
