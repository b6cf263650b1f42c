"""
Data quality error classifications for market data ingestion and lookup.

These exceptions describe problems with the data a caller handed to the
engine (or asked it for). They are surfaced to the immediate caller with
enough context to fix the input and try again.
"""

from typing import Optional

from .base import EngineError


class DataQualityError(EngineError):
    """Base class for data issues the caller can correct."""

    recoverable = True


class SourceReadError(DataQualityError):
    """The ingestion source could not be read as a structured table."""

    def __init__(self, message: str, path: Optional[str] = None,
                 line: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.path = path
        self.line = line


class DataFormatError(DataQualityError):
    """A field failed to parse, or a mandatory column was absent from a record."""

    def __init__(self, message: str, field: Optional[str] = None,
                 line: Optional[int] = None, raw_value: Optional[str] = None,
                 **kwargs):
        if field is not None and line is not None:
            message = f"{message} (field '{field}', line {line})"
        elif field is not None:
            message = f"{message} (field '{field}')"
        super().__init__(message, **kwargs)
        self.field = field
        self.line = line
        self.raw_value = raw_value


class DataLookupError(DataQualityError, LookupError):
    """A query referenced a symbol/timeframe combination that is not stored."""

    def __init__(self, message: str, symbol: Optional[str] = None,
                 timeframe: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.symbol = symbol
        self.timeframe = timeframe
