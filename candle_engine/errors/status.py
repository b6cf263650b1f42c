"""
Mapping of engine errors onto the external error taxonomy.

Transports (RPC, HTTP, CLI) receive a ServiceError carrying a stable code
instead of the internal exception type.
"""

from enum import Enum
from typing import Any, Optional

from .base import EngineError
from .data_quality import DataFormatError, DataLookupError, SourceReadError
from .system_failures import ConfigurationError


class ErrorCode(Enum):
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    NOT_FOUND = "NOT_FOUND"
    FAILED_PRECONDITION = "FAILED_PRECONDITION"
    INTERNAL = "INTERNAL"


class ServiceError(Exception):
    """Failure of a service operation as seen by an external caller."""

    def __init__(self, code: ErrorCode, message: str,
                 details: Optional[dict[str, Any]] = None):
        super().__init__(f"{code.value}: {message}")
        self.code = code
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code.value, "message": self.message, "details": self.details}


def error_to_status(error: Exception) -> ServiceError:
    """
    Translate an exception raised inside the engine into a ServiceError.

    SourceReadError and DataFormatError -> INVALID_ARGUMENT
    DataLookupError                     -> NOT_FOUND
    ConfigurationError                  -> FAILED_PRECONDITION
    anything else                       -> INTERNAL
    """
    if isinstance(error, ServiceError):
        return error

    details: dict[str, Any] = {}
    if isinstance(error, EngineError):
        details.update(error.context)

    if isinstance(error, SourceReadError):
        details.update({"path": error.path, "line": error.line})
        return ServiceError(ErrorCode.INVALID_ARGUMENT, f"Source read error: {error}", details)

    if isinstance(error, DataFormatError):
        details.update({"field": error.field, "line": error.line})
        return ServiceError(ErrorCode.INVALID_ARGUMENT, f"Data format error: {error}", details)

    if isinstance(error, DataLookupError):
        details.update({"symbol": error.symbol, "timeframe": error.timeframe})
        return ServiceError(ErrorCode.NOT_FOUND, str(error), details)

    if isinstance(error, ConfigurationError):
        details.update({"parameter": error.parameter})
        return ServiceError(ErrorCode.FAILED_PRECONDITION, f"Configuration error: {error}", details)

    return ServiceError(ErrorCode.INTERNAL, f"An internal error occurred: {error}", details)
