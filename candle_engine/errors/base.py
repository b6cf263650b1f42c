"""Root of the candle engine exception hierarchy."""

from typing import Any, Optional


class EngineError(Exception):
    """Base class for every error raised by the candle engine."""

    recoverable = False

    def __init__(self, message: str, context: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}
