"""Response models for the four service operations"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

import orjson

from ..data.models import Candle
from ..utils.time import to_epoch_millis


def candle_to_dict(candle: Candle) -> dict[str, Any]:
    """Wire representation of a candle, timestamp in epoch milliseconds"""
    return {
        "symbol": candle.symbol,
        "timestamp": to_epoch_millis(candle.timestamp),
        "open": candle.open,
        "high": candle.high,
        "low": candle.low,
        "close": candle.close,
        "volume": candle.volume,
        "trades": candle.trades,
    }


class JsonResponse(ABC):
    """Mixin giving a response dict and orjson encodings"""

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """Plain-dict form of the response."""
        pass

    def to_json(self) -> bytes:
        """Serialize the response with orjson"""
        return orjson.dumps(self.to_dict())


@dataclass(frozen=True)
class LoadCandlesResponse(JsonResponse):
    """Outcome of loading a source file into the store"""
    candles_loaded: int
    symbols: list[str]
    timeframe: str
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": True,
            "candles_loaded": self.candles_loaded,
            "symbols": list(self.symbols),
            "timeframe": self.timeframe,
            "message": self.message,
        }


@dataclass(frozen=True)
class QueryCandlesResponse(JsonResponse):
    """Stored candles for a symbol within the requested range"""
    symbol: str
    timeframe: str
    candles: list[Candle] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "symbol": self.symbol,
            "timeframe": self.timeframe,
            "candles": [candle_to_dict(candle) for candle in self.candles],
        }


@dataclass(frozen=True)
class IndicatorResponse(JsonResponse):
    """Indicator values aligned with the candle timestamps they belong to"""
    indicator_name: str
    parameters: dict[str, Any]
    timestamps: list[datetime]
    values: list[Optional[float]]

    def to_dict(self) -> dict[str, Any]:
        return {
            "indicator_name": self.indicator_name,
            "parameters": dict(self.parameters),
            "timestamps": [to_epoch_millis(ts) for ts in self.timestamps],
            "values": list(self.values),
        }
