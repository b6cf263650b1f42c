"""Dispatch from an indicator request to the matching calculator"""

from dataclasses import dataclass
from enum import Enum
from typing import Sequence, Union

from ..data.models import Candle
from ..errors import ConfigurationError
from .base import IndicatorCalculator, IndicatorResult, validate_period
from .ema import EMACalculator
from .rsi import RSICalculator
from .sma import SMACalculator


class IndicatorKind(Enum):
    """Closed set of supported indicators"""
    SMA = "sma"
    EMA = "ema"
    RSI = "rsi"

    @classmethod
    def parse(cls, value: Union[str, "IndicatorKind"]) -> "IndicatorKind":
        """Resolve a kind from its name, case-insensitive"""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            normalized = value.strip().lower()
            for kind in cls:
                if kind.value == normalized:
                    return kind
        raise ConfigurationError(
            f"Unknown indicator type: {value}",
            parameter="indicator_type",
            value=value
        )


@dataclass(frozen=True)
class IndicatorSpec:
    """An indicator kind together with its period"""
    kind: IndicatorKind
    period: int

    def __post_init__(self):
        validate_period(self.period, self.kind.name)

    @classmethod
    def parse(cls, kind: Union[str, IndicatorKind], period: int) -> "IndicatorSpec":
        return cls(kind=IndicatorKind.parse(kind), period=period)


def build_calculator(spec: IndicatorSpec) -> IndicatorCalculator:
    """Instantiate the calculator for a spec"""
    if spec.kind is IndicatorKind.SMA:
        return SMACalculator(spec.period)
    if spec.kind is IndicatorKind.EMA:
        return EMACalculator(spec.period)
    if spec.kind is IndicatorKind.RSI:
        return RSICalculator(spec.period)
    raise ConfigurationError(f"No calculator for indicator {spec.kind}", parameter="indicator_type",
                             value=spec.kind)


def compute_indicator(spec: IndicatorSpec, candles: Sequence[Candle]) -> IndicatorResult:
    """
    Compute an indicator over an ordered candle slice

    Args:
        spec: Indicator kind and period
        candles: Candles in chronological order

    Returns:
        IndicatorResult with one value (or None) per candle
    """
    return build_calculator(spec).compute(candles)
