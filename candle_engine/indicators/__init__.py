"""Technical indicator calculations over candle series"""

from .base import IndicatorCalculator, IndicatorResult
from .calculator import IndicatorKind, IndicatorSpec, build_calculator, compute_indicator
from .ema import EMACalculator, calculate_ema
from .rsi import RSICalculator, calculate_rsi
from .sma import SMACalculator, calculate_sma

__all__ = [
    "IndicatorCalculator",
    "IndicatorResult",
    "IndicatorKind",
    "IndicatorSpec",
    "build_calculator",
    "compute_indicator",
    "SMACalculator",
    "EMACalculator",
    "RSICalculator",
    "calculate_sma",
    "calculate_ema",
    "calculate_rsi",
]
