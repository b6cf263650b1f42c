"""EMA (Exponential Moving Average) calculation"""

from typing import Optional, Sequence

from .base import IndicatorCalculator, validate_period


def ema_multiplier(period: int) -> float:
    """Smoothing factor 2 / (period + 1)"""
    return 2.0 / (period + 1)


def calculate_ema(closes: Sequence[float], period: int) -> list[Optional[float]]:
    """
    Calculate Exponential Moving Average over closing prices

    The first value, at index period-1, is the plain mean of the first
    `period` closes. After that:

        EMA[i] = (close[i] - EMA[i-1]) * multiplier + EMA[i-1]

    Args:
        closes: Closing prices in chronological order
        period: EMA period (> 0)

    Returns:
        List of len(closes) values, None where undefined
    """
    validate_period(period, "EMA")

    if len(closes) < period:
        return [None] * len(closes)

    multiplier = ema_multiplier(period)
    results: list[Optional[float]] = [None] * (period - 1)

    previous_ema = sum(closes[:period]) / period
    results.append(previous_ema)

    for close in closes[period:]:
        previous_ema = (close - previous_ema) * multiplier + previous_ema
        results.append(previous_ema)

    return results


class EMACalculator(IndicatorCalculator):
    """EMA calculator over candle closes"""

    label = "EMA"

    def calculate_closes(self, closes: Sequence[float]) -> list[Optional[float]]:
        return calculate_ema(closes, self.period)
