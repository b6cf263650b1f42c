"""SMA (Simple Moving Average) calculation"""

from typing import Optional, Sequence

from .base import IndicatorCalculator, validate_period


def calculate_sma(closes: Sequence[float], period: int) -> list[Optional[float]]:
    """
    Calculate Simple Moving Average over closing prices

    SMA[i] = mean(close[i-period+1 .. i]), defined for i >= period-1.
    The window sum is carried forward by subtracting the close that
    leaves the window and adding the one that enters it.

    Args:
        closes: Closing prices in chronological order
        period: Window length (> 0)

    Returns:
        List of len(closes) values, None where undefined
    """
    validate_period(period, "SMA")

    if len(closes) < period:
        return [None] * len(closes)

    results: list[Optional[float]] = [None] * (period - 1)

    window_sum = sum(closes[:period])
    results.append(window_sum / period)

    for i in range(period, len(closes)):
        window_sum = window_sum - closes[i - period] + closes[i]
        results.append(window_sum / period)

    return results


class SMACalculator(IndicatorCalculator):
    """SMA calculator over candle closes"""

    label = "SMA"

    def calculate_closes(self, closes: Sequence[float]) -> list[Optional[float]]:
        return calculate_sma(closes, self.period)
