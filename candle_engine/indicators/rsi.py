"""RSI (Relative Strength Index) calculation with Wilder smoothing"""

from typing import Optional, Sequence

from .base import IndicatorCalculator, validate_period


def _rsi_from_averages(avg_gain: float, avg_loss: float) -> float:
    # No realized loss counts as maximal strength, flat series included
    if avg_loss == 0:
        return 100.0
    rs = avg_gain / avg_loss
    return 100.0 - (100.0 / (1.0 + rs))


def calculate_rsi(closes: Sequence[float], period: int) -> list[Optional[float]]:
    """
    Calculate Relative Strength Index over closing prices

    Needs `period` close-to-close changes, so the first defined value is
    at index `period`. The seed average gain/loss is the plain mean over
    the first `period` changes; later averages use Wilder smoothing:

        avg[i] = (avg[i-1] * (period - 1) + current) / period

    RSI = 100 - 100 / (1 + avg_gain / avg_loss), or 100 when avg_loss is 0.

    Args:
        closes: Closing prices in chronological order
        period: RSI period (> 0)

    Returns:
        List of len(closes) values, None where undefined
    """
    validate_period(period, "RSI")

    if len(closes) <= period:
        return [None] * len(closes)

    results: list[Optional[float]] = [None] * period

    gains = 0.0
    losses = 0.0
    for i in range(1, period + 1):
        change = closes[i] - closes[i - 1]
        if change > 0:
            gains += change
        else:
            losses -= change

    avg_gain = gains / period
    avg_loss = losses / period
    results.append(_rsi_from_averages(avg_gain, avg_loss))

    for i in range(period + 1, len(closes)):
        change = closes[i] - closes[i - 1]
        current_gain = change if change > 0 else 0.0
        current_loss = -change if change < 0 else 0.0

        avg_gain = (avg_gain * (period - 1) + current_gain) / period
        avg_loss = (avg_loss * (period - 1) + current_loss) / period
        results.append(_rsi_from_averages(avg_gain, avg_loss))

    return results


class RSICalculator(IndicatorCalculator):
    """RSI calculator over candle closes"""

    label = "RSI"

    def calculate_closes(self, closes: Sequence[float]) -> list[Optional[float]]:
        return calculate_rsi(closes, self.period)
