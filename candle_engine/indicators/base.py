"""Shared pieces of the indicator calculators."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from ..data.models import Candle
from ..errors import ConfigurationError


def validate_period(period: Any, indicator: str) -> int:
    """
    Check that a period is a strictly positive integer.

    Zero and negative periods are rejected rather than clamped.

    Raises:
        ConfigurationError: If period is not a positive int
    """
    if isinstance(period, bool) or not isinstance(period, int):
        raise ConfigurationError(
            f"{indicator} period must be an integer, got {period!r}",
            parameter="period",
            value=period
        )
    if period <= 0:
        raise ConfigurationError(
            f"{indicator} period must be greater than 0, got {period}",
            parameter="period",
            value=period
        )
    return period


def closes_of(candles: Sequence[Candle]) -> list[float]:
    """Closing prices of candles, in order."""
    return [candle.close for candle in candles]


@dataclass(frozen=True)
class IndicatorResult:
    """
    Indicator output aligned with the candles it was computed from.

    values[i] belongs to candles[i]; None marks positions where the
    indicator is not yet defined.
    """
    name: str
    parameters: dict[str, Any]
    values: list[Optional[float]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.values)

    @property
    def first_defined_index(self) -> Optional[int]:
        """Index of the first defined value, None if nothing is defined."""
        for index, value in enumerate(self.values):
            if value is not None:
                return index
        return None


class IndicatorCalculator(ABC):
    """Base for period-parameterised calculators over candle closes."""

    label = "INDICATOR"

    def __init__(self, period: int):
        self.period = validate_period(period, self.label)

    @property
    def name(self) -> str:
        return f"{self.label}({self.period})"

    @property
    def parameters(self) -> dict[str, Any]:
        return {"period": self.period}

    @abstractmethod
    def calculate_closes(self, closes: Sequence[float]) -> list[Optional[float]]:
        """Indicator values aligned with closes, None where undefined."""
        pass

    def calculate(self, candles: Sequence[Candle]) -> list[Optional[float]]:
        """Indicator values aligned with candles."""
        return self.calculate_closes(closes_of(candles))

    def compute(self, candles: Sequence[Candle]) -> IndicatorResult:
        """Calculate and wrap the values with this indicator's name and parameters."""
        return IndicatorResult(
            name=self.name,
            parameters=self.parameters,
            values=self.calculate(candles),
        )
