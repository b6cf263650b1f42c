"""Pytest configuration and shared fixtures."""

import pytest
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional, Sequence

from candle_engine.data.models import Candle


SAMPLE_HEADER = "Ativo;Data;Hora;Abertura;Máximo;Mínimo;Fechamento;Volume;Quantidade"


@pytest.fixture
def sample_csv_text() -> str:
    """Three 5-minute WINFUT bars in the exchange export layout, newest first."""
    return "\n".join([
        SAMPLE_HEADER,
        "WINFUT;30/12/2024;18:20:00;124.080;124.090;123.938;123.983;600.822.115,84;24.228",
        "WINFUT;30/12/2024;18:15:00;124.100;124.150;124.020;124.080;412.118.930,10;18.001",
        "WINFUT;30/12/2024;18:10:00;124.000;124.120;123.990;124.100;388.004.512,55;17.560",
        "",
    ])


@pytest.fixture
def write_csv(tmp_path) -> Callable[..., str]:
    """Write text to a file under tmp_path and return its path."""
    def _write(text: str, name: str = "candles.csv", encoding: str = "utf-8") -> str:
        path = tmp_path / name
        path.write_text(text, encoding=encoding)
        return str(path)
    return _write


@pytest.fixture
def make_candles() -> Callable[..., List[Candle]]:
    """Build one daily candle per close, starting 2024-01-01 UTC."""
    def _make(closes: Sequence[float], symbol: str = "PETR4",
              start: Optional[datetime] = None,
              step: timedelta = timedelta(days=1)) -> List[Candle]:
        start = start or datetime(2024, 1, 1, tzinfo=timezone.utc)
        return [
            Candle(
                symbol=symbol,
                timestamp=start + i * step,
                open=close,
                high=close + 1.0,
                low=close - 1.0,
                close=close,
                volume=1000.0,
                trades=10,
            )
            for i, close in enumerate(closes)
        ]
    return _make
