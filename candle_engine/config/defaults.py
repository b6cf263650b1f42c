"""Default configuration parameters for the candle engine."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ServerParams:
    """Service endpoint parameters, consumed by whichever transport hosts the engine."""
    host: str = "127.0.0.1"
    port: int = 50051
    max_connections: int = 10
    thread_pool_size: int = 4


@dataclass(frozen=True)
class ParserParams:
    """Source file format parameters."""
    thousands_separator: str = "."                 # Removed before parsing
    decimal_separator: str = ","                   # Replaced with "."
    delimiter: str = ";"
    encoding: str = "utf-8"


@dataclass(frozen=True)
class IndicatorParams:
    """Periods used when a request does not name one."""
    sma_period: int = 20
    ema_period: int = 20
    rsi_period: int = 14


@dataclass(frozen=True)
class MarketDataParams:
    """Timeframe partitioning parameters."""
    default_timeframe: str = "1day"    # Used for loads and queries without a timeframe
    trading_timeframe: str = "1day"    # Series the order simulator reads the latest bar from


@dataclass(frozen=True)
class LoggingParams:
    """Logging output parameters."""
    level: str = "INFO"
    format_json: bool = False


@dataclass(frozen=True)
class EngineSettings:
    """Complete engine configuration."""
    server: ServerParams
    parser: ParserParams
    indicators: IndicatorParams
    market_data: MarketDataParams
    logging: LoggingParams


def get_default_settings() -> EngineSettings:
    """Get the default configuration instance."""
    return EngineSettings(
        server=ServerParams(),
        parser=ParserParams(),
        indicators=IndicatorParams(),
        market_data=MarketDataParams(),
        logging=LoggingParams(),
    )
