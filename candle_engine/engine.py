"""
Main service facade.

Translates the four external operations (load, query, compute indicator,
simulate order) into calls on the ingestor, the market data store, the
indicator engine and the order simulator, and maps internal failures onto
the external error taxonomy.

Market Data File → Ingestor → Store → {Indicators, Order Simulation} → Response
"""

from datetime import datetime
from pathlib import Path
from typing import Any, Optional, Union

import orjson
import structlog

from .config.defaults import EngineSettings, get_default_settings
from .config.loader import ConfigLoader
from .data.ingest import CandleCsvReader
from .data.models import Candle, TimeFrame
from .data.parsers import NumberFormat
from .data.store import MarketDataStore
from .errors import (
    ConfigurationError,
    DataLookupError,
    DataQualityError,
    ErrorCode,
    ServiceError,
    error_to_status,
)
from .indicators import IndicatorKind, IndicatorSpec, compute_indicator
from .logging.config import configure_logging
from .models.responses import IndicatorResponse, LoadCandlesResponse, QueryCandlesResponse
from .simulation.orders import OrderRequest, OrderSimulator, TradeOutcome
from .utils.time import TimestampLike, coerce_timestamp, format_market_time

logger = structlog.get_logger(__name__)


class TradingEngine:
    """
    Coordinator for the market data service.

    Owns one MarketDataStore for its lifetime; the store may be injected so
    that several facades (or a transport and a test) share it.
    """

    def __init__(self, settings: Optional[EngineSettings] = None,
                 store: Optional[MarketDataStore] = None) -> None:
        """Initialize the engine with settings and an owned store."""
        self.logger = logger
        self.settings = settings or get_default_settings()
        self.store = store if store is not None else MarketDataStore()

        parser = self.settings.parser
        self.reader = CandleCsvReader(
            number_format=NumberFormat(
                thousands_sep=parser.thousands_separator,
                decimal_sep=parser.decimal_separator,
            ),
            delimiter=parser.delimiter,
            encoding=parser.encoding,
        )
        self.default_timeframe = TimeFrame.parse(self.settings.market_data.default_timeframe)
        self.simulator = OrderSimulator(
            self.store, timeframe=self.settings.market_data.trading_timeframe
        )

        self.logger.info(
            "Trading engine initialized",
            default_timeframe=self.default_timeframe.value,
            trading_timeframe=self.simulator.timeframe.value
        )

    @classmethod
    def from_config(cls, config_path: Optional[Path] = None,
                    setup_logging: bool = True) -> "TradingEngine":
        """Build an engine from a YAML settings file layered over the defaults."""
        settings = ConfigLoader.create(config_path).load_settings()
        if setup_logging:
            configure_logging(level=settings.logging.level,
                              format_json=settings.logging.format_json)
        return cls(settings=settings)

    def load_candles(self, source_path: Union[str, Path], default_symbol: str,
                     timeframe: Optional[Union[str, TimeFrame]] = None) -> LoadCandlesResponse:
        """
        Ingest a candle file and merge its records into the store.

        Records are grouped by their own symbol (default_symbol when the
        file has no symbol column) and each group is merged separately.
        Ingestion is all-or-nothing: a file that fails to parse leaves the
        store untouched.

        Raises:
            ServiceError: INVALID_ARGUMENT for unreadable or malformed files
        """
        try:
            tf = self._resolve_timeframe(timeframe)
            candles = self.reader.read_path(source_path, default_symbol)

            groups = self._group_by_symbol(candles)
            if not groups:
                groups = {default_symbol: []}

            for symbol, group in groups.items():
                self.store.add_candles(symbol, tf, group)

            symbols = list(groups)
            message = f"Loaded {len(candles)} candles for symbol {', '.join(symbols)}"
            self.logger.info(
                "Loaded candle file into store",
                path=str(source_path),
                symbols=symbols,
                timeframe=tf.value,
                candles_loaded=len(candles)
            )
            return LoadCandlesResponse(
                candles_loaded=len(candles),
                symbols=symbols,
                timeframe=tf.value,
                message=message,
            )
        except Exception as e:
            raise self._fail("load_candles", e, path=str(source_path),
                             symbol=default_symbol) from e

    def query_candles(self, symbol: str,
                      timeframe: Optional[Union[str, TimeFrame]] = None,
                      from_ts: Optional[TimestampLike] = None,
                      to_ts: Optional[TimestampLike] = None) -> QueryCandlesResponse:
        """
        Return stored candles for a symbol within an inclusive range.

        Bounds may be datetimes or epoch milliseconds; omitted bounds are open.

        Raises:
            ServiceError: NOT_FOUND if the symbol/timeframe was never loaded
        """
        try:
            tf = self._resolve_timeframe(timeframe)
            start, end = self._resolve_bounds(from_ts, to_ts)

            candles = self._require_candles(symbol, tf, start, end)
            if not candles:
                self.logger.warning(
                    "No market data found in the given range",
                    symbol=symbol,
                    timeframe=tf.value,
                    from_ts=format_market_time(start) if start else None,
                    to_ts=format_market_time(end) if end else None
                )

            return QueryCandlesResponse(symbol=symbol, timeframe=tf.value, candles=candles)
        except Exception as e:
            raise self._fail("query_candles", e, symbol=symbol) from e

    def compute_indicator(self, symbol: str, kind: Union[str, IndicatorKind],
                          period: Optional[int] = None,
                          timeframe: Optional[Union[str, TimeFrame]] = None,
                          parameters: Optional[Union[str, bytes, dict[str, Any]]] = None
                          ) -> IndicatorResponse:
        """
        Compute an indicator over the full stored series of a symbol.

        The period comes from the explicit argument, else from
        parameters["period"] (a dict or a JSON object string), else from
        the configured default for the kind.

        Raises:
            ServiceError: FAILED_PRECONDITION for an unknown kind or bad period,
                INVALID_ARGUMENT for undecodable parameters, NOT_FOUND for an
                unknown symbol/timeframe
        """
        try:
            indicator_kind = IndicatorKind.parse(kind)
            spec = IndicatorSpec(
                kind=indicator_kind,
                period=self._resolve_period(indicator_kind, period, parameters),
            )
            tf = self._resolve_timeframe(timeframe)

            candles = self._require_candles(symbol, tf)
            result = compute_indicator(spec, candles)

            self.logger.debug(
                "Indicator calculated",
                symbol=symbol,
                timeframe=tf.value,
                indicator=result.name,
                candle_count=len(candles),
                first_defined_index=result.first_defined_index
            )
            return IndicatorResponse(
                indicator_name=result.name,
                parameters=result.parameters,
                timestamps=[candle.timestamp for candle in candles],
                values=result.values,
            )
        except Exception as e:
            raise self._fail("compute_indicator", e, symbol=symbol, indicator_type=str(kind)) from e

    def simulate_order(self, symbol: str, action: str, quantity: float,
                       kind: str = "MARKET",
                       limit_price: Optional[float] = None) -> TradeOutcome:
        """
        Simulate an order against the latest candle of the trading timeframe.

        Unfilled orders are returned as outcomes with a reason, not raised.

        Raises:
            ServiceError: INTERNAL only if stored market data is corrupt
        """
        request = OrderRequest(
            symbol=symbol,
            action=action,
            quantity=quantity,
            kind=kind,
            limit_price=limit_price,
        )
        try:
            return self.simulator.simulate(request)
        except Exception as e:
            raise self._fail("simulate_order", e, symbol=symbol) from e

    def _resolve_timeframe(self, timeframe: Optional[Union[str, TimeFrame]]) -> TimeFrame:
        if timeframe is None:
            return self.default_timeframe
        return TimeFrame.parse(timeframe)

    def _resolve_bounds(self, from_ts: Optional[TimestampLike],
                        to_ts: Optional[TimestampLike]
                        ) -> tuple[Optional[datetime], Optional[datetime]]:
        try:
            return coerce_timestamp(from_ts), coerce_timestamp(to_ts)
        except (TypeError, ValueError, OverflowError, OSError) as e:
            raise ServiceError(
                ErrorCode.INVALID_ARGUMENT,
                f"Invalid timestamp bound: {e}",
                {"from_ts": repr(from_ts), "to_ts": repr(to_ts)}
            ) from e

    def _resolve_period(self, kind: IndicatorKind, period: Optional[int],
                        parameters: Optional[Union[str, bytes, dict[str, Any]]]) -> int:
        if period is not None:
            return period

        params = self._decode_parameters(parameters)
        if "period" in params:
            return params["period"]

        defaults = self.settings.indicators
        return {
            IndicatorKind.SMA: defaults.sma_period,
            IndicatorKind.EMA: defaults.ema_period,
            IndicatorKind.RSI: defaults.rsi_period,
        }[kind]

    def _decode_parameters(self, parameters: Optional[Union[str, bytes, dict[str, Any]]]
                           ) -> dict[str, Any]:
        if parameters is None or parameters == "" or parameters == b"":
            return {}
        if isinstance(parameters, dict):
            return parameters

        try:
            decoded = orjson.loads(parameters)
        except orjson.JSONDecodeError as e:
            raise ServiceError(
                ErrorCode.INVALID_ARGUMENT,
                f"Invalid JSON parameters for indicator: {e}",
                {"parameters": parameters if isinstance(parameters, str) else repr(parameters)}
            ) from e

        if not isinstance(decoded, dict):
            raise ServiceError(
                ErrorCode.INVALID_ARGUMENT,
                "Indicator parameters must be a JSON object",
                {"parameters": repr(parameters)}
            )
        return decoded

    def _require_candles(self, symbol: str, timeframe: TimeFrame,
                         from_ts: Optional[datetime] = None,
                         to_ts: Optional[datetime] = None) -> list[Candle]:
        candles = self.store.get_candles(symbol, timeframe, from_ts, to_ts)
        if candles is None:
            raise DataLookupError(
                f"Market data not found for symbol '{symbol}' and timeframe {timeframe.value}",
                symbol=symbol,
                timeframe=timeframe.value
            )
        return candles

    def _group_by_symbol(self, candles: list[Candle]) -> dict[str, list[Candle]]:
        groups: dict[str, list[Candle]] = {}
        for candle in candles:
            groups.setdefault(candle.symbol, []).append(candle)
        return groups

    def _fail(self, operation: str, error: Exception, **context: Any) -> ServiceError:
        """Log a failed operation and translate it to the external taxonomy."""
        status = error_to_status(error)

        if isinstance(error, (DataQualityError, ConfigurationError, ServiceError)):
            self.logger.warning(
                "Service operation rejected",
                operation=operation,
                code=status.code.value,
                error=str(error),
                **context
            )
        else:
            self.logger.error(
                "Service operation failed",
                operation=operation,
                code=status.code.value,
                error=str(error),
                exc_info=True,
                **context
            )
        return status
