"""
Single-shot order fill simulation.

An order request resolves to exactly one outcome: no market data, filled,
or not filled. Nothing is recorded: there is no order book, position or
balance, and every call reads the store afresh. "Not filled" and its
reasons are normal outcomes returned to the caller, never exceptions.

Fill policy, against the latest candle of the trading timeframe:
- Market orders fill in full at the candle's close.
- Limit buys fill at the limit price iff candle.low <= limit.
- Limit sells fill at the limit price iff candle.high >= limit.
"""

import math
import uuid
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Optional, Union

from ..data.models import Candle, TimeFrame
from ..data.store import MarketDataStore
from ..errors import MarketDataIntegrityError
from ..logging.config import get_simulation_logger, log_order_outcome
from ..models.responses import JsonResponse

logger = get_simulation_logger(__name__)

NO_MARKET_DATA = "no market data available"
LIMIT_PRICE_REQUIRED = "limit price required"


class OrderAction(Enum):
    BUY = "BUY"
    SELL = "SELL"

    @classmethod
    def parse(cls, value: Any) -> Optional["OrderAction"]:
        """Resolve an action case-insensitively, None if unrecognized."""
        if isinstance(value, str):
            return cls.__members__.get(value.strip().upper())
        return None


class OrderKind(Enum):
    MARKET = "MARKET"
    LIMIT = "LIMIT"

    @classmethod
    def parse(cls, value: Any) -> Optional["OrderKind"]:
        """Resolve an order kind case-insensitively, None if unrecognized."""
        if isinstance(value, str):
            return cls.__members__.get(value.strip().upper())
        return None


@dataclass(frozen=True)
class OrderRequest:
    """Ephemeral order as received from a caller. Action and kind are kept verbatim."""
    symbol: str
    action: str
    quantity: float
    kind: str = "MARKET"
    limit_price: Optional[float] = None


@dataclass(frozen=True)
class TradeOutcome(JsonResponse):
    """Result of a simulated order."""
    success: bool
    order_id: str
    filled_price: float
    filled_quantity: float
    message: str

    @classmethod
    def filled(cls, order_id: str, price: float, quantity: float, message: str) -> "TradeOutcome":
        """Create a filled outcome."""
        return cls(success=True, order_id=order_id, filled_price=price,
                   filled_quantity=quantity, message=message)

    @classmethod
    def not_filled(cls, order_id: str, message: str) -> "TradeOutcome":
        """Create a not-filled outcome."""
        return cls(success=False, order_id=order_id, filled_price=0.0,
                   filled_quantity=0.0, message=message)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class OrderSimulator:
    """Resolves order requests against the store's latest candle."""

    def __init__(self, store: MarketDataStore,
                 timeframe: Union[str, TimeFrame] = TimeFrame.DAY_1):
        self.store = store
        self.timeframe = TimeFrame.parse(timeframe)

    def simulate(self, request: OrderRequest) -> TradeOutcome:
        """
        Simulate one order.

        Args:
            request: The order to resolve

        Returns:
            TradeOutcome carrying a fresh order id

        Raises:
            MarketDataIntegrityError: If the latest stored candle has non-finite prices
        """
        order_id = str(uuid.uuid4())
        outcome = self._resolve(order_id, request)

        log_order_outcome(
            logger,
            order_id=order_id,
            symbol=request.symbol,
            success=outcome.success,
            reason=outcome.message,
            context={
                "action": request.action,
                "order_type": request.kind,
                "quantity": request.quantity,
                "limit_price": request.limit_price,
                "filled_price": outcome.filled_price,
            }
        )
        return outcome

    def _resolve(self, order_id: str, request: OrderRequest) -> TradeOutcome:
        latest = self.store.latest_candle(request.symbol, self.timeframe)
        if latest is None:
            return TradeOutcome.not_filled(
                order_id,
                f"{NO_MARKET_DATA} for symbol '{request.symbol}' "
                f"and timeframe {self.timeframe.value}"
            )
        self._check_candle(latest, request.symbol)

        kind = OrderKind.parse(request.kind)
        if kind is None:
            return TradeOutcome.not_filled(
                order_id, f"Unsupported order type: '{request.kind}'. Use 'MARKET' or 'LIMIT'."
            )

        action = OrderAction.parse(request.action)
        if action is None:
            return TradeOutcome.not_filled(
                order_id, f"Unknown action '{request.action}'. Use 'BUY' or 'SELL'."
            )

        quantity = request.quantity
        if (isinstance(quantity, bool) or not isinstance(quantity, (int, float))
                or not math.isfinite(quantity)):
            return TradeOutcome.not_filled(
                order_id, f"Order quantity must be a finite number, got {quantity!r}"
            )

        if kind is OrderKind.MARKET:
            price = latest.close
            return TradeOutcome.filled(
                order_id, price, quantity,
                f"Market {action.value} order for {quantity} of {request.symbol} "
                f"simulated at {price:.2f}"
            )

        return self._resolve_limit(order_id, request, action, quantity, latest)

    def _resolve_limit(self, order_id: str, request: OrderRequest, action: OrderAction,
                       quantity: float, latest: Candle) -> TradeOutcome:
        limit_price = request.limit_price
        if limit_price is None:
            return TradeOutcome.not_filled(order_id, f"{LIMIT_PRICE_REQUIRED} for LIMIT orders")

        if (isinstance(limit_price, bool) or not isinstance(limit_price, (int, float))
                or not math.isfinite(limit_price)):
            return TradeOutcome.not_filled(
                order_id, f"Invalid limit price {limit_price!r} for LIMIT order"
            )

        if action is OrderAction.BUY:
            if latest.low <= limit_price:
                return TradeOutcome.filled(
                    order_id, limit_price, quantity,
                    f"Limit BUY order for {quantity} of {request.symbol} "
                    f"simulated at {limit_price:.2f}"
                )
            return TradeOutcome.not_filled(
                order_id,
                f"Limit BUY order for {request.symbol} not filled: market low "
                f"{latest.low:.2f} did not reach limit price {limit_price:.2f}"
            )

        if latest.high >= limit_price:
            return TradeOutcome.filled(
                order_id, limit_price, quantity,
                f"Limit SELL order for {quantity} of {request.symbol} "
                f"simulated at {limit_price:.2f}"
            )
        return TradeOutcome.not_filled(
            order_id,
            f"Limit SELL order for {request.symbol} not filled: market high "
            f"{latest.high:.2f} did not reach limit price {limit_price:.2f}"
        )

    def _check_candle(self, candle: Candle, symbol: str) -> None:
        for name in ("low", "high", "close"):
            value = getattr(candle, name)
            if not isinstance(value, (int, float)) or not math.isfinite(value):
                raise MarketDataIntegrityError(
                    f"Latest candle for '{symbol}' has invalid {name} price: {value!r}",
                    symbol=symbol,
                    timeframe=self.timeframe.value
                )
