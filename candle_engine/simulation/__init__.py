"""
Order fill simulation against the latest stored candle.
"""
from .orders import OrderAction, OrderKind, OrderRequest, OrderSimulator, TradeOutcome

__all__ = ["OrderAction", "OrderKind", "OrderRequest", "OrderSimulator", "TradeOutcome"]
