"""
Candle Engine - Market Data Processing and Order Simulation Core

Ingests Brazilian-formatted OHLCV candle files, keeps an in-memory time
series per instrument and timeframe, computes technical indicators over
stored series and simulates order fills against the latest known bar.
"""

__version__ = "0.1.0"
__author__ = "Candle Engine Team"
