"""
Market data ingestion and storage module.

Handles locale-aware parsing of candle files, the canonical candle model
and the in-memory time-series store the analytics read from.
"""
