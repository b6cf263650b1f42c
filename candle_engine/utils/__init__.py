"""
Utility functions module.

Time Semantics:
- Candle timestamps are UTC instants taken verbatim from the source
- Naive datetimes handed in by callers are interpreted as UTC
- Timestamps cross the service boundary as epoch milliseconds
"""
