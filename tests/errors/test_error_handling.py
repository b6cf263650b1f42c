"""
Error handling tests for the candle engine.

Tests cover the exception hierarchy, the context each error carries and the
translation of engine errors into the external error taxonomy.
"""

import pytest

from candle_engine.errors import (
    ConfigurationError,
    DataFormatError,
    DataLookupError,
    DataQualityError,
    EngineError,
    ErrorCode,
    MarketDataIntegrityError,
    ServiceError,
    SourceReadError,
    SystemFailureError,
    error_to_status,
)


class TestErrorClassification:
    """Test error classification system."""

    def test_data_quality_error_hierarchy(self):
        """Test that data quality errors have proper hierarchy."""
        base_error = DataQualityError("base error")
        assert base_error.recoverable is True
        assert base_error.context == {}
        assert isinstance(base_error, EngineError)

        read_error = SourceReadError("bad table", path="/tmp/x.csv", line=4)
        assert isinstance(read_error, DataQualityError)
        assert read_error.path == "/tmp/x.csv"
        assert read_error.line == 4

        lookup_error = DataLookupError("missing", symbol="PETR4", timeframe="1day")
        assert isinstance(lookup_error, DataQualityError)
        assert isinstance(lookup_error, LookupError)
        assert lookup_error.symbol == "PETR4"

    def test_system_failure_error_hierarchy(self):
        """Test that system failures are not recoverable by the caller."""
        config_error = ConfigurationError("bad period", parameter="period", value=0)
        assert isinstance(config_error, SystemFailureError)
        assert config_error.recoverable is False
        assert config_error.parameter == "period"
        assert config_error.value == 0

        integrity_error = MarketDataIntegrityError("nan close", symbol="PETR4")
        assert isinstance(integrity_error, SystemFailureError)
        assert integrity_error.symbol == "PETR4"

    def test_data_format_error_message_includes_location(self):
        """Test that the message names the field and line when known."""
        error = DataFormatError("Missing 'Quantidade' field in record", field="Quantidade", line=2)
        assert str(error) == "Missing 'Quantidade' field in record (field 'Quantidade', line 2)"

        error = DataFormatError("Bad value", field="Volume")
        assert str(error) == "Bad value (field 'Volume')"

        assert str(DataFormatError("Bad value")) == "Bad value"

    def test_context_is_kept(self):
        error = ConfigurationError("bad", context={"errors": ["a"]})
        assert error.context == {"errors": ["a"]}


class TestErrorToStatus:
    """Test mapping onto external error codes."""

    @pytest.mark.parametrize("error, code", [
        (SourceReadError("unreadable", path="a.csv"), ErrorCode.INVALID_ARGUMENT),
        (DataFormatError("bad", field="Data", line=3), ErrorCode.INVALID_ARGUMENT),
        (DataLookupError("not stored", symbol="X"), ErrorCode.NOT_FOUND),
        (ConfigurationError("bad period"), ErrorCode.FAILED_PRECONDITION),
        (MarketDataIntegrityError("nan"), ErrorCode.INTERNAL),
        (RuntimeError("boom"), ErrorCode.INTERNAL),
    ])
    def test_codes(self, error, code):
        assert error_to_status(error).code is code

    def test_data_format_details(self):
        """Test that field and line reach the caller."""
        status = error_to_status(DataFormatError("bad", field="Quantidade", line=2))

        assert status.message.startswith("Data format error: ")
        assert status.details["field"] == "Quantidade"
        assert status.details["line"] == 2

    def test_lookup_details(self):
        status = error_to_status(DataLookupError("not stored", symbol="X", timeframe="5m"))
        assert status.details == {"symbol": "X", "timeframe": "5m"}
        assert status.message == "not stored"

    def test_internal_message(self):
        status = error_to_status(ValueError("unexpected"))
        assert status.message == "An internal error occurred: unexpected"

    def test_service_error_passes_through(self):
        original = ServiceError(ErrorCode.INVALID_ARGUMENT, "bad json")
        assert error_to_status(original) is original

    def test_to_dict(self):
        status = ServiceError(ErrorCode.NOT_FOUND, "gone", {"symbol": "X"})
        assert status.to_dict() == {"code": "NOT_FOUND", "message": "gone",
                                    "details": {"symbol": "X"}}
        assert str(status) == "NOT_FOUND: gone"
