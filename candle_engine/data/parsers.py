"""
Locale-aware parsers for converting source text fields to canonical values.

The candle files this engine reads use the Brazilian convention: "." groups
thousands and "," marks the decimal point ("600.822.115,84"), dates are
written dd/mm/yyyy and times HH:MM:SS. The convention is carried as an
explicit NumberFormat so that a source using "." as the decimal point can
be configured instead of being silently misread.
"""

import re
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Optional

from ..errors import DataFormatError

_DECIMAL_PATTERN = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")
_UNSIGNED_PATTERN = re.compile(r"^\d+$")

DATE_FORMAT = "%d/%m/%Y"
TIME_FORMAT = "%H:%M:%S"


@dataclass(frozen=True)
class NumberFormat:
    """Thousands and decimal separators used by a source."""
    thousands_sep: str = "."
    decimal_sep: str = ","

    def normalize(self, raw: str) -> str:
        """Rewrite a locale-formatted number into Python's float syntax."""
        text = raw.strip()
        if self.thousands_sep:
            text = text.replace(self.thousands_sep, "")
        if self.decimal_sep != ".":
            text = text.replace(self.decimal_sep, ".")
        return text


BRAZILIAN = NumberFormat(thousands_sep=".", decimal_sep=",")


def parse_decimal(raw: str, fmt: NumberFormat = BRAZILIAN, *,
                  field: Optional[str] = None,
                  line: Optional[int] = None) -> float:
    """
    Parse a locale-formatted decimal string.

    Every thousands separator is removed and the decimal separator is
    replaced with "." before parsing, so "1.234,56" becomes 1234.56.

    Args:
        raw: Source text
        fmt: Separator convention of the source
        field: Column name, reported on failure
        line: 1-based source line, reported on failure

    Returns:
        Parsed float value

    Raises:
        DataFormatError: If the normalized text is not a finite number
    """
    if not isinstance(raw, str):
        raise DataFormatError(f"Expected text for decimal, got {type(raw).__name__}",
                              field=field, line=line, raw_value=repr(raw))

    normalized = fmt.normalize(raw)
    if not _DECIMAL_PATTERN.match(normalized):
        raise DataFormatError(f"Failed to parse decimal '{raw}'",
                              field=field, line=line, raw_value=raw)

    return float(normalized)


def parse_trade_count(raw: str, fmt: NumberFormat = BRAZILIAN, *,
                      field: Optional[str] = None,
                      line: Optional[int] = None) -> int:
    """
    Parse an unsigned integer count that may carry thousands separators.

    "24.228" becomes 24228.

    Raises:
        DataFormatError: If the text is not a non-negative integer
    """
    if not isinstance(raw, str):
        raise DataFormatError(f"Expected text for count, got {type(raw).__name__}",
                              field=field, line=line, raw_value=repr(raw))

    text = raw.strip()
    if fmt.thousands_sep:
        text = text.replace(fmt.thousands_sep, "")

    if not _UNSIGNED_PATTERN.match(text):
        raise DataFormatError(f"Failed to parse unsigned integer '{raw}'",
                              field=field, line=line, raw_value=raw)

    return int(text)


def parse_datetime(date_str: str, time_str: str, *,
                   date_field: str = "date",
                   time_field: str = "time",
                   line: Optional[int] = None) -> datetime:
    """
    Combine a dd/mm/yyyy date and an HH:MM:SS time into a UTC instant.

    The wall-clock values are taken as UTC as-is; no timezone shift is
    applied.

    Args:
        date_str: Date text, e.g. "30/12/2024"
        time_str: Time text, e.g. "18:20:00"
        date_field: Column name reported when the date is invalid
        time_field: Column name reported when the time is invalid
        line: 1-based source line, reported on failure

    Returns:
        Timezone-aware UTC datetime

    Raises:
        DataFormatError: On malformed text or impossible calendar values
    """
    try:
        date_part = datetime.strptime(date_str.strip(), DATE_FORMAT).date()
    except (ValueError, AttributeError) as e:
        raise DataFormatError(f"Failed to parse date '{date_str}': {e}",
                              field=date_field, line=line, raw_value=date_str) from e

    try:
        time_part = datetime.strptime(time_str.strip(), TIME_FORMAT).time()
    except (ValueError, AttributeError) as e:
        raise DataFormatError(f"Failed to parse time '{time_str}': {e}",
                              field=time_field, line=line, raw_value=time_str) from e

    return datetime.combine(date_part, time_part, tzinfo=UTC)
