"""
Candle record ingestion from semicolon-delimited source files.

Columns are looked up by header name, so reordered files parse the same
way. The ingestor only produces candles in source-row order; sorting,
deduplication and storage belong to the MarketDataStore.

Expected layout:
    Ativo;Data;Hora;Abertura;Máximo;Mínimo;Fechamento;Volume;Quantidade
    WINFUT;30/12/2024;18:20:00;124.080;124.090;123.938;123.983;600.822.115,84;24.228
"""

import csv
import io
from pathlib import Path
from typing import Iterable, Optional, Union

import structlog

from ..errors import DataFormatError, SourceReadError
from .models import Candle
from .parsers import BRAZILIAN, NumberFormat, parse_datetime, parse_decimal, parse_trade_count

logger = structlog.get_logger(__name__)

SYMBOL_COLUMN = "Ativo"
DATE_COLUMN = "Data"
TIME_COLUMN = "Hora"
OPEN_COLUMN = "Abertura"
HIGH_COLUMN = "Máximo"
LOW_COLUMN = "Mínimo"
CLOSE_COLUMN = "Fechamento"
VOLUME_COLUMN = "Volume"
TRADES_COLUMN = "Quantidade"

MANDATORY_COLUMNS = (
    DATE_COLUMN,
    TIME_COLUMN,
    OPEN_COLUMN,
    HIGH_COLUMN,
    LOW_COLUMN,
    CLOSE_COLUMN,
    VOLUME_COLUMN,
    TRADES_COLUMN,
)

_BOM = "\ufeff"


class CandleCsvReader:
    """Reads Candle records from a delimited text source with a header row."""

    def __init__(self, number_format: NumberFormat = BRAZILIAN,
                 delimiter: str = ";", encoding: str = "utf-8"):
        self.number_format = number_format
        self.delimiter = delimiter
        self.encoding = encoding

    def read_path(self, path: Union[str, Path], default_symbol: str) -> list[Candle]:
        """
        Read every record of the file at path.

        Raises:
            SourceReadError: If the file cannot be opened or is not a well-formed table
            DataFormatError: If a record has a missing or unparsable field
        """
        source = str(path)
        try:
            with open(path, encoding=self.encoding, newline="") as f:
                candles = self.read_stream(f, default_symbol, source=source)
        except OSError as e:
            raise SourceReadError(f"Failed to open source file '{source}': {e}",
                                  path=source) from e

        logger.info("Loaded candles from source", path=source, count=len(candles))
        return candles

    def read_bytes(self, data: bytes, default_symbol: str,
                   source: str = "<bytes>") -> list[Candle]:
        """Read records from an in-memory byte payload."""
        try:
            text = data.decode(self.encoding)
        except UnicodeDecodeError as e:
            raise SourceReadError(f"Source '{source}' is not valid {self.encoding}: {e}",
                                  path=source) from e
        return self.read_stream(io.StringIO(text, newline=""), default_symbol, source=source)

    def read_stream(self, stream: Iterable[str], default_symbol: str,
                    source: str = "<stream>") -> list[Candle]:
        """Read records from an open text stream positioned at the header row."""
        reader = csv.reader(stream, delimiter=self.delimiter)

        try:
            header = self._read_header(reader, source)
            columns = self._index_columns(header)

            candles = []
            while True:
                # Records may span lines when a quoted field holds a newline
                line = reader.line_num + 1
                record = next(reader, None)
                if record is None:
                    break
                if not record or all(not cell.strip() for cell in record):
                    continue
                self._check_shape(record, header, columns, source, line)
                candles.append(self._parse_record(record, columns, default_symbol, line))
        except csv.Error as e:
            raise SourceReadError(f"Malformed table in '{source}' at line {reader.line_num}: {e}",
                                  path=source, line=reader.line_num) from e
        except UnicodeDecodeError as e:
            raise SourceReadError(f"Source '{source}' is not valid {self.encoding}: {e}",
                                  path=source, line=reader.line_num) from e

        return candles

    def _read_header(self, reader, source: str) -> list[str]:
        header = next(reader, None)
        if not header or all(not cell.strip() for cell in header):
            raise SourceReadError(f"Source '{source}' has no header row", path=source, line=1)
        return header

    def _index_columns(self, header: list[str]) -> dict[str, int]:
        columns: dict[str, int] = {}
        for position, name in enumerate(header):
            name = name.strip()
            if position == 0:
                name = name.lstrip(_BOM)
            # First occurrence wins for duplicated header names
            columns.setdefault(name, position)
        return columns

    def _check_shape(self, record: list[str], header: list[str],
                     columns: dict[str, int], source: str, line: int) -> None:
        if len(record) > len(header):
            raise SourceReadError(
                f"Record at line {line} of '{source}' has {len(record)} fields, "
                f"header declares {len(header)}",
                path=source, line=line
            )
        if len(record) < len(header):
            for name in MANDATORY_COLUMNS:
                position = columns.get(name)
                if position is not None and position >= len(record):
                    raise DataFormatError(f"Missing '{name}' field in record",
                                          field=name, line=line)
            raise SourceReadError(
                f"Record at line {line} of '{source}' has {len(record)} fields, "
                f"header declares {len(header)}",
                path=source, line=line
            )

    def _get_field(self, record: list[str], columns: dict[str, int],
                   name: str) -> Optional[str]:
        position = columns.get(name)
        if position is None or position >= len(record):
            return None
        return record[position]

    def _require_field(self, record: list[str], columns: dict[str, int],
                       name: str, line: int) -> str:
        value = self._get_field(record, columns, name)
        if value is None:
            raise DataFormatError(f"Missing '{name}' field in record", field=name, line=line)
        return value

    def _parse_record(self, record: list[str], columns: dict[str, int],
                      default_symbol: str, line: int) -> Candle:
        symbol = (self._get_field(record, columns, SYMBOL_COLUMN) or "").strip() or default_symbol

        raw = {name: self._require_field(record, columns, name, line) for name in MANDATORY_COLUMNS}
        fmt = self.number_format

        timestamp = parse_datetime(
            raw[DATE_COLUMN], raw[TIME_COLUMN],
            date_field=DATE_COLUMN, time_field=TIME_COLUMN, line=line
        )

        return Candle(
            symbol=symbol,
            timestamp=timestamp,
            open=parse_decimal(raw[OPEN_COLUMN], fmt, field=OPEN_COLUMN, line=line),
            high=parse_decimal(raw[HIGH_COLUMN], fmt, field=HIGH_COLUMN, line=line),
            low=parse_decimal(raw[LOW_COLUMN], fmt, field=LOW_COLUMN, line=line),
            close=parse_decimal(raw[CLOSE_COLUMN], fmt, field=CLOSE_COLUMN, line=line),
            volume=parse_decimal(raw[VOLUME_COLUMN], fmt, field=VOLUME_COLUMN, line=line),
            trades=parse_trade_count(raw[TRADES_COLUMN], fmt, field=TRADES_COLUMN, line=line),
        )


def load_candles_from_csv(path: Union[str, Path], default_symbol: str, *,
                          number_format: NumberFormat = BRAZILIAN,
                          delimiter: str = ";",
                          encoding: str = "utf-8") -> list[Candle]:
    """
    Load candles from a semicolon-delimited file in source-row order.

    Args:
        path: File to read
        default_symbol: Symbol used when the Ativo column is absent or empty
        number_format: Separator convention of numeric fields
        delimiter: Field delimiter
        encoding: Text encoding of the file

    Returns:
        Candles in the order their rows appear in the file

    Raises:
        SourceReadError: If the file cannot be read as a table
        DataFormatError: If a record has a missing or unparsable field
    """
    reader = CandleCsvReader(number_format=number_format, delimiter=delimiter, encoding=encoding)
    return reader.read_path(path, default_symbol)


def read_candles(source: Union[bytes, str, Iterable[str]], default_symbol: str, *,
                 number_format: NumberFormat = BRAZILIAN,
                 delimiter: str = ";",
                 encoding: str = "utf-8") -> list[Candle]:
    """
    Read candles from an in-memory payload or an already-open text stream.

    Bytes are decoded with encoding; a str is taken as the whole file
    content; anything else is iterated as lines.
    """
    reader = CandleCsvReader(number_format=number_format, delimiter=delimiter, encoding=encoding)
    if isinstance(source, bytes):
        return reader.read_bytes(source, default_symbol)
    if isinstance(source, str):
        return reader.read_stream(io.StringIO(source, newline=""), default_symbol)
    return reader.read_stream(source, default_symbol)
