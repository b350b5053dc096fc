# ========================
# src/wrangler/ingestion.py
# ========================

"""
Data Ingestion Module

Reads comma-separated files into Tables, converting each column to its
primitive type.
"""

import csv
import logging
import math
import re
from datetime import date, datetime
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional

from .errors import NotFoundError, ParseError
from .table import ColumnType, Table

logger = logging.getLogger(__name__)

_INT_PATTERN = re.compile(r'[+-]?\d+')
_FLOAT_PATTERN = re.compile(r'[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?')
_DATE_PATTERN = re.compile(r'\d{4}-\d{2}-\d{2}')
_BOOLEAN_LITERALS = {'true': True, 'false': False}


def _parse_int(text: str) -> int:
    if not _INT_PATTERN.fullmatch(text):
        raise ValueError(f"not an integer: {text!r}")
    return int(text)


def _parse_float(text: str) -> float:
    if not _FLOAT_PATTERN.fullmatch(text):
        raise ValueError(f"not a number: {text!r}")
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"number out of range: {text!r}")
    return value


def _parse_bool(text: str) -> bool:
    try:
        return _BOOLEAN_LITERALS[text.lower()]
    except KeyError:
        raise ValueError(f"not a boolean: {text!r}") from None


def _parse_date(text: str) -> date:
    if not _DATE_PATTERN.fullmatch(text):
        raise ValueError(f"not an ISO date: {text!r}")
    return datetime.strptime(text, "%Y-%m-%d").date()


# Inference tries these in order; the first parser that accepts every
# non-empty cell of a column decides the column type.
_PARSERS: List[tuple] = [
    (ColumnType.INTEGER, _parse_int),
    (ColumnType.FLOAT, _parse_float),
    (ColumnType.BOOLEAN, _parse_bool),
    (ColumnType.DATE, _parse_date),
]

_DECLARED_PARSERS: Dict[ColumnType, Callable[[str], Any]] = {
    ColumnType.INTEGER: _parse_int,
    ColumnType.FLOAT: _parse_float,
    ColumnType.BOOLEAN: _parse_bool,
    ColumnType.DATE: _parse_date,
    ColumnType.STRING: str,
    ColumnType.CATEGORICAL: str,
}


class CSVReader:
    """
    Reads a delimited file with a header row into a Table.
    The file handle is held only for the duration of a read.
    """

    def __init__(self, file_path: str, delimiter: str = ',',
                 schema: Optional[Mapping[str, ColumnType]] = None):
        """
        Initialize the CSV reader.

        Args:
            file_path (str): Path to the CSV file to read
            delimiter (str): Field delimiter
            schema (dict): Optional declared column types that override inference
        """
        self.file_path = str(file_path)
        self.delimiter = delimiter
        self.schema = dict(schema or {})
        self.header: List[str] = []
        logger.info(f"Initialized CSVReader for file: {self.file_path}")

    def read_in_chunks(self, chunk_size: int) -> Iterator[List[Dict[str, str]]]:
        """
        A generator that yields raw rows, as dicts of strings, in chunks.

        Args:
            chunk_size (int): The number of rows to yield per chunk.

        Yields:
            list[dict]: A list of dictionaries representing a chunk of rows.

        Raises:
            NotFoundError: If the file does not exist
            ParseError: If the header is missing or duplicated, or a row has
                        a different number of fields than the header, or
                        the file is not valid UTF-8 or CSV
        """
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")

        try:
            with open(self.file_path, 'r', newline='', encoding='utf-8-sig') as f:
                reader = csv.reader(f, delimiter=self.delimiter, strict=True)
                self.header = self._read_header(reader)
                logger.info(f"CSV header: {self.header}")

                chunk = []
                row_count = 0
                for fields in reader:
                    if not fields:
                        continue
                    if len(fields) != len(self.header):
                        raise ParseError(
                            f"expected {len(self.header)} fields, found {len(fields)}",
                            path=self.file_path,
                            line_number=reader.line_num,
                        )
                    chunk.append(dict(zip(self.header, fields)))
                    row_count += 1

                    if len(chunk) == chunk_size:
                        logger.debug(f"Yielding chunk with {len(chunk)} rows")
                        yield chunk
                        chunk = []

                if chunk:
                    logger.debug(f"Yielding final chunk with {len(chunk)} rows")
                    yield chunk

                logger.info(f"Total rows read: {row_count}")

        except FileNotFoundError:
            logger.error(f"File '{self.file_path}' was not found")
            raise NotFoundError(self.file_path) from None
        except csv.Error as e:
            logger.error(f"Error reading CSV file: {e}")
            raise ParseError(str(e), path=self.file_path) from e
        except UnicodeDecodeError as e:
            logger.error(f"File '{self.file_path}' is not valid UTF-8: {e}")
            raise ParseError(f"not valid UTF-8: {e}", path=self.file_path) from e
        except ParseError as e:
            logger.error(f"Error reading CSV file: {e}")
            raise

    def _read_header(self, reader) -> List[str]:
        for fields in reader:
            if not fields:
                continue
            duplicates = sorted({name for name in fields if fields.count(name) > 1})
            if duplicates:
                raise ParseError(f"duplicate column names in header: {duplicates}",
                                 path=self.file_path, line_number=reader.line_num)
            return fields
        raise ParseError("missing header row", path=self.file_path, line_number=1)

    def load(self, chunk_size: int = 10000) -> Table:
        """
        Read the whole file and convert it into a typed Table.

        Empty cells become None. Each column is converted to the first type
        that accepts every non-empty cell (integer, float, boolean, ISO date),
        falling back to string. Declared schema types are enforced instead.

        Returns:
            Table: The parsed table
        """
        raw_rows: List[Dict[str, str]] = []
        for chunk in self.read_in_chunks(chunk_size):
            raw_rows.extend(chunk)

        unknown = [name for name in self.schema if name not in self.header]
        if unknown:
            raise ParseError(f"declared columns not in header: {unknown}", path=self.file_path)

        converted = {name: self._convert_column(name, [row[name] for row in raw_rows])
                     for name in self.header}
        rows = [
            {name: converted[name][index] for name in self.header}
            for index in range(len(raw_rows))
        ]
        table = Table(self.header, rows, schema=self.schema)
        logger.info(f"Loaded {len(table)} rows x {len(self.header)} columns from {self.file_path}")
        return table

    def _convert_column(self, name: str, cells: List[str]) -> List[Any]:
        present = [cell for cell in cells if cell != '']

        declared = self.schema.get(name)
        if declared is not None:
            parser = _DECLARED_PARSERS[ColumnType(declared)]
            try:
                values = [parser(cell) for cell in present]
            except ValueError as e:
                raise ParseError(f"column '{name}' declared {ColumnType(declared).value}: {e}",
                                 path=self.file_path) from e
            return self._restore_missing(cells, values)

        if present:
            for column_type, parser in _PARSERS:
                try:
                    values = [parser(cell) for cell in present]
                except ValueError:
                    continue
                logger.debug(f"Column '{name}' inferred as {column_type.value}")
                return self._restore_missing(cells, values)

        return [cell if cell != '' else None for cell in cells]

    @staticmethod
    def _restore_missing(cells: List[str], values: List[Any]) -> List[Any]:
        parsed = iter(values)
        return [next(parsed) if cell != '' else None for cell in cells]


def load(source_path: str, schema: Optional[Mapping[str, ColumnType]] = None) -> Table:
    """Parse a comma-separated file into a Table."""
    return CSVReader(source_path, schema=schema).load()
