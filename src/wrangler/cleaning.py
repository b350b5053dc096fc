# ========================
# src/wrangler/cleaning.py
# ========================

"""
Data Cleaning Module

Missing-value handling and de-duplication for Tables.
"""

import logging
from collections import Counter
from typing import Any, Dict, Optional, Sequence

from .errors import ColumnTypeError, EmptyColumnError
from .table import ColumnType, Table, infer_column_type, is_numeric

logger = logging.getLogger(__name__)


class FillStrategy:
    """
    How fill_missing computes the replacement for null cells.

    Use the constructors: FillStrategy.mode(), FillStrategy.mean() or
    FillStrategy.constant(value).
    """

    MODE = "mode"
    MEAN = "mean"
    CONSTANT = "constant"

    def __init__(self, kind: str, value: Any = None):
        if kind not in (self.MODE, self.MEAN, self.CONSTANT):
            raise ValueError(f"Unknown fill strategy: {kind}")
        if kind == self.CONSTANT and value is None:
            raise ValueError("A constant fill value cannot be None")
        self.kind = kind
        self.value = value

    @classmethod
    def mode(cls) -> 'FillStrategy':
        return cls(cls.MODE)

    @classmethod
    def mean(cls) -> 'FillStrategy':
        return cls(cls.MEAN)

    @classmethod
    def constant(cls, value: Any) -> 'FillStrategy':
        return cls(cls.CONSTANT, value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FillStrategy):
            return NotImplemented
        return self.kind == other.kind and self.value == other.value

    def __repr__(self) -> str:
        if self.kind == self.CONSTANT:
            return f"FillStrategy.constant({self.value!r})"
        return f"FillStrategy.{self.kind}()"


class TableCleaner:
    """
    Applies missing-value and duplicate handling to Tables.
    Keeps running statistics of what it changed.
    """

    def __init__(self):
        """Initialize the table cleaner."""
        self.cells_filled = 0
        self.rows_dropped = 0
        self.duplicates_dropped = 0
        logger.info("TableCleaner initialized")

    def count_missing(self, table: Table) -> Dict[str, int]:
        """
        Count null cells per column.

        Returns:
            dict: Column name to number of missing values, in column order
        """
        counts = {name: 0 for name in table.columns}
        for row in table:
            for name, value in row.items():
                if value is None:
                    counts[name] += 1
        return counts

    def fill_missing(self, table: Table, column: str, strategy: FillStrategy) -> Table:
        """
        Replace null cells of one column.

        Args:
            table (Table): Source table
            column (str): Column to fill
            strategy (FillStrategy): mode, mean or constant

        Returns:
            Table: A new table with the column's nulls replaced

        Raises:
            UnknownColumnError: If the column is absent
            EmptyColumnError: If mode or mean is requested on an all-null column
            ColumnTypeError: If mean is requested on non-numeric values
        """
        values = table.column(column)
        fill_value = self._compute_fill_value(column, values, strategy)

        filled = 0
        rows = []
        for row in table:
            if row[column] is None:
                row[column] = fill_value
                filled += 1
            rows.append(row)

        self.cells_filled += filled
        logger.debug(f"Filled {filled} missing cells in '{column}' using {strategy!r}")
        return Table(table.columns, rows, schema=self._carry_schema(table, column, rows))

    def _compute_fill_value(self, column: str, values: Sequence[Any], strategy: FillStrategy) -> Any:
        if strategy.kind == FillStrategy.CONSTANT:
            return strategy.value

        present = [v for v in values if v is not None]
        if not present:
            raise EmptyColumnError(column)

        if strategy.kind == FillStrategy.MODE:
            # most_common keeps first-encountered order among equal counts
            return Counter(present).most_common(1)[0][0]

        for value in present:
            if not is_numeric(value):
                raise ColumnTypeError(column, "mean", value)
        return sum(present) / len(present)

    @staticmethod
    def _carry_schema(table: Table, column: str, rows) -> Dict[str, ColumnType]:
        """Keep declared types, re-deriving the filled column unless it is categorical."""
        schema = table.schema
        if schema[column] != ColumnType.CATEGORICAL:
            schema[column] = infer_column_type(row[column] for row in rows)
        return schema

    def drop_rows_with_missing(self, table: Table, column: str) -> Table:
        """Remove rows whose value in `column` is null."""
        table.require_columns([column])
        rows = [row for row in table if row[column] is not None]
        dropped = len(table) - len(rows)
        self.rows_dropped += dropped
        logger.debug(f"Dropped {dropped} rows with missing '{column}'")
        return Table(table.columns, rows, schema=table.schema)

    def drop_duplicates(self, table: Table, key_columns: Optional[Sequence[str]] = None) -> Table:
        """
        Keep the first row for each distinct combination of key values.

        Args:
            table (Table): Source table
            key_columns (list[str]): Columns forming the key; all columns if omitted

        Returns:
            Table: De-duplicated table in original order
        """
        keys = list(key_columns) if key_columns is not None else table.columns
        table.require_columns(keys)

        seen = set()
        rows = []
        for row in table:
            key = tuple(_hashable(row[name]) for name in keys)
            if key in seen:
                continue
            seen.add(key)
            rows.append(row)

        dropped = len(table) - len(rows)
        self.duplicates_dropped += dropped
        logger.debug(f"Dropped {dropped} duplicate rows on key {keys}")
        return Table(table.columns, rows, schema=table.schema)

    def get_statistics(self) -> Dict[str, int]:
        """Get cleaning statistics."""
        return {
            'cells_filled': self.cells_filled,
            'rows_dropped': self.rows_dropped,
            'duplicates_dropped': self.duplicates_dropped,
        }


def _hashable(value: Any) -> Any:
    # Cells may hold lists or dicts produced by derive_column
    try:
        hash(value)
    except TypeError:
        return repr(value)
    return value
