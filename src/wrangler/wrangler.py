# ========================
# src/wrangler/wrangler.py
# ========================

"""
Table Wrangler

Single entry point for the wrangling operations. Delegates to the reader,
cleaner, transformer, aggregator and saver components.
"""

import logging
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Tuple

from .aggregation import Aggregations, TableAggregator
from .cleaning import FillStrategy, TableCleaner
from .ingestion import CSVReader
from .storage import save, to_delimited
from .table import ColumnType, GroupSummary, Table
from .transformation import UNCLASSIFIED, Predicate, TableTransformer

logger = logging.getLogger(__name__)


class TableWrangler:
    """
    Loads tables, applies cleaning and derivation operations, and produces
    grouped summaries. Every operation returns a new value; input tables are
    never modified.
    """

    def __init__(self, delimiter: str = ','):
        """
        Initialize the wrangler.

        Args:
            delimiter (str): Field delimiter used by load and to_delimited
        """
        self.delimiter = delimiter
        self.cleaner = TableCleaner()
        self.transformer = TableTransformer()
        self.aggregator = TableAggregator()
        self.operations_applied = 0
        logger.info("TableWrangler initialized")

    def _record(self, operation: str, table: Optional[Table] = None) -> None:
        self.operations_applied += 1
        if table is not None:
            logger.debug(f"{operation}: {len(table)} rows x {len(table.columns)} columns")
        else:
            logger.debug(operation)

    # Input / output

    def load(self, source_path: str, schema: Optional[Mapping[str, ColumnType]] = None) -> Table:
        table = CSVReader(source_path, delimiter=self.delimiter, schema=schema).load()
        self._record("load", table)
        return table

    def to_delimited(self, table: Table) -> str:
        self._record("to_delimited")
        return to_delimited(table, delimiter=self.delimiter)

    def save(self, table: Table, path) -> str:
        self._record("save")
        return save(table, path)

    # Reshaping

    def select(self, table: Table, column_names: Sequence[str]) -> Table:
        result = self.transformer.select(table, column_names)
        self._record("select", result)
        return result

    def filter(self, table: Table, predicate: Predicate) -> Table:
        result = self.transformer.filter(table, predicate)
        self._record("filter", result)
        return result

    def sort_by(self, table: Table, column: str, descending: bool = False) -> Table:
        result = self.transformer.sort_by(table, column, descending)
        self._record("sort_by", result)
        return result

    def derive_column(self, table: Table, new_name: str, fn: Callable[[Dict[str, Any]], Any]) -> Table:
        result = self.transformer.derive_column(table, new_name, fn)
        self._record("derive_column", result)
        return result

    def classify(self, table: Table, new_name: str,
                 rules: Sequence[Tuple[Predicate, Any]], default: Any = UNCLASSIFIED) -> Table:
        result = self.transformer.classify(table, new_name, rules, default)
        self._record("classify", result)
        return result

    def head(self, table: Table, n: int = 5) -> Table:
        result = self.transformer.head(table, n)
        self._record("head", result)
        return result

    def join(self, left: Table, right: Table, on_column: str) -> Table:
        result = self.transformer.join(left, right, on_column)
        self._record("join", result)
        return result

    # Cleaning

    def count_missing(self, table: Table) -> Dict[str, int]:
        self._record("count_missing")
        return self.cleaner.count_missing(table)

    def fill_missing(self, table: Table, column: str, strategy: FillStrategy) -> Table:
        result = self.cleaner.fill_missing(table, column, strategy)
        self._record("fill_missing", result)
        return result

    def drop_rows_with_missing(self, table: Table, column: str) -> Table:
        result = self.cleaner.drop_rows_with_missing(table, column)
        self._record("drop_rows_with_missing", result)
        return result

    def drop_duplicates(self, table: Table, key_columns: Optional[Sequence[str]] = None) -> Table:
        result = self.cleaner.drop_duplicates(table, key_columns)
        self._record("drop_duplicates", result)
        return result

    # Summaries

    def group_summarize(self, table: Table, group_columns: Sequence[str],
                        aggregations: Aggregations) -> GroupSummary:
        summary = self.aggregator.group_summarize(table, group_columns, aggregations)
        self._record("group_summarize")
        return summary

    def describe(self, table: Table) -> Dict[str, Dict[str, Any]]:
        self._record("describe")
        return self.aggregator.describe(table)

    def get_statistics(self) -> Dict[str, int]:
        """Operation count plus the cleaner's statistics."""
        return {
            'operations_applied': self.operations_applied,
            **self.cleaner.get_statistics(),
        }
