# ========================
# src/wrangler/transformation.py
# ========================

"""
Data Transformation Module

Row and column reshaping for Tables: projection, filtering, sorting,
derived columns and joins.
"""

import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List, Mapping, Sequence, Tuple

from .errors import DuplicateColumnError
from .table import ColumnType, Table

logger = logging.getLogger(__name__)

Row = Dict[str, Any]
Predicate = Callable[[Row], Any]

UNCLASSIFIED = "Unclassified"


class TableTransformer:
    """
    Stateless reshaping operations. Every method returns a new Table.
    """

    def select(self, table: Table, column_names: Sequence[str]) -> Table:
        """Project onto the listed columns, in the listed order."""
        names = list(column_names)
        table.require_columns(names)
        if len(set(names)) != len(names):
            duplicate = next(name for name in names if names.count(name) > 1)
            raise DuplicateColumnError(duplicate)

        schema = table.schema
        rows = [{name: row[name] for name in names} for row in table]
        return Table(names, rows, schema={name: schema[name] for name in names})

    def filter(self, table: Table, predicate: Predicate) -> Table:
        """Keep rows for which the predicate is true, preserving order."""
        rows = [row for row in table if predicate(dict(row))]
        logger.debug(f"Filter kept {len(rows)}/{len(table)} rows")
        return Table(table.columns, rows, schema=table.schema)

    def sort_by(self, table: Table, column: str, descending: bool = False) -> Table:
        """
        Stable sort on one column.

        Rows with equal values keep their input order. Null values always
        sort last, whichever the direction.
        """
        table.require_columns([column])
        rows = table.rows
        present = [row for row in rows if row[column] is not None]
        missing = [row for row in rows if row[column] is None]
        # sorted() stays stable with reverse=True
        present = sorted(present, key=lambda row: row[column], reverse=descending)
        return Table(table.columns, present + missing, schema=table.schema)

    def derive_column(self, table: Table, new_name: str, fn: Callable[[Row], Any]) -> Table:
        """Append a column whose value is fn(row) for each row."""
        if table.has_column(new_name):
            raise DuplicateColumnError(new_name)

        rows = []
        for row in table:
            value = fn(dict(row))
            row[new_name] = value
            rows.append(row)
        return Table(table.columns + [new_name], rows, schema=table.schema)

    def classify(self,
                 table: Table,
                 new_name: str,
                 rules: Sequence[Tuple[Predicate, Any]],
                 default: Any = UNCLASSIFIED) -> Table:
        """
        Append a label column from ordered (predicate, label) rules.

        The first matching rule wins. Rows that match no rule get `default`,
        so the outcome is never left missing. A predicate raising TypeError
        (typically comparing a null cell) counts as no match.
        """
        def label_for(row: Row) -> Any:
            for predicate, label in rules:
                try:
                    matched = predicate(row)
                except TypeError:
                    matched = False
                if matched:
                    return label
            return default

        derived = self.derive_column(table, new_name, label_for)
        schema = derived.schema
        schema[new_name] = ColumnType.CATEGORICAL
        return Table(derived.columns, derived.rows, schema=schema)

    def head(self, table: Table, n: int = 5) -> Table:
        """First n rows."""
        if n < 0:
            raise ValueError("n must be non-negative")
        return Table(table.columns, table.rows[:n], schema=table.schema)

    def join(self, left: Table, right: Table, on_column: str,
             suffixes: Tuple[str, str] = ("_x", "_y")) -> Table:
        """
        Inner join on equal values of `on_column`.

        Output columns are the left columns followed by the right columns
        other than the key. Non-key names present on both sides are
        suffixed. Rows without a match on the other side are dropped, as
        are rows whose key is null.
        """
        left.require_columns([on_column])
        right.require_columns([on_column])

        left_names, right_names = self._join_column_names(left, right, on_column, suffixes)

        right_index: Dict[Any, List[Row]] = defaultdict(list)
        for row in right:
            if row[on_column] is not None:
                right_index[row[on_column]].append(row)

        rows = []
        for left_row in left:
            key = left_row[on_column]
            if key is None:
                continue
            for right_row in right_index.get(key, []):
                joined = {left_names[name]: value for name, value in left_row.items()}
                for name, value in right_row.items():
                    if name != on_column:
                        joined[right_names[name]] = value
                rows.append(joined)

        columns = [left_names[name] for name in left.columns]
        columns += [right_names[name] for name in right.columns if name != on_column]

        schema = {left_names[name]: kind for name, kind in left.schema.items()}
        schema.update({right_names[name]: kind for name, kind in right.schema.items()
                       if name != on_column})
        logger.debug(f"Join on '{on_column}' matched {len(rows)} rows "
                     f"(left={len(left)}, right={len(right)})")
        return Table(columns, rows, schema=schema)

    @staticmethod
    def _join_column_names(left: Table, right: Table, on_column: str,
                           suffixes: Tuple[str, str]) -> Tuple[Mapping[str, str], Mapping[str, str]]:
        shared = (set(left.columns) & set(right.columns)) - {on_column}
        left_suffix, right_suffix = suffixes
        left_names = {name: name + left_suffix if name in shared else name for name in left.columns}
        right_names = {name: name + right_suffix if name in shared else name
                       for name in right.columns if name != on_column}
        clashes = set(left_names.values()) & set(right_names.values())
        if clashes:
            raise DuplicateColumnError(sorted(clashes)[0])
        return left_names, right_names
