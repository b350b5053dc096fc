# ========================
# src/wrangler/table.py
# ========================

"""
Table Data Model

In-memory tables made of ordered rows with a fixed column header, plus the
GroupSummary produced by grouped aggregations.
"""

from datetime import date
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Mapping, NamedTuple, Optional, Sequence, Tuple

from .errors import DuplicateColumnError, RowShapeError, UnknownColumnError


class ColumnType(str, Enum):
    """Primitive type of a table column."""
    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    DATE = "date"
    CATEGORICAL = "categorical"


class ColumnSpec(NamedTuple):
    name: str
    type: ColumnType


def is_numeric(value: Any) -> bool:
    """True for ints and floats, but not for booleans."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def infer_column_type(values: Iterable[Any]) -> ColumnType:
    """
    Infer the primitive type of a column from its Python values.

    Missing values are ignored. A column without any non-missing value is
    treated as a string column.
    """
    present = [v for v in values if v is not None]
    if not present:
        return ColumnType.STRING
    if all(isinstance(v, bool) for v in present):
        return ColumnType.BOOLEAN
    if all(isinstance(v, int) and not isinstance(v, bool) for v in present):
        return ColumnType.INTEGER
    if all(is_numeric(v) for v in present):
        return ColumnType.FLOAT
    if all(isinstance(v, date) for v in present):
        return ColumnType.DATE
    return ColumnType.STRING


class Table:
    """
    An ordered sequence of rows sharing one column header.

    Rows are dictionaries keyed by column name. Every row must carry exactly
    the header's columns. Tables are treated as values: the wrangling
    operations never modify a table, they build a new one.
    """

    def __init__(self,
                 columns: Sequence[str],
                 rows: Iterable[Mapping[str, Any]] = (),
                 schema: Optional[Mapping[str, ColumnType]] = None):
        """
        Build a table.

        Args:
            columns (list[str]): Ordered column names; must be unique
            rows (iterable[dict]): Rows keyed by column name
            schema (dict): Optional declared column types; columns not listed
                           get their type inferred from the values
        """
        self._columns: Tuple[str, ...] = tuple(columns)
        seen = set()
        for name in self._columns:
            if name in seen:
                raise DuplicateColumnError(name)
            seen.add(name)

        self._rows: List[Dict[str, Any]] = []
        for index, row in enumerate(rows):
            keys = set(row.keys())
            if keys != seen:
                raise RowShapeError(index, seen - keys, keys - seen)
            self._rows.append({name: row[name] for name in self._columns})

        schema = schema or {}
        unknown = [name for name in schema if name not in seen]
        if unknown:
            raise UnknownColumnError(unknown, self._columns)

        self._types: Dict[str, ColumnType] = {}
        for name in self._columns:
            declared = schema.get(name)
            if declared is not None:
                self._types[name] = ColumnType(declared)
            else:
                self._types[name] = infer_column_type(row[name] for row in self._rows)

    @classmethod
    def from_records(cls, records: Sequence[Mapping[str, Any]],
                     columns: Optional[Sequence[str]] = None,
                     schema: Optional[Mapping[str, ColumnType]] = None) -> 'Table':
        """Build a table from a list of dicts, taking the header from the first record."""
        if columns is None:
            columns = list(records[0].keys()) if records else []
        return cls(columns, records, schema)

    @property
    def columns(self) -> List[str]:
        return list(self._columns)

    @property
    def column_specs(self) -> List[ColumnSpec]:
        return [ColumnSpec(name, self._types[name]) for name in self._columns]

    @property
    def schema(self) -> Dict[str, ColumnType]:
        return dict(self._types)

    @property
    def rows(self) -> List[Dict[str, Any]]:
        """Copies of the rows, in order."""
        return [dict(row) for row in self._rows]

    def column_type(self, name: str) -> ColumnType:
        self.require_columns([name])
        return self._types[name]

    def column(self, name: str) -> List[Any]:
        """All values of one column, in row order."""
        self.require_columns([name])
        return [row[name] for row in self._rows]

    def has_column(self, name: str) -> bool:
        return name in self._types

    def require_columns(self, names: Iterable[str]) -> None:
        """Raise UnknownColumnError if any of the names is not a column."""
        missing = [name for name in names if name not in self._types]
        if missing:
            raise UnknownColumnError(missing, self._columns)

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        for row in self._rows:
            yield dict(row)

    def __getitem__(self, index: int) -> Dict[str, Any]:
        return dict(self._rows[index])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Table):
            return NotImplemented
        return (self._columns == other._columns
                and self._types == other._types
                and self._rows == other._rows)

    def __repr__(self) -> str:
        specs = ", ".join(f"{spec.name}:{spec.type.value}" for spec in self.column_specs)
        return f"Table([{specs}], rows={len(self._rows)})"


class GroupSummary:
    """
    Aggregate results keyed by group-by column values.

    Keys are tuples with one value per group column. When the grouping has a
    single column, lookups also accept the bare value.
    """

    def __init__(self,
                 group_columns: Sequence[str],
                 metrics: Sequence[str],
                 groups: Mapping[Tuple[Any, ...], Mapping[str, Any]]):
        self.group_columns = list(group_columns)
        self.metrics = list(metrics)
        self._groups: Dict[Tuple[Any, ...], Dict[str, Any]] = {
            tuple(key): dict(values) for key, values in groups.items()
        }

    def _normalize_key(self, key: Any) -> Tuple[Any, ...]:
        if isinstance(key, tuple) and len(key) == len(self.group_columns):
            return key
        if len(self.group_columns) == 1:
            return (key,)
        return tuple(key)

    def __getitem__(self, key: Any) -> Dict[str, Any]:
        return dict(self._groups[self._normalize_key(key)])

    def __contains__(self, key: Any) -> bool:
        return self._normalize_key(key) in self._groups

    def __iter__(self) -> Iterator[Tuple[Any, ...]]:
        return iter(self._groups)

    def __len__(self) -> int:
        return len(self._groups)

    def keys(self) -> List[Tuple[Any, ...]]:
        return list(self._groups)

    def items(self) -> List[Tuple[Tuple[Any, ...], Dict[str, Any]]]:
        return [(key, dict(values)) for key, values in self._groups.items()]

    def to_dict(self) -> Dict[Any, Dict[str, Any]]:
        """Plain dict view; single-column groupings use bare values as keys."""
        if len(self.group_columns) == 1:
            return {key[0]: dict(values) for key, values in self._groups.items()}
        return {key: dict(values) for key, values in self._groups.items()}

    def to_table(self) -> Table:
        """Flatten into a table with the group columns followed by the metrics."""
        rows = []
        for key, values in self._groups.items():
            row = dict(zip(self.group_columns, key))
            row.update(values)
            rows.append(row)
        return Table(self.group_columns + self.metrics, rows)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GroupSummary):
            return NotImplemented
        return (self.group_columns == other.group_columns
                and self.metrics == other.metrics
                and self._groups == other._groups)

    def __repr__(self) -> str:
        return f"GroupSummary(by={self.group_columns}, metrics={self.metrics}, groups={len(self._groups)})"
