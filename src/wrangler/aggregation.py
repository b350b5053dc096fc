# ========================
# src/wrangler/aggregation.py
# ========================

"""
Data Aggregation Module

Grouped summaries and per-column descriptive statistics over Tables.
"""

import logging
from collections import defaultdict
from enum import Enum
from typing import Any, Dict, List, Mapping, Sequence, Tuple, Union

from .errors import ColumnTypeError
from .table import GroupSummary, Table, is_numeric

logger = logging.getLogger(__name__)


class AggregationOp(str, Enum):
    SUM = "sum"
    MEAN = "mean"
    COUNT = "count"
    MIN = "min"
    MAX = "max"


Aggregations = Mapping[str, Tuple[str, Union[str, AggregationOp]]]


class TableAggregator:
    """
    Partitions rows by group columns and reduces each partition.
    Only the summary values are kept; partitions hold row references, not copies.
    """

    def group_summarize(self,
                        table: Table,
                        group_columns: Sequence[str],
                        aggregations: Aggregations) -> GroupSummary:
        """
        Aggregate source columns per group.

        Args:
            table (Table): Source table
            group_columns (list[str]): Columns whose value combination forms the group key
            aggregations (dict): Metric name to (source column, op); op is one of
                                 sum, mean, count, min, max

        Returns:
            GroupSummary: Metrics per group, groups in first-appearance order

        Notes:
            count is the number of rows in the partition. The numeric ops skip
            nulls; sum of an all-null partition is 0, the others are None.
            Null group values form their own group.
        """
        group_columns = list(group_columns)
        plan = [(metric, source, AggregationOp(op)) for metric, (source, op) in aggregations.items()]
        table.require_columns(group_columns + [source for _, source, _ in plan])

        for metric, source, op in plan:
            if op is not AggregationOp.COUNT:
                self._check_numeric(table, source, op)

        partitions: Dict[Tuple[Any, ...], List[Dict[str, Any]]] = defaultdict(list)
        for row in table:
            key = tuple(row[name] for name in group_columns)
            partitions[key].append(row)

        groups = {}
        for key, rows in partitions.items():
            groups[key] = {
                metric: self._reduce(op, [row[source] for row in rows])
                for metric, source, op in plan
            }

        logger.debug(f"Grouped {len(table)} rows by {group_columns} into {len(groups)} groups")
        return GroupSummary(group_columns, [metric for metric, _, _ in plan], groups)

    @staticmethod
    def _check_numeric(table: Table, column: str, op: AggregationOp) -> None:
        for value in table.column(column):
            if value is not None and not is_numeric(value):
                raise ColumnTypeError(column, op.value, value)

    @staticmethod
    def _reduce(op: AggregationOp, values: List[Any]) -> Any:
        if op is AggregationOp.COUNT:
            return len(values)

        present = [v for v in values if v is not None]
        if op is AggregationOp.SUM:
            return sum(present)
        if not present:
            return None
        if op is AggregationOp.MEAN:
            return sum(present) / len(present)
        if op is AggregationOp.MIN:
            return min(present)
        return max(present)

    def describe(self, table: Table) -> Dict[str, Dict[str, Any]]:
        """
        Summary statistics for every numeric column.

        Returns:
            dict: Column name to count, missing, mean, min, max and sum
        """
        summary = {}
        for name in table.columns:
            values = table.column(name)
            present = [v for v in values if v is not None]
            if not present or not all(is_numeric(v) for v in present):
                continue
            summary[name] = {
                'count': len(present),
                'missing': len(values) - len(present),
                'mean': sum(present) / len(present),
                'min': min(present),
                'max': max(present),
                'sum': sum(present),
            }
        return summary
