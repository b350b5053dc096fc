# ========================
# src/wrangler/__init__.py
# ========================

"""
Table Wrangler Package

Components for wrangling small delimited datasets:
- table: Table, ColumnSpec and GroupSummary data model
- ingestion: CSV loading with per-column type detection
- cleaning: Missing values and duplicates
- transformation: Projection, filtering, sorting, derived columns, joins
- aggregation: Grouped summaries
- storage: Delimited output
- wrangler: TableWrangler facade
- orchestrator: Retail sales walkthrough
"""

from .errors import (
    WranglerError,
    NotFoundError,
    ParseError,
    UnknownColumnError,
    DuplicateColumnError,
    EmptyColumnError,
    ColumnTypeError,
    RowShapeError,
)
from .table import ColumnType, ColumnSpec, Table, GroupSummary
from .ingestion import CSVReader, load
from .cleaning import FillStrategy, TableCleaner
from .transformation import TableTransformer, UNCLASSIFIED
from .aggregation import AggregationOp, TableAggregator
from .storage import TableSaver, to_delimited, save
from .wrangler import TableWrangler
from .orchestrator import SalesWalkthrough

__all__ = [
    'WranglerError',
    'NotFoundError',
    'ParseError',
    'UnknownColumnError',
    'DuplicateColumnError',
    'EmptyColumnError',
    'ColumnTypeError',
    'RowShapeError',
    'ColumnType',
    'ColumnSpec',
    'Table',
    'GroupSummary',
    'CSVReader',
    'load',
    'FillStrategy',
    'TableCleaner',
    'TableTransformer',
    'UNCLASSIFIED',
    'AggregationOp',
    'TableAggregator',
    'TableSaver',
    'to_delimited',
    'save',
    'TableWrangler',
    'SalesWalkthrough',
]

__version__ = "1.0.0"
