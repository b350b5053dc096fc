# ========================
# src/wrangler/storage.py
# ========================

"""
Data Storage Module

Serializes Tables back to delimited text and saves wrangling outputs.
"""

import csv
import io
import json
import logging
from datetime import date
from pathlib import Path
from typing import Any, Dict

from .table import GroupSummary, Table

logger = logging.getLogger(__name__)


def format_cell(value: Any) -> str:
    """Render a cell the way the CSV reader parses it back."""
    if value is None:
        return ''
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def to_delimited(table: Table, delimiter: str = ',') -> str:
    """
    Render a table as delimited text: a header line followed by one line per row.
    Nulls become empty cells. This is the inverse of CSVReader.load.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, delimiter=delimiter, lineterminator='\n')
    writer.writerow(table.columns)
    for row in table:
        writer.writerow([format_cell(row[name]) for name in table.columns])
    return buffer.getvalue()


class TableSaver:
    """
    Saves Tables and GroupSummaries produced by the wrangler to an output directory.
    """

    def __init__(self, output_dir: str = "data/processed"):
        """
        Initialize the table saver.

        Args:
            output_dir (str): Directory to save output files
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"TableSaver initialized with output directory: {self.output_dir}")

    def save_table(self, table: Table, file_name: str) -> str:
        """Save a table as CSV under the output directory."""
        return save(table, self.output_dir / file_name)

    def save_summary(self, summary: GroupSummary, file_name: str) -> str:
        """Save a group summary as CSV, one row per group."""
        return self.save_table(summary.to_table(), file_name)

    def save_report(self, report: Dict[str, Any], file_name: str = "wrangling_summary.json") -> str:
        """Save a run report as JSON."""
        file_path = self.output_dir / file_name

        with open(file_path, 'w', encoding='utf-8') as f:
            json.dump(report, f, indent=2, ensure_ascii=False, default=str)

        logger.info(f"Summary saved to {file_path}")
        return str(file_path)


def save(table: Table, path) -> str:
    """Write a table to a CSV file, creating parent directories."""
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    try:
        with open(file_path, 'w', newline='', encoding='utf-8') as f:
            f.write(to_delimited(table))

        logger.info(f"Saved {len(table)} records to {file_path}")

    except OSError as e:
        logger.error(f"Error writing CSV file {file_path}: {e}")
        raise
    return str(file_path)
