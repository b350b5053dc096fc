# ========================
# src/wrangler/orchestrator.py
# ========================

"""
Sales Walkthrough Orchestrator

Replays the retail sales wrangling exercise end to end: load, clean, derive,
filter, sort, summarize, merge and save.
"""

import logging
from datetime import date
from pathlib import Path
from typing import Any, Dict, Optional

from .cleaning import FillStrategy
from .errors import UnknownColumnError
from .storage import TableSaver
from .table import Table
from .wrangler import TableWrangler
from ..utils.config import Config
from ..utils.performance_monitor import monitor_performance

logger = logging.getLogger(__name__)


class SalesWalkthrough:
    """
    Runs the wrangling steps over a retail sales file.
    Every intermediate table is a new value; nothing is reassigned in place.
    """

    REQUIRED_COLUMNS = [
        'Order_ID', 'Order_Date', 'Region', 'Category',
        'Sales', 'Discount', 'Profit'
    ]

    HIGH_VALUE_COLUMNS = [
        'Order_ID', 'Order_Date', 'Region', 'Category',
        'Sales', 'Profit', 'Discount_Level'
    ]

    def __init__(self,
                 input_file: str,
                 output_dir: str,
                 regions_file: Optional[str] = None,
                 config: Optional[Config] = None):
        """
        Initialize the walkthrough.

        Args:
            input_file (str): Path to the retail sales CSV
            output_dir (str): Directory for output files
            regions_file (str): Optional region lookup CSV (Region, Manager, Target)
            config (Config): Configuration object
        """
        self.input_file = input_file
        self.output_dir = output_dir
        self.regions_file = regions_file
        self.config = config or Config()

        self.wrangler = TableWrangler()
        self.saver = TableSaver(self.output_dir)

        logger.info("SalesWalkthrough initialized:")
        logger.info(f"  Input: {self.input_file}")
        logger.info(f"  Regions: {self.regions_file or 'not provided'}")
        logger.info(f"  Output: {self.output_dir}")

    def run(self) -> Dict[str, Any]:
        """
        Execute every step and save the outputs.

        Returns:
            dict: Summary of the run and the saved files
        """
        logger.info(f"Starting sales walkthrough for '{self.input_file}'...")
        saved_files: Dict[str, str] = {}

        with monitor_performance("SalesWalkthrough") as monitor:
            raw = self.wrangler.load(self.input_file)
            try:
                raw.require_columns(self.REQUIRED_COLUMNS)
            except UnknownColumnError as e:
                logger.error(f"'{self.input_file}' is not a retail sales file: {e}")
                raise
            missing_before = self.wrangler.count_missing(raw)
            self._step(monitor, "load", raw, missing=missing_before)

            cleaned = self.clean(raw)
            missing_after = self.wrangler.count_missing(cleaned)
            self._step(monitor, "clean", cleaned, missing=missing_after)

            enriched = self.derive(cleaned)
            self._step(monitor, "derive", enriched)
            saved_files['cleaned_sales'] = self.saver.save_table(enriched, "cleaned_sales.csv")

            threshold = float(self.config.HIGH_VALUE_THRESHOLD)
            high_value = self.wrangler.select(
                self.wrangler.filter(
                    enriched, lambda row: row['Sales'] is not None and row['Sales'] > threshold
                ),
                self.HIGH_VALUE_COLUMNS
            )
            top_orders = self.wrangler.head(
                self.wrangler.sort_by(enriched, 'Sales', descending=True),
                int(self.config.TOP_ORDERS_LIMIT)
            )
            self._step(monitor, "filter_sort", high_value)
            saved_files['high_value_orders'] = self.saver.save_table(high_value, "high_value_orders.csv")
            saved_files['top_orders'] = self.saver.save_table(top_orders, "top_orders.csv")

            summaries = self.summarize(enriched)
            for name, summary in summaries.items():
                saved_files[name] = self.saver.save_summary(summary, f"{name}.csv")
            self._step(monitor, "summarize", enriched, groups={k: len(v) for k, v in summaries.items()})

            region_performance = None
            if self.regions_file:
                region_performance = self.merge_regions(summaries['region_summary'].to_table())
                saved_files['region_performance'] = self.saver.save_table(
                    region_performance, "region_performance.csv"
                )
                self._step(monitor, "merge", region_performance)

        results = {
            'status': 'completed',
            'input_file': self.input_file,
            'output_directory': self.output_dir,
            'rows_loaded': len(raw),
            'rows_cleaned': len(enriched),
            'high_value_orders': len(high_value),
            'regions_merged': len(region_performance) if region_performance is not None else 0,
            'missing_before': missing_before,
            'missing_after': missing_after,
            'numeric_profile': self.wrangler.describe(enriched),
            'cleaning_stats': self.wrangler.get_statistics(),
            'performance': monitor.summary,
        }
        saved_files['summary'] = self.saver.save_report(
            {key: value for key, value in results.items() if key != 'performance'}
        )
        results['saved_files'] = saved_files

        logger.info("Sales walkthrough finished successfully.")
        self._log_final_summary(results)
        return results

    def clean(self, table: Table) -> Table:
        """Drop duplicate orders and rows without Sales, then fill the remaining gaps."""
        deduplicated = self.wrangler.drop_duplicates(table, ['Order_ID'])
        with_sales = self.wrangler.drop_rows_with_missing(deduplicated, 'Sales')
        filled = self.wrangler.fill_missing(with_sales, 'Region', FillStrategy.mode())
        filled = self.wrangler.fill_missing(filled, 'Discount', FillStrategy.constant(0.0))
        return self.wrangler.fill_missing(filled, 'Profit', FillStrategy.mean())

    def derive(self, table: Table) -> Table:
        """Add Profit_Margin, Order_Month and Discount_Level."""
        with_margin = self.wrangler.derive_column(table, 'Profit_Margin', _profit_margin)
        with_month = self.wrangler.derive_column(with_margin, 'Order_Month', _order_month)

        low = float(self.config.LOW_DISCOUNT_MAX)
        medium = float(self.config.MEDIUM_DISCOUNT_MAX)
        rules = [
            (lambda row: row['Discount'] == 0, "No Discount"),
            (lambda row: 0 < row['Discount'] <= low, "Low"),
            (lambda row: low < row['Discount'] <= medium, "Medium"),
        ]
        return self.wrangler.classify(
            with_month, 'Discount_Level', rules, default=self.config.UNCLASSIFIED_LABEL
        )

    def summarize(self, table: Table) -> Dict[str, Any]:
        """Group summaries by region, category, and region with discount level."""
        return {
            'region_summary': self.wrangler.group_summarize(table, ['Region'], {
                'Total_Sales': ('Sales', 'sum'),
                'Total_Profit': ('Profit', 'sum'),
                'Avg_Discount': ('Discount', 'mean'),
                'Orders': ('Order_ID', 'count'),
            }),
            'category_summary': self.wrangler.group_summarize(table, ['Category'], {
                'Total_Sales': ('Sales', 'sum'),
                'Avg_Profit_Margin': ('Profit_Margin', 'mean'),
                'Orders': ('Order_ID', 'count'),
            }),
            'discount_level_summary': self.wrangler.group_summarize(table, ['Region', 'Discount_Level'], {
                'Total_Sales': ('Sales', 'sum'),
                'Orders': ('Order_ID', 'count'),
            }),
        }

    def merge_regions(self, region_summary: Table) -> Table:
        """
        Inner-join the region summary with the region lookup.
        Regions missing from the lookup are dropped.
        """
        lookup = self.wrangler.load(self.regions_file)
        merged = self.wrangler.join(region_summary, lookup, 'Region')
        dropped = len(region_summary) - len(merged)
        if dropped:
            logger.warning(f"{dropped} region(s) have no entry in {self.regions_file} and were dropped")
        return self.wrangler.derive_column(merged, 'Target_Attainment', _target_attainment)

    def _step(self, monitor, name: str, table: Table, **metadata) -> None:
        monitor.update_progress(len(table))
        monitor.add_checkpoint(name, metadata)
        logger.info(f"Step '{name}': {len(table)} rows")

    def _log_final_summary(self, results: Dict[str, Any]) -> None:
        """Log final walkthrough summary."""
        logger.info("=" * 60)
        logger.info("SALES WALKTHROUGH SUMMARY")
        logger.info("=" * 60)
        logger.info(f"Input file: {results['input_file']}")
        logger.info(f"Rows loaded: {results['rows_loaded']:,}")
        logger.info(f"Rows after cleaning: {results['rows_cleaned']:,}")
        logger.info(f"High-value orders: {results['high_value_orders']:,}")
        logger.info(f"Output directory: {results['output_directory']}")
        for name, file_path in results['saved_files'].items():
            logger.info(f"  - {name}: {Path(file_path).name}")
        logger.info("=" * 60)


def _profit_margin(row: Dict[str, Any]) -> Optional[float]:
    if row['Profit'] is None or not row['Sales']:
        return None
    return row['Profit'] / row['Sales']


def _order_month(row: Dict[str, Any]) -> Optional[str]:
    value = row['Order_Date']
    if value is None:
        return None
    if isinstance(value, date):
        return value.strftime("%Y-%m")
    return str(value)[:7]


def _target_attainment(row: Dict[str, Any]) -> Optional[float]:
    if not row['Target'] or row['Total_Sales'] is None:
        return None
    return row['Total_Sales'] / row['Target']
