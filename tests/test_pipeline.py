# ========================
# tests/test_pipeline.py
# ========================

import unittest
import tempfile
import json
import os
import sys
from pathlib import Path
from unittest import mock

# Add the project root to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.utils.config import Config
from src.utils.data_generator import DataGenerator, SALES_COLUMNS
from src.wrangler import FillStrategy, TableWrangler, load
from src.wrangler.errors import NotFoundError, UnknownColumnError
from src.wrangler.orchestrator import SalesWalkthrough
import main


class TestSalesWalkthrough(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.tmp_dir = Path(self._tmp.name)

        self.input_file = str(self.tmp_dir / "raw" / "retail_sales.csv")
        self.regions_file = str(self.tmp_dir / "raw" / "region_managers.csv")
        self.output_dir = str(self.tmp_dir / "processed")

        generator = DataGenerator(seed=7)
        self.generation_stats = generator.generate_dataset(
            self.input_file, num_rows=300, missing_rate=0.1, duplicate_rate=0.05
        )
        generator.generate_region_lookup(self.regions_file, omit_regions=["Central"])

        self.config = Config({'high_value_threshold': 500, 'top_orders_limit': 5})

    def test_generated_dataset_shape(self):
        table = load(self.input_file)

        self.assertEqual(table.columns, SALES_COLUMNS)
        self.assertEqual(len(table), 300)
        self.assertGreater(self.generation_stats['duplicate_rows'], 0)
        self.assertGreater(sum(self.generation_stats['missing_cells'].values()), 0)

    def test_run_end_to_end(self):
        """The walkthrough cleans, derives, summarizes, merges and saves its outputs."""
        walkthrough = SalesWalkthrough(self.input_file, self.output_dir,
                                       regions_file=self.regions_file, config=self.config)

        results = walkthrough.run()

        self.assertEqual(results['status'], 'completed')
        self.assertEqual(results['rows_loaded'], 300)
        self.assertLess(results['rows_cleaned'], results['rows_loaded'])
        for column in ('Region', 'Sales', 'Discount', 'Profit'):
            self.assertEqual(results['missing_after'][column], 0)

        for name in ('cleaned_sales', 'high_value_orders', 'top_orders', 'region_summary',
                     'category_summary', 'discount_level_summary', 'region_performance', 'summary'):
            self.assertTrue(Path(results['saved_files'][name]).exists(), name)

        cleaned = load(results['saved_files']['cleaned_sales'])
        order_ids = cleaned.column('Order_ID')
        self.assertEqual(len(order_ids), len(set(order_ids)))
        self.assertLessEqual(set(cleaned.column('Discount_Level')),
                             {'No Discount', 'Low', 'Medium', 'Unclassified'})
        for row in cleaned:
            if row['Discount'] > 0.5:
                self.assertEqual(row['Discount_Level'], 'Unclassified')

        top_orders = load(results['saved_files']['top_orders'])
        self.assertEqual(len(top_orders), 5)
        sales = top_orders.column('Sales')
        self.assertEqual(sales, sorted(sales, reverse=True))

        high_value = load(results['saved_files']['high_value_orders'])
        self.assertTrue(all(value > 500 for value in high_value.column('Sales')))
        self.assertEqual(results['high_value_orders'], len(high_value))

    def test_merge_drops_regions_without_lookup(self):
        walkthrough = SalesWalkthrough(self.input_file, self.output_dir,
                                       regions_file=self.regions_file, config=self.config)

        results = walkthrough.run()

        regions = load(results['saved_files']['region_summary']).column('Region')
        merged = load(results['saved_files']['region_performance'])
        self.assertIn('Central', regions)
        self.assertNotIn('Central', merged.column('Region'))
        self.assertEqual(len(merged), len(regions) - 1)
        self.assertIn('Manager', merged.columns)
        self.assertIn('Target_Attainment', merged.columns)

    def test_counts_cover_every_cleaned_row(self):
        walkthrough = SalesWalkthrough(self.input_file, self.output_dir, config=self.config)

        results = walkthrough.run()

        region_summary = load(results['saved_files']['region_summary'])
        self.assertEqual(sum(region_summary.column('Orders')), results['rows_cleaned'])
        self.assertNotIn('region_performance', results['saved_files'])
        self.assertEqual(results['regions_merged'], 0)

    def test_summary_report_is_json(self):
        walkthrough = SalesWalkthrough(self.input_file, self.output_dir, config=self.config)

        results = walkthrough.run()

        with open(results['saved_files']['summary'], encoding='utf-8') as f:
            report = json.load(f)
        self.assertEqual(report['rows_loaded'], 300)
        self.assertIn('Sales', report['numeric_profile'])

    def test_missing_input_file(self):
        walkthrough = SalesWalkthrough(str(self.tmp_dir / "absent.csv"), self.output_dir)

        with self.assertRaises(NotFoundError):
            walkthrough.run()

    def test_missing_required_columns(self):
        path = self.tmp_dir / "partial.csv"
        path.write_text("Order_ID,Sales\nORD-1,10\n", encoding='utf-8')
        walkthrough = SalesWalkthrough(str(path), self.output_dir)

        with self.assertLogs('src.wrangler.orchestrator', level='ERROR') as logs:
            with self.assertRaises(UnknownColumnError):
                walkthrough.run()
        self.assertIn('partial.csv', logs.output[0])


class TestTableWrangler(unittest.TestCase):

    def test_operations_are_counted(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = Path(tmp_dir) / "sales.csv"
            path.write_text("Region,Sales\nNorth,10\nSouth,\nNorth,20\n", encoding='utf-8')

            wrangler = TableWrangler()
            table = wrangler.load(str(path))
            filled = wrangler.fill_missing(table, 'Sales', FillStrategy.constant(0))
            summary = wrangler.group_summarize(filled, ['Region'], {'Total': ('Sales', 'sum')})

            self.assertEqual(summary.to_dict(), {'North': {'Total': 30}, 'South': {'Total': 0}})
            stats = wrangler.get_statistics()
            self.assertEqual(stats['operations_applied'], 3)
            self.assertEqual(stats['cells_filled'], 1)

    def test_save_and_reload(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            source = Path(tmp_dir) / "sales.csv"
            source.write_text('Region,Sales\n"North, upper",10.5\nSouth,\n', encoding='utf-8')

            wrangler = TableWrangler()
            table = wrangler.load(str(source))
            saved = wrangler.save(table, Path(tmp_dir) / "out" / "copy.csv")

            self.assertEqual(wrangler.load(saved), table)
            self.assertEqual(wrangler.to_delimited(table), 'Region,Sales\n"North, upper",10.5\nSouth,\n')


class TestConfig(unittest.TestCase):

    def test_dict_overrides(self):
        config = Config({'sample_rows': 50, 'unclassified_label': 'Other'})

        self.assertEqual(config.SAMPLE_ROWS, 50)
        self.assertEqual(config.UNCLASSIFIED_LABEL, 'Other')
        self.assertTrue(all(config.validate_config().values()))

    def test_invalid_discount_bands(self):
        config = Config({'low_discount_max': 0.6, 'medium_discount_max': 0.5})

        self.assertFalse(config.validate_config()['discount_bands'])

    def test_save_and_load_file(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = os.path.join(tmp_dir, "config.json")
            Config({'top_orders_limit': 3}).save_to_file(path)

            self.assertEqual(Config.load_from_file(path).TOP_ORDERS_LIMIT, 3)


class TestMain(unittest.TestCase):

    @mock.patch.object(Config, 'ensure_directories')
    @mock.patch('main.setup_logging')
    @mock.patch('main.SalesWalkthrough')
    def test_unexpected_error_returns_failure(self, walkthrough_cls, _setup_logging, _ensure_directories):
        walkthrough_cls.return_value.run.side_effect = RuntimeError("disk full")

        with self.assertLogs('main', level='ERROR') as logs:
            exit_code = main.main(['sales.csv'])

        self.assertEqual(exit_code, 1)
        self.assertIn('disk full', logs.output[0])
        self.assertIsNotNone(logs.records[0].exc_info)


if __name__ == '__main__':
    unittest.main()
