# ========================
# tests/test_transformation.py
# ========================

import unittest
import os
import sys

# Add the project root to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.wrangler.errors import DuplicateColumnError, UnknownColumnError
from src.wrangler.table import ColumnType, Table
from src.wrangler.transformation import UNCLASSIFIED, TableTransformer


def make_table(columns, *rows):
    return Table(columns, [dict(zip(columns, row)) for row in rows])


class TestTableTransformer(unittest.TestCase):

    def setUp(self):
        self.transformer = TableTransformer()
        self.sales = make_table(
            ['Order_ID', 'Region', 'Sales', 'Discount'],
            ['ORD-1', 'North', 200.0, 0.0],
            ['ORD-2', 'South', 50.0, 0.1],
            ['ORD-3', 'North', None, 0.3],
            ['ORD-4', 'East', 200.0, 0.8],
            ['ORD-5', 'West', 75.0, None],
        )

    def test_select_projects_in_given_order(self):
        result = self.transformer.select(self.sales, ['Sales', 'Order_ID'])

        self.assertEqual(result.columns, ['Sales', 'Order_ID'])
        self.assertEqual(result[0], {'Sales': 200.0, 'Order_ID': 'ORD-1'})
        self.assertEqual(result.column('Order_ID'), self.sales.column('Order_ID'))

    def test_select_unknown_column(self):
        with self.assertRaises(UnknownColumnError) as ctx:
            self.transformer.select(self.sales, ['Sales', 'Profit'])
        self.assertEqual(ctx.exception.columns, ['Profit'])

    def test_select_repeated_column(self):
        with self.assertRaises(DuplicateColumnError) as ctx:
            self.transformer.select(self.sales, ['Sales', 'Region', 'Sales'])
        self.assertEqual(ctx.exception.column, 'Sales')

    def test_filter_preserves_order(self):
        result = self.transformer.filter(self.sales, lambda row: row['Region'] == 'North')

        self.assertEqual(result.column('Order_ID'), ['ORD-1', 'ORD-3'])
        self.assertEqual(len(self.sales), 5)

    def test_sort_ascending_nulls_last(self):
        result = self.transformer.sort_by(self.sales, 'Sales')

        self.assertEqual(result.column('Order_ID'), ['ORD-2', 'ORD-5', 'ORD-1', 'ORD-4', 'ORD-3'])

    def test_sort_descending_is_stable_with_nulls_last(self):
        """Ties keep input order and nulls stay last when sorting descending."""
        result = self.transformer.sort_by(self.sales, 'Sales', descending=True)

        self.assertEqual(result.column('Order_ID'), ['ORD-1', 'ORD-4', 'ORD-5', 'ORD-2', 'ORD-3'])

    def test_sort_stability_on_strings(self):
        result = self.transformer.sort_by(self.sales, 'Region')

        self.assertEqual(result.column('Order_ID'), ['ORD-4', 'ORD-1', 'ORD-3', 'ORD-2', 'ORD-5'])

    def test_sort_unknown_column(self):
        with self.assertRaises(UnknownColumnError):
            self.transformer.sort_by(self.sales, 'Profit')

    def test_derive_column(self):
        result = self.transformer.derive_column(
            self.sales, 'Net', lambda row: None if row['Sales'] is None else row['Sales'] - 10
        )

        self.assertEqual(result.columns[-1], 'Net')
        self.assertEqual(result.column('Net'), [190.0, 40.0, None, 190.0, 65.0])
        self.assertEqual(result.column_type('Net'), ColumnType.FLOAT)
        self.assertNotIn('Net', self.sales.columns)

    def test_derive_existing_column(self):
        with self.assertRaises(DuplicateColumnError):
            self.transformer.derive_column(self.sales, 'Sales', lambda row: 0)

    def test_classify_defaults_to_unclassified(self):
        """Rows matching no rule, including null values, get the explicit default label."""
        rules = [
            (lambda row: row['Discount'] == 0, "No Discount"),
            (lambda row: 0 < row['Discount'] <= 0.2, "Low"),
            (lambda row: 0.2 < row['Discount'] <= 0.5, "Medium"),
        ]

        result = self.transformer.classify(self.sales, 'Discount_Level', rules)

        self.assertEqual(result.column('Discount_Level'),
                         ['No Discount', 'Low', 'Medium', UNCLASSIFIED, UNCLASSIFIED])
        self.assertEqual(result.column_type('Discount_Level'), ColumnType.CATEGORICAL)

    def test_classify_first_rule_wins(self):
        rules = [
            (lambda row: row['Region'] == 'North', "Focus"),
            (lambda row: True, "Other"),
        ]

        result = self.transformer.classify(self.sales, 'Tier', rules, default="Never")

        self.assertEqual(result.column('Tier'), ['Focus', 'Other', 'Focus', 'Other', 'Other'])

    def test_head(self):
        self.assertEqual(self.transformer.head(self.sales, 2).column('Order_ID'), ['ORD-1', 'ORD-2'])
        self.assertEqual(len(self.transformer.head(self.sales, 10)), 5)


class TestJoin(unittest.TestCase):

    def setUp(self):
        self.transformer = TableTransformer()
        self.summary = make_table(
            ['Region', 'Total_Sales'],
            ['North', 300.0],
            ['South', 50.0],
            ['West', 75.0],
        )
        self.managers = make_table(
            ['Region', 'Manager'],
            ['South', 'Ravi'],
            ['North', 'Anna'],
            ['Central', 'Chen'],
        )

    def test_inner_join_drops_unmatched_rows(self):
        """West has no manager and Central has no sales; both disappear."""
        result = self.transformer.join(self.summary, self.managers, 'Region')

        self.assertEqual(result.columns, ['Region', 'Total_Sales', 'Manager'])
        self.assertEqual(result.rows, [
            {'Region': 'North', 'Total_Sales': 300.0, 'Manager': 'Anna'},
            {'Region': 'South', 'Total_Sales': 50.0, 'Manager': 'Ravi'},
        ])

    def test_join_multiple_matches_follow_right_order(self):
        managers = make_table(['Region', 'Manager'], ['North', 'Anna'], ['North', 'Ben'])

        result = self.transformer.join(self.summary, managers, 'Region')

        self.assertEqual(result.column('Manager'), ['Anna', 'Ben'])

    def test_join_suffixes_shared_columns(self):
        targets = make_table(['Region', 'Total_Sales'], ['North', 500.0])

        result = self.transformer.join(self.summary, targets, 'Region')

        self.assertEqual(result.columns, ['Region', 'Total_Sales_x', 'Total_Sales_y'])
        self.assertEqual(result[0], {'Region': 'North', 'Total_Sales_x': 300.0, 'Total_Sales_y': 500.0})

    def test_join_suffix_clash(self):
        """A suffixed name that is already a column on the left is rejected."""
        left = make_table(['Region', 'Total_Sales', 'Total_Sales_y'], ['North', 300.0, 1.0])
        right = make_table(['Region', 'Total_Sales'], ['North', 500.0])

        with self.assertRaises(DuplicateColumnError) as ctx:
            self.transformer.join(left, right, 'Region')
        self.assertEqual(ctx.exception.column, 'Total_Sales_y')

    def test_join_ignores_null_keys(self):
        left = make_table(['Region', 'Sales'], [None, 1.0], ['North', 2.0])
        right = make_table(['Region', 'Manager'], [None, 'Nobody'], ['North', 'Anna'])

        result = self.transformer.join(left, right, 'Region')

        self.assertEqual(result.column('Manager'), ['Anna'])

    def test_join_unknown_key(self):
        with self.assertRaises(UnknownColumnError):
            self.transformer.join(self.summary, self.managers, 'Manager')
        with self.assertRaises(UnknownColumnError):
            self.transformer.join(self.summary, self.managers, 'Total_Sales')


if __name__ == '__main__':
    unittest.main()
