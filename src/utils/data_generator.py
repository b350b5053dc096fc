# ========================
# src/utils/data_generator.py
# ========================

"""
Data Generation Utilities

Sample retail sales data with missing cells and duplicated orders, plus the
region manager lookup used by the merge step.
"""

import csv
import logging
import random
from datetime import date, timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

logger = logging.getLogger(__name__)

SALES_COLUMNS = [
    'Order_ID', 'Order_Date', 'Region', 'Category', 'Sub_Category',
    'Sales', 'Quantity', 'Discount', 'Profit'
]

REGION_COLUMNS = ['Region', 'Manager', 'Target']


class DataGenerator:
    """
    Generates reproducible retail datasets for the wrangling walkthrough.
    """

    # Columns that may be left empty when missing values are injected
    NULLABLE_COLUMNS = ['Region', 'Sales', 'Discount', 'Profit']

    def __init__(self, seed: Optional[int] = None):
        """
        Initialize data generator.

        Args:
            seed (int): Random seed for reproducible data generation
        """
        self._random = random.Random(seed)
        self._initialize_data_patterns()
        logger.info(f"DataGenerator initialized with seed: {seed}")

    def _initialize_data_patterns(self) -> None:
        """Initialize catalog, regions and discount levels."""
        self.catalog = {
            "Furniture": {"Chairs": 180, "Tables": 350, "Bookcases": 260, "Furnishings": 45},
            "Office Supplies": {"Paper": 15, "Binders": 20, "Storage": 110, "Art": 12},
            "Technology": {"Phones": 420, "Accessories": 90, "Machines": 900, "Copiers": 1500},
        }

        self.regions = {
            "North": {"weight": 0.25, "manager": "Anna Lee", "target": 60000},
            "South": {"weight": 0.2, "manager": "Ravi Kumar", "target": 45000},
            "East": {"weight": 0.25, "manager": "Maria Lopez", "target": 60000},
            "West": {"weight": 0.2, "manager": "Tom Becker", "target": 50000},
            "Central": {"weight": 0.1, "manager": "Chen Wu", "target": 30000},
        }

        # Levels above 0.5 fall outside the walkthrough's discount bands
        self.discounts = [0.0, 0.0, 0.0, 0.1, 0.15, 0.2, 0.3, 0.4, 0.5, 0.7, 0.8]

    def generate_dataset(self,
                         file_path: str,
                         num_rows: int,
                         missing_rate: float = 0.05,
                         duplicate_rate: float = 0.02,
                         start_date: Optional[date] = None) -> Dict[str, Any]:
        """
        Generate a retail sales CSV.

        Args:
            file_path (str): Output CSV file path
            num_rows (int): Number of rows to write, duplicates included
            missing_rate (float): Chance that a nullable cell is left empty
            duplicate_rate (float): Chance that a row repeats an earlier order
            start_date (date): First possible order date

        Returns:
            dict: Generation statistics
        """
        logger.info(f"Generating {num_rows:,} rows "
                    f"({missing_rate:.1%} missing, {duplicate_rate:.1%} duplicates)...")

        if start_date is None:
            start_date = date(2024, 1, 1)

        stats = {
            'total_rows': num_rows,
            'missing_rate': missing_rate,
            'duplicate_rate': duplicate_rate,
            'duplicate_rows': 0,
            'missing_cells': {name: 0 for name in self.NULLABLE_COLUMNS},
        }

        Path(file_path).parent.mkdir(parents=True, exist_ok=True)

        written: List[List[Any]] = []
        with open(file_path, 'w', newline='', encoding='utf-8') as f:
            writer = csv.writer(f)
            writer.writerow(SALES_COLUMNS)

            for index in range(num_rows):
                if written and self._random.random() < duplicate_rate:
                    record = self._random.choice(written)
                    stats['duplicate_rows'] += 1
                else:
                    record = self._generate_single_record(index, start_date, missing_rate, stats)
                writer.writerow(record)
                written.append(record)

        logger.info(f"Dataset generated: {file_path}")
        logger.info(f"Missing cells: {stats['missing_cells']}, duplicates: {stats['duplicate_rows']}")
        return stats

    def _generate_single_record(self,
                                index: int,
                                start_date: date,
                                missing_rate: float,
                                stats: Dict[str, Any]) -> List[Any]:
        """Generate one order row, possibly with empty cells."""
        category = self._random.choice(list(self.catalog))
        sub_category = self._random.choice(list(self.catalog[category]))
        base_price = self.catalog[category][sub_category]

        names = list(self.regions)
        weights = [self.regions[name]["weight"] for name in names]
        region = self._random.choices(names, weights=weights)[0]

        quantity = self._random.randint(1, 10)
        discount = self._random.choice(self.discounts)
        sales = round(base_price * quantity * self._random.uniform(0.8, 1.2) * (1 - discount), 2)
        margin = self._random.uniform(-0.1, 0.35) - discount * 0.5
        profit = round(sales * margin, 2)
        order_date = start_date + timedelta(days=self._random.randint(0, 364))

        values = {
            'Order_ID': f"ORD-{index + 1:06d}",
            'Order_Date': order_date.isoformat(),
            'Region': region,
            'Category': category,
            'Sub_Category': sub_category,
            'Sales': sales,
            'Quantity': quantity,
            'Discount': discount,
            'Profit': profit,
        }

        for name in self.NULLABLE_COLUMNS:
            if self._random.random() < missing_rate:
                values[name] = ''
                stats['missing_cells'][name] += 1

        return [values[name] for name in SALES_COLUMNS]

    def generate_region_lookup(self,
                               file_path: str,
                               omit_regions: Sequence[str] = ("Central",)) -> Dict[str, Any]:
        """
        Write the region manager lookup table.

        Args:
            file_path (str): Output CSV file path
            omit_regions (list[str]): Regions left out of the lookup, so an
                                      inner join drops them

        Returns:
            dict: Regions written and omitted
        """
        Path(file_path).parent.mkdir(parents=True, exist_ok=True)
        included = [name for name in self.regions if name not in omit_regions]

        with open(file_path, 'w', newline='', encoding='utf-8') as f:
            writer = csv.writer(f)
            writer.writerow(REGION_COLUMNS)
            for name in included:
                writer.writerow([name, self.regions[name]["manager"], self.regions[name]["target"]])

        logger.info(f"Region lookup generated: {file_path} ({len(included)} regions)")
        return {'regions': included, 'omitted': list(omit_regions)}
