#!/usr/bin/env python3
# ========================
# main.py
# ========================

"""
Main Entry Point for the Retail Sales Wrangling Walkthrough

Usage:
    python main.py                 # generate sample data, then run the walkthrough
    python main.py path/to/sales.csv
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to Python path
sys.path.insert(0, str(Path(__file__).parent))

from src.utils import Config, setup_logging, DataGenerator
from src.wrangler import SalesWalkthrough, WranglerError


def main(argv=None) -> int:
    """Main execution function."""
    parser = argparse.ArgumentParser(description="Run the retail sales wrangling walkthrough.")
    parser.add_argument('input_csv', nargs='?', help="Retail sales CSV; sample data is generated when omitted")
    args = parser.parse_args(argv)

    config = Config()
    setup_logging(
        log_level=config.LOG_LEVEL,
        log_file="wrangler.log",
        log_dir="logs"
    )

    logger = logging.getLogger(__name__)
    logger.info("=" * 60)
    logger.info("RETAIL SALES WRANGLING WALKTHROUGH")
    logger.info("=" * 60)

    try:
        config.ensure_directories()

        input_file = args.input_csv
        regions_file = config.REGIONS_FILE
        if input_file is None:
            logger.info("Step 1: Generating sample data...")
            input_file = config.INPUT_FILE
            generator = DataGenerator(seed=42)
            generation_stats = generator.generate_dataset(
                file_path=input_file,
                num_rows=config.SAMPLE_ROWS,
                missing_rate=config.MISSING_RATE,
                duplicate_rate=config.DUPLICATE_RATE
            )
            generator.generate_region_lookup(regions_file)
            logger.info(f"Sample data generated: {generation_stats}")

        if not Path(regions_file).exists():
            logger.warning(f"Region lookup {regions_file} not found; skipping the merge step")
            regions_file = None

        logger.info("Step 2: Running walkthrough...")
        walkthrough = SalesWalkthrough(
            input_file=input_file,
            output_dir=config.OUTPUT_DIR,
            regions_file=regions_file,
            config=config
        )
        results = walkthrough.run()

        _print_execution_summary(results)
        return 0

    except WranglerError as e:
        logger.error(f"Walkthrough failed: {e}")
        return 1
    except Exception as e:
        logger.error(f"Walkthrough failed: {e}", exc_info=True)
        return 1


def _print_execution_summary(results: dict) -> None:
    """Print final execution summary."""
    print("\n" + "=" * 70)
    print("WALKTHROUGH SUMMARY")
    print("=" * 70)

    print("Rows:")
    print(f"   • Loaded: {results['rows_loaded']:,}")
    print(f"   • After cleaning: {results['rows_cleaned']:,}")
    print(f"   • High-value orders: {results['high_value_orders']:,}")
    print(f"   • Regions merged with lookup: {results['regions_merged']}")

    print("\nMissing cells before cleaning:")
    for column, count in results['missing_before'].items():
        if count:
            print(f"   • {column}: {count}")

    print("\nGenerated outputs:")
    for name, file_path in results['saved_files'].items():
        print(f"   • {name.replace('_', ' ').title()}: {Path(file_path).name}")

    print("=" * 70)


if __name__ == '__main__':
    sys.exit(main())
