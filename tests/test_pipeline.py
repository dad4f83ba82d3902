# ========================
# tests/test_pipeline.py
# ========================

import unittest
import logging
import tempfile
import shutil
import json
import sys
import os
from pathlib import Path

# Add the project root to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.listing_analysis.ingestion import LoadError
from src.listing_analysis.orchestrator import InsightPipeline
from src.utils.config import Config
from src.utils.data_generator import DataGenerator
from src.utils.logging_setup import setup_logging


class TestInsightPipeline(unittest.TestCase):
    """End-to-end runs over generated listing data."""

    def setUp(self):
        self.work_dir = Path(tempfile.mkdtemp())
        self.input_file = str(self.work_dir / 'raw' / 'listings.csv')
        self.output_dir = str(self.work_dir / 'processed')
        self.config = Config({'input_encoding': 'utf-8-sig'})

    def tearDown(self):
        shutil.rmtree(self.work_dir, ignore_errors=True)

    def _run(self, num_rows=600, error_rate=0.2):
        generation = DataGenerator(seed=7).generate_dataset(
            self.input_file, num_rows=num_rows, error_rate=error_rate
        )
        pipeline = InsightPipeline(self.input_file, self.output_dir, chunk_size=128, config=self.config)
        return generation, pipeline.run()

    def test_pipeline_end_to_end(self):
        generation, results = self._run()

        self.assertEqual(results['pipeline_status'], 'completed')
        quality = results['data_quality_report']
        cleaning = results['cleaning_stats']

        self.assertEqual(quality['total_rows'], generation['total_rows'])
        self.assertEqual(cleaning['records_processed'], generation['total_rows'])
        self.assertEqual(cleaning['records_dropped'], generation['error_types'].get('zero_price', 0))
        self.assertEqual(quality['null_counts']['category'], generation['error_types'].get('missing_category', 0))
        self.assertGreaterEqual(
            quality['zero_price_rows'],
            generation['error_types'].get('zero_price', 0) + generation['error_types'].get('zero_selling_price', 0)
        )

        insights = results['insights']
        self.assertLessEqual(len(insights['top_discounts']), 10)
        self.assertLessEqual(len(insights['high_value_out_of_stock']), 15)
        self.assertLessEqual(len(insights['category_discount_performance']), 5)
        self.assertLessEqual(len(insights['value_for_money']), 20)
        self.assertTrue(insights['category_revenue'])

        # Generated prices are whole rupees, so every rescaled MRP has zero paise
        for row in insights['top_discounts']:
            self.assertEqual(row['mrp'], row['mrp'].to_integral_value())

    def test_reports_written_as_json(self):
        _, results = self._run(num_rows=200)

        saved = results['saved_files']
        self.assertIn('data_quality_report', saved)
        self.assertIn('summary', saved)
        for name in results['insights']:
            self.assertTrue(Path(saved[name]).exists(), name)

        with open(saved['category_revenue'], encoding='utf-8') as f:
            category_revenue = json.load(f)
        self.assertEqual(len(category_revenue), len(results['insights']['category_revenue']))
        self.assertIsInstance(category_revenue[0]['potential_revenue'], float)

        with open(saved['summary'], encoding='utf-8') as f:
            summary = json.load(f)
        self.assertEqual(summary['insight_row_counts']['weight_segmentation'],
                         len(results['insights']['weight_segmentation']))

    def test_malformed_file_aborts_before_analysis(self):
        Path(self.input_file).parent.mkdir(parents=True)
        with open(self.input_file, 'w', encoding='utf-8') as f:
            f.write("Category,name,mrp,discountPercent,availableQuantity,"
                    "discountedSellingPrice,weightInGms,outOfStock,quantity\n")
            f.write("Munchies,Chips,abc,10,3,1800,50,FALSE,1\n")

        pipeline = InsightPipeline(self.input_file, self.output_dir, config=self.config)

        with self.assertRaises(LoadError):
            pipeline.run()
        self.assertFalse(any(Path(self.output_dir).glob('*.json')))

    def test_validate_input(self):
        pipeline = InsightPipeline(str(self.work_dir / 'missing.csv'), self.output_dir, config=self.config)
        self.assertFalse(pipeline.validate_input())

        DataGenerator(seed=1).generate_dataset(self.input_file, num_rows=5)
        pipeline = InsightPipeline(self.input_file, self.output_dir, config=self.config)
        self.assertTrue(pipeline.validate_input())


class TestConfig(unittest.TestCase):

    def test_defaults_are_valid(self):
        config = Config()
        self.assertTrue(all(config.validate_config().values()))
        self.assertEqual(config.PRICE_SCALE_FACTOR, 100)
        self.assertEqual(config.TOP_DISCOUNTS_LIMIT, 10)

    def test_overrides_and_round_trip(self):
        config = Config({'top_discounts_limit': 3, 'input_encoding': 'latin-1'})
        self.assertEqual(config.TOP_DISCOUNTS_LIMIT, 3)

        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, 'config.json')
            config.save_to_file(path)
            loaded = Config.load_from_file(path)

        self.assertEqual(loaded.TOP_DISCOUNTS_LIMIT, 3)
        self.assertEqual(loaded.INPUT_ENCODING, 'latin-1')

    def test_invalid_values_flagged(self):
        config = Config({'price_scale_factor': 0, 'input_encoding': 'no-such-codec'})
        validations = config.validate_config()
        self.assertFalse(validations['price_scale_factor'])
        self.assertFalse(validations['input_encoding'])

    def test_unknown_log_level_flagged(self):
        validations = Config({'log_level': 'LOUD'}).validate_config()
        self.assertFalse(validations['log_level'])


class TestLoggingSetup(unittest.TestCase):

    def setUp(self):
        root = logging.getLogger()
        self.saved_handlers = root.handlers[:]
        self.saved_level = root.level

    def tearDown(self):
        root = logging.getLogger()
        root.handlers[:] = self.saved_handlers
        root.setLevel(self.saved_level)

    def test_unknown_log_level_falls_back_to_info(self):
        setup_logging(log_level='LOUD')

        root = logging.getLogger()
        self.assertEqual(root.level, logging.INFO)
        self.assertEqual(len(root.handlers), 1)
        self.assertEqual(root.handlers[0].level, logging.INFO)

    def test_known_log_level_applied(self):
        setup_logging(log_level='warning')
        self.assertEqual(logging.getLogger().level, logging.WARNING)


if __name__ == '__main__':
    unittest.main()
