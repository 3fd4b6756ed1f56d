# ========================
# tests/test_data_generator.py
# ========================

import unittest
import sys
import os
import tempfile
from pathlib import Path

# Add the project root to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from eventlab.pipeline.cleaning import EventCleaner
from eventlab.pipeline.ingestion import CSVReader
from eventlab.pipeline.models import RAW_FIELDS
from eventlab.utils.data_generator import DataGenerator


class TestDataGenerator(unittest.TestCase):

    def test_rows_include_messy_tail(self):
        rows = DataGenerator(seed=7).generate_rows(num_rows=20, num_users=5)

        self.assertEqual(len(rows), 24)
        self.assertEqual(rows[-4], rows[-3])
        self.assertEqual(rows[-2]['user_id'], '')
        self.assertIsNone(rows[-1]['revenue'])

    def test_regular_rows_follow_value_pools(self):
        generator = DataGenerator(seed=3)
        rows = generator.generate_rows(num_rows=200, num_users=5)[:200]

        for row in rows:
            self.assertIn(row['user_id'], {f'user_{i}' for i in range(1, 6)})
            self.assertIn(row['event_type'], generator.events)
            self.assertIn(row['device'], generator.devices)
            if row['event_type'] == 'purchase':
                self.assertTrue(0 <= row['revenue'] <= 499)
            elif row['event_type'] == 'refund':
                self.assertTrue(-99 <= row['revenue'] <= 0)
            else:
                self.assertEqual(row['revenue'], 0)

    def test_seed_makes_user_and_event_sequence_reproducible(self):
        first = DataGenerator(seed=42).generate_rows(num_rows=30)
        second = DataGenerator(seed=42).generate_rows(num_rows=30)

        # Timestamps are relative to "now", everything else must match
        def strip(rows):
            return [{k: v for k, v in row.items() if k != "timestamp"} for row in rows]

        self.assertEqual(strip(first), strip(second))

    def test_generated_rows_clean_as_expected(self):
        rows = DataGenerator(seed=11).generate_rows(num_rows=100)

        cleaned, log = EventCleaner().clean(rows)

        self.assertEqual(log.duplicates_removed, 1)
        self.assertEqual(log.invalid_dropped, 1)
        self.assertGreaterEqual(log.nulls_handled, 1)
        self.assertEqual(len(cleaned), 102)

    def test_generate_dataset_writes_csv(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            file_path = str(Path(temp_dir) / 'raw' / 'events.csv')

            stats = DataGenerator(seed=1).generate_dataset(file_path, num_rows=50, num_users=10)

            reader = CSVReader(file_path)
            rows = reader.read_rows()
            self.assertEqual(reader.header, list(RAW_FIELDS))
            self.assertEqual(len(rows), 54)
            self.assertEqual(stats['total_rows'], 54)
            self.assertEqual(stats['messy_rows'], 4)
            self.assertEqual(stats['error_types']['missing_user_id'], 1)
            self.assertGreaterEqual(stats['error_types']['event_type_casing'], 2)

            # Missing values come back as empty cells
            self.assertEqual(rows[-1]['revenue'], '')
            self.assertEqual(rows[-2]['user_id'], '')


if __name__ == '__main__':
    unittest.main()
