# ========================
# tests/test_transformation.py
# ========================

import unittest
import sys
import os
from datetime import datetime, timezone

# Add the project root to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from eventlab.pipeline.models import (
    AggregationResults,
    CleanedRow,
    CountryRevenue,
    DeviceRevenue,
    EventCount,
)
from eventlab.pipeline.transformation import EventAggregator, aggregate

TIMESTAMP = datetime(2024, 1, 15, tzinfo=timezone.utc)


def make_row(user_id, revenue=0.0, country='USA', device='web', event_type='purchase'):
    return CleanedRow(
        user_id=user_id,
        event_type=event_type,
        revenue=revenue,
        country=country,
        currency='USD',
        device=device,
        timestamp=TIMESTAMP,
    )


class TestEventAggregator(unittest.TestCase):

    def setUp(self):
        self.aggregator = EventAggregator()

    def test_arpu_uses_distinct_users(self):
        rows = [
            make_row('a', 100.0),
            make_row('a', 50.0),
            make_row('b', 0.0),
        ]

        results = self.aggregator.aggregate(rows)

        self.assertEqual(results.arpu, 75.0)

    def test_empty_input_gives_neutral_result(self):
        results = self.aggregator.aggregate([])

        self.assertEqual(results, AggregationResults(revenue_by_country=(), arpu=0.0))
        self.assertEqual(results.to_dict(), {'revenue_by_country': [], 'arpu': 0.0})
        self.assertEqual(self.aggregator.average_revenue_per_user([]), 0.0)

    def test_revenue_by_country_sorted_descending(self):
        rows = [
            make_row('a', 10.0, country='UK'),
            make_row('b', 120.5, country='USA'),
            make_row('c', 30.0, country='UK'),
            make_row('d', -5.0, country='JAPAN'),
            make_row('e', 0.0, country='UNKNOWN'),
        ]

        results = self.aggregator.aggregate(rows)

        self.assertEqual(results.revenue_by_country, (
            CountryRevenue('USA', 120.5),
            CountryRevenue('UK', 40.0),
            CountryRevenue('UNKNOWN', 0.0),
            CountryRevenue('JAPAN', -5.0),
        ))

    def test_ties_keep_first_appearance_order(self):
        rows = [
            make_row('a', 5.0, country='FR'),
            make_row('b', 5.0, country='DE'),
            make_row('c', 9.0, country='ES'),
        ]

        countries = [entry.country for entry in self.aggregator.revenue_by_country(rows)]

        self.assertEqual(countries, ['ES', 'FR', 'DE'])

    def test_end_to_end_aggregation(self):
        rows = [
            make_row('u1', 120.5, country='USA'),
            make_row('u2', 0.0, country='UNKNOWN'),
        ]

        results = aggregate(rows)

        self.assertEqual(results.to_dict(), {
            'revenue_by_country': [
                {'country': 'USA', 'total_revenue': 120.5},
                {'country': 'UNKNOWN', 'total_revenue': 0.0},
            ],
            'arpu': 60.25,
        })

    def test_revenue_by_device_with_share(self):
        rows = [
            make_row('a', 300.0, device='mobile'),
            make_row('b', 100.0, device='web'),
            make_row('c', 100.0, device='mobile'),
        ]

        device_mix = self.aggregator.revenue_by_device(rows)

        self.assertEqual(device_mix, [
            DeviceRevenue('mobile', 400.0, 0.8),
            DeviceRevenue('web', 100.0, 0.2),
        ])

    def test_device_share_is_zero_without_revenue(self):
        rows = [make_row('a', 0.0, device='tablet')]

        device_mix = self.aggregator.revenue_by_device(rows)

        self.assertEqual(device_mix, [DeviceRevenue('tablet', 0.0, 0.0)])

    def test_event_type_counts(self):
        rows = [
            make_row('a', event_type='view'),
            make_row('b', event_type='purchase'),
            make_row('c', event_type='view'),
            make_row('d', event_type='click'),
            make_row('e', event_type='view'),
        ]

        counts = self.aggregator.event_type_counts(rows)

        self.assertEqual(counts, [
            EventCount('view', 3),
            EventCount('purchase', 1),
            EventCount('click', 1),
        ])

    def test_large_collection_totals(self):
        rows = [make_row(f'user_{i % 20}', 90.0, country=f'C{i % 5}') for i in range(100)]

        results = self.aggregator.aggregate(rows)

        self.assertEqual(len(results.revenue_by_country), 5)
        total_revenue = sum(entry.total_revenue for entry in results.revenue_by_country)
        self.assertAlmostEqual(total_revenue, 9000.0)
        self.assertAlmostEqual(results.arpu, 9000.0 / 20)


if __name__ == '__main__':
    unittest.main()
