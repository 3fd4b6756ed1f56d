# ========================
# eventlab/utils/data_generator.py
# ========================

"""
Data Generation Utilities

Builds messy sample event logs for demos and tests.
"""

import csv
import random
import logging
from datetime import datetime, timedelta, timezone
from typing import List, Dict, Any, Optional
from pathlib import Path

from ..pipeline.models import RAW_FIELDS, RawRow

logger = logging.getLogger(__name__)


class DataGenerator:
    """
    Generates event-log datasets with realistic inconsistencies:
    mixed casing, stray whitespace, missing countries, a duplicate,
    an invalid row and a purchase without revenue.
    """

    def __init__(self, seed: Optional[int] = None):
        """
        Initialize data generator.

        Args:
            seed (int): Random seed for reproducible data generation
        """
        self.random = random.Random(seed)
        self._initialize_data_patterns()
        logger.info(f"DataGenerator initialized with seed: {seed}")

    def _initialize_data_patterns(self) -> None:
        """Initialize value pools; repeated entries weight the draw."""
        self.countries = ['USA', 'usa', 'UK', 'uk', 'Germany', 'germany', ' France ', 'Japan', None]
        self.events = ['view', 'view', 'add_to_cart', 'purchase', 'purchase', 'refund', 'signup', 'view']
        self.devices = ['mobile', 'web', 'tablet', 'iOS', 'Android']
        # Roughly the last four months
        self.max_age_seconds = 10_000_000

    def generate_rows(self, num_rows: int = 500, num_users: int = 50) -> List[RawRow]:
        """
        Generate raw event rows followed by four deliberately messy rows.

        Args:
            num_rows (int): Number of regular rows
            num_users (int): Size of the user pool

        Returns:
            list[dict]: num_rows + 4 raw rows
        """
        users = [f"user_{i + 1}" for i in range(num_users)]
        now = datetime.now(timezone.utc)

        rows = [self._generate_single_row(users, now) for _ in range(num_rows)]
        rows.extend(self._messy_rows())
        return rows

    def _generate_single_row(self, users: List[str], now: datetime) -> RawRow:
        event = self.random.choice(self.events)
        if event == 'purchase':
            revenue = self.random.randint(0, 499)
        elif event == 'refund':
            revenue = -self.random.randint(0, 99)
        else:
            revenue = 0

        row = {
            'user_id': self.random.choice(users),
            'event_type': event,
            'revenue': revenue,
            'country': self.random.choice(self.countries),
            'currency': 'USD',
            'device': self.random.choice(self.devices),
            'timestamp': (now - timedelta(seconds=self.random.uniform(0, self.max_age_seconds))).isoformat(),
        }
        if row['country'] is None:
            del row['country']
        return row

    @staticmethod
    def _messy_rows() -> List[RawRow]:
        return [
            {'user_id': 'user_99', 'event_type': 'PURCHASE', 'country': 'usa ', 'revenue': '120.50'},
            {'user_id': 'user_99', 'event_type': 'PURCHASE', 'country': 'usa ', 'revenue': '120.50'},
            {'user_id': '', 'event_type': 'view'},
            {'user_id': 'user_1', 'event_type': 'purchase', 'revenue': None},
        ]

    def generate_dataset(self,
                         file_path: str,
                         num_rows: int = 500,
                         num_users: int = 50) -> Dict[str, Any]:
        """
        Generate a dataset and write it to CSV.

        Args:
            file_path (str): Output CSV file path
            num_rows (int): Number of regular rows
            num_users (int): Size of the user pool

        Returns:
            dict: Generation statistics
        """
        logger.info(f"Generating {num_rows:,} event rows to {file_path}")
        Path(file_path).parent.mkdir(parents=True, exist_ok=True)

        rows = self.generate_rows(num_rows=num_rows, num_users=num_users)
        stats = {
            'total_rows': len(rows),
            'messy_rows': len(self._messy_rows()),
            'error_types': {},
        }
        for row in rows:
            for error_type in self._classify(row):
                self._track_error_type(stats, error_type)

        with open(file_path, 'w', newline='', encoding='utf-8') as f:
            writer = csv.DictWriter(f, fieldnames=list(RAW_FIELDS))
            writer.writeheader()
            writer.writerows(rows)

        logger.info(f"Dataset generated: {file_path}")
        logger.info(f"Error breakdown: {stats['error_types']}")
        return stats

    @staticmethod
    def _classify(row: RawRow) -> List[str]:
        """Name the inconsistencies a row carries."""
        error_types = []
        if not row.get('user_id'):
            error_types.append('missing_user_id')
        if row.get('revenue') is None and row.get('event_type', '').lower() in ('purchase', 'refund'):
            error_types.append('missing_revenue')
        country = row.get('country')
        if country is None:
            error_types.append('missing_country')
        elif country != country.strip().upper():
            error_types.append('country_casing')
        if row.get('event_type', '') != row.get('event_type', '').lower():
            error_types.append('event_type_casing')
        return error_types

    def _track_error_type(self, stats: Dict[str, Any], error_type: str) -> None:
        """Track error types for statistics."""
        if error_type not in stats['error_types']:
            stats['error_types'][error_type] = 0
        stats['error_types'][error_type] += 1
