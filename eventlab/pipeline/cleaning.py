# ========================
# eventlab/pipeline/cleaning.py
# ========================

"""
Data Cleaning Module

Deduplicates, validates and normalizes raw event rows.
"""

import json
import math
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, List, Optional, Tuple

from .models import (
    CleanedRow,
    CleaningLog,
    FINANCIAL_EVENT_TYPES,
    RawRow,
    RevenueStatus,
    RevenueValue,
)

logger = logging.getLogger(__name__)

TIMESTAMP_FORMATS = [
    "%Y-%m-%d %H:%M:%S",
    "%Y/%m/%d",
    "%Y-%m-%d",
    "%d-%b-%Y",
    "%m/%d/%Y",
]


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def coerce_revenue(value: RevenueValue) -> Tuple[float, RevenueStatus]:
    """
    Convert a raw revenue value into a finite float.

    Numbers pass through and strings are parsed. Anything that cannot be
    turned into a finite number comes back as 0.0 with an INVALID status;
    None and blank strings come back as 0.0 with a MISSING status.

    Args:
        value: Revenue as read from the source (text, number or None)

    Returns:
        tuple: (revenue, status)
    """
    if value is None:
        return 0.0, RevenueStatus.MISSING

    if isinstance(value, bool):
        return 0.0, RevenueStatus.INVALID

    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return 0.0, RevenueStatus.INVALID
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0, RevenueStatus.MISSING
        try:
            # Whole-string parse: trailing garbage such as "12abc" is invalid, not 12
            number = float(text)
        except ValueError:
            return 0.0, RevenueStatus.INVALID
    else:
        return 0.0, RevenueStatus.INVALID

    if not math.isfinite(number):
        return 0.0, RevenueStatus.INVALID
    return number, RevenueStatus.PARSED


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse a timestamp string in ISO-8601 or one of the common log formats.

    Naive values are interpreted as UTC. Returns None when the value is
    missing or malformed.
    """
    if not value or not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    parsed = None
    try:
        iso_text = text[:-1] + '+00:00' if text.endswith(('Z', 'z')) else text
        parsed = datetime.fromisoformat(iso_text)
    except ValueError:
        for fmt in TIMESTAMP_FORMATS:
            try:
                parsed = datetime.strptime(text, fmt)
                break
            except ValueError:
                continue

    if parsed is None:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except (OverflowError, ValueError):
        # Offset pushes the instant outside datetime's range
        return None


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class EventCleaner:
    """
    Turns raw event rows into CleanedRow records plus a CleaningLog.

    The cleaner holds no counters of its own; every run folds per-row
    contributions into a fresh CleaningLog.
    """

    DEFAULT_COUNTRY = "UNKNOWN"
    DEFAULT_CURRENCY = "USD"
    DEFAULT_DEVICE = "web"

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        """
        Initialize the event cleaner.

        Args:
            clock (callable): Returns the processing time used for rows
                              without a usable timestamp. Defaults to UTC now.
        """
        self.clock = clock or _utc_now

    def clean(self, rows: Iterable[RawRow]) -> Tuple[List[CleanedRow], CleaningLog]:
        """
        Run the full cleaning sequence over a collection of raw rows.

        Args:
            rows (iterable[dict]): Raw rows in input order.

        Returns:
            tuple: (cleaned rows in input order, cleaning log)
        """
        rows = list(rows)
        processed_at = self.clock()

        unique_rows = self.remove_duplicates(rows)
        log = CleaningLog(duplicates_removed=len(rows) - len(unique_rows))

        cleaned = []
        for row in unique_rows:
            cleaned_row, row_log = self.clean_row(row, processed_at)
            log = log + row_log
            if cleaned_row is not None:
                cleaned.append(cleaned_row)

        logger.info(
            f"Cleaned {len(cleaned)}/{len(rows)} rows "
            f"(duplicates={log.duplicates_removed}, invalid={log.invalid_dropped}, "
            f"nulls={log.nulls_handled}, casing={log.casing_fixed})"
        )
        return cleaned, log

    def remove_duplicates(self, rows: List[RawRow]) -> List[RawRow]:
        """Keep the first occurrence of every distinct row."""
        seen = set()
        unique_rows = []
        for row in rows:
            key = self._canonical_key(row)
            if key in seen:
                continue
            seen.add(key)
            unique_rows.append(row)
        return unique_rows

    def clean_row(self, row: RawRow, processed_at: datetime) -> Tuple[Optional[CleanedRow], CleaningLog]:
        """
        Validate and normalize a single deduplicated row.

        Args:
            row (dict): A raw row.
            processed_at (datetime): Fallback timestamp for this run.

        Returns:
            tuple: (CleanedRow or None if the row is invalid, this row's
                    contribution to the cleaning log)
        """
        if _is_blank(row.get('user_id')) or _is_blank(row.get('event_type')):
            logger.debug(f"Row dropped due to missing user_id or event_type: {row}")
            return None, CleaningLog(invalid_dropped=1)

        raw_event_type = str(row['event_type'])
        event_type = raw_event_type.strip().lower()

        raw_country = self._text_or_default(row.get('country'), self.DEFAULT_COUNTRY)
        country = raw_country.strip().upper()
        currency = self._text_or_default(row.get('currency'), self.DEFAULT_CURRENCY).strip().upper()
        device = self._text_or_default(row.get('device'), self.DEFAULT_DEVICE).strip().lower()

        casing_fixed = int(raw_country != country or raw_event_type != event_type)

        revenue, status = coerce_revenue(row.get('revenue'))
        nulls_handled = 0
        if status is RevenueStatus.INVALID:
            nulls_handled = 1
        elif status is RevenueStatus.MISSING and event_type in FINANCIAL_EVENT_TYPES:
            nulls_handled = 1

        cleaned_row = CleanedRow(
            user_id=str(row['user_id']),
            event_type=event_type,
            revenue=revenue,
            country=country,
            currency=currency,
            device=device,
            timestamp=parse_timestamp(row.get('timestamp')) or processed_at,
        )
        return cleaned_row, CleaningLog(nulls_handled=nulls_handled, casing_fixed=casing_fixed)

    @staticmethod
    def _text_or_default(value: Any, default: str) -> str:
        if _is_blank(value):
            return default
        return str(value)

    @staticmethod
    def _canonical_key(row: RawRow) -> str:
        # Keys are stringified because DictReader files surplus cells under None
        items = sorted(((str(key), value) for key, value in row.items()), key=lambda item: item[0])
        return json.dumps(items, default=str)


def clean(rows: Iterable[RawRow]) -> Tuple[List[CleanedRow], CleaningLog]:
    """Clean raw rows with a default EventCleaner."""
    return EventCleaner().clean(rows)
