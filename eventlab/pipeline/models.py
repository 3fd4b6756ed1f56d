# ========================
# eventlab/pipeline/models.py
# ========================

"""
Event Data Models

Record types shared by the cleaning and aggregation stages.
"""

from dataclasses import dataclass, asdict
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

# Loosely typed input row as produced by the CSV reader
RawRow = Dict[str, Any]

# Revenue arrives either as CSV text or as a number from programmatic callers
RevenueValue = Union[str, int, float, None]

RAW_FIELDS = (
    'user_id', 'event_type', 'revenue', 'country',
    'currency', 'device', 'timestamp'
)


class EventType(str, Enum):
    """Known event types in the interaction log."""

    VIEW = 'view'
    ADD_TO_CART = 'add_to_cart'
    PURCHASE = 'purchase'
    REFUND = 'refund'
    SIGNUP = 'signup'

    @classmethod
    def lookup(cls, value: str) -> Optional['EventType']:
        """Return the member for a normalized value, or None if unrecognised."""
        try:
            return cls(value)
        except ValueError:
            return None


# Events where a missing revenue is a data quality issue
FINANCIAL_EVENT_TYPES = frozenset({EventType.PURCHASE.value, EventType.REFUND.value})


class RevenueStatus(Enum):
    """Outcome of coercing a raw revenue value."""

    PARSED = 'parsed'
    MISSING = 'missing'
    INVALID = 'invalid'


@dataclass(frozen=True)
class CleanedRow:
    """
    A validated and normalized event.

    event_type keeps any non-empty lowercased value, including ones outside
    EventType; use known_event_type to tell the two apart.
    """

    user_id: str
    event_type: str
    revenue: float
    country: str
    currency: str
    device: str
    timestamp: datetime

    @property
    def known_event_type(self) -> Optional[EventType]:
        return EventType.lookup(self.event_type)

    def to_dict(self) -> Dict[str, Any]:
        record = asdict(self)
        record['timestamp'] = self.timestamp.isoformat()
        return record


@dataclass(frozen=True)
class CleaningLog:
    """Counters describing what a cleaning run changed."""

    duplicates_removed: int = 0
    nulls_handled: int = 0
    casing_fixed: int = 0
    invalid_dropped: int = 0

    def __add__(self, other: 'CleaningLog') -> 'CleaningLog':
        if not isinstance(other, CleaningLog):
            return NotImplemented
        return CleaningLog(
            duplicates_removed=self.duplicates_removed + other.duplicates_removed,
            nulls_handled=self.nulls_handled + other.nulls_handled,
            casing_fixed=self.casing_fixed + other.casing_fixed,
            invalid_dropped=self.invalid_dropped + other.invalid_dropped,
        )

    @property
    def total(self) -> int:
        return (self.duplicates_removed + self.nulls_handled +
                self.casing_fixed + self.invalid_dropped)

    def to_dict(self) -> Dict[str, int]:
        record = asdict(self)
        record['total'] = self.total
        return record


@dataclass(frozen=True)
class CountryRevenue:
    country: str
    total_revenue: float


@dataclass(frozen=True)
class DeviceRevenue:
    device: str
    total_revenue: float
    share: float


@dataclass(frozen=True)
class EventCount:
    event_type: str
    count: int


@dataclass(frozen=True)
class AggregationResults:
    """Summary figures derived from a cleaned collection."""

    revenue_by_country: Tuple[CountryRevenue, ...] = ()
    arpu: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'revenue_by_country': [asdict(entry) for entry in self.revenue_by_country],
            'arpu': self.arpu,
        }
