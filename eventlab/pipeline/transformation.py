# ========================
# eventlab/pipeline/transformation.py
# ========================

"""
Data Transformation Module

Group-and-aggregate views over cleaned events for the dashboard.
"""

import logging
from collections import defaultdict
from typing import Dict, List, Sequence

from .models import (
    AggregationResults,
    CleanedRow,
    CountryRevenue,
    DeviceRevenue,
    EventCount,
)

logger = logging.getLogger(__name__)


class EventAggregator:
    """
    Computes revenue by country, ARPU and the secondary display views.
    Every method is a single pass over the cleaned rows; nothing is cached.
    """

    def aggregate(self, cleaned: Sequence[CleanedRow]) -> AggregationResults:
        """
        Compute the headline aggregations.

        Args:
            cleaned (list[CleanedRow]): Output of the cleaning stage.

        Returns:
            AggregationResults: Revenue by country (descending) and ARPU.
        """
        if not cleaned:
            logger.info("No cleaned rows to aggregate")
            return AggregationResults()

        results = AggregationResults(
            revenue_by_country=tuple(self.revenue_by_country(cleaned)),
            arpu=self.average_revenue_per_user(cleaned),
        )
        logger.info(
            f"Aggregated {len(cleaned)} rows: "
            f"{len(results.revenue_by_country)} countries, ARPU {results.arpu:,.2f}"
        )
        return results

    def revenue_by_country(self, cleaned: Sequence[CleanedRow]) -> List[CountryRevenue]:
        totals = self._sum_revenue_by(cleaned, 'country')
        return [CountryRevenue(country=country, total_revenue=total)
                for country, total in self._descending(totals)]

    def average_revenue_per_user(self, cleaned: Sequence[CleanedRow]) -> float:
        """Total revenue divided by the number of distinct user IDs."""
        unique_users = {row.user_id for row in cleaned}
        if not unique_users:
            return 0.0
        return sum(row.revenue for row in cleaned) / len(unique_users)

    def revenue_by_device(self, cleaned: Sequence[CleanedRow]) -> List[DeviceRevenue]:
        """
        Revenue mix per device, with each device's share of total revenue.
        Shares are 0 when total revenue is 0.
        """
        totals = self._sum_revenue_by(cleaned, 'device')
        overall = sum(totals.values())
        return [
            DeviceRevenue(
                device=device,
                total_revenue=total,
                share=total / overall if overall else 0.0,
            )
            for device, total in self._descending(totals)
        ]

    def event_type_counts(self, cleaned: Sequence[CleanedRow]) -> List[EventCount]:
        counts: Dict[str, int] = defaultdict(int)
        for row in cleaned:
            counts[row.event_type] += 1
        return [EventCount(event_type=event_type, count=count)
                for event_type, count in self._descending(counts)]

    @staticmethod
    def _sum_revenue_by(cleaned: Sequence[CleanedRow], field: str) -> Dict[str, float]:
        totals: Dict[str, float] = defaultdict(float)
        for row in cleaned:
            totals[getattr(row, field)] += row.revenue
        return totals

    @staticmethod
    def _descending(totals):
        # sorted() is stable, so ties keep first-appearance order
        return sorted(totals.items(), key=lambda item: item[1], reverse=True)


def aggregate(cleaned: Sequence[CleanedRow]) -> AggregationResults:
    """Aggregate cleaned rows with a default EventAggregator."""
    return EventAggregator().aggregate(cleaned)
