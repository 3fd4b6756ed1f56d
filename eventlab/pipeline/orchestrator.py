# ========================
# eventlab/pipeline/orchestrator.py
# ========================

"""
Pipeline Orchestrator Module

Coordinates ingestion, cleaning and aggregation for one uploaded dataset.
"""

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from .cleaning import EventCleaner
from .ingestion import CSVReader, parse_csv_text
from .models import (
    AggregationResults,
    CleanedRow,
    CleaningLog,
    DeviceRevenue,
    EventCount,
    RawRow,
)
from .transformation import EventAggregator
from ..utils.config import Config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineResult:
    """Everything a display layer may read from one pipeline run."""

    source: str
    raw_rows: int
    cleaned: List[CleanedRow]
    cleaning_log: CleaningLog
    aggregations: AggregationResults
    device_revenue: List[DeviceRevenue] = field(default_factory=list)
    event_counts: List[EventCount] = field(default_factory=list)

    def preview(self, limit: int = 10) -> List[CleanedRow]:
        """First rows of the cleaned dataset."""
        return self.cleaned[:max(limit, 0)]

    def to_dict(self, preview_rows: int = 10) -> Dict[str, Any]:
        return {
            'source': self.source,
            'raw_rows': self.raw_rows,
            'cleaned_rows': len(self.cleaned),
            'cleaning_log': self.cleaning_log.to_dict(),
            'aggregations': self.aggregations.to_dict(),
            'device_revenue': [asdict(entry) for entry in self.device_revenue],
            'event_counts': [asdict(entry) for entry in self.event_counts],
            'preview': [row.to_dict() for row in self.preview(preview_rows)],
        }


class EventPipeline:
    """
    Runs raw rows through the cleaner and the aggregator.
    Each run is independent; re-running simply starts over.
    """

    def __init__(self,
                 config: Optional[Config] = None,
                 cleaner: Optional[EventCleaner] = None,
                 aggregator: Optional[EventAggregator] = None):
        """
        Initialize the event pipeline.

        Args:
            config (Config): Configuration object
            cleaner (EventCleaner): Cleaning stage, a default one if omitted
            aggregator (EventAggregator): Aggregation stage, a default one if omitted
        """
        self.config = config or Config()
        self.cleaner = cleaner or EventCleaner()
        self.aggregator = aggregator or EventAggregator()

    def run(self, rows: Iterable[RawRow], source: str = "rows") -> PipelineResult:
        """
        Execute cleaning and aggregation over in-memory rows.

        Args:
            rows (iterable[dict]): Raw rows
            source (str): Label describing where the rows came from

        Returns:
            PipelineResult: Cleaned rows, cleaning log and aggregations
        """
        rows = list(rows)
        logger.info(f"Starting event pipeline for '{source}' ({len(rows)} rows)...")

        cleaned, cleaning_log = self.cleaner.clean(rows)
        result = PipelineResult(
            source=source,
            raw_rows=len(rows),
            cleaned=cleaned,
            cleaning_log=cleaning_log,
            aggregations=self.aggregator.aggregate(cleaned),
            device_revenue=self.aggregator.revenue_by_device(cleaned),
            event_counts=self.aggregator.event_type_counts(cleaned),
        )

        self._log_final_summary(result)
        return result

    def run_file(self, input_file: str) -> PipelineResult:
        """Read a CSV file and run the pipeline over its rows."""
        rows = CSVReader(input_file).read_rows()
        return self.run(rows, source=input_file)

    def run_csv_text(self, text: str, source: str = "upload") -> PipelineResult:
        """Parse CSV text and run the pipeline over its rows."""
        return self.run(parse_csv_text(text), source=source)

    def report(self, result: PipelineResult, preview_rows: Optional[int] = None) -> Dict[str, Any]:
        """Serialize a result, previewing PREVIEW_ROWS rows unless told otherwise."""
        if preview_rows is None:
            preview_rows = self.config.PREVIEW_ROWS
        return result.to_dict(preview_rows=preview_rows)

    def _log_final_summary(self, result: PipelineResult) -> None:
        logger.info("=" * 60)
        logger.info("PIPELINE EXECUTION SUMMARY")
        logger.info("=" * 60)
        logger.info(f"Source: {result.source}")
        logger.info(f"Rows in: {result.raw_rows:,}, rows cleaned: {len(result.cleaned):,}")
        for name, value in result.cleaning_log.to_dict().items():
            logger.info(f"  {name}: {value}")
        logger.info(f"ARPU: {result.aggregations.arpu:,.2f}")
        logger.info("=" * 60)
