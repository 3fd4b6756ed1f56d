# ========================
# eventlab/pipeline/__init__.py
# ========================

"""
Event Pipeline Package

Core components for cleaning and summarizing event logs:
- ingestion: CSV reading into raw rows
- cleaning: Deduplication, validation and normalization
- transformation: Revenue and engagement aggregations
- orchestrator: Pipeline coordination
"""

from .models import (
    AggregationResults,
    CleanedRow,
    CleaningLog,
    CountryRevenue,
    DeviceRevenue,
    EventCount,
    EventType,
)
from .ingestion import CSVReader, parse_csv_text
from .cleaning import EventCleaner, clean
from .transformation import EventAggregator, aggregate
from .orchestrator import EventPipeline, PipelineResult

__all__ = [
    'AggregationResults',
    'CleanedRow',
    'CleaningLog',
    'CountryRevenue',
    'DeviceRevenue',
    'EventCount',
    'EventType',
    'CSVReader',
    'parse_csv_text',
    'EventCleaner',
    'clean',
    'EventAggregator',
    'aggregate',
    'EventPipeline',
    'PipelineResult'
]

__version__ = "1.0.0"
