# ========================
# eventlab/pipeline/ingestion.py
# ========================

"""
Data Ingestion Module

Reads an event-log CSV (file or uploaded text) into raw row dictionaries.
"""

import csv
import io
import logging
from typing import Iterable, List, Optional

from .models import RawRow

logger = logging.getLogger(__name__)

# Cells beyond the header width end up under this key
EXTRA_FIELDS_KEY = '_extra'


class CSVReader:
    """
    Reads a whole event-log CSV into memory.
    One dataset is one uploaded file, so no chunking is done.
    """

    def __init__(self, file_path: str):
        """
        Initialize the CSV reader.

        Args:
            file_path (str): Path to the CSV file to read
        """
        self.file_path = file_path
        self.header: Optional[List[str]] = []
        logger.info(f"Initialized CSVReader for file: {file_path}")

    def read_rows(self) -> List[RawRow]:
        """
        Read every data row of the file.

        Returns:
            list[dict]: One dictionary per row, keyed by the header columns.
        """
        try:
            # utf-8-sig drops the BOM spreadsheet exports tend to add
            with open(self.file_path, 'r', newline='', encoding='utf-8-sig') as f:
                rows = self._read(f)
        except FileNotFoundError:
            logger.error(f"File '{self.file_path}' was not found")
            raise
        except Exception as e:
            logger.error(f"Error reading CSV file: {e}")
            raise

        logger.info(f"Total rows read: {len(rows)}")
        return rows

    def _read(self, lines: Iterable[str]) -> List[RawRow]:
        reader = csv.DictReader(lines, restkey=EXTRA_FIELDS_KEY)
        rows = list(reader)
        self.header = reader.fieldnames
        logger.info(f"CSV header: {self.header}")
        return rows


def parse_csv_text(text: str) -> List[RawRow]:
    """
    Parse CSV text (e.g. an uploaded file body) into raw rows.

    Args:
        text (str): CSV content including its header line

    Returns:
        list[dict]: Parsed rows; empty when the text has no data rows
    """
    if text.startswith('\ufeff'):
        text = text[1:]
    reader = csv.DictReader(io.StringIO(text, newline=''), restkey=EXTRA_FIELDS_KEY)
    rows = list(reader)
    logger.info(f"Parsed {len(rows)} rows from CSV text (header: {reader.fieldnames})")
    return rows
