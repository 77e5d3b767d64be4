#!/usr/bin/env python3
"""
Spreadsheet export for normalized ENTSO-E rows.

Writes .xlsx files with native date and number cells (never pre-formatted
strings) and column widths estimated from the content.
"""

import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Sequence, Union

import pandas as pd
from openpyxl.utils import get_column_letter

from .normalizer import DISPLAY_TZ, Row

logger = logging.getLogger(__name__)

SHEET_NAME = "ENTSO-E Data"
EXCEL_DATETIME_FORMAT = "yyyy-mm-dd hh:mm"

# Column sizing (in characters)
MIN_COLUMN_WIDTH = 10
MAX_COLUMN_WIDTH = 50
HEADER_WIDTH_FACTOR = 1.2
VALUE_WIDTH_FACTOR = 1.1
WIDTH_SAMPLE_ROWS = 100


def _local_naive(value: datetime) -> datetime:
    """Excel has no timezone support: store the display-local wall time."""
    return value.astimezone(DISPLAY_TZ).replace(tzinfo=None, second=0, microsecond=0)


def _excel_value(value: Any) -> Any:
    if isinstance(value, datetime) and value.tzinfo is not None:
        return _local_naive(value)
    return value


def price_projection(rows: Sequence[Row]) -> List[Dict[str, Any]]:
    """
    Reduce price rows to the columns of the price export.

    Args:
        rows: Normalized rows of a price document

    Returns:
        Records with timestamp (local wall time), price, currency and price unit
    """
    projected = []
    for row in rows:
        timestamp = row.get('timestamp')
        projected.append({
            'timestamp': _local_naive(timestamp) if timestamp is not None else None,
            'price': row.get('price'),
            'currency': row.get('currency_unit'),
            'price_unit': row.get('price_measure_unit'),
        })
    return projected


def estimate_column_widths(headers: Sequence[str], records: Sequence[Dict[str, Any]]) -> List[float]:
    """
    Estimate column widths based on data content.

    Args:
        headers: Column headers, in sheet order
        records: Records to sample (only the first 100 are inspected)

    Returns:
        One width per header
    """
    widths = [max(MIN_COLUMN_WIDTH, len(header) * HEADER_WIDTH_FACTOR) for header in headers]

    for record in records[:WIDTH_SAMPLE_ROWS]:
        for index, header in enumerate(headers):
            value = record.get(header)
            text = '' if value is None else str(value)
            value_width = len(text) * VALUE_WIDTH_FACTOR
            if value_width > widths[index]:
                widths[index] = min(MAX_COLUMN_WIDTH, value_width)

    return widths


def export_to_excel(
    records: Sequence[Dict[str, Any]],
    file_path: Union[str, Path],
    sheet_name: str = SHEET_NAME
) -> Path:
    """
    Export records to an Excel file.

    Args:
        records: Rows (or projected records) to export
        file_path: Target .xlsx path
        sheet_name: Worksheet name

    Returns:
        Path of the written file

    Raises:
        ValueError: If there is nothing to export
    """
    if not records:
        raise ValueError("No data to export")

    file_path = Path(file_path)
    prepared = [{key: _excel_value(value) for key, value in record.items()} for record in records]
    df = pd.DataFrame(prepared)
    headers = [str(column) for column in df.columns]

    with pd.ExcelWriter(
        file_path,
        engine='openpyxl',
        datetime_format=EXCEL_DATETIME_FORMAT,
        date_format='yyyy-mm-dd'
    ) as writer:
        df.to_excel(writer, sheet_name=sheet_name, index=False)
        worksheet = writer.sheets[sheet_name]
        for index, width in enumerate(estimate_column_widths(headers, prepared), start=1):
            worksheet.column_dimensions[get_column_letter(index)].width = width

    logger.info(f"Exported {len(records)} rows to {file_path}")
    return file_path


def export_filename(document_type: str, start: Union[str, date], end: Union[str, date]) -> str:
    """Build the default export filename, e.g. entsoe-A44-2024-06-01-to-2024-06-02.xlsx."""
    return f"entsoe-{document_type}-{start}-to-{end}.xlsx"
