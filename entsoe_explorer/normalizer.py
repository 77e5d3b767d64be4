#!/usr/bin/env python3
"""
Row normalization for decoded ENTSO-E documents.

Produces one flat record per point. Each record keeps the UTC instant
(``timestamp``) for sorting and export, and renders ``date``/``time`` in the
display timezone for people.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple
import zoneinfo

from . import config
from .constants import MISSING_DISPLAY
from .models import Period, Point, PublicationDocument, Series
from .parsers import decode_document, iter_points
from .timestamps import reconstruct_timestamp, resolution_minutes

logger = logging.getLogger(__name__)

Row = Dict[str, Any]

# Process-wide display settings, resolved once
DISPLAY_TZ = zoneinfo.ZoneInfo(config.DISPLAY_TIMEZONE)
DATE_FORMAT = '%Y-%m-%d'
TIME_FORMAT = '%H:%M'

# Current-price lookup: quarter-hour slots, matched exactly or within a minute
SLOT_MINUTES = 15
SLOT_TOLERANCE = timedelta(seconds=60)


def format_local(instant: Optional[datetime], tz: zoneinfo.ZoneInfo = DISPLAY_TZ) -> Tuple[str, str]:
    """
    Render an instant as local (date, time) display strings.

    Seconds are dropped before formatting, so ``22:00:59Z`` shows as the
    same minute as ``22:00:00Z``.

    Args:
        instant: Timezone-aware datetime, or None
        tz: Display timezone

    Returns:
        Tuple of (YYYY-MM-DD, HH:MM), or ("-", "-") when instant is None
    """
    if instant is None:
        return MISSING_DISPLAY, MISSING_DISPLAY

    local = instant.astimezone(tz).replace(second=0, microsecond=0)
    return local.strftime(DATE_FORMAT), local.strftime(TIME_FORMAT)


def normalize_point(
    document: PublicationDocument,
    series: Series,
    period: Period,
    point: Point,
    step_minutes: Optional[int] = None
) -> Row:
    """
    Flatten one point and its context into a row.

    Args:
        document: Document the point belongs to
        series: Series the point belongs to
        period: Period the point belongs to
        point: The point itself
        step_minutes: Resolution of the period in minutes, looked up if omitted

    Returns:
        Row dict; ``price``, ``resource_type`` and ``reason`` keys appear only
        when the source carries them
    """
    timestamp = reconstruct_timestamp(
        period.start, point.position, period.resolution, step_minutes
    )
    date_str, time_str = format_local(timestamp)

    row: Row = {
        'document_id': document.document_id,
        'document_type': document.document_type,
        'created_date_time': document.created_date_time,
        'business_type': series.business_type,
        'curve_type': series.curve_type,
        'object_aggregation': series.object_aggregation,
        'time_start': period.time_start,
        'time_end': period.time_end,
        'resolution': period.resolution,
        'position': point.position,
        'quantity': point.quantity,
        'price_measure_unit': series.price_measure_unit,
        'currency_unit': series.currency_unit,
        'quantity_measure_unit': series.quantity_measure_unit,
        'in_domain': series.in_domain,
        'out_domain': series.out_domain,
        'resource_provider': series.resource_provider,
    }

    # Zero is a valid price; absence means a non-price document
    if point.price is not None:
        row['price'] = point.price

    if series.resource_type is not None:
        row['resource_type'] = series.resource_type

    if series.reason is not None:
        row['reason'] = series.reason

    row['timestamp'] = timestamp
    row['date'] = date_str
    row['time'] = time_str

    return row


def normalize_document(document: PublicationDocument) -> List[Row]:
    """Normalize every point of a decoded document, in document order."""
    rows: List[Row] = []
    steps: Dict[int, int] = {}

    for series, period, point in iter_points(document):
        # One resolution lookup (and one warning) per period
        key = id(period)
        if key not in steps:
            steps[key] = resolution_minutes(period.resolution)
        rows.append(normalize_point(document, series, period, point, steps[key]))

    missing = sum(1 for row in rows if row['timestamp'] is None)
    if missing:
        logger.warning(f"{missing} of {len(rows)} rows have no reconstructable timestamp")

    return rows


def parse_entsoe_xml(xml_content: str) -> List[Row]:
    """
    Parse ENTSO-E XML into flat rows.

    Args:
        xml_content: The XML string response from the ENTSO-E API

    Returns:
        Rows in document order (series, period, position within period)

    Raises:
        DecodeError: If the document has no recognized root
    """
    document = decode_document(xml_content)
    rows = normalize_document(document)
    logger.debug(f"Normalized {len(rows)} rows from {document.root}")
    return rows


def sort_rows(rows: List[Row]) -> List[Row]:
    """
    Sort rows by reconstructed timestamp.

    Rows without a timestamp come first and keep their relative order.
    """
    return sorted(
        rows,
        key=lambda row: (row['timestamp'] is not None, row['timestamp'] or datetime.min)
    )


def current_slot(now: datetime, tz: zoneinfo.ZoneInfo = DISPLAY_TZ) -> datetime:
    """
    Start of the quarter-hour slot containing ``now``, as a UTC instant.

    The slot is taken on the display-timezone wall clock, then converted
    back to UTC.
    """
    local = now.astimezone(tz)
    local = local.replace(
        minute=local.minute - local.minute % SLOT_MINUTES, second=0, microsecond=0
    )
    return local.astimezone(timezone.utc)


def current_price(
    rows: List[Row],
    now: Optional[datetime] = None,
    tz: zoneinfo.ZoneInfo = DISPLAY_TZ
) -> Optional[Dict[str, Any]]:
    """
    Look up the price of the slot ``now`` falls in.

    An exact timestamp match wins, otherwise the first priced row within
    ``SLOT_TOLERANCE`` of the slot start is used.

    Args:
        rows: Normalized rows of a price document
        now: Reference instant (defaults to the current time)
        tz: Timezone whose wall clock defines the slot

    Returns:
        Dict with the slot (local and UTC), the matched price per MWh and
        per kWh, and the previous/current/next rows, or None when no priced
        row matches the slot
    """
    now = now or datetime.now(timezone.utc)
    slot = current_slot(now, tz)

    priced = [row for row in rows if row['timestamp'] is not None and 'price' in row]
    by_instant = {}
    for row in priced:
        by_instant.setdefault(row['timestamp'], row)

    match = by_instant.get(slot)
    if match is None:
        match = next(
            (row for row in priced if abs(row['timestamp'] - slot) <= SLOT_TOLERANCE),
            None
        )
    if match is None:
        logger.debug(f"No priced row for slot {slot.isoformat()}")
        return None

    step = timedelta(minutes=SLOT_MINUTES)
    delta = abs(match['timestamp'] - slot)

    return {
        'now_local': now.astimezone(tz),
        'slot_local': slot.astimezone(tz),
        'slot_utc': slot,
        'matched_delta_minutes': round(delta.total_seconds() / 60),
        'currency': match['currency_unit'],
        'price_per_mwh': round(match['price'], 2),
        'price_per_kwh': round(match['price'] / 1000, 5),
        'previous': by_instant.get(slot - step),
        'current': match,
        'next': by_instant.get(slot + step),
    }
