#!/usr/bin/env python3
"""
Timestamp reconstruction for ENTSO-E points.

A point's instant is never read from the document. It is derived from the
Period start, the point position and the Period resolution:

    instant = start + (position - 1) * resolution

All instants are UTC. Conversion to the display timezone happens in the
normalizer.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from . import config
from .constants import RESOLUTION_MINUTES

logger = logging.getLogger(__name__)


def parse_timestamp(timestamp_str: Optional[str]) -> Optional[datetime]:
    """
    Parse ISO 8601 timestamp (always in UTC from ENTSO-E).

    Accepts both ``2024-01-01T00:00Z`` and ``2024-01-01T00:00:00+00:00``.
    Naive values are assumed to be UTC.

    Args:
        timestamp_str: ISO 8601 timestamp string

    Returns:
        Timezone-aware datetime in UTC, or None if missing or unparseable
    """
    if not isinstance(timestamp_str, str) or not timestamp_str.strip():
        return None

    text = timestamp_str.strip()
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        logger.debug(f"Unparseable timestamp '{timestamp_str}'")
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def resolution_minutes(resolution: Optional[str]) -> int:
    """
    Map a resolution code to minutes.

    Unknown codes fall back to ``config.DEFAULT_RESOLUTION_MINUTES`` with a
    warning, since finer-grained feeds would otherwise be silently stretched.

    Args:
        resolution: ISO 8601 duration (e.g., PT15M, PT60M)

    Returns:
        Resolution in minutes
    """
    minutes = RESOLUTION_MINUTES.get((resolution or '').strip().upper())
    if minutes is None:
        logger.warning(
            f"Unrecognized resolution '{resolution}', "
            f"assuming {config.DEFAULT_RESOLUTION_MINUTES} minutes"
        )
        return config.DEFAULT_RESOLUTION_MINUTES
    return minutes


def reconstruct_timestamp(
    period_start: Optional[datetime],
    position: int,
    resolution: Optional[str] = None,
    step_minutes: Optional[int] = None
) -> Optional[datetime]:
    """
    Compute the absolute instant of a point.

    Args:
        period_start: Period start (UTC), or None if unavailable
        position: 1-based point position
        resolution: Resolution code of the Period
        step_minutes: Already resolved step, skips the resolution lookup

    Returns:
        UTC datetime, or None when the start is missing or the position invalid
    """
    if period_start is None or position < 1:
        return None

    if step_minutes is None:
        step_minutes = resolution_minutes(resolution)

    return period_start + timedelta(minutes=(position - 1) * step_minutes)
