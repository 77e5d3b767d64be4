"""Typed shapes for decoded ENTSO-E documents.

Every document variant decodes into the same PublicationDocument shape.
Instances are built once per parse call and never mutated.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple


@dataclass(frozen=True)
class Point:
    """One sampled value at a 1-based position within a Period."""
    position: int
    quantity: float = 0.0
    price: Optional[float] = None


@dataclass(frozen=True)
class Period:
    """Contiguous time span sharing one start instant and resolution."""
    time_start: str
    time_end: str
    start: Optional[datetime]
    resolution: str
    points: Tuple[Point, ...] = ()


@dataclass(frozen=True)
class Series:
    """A TimeSeries with its resolved metadata."""
    business_type: str
    curve_type: str
    object_aggregation: str
    in_domain: str
    out_domain: str
    price_measure_unit: str
    currency_unit: str
    quantity_measure_unit: str
    resource_provider: str
    resource_type: Optional[str] = None
    reason: Optional[str] = None
    periods: Tuple[Period, ...] = ()


@dataclass(frozen=True)
class PublicationDocument:
    """Top-level wrapper of one XML response."""
    root: str
    document_type: str
    document_id: str
    created_date_time: str
    series: Tuple[Series, ...] = ()

    @property
    def point_count(self) -> int:
        return sum(len(period.points) for series in self.series for period in series.periods)
