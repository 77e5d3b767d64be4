#!/usr/bin/env python3
"""
ENTSO-E XML decoding.

Turns the XML returned by the Transparency Platform into a typed
PublicationDocument. Four document schemas are supported, discriminated by
their root element:

- Publication_MarketDocument: day-ahead prices (A44) and other publications
- GL_MarketDocument: load and generation (A65, A69-A75)
- Unavailability_MarketDocument: outages (A76-A80)
- Balancing_MarketDocument: balancing prices and volumes

Each schema has its own decoder function; all of them produce the same
PublicationDocument shape, which iter_points() walks point by point.
"""

import logging
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Tuple
from xml.parsers.expat import ExpatError

import xmltodict

from .constants import (
    REPEATING_ELEMENTS,
    ROOT_ACKNOWLEDGEMENT,
    ROOT_BALANCING,
    ROOT_BALANCING_LEGACY,
    ROOT_GL,
    ROOT_PUBLICATION,
    ROOT_UNAVAILABILITY,
    UNKNOWN,
)
from .models import Period, Point, PublicationDocument, Series
from .timestamps import parse_timestamp

logger = logging.getLogger(__name__)

# A candidate is a path of keys into the decoded tree. Dotted ENTSO-E names
# such as "in_Domain.mRID" are single keys.
KeyPath = Tuple[str, ...]


class DecodeError(ValueError):
    """Raised when a document can't be decoded into a PublicationDocument."""


class NoDataError(DecodeError):
    """Raised when the API answered with an acknowledgement instead of data."""

    def __init__(self, code: str, text: str):
        self.code = code
        self.text = text
        super().__init__(f"No data available - Code {code}: {text}")


# Series metadata, shared by all schemas. Candidates are tried in order.
SERIES_FIELDS: Dict[str, List[KeyPath]] = {
    'business_type': [('businessType',)],
    'curve_type': [('curveType',)],
    'object_aggregation': [('objectAggregation',)],
    'in_domain': [
        ('in_Domain.mRID',),
        ('inBiddingZone_Domain.mRID',),
        ('in_Domain', '@mRID'),
        ('in_Domain', 'mRID'),
    ],
    'out_domain': [
        ('out_Domain.mRID',),
        ('outBiddingZone_Domain.mRID',),
        ('out_Domain', '@mRID'),
        ('out_Domain', 'mRID'),
    ],
    'price_measure_unit': [
        ('price_Measure_Unit.name',),
        ('price_Measure_Unit', 'name'),
    ],
    'currency_unit': [
        ('currency_Unit.name',),
        ('currency_Unit', 'name'),
    ],
    'quantity_measure_unit': [
        ('quantity_Measure_Unit.name',),
        ('quantity_Measure_Unit', 'name'),
    ],
    'resource_provider': [
        ('resourceProvider_MarketParticipant.mRID',),
        ('resourceProvider', 'marketParticipant.mRID'),
        ('resourceProvider', 'marketParticipant', 'mRID'),
        ('resourceProvider', '@marketParticipant'),
    ],
}

PRICE_FIELDS: List[KeyPath] = [('price.amount',), ('price', 'amount')]

BALANCING_PRICE_FIELDS: List[KeyPath] = [
    ('imbalance_Price.amount',),
    ('activation_Price.amount',),
    ('procurement_Price.amount',),
] + PRICE_FIELDS


# ---------------------------------------------------------------------------
# Tree helpers
# ---------------------------------------------------------------------------

def _as_list(value: Any) -> List[Any]:
    """Repeating groups are lists already; this only absorbs empty elements."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def _as_node(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _text(value: Any) -> Optional[str]:
    """
    Extract the text of a decoded element.

    Elements with attributes (e.g. ``<in_Domain.mRID codingScheme="A01">``)
    decode to ``{'@codingScheme': 'A01', '#text': '...'}``.
    """
    if isinstance(value, list):
        value = value[0] if value else None
    if isinstance(value, dict):
        value = value.get('#text')
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _lookup(node: Dict[str, Any], path: KeyPath) -> Any:
    current: Any = node
    for key in path:
        if not isinstance(current, dict) or key not in current:
            return None
        current = current[key]
    return current


def _first_text(node: Dict[str, Any], candidates: Sequence[KeyPath]) -> Optional[str]:
    for path in candidates:
        text = _text(_lookup(node, path))
        if text is not None:
            return text
    return None


def _to_float(text: Optional[str], field: str) -> Optional[float]:
    if text is None:
        return None
    try:
        return float(text)
    except ValueError:
        logger.warning(f"Ignoring non-numeric {field} '{text}'")
        return None


def _to_position(text: Optional[str]) -> int:
    if text is None:
        return 0
    try:
        return int(text)
    except ValueError:
        logger.warning(f"Ignoring non-integer position '{text}'")
        return 0


def _local_name(tag: str) -> str:
    """Strip a namespace prefix (``ns0:GL_MarketDocument``)."""
    return tag.split(':', 1)[-1]


def _strip_prefix(path, key, value):
    """xmltodict postprocessor: element keys lose their namespace prefix."""
    if key.startswith('@'):
        return key, value
    return _local_name(key), value


# ---------------------------------------------------------------------------
# Series extraction
# ---------------------------------------------------------------------------

def _decode_point(node: Dict[str, Any], price_fields: Sequence[KeyPath]) -> Point:
    quantity = _to_float(_text(node.get('quantity')), 'quantity')
    price = _to_float(_first_text(node, price_fields), 'price') if price_fields else None
    return Point(
        position=_to_position(_text(node.get('position'))),
        quantity=quantity if quantity is not None else 0.0,
        price=price,
    )


def _decode_period(node: Dict[str, Any], price_fields: Sequence[KeyPath]) -> Period:
    time_interval = _as_node(node.get('timeInterval'))
    time_start = _text(time_interval.get('start'))
    time_end = _text(time_interval.get('end'))

    points = tuple(
        _decode_point(_as_node(point), price_fields)
        for point in _as_list(node.get('Point'))
    )

    return Period(
        time_start=time_start or UNKNOWN,
        time_end=time_end or UNKNOWN,
        start=parse_timestamp(time_start),
        resolution=_text(node.get('resolution')) or UNKNOWN,
        points=points,
    )


def _resource_type(node: Dict[str, Any], extra: Sequence[KeyPath]) -> Optional[str]:
    """First MktPSRType entry wins; absent list means no resource type at all."""
    psr_types = _as_list(node.get('MktPSRType'))
    if psr_types:
        return _text(_as_node(psr_types[0]).get('psrType')) or UNKNOWN
    return _first_text(node, extra)


def _reason(node: Dict[str, Any]) -> Optional[str]:
    reasons = _as_list(node.get('Reason'))
    if not reasons:
        return None
    reason = _as_node(reasons[0])
    return _text(reason.get('text')) or _text(reason.get('code')) or UNKNOWN


def _decode_series(
    node: Dict[str, Any],
    period_tag: str,
    price_fields: Sequence[KeyPath],
    field_overrides: Optional[Dict[str, List[KeyPath]]] = None,
    resource_type_fields: Sequence[KeyPath] = (),
) -> Series:
    """
    Decode one TimeSeries node.

    Args:
        node: Decoded TimeSeries element
        period_tag: Name of the repeating period element
        price_fields: Candidate price elements inside a Point (empty = no price)
        field_overrides: Extra metadata candidates, tried after the shared ones
        resource_type_fields: Fallback resource-type elements when MktPSRType is absent

    Returns:
        Series with its periods
    """
    field_overrides = field_overrides or {}
    metadata = {
        field: _first_text(node, candidates + field_overrides.get(field, [])) or UNKNOWN
        for field, candidates in SERIES_FIELDS.items()
    }

    periods = tuple(
        _decode_period(_as_node(period), price_fields)
        for period in _as_list(node.get(period_tag))
    )

    return Series(
        resource_type=_resource_type(node, resource_type_fields),
        reason=_reason(node),
        periods=periods,
        **metadata,
    )


def _decode_header(root: str, node: Dict[str, Any], series: List[Series]) -> PublicationDocument:
    return PublicationDocument(
        root=root,
        document_type=_text(node.get('type')) or UNKNOWN,
        document_id=_text(node.get('mRID')) or UNKNOWN,
        created_date_time=_text(node.get('createdDateTime')) or UNKNOWN,
        series=tuple(series),
    )


# ---------------------------------------------------------------------------
# Document decoders, one per root element
# ---------------------------------------------------------------------------

def _decode_publication(node: Dict[str, Any]) -> PublicationDocument:
    series = [
        _decode_series(_as_node(ts), 'Period', PRICE_FIELDS)
        for ts in _as_list(node.get('TimeSeries'))
    ]
    return _decode_header(ROOT_PUBLICATION, node, series)


def _decode_gl(node: Dict[str, Any]) -> PublicationDocument:
    series = [
        _decode_series(_as_node(ts), 'Period', ())
        for ts in _as_list(node.get('TimeSeries'))
    ]
    return _decode_header(ROOT_GL, node, series)


def _decode_unavailability(node: Dict[str, Any]) -> PublicationDocument:
    overrides = {
        'in_domain': [('biddingZone_Domain.mRID',)],
        'out_domain': [('biddingZone_Domain.mRID',)],
    }
    resource_type_fields = [
        ('production_RegisteredResource.pSRType.psrType',),
        ('production_RegisteredResource', 'pSRType.psrType'),
        ('asset_RegisteredResource.pSRType.psrType',),
    ]
    series = [
        _decode_series(_as_node(ts), 'Available_Period', (), overrides, resource_type_fields)
        for ts in _as_list(node.get('TimeSeries'))
    ]
    return _decode_header(ROOT_UNAVAILABILITY, node, series)


def _decode_balancing(node: Dict[str, Any]) -> PublicationDocument:
    overrides = {
        'in_domain': [('area_Domain.mRID',), ('acquiring_Domain.mRID',)],
        'out_domain': [('connecting_Domain.mRID',), ('area_Domain.mRID',)],
    }
    series = [
        _decode_series(_as_node(ts), 'Period', BALANCING_PRICE_FIELDS, overrides)
        for ts in _as_list(node.get('TimeSeries'))
    ]
    return _decode_header(ROOT_BALANCING, node, series)


DOCUMENT_DECODERS: Dict[str, Callable[[Dict[str, Any]], PublicationDocument]] = {
    ROOT_PUBLICATION: _decode_publication,
    ROOT_GL: _decode_gl,
    ROOT_UNAVAILABILITY: _decode_unavailability,
    ROOT_BALANCING: _decode_balancing,
    ROOT_BALANCING_LEGACY: _decode_balancing,
}


def _raise_acknowledgement(node: Dict[str, Any]) -> None:
    reasons = _as_list(node.get('Reason'))
    reason = _as_node(reasons[0]) if reasons else {}
    code = _text(reason.get('code')) or UNKNOWN
    text = _text(reason.get('text')) or 'No data available'
    raise NoDataError(code, text)


def decode_document(xml_content: str) -> PublicationDocument:
    """
    Decode ENTSO-E XML into a PublicationDocument.

    Args:
        xml_content: XML content as string

    Returns:
        PublicationDocument of whichever schema the root element names

    Raises:
        NoDataError: If the response is an acknowledgement (no data available)
        DecodeError: If the XML is malformed or its root is not a known document
    """
    try:
        tree = xmltodict.parse(
            xml_content,
            force_list=REPEATING_ELEMENTS,
            postprocessor=_strip_prefix,
        )
    except ExpatError as e:
        raise DecodeError(f"Malformed XML: {e}")

    for root, node in tree.items():
        node = _as_node(node)

        if root == ROOT_ACKNOWLEDGEMENT:
            _raise_acknowledgement(node)

        decoder = DOCUMENT_DECODERS.get(root)
        if decoder is not None:
            document = decoder(node)
            logger.debug(
                f"Decoded {root} ({document.document_type}): "
                f"{len(document.series)} TimeSeries, {document.point_count} points"
            )
            return document

    raise DecodeError(
        f"Invalid XML structure: Cannot find document root "
        f"(got {', '.join(tree.keys()) or 'nothing'})"
    )


def iter_points(document: PublicationDocument) -> Iterator[Tuple[Series, Period, Point]]:
    """
    Walk a document point by point, in document order.

    Series without periods and periods without points yield nothing.
    """
    for series in document.series:
        for period in series.periods:
            for point in period.points:
                yield series, period, point
