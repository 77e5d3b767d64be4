"""
ENTSO-E Explorer.

This package fetches documents from the ENTSO-E Transparency Platform API
and normalizes their XML into flat, timezone-correct rows for display and
export.
"""

from .client import EntsoeClient
from .normalizer import current_price, parse_entsoe_xml, sort_rows
from .parsers import DecodeError, NoDataError, decode_document, iter_points

__all__ = [
    'EntsoeClient',
    'DecodeError',
    'NoDataError',
    'current_price',
    'decode_document',
    'iter_points',
    'parse_entsoe_xml',
    'sort_rows',
]
