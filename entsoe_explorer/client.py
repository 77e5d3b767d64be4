#!/usr/bin/env python3
"""
ENTSO-E API client for fetching electricity market data.

This module fetches one response per request from the ENTSO-E
Transparency Platform API, with retry logic and input validation, and hands
the XML to the normalization pipeline.
"""

import io
import logging
import re
import zipfile
from datetime import date, datetime, time, timedelta, timezone
from typing import List, Optional, Tuple

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from . import config
from .constants import AREA_CODES, DOCUMENT_TYPES
from .normalizer import Row, parse_entsoe_xml

logger = logging.getLogger(__name__)

# Reason text of an acknowledgement document returned with an HTTP error
ERROR_TEXT_PATTERN = re.compile(r'<text>(.*?)</text>', re.DOTALL)


class EntsoeClient:
    """Client for interacting with ENTSO-E Transparency Platform API.

    Features:
    - Automatic retry with exponential backoff
    - Input validation (date ranges, document types)
    - Transparent unzipping of zipped responses
    """

    # Maximum date range allowed by API for a single request
    MAX_DATE_RANGE_DAYS = 7

    def __init__(
        self,
        security_token: Optional[str] = None,
        domain: Optional[str] = None,
        base_url: Optional[str] = None,
        max_retries: int = 3,
        backoff_factor: float = 1.0,
        timeout: Optional[int] = None
    ):
        """
        Initialize ENTSO-E client with retry logic.

        Args:
            security_token: API security token (defaults to env var)
            domain: Bidding zone / control area EIC code (defaults to env var)
            base_url: API base URL (defaults to env var)
            max_retries: Maximum number of retry attempts (default 3)
            backoff_factor: Backoff factor for exponential delay (default 1.0)
            timeout: Request timeout in seconds (defaults to env var)
        """
        self.base_url = base_url or config.ENTSOE_BASE_URL
        self.security_token = security_token or config.ENTSOE_SECURITY_TOKEN
        self.domain = domain or config.ENTSOE_DOMAIN
        self.timeout = timeout or config.ENTSOE_REQUEST_TIMEOUT

        if not self.security_token:
            raise ValueError(
                "ENTSO-E security token not configured. "
                "Set ENTSOE_SECURITY_TOKEN in .env file"
            )

        # Setup session with retry logic
        self.session = requests.Session()
        retry_strategy = Retry(
            total=max_retries,
            backoff_factor=backoff_factor,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["GET"],
            raise_on_status=False
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount("https://", adapter)
        self.session.mount("http://", adapter)
        self.session.headers.update({"Accept": "application/xml"})

    def _format_timestamp(self, dt: datetime) -> str:
        """
        Format datetime to ENTSO-E API format (yyyyMMddHHmm).

        ENTSO-E API requires UTC timestamps. If datetime is timezone-aware,
        it will be converted to UTC. If naive, it's assumed to be UTC.

        Args:
            dt: datetime object (naive or timezone-aware)

        Returns:
            str: Formatted timestamp in UTC
        """
        if dt.tzinfo is not None:
            dt = dt.astimezone(timezone.utc)

        return dt.replace(tzinfo=None).strftime("%Y%m%d%H%M")

    def _validate_date_range(self, period_start: datetime, period_end: datetime) -> None:
        """
        Validate date range parameters.

        Raises:
            ValueError: If validation fails
        """
        if period_end <= period_start:
            raise ValueError(
                f"period_end ({period_end}) must be greater than "
                f"period_start ({period_start})"
            )

        date_range = period_end - period_start
        if date_range.days > self.MAX_DATE_RANGE_DAYS:
            raise ValueError(
                f"Date range ({date_range.days} days) exceeds maximum allowed "
                f"({self.MAX_DATE_RANGE_DAYS} days)"
            )

    def _build_params(
        self,
        document_type: str,
        period_start: datetime,
        period_end: datetime,
        in_domain: Optional[str] = None,
        out_domain: Optional[str] = None
    ) -> dict:
        """
        Build API query parameters.

        Args:
            document_type: Document type code (A44, A65, A75, ...)
            period_start: Start datetime
            period_end: End datetime
            in_domain: in_Domain EIC code (defaults to client domain)
            out_domain: out_Domain EIC code (defaults to client domain)

        Returns:
            dict: Query parameters

        Raises:
            ValueError: If the document type is not supported
        """
        if document_type not in DOCUMENT_TYPES:
            raise ValueError(f"Invalid document type: {document_type}")

        _, process_type = DOCUMENT_TYPES[document_type]

        return {
            "securityToken": self.security_token,
            "documentType": document_type,
            "processType": process_type,
            "in_Domain": in_domain or self.domain,
            "out_Domain": out_domain or self.domain,
            "periodStart": self._format_timestamp(period_start),
            "periodEnd": self._format_timestamp(period_end),
        }

    def fetch_data(
        self,
        document_type: str,
        period_start: datetime,
        period_end: datetime,
        in_domain: Optional[str] = None,
        out_domain: Optional[str] = None
    ) -> List[str]:
        """
        Fetch data from ENTSO-E API with validation and retry.

        Args:
            document_type: Document type code
            period_start: Start datetime
            period_end: End datetime
            in_domain: Optional in_Domain
            out_domain: Optional out_Domain

        Returns:
            list: XML documents, one per member of a zipped response,
            otherwise a single document

        Raises:
            ValueError: If date range or document type validation fails
            requests.RequestException: If API request fails after retries
        """
        self._validate_date_range(period_start, period_end)
        params = self._build_params(document_type, period_start, period_end, in_domain, out_domain)

        area = AREA_CODES.get(params['in_Domain'], params['in_Domain'])
        logger.debug(
            f"Requesting {document_type} for {area} "
            f"{params['periodStart']}-{params['periodEnd']}"
        )

        try:
            response = self.session.get(self.base_url, params=params, timeout=self.timeout)
            response.raise_for_status()
        except requests.HTTPError as e:
            reason = self._extract_error_text(e.response)
            raise requests.RequestException(f"ENTSO-E error: {reason or e}")
        except requests.RequestException as e:
            raise requests.RequestException(
                f"Failed to fetch data from ENTSO-E API after retries: {e}"
            )

        content_type = response.headers.get('Content-Type', '')
        if 'zip' in content_type or self._is_zip_content(response.content):
            return self._unzip_content(response.content)
        return [response.text]

    def fetch_day(
        self,
        day: date,
        document_type: str,
        domain: Optional[str] = None
    ) -> Tuple[List[Row], List[str]]:
        """
        Fetch and normalize one UTC calendar day of a document type.

        Args:
            day: Day to fetch (00:00 to 00:00 next day, UTC)
            document_type: Document type code
            domain: Optional EIC code used as both in and out domain

        Returns:
            Tuple of (rows of every document in response order, raw XML documents)

        Raises:
            DecodeError: If the response can't be decoded
            requests.RequestException: If the request fails
        """
        period_start = datetime.combine(day, time.min, tzinfo=timezone.utc)
        period_end = period_start + timedelta(days=1)

        documents = self.fetch_data(document_type, period_start, period_end, domain, domain)

        rows: List[Row] = []
        for xml_content in documents:
            rows.extend(parse_entsoe_xml(xml_content))

        logger.info(
            f"Fetched {document_type} for {day.isoformat()}: "
            f"{len(rows)} rows from {len(documents)} document(s)"
        )
        return rows, documents

    @staticmethod
    def _extract_error_text(response: Optional[requests.Response]) -> Optional[str]:
        """Pull the reason out of an acknowledgement document body."""
        if response is None:
            return None
        match = ERROR_TEXT_PATTERN.search(response.text or '')
        return match.group(1).strip() if match else None

    def _is_zip_content(self, content: bytes) -> bool:
        """
        Check if content is a zip file by checking magic bytes.

        Args:
            content: Byte content

        Returns:
            bool: True if content is a zip file
        """
        # ZIP files start with PK (0x504B)
        return len(content) >= 2 and content[:2] == b'PK'

    def _unzip_content(self, content: bytes) -> List[str]:
        """
        Unzip content and return every XML member.

        Outage queries (A76-A80) answer with one document per outage.

        Args:
            content: Zipped byte content

        Returns:
            list: XML documents in archive order

        Raises:
            ValueError: If zip contains no XML files
        """
        try:
            with zipfile.ZipFile(io.BytesIO(content)) as zf:
                xml_files = [f for f in zf.namelist() if f.lower().endswith('.xml')]

                if not xml_files:
                    raise ValueError("No XML file found in zip archive")

                logger.debug(f"Unzipped {len(xml_files)} XML document(s)")
                return [zf.read(name).decode('utf-8') for name in xml_files]

        except zipfile.BadZipFile:
            raise ValueError("Invalid zip file received from API")
