#!/usr/bin/env python3
"""
Common utilities shared by the command line and the client.
"""

import logging
from datetime import date, datetime


def setup_logging(debug=False):
    """
    Setup logging configuration.

    Args:
        debug: If True, set log level to DEBUG, otherwise INFO

    Returns:
        Logger instance
    """
    log_level = logging.DEBUG if debug else logging.INFO

    # Package logger, module loggers propagate to it
    logger = logging.getLogger('entsoe_explorer')
    logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    logger.handlers = []

    handler = logging.StreamHandler()
    handler.setLevel(log_level)

    if debug:
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%H:%M:%S'
        )
    else:
        formatter = logging.Formatter(
            '%(asctime)s - %(levelname)s - %(message)s',
            datefmt='%H:%M:%S'
        )

    handler.setFormatter(formatter)
    logger.addHandler(handler)

    # SECURITY: urllib3/requests log full URLs, which carry the security token
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)

    return logger


def parse_date(date_str: str) -> date:
    """
    Parse date string in YYYY-MM-DD format.

    Args:
        date_str: Date string in YYYY-MM-DD format

    Returns:
        date object

    Raises:
        ValueError: If date format is invalid
    """
    try:
        return datetime.strptime(date_str, '%Y-%m-%d').date()
    except ValueError:
        raise ValueError(f"Invalid date format '{date_str}'. Expected YYYY-MM-DD")


BANNER_WIDTH = 58


def print_banner(title, debug_mode=False):
    """
    Print a boxed banner; titles longer than the box are truncated.

    Args:
        title: Title to display in banner
        debug_mode: If True, add debug mode indicator
    """
    inner = BANNER_WIDTH - 2
    lines = [title[:inner]]
    if debug_mode:
        lines.append("DEBUG MODE - Verbose logging enabled")

    print(f"╔{'═' * BANNER_WIDTH}╗")
    for line in lines:
        print(f"║  {line:<{inner}}║")
    print(f"╚{'═' * BANNER_WIDTH}╝")
