"""
Date parsing and formatting for statement dates in all supported languages.
"""
import re
from datetime import date
from enum import Enum
from typing import Optional
import logging

from .lexicon import month_name, month_number
from ..models.schema import Language

logger = logging.getLogger(__name__)

# Returned when a date cannot be parsed. Callers report it as a warning.
UNPARSED_DATE = date.min


class DateShape(str, Enum):
    ISO = "iso"                    # 2025-12-10
    DAY_MONTH_NAME = "dmy_name"    # 10 dec 2025, 10. Dez. 2025
    MONTH_NAME_DAY = "mdy_name"    # Dec 10, 2025
    SLASH = "slash"                # 10/12/2025
    DOT = "dot"                    # 10.12.2025
    DASH = "dash"                  # 10-12-2025


_ISO = re.compile(r'^(\d{4})-(\d{2})-(\d{2})$')
_DAY_MONTH_NAME = re.compile(r'^(\d{1,2})\.?\s+([^\W\d_]+)\.?\s+(\d{4})$')
_MONTH_NAME_DAY = re.compile(r'^([^\W\d_]+)\.?\s+(\d{1,2}),?\s+(\d{4})$')
_NUMERIC = {
    DateShape.SLASH: re.compile(r'^(\d{1,2})/(\d{1,2})/(\d{4})$'),
    DateShape.DOT: re.compile(r'^(\d{1,2})\.(\d{1,2})\.(\d{4})$'),
    DateShape.DASH: re.compile(r'^(\d{1,2})-(\d{1,2})-(\d{4})$'),
}


def _build(year: int, month: Optional[int], day: int) -> Optional[date]:
    if month is None:
        return None
    try:
        return date(year, month, day)
    except ValueError:
        return None


def try_parse_date(value: str) -> Optional[date]:
    """
    Parse a statement date in any supported shape.

    Args:
        value: Raw date string

    Returns:
        Date, or None if no shape matches or the calendar date is invalid
    """
    if not value or not value.strip():
        return None
    cleaned = ' '.join(value.split())

    match = _ISO.match(cleaned)
    if match:
        return _build(int(match.group(1)), int(match.group(2)), int(match.group(3)))

    match = _DAY_MONTH_NAME.match(cleaned)
    if match:
        return _build(int(match.group(3)), month_number(match.group(2)), int(match.group(1)))

    match = _MONTH_NAME_DAY.match(cleaned)
    if match:
        return _build(int(match.group(3)), month_number(match.group(1)), int(match.group(2)))

    # Numeric shapes are day-first.
    for pattern in _NUMERIC.values():
        match = pattern.match(cleaned)
        if match:
            return _build(int(match.group(3)), int(match.group(2)), int(match.group(1)))

    return None


def parse_date(value: str) -> date:
    """Parse a statement date, returning UNPARSED_DATE on failure."""
    parsed = try_parse_date(value)
    if parsed is None:
        logger.warning(f"Could not parse date: {value!r}")
        return UNPARSED_DATE
    return parsed


def is_unparsed(value: Optional[date]) -> bool:
    return value is None or value == UNPARSED_DATE


def format_date(value: date, shape: DateShape, language: Language = Language.EN) -> str:
    """
    Render a date in one of the shapes parse_date accepts.

    Args:
        value: Date to render
        shape: Target shape
        language: Language of the month name for the named shapes

    Returns:
        Formatted date string
    """
    if shape == DateShape.ISO:
        return value.isoformat()
    if shape == DateShape.DAY_MONTH_NAME:
        return f"{value.day} {month_name(value.month, language)} {value.year}"
    if shape == DateShape.MONTH_NAME_DAY:
        return f"{month_name(value.month, language)} {value.day}, {value.year}"
    if shape == DateShape.SLASH:
        return f"{value.day:02d}/{value.month:02d}/{value.year}"
    if shape == DateShape.DOT:
        return f"{value.day:02d}.{value.month:02d}.{value.year}"
    if shape == DateShape.DASH:
        return f"{value.day:02d}-{value.month:02d}-{value.year}"
    raise ValueError(f"Unknown date shape: {shape}")


def month_key(value: date) -> str:
    """YYYY-MM key used for monthly grouping."""
    return f"{value.year:04d}-{value.month:02d}"
