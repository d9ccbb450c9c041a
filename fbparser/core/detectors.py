"""
Language detection and statement header parsing.
"""
import re
from datetime import date
from typing import Dict, Optional, Tuple
import logging

from .dates import try_parse_date
from .lexicon import (
    DMY_DATE,
    EXPORT_DATE_PATTERN,
    HEADER_BOILERPLATE,
    HISTORY_TITLES,
    LANGUAGE_INDICATORS,
    LANGUAGE_ORDER,
    MEMBER_NUMBER_PATTERNS,
    MILES_WORD,
    is_status_banner,
    looks_like_member_name,
)
from ..models.schema import Language, ParsedHeader, StatusLevel

logger = logging.getLogger(__name__)

MEMBER_NAME_SCAN_CHARS = 500
EXPORT_DATE_SCAN_CHARS = 1000

_STATUS_LINE = re.compile(r'^\s*(EXPLORER|SILVER|GOLD|PLATINUM|ULTIMATE)\s*$', re.IGNORECASE | re.MULTILINE)
_FIRST_DATE = re.compile(DMY_DATE)

_TOTALS_PATTERNS: Dict[Language, re.Pattern] = {
    language: re.compile(
        rf'{title}\s+(-?\d+)\s*{MILES_WORD}\s+(-?\d+)\s*XP(?:\s+(-?\d+)\s*UXP)?',
        re.IGNORECASE,
    )
    for language, title in HISTORY_TITLES.items()
}


def language_scores(text: str) -> Dict[Language, int]:
    """Number of indicator patterns found per language."""
    return {
        language: sum(1 for pattern in LANGUAGE_INDICATORS[language] if pattern.search(text))
        for language in LANGUAGE_ORDER
    }


def detect_language(text: str) -> Language:
    """
    Detect the statement language.

    Args:
        text: Statement text

    Returns:
        Highest scoring language; ties go to the earlier language in
        LANGUAGE_ORDER
    """
    scores = language_scores(text)
    best = LANGUAGE_ORDER[0]
    for language in LANGUAGE_ORDER:
        if scores[language] > scores[best]:
            best = language
    logger.debug(f"Language scores: {scores} -> {best.value}")
    return best


def extract_totals(text: str, language: Optional[Language] = None) -> Optional[Tuple[int, int, int]]:
    """
    Extract the running totals printed after the activity-history title.

    Args:
        text: Statement text
        language: Language whose title is tried first

    Returns:
        (miles, xp, uxp) or None if no title with totals is found
    """
    order = list(LANGUAGE_ORDER)
    if language is not None:
        order.remove(language)
        order.insert(0, language)

    for candidate in order:
        match = _TOTALS_PATTERNS[candidate].search(text)
        if match:
            return int(match.group(1)), int(match.group(2)), int(match.group(3) or 0)
    return None


def extract_member_number(text: str) -> Optional[str]:
    for pattern in MEMBER_NUMBER_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(1)
    return None


def extract_member_name(text: str) -> Optional[str]:
    """Find an all-caps name line in the header area."""
    for line in text[:MEMBER_NAME_SCAN_CHARS].split('\n'):
        stripped = line.strip()
        if len(stripped) < 3 or is_status_banner(stripped) or stripped.upper() in HEADER_BOILERPLATE:
            continue
        if looks_like_member_name(stripped):
            return stripped
    return None


def extract_status(text: str) -> StatusLevel:
    match = _STATUS_LINE.search(text)
    if match:
        return StatusLevel(match.group(1).capitalize())
    return StatusLevel.EXPLORER


def extract_export_date(text: str) -> date:
    """
    Find the export date printed next to the page counter.

    Falls back to the first day-first date in the header area, then to today.
    """
    match = EXPORT_DATE_PATTERN.search(text)
    if match:
        parsed = try_parse_date(match.group(1))
        if parsed:
            return parsed

    for candidate in _FIRST_DATE.finditer(text[:EXPORT_DATE_SCAN_CHARS]):
        parsed = try_parse_date(candidate.group(0))
        if parsed:
            return parsed

    logger.warning("No export date found, using today's date")
    return date.today()


def parse_header(text: str, language: Optional[Language] = None) -> ParsedHeader:
    """
    Parse the statement header. Missing fields fall back to defaults.

    Args:
        text: Statement text
        language: Language to use instead of detecting it

    Returns:
        ParsedHeader
    """
    language = language or detect_language(text)
    totals = extract_totals(text, language)
    if totals is None:
        logger.warning("No header totals found, defaulting to 0")
        totals = (0, 0, 0)

    header = ParsedHeader(
        member_name=extract_member_name(text),
        member_number=extract_member_number(text),
        current_status=extract_status(text),
        total_miles=totals[0],
        total_xp=totals[1],
        total_uxp=totals[2],
        export_date=extract_export_date(text),
        language=language,
    )
    logger.debug(f"Parsed header: {header.current_status.value}, {header.total_miles} Miles, "
                 f"{header.total_xp} XP, {header.total_uxp} UXP, exported {header.export_date}")
    return header
