"""
Text normalization for statements whose text layer breaks transactions
across many short lines.
"""
import re
from typing import List, Optional
import logging

from .lexicon import (
    ACTIVITY_DATE_LINE,
    AMOUNT_TOKEN_PATTERN,
    BROKEN_LINE_MARKERS,
    DETAIL_LINE_START,
    DMY_DATE,
    FRAGMENT_JOINS,
    HEADER_BOILERPLATE,
    HEADER_TOTALS_LINE,
    MDY_DATE,
    MEMBER_NUMBER_PATTERNS,
    MILES_WORD,
    PAGE_MARKER_PATTERN,
    ROLLOVER_DETAIL_SPLITS,
    ROLLOVER_DETAIL_START,
    SAF_PATTERN,
    is_status_banner,
    looks_like_member_name,
    month_number,
)

logger = logging.getLogger(__name__)

MIN_LINES_FOR_NORMALIZATION = 20
SAMPLE_LINES = 200
STANDALONE_RATIO_THRESHOLD = 0.3
BROKEN_FRAGMENT_LIMIT = 3

_DMY_LINE = re.compile(rf'^{DMY_DATE}$')
_MDY_LINE = re.compile(rf'^({MDY_DATE})$')
_AMOUNT_LINE = re.compile(rf'^-?\d+\s*(?:{MILES_WORD}|XP|UXP)$', re.IGNORECASE)
_COMPLETE_LINE = re.compile(
    rf'^(?:{DMY_DATE}|{MDY_DATE})\s+.*?-?\d+\s*{MILES_WORD}\s+-?\d+\s*XP\b', re.IGNORECASE,
)


def _clean(line: str) -> str:
    return ' '.join(line.split())


def is_date_line(line: str) -> bool:
    """A line holding nothing but a posting date."""
    if _DMY_LINE.match(line):
        return True
    match = _MDY_LINE.match(line)
    return bool(match) and month_number(line.split()[0]) is not None


def is_amount_line(line: str) -> bool:
    return bool(_AMOUNT_LINE.match(line))


def is_boilerplate(line: str, member_name: Optional[str] = None) -> bool:
    """
    Check whether a line is statement furniture rather than transaction text.

    Args:
        line: Whitespace-collapsed line
        member_name: Member name from the header, when known

    Returns:
        True for page markers, member name/number repeats and tier banners
    """
    if PAGE_MARKER_PATTERN.search(line):
        return True
    if any(p.search(line) for p in MEMBER_NUMBER_PATTERNS):
        return True
    if is_status_banner(line):
        return True
    if line.upper() in HEADER_BOILERPLATE:
        return True
    return looks_like_member_name(line, member_name)


def needs_normalization(text: str) -> bool:
    """
    Decide whether a text needs normalize_text before splitting.

    Args:
        text: Raw statement text

    Returns:
        True when stand-alone date/amount lines dominate the sample or the
        text carries several known broken fragments
    """
    lines = [_clean(line) for line in text.splitlines() if line.strip()]
    if len(lines) < MIN_LINES_FOR_NORMALIZATION:
        return False

    sample = lines[:SAMPLE_LINES]
    standalone = sum(1 for line in sample if is_date_line(line) or is_amount_line(line))
    broken = sum(1 for line in sample if any(p.search(line) for p in BROKEN_LINE_MARKERS))
    ratio = standalone / len(sample)

    logger.debug(f"Normalization check: {standalone}/{len(sample)} stand-alone lines, "
                 f"{broken} broken fragments")
    return ratio > STANDALONE_RATIO_THRESHOLD or broken > BROKEN_FRAGMENT_LIMIT


def join_fragments(text: str) -> str:
    """Rejoin phrases the text layer is known to split across lines."""
    for pattern, replacement in FRAGMENT_JOINS:
        text = pattern.sub(replacement, text)
    return text


def split_rollover_details(text: str) -> str:
    """Keep rollover explanation text on its own line."""
    for pattern in ROLLOVER_DETAIL_SPLITS:
        text = pattern.sub(r'\1\n\2', text)
    return text


def _starts_new_line(line: str) -> bool:
    return bool(
        DETAIL_LINE_START.match(line)
        or ROLLOVER_DETAIL_START.match(line)
        or SAF_PATTERN.match(line)
    )


def normalize_text(text: str, member_name: Optional[str] = None) -> str:
    """
    Rebuild one line per transaction header, segment and detail.

    Args:
        text: Raw statement text
        member_name: Member name from the header, used to drop page-footer repeats

    Returns:
        Normalized text
    """
    text = text.replace('\r\n', '\n').replace('\r', '\n')
    text = join_fragments(text)
    text = split_rollover_details(text)

    output: List[str] = []
    buffer: List[str] = []

    def flush():
        if buffer:
            output.append(' '.join(buffer))
            buffer.clear()

    for raw_line in text.split('\n'):
        line = _clean(raw_line)
        if not line or is_boilerplate(line, member_name):
            continue

        if HEADER_TOTALS_LINE.match(line) or _COMPLETE_LINE.match(line):
            flush()
            output.append(line)
        elif ACTIVITY_DATE_LINE.match(line):
            flush()
            output.append(line)
        elif is_date_line(line):
            flush()
            buffer.append(line)
        elif is_amount_line(line):
            buffer.append(line)
        else:
            if any(AMOUNT_TOKEN_PATTERN.search(part) for part in buffer) and _starts_new_line(line):
                flush()
            buffer.append(line)

    flush()

    normalized = split_rollover_details('\n'.join(output))
    logger.debug(f"Normalized {len(text.splitlines())} lines into {len(normalized.splitlines())}")
    return normalized
