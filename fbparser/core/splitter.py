"""
Splits statement text into one raw block per transaction.
"""
import re
from enum import Enum
from typing import Dict, List, Optional
import logging

from .dates import parse_date, try_parse_date
from .lexicon import ACTIVITY_DATE_PATTERN, DMY_DATE, MDY_DATE, MILES_WORD, month_number
from .normalize import is_boilerplate
from ..models.schema import ClassifiedTransaction, RawTransactionBlock

logger = logging.getLogger(__name__)

_AMOUNTS_TAIL = rf'(-?\d+)\s*{MILES_WORD}\s+(-?\d+)\s*XP(?:\s+(-?\d+)\s*UXP)?$'

# "10 dec 2025 Mijn reis naar Berlijn 1312 Miles 16 XP 16 UXP"
DMY_HEADER_WITH_DESCRIPTION = re.compile(rf'^({DMY_DATE})\s+(.+?)\s+{_AMOUNTS_TAIL}', re.IGNORECASE)
# "18 nov 2025 -180000 Miles 0 XP"
DMY_HEADER_AMOUNTS_ONLY = re.compile(rf'^({DMY_DATE})\s+{_AMOUNTS_TAIL}', re.IGNORECASE)
# "Dec 10, 2025 My trip to Berlin 1312 Miles 16 XP 16 UXP"
MDY_HEADER_WITH_DESCRIPTION = re.compile(rf'^({MDY_DATE})\s+(.+?)\s+{_AMOUNTS_TAIL}', re.IGNORECASE)
MDY_HEADER_AMOUNTS_ONLY = re.compile(rf'^({MDY_DATE})\s+{_AMOUNTS_TAIL}', re.IGNORECASE)


class _State(Enum):
    OUTSIDE = "outside"
    IN_BLOCK = "in_block"


def match_header_line(line: str) -> Optional[re.Match]:
    """
    Match a transaction header line in either date order.

    Month-first headers only count when the leading word is a known month,
    so description text that happens to end in amounts is not taken as a
    header.
    """
    for pattern in (DMY_HEADER_WITH_DESCRIPTION, DMY_HEADER_AMOUNTS_ONLY):
        match = pattern.match(line)
        if match:
            return match
    for pattern in (MDY_HEADER_WITH_DESCRIPTION, MDY_HEADER_AMOUNTS_ONLY):
        match = pattern.match(line)
        if match and month_number(match.group(1).split()[0]) is not None:
            return match
    return None


def header_description(line: str) -> Optional[str]:
    """Description between the date and the amounts of a header line."""
    match = match_header_line(line)
    if match and match.re in (DMY_HEADER_WITH_DESCRIPTION, MDY_HEADER_WITH_DESCRIPTION):
        return match.group(2).strip()
    return None


def is_award_header(line: str) -> bool:
    """Header line with a Miles debit and no description ("18 nov 2025 -180000 Miles 0 XP")."""
    match = match_header_line(line)
    if not match or match.re not in (DMY_HEADER_AMOUNTS_ONLY, MDY_HEADER_AMOUNTS_ONLY):
        return False
    return int(match.group(2)) < 0


def find_activity_date(block_text: str):
    """First marker-introduced activity date in a block, or None."""
    for match in ACTIVITY_DATE_PATTERN.finditer(block_text):
        parsed = try_parse_date(match.group(1))
        if parsed:
            return parsed
    return None


def _make_block(lines: List[str], line_number: int) -> RawTransactionBlock:
    text = '\n'.join(lines)
    header = match_header_line(lines[0])
    return RawTransactionBlock(
        text=text,
        posting_date=parse_date(header.group(1)),
        activity_date=find_activity_date(text),
        line_number=line_number,
    )


def split_transactions(text: str, member_name: Optional[str] = None) -> List[RawTransactionBlock]:
    """
    Split statement text into transaction blocks.

    Args:
        text: Normalized statement text
        member_name: Member name from the header, dropped where it repeats

    Returns:
        Blocks in document order
    """
    blocks: List[RawTransactionBlock] = []
    state = _State.OUTSIDE
    current: List[str] = []
    start_line = 0

    for index, raw_line in enumerate(text.split('\n'), start=1):
        line = ' '.join(raw_line.split())
        if not line or is_boilerplate(line, member_name):
            continue

        if match_header_line(line):
            if state == _State.IN_BLOCK:
                blocks.append(_make_block(current, start_line))
            current = [line]
            start_line = index
            state = _State.IN_BLOCK
        elif state == _State.IN_BLOCK:
            current.append(line)

    if state == _State.IN_BLOCK:
        blocks.append(_make_block(current, start_line))

    logger.debug(f"Split {len(blocks)} transaction blocks")
    return blocks


def group_transactions_by_type(transactions: List[ClassifiedTransaction]) -> Dict[str, List[ClassifiedTransaction]]:
    """Group classified transactions by category name for debugging."""
    groups: Dict[str, List[ClassifiedTransaction]] = {}
    for transaction in transactions:
        groups.setdefault(transaction.category.value, []).append(transaction)
    return groups
