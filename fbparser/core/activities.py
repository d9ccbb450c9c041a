"""
Activity extraction for non-flight Miles/XP transactions.
"""
import re
from datetime import date
from types import MappingProxyType
from typing import List, Mapping, Optional, Tuple
import logging

from .lexicon import AMOUNTS_PATTERN, DMY_DATE, MDY_DATE, MILES_WORD, ROUTE_PATTERN
from .splitter import header_description, is_award_header
from ..models.schema import ActivityType, ClassifiedTransaction, ParsedActivity, TransactionCategory

logger = logging.getLogger(__name__)

CATEGORY_ACTIVITY_TYPES: Mapping[TransactionCategory, ActivityType] = MappingProxyType({
    TransactionCategory.FLIGHT_AWARD: ActivityType.REDEMPTION,
    TransactionCategory.UPGRADE: ActivityType.REDEMPTION,
    TransactionCategory.SUBSCRIPTION: ActivityType.SUBSCRIPTION,
    TransactionCategory.CREDIT_CARD: ActivityType.AMEX,
    TransactionCategory.CREDIT_CARD_BONUS: ActivityType.AMEX_BONUS,
    TransactionCategory.TRANSFER_IN: ActivityType.TRANSFER_IN,
    TransactionCategory.TRANSFER_OUT: ActivityType.TRANSFER_OUT,
    TransactionCategory.HOTEL: ActivityType.HOTEL,
    TransactionCategory.SHOPPING: ActivityType.SHOPPING,
    TransactionCategory.CAR_RENTAL: ActivityType.CAR_RENTAL,
    TransactionCategory.TAXI: ActivityType.OTHER,
    TransactionCategory.DONATION: ActivityType.DONATION,
    TransactionCategory.ADJUSTMENT: ActivityType.ADJUSTMENT,
    TransactionCategory.PARTNER: ActivityType.PARTNER,
    TransactionCategory.OTHER: ActivityType.OTHER,
})

# Balance is debited at booking time, so these are dated to the posting date.
POSTING_DATED_CATEGORIES = frozenset({TransactionCategory.FLIGHT_AWARD, TransactionCategory.UPGRADE})

CARD_BONUS_PATTERN = re.compile(r'(?:Welcome|Annual)\s*bonus|Welkomstbonus|Bonus\s+de\s+bienvenue|Willkommensbonus',
                                re.IGNORECASE)

_LEADING_DATE = re.compile(rf'^(?:{DMY_DATE}|{MDY_DATE})\s+', re.IGNORECASE)
_TRAILING_AMOUNTS = re.compile(rf'\s*-?\d+\s*{MILES_WORD}.*$', re.IGNORECASE)


def first_line_amounts(text: str) -> Tuple[int, int, int]:
    """Miles, XP and UXP from the header line of a block."""
    match = AMOUNTS_PATTERN.search(text.split('\n', 1)[0])
    if not match:
        return 0, 0, 0
    return int(match.group(1)), int(match.group(2)), int(match.group(3) or 0)


def extract_description(block: ClassifiedTransaction) -> str:
    """
    Description of an activity block.

    Award bookings without a description get one naming the destination
    when a route is present in the block.
    """
    first_line = block.text.split('\n', 1)[0]

    if is_award_header(first_line):
        route = ROUTE_PATTERN.search(block.text)
        if route:
            return f"Award booking to {route.group(2)}"
        return "Award booking"

    description = header_description(first_line)
    if description:
        return description

    return _TRAILING_AMOUNTS.sub('', _LEADING_DATE.sub('', first_line)).strip()


def activity_type_for(block: ClassifiedTransaction, miles: int) -> ActivityType:
    activity_type = CATEGORY_ACTIVITY_TYPES.get(block.category, ActivityType.OTHER)

    if activity_type == ActivityType.AMEX and CARD_BONUS_PATTERN.search(block.text):
        activity_type = ActivityType.AMEX_BONUS

    # The sign of the amount decides the transfer direction.
    if activity_type == ActivityType.TRANSFER_IN and miles < 0:
        activity_type = ActivityType.TRANSFER_OUT
    elif activity_type == ActivityType.TRANSFER_OUT and miles > 0:
        activity_type = ActivityType.TRANSFER_IN

    return activity_type


def activity_date_for(block: ClassifiedTransaction) -> date:
    if block.category in POSTING_DATED_CATEGORIES:
        return block.posting_date
    return block.activity_date or block.posting_date


def parse_activity_block(block: ClassifiedTransaction) -> Optional[ParsedActivity]:
    """
    Parse one activity block.

    Args:
        block: Classified non-flight block

    Returns:
        ParsedActivity, or None for blocks with neither Miles nor XP
    """
    miles, xp, _ = first_line_amounts(block.text)
    if miles == 0 and xp == 0:
        logger.debug(f"Skipping zero-value block at line {block.line_number}")
        return None

    return ParsedActivity(
        date=activity_date_for(block),
        type=activity_type_for(block, miles),
        description=extract_description(block),
        miles=miles,
        xp=xp,
    )


def parse_activity_transactions(blocks: List[ClassifiedTransaction]) -> List[ParsedActivity]:
    activities = []
    for block in blocks:
        activity = parse_activity_block(block)
        if activity is not None:
            activities.append(activity)
    logger.debug(f"Parsed {len(activities)} activities from {len(blocks)} blocks")
    return activities
