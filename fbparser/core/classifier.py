"""
Transaction classification.

Categories are tried in TransactionCategory declaration order and the first
one with a matching lexicon pattern wins.
"""
from enum import Enum
from types import MappingProxyType
from typing import FrozenSet, List, Mapping, Pattern, Tuple
import logging

from .lexicon import CATEGORY_PATTERNS, ROUTE_PATTERN
from ..models.schema import ClassifiedTransaction, RawTransactionBlock, TransactionCategory

logger = logging.getLogger(__name__)

PATTERN_CONFIDENCE = 0.9
ROUTE_CONFIDENCE = 0.6
FALLBACK_CONFIDENCE = 0.3


class Route(str, Enum):
    """Parser stage that handles a category."""
    FLIGHT = "flight"
    ACTIVITY = "activity"
    STATUS_EVENT = "status_event"


# Award bookings feed both stages: their segments become unpaid flights and
# the debited Miles become a redemption activity.
CATEGORY_ROUTES: Mapping[TransactionCategory, FrozenSet[Route]] = MappingProxyType({
    TransactionCategory.FLIGHT_KLM_AF: frozenset({Route.FLIGHT}),
    TransactionCategory.FLIGHT_PARTNER: frozenset({Route.FLIGHT}),
    TransactionCategory.FLIGHT_TRANSAVIA: frozenset({Route.FLIGHT}),
    TransactionCategory.FLIGHT_AWARD: frozenset({Route.FLIGHT, Route.ACTIVITY}),
    TransactionCategory.UPGRADE: frozenset({Route.ACTIVITY}),
    TransactionCategory.SUBSCRIPTION: frozenset({Route.ACTIVITY}),
    TransactionCategory.CREDIT_CARD_BONUS: frozenset({Route.ACTIVITY}),
    TransactionCategory.CREDIT_CARD: frozenset({Route.ACTIVITY}),
    TransactionCategory.TRANSFER_IN: frozenset({Route.ACTIVITY}),
    TransactionCategory.TRANSFER_OUT: frozenset({Route.ACTIVITY}),
    TransactionCategory.HOTEL: frozenset({Route.ACTIVITY}),
    TransactionCategory.SHOPPING: frozenset({Route.ACTIVITY}),
    TransactionCategory.CAR_RENTAL: frozenset({Route.ACTIVITY}),
    TransactionCategory.TAXI: frozenset({Route.ACTIVITY}),
    TransactionCategory.XP_ROLLOVER: frozenset({Route.STATUS_EVENT}),
    TransactionCategory.XP_DEDUCTION: frozenset({Route.STATUS_EVENT}),
    TransactionCategory.DONATION: frozenset({Route.ACTIVITY}),
    TransactionCategory.ADJUSTMENT: frozenset({Route.ACTIVITY}),
    TransactionCategory.PARTNER: frozenset({Route.ACTIVITY}),
    TransactionCategory.OTHER: frozenset({Route.ACTIVITY}),
})

_missing_routes = set(TransactionCategory) - set(CATEGORY_ROUTES)
if _missing_routes:
    raise ValueError(f"Categories without a route: {sorted(c.value for c in _missing_routes)}")

_unknown_categories = set(CATEGORY_PATTERNS) ^ {c.value for c in TransactionCategory}
if _unknown_categories:
    raise ValueError(f"Lexicon categories out of sync: {sorted(_unknown_categories)}")

# Priority order comes from the enum, not from the lexicon file.
ORDERED_PATTERNS: Tuple[Tuple[TransactionCategory, Tuple[Pattern, ...]], ...] = tuple(
    (category, CATEGORY_PATTERNS[category.value]) for category in TransactionCategory
)


def is_routed_to(category: TransactionCategory, route: Route) -> bool:
    return route in CATEGORY_ROUTES[category]


def classify_transaction(block: RawTransactionBlock) -> ClassifiedTransaction:
    """
    Assign a category and confidence to a raw block.

    Args:
        block: Raw transaction block

    Returns:
        ClassifiedTransaction carrying the block's fields
    """
    category, confidence = TransactionCategory.OTHER, FALLBACK_CONFIDENCE

    for candidate, patterns in ORDERED_PATTERNS:
        if any(pattern.search(block.text) for pattern in patterns):
            category, confidence = candidate, PATTERN_CONFIDENCE
            break
    else:
        if ROUTE_PATTERN.search(block.text):
            category, confidence = TransactionCategory.FLIGHT_PARTNER, ROUTE_CONFIDENCE

    if confidence < PATTERN_CONFIDENCE:
        logger.debug(f"Low-confidence classification at line {block.line_number}: "
                     f"{category.value} ({confidence})")

    return ClassifiedTransaction(**block.model_dump(), category=category, confidence=confidence)


def classify_transactions(blocks: List[RawTransactionBlock]) -> List[ClassifiedTransaction]:
    classified = [classify_transaction(block) for block in blocks]
    logger.debug(f"Classified {len(classified)} transactions")
    return classified
