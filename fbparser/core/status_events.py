"""
Qualification-cycle status events and the settings derived from them.
"""
import re
from datetime import date
from typing import List, Optional
import logging

from .activities import extract_description, first_line_amounts
from .dates import month_key
from .lexicon import STATUS_REACHED_PATTERN
from ..models.schema import (
    ClassifiedTransaction,
    QualificationSettings,
    StatusEvent,
    StatusEventType,
    StatusLevel,
    TransactionCategory,
)

logger = logging.getLogger(__name__)

# Minimum XP deducted at the end of a cycle for each tier, highest first.
STATUS_XP_THRESHOLDS = (
    (300, StatusLevel.PLATINUM),
    (180, StatusLevel.GOLD),
    (100, StatusLevel.SILVER),
)

ROLLOVER_PHRASE = re.compile(r'surplus|rollover|meegenomen|exc[ée]dentaire|[üu]bersch[üu]ssig|excedente|eccesso',
                             re.IGNORECASE)


def status_from_xp_deduction(xp_deducted: int) -> StatusLevel:
    """Tier implied by the size of an end-of-cycle XP deduction."""
    deducted = abs(xp_deducted)
    for threshold, status in STATUS_XP_THRESHOLDS:
        if deducted >= threshold:
            return status
    return StatusLevel.EXPLORER


def extract_status_reached(text: str) -> Optional[StatusLevel]:
    match = STATUS_REACHED_PATTERN.search(text)
    if match:
        return StatusLevel(match.group(1).capitalize())
    return None


def _event_type(block: ClassifiedTransaction, xp: int, uxp: int, reached: Optional[StatusLevel]) -> StatusEventType:
    if block.category == TransactionCategory.XP_ROLLOVER:
        surplus = True
    elif block.category == TransactionCategory.XP_DEDUCTION:
        surplus = False
    else:
        surplus = xp > 0 and bool(ROLLOVER_PHRASE.search(block.text))

    if xp == 0 and uxp == 0 and reached is not None:
        return StatusEventType.STATUS_REACHED
    if xp == 0 and uxp != 0:
        return StatusEventType.UXP_SURPLUS if surplus else StatusEventType.UXP_RESET
    return StatusEventType.XP_SURPLUS if surplus else StatusEventType.XP_RESET


def parse_status_event(block: ClassifiedTransaction) -> StatusEvent:
    """
    Build the status event for one qualification-cycle block.

    Args:
        block: Block classified as a rollover or a deduction

    Returns:
        StatusEvent; resets without an explicit "reached" phrase get the
        tier implied by the deducted XP
    """
    _, xp, uxp = first_line_amounts(block.text)
    reached = extract_status_reached(block.text)
    event_type = _event_type(block, xp, uxp, reached)

    if reached is None and event_type == StatusEventType.XP_RESET:
        reached = status_from_xp_deduction(xp)

    return StatusEvent(
        date=block.activity_date or block.posting_date,
        type=event_type,
        description=extract_description(block),
        xp_change=xp,
        uxp_change=uxp,
        status_reached=reached,
    )


def parse_status_events(blocks: List[ClassifiedTransaction]) -> List[StatusEvent]:
    events = [parse_status_event(block) for block in blocks]
    logger.debug(f"Parsed {len(events)} status events")
    return events


def _first_of_next_month(value: date) -> date:
    if value.month == 12:
        return date(value.year + 1, 1, 1)
    return date(value.year, value.month + 1, 1)


def detect_qualification_settings(events: List[StatusEvent],
                                  header_status: StatusLevel) -> Optional[QualificationSettings]:
    """
    Derive the current qualification cycle from the latest XP reset.

    Args:
        events: Parsed status events
        header_status: Status printed in the statement header

    Returns:
        QualificationSettings, or None when the statement has no XP reset
    """
    resets = [e for e in events if e.type == StatusEventType.XP_RESET]
    if not resets:
        return None

    latest = max(resets, key=lambda e: e.date)
    surplus = next(
        (e for e in events if e.type == StatusEventType.XP_SURPLUS and e.date == latest.date),
        None,
    )

    starting_status = latest.status_reached or header_status
    # Ultimate qualification is tracked separately; the cycle runs on Platinum.
    if starting_status == StatusLevel.ULTIMATE:
        starting_status = StatusLevel.PLATINUM

    settings = QualificationSettings(
        cycle_start_month=month_key(_first_of_next_month(latest.date)),
        cycle_start_date=latest.date,
        starting_status=starting_status,
        starting_xp=surplus.xp_change if surplus else 0,
        starting_uxp=surplus.uxp_change if surplus else None,
    )
    logger.debug(f"Qualification cycle starts {settings.cycle_start_month} at {starting_status.value}")
    return settings
