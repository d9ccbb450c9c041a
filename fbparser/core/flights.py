"""
Flight segment extraction from flight transaction blocks.
"""
import re
from datetime import date
from typing import List, Optional, Tuple
import logging

from .dates import try_parse_date
from .lexicon import ACTIVITY_DATE_PATTERN, AMOUNTS_PATTERN, SAF_PATTERN, TRIP_TITLES
from .splitter import header_description, is_award_header
from ..models.schema import ClassifiedTransaction, FlightSegment, RawFlight, TransactionCategory

logger = logging.getLogger(__name__)

DEFAULT_LOOKAHEAD_LINES = 3

# Carriers whose segments earn UXP.
UXP_AIRLINES = frozenset({'KL', 'AF'})

NO_NUMBER_CARRIER = 'HV'
NO_NUMBER_CARRIER_CABIN = 'Economy'
NUMBERED_SEGMENT_CABIN = 'Unknown'

# "AMS - BER KL1775"
FLIGHT_SEGMENT_PATTERN = re.compile(r'\b([A-Z]{3})\s*[-–—]\s*([A-Z]{3})\s+([A-Z]{2})(\d{2,4})\b')
# "KEF - AMS TRANSAVIA HOLLAND"
NO_NUMBER_SEGMENT_PATTERN = re.compile(
    r'\b([A-Z]{3})\s*[-–—]\s*([A-Z]{3})\s+(?i:TRANSAVIA)(?:\s+(?i:HOLLAND|FRANCE))?'
)

Amounts = Tuple[int, int, int]


def _is_segment_line(line: str) -> bool:
    return bool(FLIGHT_SEGMENT_PATTERN.search(line) or NO_NUMBER_SEGMENT_PATTERN.search(line))


def _is_saf_line(line: str) -> bool:
    return bool(SAF_PATTERN.search(line)) and not _is_segment_line(line)


def _amounts(line: str) -> Optional[Amounts]:
    match = AMOUNTS_PATTERN.search(line)
    if not match:
        return None
    return int(match.group(1)), int(match.group(2)), int(match.group(3) or 0)


def _marker_date(line: str) -> Optional[date]:
    for match in ACTIVITY_DATE_PATTERN.finditer(line):
        parsed = try_parse_date(match.group(1))
        if parsed:
            return parsed
    return None


def _resolve_amounts(lines: List[str], index: int, lookahead: int) -> Amounts:
    """Amounts on the segment line, else on a following line before the next segment."""
    found = _amounts(lines[index])
    if found:
        return found
    for line in lines[index + 1:index + 1 + lookahead]:
        if _is_segment_line(line):
            break
        if _is_saf_line(line):
            continue
        found = _amounts(line)
        if found:
            return found
    return 0, 0, 0


def _resolve_date(lines: List[str], index: int, lookahead: int, fallback: date) -> date:
    found = _marker_date(lines[index])
    if found:
        return found
    for line in lines[index + 1:index + 1 + lookahead]:
        if _is_segment_line(line):
            break
        found = _marker_date(line)
        if found:
            return found
    return fallback


def _resolve_saf_amounts(lines: List[str], index: int, lookahead: int) -> Amounts:
    found = _amounts(lines[index])
    if found:
        return found
    for line in lines[index + 1:index + 1 + lookahead]:
        if _is_segment_line(line) or _is_saf_line(line):
            break
        found = _amounts(line)
        if found:
            return found
    return 0, 0, 0


def is_award_block(block: ClassifiedTransaction) -> bool:
    """Award bookings: classified as such, or opened by a description-less debit."""
    if block.category == TransactionCategory.FLIGHT_AWARD:
        return True
    return is_award_header(block.text.split('\n', 1)[0])


def extract_trip_title(text: str) -> str:
    """
    Trip title of a flight block, such as "Mijn reis naar Berlijn".

    Falls back to the header description, then to "Flight".
    """
    for prefix, pattern in TRIP_TITLES:
        match = pattern.search(text)
        if match:
            return f"{prefix} {match.group(1).strip()}"

    description = header_description(text.split('\n', 1)[0])
    if description:
        return description
    return "Flight"


def parse_flight_segments(block: ClassifiedTransaction,
                          lookahead_lines: int = DEFAULT_LOOKAHEAD_LINES) -> List[FlightSegment]:
    """
    Extract the segments of one flight block.

    Args:
        block: Classified flight block
        lookahead_lines: Lines after a segment searched for its amounts and date

    Returns:
        Segments in block order, with sustainable-fuel bonuses folded in
    """
    lines = block.text.split('\n')
    fallback_date = block.activity_date or block.posting_date
    is_revenue = not is_award_block(block)
    trip_title = extract_trip_title(block.text)
    segments: List[FlightSegment] = []

    for index, line in enumerate(lines):
        match = FLIGHT_SEGMENT_PATTERN.search(line)
        if match:
            airline = match.group(3).upper()
            miles, xp, uxp = _resolve_amounts(lines, index, lookahead_lines)
            segments.append(FlightSegment(
                origin=match.group(1),
                destination=match.group(2),
                flight_number=f"{airline}{match.group(4)}",
                airline=airline,
                date=_resolve_date(lines, index, lookahead_lines, fallback_date),
                miles=miles,
                xp=xp,
                uxp=uxp if airline in UXP_AIRLINES else 0,
                cabin=NUMBERED_SEGMENT_CABIN,
                is_revenue=is_revenue,
                posting_date=block.posting_date,
                trip_title=trip_title,
            ))
            continue

        match = NO_NUMBER_SEGMENT_PATTERN.search(line)
        if match:
            miles, xp, _ = _resolve_amounts(lines, index, lookahead_lines)
            segments.append(FlightSegment(
                origin=match.group(1),
                destination=match.group(2),
                flight_number="",
                airline=NO_NUMBER_CARRIER,
                date=_resolve_date(lines, index, lookahead_lines, fallback_date),
                miles=miles,
                xp=xp,
                uxp=0,
                cabin=NO_NUMBER_CARRIER_CABIN,
                is_revenue=is_revenue,
                posting_date=block.posting_date,
                trip_title=trip_title,
            ))
            continue

        if SAF_PATTERN.search(line):
            if not segments:
                logger.warning(f"Sustainable fuel bonus without a segment at line {block.line_number}")
                continue
            saf_miles, saf_xp, saf_uxp = _resolve_saf_amounts(lines, index, lookahead_lines)
            previous = segments[-1]
            segments[-1] = previous.model_copy(update={
                'saf_miles': previous.saf_miles + saf_miles,
                'saf_xp': previous.saf_xp + saf_xp,
                'saf_uxp': previous.saf_uxp + (saf_uxp if previous.airline in UXP_AIRLINES else 0),
            })

    if not segments and not is_award_block(block):
        logger.warning(f"No flight segments found in block at line {block.line_number}")
    return segments


def segment_to_raw_flight(segment: FlightSegment) -> RawFlight:
    return RawFlight(
        posting_date=segment.posting_date,
        trip_title=segment.trip_title,
        route=f"{segment.origin} - {segment.destination}",
        flight_number=segment.flight_number,
        airline=segment.airline,
        flight_date=segment.date,
        miles=segment.miles,
        xp=segment.xp,
        uxp=segment.uxp,
        saf_miles=segment.saf_miles,
        saf_xp=segment.saf_xp,
        cabin=segment.cabin,
        is_revenue=segment.is_revenue,
    )


def parse_flight_transactions(blocks: List[ClassifiedTransaction],
                              lookahead_lines: int = DEFAULT_LOOKAHEAD_LINES) -> List[FlightSegment]:
    segments: List[FlightSegment] = []
    for block in blocks:
        segments.extend(parse_flight_segments(block, lookahead_lines))
    logger.debug(f"Parsed {len(segments)} flight segments from {len(blocks)} blocks")
    return segments
