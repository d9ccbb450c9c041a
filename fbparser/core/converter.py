"""
Conversion of parsed segments, activities and events into import records,
with deterministic identifiers and balance reconciliation.
"""
import re
from datetime import date
from typing import Dict, List, Optional
import logging

from .dates import is_unparsed, month_key
from .flights import segment_to_raw_flight
from ..models.schema import (
    ActivityEntry,
    ActivityType,
    FlightRecord,
    FlightSegment,
    MilesRecord,
    ParsedActivity,
    ParsedHeader,
    PdfHeader,
    QualificationSettings,
    RawResponse,
    ReconciliationReport,
    StatementHeader,
    StatusEvent,
    StatusLevel,
    SuggestedCorrection,
)

logger = logging.getLogger(__name__)

RECONCILIATION_THRESHOLD = 100

SURPLUS_DESCRIPTION = re.compile(r'surplus[\s-]xp', re.IGNORECASE)

DEBIT_TYPES = frozenset({ActivityType.REDEMPTION, ActivityType.TRANSFER_OUT})


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def description_hash(description: str) -> str:
    """
    Eight hex digit djb2-style hash of a normalized description.

    Computed over UTF-16 code units with 32-bit wrap-around so identifiers
    match those produced by the browser-side importer.
    """
    normalized = ' '.join((description or '').lower().split())
    encoded = normalized.encode('utf-16-le')
    value = 5381
    for i in range(0, len(encoded), 2):
        unit = encoded[i] | (encoded[i + 1] << 8)
        value = _to_int32(_to_int32(value << 5) + value) ^ unit
    return format(abs(value), 'x').rjust(8, '0')[:8]


def _sanitize_type(activity_type: str) -> str:
    cleaned = re.sub(r'[^a-z0-9]', '_', activity_type.lower())
    cleaned = re.sub(r'_+', '_', cleaned).strip('_')[:20]
    return cleaned or 'unknown'


def generate_transaction_id(day: date, activity_type: str, miles: int, xp: int, description: str) -> str:
    """tx-{date}-{type}-{miles}-{xp}-{hash}"""
    return (f"tx-{day.isoformat()}-{_sanitize_type(activity_type)}-{miles}-{xp}-"
            f"{description_hash(description)}")


def normalize_route(route: str) -> str:
    return re.sub(r'\s+', '', re.sub(r'\s*[-–—]\s*', '-', route)).upper()


def convert_flights(segments: List[FlightSegment]) -> List[FlightRecord]:
    records = []
    for index, segment in enumerate(segments):
        route = normalize_route(f"{segment.origin}-{segment.destination}")
        records.append(FlightRecord(
            id=f"local-flight-{segment.date.isoformat()}-{route}-{index}",
            date=segment.date,
            route=route,
            airline=segment.airline.upper(),
            flight_number=segment.flight_number,
            cabin="Economy" if segment.cabin == "Unknown" else segment.cabin,
            earned_miles=segment.miles + segment.saf_miles,
            earned_xp=segment.xp,
            saf_xp=segment.saf_xp,
            uxp=segment.uxp + segment.saf_uxp,
            trip_title=segment.trip_title,
        ))
    return records


def is_surplus_description(description: str) -> bool:
    return bool(SURPLUS_DESCRIPTION.search(description))


def convert_activities(activities: List[ParsedActivity], export_date: date) -> List[ActivityEntry]:
    """
    Assign identifiers to activities and order them newest first.

    Args:
        activities: Parsed activities
        export_date: Statement export date, recorded as the source date

    Returns:
        ActivityEntry list; repeats of an identical activity get a -N suffix
    """
    entries = []
    seen: Dict[str, int] = {}

    for activity in activities:
        if activity.miles == 0 and activity.xp == 0:
            continue
        if is_surplus_description(activity.description):
            logger.debug(f"Skipping surplus XP activity: {activity.description[:50]}")
            continue

        base_id = generate_transaction_id(activity.date, activity.type.value, activity.miles,
                                          activity.xp, activity.description)
        occurrence = seen.get(base_id, 0)
        seen[base_id] = occurrence + 1

        entries.append(ActivityEntry(
            id=f"{base_id}-{occurrence}" if occurrence else base_id,
            date=activity.date,
            type=activity.type,
            description=activity.description,
            miles=activity.miles,
            xp=activity.xp,
            source_date=export_date,
        ))

    return sorted(entries, key=lambda entry: entry.date, reverse=True)


def convert_miles_records(activities: List[ParsedActivity], segments: List[FlightSegment]) -> List[MilesRecord]:
    """Monthly Miles totals split by source, newest month first."""
    months: Dict[str, Dict[str, int]] = {}

    def bucket(day: date) -> Dict[str, int]:
        return months.setdefault(month_key(day), {
            'miles_subscription': 0, 'miles_amex': 0, 'miles_flight': 0,
            'miles_other': 0, 'miles_debit': 0,
        })

    for activity in activities:
        totals = bucket(activity.date)
        if activity.miles < 0 or activity.type in DEBIT_TYPES:
            totals['miles_debit'] += abs(activity.miles)
        elif activity.type == ActivityType.SUBSCRIPTION:
            totals['miles_subscription'] += activity.miles
        elif activity.type in (ActivityType.AMEX, ActivityType.AMEX_BONUS):
            totals['miles_amex'] += activity.miles
        else:
            totals['miles_other'] += activity.miles

    # Award segments are debited through their redemption activity.
    for segment in segments:
        if not segment.is_revenue:
            continue
        totals = bucket(segment.date)
        miles = segment.miles + segment.saf_miles
        if miles > 0:
            totals['miles_flight'] += miles
        elif miles < 0:
            totals['miles_debit'] += abs(miles)

    return [
        MilesRecord(id=f"local-miles-{month}", month=month, **totals)
        for month, totals in sorted(months.items(), reverse=True)
    ]


def extract_bonus_xp_by_month(activities: List[ParsedActivity],
                              settings: Optional[QualificationSettings]) -> Dict[str, int]:
    """XP from non-flight activities per month, from the cycle start onwards."""
    bonus: Dict[str, int] = {}
    for activity in activities:
        if activity.xp <= 0 or is_surplus_description(activity.description):
            continue
        month = month_key(activity.date)
        if settings is not None and month < settings.cycle_start_month:
            continue
        bonus[month] = bonus.get(month, 0) + activity.xp
    return dict(sorted(bonus.items()))


def create_pdf_header(header: ParsedHeader) -> PdfHeader:
    status = header.current_status
    if status == StatusLevel.ULTIMATE:
        status = StatusLevel.PLATINUM
    return PdfHeader(
        xp=header.total_xp,
        uxp=header.total_uxp,
        miles=header.total_miles,
        status=status,
        export_date=header.export_date,
        member_name=header.member_name,
        member_number=header.member_number,
    )


def calculate_miles_reconciliation(header_balance: int,
                                   segments: List[FlightSegment],
                                   activities: List[ParsedActivity],
                                   fallback_date: date,
                                   threshold: int = RECONCILIATION_THRESHOLD) -> ReconciliationReport:
    """
    Compare the header Miles balance with the sum of parsed transactions.

    Args:
        header_balance: Miles balance printed in the header
        segments: Parsed flight segments
        activities: Parsed activities, including redemptions
        fallback_date: Oldest date to report when no transaction has a usable date
        threshold: Differences above this get a suggested correction

    Returns:
        ReconciliationReport
    """
    flight_miles = sum(s.miles + s.saf_miles for s in segments if s.is_revenue)
    activity_miles = sum(a.miles for a in activities)
    parsed_total = flight_miles + activity_miles
    difference = header_balance - parsed_total

    dates = [s.date for s in segments] + [a.date for a in activities]
    usable = [d for d in dates if not is_unparsed(d)]
    oldest = min(usable) if usable else fallback_date
    oldest_month = month_key(oldest)

    needs_correction = difference > threshold
    correction = None
    if needs_correction:
        correction = SuggestedCorrection(
            date=oldest.replace(day=1),
            description=f"Historical balance (pre-{oldest_month})",
            miles=difference,
        )
        logger.info(f"Header balance exceeds parsed total by {difference} Miles")

    return ReconciliationReport(
        header_balance=header_balance,
        parsed_total=parsed_total,
        difference=difference,
        oldest_transaction_date=oldest,
        oldest_month=oldest_month,
        needs_correction=needs_correction,
        suggested_correction=correction,
    )


def create_raw_response(header: ParsedHeader,
                        segments: List[FlightSegment],
                        activities: List[ParsedActivity],
                        events: List[StatusEvent]) -> RawResponse:
    return RawResponse(
        header=StatementHeader(**header.model_dump(exclude={'language'})),
        flights=[segment_to_raw_flight(s) for s in segments],
        miles_activities=list(activities),
        status_events=list(events),
    )
