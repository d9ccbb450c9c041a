"""
Pydantic models for parsed Flying Blue statement data.

Every stage of the pipeline returns one of these frozen models. JSON output
uses camelCase field names so it matches the records produced by the
AI-assisted import path.
"""
from datetime import date
from enum import Enum
from typing import Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Language(str, Enum):
    NL = "nl"
    EN = "en"
    FR = "fr"
    DE = "de"
    ES = "es"
    IT = "it"
    PT = "pt"


class StatusLevel(str, Enum):
    EXPLORER = "Explorer"
    SILVER = "Silver"
    GOLD = "Gold"
    PLATINUM = "Platinum"
    ULTIMATE = "Ultimate"


class ActivityType(str, Enum):
    SUBSCRIPTION = "subscription"
    AMEX = "amex"
    AMEX_BONUS = "amex_bonus"
    HOTEL = "hotel"
    SHOPPING = "shopping"
    PARTNER = "partner"
    CAR_RENTAL = "car_rental"
    TRANSFER_IN = "transfer_in"
    TRANSFER_OUT = "transfer_out"
    DONATION = "donation"
    ADJUSTMENT = "adjustment"
    REDEMPTION = "redemption"
    OTHER = "other"


class StatusEventType(str, Enum):
    XP_RESET = "xp_reset"
    XP_SURPLUS = "xp_surplus"
    STATUS_REACHED = "status_reached"
    UXP_RESET = "uxp_reset"
    UXP_SURPLUS = "uxp_surplus"


class TransactionCategory(str, Enum):
    """Transaction categories. Declaration order is matching priority."""
    FLIGHT_KLM_AF = "FLIGHT_KLM_AF"
    FLIGHT_PARTNER = "FLIGHT_PARTNER"
    FLIGHT_TRANSAVIA = "FLIGHT_TRANSAVIA"
    FLIGHT_AWARD = "FLIGHT_AWARD"
    UPGRADE = "UPGRADE"
    SUBSCRIPTION = "SUBSCRIPTION"
    CREDIT_CARD_BONUS = "CREDIT_CARD_BONUS"
    CREDIT_CARD = "CREDIT_CARD"
    TRANSFER_IN = "TRANSFER_IN"
    TRANSFER_OUT = "TRANSFER_OUT"
    HOTEL = "HOTEL"
    SHOPPING = "SHOPPING"
    CAR_RENTAL = "CAR_RENTAL"
    TAXI = "TAXI"
    XP_ROLLOVER = "XP_ROLLOVER"
    XP_DEDUCTION = "XP_DEDUCTION"
    DONATION = "DONATION"
    ADJUSTMENT = "ADJUSTMENT"
    PARTNER = "PARTNER"
    OTHER = "OTHER"


class ErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    PARSE_ERROR = "PARSE_ERROR"


class Record(BaseModel):
    """Base for all pipeline values: immutable, camelCase on the wire."""
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class ParserOptions(Record):
    """Runtime options for a single parse."""
    debug: bool = False
    language: Optional[Language] = None
    strict: bool = False
    lookahead_lines: int = Field(3, ge=1)
    reconciliation_threshold: int = Field(100, ge=0)


class StatementHeader(Record):
    """Header fields in the shape used by the AI-assisted import path."""
    member_name: Optional[str] = None
    member_number: Optional[str] = None
    current_status: StatusLevel = StatusLevel.EXPLORER
    total_miles: int = 0
    total_xp: int = Field(0, alias="totalXP")
    total_uxp: int = Field(0, alias="totalUXP")
    export_date: date


class ParsedHeader(StatementHeader):
    """Statement header with the detected language."""
    language: Language = Language.EN


class RawTransactionBlock(Record):
    """One transaction as cut out of the statement text."""
    text: str
    posting_date: date
    activity_date: Optional[date] = None
    line_number: int


class ClassifiedTransaction(RawTransactionBlock):
    category: TransactionCategory
    confidence: float = Field(ge=0.0, le=1.0)


class FlightSegment(Record):
    """A single flown segment."""
    origin: str
    destination: str
    flight_number: str
    airline: str
    date: date
    miles: int = 0
    xp: int = 0
    uxp: int = 0
    saf_miles: int = 0
    saf_xp: int = 0
    saf_uxp: int = 0
    cabin: str = "Economy"
    is_revenue: bool = True
    posting_date: date
    trip_title: str = ""


class RawFlight(Record):
    """Flight in the shape returned by the AI-assisted import path."""
    posting_date: date
    trip_title: str
    route: str
    flight_number: str
    airline: str
    flight_date: date
    miles: int
    xp: int
    uxp: int
    saf_miles: int
    saf_xp: int
    cabin: str
    is_revenue: bool


class ParsedActivity(Record):
    """A non-flight activity before it receives its identifier."""
    date: date
    type: ActivityType
    description: str
    miles: int
    xp: int


class StatusEvent(Record):
    """Qualification-cycle event. Never reported as an activity."""
    date: date
    type: StatusEventType
    description: str
    xp_change: int = 0
    uxp_change: Optional[int] = None
    status_reached: Optional[StatusLevel] = None


class FlightRecord(Record):
    """Flight ready for import."""
    id: str
    date: date
    route: str
    airline: str
    flight_number: str
    cabin: str
    earned_miles: int
    earned_xp: int = Field(alias="earnedXP")
    saf_xp: int = 0
    uxp: int = 0
    trip_title: str = ""
    import_source: Literal["pdf"] = "pdf"


class ActivityEntry(Record):
    """Activity transaction ready for import."""
    id: str
    date: date
    type: ActivityType
    description: str
    miles: int
    xp: int
    source: Literal["pdf"] = "pdf"
    source_date: date


class MilesRecord(Record):
    """Miles earned per month, split by source."""
    id: str
    month: str
    miles_subscription: int = 0
    miles_amex: int = 0
    miles_flight: int = 0
    miles_other: int = 0
    miles_debit: int = 0
    cost_subscription: float = 0.0
    cost_amex: float = 0.0
    cost_flight: float = 0.0
    cost_other: float = 0.0


class QualificationSettings(Record):
    """Start of the current qualification cycle."""
    cycle_start_month: str
    cycle_start_date: date
    starting_status: StatusLevel
    starting_xp: int = Field(0, alias="startingXP")
    starting_uxp: Optional[int] = Field(None, alias="startingUXP")


class PdfHeader(Record):
    """Header snapshot used to seed the dashboard balances."""
    xp: int
    uxp: int
    miles: int
    status: StatusLevel
    export_date: date
    member_name: Optional[str] = None
    member_number: Optional[str] = None


class SuggestedCorrection(Record):
    date: date
    description: str
    miles: int


class ReconciliationReport(Record):
    """Difference between the header balance and the parsed transactions."""
    header_balance: int
    parsed_total: int
    difference: int
    oldest_transaction_date: date
    oldest_month: str
    needs_correction: bool
    suggested_correction: Optional[SuggestedCorrection] = None


class RawResponse(Record):
    """Intermediate values in the AI-assisted import path's field shape."""
    header: StatementHeader
    flights: List[RawFlight] = Field(default_factory=list)
    miles_activities: List[ParsedActivity] = Field(default_factory=list)
    status_events: List[StatusEvent] = Field(default_factory=list)


class ParseMetadata(Record):
    parse_time_ms: int
    model: str = "local-text-parser-v1"
    tokens_used: int = 0
    language: Language


class ParsedStatement(Record):
    """Complete result of a successful parse."""
    flights: List[FlightRecord]
    activity_transactions: List[ActivityEntry]
    status_events: List[StatusEvent]
    miles_records: List[MilesRecord]
    pdf_header: PdfHeader
    qualification_settings: Optional[QualificationSettings] = None
    bonus_xp_by_month: Dict[str, int] = Field(default_factory=dict)
    raw_response: RawResponse
    miles_reconciliation: ReconciliationReport
    metadata: ParseMetadata


class ValidationResult(Record):
    is_valid: bool
    is_flying_blue_content: bool
    language: Optional[Language] = None
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


class ParserError(Record):
    code: ErrorCode
    message: str
    details: Optional[ValidationResult] = None


class ParseSuccess(Record):
    success: Literal[True] = True
    data: ParsedStatement
    warnings: List[str] = Field(default_factory=list)


class ParseFailure(Record):
    success: Literal[False] = False
    error: ParserError


ParseResult = Union[ParseSuccess, ParseFailure]
