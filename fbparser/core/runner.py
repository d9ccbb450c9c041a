"""
End-to-end parsing orchestration.
"""
import time
from pathlib import Path
from typing import List, Optional
import logging

from .activities import parse_activity_transactions
from .classifier import PATTERN_CONFIDENCE, Route, classify_transactions, is_routed_to
from .converter import (
    calculate_miles_reconciliation,
    convert_activities,
    convert_flights,
    convert_miles_records,
    create_pdf_header,
    create_raw_response,
    extract_bonus_xp_by_month,
)
from .dates import is_unparsed
from .detectors import parse_header
from .flights import is_award_block, parse_flight_transactions
from .loader import load_text
from .normalize import needs_normalization, normalize_text
from .splitter import split_transactions
from .status_events import detect_qualification_settings, parse_status_events
from .validator import validate_input
from ..models.schema import (
    ClassifiedTransaction,
    ErrorCode,
    ParseFailure,
    ParseMetadata,
    ParseResult,
    ParsedStatement,
    ParserError,
    ParserOptions,
    ParseSuccess,
    TransactionCategory,
)

logger = logging.getLogger(__name__)

NO_TRANSACTIONS_MESSAGE = ("No transactions found in the text. Make sure you copied the entire "
                           "PDF content.")


def select_activity_blocks(classified: List[ClassifiedTransaction]) -> List[ClassifiedTransaction]:
    """
    Blocks for the activity stage, in statement order.

    Award bookings classified under a flight-only category still carry the
    redemption debit, so they are passed on as FLIGHT_AWARD blocks.
    """
    blocks = []
    for transaction in classified:
        if is_routed_to(transaction.category, Route.ACTIVITY):
            blocks.append(transaction)
        elif is_routed_to(transaction.category, Route.FLIGHT) and is_award_block(transaction):
            blocks.append(transaction.model_copy(update={'category': TransactionCategory.FLIGHT_AWARD}))
    return blocks


class StatementParser:
    """Runs the text pipeline: validate, normalize, split, classify, parse, convert."""

    def __init__(self, options: Optional[ParserOptions] = None):
        self.options = options or ParserOptions()

        if self.options.debug:
            logging.basicConfig(level=logging.DEBUG)

    def parse(self, text: str) -> ParseResult:
        """
        Parse statement text.

        Args:
            text: Raw statement text

        Returns:
            ParseSuccess with warnings, or ParseFailure for input that fails
            validation or yields no transactions
        """
        started = time.perf_counter()

        validation = validate_input(text)
        if not validation.is_valid:
            logger.info(f"Input rejected: {validation.errors}")
            return ParseFailure(error=ParserError(
                code=ErrorCode.VALIDATION_ERROR,
                message=validation.errors[0],
                details=validation,
            ))

        warnings: List[str] = list(validation.warnings)

        # The header reads the raw text: normalization drops the name, tier
        # banner and page lines it needs.
        header = parse_header(text, self.options.language or validation.language)

        working_text = text
        if needs_normalization(text):
            logger.debug("Text is fragmented, normalizing")
            working_text = normalize_text(text, header.member_name)

        blocks = split_transactions(working_text, header.member_name)
        if not blocks:
            return ParseFailure(error=ParserError(code=ErrorCode.PARSE_ERROR, message=NO_TRANSACTIONS_MESSAGE))

        unparsed = [b for b in blocks if is_unparsed(b.posting_date)]
        if unparsed:
            lines = ', '.join(str(b.line_number) for b in unparsed)
            if self.options.strict:
                return ParseFailure(error=ParserError(
                    code=ErrorCode.PARSE_ERROR,
                    message=f"Unparseable posting date at line(s) {lines}",
                ))
            warnings.append(f"Could not parse the posting date at line(s) {lines}")

        classified = classify_transactions(blocks)
        warnings.extend(self._classification_warnings(classified))

        flight_blocks = [t for t in classified if is_routed_to(t.category, Route.FLIGHT)]
        activity_blocks = select_activity_blocks(classified)
        event_blocks = [t for t in classified if is_routed_to(t.category, Route.STATUS_EVENT)]

        segments = parse_flight_transactions(flight_blocks, self.options.lookahead_lines)
        activities = parse_activity_transactions(activity_blocks)
        events = parse_status_events(event_blocks)

        settings = detect_qualification_settings(events, header.current_status)
        reconciliation = calculate_miles_reconciliation(
            header.total_miles, segments, activities, header.export_date,
            self.options.reconciliation_threshold,
        )
        if reconciliation.needs_correction:
            warnings.append(
                f"Header balance is {reconciliation.difference} Miles above the parsed transactions; "
                f"a historical balance correction is suggested."
            )

        statement = ParsedStatement(
            flights=convert_flights(segments),
            activity_transactions=convert_activities(activities, header.export_date),
            status_events=events,
            miles_records=convert_miles_records(activities, segments),
            pdf_header=create_pdf_header(header),
            qualification_settings=settings,
            bonus_xp_by_month=extract_bonus_xp_by_month(activities, settings),
            raw_response=create_raw_response(header, segments, activities, events),
            miles_reconciliation=reconciliation,
            metadata=ParseMetadata(
                parse_time_ms=int((time.perf_counter() - started) * 1000),
                language=header.language,
            ),
        )

        logger.info(f"Parsed {len(statement.flights)} flights, {len(statement.activity_transactions)} "
                    f"activities, {len(statement.status_events)} status events")
        return ParseSuccess(data=statement, warnings=warnings)

    def _classification_warnings(self, classified: List[ClassifiedTransaction]) -> List[str]:
        warnings = []
        for transaction in classified:
            if transaction.confidence < PATTERN_CONFIDENCE:
                first_line = transaction.text.split('\n', 1)[0]
                warnings.append(
                    f"Low-confidence classification ({transaction.category.value}) at line "
                    f"{transaction.line_number}: {first_line[:80]}"
                )
        return warnings


def parse_text(text: str, options: Optional[ParserOptions] = None) -> ParseResult:
    """
    Parse Flying Blue statement text.

    Args:
        text: Raw statement text
        options: Parser options

    Returns:
        ParseSuccess or ParseFailure
    """
    return StatementParser(options).parse(text)


def parse_statement(path: Path, options: Optional[ParserOptions] = None) -> ParseResult:
    """
    Parse a statement from a .txt file or a text-layer PDF.

    Args:
        path: Path to the statement
        options: Parser options

    Returns:
        ParseSuccess or ParseFailure
    """
    return parse_text(load_text(path), options)
