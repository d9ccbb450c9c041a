"""
Tests for header parsing, normalization, splitting and classification.
"""
import pytest
from datetime import date

from ..core.classifier import (
    CATEGORY_ROUTES,
    FALLBACK_CONFIDENCE,
    PATTERN_CONFIDENCE,
    ROUTE_CONFIDENCE,
    Route,
    classify_transaction,
    classify_transactions,
    is_routed_to,
)
from ..core.dates import UNPARSED_DATE
from ..core.detectors import detect_language, extract_totals, parse_header
from ..core.normalize import join_fragments, needs_normalization, normalize_text
from ..core.splitter import (
    group_transactions_by_type,
    header_description,
    is_award_header,
    split_transactions,
)
from ..models.schema import Language, StatusLevel, TransactionCategory


class TestHeaderParser:
    """Statement header extraction."""

    def test_dutch_header(self, nl_statement):
        header = parse_header(nl_statement)

        assert header.language == Language.NL
        assert header.member_name == "JANSEN PIETER"
        assert header.member_number == "1234567890"
        assert header.current_status == StatusLevel.PLATINUM
        assert header.total_miles == 40000
        assert header.total_xp == 183
        assert header.total_uxp == 40
        assert header.export_date == date(2025, 12, 11)

    def test_english_header_with_month_first_dates(self, en_statement):
        header = parse_header(en_statement)

        assert header.language == Language.EN
        assert header.member_name == "PIETER JANSEN"
        assert header.current_status == StatusLevel.GOLD
        assert (header.total_miles, header.total_xp, header.total_uxp) == (10000, 120, 20)
        assert header.export_date == date(2025, 12, 11)

    def test_german_header(self, de_statement):
        header = parse_header(de_statement)

        assert header.language == Language.DE
        assert header.current_status == StatusLevel.SILVER
        assert header.total_miles == 5000
        assert header.export_date == date(2025, 12, 11)

    def test_missing_fields_fall_back_to_defaults(self):
        header = parse_header("nothing useful here")

        assert header.member_name is None
        assert header.member_number is None
        assert header.current_status == StatusLevel.EXPLORER
        assert header.total_miles == 0
        assert header.total_xp == 0
        assert header.export_date == date.today()

    def test_totals_without_uxp(self):
        assert extract_totals("Activity overview 1200 Miles 45 XP", Language.EN) == (1200, 45, 0)

    def test_language_tie_goes_to_earlier_language(self):
        assert detect_language("Activiteitengeschiedenis\nActivity history") == Language.NL
        assert detect_language("no indicators at all") == Language.NL

    def test_language_highest_score_wins(self):
        assert detect_language("Activity history\nMy trip to Rome\nPage 1/2") == Language.EN


class TestNormalizer:
    """Rebuilding fragmented text layers."""

    def test_compact_text_is_left_alone(self, nl_statement):
        assert needs_normalization(nl_statement) is False

    def test_fragmented_text_is_detected(self, nl_statement_fragmented):
        assert needs_normalization(nl_statement_fragmented) is True

    def test_short_text_is_never_normalized(self):
        assert needs_normalization("10 dec 2025\n100 Miles\n0 XP") is False

    def test_join_fragments(self):
        assert join_fragments("AMERICAN EXPRESS GOLD\nCARD") == "AMERICAN EXPRESS GOLD CARD"
        assert join_fragments("Aftrek XP-\nteller") == "Aftrek XP-teller"

    def test_normalized_lines(self, nl_statement_fragmented):
        lines = normalize_text(nl_statement_fragmented, "JANSEN PIETER").split('\n')

        assert "10 dec 2025 Hotel - BOOKING.COM WITH KLM 367 Miles 0 XP" in lines
        assert "BOOKING.COM WITH KLM 367 Miles 0 XP" in lines
        assert "30 nov 2025 Mijn reis naar Berlijn 1312 Miles 16 XP 16 UXP" in lines
        assert "AMS - BER KL1775 gespaarde Miles op basis van bestede euro's 276 Miles 5 XP 5 UXP" in lines
        assert "Sustainable Aviation Fuel 176 Miles 3 XP 3 UXP" in lines
        assert "17 nov 2025 AMERICAN EXPRESS PLATINUM CARD 10811 Miles 0 XP" in lines
        assert "8 okt 2025 Surplus XP beschikbaar op XP-teller 0 Miles 23 XP" in lines
        assert "8 okt 2025 Aftrek XP-teller 0 Miles -300 XP" in lines
        assert "op 8 okt 2025" in lines

    def test_boilerplate_is_dropped(self, nl_statement_fragmented):
        normalized = normalize_text(nl_statement_fragmented, "JANSEN PIETER")

        assert "Pagina" not in normalized
        assert "JANSEN PIETER" not in normalized
        assert "PLATINUM\n" not in normalized


class TestSplitter:
    """Cutting text into transaction blocks."""

    def test_dutch_blocks(self, nl_statement):
        blocks = split_transactions(nl_statement, "JANSEN PIETER")

        assert len(blocks) == 12
        first = blocks[0]
        assert first.text.startswith("10 dec 2025 Hotel - BOOKING.COM WITH KLM 367 Miles 0 XP")
        assert first.posting_date == date(2025, 12, 10)
        assert first.activity_date == date(2025, 11, 21)
        assert blocks[-1].posting_date == date(2025, 10, 8)

    def test_lines_before_first_header_are_ignored(self, nl_statement):
        blocks = split_transactions(nl_statement, "JANSEN PIETER")
        assert not any("Activiteitengeschiedenis" in block.text for block in blocks)

    def test_month_first_headers(self, en_statement):
        blocks = split_transactions(en_statement, "PIETER JANSEN")

        assert [b.posting_date for b in blocks] == [
            date(2025, 12, 10), date(2025, 11, 18), date(2025, 11, 15),
        ]
        assert blocks[0].activity_date == date(2025, 11, 29)

    def test_abbreviated_german_dates(self, de_statement):
        blocks = split_transactions(de_statement, "SCHMIDT ANNA")

        assert len(blocks) == 1
        assert blocks[0].posting_date == date(2025, 12, 10)
        assert blocks[0].activity_date == date(2025, 11, 29)

    def test_unknown_month_gives_sentinel_posting_date(self):
        blocks = split_transactions("10 abc 2025 Hotel - TEST 100 Miles 0 XP\nop 9 dec 2025")

        assert len(blocks) == 1
        assert blocks[0].posting_date == UNPARSED_DATE
        assert blocks[0].activity_date == date(2025, 12, 9)

    def test_no_headers_gives_no_blocks(self):
        assert split_transactions("Flying Blue\nsome text\n100 Miles 0 XP") == []

    def test_header_helpers(self):
        assert header_description("10 dec 2025 Mijn reis naar Berlijn 1312 Miles 16 XP 16 UXP") == \
            "Mijn reis naar Berlijn"
        assert header_description("18 nov 2025 -90000 Miles 0 XP") is None
        assert is_award_header("18 nov 2025 -90000 Miles 0 XP") is True
        assert is_award_header("Nov 18, 2025 -90000 Miles 0 XP") is True
        assert is_award_header("18 nov 2025 500 Miles 0 XP") is False


class TestClassifier:
    """Category assignment and routing."""

    def test_dutch_categories(self, nl_statement):
        classified = classify_transactions(split_transactions(nl_statement, "JANSEN PIETER"))

        assert [t.category for t in classified] == [
            TransactionCategory.HOTEL,
            TransactionCategory.HOTEL,
            TransactionCategory.HOTEL,
            TransactionCategory.PARTNER,
            TransactionCategory.FLIGHT_KLM_AF,
            TransactionCategory.FLIGHT_PARTNER,
            TransactionCategory.TRANSFER_IN,
            TransactionCategory.FLIGHT_TRANSAVIA,
            TransactionCategory.SUBSCRIPTION,
            TransactionCategory.CREDIT_CARD,
            TransactionCategory.XP_ROLLOVER,
            TransactionCategory.XP_DEDUCTION,
        ]
        assert all(t.confidence == PATTERN_CONFIDENCE for t in classified)

    def test_earlier_category_wins_tie(self):
        block = split_transactions("10 dec 2025 AMERICAN EXPRESS Hotel - partner stay 100 Miles 0 XP")[0]
        result = classify_transaction(block)

        assert result.category == TransactionCategory.CREDIT_CARD
        assert result.confidence == PATTERN_CONFIDENCE

    def test_transavia_wins_over_partner(self):
        block = split_transactions(
            "25 nov 2025 Mijn reis naar Amsterdam 250 Miles 5 XP\n"
            "KEF - AMS TRANSAVIA HOLLAND partner 250 Miles 5 XP\n"
            "op 24 nov 2025"
        )[0]
        result = classify_transaction(block)

        assert result.category == TransactionCategory.FLIGHT_TRANSAVIA
        assert result.confidence == PATTERN_CONFIDENCE

    def test_route_fallback(self):
        block = split_transactions("10 dec 2025 Mystery 100 Miles 1 XP\nAMS - CDG")[0]
        result = classify_transaction(block)

        assert result.category == TransactionCategory.FLIGHT_PARTNER
        assert result.confidence == ROUTE_CONFIDENCE

    def test_other_fallback(self):
        block = split_transactions("10 dec 2025 Mystery credit 50 Miles 0 XP")[0]
        result = classify_transaction(block)

        assert result.category == TransactionCategory.OTHER
        assert result.confidence == FALLBACK_CONFIDENCE

    def test_award_header_is_award_in_both_date_orders(self, en_statement):
        blocks = split_transactions(en_statement, "PIETER JANSEN")
        assert classify_transaction(blocks[1]).category == TransactionCategory.FLIGHT_AWARD
        assert classify_transaction(blocks[2]).category == TransactionCategory.CREDIT_CARD_BONUS

    def test_every_category_is_routed(self):
        assert set(CATEGORY_ROUTES) == set(TransactionCategory)

    @pytest.mark.parametrize("category,flight,activity,status", [
        (TransactionCategory.FLIGHT_KLM_AF, True, False, False),
        (TransactionCategory.FLIGHT_AWARD, True, True, False),
        (TransactionCategory.HOTEL, False, True, False),
        (TransactionCategory.XP_ROLLOVER, False, False, True),
        (TransactionCategory.XP_DEDUCTION, False, False, True),
    ])
    def test_routing(self, category, flight, activity, status):
        assert is_routed_to(category, Route.FLIGHT) is flight
        assert is_routed_to(category, Route.ACTIVITY) is activity
        assert is_routed_to(category, Route.STATUS_EVENT) is status

    def test_group_transactions_by_type(self, nl_statement):
        classified = classify_transactions(split_transactions(nl_statement, "JANSEN PIETER"))
        groups = group_transactions_by_type(classified)

        assert len(groups["HOTEL"]) == 3
        assert len(groups["XP_DEDUCTION"]) == 1
