"""
Input validation run before any parsing.
"""
import re
import logging

from .detectors import detect_language
from .lexicon import CONTENT_INDICATORS
from ..models.schema import ValidationResult

logger = logging.getLogger(__name__)

MIN_TEXT_LENGTH = 200
MAX_TEXT_LENGTH = 500_000
MIN_INDICATORS_REQUIRED = 2
MIN_EXPECTED_LINES = 10
QUICK_CHECK_MIN_LENGTH = 100

MARKUP_PATTERN = re.compile(r'<html|<div|<span|<table', re.IGNORECASE)
REPLACEMENT_CHARACTER = '�'


def count_content_indicators(text: str) -> int:
    return sum(1 for pattern in CONTENT_INDICATORS if pattern.search(text))


def validate_input(text: str) -> ValidationResult:
    """
    Check that pasted text is a plausible statement before parsing it.

    Args:
        text: Raw input text

    Returns:
        ValidationResult; is_valid is False when any error was found
    """
    if not text or not isinstance(text, str):
        return ValidationResult(is_valid=False, is_flying_blue_content=False,
                                errors=["No text provided"])

    errors = []
    warnings = []
    trimmed = text.strip()

    if len(trimmed) < MIN_TEXT_LENGTH:
        errors.append(
            f"Text is too short ({len(trimmed)} characters). Flying Blue activity statements are "
            f"typically much longer. Make sure you copied the entire PDF content."
        )
    if len(trimmed) > MAX_TEXT_LENGTH:
        errors.append(
            f"Text is too long ({len(trimmed)} characters, the limit is {MAX_TEXT_LENGTH})."
        )

    indicators = count_content_indicators(trimmed)
    is_content = indicators >= MIN_INDICATORS_REQUIRED
    if not is_content:
        errors.append(
            "This doesn't appear to be Flying Blue activity data. Make sure you copied the "
            "entire activity statement PDF."
        )

    language = detect_language(trimmed) if is_content else None

    if REPLACEMENT_CHARACTER in trimmed:
        warnings.append(
            "Some characters may not have copied correctly. Parsing is usually unaffected, "
            "but some names might appear incorrectly."
        )

    if MARKUP_PATTERN.search(trimmed):
        errors.append(
            "It looks like you copied HTML content from a webpage. Please copy from the PDF "
            "file directly."
        )

    line_count = len(trimmed.split('\n'))
    if is_content and line_count < MIN_EXPECTED_LINES:
        warnings.append(
            f"Only {line_count} lines detected. Make sure you copied the entire PDF."
        )

    logger.debug(f"Validation: {indicators} indicators, {len(errors)} errors, {len(warnings)} warnings")
    return ValidationResult(
        is_valid=not errors,
        is_flying_blue_content=is_content,
        language=language,
        errors=errors,
        warnings=warnings,
    )


def is_likely_statement_content(text: str) -> bool:
    """Cheap check for UI feedback before full validation."""
    if not text or len(text) < QUICK_CHECK_MIN_LENGTH:
        return False
    return count_content_indicators(text) >= MIN_INDICATORS_REQUIRED


def get_validation_error_message(result: ValidationResult) -> str:
    if result.is_valid:
        return ''
    if len(result.errors) == 1:
        return result.errors[0]
    return "Multiple issues found:\n• " + "\n• ".join(result.errors)


def get_validation_warning_message(result: ValidationResult) -> str:
    if not result.warnings:
        return ''
    if len(result.warnings) == 1:
        return result.warnings[0]
    return "Note:\n• " + "\n• ".join(result.warnings)
