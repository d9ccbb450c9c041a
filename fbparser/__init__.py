"""
Flying Blue Statement Parser

A deterministic, offline parser for Flying Blue activity statements copied
from the PDF, in any of the seven statement languages.
"""

__version__ = "1.0.0"
__author__ = "Flying Blue Tools Team"

from .core.runner import parse_text, parse_statement, StatementParser
from .core.validator import validate_input
from .core.detectors import detect_language
from .models.schema import (
    ParserOptions,
    ParseResult,
    ParseSuccess,
    ParseFailure,
    ParsedStatement,
    ValidationResult,
    Language,
)

__all__ = [
    "parse_text",
    "parse_statement",
    "StatementParser",
    "validate_input",
    "detect_language",
    "ParserOptions",
    "ParseResult",
    "ParseSuccess",
    "ParseFailure",
    "ParsedStatement",
    "ValidationResult",
    "Language",
]
