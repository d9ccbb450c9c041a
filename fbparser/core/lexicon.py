"""
Lexicon tables for the seven supported statement languages.

The tables are read once from ``templates/lexicon.yaml`` and exposed as
read-only module constants. Every other stage reads from here.
"""
import re
import unicodedata
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Pattern, Tuple
import logging

import yaml
from rapidfuzz import fuzz, process

from ..models.schema import Language

logger = logging.getLogger(__name__)

LEXICON_PATH = Path(__file__).parent.parent / "templates" / "lexicon.yaml"

# Tokens shorter than this are never fuzzy-matched against month names.
FUZZY_MONTH_MIN_LENGTH = 5
FUZZY_MONTH_CUTOFF = 85


def _load_lexicon(path: Path) -> Dict:
    if not path.exists():
        raise ValueError(f"Lexicon file not found: {path}")
    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Lexicon file is not a mapping: {path}")
    logger.debug(f"Loaded lexicon from {path}")
    return data


def fold_accents(value: str) -> str:
    """Strip combining marks so 'déc' and 'dec' compare equal."""
    decomposed = unicodedata.normalize('NFKD', value)
    return ''.join(ch for ch in decomposed if not unicodedata.combining(ch))


def _compile(entry, placeholders: Mapping[str, str], multiline: bool = False) -> Pattern:
    """
    Compile a lexicon regex entry.

    Args:
        entry: Either a pattern string or a mapping with ``pattern`` and an
            optional ``case_sensitive`` flag
        placeholders: Named fragments substituted for ``{name}`` markers
        multiline: Let ``^`` and ``$`` anchor at line boundaries

    Returns:
        Compiled pattern
    """
    if isinstance(entry, dict):
        pattern = entry['pattern']
        case_sensitive = bool(entry.get('case_sensitive', False))
    else:
        pattern = entry
        case_sensitive = False

    for name, fragment in placeholders.items():
        pattern = pattern.replace('{' + name + '}', fragment)

    flags = 0 if case_sensitive else re.IGNORECASE
    if multiline:
        flags |= re.MULTILINE
    return re.compile(pattern, flags)


def _build_month_table(raw: Dict[str, Dict[str, int]]) -> Dict[str, int]:
    table: Dict[str, int] = {}
    origin: Dict[str, str] = {}
    for language, tokens in raw.items():
        for token, number in tokens.items():
            key = str(token).lower()
            if not 1 <= int(number) <= 12:
                raise ValueError(f"Month '{key}' ({language}) maps to invalid number {number}")
            if key in table and table[key] != int(number):
                raise ValueError(
                    f"Month token '{key}' is {table[key]} in {origin[key]} "
                    f"but {number} in {language}"
                )
            table[key] = int(number)
            origin.setdefault(key, language)
    return table


_DATA = _load_lexicon(LEXICON_PATH)

LANGUAGE_ORDER: Tuple[Language, ...] = tuple(Language(code) for code in _DATA['languages'])
if set(LANGUAGE_ORDER) != set(Language):
    raise ValueError("Lexicon languages do not match the Language enum")

MILES_WORDS: Tuple[str, ...] = tuple(_DATA['miles_words'])
MILES_WORD = '(?:' + '|'.join(re.escape(word) for word in MILES_WORDS) + ')'

# Day-first ("10 dec 2025", "10. Dez. 2025") and month-first ("Dec 10, 2025")
# date tokens. Month words are validated separately against MONTHS.
DMY_DATE = r'\d{1,2}\.?\s+[^\W\d_]{3,12}\.?\s+\d{4}'
MDY_DATE = r'[^\W\d_]{3,12}\.?\s+\d{1,2},?\s+\d{4}'
DATE_TOKEN = f'(?:{DMY_DATE}|{MDY_DATE})'

_PLACEHOLDERS = MappingProxyType({'date': DATE_TOKEN, 'miles': MILES_WORD})

# "1136 Miles 13 XP 13 UXP" and the "-90000 Miles 0 XP" award shape.
AMOUNTS_PATTERN = re.compile(
    rf'(-?\d+)\s*{MILES_WORD}\s+(-?\d+)\s*XP(?:\s+(-?\d+)\s*UXP)?',
    re.IGNORECASE,
)
ROUTE_PATTERN = re.compile(r'\b([A-Z]{3})\s*[-–—]\s*([A-Z]{3})\b')

AMOUNT_TOKEN_PATTERN = re.compile(rf'-?\d+\s*(?:{MILES_WORD}|XP|UXP)\b', re.IGNORECASE)

MONTHS: Mapping[str, int] = MappingProxyType(_build_month_table(_DATA['months']))
_FOLDED_MONTHS: Mapping[str, int] = MappingProxyType(
    {fold_accents(token): number for token, number in MONTHS.items()}
)
_FUZZY_CHOICES: Tuple[str, ...] = tuple(t for t in _FOLDED_MONTHS if len(t) >= FUZZY_MONTH_MIN_LENGTH)

MONTH_NAMES: Mapping[Language, Tuple[str, ...]] = MappingProxyType(
    {Language(code): tuple(names) for code, names in _DATA['month_names'].items()}
)
for _language, _names in MONTH_NAMES.items():
    if len(_names) != 12:
        raise ValueError(f"Expected 12 month names for {_language.value}, got {len(_names)}")
    for _index, _name in enumerate(_names, start=1):
        if MONTHS.get(_name.lower()) != _index:
            raise ValueError(f"Month name '{_name}' ({_language.value}) is not number {_index}")

ACTIVITY_DATE_MARKERS: Tuple[str, ...] = tuple(_DATA['activity_date_markers'])
_MARKER_ALTERNATION = '|'.join(re.escape(m) for m in ACTIVITY_DATE_MARKERS)
ACTIVITY_DATE_PATTERN = re.compile(
    rf'(?:^|\s)(?:{_MARKER_ALTERNATION})\s+({DATE_TOKEN})',
    re.IGNORECASE | re.MULTILINE,
)
ACTIVITY_DATE_LINE = re.compile(
    rf'^(?:{_MARKER_ALTERNATION})\s+({DATE_TOKEN})$', re.IGNORECASE,
)

PAGE_WORDS: Tuple[str, ...] = tuple(_DATA['page_words'])
_PAGE_ALTERNATION = '|'.join(re.escape(w) for w in PAGE_WORDS)
PAGE_MARKER_PATTERN = re.compile(rf'(?:{_PAGE_ALTERNATION})\s+\d+\s*/\s*\d+', re.IGNORECASE)
# "11 dec 2025 • Pagina 1/18"
EXPORT_DATE_PATTERN = re.compile(
    rf'({DATE_TOKEN})\s*[•·\-|]?\s*(?:{_PAGE_ALTERNATION})\s+\d+', re.IGNORECASE,
)

LANGUAGE_INDICATORS: Mapping[Language, Tuple[Pattern, ...]] = MappingProxyType({
    Language(code): tuple(_compile(p, _PLACEHOLDERS) for p in patterns)
    for code, patterns in _DATA['language_indicators'].items()
})

HISTORY_TITLES: Mapping[Language, str] = MappingProxyType(
    {Language(code): pattern for code, pattern in _DATA['history_titles'].items()}
)
ANY_HISTORY_TITLE = '(?:' + '|'.join(HISTORY_TITLES.values()) + ')'
HEADER_TOTALS_LINE = re.compile(
    rf'^{ANY_HISTORY_TITLE}\s+-?\d+\s*{MILES_WORD}', re.IGNORECASE,
)

TRIP_TITLES: Tuple[Tuple[str, Pattern], ...] = tuple(
    (entry['prefix'], re.compile(entry['pattern'] + r'\s+(.+?)(?=\s+-?\d+\s*' + MILES_WORD + r'|\n|$)',
                                 re.IGNORECASE))
    for entry in _DATA['trip_titles'].values()
)

MEMBER_NUMBER_PATTERNS: Tuple[Pattern, ...] = tuple(
    _compile(p, _PLACEHOLDERS) for p in _DATA['member_number_patterns']
)

STATUS_REACHED_WORDS: Tuple[str, ...] = tuple(_DATA['status_reached_words'])
STATUS_REACHED_PATTERN = re.compile(
    r'(Explorer|Silver|Gold|Platinum|Ultimate)\s+(?:'
    + '|'.join(re.escape(w) for w in STATUS_REACHED_WORDS) + r')\b',
    re.IGNORECASE,
)

HEADER_BOILERPLATE: Tuple[str, ...] = tuple(_DATA['header_boilerplate'])
TRANSACTION_WORDS: Tuple[str, ...] = tuple(_DATA['transaction_words'])

SAF_PATTERN = re.compile(_DATA['sustainable_fuel'], re.IGNORECASE)

CONTENT_INDICATORS: Tuple[Pattern, ...] = tuple(
    _compile(p, _PLACEHOLDERS) for p in _DATA['content_indicators']
)

FRAGMENT_JOINS: Tuple[Tuple[Pattern, str], ...] = tuple(
    (re.compile(entry['pattern'], re.IGNORECASE), entry['replacement'])
    for entry in _DATA['fragment_joins']
)

BROKEN_LINE_MARKERS: Tuple[Pattern, ...] = tuple(
    re.compile(p, re.IGNORECASE) for p in _DATA['broken_line_markers']
)

ROLLOVER_DETAIL_SPLITS: Tuple[Pattern, ...] = tuple(
    re.compile(rf'(\d+\s+XP)\s*\n?\s*({p})', re.IGNORECASE)
    for p in _DATA['rollover_details']
)
ROLLOVER_DETAIL_START = re.compile(
    '^(?:' + '|'.join(_DATA['rollover_details']) + ')', re.IGNORECASE,
)

DETAIL_LINE_START = re.compile(
    '^(?:' + '|'.join(_DATA['detail_prefixes']) + ')',
)

CATEGORY_PATTERNS: Mapping[str, Tuple[Pattern, ...]] = MappingProxyType({
    name: tuple(_compile(p, _PLACEHOLDERS, multiline=True) for p in (patterns or []))
    for name, patterns in _DATA['categories'].items()
})


def month_number(token: str) -> Optional[int]:
    """
    Resolve a month word in any supported language.

    Args:
        token: Month word, optionally abbreviated or with a trailing period

    Returns:
        Month number 1-12, or None if the word is not a month
    """
    if not token:
        return None
    key = token.strip().rstrip('.').lower()
    if key in MONTHS:
        return MONTHS[key]

    folded = fold_accents(key)
    if folded in _FOLDED_MONTHS:
        return _FOLDED_MONTHS[folded]

    if len(folded) < FUZZY_MONTH_MIN_LENGTH:
        return None
    match = process.extractOne(folded, _FUZZY_CHOICES, scorer=fuzz.ratio,
                               score_cutoff=FUZZY_MONTH_CUTOFF)
    if match:
        logger.debug(f"Fuzzy month match: '{token}' -> '{match[0]}' ({match[1]:.0f})")
        return _FOLDED_MONTHS[match[0]]
    return None


def month_name(number: int, language: Language = Language.EN) -> str:
    """Display name of a month in the given language."""
    return MONTH_NAMES[language][number - 1]


def is_status_banner(line: str) -> bool:
    return line.strip().upper() in ('EXPLORER', 'SILVER', 'GOLD', 'PLATINUM', 'ULTIMATE')


def looks_like_member_name(line: str, member_name: Optional[str] = None) -> bool:
    """
    Check whether a line is a repeat of the member name.

    With a known member name only exact (case-insensitive) repeats count.
    Otherwise an all-caps line of letters is taken as a name unless it carries
    a transaction word.
    """
    stripped = line.strip()
    if not stripped:
        return False
    if member_name:
        return stripped.upper() == member_name.strip().upper()
    if len(stripped) >= 50 or not re.fullmatch(r"[A-ZÀ-Ý][A-ZÀ-Ý\s'-]+[A-ZÀ-Ý]", stripped):
        return False
    if ROUTE_PATTERN.search(stripped):
        return False
    words = set(stripped.upper().split())
    return not any(word in words for word in TRANSACTION_WORDS)
