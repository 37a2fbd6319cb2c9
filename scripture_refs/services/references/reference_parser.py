# scripture_refs/services/references/reference_parser.py
"""
Low-level scripture reference parsing.

Provides the two primitives the reference model is built on:
- detect_book: resolve a human book name or abbreviation to a book code
- parse_verses_string: split "3:16-4:2" style strings into numbers

Also holds the regular expression fragments used to recognise the shape of
a reference inside free text (see detect.py).

Nothing here validates numbers against the versification table, that is
done by PassageReference.
"""

import re
from functools import lru_cache
from typing import Mapping, Optional, Sequence, Union

from .data import BOOKS_ORDERED


BookNamesArg = Union[Mapping[str, str], Sequence[Sequence[str]]]


# Every character with the Unicode "Dash" property (for use inside a [] class)
DASH_CLASS = (
    "\\-\u058a\u05be\u1400\u1806\u2010-\u2015\u2053\u207b\u208b\u2212\u2e17\u2e1a"
    "\u2e3a\u2e3b\u2e40\u2e5d\u301c\u3030\u30a0\ufe31\ufe32\ufe58\ufe63\uff0d"
)

# Chapter/verse separators (colon, full-width colons, and a period)
VERSE_SEP = "[:\uff1a\ufe13\ufe55.]"

# Any Unicode letter (word chars minus digits and underscore)
LETTER = r"[^\W\d_]"


# Regex strings used for identifying passage references in blocks of text
# NOTE Allow two spaces but no more, to be forgiving but not match weird text
REGEX_BOOK_NUM_PREFIX = r"(?:(?:[123]|I{1,3}) ? ?)?"
REGEX_BOOK_NAME = LETTER + "(?:" + LETTER + "|[" + DASH_CLASS + " ]){0,16}" + LETTER + r"\.? ? ?"
REGEX_INTEGER_WITH_OPT_SEP = (
    r"\d{1,3}[abc]?(?: ? ?" + VERSE_SEP + r" ? ?\d{1,3}[abc]?)?"
)
REGEX_VERSE_RANGE = (
    REGEX_INTEGER_WITH_OPT_SEP + "(?: ? ?[" + DASH_CLASS + "] ? ?"
    + REGEX_INTEGER_WITH_OPT_SEP + ")?"
)
# A reference doesn't make sense when followed by these
REGEX_TRAILING = r"(?![^\W_]|[@#$%])"
REGEX_COMPLETE = (
    REGEX_BOOK_NUM_PREFIX + REGEX_BOOK_NAME + REGEX_VERSE_RANGE + REGEX_TRAILING
)

REGEX_BETWEEN_RANGES = r" ? ?[,;] ? ?"
REGEX_ADDITIONAL_RANGE = (
    REGEX_BETWEEN_RANGES + "(" + REGEX_VERSE_RANGE + ")" + REGEX_TRAILING
)
REGEX_BOOK_CHECK = (
    REGEX_BETWEEN_RANGES + "(" + REGEX_BOOK_NUM_PREFIX + REGEX_BOOK_NAME + ")"
)


_WHITESPACE_RE = re.compile(r"\s+")
_VERSE_SEP_RE = re.compile(VERSE_SEP)
_DASH_RE = re.compile("[" + DASH_CLASS + "]")
_LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)")
_NOT_LETTER_OR_DIGIT_RE = re.compile(r"[\W_]")

# (pattern, replacement) pairs applied once each, in order
_ORDINALS = (
    (re.compile(r"^i "), "1"), (re.compile(r"1st "), "1"), (re.compile(r"first "), "1"),
    (re.compile(r"^ii "), "2"), (re.compile(r"2nd "), "2"), (re.compile(r"second "), "2"),
    (re.compile(r"^iii "), "3"), (re.compile(r"3rd "), "3"), (re.compile(r"third "), "3"),
)


def parse_int(value: Optional[str]) -> Optional[int]:
    """
    Parse the leading integer of a string.

    Returns None rather than raising when there is no leading integer, so
    "16a" is 16 but "x" is None.
    """
    if not value:
        return None
    match = _LEADING_INT_RE.match(value)
    return int(match.group(1)) if match else None


def has_verse_sep(value: str) -> bool:
    """Whether a verses string contains a chapter/verse separator."""
    return bool(_VERSE_SEP_RE.search(value))


def parse_verses_string(ref: str) -> dict[str, Optional[int]]:
    """
    Parse a verses reference string into its numbers (without validating them).

    Handles chapters only ("1", "1-2"), verses ("1:1", "1:1-2") and ranges
    across chapters ("1:1-2:2"). Whatever can't be parsed is left as None.

    Args:
        ref: Verses part of a reference, e.g. "3:16-18"

    Returns:
        Dict with start_chapter, start_verse, end_chapter, end_verse
    """
    # Remove whitespace and normalise separators to a common colon and hyphen
    ref = _WHITESPACE_RE.sub("", ref)
    ref = _VERSE_SEP_RE.sub(":", ref)
    ref = _DASH_RE.sub("-", ref)

    start_chapter = start_verse = end_chapter = end_verse = None

    parts = ref.split("-")
    if ":" not in ref:
        # Chapters only
        start_chapter = parse_int(parts[0])
        end_chapter = parse_int(parts[1] if len(parts) > 1 else "")
    else:
        start_parts = parts[0].split(":")
        start_chapter = parse_int(start_parts[0])
        start_verse = parse_int(start_parts[1] if len(start_parts) > 1 else "")
        end_part = parts[1] if len(parts) > 1 else ""
        if end_part:
            end_parts = end_part.split(":")
            if len(end_parts) > 1:
                # Specifies end chapter
                end_chapter = parse_int(end_parts[0])
                end_verse = parse_int(end_parts[1])
            else:
                # End verse is in same chapter
                end_verse = parse_int(end_parts[0])

    return {
        "start_chapter": start_chapter,
        "start_verse": start_verse,
        "end_chapter": end_chapter,
        "end_verse": end_verse,
    }


@lru_cache(maxsize=4096)
def clean_book_name(name: str) -> str:
    """
    Normalise a book name for comparison.

    Lowercases, turns ordinals into digits ("I John", "First John" -> "1john")
    and drops everything that isn't a letter or digit.
    """
    name = name.strip().lower()
    for pattern, replacement in _ORDINALS:
        name = pattern.sub(replacement, name, count=1)
    return _NOT_LETTER_OR_DIGIT_RE.sub("", name)


def normalize_book_names(book_names: BookNamesArg) -> list[tuple[str, str]]:
    """Conform book names given as a mapping or as pairs to an ordered list of pairs."""
    if isinstance(book_names, Mapping):
        return list(book_names.items())
    return [(code, name) for code, name in book_names]


def _fuzzy_pattern(value: str, match_from_start: bool) -> re.Pattern:
    """Build a regex allowing up to 4 chars between each char of value."""
    chars = [re.escape(c) for c in value]
    pattern = ".{0,4}".join(chars)
    if match_from_start:
        if value[0] in "123":
            # Must match first two chars from start if first char is a number
            pattern = "^" + chars[0] + ".{0,4}".join(chars[1:])
        else:
            pattern = "^" + pattern
    return re.compile(pattern)


def _unique_code(matches: list[tuple[str, str]]) -> Optional[str]:
    codes = {code for code, _name in matches}
    return codes.pop() if len(codes) == 1 else None


def detect_book(
    text: str,
    book_names: BookNamesArg,
    exclude: Optional[Sequence[str]] = None,
    match_from_start: bool = True,
) -> Optional[str]:
    """
    Get book code from a book name or an abbreviation of it.

    Matching is attempted in order of precision and never guesses:
    1. A raw book code ("1co") is returned as is
    2. An exact name match wins even if it also prefixes other names
    3. A name the input prefixes, only if just one book matches
    4. A fuzzy match (vowels are often dropped in abbreviations, "jn"),
       again only if just one book matches

    Args:
        text: Book name as written by a human (e.g. "1 Cor.", "Jn")
        book_names: Ordered (code, name) pairs or a code -> name mapping.
                    A book may appear multiple times under different names.
        exclude: Names that should never match (common short words)
        match_from_start: Whether fuzzy matches must start at the start of a
                          name (disable for scripts like Chinese)

    Returns:
        Book code, or None if no single book matches
    """
    text = clean_book_name(text)
    if not text:
        return None

    if exclude and text in {clean_book_name(name) for name in exclude}:
        return None

    # Allows passing a book code when the human name is not available
    if text in BOOKS_ORDERED:
        return text

    normalised = [(code, clean_book_name(name)) for code, name in normalize_book_names(book_names)]

    matches = []
    for code, name in normalised:
        if text == name:
            return code
        if name.startswith(text):
            matches.append((code, name))
    if matches:
        # Multiple books means input is too vague
        return _unique_code(matches)

    regex = _fuzzy_pattern(text, match_from_start)
    return _unique_code([(code, name) for code, name in normalised if regex.search(name)])


# Alias matching the public interface name
resolve_book = detect_book
