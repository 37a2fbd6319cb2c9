# scripture_refs/services/references/__init__.py
"""
Scripture reference services.

This package provides:
- PassageReference: Validated reference to a book, chapter, verse or range
- detect_references: Find references in free text
- ReferenceService: Parse/detect/render using translations' book names
- markup_references: Turn references in HTML into links
- detect_book: Resolve a book name or abbreviation to a book code
- parse_verses_string: Split "3:16-18" style strings into numbers
- Book data and versification (LAST_VERSE, BOOKS_ORDERED, ...)
"""

from .data import (
    BOOKS_ORDERED,
    BOOK_NAMES_ENGLISH,
    BOOK_ABBREV_ENGLISH,
    ENGLISH_ABBREV_INCLUDE,
    ENGLISH_ABBREV_EXCLUDE,
    OT_BOOKS_COUNT,
    SINGLE_CHAPTER_BOOKS,
    default_book_names,
)
from .last_verse import LAST_VERSE
from .stats import (
    num_chapters,
    last_verse_of,
    get_chapters,
    get_verses,
    total_book_verses,
)
from .reference_parser import (
    detect_book,
    resolve_book,
    parse_verses_string,
    normalize_book_names,
)
from .passage import PassageReference, REFERENCE_TYPES
from .detect import (
    ReferenceMatch,
    ReferenceScanner,
    detect_references,
)
from .reference_service import ReferenceService
from .markup import markup_references, default_filter

__all__ = [
    # Reference model (primary interface)
    "PassageReference",
    "REFERENCE_TYPES",
    # Detection
    "ReferenceMatch",
    "ReferenceScanner",
    "detect_references",
    # Translation-aware service
    "ReferenceService",
    # HTML
    "markup_references",
    "default_filter",
    # Parsing primitives
    "detect_book",
    "resolve_book",
    "parse_verses_string",
    "normalize_book_names",
    # Data
    "BOOKS_ORDERED",
    "BOOK_NAMES_ENGLISH",
    "BOOK_ABBREV_ENGLISH",
    "ENGLISH_ABBREV_INCLUDE",
    "ENGLISH_ABBREV_EXCLUDE",
    "OT_BOOKS_COUNT",
    "SINGLE_CHAPTER_BOOKS",
    "LAST_VERSE",
    "default_book_names",
    # Stats
    "num_chapters",
    "last_verse_of",
    "get_chapters",
    "get_verses",
    "total_book_verses",
]
