# scripture_refs/tests/test_reference_parser.py
"""
Tests for reference_parser.py - book resolution and verse string parsing.
"""

import os
import sys

# Add repo root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from scripture_refs.services.references import (
    BOOKS_ORDERED,
    ENGLISH_ABBREV_EXCLUDE,
    LAST_VERSE,
    default_book_names,
    get_chapters,
    last_verse_of,
    num_chapters,
    get_verses,
    total_book_verses,
)
from scripture_refs.services.references.reference_parser import (
    clean_book_name,
    detect_book,
    parse_int,
    parse_verses_string,
    resolve_book,
)


def _verses(sc=None, sv=None, ec=None, ev=None):
    return {"start_chapter": sc, "start_verse": sv, "end_chapter": ec, "end_verse": ev}


def test_parse_verses_string():
    """Test splitting verse strings into numbers."""
    print("\n=== Testing parse_verses_string ===")

    assert parse_verses_string("3") == _verses(3)
    assert parse_verses_string("1-2") == _verses(1, None, 2)
    print("✓ chapters only")

    assert parse_verses_string("3:16") == _verses(3, 16)
    assert parse_verses_string("3:16-18") == _verses(3, 16, None, 18)
    assert parse_verses_string("1:1-2:2") == _verses(1, 1, 2, 2)
    print("✓ verses and ranges")

    assert parse_verses_string(" 3 : 16 – 18 ") == _verses(3, 16, None, 18)
    assert parse_verses_string("3.16") == _verses(3, 16)
    assert parse_verses_string("3：16") == _verses(3, 16)
    print("✓ normalises whitespace, separators and dashes")

    assert parse_verses_string("3:16a") == _verses(3, 16)
    assert parse_verses_string("3:x") == _verses(3)
    assert parse_verses_string("") == _verses()
    print("✓ unparseable numbers are None")

    print("parse_verses_string: All tests passed!")


def test_parse_int():
    """Test leading integer parsing."""
    print("\n=== Testing parse_int ===")

    assert parse_int("16a") == 16
    assert parse_int(" 14") == 14
    assert parse_int("x") is None
    assert parse_int("") is None
    assert parse_int(None) is None
    print("✓ parse_int: leading digits or None")


def test_clean_book_name():
    """Test book name normalisation."""
    print("\n=== Testing clean_book_name ===")

    assert clean_book_name("1 Cor.") == "1cor"
    assert clean_book_name("First John") == "1john"
    assert clean_book_name("II Kings") == "2kings"
    assert clean_book_name("iii John") == "3john"
    assert clean_book_name("2nd Timothy") == "2timothy"
    assert clean_book_name("Song of Songs") == "songofsongs"
    print("✓ clean_book_name: ordinals and punctuation")


def test_detect_book():
    """Test resolving book names to codes."""
    print("\n=== Testing detect_book ===")
    names = default_book_names()

    assert detect_book("John", names) == "jhn"
    assert detect_book("1 Cor.", names) == "1co"
    assert detect_book("2tim", names) == "2ti"
    print("✓ exact and unique prefix matches")

    assert detect_book("Jn", names) == "jhn"
    assert detect_book("Phil", names) == "php"
    assert detect_book("Jud", names) == "jud"
    print("✓ special abbreviations win over ambiguous prefixes")

    assert detect_book("Ju", names) is None
    assert detect_book("j", names) is None
    assert detect_book("nothing", names) is None
    print("✓ ambiguous prefix and unknown names return None")

    assert detect_book("Titus", names) == detect_book("Tit", names) == "tit"
    assert detect_book("1sam", names) == "1sa"
    assert detect_book("1am", names) is None
    print("✓ numbered books anchor their first two characters")

    assert detect_book("Gnss", names) == "gen"
    assert detect_book("1tm", names) == "1ti"
    print("✓ fuzzy matches with dropped vowels")

    assert detect_book("gen", []) == "gen"
    assert detect_book("1co", []) == "1co"
    print("✓ raw book codes")

    assert detect_book("So", names, ENGLISH_ABBREV_EXCLUDE) is None
    assert detect_book("So", names) == "sng"
    assert detect_book("", names) is None
    assert detect_book("...", names) is None
    print("✓ excluded and empty names")

    chinese = [("jhn", "約翰福音")]
    assert detect_book("翰", chinese, match_from_start=False) == "jhn"
    assert detect_book("翰", chinese) is None
    print("✓ match_from_start controls anchoring")

    assert resolve_book is detect_book
    assert detect_book("Juan", {"jhn": "Juan"}) == "jhn"
    print("✓ accepts a mapping of names")

    print("detect_book: All tests passed!")


def test_versification_table():
    """Test the versification table and stats helpers."""
    print("\n=== Testing versification table ===")

    assert len(BOOKS_ORDERED) == 66
    assert set(LAST_VERSE) == set(BOOKS_ORDERED)
    assert all(len(chapters) >= 1 and min(chapters) >= 1 for chapters in LAST_VERSE.values())
    print("✓ every book has chapters")

    assert sum(total_book_verses(book) for book in BOOKS_ORDERED) == 31102
    assert LAST_VERSE["psa"][118] == 176
    assert LAST_VERSE["3jn"] == (14,)
    print("✓ English verse counts")

    assert get_chapters("tit") == [1, 2, 3]
    assert get_verses("tit", 1) == list(range(1, 17))
    assert total_book_verses("tit") == 46
    assert num_chapters("tit") == 3 and last_verse_of("tit", 1) == 16
    assert num_chapters("psa") == 150 and last_verse_of("psa", 119) == 176
    print("✓ stats helpers")

    print("versification table: All tests passed!")


def main():
    """Run all tests."""
    print("=" * 60)
    print("Reference Parser Test Suite")
    print("=" * 60)

    test_parse_verses_string()
    test_parse_int()
    test_clean_book_name()
    test_detect_book()
    test_versification_table()

    print("\n" + "=" * 60)
    print("ALL TESTS PASSED!")
    print("=" * 60)


if __name__ == "__main__":
    main()
