# scripture_refs/tests/test_detect.py
"""
Tests for detect.py - finding references in free text.
"""

import os
import sys

# Add repo root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from scripture_refs.services.references import detect_references
from scripture_refs.services.references.reference_parser import clean_book_name


def _first(text: str):
    return next(detect_references(text), None)


def _texts(text: str) -> list[str]:
    return [match.text for match in detect_references(text)]


def test_single_references():
    """Test detecting a single reference."""
    print("\n=== Testing single references ===")

    assert _first("Titus 2:3").text == "Titus 2:3"
    for ref in ["Tit 2", "Tit 2:3", "Tit 2-3", "Tit 2:2-3", "Tit 2:2-3:3"]:
        assert _first(ref).text == ref, ref
    print("✓ all reference types except book")

    assert _first("Titus") is None
    print("✓ whole books are not detected")

    assert _first("Titus 9") is None
    print("✓ invalid references are not detected")

    assert _first("About Titus 2:3 and more").text == "Titus 2:3"
    assert _first("About (Titus 2:3) and more").text == "Titus 2:3"
    print("✓ reference deep in text")

    match = _first("Read in 1 Corinthians 9 today")
    assert match.text == "1 Corinthians 9"
    assert match.ref.book == "1co" and match.ref.start_chapter == 9
    print("✓ backtracks past words that aren't books")

    assert _first("Titus 2x") is None
    assert _first("Titus 12x") is None
    assert _first("Titus 2@") is None
    print("✓ trailing letters or symbols reject the match")

    print("single references: All tests passed!")


def test_multiple_references():
    """Test detecting several references in order."""
    print("\n=== Testing multiple references ===")

    text = "Multiple Gen 2:3 refs like John 3:16 and Matt 10:8"
    assert _texts(text) == ["Gen 2:3", "John 3:16", "Matt 10:8"]
    print("✓ multiple references in order")

    detector = detect_references(text)
    result = ""
    remaining = text
    expected_gaps = [9, 11, 5]
    for match, gap in zip(detector, expected_gaps):
        assert match.index_from_prev_match == gap
        result += remaining[:match.index_from_prev_match] + "X"
        remaining = remaining[match.index_from_prev_match + len(match.text):]
    assert next(detector, None) is None
    assert result == "Multiple X refs like X and X"
    print("✓ index_from_prev_match allows rewriting text as matches arrive")

    matches = list(detect_references(text))
    assert [m.index for m in matches] == [9, 27, 41]
    print("✓ absolute indexes")

    print("multiple references: All tests passed!")


def test_relative_references():
    """Test continuation ranges after commas."""
    print("\n=== Testing relative references ===")

    def relative(text, ref_type, start_chapter, start_verse):
        detector = detect_references(text)
        next(detector)
        ref = next(detector).ref
        assert (ref.type, ref.start_chapter, ref.start_verse) == \
            (ref_type, start_chapter, start_verse), text

    # Single number for chapter
    relative("Gen 1,6", "chapter", 6, 1)
    relative("Gen 1-2,6", "chapter", 6, 1)
    print("✓ single number after chapters is a chapter")

    # Single number for verse
    relative("Gen 1:1,6", "verse", 1, 6)
    relative("Gen 1:1-2,6", "verse", 1, 6)
    relative("Gen 1:1-2:2,6", "verse", 2, 6)
    print("✓ single number after verses is a verse of the end chapter")

    # Chapter:verse
    relative("Gen 1,6:1", "verse", 6, 1)
    relative("Gen 1-2,6:1", "verse", 6, 1)
    relative("Gen 1:1,6:1", "verse", 6, 1)
    relative("Gen 1:1-2,6:1", "verse", 6, 1)
    relative("Gen 1:1-2:2,6:1", "verse", 6, 1)
    print("✓ chapter:verse after anything")

    assert _texts("Matt 10:6, 8; 12") == ["Matt 10:6", "8", "12"]
    print("✓ several continuations")

    assert _texts("Gen 1:1, 2 Cor 1:1") == ["Gen 1:1", "2 Cor 1:1"]
    print("✓ a following book name isn't a continuation")

    text = "1 Cor 9:18, 2 Cor 2:17 and 2 Cor 11:7, 9 cor"
    matches = list(detect_references(text))
    assert [m.text for m in matches] == ["1 Cor 9:18", "2 Cor 2:17", "2 Cor 11:7", "9"]
    assert str(matches[-1].ref) == "2 Corinthians 11:9"
    print("✓ continuation numbers followed by words")

    assert _texts("Gen 1:1, 99") == ["Gen 1:1"]
    print("✓ invalid continuation is dropped")

    print("relative references: All tests passed!")


def test_spacing():
    """Test 0-2 spaces are allowed between segments."""
    print("\n=== Testing spacing ===")

    assert str(_first("Tit1:1-2:2").ref) == "Titus 1:1-2:2"
    assert str(_first("Tit  1  :  1  -  2  :  2").ref) == "Titus 1:1-2:2"
    assert _first("Tit   1:1-2:2") is None
    print("✓ up to two spaces")


def test_custom_names():
    """Test detection with another language's names."""
    print("\n=== Testing custom names ===")

    names = [("jhn", "Juan"), ("gen", "Génesis")]
    matches = list(detect_references("Lee Juan 3:16 y Génesis 1:1", names, []))
    assert [m.text for m in matches] == ["Juan 3:16", "Génesis 1:1"]
    assert [m.ref.book for m in matches] == ["jhn", "gen"]
    print("✓ accented local names")

    match = matches[0].to_dict()
    assert match["text"] == "Juan 3:16" and match["ref"]["serialized"] == "jhn3:16"
    print("✓ to_dict")


def test_name_normalising_cached():
    """Test candidate names are normalised once, not on every lookup."""
    print("\n=== Testing book name cache ===")

    clean_book_name.cache_clear()
    text = "Read John 3:16 and Rom 8:28. " * 200
    matches = list(detect_references(text))
    assert len(matches) == 400

    info = clean_book_name.cache_info()
    assert info.misses < 300, info
    assert info.hits > 20 * info.misses, info
    print("✓ long texts reuse normalised names")


def main():
    """Run all tests."""
    print("=" * 60)
    print("Reference Detection Test Suite")
    print("=" * 60)

    test_single_references()
    test_multiple_references()
    test_relative_references()
    test_spacing()
    test_custom_names()
    test_name_normalising_cached()

    print("\n" + "=" * 60)
    print("ALL TESTS PASSED!")
    print("=" * 60)


if __name__ == "__main__":
    main()
