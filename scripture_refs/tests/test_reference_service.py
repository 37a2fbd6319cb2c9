# scripture_refs/tests/test_reference_service.py
"""
Tests for reference_service.py and markup.py - translation-aware parsing
and HTML linkification.
"""

import os
import sys

# Add repo root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from bs4 import BeautifulSoup

from scripture_refs.services.references import (
    PassageReference,
    ReferenceService,
    markup_references,
)


SPANISH_NAMES = {
    "jhn": {"normal": "Juan", "abbrev": "Jn"},
    "gen": {"normal": "Génesis", "abbrev": "Gn"},
}

CHINESE_NAMES = {
    "jhn": {"normal": "约翰福音", "abbrev": "约"},
}


def _service() -> ReferenceService:
    service = ReferenceService()
    service.register_book_names("spa_rvr", SPANISH_NAMES)
    service.register_book_names("cmn_cu", CHINESE_NAMES)
    return service


def test_from_string_args():
    """Test parser arguments prepared per translation."""
    print("\n=== Testing from_string_args ===")
    service = _service()

    names, exclude, min_chars, match_from_start = service.from_string_args("spa_rvr")
    assert names[:4] == [("jhn", "Juan"), ("jhn", "Jn"), ("gen", "Génesis"), ("gen", "Gn")]
    assert ("gen", "Genesis") in names
    assert exclude == [] and min_chars == 2 and match_from_start
    print("✓ translation names first, English last")

    names, _exclude, _min, _start = service.from_string_args("spa_rvr", False)
    assert len(names) == 4
    print("✓ English optional")

    _names, exclude, _min, _start = service.from_string_args()
    assert "so" in exclude
    print("✓ English exclusions when no translation")

    _names, exclude, min_chars, match_from_start = service.from_string_args(["cmn_cu", "spa_rvr"])
    assert exclude == [] and min_chars == 1 and not match_from_start
    print("✓ first translation's language decides Chinese-like matching")

    print("from_string_args: All tests passed!")


def test_string_to_reference():
    """Test parsing with local names."""
    print("\n=== Testing string_to_reference ===")
    service = _service()

    assert service.string_to_reference("Juan 3:16", "spa_rvr") == PassageReference("jhn", 3, 16)
    assert service.string_to_reference("John 3:16", "spa_rvr") == PassageReference("jhn", 3, 16)
    assert service.string_to_reference("Genesis 1", "spa_rvr", False) is None
    print("✓ local and English names")

    assert service.string_to_reference("So 1") is None
    assert service.string_to_reference("So 1", "spa_rvr").book == "sng"
    print("✓ English exclusions only apply to English")

    ref = service.string_to_reference("约3:16", "cmn_cu")
    assert ref == PassageReference("jhn", 3, 16)
    print("✓ single character Chinese abbreviation")

    print("string_to_reference: All tests passed!")


def test_detect_and_render():
    """Test detection and rendering with local names."""
    print("\n=== Testing detect_references / reference_to_string ===")
    service = _service()

    matches = list(service.detect_references("Lee Juan 3:16 y Jn 1:1", "spa_rvr"))
    assert [m.text for m in matches] == ["Juan 3:16", "Jn 1:1"]
    print("✓ detect_references")

    ref = PassageReference("jhn", 3, 16)
    assert service.reference_to_string(ref, "spa_rvr") == "Juan 3:16"
    assert service.reference_to_string(ref, "spa_rvr", abbreviate=True) == "Jn 3:16"
    assert service.reference_to_string(PassageReference("ezk", 1), abbreviate=True) == "Ezek 1"
    assert service.reference_to_string(PassageReference("ezk", 1), "spa_rvr") == "Ezekiel 1"
    print("✓ reference_to_string falls back to English")

    assert service.translations == ["spa_rvr", "cmn_cu"]
    assert service.get_book_names("missing") == {}
    print("✓ registered translations")

    print("detect / render: All tests passed!")


def test_markup_references():
    """Test linkifying references in HTML."""
    print("\n=== Testing markup_references ===")

    html, matches = markup_references("<p>See John 3:16 and Gen 1:1.</p>")
    soup = BeautifulSoup(html, "html.parser")
    links = soup.find_all("a", class_="fb-enhancer-link")
    assert [a["data-ref"] for a in links] == ["jhn3:16", "gen1:1"]
    assert [a.get_text() for a in links] == ["John 3:16", "Gen 1:1"]
    assert soup.get_text() == "See John 3:16 and Gen 1:1."
    assert len(matches) == 2
    print("✓ references become links, text preserved")

    html, matches = markup_references("<h2>John 3:16</h2><p>Rom 8:28</p>")
    soup = BeautifulSoup(html, "html.parser")
    assert soup.h2.find("a") is None
    assert soup.p.a["data-ref"] == "rom8:28"
    print("✓ headings skipped by default")

    html, matches = markup_references('<p><a href="/x">John 3:16</a> and Rom 8:28</p>')
    soup = BeautifulSoup(html, "html.parser")
    assert [a.get("data-ref") for a in soup.find_all("a")] == [None, "rom8:28"]
    print("✓ existing links left alone")

    html, matches = markup_references(
        "<blockquote>John 3:16</blockquote><h1>Rom 8:28</h1>",
        element_filter=lambda element: element.name != "blockquote",
    )
    soup = BeautifulSoup(html, "html.parser")
    assert soup.blockquote.find("a") is None
    assert soup.h1.a["data-ref"] == "rom8:28"
    print("✓ custom filter")

    html, matches = markup_references("<p>Juan 3:16</p>", _service(), ["spa_rvr"])
    assert 'data-ref="jhn3:16"' in html
    print("✓ translation names")

    html, matches = markup_references("<p>Nothing here</p>")
    assert html == "<p>Nothing here</p>" and matches == []
    print("✓ no references leaves html unchanged")

    print("markup_references: All tests passed!")


def main():
    """Run all tests."""
    print("=" * 60)
    print("Reference Service Test Suite")
    print("=" * 60)

    test_from_string_args()
    test_string_to_reference()
    test_detect_and_render()
    test_markup_references()

    print("\n" + "=" * 60)
    print("ALL TESTS PASSED!")
    print("=" * 60)


if __name__ == "__main__":
    main()
