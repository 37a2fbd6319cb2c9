# scripture_refs/services/references/stats.py
"""Chapter and verse counts derived from the versification table."""

from .last_verse import LAST_VERSE


def num_chapters(book: str) -> int:
    """Return number of chapters in a book."""
    return len(LAST_VERSE[book])


def last_verse_of(book: str, chapter: int) -> int:
    """Return the last verse number of a chapter."""
    return LAST_VERSE[book][chapter - 1]


def get_chapters(book: str) -> list[int]:
    """Return chapter numbers for a book (e.g. [1, 2, 3] for Titus)."""
    return list(range(1, num_chapters(book) + 1))


def get_verses(book: str, chapter: int) -> list[int]:
    """Return verse numbers for a chapter of a book."""
    return list(range(1, last_verse_of(book, chapter) + 1))


def total_book_verses(book: str) -> int:
    """Return total number of verses in a book."""
    return sum(LAST_VERSE[book])
