# scripture_refs/services/references/detect.py
"""
Find passage references in free text.

Whole books are never detected ("Philemon"), only references that include
at least a chapter ("Philemon 1"). Shapes that look like references but
don't validate are dropped, and the scan resumes just after the first word
of the failed shape so that "in 1 Corinthians 9" still finds
"1 Corinthians 9".

Continuation ranges after a comma or semicolon are resolved against the
reference they follow:

    "Gen 1:1-2, 6"     -> Gen 1:1-2, Gen 1:6
    "Gen 1, 6"         -> Gen 1, Gen 6
    "Gen 1:1, 2 Cor 1" -> Gen 1:1, 2 Corinthians 1
"""

import logging
import re
from dataclasses import dataclass
from typing import Iterator, Optional

from .passage import PassageReference
from .reference_parser import (
    BookNamesArg,
    REGEX_ADDITIONAL_RANGE,
    REGEX_BOOK_CHECK,
    REGEX_COMPLETE,
    has_verse_sep,
)

logger = logging.getLogger(__name__)


_COMPLETE_RE = re.compile(REGEX_COMPLETE, re.IGNORECASE)
_ADDITIONAL_RANGE_RE = re.compile(REGEX_ADDITIONAL_RANGE, re.IGNORECASE)
_BOOK_CHECK_RE = re.compile(REGEX_BOOK_CHECK, re.IGNORECASE)

# Types whose end chapter is implied for a continuation with no chapter
_VERSE_LEVEL_TYPES = ('verse', 'range_verses', 'range_multi')


@dataclass(frozen=True)
class ReferenceMatch:
    """A reference found in text, with its position."""
    ref: PassageReference
    text: str
    index: int
    index_from_prev_match: int

    def to_dict(self) -> dict:
        return {
            "ref": self.ref.to_dict(),
            "text": self.text,
            "index": self.index,
            "index_from_prev_match": self.index_from_prev_match,
        }


class ReferenceScanner:
    """
    Lazy iterator over the references in a block of text.

    The scanner keeps its own cursor so callers that rewrite the text as
    they go can rely on `index_from_prev_match`, the distance from the end
    of the previous match (or the start of the text) to this match.
    Scanning is forward only; create a new scanner to start again.
    """

    def __init__(
        self,
        text: str,
        book_names: Optional[BookNamesArg] = None,
        exclude: Optional[list[str]] = None,
        min_chars: int = 2,
        match_from_start: bool = True,
    ):
        self.text = text
        self.book_names = book_names
        self.exclude = exclude
        self.min_chars = min_chars
        self.match_from_start = match_from_start

        self.pos = 0
        self.end_of_prev_match = 0
        # Main ref that following continuation ranges are relative to (if any)
        self._context: Optional[PassageReference] = None
        self._add_pos = 0

    def __iter__(self) -> "ReferenceScanner":
        return self

    def __next__(self) -> ReferenceMatch:
        if self._context is not None:
            match = self._next_continuation()
            if match:
                return match
            self._context = None
        match = self._next_main()
        if match is None:
            raise StopIteration
        return match

    def _parse(self, reference: str) -> Optional[PassageReference]:
        return PassageReference.from_string(
            reference, self.book_names, self.exclude, self.min_chars, self.match_from_start,
        )

    def _record(self, ref: PassageReference, text: str, index: int) -> ReferenceMatch:
        match = ReferenceMatch(
            ref=ref,
            text=text,
            index=index,
            index_from_prev_match=index - self.end_of_prev_match,
        )
        self.end_of_prev_match = index + len(text)
        return match

    def _next_main(self) -> Optional[ReferenceMatch]:
        # Loop until find a valid ref (not all shape matches will be valid)
        while True:
            found = _COMPLETE_RE.search(self.text, self.pos)
            if not found:
                return None

            match_text = found.group(0)
            ref = self._parse(match_text)
            if ref and ref.args_valid:
                self.pos = found.end()
                self._add_pos = found.end()

                # If immediately followed by a valid book name, skip check for additional ranges
                # E.g. (Gen 1:1,2 Cor 1:1)
                possible_book = _BOOK_CHECK_RE.match(self.text, self.pos)
                if possible_book and self._parse(possible_book.group(1)):
                    self._context = None
                else:
                    self._context = ref
                return self._record(ref, match_text, found.start())

            # If invalid, try next word as match might still have included a partial ref
            # e.g. "in 1 Corinthians 9" -> "in 1" -> "1 Corinthians 9"
            logger.debug(f"Discarding reference-like text: {match_text!r}")
            chars_to_next_word = match_text.find(' ', 1)
            if chars_to_next_word >= 1:
                self.pos = found.start() + chars_to_next_word + 1
            else:
                self.pos = found.end()

    def _next_continuation(self) -> Optional[ReferenceMatch]:
        context = self._context
        found = _ADDITIONAL_RANGE_RE.match(self.text, self._add_pos)
        if not found:
            return None

        range_text = found.group(1)

        # Prefix with book (and opt end chapter) from main ref
        prefix = context.book
        if not has_verse_sep(range_text) and context.type in _VERSE_LEVEL_TYPES:
            prefix += f"{context.end_chapter}:"
        ref = self._parse(prefix + range_text)
        if not ref or not ref.args_valid:
            return None

        self._add_pos = found.end()
        # Only move forward, continuations never rewind the main cursor
        self.pos = max(self.pos, self._add_pos)
        return self._record(ref, range_text, found.start(1))


def detect_references(
    text: str,
    book_names: Optional[BookNamesArg] = None,
    exclude: Optional[list[str]] = None,
    min_chars: int = 2,
    match_from_start: bool = True,
) -> Iterator[ReferenceMatch]:
    """
    Detect the text and position of passage references in a block of text.

    Args:
        text: Text to search
        book_names: (code, name) pairs or mapping (defaults to English)
        exclude: Names never treated as a book
        min_chars: Minimum length of a book name
        match_from_start: Whether abbreviations must match from the start of a name

    Returns:
        Iterator of ReferenceMatch in order of appearance
    """
    return ReferenceScanner(text, book_names, exclude, min_chars, match_from_start)
