# scripture_refs/services/references/passage.py
"""
PassageReference: a validated reference to a book, chapter, verse or range.

A reference is always valid once constructed. Out of range chapter/verse
numbers are clamped to their closest valid equivalent rather than rejected,
and `args_valid` records whether the original input was already valid.

Reference types:
    book            "Titus"
    chapter         "Titus 1"
    verse           "Titus 1:1"
    range_verses    "Titus 1:1-2"
    range_chapters  "Titus 1-2"
    range_multi     "Titus 1:1-2:2"

NOTE Books with a single chapter (Obadiah, Philemon, 2 John, 3 John, Jude)
never have the type "chapter" since "Jude 1" the chapter is the whole book.
A chapter reference for these books becomes a "book" reference, and
from_string() reads "Jude 2-3" as verses 2-3.
"""

from typing import Any, Mapping, Optional, Union

from .data import (
    BOOKS_ORDERED,
    BOOK_NAMES_ENGLISH,
    ENGLISH_ABBREV_EXCLUDE,
    OT_BOOKS_COUNT,
    SINGLE_CHAPTER_BOOKS,
    default_book_names,
)
from .stats import last_verse_of, num_chapters
from .reference_parser import (
    BookNamesArg,
    detect_book,
    normalize_book_names,
    parse_verses_string,
)


REFERENCE_TYPES = ('book', 'chapter', 'verse', 'range_verses', 'range_chapters', 'range_multi')

_POSITION_PROPS = ('start_chapter', 'start_verse', 'end_chapter', 'end_verse')


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class PassageReference:
    """
    An immutable, always valid, passage reference.

    Construct with either positional args or a partial reference mapping:
        PassageReference('jhn', 3, 16)
        PassageReference({'book': 'jhn', 'start_chapter': 3, 'start_verse': 16,
                          'end_verse': 18})

    Attributes:
        book: Book code (invalid codes become 'gen')
        type: One of REFERENCE_TYPES
        range: Whether type is one of the range types
        ot / nt: Which testament the book is in
        start_chapter, start_verse, end_chapter, end_verse: Always valid numbers
        args_valid: Whether the original args were valid before clamping
    """

    __slots__ = (
        'book', 'type', 'range', 'ot', 'nt', 'start_chapter', 'start_verse', 'end_chapter',
        'end_verse', 'args_valid', '_args',
    )

    def __init__(
        self,
        book_or_obj: Union[str, Mapping[str, Any]],
        chapter: Optional[int] = None,
        verse: Optional[int] = None,
    ):
        # Only keep known props so extraneous ones aren't preserved in `_args`
        if isinstance(book_or_obj, Mapping):
            args = {'book': book_or_obj.get('book')}
            for prop in _POSITION_PROPS:
                args[prop] = book_or_obj.get(prop)
        else:
            args = {
                'book': book_or_obj,
                'start_chapter': chapter,
                'start_verse': verse,
                'end_chapter': None,
                'end_verse': None,
            }

        chapters_given = _is_int(args['start_chapter']) or _is_int(args['end_chapter'])
        verses_given = _is_int(args['start_verse']) or _is_int(args['end_verse'])

        # Defaults
        book = args['book']
        start_chapter = args['start_chapter'] if args['start_chapter'] is not None else 1
        start_verse = args['start_verse'] if args['start_verse'] is not None else 1
        end_chapter = args['end_chapter'] if args['end_chapter'] is not None else start_chapter
        # If end_chapter given then dealing with whole chapters (999 is clamped to last verse)
        if args['end_verse'] is not None:
            end_verse = args['end_verse']
        else:
            end_verse = 999 if args['end_chapter'] else 1

        if book not in BOOKS_ORDERED:
            book = 'gen'
        chapter_count = num_chapters(book)

        # Ensure start chapter is valid
        if start_chapter < 1:
            start_chapter = 1
            start_verse = 1
        elif start_chapter > chapter_count:
            start_chapter = chapter_count
            start_verse = last_verse_of(book, chapter_count)

        start_verse = min(max(start_verse, 1), last_verse_of(book, start_chapter))

        # Ensure end is not before start
        if (end_chapter, end_verse) < (start_chapter, start_verse):
            end_chapter = start_chapter
            end_verse = start_verse

        # Already know end chapter is same or later than start
        if end_chapter > chapter_count:
            end_chapter = chapter_count
            end_verse = last_verse_of(book, chapter_count)

        end_verse = min(max(end_verse, 1), last_verse_of(book, end_chapter))

        # Determine type
        chapters_same = start_chapter == end_chapter
        if chapters_same and start_verse == end_verse:
            if chapters_given:
                ref_type = 'verse' if verses_given else 'chapter'
            else:
                ref_type = 'book'
        elif chapters_same:
            ref_type = 'range_verses'
        else:
            ref_type = 'range_multi' if verses_given else 'range_chapters'

        # A range that happens to complete its chapters is a range of chapters
        if (ref_type == 'range_multi' and start_verse == 1
                and end_verse == last_verse_of(book, end_chapter)):
            ref_type = 'range_chapters'

        # A chapter of a single chapter book is just the book
        if ref_type == 'chapter' and book in SINGLE_CHAPTER_BOOKS:
            ref_type = 'book'

        values = {
            'book': book,
            'type': ref_type,
            'range': ref_type.startswith('range_'),
            'ot': BOOKS_ORDERED.index(book) < OT_BOOKS_COUNT,
            'start_chapter': start_chapter,
            'start_verse': start_verse,
            'end_chapter': end_chapter,
            'end_verse': end_verse,
            '_args': args,
        }
        values['nt'] = not values['ot']
        values['args_valid'] = self._determine_args_valid(args, values)
        for name, value in values.items():
            object.__setattr__(self, name, value)

    @staticmethod
    def _determine_args_valid(args: dict, values: dict) -> bool:
        """Whether the given args survived validation unchanged and made sense."""
        if args['book'] != values['book']:
            return False
        for prop in _POSITION_PROPS:
            if _is_int(args[prop]) and args[prop] != values[prop]:
                return False

        # NOTE Already know that no given numbers are 0 due to above
        if not args['start_chapter'] and (
                args['end_chapter'] or args['start_verse'] or args['end_verse']):
            return False  # e.g. Matt :1
        if args['end_verse'] and not args['start_verse']:
            return False  # e.g. Matt 1:-1
        if args['start_verse'] and args['end_chapter'] and not args['end_verse']:
            return False  # e.g. Matt 1:1-2:
        return True

    def __setattr__(self, name, value):
        raise AttributeError(f"PassageReference is immutable (cannot set '{name}')")

    def __delattr__(self, name):
        raise AttributeError(f"PassageReference is immutable (cannot delete '{name}')")

    # -------------------------------------------------------------------------
    # Alternate constructors
    # -------------------------------------------------------------------------

    @classmethod
    def from_string(
        cls,
        reference: str,
        book_names: Optional[BookNamesArg] = None,
        exclude: Optional[list[str]] = None,
        min_chars: int = 2,
        match_from_start: bool = True,
    ) -> Optional["PassageReference"]:
        """
        Parse a human passage reference string.

        Numbers that can't be parsed are ignored rather than rejected, so
        "Gen 3:x" is Genesis 3.

        Args:
            reference: e.g. "1 Cor 9:18", "Jn 3:16-18", "Ps 23"
            book_names: (code, name) pairs or mapping. A book may be listed
                        more than once. Defaults to English names.
            exclude: Names that should never be treated as a book. Defaults to
                     common English words only when book_names isn't given.
            min_chars: Minimum length of the book part (before cleaning, so
                       "So. 1" may pass where "So 1" doesn't)
            match_from_start: Whether abbreviations must match from the start
                              of a book name

        Returns:
            PassageReference, or None if no book could be identified
        """
        # NOTE English isn't always included as could create false positives in other languages
        if book_names is None:
            book_names = default_book_names()
            if exclude is None:
                exclude = list(ENGLISH_ABBREV_EXCLUDE)
        book_names_list = normalize_book_names(book_names)

        reference = reference.strip()

        # Verses start at the first digit, unless at start of string (e.g. 1 Sam)
        verses_start = len(reference)
        for i, char in enumerate(reference[1:], start=1):
            if char.isdigit():
                verses_start = i
                break

        # Check before cleaning so that "So. 1" works but "So 1" doesn't (if min were 3)
        book_str = reference[:verses_start].strip()
        if len(book_str) < min_chars:
            return None

        book_code = detect_book(book_str, book_names_list, exclude, match_from_start)
        if not book_code:
            return None

        verses_str = reference[verses_start:]
        verses = parse_verses_string(verses_str)

        # Interpret single numbers as verses for single chapter books
        if (book_code in SINGLE_CHAPTER_BOOKS and verses['start_chapter']
                and verses['start_verse'] is None and verses['end_verse'] is None):
            verses = parse_verses_string('1:' + verses_str)

        return cls({'book': book_code, **verses})

    @classmethod
    def from_refs(cls, start: "PassageReference", end: "PassageReference") -> "PassageReference":
        """Return a reference from the start of the first ref to the end of the second."""
        return cls({
            'book': start.book,
            'start_chapter': start.start_chapter,
            'start_verse': start.start_verse,
            'end_chapter': end.end_chapter,
            'end_verse': end.end_verse,
        })

    @classmethod
    def from_serialized(cls, code: str) -> "PassageReference":
        """Restore a reference from the output of to_serialized() (e.g. "tit2:2-3")."""
        return cls({'book': code[:3], **parse_verses_string(code[3:])})

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def get_book_string(self, book_names: Optional[BookNamesArg] = None) -> str:
        """Get name for book (defaults to English when names not provided)."""
        names = dict(BOOK_NAMES_ENGLISH)
        if book_names:
            names.update(normalize_book_names(book_names))
        return names[self.book]

    def get_verses_string(self, verse_sep: str = ':', range_sep: str = '-') -> str:
        """Get string representation of just the chapter/verse part."""
        if self.type == 'book':
            return ''
        if self.type == 'chapter':
            return f"{self.start_chapter}"
        if self.type == 'range_chapters':
            return f"{self.start_chapter}{range_sep}{self.end_chapter}"
        if self.type == 'verse':
            return f"{self.start_chapter}{verse_sep}{self.start_verse}"

        out = f"{self.start_chapter}{verse_sep}{self.start_verse}{range_sep}"
        if self.end_chapter != self.start_chapter:
            out += f"{self.end_chapter}{verse_sep}"
        return out + f"{self.end_verse}"

    def to_string(
        self,
        book_names: Optional[BookNamesArg] = None,
        verse_sep: str = ':',
        range_sep: str = '-',
    ) -> str:
        """Format as a readable string, e.g. "Titus 1:1-2"."""
        out = self.get_book_string(book_names) + ' ' + self.get_verses_string(verse_sep, range_sep)
        return out.strip()

    def to_serialized(self) -> str:
        """Compact code that from_serialized() restores exactly (e.g. "tit2:2-3")."""
        return self.book + self.get_verses_string()

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "book": self.book,
            "type": self.type,
            "range": self.range,
            "ot": self.ot,
            "nt": self.nt,
            "start_chapter": self.start_chapter,
            "start_verse": self.start_verse,
            "end_chapter": self.end_chapter,
            "end_verse": self.end_verse,
            "args_valid": self.args_valid,
            "string": self.to_string(),
            "serialized": self.to_serialized(),
        }

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"<PassageReference {self.to_serialized()} ({self.type})>"

    # -------------------------------------------------------------------------
    # Comparison
    # -------------------------------------------------------------------------

    def _key(self) -> tuple:
        return (self.type, self.book, self.start_chapter, self.start_verse, self.end_chapter,
                self.end_verse)

    def equals(self, ref: "PassageReference") -> bool:
        """Whether this reference is the same as the one provided."""
        return self._key() == ref._key()

    def __eq__(self, other) -> bool:
        if not isinstance(other, PassageReference):
            return NotImplemented
        return self.equals(other)

    def __hash__(self) -> int:
        return hash(self._key())

    def is_before(self, chapter: int, verse: int) -> bool:
        """Whether this reference ends before the given chapter/verse."""
        return (self.end_chapter, self.end_verse) < (chapter, verse)

    def is_after(self, chapter: int, verse: int) -> bool:
        """Whether this reference starts after the given chapter/verse."""
        return (self.start_chapter, self.start_verse) > (chapter, verse)

    def includes(self, chapter: int, verse: int) -> bool:
        """Whether this reference includes the given chapter/verse."""
        return not self.is_before(chapter, verse) and not self.is_after(chapter, verse)

    # -------------------------------------------------------------------------
    # Derived references
    # -------------------------------------------------------------------------

    def total_verses(self) -> int:
        """Total number of verses included (books and chapters count all their verses)."""
        end = self.get_end()
        if self.start_chapter == end.end_chapter:
            return end.end_verse - self.start_verse + 1

        book = self.book
        count = last_verse_of(book, self.start_chapter) - self.start_verse + 1
        for chapter in range(self.start_chapter + 1, end.end_chapter):
            count += last_verse_of(book, chapter)
        return count + end.end_verse

    def get_start(self) -> "PassageReference":
        """Reference for just the start verse of this reference."""
        return PassageReference({
            'book': self.book,
            'start_chapter': self.start_chapter,
            'start_verse': self.start_verse,
        })

    def get_end(self) -> "PassageReference":
        """Reference for just the end verse of this reference."""
        if self.type == 'book':
            # Users expect end of book, even though this type isn't a range
            chapter = num_chapters(self.book)
            verse = last_verse_of(self.book, chapter)
        elif self.type == 'chapter':
            chapter, verse = self.start_chapter, last_verse_of(self.book, self.start_chapter)
        else:
            chapter, verse = self.end_chapter, self.end_verse
        return PassageReference({'book': self.book, 'start_chapter': chapter,
                                 'start_verse': verse})

    def get_prev_verse(self, prev_to_end: bool = False) -> Optional["PassageReference"]:
        """
        Reference for the verse before this one (accounting for chapters).

        Relative to the start verse unless prev_to_end. Never a range.
        Returns None for the first verse of the book.
        """
        chapter = self.end_chapter if prev_to_end else self.start_chapter
        verse = self.end_verse if prev_to_end else self.start_verse

        if chapter == 1 and verse == 1:
            return None

        if verse == 1:
            chapter -= 1
            verse = last_verse_of(self.book, chapter)
        else:
            verse -= 1

        return PassageReference({'book': self.book, 'start_chapter': chapter,
                                 'start_verse': verse})

    def get_next_verse(self, after_end: bool = False) -> Optional["PassageReference"]:
        """
        Reference for the verse after this one (accounting for chapters).

        Relative to the start verse unless after_end. Never a range.
        Returns None for the last verse of the book.
        """
        chapter = self.end_chapter if after_end else self.start_chapter
        verse = self.end_verse if after_end else self.start_verse

        last_chapter = num_chapters(self.book)
        if chapter == last_chapter and verse == last_verse_of(self.book, last_chapter):
            return None

        if verse == last_verse_of(self.book, chapter):
            chapter += 1
            verse = 1
        else:
            verse += 1

        return PassageReference({'book': self.book, 'start_chapter': chapter,
                                 'start_verse': verse})
