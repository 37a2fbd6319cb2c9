# scripture_refs/services/references/reference_service.py
"""
Translation-aware reference parsing.

Remembers the local book names of translations so references can be parsed,
detected and rendered in the language of a translation, with English as a
fallback.
"""

import logging
from typing import Iterator, Optional, Sequence, Union

from scripture_refs.core.config import DEFAULT_LANGUAGE
from .data import (
    BOOK_ABBREV_ENGLISH,
    BOOK_NAMES_ENGLISH,
    ENGLISH_ABBREV_EXCLUDE,
    ENGLISH_ABBREV_INCLUDE,
)
from .detect import ReferenceMatch, detect_references
from .passage import PassageReference

logger = logging.getLogger(__name__)


# Languages written with Chinese-like characters (no spaces, single char abbreviations)
CHINESE_LIKE_LANGUAGES = (
    'zho',  # Chinese macrolanguage group
    'lzh', 'gan', 'hak', 'czh', 'cjy', 'cmn', 'mnp', 'cdo',  # Part of 'zho' group
    'nan', 'czo', 'cnp', 'cpx', 'csp', 'wuu', 'hsn', 'yue',  # Part of 'zho' group
    'jpn',  # Japanese
    'kor',  # Korean
)

TranslationArg = Union[str, Sequence[str], None]


class ReferenceService:
    """
    Parse, detect and render references using translations' book names.

    Translations are identified as "<language>_<name>" (e.g. "spa_rvr") and
    the language of the first translation given decides how strictly book
    names are matched.

    Usage:
        service = ReferenceService()
        service.register_book_names("spa_rvr", {
            "jhn": {"normal": "Juan", "abbrev": "Jn"},
        })

        ref = service.string_to_reference("Juan 3:16", "spa_rvr")
        for match in service.detect_references("Lee Juan 3:16", "spa_rvr"):
            print(match.ref)

        service.reference_to_string(ref, "spa_rvr")  # "Juan 3:16"
    """

    def __init__(self):
        # translation -> {code: {"normal": name, "abbrev": abbrev}}
        self._local_book_names: dict[str, dict[str, dict[str, str]]] = {}

    def register_book_names(self, translation: str, book_names: dict[str, dict[str, str]]):
        """Remember local book names (and abbreviations) for a translation."""
        self._local_book_names[translation] = {
            code: dict(name_types) for code, name_types in book_names.items()
        }
        logger.info(f"Registered {len(book_names)} book names for {translation}")

    def get_book_names(self, translation: str) -> dict[str, dict[str, str]]:
        """Return the local book names registered for a translation (if any)."""
        return self._local_book_names.get(translation, {})

    @property
    def translations(self) -> list[str]:
        return list(self._local_book_names)

    def from_string_args(
        self,
        translation: TranslationArg = None,
        always_detect_english: bool = True,
    ) -> tuple[list[tuple[str, str]], list[str], int, bool]:
        """
        Prepare (book_names, exclude, min_chars, match_from_start) for parsing.

        Translation names come first so they take priority, and English is
        appended last when always_detect_english.
        """
        translations = [translation] if isinstance(translation, str) else list(translation or [])

        book_names = []
        for trans in translations:
            for code, name_types in self.get_book_names(trans).items():
                if name_types.get('normal'):
                    book_names.append((code, name_types['normal']))
                if name_types.get('abbrev'):
                    book_names.append((code, name_types['abbrev']))

        # Optionally add English last so is lowest priority
        if always_detect_english:
            book_names.extend(BOOK_NAMES_ENGLISH.items())
            book_names.extend(ENGLISH_ABBREV_INCLUDE)

        # Detect language as whatever first translation given has
        lang = translations[0].split('_')[0] if translations else DEFAULT_LANGUAGE

        exclude = list(ENGLISH_ABBREV_EXCLUDE) if lang == 'eng' else []
        chinese_like = lang in CHINESE_LIKE_LANGUAGES
        min_chars = 1 if chinese_like else 2
        match_from_start = not chinese_like

        return book_names, exclude, min_chars, match_from_start

    def string_to_reference(
        self,
        text: str,
        translation: TranslationArg = None,
        always_detect_english: bool = True,
    ) -> Optional[PassageReference]:
        """
        Parse a single reference string (validating it).

        Supports only single passages, use detect_references() for "Matt 10:6,8".
        """
        return PassageReference.from_string(
            text, *self.from_string_args(translation, always_detect_english))

    def detect_references(
        self,
        text: str,
        translation: TranslationArg = None,
        always_detect_english: bool = True,
    ) -> Iterator[ReferenceMatch]:
        """Detect references in a block of text using the translations' book names."""
        return detect_references(
            text, *self.from_string_args(translation, always_detect_english))

    def reference_to_string(
        self,
        reference: PassageReference,
        translation: Optional[str] = None,
        abbreviate: bool = False,
    ) -> str:
        """
        Render a reference using a translation's book names.

        English is used for any book the translation has no name for.
        """
        book_names = dict(BOOK_ABBREV_ENGLISH if abbreviate else BOOK_NAMES_ENGLISH)

        if translation:
            name_prop = 'abbrev' if abbreviate else 'normal'
            for book, props in self.get_book_names(translation).items():
                if props.get(name_prop):
                    book_names[book] = props[name_prop]

        return reference.to_string(book_names)
