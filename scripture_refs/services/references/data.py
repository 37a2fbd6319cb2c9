# scripture_refs/services/references/data.py
"""
Static book data shared by the reference parser, model and detector.

Book codes are the lowercase three character USX codes (e.g. "gen", "2th").
"""

from types import MappingProxyType


# Bible book codes in traditional order
BOOKS_ORDERED = (
    'gen', 'exo', 'lev', 'num', 'deu', 'jos', 'jdg', 'rut', '1sa', '2sa', '1ki', '2ki', '1ch',
    '2ch', 'ezr', 'neh', 'est', 'job', 'psa', 'pro', 'ecc', 'sng', 'isa', 'jer', 'lam', 'ezk',
    'dan', 'hos', 'jol', 'amo', 'oba', 'jon', 'mic', 'nam', 'hab', 'zep', 'hag', 'zec', 'mal',
    'mat', 'mrk', 'luk', 'jhn', 'act', 'rom', '1co', '2co', 'gal', 'eph', 'php', 'col', '1th',
    '2th', '1ti', '2ti', 'tit', 'phm', 'heb', 'jas', '1pe', '2pe', '1jn', '2jn', '3jn', 'jud',
    'rev',
)

# Books before this index are Old Testament
OT_BOOKS_COUNT = 39

# Books with only one chapter (a chapter reference is the same as the whole book)
SINGLE_CHAPTER_BOOKS = ('oba', 'phm', '2jn', '3jn', 'jud')


# Usual English names of Bible books
BOOK_NAMES_ENGLISH = MappingProxyType({
    'gen': "Genesis",
    'exo': "Exodus",
    'lev': "Leviticus",
    'num': "Numbers",
    'deu': "Deuteronomy",
    'jos': "Joshua",
    'jdg': "Judges",
    'rut': "Ruth",
    '1sa': "1 Samuel",
    '2sa': "2 Samuel",
    '1ki': "1 Kings",
    '2ki': "2 Kings",
    '1ch': "1 Chronicles",
    '2ch': "2 Chronicles",
    'ezr': "Ezra",
    'neh': "Nehemiah",
    'est': "Esther",
    'job': "Job",
    'psa': "Psalms",
    'pro': "Proverbs",
    'ecc': "Ecclesiastes",
    'sng': "Song of Songs",
    'isa': "Isaiah",
    'jer': "Jeremiah",
    'lam': "Lamentations",
    'ezk': "Ezekiel",
    'dan': "Daniel",
    'hos': "Hosea",
    'jol': "Joel",
    'amo': "Amos",
    'oba': "Obadiah",
    'jon': "Jonah",
    'mic': "Micah",
    'nam': "Nahum",
    'hab': "Habakkuk",
    'zep': "Zephaniah",
    'hag': "Haggai",
    'zec': "Zechariah",
    'mal': "Malachi",
    'mat': "Matthew",
    'mrk': "Mark",
    'luk': "Luke",
    'jhn': "John",
    'act': "Acts",
    'rom': "Romans",
    '1co': "1 Corinthians",
    '2co': "2 Corinthians",
    'gal': "Galatians",
    'eph': "Ephesians",
    'php': "Philippians",
    'col': "Colossians",
    '1th': "1 Thessalonians",
    '2th': "2 Thessalonians",
    '1ti': "1 Timothy",
    '2ti': "2 Timothy",
    'tit': "Titus",
    'phm': "Philemon",
    'heb': "Hebrews",
    'jas': "James",
    '1pe': "1 Peter",
    '2pe': "2 Peter",
    '1jn': "1 John",
    '2jn': "2 John",
    '3jn': "3 John",
    'jud': "Jude",
    'rev': "Revelation",
})


# Conventional English abbreviations, used when rendering short references
BOOK_ABBREV_ENGLISH = MappingProxyType({
    'gen': "Gen",
    'exo': "Exod",
    'lev': "Lev",
    'num': "Num",
    'deu': "Deut",
    'jos': "Josh",
    'jdg': "Judg",
    'rut': "Ruth",
    '1sa': "1 Sam",
    '2sa': "2 Sam",
    '1ki': "1 Kgs",
    '2ki': "2 Kgs",
    '1ch': "1 Chr",
    '2ch': "2 Chr",
    'ezr': "Ezra",
    'neh': "Neh",
    'est': "Esth",
    'job': "Job",
    'psa': "Ps",
    'pro': "Prov",
    'ecc': "Eccl",
    'sng': "Song",
    'isa': "Isa",
    'jer': "Jer",
    'lam': "Lam",
    'ezk': "Ezek",
    'dan': "Dan",
    'hos': "Hos",
    'jol': "Joel",
    'amo': "Amos",
    'oba': "Obad",
    'jon': "Jonah",
    'mic': "Mic",
    'nam': "Nah",
    'hab': "Hab",
    'zep': "Zeph",
    'hag': "Hag",
    'zec': "Zech",
    'mal': "Mal",
    'mat': "Matt",
    'mrk': "Mark",
    'luk': "Luke",
    'jhn': "John",
    'act': "Acts",
    'rom': "Rom",
    '1co': "1 Cor",
    '2co': "2 Cor",
    'gal': "Gal",
    'eph': "Eph",
    'php': "Phil",
    'col': "Col",
    '1th': "1 Thess",
    '2th': "2 Thess",
    '1ti': "1 Tim",
    '2ti': "2 Tim",
    'tit': "Titus",
    'phm': "Phlm",
    'heb': "Heb",
    'jas': "Jas",
    '1pe': "1 Pet",
    '2pe': "2 Pet",
    '1jn': "1 John",
    '2jn': "2 John",
    '3jn': "3 John",
    'jud': "Jude",
    'rev': "Rev",
})


# Special English abbreviations that could in theory abbreviate multiple books
# but by convention refer to one (see logos.com/bible-book-abbreviations)
ENGLISH_ABBREV_INCLUDE = (
    # (code, abbrev)
    ('num', "nm"),
    ('ezr', "ez"),
    ('mic', "mc"),
    ('hab', "hb"),
    ('jhn', "jn"),
    ('php', "phil"),
    ('phm', "pm"),
    ('jas', "jm"),
    ('jud', "jud"),
    ('jud', "jd"),
)


# Common words that prefix a book name but are far more often just words
# E.g. "So. 1" is ok but not "So 1 cat"
ENGLISH_ABBREV_EXCLUDE = ("is", "so", "at", "am", "me", "he", "hi")


def default_book_names() -> list[tuple[str, str]]:
    """English names followed by the special abbreviations, as ordered candidates."""
    return list(BOOK_NAMES_ENGLISH.items()) + list(ENGLISH_ABBREV_INCLUDE)
