# scripture_refs/services/usx/reverse.py
"""
Reverse the versification of USX documents back to English versification.

Some Bibles number verses according to another tradition (e.g. Hebrew
versification where Malachi 4 is part of chapter 3). Given rules for a
book, verse markers are renumbered, merged where two verses become one,
turned into a chapter subtitle for psalm intros, and chapter markers are
moved to wherever the new first verse of each chapter now is.

Documents are only changed if a rule set's test verse is present, so
reversing an already reversed document leaves it untouched.
"""

import logging
import re
import xml.etree.ElementTree as ET
from typing import Optional

from scripture_refs.services.references.reference_parser import parse_int
from .errors import UsxFormatError, UsxNumberingError
from .rules import BookRuleSet, RuleTable, load_default_rules
from .validate import build_parent_map, parse_usx, validate_numbering

logger = logging.getLogger(__name__)

# XML declaration and the whitespace following it
_DECLARATION_RE = re.compile(r"\s*(<\?xml\s[^>]*\?>\s*)")


class _UsxTree:
    """
    Structural edits on a USX tree.

    ElementTree elements don't know their parent, so a parent map is kept
    current through every edit. Text following an element (its tail) stays
    in place when the element is removed or content is moved.
    """

    def __init__(self, root: ET.Element):
        self.root = root
        self.parents = build_parent_map(root)

    def parent(self, element: ET.Element) -> Optional[ET.Element]:
        return self.parents.get(element)

    def is_attached(self, element: ET.Element) -> bool:
        return element in self.parents

    def remove(self, element: ET.Element):
        parent = self.parents.pop(element)
        index = list(parent).index(element)
        if element.tail:
            if index > 0:
                prev = parent[index - 1]
                prev.tail = (prev.tail or '') + element.tail
            else:
                parent.text = (parent.text or '') + element.tail
        parent.remove(element)

    def insert_after(self, anchor: ET.Element, *elements: ET.Element):
        """Insert elements after anchor, as siblings, keeping anchor's formatting."""
        parent = self.parents[anchor]
        index = list(parent).index(anchor)
        for offset, element in enumerate(elements, start=1):
            element.tail = anchor.tail
            parent.insert(index + offset, element)
            self.parents[element] = parent

    def force_para_end(self, para: ET.Element, verse_eid: ET.Element):
        """Split a para after the given verse eid if later verses are in it too."""
        children = list(para)
        eid_index = children.index(verse_eid)
        last_verse_index = max(i for i, node in enumerate(children) if node.tag == 'verse')
        if eid_index == last_verse_index:
            return

        # Para has verses beyond given eid so create a new para for them with same style
        new_para = ET.Element('para', {'style': para.get('style', 'p')})
        new_para.text = verse_eid.tail
        verse_eid.tail = None
        for node in children[eid_index + 1:]:
            para.remove(node)
            new_para.append(node)
            self.parents[node] = new_para

        self.insert_after(para, new_para)


def _split_vid(vid: str, book_code: str) -> tuple[int, int]:
    chapter, verse = vid[len(book_code) + 1:].split(':')
    return int(chapter), int(verse)


def select_rules(root: ET.Element, book_code: str, rules: RuleTable) -> Optional[BookRuleSet]:
    """Find the first rule set for the book whose test verse is present."""
    sids = [element.get('sid') for element in root.iter() if 'sid' in element.attrib]
    for possible_rules in rules.get(book_code, []):
        # Must match 'ROM 14:24' and 'ROM 14:24-25'
        test = possible_rules.test
        if any(sid == test or sid.startswith(test + '-') for sid in sids):
            return possible_rules
    return None


def get_book_code(root: ET.Element) -> str:
    """Return the code of the book a <usx> document contains."""
    book_element = root.find('.//book')
    if book_element is None:
        raise UsxFormatError("USX is missing <book> element")
    book_code = book_element.get('code')
    if not book_code:
        raise UsxFormatError("No book code found (this probably isn't USX)")
    return book_code


def reverse_versification(root: ET.Element, rules: Optional[RuleTable] = None) -> bool:
    """
    Reverse the versification of a parsed USX document in place.

    Args:
        root: The <usx> root element
        rules: Rule table (defaults to the configured YAML rules)

    Returns:
        Whether any rules were applied

    Raises:
        UsxFormatError: If the document lacks the structure needed
        UsxNumberingError: If numbering is broken before or after reversal
    """
    if root.tag != 'usx':
        raise UsxFormatError("Contents is not USX (missing <usx> root element)")
    if rules is None:
        rules = load_default_rules()

    book_code = get_book_code(root)

    # Find rules for book and test if should apply (return now if not)
    # WARN This prevents reapplying same rules leading to potentially messy results
    book_rules = select_rules(root, book_code, rules)
    if not book_rules:
        logger.debug(f"No versification rules apply to {book_code}")
        return False
    logger.info(f"Reversing versification of {book_code} (test verse {book_rules.test})")

    # Validate original first as confusing to debug if already numbering issues before conversion
    try:
        validate_numbering(root)
    except UsxNumberingError:
        logger.error("Issue with original numbering of file")
        raise

    tree = _UsxTree(root)
    vid_re = re.compile('^' + re.escape(book_code) + r' \d+:\d+')

    # Keep track of which chapter markers will need correcting (in order found)
    chapters_invalid: dict[int, None] = {}
    last_eid_for_ch: dict[int, tuple[int, ET.Element]] = {}

    verses = list(root.iter('verse'))
    for i, verse in enumerate(verses):
        id_type = 'eid' if 'eid' in verse.attrib else 'sid'
        vid_orig = verse.get(id_type, '')

        # Normalise to single verse (in case was a range)
        vid_match = vid_re.match(vid_orig)
        if not vid_match:
            raise UsxFormatError(f"Invalid {id_type}: {vid_orig}")
        vid_single = vid_match.group(0)
        old_ch, old_v = _split_vid(vid_single, book_code)

        # See if verse marker should be part of a chapter subtitle (psalm intros)
        subtitle_end = book_rules.subtitle.get(f"{book_code} {old_ch}")
        if subtitle_end and old_v <= subtitle_end:
            # Intro must be a separate para with style 'd', done at the eid of its last verse
            if id_type == 'eid' and old_v == subtitle_end:
                para = tree.parent(verse)
                tree.force_para_end(para, verse)
                para.set('style', 'd')
            tree.remove(verse)
            continue

        final_id = book_rules.renumber.get(vid_single, vid_single)
        final_ch, final_v = _split_vid(final_id, book_code)

        # If starting a new verse and has same id as previous eid then need to merge them
        # Needed for back merges 1CH 12:4, 1KI 22:43, 1SA 20:42, and forward merge NUM 25:19
        prev_verse = verses[i - 1] if i > 0 else None
        if (id_type == 'sid' and prev_verse is not None
                and final_id == prev_verse.get('eid')
                and tree.is_attached(prev_verse)):  # Not if previous was removed for subtitle
            tree.remove(prev_verse)
            tree.remove(verse)

        elif final_id != vid_single:
            verse.set(id_type, final_id)

            # If reassigned first verse of chapter then will need to move chapter marker
            if final_v == 1:
                chapters_invalid[final_ch] = None
            if old_v == 1:
                # Checking old catches chapters that no longer exist
                chapters_invalid[old_ch] = None

            if 'number' in verse.attrib:
                verse.set('number', str(final_v))

        # Keep track of the last eid for a chapter
        if final_v >= last_eid_for_ch.get(final_ch, (0, None))[0]:
            last_eid_for_ch[final_ch] = (final_v, verse)

    chapters = list(root.iter('chapter'))
    if not chapters or not last_eid_for_ch:
        raise UsxFormatError(f"No chapters or verses found in {book_code}")

    # Handle special case of last chapter end marker of book
    last_marker = chapters.pop()
    last_valid_ch = max(last_eid_for_ch)
    last_marker.set('eid', f"{book_code} {last_valid_ch}")

    # Remove chapter markers that were affected by verse renumbering
    for chapter in chapters:
        id_type = 'eid' if 'eid' in chapter.attrib else 'sid'
        ch_num = parse_int(chapter.get(id_type, '')[len(book_code):])
        if id_type == 'sid' and ch_num in chapters_invalid:
            tree.remove(chapter)
        elif id_type == 'eid' and ch_num is not None and ch_num + 1 in chapters_invalid:
            # The ending ids of prev chapters also need moving
            tree.remove(chapter)

    # Restore markers in correct locations
    for ch_num in chapters_invalid:
        if ch_num > last_valid_ch:
            continue  # Chapter no longer exists

        # Identify the para that contains the last verse of the previous chapter
        last_eid_node = last_eid_for_ch.get(ch_num - 1, (0, None))[1]
        prev_para = tree.parent(last_eid_node) if last_eid_node is not None else None
        if prev_para is None or prev_para.tag != 'para':
            raise UsxFormatError(f"Expected a <para> (trying to restore chapter {ch_num})")

        # If para contains verses of the next chapter then need to split it
        tree.force_para_end(prev_para, last_eid_node)

        prev_ch_end = ET.Element('chapter', {'eid': f"{book_code} {ch_num - 1}"})
        ch_start = ET.Element('chapter', {
            'sid': f"{book_code} {ch_num}",
            'number': str(ch_num),
            'style': 'c',
        })
        tree.insert_after(prev_para, prev_ch_end, ch_start)

    # Validate new numbering before returning
    try:
        validate_numbering(root)
    except UsxNumberingError:
        logger.error("Issue with numbering after re-versing file")
        raise

    return True


def reverse_usx(xml: str, rules: Optional[RuleTable] = None) -> str:
    """
    Reverse the versification of a USX document.

    Returns the document unchanged if no rules apply to it. Otherwise the
    original XML declaration (if any) is kept, as are comments and
    processing instructions inside the document.
    """
    root = parse_usx(xml)
    if not reverse_versification(root, rules):
        return xml

    result = ET.tostring(root, encoding='unicode')
    declaration = _DECLARATION_RE.match(xml)
    if declaration:
        result = declaration.group(1) + result
    return result
