# scripture_refs/services/usx/validate.py
"""
Sequential integrity checks for USX chapter and verse markers.

USX 3 marks both the start (sid) and end (eid) of every chapter and verse
with milestone elements. A valid book is:

    chapter sid 1, verse sid 1, verse eid 1, verse sid 2, ..., chapter eid 1,
    chapter sid 2, ...

Verse numbers may skip forward (omitted verses) but never go backwards, and
any `number` attribute must agree with the id it accompanies.
"""

import logging
import re
import xml.etree.ElementTree as ET
from typing import Optional

from scripture_refs.services.references.reference_parser import parse_int
from .errors import UsxFormatError, UsxNumberingError

logger = logging.getLogger(__name__)


# Lines of preceding blocks to log when reporting a numbering error
CONTEXT_BLOCKS = 3

_CHAR_TAG_RE = re.compile(r"</?char.*?>")


def serialize_marker(element: ET.Element) -> str:
    """Serialize a marker without its trailing text (for error messages)."""
    tail = element.tail
    element.tail = None
    try:
        return ET.tostring(element, encoding="unicode")
    finally:
        element.tail = tail


def build_parent_map(root: ET.Element) -> dict[ET.Element, ET.Element]:
    """Map each element to its parent (ElementTree has no parent pointers)."""
    return {child: parent for parent in root.iter() for child in parent}


def _log_context(element: ET.Element, parents: dict[ET.Element, ET.Element]):
    """Log the blocks leading up to an element to help locate a numbering issue."""
    block = element if element.tag == "chapter" else parents.get(element, element)
    container = parents.get(block)
    siblings = list(container) if container is not None else [block]
    index = siblings.index(block)
    out_nodes = siblings[max(0, index - CONTEXT_BLOCKS):index + 1]
    # Remove <char>s as they make it really hard to read when every word has strongs
    context = "\n\n".join(ET.tostring(node, encoding="unicode").strip() for node in out_nodes)
    logger.debug(_CHAR_TAG_RE.sub("", context))


def _marker_numbers(value: str) -> tuple[Optional[int], Optional[int]]:
    """Split the numbers out of an id like "GEN 1:2" or "GEN 1"."""
    parts = value[3:].split(":")
    return parse_int(parts[0]), parse_int(parts[1]) if len(parts) > 1 else None


def validate_numbering(root: ET.Element):
    """
    Ensure all chapter and verse markers are sequential.

    Raises:
        UsxNumberingError: At the first marker out of sequence
    """
    parents = build_parent_map(root)

    next_element = "chapter"
    next_pos = "sid"
    next_ch_num = 1
    next_v_num = 1

    for element in root.iter():
        if element.tag not in ("chapter", "verse"):
            continue

        def expected(what: str):
            marker = serialize_marker(element)
            logger.error(f"Expected {what} but got {marker}")
            _log_context(element, parents)
            raise UsxNumberingError(what, marker)

        # If expecting a verse sid, a chapter eid is also possible, so switch if chapter detected
        if next_element == "verse" and next_pos == "sid" and element.tag == "chapter":
            next_element = "chapter"
            next_pos = "eid"

        # Confirm expected element type
        if element.tag != next_element:
            expected(next_element)

        # Confirm expected position (sid or eid)
        if "sid" in element.attrib:
            pos = "sid"
        elif "eid" in element.attrib:
            pos = "eid"
        else:
            pos = None
        if pos != next_pos:
            expected(next_pos)

        # Confirm expected chapter number
        ch_num, v_num = _marker_numbers(element.get(pos))
        if ch_num != next_ch_num:
            expected(f"chapter {next_ch_num}")

        # Confirm expected verse number (if a verse)
        # NOTE Verse numbers are allowed to skip forward as long as still sequential
        if element.tag == "verse" and (v_num is None or v_num < next_v_num):
            expected(f"verse {next_v_num}")

        # Ensure number attribute is same as id
        if "number" in element.attrib:
            number = parse_int(element.get("number"))
            number_expected = ch_num if element.tag == "chapter" else v_num
            if number != number_expected:
                expected(f"number attr to be {number_expected}")

        # Determine what's next
        if next_element == "chapter" and next_pos == "sid":
            next_element = "verse"
            next_pos = "sid"
            next_v_num = 1
        elif next_element == "chapter" and next_pos == "eid":
            next_pos = "sid"
            next_ch_num += 1
            next_v_num = 1
        elif next_element == "verse" and next_pos == "sid":
            next_pos = "eid"
        else:
            # Verse with eid
            next_pos = "sid"
            next_v_num += 1


def parse_usx(xml: str) -> ET.Element:
    """Parse a USX document (keeping comments and processing instructions), returning its <usx> root."""
    parser = ET.XMLParser(target=ET.TreeBuilder(insert_comments=True, insert_pis=True))
    try:
        root = ET.fromstring(xml, parser=parser)
    except ET.ParseError as e:
        raise UsxFormatError(f"Contents is not valid XML: {e}") from e
    if root.tag != "usx":
        raise UsxFormatError("Contents is not USX (missing <usx> root element)")
    return root


def validate_usx(xml: str):
    """Parse a USX document and validate its numbering."""
    validate_numbering(parse_usx(xml))
