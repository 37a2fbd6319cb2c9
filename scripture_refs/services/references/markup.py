# scripture_refs/services/references/markup.py
"""
Turn references found in HTML into links.

Every reference detected in the text of an HTML fragment is wrapped in
<a class="fb-enhancer-link" data-ref="jhn3:16">John 3:16</a>, where data-ref
is the serialized reference (see PassageReference.from_serialized).
Existing links are left alone, as are headings unless another filter is
given.
"""

import logging
from typing import Callable, Optional, Sequence

from bs4 import BeautifulSoup, NavigableString, Tag

from .detect import ReferenceMatch
from .reference_service import ReferenceService

logger = logging.getLogger(__name__)


LINK_CLASS = "fb-enhancer-link"

HEADING_TAGS = ("h1", "h2", "h3", "h4", "h5", "h6")


def default_filter(element: Tag) -> bool:
    """Default filter that excludes headings from reference detection."""
    return element.name not in HEADING_TAGS


def _collect_text_nodes(root: Tag, element_filter: Callable[[Tag], bool]) -> list[NavigableString]:
    """Get all relevant text nodes in advance (as modifying the tree would interrupt the walk)."""
    nodes = []
    for child in root.children:
        if isinstance(child, Tag):
            # Ignore existing links and whole subtrees rejected by the filter
            if child.name == "a" or not element_filter(child):
                continue
            nodes.extend(_collect_text_nodes(child, element_filter))
        elif type(child) is NavigableString:
            # Comments, CDATA, doctypes etc. are subclasses and are skipped
            nodes.append(child)
    return nodes


def _linkify(soup: BeautifulSoup, text: str, matches: list[ReferenceMatch]) -> list:
    """Split text into plain strings and links for the given matches."""
    pieces = []
    remainder = text
    for match in matches:
        before = remainder[:match.index_from_prev_match]
        remainder = remainder[match.index_from_prev_match + len(match.text):]
        if before:
            pieces.append(NavigableString(before))
        link = soup.new_tag("a", attrs={"class": LINK_CLASS, "data-ref": match.ref.to_serialized()})
        link.string = match.text
        pieces.append(link)
    if remainder:
        pieces.append(NavigableString(remainder))
    return pieces


def markup_references(
    html: str,
    service: Optional[ReferenceService] = None,
    translations: Sequence[str] = (),
    always_detect_english: bool = True,
    element_filter: Callable[[Tag], bool] = default_filter,
) -> tuple[str, list[ReferenceMatch]]:
    """
    Auto-discover references in an HTML fragment and transform them into links.

    Args:
        html: HTML fragment
        service: Service holding local book names (a new one if not given)
        translations: Translations whose book names should be recognised
        always_detect_english: Whether English names are recognised too
        element_filter: Returns False for elements whose subtree should be skipped

    Returns:
        Tuple of (marked up HTML, list of ReferenceMatch in document order)
    """
    service = service or ReferenceService()
    soup = BeautifulSoup(html, "html.parser")

    all_matches = []
    for node in _collect_text_nodes(soup, element_filter):
        text = str(node)
        matches = list(service.detect_references(text, list(translations), always_detect_english))
        if not matches:
            continue
        node.replace_with(*_linkify(soup, text, matches))
        all_matches.extend(matches)

    logger.debug(f"Marked up {len(all_matches)} references")
    return str(soup), all_matches
