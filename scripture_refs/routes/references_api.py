# scripture_refs/routes/references_api.py
"""
API endpoints for scripture references.

Provides access to:
- Parsing a single reference
- Reference detection in text
- Decoding serialized references
- Linkifying references in HTML
- Registering local book names for translations
"""

import logging

from flask import Blueprint, request, jsonify

from scripture_refs.core.config import DETECT_MAX_TEXT_CHARS
from scripture_refs.services.references import (
    PassageReference,
    ReferenceService,
    markup_references,
)
from scripture_refs.utils.errors import (
    invalid_field,
    missing_field,
    not_found,
    too_large,
)

logger = logging.getLogger(__name__)

references_bp = Blueprint("references_api", __name__, url_prefix="/api/references")

# Lazily initialized service instance
_service = None


def get_service() -> ReferenceService:
    """Get or create ReferenceService instance."""
    global _service
    if _service is None:
        _service = ReferenceService()
    return _service


def _translations_arg(value) -> list[str]:
    """
    Accept translations as a list or a comma-separated string.

    Raises:
        ValueError: If value is neither
    """
    if not value:
        return []
    if isinstance(value, str):
        return [t.strip() for t in value.split(",") if t.strip()]
    if not isinstance(value, list) or not all(isinstance(t, str) for t in value):
        raise ValueError("translations must be a list of strings or a comma-separated string")
    return value


def _json_body():
    """Request body as a dict ({} when absent), or None if it isn't a JSON object."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    return data if isinstance(data, dict) else None


def _reference_json(ref: PassageReference, translation: str = None, abbreviate: bool = False):
    result = ref.to_dict()
    result["display"] = get_service().reference_to_string(ref, translation, abbreviate)
    return result


# =============================================================================
# Parsing Endpoints
# =============================================================================

@references_bp.get("/parse")
def parse_reference():
    """
    Parse a single reference.

    Query params:
        text: Reference string (required) e.g., "Jn 3:16-18"
        translation: Translation whose book names to use (optional) e.g., "spa_rvr"
        abbreviate: Abbreviate the display string (optional, default false)

    Returns:
        {
            "book": "jhn",
            "type": "range_verses",
            "start_chapter": 3,
            ...
            "serialized": "jhn3:16-18",
            "display": "John 3:16-18"
        }
    """
    text = request.args.get("text")
    if not text:
        return missing_field("text")

    translation = request.args.get("translation") or None
    abbreviate = request.args.get("abbreviate", "").lower() == "true"

    ref = get_service().string_to_reference(text, translation)
    if ref is None:
        return not_found("reference", f"Could not identify a reference in '{text}'")
    return jsonify(_reference_json(ref, translation, abbreviate))


@references_bp.get("/serialized/<code>")
def decode_serialized(code: str):
    """
    Decode a serialized reference (as used in data-ref attributes).

    Returns:
        Reference dict (see /parse)
    """
    if len(code) < 3:
        return invalid_field("code", "Serialized references start with a 3 character book code")
    return jsonify(_reference_json(PassageReference.from_serialized(code)))


@references_bp.post("/detect")
def detect_references():
    """
    Find scripture references in text.

    Request body:
        {
            "text": "Read John 3:16 and Romans 8:28, 31 for encouragement.",
            "translations": ["spa_rvr"],      (optional)
            "always_detect_english": true     (optional, default true)
        }

    Returns:
        {
            "references": [
                {"text": "John 3:16", "index": 5, "index_from_prev_match": 5, "ref": {...}},
                ...
            ]
        }
    """
    data = _json_body()
    if data is None:
        return invalid_field("body", "Request body must be a JSON object")
    text = data.get("text")

    if not text:
        return missing_field("text")
    if not isinstance(text, str):
        return invalid_field("text", "text must be a string")
    if len(text) > DETECT_MAX_TEXT_CHARS:
        return too_large("text", DETECT_MAX_TEXT_CHARS)

    try:
        translations = _translations_arg(data.get("translations"))
    except ValueError as e:
        return invalid_field("translations", str(e))
    always_detect_english = bool(data.get("always_detect_english", True))

    matches = get_service().detect_references(text, translations, always_detect_english)
    return jsonify({"references": [match.to_dict() for match in matches]})


@references_bp.post("/markup")
def markup_html():
    """
    Turn references in an HTML fragment into links.

    Request body:
        {
            "html": "<p>See John 3:16</p>",
            "translations": ["spa_rvr"],      (optional)
            "always_detect_english": true     (optional, default true)
        }

    Returns:
        {
            "html": "<p>See <a class=\"fb-enhancer-link\" data-ref=\"jhn3:16\">John 3:16</a></p>",
            "references": [...]
        }
    """
    data = _json_body()
    if data is None:
        return invalid_field("body", "Request body must be a JSON object")
    html = data.get("html")

    if not html:
        return missing_field("html")
    if not isinstance(html, str):
        return invalid_field("html", "html must be a string")
    if len(html) > DETECT_MAX_TEXT_CHARS:
        return too_large("html", DETECT_MAX_TEXT_CHARS)

    try:
        translations = _translations_arg(data.get("translations"))
    except ValueError as e:
        return invalid_field("translations", str(e))

    result, matches = markup_references(
        html,
        service=get_service(),
        translations=translations,
        always_detect_english=bool(data.get("always_detect_english", True)),
    )
    return jsonify({
        "html": result,
        "references": [match.to_dict() for match in matches],
    })


# =============================================================================
# Book Name Endpoints
# =============================================================================

@references_bp.post("/book-names/<translation>")
def register_book_names(translation: str):
    """
    Register local book names for a translation.

    Request body:
        {
            "jhn": {"normal": "Juan", "abbrev": "Jn"},
            ...
        }

    Returns:
        {"translation": "spa_rvr", "books": 66}
    """
    data = _json_body()
    if not data:
        return missing_field("book_names")

    for code, name_types in data.items():
        if not isinstance(name_types, dict):
            return invalid_field("book_names", f"Names for '{code}' must be an object")
        if not all(isinstance(name, str) for name in name_types.values()):
            return invalid_field("book_names", f"Names for '{code}' must be strings")

    get_service().register_book_names(translation, data)
    return jsonify({"translation": translation, "books": len(data)})
