# scripture_refs/routes/usx_api.py
"""
API endpoints for USX documents.

The document is sent as the raw request body (application/xml).
"""

import logging

from flask import Blueprint, Response, request, jsonify
import yaml

from scripture_refs.services.usx import (
    UsxFormatError,
    UsxNumberingError,
    VersificationRulesError,
    reverse_usx,
    validate_usx,
)
from scripture_refs.utils.errors import (
    invalid_usx,
    missing_field,
    numbering_error,
    server_error,
)

logger = logging.getLogger(__name__)

usx_bp = Blueprint("usx_api", __name__, url_prefix="/api/usx")


@usx_bp.post("/reverse")
def reverse():
    """
    Reverse a USX document to English versification.

    Returns the document unchanged if no rules apply to it.

    Errors:
        400 invalid_usx: Not USX or missing required structure
        422 numbering_error: Chapter/verse markers out of sequence
        500 versification_rules_error: The configured rules table is invalid
    """
    xml = request.get_data(as_text=True)
    if not xml.strip():
        return missing_field("usx")

    try:
        result = reverse_usx(xml)
    except UsxFormatError as e:
        return invalid_usx(str(e))
    except UsxNumberingError as e:
        return numbering_error(e.expected, e.element)
    except (VersificationRulesError, yaml.YAMLError) as e:
        logger.error(f"Versification rules unusable: {e}")
        return server_error("versification_rules_error", str(e))

    return Response(result, mimetype="application/xml")


@usx_bp.post("/validate")
def validate():
    """
    Check that a USX document's chapter and verse markers are sequential.

    Returns:
        {"valid": true}
    """
    xml = request.get_data(as_text=True)
    if not xml.strip():
        return missing_field("usx")

    try:
        validate_usx(xml)
    except UsxFormatError as e:
        return invalid_usx(str(e))
    except UsxNumberingError as e:
        return numbering_error(e.expected, e.element)

    return jsonify({"valid": True})
