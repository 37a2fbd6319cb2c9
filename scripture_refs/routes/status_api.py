# scripture_refs/routes/status_api.py
from flask import Blueprint, jsonify
from datetime import datetime, timezone

import yaml

from scripture_refs.services.usx import UsxError, load_default_rules

status_bp = Blueprint("status_api", __name__)


def _check_rules() -> tuple[bool, str]:
    """Check if the versification rules load."""
    try:
        rules = load_default_rules()
        return True, f"{len(rules)} books"
    except (UsxError, OSError, ValueError, yaml.YAMLError) as e:
        return False, str(e)


@status_bp.get("/status")
def status():
    """Basic status check, including whether versification rules are usable."""
    rules_ok, rules_detail = _check_rules()
    return jsonify(
        {
            "status": "ok" if rules_ok else "degraded",
            "time_utc": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "versification_rules": {"ok": rules_ok, "detail": rules_detail},
        }
    )
