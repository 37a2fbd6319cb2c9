# scripture_refs/services/usx/__init__.py
"""
USX versification services.

Main entry point: reverse_usx()

Example:
    from scripture_refs.services.usx import reverse_usx

    with open("MAL.usx", encoding="utf-8") as f:
        fixed = reverse_usx(f.read())  # Malachi 3:19-24 -> 4:1-6
"""

from .errors import (
    UsxError,
    UsxFormatError,
    UsxNumberingError,
    VersificationRulesError,
)
from .config_loader import (
    load_rules_config,
    reload_rules,
)
from .rules import (
    BookRuleSet,
    individualise_range,
    rules_from_mapping,
    build_rule_table,
    load_default_rules,
)
from .validate import (
    validate_numbering,
    validate_usx,
    parse_usx,
)
from .reverse import (
    reverse_versification,
    reverse_usx,
    select_rules,
)

__all__ = [
    'UsxError',
    'UsxFormatError',
    'UsxNumberingError',
    'VersificationRulesError',
    'load_rules_config',
    'reload_rules',
    'BookRuleSet',
    'individualise_range',
    'rules_from_mapping',
    'build_rule_table',
    'load_default_rules',
    'validate_numbering',
    'validate_usx',
    'parse_usx',
    'reverse_versification',
    'reverse_usx',
    'select_rules',
]
