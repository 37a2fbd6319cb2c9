# scripture_refs/services/usx/config_loader.py
"""
Versification Rules Configuration Loader

Loads the YAML table of versification rules used to reverse USX documents
back to English versification.
"""

import logging
import os
from functools import lru_cache
from typing import Any, Dict, Optional

import yaml

from scripture_refs.core.config import VERSIFICATION_RULES_PATH

logger = logging.getLogger(__name__)


@lru_cache(maxsize=8)
def load_rules_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load versification rules from YAML config (defaults to the configured path)."""
    path = path or VERSIFICATION_RULES_PATH
    if not os.path.exists(path):
        logger.warning(f"Versification rules not found at {path}, using defaults")
        return get_default_rules_config()

    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}
    logger.debug(f"Loaded versification rules from {path}")
    return data


def get_default_rules_config() -> Dict[str, Any]:
    """Return minimal default rules if config file missing."""
    return {
        'version': '1.0',
        'books': {
            'JHN': [{'test': 'JHN 13:39', 'renumber': {'JHN 13:39': 'JHN 14:1'}}],
            '1TI': [{'test': '1TI 6:22', 'renumber': {'1TI 6:22': '1TI 6:21'}}],
            'PSA': [{'test': 'PSA 47:10', 'renumber': {'PSA 47:10': 'PSA 47:9'}}],
        },
        'systems': {},
    }


def reload_rules():
    """Clear cache and reload rules."""
    load_rules_config.cache_clear()
    return load_rules_config()
