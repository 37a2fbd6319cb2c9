# scripture_refs/services/usx/rules.py
"""
Versification rule sets.

A rule set describes how to move a book from another versification system
back to English versification. Since a document must only be converted
once, each rule set has a test verse that exists only in the other system.

Rules come from two places in the YAML table:
- books: explicit rule sets for known quirks of particular Bibles
- systems: verse mappings in the style of the Copenhagen Alliance data,
  keyed by the English (correct) range with the other system's (incorrect)
  range as value. These are converted into rule sets that take priority
  over the explicit ones.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from .config_loader import load_rules_config
from .errors import VersificationRulesError

logger = logging.getLogger(__name__)


@dataclass
class BookRuleSet:
    """
    Rules for re-versifying a single book.

    Attributes:
        test: If this verse exists then these rules should be applied
        renumber: Verse id mapping, e.g. {'GEN 1:1': 'GEN 1:2'}
        subtitle: Chapter -> number of leading verses that are really the
                  chapter's subtitle, e.g. {'PSA 52': 2}
    """
    test: str
    renumber: Dict[str, str] = field(default_factory=dict)
    subtitle: Dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BookRuleSet":
        return cls(
            test=str(data['test']),
            renumber={str(k): str(v) for k, v in (data.get('renumber') or {}).items()},
            subtitle={str(k): int(v) for k, v in (data.get('subtitle') or {}).items()},
        )


RuleTable = Dict[str, List[BookRuleSet]]


def individualise_range(verse_range: str) -> List[str]:
    """Turn a range like 'GEN 1:1-3' into ['GEN 1:1', 'GEN 1:2', 'GEN 1:3']."""
    book = verse_range[:3]
    chapter, verses = verse_range[4:].split(':')
    bounds = [int(n) for n in verses.split('-')]
    verse_start = bounds[0]
    verse_end = bounds[1] if len(bounds) > 1 else verse_start
    return [f"{book} {chapter}:{v}" for v in range(verse_start, verse_end + 1)]


def rules_from_mapping(
    mapping: Mapping[str, str],
    override_tests: Optional[Mapping[str, str]] = None,
) -> Dict[str, BookRuleSet]:
    """
    Convert a correct -> incorrect verse mapping into a rule set per book.

    Targets ending in ':0' mark un-numbered psalm intros, so the verses they
    map to become the chapter's subtitle rather than being renumbered.

    Raises:
        VersificationRulesError: If ranges differ in length or no test verse exists
    """
    override_tests = override_tests or {}
    system_rules: Dict[str, BookRuleSet] = {}

    for correct_ref, incorrect_ref in mapping.items():
        corrects = individualise_range(correct_ref)
        incorrects = individualise_range(incorrect_ref)

        # Mapping must always be 1-1
        if len(corrects) != len(incorrects):
            raise VersificationRulesError(f"Different length: {correct_ref} {incorrect_ref}")

        book = correct_ref[:3]
        rules = system_rules.setdefault(book, BookRuleSet(test=''))

        for correct, incorrect in zip(corrects, incorrects):
            # NOTE Merging many-to-one isn't supported, so e.g. PSA 51:0 maps to just 51:2
            if correct.endswith(':0'):
                chapter_id, verse = incorrect.split(':')
                rules.subtitle[chapter_id] = int(verse)
            else:
                rules.renumber[incorrect] = correct

    # Determine a test for each book, a verse that won't be restored anywhere else
    for book, rules in system_rules.items():
        if book in override_tests:
            rules.test = override_tests[book]
            continue
        targets = set(rules.renumber.values())
        candidates = [vid for vid in rules.renumber if vid not in targets]
        if not candidates:
            raise VersificationRulesError(f"Couldn't determine test for {book}")
        rules.test = candidates[-1]

    return system_rules


def build_rule_table(config: Mapping[str, Any]) -> RuleTable:
    """Combine a config's explicit rule sets with those derived from its systems."""
    table: RuleTable = {}
    for book, rule_sets in (config.get('books') or {}).items():
        table[str(book)] = [BookRuleSet.from_dict(data) for data in rule_sets]

    for name, system in (config.get('systems') or {}).items():
        derived = rules_from_mapping(system.get('mapping') or {}, system.get('override_tests'))
        for book, rules in derived.items():
            # Derived rules are checked first
            table.setdefault(book, []).insert(0, rules)
        logger.debug(f"Derived rules for {len(derived)} books from system '{name}'")

    return table


def load_default_rules(path: Optional[str] = None) -> RuleTable:
    """Load the rule table from the YAML config (defaults to the configured path)."""
    return build_rule_table(load_rules_config(path))
