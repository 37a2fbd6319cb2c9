#!/usr/bin/env python3
"""
Reverse the versification of USX files to English versification.

Files whose book has no matching rules are left untouched, so it is safe to
run over a whole Bible.

Usage:
    python -m scripture_refs.scripts.reverse_usx FILE [FILE ...]
    python -m scripture_refs.scripts.reverse_usx FILE --output DIR
    python -m scripture_refs.scripts.reverse_usx FILE --check

Options:
    --output DIR   Write results to DIR instead of modifying files in place
    --rules PATH   Use another YAML rules table
    --check        Only validate chapter/verse numbering
    --verbose      Debug logging
"""

import argparse
import logging
import os
import sys

from scripture_refs.core.config import LOG_LEVEL
from scripture_refs.services.usx import (
    UsxError,
    load_default_rules,
    reverse_usx,
    validate_usx,
)

logger = logging.getLogger(__name__)


def process_file(path: str, rules, output_dir: str = None, check: bool = False) -> str:
    """
    Reverse (or just check) a single file.

    Returns:
        "valid", "changed" or "unchanged"
    """
    with open(path, 'r', encoding='utf-8') as f:
        xml = f.read()

    if check:
        validate_usx(xml)
        return "valid"

    result = reverse_usx(xml, rules)
    changed = result is not xml

    dest = os.path.join(output_dir, os.path.basename(path)) if output_dir else path
    if changed or dest != path:
        with open(dest, 'w', encoding='utf-8') as f:
            f.write(result)
    return "changed" if changed else "unchanged"


def main():
    parser = argparse.ArgumentParser(
        description="Reverse USX versification to English versification",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m scripture_refs.scripts.reverse_usx usx/*.usx               # In place
  python -m scripture_refs.scripts.reverse_usx usx/*.usx --output out  # To another dir
  python -m scripture_refs.scripts.reverse_usx MAL.usx --check         # Validate only
        """
    )
    parser.add_argument(
        "files",
        nargs="+",
        metavar="FILE",
        help="USX files to process"
    )
    parser.add_argument(
        "--output",
        metavar="DIR",
        help="Directory to write results to (default: modify in place)"
    )
    parser.add_argument(
        "--rules",
        metavar="PATH",
        help="YAML versification rules table (default: packaged rules)"
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Only validate chapter/verse numbering"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging"
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.output:
        os.makedirs(args.output, exist_ok=True)

    rules = load_default_rules(args.rules)
    logger.debug(f"Loaded versification rules for {len(rules)} books")

    counts = {"valid": 0, "changed": 0, "unchanged": 0, "failed": 0}
    for path in args.files:
        try:
            outcome = process_file(path, rules, args.output, args.check)
        except (UsxError, OSError) as e:
            print(f"  {path}: ✗ {e}")
            counts["failed"] += 1
            continue
        print(f"  {path}: {outcome}")
        counts[outcome] += 1

    print("-" * 40)
    if args.check:
        print(f"Valid: {counts['valid']}, Failed: {counts['failed']}")
    else:
        print(f"Changed: {counts['changed']}, Unchanged: {counts['unchanged']}, "
              f"Failed: {counts['failed']}")

    return 0 if counts["failed"] == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
