#!/usr/bin/env python3
"""
Print every scripture reference detected in a text file (or stdin).

Usage:
    python -m scripture_refs.scripts.detect_references notes.txt
    cat notes.txt | python -m scripture_refs.scripts.detect_references --json

Options:
    --json          Output matches as JSON
    --names PATH    JSON file of local book names ({"jhn": {"normal": "Juan", "abbrev": "Jn"}})
    --translation   Translation id the names belong to (default: "local")
    --no-english    Don't also detect English book names
    --abbreviate    Abbreviate book names in output
"""

import argparse
import json
import logging
import sys

from scripture_refs.core.config import LOG_LEVEL
from scripture_refs.services.references import ReferenceService

logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(
        description="Detect scripture references in text",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m scripture_refs.scripts.detect_references sermon.txt
  python -m scripture_refs.scripts.detect_references sermon.txt --json
  python -m scripture_refs.scripts.detect_references notas.txt --names spa.json --translation spa_rvr
        """
    )
    parser.add_argument(
        "file",
        nargs="?",
        help="Text file to scan (default: stdin)"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output matches as JSON"
    )
    parser.add_argument(
        "--names",
        metavar="PATH",
        help="JSON file of local book names"
    )
    parser.add_argument(
        "--translation",
        default="local",
        help="Translation id for --names, its language prefix decides matching (e.g. spa_rvr)"
    )
    parser.add_argument(
        "--no-english",
        action="store_true",
        help="Don't also detect English book names"
    )
    parser.add_argument(
        "--abbreviate",
        action="store_true",
        help="Abbreviate book names in output"
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

    if args.file:
        with open(args.file, 'r', encoding='utf-8') as f:
            text = f.read()
    else:
        text = sys.stdin.read()

    service = ReferenceService()
    translations = []
    if args.names:
        with open(args.names, 'r', encoding='utf-8') as f:
            service.register_book_names(args.translation, json.load(f))
        translations = [args.translation]

    matches = list(service.detect_references(text, translations, not args.no_english))
    logger.debug(f"Detected {len(matches)} references")

    if args.json:
        print(json.dumps([match.to_dict() for match in matches], ensure_ascii=False, indent=2))
        return 0

    display_translation = translations[0] if translations else None
    for match in matches:
        display = service.reference_to_string(match.ref, display_translation, args.abbreviate)
        print(f"{match.index:>7}  {match.text!r:30} {display}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
