#!/usr/bin/env python3
"""
Command-line runner for the exam template catalog maintenance jobs.

Import template documents, load the seed set, deduplicate and inspect the
template store, or try catalog search and laterality detection by hand.
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from catalog_index import build_default_index
from config_manager import get_config
from database_models import StorageError, TemplateStore
from ingestion import import_documents, run_deduplication, seed_templates, verify_templates
from laterality_resolver import extract_laterality
from logging_config import setup_logging

logger = logging.getLogger(__name__)


def _print_json(data) -> None:
    print(json.dumps(data, ensure_ascii=False, indent=2))


def cmd_import(args, store: TemplateStore) -> int:
    summary = import_documents(args.files, store)
    print(f"Imported: {summary.imported}")
    print(f"Skipped: {summary.skipped}")
    for failed in summary.failed_files:
        print(f"❌ Failed: {failed}")
    return 1 if summary.failed_files else 0


def cmd_seed(args, store: TemplateStore) -> int:
    count = seed_templates(store)
    print(f"Seeded {count} templates.")
    return 0


def cmd_dedupe(args, store: TemplateStore) -> int:
    mode = 'exact' if args.exact else 'fuzzy'
    summary = run_deduplication(store, mode)
    print(f"Deduplication complete ({mode}). Deleted {len(summary.deleted)} templates.")
    return 0


def cmd_verify(args, store: TemplateStore) -> int:
    report = verify_templates(store, limit=args.limit)
    print(f"Total templates: {report['total']}")
    for template in report['recent']:
        print(f"\n[{template['modality']}] {template['title']}")
        print(f"  Region: {template['bodyRegion']}")
        print(f"  Sections: {', '.join(template['sections'])}")
    return 0


def cmd_search(args) -> int:
    index = build_default_index()
    hits = index.search(args.modality, args.query, args.region)
    if hits:
        _print_json([h.to_dict() for h in hits])
        return 0
    print("No catalog match; the name would be used as a custom exam.")
    suggestions = index.suggest(args.modality, args.query, region=args.region,
                                limit=get_config().get('search.suggestion_limit', 5),
                                min_score=get_config().get('search.suggestion_min_score', 60))
    if suggestions:
        print("Did you mean:")
        for s in suggestions:
            print(f"  {s.entry.name} ({s.score})")
    return 0


def cmd_laterality(args) -> int:
    _print_json(extract_laterality(args.name).to_dict())
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Exam template catalog maintenance',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Import template documents (modality inferred from each file name)
  python3 catalog_cli.py import templates_rx.md templates_usg.md

  # Remove near-duplicate templates, keeping the richest of each group
  python3 catalog_cli.py dedupe

  # Search the exam catalog
  python3 catalog_cli.py search RX tóra
        """
    )
    parser.add_argument('--db', help='Template store path (default: storage.db_path from config)')
    parser.add_argument('--log-level', help='Override the configured log level')

    subparsers = parser.add_subparsers(dest='command', help='Command')

    import_parser = subparsers.add_parser('import', help='Import template documents')
    import_parser.add_argument('files', nargs='+', help='Template document paths')

    subparsers.add_parser('seed', help='Load the default seed templates')

    dedupe_parser = subparsers.add_parser('dedupe', help='Remove duplicate templates')
    dedupe_parser.add_argument('--exact', action='store_true',
                               help='Only collapse identical title + modality pairs')

    verify_parser = subparsers.add_parser('verify', help='Show template count and latest templates')
    verify_parser.add_argument('--limit', type=int, default=5, help='Number of recent templates to show')

    search_parser = subparsers.add_parser('search', help='Search the exam catalog')
    search_parser.add_argument('modality', help='Modality code, e.g. RX, USG')
    search_parser.add_argument('query', help='Text to search for')
    search_parser.add_argument('--region', help='Restrict to one body region')

    lat_parser = subparsers.add_parser('laterality', help='Detect the side in an exam name')
    lat_parser.add_argument('name', help='Exam name, e.g. "USG Ombro Direito"')

    return parser


STORE_COMMANDS = {
    'import': cmd_import,
    'seed': cmd_seed,
    'dedupe': cmd_dedupe,
    'verify': cmd_verify,
}

CATALOG_COMMANDS = {
    'search': cmd_search,
    'laterality': cmd_laterality,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point; returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    setup_logging(args.log_level)

    if args.command in CATALOG_COMMANDS:
        return CATALOG_COMMANDS[args.command](args)

    db_path = args.db or get_config().get('storage.db_path', 'exam_catalog.db')
    try:
        store = TemplateStore(db_path)
        return STORE_COMMANDS[args.command](args, store)
    except StorageError as e:
        logger.error(f"Template store error: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 1


if __name__ == "__main__":
    sys.exit(main())
