#!/usr/bin/env python3
"""
Main CLI Entry Point
Tokenize sentences, resolve word families and maintain family statistics
"""

import argparse
import sys
import logging
from typing import List, Optional

from word_families.config import configure_logging
from word_families.exceptions import WordFamilyError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Word Family System CLI')
    parser.add_argument('--log-level', default=None, help='Override LOG_LEVEL (DEBUG, INFO, ...)')
    subparsers = parser.add_subparsers(dest='command')

    tokenize_parser = subparsers.add_parser('tokenize', help='Normalize a sentence into tokens')
    tokenize_parser.add_argument('text', help='Sentence to tokenize')
    tokenize_parser.add_argument('--keep-hyphens', action='store_true',
                                 help='Keep hyphenated compounds as one token')

    resolve_parser = subparsers.add_parser('resolve', help='Resolve words or a sentence to word families')
    resolve_parser.add_argument('text', help='Word or sentence to resolve')

    subparsers.add_parser('populate', help='Fill word_family on records that have none')

    stats_parser = subparsers.add_parser('stats', help='Show word family statistics')
    stats_parser.add_argument('--limit', type=int, default=20, help='Number of families to show')

    subparsers.add_parser('init-db', help='Create the vocabulary and word record tables')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    configure_logging(args.log_level)

    try:
        if args.command == 'tokenize':
            from word_families.normalizer import Normalizer

            normalizer = Normalizer(preserve_hyphens=args.keep_hyphens)
            print(" ".join(normalizer.normalize(args.text)))

        elif args.command == 'resolve':
            from word_families.family_resolver import FamilyResolver
            from word_families.normalizer import normalize
            from word_families.vocabulary_index import PostgresVocabularyIndex

            resolver = FamilyResolver(PostgresVocabularyIndex())
            for token, family in resolver.resolve_tokens(normalize(args.text)).items():
                print(f"{token}\t{family.strip() if family else '[not found]'}")

        elif args.command == 'populate':
            from word_families.family_resolver import FamilyResolver
            from word_families.population import populate_family_labels
            from word_families.record_store import PostgresWordRecordStore
            from word_families.vocabulary_index import PostgresVocabularyIndex

            print("[INFO] Populating word families ...")
            snapshot = PostgresVocabularyIndex().snapshot()
            summary = populate_family_labels(PostgresWordRecordStore(), FamilyResolver(snapshot))
            print(
                f"[OK] Updated {summary.updated} | Not found {summary.not_found} | "
                f"Failed {summary.failed} | Total {summary.total}"
            )

        elif args.command == 'stats':
            from word_families.aggregator import FamilyStatsService
            from word_families.record_store import PostgresWordRecordStore

            service = FamilyStatsService(PostgresWordRecordStore())
            for entry in service.family_stats()[:args.limit]:
                breakdown = ", ".join(f"{item.word} ({item.count})" for item in entry.derivatives)
                print(f"{entry.headword:<20} {entry.total_count:>6}  {breakdown}")

        elif args.command == 'init-db':
            from word_families.database_manager import get_database_manager
            from word_families.record_store import PostgresWordRecordStore

            manager = get_database_manager()
            if not manager.test_connection():
                print("[ERROR] Database connection failed")
                return 1
            PostgresWordRecordStore(manager).ensure_schema()
            print("[OK] Tables ready")

        return 0

    except WordFamilyError as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"[ERROR] {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
