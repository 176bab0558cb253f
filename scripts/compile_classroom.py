#!/usr/bin/env python3
"""
compile_classroom.py - Compile topic and concept card definitions into classroom.db.

Reads a YAML classroom definition, runs integrity checks and writes the
SQLite database served by ClassroomLoader.

Usage:
  python scripts/compile_classroom.py
  python scripts/compile_classroom.py --source data/sample_classroom.yaml --output data/classroom.db
  python scripts/compile_classroom.py --strict    # fail on integrity issues
"""

import argparse
import json
import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from topicpath.classroom import compile_classroom, load_classroom_yaml
from topicpath.config import load_settings

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def main():
    settings = load_settings(PROJECT_ROOT / ".env")

    parser = argparse.ArgumentParser(description="Compile classroom.db from YAML definitions")
    parser.add_argument(
        "--source",
        type=Path,
        default=PROJECT_ROOT / "data" / "sample_classroom.yaml",
        help="YAML classroom definition"
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=settings.classroom_db,
        help="Output database path (default: TOPICPATH_CLASSROOM_DB or data/classroom.db)"
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with an error if integrity checks find issues"
    )
    parser.add_argument(
        "--stats-output",
        type=Path,
        default=None,
        help="Output path for stats JSON (default: alongside database)"
    )

    args = parser.parse_args()

    logger.info(f"Loading classroom definition from {args.source}...")
    topics, concept_cards = load_classroom_yaml(args.source)
    logger.info(f"  Loaded {len(topics)} topics, {len(concept_cards)} concept cards")

    stats, issues = compile_classroom(topics, concept_cards, args.output)
    if issues and args.strict:
        logger.error(f"Integrity checks failed with {len(issues)} issues")
        sys.exit(1)
    if not issues:
        logger.info("  All integrity checks passed!")

    stats_path = args.stats_output or args.output.with_suffix(".stats.json")
    with open(stats_path, "w", encoding="utf-8") as f:
        json.dump(stats, f, indent=2, ensure_ascii=False)
    logger.info(f"Saved stats to: {stats_path}")

    logger.info("=" * 50)
    logger.info("COMPILATION COMPLETE")
    logger.info("=" * 50)
    logger.info(f"Database: {args.output}")
    logger.info(f"Topics: {stats['total_topics']}")
    logger.info(f"Stories: {stats['total_stories']} ({stats['total_chapters']} chapters)")
    logger.info(f"Concept cards: {stats['total_concept_cards']}")
    if issues:
        logger.warning(f"Integrity issues: {len(issues)}")


if __name__ == "__main__":
    main()
