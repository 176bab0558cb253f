#!/usr/bin/env python3
"""
show_homescreen.py - Print a learner's homescreen views as JSON.

Reads classroom.db and progress.db from the configured settings
(TOPICPATH_* environment variables or .env) and prints the topic list,
the ongoing story list, or a localized concept card.

Usage:
  python scripts/show_homescreen.py
  python scripts/show_homescreen.py --ongoing
  python scripts/show_homescreen.py --learner learner_42 --concept-card skill_fraction_parts --locale es
"""

import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from topicpath.classroom import Navigator
from topicpath.config import load_settings

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def main():
    settings = load_settings(PROJECT_ROOT / ".env")

    parser = argparse.ArgumentParser(description="Print homescreen views for a learner")
    parser.add_argument(
        "--learner",
        default=settings.learner_id,
        help="Learner id (default: TOPICPATH_LEARNER_ID or 'default')"
    )
    parser.add_argument(
        "--ongoing",
        action="store_true",
        help="Print the ongoing story list instead of the topic list"
    )
    parser.add_argument(
        "--concept-card",
        default=None,
        help="Print the concept card for this skill id"
    )
    parser.add_argument(
        "--locale",
        default=None,
        help="Locale for concept cards (default: TOPICPATH_DEFAULT_LOCALE)"
    )

    args = parser.parse_args()
    settings = dataclasses.replace(settings, learner_id=args.learner)

    logger.info(f"Classroom: {settings.classroom_db}")
    logger.info(f"Progress: {settings.progress_db} (learner {settings.learner_id})")
    navigator = Navigator.from_settings(settings)

    if args.concept_card:
        card = navigator.get_concept_card(args.concept_card, args.locale)
        if card is None:
            logger.error(f"No concept card for skill {args.concept_card}")
            sys.exit(1)
        output = {
            "skill_id": card.skill_id,
            "skill_description": card.skill_description,
            "locale": card.locale,
            "explanation": card.explanation.model_dump(exclude_none=True),
            "worked_examples": [e.model_dump(exclude_none=True) for e in card.worked_examples],
        }
        print(json.dumps(output, indent=2, ensure_ascii=False))
    elif args.ongoing:
        print(navigator.get_ongoing_story_list().model_dump_json(exclude_none=True, indent=2))
    else:
        print(navigator.get_topic_list().model_dump_json(exclude_none=True, indent=2))


if __name__ == "__main__":
    main()
