"""
Classroom compiler - Bundle topic and concept card definitions into classroom.db.

Reads YAML source definitions, checks their integrity and writes a single
SQLite database for runtime serving by ClassroomLoader.
"""

import json
import logging
import sqlite3
from pathlib import Path
from typing import Any, Sequence

import yaml

from topicpath.schemas import ConceptCard, Topic


logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# SQLite Schema
# -----------------------------------------------------------------------------

SCHEMA = """
-- Topics table (full topic structure stored as JSON)
CREATE TABLE IF NOT EXISTS topics (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    position INTEGER NOT NULL,
    version INTEGER NOT NULL,
    version_updated_ms INTEGER NOT NULL,
    content JSON NOT NULL
);

-- Concept cards table
CREATE TABLE IF NOT EXISTS concept_cards (
    skill_id TEXT PRIMARY KEY,
    content JSON NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_topics_position ON topics(position);

-- Metadata table
CREATE TABLE IF NOT EXISTS metadata (
    key TEXT PRIMARY KEY,
    value TEXT
);
"""


# -----------------------------------------------------------------------------
# Source Loading
# -----------------------------------------------------------------------------

def parse_classroom(data: dict[str, Any]) -> tuple[list[Topic], list[ConceptCard]]:
    """Validate raw classroom definitions into topics and concept cards."""
    topics = [Topic.model_validate(t) for t in data.get("topics") or []]
    cards = [ConceptCard.model_validate(c) for c in data.get("concept_cards") or []]
    return topics, cards


def load_classroom_yaml(path: Path) -> tuple[list[Topic], list[ConceptCard]]:
    """
    Load topic and concept card definitions from a YAML file.

    The file holds two top-level lists, ``topics`` and ``concept_cards``,
    shaped like the Topic and ConceptCard schemas.

    Raises:
        FileNotFoundError: If the file doesn't exist
        yaml.YAMLError: If YAML parsing fails
        pydantic.ValidationError: If a definition does not match its schema
    """
    if not path.exists():
        raise FileNotFoundError(f"Classroom definition not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    return parse_classroom(data)


# -----------------------------------------------------------------------------
# Integrity Checks
# -----------------------------------------------------------------------------

def run_integrity_checks(topics: Sequence[Topic], concept_cards: Sequence[ConceptCard]) -> list[str]:
    """
    Check cross-entity integrity. Returns a list of human-readable issues.

    Checks:
    - topic ids are unique
    - story ids are unique across topics (progress is keyed by story_id)
    - exploration ids are unique across stories
    - every story has at least one chapter
    - subtopics only reference skills declared by their topic
    - concept cards have unique skill ids and no dangling overlays
    """
    issues = []

    topic_ids = set()
    story_owner: dict[str, str] = {}
    exploration_owner: dict[str, str] = {}

    for topic in topics:
        if topic.topic_id in topic_ids:
            issues.append(f"Duplicate topic id: {topic.topic_id}")
        topic_ids.add(topic.topic_id)

        for story in topic.story + topic.additional_story:
            owner = story_owner.get(story.story_id)
            if owner is not None:
                issues.append(f"Story {story.story_id} appears in topics {owner} and {topic.topic_id}")
            story_owner[story.story_id] = topic.topic_id

            if not story.chapter:
                issues.append(f"Story {story.story_id} in topic {topic.topic_id} has no chapters")

            for chapter in story.chapter:
                owner = exploration_owner.get(chapter.exploration_id)
                if owner is not None:
                    issues.append(
                        f"Exploration {chapter.exploration_id} appears in stories {owner} and {story.story_id}"
                    )
                exploration_owner[chapter.exploration_id] = story.story_id

        declared = {skill.skill_id for skill in topic.skill}
        for subtopic in topic.subtopic:
            for skill_id in subtopic.skill_ids:
                if skill_id not in declared:
                    issues.append(
                        f"Subtopic {subtopic.subtopic_id} in topic {topic.topic_id} "
                        f"references undeclared skill {skill_id}"
                    )

    skill_ids = set()
    for card in concept_cards:
        if card.skill_id in skill_ids:
            issues.append(f"Duplicate concept card for skill {card.skill_id}")
        skill_ids.add(card.skill_id)

        for content_id in card.dangling_content_ids():
            issues.append(f"Concept card {card.skill_id} has overlay for unknown content id {content_id}")

    return issues


# -----------------------------------------------------------------------------
# Database Population
# -----------------------------------------------------------------------------

def create_database(db_path: Path) -> sqlite3.Connection:
    """Create database and schema, replacing any existing file."""
    if db_path.exists():
        db_path.unlink()
        logger.info(f"Removed existing database: {db_path}")

    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path))
    conn.executescript(SCHEMA)
    conn.commit()
    logger.info(f"Created database schema: {db_path}")
    return conn


def populate_topics(conn: sqlite3.Connection, topics: Sequence[Topic]):
    """Populate topics table in canonical order."""
    for position, topic in enumerate(topics, 1):
        conn.execute(
            """INSERT OR REPLACE INTO topics
               (id, name, position, version, version_updated_ms, content)
               VALUES (?, ?, ?, ?, ?, ?)""",
            (
                topic.topic_id,
                topic.name,
                position,
                topic.version,
                topic.version_updated_ms,
                topic.model_dump_json(exclude_none=True),
            )
        )
    conn.commit()
    logger.info(f"Inserted {len(topics)} topics")


def populate_concept_cards(conn: sqlite3.Connection, concept_cards: Sequence[ConceptCard]):
    """Populate concept_cards table."""
    for card in concept_cards:
        conn.execute(
            "INSERT OR REPLACE INTO concept_cards (skill_id, content) VALUES (?, ?)",
            (card.skill_id, card.model_dump_json(exclude_none=True))
        )
    conn.commit()
    logger.info(f"Inserted {len(concept_cards)} concept cards")


def compute_stats(topics: Sequence[Topic], concept_cards: Sequence[ConceptCard]) -> dict:
    """Compute classroom statistics."""
    stories = [story for topic in topics for story in topic.story + topic.additional_story]
    return {
        "total_topics": len(topics),
        "total_stories": len(stories),
        "total_chapters": sum(len(story.chapter) for story in stories),
        "total_skills": sum(len(topic.skill) for topic in topics),
        "total_concept_cards": len(concept_cards),
        "last_update_time_ms": max((t.version_updated_ms for t in topics), default=0),
    }


def populate_metadata(conn: sqlite3.Connection, stats: dict):
    """Populate metadata table."""
    for key, value in stats.items():
        conn.execute(
            "INSERT OR REPLACE INTO metadata (key, value) VALUES (?, ?)",
            (key, json.dumps(value) if not isinstance(value, str) else value)
        )
    conn.commit()


def compile_classroom(
    topics: Sequence[Topic],
    concept_cards: Sequence[ConceptCard],
    db_path: Path,
) -> tuple[dict, list[str]]:
    """
    Write a complete classroom database.

    Integrity issues are logged and returned; they do not stop compilation.

    Returns:
        Tuple of (stats dict, integrity issues)
    """
    issues = run_integrity_checks(topics, concept_cards)
    if issues:
        logger.warning(f"Found {len(issues)} integrity issues:")
        for issue in issues[:10]:
            logger.warning(f"  - {issue}")
        if len(issues) > 10:
            logger.warning(f"  ... and {len(issues) - 10} more")

    conn = create_database(db_path)
    try:
        populate_topics(conn, topics)
        populate_concept_cards(conn, concept_cards)
        stats = compute_stats(topics, concept_cards)
        populate_metadata(conn, stats)
    finally:
        conn.close()

    return stats, issues
