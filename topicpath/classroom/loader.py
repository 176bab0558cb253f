"""
ClassroomLoader - Load data from classroom.db SQLite database.

Provides read-only access to:
- Topics (with stories, chapters, skills and subtopics)
- Concept cards
- Compilation metadata
"""

import sqlite3
from pathlib import Path
from typing import Optional

from topicpath.schemas import ConceptCard, Topic


class ClassroomLoader:
    """
    Load classroom data from SQLite database.

    Thread-safe for read operations. Each method creates a new connection.
    """

    def __init__(self, db_path: str | Path):
        """
        Initialize loader with path to classroom.db.

        Args:
            db_path: Path to classroom.db file
        """
        self.db_path = Path(db_path)
        if not self.db_path.exists():
            raise FileNotFoundError(f"Classroom database not found: {db_path}")

    def _get_connection(self) -> sqlite3.Connection:
        """Get a new database connection."""
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        return conn

    # -------------------------------------------------------------------------
    # Metadata
    # -------------------------------------------------------------------------

    def get_metadata(self, key: str) -> Optional[str]:
        """Get metadata value by key."""
        conn = self._get_connection()
        try:
            cursor = conn.execute(
                "SELECT value FROM metadata WHERE key = ?", (key,)
            )
            row = cursor.fetchone()
            return row["value"] if row else None
        finally:
            conn.close()

    def get_all_metadata(self) -> dict[str, str]:
        """Get all metadata as a dictionary."""
        conn = self._get_connection()
        try:
            cursor = conn.execute("SELECT key, value FROM metadata")
            return {row["key"]: row["value"] for row in cursor.fetchall()}
        finally:
            conn.close()

    # -------------------------------------------------------------------------
    # Topics
    # -------------------------------------------------------------------------

    def get_topics(self) -> list[Topic]:
        """Get all topics in canonical order."""
        conn = self._get_connection()
        try:
            cursor = conn.execute("SELECT content FROM topics ORDER BY position")
            return [Topic.model_validate_json(row["content"]) for row in cursor.fetchall()]
        finally:
            conn.close()

    def get_topic(self, topic_id: str) -> Optional[Topic]:
        """Get a single topic by ID."""
        conn = self._get_connection()
        try:
            cursor = conn.execute(
                "SELECT content FROM topics WHERE id = ?", (topic_id,)
            )
            row = cursor.fetchone()
            if not row:
                return None
            return Topic.model_validate_json(row["content"])
        finally:
            conn.close()

    # -------------------------------------------------------------------------
    # Concept Cards
    # -------------------------------------------------------------------------

    def get_concept_card(self, skill_id: str) -> Optional[ConceptCard]:
        """Get the concept card for a skill."""
        conn = self._get_connection()
        try:
            cursor = conn.execute(
                "SELECT content FROM concept_cards WHERE skill_id = ?", (skill_id,)
            )
            row = cursor.fetchone()
            if not row:
                return None
            return ConceptCard.model_validate_json(row["content"])
        finally:
            conn.close()
