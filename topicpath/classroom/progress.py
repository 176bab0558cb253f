"""
ProgressTracker - Track learner story progress in ~/.topicpath/progress.db.

Stores learner progress separately from content (classroom.db):
- Per-chapter play state, in the story's chapter order
- Per-story time of the latest progress mutation

Records are appended or updated in place, never deleted. Writes to one
story are serialized per (learner_id, story_id) and re-check prerequisites
against the current stored state before recording a completion.
"""

import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Hashable, Iterator, Optional

from topicpath.config import DEFAULT_PROGRESS_DB
from topicpath.schemas import (
    ChapterPlayState,
    ChapterProgress,
    ProgressIndex,
    StoryProgress,
    StorySummary,
)
from topicpath.utils import Clock, current_time_ms

from .playability import resolve_playability


SCHEMA = """
CREATE TABLE IF NOT EXISTS story_progress (
    learner_id TEXT NOT NULL,
    story_id TEXT NOT NULL,
    last_updated_ms INTEGER NOT NULL DEFAULT 0,
    PRIMARY KEY (learner_id, story_id)
);

CREATE TABLE IF NOT EXISTS chapter_progress (
    learner_id TEXT NOT NULL,
    story_id TEXT NOT NULL,
    exploration_id TEXT NOT NULL,
    position INTEGER NOT NULL,
    play_state TEXT NOT NULL,
    updated_at_ms INTEGER NOT NULL,
    PRIMARY KEY (learner_id, story_id, exploration_id)
);

CREATE INDEX IF NOT EXISTS idx_chapter_progress_story
ON chapter_progress(learner_id, story_id);
"""


class KeyedLock:
    """One lock per key, so writers to different keys never contend."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[Hashable, threading.Lock] = {}

    def _lock_for(self, key: Hashable) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        lock = self._lock_for(key)
        with lock:
            yield


# Shared by all trackers in the process so two trackers on the same
# database still serialize writes to the same story.
_STORY_LOCKS = KeyedLock()


class ProgressTracker:
    """
    Track a learner's story progress in a SQLite database.

    Reads are snapshot reads and take no lock; playability is re-derived
    from them on every use.
    """

    def __init__(
        self,
        db_path: Optional[Path] = None,
        learner_id: str = "default",
        clock: Clock = current_time_ms,
    ):
        """
        Initialize progress tracker.

        Args:
            db_path: Path to progress.db (default: ~/.topicpath/progress.db)
            learner_id: Learner identifier for multi-user support
            clock: Source of epoch-millisecond timestamps for mutations
        """
        self.db_path = Path(db_path or DEFAULT_PROGRESS_DB)
        self.learner_id = learner_id
        self.clock = clock
        self._ensure_database()

    def _ensure_database(self):
        """Create database and tables if they don't exist."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(str(self.db_path))
        try:
            conn.executescript(SCHEMA)
            conn.commit()
        finally:
            conn.close()

    def _get_connection(self) -> sqlite3.Connection:
        """Get a new database connection."""
        conn = sqlite3.connect(str(self.db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def _story_transaction(self, story_id: str) -> Iterator[sqlite3.Connection]:
        """Exclusive write transaction on one story of this learner."""
        key = (str(self.db_path.resolve()), self.learner_id, story_id)
        with _STORY_LOCKS.hold(key):
            conn = sqlite3.connect(str(self.db_path), timeout=30.0, isolation_level=None)
            conn.row_factory = sqlite3.Row
            try:
                conn.execute("BEGIN IMMEDIATE")
                try:
                    yield conn
                except BaseException:
                    conn.execute("ROLLBACK")
                    raise
                conn.execute("COMMIT")
            finally:
                conn.close()

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def _read_story_progress(self, conn: sqlite3.Connection, story_id: str) -> Optional[StoryProgress]:
        row = conn.execute(
            """SELECT last_updated_ms FROM story_progress
               WHERE learner_id = ? AND story_id = ?""",
            (self.learner_id, story_id)
        ).fetchone()
        if not row:
            return None

        cursor = conn.execute(
            """SELECT exploration_id, play_state FROM chapter_progress
               WHERE learner_id = ? AND story_id = ?
               ORDER BY position""",
            (self.learner_id, story_id)
        )
        return StoryProgress(
            story_id=story_id,
            chapter_progress=[
                ChapterProgress(
                    exploration_id=r["exploration_id"],
                    play_state=ChapterPlayState(r["play_state"]),
                )
                for r in cursor.fetchall()
            ],
            last_updated_ms=row["last_updated_ms"],
        )

    def get_story_progress(self, story_id: str) -> Optional[StoryProgress]:
        """Get progress for a story, or None if it was never started."""
        conn = self._get_connection()
        try:
            return self._read_story_progress(conn, story_id)
        finally:
            conn.close()

    def get_progress_index(self) -> ProgressIndex:
        """Get progress for every story the learner has started, keyed by story_id."""
        conn = self._get_connection()
        try:
            cursor = conn.execute(
                """SELECT story_id, last_updated_ms FROM story_progress
                   WHERE learner_id = ?""",
                (self.learner_id,)
            )
            index = {
                row["story_id"]: StoryProgress(story_id=row["story_id"], last_updated_ms=row["last_updated_ms"])
                for row in cursor.fetchall()
            }

            cursor = conn.execute(
                """SELECT story_id, exploration_id, play_state FROM chapter_progress
                   WHERE learner_id = ?
                   ORDER BY story_id, position""",
                (self.learner_id,)
            )
            for row in cursor.fetchall():
                progress = index.get(row["story_id"])
                if progress is None:
                    continue
                progress.chapter_progress.append(ChapterProgress(
                    exploration_id=row["exploration_id"],
                    play_state=ChapterPlayState(row["play_state"]),
                ))
            return index
        finally:
            conn.close()

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def _write_chapter(
        self,
        conn: sqlite3.Connection,
        story: StorySummary,
        exploration_id: str,
        state: ChapterPlayState,
    ):
        now = self.clock()
        position = story.exploration_ids.index(exploration_id)
        conn.execute(
            """INSERT INTO chapter_progress
               (learner_id, story_id, exploration_id, position, play_state, updated_at_ms)
               VALUES (?, ?, ?, ?, ?, ?)
               ON CONFLICT(learner_id, story_id, exploration_id) DO UPDATE SET
                 position = excluded.position,
                 play_state = excluded.play_state,
                 updated_at_ms = excluded.updated_at_ms""",
            (self.learner_id, story.story_id, exploration_id, position, state.value, now)
        )
        conn.execute(
            """INSERT INTO story_progress (learner_id, story_id, last_updated_ms)
               VALUES (?, ?, ?)
               ON CONFLICT(learner_id, story_id) DO UPDATE SET
                 last_updated_ms = MAX(last_updated_ms, excluded.last_updated_ms)""",
            (self.learner_id, story.story_id, now)
        )

    def _chapter_state(
        self,
        conn: sqlite3.Connection,
        story: StorySummary,
        exploration_id: str,
    ) -> tuple[ChapterPlayState, Optional[StoryProgress]]:
        if exploration_id not in story.exploration_ids:
            raise ValueError(f"Chapter {exploration_id} is not part of story {story.story_id}")
        progress = self._read_story_progress(conn, story.story_id)
        states = resolve_playability(story, progress)
        return states[story.exploration_ids.index(exploration_id)], progress

    def start_chapter(self, story: StorySummary, exploration_id: str) -> bool:
        """
        Record that a chapter was started.

        Creates the story's progress on its first started chapter.

        Returns:
            False if the chapter is missing prerequisites, True otherwise

        Raises:
            ValueError: If the chapter is not part of the story
        """
        with self._story_transaction(story.story_id) as conn:
            state, progress = self._chapter_state(conn, story, exploration_id)
            if state == ChapterPlayState.NOT_PLAYABLE_MISSING_PREREQUISITES:
                return False
            if progress is None or progress.get_chapter(exploration_id) is None:
                self._write_chapter(conn, story, exploration_id, ChapterPlayState.NOT_STARTED)
            return True

    def complete_chapter(self, story: StorySummary, exploration_id: str) -> bool:
        """
        Mark a chapter as completed.

        The chapter's prerequisite is checked against the stored state read
        inside the same exclusive transaction, never a stale snapshot.

        Returns:
            False if the chapter is missing prerequisites, True otherwise

        Raises:
            ValueError: If the chapter is not part of the story
        """
        with self._story_transaction(story.story_id) as conn:
            state, _ = self._chapter_state(conn, story, exploration_id)
            if state == ChapterPlayState.NOT_PLAYABLE_MISSING_PREREQUISITES:
                return False
            if state != ChapterPlayState.COMPLETED:
                self._write_chapter(conn, story, exploration_id, ChapterPlayState.COMPLETED)
            return True
