"""
Progress tracking schemas for TopicPath.

Defines Pydantic models for learner progress:
- Per-chapter play state records
- Per-story progress, ordered as the story's chapters
"""

from pydantic import BaseModel, Field

from .topic import ChapterPlayState


class ChapterProgress(BaseModel):
    exploration_id: str  # back-reference to ChapterSummary
    play_state: ChapterPlayState = ChapterPlayState.COMPLETION_STATUS_UNSPECIFIED


class StoryProgress(BaseModel):
    story_id: str
    chapter_progress: list[ChapterProgress] = []
    last_updated_ms: int = Field(default=0, ge=0)  # most recent mutation

    def get_chapter(self, exploration_id: str) -> ChapterProgress | None:
        for record in self.chapter_progress:
            if record.exploration_id == exploration_id:
                return record
        return None


# story_id -> progress, as held by the learner's progress store
ProgressIndex = dict[str, StoryProgress]
