"""
Topic structure schemas for TopicPath.

Defines Pydantic models for the content hierarchy including:
- Topics, stories, chapters and skills
- Concept cards with their localization overlays
- Homescreen projections (topic summaries, promoted stories, topic lists)
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .content import (
    LessonThumbnail,
    SubtitledHtml,
    TranslationMapping,
    VoiceoverMapping,
)


class ChapterPlayState(str, Enum):
    # Sentinel for uninitialized storage; never produced by playability resolution.
    COMPLETION_STATUS_UNSPECIFIED = "completion_status_unspecified"
    NOT_STARTED = "not_started"
    NOT_PLAYABLE_MISSING_PREREQUISITES = "not_playable_missing_prerequisites"
    COMPLETED = "completed"


def _require_unique(ids: list[str], what: str) -> None:
    seen = set()
    for item_id in ids:
        if item_id in seen:
            raise ValueError(f"Duplicate {what}: {item_id}")
        seen.add(item_id)


# -----------------------------------------------------------------------------
# Hierarchy
# -----------------------------------------------------------------------------


class ChapterSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    exploration_id: str = Field(..., min_length=1)  # progress join key
    name: str
    chapter_play_state: ChapterPlayState = ChapterPlayState.COMPLETION_STATUS_UNSPECIFIED
    chapter_thumbnail: LessonThumbnail = LessonThumbnail()


class StorySummary(BaseModel):
    """A story; chapter i is the prerequisite of chapter i+1."""
    model_config = ConfigDict(frozen=True)

    story_id: str = Field(..., min_length=1)
    story_name: str
    chapter: list[ChapterSummary] = []

    @field_validator('chapter')
    @classmethod
    def chapters_unique(cls, v):
        _require_unique([c.exploration_id for c in v], "exploration_id")
        return v

    @property
    def exploration_ids(self) -> list[str]:
        return [c.exploration_id for c in self.chapter]


class SkillSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    skill_id: str = Field(..., min_length=1)
    description: str
    thumbnail_url: Optional[str] = None  # absent: UI supplies a default


class Subtopic(BaseModel):
    model_config = ConfigDict(frozen=True)

    subtopic_id: str
    title: str
    skill_ids: list[str] = []


class Topic(BaseModel):
    model_config = ConfigDict(frozen=True)

    topic_id: str = Field(..., min_length=1)
    name: str
    description: str = ""
    story: list[StorySummary] = []             # canonical stories, in play order
    skill: list[SkillSummary] = []
    topic_thumbnail: LessonThumbnail = LessonThumbnail()
    subtopic: list[Subtopic] = []
    additional_story: list[StorySummary] = []  # non-canonical stories
    version: int = Field(default=1, ge=1)
    version_updated_ms: int = Field(default=0, ge=0)

    @field_validator('story')
    @classmethod
    def stories_unique(cls, v):
        _require_unique([s.story_id for s in v], "story_id")
        return v

    @field_validator('additional_story')
    @classmethod
    def additional_stories_unique(cls, v, info):
        canonical = info.data.get('story', [])
        _require_unique([s.story_id for s in canonical + v], "story_id")
        return v

    @field_validator('skill')
    @classmethod
    def skills_unique(cls, v):
        _require_unique([s.skill_id for s in v], "skill_id")
        return v

    def get_story(self, story_id: str) -> Optional[StorySummary]:
        for story in self.story + self.additional_story:
            if story.story_id == story_id:
                return story
        return None


class ConceptCard(BaseModel):
    """Review card for a single skill, with per-content-id overlays."""
    model_config = ConfigDict(frozen=True)

    skill_id: str = Field(..., min_length=1)
    skill_description: str
    explanation: SubtitledHtml
    worked_example: list[SubtitledHtml] = []
    recorded_voiceover: dict[str, VoiceoverMapping] = {}
    written_translation: dict[str, TranslationMapping] = {}

    @field_validator('worked_example')
    @classmethod
    def content_ids_unique(cls, v, info):
        ids = [example.content_id for example in v]
        explanation = info.data.get('explanation')
        if explanation is not None:
            ids.insert(0, explanation.content_id)
        _require_unique(ids, "content_id")
        return v

    def content_ids(self) -> list[str]:
        """Content ids of the explanation and worked examples, in display order."""
        return [self.explanation.content_id] + [e.content_id for e in self.worked_example]

    def dangling_content_ids(self) -> list[str]:
        """Overlay keys that reference no content unit in this card."""
        known = set(self.content_ids())
        referenced = set(self.recorded_voiceover) | set(self.written_translation)
        return sorted(referenced - known)


# -----------------------------------------------------------------------------
# Homescreen projections
# -----------------------------------------------------------------------------


class TopicSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    topic_id: str
    name: str
    version: int = Field(default=1, ge=1)
    subtopic_count: int = Field(default=0, ge=0)
    canonical_story_count: int = Field(default=0, ge=0)
    uncategorized_skill_count: int = Field(default=0, ge=0)
    additional_story_count: int = Field(default=0, ge=0)
    total_skill_count: int = Field(default=0, ge=0)
    total_chapter_count: int = Field(default=0, ge=0)
    topic_thumbnail: LessonThumbnail = LessonThumbnail()


class PromotedStory(BaseModel):
    # completed <= total is enforced by the view builder, which clamps.
    model_config = ConfigDict(frozen=True)

    story_id: str
    story_name: str
    topic_id: str
    topic_name: str
    completed_chapter_count: int = Field(default=0, ge=0)
    total_chapter_count: int = Field(default=0, ge=0)
    lesson_thumbnail: LessonThumbnail = LessonThumbnail()


class TopicList(BaseModel):
    model_config = ConfigDict(frozen=True)

    promoted_story: Optional[PromotedStory] = None
    topic_summary: list[TopicSummary] = []
    ongoing_story_count: int = Field(default=0, ge=0)


class OngoingStoryList(BaseModel):
    model_config = ConfigDict(frozen=True)

    recent_story: list[PromotedStory] = []  # touched within the recency window
    older_story: list[PromotedStory] = []


class Classroom(BaseModel):
    model_config = ConfigDict(frozen=True)

    topic_summary: list[TopicSummary] = []
    last_update_time_ms: int = Field(default=0, ge=0)
