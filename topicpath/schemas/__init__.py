"""
TopicPath Schemas - Pydantic models for the content progress engine.

This module exports all schema classes for:
- Content: content units, thumbnails, translation and voiceover overlays
- Topic: topics, stories, chapters, skills, concept cards, homescreen views
- Progress: learner progress tracking
"""

# Content schemas
from .content import (
    LessonThumbnail,
    SubtitledHtml,
    Translation,
    TranslationMapping,
    Voiceover,
    VoiceoverMapping,
    LocalizedContent,
)

# Topic schemas
from .topic import (
    ChapterPlayState,
    ChapterSummary,
    StorySummary,
    SkillSummary,
    Subtopic,
    Topic,
    ConceptCard,
    TopicSummary,
    PromotedStory,
    TopicList,
    OngoingStoryList,
    Classroom,
)

# Progress schemas
from .progress import (
    ChapterProgress,
    StoryProgress,
    ProgressIndex,
)

__all__ = [
    # Content
    'LessonThumbnail',
    'SubtitledHtml',
    'Translation',
    'TranslationMapping',
    'Voiceover',
    'VoiceoverMapping',
    'LocalizedContent',
    # Topic
    'ChapterPlayState',
    'ChapterSummary',
    'StorySummary',
    'SkillSummary',
    'Subtopic',
    'Topic',
    'ConceptCard',
    'TopicSummary',
    'PromotedStory',
    'TopicList',
    'OngoingStoryList',
    'Classroom',
    # Progress
    'ChapterProgress',
    'StoryProgress',
    'ProgressIndex',
]
