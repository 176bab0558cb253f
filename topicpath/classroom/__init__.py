"""
TopicPath Classroom - Progress and localization resolution for topic content.

This module provides:
- Playability: chapter play states from linear prerequisites
- Recency / promotion: ongoing-story buckets and the promoted story
- Views: topic summaries, topic list and classroom payloads
- Localization: translation/voiceover overlay resolution
- ClassroomLoader / compiler: classroom.db access and build
- ProgressTracker: learner progress store
- Navigator: homescreen views and chapter actions
"""

from .playability import (
    resolve_playability,
    apply_playability,
    unknown_exploration_ids,
    has_recorded_progress,
    completed_chapter_count,
    is_story_completed,
)

from .localization import (
    OverlayLookup,
    TranslationLookup,
    VoiceoverLookup,
    LocalizedConceptCard,
    resolve_localized_content,
    localize_content,
    localize_concept_card,
)

from .promotion import (
    build_promoted_story,
    select_promotion,
)

from .recency import (
    StoryActivity,
    collect_ongoing,
    bucket_ongoing,
)

from .views import (
    build_topic_summary,
    clamp_promoted_story,
    count_ongoing_stories,
    build_topic_list,
    build_classroom,
)

from .compiler import (
    load_classroom_yaml,
    parse_classroom,
    run_integrity_checks,
    compile_classroom,
)

from .loader import ClassroomLoader

from .progress import (
    KeyedLock,
    ProgressTracker,
)

from .navigator import Navigator

__all__ = [
    # Playability
    "resolve_playability",
    "apply_playability",
    "unknown_exploration_ids",
    "has_recorded_progress",
    "completed_chapter_count",
    "is_story_completed",
    # Localization
    "OverlayLookup",
    "TranslationLookup",
    "VoiceoverLookup",
    "LocalizedConceptCard",
    "resolve_localized_content",
    "localize_content",
    "localize_concept_card",
    # Promotion
    "build_promoted_story",
    "select_promotion",
    # Recency
    "StoryActivity",
    "collect_ongoing",
    "bucket_ongoing",
    # Views
    "build_topic_summary",
    "clamp_promoted_story",
    "count_ongoing_stories",
    "build_topic_list",
    "build_classroom",
    # Compiler / Loader
    "load_classroom_yaml",
    "parse_classroom",
    "run_integrity_checks",
    "compile_classroom",
    "ClassroomLoader",
    # Progress
    "KeyedLock",
    "ProgressTracker",
    # Navigator
    "Navigator",
]
