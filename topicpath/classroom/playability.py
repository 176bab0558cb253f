"""
Playability - Derive each chapter's play state from linear prerequisites.

Chapter i is playable only once chapter i-1 is completed. Stored progress
for a chapter whose prerequisite is incomplete is not trusted, so a story
can never show chapter i completed while chapter i-1 is not.
"""

from typing import Optional

from topicpath.schemas import (
    ChapterPlayState,
    StoryProgress,
    StorySummary,
)


def resolve_playability(
    story: StorySummary,
    progress: Optional[StoryProgress],
) -> list[ChapterPlayState]:
    """
    Resolve the play state of every chapter in canonical story order.

    Args:
        story: Story whose chapters are evaluated
        progress: Stored progress for the story, or None if never started

    Returns:
        One state per chapter; never COMPLETION_STATUS_UNSPECIFIED.
        Records for exploration ids outside the story are ignored.
    """
    completed = set()
    if progress is not None:
        completed = {
            record.exploration_id for record in progress.chapter_progress
            if record.play_state == ChapterPlayState.COMPLETED
        }

    states = []
    prerequisite_met = True
    for chapter in story.chapter:
        if not prerequisite_met:
            state = ChapterPlayState.NOT_PLAYABLE_MISSING_PREREQUISITES
        elif chapter.exploration_id in completed:
            state = ChapterPlayState.COMPLETED
        else:
            state = ChapterPlayState.NOT_STARTED
        states.append(state)
        prerequisite_met = state == ChapterPlayState.COMPLETED
    return states


def apply_playability(story: StorySummary, progress: Optional[StoryProgress]) -> StorySummary:
    """Copy of the story with chapter_play_state stamped on each chapter."""
    states = resolve_playability(story, progress)
    return story.model_copy(update={
        "chapter": [
            chapter.model_copy(update={"chapter_play_state": state})
            for chapter, state in zip(story.chapter, states)
        ]
    })


def unknown_exploration_ids(story: StorySummary, progress: Optional[StoryProgress]) -> list[str]:
    """Exploration ids recorded in progress that the story does not contain."""
    if progress is None:
        return []
    known = set(story.exploration_ids)
    return [
        record.exploration_id for record in progress.chapter_progress
        if record.exploration_id not in known
    ]


def has_recorded_progress(story: StorySummary, progress: Optional[StoryProgress]) -> bool:
    """Whether any chapter of the story has been started or completed."""
    if progress is None:
        return False
    known = set(story.exploration_ids)
    return any(record.exploration_id in known for record in progress.chapter_progress)


def completed_chapter_count(states: list[ChapterPlayState]) -> int:
    return sum(1 for state in states if state == ChapterPlayState.COMPLETED)


def is_story_completed(states: list[ChapterPlayState]) -> bool:
    return bool(states) and all(state == ChapterPlayState.COMPLETED for state in states)
