"""
Promotion - Choose the single story featured on the homescreen.

Priority:
1. The most recently updated in-progress story (some, not all, chapters completed)
2. The first startable story the learner has not started, in canonical order
3. Nothing, when every story has been completed
"""

import logging
from typing import Optional, Sequence

from topicpath.schemas import (
    ChapterPlayState,
    ProgressIndex,
    PromotedStory,
    StorySummary,
    Topic,
)

from .playability import (
    completed_chapter_count,
    has_recorded_progress,
    is_story_completed,
    resolve_playability,
)


logger = logging.getLogger(__name__)


def build_promoted_story(
    topic: Topic,
    story: StorySummary,
    states: list[ChapterPlayState],
) -> PromotedStory:
    """Project a story and its resolved chapter states into a PromotedStory."""
    thumbnail = story.chapter[0].chapter_thumbnail if story.chapter else topic.topic_thumbnail
    return PromotedStory(
        story_id=story.story_id,
        story_name=story.story_name,
        topic_id=topic.topic_id,
        topic_name=topic.name,
        completed_chapter_count=completed_chapter_count(states),
        total_chapter_count=len(story.chapter),
        lesson_thumbnail=thumbnail,
    )


def select_promotion(
    topics: Sequence[Topic],
    progress_index: ProgressIndex,
    now_ms: int,
) -> Optional[PromotedStory]:
    """
    Select the story to promote.

    Args:
        topics: Topics in canonical order
        progress_index: Learner progress keyed by story_id
        now_ms: Reference time; update timestamps later than this are
            treated as happening now

    Returns:
        The promoted story, or None if nothing is in progress or startable
    """
    in_progress = []
    recommendation = None
    position = 0

    for topic in topics:
        for story in topic.story:
            position += 1
            if not story.chapter:
                logger.debug(f"Skipping story {story.story_id} with no chapters")
                continue

            progress = progress_index.get(story.story_id)
            states = resolve_playability(story, progress)
            completed = completed_chapter_count(states)

            if completed > 0 and not is_story_completed(states):
                last_updated = min(progress.last_updated_ms, now_ms)
                in_progress.append((-last_updated, story.story_id, position, topic, story, states))
            elif (
                recommendation is None
                and not has_recorded_progress(story, progress)
                and states[0] == ChapterPlayState.NOT_STARTED
            ):
                recommendation = (topic, story, states)

    if in_progress:
        _, _, _, topic, story, states = min(in_progress, key=lambda item: item[:3])
        return build_promoted_story(topic, story, states)

    if recommendation is not None:
        return build_promoted_story(*recommendation)

    return None
