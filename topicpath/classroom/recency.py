"""
Recency - Partition a learner's ongoing stories into recent and older.

A story is ongoing once any of its chapters has a progress record, until
every chapter is completed. Recent means updated less than the recency
window (7 days by default) before "now"; an update exactly one window ago
is older.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Sequence

from topicpath.config import RECENT_STORY_WINDOW_MS
from topicpath.schemas import (
    OngoingStoryList,
    ProgressIndex,
    PromotedStory,
    Topic,
)

from .playability import has_recorded_progress, is_story_completed, resolve_playability
from .promotion import build_promoted_story


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoryActivity:
    """An ongoing story with the time of its latest progress mutation."""
    story: PromotedStory
    last_updated_ms: int


def collect_ongoing(topics: Sequence[Topic], progress_index: ProgressIndex) -> list[StoryActivity]:
    """Build the activity list of every ongoing canonical story, in canonical order."""
    activities = []
    for topic in topics:
        for story in topic.story:
            progress = progress_index.get(story.story_id)
            if not has_recorded_progress(story, progress):
                continue
            states = resolve_playability(story, progress)
            if is_story_completed(states):
                continue
            activities.append(StoryActivity(
                story=build_promoted_story(topic, story, states),
                last_updated_ms=progress.last_updated_ms,
            ))
    return activities


def bucket_ongoing(
    activities: Iterable[StoryActivity],
    now_ms: int,
    window_ms: int = RECENT_STORY_WINDOW_MS,
) -> OngoingStoryList:
    """
    Split ongoing stories into recent and older buckets.

    Each bucket is ordered most recently updated first, ties broken by
    story_id ascending, then by first appearance. A story reported more
    than once within the same topic keeps its latest activity. Stories
    with no chapters cannot be ongoing and are skipped.
    """
    latest: dict[tuple[str, str], StoryActivity] = {}
    for activity in activities:
        story = activity.story
        if story.total_chapter_count == 0:
            logger.warning(f"Story {story.story_id} has no chapters; not listed as ongoing")
            continue
        key = (story.topic_id, story.story_id)
        seen = latest.get(key)
        if seen is None or activity.last_updated_ms > seen.last_updated_ms:
            latest[key] = activity

    ordered = sorted(latest.values(), key=lambda a: (-a.last_updated_ms, a.story.story_id))

    recent = []
    older = []
    for activity in ordered:
        if now_ms - activity.last_updated_ms < window_ms:
            recent.append(activity.story)
        else:
            older.append(activity.story)

    return OngoingStoryList(recent_story=recent, older_story=older)
