"""
Views - Aggregate homescreen and classroom payloads.

Pure composition and counting over resolved topics, promotions and
ongoing-story buckets.
"""

import logging
from typing import Optional, Sequence

from topicpath.schemas import (
    Classroom,
    OngoingStoryList,
    PromotedStory,
    Topic,
    TopicList,
    TopicSummary,
)


logger = logging.getLogger(__name__)


def build_topic_summary(topic: Topic) -> TopicSummary:
    """Denormalize a topic into its homescreen counts."""
    categorized = {skill_id for sub in topic.subtopic for skill_id in sub.skill_ids}
    uncategorized = [s for s in topic.skill if s.skill_id not in categorized]

    return TopicSummary(
        topic_id=topic.topic_id,
        name=topic.name,
        version=topic.version,
        subtopic_count=len(topic.subtopic),
        canonical_story_count=len(topic.story),
        uncategorized_skill_count=len(uncategorized),
        additional_story_count=len(topic.additional_story),
        total_skill_count=len(topic.skill),
        total_chapter_count=sum(len(story.chapter) for story in topic.story + topic.additional_story),
        topic_thumbnail=topic.topic_thumbnail,
    )


def clamp_promoted_story(story: PromotedStory) -> PromotedStory:
    """Clamp completed_chapter_count into [0, total_chapter_count]."""
    if story.completed_chapter_count <= story.total_chapter_count:
        return story
    logger.warning(
        f"Promoted story {story.story_id} reports {story.completed_chapter_count} of "
        f"{story.total_chapter_count} chapters completed; clamping"
    )
    return story.model_copy(update={"completed_chapter_count": story.total_chapter_count})


def count_ongoing_stories(ongoing: Optional[OngoingStoryList]) -> int:
    """Distinct (topic, story) pairs across both recency buckets."""
    if ongoing is None:
        return 0
    return len({(s.topic_id, s.story_id) for s in ongoing.recent_story + ongoing.older_story})


def build_topic_list(
    topic_summaries: Sequence[TopicSummary],
    promotion: Optional[PromotedStory],
    ongoing: Optional[OngoingStoryList] = None,
    topic_order: Optional[Sequence[str]] = None,
) -> TopicList:
    """
    Assemble the homescreen topic list.

    Args:
        topic_summaries: Summaries of the topics to show
        promotion: The promoted story, if any
        ongoing: Ongoing-story buckets used to stamp ongoing_story_count
        topic_order: Canonical topic ids; when given, summaries are ordered
            by it and unlisted topics follow in their given order
    """
    summaries = list(topic_summaries)
    if topic_order is not None:
        rank = {topic_id: idx for idx, topic_id in enumerate(topic_order)}
        summaries.sort(key=lambda s: rank.get(s.topic_id, len(rank)))

    return TopicList(
        promoted_story=clamp_promoted_story(promotion) if promotion is not None else None,
        topic_summary=summaries,
        ongoing_story_count=count_ongoing_stories(ongoing),
    )


def build_classroom(topics: Sequence[Topic]) -> Classroom:
    """Summaries of all topics, stamped with the latest structural update time."""
    return Classroom(
        topic_summary=[build_topic_summary(topic) for topic in topics],
        last_update_time_ms=max((topic.version_updated_ms for topic in topics), default=0),
    )
