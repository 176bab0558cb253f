"""
Navigator - Homescreen views, story navigation and chapter actions.

Provides:
- Homescreen topic list with promoted story and ongoing count
- Ongoing stories split into recent and older
- Stories with derived chapter play states
- Locale-resolved concept cards
- Chapter start/complete actions
"""

import logging
from typing import Optional

from topicpath.config import DEFAULT_LOCALE, RECENT_STORY_WINDOW_MS, Settings
from topicpath.schemas import (
    ChapterPlayState,
    Classroom,
    OngoingStoryList,
    ProgressIndex,
    PromotedStory,
    StorySummary,
    Topic,
    TopicList,
)
from topicpath.utils import Clock, current_time_ms

from .loader import ClassroomLoader
from .localization import LocalizedConceptCard, localize_concept_card
from .playability import (
    apply_playability,
    completed_chapter_count,
    resolve_playability,
    unknown_exploration_ids,
)
from .progress import ProgressTracker
from .promotion import select_promotion
from .recency import bucket_ongoing, collect_ongoing
from .views import build_classroom, build_topic_list, build_topic_summary


logger = logging.getLogger(__name__)


class Navigator:
    """
    Navigate topics and stories with prerequisite-gated progress.

    Combines ClassroomLoader (content) with ProgressTracker (learner state).
    Every view re-derives chapter play states from a fresh progress snapshot.
    """

    def __init__(
        self,
        loader: ClassroomLoader,
        progress: ProgressTracker,
        clock: Optional[Clock] = None,
        default_locale: str = DEFAULT_LOCALE,
        recent_window_ms: int = RECENT_STORY_WINDOW_MS,
    ):
        """
        Initialize navigator.

        Args:
            loader: ClassroomLoader instance for content access
            progress: ProgressTracker instance for learner progress
            clock: Source of "now" in epoch ms (default: the tracker's clock)
            default_locale: Locale used when a view is requested without one
            recent_window_ms: Recency window for ongoing stories
        """
        self.loader = loader
        self.progress = progress
        self.clock = clock or progress.clock
        self.default_locale = default_locale
        self.recent_window_ms = recent_window_ms

    @classmethod
    def from_settings(cls, settings: Settings, clock: Optional[Clock] = None) -> "Navigator":
        """Build a navigator over the databases and learner named in settings."""
        loader = ClassroomLoader(settings.classroom_db)
        progress = ProgressTracker(
            settings.progress_db,
            learner_id=settings.learner_id,
            clock=clock or current_time_ms,
        )
        return cls(
            loader,
            progress,
            default_locale=settings.default_locale,
            recent_window_ms=settings.recent_window_ms,
        )

    def _snapshot(self) -> tuple[list[Topic], ProgressIndex]:
        """Read topics and progress, logging progress that matches no chapter."""
        topics = self.loader.get_topics()
        index = self.progress.get_progress_index()

        stories = {s.story_id: s for t in topics for s in t.story + t.additional_story}
        for story_id, story_progress in index.items():
            story = stories.get(story_id)
            if story is None:
                logger.warning(f"Progress recorded for unknown story {story_id}; ignoring")
                continue
            unknown = unknown_exploration_ids(story, story_progress)
            if unknown:
                logger.warning(f"Progress for story {story_id} references unknown chapters {unknown}; ignoring")

        return topics, index

    def _find_story(self, topic_id: str, story_id: str) -> StorySummary:
        topic = self.loader.get_topic(topic_id)
        story = topic.get_story(story_id) if topic else None
        if story is None:
            raise ValueError(f"Story {story_id} not found in topic {topic_id}")
        return story

    # -------------------------------------------------------------------------
    # Homescreen
    # -------------------------------------------------------------------------

    def get_promoted_story(self) -> Optional[PromotedStory]:
        """Get the story to feature on the homescreen, if any."""
        topics, index = self._snapshot()
        return select_promotion(topics, index, self.clock())

    def get_ongoing_story_list(self) -> OngoingStoryList:
        """Get ongoing stories split into recent and older."""
        topics, index = self._snapshot()
        return bucket_ongoing(collect_ongoing(topics, index), self.clock(), self.recent_window_ms)

    def get_topic_list(self) -> TopicList:
        """Get the homescreen topic list."""
        topics, index = self._snapshot()
        now_ms = self.clock()
        ongoing = bucket_ongoing(collect_ongoing(topics, index), now_ms, self.recent_window_ms)
        return build_topic_list(
            [build_topic_summary(topic) for topic in topics],
            select_promotion(topics, index, now_ms),
            ongoing,
            topic_order=[topic.topic_id for topic in topics],
        )

    def get_classroom(self) -> Classroom:
        """Get the classroom listing of all topics."""
        return build_classroom(self.loader.get_topics())

    # -------------------------------------------------------------------------
    # Stories and Concept Cards
    # -------------------------------------------------------------------------

    def get_story(self, topic_id: str, story_id: str) -> Optional[StorySummary]:
        """Get a story with each chapter's play state filled in."""
        topic = self.loader.get_topic(topic_id)
        story = topic.get_story(story_id) if topic else None
        if story is None:
            return None
        return apply_playability(story, self.progress.get_story_progress(story_id))

    def get_concept_card(self, skill_id: str, locale: Optional[str] = None) -> Optional[LocalizedConceptCard]:
        """Get a skill's concept card resolved for a locale."""
        card = self.loader.get_concept_card(skill_id)
        if card is None:
            return None
        return localize_concept_card(card, locale or self.default_locale)

    # -------------------------------------------------------------------------
    # Chapter Actions
    # -------------------------------------------------------------------------

    def start_chapter(self, topic_id: str, story_id: str, exploration_id: str) -> bool:
        """
        Start a chapter if playable.

        Returns True if the chapter was started, False if it is missing prerequisites.
        """
        return self.progress.start_chapter(self._find_story(topic_id, story_id), exploration_id)

    def complete_chapter(self, topic_id: str, story_id: str, exploration_id: str) -> Optional[str]:
        """
        Complete a chapter and return the next chapter now playable.

        Returns:
            Exploration ID of the next chapter, or None if the story is
            finished or the chapter was missing prerequisites
        """
        story = self._find_story(topic_id, story_id)
        if not self.progress.complete_chapter(story, exploration_id):
            logger.warning(f"Chapter {exploration_id} of story {story_id} is missing prerequisites")
            return None

        states = resolve_playability(story, self.progress.get_story_progress(story_id))
        for chapter, state in zip(story.chapter, states):
            if state == ChapterPlayState.NOT_STARTED:
                return chapter.exploration_id
        return None

    # -------------------------------------------------------------------------
    # Progress Summary
    # -------------------------------------------------------------------------

    def get_progress_summary(self) -> dict:
        """Get progress summary for display."""
        topics, index = self._snapshot()

        topic_stats = []
        completed_total = 0
        chapter_total = 0
        for topic in topics:
            completed = 0
            total = 0
            for story in topic.story:
                completed += completed_chapter_count(resolve_playability(story, index.get(story.story_id)))
                total += len(story.chapter)
            topic_stats.append({
                "id": topic.topic_id,
                "name": topic.name,
                "completed": completed,
                "total": total,
            })
            completed_total += completed
            chapter_total += total

        return {
            "total_chapters": chapter_total,
            "completed": completed_total,
            "completion_percent": round(completed_total / chapter_total * 100, 1) if chapter_total > 0 else 0,
            "topics": topic_stats,
        }
