"""
Promotion tests - selecting the homescreen story.
"""

from topicpath.classroom import select_promotion
from topicpath.schemas import (
    ChapterPlayState,
    ChapterProgress,
    ChapterSummary,
    LessonThumbnail,
    StoryProgress,
    StorySummary,
    Topic,
)


NOW = 1_700_000_000_000


def make_story(story_id: str, n: int = 3) -> StorySummary:
    return StorySummary(
        story_id=story_id,
        story_name=f"Story {story_id}",
        chapter=[
            ChapterSummary(
                exploration_id=f"{story_id}_{i}",
                name=f"Chapter {i}",
                chapter_thumbnail=LessonThumbnail(thumbnail_filename=f"{story_id}_{i}.png"),
            )
            for i in range(n)
        ],
    )


def completed(story_id: str, count: int, last_updated_ms: int) -> StoryProgress:
    return StoryProgress(
        story_id=story_id,
        chapter_progress=[
            ChapterProgress(exploration_id=f"{story_id}_{i}", play_state=ChapterPlayState.COMPLETED)
            for i in range(count)
        ],
        last_updated_ms=last_updated_ms,
    )


def topics() -> list[Topic]:
    return [
        Topic(topic_id="t1", name="Topic 1", story=[make_story("a"), make_story("b")]),
        Topic(topic_id="t2", name="Topic 2", story=[make_story("c"), make_story("d")]),
    ]


class TestInProgressPromotion:
    """Test promotion of stories the learner is part way through."""

    def test_most_recent_in_progress_wins(self):
        index = {
            "a": completed("a", 1, NOW - 5000),
            "c": completed("c", 2, NOW - 1000),
        }
        promoted = select_promotion(topics(), index, NOW)
        assert promoted.story_id == "c"
        assert promoted.topic_id == "t2"
        assert promoted.topic_name == "Topic 2"
        assert promoted.completed_chapter_count == 2
        assert promoted.total_chapter_count == 3

    def test_tie_broken_by_story_id(self):
        index = {
            "d": completed("d", 1, NOW - 1000),
            "b": completed("b", 1, NOW - 1000),
        }
        assert select_promotion(topics(), index, NOW).story_id == "b"

    def test_completed_story_not_promoted_as_in_progress(self):
        index = {
            "a": completed("a", 3, NOW),
            "b": completed("b", 1, NOW - 10_000),
        }
        assert select_promotion(topics(), index, NOW).story_id == "b"

    def test_uses_resolved_counts(self):
        # chapter 2 recorded without chapter 1: only chapter 0 counts
        progress = StoryProgress(
            story_id="a",
            chapter_progress=[
                ChapterProgress(exploration_id="a_0", play_state=ChapterPlayState.COMPLETED),
                ChapterProgress(exploration_id="a_2", play_state=ChapterPlayState.COMPLETED),
            ],
            last_updated_ms=NOW,
        )
        promoted = select_promotion(topics(), {"a": progress}, NOW)
        assert promoted.completed_chapter_count == 1

    def test_future_timestamps_clamped_to_now(self):
        index = {
            "d": completed("d", 1, NOW + 60_000),
            "b": completed("b", 1, NOW),
        }
        assert select_promotion(topics(), index, NOW).story_id == "b"

    def test_deterministic(self):
        index = {
            "a": completed("a", 1, NOW - 1000),
            "c": completed("c", 1, NOW - 1000),
            "d": completed("d", 2, NOW - 2000),
        }
        results = [select_promotion(topics(), index, NOW) for _ in range(5)]
        assert results[0].story_id == "a"
        assert all(result == results[0] for result in results)

    def test_thumbnail_from_first_chapter(self):
        promoted = select_promotion(topics(), {"a": completed("a", 1, NOW)}, NOW)
        assert promoted.lesson_thumbnail.thumbnail_filename == "a_0.png"


class TestRecommendation:
    """Test fallback to a startable story."""

    def test_first_story_recommended_without_progress(self):
        promoted = select_promotion(topics(), {}, NOW)
        assert promoted.story_id == "a"
        assert promoted.completed_chapter_count == 0
        assert promoted.total_chapter_count == 3

    def test_skips_completed_stories(self):
        index = {"a": completed("a", 3, NOW), "b": completed("b", 3, NOW)}
        promoted = select_promotion(topics(), index, NOW)
        assert promoted.story_id == "c"
        assert promoted.completed_chapter_count == 0

    def test_skips_started_stories(self):
        started = StoryProgress(
            story_id="a",
            chapter_progress=[ChapterProgress(exploration_id="a_0", play_state=ChapterPlayState.NOT_STARTED)],
            last_updated_ms=NOW,
        )
        promoted = select_promotion(topics(), {"a": started}, NOW)
        assert promoted.story_id == "b"
        assert promoted.completed_chapter_count == 0

    def test_skips_stories_without_chapters(self):
        topic = Topic(topic_id="t", name="T", story=[make_story("empty", 0), make_story("real")])
        assert select_promotion([topic], {}, NOW).story_id == "real"

    def test_nothing_when_everything_completed(self):
        index = {sid: completed(sid, 3, NOW) for sid in "abcd"}
        assert select_promotion(topics(), index, NOW) is None

    def test_nothing_without_topics(self):
        assert select_promotion([], {}, NOW) is None
