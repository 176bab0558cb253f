"""
Playability tests - chapter play states from linear prerequisites.
"""

import itertools

from topicpath.classroom import (
    apply_playability,
    completed_chapter_count,
    has_recorded_progress,
    is_story_completed,
    resolve_playability,
    unknown_exploration_ids,
)
from topicpath.schemas import (
    ChapterPlayState,
    ChapterProgress,
    ChapterSummary,
    StoryProgress,
    StorySummary,
)

COMPLETED = ChapterPlayState.COMPLETED
NOT_STARTED = ChapterPlayState.NOT_STARTED
BLOCKED = ChapterPlayState.NOT_PLAYABLE_MISSING_PREREQUISITES
UNSPECIFIED = ChapterPlayState.COMPLETION_STATUS_UNSPECIFIED


def make_story(n: int, story_id: str = "story") -> StorySummary:
    return StorySummary(
        story_id=story_id,
        story_name=story_id.title(),
        chapter=[ChapterSummary(exploration_id=f"exp_{i}", name=f"Chapter {i}") for i in range(n)],
    )


def make_progress(states: dict[str, ChapterPlayState], story_id: str = "story") -> StoryProgress:
    return StoryProgress(
        story_id=story_id,
        chapter_progress=[
            ChapterProgress(exploration_id=eid, play_state=state) for eid, state in states.items()
        ],
        last_updated_ms=1,
    )


class TestResolvePlayability:
    """Test the chapter play state rules."""

    def test_no_progress(self):
        assert resolve_playability(make_story(3), None) == [NOT_STARTED, BLOCKED, BLOCKED]

    def test_empty_story(self):
        assert resolve_playability(make_story(0), None) == []

    def test_first_chapter_completed(self):
        progress = make_progress({"exp_0": COMPLETED})
        assert resolve_playability(make_story(3), progress) == [COMPLETED, NOT_STARTED, BLOCKED]

    def test_all_completed(self):
        progress = make_progress({"exp_0": COMPLETED, "exp_1": COMPLETED})
        assert resolve_playability(make_story(2), progress) == [COMPLETED, COMPLETED]

    def test_completion_past_a_gap_is_not_trusted(self):
        progress = make_progress({"exp_0": COMPLETED, "exp_2": COMPLETED})
        assert resolve_playability(make_story(3), progress) == [COMPLETED, NOT_STARTED, BLOCKED]

    def test_later_completion_without_first(self):
        progress = make_progress({"exp_1": COMPLETED, "exp_2": COMPLETED})
        assert resolve_playability(make_story(3), progress) == [NOT_STARTED, BLOCKED, BLOCKED]

    def test_unspecified_record_read_as_not_completed(self):
        progress = make_progress({"exp_0": UNSPECIFIED})
        assert resolve_playability(make_story(2), progress) == [NOT_STARTED, BLOCKED]

    def test_never_emits_unspecified(self):
        story = make_story(4)
        for combo in itertools.product([None, COMPLETED, NOT_STARTED, UNSPECIFIED, BLOCKED], repeat=4):
            records = {f"exp_{i}": s for i, s in enumerate(combo) if s is not None}
            states = resolve_playability(story, make_progress(records))
            assert UNSPECIFIED not in states

    def test_completion_is_prefix_closed(self):
        story = make_story(4)
        for combo in itertools.product([None, COMPLETED, NOT_STARTED], repeat=4):
            records = {f"exp_{i}": s for i, s in enumerate(combo) if s is not None}
            states = resolve_playability(story, make_progress(records))
            for i, state in enumerate(states):
                if state == COMPLETED:
                    assert all(s == COMPLETED for s in states[:i])

    def test_unknown_records_ignored(self):
        progress = make_progress({"exp_0": COMPLETED, "exp_other": COMPLETED})
        assert resolve_playability(make_story(2), progress) == [COMPLETED, NOT_STARTED]


class TestPlayabilityHelpers:
    """Test helpers built on resolved states."""

    def test_apply_playability_stamps_chapters(self):
        story = apply_playability(make_story(2), make_progress({"exp_0": COMPLETED}))
        assert [c.chapter_play_state for c in story.chapter] == [COMPLETED, NOT_STARTED]

    def test_apply_playability_leaves_input_unchanged(self):
        story = make_story(2)
        apply_playability(story, None)
        assert story.chapter[0].chapter_play_state == UNSPECIFIED

    def test_unknown_exploration_ids(self):
        progress = make_progress({"exp_0": COMPLETED, "exp_9": COMPLETED})
        assert unknown_exploration_ids(make_story(2), progress) == ["exp_9"]
        assert unknown_exploration_ids(make_story(2), None) == []

    def test_has_recorded_progress(self):
        story = make_story(2)
        assert not has_recorded_progress(story, None)
        assert not has_recorded_progress(story, make_progress({"exp_9": COMPLETED}))
        assert has_recorded_progress(story, make_progress({"exp_0": NOT_STARTED}))

    def test_counts(self):
        assert completed_chapter_count([COMPLETED, NOT_STARTED, BLOCKED]) == 1
        assert is_story_completed([COMPLETED, COMPLETED])
        assert not is_story_completed([COMPLETED, NOT_STARTED])
        assert not is_story_completed([])
