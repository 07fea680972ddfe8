"""Tests for the segmentation module."""
import math
import random

import pytest
from splitscribe.models import NO_SPEECH_TEXT, Segment, Word
from splitscribe.segmentation import (
    add_split_point,
    assign_words,
    clamp_time,
    compute_boundaries,
    compute_segments,
    remove_split_point,
    valid_duration,
    words_in_range,
)


class TestValidDuration:
    """Tests for valid_duration function."""

    def test_positive(self):
        """Test that a positive duration is valid."""
        assert valid_duration(10.0) is True

    @pytest.mark.parametrize("value", [0, -1.0, None, float("nan"), float("inf"), "abc"])
    def test_invalid(self, value):
        """Test zero, negative, missing and non-finite durations."""
        assert valid_duration(value) is False


class TestClampTime:
    """Tests for clamp_time function."""

    def test_within_range(self):
        """Test that in-range values are unchanged."""
        assert clamp_time(3.5, 10.0) == 3.5

    def test_negative(self):
        """Test that negative values clamp to zero."""
        assert clamp_time(-2.0, 10.0) == 0.0

    def test_above_duration(self):
        """Test that values past the duration clamp to it."""
        assert clamp_time(12.0, 10.0) == 10.0

    def test_nan(self):
        """Test that NaN clamps to zero."""
        assert clamp_time(float("nan"), 10.0) == 0.0

    def test_none(self):
        """Test that a missing value clamps to zero."""
        assert clamp_time(None, 10.0) == 0.0


class TestAddSplitPoint:
    """Tests for add_split_point function."""

    def test_add_to_empty(self):
        """Test adding the first split point."""
        assert add_split_point([], 3.0, 10.0) == [3.0]

    def test_keeps_sorted(self):
        """Test that points stay sorted after insertion."""
        assert add_split_point([2.0, 8.0], 5.0, 10.0) == [2.0, 5.0, 8.0]

    def test_rejects_too_close(self):
        """Test that a point within the minimum gap is rejected."""
        assert add_split_point([3.0], 3.1, 10.0) == [3.0]

    def test_accepts_outside_gap(self):
        """Test that a point beyond the minimum gap is accepted."""
        assert add_split_point([3.0], 3.5, 10.0) == [3.0, 3.5]

    def test_custom_gap(self):
        """Test a custom minimum gap."""
        assert add_split_point([3.0], 3.5, 10.0, min_gap=1.0) == [3.0]

    def test_clamps_to_duration(self):
        """Test that times past the end are clamped."""
        assert add_split_point([], 12.0, 10.0) == [10.0]

    def test_clamps_negative(self):
        """Test that negative times are clamped to zero."""
        assert add_split_point([], -1.0, 10.0) == [0.0]

    def test_unknown_duration(self):
        """Test that nothing is added without a duration."""
        assert add_split_point([1.0], 5.0, 0.0) == [1.0]

    def test_returns_new_list(self):
        """Test that the input list is not mutated."""
        points = [1.0]
        result = add_split_point(points, 5.0, 10.0)
        assert points == [1.0]
        assert result is not points


class TestRemoveSplitPoint:
    """Tests for remove_split_point function."""

    def test_remove(self):
        """Test removing a point by index."""
        assert remove_split_point([1.0, 2.0, 3.0], 1) == [1.0, 3.0]

    def test_out_of_range(self):
        """Test that out-of-range indexes are ignored."""
        assert remove_split_point([1.0, 2.0], 5) == [1.0, 2.0]
        assert remove_split_point([1.0, 2.0], -1) == [1.0, 2.0]


class TestComputeBoundaries:
    """Tests for compute_boundaries function."""

    def test_example_drops_close_point(self):
        """Test that a point within 0.05s of the previous one is dropped."""
        assert compute_boundaries([3, 3.05, 7], 10) == [0.0, 3, 7, 10.0]

    def test_unordered_input(self):
        """Test that split points are sorted first."""
        assert compute_boundaries([7, 3], 10) == [0.0, 3, 7, 10.0]

    def test_no_points(self):
        """Test a single range covering the whole duration."""
        assert compute_boundaries([], 10) == [0.0, 10.0]

    @pytest.mark.parametrize("duration", [0, -5, None, float("nan")])
    def test_unknown_duration(self, duration):
        """Test that no boundaries are produced without a duration."""
        assert compute_boundaries([1, 2], duration) == []

    def test_out_of_range_points(self):
        """Test that out-of-range points clamp onto the endpoints."""
        assert compute_boundaries([-5, 15], 10) == [0.0, 10.0]

    def test_point_near_end(self):
        """Test that a point within epsilon of the end yields to the duration."""
        assert compute_boundaries([5, 9.98], 10) == [0.0, 5, 10.0]

    def test_nan_point(self):
        """Test that NaN points are clamped to zero and dropped."""
        assert compute_boundaries([float("nan"), 4], 10) == [0.0, 4, 10.0]

    def test_property_monotonic_cover(self):
        """Test start/end and strict spacing over random inputs."""
        rng = random.Random(1234)
        for _ in range(200):
            duration = rng.uniform(0.5, 120.0)
            points = [rng.uniform(-5.0, duration + 5.0) for _ in range(rng.randint(0, 30))]
            points += [p + rng.uniform(0.0, 0.06) for p in points[:5]]
            bounds = compute_boundaries(points, duration)
            assert bounds[0] == 0.0
            assert bounds[-1] == duration
            for a, b in zip(bounds, bounds[1:]):
                assert b - a > 0.05


class TestWordsInRange:
    """Tests for words_in_range function."""

    def test_contained(self):
        """Test that fully contained words are selected."""
        words = [Word("a", 0.0, 1.0), Word("b", 1.0, 2.0)]
        assert words_in_range(words, 0.0, 2.0) == words

    def test_straddling_excluded(self):
        """Test that a word crossing the edge is excluded."""
        words = [Word("a", 0.5, 1.5)]
        assert words_in_range(words, 0.0, 1.0) == []
        assert words_in_range(words, 1.0, 2.0) == []


class TestAssignWords:
    """Tests for assign_words function."""

    def test_ids_and_text(self):
        """Test segment ids, type and joined text."""
        words = [Word(" Hi", 0.0, 0.5), Word(" there ", 0.6, 1.0), Word("Bye", 5.0, 5.5)]
        segs = assign_words([0.0, 3.0, 10.0], words)
        assert [s.id for s in segs] == ["C1", "C2"]
        assert segs[0].text == "Hi there"
        assert segs[1].text == "Bye"
        assert all(s.type == "custom" for s in segs)

    def test_placeholder(self):
        """Test the placeholder for segments without speech."""
        segs = assign_words([0.0, 1.0], [])
        assert segs[0].text == NO_SPEECH_TEXT


class TestComputeSegments:
    """Tests for compute_segments function."""

    def test_example(self):
        """Test the word placement example."""
        words = [Word("Hi", 0.0, 0.5)]
        segs = compute_segments([3], 7, words)
        assert segs == [
            Segment(id="C1", start=0.0, end=3, text="Hi", type="custom"),
            Segment(id="C2", start=3, end=7.0, text=NO_SPEECH_TEXT, type="custom"),
        ]

    def test_straddling_word_in_neither(self):
        """Test that a word across a split belongs to no segment."""
        words = [Word("early", 0.0, 1.0), Word("across", 2.9, 3.1)]
        segs = compute_segments([3], 6, words)
        assert segs[0].text == "early"
        assert segs[1].text == NO_SPEECH_TEXT

    def test_no_words(self):
        """Test that nothing is produced without words."""
        assert compute_segments([3], 10, []) == []

    def test_no_duration(self):
        """Test that nothing is produced without a duration."""
        assert compute_segments([3], 0, [Word("a", 0, 1)]) == []

    def test_idempotent(self):
        """Test that recomputation yields identical output."""
        words = [Word(f"w{i}", i * 0.5, i * 0.5 + 0.4) for i in range(20)]
        first = compute_segments([2.2, 5.1, 7.7], 10, words)
        second = compute_segments([2.2, 5.1, 7.7], 10, words)
        assert first == second

    def test_ranges_cover_duration(self):
        """Test that ranges are contiguous from 0 to the duration."""
        words = [Word("x", 1.0, 1.2)]
        segs = compute_segments([8.1, 2.5, 2.52, 5.0], 9.5, words)
        assert segs[0].start == 0.0
        assert segs[-1].end == 9.5
        for a, b in zip(segs, segs[1:]):
            assert math.isclose(a.end, b.start)
