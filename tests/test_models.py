"""Tests for the models module."""
import dataclasses

import pytest
from splitscribe.models import (
    NO_SPEECH_TEXT,
    SEGMENT_TYPES,
    TOOL_VERSION,
    ResolvedConfig,
    Segment,
    TranscriptionResult,
    Word,
)


class TestResolvedConfig:
    """Tests for ResolvedConfig defaults."""

    def test_caption_defaults(self):
        """Test caption formatting defaults."""
        cfg = ResolvedConfig()
        assert cfg.max_chars == 42
        assert cfg.max_lines == 2

    def test_split_defaults(self):
        """Test split point tolerances."""
        cfg = ResolvedConfig()
        assert cfg.min_split_gap == 0.2
        assert cfg.boundary_epsilon == 0.05

    def test_sentence_paragraph_defaults(self):
        """Test automatic splitting thresholds."""
        cfg = ResolvedConfig()
        assert cfg.sentence_gap == 0.6
        assert cfg.min_sentence_dur == 0.4
        assert cfg.paragraph_gap == 1.6
        assert cfg.max_paragraph_sentences == 4

    def test_chunk_defaults(self):
        """Test chunked transcription defaults."""
        cfg = ResolvedConfig()
        assert cfg.chunk_seconds == 600.0
        assert cfg.min_chunk_seconds == 30.0
        assert cfg.silence_threshold_db == -30.0

    def test_replace(self):
        """Test overriding a field."""
        cfg = dataclasses.replace(ResolvedConfig(), max_chars=32)
        assert cfg.max_chars == 32


class TestWord:
    """Tests for Word."""

    def test_frozen(self):
        """Test that words are immutable."""
        w = Word("hi", 0.0, 1.0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            w.start = 2.0

    def test_confidence_optional(self):
        """Test that confidence defaults to None."""
        assert Word("hi", 0.0, 1.0).confidence is None


class TestSegment:
    """Tests for Segment."""

    def test_default_type(self):
        """Test that segments default to the custom type."""
        assert Segment(id="C1", start=0, end=1, text="a").type == "custom"

    def test_types(self):
        """Test the known segment types."""
        assert SEGMENT_TYPES == ("sentence", "paragraph", "custom")


class TestTranscriptionResult:
    """Tests for TranscriptionResult."""

    def test_independent_lists(self):
        """Test that list fields are not shared between instances."""
        a = TranscriptionResult()
        b = TranscriptionResult()
        a.words.append(Word("x", 0, 1))
        assert b.words == []


def test_constants():
    """Test package constants."""
    assert NO_SPEECH_TEXT == "(No speech detected)"
    assert TOOL_VERSION.count(".") == 2
