#!/usr/bin/env python3
"""Data models for splitscribe.

This module contains the data classes shared across the package:
- TOOL_VERSION: Version constant
- ResolvedConfig: Segmentation, caption and transcription settings
- Word: A single transcribed word with timing
- Segment: A labeled time interval of transcript text
- AsrSegment: A coarse segment as returned by the speech engine
- TranscriptionResult: Everything a transcription run produces
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


# ============================================================
# Versioning
# ============================================================

TOOL_VERSION = "0.3.0"


# ============================================================
# Segment Types
# ============================================================

SEGMENT_SENTENCE = "sentence"
SEGMENT_PARAGRAPH = "paragraph"
SEGMENT_CUSTOM = "custom"

SEGMENT_TYPES = (SEGMENT_SENTENCE, SEGMENT_PARAGRAPH, SEGMENT_CUSTOM)

NO_SPEECH_TEXT = "(No speech detected)"


# ============================================================
# Configuration
# ============================================================

@dataclass
class ResolvedConfig:
    """Resolved configuration for segmentation and export.

    Defaults mirror the studio behaviour; presets and config files
    override individual fields.
    """
    # caption formatting
    max_chars: int = 42
    max_lines: int = 2

    # custom split points
    min_split_gap: float = 0.2
    boundary_epsilon: float = 0.05

    # automatic sentence / paragraph splitting
    sentence_gap: float = 0.6
    min_sentence_dur: float = 0.4
    paragraph_gap: float = 1.6
    max_paragraph_sentences: int = 4

    # transcription
    vad_filter: bool = True
    chunk_seconds: float = 600.0
    min_chunk_seconds: float = 30.0
    silence_min_dur: float = 0.4
    silence_threshold_db: float = -30.0

    # display
    rail_min_percent: float = 15.0


# ============================================================
# Transcript Data Structures
# ============================================================

@dataclass(frozen=True)
class Word:
    """A single transcribed word with timing.

    Attributes:
        word: The word text as returned by the engine (may carry spaces)
        start: Start time in seconds
        end: End time in seconds
        confidence: Engine probability, when available
    """
    word: str
    start: float
    end: float
    confidence: Optional[float] = None


@dataclass
class Segment:
    """A labeled time interval of transcript text.

    Attributes:
        id: Identifier, ``S<n>``, ``P<n>`` or ``C<n>``
        start: Start time in seconds
        end: End time in seconds
        text: Segment text, never blank
        type: One of "sentence", "paragraph" or "custom"
    """
    id: str
    start: float
    end: float
    text: str
    type: str = SEGMENT_CUSTOM


@dataclass
class AsrSegment:
    """A coarse segment as emitted by the speech engine."""
    id: int
    start: float
    end: float
    text: str


@dataclass
class TranscriptionResult:
    """Complete result of transcribing one media file."""
    text: str = ""
    language: str = ""
    duration: float = 0.0
    segments: List[AsrSegment] = field(default_factory=list)
    words: List[Word] = field(default_factory=list)
    sentences: List[Segment] = field(default_factory=list)
    paragraphs: List[Segment] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
