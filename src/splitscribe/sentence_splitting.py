#!/usr/bin/env python3
"""Automatic sentence and paragraph splitting for splitscribe.

Sentences are cut at terminal punctuation or at pauses between words;
paragraphs group consecutive sentences until a long pause or a sentence
count limit. When the engine returned no usable word timestamps the
coarse engine segments stand in for sentences.
"""
from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from .models import (
    SEGMENT_CUSTOM,
    SEGMENT_PARAGRAPH,
    SEGMENT_SENTENCE,
    AsrSegment,
    Segment,
    TranscriptionResult,
    Word,
)
from .segmentation import compute_segments
from .text_processing import normalize_spaces


SENTENCE_GAP = 0.6
MIN_SENTENCE_DUR = 0.4
PARAGRAPH_GAP = 1.6
MAX_PARAGRAPH_SENTENCES = 4

_TERMINALS = ".!?"


# ============================================================
# Word Cleanup
# ============================================================

def clean_words(words: Iterable[Word]) -> List[Word]:
    """Drop blank and zero-length words and sort the rest by start time."""
    kept = [w for w in words if w.word.strip() and w.end > w.start]
    kept.sort(key=lambda w: w.start)
    return kept


def is_sentence_terminal(word: str) -> bool:
    """Return True when the word ends with sentence-final punctuation."""
    trimmed = word.strip()
    return bool(trimmed) and trimmed[-1] in _TERMINALS


# ============================================================
# Sentences
# ============================================================

def asr_segments_to_sentences(segments: Iterable[AsrSegment]) -> List[Segment]:
    """Use engine segments as sentences, skipping blank ones."""
    out: List[Segment] = []
    for i, seg in enumerate(segments, start=1):
        text = seg.text.strip()
        if not text:
            continue
        out.append(Segment(id=f"S{i}", start=seg.start, end=seg.end, text=text, type=SEGMENT_SENTENCE))
    return out


def merge_short_sentences(sentences: Sequence[Segment], min_duration: float) -> List[Segment]:
    """Fold sentences shorter than ``min_duration`` into the previous one.

    The first sentence is always kept as-is. IDs are renumbered afterwards.
    """
    merged: List[Segment] = []
    for s in sentences:
        if merged and (s.end - s.start) < min_duration:
            last = merged[-1]
            last.end = s.end
            last.text = normalize_spaces(f"{last.text} {s.text}")
            continue
        merged.append(Segment(id=s.id, start=s.start, end=s.end, text=s.text, type=s.type))
    for i, s in enumerate(merged, start=1):
        s.id = f"S{i}"
    return merged


def build_sentence_splits(
    words: Iterable[Word],
    asr_segments: Optional[Iterable[AsrSegment]] = None,
    *,
    sentence_gap: float = SENTENCE_GAP,
    min_sentence_dur: float = MIN_SENTENCE_DUR,
) -> List[Segment]:
    """Split timestamped words into sentences.

    A sentence ends after a word with terminal punctuation or before a
    pause of at least ``sentence_gap`` seconds. Sentences shorter than
    ``min_sentence_dur`` are merged into their predecessor.

    Args:
        words: Timestamped words
        asr_segments: Engine segments, used when no word is usable
        sentence_gap: Pause length that ends a sentence
        min_sentence_dur: Minimum sentence duration before merging

    Returns:
        Sentence segments with ids ``S1``, ``S2``, ...
    """
    cleaned = clean_words(words)
    if not cleaned:
        return asr_segments_to_sentences(asr_segments or [])

    results: List[Segment] = []
    parts: List[str] = []
    start = end = 0.0

    def flush() -> None:
        text = " ".join(parts).strip()
        if text:
            results.append(
                Segment(id=f"S{len(results) + 1}", start=start, end=end, text=text, type=SEGMENT_SENTENCE)
            )
        parts.clear()

    for i, w in enumerate(cleaned):
        if not parts:
            start = w.start
        parts.append(w.word.strip())
        end = w.end

        gap = cleaned[i + 1].start - w.end if i < len(cleaned) - 1 else 0.0
        if is_sentence_terminal(w.word) or gap >= sentence_gap:
            flush()
    flush()

    return merge_short_sentences(results, min_sentence_dur)


# ============================================================
# Paragraphs
# ============================================================

def build_paragraph_splits(
    sentences: Sequence[Segment],
    *,
    paragraph_gap: float = PARAGRAPH_GAP,
    max_sentences: int = MAX_PARAGRAPH_SENTENCES,
) -> List[Segment]:
    """Group consecutive sentences into paragraphs.

    A paragraph closes after a pause of at least ``paragraph_gap``
    seconds, once it holds ``max_sentences`` sentences, or at the end.
    """
    results: List[Segment] = []
    current: Optional[Segment] = None
    count = 0

    for i, s in enumerate(sentences):
        if current is None:
            current = Segment(
                id=f"P{len(results) + 1}",
                start=s.start,
                end=s.end,
                text=s.text,
                type=SEGMENT_PARAGRAPH,
            )
            count = 1
        else:
            current.end = s.end
            current.text = normalize_spaces(f"{current.text} {s.text}")
            count += 1

        last = i == len(sentences) - 1
        gap = 0.0 if last else sentences[i + 1].start - s.end
        if gap >= paragraph_gap or count >= max_sentences or last:
            results.append(current)
            current = None
            count = 0

    return results


# ============================================================
# Source Selection
# ============================================================

def select_segments(
    result: TranscriptionResult,
    source: str,
    split_points: Iterable[float] = (),
    duration: Optional[float] = None,
    *,
    epsilon: float = 0.05,
) -> List[Segment]:
    """Return the segments for the chosen split source.

    Args:
        result: Transcription result holding words, sentences and paragraphs
        source: "sentence", "paragraph" or "custom"
        split_points: User split points, used for "custom"
        duration: Media duration; defaults to ``result.duration``
        epsilon: Boundary spacing for custom segments

    Returns:
        Segments to display or export

    Raises:
        ValueError: If ``source`` is not a known segment type
    """
    if source == SEGMENT_SENTENCE:
        return list(result.sentences)
    if source == SEGMENT_PARAGRAPH:
        return list(result.paragraphs)
    if source == SEGMENT_CUSTOM:
        dur = result.duration if duration is None else duration
        return compute_segments(split_points, dur, result.words, epsilon=epsilon)
    raise ValueError(f"Unknown split source: {source}")
