#!/usr/bin/env python3
"""Output writers for splitscribe.

This module handles rendering and writing segments:
- SRT (SubRip) with wrapped caption text
- JSON (the segment array, pretty-printed)
- Transcription results (words + automatic splits) as a JSON hand-off
"""
from __future__ import annotations

import dataclasses
import json
import math
import os
from pathlib import Path
from typing import Any, Dict, List, Sequence

from .models import AsrSegment, Segment, TranscriptionResult, Word
from .system import ensure_parent_dir
from .text_processing import wrap_subtitle_lines


# ============================================================
# Time Formatters
# ============================================================

def format_srt_time(seconds: float) -> str:
    """Format time for SRT (HH:MM:SS,mmm).

    Negative, NaN and infinite values clamp to zero. Fractions are
    floored to whole milliseconds.

    Args:
        seconds: Time in seconds

    Returns:
        Formatted time string (e.g., "01:01:01,250")
    """
    total = float(seconds) if seconds is not None else 0.0
    if not math.isfinite(total) or total < 0:
        total = 0.0
    # floor with 1e-6 ms slack: 1.001 * 1000 is 1000.999... in binary
    ms = int(math.floor(total * 1000 + 1e-6))
    h = ms // 3_600_000
    ms %= 3_600_000
    m = ms // 60_000
    ms %= 60_000
    s = ms // 1000
    ms %= 1000
    return f"{h:02d}:{m:02d}:{s:02d},{ms:03d}"


# ============================================================
# Atomic File Writing
# ============================================================

def atomic_write_text(path: Path, content: str) -> None:
    """Write text to a file atomically through a sibling temporary file.

    Args:
        path: Destination file path
        content: Text content to write
    """
    ensure_parent_dir(path)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(content, encoding="utf-8")
    os.replace(tmp, path)


# ============================================================
# SRT
# ============================================================

def render_srt(segments: Sequence[Segment], *, max_chars: int = 42, max_lines: int = 2) -> str:
    """Render segments as SubRip text.

    Args:
        segments: Segments in playback order
        max_chars: Preferred maximum characters per caption line
        max_lines: Maximum caption lines; overflow joins the last line

    Returns:
        SRT document, or an empty string when there are no segments
    """
    blocks: List[str] = []
    for i, seg in enumerate(segments, start=1):
        text = "\n".join(wrap_subtitle_lines(seg.text, max_chars, max_lines))
        blocks.append(
            f"{i}\n"
            f"{format_srt_time(seg.start)} --> {format_srt_time(seg.end)}\n"
            f"{text}\n"
        )
    return "\n".join(blocks)


def write_srt(segments: Sequence[Segment], out_path: Path, *, max_chars: int, max_lines: int) -> None:
    """Write segments to an SRT file."""
    atomic_write_text(out_path, render_srt(segments, max_chars=max_chars, max_lines=max_lines))


# ============================================================
# Segment JSON
# ============================================================

def segments_to_jsonable(segments: Sequence[Segment]) -> List[Dict[str, Any]]:
    """Convert segments to plain dictionaries, field for field."""
    return [dataclasses.asdict(s) for s in segments]


def segments_from_jsonable(data: Any) -> List[Segment]:
    """Rebuild segments from the output of ``segments_to_jsonable``.

    Raises:
        ValueError: If the data is not a list of segment objects
    """
    if not isinstance(data, list):
        raise ValueError("Segments JSON must be an array.")
    out: List[Segment] = []
    for item in data:
        if not isinstance(item, dict):
            raise ValueError("Each segment must be a JSON object.")
        try:
            out.append(
                Segment(
                    id=str(item["id"]),
                    start=float(item["start"]),
                    end=float(item["end"]),
                    text=str(item["text"]),
                    type=str(item.get("type", "custom")),
                )
            )
        except KeyError as e:
            raise ValueError(f"Segment is missing field {e}") from e
    return out


def render_json(segments: Sequence[Segment]) -> str:
    """Render segments as a pretty-printed JSON array."""
    return json.dumps(segments_to_jsonable(segments), ensure_ascii=False, indent=2)


def write_json(segments: Sequence[Segment], out_path: Path) -> None:
    """Write segments to a JSON file."""
    atomic_write_text(out_path, render_json(segments) + "\n")


def load_segments_json(path: Path) -> List[Segment]:
    """Read a segment array written by ``write_json``."""
    return segments_from_jsonable(json.loads(Path(path).read_text(encoding="utf-8")))


# ============================================================
# Transcription Hand-off
# ============================================================

def transcription_to_jsonable(result: TranscriptionResult) -> Dict[str, Any]:
    """Convert a transcription result into the studio response shape."""
    payload: Dict[str, Any] = {
        "text": result.text,
        "language": result.language,
        "duration": result.duration,
        "segments": [dataclasses.asdict(s) for s in result.segments],
        "words": [
            {k: v for k, v in dataclasses.asdict(w).items() if not (k == "confidence" and v is None)}
            for w in result.words
        ],
        "sentences": segments_to_jsonable(result.sentences),
        "paragraphs": segments_to_jsonable(result.paragraphs),
    }
    if result.warnings:
        payload["warnings"] = list(result.warnings)
    return payload


def _words_from_jsonable(data: List[Any]) -> List[Word]:
    words: List[Word] = []
    for item in data:
        if not isinstance(item, dict):
            raise ValueError("Each word must be a JSON object.")
        conf = item.get("confidence")
        words.append(
            Word(
                word=str(item.get("word", "")),
                start=float(item.get("start", 0.0)),
                end=float(item.get("end", 0.0)),
                confidence=float(conf) if conf is not None else None,
            )
        )
    return words


def transcription_from_jsonable(data: Any) -> TranscriptionResult:
    """Rebuild a transcription result.

    Accepts either the full result object or a bare array of words.
    Sentences and paragraphs are left empty when absent; callers decide
    whether to derive them.

    Raises:
        ValueError: If the data has neither shape
    """
    if isinstance(data, list):
        return TranscriptionResult(words=_words_from_jsonable(data))
    if not isinstance(data, dict):
        raise ValueError("Transcript JSON must be an object or an array of words.")

    segments = [
        AsrSegment(
            id=int(s.get("id", i)),
            start=float(s.get("start", 0.0)),
            end=float(s.get("end", 0.0)),
            text=str(s.get("text", "")),
        )
        for i, s in enumerate(data.get("segments") or [])
    ]
    return TranscriptionResult(
        text=str(data.get("text", "")),
        language=str(data.get("language") or ""),
        duration=float(data.get("duration") or 0.0),
        segments=segments,
        words=_words_from_jsonable(data.get("words") or []),
        sentences=segments_from_jsonable(data.get("sentences") or []),
        paragraphs=segments_from_jsonable(data.get("paragraphs") or []),
        warnings=[str(w) for w in data.get("warnings") or []],
    )


def write_transcription_json(result: TranscriptionResult, out_path: Path) -> None:
    """Write a full transcription result to JSON."""
    atomic_write_text(out_path, json.dumps(transcription_to_jsonable(result), ensure_ascii=False, indent=2) + "\n")


def load_transcription_json(path: Path) -> TranscriptionResult:
    """Read a transcription result (or a bare word array) from JSON.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the JSON has an unexpected shape
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Transcript file not found: {p}")
    return transcription_from_jsonable(json.loads(p.read_text(encoding="utf-8")))
