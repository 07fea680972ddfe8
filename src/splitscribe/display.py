#!/usr/bin/env python3
"""Display helpers for splitscribe.

Formatting used when listing segments: playback clocks, file sizes,
caption-rail widths and one-line segment summaries.
"""
from __future__ import annotations

import math
from typing import List, Optional, Sequence

from .models import SEGMENT_CUSTOM, SEGMENT_PARAGRAPH, SEGMENT_SENTENCE, Segment
from .output_writers import format_srt_time
from .segmentation import valid_duration


# ============================================================
# Clock / Size
# ============================================================

def format_clock(seconds: float) -> str:
    """Format a playback position as M:SS (minutes are not wrapped).

    Non-finite values render as "0:00".
    """
    if seconds is None or not math.isfinite(seconds):
        return "0:00"
    seconds = max(0.0, float(seconds))
    mins = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{mins}:{secs:02d}"


def format_bytes(size: int) -> str:
    """Format a byte count with binary units (B, KB, MB)."""
    if size >= 1 << 20:
        return f"{size / (1 << 20):.2f} MB"
    if size >= 1 << 10:
        return f"{size / (1 << 10):.1f} KB"
    return f"{size} B"


# ============================================================
# Caption Rail
# ============================================================

def caption_rail_widths(
    segments: Sequence[Segment],
    duration: float,
    *,
    min_percent: float = 15.0,
) -> List[float]:
    """Compute the width of each caption chip as a percentage of the track.

    Each width is the segment's share of the duration, but never less
    than ``min_percent`` so short captions stay readable.

    Args:
        segments: Segments shown on the rail
        duration: Media duration in seconds
        min_percent: Smallest width in percent

    Returns:
        One width per segment, or an empty list when the duration is unknown
    """
    if not valid_duration(duration) or not segments:
        return []
    return [max((s.end - s.start) / duration * 100.0, min_percent) for s in segments]


# ============================================================
# Segment Listing
# ============================================================

_LABELS = {
    SEGMENT_SENTENCE: "Sentence",
    SEGMENT_PARAGRAPH: "Paragraph",
    SEGMENT_CUSTOM: "Segment",
}


def segment_label(segment: Segment, index: int) -> str:
    """Return a 1-based label such as "Paragraph 3"."""
    return f"{_LABELS.get(segment.type, 'Segment')} {index + 1}"


def describe_segments(
    segments: Sequence[Segment],
    *,
    text_width: int = 60,
    widths: Optional[Sequence[float]] = None,
) -> List[str]:
    """Render one summary line per segment.

    Example: ``Sentence 1  00:00:00,000 - 00:00:02,500 (0:02)  Hello there.``

    When ``widths`` (from ``caption_rail_widths``) is given, each line also
    shows the caption's rail width, e.g. ``(0:02) [25%]``.
    """
    lines: List[str] = []
    for i, seg in enumerate(segments):
        text = seg.text if len(seg.text) <= text_width else seg.text[: text_width - 3] + "..."
        rail = f" [{widths[i]:.0f}%]" if widths and i < len(widths) else ""
        lines.append(
            f"{segment_label(seg, i)}  "
            f"{format_srt_time(seg.start)} - {format_srt_time(seg.end)} "
            f"({format_clock(seg.end - seg.start)}){rail}  {text}"
        )
    return lines
