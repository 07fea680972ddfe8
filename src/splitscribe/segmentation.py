#!/usr/bin/env python3
"""Custom split segmentation for splitscribe.

Turns a set of user-chosen split points plus the media duration into
contiguous time ranges, then fills each range with the words it fully
contains. Everything here is a pure function: the same split points,
duration and words always give the same segments, and nothing raises
for out-of-range or NaN times.
"""
from __future__ import annotations

import math
from typing import Iterable, List, Optional, Sequence

from .models import NO_SPEECH_TEXT, SEGMENT_CUSTOM, Segment, Word
from .text_processing import join_words


MIN_SPLIT_GAP = 0.2
BOUNDARY_EPSILON = 0.05


# ============================================================
# Time Helpers
# ============================================================

def valid_duration(duration: Optional[float]) -> bool:
    """Return True when ``duration`` is a finite, positive number of seconds."""
    if duration is None:
        return False
    try:
        d = float(duration)
    except (TypeError, ValueError):
        return False
    return math.isfinite(d) and d > 0


def clamp_time(value: Optional[float], duration: float) -> float:
    """Clamp a timestamp into ``[0, duration]``.

    NaN and missing values clamp to 0, +inf clamps to ``duration``.

    Args:
        value: Timestamp in seconds
        duration: Upper bound in seconds

    Returns:
        Clamped timestamp
    """
    if value is None:
        return 0.0
    v = float(value)
    if math.isnan(v):
        return 0.0
    return min(max(v, 0.0), float(duration))


# ============================================================
# Split Point Editing
# ============================================================

def add_split_point(
    points: Sequence[float],
    time: float,
    duration: float,
    *,
    min_gap: float = MIN_SPLIT_GAP,
) -> List[float]:
    """Insert a split point, keeping the list sorted.

    The insertion is rejected (the points are returned unchanged) when the
    duration is unknown or an existing point lies closer than ``min_gap``.

    Args:
        points: Existing split points in seconds
        time: Requested split time, usually the playback position
        duration: Media duration in seconds
        min_gap: Minimum distance to any existing point

    Returns:
        New sorted list of split points
    """
    current = list(points)
    if not valid_duration(duration):
        return current
    t = clamp_time(time, duration)
    if any(abs(p - t) < min_gap for p in current):
        return current
    current.append(t)
    current.sort()
    return current


def remove_split_point(points: Sequence[float], index: int) -> List[float]:
    """Remove the split point at ``index``; out-of-range indexes are ignored."""
    current = list(points)
    if 0 <= index < len(current):
        del current[index]
    return current


# ============================================================
# Boundaries
# ============================================================

def compute_boundaries(
    split_points: Iterable[float],
    duration: float,
    *,
    epsilon: float = BOUNDARY_EPSILON,
) -> List[float]:
    """Compute segment boundaries from split points.

    The result starts at 0 and ends at ``duration``. Split points are
    clamped and sorted; a point not more than ``epsilon`` after the last
    retained point is dropped. When the last retained point sits within
    ``epsilon`` of the duration it is replaced by the duration.

    Args:
        split_points: Candidate split times in any order
        duration: Media duration in seconds
        epsilon: Minimum spacing between retained points

    Returns:
        Boundary times, or an empty list when the duration is unknown
    """
    if not valid_duration(duration):
        return []
    duration = float(duration)
    points = sorted(clamp_time(p, duration) for p in split_points)

    out: List[float] = [0.0]
    for p in points:
        if p > out[-1] + epsilon:
            out.append(p)

    if duration > out[-1] + epsilon or len(out) == 1:
        out.append(duration)
    else:
        out[-1] = duration
    return out


# ============================================================
# Word Assignment
# ============================================================

def words_in_range(words: Iterable[Word], start: float, end: float) -> List[Word]:
    """Return the words lying entirely within ``[start, end]``.

    A word straddling either edge belongs to neither side.
    """
    return [w for w in words if w.start >= start and w.end <= end]


def assign_words(boundaries: Sequence[float], words: Sequence[Word]) -> List[Segment]:
    """Build one custom segment per pair of consecutive boundaries.

    Args:
        boundaries: Output of ``compute_boundaries``
        words: Timestamped words

    Returns:
        Segments with ids ``C1``, ``C2``, ...; a segment without words
        carries the no-speech placeholder text
    """
    segments: List[Segment] = []
    for i in range(len(boundaries) - 1):
        start = boundaries[i]
        end = boundaries[i + 1]
        text = join_words(words_in_range(words, start, end))
        segments.append(
            Segment(
                id=f"C{i + 1}",
                start=start,
                end=end,
                text=text or NO_SPEECH_TEXT,
                type=SEGMENT_CUSTOM,
            )
        )
    return segments


def compute_segments(
    split_points: Iterable[float],
    duration: float,
    words: Sequence[Word],
    *,
    epsilon: float = BOUNDARY_EPSILON,
) -> List[Segment]:
    """Compute custom segments from split points, duration and words.

    Returns an empty list when the duration is unknown or there are no
    words to place.
    """
    if not valid_duration(duration) or not words:
        return []
    return assign_words(compute_boundaries(split_points, duration, epsilon=epsilon), words)
