#!/usr/bin/env python3
"""Logging and progress utilities for splitscribe.

Console output helpers shared by the CLI and the transcription
pipeline: plain log lines, warnings and errors, a single-line progress
display, and duration formatting.
"""
from __future__ import annotations

import sys
from typing import Optional


# ============================================================
# Logging
# ============================================================

def log(msg: str, *, quiet: bool = False) -> None:
    """Print a message to stdout unless quiet."""
    if not quiet:
        print(msg, flush=True)


def warn(msg: str, *, quiet: bool = False) -> None:
    """Print ``WARNING: msg`` to stderr unless quiet."""
    if not quiet:
        print(f"WARNING: {msg}", file=sys.stderr, flush=True)


def die(msg: str, code: int = 1) -> int:
    """Print ``ERROR: msg`` to stderr and return ``code``.

    Errors are printed even in quiet mode.

    Args:
        msg: Error message to display
        code: Exit code to return (default: 1)

    Returns:
        The exit code provided
    """
    print(f"ERROR: {msg}", file=sys.stderr, flush=True)
    return code


# ============================================================
# Progress
# ============================================================

PROGRESS_WIDTH = 120


def progress_line(msg: str, *, enabled: bool, quiet: bool) -> None:
    """Overwrite the current terminal line with ``msg``."""
    if quiet or not enabled:
        return
    sys.stdout.write("\r" + msg[:PROGRESS_WIDTH].ljust(PROGRESS_WIDTH))
    sys.stdout.flush()


def progress_done(*, enabled: bool, quiet: bool) -> None:
    """End a progress display with a newline."""
    if quiet or not enabled:
        return
    sys.stdout.write("\n")
    sys.stdout.flush()


def chunk_progress(
    chunk_index: int,
    chunk_count: int,
    media_t: float,
    total: Optional[float],
    elapsed: float,
) -> str:
    """Build the progress text for a transcription in progress.

    Args:
        chunk_index: 1-based index of the chunk being transcribed
        chunk_count: Number of chunks
        media_t: Media position reached, in seconds
        total: Total media duration, if known
        elapsed: Wall-clock seconds since transcription started

    Returns:
        e.g. ``"    42.0% chunk 1/3 | media_t=4:12 | 3.10x"``
    """
    parts = ["  "]
    if total and total > 0:
        ratio = min(1.0, max(0.0, media_t / total))
        parts.append(f"{ratio * 100:5.1f}%")
    parts.append(f"chunk {chunk_index}/{chunk_count} | media_t={format_duration(media_t)}")
    if elapsed > 0 and media_t > 0:
        parts.append(f"| {media_t / elapsed:4.2f}x")
    return " ".join(parts)


# ============================================================
# Formatting
# ============================================================

def format_duration(seconds: float) -> str:
    """Format a duration as H:MM:SS, or M:SS under an hour."""
    seconds = max(0, int(seconds))
    h = seconds // 3600
    m = (seconds % 3600) // 60
    s = seconds % 60
    if h > 0:
        return f"{h:d}:{m:02d}:{s:02d}"
    return f"{m:d}:{s:02d}"
