#!/usr/bin/env python3
"""Text processing utilities for splitscribe.

This module provides whitespace normalization, word joining and the
caption line wrapping used by the SRT exporter.
"""
from __future__ import annotations

import re
from typing import Iterable, List

from .models import Word


# ============================================================
# Text Normalization
# ============================================================

def normalize_spaces(text: str) -> str:
    """Normalize whitespace by replacing non-breaking spaces and collapsing runs.

    Args:
        text: Input text

    Returns:
        Text with single spaces and no leading/trailing whitespace
    """
    text = text.replace("\u00a0", " ")
    return re.sub(r"\s+", " ", text).strip()


def join_words(words: Iterable[Word]) -> str:
    """Join word texts into a single line.

    Each word is trimmed and blank words are skipped, so the result
    always uses single spaces between words.

    Args:
        words: Words in playback order

    Returns:
        Joined text, or an empty string when no word has content
    """
    parts = [w.word.strip() for w in words]
    return " ".join(p for p in parts if p).strip()


# ============================================================
# Caption Wrapping
# ============================================================

def wrap_subtitle_lines(text: str, max_chars: int = 42, max_lines: int = 2) -> List[str]:
    """Wrap caption text into at most ``max_lines`` lines.

    Words are packed greedily into lines of ``max_chars`` characters.
    Once ``max_lines - 1`` lines are full, every remaining word goes on
    the last line, which may then exceed ``max_chars``. No word is ever
    dropped or split.

    Args:
        text: Caption text
        max_chars: Preferred maximum characters per line
        max_lines: Maximum number of lines

    Returns:
        List of wrapped lines (empty for blank text)
    """
    words = text.split()
    if not words:
        return []
    max_lines = max(1, max_lines)

    lines: List[str] = []
    current = ""
    for word in words:
        candidate = f"{current} {word}" if current else word
        if not current or len(candidate) <= max_chars or len(lines) >= max_lines - 1:
            current = candidate
        else:
            lines.append(current)
            current = word
    if current:
        lines.append(current)
    return lines
