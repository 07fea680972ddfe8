#!/usr/bin/env python3
"""Line diffs between two exports.

Used to show what changed when an export is regenerated over an older
one: hunks of added/removed/context lines, plus the pairing that puts a
removed line and its replacement on the same side-by-side row.
"""
from __future__ import annotations

import difflib
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

LINE_ADD = "add"
LINE_REMOVE = "remove"
LINE_CONTEXT = "context"


@dataclass
class DiffLine:
    type: str
    content: str


@dataclass
class DiffHunk:
    old_start: int
    old_count: int
    new_start: int
    new_count: int
    lines: List[DiffLine] = field(default_factory=list)

    def header(self) -> str:
        return f"@@ -{self.old_start},{self.old_count} +{self.new_start},{self.new_count} @@"


@dataclass
class DiffResult:
    hunks: List[DiffHunk] = field(default_factory=list)
    added_lines: int = 0
    removed_lines: int = 0


# ============================================================
# Diff
# ============================================================

def diff_texts(old: str, new: str, *, context: int = 3) -> DiffResult:
    """Diff two texts line by line.

    Hunk starts are 1-based like unified diff headers. Within a replace
    block removals are listed before additions.

    Args:
        old: Previous text
        new: Current text
        context: Unchanged lines kept around each change

    Returns:
        Hunks with per-line types and added/removed totals
    """
    a = old.splitlines()
    b = new.splitlines()
    result = DiffResult()
    matcher = difflib.SequenceMatcher(a=a, b=b, autojunk=False)

    for group in matcher.get_grouped_opcodes(context):
        i1, i2 = group[0][1], group[-1][2]
        j1, j2 = group[0][3], group[-1][4]
        hunk = DiffHunk(old_start=i1 + 1, old_count=i2 - i1, new_start=j1 + 1, new_count=j2 - j1)
        for tag, a1, a2, b1, b2 in group:
            if tag == "equal":
                hunk.lines.extend(DiffLine(LINE_CONTEXT, line) for line in a[a1:a2])
                continue
            if tag in ("replace", "delete"):
                hunk.lines.extend(DiffLine(LINE_REMOVE, line) for line in a[a1:a2])
                result.removed_lines += a2 - a1
            if tag in ("replace", "insert"):
                hunk.lines.extend(DiffLine(LINE_ADD, line) for line in b[b1:b2])
                result.added_lines += b2 - b1
        result.hunks.append(hunk)
    return result


def change_percentage(result: DiffResult) -> int:
    """Share of additions among all changed lines, in whole percent."""
    total = result.added_lines + result.removed_lines
    if total == 0:
        return 0
    return round(result.added_lines / total * 100)


# ============================================================
# Side-by-side
# ============================================================

Pair = Tuple[Optional[DiffLine], Optional[DiffLine]]


def pair_lines(hunk: DiffHunk) -> List[Pair]:
    """Group a hunk's lines into (left, right) rows.

    A removal directly followed by an addition shares a row. Any other
    removal has an empty right side, any other addition an empty left
    side, and context lines appear on both sides.
    """
    pairs: List[Pair] = []
    lines = hunk.lines
    i = 0
    while i < len(lines):
        line = lines[i]
        if line.type == LINE_REMOVE:
            if i + 1 < len(lines) and lines[i + 1].type == LINE_ADD:
                pairs.append((line, lines[i + 1]))
                i += 2
                continue
            pairs.append((line, None))
        elif line.type == LINE_ADD:
            pairs.append((None, line))
        else:
            pairs.append((line, line))
        i += 1
    return pairs


def render_side_by_side(result: DiffResult, *, width: int = 48) -> str:
    """Render a diff as two text columns, removed on the left."""
    out: List[str] = [
        f"{result.added_lines} additions, {result.removed_lines} removals "
        f"({change_percentage(result)}% added)"
    ]
    for hunk in result.hunks:
        out.append(hunk.header())
        for left, right in pair_lines(hunk):
            out.append(f"{_cell(left, width)} | {_cell(right, width)}".rstrip())
    return "\n".join(out)


def _cell(line: Optional[DiffLine], width: int) -> str:
    if line is None:
        return " " * width
    mark = {LINE_ADD: "+", LINE_REMOVE: "-"}.get(line.type, " ")
    text = f"{mark} {line.content}"
    if len(text) > width:
        text = text[: width - 1] + "~"
    return text.ljust(width)
