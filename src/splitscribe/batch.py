#!/usr/bin/env python3
"""Batch processing utilities for splitscribe.

This module handles:
- Discovery of media files and transcript JSON files
- Output path calculation for batch processing
- Preflight checks before processing
"""
from __future__ import annotations

import glob
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from .audio import SUPPORTED_AUDIO_EXTS


# ============================================================
# Input Discovery
# ============================================================

MEDIA_EXTS = SUPPORTED_AUDIO_EXTS | {".aac", ".mkv", ".mov", ".m4v"}
TRANSCRIPT_EXT = ".json"

OUTPUT_SUFFIXES = {
    "srt": ".srt",
    "json": ".segments.json",
}


def is_transcript_file(path: Path) -> bool:
    """Return True for transcript JSON inputs (not segment exports)."""
    name = path.name.lower()
    return name.endswith(TRANSCRIPT_EXT) and not name.endswith(OUTPUT_SUFFIXES["json"])


def is_input_file(path: Path) -> bool:
    """Return True for files splitscribe can process."""
    return path.suffix.lower() in MEDIA_EXTS or is_transcript_file(path)


def iter_input_files_in_dir(d: Path) -> Iterable[Path]:
    """Recursively yield media and transcript files under a directory."""
    for p in sorted(d.rglob("*")):
        if p.is_file() and is_input_file(p):
            yield p


def expand_inputs(inputs: List[str], glob_pat: Optional[str]) -> List[Path]:
    """Expand files, directories and glob patterns into a de-duplicated list.

    Args:
        inputs: Input file/directory/glob specifications
        glob_pat: Optional additional glob pattern

    Returns:
        Paths in first-seen order
    """
    out: List[Path] = []
    for s in inputs:
        p = Path(s)
        if p.is_dir():
            out.extend(iter_input_files_in_dir(p))
        elif any(ch in s for ch in "*?[") and not p.exists():
            out.extend(Path(x) for x in sorted(glob.glob(s)))
        else:
            out.append(p)

    if glob_pat:
        out.extend(Path(x) for x in sorted(glob.glob(glob_pat)))

    seen = set()
    uniq: List[Path] = []
    for p in out:
        key = str(p.resolve()) if p.exists() else str(p)
        if key in seen:
            continue
        seen.add(key)
        uniq.append(p)
    return uniq


# ============================================================
# Output Path Calculation
# ============================================================

def _stem(input_file: Path) -> str:
    name = input_file.name
    return name[: -len(TRANSCRIPT_EXT)] if is_transcript_file(input_file) else input_file.stem


def default_output_for(
    input_file: Path,
    outdir: Optional[Path],
    fmt: str,
    keep_structure: bool,
    base_root: Optional[Path],
) -> Path:
    """Calculate the default output path for an input file.

    Args:
        input_file: Media or transcript file
        outdir: Optional output directory; defaults to the input's directory
        fmt: "srt" or "json"
        keep_structure: Mirror the input's path below ``base_root`` in outdir
        base_root: Root for structure preservation

    Returns:
        Output file path
    """
    name = _stem(input_file) + OUTPUT_SUFFIXES[fmt]
    if outdir is None:
        return input_file.with_name(name)

    rel_parent = Path()
    if keep_structure and base_root:
        try:
            rel_parent = input_file.resolve().parent.relative_to(base_root.resolve())
        except ValueError:
            rel_parent = Path()
    return outdir / rel_parent / name


def transcript_output_for(input_file: Path, target: str) -> Path:
    """Resolve ``--emit-transcript``: a directory gets ``<stem>.json`` inside it."""
    p = Path(target)
    if p.is_dir() or target.endswith(("/", "\\")):
        return p / (_stem(input_file) + TRANSCRIPT_EXT)
    return p


# ============================================================
# Preflight Checks
# ============================================================

def preflight_one(input_path: Path, output_path: Path, overwrite: bool) -> Tuple[bool, str]:
    """Check an input/output pair before processing.

    Returns:
        Tuple of (ok, error_message); the message is empty when ok
    """
    if not input_path.exists():
        return False, f"Input file not found: {input_path}"
    if input_path.is_dir():
        return False, f"Input path is a directory (expected a file): {input_path}"
    if not is_input_file(input_path):
        return False, f"Unsupported input format: {input_path.suffix or input_path.name}"
    if output_path.exists() and output_path.is_dir():
        return False, f"Output path is a directory (expected file): {output_path}"
    if output_path.exists() and not overwrite:
        return False, f"Output already exists: {output_path} (use --overwrite)"
    return True, ""
