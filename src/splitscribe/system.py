#!/usr/bin/env python3
"""System utilities and dependency checks for splitscribe.

This module provides:
- Parent directory creation for outputs
- ffmpeg / ffprobe discovery and version lookup
- Command execution helpers
- Media duration probing
- The ``--diagnose`` report
"""
from __future__ import annotations

import platform
import shutil
import subprocess
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from .models import TOOL_VERSION


# ============================================================
# File System Utilities
# ============================================================

def ensure_parent_dir(path: Path) -> None:
    """Create a file's parent directory when it does not exist yet."""
    parent = path.parent
    if parent and not parent.exists():
        parent.mkdir(parents=True, exist_ok=True)


# ============================================================
# External Tools
# ============================================================

def which_or_none(name: str) -> Optional[str]:
    """Find an executable on PATH, or None."""
    return shutil.which(name)


def ffmpeg_ok() -> bool:
    """Return True if ffmpeg is on PATH."""
    return which_or_none("ffmpeg") is not None


def ffprobe_ok() -> bool:
    """Return True if ffprobe is on PATH."""
    return which_or_none("ffprobe") is not None


def run_cmd_text(cmd: List[str]) -> Tuple[int, str, str]:
    """Run a command and capture its output as text.

    Args:
        cmd: Command and arguments to execute

    Returns:
        Tuple of (return_code, stdout, stderr)
    """
    p = subprocess.run(cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE, text=True)
    return p.returncode, p.stdout, p.stderr


def tool_version(name: str) -> Optional[str]:
    """Return the first line of ``<name> -version``, or None when unavailable.

    Args:
        name: "ffmpeg" or "ffprobe"
    """
    if which_or_none(name) is None:
        return None
    code, out, _ = run_cmd_text([name, "-version"])
    if code != 0 or not out:
        return None
    return out.splitlines()[0].strip()


# ============================================================
# Media Probing
# ============================================================

def probe_duration_seconds(path: str) -> Optional[float]:
    """Probe a media file for its duration.

    Args:
        path: Path to media file

    Returns:
        Duration in seconds, or None if ffprobe is missing or fails
    """
    if not ffprobe_ok():
        return None
    cmd = [
        "ffprobe", "-v", "error",
        "-show_entries", "format=duration",
        "-of", "default=noprint_wrappers=1:nokey=1",
        path,
    ]
    code, out, _ = run_cmd_text(cmd)
    if code != 0:
        return None
    try:
        return float(out.strip())
    except ValueError:
        return None


# ============================================================
# Diagnostics
# ============================================================

def diagnose() -> None:
    """Print versions of the tool, Python, ffmpeg and faster-whisper."""
    print(f"tool_version: {TOOL_VERSION}")
    print(f"python: {sys.version.split()[0]}")
    print(f"platform: {platform.platform()}")
    print(f"ffmpeg: {tool_version('ffmpeg')}")
    print(f"ffprobe: {tool_version('ffprobe')}")
    try:
        import faster_whisper
        print(f"faster_whisper: {getattr(faster_whisper, '__version__', 'unknown')}")
    except ImportError:
        print("faster_whisper: (not installed)")
    print("PATH ffmpeg:", which_or_none("ffmpeg"))
    print("PATH ffprobe:", which_or_none("ffprobe"))
