#!/usr/bin/env python3
"""Audio processing utilities for splitscribe.

This module handles audio conversion, silence detection and splitting
long recordings into chunks for transcription, all through ffmpeg.
"""
from __future__ import annotations

import re
import subprocess
from typing import List, Optional, Tuple

from .system import ffmpeg_ok, probe_duration_seconds, run_cmd_text


SUPPORTED_AUDIO_EXTS = {".mp3", ".mp4", ".mpeg", ".mpga", ".m4a", ".wav", ".webm", ".ogg", ".flac"}

CHUNK_SECONDS = 600.0
MIN_CHUNK_SECONDS = 30.0


# ============================================================
# Silence Detection
# ============================================================

_SILENCE_START_RE = re.compile(r"silence_start:\s*([0-9.]+)")
_SILENCE_END_RE = re.compile(r"silence_end:\s*([0-9.]+)")


def parse_silences(stderr: str) -> List[Tuple[float, float]]:
    """Parse ffmpeg silencedetect output into (start, end) intervals.

    An end without a preceding start becomes a zero-length interval at
    that time; unterminated starts are ignored here.
    """
    silences: List[Tuple[float, float]] = []
    pending_start: Optional[float] = None
    for line in stderr.splitlines():
        m = _SILENCE_START_RE.search(line)
        if m:
            pending_start = float(m.group(1))
            continue
        m = _SILENCE_END_RE.search(line)
        if m:
            end = float(m.group(1))
            start = end if pending_start is None else min(pending_start, end)
            silences.append((start, end))
            pending_start = None
    return silences


def detect_silences(
    wav_path: str,
    *,
    min_silence_dur: float,
    silence_threshold_db: float,
) -> List[Tuple[float, float]]:
    """Detect silent regions with ffmpeg's silencedetect filter.

    Args:
        wav_path: Path to audio file to analyze
        min_silence_dur: Minimum silence length in seconds
        silence_threshold_db: Noise floor in dB (e.g., -30.0)

    Returns:
        Sorted (start, end) silence intervals; empty if ffmpeg is missing or fails
    """
    if not ffmpeg_ok():
        return []
    filt = f"silencedetect=noise={silence_threshold_db}dB:d={min_silence_dur}"
    code, _, err = run_cmd_text(["ffmpeg", "-i", wav_path, "-af", filt, "-f", "null", "-"])
    if code != 0:
        return []
    return sorted(parse_silences(err))


# ============================================================
# Chunk Planning
# ============================================================

def plan_chunks(
    duration: float,
    silences: List[Tuple[float, float]],
    *,
    chunk_seconds: float = CHUNK_SECONDS,
    min_chunk_seconds: float = MIN_CHUNK_SECONDS,
) -> List[Tuple[float, float]]:
    """Split ``[0, duration]`` into chunks that end on silences where possible.

    Each chunk aims for ``chunk_seconds``. It is cut at the end of the
    latest silence that lies past ``start + min_chunk_seconds`` and not
    beyond the ideal end; without such a silence it is cut at the ideal end.

    Args:
        duration: Total media duration in seconds
        silences: Sorted (start, end) silence intervals
        chunk_seconds: Target chunk length
        min_chunk_seconds: Shortest chunk a silence may produce

    Returns:
        Contiguous (start, end) chunks covering the duration
    """
    if duration <= 0 or chunk_seconds <= 0:
        return []
    chunks: List[Tuple[float, float]] = []
    start = 0.0
    while start < duration:
        ideal_end = min(start + chunk_seconds, duration)
        cut = ideal_end
        for _, s_end in silences:
            if s_end <= start + min_chunk_seconds:
                continue
            if s_end > ideal_end:
                break
            cut = s_end
        if cut <= start:
            cut = ideal_end
        chunks.append((start, cut))
        start = cut
    return chunks


def fixed_chunks(duration: float, chunk_seconds: float = CHUNK_SECONDS) -> List[Tuple[float, float]]:
    """Split ``[0, duration]`` into back-to-back chunks of ``chunk_seconds``."""
    return plan_chunks(duration, [], chunk_seconds=chunk_seconds, min_chunk_seconds=0.0)


# ============================================================
# Audio Conversion
# ============================================================

def _run_ffmpeg(cmd: List[str]) -> None:
    p = subprocess.run(cmd, stdout=subprocess.DEVNULL, stderr=subprocess.PIPE, text=True)
    if p.returncode != 0:
        tail = "\n".join((p.stderr or "").splitlines()[-20:])
        raise subprocess.CalledProcessError(p.returncode, cmd, output=None, stderr=tail)


def to_wav_16k_mono(input_path: str, wav_path: str) -> None:
    """Convert an audio/video file to 16 kHz mono WAV for Whisper.

    Raises:
        subprocess.CalledProcessError: If ffmpeg conversion fails
    """
    _run_ffmpeg([
        "ffmpeg", "-y",
        "-loglevel", "error",
        "-i", input_path,
        "-ac", "1",
        "-ar", "16000",
        "-vn",
        wav_path,
    ])


def render_chunk(wav_path: str, start: float, end: float, out_path: str) -> None:
    """Cut ``[start, end]`` out of a WAV file into ``out_path``.

    Raises:
        subprocess.CalledProcessError: If ffmpeg fails
    """
    _run_ffmpeg([
        "ffmpeg", "-y",
        "-loglevel", "error",
        "-i", wav_path,
        "-ss", f"{start:.3f}",
        "-to", f"{end:.3f}",
        "-ac", "1",
        "-ar", "16000",
        out_path,
    ])


def media_duration(path: str) -> float:
    """Return the media duration in seconds, or 0.0 when it cannot be probed."""
    dur = probe_duration_seconds(path)
    return dur if dur and dur > 0 else 0.0
