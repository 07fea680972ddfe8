#!/usr/bin/env python3
"""Media transcription pipeline for splitscribe.

Converts a media file to WAV, transcribes it with faster-whisper (in
silence-aligned chunks when the recording is long), shifts every chunk's
timestamps back onto the full timeline and derives sentences and
paragraphs from the merged words.
"""
from __future__ import annotations

import os
import shutil
import tempfile
import time
from typing import List, Optional, Sequence, Tuple

from .audio import (
    detect_silences,
    fixed_chunks,
    media_duration,
    plan_chunks,
    render_chunk,
    to_wav_16k_mono,
)
from .logging_utils import chunk_progress, format_duration, log, progress_done, progress_line
from .models import AsrSegment, ResolvedConfig, TranscriptionResult, Word
from .sentence_splitting import build_paragraph_splits, build_sentence_splits
from .text_processing import normalize_spaces
from .whisper_wrapper import init_whisper_model, transcribe_file


# ============================================================
# Result Assembly
# ============================================================

def merge_chunk_results(
    parts: Sequence[Tuple[float, TranscriptionResult]],
    duration: Optional[float] = None,
) -> TranscriptionResult:
    """Merge per-chunk results onto one timeline.

    Args:
        parts: (offset, result) pairs in playback order; result times are
            relative to the chunk start
        duration: Total duration; defaults to the end of the last chunk

    Returns:
        Combined result with shifted words and renumbered segments
    """
    merged = TranscriptionResult()
    texts: List[str] = []
    for offset, part in parts:
        texts.append(part.text.strip())
        merged.words.extend(
            Word(word=w.word, start=w.start + offset, end=w.end + offset, confidence=w.confidence)
            for w in part.words
        )
        for seg in part.segments:
            merged.segments.append(
                AsrSegment(id=len(merged.segments), start=seg.start + offset, end=seg.end + offset, text=seg.text)
            )
        if not merged.language:
            merged.language = part.language
        merged.warnings.extend(part.warnings)

    merged.text = normalize_spaces(" ".join(texts))
    if duration is not None:
        merged.duration = duration
    elif parts:
        last_offset, last = parts[-1]
        merged.duration = last_offset + last.duration
    return merged


def build_result(raw: TranscriptionResult, cfg: ResolvedConfig) -> TranscriptionResult:
    """Fill in sentences and paragraphs for a raw engine result."""
    sentences = build_sentence_splits(
        raw.words,
        raw.segments,
        sentence_gap=cfg.sentence_gap,
        min_sentence_dur=cfg.min_sentence_dur,
    )
    paragraphs = build_paragraph_splits(
        sentences,
        paragraph_gap=cfg.paragraph_gap,
        max_sentences=cfg.max_paragraph_sentences,
    )
    return TranscriptionResult(
        text=raw.text,
        language=raw.language,
        duration=raw.duration,
        segments=list(raw.segments),
        words=list(raw.words),
        sentences=sentences,
        paragraphs=paragraphs,
        warnings=list(raw.warnings),
    )


def ensure_splits(result: TranscriptionResult, cfg: ResolvedConfig) -> TranscriptionResult:
    """Derive sentences/paragraphs for results loaded without them."""
    if result.sentences and result.paragraphs:
        return result
    return build_result(result, cfg)


# ============================================================
# Chunk Planning
# ============================================================

def choose_chunks(
    wav_path: str,
    duration: float,
    cfg: ResolvedConfig,
) -> Tuple[List[Tuple[float, float]], List[str]]:
    """Decide how to split a WAV file for transcription.

    Recordings up to ``cfg.chunk_seconds`` are transcribed whole.

    Returns:
        Tuple of (chunks, warnings)
    """
    if duration <= cfg.chunk_seconds:
        return [(0.0, duration)], []

    warnings = [f"Audio exceeds {format_duration(cfg.chunk_seconds)}; chunked transcription enabled."]
    silences = detect_silences(
        wav_path,
        min_silence_dur=cfg.silence_min_dur,
        silence_threshold_db=cfg.silence_threshold_db,
    )
    if not silences:
        warnings.append("Falling back to fixed-length chunking.")
        return fixed_chunks(duration, cfg.chunk_seconds), warnings
    chunks = plan_chunks(
        duration,
        silences,
        chunk_seconds=cfg.chunk_seconds,
        min_chunk_seconds=cfg.min_chunk_seconds,
    )
    return chunks, warnings


# ============================================================
# Pipeline
# ============================================================

def transcribe_media(
    input_path: str,
    cfg: ResolvedConfig,
    *,
    model_name: str = "small",
    device: str = "auto",
    strict_cuda: bool = False,
    language: Optional[str] = None,
    tmpdir: Optional[str] = None,
    quiet: bool = False,
    show_progress: bool = True,
) -> TranscriptionResult:
    """Transcribe a media file into words, sentences and paragraphs.

    Args:
        input_path: Audio or video file
        cfg: Resolved configuration
        model_name: Whisper model name
        device: "auto", "cpu" or "cuda"
        strict_cuda: Fail instead of falling back to CPU
        language: Language code, or None to auto-detect
        tmpdir: Directory for temporary WAV files
        quiet: Suppress non-error output
        show_progress: Show the progress line

    Returns:
        Complete TranscriptionResult

    Raises:
        subprocess.CalledProcessError: If ffmpeg fails
        RuntimeError: If strict CUDA initialization fails
    """
    work_dir = tempfile.mkdtemp(prefix="splitscribe_", dir=tmpdir)
    try:
        wav = os.path.join(work_dir, "audio.wav")
        log("1/4 Converting audio with ffmpeg...", quiet=quiet)
        to_wav_16k_mono(input_path, wav)
        duration = media_duration(wav)

        chunks, warnings = choose_chunks(wav, duration, cfg)
        for w in warnings:
            log(f"   {w}", quiet=quiet)

        log("2/4 Loading model...", quiet=quiet)
        model, device_used, compute_type = init_whisper_model(
            model_name=model_name,
            device=device,
            quiet=quiet,
            strict_cuda=strict_cuda,
        )
        log(f"   Model {model_name} on {device_used} ({compute_type})", quiet=quiet)

        log("3/4 Transcribing...", quiet=quiet)
        t0 = time.time()
        parts: List[Tuple[float, TranscriptionResult]] = []
        for idx, (start, end) in enumerate(chunks, start=1):
            if len(chunks) == 1:
                chunk_wav = wav
            else:
                chunk_wav = os.path.join(work_dir, f"chunk-{idx:03d}.wav")
                render_chunk(wav, start, end, chunk_wav)

            def report(seg_end: float, idx: int = idx, offset: float = start) -> None:
                progress_line(
                    chunk_progress(idx, len(chunks), offset + seg_end, duration, time.time() - t0),
                    enabled=show_progress,
                    quiet=quiet,
                )

            part = transcribe_file(
                model,
                chunk_wav,
                language=language,
                vad_filter=cfg.vad_filter,
                on_segment=report,
            )
            if part.duration <= 0:
                part.duration = end - start
            parts.append((start, part))
        progress_done(enabled=show_progress, quiet=quiet)

        raw = merge_chunk_results(parts, duration if duration > 0 else None)
        raw.warnings = warnings + raw.warnings
        log(
            f"   Transcription complete: {len(raw.words)} words in {format_duration(time.time() - t0)}",
            quiet=quiet,
        )

        log("4/4 Building sentences and paragraphs...", quiet=quiet)
        return build_result(raw, cfg)
    finally:
        shutil.rmtree(work_dir, ignore_errors=True)
