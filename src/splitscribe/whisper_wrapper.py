#!/usr/bin/env python3
"""faster-whisper integration for splitscribe.

Model initialization with device/compute type selection, and word-level
transcription of a single WAV file.
"""
from __future__ import annotations

from typing import Callable, List, Optional, Tuple

from faster_whisper import WhisperModel

from .logging_utils import log
from .models import AsrSegment, TranscriptionResult, Word
from .text_processing import normalize_spaces


# ============================================================
# Device Initialization
# ============================================================

def _cpu_model(model_name: str) -> Tuple[WhisperModel, str, str]:
    return WhisperModel(model_name, device="cpu", compute_type="int8"), "cpu", "int8"


def init_whisper_model(
    model_name: str,
    device: str,               # auto|cpu|cuda
    quiet: bool,
    strict_cuda: bool,
) -> Tuple[WhisperModel, str, str]:
    """Initialize a Whisper model on the requested device.

    CUDA uses float16 and CPU uses int8. When CUDA cannot be initialized
    the model is loaded on CPU instead, unless ``strict_cuda`` is set.

    Args:
        model_name: Whisper model name (e.g., "small")
        device: "auto", "cpu" or "cuda"
        quiet: Suppress log messages
        strict_cuda: Fail instead of falling back when device="cuda"

    Returns:
        Tuple of (model, device_used, compute_type_used)

    Raises:
        RuntimeError: If strict_cuda is set and CUDA initialization fails
    """
    if device == "cpu":
        return _cpu_model(model_name)

    try:
        m = WhisperModel(model_name, device="cuda", compute_type="float16")
    except Exception as e:
        if device == "cuda" and strict_cuda:
            raise RuntimeError(f"CUDA requested but init failed: {e}") from e
        log(f"   CUDA not available; using CPU. Reason: {e}", quiet=quiet)
        return _cpu_model(model_name)

    log("   Using device=cuda compute_type=float16", quiet=quiet)
    return m, "cuda", "float16"


# ============================================================
# Transcription
# ============================================================

def transcribe_file(
    model: WhisperModel,
    wav_path: str,
    *,
    language: Optional[str] = None,
    vad_filter: bool = True,
    on_segment: Optional[Callable[[float], None]] = None,
) -> TranscriptionResult:
    """Transcribe one WAV file with word timestamps.

    Only the raw engine output is filled in (text, language, duration,
    segments and words); sentences and paragraphs are derived later.

    Args:
        model: Loaded WhisperModel
        wav_path: 16 kHz mono WAV path
        language: Language code, or None to auto-detect
        vad_filter: Enable faster-whisper's VAD filter
        on_segment: Called with each segment's end time, for progress

    Returns:
        TranscriptionResult with times relative to the file start
    """
    segments_iter, info = model.transcribe(
        wav_path,
        vad_filter=vad_filter,
        language=language,
        word_timestamps=True,
    )

    segments: List[AsrSegment] = []
    words: List[Word] = []
    for idx, seg in enumerate(segments_iter):
        segments.append(
            AsrSegment(id=idx, start=float(seg.start), end=float(seg.end), text=(seg.text or "").strip())
        )
        for w in getattr(seg, "words", None) or []:
            words.append(
                Word(
                    word=w.word,
                    start=float(w.start),
                    end=float(w.end),
                    confidence=getattr(w, "probability", None),
                )
            )
        if on_segment is not None:
            on_segment(float(seg.end))

    return TranscriptionResult(
        text=normalize_spaces(" ".join(s.text for s in segments)),
        language=getattr(info, "language", "") or "",
        duration=float(getattr(info, "duration", 0.0) or 0.0),
        segments=segments,
        words=words,
    )
