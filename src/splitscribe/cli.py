#!/usr/bin/env python3
"""Command-line interface for splitscribe.

This is the main entry point for the splitscribe command-line tool.
"""
from __future__ import annotations

import argparse
import dataclasses
import json
import os
import traceback
from pathlib import Path
from typing import List, Optional, Tuple

from .batch import (
    default_output_for,
    expand_inputs,
    is_transcript_file,
    preflight_one,
    transcript_output_for,
)
from .config import PRESETS, apply_overrides, load_config_file, resolve_mode
from .diffing import diff_texts, render_side_by_side
from .display import caption_rail_widths, describe_segments, format_bytes
from .logging_utils import die, log, warn
from .models import SEGMENT_TYPES, TOOL_VERSION, ResolvedConfig, TranscriptionResult
from .output_writers import (
    load_transcription_json,
    render_json,
    render_srt,
    write_json,
    write_srt,
    write_transcription_json,
)
from .segmentation import add_split_point, valid_duration
from .sentence_splitting import select_segments
from .system import diagnose, ffmpeg_ok
from .transcription import ensure_splits, transcribe_media


# ============================================================
# Split Points
# ============================================================

def read_split_file(path: str) -> List[float]:
    """Read split times from a JSON array or a file with one time per line.

    Blank lines and lines starting with ``#`` are ignored.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If a value is not a number
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Split file not found: {p}")
    raw = p.read_text(encoding="utf-8").strip()
    if raw.startswith("["):
        values: List[float] = []
        for v in json.loads(raw):
            try:
                values.append(float(v))
            except (TypeError, ValueError) as e:
                raise ValueError(f"Invalid split time in {p}: {v!r}") from e
        return values
    points: List[float] = []
    for line in raw.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        try:
            points.append(float(line))
        except ValueError as e:
            raise ValueError(f"Invalid split time in {p}: {line!r}") from e
    return points


def resolve_duration(override: Optional[float], result: TranscriptionResult) -> float:
    """Pick the media duration: explicit override, stored duration, or last word end."""
    if override is not None:
        return override
    if valid_duration(result.duration):
        return result.duration
    if result.words:
        return max(w.end for w in result.words)
    return 0.0


def apply_split_points(
    requested: List[float],
    duration: float,
    min_gap: float,
) -> Tuple[List[float], List[float]]:
    """Insert split points one by one, as a user would.

    Returns:
        Tuple of (accepted points sorted, rejected requests)
    """
    points: List[float] = []
    rejected: List[float] = []
    for t in requested:
        updated = add_split_point(points, t, duration, min_gap=min_gap)
        if len(updated) == len(points):
            rejected.append(t)
        points = updated
    return points, rejected


# ============================================================
# Run one file
# ============================================================

def run_one(
    *,
    input_path: Path,
    output_path: Path,
    transcript_path: Optional[Path],
    args: argparse.Namespace,
    cfg: ResolvedConfig,
    split_times: List[float],
    quiet: bool,
    show_progress: bool,
) -> int:
    """Process a single media or transcript file.

    Args:
        input_path: Media file or transcript JSON
        output_path: Path for the SRT/JSON export
        transcript_path: Optional path for the full transcription JSON
        args: Command-line arguments namespace
        cfg: Resolved configuration
        split_times: Requested custom split times
        quiet: Suppress non-error output
        show_progress: Show transcription progress

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    log(f"Input: {input_path}", quiet=quiet)
    log(f"Output: {output_path}", quiet=quiet)

    if is_transcript_file(input_path):
        result = ensure_splits(load_transcription_json(input_path), cfg)
    else:
        if not ffmpeg_ok():
            return die("ffmpeg not found on PATH. Install it or add it to PATH.", 2)
        if args.dry_run:
            log(f"Dry run: skipping transcription ({format_bytes(input_path.stat().st_size)}).", quiet=quiet)
            return 0
        result = transcribe_media(
            str(input_path),
            cfg,
            model_name=args.model,
            device=args.device,
            strict_cuda=args.strict_cuda,
            language=args.language,
            tmpdir=args.tmpdir,
            quiet=quiet,
            show_progress=show_progress,
        )
        if transcript_path:
            write_transcription_json(result, transcript_path)
            log(f"   Transcript: {transcript_path}", quiet=quiet)

    for w in result.warnings:
        warn(w, quiet=quiet)

    duration = resolve_duration(args.duration, result)
    points, rejected = apply_split_points(split_times, duration, cfg.min_split_gap)
    for t in rejected:
        warn(f"Split point {t:.3f}s ignored (too close to another split or no duration).", quiet=quiet)

    segments = select_segments(result, args.source, points, duration, epsilon=cfg.boundary_epsilon)
    log(f"   {len(segments)} {args.source} segments", quiet=quiet)
    if not segments:
        warn(f"{input_path}: nothing to export.", quiet=quiet)
        return 0

    if args.list:
        widths = caption_rail_widths(segments, duration, min_percent=cfg.rail_min_percent)
        for line in describe_segments(segments, widths=widths):
            log(line, quiet=quiet)

    if args.diff_against:
        old_path = Path(args.diff_against)
        if old_path.exists():
            if args.format == "srt":
                new_text = render_srt(segments, max_chars=cfg.max_chars, max_lines=cfg.max_lines)
            else:
                new_text = render_json(segments) + "\n"
            old_text = old_path.read_text(encoding="utf-8")
            log(render_side_by_side(diff_texts(old_text, new_text)), quiet=quiet)
        else:
            warn(f"Nothing to diff against: {old_path} does not exist.", quiet=quiet)

    if args.dry_run:
        log("Dry run: not writing output.", quiet=quiet)
        return 0

    if args.format == "srt":
        write_srt(segments, output_path, max_chars=cfg.max_chars, max_lines=cfg.max_lines)
    else:
        write_json(segments, output_path)
    log(f"Done: {output_path}", quiet=quiet)
    return 0


# ============================================================
# CLI
# ============================================================

def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    ap = argparse.ArgumentParser(description="Split transcripts into segments and export SRT/JSON (faster-whisper + ffmpeg)")
    ap.add_argument("inputs", nargs="*", help="Media file(s), transcript JSON file(s), directories, or glob pattern(s)")
    ap.add_argument("--glob", default=None, help="Additional glob pattern to include (optional)")
    ap.add_argument("--outdir", default=None, help="Output directory (batch mode). If omitted, writes next to input.")
    ap.add_argument("--keep-structure", action="store_true", help="When using --outdir, preserve directory structure.")
    ap.add_argument("--root", default=None, help="Base root for --keep-structure (defaults to common parent when possible).")
    ap.add_argument("-o", "--output", default=None, help="Single-file output path (only valid when one input expands to one file).")

    ap.add_argument("--format", choices=["srt", "json"], default="srt", help="Export format")
    ap.add_argument("--source", choices=list(SEGMENT_TYPES), default="sentence", help="Segments to export")
    ap.add_argument("--split-at", type=float, action="append", default=[], metavar="SECONDS", help="Custom split time (repeatable).")
    ap.add_argument("--split-file", default=None, help="File with split times (JSON array or one per line).")
    ap.add_argument("--duration", type=float, default=None, help="Media duration in seconds (defaults to the transcript's).")
    ap.add_argument("--emit-transcript", default=None, help="Also write the full transcription JSON to this path (or directory).")
    ap.add_argument("--list", action="store_true", help="Print the segments.")
    ap.add_argument("--diff-against", default=None, help="Show a side-by-side diff of the export against this file.")

    ap.add_argument("--model", default="small", help="tiny/base/small/medium/large-v3")
    ap.add_argument("--device", choices=["auto", "cpu", "cuda"], default="auto", help="auto/cpu/cuda")
    ap.add_argument("--strict-cuda", action="store_true", help="If set, fail instead of falling back when CUDA init fails.")
    ap.add_argument("--language", default=None, help="Optional language code (e.g., en). If omitted, auto-detect.")
    ap.add_argument("--no-vad", action="store_true", help="Disable faster-whisper's VAD filter.")
    ap.add_argument("--tmpdir", default=None, help="Directory for temporary audio (defaults to system temp)")

    ap.add_argument("--mode", default=None, help=f"Preset modes: {' | '.join(sorted(PRESETS))}")
    ap.add_argument("--config", default=None, help="JSON config file. CLI args override config.")
    ap.add_argument("--dry-run", action="store_true", help="Validate inputs and show resolved settings without writing.")

    ap.add_argument("--max_chars", type=int, default=None)
    ap.add_argument("--max_lines", type=int, default=None)
    ap.add_argument("--min-split-gap", type=float, default=None, help="Minimum distance between custom split points (seconds).")
    ap.add_argument("--sentence-gap", type=float, default=None, help="Pause that ends a sentence (seconds).")
    ap.add_argument("--paragraph-gap", type=float, default=None, help="Pause that ends a paragraph (seconds).")
    ap.add_argument("--max-paragraph-sentences", type=int, default=None)
    ap.add_argument("--chunk-seconds", type=float, default=None, help="Transcribe longer recordings in chunks of this length.")

    ap.add_argument("--overwrite", action="store_true", help="Overwrite output if it exists")
    ap.add_argument("--quiet", action="store_true")
    ap.add_argument("--no-progress", action="store_true")
    ap.add_argument("--debug", action="store_true")
    ap.add_argument("--continue-on-error", action="store_true", help="Batch mode: continue processing other files on error.")
    ap.add_argument("--version", action="store_true")
    ap.add_argument("--diagnose", action="store_true")
    return ap


def resolve_config(args: argparse.Namespace) -> ResolvedConfig:
    """Build config: defaults -> config file -> preset -> CLI overrides.

    Raises:
        FileNotFoundError: If the config file doesn't exist
        ValueError: If the config file or mode is invalid
    """
    cfg = apply_overrides(ResolvedConfig(), load_config_file(args.config))

    mode = resolve_mode(args.mode)
    if mode:
        cfg = apply_overrides(cfg, PRESETS[mode])

    cli = {
        "max_chars": args.max_chars,
        "max_lines": args.max_lines,
        "min_split_gap": args.min_split_gap,
        "sentence_gap": args.sentence_gap,
        "paragraph_gap": args.paragraph_gap,
        "max_paragraph_sentences": args.max_paragraph_sentences,
        "chunk_seconds": args.chunk_seconds,
    }
    cfg = apply_overrides(cfg, {k: v for k, v in cli.items() if v is not None})
    if args.no_vad:
        cfg.vad_filter = False
    return cfg


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the splitscribe command-line tool.

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    args = build_parser().parse_args(argv)

    if args.version:
        print(TOOL_VERSION)
        return 0

    if args.diagnose:
        diagnose()
        return 0

    quiet = args.quiet
    show_progress = not args.no_progress

    try:
        cfg = resolve_config(args)
    except (OSError, ValueError) as e:
        return die(str(e), 2)

    try:
        split_times = list(args.split_at)
        if args.split_file:
            split_times.extend(read_split_file(args.split_file))
    except (OSError, ValueError) as e:
        return die(str(e), 2)
    if split_times and args.source != "custom":
        warn("Split points are only used with --source custom.", quiet=quiet)

    if not args.inputs:
        return die("No input files provided.", 2)
    files = [p for p in expand_inputs(args.inputs, args.glob) if p.is_file()]
    if not files:
        return die("No input files found after expansion.", 2)

    if args.output is not None and len(files) != 1:
        return die("--output may only be used when exactly one input file is provided (after expansion).", 2)

    outdir = Path(args.outdir) if args.outdir else None
    if outdir:
        outdir.mkdir(parents=True, exist_ok=True)

    base_root: Optional[Path] = Path(args.root) if args.root else None
    if base_root is None and args.keep_structure and len(files) > 1:
        try:
            base_root = Path(os.path.commonpath([str(f.resolve().parent) for f in files]))
        except ValueError:
            base_root = None

    if args.dry_run and not quiet:
        log("Resolved config:", quiet=quiet)
        log(json.dumps(dataclasses.asdict(cfg), indent=2), quiet=quiet)

    failures: List[Tuple[Path, str]] = []
    for f in files:
        if args.output:
            primary_out = Path(args.output)
        else:
            primary_out = default_output_for(f, outdir, args.format, args.keep_structure, base_root)

        ok, reason = preflight_one(f, primary_out, args.overwrite or args.dry_run)
        if not ok:
            failures.append((f, reason))
            if not args.continue_on_error:
                return die(reason, 2)
            warn(f"{f}: {reason}", quiet=quiet)
            continue

        transcript_out = transcript_output_for(f, args.emit_transcript) if args.emit_transcript else None

        try:
            rc = run_one(
                input_path=f,
                output_path=primary_out,
                transcript_path=transcript_out,
                args=args,
                cfg=cfg,
                split_times=split_times,
                quiet=quiet,
                show_progress=show_progress,
            )
            if rc != 0:
                failures.append((f, f"failed with exit code {rc}"))
                if not args.continue_on_error:
                    return rc
        except KeyboardInterrupt:
            return die("Interrupted by user.", 130)
        except Exception as e:
            if args.debug:
                traceback.print_exc()
            failures.append((f, str(e)))
            if not args.continue_on_error:
                return die(f"{f}: {e}", 1)
            warn(f"{f}: {e}", quiet=quiet)

    if failures:
        if not quiet:
            log("\nSummary: failures:", quiet=quiet)
            for f, msg in failures:
                log(f"  - {f}: {msg}", quiet=quiet)
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
