#!/usr/bin/env python3
"""Configuration management for splitscribe.

This module handles preset management, config file loading and merging
overrides onto a ResolvedConfig.
"""
from __future__ import annotations

import dataclasses
import json
from pathlib import Path
from typing import Any, Dict, Optional

from .models import ResolvedConfig


# ============================================================
# Presets
# ============================================================

PRESETS: Dict[str, Dict[str, Any]] = {
    "broadcast": {
        "max_chars": 42,
        "max_lines": 2,
        "sentence_gap": 0.6,
        "paragraph_gap": 1.6,
        "max_paragraph_sentences": 4,
    },
    "social": {
        "max_chars": 25,
        "max_lines": 1,
        "sentence_gap": 0.4,
        "min_sentence_dur": 0.3,
        "paragraph_gap": 1.2,
        "max_paragraph_sentences": 2,
    },
    "podcast": {
        "max_chars": 40,
        "max_lines": 2,
        "sentence_gap": 0.8,
        "min_sentence_dur": 0.6,
        "paragraph_gap": 2.0,
        "max_paragraph_sentences": 6,
    },
}

MODE_ALIASES = {
    "broadcast": "broadcast",
    "tv": "broadcast",
    "social": "social",
    "shorts": "social",
    "short": "social",
    "pod": "podcast",
    "podcast": "podcast",
}


# ============================================================
# Configuration Loading
# ============================================================

def load_config_file(path: Optional[str]) -> Dict[str, Any]:
    """Load configuration values from a JSON file.

    Args:
        path: Path to JSON config file, or None to skip loading

    Returns:
        Dictionary of configuration values, or empty dict if path is None

    Raises:
        FileNotFoundError: If the config file doesn't exist
        ValueError: If the config file isn't a JSON object
    """
    if not path:
        return {}
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Config file not found: {p}")
    data = json.loads(p.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("Config must be a JSON object at top-level.")
    return data


def apply_overrides(base: ResolvedConfig, overrides: Dict[str, Any]) -> ResolvedConfig:
    """Return a copy of ``base`` with known keys replaced; unknown keys are ignored."""
    d = dataclasses.asdict(base)
    d.update({k: v for k, v in overrides.items() if k in d})
    return ResolvedConfig(**d)


def resolve_mode(mode: Optional[str]) -> Optional[str]:
    """Map a mode name or alias to a preset key.

    Raises:
        ValueError: If the mode is not known
    """
    if not mode:
        return None
    key = MODE_ALIASES.get(mode.lower())
    if key is None:
        raise ValueError(f"Invalid --mode '{mode}'. Valid modes: {', '.join(sorted(PRESETS))}")
    return key
