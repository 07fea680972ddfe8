"""splitscribe - transcript segmentation and caption export.

This package splits timestamped transcripts into sentence, paragraph or
custom segments and exports them as SRT or JSON, transcribing media
locally with faster-whisper when no transcript is given.
"""
from .cli import main
from .models import TOOL_VERSION

__version__ = TOOL_VERSION
__all__ = ["main", "__version__"]
