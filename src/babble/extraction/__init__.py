"""Extraction package interfaces."""

from .config import BabbleConfig
from .document import ExtractionError
from .pipeline import ExtractionResult, ExtractionRun, run_extraction
from .registry import KeyRegistry, slugify

__all__ = [
    "BabbleConfig",
    "ExtractionError",
    "ExtractionResult",
    "ExtractionRun",
    "KeyRegistry",
    "run_extraction",
    "slugify",
]
