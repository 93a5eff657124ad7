from __future__ import annotations

from .logging import configure_logging, verbosity_to_level
from .text import normalize_name_key, sentence_case, title_case

__all__ = [
    "configure_logging",
    "normalize_name_key",
    "sentence_case",
    "title_case",
    "verbosity_to_level",
]
