"""
MediaLens Constants Module

Centralized vocabularies and regex patterns used by the normalizer, the
detection heuristics and the rule engine.
"""

from .detection import (
    AUDIO_EXTENSIONS,
    ONE_MEGABYTE,
    VIDEO_EXTENSIONS,
    FolderPatterns,
    NamePatterns,
)
from .release_patterns import LANGUAGE_MAP, ReleaseVocabulary

__all__ = [
    "AUDIO_EXTENSIONS",
    "FolderPatterns",
    "LANGUAGE_MAP",
    "NamePatterns",
    "ONE_MEGABYTE",
    "ReleaseVocabulary",
    "VIDEO_EXTENSIONS",
]
