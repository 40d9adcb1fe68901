"""File grouper module for MediaLens.

This module assigns the files of a batch to content-type groups (movie,
series, anime or music), consulting the rule engine for files that match
both a movie and a series.

Public API:
    - MediaGrouper: Batch grouping facade
    - partition: Files per Group in first-seen order
    - any_match: Folder-ancestor pattern test used by the heuristics
"""

from __future__ import annotations

from medialens.core.file_grouper.grouper import MediaGrouper, any_match, partition

__all__ = [
    "MediaGrouper",
    "any_match",
    "partition",
]
