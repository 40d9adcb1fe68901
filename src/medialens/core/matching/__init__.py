"""Catalog matching: collation keys, common-sequence matching, indices and ranking."""

from __future__ import annotations

from .collation import CollationKey, tokenize_and_key
from .common_sequence import CommonSequenceMatcher, match_common_sequence
from .index import Catalog, IndexEntry
from .lookup import CandidateLookup
from .metrics import movie_match_metric, series_match_metric, sort_by_similarity

__all__ = [
    "CandidateLookup",
    "Catalog",
    "CollationKey",
    "CommonSequenceMatcher",
    "IndexEntry",
    "match_common_sequence",
    "movie_match_metric",
    "series_match_metric",
    "sort_by_similarity",
    "tokenize_and_key",
]
