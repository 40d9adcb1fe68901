"""
Pytest configuration and shared fixtures for MediaLens tests.

This module provides a small in-memory catalog snapshot and the detector,
classifier and grouper wired on top of it.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from medialens.core.classifier.rules import TypeClassifier
from medialens.core.detection import MediaDetector
from medialens.core.file_grouper.grouper import MediaGrouper
from medialens.core.matching.index import Catalog
from medialens.core.matching.lookup import CandidateLookup
from medialens.core.models.catalog import CatalogEntry, MediaKind
from medialens.core.models.file import MediaFile
from medialens.services.catalog_provider import InMemoryCatalogProvider

DOWNLOADS = Path("/media/Downloads")


@pytest.fixture
def matrix() -> CatalogEntry:
    return CatalogEntry(MediaKind.MOVIE, 603, "The Matrix", ("Matrix",), year=1999, imdb_id=133093)


@pytest.fixture
def dexter_movie() -> CatalogEntry:
    return CatalogEntry(MediaKind.MOVIE, 9001, "Dexter", year=2010)


@pytest.fixture
def avatar() -> CatalogEntry:
    return CatalogEntry(MediaKind.MOVIE, 19995, "Avatar", year=2009, imdb_id=499549)


@pytest.fixture
def breaking_bad() -> CatalogEntry:
    return CatalogEntry(
        MediaKind.SERIES,
        81189,
        "Breaking Bad",
        ("Breaking Bad (2008)",),
        database="TheTVDB",
    )


@pytest.fixture
def dexter_series() -> CatalogEntry:
    return CatalogEntry(MediaKind.SERIES, 79349, "Dexter", database="TheTVDB")


@pytest.fixture
def frieren() -> CatalogEntry:
    return CatalogEntry(
        MediaKind.ANIME,
        17617,
        "Sousou no Frieren",
        ("Frieren",),
        database="AniDB",
    )


@pytest.fixture
def provider(matrix, dexter_movie, avatar, breaking_bad, dexter_series, frieren) -> InMemoryCatalogProvider:
    """Small catalog snapshot covering movies, series and anime."""
    return InMemoryCatalogProvider(
        movies=[matrix, dexter_movie, avatar],
        series=[breaking_bad, dexter_series],
        anime=[frieren],
    )


@pytest.fixture
def catalog(provider) -> Catalog:
    return Catalog(provider)


@pytest.fixture
def empty_catalog() -> Catalog:
    return Catalog(InMemoryCatalogProvider())


@pytest.fixture
def lookup(catalog) -> CandidateLookup:
    return CandidateLookup(catalog)


@pytest.fixture
def detector(catalog) -> MediaDetector:
    return MediaDetector(catalog)


@pytest.fixture
def classifier(detector) -> TypeClassifier:
    return TypeClassifier(detector)


@pytest.fixture
def grouper(detector, classifier) -> MediaGrouper:
    return MediaGrouper(detector, classifier)


@pytest.fixture
def media_file():
    """Factory for MediaFile objects below the downloads folder."""

    def _make(name: str, folder: Path = DOWNLOADS, size: int = 0) -> MediaFile:
        return MediaFile(folder / name, size)

    return _make
