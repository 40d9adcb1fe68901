"""
MediaLens - Fuzzy Media Identification Engine

Resolves loosely structured media filenames to canonical movie, series and
anime catalog entries, and groups batches of files by content type.
"""

from __future__ import annotations

from medialens.config.models.settings import Settings
from medialens.core.classifier.rules import TypeClassifier
from medialens.core.detection import MediaDetector
from medialens.core.file_grouper.grouper import MediaGrouper
from medialens.core.matching.index import Catalog
from medialens.core.matching.lookup import CandidateLookup
from medialens.core.normalization import normalize_release
from medialens.services.catalog_provider import InMemoryCatalogProvider, TsvCatalogProvider
from medialens.shared.logging import setup_structured_logger
from medialens.shared.protocols.services import (
    CatalogProvider,
    MediaProbe,
    MetadataStore,
    MovieSearchService,
)

__version__ = "0.1.0"


def create_engine(
    settings: Settings | None = None,
    provider: CatalogProvider | None = None,
    metadata_store: MetadataStore | None = None,
    probe: MediaProbe | None = None,
    search_service: MovieSearchService | None = None,
    *,
    configure_logging: bool = True,
) -> MediaGrouper:
    """Wire a ready-to-use grouper.

    Args:
        settings: Configuration; defaults apply when omitted
        provider: Catalog snapshot source; the TSV files named in
                  ``settings.catalog`` are used when omitted
        metadata_store: Store of previously resolved metadata
        probe: Container probe for the anime heuristic
        search_service: Online movie search
        configure_logging: Apply ``settings.logging`` to the ``medialens`` logger; embedders
                           with their own logging setup pass False

    Returns:
        A MediaGrouper whose ``detector.lookup`` also serves single-name lookups

    Example:
        >>> engine = create_engine(provider=InMemoryCatalogProvider(movies=[matrix]))
        >>> engine.detector.lookup.lookup("The Matrix 1999", MediaKind.MOVIE)
        [CatalogEntry(kind=<MediaKind.MOVIE: 'movie'>, id=603, name='The Matrix', ...)]
    """
    settings = settings or Settings()
    if configure_logging:
        setup_structured_logger(
            "medialens",
            settings.logging.level,
            settings.logging.file,
            use_rich_console=settings.logging.use_rich_console,
        )
    if provider is None:
        provider = TsvCatalogProvider(settings.catalog)

    detector = MediaDetector(
        Catalog(provider),
        metadata_store=metadata_store,
        probe=probe,
        search_service=search_service,
        matching=settings.matching,
        grouping=settings.grouping,
    )
    return MediaGrouper(detector, TypeClassifier(detector), media=settings.media)


__all__ = [
    "CandidateLookup",
    "Catalog",
    "InMemoryCatalogProvider",
    "MediaDetector",
    "MediaGrouper",
    "Settings",
    "TsvCatalogProvider",
    "TypeClassifier",
    "create_engine",
    "normalize_release",
]
