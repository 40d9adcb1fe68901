"""Protocol definitions for dependency inversion.

Core modules use these Protocol interfaces instead of importing concrete
collaborators from the services layer.
"""

from __future__ import annotations

from .services import CatalogProvider, MediaProbe, MetadataStore, MovieSearchService

__all__ = ["CatalogProvider", "MediaProbe", "MetadataStore", "MovieSearchService"]
