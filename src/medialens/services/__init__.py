"""Services module for MediaLens.

This module contains the collaborators that perform I/O on behalf of the
core, currently the catalog snapshot providers.
"""

from .catalog_provider import InMemoryCatalogProvider, TsvCatalogProvider

__all__ = [
    "InMemoryCatalogProvider",
    "TsvCatalogProvider",
]
