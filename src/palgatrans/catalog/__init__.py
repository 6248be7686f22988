"""Terminology sources: ART-DECOR services and local JSON snapshots."""

from palgatrans.catalog.artdecor import ArtDecorSource
from palgatrans.catalog.base import CatalogError, TerminologySource
from palgatrans.catalog.local import LocalCodebookSource

__all__ = [
    "ArtDecorSource",
    "CatalogError",
    "LocalCodebookSource",
    "TerminologySource",
]
