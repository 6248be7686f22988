"""Terminology source interface.

A terminology source delivers the catalog of published codebook
versions for a protocol and the concept definitions of one version.
The translation engine only talks to this interface.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from palgatrans.models.codebook import CatalogEntry, ConceptDefinition


class CatalogError(Exception):
    """Raised when a catalog or codebook cannot be retrieved or parsed."""

    def __init__(self, message: str, *, prefix: str | None = None, uri: str | None = None) -> None:
        self.prefix = prefix
        self.uri = uri
        super().__init__(message)


@runtime_checkable
class TerminologySource(Protocol):
    """Where catalogs and concept definitions come from."""

    def fetch_catalog(self, protocol_prefix: str) -> list[CatalogEntry]:
        """Return all published versions of a protocol, oldest first.

        Raises:
            CatalogError: If the catalog cannot be retrieved.
        """
        ...

    def fetch_concept_definitions(
        self, dataset_id: str, language: str
    ) -> list[ConceptDefinition]:
        """Return the concepts of one codebook version in one language.

        Raises:
            CatalogError: If the dataset cannot be retrieved.
        """
        ...
