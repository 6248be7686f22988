"""Local JSON terminology source.

Reads catalogs and codebook datasets from a directory of JSON files, so
translations can run offline against a snapshot of ART-DECOR:

    <dir>/<prefix>.catalog.json          {"versions": [CatalogEntry, ...]}
    <dir>/<dataset_id>.<language>.json   {"concepts": [ConceptDefinition, ...]}

The trailing '-' of ART-DECOR prefixes is dropped from file names.
"""

from __future__ import annotations

from pathlib import Path
from typing import TypeVar

from loguru import logger
from pydantic import BaseModel, Field, ValidationError

from palgatrans.catalog.base import CatalogError
from palgatrans.models.codebook import CatalogEntry, ConceptDefinition

M = TypeVar("M", bound=BaseModel)


class CatalogFile(BaseModel):
    versions: list[CatalogEntry] = Field(default_factory=list)


class DatasetFile(BaseModel):
    dataset_id: str = ""
    language: str = ""
    concepts: list[ConceptDefinition] = Field(default_factory=list)


class LocalCodebookSource:
    """Terminology source reading JSON snapshots from a directory."""

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)

    def catalog_path(self, protocol_prefix: str) -> Path:
        return self.directory / f"{protocol_prefix.rstrip('-')}.catalog.json"

    def dataset_path(self, dataset_id: str, language: str) -> Path:
        return self.directory / f"{dataset_id}.{language}.json"

    def fetch_catalog(self, protocol_prefix: str) -> list[CatalogEntry]:
        path = self.catalog_path(protocol_prefix)
        data = self._load(path, CatalogFile, prefix=protocol_prefix)
        logger.info("Loaded {} versions for {} from {}", len(data.versions), protocol_prefix, path)
        return data.versions

    def fetch_concept_definitions(
        self, dataset_id: str, language: str
    ) -> list[ConceptDefinition]:
        path = self.dataset_path(dataset_id, language)
        data = self._load(path, DatasetFile)
        return data.concepts

    def _load(self, path: Path, model: type[M], prefix: str | None = None) -> M:
        if not path.exists():
            msg = f"Codebook file not found: {path}"
            raise CatalogError(msg, prefix=prefix, uri=str(path))
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            msg = f"Could not read codebook file {path}: {e}"
            raise CatalogError(msg, prefix=prefix, uri=str(path)) from e
        try:
            return model.model_validate_json(text)
        except ValidationError as e:
            msg = f"Invalid codebook file {path}: {e}"
            raise CatalogError(msg, prefix=prefix, uri=str(path)) from e

    def save_catalog(self, protocol_prefix: str, entries: list[CatalogEntry]) -> Path:
        """Write a catalog snapshot and return its path."""
        path = self.catalog_path(protocol_prefix)
        self._dump(path, CatalogFile(versions=entries))
        return path

    def save_concept_definitions(
        self, dataset_id: str, language: str, definitions: list[ConceptDefinition]
    ) -> Path:
        """Write a codebook dataset snapshot and return its path."""
        path = self.dataset_path(dataset_id, language)
        self._dump(
            path, DatasetFile(dataset_id=dataset_id, language=language, concepts=definitions)
        )
        return path

    def _dump(self, path: Path, data: BaseModel) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(data.model_dump_json(indent=2), encoding="utf-8")
        logger.debug("Wrote {}", path)
