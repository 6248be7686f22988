"""Versioned protocol codebook registry.

Each protocol has a catalog of published versions (version label ->
ART-DECOR dataset id, plus the languages each version is described in).
The registry fetches the catalog once per protocol and materializes a
Codebook per (protocol, language, version) on first use.

A version that is not in the catalog does not abort the run: it is
reported once to the run log and every lookup against it passes the
value or header through unchanged.
"""

from __future__ import annotations

import re

from loguru import logger

from palgatrans.catalog.base import TerminologySource
from palgatrans.codebook.cache import CodebookCache
from palgatrans.codebook.dictionary import Codebook, TranslationStatus, ValueTranslation
from palgatrans.diagnostics import RunLog
from palgatrans.models.codebook import CatalogEntry, OutputFormat

_NUMERIC_RE = re.compile(r"^\d+$")


def version_sort_key(label: str) -> tuple[int, int, str]:
    """Sort key placing numeric labels in numeric order, others after."""
    if _NUMERIC_RE.match(label):
        return (0, int(label), label)
    return (1, 0, label)


class CodebookInfo:
    """Catalog information for one protocol."""

    def __init__(self, entries: list[CatalogEntry] | None = None) -> None:
        self._version_ids: dict[str, str] = {}
        self._version_languages: dict[str, list[str]] = {}
        self._unique_languages: list[str] = []
        for entry in entries or []:
            self.add_version(entry)

    def add_version(self, entry: CatalogEntry) -> None:
        self._version_ids[entry.version_label] = entry.dataset_id
        self._version_languages[entry.version_label] = list(entry.languages)
        for language in entry.languages:
            if language not in self._unique_languages:
                self._unique_languages.append(language)

    def get_id(self, version_label: str) -> str | None:
        return self._version_ids.get(version_label)

    def languages_for(self, version_label: str) -> list[str]:
        return list(self._version_languages.get(version_label, []))

    @property
    def unique_languages(self) -> list[str]:
        return list(self._unique_languages)

    @property
    def versions(self) -> list[str]:
        return sorted(self._version_ids, key=version_sort_key)


class ProtocolCodebookRegistry:
    """Resolves codebooks per protocol, language and version."""

    def __init__(
        self,
        source: TerminologySource,
        cache: CodebookCache | None = None,
        run_log: RunLog | None = None,
    ) -> None:
        self._source = source
        self._cache = cache if cache is not None else CodebookCache()
        self._run_log = run_log if run_log is not None else RunLog()

    # -- catalog ---------------------------------------------------------

    def catalog(self, protocol_prefix: str) -> CodebookInfo:
        """Return the catalog of a protocol, fetching it on first use.

        Raises:
            CatalogError: If the catalog cannot be retrieved.
        """
        return self._cache.get_or_build(
            ("catalog", protocol_prefix),
            lambda: self._build_catalog(protocol_prefix),
        )

    def _build_catalog(self, protocol_prefix: str) -> CodebookInfo:
        logger.info("Retrieving available codebook versions for {}", protocol_prefix)
        entries = self._source.fetch_catalog(protocol_prefix)
        info = CodebookInfo(entries)
        logger.info("Found {} versions for {}: {}", len(entries), protocol_prefix, info.versions)
        return info

    def languages(self, protocol_prefix: str) -> list[str]:
        """Unique languages across all versions, in first-seen order."""
        return self.catalog(protocol_prefix).unique_languages

    def versions(self, protocol_prefix: str) -> list[str]:
        return self.catalog(protocol_prefix).versions

    def newest_version(self, protocol_prefix: str) -> str | None:
        versions = self.versions(protocol_prefix)
        return versions[-1] if versions else None

    # -- codebooks -------------------------------------------------------

    def resolve(self, protocol_prefix: str, language: str, version_label: str) -> Codebook | None:
        """Return the codebook for a version, or None if it does not exist online."""
        return self._cache.get_or_build(
            ("codebook", protocol_prefix, language, version_label),
            lambda: self._build_codebook(protocol_prefix, language, version_label),
        )

    def _build_codebook(
        self, protocol_prefix: str, language: str, version_label: str
    ) -> Codebook | None:
        info = self.catalog(protocol_prefix)
        dataset_id = info.get_id(version_label)
        if dataset_id is None:
            self._run_log.record(
                "ProtocolCodebookRegistry",
                f"version {version_label} of the protocol {protocol_prefix} doesn't seem to "
                "exist online. Data using that version will not be translated.",
            )
            return None
        supported = info.languages_for(version_label)
        if supported and language not in supported:
            self._run_log.record(
                "ProtocolCodebookRegistry",
                f"version {version_label} of {protocol_prefix} is not described in {language} "
                f"(available: {', '.join(supported)}).",
            )
        logger.info(
            "Materializing codebook {} version {} ({}) from dataset {}",
            protocol_prefix,
            version_label,
            language,
            dataset_id,
        )
        definitions = self._source.fetch_concept_definitions(dataset_id, language)
        return Codebook.from_definitions(
            protocol_prefix, language, version_label, dataset_id, definitions
        )

    def cached_versions(self, protocol_prefix: str, language: str) -> list[str]:
        """Versions already materialized for a protocol and language, oldest first."""
        labels = [
            key[3]
            for key in self._cache.keys()
            if isinstance(key, tuple)
            and key[0] == "codebook"
            and key[1] == protocol_prefix
            and key[2] == language
            and self._cache.get(key) is not None
        ]
        return sorted(labels, key=version_sort_key)

    # -- lookups ---------------------------------------------------------

    def contains_header_name(
        self, protocol_prefix: str, language: str, column_name: str, version_label: str
    ) -> bool:
        codebook = self.resolve(protocol_prefix, language, version_label)
        if codebook is None:
            return False
        return codebook.contains_column(column_name)

    def lookup_value(
        self,
        protocol_prefix: str,
        language: str,
        column_name: str,
        value: str,
        version_label: str,
        output_format: OutputFormat,
    ) -> ValueTranslation:
        """Look up a value against its own version's codebook.

        Passes the value through when no codebook resolves, the value is
        empty or the column is not in the codebook.
        """
        codebook = self.resolve(protocol_prefix, language, version_label)
        if codebook is None or value == "" or not codebook.contains_column(column_name):
            return ValueTranslation(
                status=TranslationStatus.PASSED_THROUGH,
                value=value,
                raw_value=value,
                column=column_name,
            )
        return codebook.lookup_value(output_format, value, column_name)

    def translate_value(
        self,
        protocol_prefix: str,
        language: str,
        column_name: str,
        value: str,
        version_label: str,
        output_format: OutputFormat,
    ) -> str:
        """Translate a value.

        Raises:
            UnmappedValueError: If the value is missing from the column's value list.
        """
        return self.lookup_value(
            protocol_prefix, language, column_name, value, version_label, output_format
        ).unwrap()

    def translate_header(
        self,
        protocol_prefix: str,
        language: str,
        column_name: str,
        version_label: str,
        output_format: OutputFormat,
    ) -> str:
        """Translate a header, or return it unchanged if no codebook knows it."""
        codebook = self.resolve(protocol_prefix, language, version_label)
        if codebook is None or not codebook.contains_column(column_name):
            return column_name
        return codebook.translate_header(output_format, column_name)
