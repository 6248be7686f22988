"""Housekeeping codebook.

The housekeeping protocol covers the administrative columns PALGA can
deliver that are not part of any protocol (T-number, export id, protocol
version, ...). It has a single, always-current version and is always
rendered as descriptions. It is consulted before the protocol registry
for every column.

Failing to build it is not fatal: the problem is reported to the run log
and housekeeping columns pass through untranslated.
"""

from __future__ import annotations

from loguru import logger

from palgatrans.catalog.base import CatalogError, TerminologySource
from palgatrans.codebook.cache import CodebookCache
from palgatrans.codebook.dictionary import Codebook, TranslationStatus, ValueTranslation
from palgatrans.diagnostics import RunLog
from palgatrans.models.codebook import OutputFormat
from palgatrans.settings import HOUSEKEEPING_PREFIX

OUTPUT_FORMAT = OutputFormat.DESCRIPTIONS


class HousekeepingCodebook:
    """Single-version codebook for administrative columns."""

    def __init__(
        self,
        source: TerminologySource,
        language: str,
        cache: CodebookCache | None = None,
        run_log: RunLog | None = None,
        prefix: str = HOUSEKEEPING_PREFIX,
    ) -> None:
        self._source = source
        self.language = language
        self.prefix = prefix
        self._cache = cache if cache is not None else CodebookCache()
        self._run_log = run_log if run_log is not None else RunLog()

    @property
    def codebook(self) -> Codebook | None:
        """The newest housekeeping codebook, or None if it could not be built."""
        return self._cache.get_or_build(("housekeeping", self.prefix, self.language), self._build)

    def _build(self) -> Codebook | None:
        logger.info("Retrieving available versions of the housekeeping codebook")
        try:
            entries = self._source.fetch_catalog(self.prefix)
            if not entries:
                self._run_log.record(
                    "HousekeepingCodebook",
                    f"No versions of the {self.prefix} codebook were found. "
                    "Housekeeping columns will not be translated.",
                )
                return None
            # the newest version is listed last
            newest = entries[-1]
            logger.info(
                "Found housekeeping version {} with id {}", newest.version_label, newest.dataset_id
            )
            definitions = self._source.fetch_concept_definitions(newest.dataset_id, self.language)
        except CatalogError as e:
            self._run_log.record(
                "HousekeepingCodebook",
                f"There was an issue retrieving the housekeeping codebook: {e}. "
                "Housekeeping columns will not be translated.",
            )
            return None
        return Codebook.from_definitions(
            self.prefix, self.language, newest.version_label, newest.dataset_id, definitions
        )

    def contains_header_name(self, column_name: str) -> bool:
        codebook = self.codebook
        if codebook is None:
            return False
        return codebook.contains_column(column_name)

    def lookup_value(self, column_name: str, value: str) -> ValueTranslation:
        codebook = self.codebook
        if codebook is None or not codebook.contains_column(column_name):
            return ValueTranslation(
                status=TranslationStatus.PASSED_THROUGH,
                value=value,
                raw_value=value,
                column=column_name,
            )
        return codebook.lookup_value(OUTPUT_FORMAT, value, column_name)

    def translate_value(self, column_name: str, value: str) -> str:
        """Translate a value, or return it unchanged without a codebook.

        Raises:
            UnmappedValueError: If the value is missing from the column's value list.
        """
        return self.lookup_value(column_name, value).unwrap()

    def translate_header(self, column_name: str) -> str:
        codebook = self.codebook
        if codebook is None or not codebook.contains_column(column_name):
            return column_name
        return codebook.translate_header(OUTPUT_FORMAT, column_name)
