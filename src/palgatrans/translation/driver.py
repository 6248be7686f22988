"""Header and row translation.

Headers are translated once per dataset, using for every column the
codebook of the highest protocol version under which that column was
populated, so the output header is the same for the whole file. Values
are translated row by row against the codebook of the row's own protocol
version, because the permitted values of a concept change between
releases.

The housekeeping codebook is asked first for every column.
"""

from __future__ import annotations

from collections.abc import Iterator

from loguru import logger

from palgatrans.codebook.dictionary import UnmappedValueError, ValueTranslation
from palgatrans.codebook.housekeeping import HousekeepingCodebook
from palgatrans.codebook.registry import ProtocolCodebookRegistry
from palgatrans.ingest.roman import reconcile_headers
from palgatrans.models.codebook import OutputFormat
from palgatrans.models.dataset import Dataset


class UnmappedValuesError(Exception):
    """Raised after translation when unmapped values were collected.

    Contains every (line, column, value) found, not just the first.
    """

    def __init__(self, errors: list[tuple[int, UnmappedValueError]]) -> None:
        self.errors = errors
        distinct = sorted({(e.column, e.value) for _, e in errors})
        msg = f"{len(distinct)} unmapped value(s) in {len(errors)} cell(s):\n" + "\n".join(
            f'  - "{value}" ({column})' for column, value in distinct
        )
        super().__init__(msg)


class TranslationDriver:
    """Translates the header and rows of a reconciled Dataset."""

    def __init__(
        self,
        registry: ProtocolCodebookRegistry,
        housekeeping: HousekeepingCodebook,
        protocol_prefix: str,
        language: str,
        output_format: OutputFormat,
        *,
        keep_version_column: bool = False,
        collect_unmapped: bool = False,
    ) -> None:
        self.registry = registry
        self.housekeeping = housekeeping
        self.protocol_prefix = protocol_prefix
        self.language = language
        self.output_format = output_format
        self.keep_version_column = keep_version_column
        self.collect_unmapped = collect_unmapped

    def reconcile(self, dataset: Dataset) -> Dataset:
        """Resolve Roman-numeralled headers against the protocol codebooks."""
        return reconcile_headers(
            dataset,
            self.housekeeping.contains_header_name,
            lambda name, version: self.registry.contains_header_name(
                self.protocol_prefix, self.language, name, version
            ),
        )

    def output_indices(self, dataset: Dataset) -> list[int]:
        """Columns written to the output, in header order."""
        indices = dataset.in_scope_indices()
        if not self.keep_version_column:
            indices = [i for i in indices if i != dataset.version_column_index]
        return indices

    def _ensure_reconciled(self, dataset: Dataset) -> None:
        if not dataset.is_reconciled:
            self.reconcile(dataset)

    def translate_headers(self, dataset: Dataset) -> list[tuple[str, str]]:
        """Return (original name, translated name) for every output column."""
        self._ensure_reconciled(dataset)
        result: list[tuple[str, str]] = []
        for i in self.output_indices(dataset):
            name = dataset.reconciled_headers[i]
            if self.housekeeping.contains_header_name(name):
                translated = self.housekeeping.translate_header(name)
            else:
                translated = self.registry.translate_header(
                    self.protocol_prefix,
                    self.language,
                    name,
                    dataset.max_version_label(i),
                    self.output_format,
                )
                if dataset.roman_suffixes[i]:
                    translated += f"_{dataset.roman_suffixes[i]}"
            result.append((dataset.original_headers[i], translated))
        return result

    def _lookup_row(self, dataset: Dataset, row: list[str]) -> list[ValueTranslation]:
        version = dataset.row_version(row)
        lookups: list[ValueTranslation] = []
        for i in self.output_indices(dataset):
            name = dataset.reconciled_headers[i]
            if self.housekeeping.contains_header_name(name):
                lookups.append(self.housekeeping.lookup_value(name, row[i]))
            else:
                lookups.append(
                    self.registry.lookup_value(
                        self.protocol_prefix,
                        self.language,
                        name,
                        row[i],
                        version,
                        self.output_format,
                    )
                )
        return lookups

    def translate_row(self, dataset: Dataset, row: list[str]) -> list[str]:
        """Translate one row using the codebook of the row's own version.

        Raises:
            UnmappedValueError: On the first value missing from its value list.
        """
        self._ensure_reconciled(dataset)
        return [lookup.unwrap() for lookup in self._lookup_row(dataset, row)]

    def translate_rows(self, dataset: Dataset) -> Iterator[list[str]]:
        """Translate all rows in input order.

        With ``collect_unmapped`` the untranslatable cells are kept raw and
        reported together once the last row has been produced.

        Raises:
            UnmappedValueError: First unmapped value (default mode).
            UnmappedValuesError: All unmapped values (``collect_unmapped``).
        """
        self._ensure_reconciled(dataset)
        if not self.collect_unmapped:
            for row in dataset.rows:
                yield self.translate_row(dataset, row)
            return

        errors: list[tuple[int, UnmappedValueError]] = []
        for line_number, row in enumerate(dataset.rows, start=2):
            lookups = self._lookup_row(dataset, row)
            for lookup in lookups:
                if not lookup.ok:
                    errors.append(
                        (line_number, UnmappedValueError(lookup.raw_value, lookup.column))
                    )
            yield [lookup.value for lookup in lookups]
        if errors:
            logger.error("Found {} unmapped values", len(errors))
            raise UnmappedValuesError(errors)
