"""Parsed PALGA export models.

A Dataset holds the raw rows of one export together with the per-column
bookkeeping needed to pick a codebook version: the highest protocol
version under which each column was ever populated, and the header names
after Roman-numeral reconciliation.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

# Sentinel for a column that is empty in every row.
NO_DATA = -1


class Dataset(BaseModel):
    """One parsed tab-separated export.

    ``reconciled_headers`` and ``roman_suffixes`` are empty until
    :func:`palgatrans.ingest.roman.reconcile_headers` has run.
    """

    original_headers: list[str] = Field(..., description="Header names as found in the file")
    version_column_index: int = Field(..., ge=0, description="Index of the protocol-version column")
    rows: list[list[str]] = Field(default_factory=list, description="Cleaned data rows, input order")
    max_version_per_column: list[int] = Field(
        default_factory=list,
        description="Highest protocol version observed per column, -1 if never populated",
    )
    reconciled_headers: list[str] = Field(
        default_factory=list, description="Lower-cased header names with Roman suffix removed"
    )
    roman_suffixes: list[str] = Field(
        default_factory=list, description="Roman suffix per column, '' if none"
    )

    @property
    def column_count(self) -> int:
        return len(self.original_headers)

    @property
    def is_reconciled(self) -> bool:
        return len(self.reconciled_headers) == self.column_count

    def has_data(self, index: int) -> bool:
        """Return True if the column is populated in at least one row."""
        return self.max_version_per_column[index] != NO_DATA

    def in_scope_indices(self) -> list[int]:
        """Indices of columns that appear in the output, in header order."""
        return [i for i in range(self.column_count) if self.has_data(i)]

    def row_version(self, row: list[str]) -> str:
        """Protocol version label under which a row was recorded.

        Normalized the same way as :meth:`max_version_label` so "03" and "3"
        resolve to the same codebook. Catalog version labels are assumed to
        be canonical integers ("3", never "03"); a catalog using other
        labels will not resolve.
        """
        return str(int(row[self.version_column_index]))

    def max_version_label(self, index: int) -> str:
        """Version label used to translate a column header."""
        return str(self.max_version_per_column[index])

    def check_shape(self) -> None:
        """Verify that every per-column sequence matches the header length.

        Raises:
            ValueError: On any length mismatch.
        """
        n = self.column_count
        sizes = {
            "max_version_per_column": len(self.max_version_per_column),
        }
        if self.reconciled_headers or self.roman_suffixes:
            sizes["reconciled_headers"] = len(self.reconciled_headers)
            sizes["roman_suffixes"] = len(self.roman_suffixes)
        for name, size in sizes.items():
            if size != n:
                msg = f"{name} has {size} entries, expected {n}"
                raise ValueError(msg)
        for line_number, row in enumerate(self.rows, start=2):
            if len(row) != n:
                msg = f"Row on line {line_number} has {len(row)} columns, expected {n}"
                raise ValueError(msg)
