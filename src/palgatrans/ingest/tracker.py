"""Dataset ingest and per-column version tracking.

Parses the header and data lines of a tab-separated PALGA export into a
Dataset. While reading, it keeps track of the highest protocol version
under which each column was ever populated: a column may have been
dropped from newer protocol versions, so its header has to be translated
with the newest codebook that still knows it, not with the newest
codebook in the file.
"""

from __future__ import annotations

from collections.abc import Iterable

from loguru import logger

from palgatrans.models.dataset import NO_DATA, Dataset
from palgatrans.settings import PROTOCOL_VERSION_COLUMN


class MalformedInputError(Exception):
    """Raised when the export cannot be reliably parsed."""

    def __init__(self, message: str, line_number: int | None = None) -> None:
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


def clean_value(value: str) -> str:
    """Trim a field and strip one layer of enclosing double quotes.

    Spreadsheet programs tend to add the quotes when saving as text.
    """
    value = value.strip()
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        value = value[1:-1]
    return value


def split_line(line: str) -> list[str]:
    """Split a data line on tabs, keeping empty trailing fields."""
    return [clean_value(v) for v in line.rstrip("\r\n").split("\t")]


def split_header(line: str) -> list[str]:
    return line.rstrip("\r\n").split("\t")


def _parse_version(value: str, line_number: int, column: str) -> int:
    if value == "":
        msg = f"missing protocol version in column '{column}'"
        raise MalformedInputError(msg, line_number)
    try:
        return int(value)
    except ValueError:
        msg = f"protocol version '{value}' in column '{column}' is not a number"
        raise MalformedInputError(msg, line_number) from None


def ingest(
    header_line: str,
    data_lines: Iterable[str],
    version_column: str = PROTOCOL_VERSION_COLUMN,
) -> Dataset:
    """Parse an export into a Dataset with per-column maximum versions.

    Blank lines are skipped; a line holding tabs is a row, even if every
    field is empty.

    Raises:
        MalformedInputError: If the version column is missing, a row has
            the wrong number of columns, or a row's version is missing or
            not numeric.
    """
    headers = split_header(header_line)
    if version_column not in headers:
        msg = f"required column '{version_column}' not found in header"
        raise MalformedInputError(msg, 1)
    version_index = headers.index(version_column)

    max_versions = [NO_DATA] * len(headers)
    rows: list[list[str]] = []

    for line_number, line in enumerate(data_lines, start=2):
        if "\t" not in line and line.strip() == "":
            logger.debug("Skipping blank line {}", line_number)
            continue
        row = split_line(line)
        if len(row) != len(headers):
            msg = f"expected {len(headers)} columns, found {len(row)}"
            raise MalformedInputError(msg, line_number)
        version = _parse_version(row[version_index], line_number, version_column)
        for i, value in enumerate(row):
            if value != "" and max_versions[i] < version:
                max_versions[i] = version
        rows.append(row)

    dataset = Dataset(
        original_headers=headers,
        version_column_index=version_index,
        rows=rows,
        max_version_per_column=max_versions,
    )
    logger.info(
        "Ingested {} rows x {} columns ({} columns with data)",
        len(rows),
        len(headers),
        len(dataset.in_scope_indices()),
    )
    return dataset
