"""Tab-separated output writer.

Writes the translated header followed by the translated rows, one line
each, fields joined by tabs, in the configured encoding (Latin-1 by
default, matching the input).
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from loguru import logger

from palgatrans.settings import DEFAULT_ENCODING


class OutputWriteError(Exception):
    """Raised when the output file cannot be written."""

    def __init__(self, path: Path, reason: str | None = None) -> None:
        self.path = path
        msg = "A severe error occurred while writing the output file"
        if reason:
            msg += f" {path}: {reason}"
        super().__init__(msg)


def format_line(fields: Iterable[str]) -> str:
    return "\t".join(fields)


def write_text(
    path: str | Path,
    header: list[str],
    rows: Iterable[list[str]],
    encoding: str = DEFAULT_ENCODING,
) -> int:
    """Write a header and rows to ``path``.

    ``rows`` is consumed lazily, so errors raised while producing a row
    propagate unchanged after the preceding rows have been written.

    Args:
        path: Output file path.
        header: Translated header fields.
        rows: Translated rows.
        encoding: Output encoding; characters it cannot represent are replaced.

    Returns:
        Number of data rows written.

    Raises:
        OutputWriteError: If the file cannot be opened or written.
    """
    path = Path(path)
    count = 0
    try:
        with path.open("w", encoding=encoding, errors="replace", newline="") as fh:
            fh.write(format_line(header) + "\n")
            for row in rows:
                fh.write(format_line(row) + "\n")
                count += 1
    except OSError as e:
        raise OutputWriteError(path, str(e)) from e

    logger.info("Wrote {} rows x {} columns -> {}", count, len(header), path)
    return count
