"""Tab-separated PALGA export reader.

PALGA delivers exports as Latin-1 text with one header line followed by
one line per record. The reader only splits the file into its header and
data lines; parsing and version tracking happen in
:mod:`palgatrans.ingest.tracker`.
"""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from palgatrans.ingest.tracker import MalformedInputError, ingest
from palgatrans.models.dataset import Dataset
from palgatrans.settings import DEFAULT_ENCODING, PROTOCOL_VERSION_COLUMN


def read_lines(filepath: str | Path, encoding: str = DEFAULT_ENCODING) -> tuple[str, list[str]]:
    """Read an export, returning (header line, data lines).

    Raises:
        FileNotFoundError: If the file does not exist.
        MalformedInputError: If the file is empty.
    """
    filepath = Path(filepath)
    if not filepath.is_file():
        raise FileNotFoundError(f"Input file not found: {filepath}")

    logger.info("Reading export: {} ({})", filepath.name, encoding)
    # universal newlines: only \n, \r and \r\n end a line
    with filepath.open("r", encoding=encoding) as fh:
        lines = [line.rstrip("\r\n") for line in fh]

    if not lines or lines[0].strip() == "":
        raise MalformedInputError("file has no header line", 1)
    return lines[0], lines[1:]


def read_dataset(
    filepath: str | Path,
    encoding: str = DEFAULT_ENCODING,
    version_column: str = PROTOCOL_VERSION_COLUMN,
) -> Dataset:
    """Read and ingest an export in one step."""
    header, data = read_lines(filepath, encoding)
    return ingest(header, data, version_column)
