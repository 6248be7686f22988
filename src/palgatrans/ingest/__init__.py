"""Export parsing, version tracking and header reconciliation."""

from palgatrans.ingest.roman import (
    is_roman_numeral,
    reconcile_headers,
    roman_suffixes,
    strip_roman,
)
from palgatrans.ingest.tracker import MalformedInputError, clean_value, ingest, split_line

__all__ = [
    "MalformedInputError",
    "clean_value",
    "ingest",
    "is_roman_numeral",
    "reconcile_headers",
    "roman_suffixes",
    "split_line",
    "strip_roman",
]
