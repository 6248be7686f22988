"""Reading PALGA exports and writing translated output."""

from palgatrans.io.text_reader import read_dataset, read_lines
from palgatrans.io.text_writer import OutputWriteError, format_line, write_text

__all__ = [
    "read_lines",
    "read_dataset",
    "write_text",
    "format_line",
    "OutputWriteError",
]
