"""Tests for the tab-separated reader and writer."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from palgatrans.ingest.tracker import MalformedInputError
from palgatrans.io.text_reader import read_dataset, read_lines
from palgatrans.io.text_writer import OutputWriteError, format_line, write_text

# --- Fixtures ---


@pytest.fixture
def export_file(tmp_path: Path) -> Path:
    """A small Latin-1 export with Windows line endings."""
    path = tmp_path / "export.txt"
    path.write_bytes(
        "colonbioptI\tconclusie\tdepvenr\r\n"
        "pos\tcarcinoïd\t3\r\n"
        "\r\n"
        'neg\t"adenoom"\t4\r\n'.encode("iso-8859-1")
    )
    return path


# --- reader ---


class TestReadLines:
    def test_splits_header_and_data(self, export_file: Path) -> None:
        header, data = read_lines(export_file)
        assert header == "colonbioptI\tconclusie\tdepvenr"
        assert data == ["pos\tcarcinoïd\t3", "", 'neg\t"adenoom"\t4']

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            read_lines(tmp_path / "missing.txt")

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.txt"
        path.write_text("")
        with pytest.raises(MalformedInputError, match="no header line"):
            read_lines(path)

    def test_read_dataset(self, export_file: Path) -> None:
        ds = read_dataset(export_file)
        assert ds.rows == [["pos", "carcinoïd", "3"], ["neg", "adenoom", "4"]]
        assert ds.max_version_per_column == [4, 4, 4]

    def test_control_characters_inside_fields_do_not_split_lines(self, tmp_path: Path) -> None:
        # 0x85 is the cp1252 ellipsis, decoded as U+0085 under Latin-1
        path = tmp_path / "export.txt"
        path.write_bytes(
            b"opmerking\tdepvenr\r\nzie verder\x85 tekst\t3\r\nregel\x0cnog\x1evolgt\t3\r\n"
        )
        header, data = read_lines(path)
        assert header == "opmerking\tdepvenr"
        assert data == ["zie verder\x85 tekst\t3", "regel\x0cnog\x1evolgt\t3"]
        ds = read_dataset(path)
        assert [row[0] for row in ds.rows] == ["zie verder\x85 tekst", "regel\x0cnog\x1evolgt"]

    def test_old_mac_line_endings(self, tmp_path: Path) -> None:
        path = tmp_path / "export.txt"
        path.write_bytes(b"a\tdepvenr\rx\t3\ry\t4\r")
        header, data = read_lines(path)
        assert header == "a\tdepvenr"
        assert data == ["x\t3", "y\t4"]


# --- writer ---


class TestWriteText:
    def test_format_line(self) -> None:
        assert format_line(["a", "", "c"]) == "a\t\tc"

    def test_writes_header_and_rows(self, tmp_path: Path) -> None:
        out = tmp_path / "out.txt"
        rows = iter([["P", "carcinoïd"], ["N", ""]])
        count = write_text(out, ["Colon biopsy_I", "Conclusie"], rows)
        assert count == 2
        assert out.read_bytes() == (
            "Colon biopsy_I\tConclusie\nP\tcarcinoïd\nN\t\n".encode("iso-8859-1")
        )

    def test_unencodable_characters_replaced(self, tmp_path: Path) -> None:
        out = tmp_path / "out.txt"
        write_text(out, ["h"], [["≤ 5 mm"]])
        assert out.read_text(encoding="iso-8859-1").splitlines() == ["h", "? 5 mm"]

    def test_utf8_output(self, tmp_path: Path) -> None:
        out = tmp_path / "out.txt"
        write_text(out, ["h"], [["≤ 5 mm"]], encoding="utf-8")
        assert out.read_text(encoding="utf-8").splitlines() == ["h", "≤ 5 mm"]

    def test_unwritable_path(self, tmp_path: Path) -> None:
        out = tmp_path / "no-such-dir" / "out.txt"
        with pytest.raises(OutputWriteError) as exc_info:
            write_text(out, ["h"], [])
        assert exc_info.value.path == out
        assert str(exc_info.value).startswith(
            "A severe error occurred while writing the output file"
        )

    def test_disk_error_while_writing(self, tmp_path: Path) -> None:
        out = tmp_path / "out.txt"
        with patch.object(Path, "open", side_effect=OSError("No space left on device")):
            with pytest.raises(OutputWriteError, match="No space left"):
                write_text(out, ["h"], [["x"]])
