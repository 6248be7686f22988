"""Tests for TranslationRun against a local codebook snapshot."""

from __future__ import annotations

from pathlib import Path

import pytest

from palgatrans.catalog.base import CatalogError
from palgatrans.catalog.local import LocalCodebookSource
from palgatrans.codebook.cache import CodebookCache
from palgatrans.codebook.dictionary import UnmappedValueError
from palgatrans.diagnostics import RunLog
from palgatrans.ingest.tracker import MalformedInputError
from palgatrans.models.codebook import (
    CatalogEntry,
    ConceptDefinition,
    OutputFormat,
    TermCode,
    ValueDefinition,
)
from palgatrans.models.config import RunParameters
from palgatrans.translation.driver import UnmappedValuesError
from palgatrans.translation.runner import TranslationRun

ENCODING = "ISO-8859-1"


def _snapshot(directory: Path) -> LocalCodebookSource:
    """Write a small codebook snapshot: ppcolbio- version 3 and housekeeping."""
    source = LocalCodebookSource(directory)
    source.save_catalog(
        "ppcolbio-", [CatalogEntry(version_label="3", dataset_id="ds-3", languages=["nl-NL"])]
    )
    source.save_concept_definitions(
        "ds-3",
        "nl-NL",
        [
            ConceptDefinition(
                column_name="colonbiopt",
                terminology=TermCode(code="84921008", code_system="SNOMED CT",
                                     display_name="Colon biopsy"),
                values=[
                    ValueDefinition(raw_value="pos", code="10828004", code_system="SNOMED CT",
                                    display_name="P"),
                    ValueDefinition(raw_value="neg", code="260385009", code_system="SNOMED CT",
                                    display_name="N"),
                ],
            ),
            ConceptDefinition(
                column_name="conclusie",
                terminology=TermCode(code="C", code_system="PALGA", display_name="Conclusie"),
            ),
        ],
    )
    source.save_catalog("housekeeping", [CatalogEntry(version_label="1", dataset_id="hk-1")])
    source.save_concept_definitions(
        "hk-1",
        "nl-NL",
        [
            ConceptDefinition(
                column_name="tnummer",
                terminology=TermCode(code="T", code_system="PALGA", display_name="T-nummer"),
            )
        ],
    )
    return source


def _write_export(path: Path, *lines: str) -> Path:
    path.write_text("\n".join(lines) + "\n", encoding=ENCODING)
    return path


class TestTranslationRun:
    def test_writes_translated_file(self, tmp_path: Path) -> None:
        source = _snapshot(tmp_path / "codebooks")
        export = _write_export(
            tmp_path / "export.txt",
            "tnummer\tcolonbioptI\tcolonbioptII\tconclusie\tleeg\tdepvenr",
            'T12-001\tpos\tneg\t"adenoom, geen dysplasie"\t\t3',
            "T12-002\tneg\t\tcarcinoïd\t\t3",
        )
        params = RunParameters(input_path=export)
        result = TranslationRun(params, source).execute()

        assert result.output_path == tmp_path / "export_out.txt"
        assert result.rows_written == 2
        assert result.columns_written == 4
        assert result.columns_skipped == ["leeg", "depvenr"]
        assert result.diagnostics == []

        lines = result.output_path.read_text(encoding=ENCODING).splitlines()
        assert lines == [
            "T-nummer\tColon biopsy_I\tColon biopsy_II\tConclusie",
            "T12-001\tP\tN\tadenoom, geen dysplasie",
            "T12-002\tN\t\tcarcinoïd",
        ]

    def test_codes_format_and_explicit_output(self, tmp_path: Path) -> None:
        source = _snapshot(tmp_path / "codebooks")
        export = _write_export(tmp_path / "in.txt", "colonbiopt\tdepvenr", "pos\t3")
        out = tmp_path / "out" / "codes.txt"
        out.parent.mkdir()
        params = RunParameters(
            input_path=export, output_path=out, output_format=OutputFormat.CODES
        )
        TranslationRun(params, source).execute()
        assert out.read_text(encoding=ENCODING).splitlines() == ["84921008", "10828004"]

    def test_missing_version_is_reported(self, tmp_path: Path) -> None:
        source = _snapshot(tmp_path / "codebooks")
        export = _write_export(
            tmp_path / "export.txt", "colonbiopt\tdepvenr", "pos\t3", "whatever\t5"
        )
        result = TranslationRun(RunParameters(input_path=export), source).execute()
        assert len(result.diagnostics) == 1
        assert "version 5" in result.diagnostics[0].message
        lines = result.output_path.read_text(encoding=ENCODING).splitlines()
        assert lines == ["colonbiopt", "P", "whatever"]

    def test_run_log_cleared_between_runs(self, tmp_path: Path) -> None:
        source = _snapshot(tmp_path / "codebooks")
        export = _write_export(tmp_path / "export.txt", "colonbiopt\tdepvenr", "pos\t5")
        log = RunLog()
        log.record("test", "left over from an earlier run")
        run = TranslationRun(RunParameters(input_path=export), source, CodebookCache(), log)
        result = run.execute()
        assert [d.message for d in result.diagnostics] == [
            "version 5 of the protocol ppcolbio- doesn't seem to exist online. "
            "Data using that version will not be translated."
        ]

    def test_unmapped_value_aborts_before_writing(self, tmp_path: Path) -> None:
        source = _snapshot(tmp_path / "codebooks")
        export = _write_export(tmp_path / "export.txt", "colonbiopt\tdepvenr", "pos\t3", "x\t3")
        with pytest.raises(UnmappedValueError):
            TranslationRun(RunParameters(input_path=export), source).execute()
        assert not (tmp_path / "export_out.txt").exists()

    def test_collect_unmapped_writes_then_raises(self, tmp_path: Path) -> None:
        source = _snapshot(tmp_path / "codebooks")
        export = _write_export(tmp_path / "export.txt", "colonbiopt\tdepvenr", "pos\t3", "x\t3")
        params = RunParameters(input_path=export, collect_unmapped=True)
        with pytest.raises(UnmappedValuesError):
            TranslationRun(params, source).execute()
        lines = (tmp_path / "export_out.txt").read_text(encoding=ENCODING).splitlines()
        assert lines == ["Colon biopsy", "P", "x"]

    def test_malformed_input(self, tmp_path: Path) -> None:
        source = _snapshot(tmp_path / "codebooks")
        export = _write_export(tmp_path / "export.txt", "colonbiopt\tdepvenr", "pos")
        with pytest.raises(MalformedInputError):
            TranslationRun(RunParameters(input_path=export), source).execute()

    def test_missing_protocol_catalog_is_fatal(self, tmp_path: Path) -> None:
        source = _snapshot(tmp_path / "codebooks")
        export = _write_export(tmp_path / "export.txt", "colonbiopt\tdepvenr", "pos\t3")
        params = RunParameters(input_path=export, protocol_name="ColonRectumcarcinoom")
        with pytest.raises(CatalogError):
            TranslationRun(params, source).execute()

    def test_shared_cache_avoids_refetching(self, tmp_path: Path) -> None:
        source = _snapshot(tmp_path / "codebooks")
        export = _write_export(tmp_path / "export.txt", "colonbiopt\tdepvenr", "pos\t3")
        cache = CodebookCache()
        TranslationRun(RunParameters(input_path=export), source, cache).execute()
        cached = len(cache)
        # removing the snapshot proves the second run is served from the cache
        for f in (tmp_path / "codebooks").iterdir():
            f.unlink()
        TranslationRun(RunParameters(input_path=export), source, cache).execute()
        assert len(cache) == cached
