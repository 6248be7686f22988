"""Tests for a single materialized Codebook."""

from __future__ import annotations

import pytest

from palgatrans.codebook.dictionary import (
    Codebook,
    TranslationStatus,
    UnmappedValueError,
    ValueTranslation,
)
from palgatrans.models.codebook import (
    ConceptDefinition,
    OutputFormat,
    TermCode,
    ValueDefinition,
)


def _codebook() -> Codebook:
    definitions = [
        ConceptDefinition(
            column_name="colonbiopt",
            concept_id="c1",
            terminology=TermCode(code="84921008", code_system="SNOMED CT",
                                 display_name="Colon biopsy"),
            values=[
                ValueDefinition(raw_value="pos", code="10828004", code_system="SNOMED CT",
                                display_name="Positive"),
                ValueDefinition(raw_value="neg", code="260385009", code_system="SNOMED CT",
                                display_name="Negative"),
            ],
        ),
        ConceptDefinition(column_name="Opmerking", concept_id="c2"),
    ]
    return Codebook.from_definitions("ppcolbio-", "nl-NL", "3", "ds-3", definitions)


class TestCodebookStructure:
    def test_len_and_columns(self) -> None:
        cb = _codebook()
        assert len(cb) == 2
        assert cb.column_names == ["colonbiopt", "opmerking"]

    def test_column_lookup_is_case_insensitive(self) -> None:
        cb = _codebook()
        assert cb.contains_column("ColonBiopt")
        assert cb.contains_column("opmerking")
        assert not cb.contains_column("colonbioptII")

    def test_get_concept_missing_returns_none(self) -> None:
        assert _codebook().get_concept("unknown") is None

    def test_repr_mentions_version(self) -> None:
        assert "version='3'" in repr(_codebook())


class TestTranslateConceptValue:
    def test_translates_enumerated_value(self) -> None:
        cb = _codebook()
        assert cb.translate_concept_value(OutputFormat.DESCRIPTIONS, "pos", "colonbiopt") == (
            "Positive"
        )
        assert cb.translate_concept_value(OutputFormat.CODES, "neg", "colonbiopt") == "260385009"

    def test_empty_value_passes_through(self) -> None:
        assert _codebook().translate_concept_value(OutputFormat.CODES, "", "colonbiopt") == ""

    def test_free_text_passes_through(self) -> None:
        cb = _codebook()
        assert cb.translate_concept_value(OutputFormat.CODES, "zie verslag", "opmerking") == (
            "zie verslag"
        )

    def test_unmapped_value_raises(self) -> None:
        with pytest.raises(UnmappedValueError) as exc_info:
            _codebook().translate_concept_value(OutputFormat.DESCRIPTIONS, "maybe", "colonbiopt")
        assert exc_info.value.value == "maybe"
        assert exc_info.value.column == "colonbiopt"
        assert str(exc_info.value) == 'value "maybe" (colonbiopt) doesn\'t seem to exist.'

    def test_raw_values_are_case_sensitive(self) -> None:
        with pytest.raises(UnmappedValueError):
            _codebook().translate_concept_value(OutputFormat.DESCRIPTIONS, "POS", "colonbiopt")

    def test_unknown_column_raises_key_error(self) -> None:
        with pytest.raises(KeyError):
            _codebook().translate_concept_value(OutputFormat.CODES, "pos", "other")


class TestLookupValue:
    def test_statuses(self) -> None:
        cb = _codebook()
        fmt = OutputFormat.DESCRIPTIONS
        assert cb.lookup_value(fmt, "pos", "colonbiopt").status is TranslationStatus.TRANSLATED
        assert cb.lookup_value(fmt, "", "colonbiopt").status is TranslationStatus.PASSED_THROUGH
        assert cb.lookup_value(fmt, "x", "opmerking").status is TranslationStatus.PASSED_THROUGH
        unmapped = cb.lookup_value(fmt, "maybe", "colonbiopt")
        assert unmapped.status is TranslationStatus.UNMAPPED
        assert not unmapped.ok
        assert unmapped.value == "maybe"

    def test_unwrap(self) -> None:
        ok = ValueTranslation(status=TranslationStatus.TRANSLATED, value="P", raw_value="pos",
                              column="c")
        assert ok.unwrap() == "P"
        bad = ValueTranslation(status=TranslationStatus.UNMAPPED, value="x", raw_value="x",
                               column="c")
        with pytest.raises(UnmappedValueError):
            bad.unwrap()


class TestTranslateHeader:
    def test_header_rendered_per_format(self) -> None:
        cb = _codebook()
        assert cb.translate_header(OutputFormat.DESCRIPTIONS, "colonbiopt") == "Colon biopsy"
        assert cb.translate_header(OutputFormat.CODESYSTEM_AND_CODES, "COLONBIOPT") == (
            "SNOMED CT:84921008"
        )

    def test_header_without_terminology_keeps_name(self) -> None:
        assert _codebook().translate_header(OutputFormat.CODES, "opmerking") == "opmerking"
