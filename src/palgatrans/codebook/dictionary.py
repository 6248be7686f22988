"""A single materialized codebook version.

A Codebook holds the concepts of one protocol version in one source
language, keyed by column name. Column names are matched
case-insensitively; raw values are matched exactly.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field

from palgatrans.models.codebook import Concept, ConceptDefinition, OutputFormat


class UnmappedValueError(Exception):
    """Raised when a value is not in the enumerated value list of its column."""

    def __init__(self, value: str, column: str) -> None:
        self.value = value
        self.column = column
        super().__init__(f'value "{value}" ({column}) doesn\'t seem to exist.')


class TranslationStatus(StrEnum):
    """Outcome of looking up one raw value."""

    TRANSLATED = "translated"
    PASSED_THROUGH = "passed_through"
    UNMAPPED = "unmapped"


class ValueTranslation(BaseModel):
    """Result of a value lookup.

    ``value`` is the rendered translation for TRANSLATED, the raw value
    for PASSED_THROUGH and UNMAPPED.
    """

    status: TranslationStatus
    value: str
    raw_value: str
    column: str = Field(..., description="Column the value belongs to")

    @property
    def ok(self) -> bool:
        return self.status is not TranslationStatus.UNMAPPED

    def unwrap(self) -> str:
        """Return the translated value or raise UnmappedValueError."""
        if self.status is TranslationStatus.UNMAPPED:
            raise UnmappedValueError(self.raw_value, self.column)
        return self.value


class Codebook:
    """Concept-and-value mapping for one version of one protocol."""

    def __init__(
        self,
        protocol_prefix: str,
        language: str,
        version_label: str,
        dataset_id: str,
        concepts: list[Concept],
    ) -> None:
        self.protocol_prefix = protocol_prefix
        self.language = language
        self.version_label = version_label
        self.dataset_id = dataset_id
        self._concepts: dict[str, Concept] = {}
        for concept in concepts:
            self._concepts[concept.column_name.lower()] = concept

    @classmethod
    def from_definitions(
        cls,
        protocol_prefix: str,
        language: str,
        version_label: str,
        dataset_id: str,
        definitions: list[ConceptDefinition],
    ) -> Codebook:
        return cls(
            protocol_prefix,
            language,
            version_label,
            dataset_id,
            [d.to_concept() for d in definitions],
        )

    def __len__(self) -> int:
        return len(self._concepts)

    def __repr__(self) -> str:
        return (
            f"Codebook(prefix={self.protocol_prefix!r}, language={self.language!r}, "
            f"version={self.version_label!r}, concepts={len(self)})"
        )

    @property
    def column_names(self) -> list[str]:
        return sorted(self._concepts)

    def contains_column(self, column_name: str) -> bool:
        return column_name.lower() in self._concepts

    def get_concept(self, column_name: str) -> Concept | None:
        return self._concepts.get(column_name.lower())

    def _require(self, column_name: str) -> Concept:
        concept = self.get_concept(column_name)
        if concept is None:
            msg = f"Column '{column_name}' is not part of codebook version {self.version_label}"
            raise KeyError(msg)
        return concept

    def lookup_value(
        self, output_format: OutputFormat, raw_value: str, column_name: str
    ) -> ValueTranslation:
        """Look up a raw value without raising on unmapped values.

        Values of concepts without an enumerated value list, and empty
        values, pass through unchanged.

        Raises:
            KeyError: If the column is not part of this codebook.
        """
        concept = self._require(column_name)
        if not concept.has_values or raw_value == "":
            return ValueTranslation(
                status=TranslationStatus.PASSED_THROUGH,
                value=raw_value,
                raw_value=raw_value,
                column=column_name,
            )
        term = concept.values.get(raw_value)
        if term is None:
            return ValueTranslation(
                status=TranslationStatus.UNMAPPED,
                value=raw_value,
                raw_value=raw_value,
                column=column_name,
            )
        return ValueTranslation(
            status=TranslationStatus.TRANSLATED,
            value=term.render(output_format),
            raw_value=raw_value,
            column=column_name,
        )

    def translate_concept_value(
        self, output_format: OutputFormat, raw_value: str, column_name: str
    ) -> str:
        """Translate a raw value, rendering it per ``output_format``.

        Raises:
            UnmappedValueError: If the column has enumerated values and
                ``raw_value`` is not one of them.
        """
        return self.lookup_value(output_format, raw_value, column_name).unwrap()

    def translate_header(self, output_format: OutputFormat, column_name: str) -> str:
        """Render the column's own terminology per ``output_format``.

        A concept without header terminology keeps its column name.
        """
        concept = self._require(column_name)
        if concept.terminology is None:
            return column_name
        return concept.terminology.render(output_format)
