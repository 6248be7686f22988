"""Codebook terminology models.

These models represent one version of a protocol codebook as published
on ART-DECOR: concepts (dataset columns), the terminology used to
translate the column header, and the enumerated values a column may hold
together with their standardized codes.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class OutputFormat(str, Enum):
    """Which parts of a terminology triple are rendered in the output.

    DESCRIPTIONS: displayName
    CODES: code
    CODESYSTEM_AND_CODES: codeSystem:code
    CODES_AND_DESCRIPTIONS: code:displayName
    CODESYSTEM_AND_CODES_AND_DESCRIPTIONS: codeSystem:code:displayName
    """

    DESCRIPTIONS = "DESCRIPTIONS"
    CODES = "CODES"
    CODESYSTEM_AND_CODES = "CODESYSTEM_AND_CODES"
    CODES_AND_DESCRIPTIONS = "CODES_AND_DESCRIPTIONS"
    CODESYSTEM_AND_CODES_AND_DESCRIPTIONS = "CODESYSTEM_AND_CODES_AND_DESCRIPTIONS"

    @property
    def pretty(self) -> str:
        """Human-friendly label shown in the CLI."""
        return _FORMAT_LABELS[self]

    @classmethod
    def from_pretty(cls, label: str) -> OutputFormat | None:
        """Look up a format by its pretty label (case-insensitive)."""
        for fmt, pretty in _FORMAT_LABELS.items():
            if pretty.lower() == label.strip().lower():
                return fmt
        return None


_FORMAT_LABELS: dict[OutputFormat, str] = {
    OutputFormat.DESCRIPTIONS: "Text only",
    OutputFormat.CODES: "Code only",
    OutputFormat.CODESYSTEM_AND_CODES: "Codesystem and Code",
    OutputFormat.CODES_AND_DESCRIPTIONS: "Code and Text",
    OutputFormat.CODESYSTEM_AND_CODES_AND_DESCRIPTIONS: "Codesystem, Code and Text",
}


class OutputFileType(str, Enum):
    """Output file layouts. Only one-row-per-record text is supported."""

    TEXT = "TEXT"

    @property
    def pretty(self) -> str:
        return "Text file"

    @classmethod
    def from_pretty(cls, label: str) -> OutputFileType | None:
        if label.strip().lower() == "text file":
            return cls.TEXT
        return None


class TermCode(BaseModel):
    """A (code, codeSystem, displayName) terminology triple."""

    model_config = ConfigDict(frozen=True)

    code: str = Field(..., description="Code in the code system (e.g., '84921008')")
    code_system: str = Field(..., description="Code system name (e.g., 'SNOMED CT')")
    display_name: str = Field(..., description="Human-readable description of the code")

    def render(self, output_format: OutputFormat) -> str:
        """Render the triple as a colon-joined string for the given format.

        Raises:
            ValueError: If ``output_format`` is not an OutputFormat member.
        """
        if output_format is OutputFormat.DESCRIPTIONS:
            return self.display_name
        if output_format is OutputFormat.CODES:
            return self.code
        if output_format is OutputFormat.CODESYSTEM_AND_CODES:
            return f"{self.code_system}:{self.code}"
        if output_format is OutputFormat.CODES_AND_DESCRIPTIONS:
            return f"{self.code}:{self.display_name}"
        if output_format is OutputFormat.CODESYSTEM_AND_CODES_AND_DESCRIPTIONS:
            return f"{self.code_system}:{self.code}:{self.display_name}"
        msg = f"Output format {output_format!r} does not exist"
        raise ValueError(msg)


class Concept(BaseModel):
    """One protocol data item (one dataset column) within a codebook version.

    ``values`` maps the raw value as found in the export (exact,
    case-sensitive) to its terminology. An empty mapping means the
    concept is free text or numeric and values pass through.
    """

    model_config = ConfigDict(frozen=True)

    concept_id: str = Field(..., description="Identifier assigned by ART-DECOR")
    column_name: str = Field(..., description="Column name in the PALGA export")
    terminology: TermCode | None = Field(
        default=None, description="Terminology used to translate the column header"
    )
    values: dict[str, TermCode] = Field(
        default_factory=dict, description="Raw value -> terminology for enumerated values"
    )

    @property
    def has_values(self) -> bool:
        return bool(self.values)


class ValueDefinition(BaseModel):
    """One enumerated option of a concept as delivered by a terminology source."""

    raw_value: str
    code: str
    code_system: str
    display_name: str


class ConceptDefinition(BaseModel):
    """A concept as delivered by a terminology source, before materialization."""

    column_name: str = Field(..., description="Column name in the PALGA export")
    concept_id: str = Field(default="", description="Identifier assigned by ART-DECOR")
    terminology: TermCode | None = Field(default=None)
    values: list[ValueDefinition] = Field(default_factory=list)

    def to_concept(self) -> Concept:
        """Build the immutable Concept owned by a codebook."""
        return Concept(
            concept_id=self.concept_id,
            column_name=self.column_name,
            terminology=self.terminology,
            values={
                v.raw_value: TermCode(
                    code=v.code, code_system=v.code_system, display_name=v.display_name
                )
                for v in self.values
            },
        )


class CatalogEntry(BaseModel):
    """One published version of a protocol codebook."""

    version_label: str = Field(..., description="Protocol version label (e.g., '3')")
    dataset_id: str = Field(..., description="ART-DECOR dataset identifier")
    languages: list[str] = Field(
        default_factory=list, description="Languages the version is described in (e.g., 'nl-NL')"
    )
