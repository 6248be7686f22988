"""Run configuration model.

RunParameters is the finished configuration a translation run receives:
which protocol and source language to use, how terms are rendered, and
where the input and output files live.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, model_validator

from palgatrans.models.codebook import OutputFileType, OutputFormat
from palgatrans.settings import (
    DEFAULT_ENCODING,
    DEFAULT_LANGUAGE,
    DEFAULT_PROTOCOL,
    OUTPUT_SUFFIX,
    get_protocol_prefix,
)


class RunParameters(BaseModel):
    """All parameters of one translation run."""

    input_path: Path = Field(..., description="Tab-separated PALGA export to translate")
    protocol_name: str = Field(default=DEFAULT_PROTOCOL, description="Protocol display name")
    protocol_prefix: str | None = Field(
        default=None,
        description="ART-DECOR prefix; derived from protocol_name when omitted",
    )
    source_language: str = Field(default=DEFAULT_LANGUAGE, description="Language of the export")
    output_format: OutputFormat = Field(default=OutputFormat.DESCRIPTIONS)
    output_file_type: OutputFileType = Field(default=OutputFileType.TEXT)
    output_path: Path | None = Field(
        default=None, description="Output file; defaults to <input stem>_out.txt"
    )
    encoding: str = Field(default=DEFAULT_ENCODING, description="Encoding of input and output")
    keep_version_column: bool = Field(
        default=False, description="Write the protocol-version column to the output"
    )
    collect_unmapped: bool = Field(
        default=False,
        description="Report all unmapped values at the end instead of failing on the first",
    )

    @model_validator(mode="after")
    def _resolve_prefix(self) -> RunParameters:
        if self.protocol_prefix is None:
            prefix = get_protocol_prefix(self.protocol_name)
            if prefix is None:
                msg = f"Unknown protocol '{self.protocol_name}'"
                raise ValueError(msg)
            self.protocol_prefix = prefix
        return self

    @property
    def prefix(self) -> str:
        """The resolved ART-DECOR prefix."""
        assert self.protocol_prefix is not None
        return self.protocol_prefix

    @property
    def data_out_path(self) -> Path:
        """Where the translated output is written."""
        if self.output_path is not None:
            return self.output_path
        return self.input_path.with_name(self.input_path.stem + OUTPUT_SUFFIX)

    def valid_input_file(self) -> bool:
        return self.input_path.is_file()

    def summary(self) -> str:
        """Multi-line summary of the choices made for this run."""
        return (
            f"data file: {self.input_path}\n"
            f"protocol: {self.protocol_name}\n"
            f"filetype: {self.output_file_type.pretty}\n"
            f"containing: {self.output_format.pretty}\n"
            f"source language: {self.source_language}"
        )
