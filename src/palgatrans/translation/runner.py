"""One complete translation run.

Wires the pieces together: read and ingest the export, reconcile the
headers, translate header and rows, write the output file.
"""

from __future__ import annotations

from pathlib import Path

from loguru import logger
from pydantic import BaseModel, Field

from palgatrans.catalog.base import TerminologySource
from palgatrans.codebook.cache import CodebookCache
from palgatrans.codebook.housekeeping import HousekeepingCodebook
from palgatrans.codebook.registry import ProtocolCodebookRegistry
from palgatrans.diagnostics import Diagnostic, RunLog
from palgatrans.io.text_reader import read_dataset
from palgatrans.io.text_writer import write_text
from palgatrans.models.config import RunParameters
from palgatrans.translation.driver import TranslationDriver


class RunResult(BaseModel):
    """Outcome of a successful run."""

    output_path: Path
    rows_written: int = Field(..., ge=0)
    columns_written: int = Field(..., ge=0)
    columns_skipped: list[str] = Field(
        default_factory=list, description="Input columns left out of the output"
    )
    diagnostics: list[Diagnostic] = Field(default_factory=list)


class TranslationRun:
    """Translates one export according to a RunParameters.

    The cache may be shared between runs in the same process; catalogs and
    codebooks are then only fetched once. The run log is cleared at the
    start of every run.
    """

    def __init__(
        self,
        params: RunParameters,
        source: TerminologySource,
        cache: CodebookCache | None = None,
        run_log: RunLog | None = None,
    ) -> None:
        self.params = params
        self.run_log = run_log if run_log is not None else RunLog()
        cache = cache if cache is not None else CodebookCache()
        self.registry = ProtocolCodebookRegistry(source, cache, self.run_log)
        self.housekeeping = HousekeepingCodebook(
            source, params.source_language, cache, self.run_log
        )
        self.driver = TranslationDriver(
            self.registry,
            self.housekeeping,
            params.prefix,
            params.source_language,
            params.output_format,
            keep_version_column=params.keep_version_column,
            collect_unmapped=params.collect_unmapped,
        )

    def execute(self) -> RunResult:
        """Run the translation.

        Raises:
            FileNotFoundError: If the input file does not exist.
            MalformedInputError: If the export cannot be parsed.
            CatalogError: If the protocol catalog or a codebook cannot be fetched.
            UnmappedValueError: On the first unmapped value (default).
            UnmappedValuesError: After writing, when ``collect_unmapped`` is set
                and unmapped values were found.
            OutputWriteError: If the output file cannot be written.
        """
        self.run_log.clear()
        params = self.params
        logger.info("Starting translation run:\n{}", params.summary())

        dataset = read_dataset(params.input_path, params.encoding)
        self.driver.reconcile(dataset)
        headers = self.driver.translate_headers(dataset)
        indices = self.driver.output_indices(dataset)

        rows = self.driver.translate_rows(dataset)
        if not params.collect_unmapped:
            # fail before anything is written
            rows = list(rows)

        out_path = params.data_out_path
        count = write_text(
            out_path, [translated for _, translated in headers], rows, params.encoding
        )

        kept = set(indices)
        skipped = [
            name for i, name in enumerate(dataset.original_headers) if i not in kept
        ]
        logger.info(
            "Translation finished: {} rows, {} columns written, {} skipped",
            count,
            len(headers),
            len(skipped),
        )
        return RunResult(
            output_path=out_path,
            rows_written=count,
            columns_written=len(headers),
            columns_skipped=skipped,
            diagnostics=self.run_log.entries,
        )
