"""palgatrans CLI application entry point.

Provides commands for translating PALGA exports with the protocol
codebooks published on ART-DECOR, inspecting the available protocols,
languages and codebook versions, and snapshotting codebooks to a local
directory for offline runs.

Usage:
    palgatrans translate <export.txt> --protocol Colonbiopt
    palgatrans protocols
    palgatrans languages <protocol>
    palgatrans codebook <protocol> <version>
    palgatrans snapshot <protocol> --output-dir <dir>
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from loguru import logger
from rich.console import Console

from palgatrans.models.codebook import OutputFormat
from palgatrans.settings import DEFAULT_ENCODING, DEFAULT_LANGUAGE, DEFAULT_PROTOCOL

if TYPE_CHECKING:
    from palgatrans.catalog.base import TerminologySource

app = typer.Typer(
    name="palgatrans",
    help="Translate PALGA exports into standardized terminology using ART-DECOR codebooks.",
    no_args_is_help=True,
)

console = Console()

CodebookDirOption = Annotated[
    Path | None,
    typer.Option(
        "--codebook-dir",
        help="Read codebooks from a local snapshot directory instead of ART-DECOR",
    ),
]


def _configure_logging(verbose: bool) -> None:
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING")


def _make_source(codebook_dir: Path | None) -> TerminologySource:
    from palgatrans.catalog import ArtDecorSource, LocalCodebookSource

    if codebook_dir is None:
        return ArtDecorSource()
    if not codebook_dir.is_dir():
        console.print(f"[bold red]Error:[/bold red] Directory not found: {codebook_dir}")
        raise typer.Exit(code=1)
    return LocalCodebookSource(codebook_dir)


def _resolve_prefix(protocol: str) -> str:
    """Accept a protocol display name or an ART-DECOR prefix."""
    from palgatrans.settings import PROTOCOLS, get_protocol_prefix

    prefix = get_protocol_prefix(protocol)
    if prefix is not None:
        return prefix
    if protocol in PROTOCOLS.values():
        return protocol
    console.print(f"[bold red]Error:[/bold red] Protocol '{protocol}' not found.")
    console.print(f"Available protocols: {', '.join(sorted(PROTOCOLS))}")
    raise typer.Exit(code=1)


@app.command()
def version() -> None:
    """Show the current version."""
    from palgatrans import __version__

    console.print(f"palga-translator {__version__}")


@app.command()
def protocols() -> None:
    """List the known protocols and their ART-DECOR prefixes."""
    from palgatrans.cli.display import display_protocols
    from palgatrans.settings import PROTOCOLS

    display_protocols(PROTOCOLS, console)


@app.command()
def languages(
    protocol: Annotated[str, typer.Argument(help="Protocol name (e.g., Colonbiopt)")],
    codebook_dir: CodebookDirOption = None,
) -> None:
    """Show the published versions of a protocol and their languages."""
    from palgatrans.catalog import CatalogError
    from palgatrans.cli.display import display_catalog
    from palgatrans.codebook import ProtocolCodebookRegistry

    prefix = _resolve_prefix(protocol)
    registry = ProtocolCodebookRegistry(_make_source(codebook_dir))
    try:
        info = registry.catalog(prefix)
    except CatalogError as e:
        console.print(f"[bold red]Error retrieving catalog:[/bold red] {e}")
        raise typer.Exit(code=1) from e
    display_catalog(prefix, info, console)


@app.command()
def codebook(
    protocol: Annotated[str, typer.Argument(help="Protocol name (e.g., Colonbiopt)")],
    version_label: Annotated[str, typer.Argument(metavar="VERSION", help="Protocol version")],
    language: Annotated[
        str, typer.Option("--language", "-l", help="Codebook language")
    ] = DEFAULT_LANGUAGE,
    codebook_dir: CodebookDirOption = None,
) -> None:
    """Show the concepts of one codebook version."""
    from palgatrans.catalog import CatalogError
    from palgatrans.cli.display import display_codebook
    from palgatrans.codebook import ProtocolCodebookRegistry

    prefix = _resolve_prefix(protocol)
    registry = ProtocolCodebookRegistry(_make_source(codebook_dir))
    try:
        book = registry.resolve(prefix, language, version_label)
    except CatalogError as e:
        console.print(f"[bold red]Error retrieving codebook:[/bold red] {e}")
        raise typer.Exit(code=1) from e
    if book is None:
        console.print(
            f"[bold red]Error:[/bold red] Version '{version_label}' of {prefix} not found."
        )
        console.print(f"Available versions: {', '.join(registry.versions(prefix))}")
        raise typer.Exit(code=1)
    display_codebook(book, console)


@app.command()
def translate(
    input_path: Annotated[
        Path, typer.Argument(metavar="INPUT", help="Tab-separated PALGA export")
    ],
    protocol: Annotated[
        str, typer.Option("--protocol", "-p", help="Protocol name")
    ] = DEFAULT_PROTOCOL,
    language: Annotated[
        str, typer.Option("--language", "-l", help="Language of the export")
    ] = DEFAULT_LANGUAGE,
    output_format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", case_sensitive=False, help="What to write per term"),
    ] = OutputFormat.DESCRIPTIONS,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output file (default: <input>_out.txt)"),
    ] = None,
    encoding: Annotated[
        str, typer.Option("--encoding", help="Encoding of input and output")
    ] = DEFAULT_ENCODING,
    codebook_dir: CodebookDirOption = None,
    keep_version_column: Annotated[
        bool,
        typer.Option("--keep-version-column", help="Write the protocol-version column"),
    ] = False,
    collect_unmapped: Annotated[
        bool,
        typer.Option(
            "--collect-unmapped",
            help="Report all unmapped values after writing instead of stopping at the first",
        ),
    ] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging")] = False,
) -> None:
    """Translate a PALGA export.

    Column headers are translated with the newest codebook version in
    which each column was populated, values with the codebook version of
    their own row.
    """
    from palgatrans.catalog import CatalogError
    from palgatrans.cli.display import display_run_result
    from palgatrans.codebook import UnmappedValueError
    from palgatrans.ingest import MalformedInputError
    from palgatrans.io import OutputWriteError
    from palgatrans.models.config import RunParameters
    from palgatrans.translation import TranslationRun, UnmappedValuesError

    _configure_logging(verbose)

    if not input_path.is_file():
        console.print(f"[bold red]Error:[/bold red] File not found: {input_path}")
        raise typer.Exit(code=1)

    params = RunParameters(
        input_path=input_path,
        protocol_name=protocol,
        protocol_prefix=_resolve_prefix(protocol),
        source_language=language,
        output_format=output_format,
        output_path=output,
        encoding=encoding,
        keep_version_column=keep_version_column,
        collect_unmapped=collect_unmapped,
    )
    source = _make_source(codebook_dir)

    console.print(f"\n[bold blue]Translating {input_path.name}...[/bold blue]")
    run = TranslationRun(params, source)
    try:
        result = run.execute()
    except UnmappedValuesError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        console.print(f"[yellow]Untranslated values were kept in {params.data_out_path}[/yellow]")
        raise typer.Exit(code=1) from e
    except (
        UnmappedValueError,
        MalformedInputError,
        CatalogError,
        OutputWriteError,
        OSError,
    ) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(code=1) from e

    console.print()
    display_run_result(params, result, console)


@app.command()
def snapshot(
    protocol: Annotated[str, typer.Argument(help="Protocol name (e.g., Colonbiopt)")],
    output_dir: Annotated[
        Path, typer.Option("--output-dir", "-o", help="Directory to write the snapshot to")
    ],
    language: Annotated[
        str, typer.Option("--language", "-l", help="Codebook language")
    ] = DEFAULT_LANGUAGE,
    versions: Annotated[
        list[str] | None,
        typer.Option("--version", help="Only these versions (repeatable; default: all)"),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging")] = False,
) -> None:
    """Store the codebooks of a protocol as a local codebook directory.

    The housekeeping codebook is included. The directory can be passed to
    the other commands with --codebook-dir.
    """
    from palgatrans.catalog import ArtDecorSource, CatalogError, LocalCodebookSource
    from palgatrans.settings import HOUSEKEEPING_PREFIX

    _configure_logging(verbose)
    prefix = _resolve_prefix(protocol)
    remote = ArtDecorSource()
    local = LocalCodebookSource(output_dir)

    try:
        entries = remote.fetch_catalog(prefix)
        local.save_catalog(prefix, entries)
        wanted = set(versions) if versions else None
        selected = [e for e in entries if wanted is None or e.version_label in wanted]
        if wanted is not None:
            missing = wanted - {e.version_label for e in selected}
            if missing:
                console.print(
                    f"[yellow]Warning: versions not in catalog: "
                    f"{', '.join(sorted(missing))}[/yellow]"
                )

        for i, entry in enumerate(selected, start=1):
            console.print(
                f"[bold blue][{i}/{len(selected)}][/bold blue] "
                f"{prefix} version {entry.version_label}..."
            )
            definitions = remote.fetch_concept_definitions(entry.dataset_id, language)
            local.save_concept_definitions(entry.dataset_id, language, definitions)

        hk_entries = remote.fetch_catalog(HOUSEKEEPING_PREFIX)
        local.save_catalog(HOUSEKEEPING_PREFIX, hk_entries)
        if hk_entries:
            newest = hk_entries[-1]
            definitions = remote.fetch_concept_definitions(newest.dataset_id, language)
            local.save_concept_definitions(newest.dataset_id, language, definitions)
    except CatalogError as e:
        console.print(f"[bold red]Error retrieving codebooks:[/bold red] {e}")
        raise typer.Exit(code=1) from e

    console.print(f"\n[green]Snapshot of {len(selected)} versions written to {output_dir}[/green]")
