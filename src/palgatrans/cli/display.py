"""Rich display helpers for terminal output.

Provides formatted display functions for the protocol list, catalog
languages and versions, codebook contents and translation run results
using Rich tables and panels.
"""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from palgatrans.codebook.dictionary import Codebook
from palgatrans.codebook.registry import CodebookInfo
from palgatrans.models.config import RunParameters
from palgatrans.translation.runner import RunResult


def display_protocols(protocols: dict[str, str], console: Console) -> None:
    """Print the known protocols and their ART-DECOR prefixes."""
    table = Table(title=f"Known Protocols ({len(protocols)})")
    table.add_column("Protocol", style="bold cyan")
    table.add_column("Prefix")
    for name in sorted(protocols):
        table.add_row(name, protocols[name])
    console.print(table)


def display_catalog(protocol: str, info: CodebookInfo, console: Console) -> None:
    """Print the published versions of a protocol with their languages.

    Args:
        protocol: Protocol prefix shown in the title.
        info: Catalog of the protocol.
        console: Rich Console for output.
    """
    table = Table(title=f"{protocol} versions", show_lines=False)
    table.add_column("Version", style="bold cyan", justify="right")
    table.add_column("Dataset id")
    table.add_column("Languages")
    for label in info.versions:
        table.add_row(label, info.get_id(label) or "", ", ".join(info.languages_for(label)))
    console.print(table)
    console.print(f"\nLanguages: [bold]{', '.join(info.unique_languages) or '-'}[/bold]")


def display_codebook(codebook: Codebook, console: Console) -> None:
    """Print the concepts of one codebook version.

    Shows per column the header terminology and the number of enumerated
    values; columns without terminology keep their name in the output.
    """
    info_lines = [
        f"[bold]Protocol:[/bold] {codebook.protocol_prefix}",
        f"[bold]Version:[/bold] {codebook.version_label}",
        f"[bold]Language:[/bold] {codebook.language}",
        f"[bold]Dataset id:[/bold] {codebook.dataset_id}",
    ]
    console.print(Panel("\n".join(info_lines), title="Codebook"))

    table = Table(title=f"Concepts ({len(codebook)})", show_lines=True)
    table.add_column("Column", style="bold cyan", no_wrap=True)
    table.add_column("Code System")
    table.add_column("Code")
    table.add_column("Description", max_width=50)
    table.add_column("Values", justify="right")

    for name in codebook.column_names:
        concept = codebook.get_concept(name)
        if concept is None:
            continue
        term = concept.terminology
        table.add_row(
            concept.column_name,
            term.code_system if term else "",
            term.code if term else "",
            term.display_name if term else "[dim]-[/dim]",
            str(len(concept.values)) if concept.has_values else "[dim]free[/dim]",
        )

    console.print(table)


def display_run_result(params: RunParameters, result: RunResult, console: Console) -> None:
    """Print the outcome of a translation run and any diagnostics."""
    summary = params.summary().replace("\n", "\n  ")
    console.print(Panel(f"  {summary}", title="Run parameters"))

    console.print(
        f"[green]Wrote {result.rows_written} rows x {result.columns_written} columns "
        f"to {result.output_path}[/green]"
    )
    if result.columns_skipped:
        console.print(
            f"[dim]{len(result.columns_skipped)} columns left out: "
            f"{', '.join(result.columns_skipped)}[/dim]"
        )

    if result.diagnostics:
        table = Table(title=f"Diagnostics ({len(result.diagnostics)})", show_lines=True)
        table.add_column("Source", style="yellow", no_wrap=True)
        table.add_column("Message")
        for d in result.diagnostics:
            table.add_row(d.source, d.message)
        console.print(table)
