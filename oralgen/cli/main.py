"""OralGen CLI - Main entry point.

This module provides the command-line interface for the OralGen project.
"""

import json
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.tree import Tree

from oralgen.config import settings
from oralgen.export.gedcom import render_gedcom
from oralgen.ingestion.loader import PayloadError, load_survey_file
from oralgen.lineage.resolver import Pedigree, resolve
from oralgen.schemas.rows import RowRecord, SurveyData

app = typer.Typer(
    name="oralgen",
    help="OralGen - Turn transcribed MZ11 survey forms into GEDCOM family trees",
    add_completion=False,
)
console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Configure logging for every command."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load(input_path: Path) -> SurveyData:
    """Load a survey file or exit with an error message."""
    try:
        return load_survey_file(input_path)
    except (OSError, PayloadError) as e:
        console.print(f"[red]Error: {e!s}[/red]\n")
        raise typer.Exit(1) from e


def _print_warnings(pedigree: Pedigree) -> None:
    if not pedigree.warnings:
        return
    console.print(f"[yellow]{len(pedigree.warnings)} warning(s):[/yellow]")
    for warning in pedigree.warnings:
        console.print(f"  [yellow]•[/yellow] {warning}")
    console.print()


def _label(pedigree: Pedigree, rin: int | None) -> str:
    if rin is None:
        return "[dim]-[/dim]"
    row = pedigree.individual(rin)
    if row is None:
        return f"[red]{rin} (missing)[/red]"
    return f"{rin} {row.full_name}".rstrip()


@app.command()
def normalize(
    input_path: Path = typer.Argument(..., help="Extraction JSON file", exists=True, dir_okay=False),
    output: Path = typer.Option(
        None, "--output", "-o", help="Where to write the normalized JSON (default: stdout)"
    ),
) -> None:
    """Validate extracted rows and resolve ditto marks.

    Missing record numbers are taken from the row position and pages from the
    record number. Place columns holding a ditto mark get the value above.
    """
    survey = _load(input_path)
    text = json.dumps(survey.to_dict(), ensure_ascii=False, indent=2)

    if output is None:
        console.print_json(text)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    with open(output, "w", encoding="utf-8") as f:
        f.write(text)

    dittos = sum(1 for row in survey.individuals if row.is_ditto)
    console.print(
        f"[bold green]✓ Normalized {len(survey.individuals)} rows "
        f"({dittos} with ditto places) to {output}[/bold green]\n"
    )


@app.command()
def families(
    input_path: Path = typer.Argument(..., help="Extraction JSON file", exists=True, dir_okay=False),
) -> None:
    """Show the family units resolved from the relation codes."""
    survey = _load(input_path)
    pedigree = resolve(survey.individuals)

    console.print(f"\n[bold cyan]Family Units:[/bold cyan] {input_path.name}\n")

    if not pedigree.families:
        console.print("[yellow]No family units found.[/yellow]\n")
    else:
        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("Family", style="dim")
        table.add_column("Husband")
        table.add_column("Wife")
        table.add_column("Children")

        for family in pedigree.families:
            table.add_row(
                family.key,
                _label(pedigree, family.parent_a),
                _label(pedigree, family.parent_b),
                "\n".join(_label(pedigree, child) for child in family.children) or "-",
            )

        console.print(table)
        console.print()

    _print_warnings(pedigree)


@app.command()
def tree(
    input_path: Path = typer.Argument(..., help="Extraction JSON file", exists=True, dir_okay=False),
    rin: int = typer.Option(..., "--rin", "-r", help="Record number of the person to show"),
) -> None:
    """Display parents, spouse(s) and children of one person."""
    survey = _load(input_path)
    pedigree = resolve(survey.individuals)

    person: RowRecord | None = pedigree.individual(rin)
    if person is None:
        console.print(f"[red]No row with RIN {rin}[/red]\n")
        raise typer.Exit(1)

    person_info = f"[bold blue]{person.full_name or '(no name)'}[/bold blue] (RIN {rin})"
    if person.birth_date or person.birth_place:
        person_info += f"\n  Born: {person.birth_date}"
        if person.birth_place:
            person_info += f" in {person.birth_place}"
    if person.death_date or person.death_place:
        person_info += f"\n  Died: {person.death_date}"
        if person.death_place:
            person_info += f" in {person.death_place}"

    tree_root = Tree(person_info)

    parents = [p for family in pedigree.child_families(rin) for p in family.parents]
    if parents:
        parents_branch = tree_root.add("[yellow]Parents[/yellow]")
        for parent in parents:
            parents_branch.add(f"[dim]{_label(pedigree, parent)}[/dim]")

    spouse_families = pedigree.spouse_families(rin)
    spouses = [p for family in spouse_families for p in family.parents if p != rin]
    if spouses:
        spouse_branch = tree_root.add("[magenta]Spouse(s)[/magenta]")
        for spouse in spouses:
            spouse_branch.add(f"[dim]{_label(pedigree, spouse)}[/dim]")

    children = [c for family in spouse_families for c in family.children]
    if children:
        children_branch = tree_root.add("[green]Children[/green]")
        for child in children:
            children_branch.add(f"[dim]{_label(pedigree, child)}[/dim]")

    console.print(tree_root)
    console.print(f"[dim]Page {person.page}, row {person.row}[/dim]\n")


@app.command()
def export(
    input_path: Path = typer.Argument(..., help="Extraction JSON file", exists=True, dir_okay=False),
    output: Path = typer.Argument(None, help="Output file path (default: MZ11_<input>.ged)"),
    format: str = typer.Option("gedcom", "--format", "-f", help="Export format (gedcom)"),
    producer: str = typer.Option(None, "--producer", help="Name written to the GEDCOM header"),
) -> None:
    """Export the survey as a lineage-linked GEDCOM file."""
    if format.lower() != "gedcom":
        console.print(f"[red]Unsupported format: {format}[/red]")
        console.print("[yellow]Currently only 'gedcom' format is supported[/yellow]\n")
        raise typer.Exit(1)

    survey = _load(input_path)
    output = output or input_path.parent / survey.export_filename()

    console.print(f"\n[bold cyan]Exporting to GEDCOM:[/bold cyan] {output}\n")

    pedigree = resolve(survey.individuals)
    gedcom = render_gedcom(pedigree, producer=producer)

    output.parent.mkdir(parents=True, exist_ok=True)
    with open(output, "w", encoding="utf-8") as f:
        f.write(gedcom)

    _print_warnings(pedigree)
    console.print(
        f"[bold green]✓ Exported {len(pedigree.individuals)} people and "
        f"{len(pedigree.families)} families to {output}[/bold green]\n"
    )


@app.command()
def stats(
    input_path: Path = typer.Argument(..., help="Extraction JSON file", exists=True, dir_okay=False),
) -> None:
    """Display statistics about a survey."""
    survey = _load(input_path)
    pedigree = resolve(survey.individuals)

    console.print(f"\n[bold cyan]OralGen - Survey Statistics[/bold cyan] {input_path.name}\n")

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Metric", style="dim")
    table.add_column("Value", justify="right")

    table.add_row("Interview", survey.metadata.interview_id)
    table.add_row("Interviewee", survey.metadata.interviewee_name)
    table.add_row("Rows", str(len(survey.individuals)))
    table.add_row("Pages", str(len({row.page for row in survey.individuals})))
    table.add_row("Rows With Relation Code", str(sum(1 for r in survey.individuals if r.relation_code)))
    table.add_row("Rows With Ditto Places", str(sum(1 for r in survey.individuals if r.is_ditto)))
    table.add_row("Family Units", str(len(pedigree.families)))
    table.add_row("Warnings", str(len(pedigree.warnings)))

    console.print(table)
    console.print()


@app.command()
def version() -> None:
    """Display version information."""
    from oralgen import __version__

    console.print(f"\n[bold cyan]OralGen[/bold cyan] version {__version__}\n")


if __name__ == "__main__":
    app()
