"""GEDCOM export of resolved pedigrees.

Renders individuals and family units as a GEDCOM 5.5.1 lineage-linked
document. Output is deterministic for a given snapshot and export date:
individuals follow input order and families follow creation order.
"""

from collections.abc import Iterable
from datetime import date
from typing import Any

from oralgen.config import settings
from oralgen.lineage.resolver import FamilyUnit, Pedigree, resolve
from oralgen.schemas.rows import RowRecord

MONTHS = ("JAN", "FEB", "MAR", "APR", "MAY", "JUN", "JUL", "AUG", "SEP", "OCT", "NOV", "DEC")


def format_gedcom_date(day: date) -> str:
    """Format a date as ``DD MON YYYY`` (e.g. ``07 MAR 2025``)."""
    return f"{day.day:02d} {MONTHS[day.month - 1]} {day.year}"


def _flatten(value: str) -> str:
    # One GEDCOM line per value: no embedded newlines or runs of spaces
    return " ".join(value.split())


def format_gedcom_name(full_name: str) -> str:
    """Format a name with its last word marked as the surname.

    ``"Ana Maria Silva"`` becomes ``"Ana Maria /Silva/"``. Names with fewer
    than two words are returned as written.
    """
    parts = full_name.split()
    if len(parts) < 2:
        return _flatten(full_name)
    return f"{' '.join(parts[:-1])} /{parts[-1]}/"


def _header(producer: str, export_date: date) -> list[str]:
    return [
        "0 HEAD",
        f"1 SOUR {_flatten(producer)}",
        f"1 DATE {format_gedcom_date(export_date)}",
        "1 CHAR UTF-8",
        "1 GEDC",
        f"2 VERS {settings.gedcom_version}",
        "2 FORM LINEAGE-LINKED",
    ]


def _event(tag: str, event_date: str, place: str) -> list[str]:
    if not (event_date or place):
        return []
    lines = [f"1 {tag}"]
    if event_date:
        lines.append(f"2 DATE {_flatten(event_date)}")
    if place:
        lines.append(f"2 PLAC {_flatten(place)}")
    return lines


def _individual(row: RowRecord, pedigree: Pedigree) -> list[str]:
    rin = row.record_number
    lines = [f"0 @I{rin}@ INDI"]

    name = format_gedcom_name(row.full_name)
    if name:
        lines.append(f"1 NAME {name}")
    if row.sex in ("M", "F"):
        lines.append(f"1 SEX {row.sex}")

    lines.extend(_event("BIRT", row.birth_date, row.birth_place))
    lines.extend(_event("DEAT", row.death_date, row.death_place))

    for family in pedigree.spouse_families(rin):
        lines.append(f"1 FAMS @{family.key}@")
    for family in pedigree.child_families(rin):
        lines.append(f"1 FAMC @{family.key}@")
    return lines


def _family(family: FamilyUnit) -> list[str]:
    lines = [f"0 @{family.key}@ FAM"]
    if family.parent_a is not None:
        lines.append(f"1 HUSB @I{family.parent_a}@")
    if family.parent_b is not None:
        lines.append(f"1 WIFE @I{family.parent_b}@")
    for child in family.children:
        lines.append(f"1 CHIL @I{child}@")
    return lines


def render_gedcom(
    pedigree: Pedigree, producer: str | None = None, export_date: date | None = None
) -> str:
    """Render a resolved pedigree as a GEDCOM document.

    Args:
        pedigree: Resolved individuals and families
        producer: Name written to the SOUR header (default: configured producer)
        export_date: Date written to the header (default: today)

    Returns:
        GEDCOM text, one record per line, without a trailing newline
    """
    lines = _header(producer or settings.producer_name, export_date or date.today())

    for row in pedigree.individuals:
        lines.extend(_individual(row, pedigree))

    for family in pedigree.families:
        lines.extend(_family(family))

    lines.append("0 TRLR")
    return "\n".join(lines)


def generate_gedcom(
    rows: Iterable[RowRecord | dict[str, Any]],
    producer: str | None = None,
    export_date: date | None = None,
) -> str:
    """Resolve a row snapshot and render it as GEDCOM.

    Args:
        rows: Rows in document order (already ditto-normalized)
        producer: Name written to the SOUR header
        export_date: Date written to the header (default: today)

    Returns:
        GEDCOM text
    """
    return render_gedcom(resolve(rows), producer=producer, export_date=export_date)
