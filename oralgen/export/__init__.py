"""Export of resolved pedigrees to interchange formats."""

from oralgen.export.gedcom import format_gedcom_date, format_gedcom_name, generate_gedcom, render_gedcom

__all__ = ["generate_gedcom", "render_gedcom", "format_gedcom_name", "format_gedcom_date"]
