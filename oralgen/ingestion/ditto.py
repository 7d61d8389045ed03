"""Ditto mark resolution for place columns.

Transcribers write a quote mark (or the word "ditto") in a place column to
repeat the value of the row above. This pass replaces those markers with the
literal value so every row stands on its own.
"""

import logging
from collections.abc import Iterable

from oralgen.schemas.rows import RowRecord

logger = logging.getLogger(__name__)

DITTO_MARKS = frozenset({'"', "“", "”", "″", "〃"})
DITTO_WORD = "ditto"

PLACE_FIELDS = ("birth_place", "death_place")


def is_ditto_marker(value: str | None) -> bool:
    """Check whether a cell value is a ditto marker."""
    if not value:
        return False
    text = value.strip()
    return text in DITTO_MARKS or text.lower() == DITTO_WORD


def normalize_dittos(rows: Iterable[RowRecord]) -> list[RowRecord]:
    """Replace ditto markers in place columns with the value above.

    Each place column is its own stream: a ditto in the death-place column
    never borrows a birth place. A ditto with nothing above it resolves to
    an empty string. Rows are copied, never mutated.

    Args:
        rows: Rows in document order

    Returns:
        New list of rows with literal place values

    Raises:
        TypeError: If rows is None
    """
    if rows is None:
        raise TypeError("normalize_dittos() requires a sequence of rows, got None")

    last_seen = {field: "" for field in PLACE_FIELDS}
    normalized = []

    for row in rows:
        updates: dict[str, object] = {}
        for field in PLACE_FIELDS:
            value = getattr(row, field).strip()
            if is_ditto_marker(value):
                value = last_seen[field]
                updates["is_ditto"] = True
                logger.debug("RIN %s: %s ditto -> %r", row.record_number, field, value)
            elif value:
                last_seen[field] = value
            updates[field] = value

        normalized.append(row.model_copy(update=updates))

    return normalized
