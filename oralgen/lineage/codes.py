"""Relation-code grammar of the MZ11 form.

The kinship column holds a short code pointing at other rows by RIN:

- ``C<n>``: spouse of record n
- ``F<n>`` or ``F<n>,<m>`` (also written ``F<n>,F<m>``): child of the listed parents
- ``P<k>``: parent of record k

Codes are case-insensitive and surrounding whitespace is ignored.
"""

import re
from dataclasses import dataclass
from enum import Enum

_NUMBER = re.compile(r"\d+")


class RelationKind(str, Enum):
    """Kind of kinship a relation code declares."""

    SPOUSE = "C"
    CHILD = "F"
    PARENT = "P"


class MalformedRelationCode(ValueError):
    """A relation code that cannot be interpreted."""


@dataclass(frozen=True)
class RelationCode:
    """A parsed relation code."""

    kind: RelationKind
    targets: tuple[int, ...]

    @property
    def target(self) -> int:
        """First (for spouse and parent codes, the only) referenced RIN."""
        return self.targets[0]

    def __str__(self) -> str:
        return f"{self.kind.value}{','.join(str(t) for t in self.targets)}"


def _parse_number(text: str, code: str) -> int:
    if not _NUMBER.fullmatch(text) or int(text) == 0:
        raise MalformedRelationCode(f"Invalid record number in relation code {code!r}")
    return int(text)


def parse_relation_code(code: str | None) -> RelationCode | None:
    """Parse a relation code.

    Child codes are read leniently: every ``F`` is dropped, the rest is split
    on commas, and parts that are not positive numbers are ignored. The first
    two distinct parents are the ones that form the family.

    Args:
        code: Raw code as transcribed

    Returns:
        The parsed code, or None when the code is empty

    Raises:
        MalformedRelationCode: If the code is not empty but cannot be parsed
    """
    text = (code or "").strip().upper()
    if not text:
        return None

    prefix, rest = text[0], text[1:].strip()

    if prefix == RelationKind.SPOUSE.value:
        return RelationCode(RelationKind.SPOUSE, (_parse_number(rest, code),))

    if prefix == RelationKind.PARENT.value:
        return RelationCode(RelationKind.PARENT, (_parse_number(rest, code),))

    if prefix == RelationKind.CHILD.value:
        parents: dict[int, None] = {}
        for part in text.replace(RelationKind.CHILD.value, "").split(","):
            part = part.strip()
            if _NUMBER.fullmatch(part) and int(part) > 0:
                parents[int(part)] = None
        if not parents:
            raise MalformedRelationCode(f"No parent record numbers in relation code {code!r}")
        return RelationCode(RelationKind.CHILD, tuple(parents))

    raise MalformedRelationCode(f"Unrecognized relation code {code!r}")
