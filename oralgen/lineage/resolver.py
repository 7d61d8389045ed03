"""Relationship resolution for transcribed survey rows.

This module turns the per-row kinship codes into family units (a couple or a
single parent plus their children) and indexes which units every person
belongs to. Resolution runs in two passes: unions first, so that a child
declared against one parent can join that parent's existing couple.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from pydantic import AliasChoices, ValidationError

from oralgen.lineage.codes import (
    MalformedRelationCode,
    RelationCode,
    RelationKind,
    parse_relation_code,
)
from oralgen.schemas.rows import RowRecord

logger = logging.getLogger(__name__)


def single_key(rin: int) -> str:
    """Family key for a single-parent unit."""
    return f"F{rin}"


def couple_key(rin1: int, rin2: int) -> str:
    """Family key for a couple, independent of argument order."""
    low, high = sorted((rin1, rin2))
    return f"F{low}_{high}"


@dataclass
class FamilyUnit:
    """A couple or single parent and their children.

    ``parent_a`` holds the male-identified parent when sex is known and is
    exported as HUSB; ``parent_b`` is exported as WIFE.
    """

    key: str
    parent_a: int | None = None
    parent_b: int | None = None
    children: list[int] = field(default_factory=list)

    @property
    def parents(self) -> tuple[int, ...]:
        """Parents that are set, parent_a first."""
        return tuple(p for p in (self.parent_a, self.parent_b) if p is not None)

    def has_parents(self) -> bool:
        return self.parent_a is not None or self.parent_b is not None

    def add_child(self, rin: int) -> None:
        if rin not in self.children:
            self.children.append(rin)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "key": self.key,
            "parent_a": self.parent_a,
            "parent_b": self.parent_b,
            "children": list(self.children),
        }


@dataclass
class Pedigree:
    """Resolved individuals and family units for one survey."""

    individuals: list[RowRecord]
    families: list[FamilyUnit]
    warnings: list[str] = field(default_factory=list)
    _by_key: dict[str, FamilyUnit] = field(default_factory=dict, init=False, repr=False)
    _as_spouse: dict[int, list[FamilyUnit]] = field(default_factory=dict, init=False, repr=False)
    _as_child: dict[int, list[FamilyUnit]] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        for family in self.families:
            self._by_key[family.key] = family
            for parent in family.parents:
                self._as_spouse.setdefault(parent, []).append(family)
            for child in family.children:
                self._as_child.setdefault(child, []).append(family)

    def family(self, key: str) -> FamilyUnit | None:
        return self._by_key.get(key)

    def individual(self, rin: int) -> RowRecord | None:
        """First row carrying a record number."""
        return next((row for row in self.individuals if row.record_number == rin), None)

    def spouse_families(self, rin: int) -> list[FamilyUnit]:
        """Families in which a person is a parent, in family order."""
        return list(self._as_spouse.get(rin, []))

    def child_families(self, rin: int) -> list[FamilyUnit]:
        """Families in which a person is a child (at most one in practice)."""
        return list(self._as_child.get(rin, []))

    def is_empty(self) -> bool:
        return not (self.individuals or self.families)


class RelationshipResolver:
    """Build family units from the relation codes of a row snapshot.

    A resolver holds the working state of one resolution; use a new instance
    (or the ``resolve`` function) for every snapshot.
    """

    def __init__(self, rows: Iterable[RowRecord | dict[str, Any]]):
        """Initialize the resolver.

        Args:
            rows: Rows in document order

        Raises:
            TypeError: If rows is None
        """
        if rows is None:
            raise TypeError("resolve() requires a sequence of rows, got None")

        self.warnings: list[str] = []
        self.rows: list[RowRecord] = []
        for position, row in enumerate(rows):
            if not isinstance(row, RowRecord):
                row = self._validate_row(row, position)
            if row.record_number is None:
                row = RowRecord.model_validate({**row.model_dump(), "record_number": position + 1})
            self.rows.append(row)

        self._families: dict[str, FamilyUnit] = {}
        self._parents_of: dict[int, dict[int, None]] = {}
        self._codes: list[tuple[int, RelationCode]] = []
        self._spouses: dict[int, int] = {}
        self._unions_of: dict[int, list[int]] = {}
        self._by_rin: dict[int, RowRecord] = {}

        for row in self.rows:
            if row.record_number in self._by_rin:
                self._warn(f"RIN {row.record_number} appears more than once")
                continue
            self._by_rin[row.record_number] = row

    def _warn(self, message: str) -> None:
        logger.warning(message)
        self.warnings.append(message)

    def _validate_row(self, row: Any, position: int) -> RowRecord:
        """Validate a raw row, dropping fields whose values are unusable."""
        try:
            return RowRecord.model_validate(row)
        except ValidationError as e:
            bad = {str(error["loc"][0]) for error in e.errors() if error["loc"]}
            if not isinstance(row, dict):
                self._warn(f"Row {position + 1}: not a row mapping; kept as an empty row")
                return RowRecord()

        names = set(bad)
        for name, info in RowRecord.model_fields.items():
            keys = {name}
            if isinstance(info.validation_alias, AliasChoices):
                keys.update(c for c in info.validation_alias.choices if isinstance(c, str))
            if keys & bad:
                names |= keys
        self._warn(f"Row {position + 1}: invalid value for {', '.join(sorted(bad))}; field ignored")
        return RowRecord.model_validate({k: v for k, v in row.items() if k not in names})

    def _sex(self, rin: int) -> str | None:
        row = self._by_rin.get(rin)
        return row.sex if row else None

    def _check_exists(self, rin: int, owner: int, code: RelationCode) -> None:
        if rin not in self._by_rin:
            self._warn(f"RIN {owner}: relation code {code} refers to missing RIN {rin}")

    def _get_or_create(self, key: str) -> tuple[FamilyUnit, bool]:
        family = self._families.get(key)
        if family is not None:
            return family, False
        family = FamilyUnit(key=key)
        self._families[key] = family
        return family, True

    def _order_couple(self, rin1: int, rin2: int) -> tuple[int, int]:
        """Order a couple as (parent_a, parent_b).

        A lone male-identified party comes first and a lone female-identified
        party second. Otherwise the smaller record number comes first; this is
        only a stable tie-break.
        """
        sex1, sex2 = self._sex(rin1), self._sex(rin2)
        if (sex1 == "M") != (sex2 == "M"):
            return (rin1, rin2) if sex1 == "M" else (rin2, rin1)
        if (sex1 == "F") != (sex2 == "F"):
            return (rin2, rin1) if sex1 == "F" else (rin1, rin2)
        return (min(rin1, rin2), max(rin1, rin2))

    def _place_couple(self, family: FamilyUnit, rin1: int, rin2: int) -> None:
        family.parent_a, family.parent_b = self._order_couple(rin1, rin2)

    def _place_single(self, family: FamilyUnit, rin: int) -> None:
        if self._sex(rin) == "F":
            family.parent_b = rin
        else:
            family.parent_a = rin

    def _add_parent(self, child: int, parent: int) -> None:
        self._parents_of.setdefault(child, {})[parent] = None

    def _add_union(self, rin1: int, rin2: int) -> None:
        for rin, spouse in ((rin1, rin2), (rin2, rin1)):
            partners = self._unions_of.setdefault(rin, [])
            if spouse not in partners:
                partners.append(spouse)

    def _spouse_for(self, parent: int, child: int) -> int | None:
        """Spouse whose couple a child of a single declared parent joins.

        The parent's own spouse code wins; otherwise the first union recorded
        for the parent in pass 1 is used.
        """
        if parent in self._spouses:
            return self._spouses[parent]
        partners = self._unions_of.get(parent, [])
        if len(partners) > 1:
            self._warn(
                f"RIN {child}: parent {parent} has {len(partners)} spouses; "
                f"child attached to the family with RIN {partners[0]}"
            )
        return partners[0] if partners else None

    def _read_codes(self) -> None:
        """Parse every row's code once."""
        for row in self.rows:
            rin = row.record_number
            try:
                code = parse_relation_code(row.relation_code)
            except MalformedRelationCode as e:
                self._warn(f"RIN {rin}: {e}; row treated as having no relation")
                continue
            if code is None:
                continue
            if rin in code.targets:
                if code.kind is RelationKind.CHILD and len(code.targets) > 1:
                    self._warn(f"RIN {rin}: relation code {code} lists the row as its own parent")
                    code = RelationCode(code.kind, tuple(t for t in code.targets if t != rin))
                else:
                    self._warn(f"RIN {rin}: relation code {code} refers to itself; ignored")
                    continue
            self._codes.append((rin, code))
            if code.kind is RelationKind.SPOUSE and self._by_rin.get(rin) is row:
                self._spouses[rin] = code.target

    def _resolve_unions(self) -> None:
        """Pass 1: couples from spouse codes; collect parent claims."""
        for rin, code in self._codes:
            if code.kind is RelationKind.SPOUSE:
                spouse = code.target
                self._check_exists(spouse, rin, code)
                family, _ = self._get_or_create(couple_key(rin, spouse))
                self._place_couple(family, rin, spouse)
                self._add_union(rin, spouse)

            elif code.kind is RelationKind.CHILD:
                for parent in code.targets:
                    self._check_exists(parent, rin, code)
                    self._add_parent(rin, parent)

            elif code.kind is RelationKind.PARENT:
                child = code.target
                self._check_exists(child, rin, code)
                self._add_parent(child, rin)

        logger.debug(
            "Pass 1: %d union(s), %d child(ren) with declared parents",
            len(self._families),
            len(self._parents_of),
        )

    def _resolve_filiation(self) -> None:
        """Pass 2: attach every child to its parents' family unit."""
        for child, parent_set in self._parents_of.items():
            parents = list(parent_set)

            if len(parents) >= 2:
                if len(parents) > 2:
                    extra = ", ".join(str(p) for p in parents[2:])
                    self._warn(f"RIN {child}: more than two parents declared; ignoring {extra}")
                first, second = parents[0], parents[1]
                family, _ = self._get_or_create(couple_key(first, second))
                if not family.has_parents():
                    self._place_couple(family, first, second)
            else:
                parent = parents[0]
                spouse = self._spouse_for(parent, child)
                if spouse is not None:
                    family, _ = self._get_or_create(couple_key(parent, spouse))
                    if not family.has_parents():
                        self._place_couple(family, parent, spouse)
                else:
                    family, created = self._get_or_create(single_key(parent))
                    if created:
                        self._place_single(family, parent)

            if child in family.parents:
                self._warn(f"RIN {child} is declared as a child of its own family {family.key}")
            family.add_child(child)

        logger.debug("Pass 2: %d family unit(s) in total", len(self._families))

    def resolve(self) -> Pedigree:
        """Run both passes and return the pedigree."""
        self._read_codes()
        self._resolve_unions()
        self._resolve_filiation()
        return Pedigree(
            individuals=list(self.rows),
            families=list(self._families.values()),
            warnings=list(self.warnings),
        )


def resolve(rows: Iterable[RowRecord | dict[str, Any]]) -> Pedigree:
    """Resolve the relation codes of a row snapshot into a pedigree.

    Malformed codes, dangling references and duplicate record numbers never
    abort resolution; they are reported in ``Pedigree.warnings``.

    Args:
        rows: Rows in document order

    Returns:
        Pedigree with individuals in input order and families in creation order

    Raises:
        TypeError: If rows is None
    """
    return RelationshipResolver(rows).resolve()
