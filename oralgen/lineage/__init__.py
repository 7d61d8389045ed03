"""Kinship code parsing and family resolution."""

from oralgen.lineage.codes import (
    MalformedRelationCode,
    RelationCode,
    RelationKind,
    parse_relation_code,
)
from oralgen.lineage.resolver import (
    FamilyUnit,
    Pedigree,
    RelationshipResolver,
    couple_key,
    resolve,
    single_key,
)

__all__ = [
    "RelationKind",
    "RelationCode",
    "MalformedRelationCode",
    "parse_relation_code",
    "FamilyUnit",
    "Pedigree",
    "RelationshipResolver",
    "resolve",
    "couple_key",
    "single_key",
]
