"""Tests for GEDCOM export."""

from datetime import date

import pytest

from oralgen.export.gedcom import (
    format_gedcom_date,
    format_gedcom_name,
    generate_gedcom,
    render_gedcom,
)
from oralgen.lineage.resolver import couple_key, resolve
from tests.conftest import EXPORT_DATE, make_rows

HEADER = [
    "0 HEAD",
    "1 SOUR OralGen",
    "1 DATE 07 MAR 2025",
    "1 CHAR UTF-8",
    "1 GEDC",
    "2 VERS 5.5.1",
    "2 FORM LINEAGE-LINKED",
]


def block(lines: list[str], start: str) -> list[str]:
    """Lines of the level-0 record starting with ``start``."""
    index = lines.index(start)
    end = index + 1
    while end < len(lines) and not lines[end].startswith("0 "):
        end += 1
    return lines[index:end]


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("Ana Silva", "Ana /Silva/"),
        ("Ana Maria  da Silva", "Ana Maria da /Silva/"),
        ("  Rui   Costa ", "Rui /Costa/"),
        ("Madonna", "Madonna"),
        ("", ""),
        ("   ", ""),
    ],
)
def test_format_name(name, expected):
    assert format_gedcom_name(name) == expected


@pytest.mark.parametrize(
    ("day", "expected"),
    [
        (date(2025, 3, 7), "07 MAR 2025"),
        (date(1999, 12, 31), "31 DEC 1999"),
        (date(2024, 1, 1), "01 JAN 2024"),
    ],
)
def test_format_date(day, expected):
    assert format_gedcom_date(day) == expected


def test_empty_input_is_header_and_trailer():
    gedcom = generate_gedcom([], export_date=EXPORT_DATE)

    assert gedcom == "\n".join(HEADER + ["0 TRLR"])
    assert "INDI" not in gedcom
    assert " FAM" not in gedcom


def test_couple_with_child_document(silva_rows):
    lines = generate_gedcom(silva_rows, export_date=EXPORT_DATE).split("\n")
    key = couple_key(1, 2)

    assert lines[: len(HEADER)] == HEADER
    assert lines[-1] == "0 TRLR"
    assert "1 NAME Ana /Silva/" in lines

    assert block(lines, "0 @I1@ INDI") == [
        "0 @I1@ INDI",
        "1 NAME João /Silva/",
        "1 SEX M",
        f"1 FAMS @{key}@",
    ]
    assert block(lines, "0 @I2@ INDI") == [
        "0 @I2@ INDI",
        "1 NAME Maria /Souza/",
        "1 SEX F",
        f"1 FAMS @{key}@",
    ]
    assert block(lines, "0 @I3@ INDI") == [
        "0 @I3@ INDI",
        "1 NAME Ana /Silva/",
        f"1 FAMC @{key}@",
    ]
    assert block(lines, f"0 @{key}@ FAM") == [
        f"0 @{key}@ FAM",
        "1 HUSB @I1@",
        "1 WIFE @I2@",
        "1 CHIL @I3@",
    ]
    assert sum(1 for line in lines if line.endswith(" FAM")) == 1


def test_events_only_when_present():
    rows = make_rows(
        {"rin": 1, "fullName": "Ana Silva", "birthDate": "1901", "birthPlace": "Braga"},
        {"rin": 2, "fullName": "Rui Silva", "deathPlace": "Porto"},
        {"rin": 3, "fullName": "Eva Silva"},
    )

    lines = generate_gedcom(rows, export_date=EXPORT_DATE).split("\n")

    assert block(lines, "0 @I1@ INDI") == [
        "0 @I1@ INDI",
        "1 NAME Ana /Silva/",
        "1 BIRT",
        "2 DATE 1901",
        "2 PLAC Braga",
    ]
    assert block(lines, "0 @I2@ INDI") == [
        "0 @I2@ INDI",
        "1 NAME Rui /Silva/",
        "1 DEAT",
        "2 PLAC Porto",
    ]
    assert block(lines, "0 @I3@ INDI") == ["0 @I3@ INDI", "1 NAME Eva /Silva/"]


def test_unnamed_and_unknown_sex_rows():
    lines = generate_gedcom(make_rows({"rin": 9, "sex": "Other"}), export_date=EXPORT_DATE).split(
        "\n"
    )

    assert block(lines, "0 @I9@ INDI") == ["0 @I9@ INDI"]


def test_single_parent_family_block():
    rows = make_rows(
        {"rin": 1, "fullName": "Rosa Lima", "sex": "F"},
        {"rin": 2, "fullName": "Luís Lima", "relation": "F1"},
    )

    lines = generate_gedcom(rows, export_date=EXPORT_DATE).split("\n")

    assert block(lines, "0 @F1@ FAM") == ["0 @F1@ FAM", "1 WIFE @I1@", "1 CHIL @I2@"]


def test_dangling_reference_has_no_individual_block():
    rows = make_rows({"rin": 1, "fullName": "Ana Silva", "relation": "F50"})

    lines = generate_gedcom(rows, export_date=EXPORT_DATE).split("\n")

    assert "0 @I50@ INDI" not in lines
    assert block(lines, "0 @F50@ FAM") == ["0 @F50@ FAM", "1 HUSB @I50@", "1 CHIL @I1@"]


def test_individuals_then_families_in_order():
    rows = make_rows(
        {"rin": 3, "relation": "F1"},
        {"rin": 1, "relation": "C2", "sex": "M"},
        {"rin": 2, "sex": "F"},
        {"rin": 4, "relation": "F5"},
        {"rin": 5},
    )

    lines = generate_gedcom(rows, export_date=EXPORT_DATE).split("\n")
    records = [line for line in lines if line.startswith("0 @")]

    assert records == [
        "0 @I3@ INDI",
        "0 @I1@ INDI",
        "0 @I2@ INDI",
        "0 @I4@ INDI",
        "0 @I5@ INDI",
        "0 @F1_2@ FAM",
        "0 @F5@ FAM",
    ]


def test_person_with_several_spouse_families():
    rows = make_rows(
        {"rin": 1, "sex": "M"},
        {"rin": 2, "relation": "C1", "sex": "F"},
        {"rin": 3, "relation": "C1", "sex": "F"},
    )

    lines = generate_gedcom(rows, export_date=EXPORT_DATE).split("\n")

    assert block(lines, "0 @I1@ INDI") == [
        "0 @I1@ INDI",
        "1 SEX M",
        "1 FAMS @F1_2@",
        "1 FAMS @F1_3@",
    ]


def test_values_are_kept_on_one_line():
    rows = make_rows({"rin": 1, "fullName": "Ana\nSilva", "birthPlace": "Vila\n  Real"})

    lines = generate_gedcom(rows, export_date=EXPORT_DATE).split("\n")

    assert "1 NAME Ana /Silva/" in lines
    assert "2 PLAC Vila Real" in lines


def test_producer_override(silva_rows):
    gedcom = render_gedcom(resolve(silva_rows), producer="Arquivo Municipal", export_date=EXPORT_DATE)
    assert "1 SOUR Arquivo Municipal" in gedcom.split("\n")


def test_export_is_deterministic(silva_rows):
    first = generate_gedcom(silva_rows, export_date=EXPORT_DATE)
    second = generate_gedcom(list(silva_rows), export_date=EXPORT_DATE)
    assert first == second
    assert not first.endswith("\n")


def test_default_date_is_today(silva_rows):
    gedcom = generate_gedcom(silva_rows)
    assert f"1 DATE {format_gedcom_date(date.today())}" in gedcom.split("\n")
