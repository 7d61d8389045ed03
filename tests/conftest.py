"""Shared fixtures for OralGen tests."""

import json
from datetime import date
from pathlib import Path

import pytest

from oralgen.schemas.rows import RowRecord

EXPORT_DATE = date(2025, 3, 7)


def make_rows(*rows: dict) -> list[RowRecord]:
    """Build validated rows from extraction-style dictionaries."""
    return [RowRecord.model_validate(row) for row in rows]


@pytest.fixture
def silva_rows() -> list[RowRecord]:
    """A couple and their daughter."""
    return make_rows(
        {"rin": 1, "fullName": "João Silva", "relation": "C2", "sex": "M"},
        {"rin": 2, "fullName": "Maria Souza", "relation": "", "sex": "F"},
        {"rin": 3, "fullName": "Ana Silva", "relation": "F1,2"},
    )


@pytest.fixture
def extraction_payload() -> dict:
    """Extraction output for a small three-generation survey."""
    return {
        "individuals": [
            {
                "rin": 1,
                "fullName": "Antônio Pereira",
                "relation": "C2",
                "sex": "M",
                "birthDate": "12 MAR 1950",
                "birthPlace": "Lisboa",
            },
            {
                "rin": 2,
                "fullName": "Helena Costa",
                "relation": "C1",
                "sex": "F",
                "birthDate": "1952",
                "birthPlace": '"',
            },
            {
                "rin": 3,
                "fullName": "Rui Pereira",
                "relation": "F1,F2",
                "sex": "M",
                "birthPlace": "ditto",
                "deathPlace": "Porto",
            },
            {
                "rin": 4,
                "fullName": "Clara Pereira",
                "relation": "F1",
                "sex": "F",
                "deathPlace": '"',
            },
            {"rin": 5, "fullName": "Jorge Nunes", "relation": "P6", "sex": "M"},
            {"rin": 6, "fullName": "Beatriz Nunes", "relation": "", "sex": "F"},
        ],
        "metadata": {"intervieweeName": "Antônio Pereira", "interviewPlace": "Lisboa"},
    }


@pytest.fixture
def survey_file(tmp_path: Path, extraction_payload: dict) -> Path:
    """Extraction payload written to a JSON file."""
    path = tmp_path / "pereira.json"
    path.write_text(json.dumps(extraction_payload, ensure_ascii=False), encoding="utf-8")
    return path
