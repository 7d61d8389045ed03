"""Tests for loading extraction payloads."""

import json

import pytest

from oralgen.ingestion.loader import PayloadError, load_survey, load_survey_file


def test_load_payload_object(extraction_payload):
    survey = load_survey(extraction_payload, original_filename="pereira")

    assert len(survey.individuals) == 6
    assert survey.metadata.total_names == 6
    assert survey.metadata.interviewee_name == "Antônio Pereira"
    assert survey.metadata.interview_place == "Lisboa"
    assert survey.metadata.interview_id.startswith("MZ11-")
    assert survey.metadata.original_filename == "pereira"


def test_load_resolves_dittos(extraction_payload):
    rows = load_survey(extraction_payload).individuals

    assert rows[1].birth_place == "Lisboa"
    assert rows[2].birth_place == "Lisboa"
    assert rows[3].death_place == "Porto"
    assert [r.is_ditto for r in rows] == [False, True, True, True, False, False]


def test_load_bare_list_infers_record_numbers():
    survey = load_survey(
        [
            {"fullName": "Primeiro"},
            {"fullName": "Segundo", "rin": "x"},
            {"fullName": "Vigésimo sexto", "rin": 26},
        ]
    )

    rows = survey.individuals
    assert [r.record_number for r in rows] == [1, 2, 26]
    assert [r.page for r in rows] == [1, 1, 2]
    assert [r.row for r in rows] == [1, 2, 1]


def test_missing_record_number_keeps_explicit_page():
    row = load_survey([{"fullName": "Ana", "page": 3}]).individuals[0]
    assert row.record_number == 1
    assert row.page == 3


def test_interviewee_defaults():
    assert load_survey([{"fullName": "Ana Silva"}]).metadata.interviewee_name == "Ana Silva"
    assert load_survey([{"fullName": ""}]).metadata.interviewee_name == "Principal"
    assert load_survey([]).metadata.interviewee_name == "Principal"


def test_empty_payload_is_not_an_error():
    survey = load_survey({"individuals": []})
    assert survey.is_empty()
    assert survey.metadata.total_names == 0


@pytest.mark.parametrize(
    "payload",
    [
        {"rows": []},
        {"individuals": "not a list"},
        {"individuals": [], "metadata": "nope"},
        "individuals",
        42,
        None,
        [1, 2, 3],
        [{"rin": 1, "confidence": "high"}],
    ],
)
def test_unusable_payloads(payload):
    with pytest.raises(PayloadError):
        load_survey(payload)


def test_payload_error_is_value_error():
    assert issubclass(PayloadError, ValueError)


def test_load_survey_file(survey_file):
    survey = load_survey_file(survey_file)

    assert len(survey.individuals) == 6
    assert survey.metadata.original_filename == "pereira"
    assert survey.export_filename() == "MZ11_pereira.ged"


def test_load_survey_file_keeps_metadata_filename(tmp_path):
    path = tmp_path / "scan.json"
    path.write_text(
        json.dumps({"individuals": [], "metadata": {"originalFilename": "familia"}}),
        encoding="utf-8",
    )

    assert load_survey_file(path).metadata.original_filename == "familia"


def test_load_survey_file_rejects_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(PayloadError):
        load_survey_file(path)
