"""Loading of extraction output into validated survey data.

The extraction service returns JSON with an ``individuals`` list (or, from
older exports, a bare list of rows). This module validates the rows, fills in
record numbers and page positions the transcription left out, resolves
ditto marks, and builds the interview metadata.
"""

import json
import logging
import time
from datetime import date
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from oralgen.config import settings
from oralgen.ingestion.ditto import normalize_dittos
from oralgen.schemas.rows import InterviewMetadata, RowRecord, SurveyData, page_for, row_for

logger = logging.getLogger(__name__)


class PayloadError(ValueError):
    """The extraction payload does not have a usable shape."""


def _validate_rows(raw_rows: list[Any]) -> list[RowRecord]:
    rows = []
    for position, raw in enumerate(raw_rows):
        if isinstance(raw, RowRecord):
            row = raw
        elif isinstance(raw, dict):
            try:
                row = RowRecord.model_validate(raw)
            except ValidationError as e:
                raise PayloadError(f"Invalid row at position {position}: {e}") from e
        else:
            raise PayloadError(
                f"Row at position {position} must be an object, got {type(raw).__name__}"
            )

        if row.record_number is None:
            # Rows without a usable RIN take their position on the form
            rin = position + 1
            logger.debug("Row at position %d has no RIN, using %d", position, rin)
            row = row.model_copy(
                update={
                    "record_number": rin,
                    "page": row.page or page_for(rin),
                    "row": row.row or row_for(rin),
                }
            )
        if row.record_number > settings.rows_per_form:
            logger.warning(
                "RIN %d is beyond the %d rows of an MZ11 form",
                row.record_number,
                settings.rows_per_form,
            )
        rows.append(row)
    return rows


def _build_metadata(
    raw: dict[str, Any] | None, rows: list[RowRecord], original_filename: str | None
) -> InterviewMetadata:
    try:
        metadata = InterviewMetadata.model_validate(raw or {})
    except ValidationError as e:
        raise PayloadError(f"Invalid interview metadata: {e}") from e

    updates: dict[str, Any] = {"total_names": len(rows)}
    if not metadata.interview_id:
        updates["interview_id"] = f"MZ11-{str(int(time.time() * 1000))[-4:]}"
    if not metadata.interview_date:
        updates["interview_date"] = date.today().isoformat()
    if not metadata.interviewee_name:
        updates["interviewee_name"] = (rows[0].full_name if rows else "") or "Principal"
    if original_filename and not metadata.original_filename:
        updates["original_filename"] = original_filename
    return metadata.model_copy(update=updates)


def load_survey(payload: Any, original_filename: str | None = None) -> SurveyData:
    """Build survey data from an extraction payload.

    Args:
        payload: A list of row objects, or an object with an ``individuals``
            list and optional ``metadata``
        original_filename: Name of the scanned file the rows came from

    Returns:
        SurveyData with normalized rows in document order

    Raises:
        PayloadError: If the payload or one of its rows has an unusable shape
    """
    if isinstance(payload, SurveyData):
        raw_rows: Any = list(payload.individuals)
        raw_metadata = payload.metadata.model_dump()
    elif isinstance(payload, list):
        raw_rows, raw_metadata = payload, None
    elif isinstance(payload, dict):
        if "individuals" not in payload:
            raise PayloadError("Extraction payload has no 'individuals' list")
        raw_rows, raw_metadata = payload["individuals"], payload.get("metadata")
    else:
        raise PayloadError(
            f"Extraction payload must be a list or an object, got {type(payload).__name__}"
        )

    if not isinstance(raw_rows, list):
        raise PayloadError("'individuals' must be a list")
    if raw_metadata is not None and not isinstance(raw_metadata, dict):
        raise PayloadError("'metadata' must be an object")

    rows = normalize_dittos(_validate_rows(raw_rows))
    metadata = _build_metadata(raw_metadata, rows, original_filename)
    logger.info("Loaded %d row(s) for interview %s", len(rows), metadata.interview_id)

    return SurveyData(metadata=metadata, individuals=rows)


def load_survey_file(path: Path) -> SurveyData:
    """Load survey data from an extraction JSON file.

    Args:
        path: Path to the JSON file

    Returns:
        SurveyData with normalized rows

    Raises:
        PayloadError: If the file is not valid JSON or has an unusable shape
    """
    try:
        with open(path, encoding="utf-8") as f:
            payload = json.load(f)
    except json.JSONDecodeError as e:
        raise PayloadError(f"{path} is not valid JSON: {e}") from e

    return load_survey(payload, original_filename=Path(path).stem)
