"""Pydantic schemas for transcribed survey rows."""

from oralgen.schemas.rows import InterviewMetadata, RowRecord, SurveyData

__all__ = [
    "RowRecord",
    "InterviewMetadata",
    "SurveyData",
]
