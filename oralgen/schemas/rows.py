"""Pydantic schemas for MZ11 survey rows.

A row is one transcribed person from the form. Field aliases follow the
camelCase keys produced by the extraction service so its JSON validates
directly, while Python code uses the snake_case names.
"""

from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from oralgen.config import settings


def page_for(record_number: int, page_size: int | None = None) -> int:
    """Page of the form (1-indexed) that holds a record number."""
    size = page_size or settings.page_size
    return (record_number - 1) // size + 1


def row_for(record_number: int, page_size: int | None = None) -> int:
    """Row within its page (1-indexed) for a record number."""
    size = page_size or settings.page_size
    return (record_number - 1) % size + 1


class RowRecord(BaseModel):
    """One transcribed person from the survey form."""

    model_config = ConfigDict(populate_by_name=True)

    record_number: int | None = Field(
        default=None,
        validation_alias=AliasChoices("record_number", "rin", "recordNumber"),
        serialization_alias="rin",
        description="Record identification number (RIN), unique per document",
    )
    full_name: str = Field(
        default="",
        validation_alias=AliasChoices("full_name", "fullName"),
        serialization_alias="fullName",
    )
    relation_code: str = Field(
        default="",
        validation_alias=AliasChoices("relation_code", "relation", "relationCode"),
        serialization_alias="relation",
        description="Kinship code: C<n>, F<n>[,<m>] or P<k>",
    )
    sex: Literal["M", "F"] | None = None
    birth_date: str = Field(
        default="",
        validation_alias=AliasChoices("birth_date", "birthDate"),
        serialization_alias="birthDate",
    )
    birth_place: str = Field(
        default="",
        validation_alias=AliasChoices("birth_place", "birthPlace"),
        serialization_alias="birthPlace",
    )
    death_date: str = Field(
        default="",
        validation_alias=AliasChoices("death_date", "deathDate"),
        serialization_alias="deathDate",
    )
    death_place: str = Field(
        default="",
        validation_alias=AliasChoices("death_place", "deathPlace"),
        serialization_alias="deathPlace",
    )
    page: int | None = None
    row: int | None = None
    confidence: float = Field(default=0.95, ge=0.0, le=1.0)
    is_ditto: bool = Field(
        default=False,
        validation_alias=AliasChoices("is_ditto", "isDitto"),
        serialization_alias="isDitto",
        description="A place field was copied from the row above",
    )

    @field_validator("record_number", "page", "row", mode="before")
    @classmethod
    def _coerce_positive_int(cls, value: Any) -> int | None:
        # Transcriptions give numbers as floats or strings; junk becomes "absent"
        if value is None or isinstance(value, bool):
            return None
        try:
            number = int(float(str(value).strip()))
        except (ValueError, OverflowError):
            return None
        return number if number > 0 else None

    @field_validator(
        "full_name",
        "relation_code",
        "birth_date",
        "birth_place",
        "death_date",
        "death_place",
        mode="before",
    )
    @classmethod
    def _clean_text(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value).strip()

    @field_validator("sex", mode="before")
    @classmethod
    def _normalize_sex(cls, value: Any) -> str | None:
        if not isinstance(value, str):
            return None
        initial = value.strip()[:1].upper()
        return initial if initial in ("M", "F") else None

    @model_validator(mode="after")
    def _infer_position(self) -> "RowRecord":
        if self.record_number is not None:
            if self.page is None:
                self.page = page_for(self.record_number)
            if self.row is None:
                self.row = row_for(self.record_number)
        return self

    @property
    def rin(self) -> int | None:
        """Short alias for the record number."""
        return self.record_number

    def to_dict(self) -> dict[str, Any]:
        """Convert to the camelCase dictionary used on the wire."""
        return self.model_dump(by_alias=True)


class InterviewMetadata(BaseModel):
    """Interview details printed on the form header."""

    model_config = ConfigDict(populate_by_name=True)

    interview_id: str = Field(
        default="",
        validation_alias=AliasChoices("interview_id", "interviewId"),
        serialization_alias="interviewId",
    )
    interview_date: str = Field(
        default="",
        validation_alias=AliasChoices("interview_date", "interviewDate"),
        serialization_alias="interviewDate",
    )
    interview_place: str = Field(
        default="",
        validation_alias=AliasChoices("interview_place", "interviewPlace"),
        serialization_alias="interviewPlace",
    )
    interviewee_name: str = Field(
        default="",
        validation_alias=AliasChoices("interviewee_name", "intervieweeName"),
        serialization_alias="intervieweeName",
    )
    interviewee_rin: str = Field(
        default="1",
        validation_alias=AliasChoices("interviewee_rin", "intervieweeRin"),
        serialization_alias="intervieweeRin",
    )
    total_names: int = Field(
        default=0,
        ge=0,
        validation_alias=AliasChoices("total_names", "totalNames"),
        serialization_alias="totalNames",
    )
    original_filename: str | None = Field(
        default=None,
        validation_alias=AliasChoices("original_filename", "originalFilename"),
        serialization_alias="originalFilename",
    )


class SurveyData(BaseModel):
    """A reviewed survey: interview metadata plus its transcribed rows."""

    metadata: InterviewMetadata = Field(default_factory=InterviewMetadata)
    individuals: list[RowRecord] = Field(default_factory=list)

    def is_empty(self) -> bool:
        """Check if the survey has no rows."""
        return not self.individuals

    def export_filename(self) -> str:
        """File name used when the survey is exported as GEDCOM."""
        return f"MZ11_{self.metadata.original_filename or 'export'}.ged"

    def to_dict(self) -> dict[str, Any]:
        """Convert to the camelCase dictionary used on the wire."""
        return self.model_dump(by_alias=True)
