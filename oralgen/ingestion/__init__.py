"""Ingestion module for extracted survey rows."""

from oralgen.ingestion.ditto import is_ditto_marker, normalize_dittos
from oralgen.ingestion.loader import PayloadError, load_survey

__all__ = ["normalize_dittos", "is_ditto_marker", "load_survey", "PayloadError"]
