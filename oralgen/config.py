"""Configuration management for OralGen.

Loads settings from environment variables and provides validated configuration.
"""

from typing import Literal

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings

# Load .env file if it exists
load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # GEDCOM header
    producer_name: str = "OralGen"
    gedcom_version: str = "5.5.1"

    # MZ11 form layout
    page_size: int = Field(25, gt=0)
    pages_per_form: int = Field(3, gt=0)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"

    class Config:
        """Pydantic configuration."""

        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "ORALGEN_"
        case_sensitive = False

    @property
    def rows_per_form(self) -> int:
        """Total number of rows on one MZ11 form."""
        return self.page_size * self.pages_per_form


# Global settings instance
settings = Settings()
