"""Tests for configuration loading."""

import pytest
from pydantic import ValidationError

from oralgen.config import Settings
from src.backend.config import get_config


def test_defaults():
    config = Settings()

    assert config.producer_name == "OralGen"
    assert config.page_size == 25
    assert config.rows_per_form == 75


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("ORALGEN_PRODUCER_NAME", "Arquivo Municipal")
    monkeypatch.setenv("ORALGEN_PAGE_SIZE", "20")

    config = Settings()

    assert config.producer_name == "Arquivo Municipal"
    assert config.rows_per_form == 60


@pytest.mark.parametrize("variable", ["ORALGEN_PAGE_SIZE", "ORALGEN_PAGES_PER_FORM"])
def test_form_layout_must_be_positive(monkeypatch, variable):
    monkeypatch.setenv(variable, "0")

    with pytest.raises(ValidationError):
        Settings()


@pytest.mark.parametrize("env", ["development", "testing", "production"])
def test_backend_config_has_no_session_secret(env):
    config = get_config(env)

    assert not hasattr(config, "SECRET_KEY")
    assert config.MAX_CONTENT_LENGTH == 5 * 1024 * 1024
