"""
Unit tests for startup configuration validation.
"""
import pytest

from core.config_validator import ConfigValidator, ConfigurationError


@pytest.fixture
def validator():
    return ConfigValidator(check_connection=False)


def test_default_configuration_is_valid(validator):
    result = validator.validate_all()

    assert result["valid"] is True
    assert result["errors"] == []


def test_missing_key_for_hosted_service(validator, monkeypatch):
    monkeypatch.setattr("core.config.OPENAI_API_KEY", "")
    monkeypatch.setattr("core.config.LLM_BASE_URL", "https://api.openai.com/v1")

    result = validator.validate_all()

    assert result["valid"] is False
    assert any("OPENAI_API_KEY" in error for error in result["errors"])


def test_missing_key_allowed_for_local_server(validator, monkeypatch):
    monkeypatch.setattr("core.config.OPENAI_API_KEY", "")
    monkeypatch.setattr("core.config.LLM_BASE_URL", "http://localhost:8000/v1")

    assert validator.validate_all()["valid"] is True


def test_unknown_policy_and_language(validator, monkeypatch):
    monkeypatch.setattr("core.config.TRIAGE_POLICY", "three_stage")
    monkeypatch.setattr("core.config.DEFAULT_LANGUAGE", "tamil")

    errors = validator.validate_all()["errors"]

    assert any("TRIAGE_POLICY" in error for error in errors)
    assert any("DEFAULT_LANGUAGE" in error for error in errors)


def test_window_outside_usual_range_warns(validator, monkeypatch):
    monkeypatch.setattr("core.config.CONTEXT_WINDOW_SEC", 30)

    result = validator.validate_all()

    assert result["valid"] is True
    assert any("CONTEXT_WINDOW_SEC" in warning for warning in result["warnings"])


def test_invalid_numbers_are_errors(validator, monkeypatch):
    monkeypatch.setattr("core.config.CONTEXT_WINDOW_SEC", 0)
    monkeypatch.setattr("core.config.DEDUP_TOLERANCE_SEC", -1)
    monkeypatch.setattr("core.config.RECENT_TOKEN_COUNT", 0)

    errors = validator.validate_all()["errors"]

    assert len(errors) == 3


def test_raise_if_invalid(validator, monkeypatch):
    monkeypatch.setattr("core.config.SENTENCE_GAP_SEC", 0)

    with pytest.raises(ConfigurationError, match="SENTENCE_GAP_SEC"):
        validator.raise_if_invalid()


def test_session_limits(validator, monkeypatch):
    monkeypatch.setattr("core.config.MAX_SESSIONS", 0)
    monkeypatch.setattr("core.config.SESSION_IDLE_TIMEOUT_SEC", -5)

    errors = validator.validate_all()["errors"]

    assert any("MAX_SESSIONS" in error for error in errors)
    assert any("SESSION_IDLE_TIMEOUT_SEC" in error for error in errors)
