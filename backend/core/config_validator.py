"""
Configuration validation for Kaksha Live backend.
Validates credentials, model service, prompt files and settings on startup.
"""
import requests
from typing import List, Dict, Any


class ConfigurationError(Exception):
    """Raised when configuration is invalid."""
    pass


class ConfigValidator:
    """Validates system configuration before serving requests."""

    def __init__(self, check_connection: bool = True):
        self.check_connection = check_connection
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def validate_all(self) -> Dict[str, Any]:
        """
        Run all validation checks.

        Returns:
            {
                "valid": bool,
                "errors": List[str],
                "warnings": List[str]
            }
        """
        self.errors = []
        self.warnings = []

        # Run all checks
        self._validate_credentials()
        if self.check_connection:
            self._validate_llm_connection()
        self._validate_prompt_files()
        self._validate_directories()
        self._validate_config_values()

        return {
            "valid": len(self.errors) == 0,
            "errors": self.errors,
            "warnings": self.warnings
        }

    def raise_if_invalid(self) -> None:
        result = self.validate_all()
        if not result["valid"]:
            raise ConfigurationError("; ".join(result["errors"]))

    def _validate_credentials(self):
        """Check that an API key is configured for the hosted model service."""
        from core.config import OPENAI_API_KEY, LLM_BASE_URL

        if not OPENAI_API_KEY and "api.openai.com" in LLM_BASE_URL:
            self.errors.append(
                "OPENAI_API_KEY is not set. Add it to .env or point LLM_BASE_URL "
                "at a local OpenAI-compatible server."
            )

    def _validate_llm_connection(self):
        """Check that the model service is reachable."""
        from core.config import LLM_BASE_URL, OPENAI_API_KEY

        headers = {"Authorization": f"Bearer {OPENAI_API_KEY}"} if OPENAI_API_KEY else {}
        try:
            response = requests.get(f"{LLM_BASE_URL.rstrip('/')}/models", headers=headers, timeout=5)
            response.raise_for_status()
        except requests.exceptions.ConnectionError:
            self.warnings.append(
                f"Cannot connect to model service at {LLM_BASE_URL}. "
                "Questions will fail until it is reachable."
            )
        except requests.exceptions.Timeout:
            self.warnings.append(
                f"Model service connection timeout at {LLM_BASE_URL}. "
                "Check network or service performance."
            )
        except requests.exceptions.RequestException as e:
            self.warnings.append(f"Model service check failed: {e}")

    def _validate_prompt_files(self):
        """Check prompt overrides; built-in templates are used when files are missing."""
        from core.config import BACKEND_DIR
        from core.prompt_manager import REQUIRED_PROMPTS

        prompts_dir = BACKEND_DIR / "prompts"
        if not prompts_dir.exists():
            return

        for prompt_name in REQUIRED_PROMPTS:
            path = prompts_dir / f"{prompt_name}.txt"
            if path.exists() and path.stat().st_size == 0:
                self.warnings.append(f"Prompt file is empty, using built-in template: {path.name}")

    def _validate_directories(self):
        """Check that required directories exist."""
        from core.config import DATA_DIR

        if not DATA_DIR.exists():
            self.warnings.append(
                f"Data directory not found at {DATA_DIR}. Will be created automatically."
            )

    def _validate_config_values(self):
        """Validate configuration value ranges and types."""
        from core.config import (
            TRIAGE_POLICY,
            DEFAULT_LANGUAGE,
            SUPPORTED_LANGUAGES,
            CONTEXT_WINDOW_SEC,
            DEDUP_TOLERANCE_SEC,
            SENTENCE_GAP_SEC,
            RECENT_TOKEN_COUNT,
            SESSION_IDLE_TIMEOUT_SEC,
            MAX_SESSIONS,
            LLM_TIMEOUT_SEC,
            CLASSIFIER_TEMPERATURE,
            ANSWER_TEMPERATURE,
        )

        if TRIAGE_POLICY not in ("two_stage", "single_stage"):
            self.errors.append(
                f"TRIAGE_POLICY ({TRIAGE_POLICY}) must be 'two_stage' or 'single_stage'"
            )

        if DEFAULT_LANGUAGE not in SUPPORTED_LANGUAGES:
            self.errors.append(
                f"DEFAULT_LANGUAGE ({DEFAULT_LANGUAGE}) must be one of {', '.join(SUPPORTED_LANGUAGES)}"
            )

        if CONTEXT_WINDOW_SEC <= 0:
            self.errors.append(f"CONTEXT_WINDOW_SEC ({CONTEXT_WINDOW_SEC}) must be > 0")
        elif not (120 <= CONTEXT_WINDOW_SEC <= 300):
            self.warnings.append(
                f"CONTEXT_WINDOW_SEC ({CONTEXT_WINDOW_SEC}) outside usual range [120, 300]"
            )

        if DEDUP_TOLERANCE_SEC < 0:
            self.errors.append(f"DEDUP_TOLERANCE_SEC ({DEDUP_TOLERANCE_SEC}) must be >= 0")

        if SENTENCE_GAP_SEC <= 0:
            self.errors.append(f"SENTENCE_GAP_SEC ({SENTENCE_GAP_SEC}) must be > 0")

        if RECENT_TOKEN_COUNT < 1:
            self.errors.append(f"RECENT_TOKEN_COUNT ({RECENT_TOKEN_COUNT}) must be >= 1")

        if SESSION_IDLE_TIMEOUT_SEC < 0:
            self.errors.append(f"SESSION_IDLE_TIMEOUT_SEC ({SESSION_IDLE_TIMEOUT_SEC}) must be >= 0")

        if MAX_SESSIONS < 1:
            self.errors.append(f"MAX_SESSIONS ({MAX_SESSIONS}) must be >= 1")

        if LLM_TIMEOUT_SEC <= 0:
            self.errors.append(f"LLM_TIMEOUT_SEC ({LLM_TIMEOUT_SEC}) must be > 0")

        # Temperature validation
        for name, value in (("CLASSIFIER_TEMPERATURE", CLASSIFIER_TEMPERATURE), ("ANSWER_TEMPERATURE", ANSWER_TEMPERATURE)):
            if not (0.0 <= value <= 2.0):
                self.warnings.append(f"{name} ({value}) outside normal range [0.0, 2.0]")


# Global validator instance
config_validator = ConfigValidator()
