"""Tests for configuration settings."""

from unittest.mock import patch

import pytest
from pydantic import ValidationError

from certprep.config import Settings


class TestGenerationDefaults:
    """Tests for question generation defaults."""

    def test_defaults(self):
        settings = Settings(_env_file=None)
        assert settings.max_batch_size == 12
        assert settings.max_attempts == 5
        assert settings.acceptance_threshold == pytest.approx(0.8)
        assert settings.batch_delay_seconds == pytest.approx(2.0)
        assert settings.attempt_delay_seconds == pytest.approx(3.0)
        assert settings.backoff_strategy == "constant"

    def test_model_defaults(self):
        settings = Settings(_env_file=None)
        assert settings.gemini_model_name == "gemini-2.5-flash"
        assert settings.deepseek_model_name == "deepseek/deepseek-r1"
        assert settings.moonshot_model_name == "moonshot-v1-8k"

    def test_values_from_env(self):
        with patch.dict(
            "os.environ",
            {
                "MAX_BATCH_SIZE": "6",
                "ACCEPTANCE_THRESHOLD": "0.9",
                "MOONSHOT_API_KEY": "sk-env",
            },
            clear=False,
        ):
            settings = Settings(_env_file=None)
            assert settings.max_batch_size == 6
            assert settings.acceptance_threshold == pytest.approx(0.9)
            assert settings.moonshot_api_key == "sk-env"

    def test_invalid_threshold_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, acceptance_threshold=1.5)

    def test_invalid_backoff_strategy_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, backoff_strategy="linear")


class TestProviderPriority:
    """Tests for provider priority parsing."""

    def test_default_priority(self):
        assert Settings(_env_file=None).get_provider_priority() == [
            "gemini",
            "deepseek",
            "moonshot",
        ]

    def test_blanks_and_case_normalized(self):
        settings = Settings(_env_file=None, provider_priority=" Moonshot, ,GEMINI ")
        assert settings.get_provider_priority() == ["moonshot", "gemini"]
