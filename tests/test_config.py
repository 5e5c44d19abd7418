"""Tests for environment-backed configuration."""

import pytest

from site_finder.config import (
    DEFAULT_CONFIDENCE_THRESHOLD,
    DEFAULT_PROVIDER_ORDER,
    DEFAULT_SCORER_MODEL,
    ConfigurationError,
    load_config,
)


@pytest.fixture
def full_env():
    """Environment with credentials for every provider.

    Returns:
        dict: Environment mapping.
    """
    return {
        "GOOGLE_API_KEY": "test-google-key",
        "GOOGLE_CSE_ID": "test-cse-id",
        "BRAVE_API_KEY": "test-brave-key",
        "SCRAPINGDOG_API_KEY": "test-scrapingdog-key",
        "OPENROUTER_API_KEY": "test-openrouter-key",
    }


class TestLoadConfig:
    """Test load_config."""

    def test_defaults(self, full_env):
        """Test defaults are applied when optional variables are absent."""
        config = load_config(full_env)

        assert config.providers == DEFAULT_PROVIDER_ORDER
        assert config.google_search_result_count == 10
        assert config.brave_search_result_count == 10
        assert config.scrapingdog_search_result_count == 10
        assert config.scorer_model == DEFAULT_SCORER_MODEL
        assert config.confidence_threshold == DEFAULT_CONFIDENCE_THRESHOLD
        assert config.log_level == "INFO"

    def test_overrides(self, full_env):
        """Test optional variables override defaults."""
        full_env.update({
            "GOOGLE_SEARCH_RESULT_COUNT": "5",
            "SCORER_MODEL": "openai/gpt-4o-mini",
            "CONFIDENCE_THRESHOLD": "0.85",
            "FETCH_TIMEOUT_SECONDS": "4.5",
            "LOG_LEVEL": "debug",
        })

        config = load_config(full_env)

        assert config.google_search_result_count == 5
        assert config.scorer_model == "openai/gpt-4o-mini"
        assert config.confidence_threshold == 0.85
        assert config.fetch_timeout == 4.5
        assert config.log_level == "DEBUG"

    def test_keys_are_stripped(self, full_env):
        """Test whitespace around credentials is removed."""
        full_env["OPENROUTER_API_KEY"] = "  key-with-newline\n"
        assert load_config(full_env).openrouter_api_key == "key-with-newline"

    @pytest.mark.parametrize("missing", [
        "GOOGLE_API_KEY",
        "GOOGLE_CSE_ID",
        "BRAVE_API_KEY",
        "SCRAPINGDOG_API_KEY",
        "OPENROUTER_API_KEY",
    ])
    def test_missing_credential_is_fatal(self, full_env, missing):
        """Test each required credential is enforced."""
        del full_env[missing]
        with pytest.raises(ConfigurationError, match=missing):
            load_config(full_env)

    def test_disabled_provider_credentials_not_required(self):
        """Test only enabled providers need credentials."""
        config = load_config({
            "SEARCH_PROVIDERS": "Brave, google",
            "BRAVE_API_KEY": "b",
            "GOOGLE_API_KEY": "g",
            "GOOGLE_CSE_ID": "cx",
            "OPENROUTER_API_KEY": "o",
        })
        assert config.providers == ("brave", "google")
        assert config.scrapingdog_api_key == ""

    def test_duplicate_providers_collapsed(self, full_env):
        """Test a provider listed twice is used once."""
        full_env["SEARCH_PROVIDERS"] = "google,google,brave"
        assert load_config(full_env).providers == ("google", "brave")

    def test_unknown_provider(self, full_env):
        """Test unknown provider names are rejected."""
        full_env["SEARCH_PROVIDERS"] = "google,bing"
        with pytest.raises(ConfigurationError, match="bing"):
            load_config(full_env)

    def test_empty_provider_list(self, full_env):
        """Test a list with no names is rejected."""
        full_env["SEARCH_PROVIDERS"] = " , ,"
        with pytest.raises(ConfigurationError, match="at least one"):
            load_config(full_env)

    def test_malformed_integer(self, full_env):
        """Test non-integer result counts are rejected."""
        full_env["BRAVE_SEARCH_RESULT_COUNT"] = "ten"
        with pytest.raises(ConfigurationError, match="BRAVE_SEARCH_RESULT_COUNT"):
            load_config(full_env)

    @pytest.mark.parametrize("value", ["high", "1.5", "-0.1"])
    def test_invalid_threshold(self, full_env, value):
        """Test thresholds must be numbers in [0, 1]."""
        full_env["CONFIDENCE_THRESHOLD"] = value
        with pytest.raises(ConfigurationError, match="CONFIDENCE_THRESHOLD"):
            load_config(full_env)

    def test_unknown_log_level_defaults_to_info(self, full_env):
        """Test an unrecognized log level falls back to INFO."""
        full_env["LOG_LEVEL"] = "verbose"
        assert load_config(full_env).log_level == "INFO"

    def test_warn_alias(self, full_env):
        """Test WARN is accepted as WARNING."""
        full_env["LOG_LEVEL"] = "warn"
        assert load_config(full_env).log_level == "WARNING"

    def test_config_is_frozen(self, full_env):
        """Test configuration cannot be modified after loading."""
        config = load_config(full_env)
        with pytest.raises(AttributeError):
            config.scorer_model = "other"
