"""Environment-backed configuration for Company Site Finder.

Configuration is read once at process start via :func:`load_config` and is
immutable afterwards.
"""

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

# Provider names in default priority order
DEFAULT_PROVIDER_ORDER: tuple[str, ...] = ("google", "brave", "scrapingdog")
KNOWN_PROVIDERS: frozenset[str] = frozenset(DEFAULT_PROVIDER_ORDER)

DEFAULT_RESULT_COUNT = 10
DEFAULT_OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_SCORER_MODEL = "google/gemini-2.0-flash-001"
DEFAULT_CONFIDENCE_THRESHOLD = 0.7
DEFAULT_FETCH_TIMEOUT = 15.0
DEFAULT_LOG_LEVEL = "INFO"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class ConfigurationError(Exception):
    """Raised when required configuration is missing or malformed."""


@dataclass(frozen=True)
class AppConfig:
    """Immutable application settings."""

    openrouter_api_key: str
    providers: tuple[str, ...] = DEFAULT_PROVIDER_ORDER
    google_api_key: str = ""
    google_search_engine_id: str = ""
    google_search_result_count: int = DEFAULT_RESULT_COUNT
    brave_api_key: str = ""
    brave_search_result_count: int = DEFAULT_RESULT_COUNT
    scrapingdog_api_key: str = ""
    scrapingdog_search_result_count: int = DEFAULT_RESULT_COUNT
    openrouter_base_url: str = DEFAULT_OPENROUTER_BASE_URL
    scorer_model: str = DEFAULT_SCORER_MODEL
    confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT
    log_level: str = DEFAULT_LOG_LEVEL


def _get_env(environ: dict[str, str], name: str, default: str = "") -> str:
    # Strip to avoid hidden whitespace/newlines in keys copied from dashboards
    return (environ.get(name) or default).strip()


def _require(environ: dict[str, str], name: str) -> str:
    value = _get_env(environ, name)
    if not value:
        raise ConfigurationError(f"Missing required environment variable: {name}")
    return value


def _parse_int(environ: dict[str, str], name: str, default: int) -> int:
    raw = _get_env(environ, name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(
            f"Environment variable {name} must be an integer when provided."
        ) from None


def _parse_float(environ: dict[str, str], name: str, default: float) -> float:
    raw = _get_env(environ, name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(
            f"Environment variable {name} must be a number when provided."
        ) from None


def _parse_providers(environ: dict[str, str]) -> tuple[str, ...]:
    raw = _get_env(environ, "SEARCH_PROVIDERS")
    if not raw:
        return DEFAULT_PROVIDER_ORDER

    providers: list[str] = []
    for part in raw.split(","):
        name = part.strip().lower()
        if not name:
            continue
        if name not in KNOWN_PROVIDERS:
            raise ConfigurationError(
                f"Unknown search provider in SEARCH_PROVIDERS: {name!r} "
                f"(expected one of {', '.join(DEFAULT_PROVIDER_ORDER)})"
            )
        if name not in providers:
            providers.append(name)

    if not providers:
        raise ConfigurationError("SEARCH_PROVIDERS must name at least one provider.")
    return tuple(providers)


def load_config(environ: dict[str, str] | None = None) -> AppConfig:
    """Build an AppConfig from environment variables.

    Args:
        environ: Mapping to read from. Defaults to ``os.environ``.

    Returns:
        Frozen AppConfig.

    Raises:
        ConfigurationError: If a required credential is missing, a provider
            name is unknown, or a numeric value is malformed.
    """
    env = dict(os.environ if environ is None else environ)
    providers = _parse_providers(env)

    google_api_key = google_cse_id = brave_api_key = scrapingdog_api_key = ""
    if "google" in providers:
        google_api_key = _require(env, "GOOGLE_API_KEY")
        google_cse_id = _require(env, "GOOGLE_CSE_ID")
    if "brave" in providers:
        brave_api_key = _require(env, "BRAVE_API_KEY")
    if "scrapingdog" in providers:
        scrapingdog_api_key = _require(env, "SCRAPINGDOG_API_KEY")

    threshold = _parse_float(env, "CONFIDENCE_THRESHOLD", DEFAULT_CONFIDENCE_THRESHOLD)
    if not 0.0 <= threshold <= 1.0:
        raise ConfigurationError("CONFIDENCE_THRESHOLD must be between 0 and 1.")

    log_level = _get_env(env, "LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
    if log_level == "WARN":
        log_level = "WARNING"
    if log_level not in LOG_LEVELS:
        log_level = DEFAULT_LOG_LEVEL

    config = AppConfig(
        openrouter_api_key=_require(env, "OPENROUTER_API_KEY"),
        providers=providers,
        google_api_key=google_api_key,
        google_search_engine_id=google_cse_id,
        google_search_result_count=_parse_int(
            env, "GOOGLE_SEARCH_RESULT_COUNT", DEFAULT_RESULT_COUNT
        ),
        brave_api_key=brave_api_key,
        brave_search_result_count=_parse_int(
            env, "BRAVE_SEARCH_RESULT_COUNT", DEFAULT_RESULT_COUNT
        ),
        scrapingdog_api_key=scrapingdog_api_key,
        scrapingdog_search_result_count=_parse_int(
            env, "SCRAPINGDOG_SEARCH_RESULT_COUNT", DEFAULT_RESULT_COUNT
        ),
        openrouter_base_url=_get_env(
            env, "OPENROUTER_BASE_URL", DEFAULT_OPENROUTER_BASE_URL
        ),
        scorer_model=_get_env(env, "SCORER_MODEL", DEFAULT_SCORER_MODEL),
        confidence_threshold=threshold,
        fetch_timeout=_parse_float(env, "FETCH_TIMEOUT_SECONDS", DEFAULT_FETCH_TIMEOUT),
        log_level=log_level,
    )

    logger.debug(
        f"Configuration loaded: providers={list(config.providers)}, "
        f"model={config.scorer_model}, threshold={config.confidence_threshold}"
    )
    return config
