"""Configuration for the notion-edit CLI.

Reads Notion connection settings from CLI args, environment variables,
.env files, and YAML config file fallbacks.

Precedence (highest to lowest):
    CLI args > Environment variables > .env file > YAML config > Built-in defaults

Environment variables:
    NOTION_API_KEY: Notion integration token (required)
    NOTION_API_URL: API base URL (optional, default: https://api.notion.com/v1)
    NOTION_VERSION: Notion-Version header (optional, default: 2022-06-28)
    NOTION_MAX_PARALLEL_REQUESTS: Max concurrent API requests (optional, default: 5)
    NOTION_REQUEST_TIMEOUT: Per-request read timeout in seconds (optional, default: 60)
    NOTION_DEBUG: Enable debug logging (optional, default: false)
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import yaml

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.notion.com/v1"
DEFAULT_NOTION_VERSION = "2022-06-28"


@dataclass
class Config:
    api_key: str
    api_url: str = DEFAULT_API_URL
    notion_version: str = DEFAULT_NOTION_VERSION
    max_parallel_requests: int = 5
    request_timeout: float = 60.0
    debug: bool = False


def validate_config(config: Config) -> None:
    """Validate configuration values and raise ValueError if invalid.

    Args:
        config: Config instance to validate.

    Raises:
        ValueError: If URL format is invalid or the API key is empty.
    """
    config.api_url = config.api_url.strip()

    if not config.api_url.startswith(("http://", "https://")):
        raise ValueError(
            f"Invalid Notion API URL '{config.api_url}': must start with http:// or https://"
        )

    parsed = urlparse(config.api_url)
    if not parsed.hostname:
        raise ValueError(
            f"Invalid Notion API URL '{config.api_url}': URL must include a hostname"
        )

    config.api_url = config.api_url.removesuffix("/")

    if not config.api_key.strip():
        raise ValueError(
            "Notion API key cannot be empty. Set NOTION_API_KEY environment variable."
        )

    if not config.notion_version.strip():
        raise ValueError("Notion version cannot be empty.")

    if config.request_timeout <= 0:
        raise ValueError(
            f"Invalid request timeout {config.request_timeout}: must be positive"
        )


def load_yaml_config(path: str | Path) -> dict[str, Any]:
    """Load the ``notion`` section of a YAML config file.

    Returns:
        The section as a dict, empty when the file has no such section.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not a YAML mapping.
    """
    config_path = Path(path)
    with open(config_path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(
            f"Config file {config_path} must contain a YAML mapping"
        )

    section = data.get("notion") or {}
    if not isinstance(section, dict):
        raise ValueError(
            f"'notion' section in {config_path} must be a mapping"
        )
    logger.debug("Loaded config fallbacks from %s", config_path)
    return section


def _parse_ranged_int(
    name: str, raw: str, low: int, high: int
) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(
            f"Invalid {name} '{raw}': must be a number between {low} and {high}"
        ) from None
    if not (low <= value <= high):
        raise ValueError(
            f"Invalid {name} '{raw}': must be a number between {low} and {high}"
        )
    return value


def load_config(
    api_key: str | None = None,
    debug: bool = False,
    yaml_fallbacks: dict | None = None,
) -> Config:
    """Load configuration with unified precedence.

    Resolution order for each field (highest to lowest):
        CLI arg > env var / .env > yaml_fallbacks > built-in default

    The caller is responsible for calling ``load_dotenv()`` before this
    function so that .env values are available via ``os.getenv()``.

    Args:
        api_key: Override API key (takes precedence over env var and YAML).
        debug: Enable debug logging (CLI flag).
        yaml_fallbacks: Dict of values from the YAML config ``notion`` section.

    Returns:
        Validated Config instance.

    Raises:
        ValueError: If the API key is missing or a value is out of range.
    """
    fb = yaml_fallbacks or {}

    final_api_key = api_key or os.getenv("NOTION_API_KEY") or fb.get("api_key")
    if not final_api_key:
        raise ValueError(
            "Notion API key not found. Set NOTION_API_KEY environment variable, "
            "pass --api-key CLI argument, or add 'api_key' to the config file."
        )

    api_url = os.getenv("NOTION_API_URL") or fb.get("api_url") or DEFAULT_API_URL
    notion_version = (
        os.getenv("NOTION_VERSION")
        or fb.get("notion_version")
        or DEFAULT_NOTION_VERSION
    )

    if debug:
        final_debug = True
    else:
        env_debug = os.getenv("NOTION_DEBUG")
        if env_debug is not None:
            final_debug = env_debug.lower() in ("true", "1", "yes", "on")
        else:
            final_debug = bool(fb.get("debug", False))

    max_parallel_raw = os.getenv("NOTION_MAX_PARALLEL_REQUESTS")
    if max_parallel_raw is not None:
        final_max_parallel = _parse_ranged_int(
            "NOTION_MAX_PARALLEL_REQUESTS", max_parallel_raw, 1, 100
        )
    elif "max_parallel_requests" in fb:
        final_max_parallel = _parse_ranged_int(
            "max_parallel_requests", str(fb["max_parallel_requests"]), 1, 100
        )
    else:
        final_max_parallel = 5

    timeout_raw = os.getenv("NOTION_REQUEST_TIMEOUT")
    if timeout_raw is None and "request_timeout" in fb:
        timeout_raw = str(fb["request_timeout"])
    if timeout_raw is not None:
        try:
            final_timeout = float(timeout_raw)
        except ValueError:
            raise ValueError(
                f"Invalid NOTION_REQUEST_TIMEOUT '{timeout_raw}': must be a number of seconds"
            ) from None
    else:
        final_timeout = 60.0

    config = Config(
        api_key=final_api_key.strip(),
        api_url=api_url,
        notion_version=notion_version,
        max_parallel_requests=final_max_parallel,
        request_timeout=final_timeout,
        debug=final_debug,
    )

    validate_config(config)

    return config
