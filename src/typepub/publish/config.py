"""Publisher configuration.

Settings live in ~/.typepub/config.json; environment variables (optionally
from a .env file) override individual fields.
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".typepub" / "config.json"

ENV_OVERRIDES = {
    "TYPEPUB_ENDPOINT": "endpoint",
    "TYPEPUB_USERNAME": "username",
    "TYPEPUB_PASSWORD": "password",
    "TYPEPUB_BLOG_ID": "blog_id",
    "TYPEPUB_PROXY_URL": "proxy_url",
}


@dataclass
class PublisherConfig:
    """Settings for talking to a metaWeblog endpoint.

    Attributes:
        endpoint: XML-RPC URL, e.g. https://example.com/action/xmlrpc.
        username: Account name sent with every call.
        password: Account password sent with every call.
        blog_id: Blog identifier used for new posts.
        proxy_url: Optional forwarding proxy, may contain ``{target}``.
        use_current_time: Publish with the current time instead of the
            document's ``dateCreated``.
        publish_time_offset: Hours added to the publish time.
        timeout: HTTP timeout in seconds.
    """

    endpoint: str = ""
    username: str = ""
    password: str = ""
    blog_id: str = "0"
    proxy_url: str = ""
    use_current_time: bool = True
    publish_time_offset: float = 0.0
    timeout: float = 30.0

    def __post_init__(self) -> None:
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")
        if not self.blog_id:
            self.blog_id = "0"

    def is_complete(self) -> bool:
        """True when endpoint and credentials are all set."""
        return bool(self.endpoint and self.username and self.password)


def _as_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in ("true", "yes", "1", "on")
    return default


def _as_float(value: Any, default: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _parse_config(data: dict[str, Any]) -> PublisherConfig:
    """Parse config dictionary into PublisherConfig.

    Unknown keys are ignored and invalid values fall back to defaults.
    """
    defaults = PublisherConfig()

    timeout = _as_float(data.get("timeout"), defaults.timeout)
    if timeout <= 0:
        timeout = defaults.timeout

    return PublisherConfig(
        endpoint=str(data.get("endpoint", "")).strip(),
        username=str(data.get("username", "")).strip(),
        password=str(data.get("password", "")),
        blog_id=str(data.get("blog_id", "0")).strip() or "0",
        proxy_url=str(data.get("proxy_url", "")).strip(),
        use_current_time=_as_bool(data.get("use_current_time"), defaults.use_current_time),
        publish_time_offset=_as_float(
            data.get("publish_time_offset"), defaults.publish_time_offset
        ),
        timeout=timeout,
    )


def apply_env_overrides(config: PublisherConfig) -> PublisherConfig:
    """Override fields from TYPEPUB_* environment variables."""
    for env_name, attr in ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if value:
            setattr(config, attr, value)
    return config


def load_config(config_path: Path | None = None, use_env: bool = True) -> PublisherConfig:
    """Load PublisherConfig from a JSON file.

    Args:
        config_path: Path to config file. Uses DEFAULT_CONFIG_PATH if None.
        use_env: Apply TYPEPUB_* environment overrides.

    Returns:
        PublisherConfig instance with loaded values.
    """
    path = config_path or DEFAULT_CONFIG_PATH
    config = PublisherConfig()

    if not path.exists():
        logger.debug("No config file at %s, using defaults", path)
    else:
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.warning("Invalid JSON in %s: %s. Using defaults.", path, e)
        except OSError as e:
            logger.warning("Cannot read %s: %s. Using defaults.", path, e)
        else:
            if isinstance(data, dict):
                config = _parse_config(data)
            else:
                logger.warning("Config in %s is not an object. Using defaults.", path)

    if use_env:
        apply_env_overrides(config)
    return config


def save_config(config: PublisherConfig, config_path: Path | None = None) -> None:
    """Save PublisherConfig to a JSON file.

    Args:
        config: The config to save.
        config_path: Path to write to. Uses DEFAULT_CONFIG_PATH if None.
    """
    path = config_path or DEFAULT_CONFIG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)

    data = {
        "endpoint": config.endpoint,
        "username": config.username,
        "password": config.password,
        "blog_id": config.blog_id,
        "proxy_url": config.proxy_url,
        "use_current_time": config.use_current_time,
        "publish_time_offset": config.publish_time_offset,
        "timeout": config.timeout,
    }

    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
    except OSError as e:
        logger.error("Failed to save config to %s: %s", path, e)
        raise
