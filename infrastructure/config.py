"""
Configuration loaded from environment variables.

- ENTRY_STORE_URL: Web app endpoint of the remote entry store (required)
- ENTRY_STORE_TIMEOUT: Request timeout in seconds (default: 30)
- ENTRY_STORE_USER_AGENT: User-Agent header (default: EntryViewer/1.0)
- ENTRY_STORE_VERIFY_SSL: Verify TLS certificates (default: true)
"""

import logging
import os
from typing import Optional

from domain.exceptions import ConfigurationError

# Get logger for this module
logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
DEFAULT_USER_AGENT = "EntryViewer/1.0"


class Settings:
    """Runtime settings for the entry store client."""

    def __init__(
        self,
        store_url: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        verify_ssl: bool = True,
    ) -> None:
        self.store_url = store_url
        self.timeout = timeout
        self.user_agent = user_agent
        self.verify_ssl = verify_ssl

    def require_store_url(self) -> str:
        """Return the store URL or raise ConfigurationError if it is not set."""
        if not self.store_url:
            raise ConfigurationError(
                "ENTRY_STORE_URL is not set; point it at the entry store web app"
            )
        return self.store_url

    def __repr__(self) -> str:
        return (
            f"Settings(store_url={self.store_url}, timeout={self.timeout}, "
            f"verify_ssl={self.verify_ssl})"
        )


def _env_flag(name: str, default: str = "true") -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


def load_settings() -> Settings:
    """Build Settings from the environment."""
    raw_timeout = os.getenv("ENTRY_STORE_TIMEOUT", str(DEFAULT_TIMEOUT))
    try:
        timeout = float(raw_timeout)
    except ValueError:
        raise ConfigurationError(
            f"ENTRY_STORE_TIMEOUT must be a number of seconds, got {raw_timeout!r}"
        )
    if timeout <= 0:
        raise ConfigurationError("ENTRY_STORE_TIMEOUT must be positive")

    settings = Settings(
        store_url=os.getenv("ENTRY_STORE_URL") or None,
        timeout=timeout,
        user_agent=os.getenv("ENTRY_STORE_USER_AGENT", DEFAULT_USER_AGENT),
        verify_ssl=_env_flag("ENTRY_STORE_VERIFY_SSL"),
    )
    logger.debug("Loaded %r", settings)
    return settings
