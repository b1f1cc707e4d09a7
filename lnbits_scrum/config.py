"""Configuration loading for the LNbits Scrum client."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_SERVICE_URL = "https://demo.lnbits.com"
DEFAULT_CONFIG_PATH = Path("~/.openclaw/lnbits-scrum-config.json")

# Environment variable -> Configuration field
ENV_OVERRIDES = {
    "LNBITS_URL": "service_url",
    "LNBITS_ACCESS_TOKEN": "access_token",
    "LNBITS_USER_ID": "user_id",
    "LNBITS_WALLET_ID": "wallet_id",
}


@dataclass(frozen=True)
class Configuration:
    """Settings for talking to an LNbits instance's Scrum extension."""

    service_url: str = DEFAULT_SERVICE_URL
    access_token: str | None = None
    user_id: str | None = None
    wallet_id: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> Configuration:
        """Build a Configuration from the on-disk JSON record.

        ``usr`` is accepted as a legacy alias for ``user_id``.
        """
        return cls(
            service_url=data.get("lnbits_url") or DEFAULT_SERVICE_URL,
            access_token=data.get("access_token") or None,
            user_id=data.get("user_id") or data.get("usr") or None,
            wallet_id=data.get("wallet_id") or None,
        )

    def with_overrides(self, **overrides: str | None) -> Configuration:
        """Return a copy with every non-empty override applied."""
        changes = {k: v for k, v in overrides.items() if v}
        if not changes:
            return self
        return replace(self, **changes)


def load_config(path: str | Path | None = None) -> Configuration:
    """Read the configuration file.

    A missing file yields an empty configuration. Unparsable content is
    logged and also yields an empty configuration; authentication problems
    are only reported once a client is built from the result.
    """
    config_path = Path(path) if path else DEFAULT_CONFIG_PATH
    config_path = config_path.expanduser()

    if not config_path.is_file():
        logger.debug("No config file at %s; using empty configuration", config_path)
        return Configuration()

    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.error("Error loading config %s: %s", config_path, e)
        return Configuration()

    if not isinstance(data, dict):
        logger.error(
            "Error loading config %s: expected a JSON object, got %s",
            config_path,
            type(data).__name__,
        )
        return Configuration()

    logger.debug("Loaded config from %s", config_path)
    return Configuration.from_dict(data)


def apply_env_overrides(
    config: Configuration, environ: dict[str, str] | None = None
) -> Configuration:
    """Overlay LNBITS_* environment variables onto a configuration."""
    env = os.environ if environ is None else environ
    overrides = {name: env.get(var) for var, name in ENV_OVERRIDES.items()}
    return config.with_overrides(**overrides)
