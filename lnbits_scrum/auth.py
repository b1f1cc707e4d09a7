"""Resolve configured credentials into per-request headers and parameters."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from .config import Configuration
from .errors import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CallingContext:
    """Authentication attached to every outgoing request."""

    bearer_token: str | None = None
    query_params: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @property
    def headers(self) -> dict[str, str]:
        if self.bearer_token:
            return {"Authorization": f"Bearer {self.bearer_token}"}
        return {}

    def params(self, extra: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Merge per-call query parameters with the ``usr`` parameter."""
        merged: dict[str, Any] = dict(extra or {})
        merged.update(self.query_params)
        return merged


def resolve_context(config: Configuration) -> CallingContext:
    """Derive the CallingContext for a configuration.

    A bearer token is preferred; a user id is always added as the ``usr``
    query parameter as well when present. Raises ConfigurationError when
    neither is configured.
    """
    if not config.access_token and not config.user_id:
        raise ConfigurationError(
            "LNbits Scrum requires authentication. Provide access_token (Bearer) "
            "or user_id/usr (query param) in the config file, environment or CLI flags."
        )

    params: dict[str, str] = {}
    if config.user_id:
        params["usr"] = config.user_id

    logger.debug(
        "Resolved auth: bearer=%s usr=%s",
        bool(config.access_token),
        bool(config.user_id),
    )
    return CallingContext(
        bearer_token=config.access_token or None,
        query_params=MappingProxyType(params),
    )
