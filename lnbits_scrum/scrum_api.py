"""LNbits Scrum extension REST client."""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from .auth import CallingContext, resolve_context
from .config import Configuration
from .errors import UpstreamError
from .models import STAGES, UNSPECIFIED, Explicit, RewardOption, TaskPage

logger = logging.getLogger(__name__)

API_PREFIX = "/scrum/api/v1"


class ScrumClient:
    """Client for the LNbits Scrum extension API.

    Every request carries the resolved CallingContext: a bearer header when
    an access token is configured and a ``usr`` query parameter when a user
    id is configured.
    """

    def __init__(
        self,
        service_url: str,
        context: CallingContext,
        wallet_id: str | None = None,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.service_url = service_url.rstrip("/")
        self.context = context
        self.wallet_id = wallet_id
        self._client = httpx.Client(
            base_url=f"{self.service_url}{API_PREFIX}",
            headers={
                "Content-Type": "application/json",
                **context.headers,
            },
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_config(
        cls,
        config: Configuration,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> ScrumClient:
        """Build a client, failing fast when no authentication is configured."""
        context = resolve_context(config)
        return cls(
            config.service_url,
            context,
            wallet_id=config.wallet_id,
            timeout=timeout,
            transport=transport,
        )

    def _request(
        self,
        operation: str,
        method: str,
        path: str,
        params: dict | None = None,
        payload: dict | None = None,
    ) -> Any:
        """Issue one request and return the parsed JSON body."""
        logger.debug("%s %s%s", method, API_PREFIX, path)
        try:
            resp = self._client.request(
                method,
                path,
                params=self.context.params(params),
                json=payload,
            )
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise UpstreamError(operation, _error_detail(e)) from e
        except httpx.HTTPError as e:
            raise UpstreamError(operation, str(e) or type(e).__name__) from e

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise UpstreamError(operation, f"invalid JSON response: {e}") from e

    # ------------------------------------------------------------------
    # Boards
    # ------------------------------------------------------------------

    def create_board(
        self,
        name: str,
        description: str,
        public_assigning: bool = False,
        public_tasks: bool = False,
        public_delete_tasks: bool = False,
    ) -> dict:
        """Create a Scrum board. The configured wallet, if any, is attached."""
        payload: dict = {
            "name": name,
            "description": description,
            "public_assigning": public_assigning,
            "public_tasks": public_tasks,
            "public_delete_tasks": public_delete_tasks,
        }
        if self.wallet_id:
            payload["wallet"] = self.wallet_id
        board = self._request("create scrum board", "POST", "/scrum", payload=payload)
        logger.info("Created scrum board '%s'", name)
        return board

    def get_board(self, scrum_id: str) -> dict:
        return self._request("get scrum board", "GET", f"/scrum/{scrum_id}")

    def list_boards(self, limit: int = 100, offset: int = 0) -> Any:
        return self._request(
            "list scrum boards",
            "GET",
            "/scrum/paginated",
            params={"limit": limit, "offset": offset},
        )

    def update_board(self, scrum_id: str, updates: dict) -> dict:
        return self._request(
            "update scrum board", "PUT", f"/scrum/{scrum_id}", payload=updates
        )

    def delete_board(self, scrum_id: str) -> Any:
        result = self._request("delete scrum board", "DELETE", f"/scrum/{scrum_id}")
        logger.info("Deleted scrum board %s", scrum_id)
        return result

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    def create_task(
        self,
        scrum_id: str,
        description: str,
        assignee: str = "",
        reward: RewardOption = UNSPECIFIED,
        notes: str = "",
    ) -> dict:
        """Create a task in the ``todo`` stage.

        ``reward`` is only sent when given as ``Explicit(...)``;
        ``Explicit(None)`` and ``Explicit(0)`` are sent as-is.
        """
        if not isinstance(reward, Explicit) and reward is not UNSPECIFIED:
            raise TypeError(
                f"reward must be UNSPECIFIED or Explicit(...), got {reward!r}"
            )
        if isinstance(reward, Explicit) and reward.value is not None and reward.value < 0:
            raise ValueError(f"reward must not be negative, got {reward.value}")
        payload: dict = {
            "task": description,
            "scrum_id": scrum_id,
            "assignee": assignee or "",
            "stage": "todo",
        }
        if isinstance(reward, Explicit):
            payload["reward"] = reward.value
        if notes:
            payload["notes"] = notes
        task = self._request("create task", "POST", "/tasks", payload=payload)
        logger.info("Created task '%s' on board %s", description, scrum_id)
        return task

    def update_task(self, task_id: str, updates: dict) -> dict:
        return self._request("update task", "PUT", f"/tasks/{task_id}", payload=updates)

    def move_task(self, task_id: str, stage: str) -> dict:
        """Move a task to another stage."""
        if stage not in STAGES:
            raise ValueError(f"Unknown stage {stage!r}; expected one of {STAGES}")
        return self.update_task(task_id, {"stage": stage})

    def assign_task(self, task_id: str, assignee: str) -> dict:
        return self.update_task(task_id, {"assignee": assignee})

    def get_task(self, task_id: str) -> dict:
        return self._request("get task", "GET", f"/tasks/{task_id}")

    def list_tasks(self, scrum_id: str, limit: int = 100, offset: int = 0) -> Any:
        return self._request(
            "get tasks for scrum",
            "GET",
            "/tasks/paginated",
            params={"scrum_id": scrum_id, "limit": limit, "offset": offset},
        )

    def list_task_page(
        self, scrum_id: str, limit: int = 100, offset: int = 0
    ) -> TaskPage:
        """List a board's tasks normalized into a TaskPage."""
        return TaskPage.from_response(self.list_tasks(scrum_id, limit, offset))

    def delete_task(self, task_id: str) -> Any:
        result = self._request("delete task", "DELETE", f"/tasks/{task_id}")
        logger.info("Deleted task %s", task_id)
        return result

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> ScrumClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def _error_detail(error: httpx.HTTPStatusError) -> str:
    """Pull the service's ``detail`` message out of an error response."""
    try:
        body = error.response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("detail"):
        detail = body["detail"]
        if isinstance(detail, str):
            return detail
        return json.dumps(detail)
    return str(error)
