"""Data models for Scrum boards and tasks returned by the LNbits API."""

from __future__ import annotations

import logging
import re
from dataclasses import asdict, dataclass, field
from typing import Any, Union

logger = logging.getLogger(__name__)

STAGES = ("todo", "doing", "done")

RE_LEADING_INT = re.compile(r"^\s*[+-]?\d+")


class _Unspecified:
    """Marker for an optional field the caller did not supply."""

    _instance: _Unspecified | None = None

    def __new__(cls) -> _Unspecified:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSPECIFIED"

    def __bool__(self) -> bool:
        return False


UNSPECIFIED = _Unspecified()


@dataclass(frozen=True)
class Explicit:
    """An optional field the caller did supply. ``None`` is sent as null."""

    value: int | None


RewardOption = Union[_Unspecified, Explicit]


def parse_reward(raw: Any) -> int | None:
    """Parse an upstream reward value.

    ``None`` means the reward was never specified. Strings are read up to the
    first non-digit (``"100sats"`` is 100, ``"12.5"`` is 12); anything without
    a leading whole number is coerced to 0.
    """
    if raw is None:
        return None
    if isinstance(raw, bool):
        return 0
    if isinstance(raw, (int, float)):
        try:
            return int(raw)
        except (ValueError, OverflowError):
            logger.debug("Coercing malformed reward %r to 0", raw)
            return 0
    if isinstance(raw, str):
        m = RE_LEADING_INT.match(raw)
        if m:
            return int(m.group(0))
    logger.debug("Coercing malformed reward %r to 0", raw)
    return 0


@dataclass
class Task:
    """A single task on a Scrum board."""

    id: str
    scrum_id: str = ""
    description: str = ""
    assignee: str = ""
    stage: str = "todo"
    reward: int | None = None  # None = not specified, 0 = free task
    notes: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> Task:
        return cls(
            id=str(data.get("id", "")),
            scrum_id=str(data.get("scrum_id") or ""),
            description=data.get("task") or "",
            assignee=data.get("assignee") or "",
            stage=data.get("stage") or "",
            reward=parse_reward(data.get("reward")),
            notes=data.get("notes"),
        )

    @property
    def reward_sats(self) -> int:
        return self.reward or 0

    def to_dict(self) -> dict:
        d: dict = {
            "id": self.id,
            "scrum_id": self.scrum_id,
            "task": self.description,
            "assignee": self.assignee,
            "stage": self.stage,
            "reward": self.reward,
        }
        if self.notes is not None:
            d["notes"] = self.notes
        return d


@dataclass
class ScrumBoard:
    """A Scrum board (one sprint or unit of work)."""

    id: str
    name: str = ""
    description: str = ""
    public_assigning: bool = False
    public_tasks: bool = False
    public_delete_tasks: bool = False
    wallet: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> ScrumBoard:
        return cls(
            id=str(data.get("id", "")),
            name=data.get("name") or "",
            description=data.get("description") or "",
            public_assigning=bool(data.get("public_assigning", False)),
            public_tasks=bool(data.get("public_tasks", False)),
            public_delete_tasks=bool(data.get("public_delete_tasks", False)),
            wallet=data.get("wallet") or None,
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class TaskPage:
    """Tasks from a listing call, in one shape regardless of the response envelope."""

    items: list[Task] = field(default_factory=list)
    total: int = 0

    @classmethod
    def from_response(cls, body: Any) -> TaskPage:
        """Normalize a task listing response.

        Accepts a ``{"data": [...], "total": n}`` (or ``"items"``) envelope,
        a bare list of task records, or an existing TaskPage. For a bare list
        the total is its length.
        """
        if isinstance(body, TaskPage):
            return body
        if isinstance(body, dict):
            raw_items = body.get("data")
            if raw_items is None:
                raw_items = body.get("items") or []
            items = [_as_task(r) for r in raw_items]
            total = body.get("total")
            if not isinstance(total, int) or isinstance(total, bool) or not total:
                total = len(items)
            return cls(items=items, total=total)
        if body is None:
            return cls()
        items = [_as_task(r) for r in body]
        return cls(items=items, total=len(items))


@dataclass
class GitHubIssue:
    """A GitHub issue to import as a task."""

    title: str
    repository: str
    number: int | str
    url: str = ""
    assignee: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> GitHubIssue:
        return cls(
            title=data.get("title", ""),
            repository=data.get("repository", ""),
            number=data.get("number", ""),
            url=data.get("url", ""),
            assignee=data.get("assignee") or "",
        )

    @property
    def task_description(self) -> str:
        return f"{self.title} ({self.repository}/{self.number})"

    @property
    def task_notes(self) -> str:
        return f"Imported from GitHub: {self.url}"


def _as_task(record: Any) -> Task:
    if isinstance(record, Task):
        return record
    return Task.from_dict(record)
