"""Sprint report aggregation over a board's tasks."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .models import ScrumBoard, Task, TaskPage


@dataclass(frozen=True)
class RewardSummary:
    """Reward totals in sats. ``pending`` is always ``total - completed``."""

    total: int = 0
    completed: int = 0

    @property
    def pending(self) -> int:
        return self.total - self.completed

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "completed": self.completed,
            "pending": self.pending,
        }


@dataclass
class SprintReport:
    """Summary of a board's tasks, grouped by stage."""

    board: Any
    total_tasks: int = 0
    todo: list[Task] = field(default_factory=list)
    doing: list[Task] = field(default_factory=list)
    done: list[Task] = field(default_factory=list)
    assignees: list[str] = field(default_factory=list)
    rewards: RewardSummary = field(default_factory=RewardSummary)

    def to_dict(self) -> dict:
        board = self.board.to_dict() if isinstance(self.board, ScrumBoard) else self.board
        return {
            "scrumBoard": board,
            "totalTasks": self.total_tasks,
            "todo": [t.to_dict() for t in self.todo],
            "doing": [t.to_dict() for t in self.doing],
            "done": [t.to_dict() for t in self.done],
            "assignees": list(self.assignees),
            "rewards": self.rewards.to_dict(),
        }


def aggregate(board: Any, tasks: Any) -> SprintReport:
    """Build a SprintReport from a board and its tasks.

    ``tasks`` may be a listing envelope, a bare list of task records or a
    TaskPage. Tasks with an unknown stage count towards ``total_tasks`` but
    land in no bucket; rewards that are absent or malformed count as 0.
    """
    page = TaskPage.from_response(tasks)
    buckets: dict[str, list[Task]] = {"todo": [], "doing": [], "done": []}
    assignees: dict[str, None] = {}
    total = 0
    completed = 0

    for task in page.items:
        if task.assignee:
            assignees.setdefault(task.assignee, None)
        reward = task.reward_sats
        total += reward
        if task.stage == "done":
            completed += reward
        bucket = buckets.get(task.stage)
        if bucket is not None:
            bucket.append(task)

    return SprintReport(
        board=board,
        total_tasks=page.total,
        todo=buckets["todo"],
        doing=buckets["doing"],
        done=buckets["done"],
        assignees=list(assignees),
        rewards=RewardSummary(total=total, completed=completed),
    )


def format_report(report: SprintReport) -> str:
    """Render a report as a short plain-text summary."""
    board = report.board
    if isinstance(board, ScrumBoard):
        name = board.name
    elif isinstance(board, dict):
        name = board.get("name", "")
    else:
        name = str(board)

    lines = [
        f"Sprint report: {name}",
        f"  Tasks: {report.total_tasks} "
        f"(todo {len(report.todo)}, doing {len(report.doing)}, done {len(report.done)})",
        f"  Assignees: {', '.join(report.assignees) or '-'}",
        f"  Rewards: {report.rewards.total} sats total, "
        f"{report.rewards.completed} completed, {report.rewards.pending} pending",
    ]
    for stage in ("todo", "doing", "done"):
        for task in getattr(report, stage):
            who = f" @{task.assignee}" if task.assignee else ""
            sats = f" [{task.reward} sats]" if task.reward is not None else ""
            lines.append(f"  [{stage}] {task.description}{who}{sats}")
    return "\n".join(lines)
