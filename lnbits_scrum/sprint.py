"""Sprint workflows built on top of the Scrum client."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from .models import UNSPECIFIED, GitHubIssue, RewardOption, ScrumBoard
from .report import SprintReport, aggregate
from .scrum_api import ScrumClient

logger = logging.getLogger(__name__)


@dataclass
class ImportResult:
    """Outcome of importing a single GitHub issue."""

    success: bool
    issue: GitHubIssue
    task: dict | None = None
    error: str | None = None

    def to_dict(self) -> dict:
        d: dict = {"success": self.success, "issue": vars(self.issue)}
        if self.success:
            d["task"] = self.task
        else:
            d["error"] = self.error
        return d


def create_weekly_sprint(client: ScrumClient, week_number: int, description: str) -> dict:
    """Create a ``Week <n> Sprint`` board open for public assigning."""
    return client.create_board(
        f"Week {week_number} Sprint",
        description,
        public_assigning=True,
        public_tasks=False,
        public_delete_tasks=False,
    )


def import_github_issues(
    client: ScrumClient,
    issues: Iterable[GitHubIssue | dict],
    scrum_id: str,
    default_reward: RewardOption = UNSPECIFIED,
) -> list[ImportResult]:
    """Create one task per GitHub issue.

    A failure on one issue is recorded in its ImportResult and does not stop
    the remaining imports. Results are returned in input order.
    """
    results: list[ImportResult] = []

    for index, raw in enumerate(issues):
        issue = raw if isinstance(raw, GitHubIssue) else None
        try:
            if issue is None:
                issue = GitHubIssue.from_dict(raw)
            task = client.create_task(
                scrum_id,
                issue.task_description,
                issue.assignee,
                default_reward,
                issue.task_notes,
            )
            results.append(ImportResult(success=True, issue=issue, task=task))
        except Exception as e:
            logger.error("Failed to import issue #%d (%r): %s", index, raw, e)
            if issue is None:
                issue = GitHubIssue(title="", repository="", number="")
            results.append(ImportResult(success=False, issue=issue, error=str(e)))

    imported = sum(1 for r in results if r.success)
    logger.info("Imported %d of %d GitHub issue(s)", imported, len(results))
    return results


def generate_sprint_report(client: ScrumClient, scrum_id: str) -> SprintReport:
    """Fetch a board and its tasks and aggregate them into a report."""
    board = ScrumBoard.from_dict(client.get_board(scrum_id))
    page = client.list_task_page(scrum_id)
    logger.debug("Aggregating %d task(s) for board %s", len(page.items), scrum_id)
    return aggregate(board, page)
