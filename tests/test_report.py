"""Tests for sprint report aggregation (no API calls)."""

from lnbits_scrum.models import ScrumBoard, Task, TaskPage
from lnbits_scrum.report import RewardSummary, aggregate, format_report

BOARD = ScrumBoard(id="s1", name="Week 7 Sprint")


def _record(task_id, stage="todo", assignee="", **kwargs):
    d = {"id": task_id, "scrum_id": "s1", "task": f"Task {task_id}",
         "assignee": assignee, "stage": stage}
    d.update(kwargs)
    return d


def test_mixed_stage_scenario():
    tasks = [
        _record("t1", stage="todo"),
        _record("t2", stage="done", reward=5000),
        _record("t3", stage="doing", reward=0),
    ]
    report = aggregate(BOARD, tasks)

    assert report.total_tasks == 3
    assert [t.id for t in report.todo] == ["t1"]
    assert [t.id for t in report.doing] == ["t3"]
    assert [t.id for t in report.done] == ["t2"]
    assert report.rewards.to_dict() == {"total": 5000, "completed": 5000, "pending": 0}


def test_bare_list_total_is_length():
    tasks = [_record(f"t{i}") for i in range(4)]
    report = aggregate(BOARD, tasks)
    assert report.total_tasks == 4
    assert len(report.todo) == 4


def test_envelope_uses_reported_total():
    body = {"data": [_record("t1"), _record("t2")], "total": 12}
    report = aggregate(BOARD, body)
    assert report.total_tasks == 12
    assert len(report.todo) == 2


def test_items_envelope_without_total_counts_items():
    body = {"items": [_record("t1"), _record("t2", stage="done")]}
    report = aggregate(BOARD, body)
    assert report.total_tasks == 2
    assert len(report.done) == 1


def test_empty_envelope():
    report = aggregate(BOARD, {"data": [], "total": 0})
    assert report.total_tasks == 0
    assert report.rewards == RewardSummary()


def test_unknown_stage_counted_but_not_bucketed():
    tasks = [_record("t1", stage="blocked", reward=100), _record("t2")]
    report = aggregate(BOARD, tasks)
    assert report.total_tasks == 2
    assert [t.id for t in report.todo] == ["t2"]
    assert report.doing == []
    assert report.done == []
    assert report.rewards.total == 100


def test_assignees_first_seen_order_without_empties():
    tasks = [
        _record("t1", assignee="bob"),
        _record("t2", assignee=""),
        _record("t3", assignee="alice"),
        _record("t4", assignee="bob"),
        _record("t5"),
    ]
    report = aggregate(BOARD, tasks)
    assert report.assignees == ["bob", "alice"]


def test_malformed_and_missing_rewards_count_as_zero():
    tasks = [
        _record("t1", reward="lots"),
        _record("t2", reward=None),
        _record("t3"),
        _record("t4", stage="done", reward="250"),
    ]
    report = aggregate(BOARD, tasks)
    assert report.rewards.total == 250
    assert report.rewards.completed == 250
    assert report.rewards.pending == 0


def test_pending_is_total_minus_completed():
    tasks = [
        _record("t1", stage="todo", reward=100),
        _record("t2", stage="doing", reward=200),
        _record("t3", stage="done", reward=300),
        _record("t4", stage="done", reward=400),
        _record("t5", stage="weird", reward=50),
    ]
    rewards = aggregate(BOARD, tasks).rewards
    assert rewards.total == 1050
    assert rewards.completed == 700
    assert rewards.pending == rewards.total - rewards.completed == 350


def test_aggregate_is_idempotent():
    tasks = [
        _record("t1", stage="done", reward=10, assignee="a"),
        _record("t2", stage="doing", reward=20, assignee="b"),
    ]
    first = aggregate(BOARD, tasks)
    second = aggregate(BOARD, tasks)
    assert first == second
    assert first.to_dict() == second.to_dict()


def test_aggregate_accepts_task_page():
    page = TaskPage(items=[Task(id="t1", stage="done", reward=7)], total=1)
    report = aggregate(BOARD, page)
    assert report.total_tasks == 1
    assert report.rewards.completed == 7


def test_to_dict_shape():
    report = aggregate(BOARD, [_record("t1", stage="done", reward=5, assignee="a")])
    d = report.to_dict()
    assert d["scrumBoard"]["name"] == "Week 7 Sprint"
    assert d["totalTasks"] == 1
    assert d["done"][0]["task"] == "Task t1"
    assert d["assignees"] == ["a"]
    assert d["rewards"] == {"total": 5, "completed": 5, "pending": 0}


def test_format_report_mentions_counts_and_rewards():
    tasks = [
        _record("t1", stage="todo", assignee="alice", reward=100),
        _record("t2", stage="done", reward=50),
    ]
    text = format_report(aggregate(BOARD, tasks))
    assert "Sprint report: Week 7 Sprint" in text
    assert "todo 1, doing 0, done 1" in text
    assert "150 sats total, 50 completed, 100 pending" in text
    assert "[todo] Task t1 @alice [100 sats]" in text
