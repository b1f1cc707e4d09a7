"""CLI entry point for lnbits-scrum."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from .config import apply_env_overrides, load_config
from .errors import ConfigurationError, UpstreamError
from .models import STAGES, UNSPECIFIED, Explicit, RewardOption
from .report import format_report
from .scrum_api import ScrumClient
from .sprint import create_weekly_sprint, generate_sprint_report, import_github_issues


def reward_arg(value: str) -> Explicit:
    """argparse type for ``--reward``: a sats amount, or ``null`` for a free task."""
    if value.strip().lower() in ("null", "none"):
        return Explicit(None)
    try:
        amount = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid reward: {value!r}")
    if amount < 0:
        raise argparse.ArgumentTypeError("reward must not be negative")
    return Explicit(amount)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lnbits-scrum",
        description="Manage LNbits Scrum boards and sats-rewarded tasks.",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to the JSON config file (default: ~/.openclaw/lnbits-scrum-config.json)",
    )
    parser.add_argument(
        "--url",
        type=str,
        default=None,
        help="LNbits instance URL (or set LNBITS_URL env var)",
    )
    parser.add_argument(
        "--token",
        type=str,
        default=None,
        help="Access token sent as a Bearer header (or set LNBITS_ACCESS_TOKEN env var)",
    )
    parser.add_argument(
        "--usr",
        type=str,
        default=None,
        help="User ID sent as the usr query parameter (or set LNBITS_USER_ID env var)",
    )
    parser.add_argument(
        "--wallet",
        type=str,
        default=None,
        help="Wallet ID attached to new boards (or set LNBITS_WALLET_ID env var)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    # boards
    boards = commands.add_parser("boards", help="Manage scrum boards")
    board_actions = boards.add_subparsers(dest="action", required=True)

    p = board_actions.add_parser("list", help="List boards")
    p.add_argument("--limit", type=int, default=100)
    p.add_argument("--offset", type=int, default=0)
    p.set_defaults(func=_boards_list)

    p = board_actions.add_parser("get", help="Show a board")
    p.add_argument("board_id")
    p.set_defaults(func=_boards_get)

    p = board_actions.add_parser("create", help="Create a board")
    p.add_argument("name")
    p.add_argument("--description", default="")
    p.add_argument("--public-assigning", action="store_true")
    p.add_argument("--public-tasks", action="store_true")
    p.add_argument("--public-delete-tasks", action="store_true")
    p.set_defaults(func=_boards_create)

    p = board_actions.add_parser("delete", help="Delete a board")
    p.add_argument("board_id")
    p.set_defaults(func=_boards_delete)

    # tasks
    tasks = commands.add_parser("tasks", help="Manage tasks")
    task_actions = tasks.add_subparsers(dest="action", required=True)

    p = task_actions.add_parser("list", help="List a board's tasks")
    p.add_argument("board_id")
    p.add_argument("--limit", type=int, default=100)
    p.add_argument("--offset", type=int, default=0)
    p.set_defaults(func=_tasks_list)

    p = task_actions.add_parser("get", help="Show a task")
    p.add_argument("task_id")
    p.set_defaults(func=_tasks_get)

    p = task_actions.add_parser("create", help="Create a task in 'todo'")
    p.add_argument("board_id")
    p.add_argument("description")
    p.add_argument("--assignee", default="")
    p.add_argument(
        "--reward",
        type=reward_arg,
        default=UNSPECIFIED,
        help="Reward in sats, or 'null'. Omit to leave the reward unspecified.",
    )
    p.add_argument("--notes", default="")
    p.set_defaults(func=_tasks_create)

    p = task_actions.add_parser("update", help="Update task fields")
    p.add_argument("task_id")
    p.add_argument("--stage", choices=STAGES, default=None)
    p.add_argument("--assignee", default=None)
    p.add_argument("--notes", default=None)
    p.add_argument("--reward", type=reward_arg, default=UNSPECIFIED)
    p.set_defaults(func=_tasks_update)

    p = task_actions.add_parser("move", help="Move a task to another stage")
    p.add_argument("task_id")
    p.add_argument("stage", choices=STAGES)
    p.set_defaults(func=_tasks_move)

    p = task_actions.add_parser("delete", help="Delete a task")
    p.add_argument("task_id")
    p.set_defaults(func=_tasks_delete)

    # sprint
    sprint = commands.add_parser("sprint", help="Sprint workflows")
    sprint_actions = sprint.add_subparsers(dest="action", required=True)

    p = sprint_actions.add_parser("create", help="Create a 'Week <n> Sprint' board")
    p.add_argument("week_number", type=int)
    p.add_argument("--description", default="")
    p.set_defaults(func=_sprint_create)

    p = sprint_actions.add_parser("report", help="Summarize a board's tasks")
    p.add_argument("board_id")
    p.add_argument(
        "--json",
        action="store_true",
        help="Print the report as JSON instead of text",
    )
    p.add_argument(
        "--output-json",
        type=str,
        default=None,
        help="Also write the report to a JSON file",
    )
    p.set_defaults(func=_sprint_report)

    # import-issues
    p = commands.add_parser(
        "import-issues",
        help="Create tasks from a JSON list of GitHub issues",
    )
    p.add_argument("issues_file", help="JSON file with a list of issue objects")
    p.add_argument("--board", required=True, dest="board_id")
    p.add_argument("--reward", type=reward_arg, default=UNSPECIFIED)
    p.add_argument(
        "--output-json",
        type=str,
        default=None,
        help="Write per-issue results to a JSON file",
    )
    p.set_defaults(func=_import_issues)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    # Configure logging
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(message)s",
    )

    # Resolve configuration: flags > env > config file
    config = apply_env_overrides(load_config(args.config))
    config = config.with_overrides(
        service_url=args.url,
        access_token=args.token,
        user_id=args.usr,
        wallet_id=args.wallet,
    )

    try:
        client = ScrumClient.from_config(config)
    except ConfigurationError as e:
        logging.error("%s", e)
        return 1

    try:
        return args.func(client, args)
    except UpstreamError as e:
        logging.error("%s", e)
        return 1
    finally:
        client.close()


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2))


def _boards_list(client: ScrumClient, args: argparse.Namespace) -> int:
    _print_json(client.list_boards(limit=args.limit, offset=args.offset))
    return 0


def _boards_get(client: ScrumClient, args: argparse.Namespace) -> int:
    _print_json(client.get_board(args.board_id))
    return 0


def _boards_create(client: ScrumClient, args: argparse.Namespace) -> int:
    board = client.create_board(
        args.name,
        args.description,
        public_assigning=args.public_assigning,
        public_tasks=args.public_tasks,
        public_delete_tasks=args.public_delete_tasks,
    )
    _print_json(board)
    return 0


def _boards_delete(client: ScrumClient, args: argparse.Namespace) -> int:
    _print_json(client.delete_board(args.board_id))
    return 0


def _tasks_list(client: ScrumClient, args: argparse.Namespace) -> int:
    _print_json(client.list_tasks(args.board_id, limit=args.limit, offset=args.offset))
    return 0


def _tasks_get(client: ScrumClient, args: argparse.Namespace) -> int:
    _print_json(client.get_task(args.task_id))
    return 0


def _tasks_create(client: ScrumClient, args: argparse.Namespace) -> int:
    task = client.create_task(
        args.board_id,
        args.description,
        assignee=args.assignee,
        reward=args.reward,
        notes=args.notes,
    )
    _print_json(task)
    return 0


def _tasks_update(client: ScrumClient, args: argparse.Namespace) -> int:
    updates: dict = {}
    if args.stage is not None:
        updates["stage"] = args.stage
    if args.assignee is not None:
        updates["assignee"] = args.assignee
    if args.notes is not None:
        updates["notes"] = args.notes
    reward: RewardOption = args.reward
    if isinstance(reward, Explicit):
        updates["reward"] = reward.value
    if not updates:
        logging.error("Nothing to update; pass --stage, --assignee, --notes or --reward")
        return 1
    _print_json(client.update_task(args.task_id, updates))
    return 0


def _tasks_move(client: ScrumClient, args: argparse.Namespace) -> int:
    _print_json(client.move_task(args.task_id, args.stage))
    return 0


def _tasks_delete(client: ScrumClient, args: argparse.Namespace) -> int:
    _print_json(client.delete_task(args.task_id))
    return 0


def _sprint_create(client: ScrumClient, args: argparse.Namespace) -> int:
    _print_json(create_weekly_sprint(client, args.week_number, args.description))
    return 0


def _sprint_report(client: ScrumClient, args: argparse.Namespace) -> int:
    report = generate_sprint_report(client, args.board_id)
    if args.json:
        _print_json(report.to_dict())
    else:
        print(format_report(report))

    if args.output_json:
        Path(args.output_json).write_text(json.dumps(report.to_dict(), indent=2))
        logging.info("Report written to %s", args.output_json)
    return 0


def _import_issues(client: ScrumClient, args: argparse.Namespace) -> int:
    issues_path = Path(args.issues_file)
    if not issues_path.is_file():
        logging.error("Issues file not found: %s", issues_path)
        return 1
    try:
        issues = json.loads(issues_path.read_text(encoding="utf-8"))
    except ValueError as e:
        logging.error("Could not parse %s: %s", issues_path, e)
        return 1
    if not isinstance(issues, list):
        logging.error("%s must contain a JSON list of issues", issues_path)
        return 1

    results = import_github_issues(client, issues, args.board_id, args.reward)
    _print_json([r.to_dict() for r in results])

    failed = [r for r in results if not r.success]
    if failed:
        logging.warning("Errors encountered:")
        for r in failed:
            logging.warning("  - %s", r.error)

    if args.output_json:
        out = [r.to_dict() for r in results]
        Path(args.output_json).write_text(json.dumps(out, indent=2))
        logging.info("Results written to %s", args.output_json)

    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
