#!/usr/bin/env python3
"""
SmartTask command-line client.

Usage:
    smarttask dashboard
    smarttask list
    smarttask create "Write report"
    smarttask toggle TASK_ID
    smarttask rename TASK_ID "New title"
    smarttask delete TASK_ID
    smarttask subtask add TASK_ID "Outline"
    smarttask subtask toggle SUBTASK_ID
    smarttask subtask rename SUBTASK_ID "New title"
    smarttask subtask delete SUBTASK_ID
"""
from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests

from smarttask.client import ApiClient, ApiError
from smarttask.core.config import settings
from smarttask.core.logging_setup import setup_logging

RECENT_LIMIT = 5


@dataclass
class DashboardSummary:
    total: int
    completed: int
    pending: int
    total_subtasks: int
    recent: List[Dict[str, Any]] = field(default_factory=list)


def summarize(tasks: List[Dict[str, Any]], recent_limit: int = RECENT_LIMIT) -> DashboardSummary:
    """Counts for the dashboard. ``tasks`` arrive newest first from the API."""
    completed = sum(1 for t in tasks if t.get("completed"))
    return DashboardSummary(
        total=len(tasks),
        completed=completed,
        pending=len(tasks) - completed,
        total_subtasks=sum(len(t.get("subtasks") or []) for t in tasks),
        recent=list(tasks[:recent_limit]),
    )


def _mark(entity: Dict[str, Any]) -> str:
    return "[x]" if entity.get("completed") else "[ ]"


def render_dashboard(summary: DashboardSummary) -> str:
    lines = [
        f"Total tasks:     {summary.total}",
        f"Completed:       {summary.completed}",
        f"Pending:         {summary.pending}",
        f"Total subtasks:  {summary.total_subtasks}",
    ]
    if summary.recent:
        lines += ["", "Recent tasks:"]
        for t in summary.recent:
            count = len(t.get("subtasks") or [])
            lines.append(f"  {_mark(t)} {t['title']}  ({count} subtasks)  {t['id']}")
        if summary.total > len(summary.recent):
            lines.append(f"  View all {summary.total} tasks -> smarttask list")
    else:
        lines += ["", "No tasks yet. Create one with: smarttask create TITLE"]
    return "\n".join(lines)


def render_task_list(tasks: List[Dict[str, Any]]) -> str:
    if not tasks:
        return "No tasks found."
    lines = []
    for t in tasks:
        lines.append(f"{_mark(t)} {t['title']}  {t['id']}")
        for s in t.get("subtasks") or []:
            lines.append(f"    {_mark(s)} {s['title']}  {s['id']}")
    return "\n".join(lines)


def _find_subtask(client: ApiClient, subtask_id: str) -> Optional[Dict[str, Any]]:
    for t in client.get_tasks():
        for s in t.get("subtasks") or []:
            if s["id"] == subtask_id:
                return s
    return None


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="smarttask", description="SmartTask AI command-line client")
    parser.add_argument("--api", default=settings.api_base_url, help="API base URL")
    parser.add_argument("--token", default=settings.client_session_token, help="session token")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("dashboard", help="Summary and recent tasks")
    sub.add_parser("list", help="All tasks with subtasks")

    p = sub.add_parser("create", help="Create a task")
    p.add_argument("title")

    for name in ("toggle", "delete"):
        p = sub.add_parser(name, help=f"{name.capitalize()} a task")
        p.add_argument("task_id")

    p = sub.add_parser("rename", help="Rename a task")
    p.add_argument("task_id")
    p.add_argument("title")

    p = sub.add_parser("subtask", help="Subtask commands")
    subsub = p.add_subparsers(dest="subcommand", required=True)
    sp = subsub.add_parser("add")
    sp.add_argument("task_id")
    sp.add_argument("title")
    for name in ("toggle", "delete"):
        sp = subsub.add_parser(name)
        sp.add_argument("subtask_id")
    sp = subsub.add_parser("rename")
    sp.add_argument("subtask_id")
    sp.add_argument("title")

    return parser


def _run(args: argparse.Namespace, client: ApiClient) -> int:
    cmd = args.command

    if cmd == "dashboard":
        print(render_dashboard(summarize(client.get_tasks())))
    elif cmd == "list":
        print(render_task_list(client.get_tasks()))
    elif cmd == "create":
        title = args.title.strip()
        if not title:
            print("Error: title cannot be empty", file=sys.stderr)
            return 2
        task = client.create_task(title)
        print(f"Created {task['id']}: {task['title']}")
    elif cmd == "toggle":
        task = client.get_task(args.task_id)
        task = client.update_task(task["id"], {"completed": not task["completed"]})
        print(f"{_mark(task)} {task['title']}")
    elif cmd == "rename":
        task = client.update_task(args.task_id, {"title": args.title})
        print(f"Renamed to: {task['title']}")
    elif cmd == "delete":
        client.delete_task(args.task_id)
        print(f"Deleted {args.task_id}")
    elif cmd == "subtask":
        return _run_subtask(args, client)
    return 0


def _run_subtask(args: argparse.Namespace, client: ApiClient) -> int:
    cmd = args.subcommand

    if cmd == "add":
        title = args.title.strip()
        if not title:
            print("Error: title cannot be empty", file=sys.stderr)
            return 2
        s = client.create_subtask(args.task_id, title)
        print(f"Created subtask {s['id']}: {s['title']}")
    elif cmd == "toggle":
        current = _find_subtask(client, args.subtask_id)
        if current is None:
            print("Error: subtask not found", file=sys.stderr)
            return 1
        s = client.update_subtask(current["id"], {"completed": not current["completed"]})
        print(f"{_mark(s)} {s['title']}")
    elif cmd == "rename":
        s = client.update_subtask(args.subtask_id, {"title": args.title})
        print(f"Renamed to: {s['title']}")
    elif cmd == "delete":
        client.delete_subtask(args.subtask_id)
        print(f"Deleted subtask {args.subtask_id}")
    return 0


def main(argv: Optional[List[str]] = None, client: Optional[ApiClient] = None) -> int:
    setup_logging("WARNING")
    args = _build_parser().parse_args(argv)
    client = client or ApiClient(
        args.api,
        cookies={settings.session_cookie_name: args.token} if args.token else None,
    )
    try:
        return _run(args, client)
    except (ApiError, requests.RequestException) as exc:
        print(f"Error: {exc}. Please try again.", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
