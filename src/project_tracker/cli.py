"""Command-line interface for the project tracker.

One invocation = load the store, run one command, save if the command
changed anything, exit. Projects are addressed by id or exact name.
"""
from __future__ import annotations
import argparse
import logging
import sys
from typing import Callable, Dict, List, Optional, TextIO

from . import __version__
from . import config
from .errors import TrackerError
from .models import STATUS_ALIASES
from .render import overview, project_summary, task_lines
from .repository import Repository
from .storage import Storage
from .theme import load_palette

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="project-tracker",
        description="A simple CLI tool to keep track of your projects.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--data-dir", help="Directory holding data.json (default: ~/.config/project-tracker).")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr.")

    sub = parser.add_subparsers(dest="cmd")

    p = sub.add_parser("add-project", help="Add a new project.")
    p.add_argument("name", help="Name of the project.")

    p = sub.add_parser("remove-project", help="Remove a project and all its tasks.")
    p.add_argument("project", help="Project id or name.")

    p = sub.add_parser("rename-project", help="Rename a project.")
    p.add_argument("project", help="Project id or name.")
    p.add_argument("name", help="New name.")

    sub.add_parser("list-projects", help="List all projects.")

    p = sub.add_parser("list-tasks", help="List all tasks in a project.")
    p.add_argument("project", help="Project id or name.")

    p = sub.add_parser("add-task", help="Add a task to a project.")
    p.add_argument("project", help="Project id or name.")
    p.add_argument("description", nargs="+", help="Task description.")

    p = sub.add_parser("remove-task", help="Remove a task from a project.")
    p.add_argument("project", help="Project id or name.")
    p.add_argument("task_id", type=int)

    p = sub.add_parser("edit-task", help="Change a task's description.")
    p.add_argument("project", help="Project id or name.")
    p.add_argument("task_id", type=int)
    p.add_argument("description", nargs="+", help="New description.")

    p = sub.add_parser("complete-task", help="Mark a task as complete.")
    p.add_argument("project", help="Project id or name.")
    p.add_argument("task_id", type=int)

    p = sub.add_parser("set-status", help="Set a task's status.")
    p.add_argument("project", help="Project id or name.")
    p.add_argument("task_id", type=int)
    p.add_argument("status", help=f"One of: {', '.join(sorted(STATUS_ALIASES))}.")

    return parser


def setup_logging(verbose: bool = False) -> None:
    """Attach a stderr handler when asked to; otherwise logging stays silent."""
    level = "DEBUG" if verbose else config.log_level()
    if level is None:
        return
    root = logging.getLogger("project_tracker")
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        root.addHandler(handler)
    root.setLevel(getattr(logging, level))


class CLI:
    def __init__(self, repo: Repository, out: Optional[TextIO] = None):
        self.repo: Repository = repo
        self.out: TextIO = out if out is not None else sys.stdout
        self._handlers: Dict[Optional[str], Callable[[argparse.Namespace], bool]] = {
            None: self._cmd_overview,
            "add-project": self._cmd_add_project,
            "remove-project": self._cmd_remove_project,
            "rename-project": self._cmd_rename_project,
            "list-projects": self._cmd_list_projects,
            "list-tasks": self._cmd_list_tasks,
            "add-task": self._cmd_add_task,
            "remove-task": self._cmd_remove_task,
            "edit-task": self._cmd_edit_task,
            "complete-task": self._cmd_complete_task,
            "set-status": self._cmd_set_status,
        }

    def run(self, args: argparse.Namespace) -> bool:
        """Run the parsed command; return True when the store changed."""
        return self._handlers[args.cmd](args)

    def _print(self, *lines: str) -> None:
        for line in lines:
            print(line, file=self.out)

    # -------------------- read-only commands --------------------
    def _cmd_overview(self, args: argparse.Namespace) -> bool:
        self._print(*overview(self.repo.list_projects()))
        return False

    def _cmd_list_projects(self, args: argparse.Namespace) -> bool:
        projects = self.repo.list_projects()
        if not projects:
            self._print("No projects found.")
            return False
        self._print("Projects:", *[project_summary(p) for p in projects])
        return False

    def _cmd_list_tasks(self, args: argparse.Namespace) -> bool:
        project = self.repo.find_project(args.project)
        self._print(f"Tasks in project '{project.name}':", *task_lines(project))
        return False

    # -------------------- project commands --------------------
    def _cmd_add_project(self, args: argparse.Namespace) -> bool:
        pid = self.repo.add_project(args.name)
        self._print(f"Project '{self.repo.get_project(pid).name}' added with id {pid}.")
        return True

    def _cmd_remove_project(self, args: argparse.Namespace) -> bool:
        project = self.repo.find_project(args.project)
        self.repo.remove_project(project.id)
        self._print(f"Project '{project.name}' removed ({len(project.tasks)} task(s)).")
        return True

    def _cmd_rename_project(self, args: argparse.Namespace) -> bool:
        project = self.repo.find_project(args.project)
        old_name = project.name
        self.repo.rename_project(project.id, args.name)
        self._print(f"Project '{old_name}' renamed to '{project.name}'.")
        return True

    # -------------------- task commands --------------------
    def _cmd_add_task(self, args: argparse.Namespace) -> bool:
        project = self.repo.find_project(args.project)
        tid = self.repo.add_task(project.id, " ".join(args.description))
        self._print(f"Task {tid} added to project '{project.name}'.")
        return True

    def _cmd_remove_task(self, args: argparse.Namespace) -> bool:
        project = self.repo.find_project(args.project)
        self.repo.remove_task(project.id, args.task_id)
        self._print(f"Task {args.task_id} removed from project '{project.name}'.")
        return True

    def _cmd_edit_task(self, args: argparse.Namespace) -> bool:
        project = self.repo.find_project(args.project)
        self.repo.edit_task(project.id, args.task_id, " ".join(args.description))
        self._print(f"Task {args.task_id} in project '{project.name}' updated.")
        return True

    def _cmd_complete_task(self, args: argparse.Namespace) -> bool:
        project = self.repo.find_project(args.project)
        if not self.repo.set_task_status(project.id, args.task_id, "done"):
            self._print(f"Task {args.task_id} is already completed!")
            return False
        self._print(f"Task {args.task_id} in project '{project.name}' is now completed!")
        return True

    def _cmd_set_status(self, args: argparse.Namespace) -> bool:
        project = self.repo.find_project(args.project)
        changed = self.repo.set_task_status(project.id, args.task_id, args.status)
        status = self.repo.get_task(project.id, args.task_id).status.value
        if not changed:
            self._print(f"Task {args.task_id} is already {status}.")
            return False
        self._print(f"Task {args.task_id} in project '{project.name}' is now {status}.")
        return True


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)
    directory = config.data_dir(args.data_dir)
    load_palette(directory)
    try:
        repo = Repository(Storage.load(directory))
        if CLI(repo).run(args):
            Storage.save(repo.store, directory)
    except TrackerError as exc:
        logger.debug("command %s failed with %s", args.cmd, exc.code)
        print(f"error: {exc.message}", file=sys.stderr)
        return exc.exit_code
    return 0
