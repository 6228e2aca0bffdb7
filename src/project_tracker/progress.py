"""Completion ratio of a project.

A project with no tasks reads as 0% complete rather than raising or
producing NaN.
"""
from __future__ import annotations
from typing import Tuple

from .models import Project


def task_counts(project: Project) -> Tuple[int, int]:
    """Return (done, total) for a project's tasks."""
    done = sum(1 for task in project.tasks if task.is_done)
    return done, len(project.tasks)


def progress(project: Project) -> float:
    done, total = task_counts(project)
    if total == 0:
        return 0.0
    return done / total
