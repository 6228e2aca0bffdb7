"""Progress calculator.

Tests cover:
    - Empty project reads as 0.0
    - Partial and full completion ratios
    - Only done tasks count (in-progress does not)
"""

import pytest

from project_tracker.models import Project, Task, TaskStatus
from project_tracker.progress import progress, task_counts


def _project(*statuses):
    return Project(
        id=1,
        name="p",
        tasks=[Task(id=i, description=f"t{i}", status=s) for i, s in enumerate(statuses, start=1)],
        next_task_id=len(statuses) + 1,
    )


def test_empty_project_is_zero():
    assert progress(_project()) == 0.0


def test_one_of_three_done():
    project = _project(TaskStatus.DONE, TaskStatus.PENDING, TaskStatus.PENDING)
    assert progress(project) == pytest.approx(1 / 3)


def test_all_done_is_one():
    assert progress(_project(TaskStatus.DONE, TaskStatus.DONE)) == 1.0


def test_in_progress_is_not_done():
    project = _project(TaskStatus.IN_PROGRESS, TaskStatus.DONE)
    assert task_counts(project) == (1, 2)
    assert progress(project) == 0.5


def test_progress_does_not_mutate_project():
    project = _project(TaskStatus.DONE, TaskStatus.PENDING)
    before = repr(project)
    progress(project)
    progress(project)
    assert repr(project) == before
