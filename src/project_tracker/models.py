"""Data models for the project tracker.

A Store owns every Project; a Project owns its Tasks exclusively. Ids are
plain integers handed out by counters carried inside the model itself
(``Store.next_project_id`` and ``Project.next_task_id``), so assignment is
deterministic and survives a save/load cycle. Task ids only mean something
inside their parent project.

Status keys are stored as lowercase strings ("pending", "in-progress",
"done"); the CLI accepts short aliases on top of those.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Union

from .errors import InvalidInput


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    DONE = "done"

    @classmethod
    def parse(cls, value: Union["TaskStatus", str]) -> "TaskStatus":
        """Resolve a status value or alias; raise InvalidInput otherwise."""
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        status = STATUS_ALIASES.get(key)
        if status is None:
            choices = ", ".join(s.value for s in cls)
            raise InvalidInput(f"Invalid status '{value}' (expected one of: {choices}).", field="status")
        return status


STATUS_ALIASES: Dict[str, TaskStatus] = {
    'p': TaskStatus.PENDING,
    'pending': TaskStatus.PENDING,
    't': TaskStatus.PENDING,
    'todo': TaskStatus.PENDING,
    'ip': TaskStatus.IN_PROGRESS,
    'in-progress': TaskStatus.IN_PROGRESS,
    'doing': TaskStatus.IN_PROGRESS,
    'd': TaskStatus.DONE,
    'done': TaskStatus.DONE,
}


@dataclass
class Task:
    """A single task inside a project.

    Fields:
        id: Sequential integer id, unique within the owning project.
        description: Non-empty, single-line text.
        status: One of TaskStatus.
    """
    id: int
    description: str
    status: TaskStatus = TaskStatus.PENDING

    @property
    def is_done(self) -> bool:
        return self.status is TaskStatus.DONE

    def set_status(self, status: Union[TaskStatus, str]) -> None:
        self.status = TaskStatus.parse(status)


@dataclass
class Project:
    """A named, ordered list of tasks.

    ``next_task_id`` is the id the next appended task receives; it never
    moves backwards, so ids of removed tasks are not handed out again.
    """
    id: int
    name: str
    tasks: List[Task] = field(default_factory=list)
    next_task_id: int = 1

    def find_task(self, task_id: int) -> Union[Task, None]:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None


@dataclass
class Store:
    """The whole persisted data set: projects keyed by id, in insertion order."""
    projects: Dict[int, Project] = field(default_factory=dict)
    next_project_id: int = 1


# -------------------- validating constructors --------------------
def clean_text(value: str, field_name: str) -> str:
    """Return ``value`` stripped; raise InvalidInput if nothing is left."""
    text = value.strip() if isinstance(value, str) else ''
    if not text:
        raise InvalidInput(f"{field_name.capitalize()} must not be empty.", field=field_name)
    return text


def new_project(project_id: int, name: str) -> Project:
    return Project(id=project_id, name=clean_text(name, 'name'))


def new_task(task_id: int, description: str) -> Task:
    return Task(id=task_id, description=clean_text(description, 'description'))
