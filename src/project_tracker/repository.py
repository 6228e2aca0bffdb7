"""Repository: the only code allowed to mutate a Store.

Each operation checks everything it needs before touching the store, so a
call either fully applies or raises and leaves the store as it was.
The Store itself belongs to the caller; the repository just operates on it
for the length of one invocation.
"""
from __future__ import annotations
from typing import List, Union

from .errors import InvalidInput, NotFound
from .models import (
    Project,
    Store,
    Task,
    TaskStatus,
    clean_text,
    new_project,
    new_task,
)


class Repository:
    def __init__(self, store: Store | None = None):
        self.store: Store = store if store is not None else Store()

    # -------------------- id management --------------------
    def _allocate_project_id(self) -> int:
        pid = self.store.next_project_id
        self.store.next_project_id += 1
        return pid

    @staticmethod
    def _allocate_task_id(project: Project) -> int:
        tid = project.next_task_id
        project.next_task_id += 1
        return tid

    # -------------------- queries --------------------
    def list_projects(self) -> List[Project]:
        return list(self.store.projects.values())

    def get_project(self, project_id: int) -> Project:
        project = self.store.projects.get(project_id)
        if project is None:
            raise NotFound('Project', project_id)
        return project

    def get_task(self, project_id: int, task_id: int) -> Task:
        project = self.get_project(project_id)
        task = project.find_task(task_id)
        if task is None:
            raise NotFound('Task', task_id, scope=f'project {project_id}')
        return task

    def find_project(self, ref: Union[int, str]) -> Project:
        """Resolve a project by id, or by exact name when ``ref`` is not numeric.

        A numeric string is tried as an id first and then as a name; new
        names can't be all digits, but a hand-edited data file may hold one.
        """
        if isinstance(ref, int):
            return self.get_project(ref)
        text = str(ref).strip()
        if text.isdecimal() and int(text) in self.store.projects:
            return self.store.projects[int(text)]
        for project in self.store.projects.values():
            if project.name == text:
                return project
        raise NotFound('Project', text)

    def _check_name(self, name: str, exclude_id: int | None = None) -> None:
        if name.isdecimal():
            raise InvalidInput(f"Project name '{name}' must not be all digits; it would read as an id.", field='name')
        for project in self.store.projects.values():
            if project.name == name and project.id != exclude_id:
                raise InvalidInput(f"Project with name '{name}' already exists.", field='name')

    # -------------------- project operations --------------------
    def add_project(self, name: str) -> int:
        cleaned = clean_text(name, 'name')
        self._check_name(cleaned)
        project = new_project(self.store.next_project_id, cleaned)
        self._allocate_project_id()
        self.store.projects[project.id] = project
        return project.id

    def rename_project(self, project_id: int, name: str) -> None:
        project = self.get_project(project_id)
        cleaned = clean_text(name, 'name')
        self._check_name(cleaned, exclude_id=project_id)
        project.name = cleaned

    def remove_project(self, project_id: int) -> Project:
        """Remove a project together with all of its tasks; return it."""
        self.get_project(project_id)
        return self.store.projects.pop(project_id)

    # -------------------- task operations --------------------
    def add_task(self, project_id: int, description: str) -> int:
        project = self.get_project(project_id)
        task = new_task(project.next_task_id, description)
        self._allocate_task_id(project)
        project.tasks.append(task)
        return task.id

    def edit_task(self, project_id: int, task_id: int, description: str) -> None:
        task = self.get_task(project_id, task_id)
        task.description = clean_text(description, 'description')

    def remove_task(self, project_id: int, task_id: int) -> Task:
        project = self.get_project(project_id)
        task = self.get_task(project_id, task_id)
        project.tasks.remove(task)
        return task

    def set_task_status(self, project_id: int, task_id: int, status: Union[TaskStatus, str]) -> bool:
        """Apply a status; return False when the task already had it."""
        task = self.get_task(project_id, task_id)
        new_status = TaskStatus.parse(status)
        if task.status is new_status:
            return False
        task.set_status(new_status)
        return True

    def __str__(self) -> str:
        total = sum(len(p.tasks) for p in self.store.projects.values())
        return f'Projects: {len(self.store.projects)}, Tasks: {total}'
