"""Persistence helpers (load/save) for the tracker's data file.

The whole Store is written as one pretty-printed JSON document:

    {"version": 1,
     "next_project_id": 3,
     "projects": [{"id": 1, "name": "...", "next_task_id": 4,
                   "tasks": [{"id": 1, "description": "...", "status": "done"}]}]}

Projects and tasks are lists so display order survives the round trip.
Decoding is strict: anything that does not match this shape raises
StoreCorrupt instead of being coerced. A missing or zero-byte file is a
fresh start, not an error.
"""
from __future__ import annotations
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List

from .config import data_file
from .errors import StoreCorrupt, StoreIOError
from .models import Project, Store, Task, TaskStatus

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1

StoreDict = Dict[str, Any]


# -------------------- encoding --------------------
def encode(store: Store) -> StoreDict:
    return {
        'version': FORMAT_VERSION,
        'next_project_id': store.next_project_id,
        'projects': [
            {
                'id': project.id,
                'name': project.name,
                'next_task_id': project.next_task_id,
                'tasks': [
                    {'id': task.id, 'description': task.description, 'status': task.status.value}
                    for task in project.tasks
                ],
            }
            for project in store.projects.values()
        ],
    }


# -------------------- decoding --------------------
def _require(raw: Dict[str, Any], key: str, kind: type, where: str) -> Any:
    if key not in raw:
        raise StoreCorrupt(f"{where}: missing '{key}'")
    value = raw[key]
    # bool is an int subclass; never accept it where a number is expected
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise StoreCorrupt(f"{where}: '{key}' must be {kind.__name__}")
    return value


def _require_id(raw: Dict[str, Any], key: str, where: str) -> int:
    value = _require(raw, key, int, where)
    if value < 1:
        raise StoreCorrupt(f"{where}: '{key}' must be a positive integer")
    return value


def _require_text(raw: Dict[str, Any], key: str, where: str) -> str:
    value = _require(raw, key, str, where)
    if not value.strip():
        raise StoreCorrupt(f"{where}: '{key}' must not be empty")
    return value


def _decode_task(raw: Any, where: str) -> Task:
    if not isinstance(raw, dict):
        raise StoreCorrupt(f"{where}: expected an object")
    status_raw = _require(raw, 'status', str, where)
    try:
        status = TaskStatus(status_raw)
    except ValueError:
        raise StoreCorrupt(f"{where}: unknown status '{status_raw}'") from None
    return Task(
        id=_require_id(raw, 'id', where),
        description=_require_text(raw, 'description', where),
        status=status,
    )


def _decode_project(raw: Any, where: str) -> Project:
    if not isinstance(raw, dict):
        raise StoreCorrupt(f"{where}: expected an object")
    project = Project(
        id=_require_id(raw, 'id', where),
        name=_require_text(raw, 'name', where),
        next_task_id=_require_id(raw, 'next_task_id', where),
    )
    tasks_raw = _require(raw, 'tasks', list, where)
    seen = set()
    for index, task_raw in enumerate(tasks_raw):
        task = _decode_task(task_raw, f"{where} task #{index + 1}")
        if task.id in seen:
            raise StoreCorrupt(f"{where}: duplicate task id {task.id}")
        if task.id >= project.next_task_id:
            raise StoreCorrupt(f"{where}: task id {task.id} not below next_task_id")
        seen.add(task.id)
        project.tasks.append(task)
    return project


def decode(data: Any) -> Store:
    """Build a Store from its JSON form, rejecting anything malformed."""
    if not isinstance(data, dict):
        raise StoreCorrupt("top level must be an object")
    version = _require(data, 'version', int, 'store')
    if version != FORMAT_VERSION:
        raise StoreCorrupt(f"unsupported format version {version}")
    store = Store(next_project_id=_require_id(data, 'next_project_id', 'store'))
    projects_raw: List[Any] = _require(data, 'projects', list, 'store')
    names = set()
    for index, project_raw in enumerate(projects_raw):
        project = _decode_project(project_raw, f"project #{index + 1}")
        if project.id in store.projects:
            raise StoreCorrupt(f"duplicate project id {project.id}")
        if project.id >= store.next_project_id:
            raise StoreCorrupt(f"project id {project.id} not below next_project_id")
        if project.name in names:
            raise StoreCorrupt(f"duplicate project name '{project.name}'")
        names.add(project.name)
        store.projects[project.id] = project
    return store


# -------------------- file I/O --------------------
class Storage:
    @staticmethod
    def load(directory: Path) -> Store:
        """Load the Store kept in ``directory``.

        Missing or zero-byte file -> empty Store.
        Unreadable file -> StoreIOError; unparsable content -> StoreCorrupt.
        """
        path = data_file(directory)
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            logger.debug("no data file at %s, starting empty", path)
            return Store()
        except OSError as exc:
            raise StoreIOError(str(exc), 'read') from exc
        if not raw:
            logger.debug("data file %s is empty, starting empty", path)
            return Store()
        # JSONDecodeError is a ValueError; so is the int digit limit
        try:
            data = json.loads(raw.decode('utf-8'))
        except (UnicodeDecodeError, ValueError, RecursionError) as exc:
            raise StoreCorrupt(str(exc), path) from exc
        try:
            store = decode(data)
        except StoreCorrupt as exc:
            raise StoreCorrupt(exc.detail, path) from exc
        logger.debug("loaded %d project(s) from %s", len(store.projects), path)
        return store

    @staticmethod
    def save(store: Store, directory: Path) -> None:
        """Overwrite the data file with ``store``.

        Written to a sibling temp file, fsynced, then renamed over the real
        file, so an interrupted save leaves the previous file intact.
        """
        path = data_file(directory)
        text = json.dumps(encode(store), indent=4, ensure_ascii=False) + '\n'
        tmp = path.with_suffix(path.suffix + f'.tmp.{os.getpid()}')
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp, 'w', encoding='utf-8') as f:
                f.write(text)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, path)
        except OSError as exc:
            try:
                tmp.unlink(missing_ok=True)
            except OSError:
                pass
            raise StoreIOError(str(exc), 'write') from exc
        logger.debug("saved %d project(s) to %s", len(store.projects), path)


def load(directory: Path) -> Store:
    return Storage.load(directory)


def save(store: Store, directory: Path) -> None:
    Storage.save(store, directory)
