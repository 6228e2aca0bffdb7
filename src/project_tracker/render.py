"""Text rendering for projects, tasks and progress bars.

Everything here returns strings; the CLI decides where they are printed.
"""
from __future__ import annotations
from typing import Iterable, List

from .models import Project, Task, TaskStatus
from .progress import progress, task_counts
from .theme import color

BAR_WIDTH = 20
BAR_FILL = '█'
INDENT = '    '

CHECKBOXES = {
    TaskStatus.PENDING: '[ ]',
    TaskStatus.IN_PROGRESS: '[~]',
    TaskStatus.DONE: '[x]',
}


def progress_bar(ratio: float, width: int = BAR_WIDTH) -> str:
    """``[████      ] 40%`` style bar for a ratio in [0, 1]."""
    ratio = min(max(ratio, 0.0), 1.0)
    filled = int(round(ratio * width))
    percentage = int(ratio * 100)
    bar = color(BAR_FILL * filled, 'bar') + ' ' * (width - filled)
    return f"[{bar}] {color(str(percentage), 'percent')}%"


def task_line(task: Task) -> str:
    box = color(CHECKBOXES[task.status], task.status.value)
    return f"{INDENT}{box} {color(str(task.id), 'id')}: {task.description}"


def task_lines(project: Project) -> List[str]:
    if not project.tasks:
        return [INDENT + color('No tasks yet.', 'empty')]
    return [task_line(task) for task in project.tasks]


def project_summary(project: Project) -> str:
    done, total = task_counts(project)
    return f" - {color(str(project.id), 'id')}: {project.name} ({done}/{total} done)"


def project_block(project: Project) -> List[str]:
    lines = [
        f"Project {color(str(project.id), 'id')}: " + color(f'"{project.name}"', 'header', 'bold'),
        f"Progress: {progress_bar(progress(project))}",
    ]
    lines.extend(task_lines(project))
    return lines


def overview(projects: Iterable[Project]) -> List[str]:
    """Every project with its progress bar and tasks, blank line between."""
    projects = list(projects)
    if not projects:
        return ['No projects found.']
    lines = ['Projects:']
    for project in projects:
        lines.extend(project_block(project))
        lines.append('')
    return lines
