# src/clientimport/process_models.py
"""
Process models (recurring onboarding checklists) and typed edits to their
task templates.

Each editable task field has its own edit type carrying a value of the right
type, so an edit can never put a string where a day offset belongs.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from typing import List, Optional, Union

from clientimport.models import ProcessFrequency


@dataclass(frozen=True)
class TaskTemplate:
    id: str
    title: str
    due_day_offset: int = 1


@dataclass(frozen=True)
class ProcessModel:
    id: str
    name: str
    frequency: ProcessFrequency = ProcessFrequency.MONTHLY
    description: str = ""
    tasks: List[TaskTemplate] = field(default_factory=list)


@dataclass(frozen=True)
class SetTitle:
    title: str


@dataclass(frozen=True)
class SetDueDayOffset:
    day: int


TaskEdit = Union[SetTitle, SetDueDayOffset]


def max_due_day(frequency: ProcessFrequency) -> int:
    return 365 if frequency == ProcessFrequency.YEARLY else 31


def apply_task_edit(task: TaskTemplate, edit: TaskEdit, frequency: ProcessFrequency) -> TaskTemplate:
    """Return a copy of `task` with the edit applied."""
    if isinstance(edit, SetTitle):
        return replace(task, title=edit.title)
    if isinstance(edit, SetDueDayOffset):
        limit = max_due_day(frequency)
        if isinstance(edit.day, bool) or not 1 <= edit.day <= limit:
            raise ValueError(f"Due day must be between 1 and {limit}, got {edit.day!r}.")
        return replace(task, due_day_offset=edit.day)
    raise TypeError(f"Unknown task edit: {edit!r}")


def edit_task(model: ProcessModel, index: int, edit: TaskEdit) -> ProcessModel:
    tasks = list(model.tasks)
    tasks[index] = apply_task_edit(tasks[index], edit, model.frequency)
    return replace(model, tasks=tasks)


def add_task(model: ProcessModel, title: str = "", task_id: Optional[str] = None) -> ProcessModel:
    task = TaskTemplate(id=task_id or str(uuid.uuid4()), title=title, due_day_offset=1)
    return replace(model, tasks=[*model.tasks, task])


def remove_task(model: ProcessModel, index: int) -> ProcessModel:
    return replace(model, tasks=[t for i, t in enumerate(model.tasks) if i != index])
