from __future__ import annotations

import pytest

from clientimport.models import ProcessFrequency
from clientimport.process_models import (
    ProcessModel,
    SetDueDayOffset,
    SetTitle,
    TaskTemplate,
    add_task,
    apply_task_edit,
    edit_task,
    remove_task,
)


def _model(frequency: ProcessFrequency = ProcessFrequency.MONTHLY) -> ProcessModel:
    return ProcessModel(
        id="pm-1",
        name="Fechamento mensal",
        frequency=frequency,
        tasks=[TaskTemplate(id="t1", title="Conciliar bancos", due_day_offset=5)],
    )


def test_set_title_returns_new_template() -> None:
    task = TaskTemplate(id="t1", title="old", due_day_offset=3)
    edited = apply_task_edit(task, SetTitle("Enviar guias"), ProcessFrequency.MONTHLY)
    assert edited.title == "Enviar guias"
    assert edited.due_day_offset == 3
    assert task.title == "old"


def test_due_day_limits_depend_on_frequency() -> None:
    task = TaskTemplate(id="t1", title="x")
    assert apply_task_edit(task, SetDueDayOffset(31), ProcessFrequency.MONTHLY).due_day_offset == 31
    assert apply_task_edit(task, SetDueDayOffset(200), ProcessFrequency.YEARLY).due_day_offset == 200
    with pytest.raises(ValueError):
        apply_task_edit(task, SetDueDayOffset(32), ProcessFrequency.MONTHLY)
    with pytest.raises(ValueError):
        apply_task_edit(task, SetDueDayOffset(0), ProcessFrequency.YEARLY)


def test_unknown_edit_type_is_rejected() -> None:
    with pytest.raises(TypeError):
        apply_task_edit(TaskTemplate(id="t1", title="x"), "title=foo", ProcessFrequency.MONTHLY)  # type: ignore[arg-type]


def test_edit_add_remove_tasks() -> None:
    model = _model()
    model = edit_task(model, 0, SetDueDayOffset(10))
    model = add_task(model, "Emitir DAS", task_id="t2")

    assert [(t.id, t.title, t.due_day_offset) for t in model.tasks] == [
        ("t1", "Conciliar bancos", 10),
        ("t2", "Emitir DAS", 1),
    ]

    model = remove_task(model, 0)
    assert [t.id for t in model.tasks] == ["t2"]


def test_edits_leave_original_model_alone() -> None:
    model = _model()
    edit_task(model, 0, SetTitle("changed"))
    assert model.tasks[0].title == "Conciliar bancos"
