"""Single-subtask edits built on SubtaskStore.read and SubtaskStore.write.

Each edit reads fresh, changes the list, and writes it back. Only the write
is locked, so two concurrent edits resolve as last writer wins.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any

from ..models import SubtaskWriteResult
from .store import SubtaskStore


async def toggle_subtask(
    store: SubtaskStore, task_key: str, subtask_id: Any, done: Any
) -> SubtaskWriteResult:
    """Set the done flag of one subtask; unknown ids change nothing."""
    snapshot = await store.read(task_key)
    target = str(subtask_id)
    items = [
        replace(item, done=bool(done)) if item.id == target else item
        for item in snapshot.subtasks
    ]
    return await store.write(task_key, items)


async def add_subtask(
    store: SubtaskStore, task_key: str, title: Any, weight: Any = 1
) -> SubtaskWriteResult:
    """Append a subtask with id "<task_key>-<count + 1>".

    The id is derived from the current count, so adding after a removal can
    reuse an id that existed before.
    """
    snapshot = await store.read(task_key)
    new_id = f"{task_key}-{len(snapshot.subtasks) + 1}"
    items: list[Any] = list(snapshot.subtasks)
    items.append({"id": new_id, "title": str(title or ""), "done": False, "weight": weight})
    result = await store.write(task_key, items)
    result.subtask_id = new_id
    return result


async def remove_subtask(
    store: SubtaskStore, task_key: str, subtask_id: Any
) -> SubtaskWriteResult:
    """Drop the subtask with the given id; unknown ids change nothing."""
    snapshot = await store.read(task_key)
    target = str(subtask_id)
    items = [item for item in snapshot.subtasks if item.id != target]
    return await store.write(task_key, items)
