# src/simple_todo/connectors/console_view.py

from __future__ import annotations

from ..core.state import AppState
from ..tasks.task_models import Task

NEW_MARK = "*"


def mark_new(state: AppState, task_id: str) -> None:
    renders = int(getattr(state.settings, "highlight_renders", 0) or 0)
    if renders > 0:
        state.highlights[task_id] = renders


def _render_task(pos: int, task: Task, *, editing: bool, fresh: bool) -> str:
    box = "[x]" if task.completed else "[ ]"
    line = f"{pos:>3}. {box} {task.text}"
    if task.completed and task.completed_at:
        line += f"  (completed at {task.completed_at})"
    if fresh:
        line += f" {NEW_MARK}"
    if editing:
        line += "  <- editing"
    return line


def render_task_list(state: AppState, *, consume: bool = True) -> str:
    """
    Render the list as numbered lines.

    Highlights for ids no longer in the list are dropped; with consume=True every
    shown highlight loses one render.
    """
    tasks = state.store.tasks
    live = {t.id for t in tasks}
    for stale in [tid for tid in state.highlights if tid not in live]:
        del state.highlights[stale]

    if not tasks:
        return "No tasks yet. Type something to add one."

    editing_id = state.store.editing_id
    done = sum(1 for t in tasks if t.completed)
    lines = [f"Tasks ({done}/{len(tasks)} done):"]
    for pos, task in enumerate(tasks, start=1):
        fresh = state.highlights.get(task.id, 0) > 0
        lines.append(_render_task(pos, task, editing=task.id == editing_id, fresh=fresh))

    if consume:
        for tid in list(state.highlights):
            state.highlights[tid] -= 1
            if state.highlights[tid] <= 0:
                del state.highlights[tid]

    return "\n".join(lines)


def prompt_for(state: AppState) -> str:
    editing_id = state.store.editing_id
    if editing_id is None:
        return "add> "
    return f"edit #{state.position_of(editing_id)}> "
